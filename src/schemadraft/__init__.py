"""SchemaDraft - derive the schema objects a relational field needs.

Given a collection, a field category (m2o, o2m, m2m, m2a, translations,
file, files, presentation or a plain scalar) and the user's inputs, a field
session keeps the field draft, its relation drafts and every collection,
field and seed row that must be created in sync with a schema catalog.

Example:
    from schemadraft import NEW_FIELD, InMemoryCatalog, initialize, teardown

    catalog = InMemoryCatalog().add_collection("articles")

    session = initialize(catalog, "articles", NEW_FIELD, "translations")
    session.settle()

    session.state.new_collections   # articles_translations, languages
    session.state.new_rows          # starter languages
    session.validate()              # [] when ready to commit

    teardown(session)
"""

from schemadraft.catalog import InMemoryCatalog, SchemaCatalog, catalog_from_url, reflect_catalog
from schemadraft.core.settings import EngineSettings
from schemadraft.core.types import (
    CollectionMeta,
    CollectionOrigin,
    FieldDraft,
    FieldMeta,
    FieldOrigin,
    FieldRecord,
    FieldSchema,
    FieldType,
    GenerationInfo,
    LocalType,
    NewCollectionDraft,
    NewFieldDraft,
    PrimaryKeyField,
    RelationDraft,
    RelationMeta,
    RelationRecord,
    SessionState,
    ValidationIssue,
)
from schemadraft.engine.interfaces import DisplayConfig, InterfaceConfig
from schemadraft.engine.naming import generate_junction_name
from schemadraft.engine.session import NEW_FIELD, FieldSession, initialize, teardown
from schemadraft.exceptions import (
    CatalogError,
    CollectionNotFoundError,
    FieldNotFoundError,
    InvalidCategoryError,
    InvalidFieldTypeError,
    NameSpaceExhaustedError,
    RecomputeLoopError,
    SchemaDraftError,
    SessionClosedError,
    StatePathError,
)

__version__ = "0.1.0"

__all__ = [
    # Sessions
    "NEW_FIELD",
    "FieldSession",
    "initialize",
    "teardown",
    "generate_junction_name",
    # Catalogs
    "SchemaCatalog",
    "InMemoryCatalog",
    "reflect_catalog",
    "catalog_from_url",
    # Settings
    "EngineSettings",
    "InterfaceConfig",
    "DisplayConfig",
    # Types
    "FieldType",
    "LocalType",
    "CollectionOrigin",
    "FieldOrigin",
    "FieldSchema",
    "FieldMeta",
    "FieldDraft",
    "FieldRecord",
    "RelationMeta",
    "RelationDraft",
    "RelationRecord",
    "CollectionMeta",
    "NewCollectionDraft",
    "NewFieldDraft",
    "PrimaryKeyField",
    "GenerationInfo",
    "ValidationIssue",
    "SessionState",
    # Exceptions
    "SchemaDraftError",
    "CatalogError",
    "CollectionNotFoundError",
    "FieldNotFoundError",
    "InvalidCategoryError",
    "InvalidFieldTypeError",
    "NameSpaceExhaustedError",
    "RecomputeLoopError",
    "StatePathError",
    "SessionClosedError",
]
