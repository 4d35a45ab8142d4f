"""Core components for SchemaDraft."""

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
    without_origins,
)

__all__ = [
    "EngineSettings",
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
    "without_origins",
]
