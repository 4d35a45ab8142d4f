"""Core types for SchemaDraft.

All types are designed to be JSON-serializable so a presentation or apply
layer can consume the session state directly.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class FieldType(StrEnum):
    """Scalar field types a field draft can carry."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BIG_INTEGER = "bigInteger"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    UUID = "uuid"
    HASH = "hash"
    JSON = "json"
    CSV = "csv"
    TIMESTAMP = "timestamp"
    DATETIME = "dateTime"
    DATE = "date"
    TIME = "time"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid field type values."""
        return [t.value for t in cls]


class LocalType(StrEnum):
    """User-facing field category."""

    STANDARD = "standard"
    FILE = "file"
    FILES = "files"
    M2O = "m2o"
    O2M = "o2m"
    M2M = "m2m"
    M2A = "m2a"
    TRANSLATIONS = "translations"
    PRESENTATION = "presentation"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid category values."""
        return [t.value for t in cls]


class CollectionOrigin(StrEnum):
    """Why a collection was proposed (replaces the transient ``$type`` marker)."""

    JUNCTION = "junction"
    RELATED = "related"


class FieldOrigin(StrEnum):
    """Why a field was proposed."""

    MANY_CURRENT = "manyCurrent"  # junction FK pointing at this collection
    MANY_RELATED = "manyRelated"  # FK pointing at the related collection
    SORT = "sort"
    COLLECTION_FIELD = "collectionField"  # m2a discriminator
    REVERSE = "reverse"  # o2m alias created alongside an m2o


class FieldSchema(BaseModel):
    """Storage-level properties of a field."""

    default_value: Any = None
    max_length: int | None = None
    is_nullable: bool = True
    is_unique: bool = False
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    is_primary_key: bool = False
    has_auto_increment: bool = False


class FieldMeta(BaseModel):
    """Presentation-level properties of a field."""

    hidden: bool = False
    interface: str | None = None
    options: dict[str, Any] | None = None
    display: str | None = None
    display_options: dict[str, Any] | None = None
    readonly: bool = False
    special: list[str] | None = None
    note: str | None = None
    width: str | None = None


class FieldDraft(BaseModel):
    """The field being created or edited.

    Either ``type`` and ``schema`` are present, or the field is an alias
    (both ``None``) whose ``meta.special`` says what it is.
    """

    model_config = ConfigDict(populate_by_name=True)

    field: str = ""
    type: str | None = FieldType.STRING
    field_schema: FieldSchema | None = Field(default_factory=FieldSchema, alias="schema")
    meta: FieldMeta = Field(default_factory=FieldMeta)

    @property
    def is_alias(self) -> bool:
        """True when the field carries no storage."""
        return self.field_schema is None and self.type is None


class FieldRecord(FieldDraft):
    """A field as stored in the catalog."""

    collection: str


class RelationMeta(BaseModel):
    """Relation properties that live outside the foreign key column."""

    one_field: str | None = None
    sort_field: str | None = None
    junction_field: str | None = None
    one_allowed_collections: list[str] | None = None
    one_collection_field: str | None = None


class RelationDraft(BaseModel):
    """One endpoint of a relationship: ``collection.field`` references ``related_collection``."""

    collection: str = ""
    field: str = ""
    related_collection: str | None = ""
    meta: RelationMeta = Field(default_factory=RelationMeta)


class RelationRecord(RelationDraft):
    """A relation as stored in the catalog."""

    pass


class CollectionMeta(BaseModel):
    """Presentation-level properties of a proposed collection."""

    hidden: bool = False
    icon: str | None = None


class NewCollectionDraft(BaseModel):
    """A collection proposed for creation."""

    model_config = ConfigDict(populate_by_name=True)

    collection: str
    origin: CollectionOrigin = Field(alias="$type")
    meta: CollectionMeta | None = None
    fields: list[FieldDraft] = Field(default_factory=list)


class NewFieldDraft(FieldDraft):
    """A field proposed for creation on a (possibly also new) collection."""

    collection: str
    origin: FieldOrigin = Field(alias="$type")


class PrimaryKeyField(BaseModel):
    """Name and type of a collection's primary key."""

    field: str
    type: str


class GenerationInfo(BaseModel):
    """One object slated for creation, for confirmation display."""

    name: str
    kind: Literal["collection", "field"]


class ValidationIssue(BaseModel):
    """Something that keeps the derived state from being committable."""

    path: str
    message: str


SeedRows = dict[str, list[dict[str, Any]]]


class SessionState(BaseModel):
    """Mutable snapshot of one field editing session."""

    field: FieldDraft = Field(default_factory=FieldDraft)
    relations: list[RelationDraft] = Field(default_factory=list)
    new_collections: list[NewCollectionDraft] = Field(default_factory=list)
    new_fields: list[NewFieldDraft] = Field(default_factory=list)
    new_rows: SeedRows = Field(default_factory=dict)
    auto_fill_junction: bool = False


OriginTagged = TypeVar("OriginTagged", NewCollectionDraft, NewFieldDraft)


def without_origins(
    entries: Iterable[OriginTagged],
    origins: Iterable[CollectionOrigin] | Iterable[FieldOrigin],
) -> list[OriginTagged]:
    """Return the entries whose origin is not one of ``origins``."""
    dropped = set(origins)
    return [entry for entry in entries if entry.origin not in dropped]
