"""Read interface the engine needs from the live schema catalog."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from schemadraft.core.types import FieldRecord, PrimaryKeyField, RelationRecord


@runtime_checkable
class SchemaCatalog(Protocol):
    """Read-only view over existing collections, fields and relations.

    Lookups are expected to be cheap synchronous reads against an in-memory
    snapshot; the engine calls them on every recompute.
    """

    def collection_exists(self, collection: str) -> bool:
        """Return True if the collection exists."""
        ...

    def field_exists(self, collection: str, field: str) -> bool:
        """Return True if the collection exists and has the field."""
        ...

    def get_primary_key_field(self, collection: str) -> PrimaryKeyField | None:
        """Return the primary key of a collection, or None if unknown."""
        ...

    def get_field(self, collection: str, field: str) -> FieldRecord:
        """Return a stored field.

        Raises:
            CollectionNotFoundError: If the collection doesn't exist
            FieldNotFoundError: If the field doesn't exist
        """
        ...

    def get_relations_for_field(self, collection: str, field: str) -> list[RelationRecord]:
        """Return the relation records a field takes part in."""
        ...
