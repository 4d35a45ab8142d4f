"""In-memory schema catalog snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from schemadraft.core.types import (
    FieldRecord,
    FieldSchema,
    FieldType,
    PrimaryKeyField,
    RelationRecord,
)
from schemadraft.exceptions import CatalogError, CollectionNotFoundError, FieldNotFoundError


class InMemoryCatalog:
    """Catalog backed by plain dictionaries.

    Collections keep their fields in insertion order. The first field flagged
    ``is_primary_key`` is the collection's primary key.

    Example:
        catalog = InMemoryCatalog()
        catalog.add_collection("articles")
        catalog.add_collection("authors", primary_key_type="uuid")
        catalog.add_field("articles", {"field": "author", "type": "uuid"})
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, FieldRecord]] = {}
        self._relations: list[RelationRecord] = []

    # === Builders ===

    def add_collection(
        self,
        collection: str,
        fields: Iterable[FieldRecord | Mapping[str, Any]] | None = None,
        primary_key: str | None = "id",
        primary_key_type: str = FieldType.INTEGER,
    ) -> InMemoryCatalog:
        """Register a collection.

        Args:
            collection: Collection name
            fields: Field records or dicts (``collection`` is filled in)
            primary_key: Name of a primary key to add when ``fields`` has none
            primary_key_type: Type of the added primary key

        Returns:
            The catalog, for chaining
        """
        self._collections.setdefault(collection, {})
        for field in fields or []:
            self.add_field(collection, field)

        if primary_key and self.get_primary_key_field(collection) is None:
            pk = FieldRecord(
                collection=collection,
                field=primary_key,
                type=primary_key_type,
                field_schema=FieldSchema(
                    is_primary_key=True,
                    is_nullable=False,
                    has_auto_increment=primary_key_type == FieldType.INTEGER,
                ),
            )
            # Primary key goes first
            self._collections[collection] = {primary_key: pk, **self._collections[collection]}
        return self

    def add_field(
        self, collection: str, field: FieldRecord | Mapping[str, Any]
    ) -> InMemoryCatalog:
        """Register a field on an existing collection."""
        if collection not in self._collections:
            raise CollectionNotFoundError(collection, self.list_collections())

        if isinstance(field, FieldRecord):
            record = field.model_copy(update={"collection": collection}, deep=True)
        else:
            try:
                record = FieldRecord.model_validate({**field, "collection": collection})
            except PydanticValidationError as e:
                raise CatalogError(
                    f"Invalid field definition on '{collection}': {e}",
                    {"collection": collection, "field": dict(field)},
                ) from e

        self._collections[collection][record.field] = record
        return self

    def add_relation(self, relation: RelationRecord | Mapping[str, Any]) -> InMemoryCatalog:
        """Register a relation record."""
        if isinstance(relation, RelationRecord):
            record = relation.model_copy(deep=True)
        else:
            try:
                record = RelationRecord.model_validate(relation)
            except PydanticValidationError as e:
                raise CatalogError(
                    f"Invalid relation definition: {e}", {"relation": dict(relation)}
                ) from e
        self._relations.append(record)
        return self

    # === SchemaCatalog ===

    def collection_exists(self, collection: str) -> bool:
        return bool(collection) and collection in self._collections

    def field_exists(self, collection: str, field: str) -> bool:
        return self.collection_exists(collection) and field in self._collections[collection]

    def get_primary_key_field(self, collection: str) -> PrimaryKeyField | None:
        for record in self._collections.get(collection, {}).values():
            if record.field_schema is not None and record.field_schema.is_primary_key:
                return PrimaryKeyField(field=record.field, type=record.type or FieldType.STRING)
        return None

    def get_field(self, collection: str, field: str) -> FieldRecord:
        if collection not in self._collections:
            raise CollectionNotFoundError(collection, self.list_collections())
        record = self._collections[collection].get(field)
        if record is None:
            raise FieldNotFoundError(field, collection, self.list_fields(collection))
        return record.model_copy(deep=True)

    def get_relations_for_field(self, collection: str, field: str) -> list[RelationRecord]:
        relations = [
            relation
            for relation in self._relations
            if (relation.collection == collection and relation.field == field)
            or (relation.related_collection == collection and relation.meta.one_field == field)
        ]

        # Junction relations come in pairs; pull in the other half
        if relations and relations[0].meta.junction_field:
            primary = relations[0]
            for relation in self._relations:
                if (
                    relation.collection == primary.collection
                    and relation.field == primary.meta.junction_field
                    and relation not in relations
                ):
                    relations.append(relation)
                    break

        return [relation.model_copy(deep=True) for relation in relations]

    # === Introspection ===

    def list_collections(self) -> list[str]:
        """List all collection names."""
        return list(self._collections)

    def list_fields(self, collection: str) -> list[str]:
        """List field names of a collection (empty if it doesn't exist)."""
        return list(self._collections.get(collection, {}))

    def list_relations(self) -> list[RelationRecord]:
        """List all relation records."""
        return [relation.model_copy(deep=True) for relation in self._relations]

    # === Serialization ===

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InMemoryCatalog:
        """Build a catalog from its JSON form.

        Format::

            {
                "collections": {"articles": {"fields": [{"field": "id", ...}]}},
                "relations": [{"collection": ..., "field": ..., ...}]
            }

        Collections without a primary key get an integer ``id`` one.
        """
        collections = data.get("collections", {})
        if not isinstance(collections, Mapping):
            raise CatalogError(
                "Catalog 'collections' must be an object keyed by collection name.",
                {"type": type(collections).__name__},
            )

        catalog = cls()
        for name, definition in collections.items():
            definition = definition or {}
            catalog.add_collection(name, definition.get("fields", []))
        for relation in data.get("relations", []):
            catalog.add_relation(relation)
        return catalog

    def to_dict(self) -> dict[str, Any]:
        """Return the catalog in the format accepted by ``from_dict``."""
        return {
            "collections": {
                name: {
                    "fields": [
                        record.model_dump(mode="json", by_alias=True, exclude={"collection"})
                        for record in fields.values()
                    ]
                }
                for name, fields in self._collections.items()
            },
            "relations": [
                relation.model_dump(mode="json", by_alias=True) for relation in self._relations
            ],
        }
