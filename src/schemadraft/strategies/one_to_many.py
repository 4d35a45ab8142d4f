"""One-to-many alias fields."""

from __future__ import annotations

from schemadraft.core.types import (
    CollectionOrigin,
    FieldOrigin,
    FieldType,
    LocalType,
    RelationDraft,
    RelationMeta,
    ValidationIssue,
    without_origins,
)
from schemadraft.strategies.base import CategoryStrategy, hidden_field, related_collection


class OneToManyStrategy(CategoryStrategy):
    """An alias listing the rows of another collection that point back here.

    The single relation lives on the related ("many") collection and
    references this collection; its ``one_field`` is this field.
    """

    category = LocalType.O2M

    def setup(self) -> None:
        if not self.is_existing:
            self.make_alias(["o2m"])
            self.state.relations = [
                RelationDraft(
                    related_collection=self.collection,
                    meta=RelationMeta(one_field=self.state.field.field),
                )
            ]

        self.watch("mirror_field_name", ["field.field"], self._mirror_field_name)
        if not self.is_existing:
            self.watch(
                "sync_new_collections",
                [
                    "relations.0.collection",
                    "relations.0.field",
                    "relations.0.meta.sort_field",
                ],
                self._sync_new_collections,
                debounce=True,
            )

    def _mirror_field_name(self, name: str) -> None:
        relation = self.relation(0)
        if relation is not None:
            relation.meta.one_field = name

    def _sync_new_collections(
        self, collection: str, field: str, sort_field: str | None
    ) -> None:
        state = self.state
        state.new_collections = without_origins(state.new_collections, [CollectionOrigin.RELATED])
        state.new_fields = without_origins(
            state.new_fields, [FieldOrigin.MANY_RELATED, FieldOrigin.SORT]
        )
        if not collection:
            return

        if not self.collection_exists(collection):
            state.new_collections.append(related_collection(collection))

        if field and not self.field_exists(collection, field):
            # The foreign key stores primary keys of this collection
            fk_type = self.primary_key_type(self.collection, FieldType.INTEGER)
            state.new_fields.append(
                hidden_field(collection, field, fk_type, FieldOrigin.MANY_RELATED)
            )

        if sort_field and not self.field_exists(collection, sort_field):
            state.new_fields.append(
                hidden_field(collection, sort_field, FieldType.INTEGER, FieldOrigin.SORT)
            )

    def validate(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        self.require(issues, "relations.0.collection", "Related collection is required.")
        self.require(issues, "relations.0.field", "Foreign key field is required.")
        return issues
