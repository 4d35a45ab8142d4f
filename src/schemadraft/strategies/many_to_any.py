"""Many-to-any (polymorphic) fields."""

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
from schemadraft.strategies.base import CategoryStrategy, hidden_field, junction_collection

# Default junction column names on the polymorphic side
ITEM_FIELD = "item"
COLLECTION_FIELD = "collection"


class ManyToAnyStrategy(CategoryStrategy):
    """A junction whose related side may point at rows of several collections.

    ``relations[1]`` has no fixed related collection: the junction stores the
    related primary key as a string next to a discriminator column naming the
    collection it belongs to.
    """

    category = LocalType.M2A

    def setup(self) -> None:
        if not self.is_existing:
            self.make_alias(["m2a"])
            self.state.relations = [
                RelationDraft(
                    related_collection=self.collection,
                    meta=RelationMeta(one_field=self.state.field.field),
                ),
                RelationDraft(
                    related_collection=None,
                    meta=RelationMeta(one_allowed_collections=[], one_collection_field=""),
                ),
            ]

        self.watch("link_current_junction", ["relations.0.field"], self._link_current_junction)
        self.watch("link_related_junction", ["relations.1.field"], self._link_related_junction)
        self.watch("mirror_field_name", ["field.field"], self._mirror_field_name)

        if self.is_existing:
            return

        self.watch(
            "toggle_auto_fill", ["auto_fill_junction"], self._toggle_auto_fill, immediate=True
        )
        self.watch(
            "sync_new_collections",
            [
                "relations.0.collection",
                "relations.0.field",
                "relations.1.field",
                "relations.1.meta.one_collection_field",
                "relations.0.meta.sort_field",
            ],
            self._sync_new_collections,
            debounce=True,
        )

    # === Rules ===

    def _link_current_junction(self, field: str) -> None:
        related = self.relation(1)
        if related is not None:
            related.meta.junction_field = field

    def _link_related_junction(self, field: str) -> None:
        current = self.relation(0)
        if current is not None:
            current.meta.junction_field = field

    def _mirror_field_name(self, name: str) -> None:
        current = self.relation(0)
        if current is None:
            return
        current.meta.one_field = name
        if not self.is_existing and self.state.auto_fill_junction:
            self._fill_junction_collection()

    def _toggle_auto_fill(self, enabled: bool) -> None:
        if not enabled:
            return
        current, related = self.state.relations
        self._fill_junction_collection()
        # The junction's key to this collection is named after its primary key
        current.field = f"{current.related_collection}_{self.primary_key_name(self.collection)}"
        related.field = ITEM_FIELD
        related.meta.one_collection_field = COLLECTION_FIELD

    def _fill_junction_collection(self) -> None:
        current, related = self.state.relations
        name = self.state.field.field
        junction = self.junction_name(current.related_collection, name) if name else ""
        current.collection = junction
        related.collection = junction

    def _sync_new_collections(
        self,
        junction: str,
        many_current: str,
        many_related: str,
        collection_field: str | None,
        sort_field: str | None,
    ) -> None:
        state = self.state
        state.new_collections = without_origins(
            state.new_collections, [CollectionOrigin.JUNCTION, CollectionOrigin.RELATED]
        )
        state.new_fields = without_origins(
            state.new_fields,
            [
                FieldOrigin.MANY_CURRENT,
                FieldOrigin.MANY_RELATED,
                FieldOrigin.COLLECTION_FIELD,
                FieldOrigin.SORT,
            ],
        )
        if not junction:
            return

        if not self.collection_exists(junction):
            state.new_collections.append(junction_collection(junction))

        if many_current and not self.field_exists(junction, many_current):
            current_type = self.primary_key_type(self.collection, FieldType.INTEGER)
            state.new_fields.append(
                hidden_field(junction, many_current, current_type, FieldOrigin.MANY_CURRENT)
            )

        # Keys of differently typed collections only fit in a string column
        if many_related and not self.field_exists(junction, many_related):
            state.new_fields.append(
                hidden_field(junction, many_related, FieldType.STRING, FieldOrigin.MANY_RELATED)
            )

        if collection_field and not self.field_exists(junction, collection_field):
            state.new_fields.append(
                hidden_field(
                    junction, collection_field, FieldType.STRING, FieldOrigin.COLLECTION_FIELD
                )
            )

        if sort_field and not self.field_exists(junction, sort_field):
            state.new_fields.append(
                hidden_field(junction, sort_field, FieldType.INTEGER, FieldOrigin.SORT)
            )

    def validate(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        self.require(issues, "relations.0.collection", "Junction collection is required.")
        self.require(issues, "relations.0.field", "Junction field to this collection is required.")
        self.require(issues, "relations.1.field", "Junction item field is required.")
        self.require(
            issues,
            "relations.1.meta.one_collection_field",
            "Junction collection discriminator field is required.",
        )
        self.require(
            issues,
            "relations.1.meta.one_allowed_collections",
            "Select at least one related collection.",
        )

        current, related = self.relation(0), self.relation(1)
        if current and related and current.collection != related.collection:
            issues.append(
                ValidationIssue(
                    path="relations.1.collection",
                    message="Both relations must use the same junction collection.",
                )
            )
        if current and related and current.field and current.field == related.field:
            issues.append(
                ValidationIssue(
                    path="relations.1.field",
                    message="Both junction fields have the same name.",
                )
            )
        return issues
