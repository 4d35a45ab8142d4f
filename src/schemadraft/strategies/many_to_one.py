"""Fields holding a single foreign key: file attachments and many-to-one."""

from __future__ import annotations

from schemadraft.core.types import (
    CollectionOrigin,
    FieldMeta,
    FieldOrigin,
    FieldType,
    LocalType,
    NewFieldDraft,
    RelationDraft,
    ValidationIssue,
    without_origins,
)
from schemadraft.strategies.base import CategoryStrategy, related_collection


class FileStrategy(CategoryStrategy):
    """A uuid foreign key into the files collection."""

    category = LocalType.FILE

    def setup(self) -> None:
        if not self.is_existing:
            self.state.field.type = FieldType.UUID
            self.state.relations = [
                RelationDraft(
                    collection=self.collection,
                    related_collection=self.settings.files_collection,
                )
            ]

        self.watch("mirror_field_name", ["field.field"], self._mirror_field_name)

    def _mirror_field_name(self, name: str) -> None:
        relation = self.relation(0)
        if relation is not None:
            relation.field = name

    def validate(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        self.require(issues, "relations.0.field", "Relation field is required.")
        return issues


class ManyToOneStrategy(FileStrategy):
    """A foreign key into a user-chosen collection.

    The field type follows the primary key type of the related collection. A
    related collection that doesn't exist yet is proposed with an integer
    auto-increment key.
    """

    category = LocalType.M2O

    def setup(self) -> None:
        if not self.is_existing:
            self.state.field.type = FieldType.INTEGER
            self.state.relations = [RelationDraft(collection=self.collection)]

        self.watch("mirror_field_name", ["field.field"], self._mirror_field_name)
        self.watch(
            "sync_field_type", ["relations.0.related_collection"], self._sync_field_type
        )
        if not self.is_existing:
            self.watch(
                "sync_reverse_field",
                ["relations.0.related_collection", "relations.0.meta.one_field"],
                self._sync_reverse_field,
            )
            self.watch(
                "sync_new_collections",
                ["relations.0.related_collection"],
                self._sync_new_collections,
                debounce=True,
            )

    def set_reverse_field(self, name: str | None) -> None:
        relation = self.relation(0)
        if relation is not None:
            relation.meta.one_field = name or None

    def _sync_field_type(self, related: str | None) -> None:
        self.state.field.type = self.primary_key_type(related, FieldType.INTEGER)

    def _sync_reverse_field(self, related: str | None, one_field: str | None) -> None:
        state = self.state
        state.new_fields = without_origins(state.new_fields, [FieldOrigin.REVERSE])
        if not related or not one_field or self.field_exists(related, one_field):
            return
        state.new_fields.append(
            NewFieldDraft(
                collection=related,
                field=one_field,
                type=None,
                field_schema=None,
                meta=FieldMeta(special=["o2m"]),
                origin=FieldOrigin.REVERSE,
            )
        )

    def _sync_new_collections(self, related: str | None) -> None:
        state = self.state
        # Keep a primary key name the user already changed
        previous = [c for c in state.new_collections if c.origin == CollectionOrigin.RELATED]
        pk_name = previous[0].fields[0].field if previous and previous[0].fields else "id"

        state.new_collections = without_origins(state.new_collections, [CollectionOrigin.RELATED])
        if related and not self.collection_exists(related):
            state.new_collections.append(related_collection(related, pk_name))

    def validate(self) -> list[ValidationIssue]:
        issues = super().validate()
        self.require(
            issues, "relations.0.related_collection", "Related collection is required."
        )
        return issues
