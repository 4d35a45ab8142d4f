"""Junction-backed fields: many-to-many, files and translations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from schemadraft.core.types import (
    CollectionMeta,
    CollectionOrigin,
    FieldDraft,
    FieldMeta,
    FieldOrigin,
    FieldSchema,
    FieldType,
    LocalType,
    NewCollectionDraft,
    RelationDraft,
    RelationMeta,
    ValidationIssue,
    without_origins,
)
from schemadraft.strategies.base import (
    CategoryStrategy,
    hidden_field,
    junction_collection,
    related_collection,
)

if TYPE_CHECKING:
    from schemadraft.engine.scheduler import Rule
    from schemadraft.engine.session import FieldSession

logger = logging.getLogger(__name__)

# Seed rows for an auto-created languages collection
DEFAULT_LANGUAGES = [
    {"code": "en-US", "name": "English"},
    {"code": "de-DE", "name": "German"},
    {"code": "fr-FR", "name": "French"},
    {"code": "ru-RU", "name": "Russian"},
    {"code": "es-ES", "name": "Spanish"},
    {"code": "it-IT", "name": "Italian"},
    {"code": "pt-BR", "name": "Portuguese"},
]

LANGUAGE_KEY = "code"


def language_collection(name: str) -> NewCollectionDraft:
    """Languages collection keyed by locale code."""
    return NewCollectionDraft(
        collection=name,
        origin=CollectionOrigin.RELATED,
        meta=CollectionMeta(icon="translate"),
        fields=[
            FieldDraft(
                field=LANGUAGE_KEY,
                type=FieldType.STRING,
                field_schema=FieldSchema(is_primary_key=True, is_nullable=False),
                meta=FieldMeta(interface="input", options={"iconLeft": "vpn_key"}, width="half"),
            ),
            FieldDraft(
                field="name",
                type=FieldType.STRING,
                field_schema=FieldSchema(),
                meta=FieldMeta(interface="input", options={"iconLeft": "translate"}, width="half"),
            ),
        ],
    )


class ManyToManyStrategy(CategoryStrategy):
    """Two relations meeting in a junction collection.

    ``relations[0]`` is the junction's foreign key to this collection and
    ``relations[1]`` the junction's foreign key to the related collection.
    Each one names the other's field as its ``junction_field``.
    """

    category = LocalType.M2M

    def __init__(self, session: FieldSession) -> None:
        super().__init__(session)
        self.category = session.category
        self._autofill_rule: Rule | None = None

    @property
    def is_translations(self) -> bool:
        return self.category == LocalType.TRANSLATIONS

    @property
    def is_files(self) -> bool:
        return self.category == LocalType.FILES

    def setup(self) -> None:
        if not self.is_existing:
            self.make_alias([str(self.category)])
            self.state.relations = [
                RelationDraft(
                    related_collection=self.collection,
                    meta=RelationMeta(one_field=self.state.field.field),
                ),
                RelationDraft(),
            ]

        self.watch("link_current_junction", ["relations.0.field"], self._link_current_junction)
        self.watch("link_related_junction", ["relations.1.field"], self._link_related_junction)
        self.watch("mirror_field_name", ["field.field"], self._mirror_field_name)

        if self.is_existing:
            return

        if self.is_translations:
            self.watch(
                "mirror_junction_collection",
                ["relations.0.collection"],
                self._mirror_junction_collection,
                immediate=True,
            )
        else:
            self.watch(
                "toggle_auto_fill", ["auto_fill_junction"], self._toggle_auto_fill, immediate=True
            )

        self.watch(
            "sync_new_collections",
            [
                "relations.0.collection",
                "relations.0.field",
                "relations.1.field",
                "relations.1.related_collection",
                "relations.0.meta.sort_field",
            ],
            self._sync_new_collections,
            debounce=True,
        )

        # Defaults are written after the rules exist so the rules see them change
        if self.is_files:
            self.state.relations[1].related_collection = self.settings.files_collection
        elif self.is_translations:
            self._apply_translation_defaults()

    def _apply_translation_defaults(self) -> None:
        current, related = self.state.relations
        languages = self.settings.languages_collection

        current.collection = self.junction_name(self.collection, "translations")
        current.field = f"{self.collection}_{self.primary_key_name(self.collection)}"
        related.related_collection = languages
        related.field = f"{languages}_{self.primary_key_name(languages, LANGUAGE_KEY)}"

        self.state.field.field = "translations"
        current.meta.one_field = "translations"

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

        # A field named after an existing collection is taken to point at it
        if (
            not self.is_existing
            and not self.is_translations
            and self.state.auto_fill_junction
            and self.collection_exists(name)
        ):
            self.state.relations[1].related_collection = name
            self._fill_junction()

    def _mirror_junction_collection(self, collection: str) -> None:
        self.state.relations[1].collection = collection

    def _toggle_auto_fill(self, enabled: bool) -> None:
        if enabled:
            if self._autofill_rule is None:
                self._autofill_rule = self.watch(
                    "auto_fill_junction",
                    ["relations.1.related_collection"],
                    self._on_related_collection,
                )
            self._fill_junction()
        elif self._autofill_rule is not None:
            self.session.scheduler.unwatch(self._autofill_rule)
            self._autofill_rule = None

    def _on_related_collection(self, related: str | None) -> None:
        self._fill_junction()

    def _fill_junction(self) -> None:
        """Name the junction collection and its foreign keys after both collections."""
        current, related = self.state.relations
        if not related.related_collection:
            return

        name = self.junction_name(current.related_collection, related.related_collection)
        current.collection = name
        related.collection = name
        current.field = f"{current.related_collection}_id"
        related.field = f"{related.related_collection}_id"
        if current.field == related.field:
            related.field = f"{related.related_collection}_related_id"
        logger.debug("Auto-filled junction %s (%s, %s)", name, current.field, related.field)

    def _related_key_fallback(self) -> str:
        """Key type assumed for a related collection missing from the catalog."""
        if self.is_translations:
            return FieldType.STRING
        if self.is_files:
            return FieldType.UUID
        return FieldType.INTEGER

    def _sync_new_collections(
        self,
        junction: str,
        many_current: str,
        many_related: str,
        related: str | None,
        sort_field: str | None,
    ) -> None:
        state = self.state
        state.new_collections = without_origins(
            state.new_collections, [CollectionOrigin.JUNCTION, CollectionOrigin.RELATED]
        )
        state.new_fields = without_origins(
            state.new_fields,
            [FieldOrigin.MANY_CURRENT, FieldOrigin.MANY_RELATED, FieldOrigin.SORT],
        )

        if junction:
            if not self.collection_exists(junction):
                state.new_collections.append(junction_collection(junction))

            if many_current and not self.field_exists(junction, many_current):
                current_type = self.primary_key_type(self.collection, FieldType.INTEGER)
                state.new_fields.append(
                    hidden_field(junction, many_current, current_type, FieldOrigin.MANY_CURRENT)
                )

            if many_related and not self.field_exists(junction, many_related):
                related_type = self.primary_key_type(related, self._related_key_fallback())
                state.new_fields.append(
                    hidden_field(junction, many_related, related_type, FieldOrigin.MANY_RELATED)
                )

        # The files collection is a system collection and never proposed
        if related and not self.is_files and not self.collection_exists(related):
            if self.is_translations:
                state.new_collections.append(language_collection(related))
            else:
                state.new_collections.append(related_collection(related))

        if self.is_translations:
            if related and not self.collection_exists(related):
                state.new_rows = {related: [dict(row) for row in DEFAULT_LANGUAGES]}
            else:
                state.new_rows = {}

        if junction and sort_field and not self.field_exists(junction, sort_field):
            state.new_fields.append(
                hidden_field(junction, sort_field, FieldType.INTEGER, FieldOrigin.SORT)
            )

    def validate(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        self.require(issues, "relations.0.collection", "Junction collection is required.")
        self.require(issues, "relations.0.field", "Junction field to this collection is required.")
        self.require(issues, "relations.1.collection", "Junction collection is required.")
        self.require(issues, "relations.1.field", "Junction field to the related side is required.")
        self.require(issues, "relations.1.related_collection", "Related collection is required.")

        current, related = self.relation(0), self.relation(1)
        if current and related and related.collection and current.collection != related.collection:
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
