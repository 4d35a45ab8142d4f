"""Shared plumbing for category strategies."""

from __future__ import annotations

from collections.abc import Callable, Iterable
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
    NewFieldDraft,
    RelationDraft,
    ValidationIssue,
)
from schemadraft.engine.naming import generate_junction_name
from schemadraft.exceptions import SchemaDraftError

if TYPE_CHECKING:
    from schemadraft.catalog.base import SchemaCatalog
    from schemadraft.core.settings import EngineSettings
    from schemadraft.core.types import SessionState
    from schemadraft.engine.scheduler import Rule
    from schemadraft.engine.session import FieldSession


class CategoryStrategy:
    """Initializes session state for one category and installs its rules.

    Subclasses implement ``setup`` and may extend ``validate``. Rules are
    registered in the order they should run.
    """

    category: LocalType = LocalType.STANDARD

    def __init__(self, session: FieldSession) -> None:
        self.session = session
        self.sync_rules: list[str] = []

    # === Context ===

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def catalog(self) -> SchemaCatalog:
        return self.session.catalog

    @property
    def settings(self) -> EngineSettings:
        return self.session.settings

    @property
    def collection(self) -> str:
        """Collection the field is defined on."""
        return self.session.collection

    @property
    def is_existing(self) -> bool:
        return self.session.is_existing

    # === Lifecycle ===

    def setup(self) -> None:
        """Shape the field draft, seed relations and register rules."""
        raise NotImplementedError

    def validate(self) -> list[ValidationIssue]:
        """Category-specific consistency issues."""
        return []

    def set_reverse_field(self, name: str | None) -> None:
        """Propose a reverse alias field on the related collection."""
        raise SchemaDraftError(
            f"Reverse fields are not supported for '{self.category}' fields. "
            f"Use an m2o field instead.",
            {"category": str(self.category)},
        )

    # === Helpers ===

    def watch(
        self,
        name: str,
        dependencies: Iterable[str],
        callback: Callable[..., None],
        *,
        debounce: bool = False,
        immediate: bool = False,
    ) -> Rule:
        """Register a rule named after this category.

        Debounced rules are the catalog-touching sync rules; ``recompute``
        re-runs them on demand.
        """
        rule_name = f"{self.category}.{name}"
        if debounce:
            self.sync_rules.append(rule_name)
        return self.session.scheduler.watch(
            rule_name,
            dependencies,
            callback,
            debounce=self.settings.debounce_window if debounce else None,
            immediate=immediate,
        )

    def relation(self, index: int) -> RelationDraft | None:
        relations = self.state.relations
        return relations[index] if index < len(relations) else None

    def make_alias(self, special: list[str]) -> None:
        """Turn the field draft into a storage-less alias field."""
        draft = self.state.field
        draft.field_schema = None
        draft.type = None
        draft.meta.special = special

    def collection_exists(self, collection: str | None) -> bool:
        return bool(collection) and self.catalog.collection_exists(collection)

    def field_exists(self, collection: str | None, field: str | None) -> bool:
        return bool(collection and field) and self.catalog.field_exists(collection, field)

    def primary_key_type(self, collection: str | None, default: str) -> str:
        """Type of the collection's primary key, ``default`` if it is unknown."""
        if not self.collection_exists(collection):
            return default
        pk = self.catalog.get_primary_key_field(collection)
        return pk.type if pk else default

    def primary_key_name(self, collection: str | None, default: str = "id") -> str:
        if not self.collection_exists(collection):
            return default
        pk = self.catalog.get_primary_key_field(collection)
        return pk.field if pk else default

    def junction_name(self, first: str | None, second: str | None) -> str:
        return generate_junction_name(
            self.catalog, first, second, max_attempts=self.settings.max_junction_attempts
        )

    def require(self, issues: list[ValidationIssue], path: str, message: str) -> None:
        """Add an issue if the value at ``path`` is empty."""
        if not self.session.get(path):
            issues.append(ValidationIssue(path=path, message=message))


# === Proposal builders ===


def auto_increment_key(name: str = "id") -> FieldDraft:
    """Hidden integer auto-increment primary key."""
    return FieldDraft(
        field=name,
        type=FieldType.INTEGER,
        field_schema=FieldSchema(has_auto_increment=True, is_primary_key=True),
        meta=FieldMeta(hidden=True),
    )


def junction_collection(name: str) -> NewCollectionDraft:
    """Hidden junction collection with an auto-increment key."""
    return NewCollectionDraft(
        collection=name,
        origin=CollectionOrigin.JUNCTION,
        meta=CollectionMeta(hidden=True, icon="import_export"),
        fields=[auto_increment_key()],
    )


def related_collection(name: str, pk_name: str = "id") -> NewCollectionDraft:
    """Plain related collection with an auto-increment key."""
    return NewCollectionDraft(
        collection=name,
        origin=CollectionOrigin.RELATED,
        fields=[auto_increment_key(pk_name)],
    )


def hidden_field(
    collection: str, field: str, field_type: str, origin: FieldOrigin
) -> NewFieldDraft:
    """Hidden storage field proposed on ``collection``."""
    return NewFieldDraft(
        collection=collection,
        field=field,
        type=field_type,
        field_schema=FieldSchema(),
        meta=FieldMeta(hidden=True),
        origin=origin,
    )
