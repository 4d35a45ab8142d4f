"""Field editing sessions.

A session holds the state of one "create or edit a field" flow. It is
created by ``initialize`` when the editor opens and released by
``teardown`` when it closes; nothing is shared between sessions.

Example:
    catalog = InMemoryCatalog().add_collection("articles").add_collection("tags")

    session = initialize(catalog, "articles", NEW_FIELD, "m2m")
    session.set("field.field", "tags")
    session.settle()

    for item in session.generation_info:
        print(item.kind, item.name)

    teardown(session)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from schemadraft.catalog.base import SchemaCatalog
from schemadraft.core.settings import EngineSettings
from schemadraft.core.types import (
    FieldDraft,
    FieldType,
    GenerationInfo,
    LocalType,
    RelationDraft,
    SessionState,
    ValidationIssue,
)
from schemadraft.engine.interfaces import (
    DisplayConfig,
    InterfaceConfig,
    available_displays,
    available_interfaces,
)
from schemadraft.engine.paths import get_path, set_path
from schemadraft.engine.scheduler import Clock, RecomputeScheduler
from schemadraft.exceptions import (
    InvalidCategoryError,
    InvalidFieldTypeError,
    SessionClosedError,
)
from schemadraft.strategies import STRATEGIES, CategoryStrategy

logger = logging.getLogger(__name__)

# Field name that opens the editor for a field that doesn't exist yet
NEW_FIELD = "+"


class FieldSession:
    """State and recompute rules for one field being created or edited."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        collection: str,
        field: str,
        category: str,
        *,
        settings: EngineSettings | None = None,
        interfaces: Iterable[InterfaceConfig] = (),
        displays: Iterable[DisplayConfig] = (),
        clock: Clock | None = None,
    ) -> None:
        """Open a session.

        Args:
            catalog: Read access to existing collections, fields and relations
            collection: Collection the field belongs to
            field: Existing field name, or ``NEW_FIELD`` to create one
            category: Field category (see ``LocalType``)
            settings: Engine settings (defaults if None)
            interfaces: Interfaces available for auto-selection
            displays: Displays available for auto-selection
            clock: Time source for debounced rules

        Raises:
            InvalidCategoryError: If the category is unknown
            CollectionNotFoundError: If an existing field's collection is unknown
            FieldNotFoundError: If an existing field is unknown
        """
        try:
            self.category = LocalType(category)
        except ValueError as e:
            raise InvalidCategoryError(category) from e

        self.catalog = catalog
        self.collection = collection
        self.settings = settings or EngineSettings()
        self.interfaces = list(interfaces)
        self.displays = list(displays)
        self.is_existing = field != NEW_FIELD

        state = SessionState()
        self._state: SessionState | None = state
        self._closed = False
        self.scheduler = RecomputeScheduler(
            state, clock=clock, max_passes=self.settings.max_recompute_passes
        )

        if self.is_existing:
            self._load(field)
        else:
            state.auto_fill_junction = True
            if self.category == LocalType.TRANSLATIONS:
                state.field.meta.interface = "translations"

        self.strategy: CategoryStrategy = STRATEGIES[self.category](self)
        self.strategy.setup()
        if not self.is_existing:
            self._watch_presentation()
        self.scheduler.flush()

        logger.debug("Opened %s session for %s.%s", self.category, collection, field)

    def _load(self, field: str) -> None:
        state = self.state
        record = self.catalog.get_field(self.collection, field)
        state.field = FieldDraft.model_validate(record.model_dump(exclude={"collection"}))
        state.relations = [
            RelationDraft.model_validate(relation.model_dump())
            for relation in self.catalog.get_relations_for_field(self.collection, field)
        ]

    def _watch_presentation(self) -> None:
        # Registered after the strategy so a type reset can't undo the selection
        self.scheduler.watch(
            "auto_select_interface", ["field.type"], self._auto_select_interface, immediate=True
        )
        self.scheduler.watch(
            "auto_select_display", ["field.type"], self._auto_select_display, immediate=True
        )

    def _auto_select_interface(self, field_type: str | None) -> None:
        available = available_interfaces(self.interfaces, field_type, self.category)
        if len(available) == 1:
            self.state.field.meta.interface = available[0].id

    def _auto_select_display(self, field_type: str | None) -> None:
        available = available_displays(self.displays, field_type)
        if len(available) == 1:
            self.state.field.meta.display = available[0].id

    # === State access ===

    @property
    def state(self) -> SessionState:
        """Current session state.

        Raises:
            SessionClosedError: If the session was torn down
        """
        if self._state is None:
            raise SessionClosedError(self.collection, self._field_name)
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._state is None:
            raise SessionClosedError(self.collection, self._field_name)

    @property
    def _field_name(self) -> str:
        return self._state.field.field if self._state is not None else ""

    def get(self, path: str) -> Any:
        """Read a state value by dotted path (e.g. ``relations.0.collection``)."""
        return get_path(self.state, path)

    def set(self, path: str, value: Any) -> None:
        """Write a state value by dotted path and run the rules that depend on it.

        Raises:
            StatePathError: If the path doesn't resolve
            InvalidFieldTypeError: If ``field.type`` is set to an unknown type
        """
        if path == "field.type" and value is not None and value not in FieldType.values():
            raise InvalidFieldTypeError(str(value), FieldType.values())
        set_path(self.state, path, value)
        self.scheduler.flush()

    def set_auto_fill(self, enabled: bool) -> None:
        """Turn automatic junction naming on or off."""
        self.set("auto_fill_junction", enabled)

    def set_reverse_field(self, name: str | None) -> None:
        """Propose (or withdraw, with None) the reverse o2m alias of an m2o field."""
        self._ensure_open()
        self.strategy.set_reverse_field(name)
        self.scheduler.flush()

    # === Scheduling ===

    @property
    def pending(self) -> bool:
        """True while debounced recompute work is waiting."""
        return self.scheduler.pending

    def poll(self, now: float | None = None) -> int:
        """Run debounced rules whose window has passed.

        Returns:
            Number of debounced rules that ran
        """
        self._ensure_open()
        return self.scheduler.poll(now)

    def settle(self) -> int:
        """Run all pending debounced rules now.

        Returns:
            Number of debounced rules that ran
        """
        self._ensure_open()
        return self.scheduler.settle()

    def recompute(self) -> None:
        """Re-run every catalog sync rule now, e.g. after the catalog changed."""
        self._ensure_open()
        for name in self.strategy.sync_rules:
            self.scheduler.run(name)

    # === Derived views ===

    @property
    def generation_info(self) -> list[GenerationInfo]:
        """Every collection and field slated for creation."""
        state = self.state
        info = [
            GenerationInfo(name=collection.collection, kind="collection")
            for collection in state.new_collections
        ]
        info.extend(
            GenerationInfo(name=f"{collection.collection}.{field.field}", kind="field")
            for collection in state.new_collections
            for field in collection.fields
        )
        info.extend(
            GenerationInfo(name=f"{field.collection}.{field.field}", kind="field")
            for field in state.new_fields
        )
        return info

    @property
    def available_interfaces(self) -> list[InterfaceConfig]:
        return available_interfaces(self.interfaces, self.state.field.type, self.category)

    @property
    def available_displays(self) -> list[DisplayConfig]:
        return available_displays(self.displays, self.state.field.type)

    def validate(self) -> list[ValidationIssue]:
        """List everything that keeps the session from being committed."""
        state = self.state
        issues: list[ValidationIssue] = []

        name = state.field.field
        if not name:
            issues.append(ValidationIssue(path="field.field", message="Field name is required."))
        elif not self.is_existing and self.catalog.field_exists(self.collection, name):
            issues.append(
                ValidationIssue(
                    path="field.field",
                    message=f"Field '{name}' already exists on '{self.collection}'.",
                )
            )

        issues.extend(self.strategy.validate())

        if self.pending:
            issues.append(
                ValidationIssue(path="", message="Derived collections and fields are out of date.")
            )
        return issues

    @property
    def is_consistent(self) -> bool:
        """True if the session could be committed as is."""
        return not self.validate()

    def to_dict(self) -> dict[str, Any]:
        """Return the session as a JSON-serializable dict."""
        return {
            "collection": self.collection,
            "category": str(self.category),
            "is_existing": self.is_existing,
            **self.state.model_dump(mode="json", by_alias=True),
            "generation_info": [item.model_dump() for item in self.generation_info],
        }

    # === Lifecycle ===

    def close(self) -> None:
        """Cancel pending work and release the state. Safe to call twice."""
        if self._closed:
            return
        self.scheduler.close()
        logger.debug(
            "Closed %s session for %s.%s", self.category, self.collection, self._field_name
        )
        self._state = None
        self._closed = True

    def __enter__(self) -> FieldSession:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def initialize(
    catalog: SchemaCatalog,
    collection: str,
    field: str,
    category: str,
    **options: Any,
) -> FieldSession:
    """Open a field session (see ``FieldSession`` for the options)."""
    return FieldSession(catalog, collection, field, category, **options)


def teardown(session: FieldSession | None) -> None:
    """Close a session; pending debounced rules never run afterwards."""
    if session is not None:
        session.close()
