"""Plain scalar fields and presentation-only fields."""

from __future__ import annotations

from schemadraft.core.types import FieldSchema, FieldType, LocalType
from schemadraft.strategies.base import CategoryStrategy

# Types whose values need special handling on read/write
SPECIAL_TYPES = {t.value for t in (FieldType.UUID, FieldType.HASH, FieldType.JSON, FieldType.CSV)}


class StandardStrategy(CategoryStrategy):
    """A scalar field with its own storage and no relations."""

    category = LocalType.STANDARD

    def setup(self) -> None:
        self.watch("reset_on_type_change", ["field.type"], self._reset_for_type)

    def _reset_for_type(self, field_type: str | None) -> None:
        draft = self.state.field
        meta = draft.meta
        meta.interface = None
        meta.options = None
        meta.display = None
        meta.display_options = None
        meta.special = None

        if draft.field_schema is None:
            draft.field_schema = FieldSchema()
        schema = draft.field_schema
        schema.default_value = None
        schema.max_length = None
        schema.is_nullable = True

        if field_type in SPECIAL_TYPES:
            meta.special = [str(field_type)]
        elif field_type == FieldType.BOOLEAN:
            meta.special = ["boolean"]
            schema.default_value = False
            schema.is_nullable = False


class PresentationStrategy(CategoryStrategy):
    """A decorative field that stores nothing."""

    category = LocalType.PRESENTATION

    def setup(self) -> None:
        if not self.is_existing:
            self.make_alias(["alias", "no-data"])
