"""Which interfaces and displays can render a field draft."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

# Type used for matching fields that carry no storage
ALIAS_TYPE = "alias"


class InterfaceConfig(BaseModel):
    """An input widget that can edit fields of the listed types."""

    id: str
    name: str
    types: list[str] = Field(default_factory=list)
    groups: list[str] | None = None
    system: bool = False


class DisplayConfig(BaseModel):
    """A read-only renderer for fields of the listed types."""

    id: str
    name: str
    types: list[str] = Field(default_factory=list)
    groups: list[str] | None = None


def available_interfaces(
    configs: Iterable[InterfaceConfig], field_type: str | None, local_type: str
) -> list[InterfaceConfig]:
    """Non-system interfaces matching the field type and category, sorted by name."""
    matching = [
        config
        for config in configs
        if not config.system
        and (field_type or ALIAS_TYPE) in config.types
        and local_type in (config.groups or ["standard"])
    ]
    return sorted(matching, key=lambda config: config.name)


def available_displays(
    configs: Iterable[DisplayConfig], field_type: str | None
) -> list[DisplayConfig]:
    """Displays matching the field type, sorted by name.

    Displays are not restricted by category.
    """
    matching = [config for config in configs if (field_type or ALIAS_TYPE) in config.types]
    return sorted(matching, key=lambda config: config.name)
