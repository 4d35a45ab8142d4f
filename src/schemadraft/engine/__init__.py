"""Derivation engine building blocks.

Sessions live in ``schemadraft.engine.session``; it is not imported here
because the strategies it loads depend on this package.
"""

from schemadraft.engine.interfaces import (
    DisplayConfig,
    InterfaceConfig,
    available_displays,
    available_interfaces,
)
from schemadraft.engine.naming import generate_junction_name
from schemadraft.engine.paths import get_path, set_path
from schemadraft.engine.scheduler import RecomputeScheduler, Rule

__all__ = [
    "DisplayConfig",
    "InterfaceConfig",
    "available_displays",
    "available_interfaces",
    "generate_junction_name",
    "get_path",
    "set_path",
    "RecomputeScheduler",
    "Rule",
]
