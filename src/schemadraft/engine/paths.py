"""Dotted path access into session state.

Paths address attributes of pydantic models, keys of dicts and indexes of
lists, e.g. ``relations.1.meta.junction_field``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from schemadraft.exceptions import StatePathError


@lru_cache(maxsize=256)
def split_path(path: str) -> tuple[str | int, ...]:
    """Split a dotted path into attribute names and list indexes."""
    if not path:
        raise StatePathError(path, "path is empty")
    return tuple(int(part) if part.isdigit() else part for part in path.split("."))


def _step(node: Any, key: str | int, path: str) -> Any:
    if isinstance(key, int):
        if isinstance(node, list):
            return node[key] if key < len(node) else None
        raise StatePathError(path, f"index {key} used on {type(node).__name__}")
    if isinstance(node, dict):
        return node.get(key)
    if isinstance(node, BaseModel):
        if key not in type(node).model_fields:
            raise StatePathError(path, f"{type(node).__name__} has no attribute '{key}'")
        return getattr(node, key)
    raise StatePathError(path, f"cannot read '{key}' from {type(node).__name__}")


def get_path(root: Any, path: str) -> Any:
    """Read the value at ``path``.

    Missing list items and unset (None) intermediate values read as None so
    rules can depend on relations a category may not have yet.
    """
    node = root
    for key in split_path(path):
        if node is None:
            return None
        node = _step(node, key, path)
    return node


def set_path(root: Any, path: str, value: Any) -> None:
    """Write ``value`` at ``path``.

    Raises:
        StatePathError: If an intermediate value is missing or the last
            segment doesn't name a writable attribute, key or index
    """
    *parents, last = split_path(path)
    node = root
    for key in parents:
        node = _step(node, key, path)
        if node is None:
            raise StatePathError(path, f"'{key}' is not set")

    if isinstance(last, int):
        if not isinstance(node, list) or last >= len(node):
            raise StatePathError(path, f"index {last} is out of range")
        node[last] = value
    elif isinstance(node, dict):
        node[last] = value
    elif isinstance(node, BaseModel):
        if last not in type(node).model_fields:
            raise StatePathError(path, f"{type(node).__name__} has no attribute '{last}'")
        setattr(node, last, value)
    else:
        raise StatePathError(path, f"cannot write '{last}' on {type(node).__name__}")
