"""Input parsing utilities for CLI commands."""

import json
from pathlib import Path
from typing import Any

# Paths ending in one of these hold names and always take the raw string
NAME_SUFFIXES = ("field", "collection")


def parse_assignment(assignment: str) -> tuple[str, Any]:
    """Parse a state assignment string.

    Format: path=value

    The value is decoded as JSON when possible, so ``true``, ``null``, numbers
    and lists keep their type; anything else is taken as a plain string. Values
    for name paths such as ``field.field`` or ``relations.0.collection`` are
    only decoded for ``null``, so a field can be called ``123``.

    Examples:
        "relations.1.related_collection=tags" → ("relations.1.related_collection", "tags")
        "auto_fill_junction=false" → ("auto_fill_junction", False)
        'relations.1.meta.one_allowed_collections=["pages","posts"]'
            → ("relations.1.meta.one_allowed_collections", ["pages", "posts"])

    Args:
        assignment: Assignment string

    Returns:
        Tuple of (path, value)

    Raises:
        ValueError: If the assignment has no path or no "="
    """
    path, sep, raw = assignment.partition("=")
    path = path.strip()
    if not sep or not path:
        raise ValueError(f"Invalid assignment: '{assignment}'. Expected format: path=value")

    *parents, last = path.split(".")
    if parents and last.endswith(NAME_SUFFIXES):
        return path, None if raw == "null" else raw

    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        # If not valid JSON, use as string
        value = raw

    return path, value


def read_json_file(path: str) -> dict[str, Any]:
    """Read single JSON object from file.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON object

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file contains invalid JSON
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with file_path.open("r") as f:
        return json.load(f)
