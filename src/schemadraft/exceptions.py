"""Custom exceptions for SchemaDraft.

All exceptions follow the same principles:
- Actionable error messages that tell what went wrong AND how to fix it
- Include context about available options when relevant
"""

from __future__ import annotations

from typing import Any


class SchemaDraftError(Exception):
    """Base exception for all SchemaDraft errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class CatalogError(SchemaDraftError):
    """Schema catalog snapshot is malformed or could not be loaded."""

    pass


class CollectionNotFoundError(SchemaDraftError):
    """Collection does not exist in the catalog."""

    def __init__(self, collection: str, available_collections: list[str] | None = None) -> None:
        available = available_collections or []
        if available:
            message = (
                f"Collection '{collection}' not found. "
                f"Available collections: {', '.join(available)}"
            )
        else:
            message = f"Collection '{collection}' not found. The catalog has no collections."

        super().__init__(message, {"collection": collection, "available_collections": available})
        self.collection = collection
        self.available_collections = available


class FieldNotFoundError(SchemaDraftError):
    """Field does not exist on a collection."""

    def __init__(
        self, field_name: str, collection: str, available_fields: list[str] | None = None
    ) -> None:
        available = available_fields or []
        if available:
            message = (
                f"Field '{field_name}' not found on '{collection}'. "
                f"Available fields: {', '.join(available)}"
            )
        else:
            message = f"Field '{field_name}' not found on '{collection}'. No fields defined."

        super().__init__(
            message,
            {
                "field_name": field_name,
                "collection": collection,
                "available_fields": available,
            },
        )
        self.field_name = field_name
        self.collection = collection
        self.available_fields = available


class InvalidCategoryError(SchemaDraftError):
    """Unknown field category (local type)."""

    VALID_CATEGORIES = [
        "standard",
        "file",
        "files",
        "m2o",
        "o2m",
        "m2m",
        "m2a",
        "translations",
        "presentation",
    ]

    def __init__(self, category: str) -> None:
        message = (
            f"Invalid field category '{category}'. "
            f"Valid categories: {', '.join(self.VALID_CATEGORIES)}"
        )
        super().__init__(
            message, {"category": category, "valid_categories": self.VALID_CATEGORIES}
        )
        self.category = category


class InvalidFieldTypeError(SchemaDraftError):
    """Invalid scalar field type specified."""

    def __init__(self, field_type: str, valid_types: list[str]) -> None:
        message = f"Invalid field type '{field_type}'. Valid types: {', '.join(valid_types)}"
        super().__init__(message, {"field_type": field_type, "valid_types": valid_types})
        self.field_type = field_type


class NameSpaceExhaustedError(SchemaDraftError):
    """No free collection name was found within the allowed number of suffixes."""

    def __init__(self, base_name: str, attempts: int) -> None:
        message = (
            f"Could not find a free collection name for '{base_name}' "
            f"after {attempts} attempts. Pick a junction collection name manually."
        )
        super().__init__(message, {"base_name": base_name, "attempts": attempts})
        self.base_name = base_name
        self.attempts = attempts


class RecomputeLoopError(SchemaDraftError):
    """Recompute rules kept changing each other's inputs without settling."""

    def __init__(self, passes: int, rules: list[str]) -> None:
        message = (
            f"Recompute did not settle after {passes} passes. "
            f"Rules still firing: {', '.join(rules)}"
        )
        super().__init__(message, {"passes": passes, "rules": rules})
        self.passes = passes
        self.rules = rules


class StatePathError(SchemaDraftError):
    """A session state path does not resolve."""

    def __init__(self, path: str, reason: str) -> None:
        message = f"Invalid state path '{path}': {reason}"
        super().__init__(message, {"path": path, "reason": reason})
        self.path = path
        self.reason = reason


class SessionClosedError(SchemaDraftError):
    """The field session was torn down and can no longer be used."""

    def __init__(self, collection: str, field_name: str) -> None:
        message = (
            f"Session for '{collection}.{field_name}' is closed. "
            f"Call initialize() to start a new one."
        )
        super().__init__(message, {"collection": collection, "field_name": field_name})
        self.collection = collection
        self.field_name = field_name
