"""Collision-free names for auto-created junction collections."""

from __future__ import annotations

import logging

from schemadraft.catalog.base import SchemaCatalog
from schemadraft.exceptions import NameSpaceExhaustedError

logger = logging.getLogger(__name__)


def generate_junction_name(
    catalog: SchemaCatalog,
    first: str | None,
    second: str | None,
    *,
    max_attempts: int = 1000,
) -> str:
    """Return ``first_second``, suffixed ``_1``, ``_2``, ... until the name is free.

    Args:
        catalog: Catalog checked with ``collection_exists``
        first: First part of the name (usually this collection)
        second: Second part of the name (related collection or field name)
        max_attempts: Suffixes to try before giving up

    Raises:
        NameSpaceExhaustedError: If every candidate up to ``max_attempts`` is taken
    """
    base = f"{first or ''}_{second or ''}"
    if not catalog.collection_exists(base):
        return base

    for index in range(1, max_attempts + 1):
        candidate = f"{base}_{index}"
        if not catalog.collection_exists(candidate):
            logger.debug("Junction name %s is taken, using %s", base, candidate)
            return candidate

    raise NameSpaceExhaustedError(base, max_attempts)
