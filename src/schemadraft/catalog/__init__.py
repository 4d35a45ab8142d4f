"""Schema catalog access for SchemaDraft."""

from schemadraft.catalog.base import SchemaCatalog
from schemadraft.catalog.memory import InMemoryCatalog
from schemadraft.catalog.reflection import catalog_from_url, reflect_catalog

__all__ = [
    "SchemaCatalog",
    "InMemoryCatalog",
    "reflect_catalog",
    "catalog_from_url",
]
