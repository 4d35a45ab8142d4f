"""CLI context management for catalog loading and shared state."""

import os
from dataclasses import dataclass, field

from schemadraft.catalog import InMemoryCatalog, catalog_from_url
from schemadraft.cli.parsing import read_json_file
from schemadraft.core.settings import EngineSettings


def get_database_url(url: str | None) -> str | None:
    """Resolve database URL from CLI arg or environment variable.

    Priority:
    1. Explicit URL argument
    2. SCHEMADRAFT_DATABASE_URL environment variable
    3. None (no database; an empty or file-based catalog is used)
    """
    if url:
        return url
    return os.getenv("SCHEMADRAFT_DATABASE_URL") or None


@dataclass
class CLIContext:
    """Shared context for CLI commands.

    Manages catalog loading and output preferences.
    """

    catalog_path: str | None
    database_url: str | None
    json_output: bool
    _catalog: InMemoryCatalog | None = field(default=None, init=False, repr=False)

    def get_catalog(self) -> InMemoryCatalog:
        """Load the catalog snapshot (lazy initialization).

        A JSON catalog file wins over a database URL; with neither, the
        catalog is empty.

        Returns:
            Catalog snapshot
        """
        if self._catalog is None:
            if self.catalog_path:
                self._catalog = InMemoryCatalog.from_dict(read_json_file(self.catalog_path))
            elif self.database_url:
                self._catalog = catalog_from_url(self.database_url)
            else:
                self._catalog = InMemoryCatalog()
        return self._catalog

    def get_settings(self) -> EngineSettings:
        """Engine settings from ``SCHEMADRAFT_*`` environment variables."""
        return EngineSettings.from_env()
