"""Engine configuration."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field


class EngineSettings(BaseModel):
    """Tunables for a field session."""

    # Coalescing window for the catalog-touching sync rules
    debounce_window_ms: float = Field(default=50.0, ge=0)
    max_recompute_passes: int = Field(default=32, ge=1)
    max_junction_attempts: int = Field(default=1000, ge=1)
    files_collection: str = "directus_files"
    languages_collection: str = "languages"

    @property
    def debounce_window(self) -> float:
        """Debounce window in seconds."""
        return self.debounce_window_ms / 1000.0

    @classmethod
    def from_env(cls) -> EngineSettings:
        """Build settings from ``SCHEMADRAFT_*`` environment variables.

        Unset variables keep their defaults.
        """
        overrides: dict[str, str] = {}
        for name in cls.model_fields:
            if value := os.getenv(f"SCHEMADRAFT_{name.upper()}"):
                overrides[name] = value
        return cls.model_validate(overrides)
