"""
Configuration for the legacy news migration.

Configuration is supplied via a JSON file path or directly as a dictionary.
Missing keys are filled with defaults and secrets fall back to environment
variables.  The result is a frozen :class:`MigrationConfig` that is handed
to every component at construction time.

Example ``config/migration_config.json``::

    {
      "legacy": {"base_url": "https://www.example.org"},
      "destination": {"api_base": "https://cms.example.org", "access_token": "..."},
      "storage": {"backend": "s3", "bucket": "news-images",
                  "public_base_url": "https://cdn.example.org/news-images"},
      "migration": {"dry_run": false, "limit": null, "site_url": "https://new.example.org"}
    }
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from news_migration.utils.errors import ConfigError

DEFAULT_CONFIG_FILE = "config/migration_config.json"
DEFAULT_WIDTHS: Tuple[int, ...] = (1920, 1600, 1280, 1024, 800, 640, 320)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)


class LegacySiteConfig(_Frozen):
    base_url: str = Field(..., min_length=1)
    archive_path: str = "/news"

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class DestinationConfig(_Frozen):
    api_base: str = ""
    access_token: str = ""
    page_size: int = 1000

    @field_validator("api_base")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class StorageConfig(_Frozen):
    backend: str = "local"
    bucket: str = ""
    directory: str = "reports/renditions"
    public_base_url: str = ""

    @field_validator("backend")
    @classmethod
    def _known_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("s3", "local"):
            raise ValueError(f"unknown storage backend {v!r}")
        return v


class ImageConfig(_Frozen):
    quality: int = Field(85, ge=1, le=100)
    widths: Tuple[int, ...] = DEFAULT_WIDTHS

    @field_validator("widths")
    @classmethod
    def _descending(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        return tuple(sorted({int(w) for w in v if int(w) > 0}, reverse=True))


class MigrationSettings(_Frozen):
    dry_run: bool = False
    limit: Optional[int] = None
    timeout: float = 30.0
    site_url: str = ""
    archive_file: str = "data/news_archive.json"


class MigrationConfig(_Frozen):
    legacy: LegacySiteConfig
    destination: DestinationConfig = DestinationConfig()
    storage: StorageConfig = StorageConfig()
    images: ImageConfig = ImageConfig()
    migration: MigrationSettings = MigrationSettings()

    def with_overrides(self, **migration_overrides: Any) -> "MigrationConfig":
        """Return a copy with selected ``migration`` settings replaced."""
        updates = {k: v for k, v in migration_overrides.items() if v is not None}
        if not updates:
            return self
        return self.model_copy(update={"migration": self.migration.model_copy(update=updates)})


def _apply_env_defaults(raw: Dict[str, Any]) -> Dict[str, Any]:
    # Ensure essential sections exist to prevent KeyErrors
    raw.setdefault("legacy", {})
    raw["legacy"].setdefault("base_url", os.getenv("LEGACY_BASE_URL", ""))

    raw.setdefault("destination", {})
    raw["destination"].setdefault("api_base", os.getenv("NEWS_API_BASE", ""))
    raw["destination"].setdefault("access_token", os.getenv("NEWS_API_TOKEN", ""))

    raw.setdefault("storage", {})
    raw["storage"].setdefault("bucket", os.getenv("NEWS_STORAGE_BUCKET", ""))
    raw["storage"].setdefault("public_base_url", os.getenv("NEWS_STORAGE_PUBLIC_URL", ""))

    raw.setdefault("images", {})
    raw.setdefault("migration", {})
    return raw


def load_config(config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> MigrationConfig:
    """Build a :class:`MigrationConfig` from a JSON file or a dictionary.

    :param config: Raw configuration dictionary, used when no file is given.
    :param config_file: Path of a JSON configuration file.  Ignored when the
        file does not exist.
    :raises ConfigError: if the file cannot be decoded or a value is invalid.
    """
    raw: Dict[str, Any]
    if config_file and os.path.exists(config_file):
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Could not decode {config_file}: {e}") from e
    else:
        raw = json.loads(json.dumps(config or {}))

    raw = _apply_env_defaults(raw)
    try:
        return MigrationConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
