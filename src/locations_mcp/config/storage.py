"""Where the location store and the HTTP cache live on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "locations-mcp"
DEFAULT_DB_FILENAME: Final[str] = "locations.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.sqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """A data directory holding the sqlite store and the HTTP cache.

    The directory is created on first use of either file.
    """

    data_dir: Path

    def file(self, filename: str) -> Path:
        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory / filename


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv("LOCATIONS_DATA_DIR")
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a sqlite file in the data directory."""

    override = os.getenv("DATABASE_URI")
    if override:
        return DatabaseConfig(uri=override)
    database_file = (storage or get_storage_config()).file(DEFAULT_DB_FILENAME)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{database_file}")


def get_http_cache_path(*, storage: StorageConfig | None = None) -> Path:
    return (storage or get_storage_config()).file(HTTP_CACHE_FILENAME)
