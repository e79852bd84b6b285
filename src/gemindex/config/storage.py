"""Location of the catalog database."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "gemindex"
DEFAULT_DB_FILENAME: Final[str] = "gemindex.db"
DATA_DIR_ENV_VAR: Final[str] = "GEMINDEX_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"

_IN_MEMORY_DATABASES: Final[frozenset[str]] = frozenset({"", ":memory:"})


def default_data_dir() -> Path:
    """Return ``$GEMINDEX_DATA_DIR`` or the per-user data directory for gemindex."""

    override = os.getenv(DATA_DIR_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser().resolve()
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Local"
    else:
        base = os.getenv("XDG_DATA_HOME")
        root = Path(base) if base else Path.home() / ".local" / "share"
    return (root / APP_DIR_NAME).expanduser().resolve()


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    url: URL

    @property
    def uri(self) -> str:
        return self.url.render_as_string(hide_password=False)

    def sqlite_path(self) -> Path | None:
        """Return the database file for file-backed SQLite URLs, else ``None``."""

        if self.url.get_backend_name() != "sqlite":
            return None
        database = self.url.database or ""
        if database in _IN_MEMORY_DATABASES or database.startswith("file:"):
            return None
        return Path(database)

    def prepare(self) -> None:
        """Create the directory a SQLite database file will live in."""

        path = self.sqlite_path()
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)


def parse_database_uri(raw: str) -> DatabaseConfig:
    try:
        return DatabaseConfig(url=make_url(raw))
    except ArgumentError as exc:
        raise ConfigurationError(f"Invalid database URL: {raw!r}") from exc


def get_database_config() -> DatabaseConfig:
    """Resolve the catalog database from ``DATABASE_URI`` or the data directory."""

    raw = os.getenv(DATABASE_URI_ENV_VAR, "").strip()
    if not raw:
        raw = f"sqlite+pysqlite:///{default_data_dir() / DEFAULT_DB_FILENAME}"
    return parse_database_uri(raw)
