"""Where the claim database and locally stored evidence live."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "venue_claims"
DEFAULT_DB_FILENAME: Final[str] = "venue_claims.db"
EVIDENCE_DIRNAME: Final[str] = "evidence"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Layout of the data directory.

    ``database_path`` and ``evidence_path`` create the data directory unless
    called with ``ensure=False``.
    """

    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    evidence_dirname: str = EVIDENCE_DIRNAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def _child(self, name: str, *, ensure: bool) -> Path:
        root = self.resolve_data_dir()
        if ensure:
            root.mkdir(parents=True, exist_ok=True)
        return root / name

    def database_path(self, *, ensure: bool = True) -> Path:
        return self._child(self.database_filename, ensure=ensure)

    def evidence_path(self, *, ensure: bool = True) -> Path:
        return self._child(self.evidence_dirname, ensure=ensure)

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if sys.platform == "win32":
        local_app_data = os.getenv("LOCALAPPDATA")
        return Path(local_app_data) if local_app_data else Path.home() / "AppData" / "Local"
    xdg_data_home = os.getenv("XDG_DATA_HOME")
    return Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv("VENUE_CLAIMS_DATA_DIR")
    data_dir = Path(override) if override else _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` when set, else a SQLite file inside the data directory."""

    if uri := os.getenv("DATABASE_URI"):
        return DatabaseConfig(uri=uri)
    return DatabaseConfig(uri=(storage or get_storage_config()).database_uri())


def get_database_uri() -> str:
    return get_database_config().uri
