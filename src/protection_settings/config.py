"""Runtime configuration for hosting the settings subsystem.

Example::

    config = SettingsConfig.from_env()
    store = SQLiteSettingsStore.open(config.database_path)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_ENV_DB = "PROTECTION_SETTINGS_DB"
_ENV_DIR = "PROTECTION_SETTINGS_DIR"
_ENV_LOG_LEVEL = "PROTECTION_SETTINGS_LOG_LEVEL"


@dataclass
class SettingsConfig:
    """Where settings live and how loudly to log.

    Attributes:
        database_path: SQLite file backing the settings store.
        protections_dir: Optional directory of YAML protection definitions.
        log_level: Name of the root logging level (e.g. "INFO").
    """

    database_path: str = "protection_settings.db"
    protections_dir: str | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> SettingsConfig:
        defaults = cls()
        return cls(
            database_path=os.environ.get(_ENV_DB, "").strip() or defaults.database_path,
            protections_dir=os.environ.get(_ENV_DIR, "").strip() or None,
            log_level=(
                os.environ.get(_ENV_LOG_LEVEL, "").strip().upper() or defaults.log_level
            ),
        )
