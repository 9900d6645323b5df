"""Settings stores -- durable key-value mirrors of protection settings."""

from protection_settings.store.base import SettingsStore
from protection_settings.store.memory import InMemorySettingsStore
from protection_settings.store.sqlite import SQLiteSettingsStore

__all__ = [
    "InMemorySettingsStore",
    "SQLiteSettingsStore",
    "SettingsStore",
]
