"""Protection settings -- typed, validated settings for moderation protections.

Protections declare named, typed settings; the manager validates every
incoming value, accumulates partial updates, and mirrors values into a
durable store.

Public API::

    from protection_settings import ProtectionRegistry, ProtectionSettingsManager
    from protection_settings.settings import NumberProtectionSetting
    from protection_settings.store import SQLiteSettingsStore
    from protection_settings.commands import ConfigCommandHandler
"""

from protection_settings.errors import (
    IllegalSettingOperationError,
    NotFoundError,
    ProtectionNotFoundError,
    ProtectionSettingsError,
    ProtectionSettingValidationError,
    SettingNotFoundError,
    SettingsPersistenceError,
)
from protection_settings.manager import ProtectionSettingsManager, SettingChange
from protection_settings.registry import ProtectionDescriptor, ProtectionRegistry

__all__ = [
    "IllegalSettingOperationError",
    "NotFoundError",
    "ProtectionDescriptor",
    "ProtectionNotFoundError",
    "ProtectionRegistry",
    "ProtectionSettingValidationError",
    "ProtectionSettingsError",
    "ProtectionSettingsManager",
    "SettingChange",
    "SettingNotFoundError",
    "SettingsPersistenceError",
]
__version__ = "0.1.0"
