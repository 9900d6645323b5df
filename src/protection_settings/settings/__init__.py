"""Setting types and declarative setting definitions."""

from protection_settings.settings.models import ProtectionSpec, SettingSpec
from protection_settings.settings.types import (
    ListProtectionSetting,
    NumberProtectionSetting,
    ProtectionSetting,
    SettingKind,
    StringListProtectionSetting,
    StringProtectionSetting,
    UserIdListProtectionSetting,
)

__all__ = [
    "ListProtectionSetting",
    "NumberProtectionSetting",
    "ProtectionSetting",
    "ProtectionSpec",
    "SettingKind",
    "SettingSpec",
    "StringListProtectionSetting",
    "StringProtectionSetting",
    "UserIdListProtectionSetting",
]
