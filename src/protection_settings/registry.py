"""Protection registry -- in-memory index of protections and their settings.

A registry object is created by the application and handed to the
:class:`~protection_settings.manager.ProtectionSettingsManager`.  New
protections may be registered at runtime (plugins, tests); each one's
setting-name set is fixed once registered.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from protection_settings.errors import ProtectionNotFoundError, SettingNotFoundError
from protection_settings.settings.types import ProtectionSetting

logger = logging.getLogger(__name__)


@runtime_checkable
class Protection(Protocol):
    """What the settings core needs from a protection module."""

    name: str
    settings: Mapping[str, ProtectionSetting]


@dataclass
class ProtectionDescriptor:
    """Plain protection declaration: a name plus its typed settings."""

    name: str
    settings: dict[str, ProtectionSetting] = field(default_factory=dict)
    description: str = ""


class ProtectionRegistry:
    """In-memory registry of protections keyed by their case-sensitive name."""

    def __init__(self) -> None:
        self._protections: dict[str, Protection] = {}

    def register(self, name: str, protection: Protection) -> None:
        """Add a protection.

        Raises ValueError on a duplicate name, a name that disagrees with
        ``protection.name``, or a setting that is not a ProtectionSetting.
        """
        if name in self._protections:
            raise ValueError(f"Duplicate protection registered: {name!r}")
        if protection.name != name:
            raise ValueError(
                f"Protection registered as {name!r} is named {protection.name!r}"
            )
        for setting_name, setting in protection.settings.items():
            if not isinstance(setting, ProtectionSetting):
                raise ValueError(
                    f"Setting {name}.{setting_name} is not a protection setting"
                )
        self._protections[name] = protection
        logger.debug(
            "Registered protection %s with settings %s",
            name, sorted(protection.settings),
        )

    def get(self, name: str) -> Protection | None:
        return self._protections.get(name)

    def require(self, name: str) -> Protection:
        """Look up a protection, raising ProtectionNotFoundError if missing."""
        protection = self._protections.get(name)
        if protection is None:
            raise ProtectionNotFoundError(name)
        return protection

    def require_setting(self, name: str, setting_name: str) -> ProtectionSetting:
        settings = self.require(name).settings
        if setting_name not in settings:
            raise SettingNotFoundError(name, setting_name)
        return settings[setting_name]

    def names(self) -> list[str]:
        return list(self._protections)

    def all(self) -> list[Protection]:
        return list(self._protections.values())

    def __contains__(self, name: object) -> bool:
        return name in self._protections

    def __len__(self) -> int:
        return len(self._protections)
