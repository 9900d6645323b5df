"""Error taxonomy for protection settings.

Every error raised by the settings core derives from
:class:`ProtectionSettingsError` and also from the closest builtin, so
callers can catch either ``ValueError``/``LookupError``/``TypeError``/
``OSError`` or the package-specific class.
"""

from __future__ import annotations

from typing import Any


class ProtectionSettingsError(Exception):
    """Base class for all protection settings errors."""


class ProtectionSettingValidationError(ProtectionSettingsError, ValueError):
    """A candidate value failed validation or coercion from raw text."""

    def __init__(
        self,
        message: str,
        *,
        setting_name: str = "",
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.setting_name = setting_name
        self.value = value


class NotFoundError(ProtectionSettingsError, LookupError):
    """A referenced protection or setting is not registered."""


class ProtectionNotFoundError(NotFoundError):
    def __init__(self, protection_name: str) -> None:
        super().__init__(f"Unknown protection {protection_name!r}")
        self.protection_name = protection_name


class SettingNotFoundError(NotFoundError):
    def __init__(self, protection_name: str, setting_name: str) -> None:
        super().__init__(
            f"Protection {protection_name!r} has no setting {setting_name!r}"
        )
        self.protection_name = protection_name
        self.setting_name = setting_name


class IllegalSettingOperationError(ProtectionSettingsError, TypeError):
    """An operation is not supported by the setting's kind (e.g. add on a number)."""


class SettingsPersistenceError(ProtectionSettingsError, OSError):
    """The settings store failed to load or persist a value.

    When raised from a mutation, the in-memory value has already changed;
    the change may not survive a restart.
    """
