"""Protection settings manager -- the single read/mutation path for settings.

Mutations follow one order: resolve names, coerce and validate every
value, write memory, then persist and notify.  Nothing awaits between the
first validation and the last in-memory write, so concurrent callers on
the same event loop always observe a self-consistent state; only the
store writes may lag behind.

A batch passed to :meth:`ProtectionSettingsManager.set_protection_settings`
is atomic: if any entry fails, no entry changes.  Settings not named in a
call keep their current values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, cast

from protection_settings.errors import (
    IllegalSettingOperationError,
    ProtectionSettingValidationError,
    SettingNotFoundError,
    SettingsPersistenceError,
)
from protection_settings.notify import NoOpNotifier, SettingChangeEvent, SettingsNotifier
from protection_settings.registry import Protection, ProtectionRegistry
from protection_settings.settings.types import ListProtectionSetting, ProtectionSetting
from protection_settings.store.base import SettingsStore

logger = logging.getLogger(__name__)


@dataclass
class SettingChange:
    """Outcome of a list add/remove: whether anything changed, and the new value."""

    changed: bool
    value: Any


class SettingsSnapshot(dict):
    """Setting values of one protection.  Unknown names raise SettingNotFoundError."""

    def __init__(self, protection_name: str, values: Mapping[str, Any]) -> None:
        super().__init__(values)
        self.protection_name = protection_name

    def __missing__(self, key: str) -> Any:
        raise SettingNotFoundError(self.protection_name, key)


def _invalid(
    protection_name: str, setting_name: str, exc: ProtectionSettingValidationError,
) -> ProtectionSettingValidationError:
    return ProtectionSettingValidationError(
        f"Invalid value for {protection_name}.{setting_name}: {exc}",
        setting_name=setting_name,
        value=exc.value,
    )


class ProtectionSettingsManager:
    def __init__(
        self,
        registry: ProtectionRegistry,
        store: SettingsStore,
        *,
        notifier: SettingsNotifier | None = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.notifier = notifier or NoOpNotifier()

    # ── loading ───────────────────────────────────────────────────

    async def load_persisted(self) -> int:
        """Reload persisted values for every registered protection.

        Returns the number of settings restored.  Records that no longer
        validate are logged and skipped; those settings keep their defaults.
        """
        loaded = 0
        for protection in self.registry.all():
            loaded += await self._load_protection(protection)
        return loaded

    async def register_protection(self, protection: Protection) -> int:
        """Register a protection at runtime and restore its persisted values."""
        self.registry.register(protection.name, protection)
        return await self._load_protection(protection)

    async def _load_protection(self, protection: Protection) -> int:
        try:
            records = await self.store.load_all(protection.name)
        except OSError as exc:
            raise SettingsPersistenceError(
                f"Failed to load settings for {protection.name}: {exc}"
            ) from exc

        loaded = 0
        for setting_name, serialized in records.items():
            setting = protection.settings.get(setting_name)
            if setting is None:
                logger.warning(
                    "Ignoring persisted value for undeclared setting %s.%s",
                    protection.name, setting_name,
                )
                continue
            try:
                value = setting.deserialize(serialized)
            except ProtectionSettingValidationError as exc:
                logger.warning(
                    "Skipping persisted value for %s.%s: %s",
                    protection.name, setting_name, exc,
                )
                continue
            setting.set_value(value)
            loaded += 1
        logger.debug("Restored %d setting(s) for %s", loaded, protection.name)
        return loaded

    # ── reads ─────────────────────────────────────────────────────

    def _snapshot(self, protection: Protection) -> SettingsSnapshot:
        return SettingsSnapshot(
            protection.name,
            {name: setting.get_value() for name, setting in protection.settings.items()},
        )

    async def get_protection_settings(self, protection_name: str) -> SettingsSnapshot:
        """Current effective value of every setting the protection declares."""
        return self._snapshot(self.registry.require(protection_name))

    async def get_all_protection_settings(self) -> dict[str, SettingsSnapshot]:
        return {p.name: self._snapshot(p) for p in self.registry.all()}

    # ── mutations ─────────────────────────────────────────────────

    async def set_protection_settings(
        self, protection_name: str, changes: Mapping[str, Any],
    ) -> SettingsSnapshot:
        """Set several settings at once; returns the protection's new values.

        String values are parsed as raw command text, other values are
        taken as typed.  Raises SettingNotFoundError for an undeclared name
        and ProtectionSettingValidationError for a rejected value; in both
        cases nothing changes.
        """
        protection = self.registry.require(protection_name)
        targets = {
            name: self.registry.require_setting(protection_name, name) for name in changes
        }

        staged: dict[str, Any] = {}
        for name, candidate in changes.items():
            try:
                staged[name] = targets[name].coerce(candidate)
            except ProtectionSettingValidationError as exc:
                raise _invalid(protection_name, name, exc) from exc

        for name, value in staged.items():
            targets[name].set_value(value)

        for name in staged:
            await self._persist(protection_name, name, targets[name])
            self._notify(protection_name, name, "set", targets[name])
        return self._snapshot(protection)

    async def add_protection_setting(
        self, protection_name: str, setting_name: str, raw_value: str,
    ) -> SettingChange:
        return await self._mutate_list(protection_name, setting_name, raw_value, "add")

    async def remove_protection_setting(
        self, protection_name: str, setting_name: str, raw_value: str,
    ) -> SettingChange:
        return await self._mutate_list(protection_name, setting_name, raw_value, "remove")

    async def reset_protection_setting(
        self, protection_name: str, setting_name: str,
    ) -> Any:
        """Restore a setting's default and persist it."""
        setting = self.registry.require_setting(protection_name, setting_name)
        value = setting.reset()
        await self._persist(protection_name, setting_name, setting)
        self._notify(protection_name, setting_name, "reset", setting)
        return value

    async def _mutate_list(
        self, protection_name: str, setting_name: str, raw_value: str, operation: str,
    ) -> SettingChange:
        setting = self.registry.require_setting(protection_name, setting_name)
        if not setting.kind.is_list:
            raise IllegalSettingOperationError(
                f"Cannot {operation} values on {protection_name}.{setting_name}: "
                f"it is a {setting.kind.value} setting, not a list"
            )
        list_setting = cast(ListProtectionSetting, setting)
        try:
            if operation == "add":
                changed = list_setting.add_value(raw_value)
            else:
                changed = list_setting.remove_value(raw_value)
        except ProtectionSettingValidationError as exc:
            raise _invalid(protection_name, setting_name, exc) from exc

        if changed:
            await self._persist(protection_name, setting_name, setting)
            self._notify(protection_name, setting_name, operation, setting)
        return SettingChange(changed=changed, value=setting.get_value())

    # ── helpers ───────────────────────────────────────────────────

    async def _persist(
        self, protection_name: str, setting_name: str, setting: ProtectionSetting,
    ) -> None:
        try:
            await self.store.store(protection_name, setting_name, setting.serialize())
        except OSError as exc:
            raise SettingsPersistenceError(
                f"Failed to persist {protection_name}.{setting_name}; "
                f"the change may not survive a restart: {exc}"
            ) from exc
        logger.debug("Persisted %s.%s", protection_name, setting_name)

    def _notify(
        self,
        protection_name: str,
        setting_name: str,
        operation: str,
        setting: ProtectionSetting,
    ) -> None:
        self.notifier.emit(
            SettingChangeEvent(
                protection_name=protection_name,
                setting_name=setting_name,
                operation=operation,
                value=setting.get_value(),
            )
        )
