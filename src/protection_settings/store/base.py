"""SettingsStore protocol -- the durable mirror behind the settings manager."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SettingsStore(Protocol):
    """Key-value persistence keyed by ``(protection_name, setting_name)``.

    Values are the serialized (JSON text) form of a setting.  Writes must be
    all-or-nothing per key; failures raise (``OSError``, ``sqlite3.Error``,
    ...) rather than being retried.
    """

    async def load(self, protection_name: str, setting_name: str) -> str | None: ...

    async def load_all(self, protection_name: str) -> dict[str, str]: ...

    async def store(
        self, protection_name: str, setting_name: str, serialized: str,
    ) -> None: ...
