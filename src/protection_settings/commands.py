"""Config command surface -- maps ``config <op> <protection>.<setting> [value]``
onto manager calls and wraps the outcome in a :class:`CommandResult`.

Tokenizing chat text and sending replies belong to the caller; this
module only turns already-split tokens into results with a human-readable
message.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Any

from protection_settings.errors import (
    IllegalSettingOperationError,
    NotFoundError,
    ProtectionSettingValidationError,
    SettingsPersistenceError,
)
from protection_settings.manager import ProtectionSettingsManager
from protection_settings.settings.models import _StrictModel

logger = logging.getLogger(__name__)

USAGE = (
    "Usage: config get [protection] | config set <protection>.<setting> <value> | "
    "config add <protection>.<setting> <value> | "
    "config remove <protection>.<setting> <value> | "
    "config reset <protection>.<setting>"
)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TYPE = "type"
    IO = "io"
    USAGE = "usage"


class CommandResult(_StrictModel):
    """``{ok: true, value}`` or ``{ok: false, kind, message}``."""

    ok: bool
    value: Any = None
    kind: ErrorKind | None = None
    message: str = ""

    @classmethod
    def success(cls, value: Any, message: str) -> CommandResult:
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> CommandResult:
        return cls(ok=False, kind=kind, message=message)

    def to_payload(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "value": self.value}
        kind = self.kind.value if self.kind is not None else None
        return {"ok": False, "kind": kind, "message": self.message}


class _UsageError(Exception):
    pass


def split_address(address: str) -> tuple[str, str]:
    """Split ``protection.setting``.  The setting part may itself contain dots."""
    protection_name, _, setting_name = address.partition(".")
    if not protection_name or not setting_name:
        raise _UsageError(f"Expected <protection>.<setting>, got {address!r}")
    return protection_name, setting_name


def render_value(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(str(item) for item in value) + "]"
    return str(value)


class ConfigCommandHandler:
    """Runs config commands against a :class:`ProtectionSettingsManager`."""

    def __init__(self, manager: ProtectionSettingsManager) -> None:
        self.manager = manager

    async def dispatch(self, tokens: Sequence[str]) -> CommandResult:
        """Run a command given its tokens, e.g. ``["add", "WordList.words", "spam"]``.

        Everything after the address is joined back with single spaces to
        form the value.
        """
        if not tokens:
            return CommandResult.failure(ErrorKind.USAGE, USAGE)
        keyword, *args = tokens
        keyword = keyword.lower()

        if keyword == "get":
            if len(args) > 1:
                return CommandResult.failure(ErrorKind.USAGE, USAGE)
            return await self.get(args[0] if args else None)
        if keyword == "reset":
            if len(args) != 1:
                return CommandResult.failure(ErrorKind.USAGE, USAGE)
            return await self.reset(args[0])
        if keyword in ("set", "add", "remove"):
            if len(args) < 2:
                return CommandResult.failure(ErrorKind.USAGE, USAGE)
            operation = getattr(self, keyword)
            return await operation(args[0], " ".join(args[1:]))
        return CommandResult.failure(ErrorKind.USAGE, f"Unknown config command {keyword!r}. {USAGE}")

    async def get(self, protection_name: str | None = None) -> CommandResult:
        async def call() -> CommandResult:
            if protection_name:
                snapshot = {
                    protection_name: await self.manager.get_protection_settings(protection_name)
                }
            else:
                snapshot = await self.manager.get_all_protection_settings()
            lines = [
                f"{name}.{setting}: {render_value(value)}"
                for name, settings in snapshot.items()
                for setting, value in settings.items()
            ]
            message = "\n".join(lines) if lines else "No protection settings."
            return CommandResult.success(snapshot, message)

        return await self._guard("get", protection_name or "*", call)

    async def set(self, address: str, raw_value: str) -> CommandResult:
        async def call() -> CommandResult:
            protection_name, setting_name = split_address(address)
            settings = await self.manager.set_protection_settings(
                protection_name, {setting_name: raw_value},
            )
            value = settings[setting_name]
            return CommandResult.success(value, f"Changed {address} to {render_value(value)}")

        return await self._guard("set", address, call)

    async def add(self, address: str, raw_value: str) -> CommandResult:
        async def call() -> CommandResult:
            protection_name, setting_name = split_address(address)
            change = await self.manager.add_protection_setting(
                protection_name, setting_name, raw_value,
            )
            if change.changed:
                message = f"Changed {address} to {render_value(change.value)}"
            else:
                message = f"{address} unchanged: {raw_value.strip()!r} is already present"
            return CommandResult.success(change.value, message)

        return await self._guard("add", address, call)

    async def remove(self, address: str, raw_value: str) -> CommandResult:
        async def call() -> CommandResult:
            protection_name, setting_name = split_address(address)
            change = await self.manager.remove_protection_setting(
                protection_name, setting_name, raw_value,
            )
            if change.changed:
                message = f"Changed {address} to {render_value(change.value)}"
            else:
                message = f"{address} unchanged: {raw_value.strip()!r} is not present"
            return CommandResult.success(change.value, message)

        return await self._guard("remove", address, call)

    async def reset(self, address: str) -> CommandResult:
        async def call() -> CommandResult:
            protection_name, setting_name = split_address(address)
            value = await self.manager.reset_protection_setting(protection_name, setting_name)
            return CommandResult.success(value, f"Reset {address} to {render_value(value)}")

        return await self._guard("reset", address, call)

    async def _guard(
        self,
        operation: str,
        address: str,
        call: Callable[[], Awaitable[CommandResult]],
    ) -> CommandResult:
        try:
            return await call()
        except _UsageError as exc:
            return CommandResult.failure(ErrorKind.USAGE, str(exc))
        except ProtectionSettingValidationError as exc:
            return CommandResult.failure(ErrorKind.VALIDATION, str(exc))
        except NotFoundError as exc:
            return CommandResult.failure(ErrorKind.NOT_FOUND, str(exc))
        except IllegalSettingOperationError as exc:
            return CommandResult.failure(ErrorKind.TYPE, str(exc))
        except SettingsPersistenceError as exc:
            logger.exception("Config %s on %s failed to persist", operation, address, exc_info=exc)
            return CommandResult.failure(ErrorKind.IO, str(exc))
