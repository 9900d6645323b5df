"""Change notification primitives for protection settings."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class SettingChangeEvent:
    """A successful mutation of one setting."""

    protection_name: str
    setting_name: str
    operation: str  # "set", "add", "remove", "reset"
    value: Any
    timestamp_ms: float = field(default_factory=lambda: time.time() * 1000)

    @property
    def address(self) -> str:
        return f"{self.protection_name}.{self.setting_name}"


@runtime_checkable
class SettingsNotifier(Protocol):
    """Notification sink protocol."""

    def emit(self, event: SettingChangeEvent) -> None:
        """Emit a setting change event."""
        raise NotImplementedError


class NoOpNotifier:
    """Default sink that records nothing."""

    def emit(self, event: SettingChangeEvent) -> None:
        _ = event


class InMemoryNotifier:
    """Test-friendly sink that stores events in memory."""

    def __init__(self) -> None:
        self.events: list[SettingChangeEvent] = []

    def emit(self, event: SettingChangeEvent) -> None:
        self.events.append(event)


class LoggerNotifier:
    """Sink that emits structured events through Python logging."""

    def __init__(self, logger_name: str = "protection_settings.changes") -> None:
        self.logger = logging.getLogger(logger_name)

    def emit(self, event: SettingChangeEvent) -> None:
        self.logger.info(
            "setting_changed",
            extra={
                "protection_name": event.protection_name,
                "setting_name": event.setting_name,
                "operation": event.operation,
                "setting_value": event.value,
                "event_timestamp_ms": event.timestamp_ms,
            },
        )
