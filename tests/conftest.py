"""Test fixtures for protection settings tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from protection_settings.manager import ProtectionSettingsManager
from protection_settings.notify import InMemoryNotifier
from protection_settings.registry import ProtectionDescriptor, ProtectionRegistry
from protection_settings.settings.types import (
    NumberProtectionSetting,
    ProtectionSetting,
    StringListProtectionSetting,
    StringProtectionSetting,
)
from protection_settings.store.memory import InMemorySettingsStore


def make_flooding_protection(name: str = "BasicFloodingProtection") -> ProtectionDescriptor:
    """A protection with one setting of each basic kind."""
    return ProtectionDescriptor(
        name=name,
        settings={
            "maxPerMinute": NumberProtectionSetting(10, minimum=1),
            "reason": StringProtectionSetting("flooding"),
            "exemptRooms": StringListProtectionSetting(),
        },
        description="Test flooding protection",
    )


@pytest.fixture
def make_protection() -> Callable[..., ProtectionDescriptor]:
    def _make(name: str, **settings: ProtectionSetting) -> ProtectionDescriptor:
        return ProtectionDescriptor(name=name, settings=dict(settings))

    return _make


@pytest.fixture
def registry() -> ProtectionRegistry:
    reg = ProtectionRegistry()
    flooding = make_flooding_protection()
    reg.register(flooding.name, flooding)
    return reg


@pytest.fixture
def store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def notifier() -> InMemoryNotifier:
    return InMemoryNotifier()


@pytest.fixture
def manager(
    registry: ProtectionRegistry,
    store: InMemorySettingsStore,
    notifier: InMemoryNotifier,
) -> ProtectionSettingsManager:
    return ProtectionSettingsManager(registry, store, notifier=notifier)
