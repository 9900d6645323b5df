"""Tests for ProtectionRegistry."""

from __future__ import annotations

import pytest

from protection_settings.errors import (
    NotFoundError,
    ProtectionNotFoundError,
    SettingNotFoundError,
)
from protection_settings.registry import ProtectionDescriptor, ProtectionRegistry
from protection_settings.settings.types import NumberProtectionSetting


class TestProtectionRegistry:
    def test_register_and_get(self, make_protection):
        reg = ProtectionRegistry()
        protection = make_protection("05OVMS", test=NumberProtectionSetting(3))
        reg.register("05OVMS", protection)
        assert reg.get("05OVMS") is protection
        assert "05OVMS" in reg
        assert len(reg) == 1

    def test_get_returns_none_for_unknown(self):
        assert ProtectionRegistry().get("unknown") is None

    def test_duplicate_name_raises(self, make_protection):
        reg = ProtectionRegistry()
        reg.register("P", make_protection("P"))
        with pytest.raises(ValueError, match="Duplicate"):
            reg.register("P", make_protection("P"))

    def test_name_mismatch_raises(self, make_protection):
        with pytest.raises(ValueError, match="named"):
            ProtectionRegistry().register("P", make_protection("Q"))

    def test_non_setting_rejected(self):
        protection = ProtectionDescriptor(name="P", settings={"bad": 3})  # type: ignore[dict-item]
        with pytest.raises(ValueError, match="not a protection setting"):
            ProtectionRegistry().register("P", protection)

    def test_require_unknown_protection(self):
        with pytest.raises(ProtectionNotFoundError):
            ProtectionRegistry().require("doesNotExist")

    def test_require_setting(self, make_protection):
        reg = ProtectionRegistry()
        setting = NumberProtectionSetting(3)
        reg.register("P", make_protection("P", test=setting))
        assert reg.require_setting("P", "test") is setting
        with pytest.raises(SettingNotFoundError):
            reg.require_setting("P", "doesNotExist")

    def test_setting_names_are_case_sensitive(self, make_protection):
        reg = ProtectionRegistry()
        reg.register("P", make_protection("P", test=NumberProtectionSetting(3)))
        with pytest.raises(NotFoundError):
            reg.require_setting("P", "Test")
        with pytest.raises(NotFoundError):
            reg.require("p")

    def test_names_and_all_keep_registration_order(self, make_protection):
        reg = ProtectionRegistry()
        reg.register("B", make_protection("B"))
        reg.register("A", make_protection("A"))
        assert reg.names() == ["B", "A"]
        assert [p.name for p in reg.all()] == ["B", "A"]
