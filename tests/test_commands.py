"""Tests for the config command surface."""

from __future__ import annotations

import pytest

from protection_settings.commands import (
    CommandResult,
    ConfigCommandHandler,
    ErrorKind,
    render_value,
)
from protection_settings.settings.types import (
    StringListProtectionSetting,
    StringProtectionSetting,
)


@pytest.fixture
def handler(manager):
    return ConfigCommandHandler(manager)


class TestCommandResult:
    def test_success_payload(self):
        result = CommandResult.success(["asd"], "Changed P.s to [asd]")
        assert result.to_payload() == {"ok": True, "value": ["asd"]}

    def test_failure_payload(self):
        result = CommandResult.failure(ErrorKind.NOT_FOUND, "Unknown protection 'X'")
        assert result.to_payload() == {
            "ok": False, "kind": "not_found", "message": "Unknown protection 'X'",
        }


class TestRenderValue:
    def test_list(self):
        assert render_value(["a", "b"]) == "[a, b]"
        assert render_value([]) == "[]"

    def test_scalar(self):
        assert render_value(12) == "12"


class TestConfigSet:
    @pytest.mark.asyncio
    async def test_set_string(self, handler, manager, make_protection):
        await manager.register_protection(
            make_protection("JY2TPN", test=StringProtectionSetting())
        )
        result = await handler.dispatch(["set", "JY2TPN.test", "asd"])
        assert result.ok
        assert "Changed JY2TPN.test " in result.message
        assert (await manager.get_protection_settings("JY2TPN"))["test"] == "asd"

    @pytest.mark.asyncio
    async def test_set_joins_remaining_tokens(self, handler, manager):
        result = await handler.dispatch(
            ["set", "BasicFloodingProtection.reason", "too", "many", "messages"],
        )
        assert result.value == "too many messages"

    @pytest.mark.asyncio
    async def test_set_invalid_number(self, handler):
        result = await handler.set("BasicFloodingProtection.maxPerMinute", "soup")
        assert not result.ok
        assert result.kind is ErrorKind.VALIDATION
        assert "maxPerMinute" in result.message

    @pytest.mark.asyncio
    async def test_set_number_beyond_float_range(self, handler):
        result = await handler.dispatch(
            ["set", "BasicFloodingProtection.maxPerMinute", "1" + "0" * 400],
        )
        assert not result.ok
        assert result.kind is ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_unknown_protection(self, handler):
        result = await handler.set("doesNotExist.test", "1")
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_setting(self, handler):
        result = await handler.set("BasicFloodingProtection.doesNotExist", "1")
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_malformed_address(self, handler):
        result = await handler.set("BasicFloodingProtection", "1")
        assert result.kind is ErrorKind.USAGE

    @pytest.mark.asyncio
    async def test_persistence_failure(self, handler, store, caplog):
        store.fail_writes = True
        result = await handler.set("BasicFloodingProtection.maxPerMinute", "12")
        assert result.kind is ErrorKind.IO
        assert "may not survive a restart" in result.message
        assert "failed to persist" in caplog.text


class TestConfigListOperations:
    @pytest.mark.asyncio
    async def test_add(self, handler, manager, make_protection):
        await manager.register_protection(
            make_protection("r33XyT", test=StringListProtectionSetting())
        )
        result = await handler.dispatch(["add", "r33XyT.test", "asd"])
        assert result.ok
        assert result.message.startswith("Changed r33XyT.test ")
        assert await manager.get_protection_settings("r33XyT") == {"test": ["asd"]}

    @pytest.mark.asyncio
    async def test_add_twice_reports_unchanged(self, handler, manager, make_protection):
        await manager.register_protection(
            make_protection("r33XyT", test=StringListProtectionSetting())
        )
        await handler.add("r33XyT.test", "asd")
        result = await handler.add("r33XyT.test", "asd")
        assert result.ok
        assert "unchanged" in result.message
        assert result.value == ["asd"]

    @pytest.mark.asyncio
    async def test_add_then_remove(self, handler, manager, make_protection):
        await manager.register_protection(
            make_protection("oXzT0E", test=StringListProtectionSetting())
        )
        first = await handler.dispatch(["add", "oXzT0E.test", "asd"])
        second = await handler.dispatch(["remove", "oXzT0E.test", "asd"])
        assert first.message.startswith("Changed oXzT0E.test ")
        assert second.message.startswith("Changed oXzT0E.test ")
        assert await manager.get_protection_settings("oXzT0E") == {"test": []}

    @pytest.mark.asyncio
    async def test_add_on_number_is_type_error(self, handler):
        result = await handler.add("BasicFloodingProtection.maxPerMinute", "3")
        assert result.kind is ErrorKind.TYPE


class TestConfigGetAndReset:
    @pytest.mark.asyncio
    async def test_get_one_protection(self, handler):
        result = await handler.dispatch(["get", "BasicFloodingProtection"])
        assert result.ok
        assert "BasicFloodingProtection.maxPerMinute: 10" in result.message
        assert result.value["BasicFloodingProtection"]["reason"] == "flooding"

    @pytest.mark.asyncio
    async def test_get_all(self, handler):
        result = await handler.dispatch(["get"])
        assert set(result.value) == {"BasicFloodingProtection"}

    @pytest.mark.asyncio
    async def test_get_unknown(self, handler):
        result = await handler.get("doesNotExist")
        assert result.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_reset(self, handler):
        await handler.set("BasicFloodingProtection.reason", "raid")
        result = await handler.dispatch(["reset", "BasicFloodingProtection.reason"])
        assert result.ok
        assert result.message == "Reset BasicFloodingProtection.reason to flooding"


class TestDispatchUsage:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tokens",
        [
            [],
            ["set", "BasicFloodingProtection.reason"],
            ["reset"],
            ["get", "a", "b"],
            ["frobnicate", "BasicFloodingProtection.reason", "x"],
        ],
    )
    async def test_usage_errors(self, handler, tokens):
        result = await handler.dispatch(tokens)
        assert not result.ok
        assert result.kind is ErrorKind.USAGE

    @pytest.mark.asyncio
    async def test_keyword_is_case_insensitive(self, handler):
        result = await handler.dispatch(["SET", "BasicFloodingProtection.maxPerMinute", "5"])
        assert result.ok
        assert result.value == 5
