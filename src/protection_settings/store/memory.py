from __future__ import annotations

import asyncio


class InMemorySettingsStore:
    """Test-friendly store that keeps records in a dict.

    Set ``fail_writes`` / ``fail_reads`` to simulate I/O failures.
    """

    def __init__(self, records: dict[tuple[str, str], str] | None = None) -> None:
        self.records: dict[tuple[str, str], str] = dict(records or {})
        self.fail_writes = False
        self.fail_reads = False
        self.write_count = 0

    async def load(self, protection_name: str, setting_name: str) -> str | None:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise OSError("simulated read failure")
        return self.records.get((protection_name, setting_name))

    async def load_all(self, protection_name: str) -> dict[str, str]:
        await asyncio.sleep(0)
        if self.fail_reads:
            raise OSError("simulated read failure")
        return {
            setting: value
            for (protection, setting), value in self.records.items()
            if protection == protection_name
        }

    async def store(
        self, protection_name: str, setting_name: str, serialized: str,
    ) -> None:
        await asyncio.sleep(0)
        if self.fail_writes:
            raise OSError("simulated write failure")
        self.records[(protection_name, setting_name)] = serialized
        self.write_count += 1
