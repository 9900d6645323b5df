"""CLI entry point: python -m protection_settings <command>."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from protection_settings.commands import CommandResult, ConfigCommandHandler
from protection_settings.config import SettingsConfig
from protection_settings.loader import load_protection_directory
from protection_settings.manager import ProtectionSettingsManager
from protection_settings.notify import LoggerNotifier
from protection_settings.registry import ProtectionRegistry
from protection_settings.store.sqlite import SQLiteSettingsStore


async def _run(config: SettingsConfig, tokens: list[str]) -> CommandResult:
    registry = ProtectionRegistry()
    if config.protections_dir:
        load_protection_directory(config.protections_dir, registry)
    store = SQLiteSettingsStore.open(config.database_path)
    try:
        manager = ProtectionSettingsManager(registry, store, notifier=LoggerNotifier())
        await manager.load_persisted()
        return await ConfigCommandHandler(manager).dispatch(tokens)
    finally:
        store.close()


def main(argv: list[str] | None = None) -> None:
    env = SettingsConfig.from_env()
    parser = argparse.ArgumentParser(
        prog="protection-settings",
        description="Inspect and change protection settings",
    )
    parser.add_argument("--db", default=env.database_path, help="SQLite settings database")
    parser.add_argument(
        "--protections-dir",
        default=env.protections_dir,
        help="Directory of YAML protection definitions",
    )
    parser.add_argument("--log-level", default=env.log_level, help="Logging level")
    parser.add_argument(
        "command",
        choices=["get", "set", "add", "remove", "reset"],
        help="Config operation",
    )
    parser.add_argument("args", nargs="*", help="<protection>.<setting> [value...]")

    args = parser.parse_args(argv)
    level = logging.getLevelName(args.log_level.upper())
    if not isinstance(level, int):
        print(f"Error: unknown log level {args.log_level!r}", file=sys.stderr)
        sys.exit(1)
    logging.basicConfig(level=level)

    config = SettingsConfig(
        database_path=args.db,
        protections_dir=args.protections_dir,
        log_level=args.log_level.upper(),
    )
    try:
        result = asyncio.run(_run(config, [args.command, *args.args]))
    except OSError as exc:
        # covers SettingsPersistenceError from the startup reload
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if result.ok:
        print(result.message)
    else:
        print(f"Error: {result.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
