"""YAML protection definitions. Files starting with underscore are skipped.

A definition file looks like::

    name: BasicFloodingProtection
    description: Redacts and bans users who send too many messages.
    settings:
      maxPerMinute: {type: number, default: 10, minimum: 1}
      exemptUsers: {type: user_id_list}
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from protection_settings.registry import ProtectionDescriptor, ProtectionRegistry
from protection_settings.settings.models import ProtectionSpec, SettingSpec
from protection_settings.settings.types import (
    NumberProtectionSetting,
    ProtectionSetting,
    SettingKind,
    StringListProtectionSetting,
    StringProtectionSetting,
    UserIdListProtectionSetting,
)

logger = logging.getLogger(__name__)


def build_setting(spec: SettingSpec) -> ProtectionSetting:
    """Instantiate the setting variant a SettingSpec describes.

    Raises ProtectionSettingValidationError if the default is invalid.
    """
    if spec.type is SettingKind.NUMBER:
        return NumberProtectionSetting(
            spec.default if spec.default is not None else 0,
            minimum=spec.minimum,
            maximum=spec.maximum,
        )
    if spec.type is SettingKind.STRING:
        return StringProtectionSetting(
            spec.default if spec.default is not None else "",
            pattern=spec.pattern,
            allow_empty=spec.allow_empty,
        )
    if spec.type is SettingKind.STRING_LIST:
        return StringListProtectionSetting(spec.default)
    if spec.type is SettingKind.USER_ID_LIST:
        return UserIdListProtectionSetting(spec.default)
    raise ValueError(f"Unsupported setting type: {spec.type!r}")


def build_protection(spec: ProtectionSpec) -> ProtectionDescriptor:
    return ProtectionDescriptor(
        name=spec.name,
        settings={name: build_setting(s) for name, s in spec.settings.items()},
        description=spec.description,
    )


def load_protection_file(path: Path) -> ProtectionDescriptor:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        raise ValueError(f"Empty protection YAML: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Protection YAML root must be a mapping: {path}")
    return build_protection(ProtectionSpec.model_validate(data))


def load_protection_directory(directory: str | Path, registry: ProtectionRegistry) -> int:
    """Load all YAML protections from a directory recursively. Returns count loaded."""
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("Protection directory does not exist: %s", directory)
        return 0

    count = 0
    for path in sorted(directory.rglob("*.yaml")):
        if path.name.startswith("_"):
            continue
        try:
            protection = load_protection_file(path)
            registry.register(protection.name, protection)
            count += 1
        except (yaml.YAMLError, ValidationError, ValueError, TypeError) as exc:
            logger.exception("Failed to load protection from %s: %s", path, exc)
    return count
