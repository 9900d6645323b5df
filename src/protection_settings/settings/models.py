"""Pydantic models for declarative (YAML) protection definitions."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from protection_settings.settings.types import SettingKind


class _StrictModel(BaseModel):
    """Shared strict model settings for protection definitions."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class SettingSpec(_StrictModel):
    """One declared setting: its kind, default, and kind-specific constraints."""

    type: SettingKind
    default: Any = None
    description: str = ""
    minimum: float | None = None
    maximum: float | None = None
    pattern: str | None = None
    allow_empty: bool = True

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str) -> str:
        return value.strip()

    @field_validator("pattern")
    @classmethod
    def check_pattern(cls, value: str | None) -> str | None:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid pattern {value!r}: {exc}") from exc
        return value

    @model_validator(mode="after")
    def check_kind_options(self) -> SettingSpec:
        if self.type is not SettingKind.NUMBER and (
            self.minimum is not None or self.maximum is not None
        ):
            raise ValueError("minimum/maximum only apply to number settings")
        if self.type is not SettingKind.STRING and (
            self.pattern is not None or not self.allow_empty
        ):
            raise ValueError("pattern/allow_empty only apply to string settings")
        if self.type.is_list and not (self.default is None or isinstance(self.default, list)):
            raise ValueError("list settings need a list default")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError("minimum must not exceed maximum")
        return self


class ProtectionSpec(_StrictModel):
    """A protection and the settings it declares."""

    name: str
    description: str = ""
    settings: dict[str, SettingSpec] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("protection name must not be empty")
        if "." in cleaned:
            raise ValueError("protection name must not contain '.'")
        return cleaned

    @field_validator("description")
    @classmethod
    def normalize_description(cls, value: str) -> str:
        return value.strip()

    @field_validator("settings")
    @classmethod
    def check_setting_names(cls, settings: dict[str, SettingSpec]) -> dict[str, SettingSpec]:
        for name in settings:
            if not name or name != name.strip():
                raise ValueError(f"invalid setting name {name!r}")
        return settings
