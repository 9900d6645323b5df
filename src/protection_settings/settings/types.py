"""Typed protection settings -- number, string, and list variants.

Each setting holds a default and a current value, validates candidates
before accepting them, coerces raw command text into its own type, and
serializes its value as JSON text for the settings store.

Every variant carries a ``kind`` tag.  Callers dispatch on ``kind``
(and ``kind.is_list``) rather than on the Python class, so new variants
only need a new tag and a class implementing :class:`ProtectionSetting`
(plus :class:`ListProtectionSetting` for list kinds).
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from enum import Enum
from typing import Any, ClassVar, Generic, Protocol, TypeVar, runtime_checkable

from protection_settings.errors import ProtectionSettingValidationError

T = TypeVar("T")

# Matrix-style user id: @localpart:server
_USER_ID_RE = re.compile(r"^@\S+:\S+$")


class SettingKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    STRING_LIST = "string_list"
    USER_ID_LIST = "user_id_list"

    @property
    def is_list(self) -> bool:
        return self in _LIST_KINDS


_LIST_KINDS = frozenset({SettingKind.STRING_LIST, SettingKind.USER_ID_LIST})


@runtime_checkable
class ProtectionSetting(Protocol):
    """Capabilities every setting variant provides."""

    kind: SettingKind

    @property
    def default(self) -> Any: ...

    def validate(self, candidate: Any) -> bool: ...

    def from_string(self, raw: str) -> Any: ...

    def coerce(self, candidate: Any) -> Any: ...

    def set_value(self, candidate: Any) -> Any: ...

    def parse_and_set(self, raw: str) -> Any: ...

    def get_value(self) -> Any: ...

    def reset(self) -> Any: ...

    def serialize(self) -> str: ...

    def deserialize(self, text: str) -> Any: ...


@runtime_checkable
class ListProtectionSetting(ProtectionSetting, Protocol):
    """Extra capabilities of list-kind settings."""

    def add_value(self, raw: str) -> bool: ...

    def remove_value(self, raw: str) -> bool: ...


class _SettingBase(Generic[T]):
    """Shared value handling.  Subclasses provide ``validate`` and ``from_string``."""

    kind: ClassVar[SettingKind]

    def __init__(self, default: T) -> None:
        if not self.validate(default):
            raise ProtectionSettingValidationError(
                f"Default {default!r} is not a valid {self.kind.value} value",
                value=default,
            )
        self._default = self._copy(default)
        self._value = self._copy(default)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self._value!r})"

    @staticmethod
    def _copy(value: T) -> T:
        return value

    @property
    def default(self) -> T:
        return self._copy(self._default)

    @property
    def value(self) -> T:
        return self.get_value()

    def validate(self, candidate: Any) -> bool:
        raise NotImplementedError

    def from_string(self, raw: str) -> T:
        raise NotImplementedError

    def coerce(self, candidate: Any) -> T:
        """Return *candidate* as a validated value without changing the setting.

        Strings are treated as raw command text and go through
        :meth:`from_string`; anything else is taken as already typed.
        """
        typed = self.from_string(candidate) if isinstance(candidate, str) else candidate
        if not self.validate(typed):
            raise ProtectionSettingValidationError(
                f"{candidate!r} is not a valid {self.kind.value} value",
                value=candidate,
            )
        return self._copy(typed)

    def set_value(self, candidate: Any) -> T:
        if not self.validate(candidate):
            raise ProtectionSettingValidationError(
                f"{candidate!r} is not a valid {self.kind.value} value",
                value=candidate,
            )
        self._value = self._copy(candidate)
        return self.get_value()

    def parse_and_set(self, raw: str) -> T:
        return self.set_value(self.from_string(raw))

    def get_value(self) -> T:
        return self._copy(self._value)

    def reset(self) -> T:
        self._value = self._copy(self._default)
        return self.get_value()

    def serialize(self) -> str:
        return json.dumps(self._value)

    def deserialize(self, text: str) -> T:
        """Decode a stored value.  Does not change the setting."""
        try:
            decoded = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise ProtectionSettingValidationError(
                f"Stored value {text!r} is not valid JSON", value=text,
            ) from exc
        if not self.validate(decoded):
            raise ProtectionSettingValidationError(
                f"Stored value {decoded!r} is not a valid {self.kind.value} value",
                value=decoded,
            )
        return self._copy(decoded)


class NumberProtectionSetting(_SettingBase[float]):
    """A finite number, optionally bounded (inclusive) by minimum/maximum."""

    kind = SettingKind.NUMBER

    def __init__(
        self,
        default: float = 0,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> None:
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(default)

    def validate(self, candidate: Any) -> bool:
        # bool is a subclass of int in Python
        if isinstance(candidate, bool) or not isinstance(candidate, (int, float)):
            return False
        try:
            # ints beyond float range have no finite float value
            if not math.isfinite(candidate):
                return False
        except OverflowError:
            return False
        if self.minimum is not None and candidate < self.minimum:
            return False
        if self.maximum is not None and candidate > self.maximum:
            return False
        return True

    def from_string(self, raw: str) -> float:
        text = raw.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ProtectionSettingValidationError(
                f"{raw!r} is not a number", value=raw,
            ) from None
        if not math.isfinite(number):
            raise ProtectionSettingValidationError(
                f"{raw!r} is not a finite number", value=raw,
            )
        return number


class StringProtectionSetting(_SettingBase[str]):
    """Free text.  ``pattern`` must match the whole value when given."""

    kind = SettingKind.STRING

    def __init__(
        self,
        default: str = "",
        *,
        pattern: str | None = None,
        allow_empty: bool = True,
    ) -> None:
        self.pattern = re.compile(pattern) if pattern is not None else None
        self.allow_empty = allow_empty
        super().__init__(default)

    def validate(self, candidate: Any) -> bool:
        if not isinstance(candidate, str):
            return False
        if not candidate and not self.allow_empty:
            return False
        if self.pattern is not None and candidate and not self.pattern.fullmatch(candidate):
            return False
        return True

    def from_string(self, raw: str) -> str:
        return raw


class StringListProtectionSetting(_SettingBase[list[str]]):
    """An ordered list of unique strings.

    Raw text is split on commas; elements are stripped, empty elements
    dropped and repeats collapsed to their first occurrence.
    """

    kind = SettingKind.STRING_LIST

    def __init__(self, default: Sequence[str] | None = None) -> None:
        super().__init__(list(default) if default is not None else [])

    @staticmethod
    def _copy(value: list[str]) -> list[str]:
        return list(value)

    def validate_element(self, element: Any) -> bool:
        return isinstance(element, str)

    def validate(self, candidate: Any) -> bool:
        if not isinstance(candidate, list):
            return False
        if not all(self.validate_element(element) for element in candidate):
            return False
        return len(set(candidate)) == len(candidate)

    def from_string(self, raw: str) -> list[str]:
        parts = (part.strip() for part in raw.split(","))
        return list(dict.fromkeys(part for part in parts if part))

    def _element_from_string(self, raw: str) -> str:
        element = raw.strip()
        if not element:
            raise ProtectionSettingValidationError("List element must not be empty", value=raw)
        if not self.validate_element(element):
            raise ProtectionSettingValidationError(
                f"{raw!r} is not a valid {self.kind.value} element", value=raw,
            )
        return element

    def add_value(self, raw: str) -> bool:
        """Append an element.  Returns False if it was already present."""
        element = self._element_from_string(raw)
        if element in self._value:
            return False
        self.set_value([*self._value, element])
        return True

    def remove_value(self, raw: str) -> bool:
        """Remove an element.  Returns False if it was not present."""
        element = self._element_from_string(raw)
        if element not in self._value:
            return False
        self.set_value([item for item in self._value if item != element])
        return True


class UserIdListProtectionSetting(StringListProtectionSetting):
    """A list of chat user ids of the form ``@localpart:server``."""

    kind = SettingKind.USER_ID_LIST

    def validate_element(self, element: Any) -> bool:
        return isinstance(element, str) and bool(_USER_ID_RE.match(element))
