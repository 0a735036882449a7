"""Compiled-in fallbacks for every key the resolver requests.

The table may change between project releases; within one resolution pass it
is a constant. The surrounding build environment can seed platform levels via
`DefaultsTable.standard(overrides=...)` before the pass starts.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from .errors import ConfigError, InvalidValueError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_TRUE = frozenset({"true", "yes", "1"})
_FALSE = frozenset({"false", "no", "0"})


def _parse_integer(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(text)
    return int(text)


def _parse_string(text: str) -> str:
    return text


def _parse_boolean(text: str) -> bool:
    lowered = text.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(text)


@dataclass(frozen=True, slots=True)
class ValueType:
    name: str
    parse: Callable[[str], Any]


INTEGER = ValueType("integer", _parse_integer)
STRING = ValueType("string", _parse_string)
BOOLEAN = ValueType("boolean", _parse_boolean)


@dataclass(frozen=True, slots=True)
class DefaultValue:
    key: str
    fallback: Any
    parser: ValueType

    def parse(self, raw_value: str, *, key: str | None = None) -> Any:
        """Parse `raw_value` as this key's declared type.

        `key` overrides the name reported on failure (used for legacy aliases).
        """

        try:
            return self.parser.parse(raw_value.strip())
        except ValueError:
            raise InvalidValueError(key or self.key, raw_value, self.parser.name) from None


_STANDARD: tuple[DefaultValue, ...] = (
    DefaultValue("app.applicationId", "com.example.gassight_mobile", STRING),
    DefaultValue("app.namespace", "com.example.gassight_mobile", STRING),
    DefaultValue("app.versionCode", 1, INTEGER),
    DefaultValue("app.versionName", "1.0", STRING),
    DefaultValue("sdk.minLevel", 21, INTEGER),
    DefaultValue("sdk.targetLevel", 34, INTEGER),
    DefaultValue("sdk.compileLevel", 34, INTEGER),
    DefaultValue("sdk.ndkVersion", "26.1.10909125", STRING),
    DefaultValue("jvm.sourceCompatibility", "1.8", STRING),
    DefaultValue("jvm.target", "1.8", STRING),
    DefaultValue("build.signingProfile", "debug", STRING),
    DefaultValue("build.desugaring", False, BOOLEAN),
    DefaultValue("build.multiDex", False, BOOLEAN),
)

# Keys written by the Flutter tooling into local.properties.
LEGACY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "app.versionCode": "flutter.versionCode",
        "app.versionName": "flutter.versionName",
        "sdk.minLevel": "flutter.minSdkVersion",
        "sdk.targetLevel": "flutter.targetSdkVersion",
        "sdk.compileLevel": "flutter.compileSdkVersion",
        "sdk.ndkVersion": "flutter.ndkVersion",
    }
)


class DefaultsTable:
    """Static key -> DefaultValue lookup."""

    def __init__(self, entries: Mapping[str, DefaultValue]):
        self._entries: Mapping[str, DefaultValue] = MappingProxyType(dict(entries))

    @classmethod
    def standard(cls, overrides: Mapping[str, Any] | None = None) -> DefaultsTable:
        entries = {d.key: d for d in _STANDARD}
        for key, value in (overrides or {}).items():
            if key not in entries:
                raise ConfigError("unknown defaults key", path=f"defaults.{key}")
            base = entries[key]
            if isinstance(value, bool) and base.parser is not BOOLEAN:
                raise InvalidValueError(key, str(value), base.parser.name)
            entries[key] = DefaultValue(key, base.parse(str(value)), base.parser)
        return cls(entries)

    def get(self, key: str) -> DefaultValue:
        return self._entries[key]

    def keys(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"DefaultsTable({len(self._entries)} keys)"
