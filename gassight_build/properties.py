"""Loader for `local.properties`-style key/value files.

Format:
- one `key=value` (or `key:value`) entry per line, UTF-8
- blank lines and lines starting with `#` or `!` are ignored
- whitespace around keys and values is trimmed
- `\\=`, `\\:`, `\\\\`, `\\t`, `\\n` and `\\uXXXX` escapes are honoured
- a line ending in an unescaped backslash continues on the next line
- when a key repeats, the last occurrence wins

A missing file is not an error: it yields empty properties.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from .errors import MalformedConfigError
from .observability import get_logger

__all__ = ["RawProperties", "load", "parse_lines"]

_log = get_logger("gassight_build.properties")

_COMMENT_PREFIXES = ("#", "!")
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX_RE = re.compile(r"[0-9A-Fa-f]{4}")


@dataclass(frozen=True)
class RawProperties(Mapping[str, str]):
    """Immutable string-to-string mapping loaded from a properties file."""

    entries: Mapping[str, str] = field(default_factory=dict)
    source: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __getitem__(self, key: str) -> str:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def _unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        i += 1
        if ch != "\\":
            out.append(ch)
            continue
        nxt = text[i : i + 1]
        i += 1
        if nxt == "u":
            digits = text[i : i + 4]
            if not _HEX_RE.fullmatch(digits):
                raise ValueError(f"malformed \\u escape: \\u{digits}")
            out.append(chr(int(digits, 16)))
            i += 4
            continue
        out.append(_ESCAPES.get(nxt, nxt))
    return "".join(out)


def _continues(text: str) -> bool:
    """True when `text` ends in an odd run of backslashes."""

    return (len(text) - len(text.rstrip("\\"))) % 2 == 1


def _logical_lines(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Join backslash-continued lines; yield (first line number, text)."""

    pending: list[str] = []
    start = 0
    for lineno, raw_line in enumerate(lines, start=1):
        text = raw_line.rstrip("\r\n").lstrip()
        if not pending:
            if not text.strip() or text.startswith(_COMMENT_PREFIXES):
                continue
            start = lineno
        if _continues(text):
            pending.append(text[:-1])
            continue
        pending.append(text)
        yield start, "".join(pending).strip()
        pending = []
    if pending:
        yield start, "".join(pending).strip()


def _split_entry(line: str) -> tuple[str, str] | None:
    """Split at the first unescaped separator, or return None if there is none."""

    escaped = False
    for i, ch in enumerate(line):
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch in _SEPARATORS:
            return line[:i], line[i + 1 :]
    return None


def parse_lines(lines: Iterable[str], *, source: str = "<memory>") -> dict[str, str]:
    values: dict[str, str] = {}
    for lineno, line in _logical_lines(lines):
        parts = _split_entry(line)
        if parts is None:
            raise MalformedConfigError(source, lineno, "expected 'key=value'")

        try:
            key = _unescape(parts[0].strip())
            value = _unescape(parts[1].strip())
        except ValueError as e:
            raise MalformedConfigError(source, lineno, str(e)) from None
        if not key:
            raise MalformedConfigError(source, lineno, "empty key")

        values[key] = value
    return values



def load(path: str | Path) -> RawProperties:
    """Load a properties file; an absent file yields empty properties.

    Raises:
        MalformedConfigError: If a line cannot be parsed, the file is not
            valid UTF-8, or it cannot be read.
    """

    props_path = Path(path)
    source = str(props_path)
    if not props_path.exists():
        _log.info("properties_absent", path=source)
        return RawProperties(source=source)

    try:
        with props_path.open("r", encoding="utf-8") as fh:
            values = parse_lines(fh, source=source)
    except UnicodeDecodeError as e:
        raise MalformedConfigError(source, None, f"not valid UTF-8: {e.reason}") from e
    except OSError as e:
        raise MalformedConfigError(source, None, f"cannot read file: {e.strerror or e}") from e

    _log.info("properties_loaded", path=source, keys=sorted(values))
    return RawProperties(values, source=source)
