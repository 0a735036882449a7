from __future__ import annotations

from pathlib import Path

import pytest

from gassight_build.errors import MalformedConfigError
from gassight_build.properties import RawProperties, load, parse_lines


def _write(tmp_path: Path, *lines: str) -> Path:
    p = tmp_path / "local.properties"
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return p


def test_missing_file_yields_empty_properties(tmp_path: Path) -> None:
    raw = load(tmp_path / "absent.properties")
    assert isinstance(raw, RawProperties)
    assert len(raw) == 0
    assert raw.source == str(tmp_path / "absent.properties")


def test_empty_file_yields_empty_properties(tmp_path: Path) -> None:
    p = tmp_path / "local.properties"
    p.write_text("", encoding="utf-8")
    assert dict(load(p)) == {}


def test_comments_blank_lines_and_separators(tmp_path: Path) -> None:
    p = _write(
        tmp_path,
        "# generated by flutter",
        "! also a comment",
        "",
        "app.versionCode=42",
        "app.versionName : 2.3.1",
        "  sdk.minLevel =  23  ",
    )
    assert dict(load(p)) == {
        "app.versionCode": "42",
        "app.versionName": "2.3.1",
        "sdk.minLevel": "23",
    }


def test_last_definition_wins(tmp_path: Path) -> None:
    p = _write(tmp_path, "app.versionCode=1", "app.versionCode=2")
    assert load(p)["app.versionCode"] == "2"


def test_escapes_are_decoded(tmp_path: Path) -> None:
    p = _write(tmp_path, r"sdk.dir=C\:\\Users\\me\\Android", r"weird\=key=a=b")
    raw = load(p)
    assert raw["sdk.dir"] == "C:\\Users\\me\\Android"
    assert raw["weird=key"] == "a=b"


def test_value_may_be_empty(tmp_path: Path) -> None:
    p = _write(tmp_path, "app.versionName=")
    assert load(p)["app.versionName"] == ""


def test_line_without_separator_reports_file_and_line(tmp_path: Path) -> None:
    p = _write(tmp_path, "app.versionCode=1", "# ok", "this is not a property")

    with pytest.raises(MalformedConfigError) as ei:
        load(p)

    assert ei.value.path == str(p)
    assert ei.value.line == 3
    assert f"{p}:3" in str(ei.value)


def test_empty_key_is_malformed(tmp_path: Path) -> None:
    p = _write(tmp_path, "=value")

    with pytest.raises(MalformedConfigError) as ei:
        load(p)

    assert ei.value.line == 1
    assert "empty key" in str(ei.value)


def test_invalid_utf8_is_malformed(tmp_path: Path) -> None:
    p = tmp_path / "local.properties"
    p.write_bytes(b"app.versionName=\xff\xfe\n")

    with pytest.raises(MalformedConfigError) as ei:
        load(p)

    assert "UTF-8" in str(ei.value)


def test_raw_properties_are_read_only() -> None:
    raw = RawProperties(parse_lines(["a=1"]))
    with pytest.raises(TypeError):
        raw.entries["a"] = "2"  # type: ignore[index]
    assert raw["a"] == "1"


def test_backslash_continues_on_next_line(tmp_path: Path) -> None:
    p = _write(tmp_path, "app.versionName=2.3\\", "  .1", "app.versionCode=7")
    assert dict(load(p)) == {"app.versionName": "2.3.1", "app.versionCode": "7"}


def test_continuation_keeps_first_line_number_for_errors(tmp_path: Path) -> None:
    p = _write(tmp_path, "# header", "no separator \\", "  here either")

    with pytest.raises(MalformedConfigError) as ei:
        load(p)

    assert ei.value.line == 2


def test_escaped_trailing_backslash_does_not_continue(tmp_path: Path) -> None:
    p = _write(tmp_path, r"sdk.dir=C\:\\", "app.versionCode=7")
    assert dict(load(p)) == {"sdk.dir": "C:\\", "app.versionCode": "7"}


def test_continuation_at_end_of_file(tmp_path: Path) -> None:
    p = tmp_path / "local.properties"
    p.write_text("app.versionName=1.0\\", encoding="utf-8")
    assert load(p)["app.versionName"] == "1.0"


def test_unicode_escape_is_decoded(tmp_path: Path) -> None:
    p = _write(tmp_path, r"app.versionName=caf\u00e9", r"k\u0041y=v")
    raw = load(p)
    assert raw["app.versionName"] == "café"
    assert raw["kAy"] == "v"


@pytest.mark.parametrize("value", [r"caf\u00", r"caf\uZZZZ", "caf\\u"])
def test_truncated_unicode_escape_is_malformed(tmp_path: Path, value: str) -> None:
    p = _write(tmp_path, "app.versionCode=1", f"app.versionName={value}")

    with pytest.raises(MalformedConfigError) as ei:
        load(p)

    assert ei.value.line == 2
    assert "\\u" in str(ei.value)
