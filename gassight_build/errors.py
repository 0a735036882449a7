from __future__ import annotations

from typing import Any


class BuildConfigError(Exception):
    """Base exception for this project.

    Every resolution failure is terminal for the current build.
    """

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "error_message": str(self)}


class ConfigError(BuildConfigError):
    """Raised when the project settings file is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "path": self.path}


class MalformedConfigError(BuildConfigError):
    """The properties file exists but cannot be parsed."""

    def __init__(self, path: str, line: int | None, reason: str):
        where = f"{path}:{line}" if line is not None else path
        super().__init__(f"{where}: {reason}")
        self.path = path
        self.line = line
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "path": self.path, "line": self.line}


class InvalidValueError(BuildConfigError):
    """A key is present but its value does not parse as the declared type."""

    def __init__(self, key: str, raw_value: str, expected_type: str):
        super().__init__(f"{key}: expected {expected_type}, got {raw_value!r}")
        self.key = key
        self.raw_value = raw_value
        self.expected_type = expected_type

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "key": self.key,
            "raw_value": self.raw_value,
            "expected_type": self.expected_type,
        }


class InvariantViolationError(BuildConfigError):
    """A cross-field rule does not hold for the resolved values."""

    def __init__(self, rule: str, detail: str = ""):
        super().__init__(f"{rule}: {detail}" if detail else rule)
        self.rule = rule
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "rule": self.rule}


class UnknownVariantError(BuildConfigError):
    def __init__(self, build_type: str, known: tuple[str, ...] = ()):
        hint = f" (known: {', '.join(known)})" if known else ""
        super().__init__(f"unknown build type {build_type!r}{hint}")
        self.build_type = build_type
        self.known = known

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "build_type": self.build_type}


class PublishError(BuildConfigError):
    """The resolved configuration could not be handed to the build pipeline."""
