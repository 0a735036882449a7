"""Merge properties over defaults into a validated ResolvedBuildConfig."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .defaults import LEGACY_ALIASES, DefaultsTable
from .errors import InvariantViolationError
from .observability import get_logger
from .types import ResolvedBuildConfig

__all__ = ["ConfigResolver", "resolve", "validate"]

_log = get_logger("gassight_build.resolver")

# Dot-segmented tokens, each starting with a letter: com.example.app_name
_IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)+")

# The resolver emits the base variant; VariantSelector replaces it.
_BASE_BUILD_TYPE = "debug"


class ConfigResolver:
    def __init__(self, defaults: DefaultsTable | None = None):
        self._defaults = defaults or DefaultsTable.standard()

    @property
    def defaults(self) -> DefaultsTable:
        return self._defaults

    def value(self, raw: Mapping[str, str], key: str) -> Any:
        """Resolve one key: present value parsed strictly, else the default."""

        default = self._defaults.get(key)
        if key in raw:
            return default.parse(raw[key])
        alias = LEGACY_ALIASES.get(key)
        if alias is not None and alias in raw:
            return default.parse(raw[alias], key=alias)
        return default.fallback

    def resolve(self, raw: Mapping[str, str]) -> ResolvedBuildConfig:
        """Build the base configuration from `raw`.

        Raises:
            InvalidValueError: A present value does not parse as its type.
            InvariantViolationError: A cross-field rule is broken.
        """

        v = self.value
        config = ResolvedBuildConfig(
            application_id=v(raw, "app.applicationId"),
            namespace=v(raw, "app.namespace"),
            version_code=v(raw, "app.versionCode"),
            version_name=v(raw, "app.versionName"),
            min_platform_level=v(raw, "sdk.minLevel"),
            target_platform_level=v(raw, "sdk.targetLevel"),
            compile_platform_level=v(raw, "sdk.compileLevel"),
            ndk_version=v(raw, "sdk.ndkVersion"),
            java_compatibility=v(raw, "jvm.sourceCompatibility"),
            jvm_target=v(raw, "jvm.target"),
            build_type=_BASE_BUILD_TYPE,
            signing_profile=v(raw, "build.signingProfile"),
            desugaring_enabled=v(raw, "build.desugaring"),
            multidex_enabled=v(raw, "build.multiDex"),
            debuggable=False,
            minify_enabled=False,
        )
        validate(config)
        _log.debug("config_resolved", **config.as_dict())
        return config


def validate(config: ResolvedBuildConfig) -> None:
    """Check cross-field invariants; raise on the first broken rule."""

    if not _IDENTIFIER_RE.fullmatch(config.application_id):
        raise InvariantViolationError(
            "application_id_syntax", f"{config.application_id!r} is not a dot-segmented identifier"
        )
    if not _IDENTIFIER_RE.fullmatch(config.namespace):
        raise InvariantViolationError("namespace_syntax", f"{config.namespace!r} is not a dot-segmented identifier")
    if config.version_code <= 0:
        raise InvariantViolationError("version_code_positive", f"versionCode={config.version_code}")
    if not config.version_name.strip():
        raise InvariantViolationError("version_name_non_empty", "versionName is empty")

    levels = {
        "min": config.min_platform_level,
        "target": config.target_platform_level,
        "compile": config.compile_platform_level,
    }
    bad = [f"{name}={level}" for name, level in levels.items() if level <= 0]
    if bad:
        raise InvariantViolationError("platform_levels_positive", ", ".join(bad))
    if config.min_platform_level > config.target_platform_level:
        raise InvariantViolationError(
            "min_le_target",
            f"min={config.min_platform_level} > target={config.target_platform_level}",
        )
    if config.target_platform_level > config.compile_platform_level:
        raise InvariantViolationError(
            "target_le_compile",
            f"target={config.target_platform_level} > compile={config.compile_platform_level}",
        )
    if not config.signing_profile.strip():
        raise InvariantViolationError("signing_profile_non_empty", "signing profile name is empty")


def resolve(raw: Mapping[str, str], defaults: DefaultsTable | None = None) -> ResolvedBuildConfig:
    return ConfigResolver(defaults).resolve(raw)
