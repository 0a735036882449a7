"""Project settings loader (YAML + strict env expansion).

- `${ENV_VAR}` inside string values is expanded; missing or empty variables
  are collected and reported together as one ConfigError.
- A `.env` next to the settings file is loaded first and never overrides
  variables already set in the environment.
- An absent settings file yields the built-in settings.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from dotenv import load_dotenv

from gassight_build.config.model import BuildSettings
from gassight_build.defaults import BOOLEAN, INTEGER, STRING, DefaultsTable
from gassight_build.errors import ConfigError
from gassight_build.types import BuildType
from gassight_build.variants import DEFAULT_BUILD_TYPES, DEFAULT_FALLBACK_PROFILE


_ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

_BUILD_TYPE_FLAGS = ("desugaring_enabled", "multidex_enabled", "debuggable", "minify_enabled")


@dataclass(frozen=True, slots=True)
class _UnresolvedEnvRef:
    var_name: str
    key_path: str
    reason: str  # "missing" | "empty"


def _expand_env_in_obj(obj: Any, *, key_path: str, unresolved: list[_UnresolvedEnvRef]) -> Any:
    if isinstance(obj, str):
        def repl(match: re.Match[str]) -> str:
            name = match.group(1)
            value = os.getenv(name)
            if value is None or value == "":
                reason = "missing" if value is None else "empty"
                unresolved.append(_UnresolvedEnvRef(var_name=name, key_path=key_path, reason=reason))
                return match.group(0)
            return value

        return _ENV_PLACEHOLDER_RE.sub(repl, obj)

    if isinstance(obj, Mapping):
        return {
            str(k): _expand_env_in_obj(v, key_path=f"{key_path}.{k}" if key_path else str(k), unresolved=unresolved)
            for k, v in obj.items()
        }

    if isinstance(obj, list):
        return [
            _expand_env_in_obj(v, key_path=f"{key_path}[{i}]", unresolved=unresolved) for i, v in enumerate(obj)
        ]

    return obj


def _mapping(raw: Mapping[str, Any], key: str, *, path: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError("must be a mapping", path=path)
    return value


def _non_empty_str(value: Any, *, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("must be a non-empty string", path=path)
    return value.strip()


def _parse_build_types(raw: Mapping[str, Any]) -> dict[str, BuildType]:
    build_types = dict(DEFAULT_BUILD_TYPES)
    for name, spec in raw.items():
        path = f"build_types.{name}"
        if spec is None:
            spec = {}
        if not isinstance(spec, Mapping):
            raise ConfigError("must be a mapping", path=path)

        unknown = set(spec) - {"signing_profile", *_BUILD_TYPE_FLAGS}
        if unknown:
            raise ConfigError(f"unknown fields: {', '.join(sorted(unknown))}", path=path)

        base = build_types.get(name)
        # Absent or null: inherit build.signingProfile from the resolved config.
        profile = spec.get("signing_profile", base.signing_profile if base else None)
        if profile is not None:
            profile = _non_empty_str(profile, path=f"{path}.signing_profile")

        flags: dict[str, Any] = {}
        for flag in _BUILD_TYPE_FLAGS:
            if flag in spec:
                value = spec[flag]
                if not isinstance(value, bool):
                    raise ConfigError("must be true or false", path=f"{path}.{flag}")
                flags[flag] = value
            elif base is not None:
                flags[flag] = getattr(base, flag)

        build_types[name] = BuildType(name=name, signing_profile=profile, **flags)
    return build_types


def _parse_defaults(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Accept only scalars that fit the key's declared type.

    YAML reads `1.10` as a float and `~` as None; passing those through `str()`
    would silently turn them into "1.1" and "None".
    """

    table = DefaultsTable.standard()
    defaults: dict[str, Any] = {}
    for key, value in raw.items():
        path = f"defaults.{key}"
        if key not in table:
            raise ConfigError("unknown defaults key", path=path)

        parser = table.get(key).parser
        if isinstance(value, str):
            pass
        elif parser is INTEGER and isinstance(value, int) and not isinstance(value, bool):
            pass
        elif parser is BOOLEAN and isinstance(value, bool):
            pass
        else:
            hint = " (quote it in YAML)" if parser is STRING else ""
            raise ConfigError(f"expected {parser.name}, got {type(value).__name__} {value!r}{hint}", path=path)
        defaults[key] = value

    # Fail early on unparseable seeds.
    DefaultsTable.standard(defaults)
    return defaults


def settings_from_dict(raw: Mapping[str, Any]) -> BuildSettings:
    """Validate an already env-expanded settings mapping."""

    unknown = set(raw) - {"defaults", "signing", "build_types"}
    if unknown:
        raise ConfigError(f"unknown sections: {', '.join(sorted(unknown))}")

    defaults = _parse_defaults(_mapping(raw, "defaults", path="defaults"))

    signing = _mapping(raw, "signing", path="signing")
    profiles_raw = signing.get("profiles", ["debug"])
    if not isinstance(profiles_raw, list) or not profiles_raw:
        raise ConfigError("must be a non-empty list", path="signing.profiles")
    profiles = tuple(
        _non_empty_str(p, path=f"signing.profiles[{i}]") for i, p in enumerate(profiles_raw)
    )

    if "release_fallback" in signing:
        fallback_raw = signing["release_fallback"]
        fallback = None if fallback_raw is None else _non_empty_str(fallback_raw, path="signing.release_fallback")
    else:
        fallback = DEFAULT_FALLBACK_PROFILE
    if fallback is not None and fallback not in profiles:
        raise ConfigError(f"profile {fallback!r} is not listed in signing.profiles", path="signing.release_fallback")

    build_types = _parse_build_types(_mapping(raw, "build_types", path="build_types"))

    return BuildSettings(
        defaults=MappingProxyType(defaults),
        signing_profiles=profiles,
        build_types=MappingProxyType(build_types),
        release_fallback_profile=fallback,
    )


def load_settings(path: str | Path | None, *, load_dotenv_file: bool = True) -> BuildSettings:
    """Load project settings from a YAML file.

    Args:
        path: Settings file. `None` or a non-existent path yields the built-in settings.
        load_dotenv_file: Whether to load a `.env` next to the settings file first.

    Raises:
        ConfigError: If the YAML is invalid, env expansion is unresolved, or a
            field fails validation.
    """

    if path is None:
        return BuildSettings()

    settings_path = Path(path)
    if not settings_path.exists():
        return BuildSettings()

    if load_dotenv_file:
        load_dotenv(settings_path.parent / ".env", override=False)

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"failed to read YAML settings: {e}", path=str(settings_path)) from e

    if raw is None:
        return BuildSettings()
    if not isinstance(raw, Mapping):
        raise ConfigError("top-level YAML must be a mapping", path=str(settings_path))

    unresolved: list[_UnresolvedEnvRef] = []
    expanded = _expand_env_in_obj(raw, key_path="", unresolved=unresolved)
    if unresolved:
        lines = [f"unresolved environment variables in {settings_path}:"]
        for ref in unresolved:
            lines.append(f"- {ref.var_name} ({ref.reason}) at {ref.key_path or '<root>'}")
        raise ConfigError("\n".join(lines))

    return settings_from_dict(expanded)
