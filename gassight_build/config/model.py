from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from gassight_build.types import BuildType
from gassight_build.variants import DEFAULT_BUILD_TYPES, DEFAULT_FALLBACK_PROFILE


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """Project-level settings read from `configs/build.yaml`."""

    defaults: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    signing_profiles: tuple[str, ...] = ("debug",)
    build_types: Mapping[str, BuildType] = field(default_factory=lambda: DEFAULT_BUILD_TYPES)
    release_fallback_profile: str | None = DEFAULT_FALLBACK_PROFILE
