from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ResolvedBuildConfig:
    """Effective build parameters for one variant.

    Instances are always fully populated; stages derive new instances with
    `dataclasses.replace` rather than mutating.
    """

    application_id: str
    namespace: str
    version_code: int
    version_name: str
    min_platform_level: int
    target_platform_level: int
    compile_platform_level: int
    ndk_version: str
    java_compatibility: str
    jvm_target: str
    build_type: str
    signing_profile: str
    desugaring_enabled: bool
    multidex_enabled: bool
    debuggable: bool
    minify_enabled: bool

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class BuildType:
    """Toggles attached to a named variant.

    A `None` toggle inherits the value already present on the resolved config;
    a `None` signing profile inherits `build.signingProfile`.
    """

    name: str
    signing_profile: str | None = None
    desugaring_enabled: bool | None = None
    multidex_enabled: bool | None = None
    debuggable: bool = False
    minify_enabled: bool = False
