"""Build-type selection: signing profile and feature toggles per variant.

Signing profile per build type:
- A build type that names a profile uses it. If that profile is not
  configured, the selector falls back to `release_fallback_profile` (default
  `debug`) and logs a `signing_profile_fallback` warning. This applies to any
  build type that names an unconfigured profile; in practice it is `release`
  without release credentials. Such an artifact is fine for local installs but
  must not be distributed; set the fallback to `None` to make it a hard error.
- A build type that names no profile inherits `build.signingProfile` from the
  resolved config. That name was chosen explicitly, so it must be configured;
  no fallback applies.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from types import MappingProxyType

from .errors import InvariantViolationError, UnknownVariantError
from .observability import get_logger
from .resolver import validate
from .types import BuildType, ResolvedBuildConfig

__all__ = ["DEFAULT_BUILD_TYPES", "DEFAULT_FALLBACK_PROFILE", "VariantSelector"]

_log = get_logger("gassight_build.variants")

DEFAULT_FALLBACK_PROFILE = "debug"

DEFAULT_BUILD_TYPES: Mapping[str, BuildType] = MappingProxyType(
    {
        "debug": BuildType(name="debug", debuggable=True),
        "release": BuildType(name="release", signing_profile="release"),
    }
)


class VariantSelector:
    def __init__(
        self,
        build_types: Mapping[str, BuildType] | None = None,
        *,
        signing_profiles: Iterable[str] = ("debug",),
        release_fallback_profile: str | None = DEFAULT_FALLBACK_PROFILE,
    ) -> None:
        self._build_types: Mapping[str, BuildType] = MappingProxyType(
            dict(DEFAULT_BUILD_TYPES if build_types is None else build_types)
        )
        self._signing_profiles = frozenset(signing_profiles)
        self._fallback = release_fallback_profile

    @property
    def build_types(self) -> tuple[str, ...]:
        return tuple(sorted(self._build_types))

    def signing_profile_for(self, build_type: BuildType, inherited: str) -> str:
        if build_type.signing_profile is None:
            if inherited in self._signing_profiles:
                return inherited
            raise InvariantViolationError(
                "signing_profile_known",
                f"build.signingProfile {inherited!r} is not configured, "
                f"configured: {', '.join(sorted(self._signing_profiles)) or '<none>'}",
            )

        profile = build_type.signing_profile
        if profile in self._signing_profiles:
            return profile

        if self._fallback is not None and self._fallback in self._signing_profiles:
            _log.warning(
                "signing_profile_fallback",
                build_type=build_type.name,
                requested_profile=profile,
                signing_profile=self._fallback,
                note="artifact is signed with fallback credentials; do not distribute",
            )
            return self._fallback

        raise InvariantViolationError(
            "signing_profile_known",
            f"build type {build_type.name!r} needs signing profile {profile!r}, "
            f"configured: {', '.join(sorted(self._signing_profiles)) or '<none>'}",
        )

    def select(self, build_type: str, config: ResolvedBuildConfig) -> ResolvedBuildConfig:
        """Return a copy of `config` with the variant's profile and toggles attached.

        Raises:
            UnknownVariantError: `build_type` is not configured.
            InvariantViolationError: No usable signing profile for the variant.
        """

        bt = self._build_types.get(build_type)
        if bt is None:
            raise UnknownVariantError(build_type, self.build_types)

        selected = replace(
            config,
            build_type=bt.name,
            signing_profile=self.signing_profile_for(bt, config.signing_profile),
            desugaring_enabled=(
                config.desugaring_enabled if bt.desugaring_enabled is None else bt.desugaring_enabled
            ),
            multidex_enabled=config.multidex_enabled if bt.multidex_enabled is None else bt.multidex_enabled,
            debuggable=bt.debuggable,
            minify_enabled=bt.minify_enabled,
        )
        validate(selected)
        _log.info(
            "variant_selected",
            build_type=selected.build_type,
            signing_profile=selected.signing_profile,
            desugaring_enabled=selected.desugaring_enabled,
            multidex_enabled=selected.multidex_enabled,
        )
        return selected
