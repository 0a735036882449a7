from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from gassight_build.errors import InvariantViolationError, UnknownVariantError
from gassight_build.properties import RawProperties
from gassight_build.resolver import resolve
from gassight_build.types import BuildType, ResolvedBuildConfig
from gassight_build.variants import VariantSelector


@pytest.fixture()
def config() -> ResolvedBuildConfig:
    return resolve(RawProperties())


def test_unknown_build_type_is_rejected(config: ResolvedBuildConfig) -> None:
    with pytest.raises(UnknownVariantError) as ei:
        VariantSelector().select("staging", config)

    assert ei.value.build_type == "staging"
    assert "debug" in str(ei.value) and "release" in str(ei.value)


def test_release_without_release_profile_falls_back_to_debug(
    config: ResolvedBuildConfig, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="gassight_build.variants"):
        out = VariantSelector().select("release", config)

    assert out.build_type == "release"
    assert out.signing_profile == "debug"
    assert out.debuggable is False

    warnings = [r for r in caplog.records if r.getMessage() == "signing_profile_fallback"]
    assert len(warnings) == 1
    assert warnings[0].requested_profile == "release"  # type: ignore[attr-defined]


def test_release_uses_release_profile_when_configured(config: ResolvedBuildConfig) -> None:
    selector = VariantSelector(signing_profiles=("debug", "release"))
    assert selector.select("release", config).signing_profile == "release"


def test_fallback_can_be_disabled(config: ResolvedBuildConfig) -> None:
    selector = VariantSelector(release_fallback_profile=None)

    with pytest.raises(InvariantViolationError) as ei:
        selector.select("release", config)

    assert ei.value.rule == "signing_profile_known"


def test_debug_variant(config: ResolvedBuildConfig) -> None:
    out = VariantSelector().select("debug", config)

    assert out.build_type == "debug"
    assert out.signing_profile == "debug"
    assert out.debuggable is True


def test_select_returns_new_config_and_leaves_input_untouched(config: ResolvedBuildConfig) -> None:
    before = replace(config)
    out = VariantSelector().select("release", config)

    assert out is not config
    assert config == before


def test_toggles_inherit_unless_build_type_sets_them() -> None:
    base = resolve(RawProperties({"build.desugaring": "true", "build.multiDex": "true"}))
    selector = VariantSelector(
        {
            "debug": BuildType(name="debug", signing_profile="debug"),
            "profile": BuildType(name="profile", signing_profile="debug", desugaring_enabled=False),
        }
    )

    inherited = selector.select("debug", base)
    assert inherited.desugaring_enabled is True
    assert inherited.multidex_enabled is True

    overridden = selector.select("profile", base)
    assert overridden.desugaring_enabled is False
    assert overridden.multidex_enabled is True


def test_custom_build_types_replace_defaults(config: ResolvedBuildConfig) -> None:
    selector = VariantSelector({"qa": BuildType(name="qa", signing_profile="debug")})

    assert selector.build_types == ("qa",)
    with pytest.raises(UnknownVariantError):
        selector.select("release", config)


def test_debug_inherits_signing_profile_from_properties() -> None:
    base = resolve(RawProperties({"build.signingProfile": "release"}))
    selector = VariantSelector(signing_profiles=("debug", "release"))

    assert selector.select("debug", base).signing_profile == "release"


def test_unconfigured_inherited_profile_is_rejected_without_fallback(
    caplog: pytest.LogCaptureFixture,
) -> None:
    base = resolve(RawProperties({"build.signingProfile": "nonexistent"}))

    with caplog.at_level(logging.WARNING, logger="gassight_build.variants"):
        with pytest.raises(InvariantViolationError) as ei:
            VariantSelector().select("debug", base)

    assert ei.value.rule == "signing_profile_known"
    assert "nonexistent" in str(ei.value)
    assert not [r for r in caplog.records if r.getMessage() == "signing_profile_fallback"]


def test_fallback_applies_to_any_build_type_naming_an_unknown_profile(config: ResolvedBuildConfig) -> None:
    selector = VariantSelector({"beta": BuildType(name="beta", signing_profile="beta")})
    assert selector.select("beta", config).signing_profile == "debug"
