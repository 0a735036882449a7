"""The resolution pass: Unloaded -> Loaded -> Resolved -> Variant-Selected -> Published.

Each stage either completes or raises; nothing is published after a failure.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from . import properties
from .config import BuildSettings
from .defaults import DefaultsTable
from .errors import BuildConfigError
from .observability import add_error, bind_context, get_logger, new_trace_id, set_stage
from .publisher import ConfigPublisher
from .resolver import ConfigResolver
from .types import ResolvedBuildConfig
from .variants import VariantSelector

__all__ = ["Stage", "resolve_variants", "run_pass", "selector_for"]

_log = get_logger("gassight_build.pipeline")


class Stage(str, Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"
    RESOLVED = "resolved"
    VARIANT_SELECTED = "variant_selected"
    PUBLISHED = "published"


def selector_for(settings: BuildSettings) -> VariantSelector:
    return VariantSelector(
        settings.build_types,
        signing_profiles=settings.signing_profiles,
        release_fallback_profile=settings.release_fallback_profile,
    )


def _select(properties_path: str | Path, build_type: str, settings: BuildSettings) -> ResolvedBuildConfig:
    set_stage(Stage.UNLOADED.value)
    raw = properties.load(properties_path)
    set_stage(Stage.LOADED.value)

    resolver = ConfigResolver(DefaultsTable.standard(settings.defaults))
    config = resolver.resolve(raw)
    set_stage(Stage.RESOLVED.value)

    selected = selector_for(settings).select(build_type, config)
    set_stage(Stage.VARIANT_SELECTED.value)
    return selected


def run_pass(
    properties_path: str | Path,
    build_type: str,
    *,
    settings: BuildSettings | None = None,
    publisher: ConfigPublisher | None = None,
) -> ResolvedBuildConfig:
    """Run one full resolution pass and publish the result.

    Raises:
        BuildConfigError: From whichever stage failed; the build must abort.
    """

    settings = settings or BuildSettings()
    publisher = publisher or ConfigPublisher()
    bind_context(trace_id=new_trace_id(), build_type=build_type)

    try:
        config = _select(properties_path, build_type, settings)
        publisher.publish(config)
    except BuildConfigError as e:
        add_error(str(e))
        _log.error("build_config_failed", **e.to_dict())
        raise

    set_stage(Stage.PUBLISHED.value)
    return config


def resolve_variants(
    properties_path: str | Path,
    build_types: Iterable[str],
    *,
    settings: BuildSettings | None = None,
) -> dict[str, ResolvedBuildConfig]:
    """Resolve several variants independently without publishing them."""

    settings = settings or BuildSettings()
    out: dict[str, ResolvedBuildConfig] = {}
    for build_type in build_types:
        bind_context(trace_id=new_trace_id(), build_type=build_type)
        out[build_type] = _select(properties_path, build_type, settings)
    return out
