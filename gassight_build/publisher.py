"""Hand the resolved configuration to the external build pipeline."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .errors import PublishError
from .observability import get_logger
from .types import ResolvedBuildConfig

__all__ = ["ConfigPublisher"]

_log = get_logger("gassight_build.publisher")


class ConfigPublisher:
    """Holds one published configuration for the rest of the build session.

    When `output_path` is set, the snapshot is also written there as JSON so
    that an out-of-process build step can read it.
    """

    def __init__(self, output_path: str | Path | None = None) -> None:
        self._output_path = Path(output_path) if output_path is not None else None
        self._config: ResolvedBuildConfig | None = None
        self._snapshot: Mapping[str, Any] | None = None

    @property
    def published(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> ResolvedBuildConfig:
        if self._config is None:
            raise PublishError("no configuration has been published")
        return self._config

    @property
    def snapshot(self) -> Mapping[str, Any]:
        if self._snapshot is None:
            raise PublishError("no configuration has been published")
        return self._snapshot

    def publish(self, config: ResolvedBuildConfig) -> Mapping[str, Any]:
        """Publish `config` once; a second call or a failed hand-off raises PublishError."""

        if self._config is not None:
            raise PublishError("configuration already published for this build session")

        snapshot = MappingProxyType(config.as_dict())
        if self._output_path is not None:
            try:
                self._output_path.parent.mkdir(parents=True, exist_ok=True)
                self._output_path.write_text(
                    json.dumps(dict(snapshot), indent=2, sort_keys=True) + "\n", encoding="utf-8"
                )
            except OSError as e:
                raise PublishError(f"{self._output_path}: cannot write configuration: {e}") from e

        self._config = config
        self._snapshot = snapshot
        _log.info(
            "build_config_published",
            build_type=config.build_type,
            output=str(self._output_path) if self._output_path else None,
            config=dict(snapshot),
        )
        return snapshot
