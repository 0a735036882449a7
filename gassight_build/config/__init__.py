"""Project settings: default seeds, signing profiles and build types.

- YAML-first settings under configs/build.yaml
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
"""

from __future__ import annotations

from gassight_build.config.loader import load_settings, settings_from_dict
from gassight_build.config.model import BuildSettings
from gassight_build.errors import ConfigError

__all__ = ["BuildSettings", "ConfigError", "load_settings", "settings_from_dict"]
