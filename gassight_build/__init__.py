"""Build-configuration resolver for the GasSight mobile app.

Derives the effective build parameters for one variant from `local.properties`,
compiled-in defaults and build-type rules.
"""

from __future__ import annotations

import logging

from .defaults import DefaultsTable, DefaultValue
from .errors import (
    BuildConfigError,
    ConfigError,
    InvalidValueError,
    InvariantViolationError,
    MalformedConfigError,
    PublishError,
    UnknownVariantError,
)
from .pipeline import resolve_variants, run_pass
from .properties import RawProperties, load
from .publisher import ConfigPublisher
from .resolver import ConfigResolver, resolve
from .types import BuildType, ResolvedBuildConfig
from .variants import VariantSelector

__all__ = [
    "BuildConfigError",
    "BuildType",
    "ConfigError",
    "ConfigPublisher",
    "ConfigResolver",
    "DefaultValue",
    "DefaultsTable",
    "InvalidValueError",
    "InvariantViolationError",
    "MalformedConfigError",
    "PublishError",
    "RawProperties",
    "ResolvedBuildConfig",
    "UnknownVariantError",
    "VariantSelector",
    "__version__",
    "load",
    "resolve",
    "resolve_variants",
    "run_pass",
]

__version__ = "0.1.0"

# Library code never prints; output appears only once the caller configures logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())
