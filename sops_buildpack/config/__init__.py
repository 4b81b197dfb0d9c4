"""
Configuration for the sops buildpack.

Provides config var reading from the build env directory and the
composition of tunable settings.
"""

from .env_dir import (
    REQUIRED_VARIABLES,
    OPTIONAL_VARIABLES,
    ConfigVars,
    read_config_vars,
    resolve_version,
)
from .settings import BuildpackSettings, load_settings

__all__ = [
    "REQUIRED_VARIABLES",
    "OPTIONAL_VARIABLES",
    "ConfigVars",
    "read_config_vars",
    "resolve_version",
    "BuildpackSettings",
    "load_settings",
]
