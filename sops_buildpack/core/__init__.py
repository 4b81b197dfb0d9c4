"""
Core functionality for the sops buildpack.

This package contains the foundational modules the pipeline stages depend on.
"""

from .exceptions import (
    BuildpackError,
    ArgumentContractError,
    ConfigError,
    MissingConfigVarError,
    InstallError,
    DownloadError,
    ArtifactValidationError,
)

from .invocation import InvocationArgs, parse_invocation

from .locking import CacheLockTimeout, cache_entry_lock

__all__ = [
    # Exceptions
    "BuildpackError",
    "ArgumentContractError",
    "ConfigError",
    "MissingConfigVarError",
    "InstallError",
    "DownloadError",
    "ArtifactValidationError",
    "CacheLockTimeout",
    # Invocation
    "InvocationArgs",
    "parse_invocation",
    # Locking
    "cache_entry_lock",
]
