"""
Reader for Heroku config vars exposed as files in the build env directory.

Each config var is a file named after the variable whose full content is
the value. Values are returned to the caller rather than exported into
the process environment.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

from sops_buildpack.core.exceptions import MissingConfigVarError

logger = logging.getLogger(__name__)

VERSION_VARIABLE = "SOPS_VERSION"
DOWNLOAD_URL_VARIABLE = "SOPS_DOWNLOAD_URL"
CHECKSUM_VARIABLE = "SOPS_SHA256"

REQUIRED_VARIABLES = (VERSION_VARIABLE,)
OPTIONAL_VARIABLES = (DOWNLOAD_URL_VARIABLE, CHECKSUM_VARIABLE)

ConfigVars = Dict[str, str]


def _read_value(path: Path) -> str:
    # Trailing newlines as with shell $(cat file); surrounding spaces too
    return path.read_text(encoding="utf-8").strip()


def read_config_vars(
    env_dir: Optional[Path],
    required: Sequence[str] = REQUIRED_VARIABLES,
    optional: Sequence[str] = OPTIONAL_VARIABLES,
) -> ConfigVars:
    """
    Read config vars from the env directory.

    A missing env directory is treated as "no configuration available" and
    no reads are performed; older build APIs did not supply one.

    Args:
        env_dir: Directory containing one file per config var (may be None)
        required: Names that must be present when env_dir exists
        optional: Names read only when present

    Returns:
        Mapping of variable name to value

    Raises:
        MissingConfigVarError: If env_dir exists but a required file is missing

    Example:
        >>> read_config_vars(Path("/tmp/env"))
        {'SOPS_VERSION': 'v3.7.1'}
    """
    if env_dir is None or not Path(env_dir).is_dir():
        logger.debug(f"No env directory at {env_dir}, skipping config var reads")
        return {}

    env_dir = Path(env_dir)
    values: ConfigVars = {}

    for name in required:
        var_file = env_dir / name
        if not var_file.is_file():
            raise MissingConfigVarError(name)
        values[name] = _read_value(var_file)
        logger.debug(f"Read required config var {name}")

    for name in optional:
        var_file = env_dir / name
        if var_file.is_file():
            values[name] = _read_value(var_file)
            logger.debug(f"Read optional config var {name}")

    return values


def resolve_version(
    config_vars: Mapping[str, str], environ: Optional[Mapping[str, str]] = None
) -> str:
    """
    Determine the sops version to install.

    Falls back to the process environment, where older build APIs exported
    config vars directly.

    Args:
        config_vars: Values returned by read_config_vars
        environ: Process environment (default: os.environ)

    Returns:
        Non-empty version string

    Raises:
        MissingConfigVarError: If no non-empty version is available
    """
    if environ is None:
        environ = os.environ

    version = config_vars.get(VERSION_VARIABLE)
    if version is None:
        version = environ.get(VERSION_VARIABLE, "").strip()

    if not version:
        raise MissingConfigVarError(VERSION_VARIABLE)

    return version
