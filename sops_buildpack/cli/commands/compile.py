"""
Compile command implementation.

Runs the install pipeline: bind arguments, read config vars, install
sops from cache or download, then prepare the runtime PATH.
"""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from sops_buildpack.cli.utils import print_step
from sops_buildpack.config.env_dir import (
    CHECKSUM_VARIABLE,
    read_config_vars,
    resolve_version,
)
from sops_buildpack.config.settings import load_settings
from sops_buildpack.core.exceptions import BuildpackError
from sops_buildpack.core.invocation import InvocationArgs, parse_invocation
from sops_buildpack.installer import SopsInstaller
from sops_buildpack.profile import write_profile_script

logger = logging.getLogger(__name__)


def compile_app(
    invocation: InvocationArgs, environ: Optional[Mapping[str, str]] = None
) -> Path:
    """
    Install sops into the build output described by ``invocation``.

    Args:
        invocation: Bound build/cache/env directories
        environ: Process environment used as version fallback (default: os.environ)

    Returns:
        Path to the written profile script

    Raises:
        BuildpackError: On configuration, download or install failure
    """
    print_step("Processing required environment configuration")
    config_vars = read_config_vars(invocation.env_dir)
    version = resolve_version(config_vars, os.environ if environ is None else environ)
    logger.info(f"Requested sops version: {version}")

    print_step("Beginning sops install, or cache lookup")
    if invocation.build_dir is None or invocation.cache_dir is None:
        raise BuildpackError("compile requires BUILD_DIR and CACHE_DIR arguments")

    settings = load_settings(invocation.build_dir, config_vars)
    installer = SopsInstaller(
        invocation.build_dir,
        invocation.cache_dir,
        version,
        settings=settings,
        expected_sha256=config_vars.get(CHECKSUM_VARIABLE),
    )
    installer.run()

    print_step("Preparing environment for compatibility")
    return write_profile_script(
        invocation.build_dir,
        install_dir_name=settings.install_dir_name,
        script_name=settings.profile_script_name,
    )


def run(args) -> int:
    """
    Run the compile command.

    Args:
        args: Parsed command-line arguments with ``paths``

    Returns:
        Exit code (0 for success)

    Raises:
        BuildpackError: Reported by the CLI with the error's exit code
    """
    print_step("Parsing expected arguments")
    invocation = parse_invocation(args.paths)

    compile_app(invocation)
    return 0
