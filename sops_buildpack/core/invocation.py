"""
Binding of the positional arguments passed by the build orchestrator.

Heroku calls ``bin/compile BUILD_DIR CACHE_DIR ENV_DIR``. Anything beyond
three arguments means the calling contract has changed upstream and is
reported with a distinguishable exit code.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from sops_buildpack.core.exceptions import ArgumentContractError

logger = logging.getLogger(__name__)

MAX_ARGUMENTS = 3


@dataclass(frozen=True)
class InvocationArgs:
    """Directories supplied to ``compile``; unset roles are None."""

    build_dir: Optional[Path] = None
    cache_dir: Optional[Path] = None
    env_dir: Optional[Path] = None


def parse_invocation(argv: Sequence[str]) -> InvocationArgs:
    """
    Bind raw positional arguments to the build/cache/env roles.

    Paths are not checked for existence here; downstream stages do that.

    Args:
        argv: Positional arguments following the ``compile`` command

    Returns:
        InvocationArgs with up to three bound paths

    Raises:
        ArgumentContractError: If more than three arguments were supplied
    """
    if len(argv) > MAX_ARGUMENTS:
        raise ArgumentContractError(len(argv))

    paths = [Path(arg) if arg else None for arg in argv]
    paths += [None] * (MAX_ARGUMENTS - len(paths))

    args = InvocationArgs(build_dir=paths[0], cache_dir=paths[1], env_dir=paths[2])
    logger.debug(f"Bound invocation arguments: {args}")
    return args
