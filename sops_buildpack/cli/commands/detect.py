"""
Detect command implementation.

The buildpack applies to every app: it is added explicitly by users who
want sops available, so detection always succeeds.
"""

import logging

logger = logging.getLogger(__name__)

BUILDPACK_NAME = "sops"


def run(args) -> int:
    """
    Report the buildpack name.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (always 0)
    """
    logger.debug(f"Detecting for build dir {getattr(args, 'build_dir', None)}")
    print(BUILDPACK_NAME)
    return 0
