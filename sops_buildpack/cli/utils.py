"""
Shared output helpers for CLI commands.

Buildpack output follows the platform's conventions so it reads naturally
inside the build log: stage headlines are arrowed, details are indented
and errors carry a bang prefix on stderr.
"""

import logging
import sys
from typing import Optional

STEP_PREFIX = "-----> "
DETAIL_INDENT = " " * 7
ERROR_PREFIX = " !     "


def print_step(message: str):
    """Print a stage headline to stdout."""
    print(f"{STEP_PREFIX}{message}", flush=True)


def print_error(message: str, details: Optional[str] = None):
    """
    Print a failure diagnostic to stderr.

    Args:
        message: Main error line
        details: Optional additional line
    """
    print(f"{ERROR_PREFIX}{message}", file=sys.stderr, flush=True)
    if details:
        print(f"{ERROR_PREFIX}{details}", file=sys.stderr, flush=True)


def configure_logging(verbose: bool = False, quiet: bool = False):
    """
    Configure logging based on verbose/quiet flags.

    Detail messages are indented under the current stage headline.

    Args:
        verbose: Enable DEBUG output with logger names
        quiet: Only show errors
    """
    if verbose:
        level = logging.DEBUG
        format_str = f"{DETAIL_INDENT}%(levelname)s [%(name)s] %(message)s"
    elif quiet:
        level = logging.ERROR
        format_str = f"{DETAIL_INDENT}%(levelname)s: %(message)s"
    else:
        level = logging.INFO
        format_str = f"{DETAIL_INDENT}%(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stdout,
        force=True,  # Reconfigure if already configured
    )
