"""
Release command implementation.

Emits the release metadata document. The buildpack adds neither addons
nor process types; runtime PATH setup happens through ``.profile.d``.
"""

import logging

import yaml

logger = logging.getLogger(__name__)


def release_metadata() -> dict:
    return {"addons": [], "default_process_types": {}}


def run(args) -> int:
    """
    Print release metadata as YAML.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (always 0)
    """
    print(yaml.safe_dump(release_metadata(), default_flow_style=None), end="")
    return 0
