"""
Runtime environment preparation.

Scripts in ``<build_dir>/.profile.d`` are sourced when dynos start, both
for the app's processes and for one-off ``heroku run`` sessions.
"""

import logging
from pathlib import Path

from sops_buildpack.core.filesystem import atomic_write, ensure_directory

logger = logging.getLogger(__name__)

PROFILE_DIR_NAME = ".profile.d"


def path_export_line(install_dir_name: str) -> str:
    """
    Build the shell line adding the install directory to PATH.

    Args:
        install_dir_name: Directory name relative to the app root ($HOME at runtime)

    Returns:
        Shell export line without trailing newline

    Example:
        >>> path_export_line(".sops-buildpack")
        'export PATH="$PATH:$HOME/.sops-buildpack/"'
    """
    return f'export PATH="$PATH:$HOME/{install_dir_name}/"'


def write_profile_script(
    build_dir: Path,
    install_dir_name: str = ".sops-buildpack",
    script_name: str = "sops.sh",
) -> Path:
    """
    Ensure the profile script exports PATH with the install directory.

    The line is appended only if the script does not already contain it,
    so rebuilding into a persisted build dir keeps the file stable. Other
    content in the script is left untouched.

    Args:
        build_dir: Application build output directory
        install_dir_name: Directory holding the installed binary
        script_name: File name under ``.profile.d``

    Returns:
        Path to the profile script
    """
    profile_dir = ensure_directory(Path(build_dir) / PROFILE_DIR_NAME)
    script_path = profile_dir / script_name
    line = path_export_line(install_dir_name)

    existing = script_path.read_text(encoding="utf-8") if script_path.exists() else ""

    if line in existing.splitlines():
        logger.debug(f"{script_path} already exports the sops PATH")
        return script_path

    if existing and not existing.endswith("\n"):
        existing += "\n"

    atomic_write(script_path, f"{existing}{line}\n")
    logger.info(f"Wrote PATH export to {script_path}")
    return script_path
