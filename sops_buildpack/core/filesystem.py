"""
Filesystem helpers for cache and build output manipulation.

Provides idempotent directory creation, permission handling and
atomic write/copy/commit operations so that a cache entry or installed
binary is never observed half-written.
"""

import logging
import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Args:
        path: Directory path

    Returns:
        Path object

    Example:
        >>> ensure_directory('/tmp/build/.sops-buildpack')
        PosixPath('/tmp/build/.sops-buildpack')
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def make_executable(path: Union[str, Path]) -> Path:
    """Set mode 0755 on ``path``."""
    path = Path(path)
    os.chmod(path, EXECUTABLE_MODE)
    return path


def is_executable(path: Union[str, Path]) -> bool:
    """
    Check whether ``path`` is a regular file with the owner execute bit set.

    Args:
        path: File path

    Returns:
        True if file exists and is executable by its owner
    """
    path = Path(path)
    if not path.is_file():
        return False
    return bool(path.stat().st_mode & stat.S_IXUSR)


@contextmanager
def staging_file(target: Union[str, Path]):
    """
    Context manager yielding a temporary path next to ``target``.

    The temporary file lives in the same directory so that a later
    ``Path.replace`` is an atomic rename on the same filesystem. It is
    removed on exit unless it was already moved into place.

    Args:
        target: Final destination the staged file will be committed to

    Yields:
        Path to the staging file

    Example:
        >>> with staging_file(cache_dir / 'sops_3.7.1') as tmp:
        ...     tmp.write_bytes(data)
        ...     commit_file(tmp, cache_dir / 'sops_3.7.1')
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    os.close(temp_fd)
    temp_path = Path(temp_path_str)

    try:
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)


def commit_file(source: Union[str, Path], target: Union[str, Path]) -> Path:
    """Atomically move ``source`` onto ``target`` (replaces any existing file)."""
    source = Path(source)
    target = Path(target)
    source.replace(target)
    logger.debug(f"Committed {source.name} to {target}")
    return target


def atomic_copy(source: Union[str, Path], target: Union[str, Path]) -> Path:
    """
    Copy ``source`` to ``target`` through a staging file and rename.

    Any previous file at ``target`` is replaced unconditionally. File
    permissions are copied along with the content.

    Args:
        source: File to copy
        target: Destination path

    Returns:
        The destination path

    Raises:
        FileNotFoundError: If source doesn't exist
    """
    source = Path(source)
    target = Path(target)

    if not source.is_file():
        raise FileNotFoundError(f"File not found: {source}")

    with staging_file(target) as temp_path:
        shutil.copy2(source, temp_path)
        commit_file(temp_path, target)

    return target


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    mode = stat.S_IMODE(file_path.stat().st_mode) if file_path.exists() else 0o644

    with staging_file(file_path) as temp_path:
        if isinstance(content, str):
            temp_path.write_text(content, encoding=encoding)
        else:
            temp_path.write_bytes(content)
        os.chmod(temp_path, mode)
        commit_file(temp_path, file_path)
