"""
Cache population locking.

Builds that share a cache directory may race to download the same sops
version. A per-entry lock file serializes them: the first process
downloads, later ones find the committed entry when they get the lock.

Usage:
    from sops_buildpack.core.locking import cache_entry_lock

    with cache_entry_lock(cache_path, timeout=300):
        if not cache_path.exists():
            populate(cache_path)
"""

import logging
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout as LockTimeout

from sops_buildpack.core.exceptions import InstallError

logger = logging.getLogger(__name__)


class CacheLockTimeout(InstallError):
    """Raised when the cache entry lock cannot be acquired within timeout."""

    pass


def lock_path_for(entry_path: Path) -> Path:
    """
    Get the lock file path guarding a cache entry.

    Args:
        entry_path: Cache entry (e.g. ``<cache_dir>/sops_3.7.1``)

    Returns:
        Hidden sibling lock file (e.g. ``<cache_dir>/.sops_3.7.1.lock``)
    """
    entry_path = Path(entry_path)
    return entry_path.parent / f".{entry_path.name}.lock"


@contextmanager
def cache_entry_lock(entry_path: Path, timeout: float = 300):
    """
    Acquire the lock for a single cache entry.

    Args:
        entry_path: Cache entry being populated
        timeout: Maximum wait time in seconds (default: 300 for slow downloads)

    Yields:
        None

    Raises:
        CacheLockTimeout: If lock can't be acquired within timeout
    """
    lock_path = lock_path_for(entry_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired cache lock: {lock_path}")
            yield
            logger.debug(f"Released cache lock: {lock_path}")
    except LockTimeout as e:
        raise CacheLockTimeout(
            f"Could not acquire cache lock for {entry_path.name} after {timeout}s. "
            "Another build may be downloading this version."
        ) from e
