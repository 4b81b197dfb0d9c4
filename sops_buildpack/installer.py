"""
sops installer and download cache manager.

Keeps one downloaded binary per version in the buildpack cache directory
and installs the requested version into the application's build output.
"""

import logging
from pathlib import Path
from typing import Optional

from sops_buildpack.config.settings import BuildpackSettings
from sops_buildpack.core.download import download_file
from sops_buildpack.core.exceptions import ArtifactValidationError
from sops_buildpack.core.filesystem import (
    atomic_copy,
    commit_file,
    ensure_directory,
    is_executable,
    make_executable,
    staging_file,
)
from sops_buildpack.core.locking import cache_entry_lock

logger = logging.getLogger(__name__)


class SopsInstaller:
    """
    Download, cache and install the sops binary.

    Cache entries live at ``<cache_dir>/<cache_prefix>_<version>`` and are
    never evicted; the installed copy is rewritten on every build.
    """

    def __init__(
        self,
        build_dir: Path,
        cache_dir: Path,
        version: str,
        settings: Optional[BuildpackSettings] = None,
        expected_sha256: Optional[str] = None,
    ):
        """
        Initialize sops installer.

        Args:
            build_dir: Application build output directory
            cache_dir: Buildpack cache directory persisted across builds
            version: sops version, used verbatim in the URL and cache key
            settings: Tunable constants (defaults if None)
            expected_sha256: Optional checksum the downloaded artifact must match
        """
        self.build_dir = Path(build_dir)
        self.cache_dir = Path(cache_dir)
        self.version = version
        self.settings = settings or BuildpackSettings()
        self.expected_sha256 = expected_sha256

        self.cache_path = self.cache_dir / f"{self.settings.cache_prefix}_{version}"
        self.install_dir = self.build_dir / self.settings.install_dir_name
        self.binary_path = self.install_dir / self.settings.binary_name

    @property
    def download_url(self) -> str:
        return self.settings.download_url(self.version)

    def is_cached(self) -> bool:
        """
        Check if this version already has a cache entry.

        Returns:
            True if the cache entry exists
        """
        return self.cache_path.is_file()

    def ensure_cached(self) -> Path:
        """
        Make sure the cache entry for this version exists.

        Downloads on a cache miss; a hit performs no network access and no
        re-verification. The artifact is validated before it is committed,
        so a failed transfer never leaves an entry behind.

        Returns:
            Path to the cache entry

        Raises:
            DownloadError: If the transfer fails
            ArtifactValidationError: If the artifact is empty or fails its checksum
            CacheLockTimeout: If another build holds the entry lock too long
        """
        ensure_directory(self.cache_dir)

        if self.is_cached():
            logger.info(f"Using cached sops {self.version}")
            return self.cache_path

        with cache_entry_lock(self.cache_path, timeout=self.settings.lock_timeout):
            # Another build may have populated the entry while we waited
            if self.is_cached():
                logger.info(f"Using cached sops {self.version}")
                return self.cache_path

            logger.info(f"Downloading sops {self.version}...")
            with staging_file(self.cache_path) as staged:
                download_file(
                    self.download_url,
                    staged,
                    expected_sha256=self.expected_sha256,
                    timeout=self.settings.download_timeout,
                    max_retries=self.settings.max_retries,
                )
                make_executable(staged)
                if not is_executable(staged):
                    raise ArtifactValidationError(
                        f"Could not mark downloaded sops {self.version} executable"
                    )
                commit_file(staged, self.cache_path)

        logger.info(f"Cached sops {self.version} at {self.cache_path}")
        return self.cache_path

    def install(self) -> Path:
        """
        Copy the cache entry into the build output.

        Any previously installed binary is overwritten.

        Returns:
            Directory containing the installed binary
        """
        ensure_directory(self.install_dir)
        atomic_copy(self.cache_path, self.binary_path)
        make_executable(self.binary_path)

        logger.info(f"Installed sops {self.version} to {self.binary_path}")
        return self.install_dir

    def run(self) -> Path:
        """
        Ensure the cache entry and install it.

        Returns:
            Directory containing the installed binary
        """
        self.ensure_cached()
        return self.install()
