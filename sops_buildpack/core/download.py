"""
HTTP artifact transfer with retry logic and optional checksum verification.

This module provides:
- HTTPS downloads that follow redirects
- Request timeouts (a stalled transfer never hangs the build)
- Retry with exponential backoff
- Streaming SHA256 verification when a checksum is supplied
- Cleanup of partial files on any failure
"""

import hashlib
import logging
import time
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import HTTPError, RequestException

from sops_buildpack.core.exceptions import ArtifactValidationError, DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

# Client errors worth another attempt; any other 4xx is permanent
RETRYABLE_CLIENT_STATUSES = (408, 429)


class StreamingHasher:
    """Compute a SHA256 digest incrementally for streaming downloads."""

    def __init__(self):
        self.hasher = hashlib.sha256()

    def update(self, data: bytes):
        self.hasher.update(data)

    def finalize(self) -> str:
        return self.hasher.hexdigest()

    def verify(self, expected_hash: str) -> bool:
        """Check if computed hash matches expected value (case-insensitive)."""
        return self.finalize().lower() == expected_hash.strip().lower()


def is_retryable(error: RequestException) -> bool:
    """
    Decide whether a failed request should be attempted again.

    Connection errors, timeouts, 5xx and 408/429 responses are transient.
    Other 4xx responses (e.g. 404 for an unknown version) are not.

    Args:
        error: Exception raised by requests

    Returns:
        True if another attempt may succeed
    """
    if isinstance(error, HTTPError) and error.response is not None:
        status = error.response.status_code
        return status >= 500 or status in RETRYABLE_CLIENT_STATUSES
    return True


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    timeout: int = 60,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination.

    The transfer is considered successful only if the server answered with a
    2xx status, the body was non-empty and, when ``expected_sha256`` is given,
    the body hashes to it.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts (at least 1)

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the transfer fails permanently or after all retries
        ArtifactValidationError: If the artifact is empty or its checksum differs
        ValueError: If URL, destination or max_retries is invalid

    Example:
        >>> download_file(
        ...     "https://github.com/mozilla/sops/releases/download/v3.7.1/sops-v3.7.1.linux",
        ...     Path("/tmp/sops"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    attempt = 0
    while True:
        attempt += 1
        try:
            return _download_once(url, destination, expected_sha256, timeout)
        except RequestException as e:
            destination.unlink(missing_ok=True)
            if not is_retryable(e):
                raise DownloadError(f"Download of {url} failed: {e}") from e
            if attempt >= max_retries:
                raise DownloadError(
                    f"Download of {url} failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2 ** (attempt - 1)
            logger.warning(
                f"Download attempt {attempt} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)


def _download_once(
    url: str,
    destination: Path,
    expected_sha256: Optional[str],
    timeout: int,
) -> Path:
    """
    Perform a single streaming transfer into ``destination``.

    Raises:
        ArtifactValidationError: If the body is empty or the checksum differs
        RequestException: If the HTTP request fails
    """
    logger.info(f"Downloading from {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)

    hasher = StreamingHasher() if expected_sha256 else None
    downloaded = 0

    try:
        response.raise_for_status()
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    downloaded += len(chunk)
                    if hasher:
                        hasher.update(chunk)
    except Exception:
        destination.unlink(missing_ok=True)
        raise
    finally:
        response.close()

    if downloaded == 0:
        destination.unlink(missing_ok=True)
        raise ArtifactValidationError(f"Downloaded artifact from {url} is empty")

    if expected_sha256 and hasher and not hasher.verify(expected_sha256):
        actual_hash = hasher.finalize()
        destination.unlink(missing_ok=True)
        raise ArtifactValidationError(
            f"Checksum mismatch for {url}: "
            f"expected {expected_sha256}, got {actual_hash}"
        )

    logger.debug(f"Downloaded {downloaded} bytes to {destination}")
    return destination
