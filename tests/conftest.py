"""
Pytest configuration and shared fixtures for sops buildpack tests.
"""

import pytest
from pathlib import Path

SOPS_VERSION = "3.7.1"


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def build_dir(tmp_path) -> Path:
    """Create application build directory."""
    path = tmp_path / "build"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path) -> Path:
    """Return (not yet created) buildpack cache directory."""
    return tmp_path / "cache"


@pytest.fixture
def env_dir(tmp_path) -> Path:
    """Create env directory holding SOPS_VERSION."""
    path = tmp_path / "env"
    path.mkdir()
    (path / "SOPS_VERSION").write_text(f"{SOPS_VERSION}\n")
    return path


@pytest.fixture
def empty_env_dir(tmp_path) -> Path:
    """Create env directory without any config vars."""
    path = tmp_path / "empty_env"
    path.mkdir()
    return path


@pytest.fixture
def no_sleep(monkeypatch):
    """Skip retry backoff delays."""
    monkeypatch.setattr("sops_buildpack.core.download.time.sleep", lambda s: None)


@pytest.fixture
def clean_environ(monkeypatch):
    """Remove config vars that may leak in from the host environment."""
    for name in ("SOPS_VERSION", "SOPS_DOWNLOAD_URL", "SOPS_SHA256"):
        monkeypatch.delenv(name, raising=False)
