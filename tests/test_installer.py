"""
Tests for the sops installer and cache manager.
"""

import hashlib
import pytest
import responses

from sops_buildpack.config.settings import BuildpackSettings
from sops_buildpack.core.exceptions import ArtifactValidationError, DownloadError
from sops_buildpack.core.filesystem import is_executable
from sops_buildpack.installer import SopsInstaller

VERSION = "3.7.1"
URL = (
    "https://github.com/mozilla/sops/releases/download/3.7.1/sops-3.7.1.linux"
)
BINARY = b"\x7fELF sops 3.7.1"


@pytest.fixture
def installer(build_dir, cache_dir):
    return SopsInstaller(build_dir, cache_dir, VERSION)


class TestPaths:
    def test_cache_path(self, installer, cache_dir):
        assert installer.cache_path == cache_dir / "sops_3.7.1"

    def test_binary_path(self, installer, build_dir):
        assert installer.binary_path == build_dir / ".sops-buildpack" / "sops"

    def test_download_url(self, installer):
        assert installer.download_url == URL

    def test_custom_settings(self, build_dir, cache_dir):
        settings = BuildpackSettings(
            download_url_template="https://mirror.example.com/{version}/sops",
            cache_prefix="sops-bin",
        )
        installer = SopsInstaller(build_dir, cache_dir, "v3.8.0", settings=settings)

        assert installer.cache_path == cache_dir / "sops-bin_v3.8.0"
        assert installer.download_url == "https://mirror.example.com/v3.8.0/sops"


class TestEnsureCached:
    @responses.activate
    def test_cache_miss_downloads(self, installer, cache_dir):
        responses.add(responses.GET, URL, body=BINARY, status=200)

        path = installer.ensure_cached()

        assert path == cache_dir / "sops_3.7.1"
        assert path.read_bytes() == BINARY
        assert is_executable(path)
        assert len(responses.calls) == 1

    @responses.activate
    def test_cache_hit_skips_network(self, installer, cache_dir):
        cache_dir.mkdir()
        (cache_dir / "sops_3.7.1").write_bytes(b"cached")

        path = installer.ensure_cached()

        assert path.read_bytes() == b"cached"
        assert len(responses.calls) == 0

    @responses.activate
    def test_failed_download_leaves_no_entry(self, installer, cache_dir, no_sleep):
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadError):
            installer.ensure_cached()

        assert not installer.is_cached()
        leftovers = [p for p in cache_dir.iterdir() if not p.name.endswith(".lock")]
        assert leftovers == []

    @responses.activate
    def test_empty_artifact_rejected(self, installer):
        responses.add(responses.GET, URL, body=b"", status=200)

        with pytest.raises(ArtifactValidationError):
            installer.ensure_cached()

        assert not installer.is_cached()

    @responses.activate
    def test_checksum_enforced(self, build_dir, cache_dir):
        responses.add(responses.GET, URL, body=BINARY, status=200)
        installer = SopsInstaller(
            build_dir, cache_dir, VERSION, expected_sha256="0" * 64
        )

        with pytest.raises(ArtifactValidationError, match="Checksum mismatch"):
            installer.ensure_cached()

        assert not installer.is_cached()

    @responses.activate
    def test_checksum_accepted(self, build_dir, cache_dir):
        responses.add(responses.GET, URL, body=BINARY, status=200)
        installer = SopsInstaller(
            build_dir,
            cache_dir,
            VERSION,
            expected_sha256=hashlib.sha256(BINARY).hexdigest(),
        )

        assert installer.ensure_cached().read_bytes() == BINARY

    @responses.activate
    def test_other_versions_kept(self, installer, cache_dir):
        cache_dir.mkdir()
        (cache_dir / "sops_3.6.0").write_bytes(b"old")
        responses.add(responses.GET, URL, body=BINARY, status=200)

        installer.ensure_cached()

        assert (cache_dir / "sops_3.6.0").read_bytes() == b"old"
        assert (cache_dir / "sops_3.7.1").read_bytes() == BINARY


class TestInstall:
    @responses.activate
    def test_run_installs_copy(self, installer, build_dir, cache_dir):
        responses.add(responses.GET, URL, body=BINARY, status=200)

        install_dir = installer.run()

        assert install_dir == build_dir / ".sops-buildpack"
        binary = install_dir / "sops"
        assert binary.read_bytes() == (cache_dir / "sops_3.7.1").read_bytes()
        assert is_executable(binary)

    def test_install_overwrites_previous(self, installer, build_dir, cache_dir):
        cache_dir.mkdir()
        (cache_dir / "sops_3.7.1").write_bytes(BINARY)
        old = build_dir / ".sops-buildpack" / "sops"
        old.parent.mkdir()
        old.write_bytes(b"previous version")

        installer.run()

        assert old.read_bytes() == BINARY
        assert is_executable(old)

    def test_install_reflects_requested_version(self, build_dir, cache_dir):
        cache_dir.mkdir()
        (cache_dir / "sops_3.6.0").write_bytes(b"sops 3.6.0")
        (cache_dir / "sops_3.7.1").write_bytes(b"sops 3.7.1")

        SopsInstaller(build_dir, cache_dir, "3.6.0").run()
        SopsInstaller(build_dir, cache_dir, "3.7.1").run()

        assert (build_dir / ".sops-buildpack" / "sops").read_bytes() == b"sops 3.7.1"
