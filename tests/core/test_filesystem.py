"""
Tests for filesystem helpers.
"""

import os
import stat
import pytest

from sops_buildpack.core.filesystem import (
    atomic_copy,
    atomic_write,
    commit_file,
    ensure_directory,
    is_executable,
    make_executable,
    staging_file,
)


class TestEnsureDirectory:
    def test_creates_nested(self, tmp_path):
        path = ensure_directory(tmp_path / "a" / "b")
        assert path.is_dir()

    def test_idempotent(self, tmp_path):
        ensure_directory(tmp_path / "a")
        ensure_directory(tmp_path / "a")
        assert (tmp_path / "a").is_dir()


class TestPermissions:
    def test_make_executable(self, tmp_path):
        file = tmp_path / "tool"
        file.write_bytes(b"x")
        os.chmod(file, 0o644)

        assert is_executable(file) is False
        make_executable(file)

        assert is_executable(file) is True
        assert stat.S_IMODE(file.stat().st_mode) == 0o755

    def test_missing_file_is_not_executable(self, tmp_path):
        assert is_executable(tmp_path / "missing") is False

    def test_directory_is_not_executable(self, tmp_path):
        assert is_executable(tmp_path) is False


class TestStagingFile:
    def test_staging_file_removed_on_exit(self, tmp_path):
        with staging_file(tmp_path / "target") as staged:
            assert staged.parent == tmp_path
            assert staged.exists()
        assert not staged.exists()
        assert not (tmp_path / "target").exists()

    def test_staging_file_removed_on_error(self, tmp_path):
        with pytest.raises(RuntimeError):
            with staging_file(tmp_path / "target") as staged:
                staged.write_bytes(b"partial")
                raise RuntimeError("boom")
        assert list(tmp_path.iterdir()) == []

    def test_commit_moves_into_place(self, tmp_path):
        target = tmp_path / "target"
        with staging_file(target) as staged:
            staged.write_bytes(b"done")
            commit_file(staged, target)
        assert target.read_bytes() == b"done"
        assert list(tmp_path.iterdir()) == [target]


class TestAtomicCopy:
    def test_copy_overwrites(self, tmp_path):
        source = tmp_path / "source"
        target = tmp_path / "out" / "target"
        source.write_bytes(b"new")
        target.parent.mkdir()
        target.write_bytes(b"old")

        atomic_copy(source, target)

        assert target.read_bytes() == b"new"

    def test_copy_preserves_mode(self, tmp_path):
        source = tmp_path / "source"
        source.write_bytes(b"x")
        os.chmod(source, 0o755)

        atomic_copy(source, tmp_path / "target")

        assert is_executable(tmp_path / "target")

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            atomic_copy(tmp_path / "missing", tmp_path / "target")


class TestAtomicWrite:
    def test_write_text(self, tmp_path):
        file = tmp_path / "dir" / "file.sh"
        atomic_write(file, "echo hi\n")
        assert file.read_text() == "echo hi\n"
        assert stat.S_IMODE(file.stat().st_mode) == 0o644

    def test_write_keeps_existing_mode(self, tmp_path):
        file = tmp_path / "file.sh"
        file.write_text("old")
        os.chmod(file, 0o700)

        atomic_write(file, b"new")

        assert file.read_bytes() == b"new"
        assert stat.S_IMODE(file.stat().st_mode) == 0o700
