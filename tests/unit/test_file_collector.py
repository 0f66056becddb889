"""
Unit tests for FileSetCollector.

Tests suffix filtering, exclusion patterns, VCS directories, symlinks,
unreadable entries and deterministic ordering.

License: MIT
"""

import os
import sys

import pytest

from archmap_core.collection.file_collector import FileSetCollector
from archmap_core.exceptions import CollectionError


def write(path, content="<?php\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def project(tmp_path):
    """Small PHP project with sources, tests, vendor code and VCS metadata."""
    root = tmp_path / "project"
    write(root / "src" / "Controller" / "HomeController.php")
    write(root / "src" / "Model" / "User.php")
    write(root / "src" / "Model" / "README.md", "docs")
    write(root / "tests" / "UserTest.php")
    write(root / ".git" / "hooks" / "pre-commit.php")
    return root


def paths(files, root):
    return [os.path.relpath(f.path, str(root)) for f in files]


class TestCollect:
    """Tests for FileSetCollector.collect()."""

    def test_collects_matching_suffix_sorted(self, project):
        """Test only suffix matches are returned, sorted by path."""
        files = FileSetCollector(".php").collect([str(project)])

        assert paths(files, project) == [
            os.path.join("src", "Controller", "HomeController.php"),
            os.path.join("src", "Model", "User.php"),
            os.path.join("tests", "UserTest.php"),
        ]

    def test_paths_are_absolute_and_hashed(self, project):
        """Test collected files carry absolute paths and content hashes."""
        files = FileSetCollector(".php").collect([str(project)])

        assert all(os.path.isabs(f.path) for f in files)
        assert all(len(f.content_hash) == 32 for f in files)

    def test_exclusions_are_case_insensitive_search(self, project):
        """Test exclusion patterns match anywhere in the path, ignoring case."""
        files = FileSetCollector(".php", exclude_files=["/TESTS/", r"home\w+\.php$"]).collect(
            [str(project)]
        )

        assert paths(files, project) == [os.path.join("src", "Model", "User.php")]

    def test_vcs_directories_can_be_included(self, project):
        """Test VCS filtering follows the ignore_vcs_dirs flag."""
        files = FileSetCollector(".php", ignore_vcs_dirs=False).collect([str(project)])

        assert os.path.join(".git", "hooks", "pre-commit.php") in paths(files, project)

    def test_compound_suffix(self, tmp_path):
        """Test suffixes longer than an extension are matched literally."""
        write(tmp_path / "A.class.php")
        write(tmp_path / "B.php")

        files = FileSetCollector(".class.php").collect([str(tmp_path)])

        assert [os.path.basename(f.path) for f in files] == ["A.class.php"]

    def test_overlapping_roots_are_deduplicated(self, project):
        """Test a file reachable from two roots is returned once."""
        files = FileSetCollector(".php").collect([str(project), str(project / "src")])

        assert len(files) == 3
        assert len({f.path for f in files}) == 3

    def test_empty_result(self, tmp_path):
        """Test a root without matches yields an empty list."""
        write(tmp_path / "notes.txt", "nothing")

        assert FileSetCollector(".php").collect([str(tmp_path)]) == []

    def test_missing_root_raises(self, tmp_path):
        """Test a missing root is a collection error."""
        with pytest.raises(CollectionError) as exc_info:
            FileSetCollector(".php").collect([str(tmp_path / "missing")])

        assert exc_info.value.error_code == "COLL_001"

    def test_file_root_raises(self, tmp_path):
        """Test a root must be a directory."""
        path = write(tmp_path / "A.php")

        with pytest.raises(CollectionError):
            FileSetCollector(".php").collect([str(path)])


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX symlinks and permissions")
class TestFilesystemEdgeCases:
    """Tests for symlinks and permissions."""

    def test_follows_directory_symlinks(self, tmp_path):
        """Test files behind a symlinked directory are collected."""
        shared = tmp_path / "shared"
        write(shared / "Shared.php")
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(str(shared), str(root / "linked"))

        files = FileSetCollector(".php").collect([str(root)])

        assert paths(files, root) == [os.path.join("linked", "Shared.php")]

    def test_symlink_loop_terminates(self, tmp_path):
        """Test a symlink pointing at an ancestor does not loop forever."""
        root = tmp_path / "root"
        write(root / "A.php")
        os.symlink(str(root), str(root / "loop"))

        files = FileSetCollector(".php").collect([str(root)])

        assert paths(files, root) == ["A.php"]

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root reads anything")
    def test_unreadable_directory_is_skipped(self, tmp_path):
        """Test an unreadable subdirectory is skipped, not fatal."""
        write(tmp_path / "A.php")
        locked = tmp_path / "locked"
        write(locked / "B.php")
        locked.chmod(0)
        try:
            files = FileSetCollector(".php").collect([str(tmp_path)])
        finally:
            locked.chmod(0o755)

        assert paths(files, tmp_path) == ["A.php"]

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root reads anything")
    def test_unreadable_file_is_skipped(self, tmp_path):
        """Test an unreadable file is skipped."""
        write(tmp_path / "A.php")
        locked = write(tmp_path / "B.php")
        locked.chmod(0)
        try:
            files = FileSetCollector(".php").collect([str(tmp_path)])
        finally:
            locked.chmod(0o644)

        assert paths(files, tmp_path) == ["A.php"]
