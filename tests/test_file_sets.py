"""
Tests for file-set resolution and the git queries behind it.
"""

import subprocess
from unittest.mock import Mock, patch

import pytest

from php_git_hooks.errors import GitCommandError, NoPathsProvided, StagedUnstagedConflict
from php_git_hooks.hooks.git import get_repo_root, list_staged_files, list_unstaged_files
from php_git_hooks.models import CheckMode, CheckRequest, FileSet
from php_git_hooks.resolvers.files import ensure_no_conflicts, filter_existing_paths, resolve

STAGED = "php_git_hooks.resolvers.files.list_staged_files"
UNSTAGED = "php_git_hooks.resolvers.files.list_unstaged_files"


class TestFileSet:
    """Tests for the FileSet model."""

    def test_conflicting_is_intersection(self):
        file_set = FileSet(staged=("a.php", "b.php", "c.php"), unstaged=("c.php", "b.php", "d.php"))
        assert file_set.conflicting == ("b.php", "c.php")
        assert file_set.has_conflicts

    def test_no_conflicts(self):
        file_set = FileSet(staged=("a.php",), unstaged=("b.php",))
        assert file_set.conflicting == ()
        assert not file_set.has_conflicts

    def test_conflicting_cannot_be_set(self):
        with pytest.raises(TypeError):
            FileSet(staged=("a.php",), conflicting=("a.php",))

    def test_empty(self):
        assert FileSet().is_empty
        assert FileSet().paths == []


class TestStagedResolution:
    """Tests for STAGED_ONLY mode."""

    def test_staged_and_unstaged(self):
        request = CheckRequest(mode=CheckMode.STAGED_ONLY)
        with patch(STAGED, return_value=["a.php", "b.php"]), patch(
            UNSTAGED, return_value=["b.php", "c.php"]
        ):
            file_set = resolve(request)

        assert file_set.staged == ("a.php", "b.php")
        assert file_set.unstaged == ("b.php", "c.php")
        assert file_set.conflicting == ("b.php",)

    def test_queries_use_extension_and_diff_filter(self):
        request = CheckRequest(mode=CheckMode.STAGED_ONLY, extension="php")
        with patch(STAGED, return_value=["a.php"]) as staged, patch(UNSTAGED, return_value=[]) as unstaged:
            resolve(request)

        assert staged.call_args[0][:2] == ("php", ("--diff-filter=d",))
        assert unstaged.call_args[0][:2] == ("php", ("--diff-filter=d",))

    def test_nothing_staged_skips_unstaged_query(self):
        request = CheckRequest(mode=CheckMode.STAGED_ONLY)
        with patch(STAGED, return_value=[]), patch(UNSTAGED) as unstaged:
            file_set = resolve(request)

        assert file_set.is_empty
        unstaged.assert_not_called()

    def test_path_prefixes_narrow_staged_files(self):
        request = CheckRequest(mode=CheckMode.STAGED_ONLY, path_prefixes=("src",))
        with patch(STAGED, return_value=["src/A.php", "tests/BTest.php"]), patch(
            UNSTAGED, return_value=["tests/BTest.php"]
        ):
            file_set = resolve(request)

        assert file_set.staged == ("src/A.php",)
        assert not file_set.has_conflicts

    def test_ensure_no_conflicts_lists_exact_files(self):
        file_set = FileSet(staged=("a.php", "b.php"), unstaged=("b.php",))

        with pytest.raises(StagedUnstagedConflict) as exc_info:
            ensure_no_conflicts(file_set)

        assert exc_info.value.files == ["b.php"]

    def test_ensure_no_conflicts_passes(self):
        ensure_no_conflicts(FileSet(staged=("a.php",)))


class TestExplicitResolution:
    """Tests for EXPLICIT_PATHS mode."""

    def test_filters_missing_paths(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "index.php").write_text("<?php\n")

        request = CheckRequest(
            mode=CheckMode.EXPLICIT_PATHS,
            explicit_paths=("src", "missing", "index.php"),
        )
        file_set = resolve(request, tmp_path)

        assert file_set.staged == ("src", "index.php")
        assert not file_set.has_conflicts

    def test_no_existing_paths(self, tmp_path):
        request = CheckRequest(mode=CheckMode.EXPLICIT_PATHS, explicit_paths=("missing",))

        with pytest.raises(NoPathsProvided):
            resolve(request, tmp_path)

    def test_no_paths_at_all(self, tmp_path):
        with pytest.raises(NoPathsProvided):
            resolve(CheckRequest(mode=CheckMode.EXPLICIT_PATHS), tmp_path)

    def test_explicit_mode_does_not_query_git(self, tmp_path):
        (tmp_path / "src").mkdir()
        request = CheckRequest(mode=CheckMode.EXPLICIT_PATHS, explicit_paths=("src",))

        with patch(STAGED) as staged, patch(UNSTAGED) as unstaged:
            resolve(request, tmp_path)

        staged.assert_not_called()
        unstaged.assert_not_called()

    def test_filter_existing_paths_keeps_order(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        assert filter_existing_paths(["b", "x", "a"], tmp_path) == ["b", "a"]


class TestGitQueries:
    """Tests for the git helpers."""

    def test_list_staged_files(self):
        with patch("php_git_hooks.hooks.git.subprocess.run") as run:
            run.return_value = Mock(stdout="a.php\n\nb.php\na.php\n")
            files = list_staged_files("php")

        assert files == ["a.php", "b.php"]
        assert run.call_args[0][0] == [
            "git",
            "diff",
            "--cached",
            "--name-only",
            "--diff-filter=d",
            "--",
            "*.php",
        ]

    def test_list_unstaged_files(self):
        with patch("php_git_hooks.hooks.git.subprocess.run") as run:
            run.return_value = Mock(stdout="c.php\n")
            files = list_unstaged_files(".php", ["--diff-filter=d"])

        assert files == ["c.php"]
        assert run.call_args[0][0] == ["git", "diff", "--name-only", "--diff-filter=d", "--", "*.php"]

    def test_git_failure_raises(self):
        error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: not a git repository")
        with patch("php_git_hooks.hooks.git.subprocess.run", side_effect=error):
            with pytest.raises(GitCommandError, match="not a git repository"):
                list_staged_files("php")

    def test_repo_root_outside_repository(self):
        error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: not a git repository")
        with patch("php_git_hooks.hooks.git.subprocess.run", side_effect=error):
            assert get_repo_root() is None

    def test_missing_git_binary(self):
        with patch("php_git_hooks.hooks.git.subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(GitCommandError, match="git executable not found"):
                list_unstaged_files("php")
