"""
Git utilities for hooks.

Provides the read-only queries hook commands need: staged and unstaged
files by extension, plus a few repository helpers.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from php_git_hooks.errors import GitCommandError

logger = logging.getLogger(__name__)

DEFAULT_DIFF_FILTERS = ("--diff-filter=d",)


def _run_git(args: list[str], cwd: Optional[Path] = None) -> str:
    """Run a git command and return its stdout."""
    logger.debug("Running git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as e:
        raise GitCommandError(args, e.stderr or "") from e
    except FileNotFoundError as e:
        raise GitCommandError(args, "git executable not found") from e
    return result.stdout


def _files_by_extension(
    base_args: list[str],
    extension: str,
    filters: Sequence[str],
    cwd: Optional[Path],
) -> list[str]:
    args = [*base_args, "--name-only", *filters, "--", f"*.{extension.lstrip('.')}"]
    output = _run_git(args, cwd)

    # Keep git's order, drop blanks and duplicates
    files: list[str] = []
    for line in output.splitlines():
        path = line.strip()
        if path and path not in files:
            files.append(path)
    return files


def list_staged_files(
    extension: str,
    filters: Sequence[str] = DEFAULT_DIFF_FILTERS,
    cwd: Optional[Path] = None,
) -> list[str]:
    """
    List staged files with the given extension.

    Args:
        extension: File extension without the dot (e.g. "php")
        filters: Extra ``git diff`` arguments such as ``--diff-filter=d``
        cwd: Repository working directory

    Returns:
        Paths relative to the repository root, in git's order
    """
    return _files_by_extension(["diff", "--cached"], extension, filters, cwd)


def list_unstaged_files(
    extension: str,
    filters: Sequence[str] = DEFAULT_DIFF_FILTERS,
    cwd: Optional[Path] = None,
) -> list[str]:
    """List files with the given extension that have unstaged changes."""
    return _files_by_extension(["diff"], extension, filters, cwd)


def get_branch_name(cwd: Optional[Path] = None) -> Optional[str]:
    """Get the current branch name."""
    try:
        return _run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd).strip()
    except GitCommandError:
        return None


def get_repo_root(cwd: Optional[Path] = None) -> Optional[str]:
    """Get the root directory of the git repository."""
    try:
        return _run_git(["rev-parse", "--show-toplevel"], cwd).strip()
    except GitCommandError:
        return None
