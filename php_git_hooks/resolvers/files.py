"""
File-set resolution.

Computes which paths a check runs against, either from the staged diff or
from an explicit path list, and detects staged files that also carry
unstaged changes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from php_git_hooks.errors import NoPathsProvided, StagedUnstagedConflict
from php_git_hooks.hooks.git import (
    DEFAULT_DIFF_FILTERS,
    list_staged_files,
    list_unstaged_files,
)
from php_git_hooks.models import CheckMode, CheckRequest, FileSet

logger = logging.getLogger(__name__)


def filter_existing_paths(paths: Iterable[str], cwd: Optional[Path] = None) -> list[str]:
    """Keep paths that exist as a file or directory relative to ``cwd``."""
    root = cwd or Path.cwd()
    existing = []
    for path in paths:
        if (root / path).exists():
            existing.append(path)
        else:
            logger.debug("Skipping missing path: %s", path)
    return existing


def _under_prefixes(path: str, prefixes: Sequence[str]) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def resolve(request: CheckRequest, cwd: Optional[Path] = None) -> FileSet:
    """
    Resolve the file set for a request.

    Args:
        request: The check request
        cwd: Working directory (defaults to the current one)

    Returns:
        FileSet; callers must reject it with ``ensure_no_conflicts`` before
        invoking any tool

    Raises:
        NoPathsProvided: explicit-path mode and nothing exists
    """
    if request.mode is CheckMode.EXPLICIT_PATHS:
        paths = filter_existing_paths(request.explicit_paths, cwd)
        if not paths:
            raise NoPathsProvided()
        logger.debug("Explicit paths: %s (unstaged changes not checked)", ", ".join(paths))
        return FileSet(staged=tuple(paths))

    staged = list_staged_files(request.extension, DEFAULT_DIFF_FILTERS, cwd)
    if request.path_prefixes:
        staged = [path for path in staged if _under_prefixes(path, request.path_prefixes)]

    if not staged:
        return FileSet()

    unstaged = list_unstaged_files(request.extension, DEFAULT_DIFF_FILTERS, cwd)
    file_set = FileSet(staged=tuple(staged), unstaged=tuple(unstaged))
    logger.debug(
        "Resolved %d staged, %d unstaged, %d conflicting file(s)",
        len(file_set.staged),
        len(file_set.unstaged),
        len(file_set.conflicting),
    )
    return file_set


def ensure_no_conflicts(file_set: FileSet) -> None:
    """Raise if any staged file has unstaged changes."""
    if file_set.has_conflicts:
        raise StagedUnstagedConflict(file_set.conflicting)
