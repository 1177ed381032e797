"""
Git helpers for hook commands.

Provides utilities for:
- Listing staged and unstaged files
- Locating the repository
"""

from php_git_hooks.hooks.git import (
    get_branch_name,
    get_repo_root,
    list_staged_files,
    list_unstaged_files,
)

__all__ = [
    "list_staged_files",
    "list_unstaged_files",
    "get_branch_name",
    "get_repo_root",
]
