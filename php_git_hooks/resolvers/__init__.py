"""
Resolvers shared by all hook commands.

- File sets (staged, unstaged, explicit paths)
- Tool configuration files
"""

from php_git_hooks.resolvers import config, files
from php_git_hooks.resolvers.files import ensure_no_conflicts, filter_existing_paths

__all__ = [
    "config",
    "files",
    "ensure_no_conflicts",
    "filter_existing_paths",
]
