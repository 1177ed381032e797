"""
Errors raised by hook commands.

Every error is terminal for the command that raised it. Reports are built
from them by ``php_git_hooks.reporting.render_error``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence

from php_git_hooks.models import FailureKind


class HookError(Exception):
    """Base error for hook commands."""

    kind: FailureKind = FailureKind.TOOL_EXECUTION_FAILED
    hint: Optional[str] = None

    def __init__(self, message: str, hook_type: str = "pre-commit"):
        self.message = message
        self.hook_type = hook_type
        super().__init__(message)


class ToolNotFound(HookError):
    """The external executable does not exist at the expected path."""

    kind = FailureKind.TOOL_NOT_FOUND

    def __init__(self, path: Path | str, label: str = "executable", hook_type: str = "pre-commit"):
        self.path = Path(path)
        self.label = label
        super().__init__(f"Could not locate {label}: {path}", hook_type)


class NoPathsProvided(HookError):
    """Explicit-path mode resolved to nothing."""

    kind = FailureKind.NO_PATHS_PROVIDED
    hint = 'Add paths in your ".php-git-hooks.toml" file.'

    def __init__(self, message: str = "No paths were provided.", hook_type: str = "pre-commit"):
        super().__init__(message, hook_type)


class StagedUnstagedConflict(HookError):
    """Staged files also carry unstaged changes."""

    kind = FailureKind.STAGED_UNSTAGED_CONFLICT
    hint = "Fix the error and try again."

    def __init__(self, files: Iterable[str], hook_type: str = "pre-commit"):
        self.files = list(files)
        super().__init__("Following staged files has unstaged changes:", hook_type)


class ConfigurationNotFound(HookError):
    """A command that requires a configuration file found none."""

    kind = FailureKind.CONFIGURATION_NOT_FOUND

    def __init__(self, candidates: Sequence[str] = (), hook_type: str = "pre-push"):
        self.candidates = list(candidates)
        super().__init__("No configuration file found.", hook_type)


class ToolTimeout(HookError):
    """The external process did not finish in time."""

    kind = FailureKind.TOOL_TIMEOUT

    def __init__(self, path: Path | str, timeout: float, hook_type: str = "pre-commit"):
        self.path = Path(path)
        self.timeout = timeout
        super().__init__(f"{Path(path).name} did not finish within {timeout:g}s", hook_type)


class GitCommandError(HookError):
    """A git query failed."""

    kind = FailureKind.GIT_ERROR

    def __init__(self, args: Sequence[str], stderr: str = ""):
        self.args_used = list(args)
        self.stderr = stderr.strip()
        message = f"git {' '.join(args)} failed"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class InvalidOptionsError(HookError):
    """Command options failed validation."""

    kind = FailureKind.INVALID_OPTIONS

    def __init__(self, message: str):
        super().__init__(message)
