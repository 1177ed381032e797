"""
Data models for php-git-hooks.

These models describe a single hook-command invocation: what to check,
which configuration to use, how the external tool is called and what it
reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional


class CheckMode(str, Enum):
    """Where the paths to check come from."""

    STAGED_ONLY = "staged"
    EXPLICIT_PATHS = "paths"


class ConfigSource(str, Enum):
    """Which configuration source was selected."""

    EXPLICIT = "explicit"
    PROJECT_DEFAULT = "project"
    DISTRIBUTED_DEFAULT = "distributed"
    NONE = "none"


class ExecutionMode(str, Enum):
    """How output of an external process is consumed."""

    BLOCKING = "blocking"
    STREAMING = "streaming"


class Severity(str, Enum):
    """Canonical diagnostic severity."""

    ERROR = "ERROR"
    WARNING = "WARNING"


class ToolOutputKind(str, Enum):
    """Shape of the output produced by an external tool."""

    STYLE_JSON = "style-json"  # phpcs --report=json
    ANALYSIS_JSON = "analysis-json"  # phpstan --error-format=json
    LINT_TEXT = "lint-text"  # php -l
    TEST_RUNNER_STATUS = "test-runner-status"  # phpunit, pest


class ExitStatus(int, Enum):
    """Outcome handed back to the git-hook lifecycle."""

    SUCCESS = 0
    FAILURE = 1


class FailureKind(str, Enum):
    """Why a command failed."""

    TOOL_NOT_FOUND = "tool-not-found"
    NO_PATHS_PROVIDED = "no-paths-provided"
    STAGED_UNSTAGED_CONFLICT = "staged-unstaged-conflict"
    CONFIGURATION_NOT_FOUND = "configuration-not-found"
    UNPARSABLE_OUTPUT = "unparsable-output"
    TOOL_REPORTED_FINDINGS = "tool-reported-findings"
    TOOL_EXECUTION_FAILED = "tool-execution-failed"
    TOOL_TIMEOUT = "tool-timeout"
    GIT_ERROR = "git-error"
    INVALID_OPTIONS = "invalid-options"


@dataclass(frozen=True)
class CheckRequest:
    """What a single command invocation should check."""

    mode: CheckMode
    explicit_paths: tuple[str, ...] = ()
    config_path_override: Optional[str] = None
    tool_options: Mapping[str, Any] = field(default_factory=dict)
    extension: str = "php"
    path_prefixes: tuple[str, ...] = ()  # narrows staged files when set


@dataclass(frozen=True)
class FileSet:
    """Paths a check runs against, plus staged/unstaged divergence."""

    staged: tuple[str, ...] = ()
    unstaged: tuple[str, ...] = ()
    conflicting: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        unstaged = set(self.unstaged)
        conflicting = tuple(path for path in self.staged if path in unstaged)
        object.__setattr__(self, "conflicting", conflicting)

    @property
    def paths(self) -> list[str]:
        return list(self.staged)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicting)

    @property
    def is_empty(self) -> bool:
        return not self.staged


@dataclass(frozen=True)
class ResolvedConfig:
    """The single configuration source chosen for a check."""

    source_kind: ConfigSource = ConfigSource.NONE
    absolute_path: Optional[Path] = None

    @property
    def found(self) -> bool:
        return self.source_kind is not ConfigSource.NONE


@dataclass(frozen=True)
class ToolInvocation:
    """An external process call."""

    executable_path: Path
    arguments: tuple[str, ...] = ()
    working_directory: Path = field(default_factory=Path.cwd)

    @property
    def command(self) -> list[str]:
        return [str(self.executable_path), *self.arguments]


@dataclass
class ProcessOutcome:
    """Captured result of an external process."""

    exit_success: bool
    returncode: int = 0
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Diagnostic:
    """A single finding reported by a tool."""

    file: str
    message: str
    severity: Severity = Severity.ERROR
    line: Optional[int] = None
    column: Optional[int] = None
    fixable: bool = False

    @property
    def position(self) -> str:
        if self.line is None:
            return ""
        if self.column is None:
            return str(self.line)
        return f"{self.line}:{self.column}"


@dataclass
class CheckResult:
    """
    Canonical result of a check.

    ``per_file`` keeps the emission order of the underlying tool. Totals are
    always derived from it.
    """

    per_file: dict[str, list[Diagnostic]] = field(default_factory=dict)
    fixable_files: list[str] = field(default_factory=list)
    tool_exited_cleanly: bool = True
    unparsable_output: bool = False
    general_errors: list[str] = field(default_factory=list)

    def add(self, diagnostic: Diagnostic) -> None:
        self.per_file.setdefault(diagnostic.file, []).append(diagnostic)
        if diagnostic.fixable and diagnostic.file not in self.fixable_files:
            self.fixable_files.append(diagnostic.file)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [diag for diags in self.per_file.values() for diag in diags]

    @property
    def total_errors(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.severity is Severity.ERROR)

    @property
    def total_warnings(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.severity is Severity.WARNING)

    @property
    def has_findings(self) -> bool:
        return any(self.per_file.values())

    @property
    def passed(self) -> bool:
        return (
            self.tool_exited_cleanly
            and not self.unparsable_output
            and not self.has_findings
            and not self.general_errors
        )
