"""
php-git-hooks: Git hooks gating commits and pushes on PHP code quality.

This package runs phpcs, PHPStan, ``php -l`` and PHPUnit/Pest from git
hooks, parses their output and renders a unified pass/fail report.
"""

__version__ = "0.1.0"

from php_git_hooks.models import (
    CheckMode,
    CheckRequest,
    CheckResult,
    ConfigSource,
    Diagnostic,
    ExecutionMode,
    ExitStatus,
    FileSet,
    ResolvedConfig,
    Severity,
    ToolInvocation,
    ToolOutputKind,
)
from php_git_hooks.config import (
    CodeStyleOptions,
    HooksConfig,
    LintOptions,
    StaticAnalysisOptions,
    TestSuiteOptions,
)
from php_git_hooks.errors import (
    HookError,
    NoPathsProvided,
    StagedUnstagedConflict,
    ToolNotFound,
)
from php_git_hooks.integrations import (
    CodeStyleIntegration,
    PhpLintIntegration,
    StaticAnalysisIntegration,
    TestSuiteIntegration,
)
from php_git_hooks.reporting import Report

__all__ = [
    # Version
    "__version__",
    # Models
    "CheckMode",
    "CheckRequest",
    "CheckResult",
    "ConfigSource",
    "Diagnostic",
    "ExecutionMode",
    "ExitStatus",
    "FileSet",
    "ResolvedConfig",
    "Severity",
    "ToolInvocation",
    "ToolOutputKind",
    # Configuration
    "HooksConfig",
    "CodeStyleOptions",
    "StaticAnalysisOptions",
    "LintOptions",
    "TestSuiteOptions",
    # Errors
    "HookError",
    "NoPathsProvided",
    "StagedUnstagedConflict",
    "ToolNotFound",
    # Core
    "CodeStyleIntegration",
    "StaticAnalysisIntegration",
    "PhpLintIntegration",
    "TestSuiteIntegration",
    "Report",
]
