"""
PHPStan integration.

Runs static analysis on staged PHP files under the configured paths, or on
the configured paths themselves.
"""

import logging
from pathlib import Path
from typing import Optional

from php_git_hooks.analyzers.parsing import parse
from php_git_hooks.config import StaticAnalysisOptions
from php_git_hooks.errors import HookError, NoPathsProvided
from php_git_hooks.models import (
    CheckMode,
    CheckRequest,
    CheckResult,
    ExecutionMode,
    ToolInvocation,
    ToolOutputKind,
)
from php_git_hooks.reporting import Report, render, render_error
from php_git_hooks.resolvers import config as config_resolver
from php_git_hooks.resolvers import files as file_resolver
from php_git_hooks.runner import build_arguments, invoke, locate_executable, vendor_executable

logger = logging.getLogger(__name__)

TITLE = "Static analysis of PHP files"
CONFIG_CANDIDATES = ("phpstan.neon", "phpstan.neon.dist")


class StaticAnalysisIntegration:
    """Integration with PHPStan for static analysis."""

    hook_type = "pre-commit"
    tool = "static analysis tool"

    def __init__(
        self,
        options: Optional[StaticAnalysisOptions] = None,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ):
        self.options = options or StaticAnalysisOptions()
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.timeout = timeout
        self.info: list[str] = []

    def run(self) -> Report:
        """Run PHPStan and return the rendered report."""
        self.info = []
        try:
            return self._run()
        except HookError as e:
            logger.debug("Static analysis aborted: %s", e)
            return render_error(e, title=TITLE, info=self.info)

    def _paths(self) -> Optional[list[str]]:
        """Paths to analyze, or None when there is nothing staged."""
        configured = file_resolver.filter_existing_paths(self.options.paths, self.cwd)
        if not self.options.only_staged:
            return configured

        if self.options.paths and not configured:
            logger.debug("None of the configured paths exist: %s", ", ".join(self.options.paths))
            return None

        request = CheckRequest(
            mode=CheckMode.STAGED_ONLY,
            config_path_override=self.options.config,
            path_prefixes=tuple(configured),
        )
        file_set = file_resolver.resolve(request, self.cwd)
        if file_set.is_empty:
            return None
        file_resolver.ensure_no_conflicts(file_set)
        return file_set.paths

    def _run(self) -> Report:
        driver = locate_executable(vendor_executable(self.cwd, "phpstan"), "PHPStan")

        paths = self._paths()
        if paths is None:
            return self._render(CheckResult())

        resolved = config_resolver.resolve(self.options.config, self.cwd, CONFIG_CANDIDATES)
        if resolved.found:
            self.info.append(config_resolver.describe(resolved, self.options.config))
            selection = f"--configuration={resolved.absolute_path}"
        else:
            if not paths:
                raise NoPathsProvided()
            self.info.append(f"Using default configuration with rule level {self.options.level}")
            selection = f"--level={self.options.level}"

        memory_limit = f"--memory-limit={self.options.memory_limit}" if self.options.memory_limit else None
        arguments = build_arguments(
            ["analyze", "--error-format=json", selection, "--no-progress", "--no-ansi", memory_limit],
            paths,
        )
        outcome = invoke(
            ToolInvocation(driver, arguments, self.cwd),
            ExecutionMode.BLOCKING,
            timeout=self.timeout,
        )

        if outcome.exit_success:
            return self._render(CheckResult())

        result = parse(ToolOutputKind.ANALYSIS_JSON, outcome.stdout, exit_success=False, cwd=self.cwd)
        return self._render(result)

    def _render(self, result: CheckResult) -> Report:
        return render(
            result,
            title=TITLE,
            tool=self.tool,
            failure_message=f"Found {result.total_errors} errors",
            info=self.info,
        )
