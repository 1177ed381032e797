"""
PHP_CodeSniffer integration.

Checks coding style of staged (or configured) PHP files with phpcs and
suggests a phpcbf command when some errors can be fixed automatically.
"""

import logging
from pathlib import Path
from typing import Optional

from php_git_hooks.analyzers.parsing import parse
from php_git_hooks.config import CodeStyleOptions
from php_git_hooks.errors import HookError
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

TITLE = "Checking coding style in PHP files"
CONFIG_CANDIDATES = ("phpcs.xml", "phpcs.xml.dist")


class CodeStyleIntegration:
    """Integration with phpcs for coding style checks."""

    hook_type = "pre-commit"
    tool = "code style checker"

    def __init__(
        self,
        options: Optional[CodeStyleOptions] = None,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ):
        self.options = options or CodeStyleOptions()
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.timeout = timeout
        self.info: list[str] = []

    def request(self) -> CheckRequest:
        mode = CheckMode.STAGED_ONLY if self.options.only_staged else CheckMode.EXPLICIT_PATHS
        return CheckRequest(
            mode=mode,
            explicit_paths=tuple(self.options.paths),
            config_path_override=self.options.config,
            tool_options={
                "encoding": self.options.encoding,
                "hide_warnings": self.options.hide_warnings,
                "standard": self.options.standard,
            },
        )

    def run(self) -> Report:
        """Run phpcs and return the rendered report."""
        self.info = []
        try:
            return self._run()
        except HookError as e:
            logger.debug("Code style check aborted: %s", e)
            return render_error(e, title=TITLE, info=self.info)

    def _run(self) -> Report:
        driver = locate_executable(vendor_executable(self.cwd, "phpcs"), "PHP-CS")

        request = self.request()
        file_set = file_resolver.resolve(request, self.cwd)
        if file_set.is_empty:
            return self._render(CheckResult(), "")
        file_resolver.ensure_no_conflicts(file_set)

        resolved = config_resolver.resolve(
            request.config_path_override, self.cwd, CONFIG_CANDIDATES, type_hint=".xml"
        )
        if resolved.found:
            standard = str(resolved.absolute_path)
            self.info.append(config_resolver.describe(resolved, request.config_path_override))
        else:
            standard = self.options.standard
            self.info.append(f'Using "{self.options.standard_name}" standard')

        arguments = build_arguments(
            ["--report=json", *self._selection_flags(standard)],
            file_set.paths,
        )
        outcome = invoke(
            ToolInvocation(driver, arguments, self.cwd),
            ExecutionMode.BLOCKING,
            timeout=self.timeout,
        )

        if outcome.exit_success:
            return self._render(CheckResult(), standard)

        result = parse(ToolOutputKind.STYLE_JSON, outcome.stdout, exit_success=False, cwd=self.cwd)
        return self._render(result, standard)

    def _selection_flags(self, standard: str) -> list[Optional[str]]:
        return [
            f"--standard={standard}",
            f"--encoding={self.options.encoding}",
            "-n" if self.options.hide_warnings else None,
        ]

    def remediation(self, result: CheckResult, standard: str) -> Optional[str]:
        """phpcbf command fixing the fixable files, if phpcbf is installed."""
        if not result.fixable_files:
            return None
        if not vendor_executable(self.cwd, "phpcbf").exists():
            return None
        arguments = build_arguments(self._selection_flags(standard), result.fixable_files)
        return " ".join(["./vendor/bin/phpcbf", *arguments])

    def _render(self, result: CheckResult, standard: str) -> Report:
        return render(
            result,
            title=TITLE,
            tool=self.tool,
            failure_message="Coding style errors found",
            remediation=self.remediation(result, standard),
            info=self.info,
        )
