"""
PHP syntax check integration.

Runs ``php -l`` once per staged PHP file.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from php_git_hooks.analyzers.parsing import merge, parse
from php_git_hooks.config import LintOptions
from php_git_hooks.errors import HookError, ToolNotFound
from php_git_hooks.models import (
    CheckMode,
    CheckRequest,
    CheckResult,
    ExecutionMode,
    ToolInvocation,
    ToolOutputKind,
)
from php_git_hooks.reporting import Report, render, render_error
from php_git_hooks.resolvers import files as file_resolver
from php_git_hooks.runner import build_arguments, invoke

logger = logging.getLogger(__name__)

TITLE = "Checking PHP files for syntax errors"


class PhpLintIntegration:
    """Integration with the PHP interpreter's syntax check."""

    hook_type = "pre-commit"
    tool = "PHP linter"

    def __init__(
        self,
        options: Optional[LintOptions] = None,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ):
        self.options = options or LintOptions()
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.timeout = timeout

    def run(self) -> Report:
        """Lint every file and return the rendered report."""
        try:
            return self._run()
        except HookError as e:
            logger.debug("Syntax check aborted: %s", e)
            return render_error(e, title=TITLE)

    def _binary(self) -> Path:
        binary = shutil.which(self.options.binary)
        if binary is None:
            raise ToolNotFound(self.options.binary, "PHP binary")
        return Path(binary)

    def _files(self) -> list[str]:
        mode = CheckMode.STAGED_ONLY if self.options.only_staged else CheckMode.EXPLICIT_PATHS
        request = CheckRequest(mode=mode, explicit_paths=tuple(self.options.paths))
        file_set = file_resolver.resolve(request, self.cwd)
        file_resolver.ensure_no_conflicts(file_set)

        files: list[str] = []
        for path in file_set.paths:
            if (self.cwd / path).is_dir():
                found = sorted((self.cwd / path).rglob(f"*.{request.extension}"))
                candidates = [str(file.relative_to(self.cwd)) for file in found]
            else:
                candidates = [path]
            for file in candidates:
                if file not in files:
                    files.append(file)
        return files

    def _run(self) -> Report:
        files = self._files()
        if not files:
            return self._render(CheckResult())

        binary = self._binary()
        results = []
        for file in files:
            outcome = invoke(
                ToolInvocation(binary, build_arguments(["-l"], [file]), self.cwd),
                ExecutionMode.BLOCKING,
                timeout=self.timeout,
            )
            raw = outcome.stdout or outcome.stderr
            results.append(
                parse(ToolOutputKind.LINT_TEXT, raw, exit_success=outcome.exit_success, filename=file)
            )

        return self._render(merge(results))

    def _render(self, result: CheckResult) -> Report:
        return render(
            result,
            title=TITLE,
            tool=self.tool,
            failure_message="Syntax errors were found.",
        )
