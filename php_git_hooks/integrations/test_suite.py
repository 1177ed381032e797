"""
PHP test suite integration.

Runs PHPUnit or Pest before a push, streaming its output as it runs. The
exit status of the runner is the only result.
"""

import logging
from pathlib import Path
from typing import Optional

from php_git_hooks.analyzers.parsing import parse
from php_git_hooks.config import TestSuiteOptions
from php_git_hooks.errors import ConfigurationNotFound, HookError
from php_git_hooks.models import ExecutionMode, ToolInvocation, ToolOutputKind
from php_git_hooks.reporting import Report, render, render_error
from php_git_hooks.resolvers import config as config_resolver
from php_git_hooks.runner import Echo, build_arguments, invoke, locate_executable, vendor_executable

logger = logging.getLogger(__name__)

TITLE = "Running PHP test suite"
CONFIG_CANDIDATES = ("phpunit.xml", "phpunit.xml.dist")


class TestSuiteIntegration:
    """Integration with PHPUnit and Pest."""

    __test__ = False

    hook_type = "pre-push"
    tool = "test runner"

    def __init__(
        self,
        options: Optional[TestSuiteOptions] = None,
        cwd: Optional[Path] = None,
        echo: Optional[Echo] = None,
    ):
        self.options = options or TestSuiteOptions()
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.echo = echo
        self.info: list[str] = []

    def run(self, remote: Optional[str] = None, url: Optional[str] = None) -> Report:
        """Run the test suite and return the rendered report."""
        self.info = []
        if remote:
            logger.debug("Pushing to %s (%s)", remote, url)
        try:
            return self._run()
        except HookError as e:
            logger.debug("Test suite aborted: %s", e)
            return render_error(e, title=TITLE, info=self.info)

    def _run(self) -> Report:
        driver = locate_executable(vendor_executable(self.cwd, self.options.driver), "driver")

        resolved = config_resolver.resolve(self.options.config, self.cwd, CONFIG_CANDIDATES)
        if not resolved.found:
            raise ConfigurationNotFound(CONFIG_CANDIDATES)
        self.info.append(config_resolver.describe(resolved, self.options.config))

        printer = f"--printer={self.options.printer}" if self.options.printer else None
        arguments = build_arguments([f"--configuration={resolved.absolute_path}", printer])
        outcome = invoke(
            ToolInvocation(driver, arguments, self.cwd),
            ExecutionMode.STREAMING,
            timeout=self.options.timeout,
            echo=self.echo,
        )

        result = parse(ToolOutputKind.TEST_RUNNER_STATUS, outcome.stdout, exit_success=outcome.exit_success)
        return render(
            result,
            title=TITLE,
            tool=self.tool,
            failure_message="Test suite failed.",
            info=self.info,
        )
