"""
Hook commands for php-git-hooks.

Provides integrations for:
- phpcs (coding style, pre-commit)
- PHPStan (static analysis, pre-commit)
- php -l (syntax check, pre-commit)
- PHPUnit / Pest (test suite, pre-push)
"""

from php_git_hooks.integrations.php_lint import PhpLintIntegration
from php_git_hooks.integrations.phpcs import CodeStyleIntegration
from php_git_hooks.integrations.phpstan import StaticAnalysisIntegration
from php_git_hooks.integrations.test_suite import TestSuiteIntegration

__all__ = [
    "CodeStyleIntegration",
    "StaticAnalysisIntegration",
    "PhpLintIntegration",
    "TestSuiteIntegration",
]
