"""
Analyzers for tool output.

This module provides parsers for:
- phpcs JSON reports
- PHPStan JSON reports
- ``php -l`` output
- Test runner exit status
"""

from php_git_hooks.analyzers.parsing import (
    merge,
    parse,
    parse_analysis_json,
    parse_lint_text,
    parse_style_json,
    parse_test_status,
)

__all__ = [
    "parse",
    "merge",
    "parse_style_json",
    "parse_analysis_json",
    "parse_lint_text",
    "parse_test_status",
]
