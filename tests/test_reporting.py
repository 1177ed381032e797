"""
Tests for report rendering.
"""

import json
import re

from php_git_hooks.analyzers.parsing import parse
from php_git_hooks.errors import NoPathsProvided, StagedUnstagedConflict, ToolNotFound
from php_git_hooks.models import CheckResult, ExitStatus, FailureKind, ToolOutputKind
from php_git_hooks.reporting import FIX_TIP, RETRY_HINT, render, render_error

ROW = re.compile(r"^│ (ERROR|WARNING)\s")


def render_style(result, remediation=None):
    return render(
        result,
        title="Checking coding style in PHP files",
        tool="code style checker",
        failure_message="Coding style errors found",
        remediation=remediation,
    )


def rows(text):
    return [line for line in text.splitlines() if ROW.match(line)]


class TestSuccess:
    def test_done(self):
        report = render_style(CheckResult())

        assert report.exit_status is ExitStatus.SUCCESS
        assert report.success
        assert report.failure is None
        assert "[OK] Done" in report.text

    def test_info_lines(self):
        report = render(
            CheckResult(),
            title="Static analysis of PHP files",
            tool="static analysis tool",
            failure_message="Found 0 errors",
            info=["Using default configuration with rule level 8"],
        )

        assert "[INFO] Using default configuration with rule level 8" in report.text


class TestFindings:
    def test_single_fixable_error(self, style_payload):
        result = parse(ToolOutputKind.STYLE_JSON, style_payload, exit_success=False)

        report = render_style(result, remediation="./vendor/bin/phpcbf --standard=PSR12 a.php")
        text = report.text

        assert report.exit_status is ExitStatus.FAILURE
        assert report.failure is FailureKind.TOOL_REPORTED_FINDINGS
        assert [line.strip() for line in text.splitlines()].count("a.php") == 1
        row = rows(text)
        assert len(row) == 1
        assert re.search(r"ERROR\s+│ 3:1\s+│ \[x\]\s+│ x\s+│", row[0])
        assert FIX_TIP in text
        assert "./vendor/bin/phpcbf --standard=PSR12 a.php" in text
        assert "[ERROR] Coding style errors found" in text
        assert RETRY_HINT in text

    def test_file_headers_and_rows_in_order(self):
        payload = json.dumps(
            {
                "files": {
                    "src/b.php": {
                        "messages": [
                            {"type": "ERROR", "line": 4, "column": 2, "message": "first message"},
                            {"type": "WARNING", "line": 1, "column": 1, "message": "second message"},
                        ]
                    },
                    "src/a.php": {
                        "messages": [
                            {"type": "ERROR", "line": 7, "column": 5, "message": "third message"},
                        ]
                    },
                }
            }
        )
        result = parse(ToolOutputKind.STYLE_JSON, payload, exit_success=False)

        text = render_style(result).text
        lines = [line.strip() for line in text.splitlines()]

        assert lines.count("src/b.php") == 1
        assert lines.count("src/a.php") == 1
        assert lines.index("src/b.php") < lines.index("src/a.php")
        assert len(rows(text)) == 3
        positions = [text.index(m) for m in ("first message", "second message", "third message")]
        assert positions == sorted(positions)
        assert "2 error(s), 1 warning(s) in 2 file(s)" in text

    def test_no_remediation_without_fixable_files(self):
        payload = json.dumps(
            {"files": {"a.php": {"messages": [{"type": "ERROR", "line": 1, "column": 1, "message": "m"}]}}}
        )
        result = parse(ToolOutputKind.STYLE_JSON, payload, exit_success=False)

        text = render_style(result, remediation="./vendor/bin/phpcbf a.php").text

        assert FIX_TIP not in text

    def test_unfixable_marker(self):
        payload = json.dumps(
            {"files": {"a.php": {"messages": [{"type": "ERROR", "line": 1, "column": 1, "message": "m"}]}}}
        )
        result = parse(ToolOutputKind.STYLE_JSON, payload, exit_success=False)

        assert "[ ]" in rows(render_style(result).text)[0]

    def test_general_errors_are_listed(self):
        result = CheckResult(tool_exited_cleanly=False, general_errors=["Ignored error pattern was not matched"])

        report = render(result, title="Static analysis", tool="static analysis tool", failure_message="Found 0 errors")

        assert report.failure is FailureKind.TOOL_REPORTED_FINDINGS
        assert "Ignored error pattern was not matched" in report.text


class TestFailures:
    def test_unparsable_output(self):
        result = parse(ToolOutputKind.ANALYSIS_JSON, "Fatal error: Allowed memory size exhausted", exit_success=False)

        report = render(result, title="Static analysis", tool="static analysis tool", failure_message="Found 0 errors")

        assert report.exit_status is ExitStatus.FAILURE
        assert report.failure is FailureKind.UNPARSABLE_OUTPUT
        assert "Could not decode errors returned by static analysis tool." in report.text
        assert "Done" not in report.text
        assert "Allowed memory size" not in report.text

    def test_tool_failed_without_findings(self):
        report = render(
            CheckResult(tool_exited_cleanly=False),
            title="Running PHP test suite",
            tool="test runner",
            failure_message="Test suite failed.",
        )

        assert report.failure is FailureKind.TOOL_EXECUTION_FAILED
        assert "[ERROR] Test suite failed." in report.text


class TestRenderError:
    def test_conflict_lists_files(self):
        report = render_error(StagedUnstagedConflict(["a.php", "src/b.php"]), title="Checking")

        assert report.exit_status is ExitStatus.FAILURE
        assert report.failure is FailureKind.STAGED_UNSTAGED_CONFLICT
        assert "Following staged files has unstaged changes:" in report.text
        assert " * a.php" in report.text
        assert " * src/b.php" in report.text

    def test_tool_not_found_names_path(self, tmp_path):
        path = tmp_path / "vendor" / "bin" / "phpstan"

        report = render_error(ToolNotFound(path, "PHPStan"), title="Static analysis")

        assert report.failure is FailureKind.TOOL_NOT_FOUND
        assert str(path) in report.text

    def test_no_paths_hint(self):
        report = render_error(NoPathsProvided(), title="Checking")

        assert "No paths were provided." in report.text
        assert ".php-git-hooks.toml" in report.text

    def test_text_is_deterministic(self, style_payload):
        result = parse(ToolOutputKind.STYLE_JSON, style_payload, exit_success=False)
        assert render_style(result).text == render_style(result).text
