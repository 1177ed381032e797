"""
Tool output parsing.

Translates the output of each supported tool into a CheckResult:
- phpcs JSON report (STYLE_JSON)
- PHPStan JSON report (ANALYSIS_JSON)
- ``php -l`` text (LINT_TEXT)
- test runner exit status (TEST_RUNNER_STATUS)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from php_git_hooks.models import CheckResult, Diagnostic, Severity, ToolOutputKind

logger = logging.getLogger(__name__)

RawOutput = Union[str, bytes]

NO_SYNTAX_ERRORS = "No syntax errors detected in {filename}"
WARNING_TOKEN = "warning"


def _as_text(raw: RawOutput) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def relative_path(path: str, cwd: Optional[Path]) -> str:
    """Strip the working directory prefix from a reported path."""
    if cwd is None:
        return path
    prefix = str(cwd).rstrip(os.sep) + os.sep
    return path[len(prefix):] if path.startswith(prefix) else path


def severity_from(value: Any) -> Severity:
    """Map a tool severity string to Severity; unknown values are errors."""
    if isinstance(value, str) and value.strip().lower() == WARNING_TOKEN:
        return Severity.WARNING
    return Severity.ERROR


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _load_files_report(raw: RawOutput) -> Optional[dict[str, Any]]:
    """Decode a ``{"files": {...}}`` report, or None when malformed."""
    try:
        data = json.loads(_as_text(raw))
    except json.JSONDecodeError as e:
        logger.debug("Could not decode tool output: %s", e)
        return None

    if not isinstance(data, dict) or not isinstance(data.get("files"), dict):
        logger.debug("Tool output has no 'files' mapping")
        return None
    return data


def _messages(entry: Any) -> list[dict[str, Any]]:
    if not isinstance(entry, dict):
        return []
    messages = entry.get("messages") or []
    return [message for message in messages if isinstance(message, dict)]


def parse_style_json(raw: RawOutput, exit_success: bool = True, cwd: Optional[Path] = None) -> CheckResult:
    """Parse a phpcs ``--report=json`` payload."""
    result = CheckResult(tool_exited_cleanly=exit_success)

    data = _load_files_report(raw)
    if data is None:
        result.unparsable_output = True
        return result

    for filename, entry in data["files"].items():
        file = relative_path(filename, cwd)
        for message in _messages(entry):
            result.add(
                Diagnostic(
                    file=file,
                    message=str(message.get("message", "")),
                    severity=severity_from(message.get("type")),
                    line=_optional_int(message.get("line")),
                    column=_optional_int(message.get("column")),
                    fixable=bool(message.get("fixable", False)),
                )
            )

    return result


def parse_analysis_json(raw: RawOutput, exit_success: bool = True, cwd: Optional[Path] = None) -> CheckResult:
    """Parse a PHPStan ``--error-format=json`` payload."""
    result = CheckResult(tool_exited_cleanly=exit_success)

    data = _load_files_report(raw)
    if data is None:
        result.unparsable_output = True
        return result

    for filename, entry in data["files"].items():
        file = relative_path(filename, cwd)
        for message in _messages(entry):
            result.add(
                Diagnostic(
                    file=file,
                    message=str(message.get("message", "")),
                    line=_optional_int(message.get("line")),
                )
            )

    result.general_errors = [str(error) for error in data.get("errors") or []]
    return result


def parse_lint_text(raw: RawOutput, filename: str, exit_success: bool = True) -> CheckResult:
    """
    Parse the output of ``php -l <filename>``.

    Only the exact "no errors" phrase counts as success; anything else turns
    the first line into an error for the file.
    """
    result = CheckResult(tool_exited_cleanly=exit_success)
    response = _as_text(raw).strip("\n")

    if response == NO_SYNTAX_ERRORS.format(filename=filename):
        return result

    first_line = response.split("\n")[0].strip() or "Syntax check failed without output"
    result.add(Diagnostic(file=filename, message=first_line))
    return result


def parse_test_status(raw: RawOutput = b"", exit_success: bool = True) -> CheckResult:
    """Test runner output is not parsed; the exit status is the signal."""
    return CheckResult(tool_exited_cleanly=exit_success)


def parse(
    kind: ToolOutputKind,
    raw: RawOutput,
    *,
    exit_success: bool = True,
    filename: Optional[str] = None,
    cwd: Optional[Path] = None,
) -> CheckResult:
    """
    Parse tool output into a CheckResult.

    Args:
        kind: Output shape of the tool
        raw: Captured stdout
        exit_success: Whether the tool exited with status 0
        filename: File checked (LINT_TEXT only)
        cwd: Working directory used to relativize reported paths

    Returns:
        CheckResult
    """
    if kind is ToolOutputKind.STYLE_JSON:
        return parse_style_json(raw, exit_success, cwd)
    if kind is ToolOutputKind.ANALYSIS_JSON:
        return parse_analysis_json(raw, exit_success, cwd)
    if kind is ToolOutputKind.LINT_TEXT:
        if filename is None:
            raise ValueError("LINT_TEXT parsing requires a filename")
        return parse_lint_text(raw, filename, exit_success)
    if kind is ToolOutputKind.TEST_RUNNER_STATUS:
        return parse_test_status(raw, exit_success)
    raise ValueError(f"Unsupported output kind: {kind}")


def merge(results: Iterable[CheckResult]) -> CheckResult:
    """Combine results in order (e.g. one ``php -l`` run per file)."""
    merged = CheckResult()
    for result in results:
        for diagnostic in result.diagnostics:
            merged.add(diagnostic)
        merged.general_errors.extend(result.general_errors)
        merged.tool_exited_cleanly = merged.tool_exited_cleanly and result.tool_exited_cleanly
        merged.unparsable_output = merged.unparsable_output or result.unparsable_output
    return merged

