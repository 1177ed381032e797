"""
Report rendering.

Turns a CheckResult (or a HookError) into a Report: a list of rich
renderables plus the exit status handed back to git. Files and diagnostics
are rendered in the order the tool emitted them; nothing is sorted.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Optional, Sequence

from rich import box
from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from php_git_hooks.errors import HookError, StagedUnstagedConflict
from php_git_hooks.models import CheckResult, Diagnostic, ExitStatus, FailureKind, Severity

REPORT_WIDTH = 120
RETRY_HINT = "Fix the error(s) and try again."
FIX_TIP = "Tip: Some errors can be fixed automatically by using following command:"

SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "bold yellow",
}


@dataclass
class Report:
    """Rendered outcome of a hook command."""

    exit_status: ExitStatus
    renderables: list[RenderableType] = field(default_factory=list)
    failure: Optional[FailureKind] = None

    @property
    def success(self) -> bool:
        return self.exit_status is ExitStatus.SUCCESS

    @property
    def text(self) -> str:
        """Plain-text rendering, identical across runs and terminals."""
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=REPORT_WIDTH,
            color_system=None,
            force_terminal=False,
            highlight=False,
            emoji=False,
        )
        self.print(console)
        return buffer.getvalue()

    def print(self, console: Console) -> None:
        for renderable in self.renderables:
            console.print(renderable)


def _block(label: str, message: str, style: str) -> Text:
    return Text(f"[{label}] {message}", style=style)


def info_line(message: str) -> Text:
    return _block("INFO", message, "cyan")


def diagnostics_table(diagnostics: Sequence[Diagnostic]) -> Table:
    """Boxed table with one row per diagnostic, separated by lines."""
    table = Table(box=box.SQUARE, show_lines=True, expand=False)
    table.add_column("Type", no_wrap=True)
    table.add_column("Line", no_wrap=True)
    table.add_column("Fix", no_wrap=True)
    table.add_column("Message", overflow="fold")

    for diagnostic in diagnostics:
        table.add_row(
            Text(diagnostic.severity.value, style=SEVERITY_STYLES[diagnostic.severity]),
            Text(diagnostic.position),
            Text("[x]" if diagnostic.fixable else "[ ]"),
            Text(diagnostic.message),
        )
    return table


def summary_line(result: CheckResult) -> Text:
    files = sum(1 for diagnostics in result.per_file.values() if diagnostics)
    return Text(
        f"{result.total_errors} error(s), {result.total_warnings} warning(s) in {files} file(s)",
        style="bold",
    )


def _header(title: str, info: Sequence[str]) -> list[RenderableType]:
    renderables: list[RenderableType] = [Text(title, style="bold underline"), Text("")]
    renderables.extend(info_line(line) for line in info)
    return renderables


def render(
    result: CheckResult,
    *,
    title: str,
    tool: str,
    failure_message: str,
    remediation: Optional[str] = None,
    info: Sequence[str] = (),
) -> Report:
    """
    Render a check result.

    Args:
        result: Parsed tool result
        title: Section title for the command
        tool: Tool description used in the decode-failure message
        failure_message: Summary shown when the check fails
        remediation: Auto-fix command line, shown when fixable files exist
        info: Informational lines (e.g. which configuration is in use)

    Returns:
        Report
    """
    renderables = _header(title, info)

    if result.passed:
        renderables.append(_block("OK", "Done", "bold green"))
        return Report(ExitStatus.SUCCESS, renderables)

    if result.unparsable_output:
        renderables.append(_block("ERROR", "Errors found", "bold red"))
        renderables.append(Text(f"Could not decode errors returned by {tool}.", style="yellow"))
        return Report(ExitStatus.FAILURE, renderables, FailureKind.UNPARSABLE_OUTPUT)

    if not result.has_findings and not result.general_errors:
        renderables.append(_block("ERROR", failure_message, "bold red"))
        renderables.append(Text(RETRY_HINT, style="yellow"))
        return Report(ExitStatus.FAILURE, renderables, FailureKind.TOOL_EXECUTION_FAILED)

    for file, diagnostics in result.per_file.items():
        if not diagnostics:
            continue
        renderables.append(Text(file, style="bold cyan"))
        renderables.append(diagnostics_table(diagnostics))

    for error in result.general_errors:
        renderables.append(Text(error, style="red"))

    renderables.append(summary_line(result))
    renderables.append(_block("ERROR", failure_message, "bold red"))

    if remediation and result.fixable_files:
        renderables.append(Text(FIX_TIP))
        renderables.append(Text(f"  {remediation}"))

    renderables.append(Text(RETRY_HINT, style="yellow"))
    return Report(ExitStatus.FAILURE, renderables, FailureKind.TOOL_REPORTED_FINDINGS)


def render_error(error: HookError, *, title: str, info: Sequence[str] = ()) -> Report:
    """Render a terminal HookError as a failure report."""
    renderables = _header(title, info)
    renderables.append(_block("ERROR", error.message, "bold red"))

    if isinstance(error, StagedUnstagedConflict):
        renderables.extend(Text(f" * {file}") for file in error.files)

    if error.hint:
        renderables.append(Text(error.hint, style="yellow"))

    return Report(ExitStatus.FAILURE, renderables, error.kind)
