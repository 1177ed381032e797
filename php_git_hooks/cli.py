"""
CLI for php-git-hooks.

Commands:
    php-git-hooks php:cs           Check coding style (pre-commit)
    php-git-hooks php:analyze      Static analysis (pre-commit)
    php-git-hooks php:lint         Syntax check (pre-commit)
    php-git-hooks php:test-suite   Run the test suite (pre-push)
    php-git-hooks init             Initialize configuration
    php-git-hooks status           Show tools and configuration in use
"""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from php_git_hooks import __version__
from php_git_hooks.config import CONFIG_FILE_NAME, SUPPORTED_STANDARDS, TEST_DRIVERS, HooksConfig
from php_git_hooks.errors import InvalidOptionsError
from php_git_hooks.hooks.git import get_branch_name, get_repo_root
from php_git_hooks.integrations import (
    CodeStyleIntegration,
    PhpLintIntegration,
    StaticAnalysisIntegration,
    TestSuiteIntegration,
)
from php_git_hooks.integrations import phpcs, phpstan, test_suite
from php_git_hooks.reporting import Report
from php_git_hooks.resolvers import config as config_resolver
from php_git_hooks.runner import vendor_executable

console = Console()


def _load_config(ctx: click.Context) -> HooksConfig:
    config_path = (ctx.obj or {}).get("config_path")
    try:
        return HooksConfig.load(Path(config_path) if config_path else None)
    except InvalidOptionsError as e:
        console.print(f"[red]Configuration error:[/red] {e.message}")
        sys.exit(1)


def _with_overrides(config: HooksConfig, section: str, /, **overrides: object) -> HooksConfig:
    try:
        return config.with_overrides(section, **overrides)
    except InvalidOptionsError as e:
        console.print(f"[red]Invalid option:[/red] {e.message}")
        sys.exit(1)


def _finish(report: Report) -> None:
    report.print(console)
    sys.exit(int(report.exit_status))


@click.group()
@click.version_option(version=__version__, prog_name="php-git-hooks")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Path to config file (defaults to {CONFIG_FILE_NAME})",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """PHP Git Hooks - Gate commits and pushes on PHP code quality."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command("php:cs")
@click.option("--ruleset", help="phpcs configuration file (must be an .xml file)")
@click.option(
    "--standard",
    type=click.Choice(list(SUPPORTED_STANDARDS)),
    help="Coding standard used when no configuration file exists",
)
@click.option("--encoding", help="Encoding of the checked files")
@click.option("--hide-warnings/--show-warnings", default=None, help="Hide warnings")
@click.option("--only-staged/--all-paths", default=None, help="Check staged files only")
@click.option("--path", "paths", multiple=True, help="Path to check (can be specified multiple times)")
@click.pass_context
def code_style(
    ctx: click.Context,
    ruleset: str | None,
    standard: str | None,
    encoding: str | None,
    hide_warnings: bool | None,
    only_staged: bool | None,
    paths: tuple[str, ...],
) -> None:
    """Check coding style in staged PHP files."""
    cfg = _with_overrides(
        _load_config(ctx),
        "code_style",
        config=ruleset,
        standard=standard,
        encoding=encoding,
        hide_warnings=hide_warnings,
        only_staged=only_staged,
        paths=list(paths) if paths else None,
    )
    _finish(CodeStyleIntegration(cfg.code_style).run())


@main.command("php:analyze")
@click.option("--neon", "neon", help="PHPStan configuration file")
@click.option("--level", type=int, help="Rule level used when no configuration file exists (0-8)")
@click.option("--memory-limit", help="PHPStan memory limit (e.g. 1G)")
@click.option("--only-staged/--all-paths", default=None, help="Analyze staged files only")
@click.option("--path", "paths", multiple=True, help="Path to analyze (can be specified multiple times)")
@click.pass_context
def static_analysis(
    ctx: click.Context,
    neon: str | None,
    level: int | None,
    memory_limit: str | None,
    only_staged: bool | None,
    paths: tuple[str, ...],
) -> None:
    """Static analyze staged PHP files."""
    cfg = _with_overrides(
        _load_config(ctx),
        "static_analysis",
        config=neon,
        level=level,
        memory_limit=memory_limit,
        only_staged=only_staged,
        paths=list(paths) if paths else None,
    )
    _finish(StaticAnalysisIntegration(cfg.static_analysis).run())


@main.command("php:lint")
@click.option("--binary", help="PHP interpreter used for the syntax check")
@click.option("--only-staged/--all-paths", default=None, help="Check staged files only")
@click.option("--path", "paths", multiple=True, help="Path to check (can be specified multiple times)")
@click.pass_context
def lint(
    ctx: click.Context,
    binary: str | None,
    only_staged: bool | None,
    paths: tuple[str, ...],
) -> None:
    """Check staged PHP files for syntax errors."""
    cfg = _with_overrides(
        _load_config(ctx),
        "lint",
        binary=binary,
        only_staged=only_staged,
        paths=list(paths) if paths else None,
    )
    _finish(PhpLintIntegration(cfg.lint).run())


@main.command("php:test-suite")
@click.argument("remote")
@click.argument("url")
@click.option("--driver", type=click.Choice(TEST_DRIVERS), help="Test runner")
@click.option("--phpunit-config", help="PHPUnit configuration file")
@click.option("--printer", help="Result printer class")
@click.option("--timeout", type=float, help="Abort the test run after this many seconds")
@click.pass_context
def test_suite_command(
    ctx: click.Context,
    remote: str,
    url: str,
    driver: str | None,
    phpunit_config: str | None,
    printer: str | None,
    timeout: float | None,
) -> None:
    """Run PHP test suite."""
    cfg = _with_overrides(
        _load_config(ctx),
        "test_suite",
        driver=driver,
        config=phpunit_config,
        printer=printer,
        timeout=timeout,
    )
    _finish(TestSuiteIntegration(cfg.test_suite).run(remote, url))


@main.command()
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite existing configuration",
)
def init(force: bool) -> None:
    """Initialize php-git-hooks configuration."""
    config_path = Path(CONFIG_FILE_NAME)

    if config_path.exists() and not force:
        console.print(
            f"[yellow]Configuration file already exists:[/yellow] {config_path}\n"
            "Use --force to overwrite."
        )
        sys.exit(1)

    config_path.write_text(HooksConfig().to_toml())

    console.print(
        Panel(
            f"[green]✓[/green] Created configuration file: [bold]{config_path}[/bold]\n\n"
            "Next steps:\n"
            "1. Install phpcs, phpstan and phpunit with Composer\n"
            "2. Adjust paths and levels in the config file\n"
            "3. Call [bold]php-git-hooks php:cs[/bold] from your pre-commit hook",
            title="PHP Git Hooks Initialized",
            border_style="green",
        )
    )


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show tools and configuration files in use."""
    cfg = _load_config(ctx)
    cwd = Path.cwd()

    table = Table(title="PHP Git Hooks Status")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Status", style="green", no_wrap=True)

    table.add_row(
        "Config File",
        str(cfg.source) if cfg.source else "None (using defaults)",
        "✓" if cfg.source else "[yellow]○[/yellow]",
    )

    repo_root = get_repo_root(cwd)
    table.add_row(
        "Repository",
        f"{repo_root} ({get_branch_name(cwd)})" if repo_root else "Not a git repository",
        "✓" if repo_root else "[red]✗[/red]",
    )

    for name in ("phpcs", "phpcbf", "phpstan", cfg.test_suite.driver):
        path = vendor_executable(cwd, name)
        table.add_row(name, str(path), "✓" if path.exists() else "[red]✗[/red]")

    php = shutil.which(cfg.lint.binary)
    table.add_row("php", php or cfg.lint.binary, "✓" if php else "[red]✗[/red]")

    sources = [
        ("phpcs config", cfg.code_style.config, phpcs.CONFIG_CANDIDATES, ".xml"),
        ("phpstan config", cfg.static_analysis.config, phpstan.CONFIG_CANDIDATES, None),
        ("phpunit config", cfg.test_suite.config, test_suite.CONFIG_CANDIDATES, None),
    ]
    for label, override, candidates, hint in sources:
        resolved = config_resolver.resolve(override, cwd, candidates, type_hint=hint)
        table.add_row(
            label,
            str(resolved.absolute_path) if resolved.found else "None (using defaults)",
            resolved.source_kind.value if resolved.found else "[yellow]○[/yellow]",
        )

    console.print(table)


if __name__ == "__main__":
    main()
