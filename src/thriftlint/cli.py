"""thriftlint CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from thriftlint import __version__


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    logging.basicConfig(level=level, format="%(name)s: %(message)s", handlers=[handler], force=True)


@click.group()
@click.version_option(version=__version__, prog_name="thriftlint")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """thriftlint - lint rules for Thrift IDL files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose=verbose, quiet=quiet)


@main.command()
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: thriftlint.yml in the current directory).",
)
@click.option(
    "--include",
    "-I",
    "include_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Include search directory (repeatable; replaces the configured list).",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "porcelain"]),
    default=None,
    help="Output format (default: rich if TTY, porcelain if piped).",
)
@click.option(
    "--errors-only",
    is_flag=True,
    default=False,
    help="Only report errors, not warnings.",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit 1 on warnings as well as errors.",
)
def lint(
    paths: tuple[Path, ...],
    *,
    config_path: Path | None,
    include_dirs: tuple[Path, ...],
    fmt: str | None,
    errors_only: bool,
    strict: bool,
) -> None:
    """Lint Thrift files and directories.

    Exit codes: 0 = clean, 1 = errors (or warnings with --strict),
    2 = configuration error.
    """
    from thriftlint.linter import LintError, format_json, format_porcelain, format_rich
    from thriftlint.linter import lint as run_lint

    is_tty = sys.stdout.isatty()
    if fmt is None:
        fmt = "rich" if is_tty else "porcelain"

    try:
        result = run_lint(
            list(paths),
            config_path=config_path,
            include_dirs=list(include_dirs) or None,
        )
    except LintError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if errors_only:
        result.diagnostics = result.errors

    if fmt == "rich":
        output = format_rich(result, color=is_tty)
    elif fmt == "json":
        output = format_json(result)
    else:
        output = format_porcelain(result)
    if output:
        click.echo(output)

    if result.errors or result.faults or (strict and result.warnings):
        sys.exit(1)


@main.command("checks")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: thriftlint.yml in the current directory).",
)
def checks_cmd(*, config_path: Path | None) -> None:
    """List every check and whether the configuration enables it."""
    from thriftlint.checks import all_checks
    from thriftlint.config import ConfigError, load_config

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    for check in all_checks(config):
        state = "enabled" if config.is_enabled(check.rule_id) else "disabled"
        click.echo(f"{check.rule_id:<28} {state}")
