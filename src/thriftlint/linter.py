"""Linter orchestrator: load config, build checks, run them over files, format results."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING

from thriftlint.checks import build_checks
from thriftlint.config import ConfigError, load_config
from thriftlint.engine.runner import Runner, collect_files

if TYPE_CHECKING:
    from collections.abc import Sequence

    from thriftlint.config import Config
    from thriftlint.engine.diagnostic import Diagnostic

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class LintError(Exception):
    """Raised when lint encounters a configuration error."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class LintResult:
    """Result of a lint run."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    faults: list[Diagnostic] = field(default_factory=list)
    checks_run: int = 0
    files_checked: int = 0
    elapsed_ms: float = 0.0

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def lint(
    paths: Sequence[Path],
    *,
    config: Config | None = None,
    config_path: Path | None = None,
    include_dirs: Sequence[Path] | None = None,
) -> LintResult:
    """Lint every Thrift file under *paths*.

    Parameters
    ----------
    paths:
        Files and/or directories; directories are searched for ``*.thrift``.
    config:
        Pre-loaded configuration.  When *None*, it is loaded from
        *config_path* or from ``thriftlint.yml`` in the working directory.
    include_dirs:
        Directories searched for ``include`` targets.  When given, they
        replace the configuration's ``includes`` list.

    Returns
    -------
    LintResult
        Diagnostics, framework faults, counts, and timing.

    Raises
    ------
    LintError
        When the configuration file is invalid.
    """
    start = time.monotonic()

    if config is None:
        try:
            config = load_config(config_path)
        except ConfigError as exc:
            msg = f"Invalid configuration: {exc}"
            raise LintError(msg) from exc

    if include_dirs is None:
        include_dirs = [Path(d) for d in config.includes]

    checks = build_checks(config)
    files = collect_files(paths)
    logger.info("Linting %d file(s) with %d check(s)", len(files), len(checks))

    outcome = Runner(checks, include_dirs=include_dirs).run(files)

    elapsed = (time.monotonic() - start) * 1000
    return LintResult(
        diagnostics=outcome.diagnostics,
        faults=outcome.faults,
        checks_run=len(checks),
        files_checked=outcome.files_checked,
        elapsed_ms=elapsed,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

_SEVERITY_STYLES: dict[str, str] = {"error": "bold red", "warn": "yellow"}


def format_rich(result: LintResult, *, color: bool = False) -> str:
    """Format a LintResult as human-readable text rendered with Rich.

    Example output::

        shared.thrift:3:1  error  circular include (1/2): ... (import.cycle.disallowed)
        api.thrift:12:5    warn   enumeration 'Code' has more than 500 items (enum.size)

        1 error, 1 warning in 4 files (13 checks, 0.0s)
    """
    from rich.console import Console
    from rich.text import Text

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, width=200)

    for diagnostic in [*result.diagnostics, *result.faults]:
        line = Text()
        line.append(f"{diagnostic.filename}:{diagnostic.line}:{diagnostic.column}", style="bold")
        line.append("  ")
        line.append(diagnostic.severity, style=_SEVERITY_STYLES.get(diagnostic.severity, ""))
        line.append(f"  {diagnostic.message} ")
        line.append(f"({diagnostic.rule_id})", style="dim")
        console.print(line, soft_wrap=True)

    errors = len(result.errors) + len(result.faults)
    warnings = len(result.warnings)
    elapsed_str = f"{result.elapsed_ms / 1000:.1f}s"
    if result.diagnostics or result.faults:
        console.print()
        console.print(
            f"{errors} error(s), {warnings} warning(s) in {result.files_checked} file(s) "
            f"({result.checks_run} checks, {elapsed_str})",
            style="bold",
        )
    else:
        console.print(
            f"✓ No problems found in {result.files_checked} file(s) "
            f"({result.checks_run} checks, {elapsed_str})",
            style="green",
        )

    return buf.getvalue().rstrip("\n")


def _diagnostic_to_dict(diagnostic: Diagnostic) -> dict[str, object]:
    return {
        "rule_id": diagnostic.rule_id,
        "severity": diagnostic.severity,
        "file": diagnostic.filename,
        "line": diagnostic.line,
        "column": diagnostic.column,
        "message": diagnostic.message,
    }


def format_json(result: LintResult) -> str:
    """Format a LintResult as structured JSON.

    Returns a JSON string with ``diagnostics`` and ``faults`` arrays and a
    ``summary`` object.
    """
    output: dict[str, object] = {
        "diagnostics": [_diagnostic_to_dict(d) for d in result.diagnostics],
        "faults": [_diagnostic_to_dict(d) for d in result.faults],
        "summary": {
            "checks_run": result.checks_run,
            "files_checked": result.files_checked,
            "errors": len(result.errors),
            "warnings": len(result.warnings),
            "faults": len(result.faults),
            "elapsed_ms": result.elapsed_ms,
        },
    }
    return json.dumps(output, indent=2)


def format_porcelain(result: LintResult) -> str:
    """Format a LintResult as one line per diagnostic.

    Format: ``file:line:column: severity: message (rule_id)``.
    Returns empty string when there is nothing to report.
    """
    return "\n".join(str(d) for d in [*result.diagnostics, *result.faults])
