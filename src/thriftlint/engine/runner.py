"""Run driver: parse files, walk every node through the dispatcher, finalize multi-file checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from thriftlint.engine.check import FileContext, InvariantError
from thriftlint.engine.diagnostic import Diagnostic
from thriftlint.engine.dispatch import Dispatcher
from thriftlint.idl.parser import ParseError, parse_file
from thriftlint.idl.walker import walk

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from thriftlint.engine.check import Check
    from thriftlint.idl.nodes import Program

logger = logging.getLogger(__name__)

PARSE_RULE_ID = "parse.error"
FINALIZE_FILENAME = "<finalize>"
THRIFT_SUFFIX = ".thrift"


@dataclass
class RunResult:
    """Outcome of one run over a fixed set of files."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    faults: list[Diagnostic] = field(default_factory=list)
    files_checked: int = 0


def collect_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into their ``*.thrift`` files (sorted) and drop duplicates.

    Explicit file arguments are kept whatever their suffix.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        candidates = sorted(path.rglob(f"*{THRIFT_SUFFIX}")) if path.is_dir() else [path]
        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            files.append(candidate)
    return files


class Runner:
    """Drives one run: ``check_file`` for each file, then ``finish`` exactly once."""

    def __init__(self, checks: Sequence[Check], *, include_dirs: Sequence[Path] = ()) -> None:
        self.dispatcher = Dispatcher(checks)
        self.include_dirs = tuple(include_dirs)
        self._programs: dict[Path, Program | None] = {}
        self._result = RunResult()
        self._finished = False

    # -- parsing --

    def _load_include(self, path: Path) -> Program | None:
        """Parse an included file once; failures are left to that file's own run."""
        key = path.resolve()
        if key not in self._programs:
            try:
                self._programs[key] = parse_file(path)
            except (OSError, ParseError, UnicodeDecodeError) as exc:
                logger.debug("Could not load include %s: %s", path, exc)
                self._programs[key] = None
        return self._programs[key]

    def _includes_for(self, filename: str, program: Program) -> dict[str, Program]:
        lookup = FileContext(filename=filename, program=program, include_dirs=self.include_dirs)
        includes: dict[str, Program] = {}
        for include in program.includes:
            target = lookup.resolve_include(include.path)
            if target is None:
                logger.debug("%s: include %r not found", filename, include.path)
                continue
            loaded = self._load_include(target)
            if loaded is not None:
                includes[include.name] = loaded
        return includes

    # -- lifecycle --

    def check_file(self, path: Path) -> list[Diagnostic]:
        """Parse *path* and dispatch every node; returns this file's diagnostics."""
        if self._finished:
            msg = "run already finished"
            raise RuntimeError(msg)

        filename = str(path)
        try:
            program = parse_file(path)
        except ParseError as exc:
            diagnostic = Diagnostic(
                filename, exc.line, exc.column, PARSE_RULE_ID, "error", exc.message
            )
            self._result.diagnostics.append(diagnostic)
            return [diagnostic]
        except (OSError, UnicodeDecodeError) as exc:
            diagnostic = Diagnostic(filename, 0, 1, PARSE_RULE_ID, "error", f"cannot read file: {exc}")
            self._result.diagnostics.append(diagnostic)
            return [diagnostic]

        self._programs[path.resolve()] = program
        file_ctx = FileContext(
            filename=filename,
            program=program,
            includes=self._includes_for(filename, program),
            include_dirs=self.include_dirs,
        )

        diagnostics: list[Diagnostic] = []
        for node, parents in walk(program):
            diagnostics.extend(self.dispatcher.dispatch(node, file_ctx, parents))

        logger.debug("%s: %d diagnostic(s)", filename, len(diagnostics))
        self._result.files_checked += 1
        self._result.diagnostics.extend(diagnostics)
        return diagnostics

    def finish(self) -> RunResult:
        """Finalize every multi-file check once and return the run result."""
        if self._finished:
            msg = "run already finished"
            raise RuntimeError(msg)
        self._finished = True

        # Per-file findings are sorted; multi-file findings keep their own order
        # (a cycle trace reads as a chain).
        self._result.diagnostics.sort()
        for check in self.dispatcher.multi_file_checks:
            try:
                self._result.diagnostics.extend(check.finalize_once())
            except InvariantError:
                raise
            except Exception as exc:  # noqa: BLE001
                logger.exception("Check %s failed during finalize", check.rule_id)
                self.dispatcher.faults.append(
                    Diagnostic(
                        FINALIZE_FILENAME,
                        0,
                        1,
                        check.rule_id,
                        "error",
                        f"internal error in check: {exc}",
                    )
                )

        self._result.faults = list(self.dispatcher.faults)
        return self._result

    def run(self, files: Iterable[Path]) -> RunResult:
        for path in files:
            self.check_file(path)
        return self.finish()
