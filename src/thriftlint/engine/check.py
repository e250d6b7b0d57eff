"""Check descriptors and the contexts handed to check functions.

Two check shapes exist:

* :class:`SingleFileCheck` - a stateless function over one node that returns
  its diagnostics immediately.
* :class:`MultiFileCheck` - a visit function that folds every matching node of
  every file into private state, plus a finalize function that runs once
  after the last file and returns the check's diagnostics.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from thriftlint.engine.diagnostic import Diagnostic
from thriftlint.idl.resolve import resolve_constant, resolve_type

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from thriftlint.idl.nodes import Constant, Definition, EnumItem, FieldType, Program

S = TypeVar("S")

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InvariantError(RuntimeError):
    """A check found its own state inconsistent; the run cannot continue."""


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FileContext:
    """Everything known about the file currently being walked."""

    filename: str
    program: Program
    includes: Mapping[str, Program] = field(default_factory=dict)
    include_dirs: tuple[Path, ...] = ()

    def resolve_include(self, path: str) -> Path | None:
        """Locate the file an ``include`` refers to.

        Candidates are tried relative to the including file's directory, then
        relative to the working directory, then each include directory in
        order.  Returns ``None`` if none exists.
        """
        candidates = [Path(self.filename).parent / path, Path(path)]
        candidates.extend(directory / path for directory in self.include_dirs)
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        return None


@dataclass(frozen=True)
class CheckContext:
    """Per-invocation view of a :class:`FileContext`, bound to one check."""

    file: FileContext
    rule_id: str
    parents: tuple[Any, ...] = ()

    @property
    def filename(self) -> str:
        return self.file.filename

    @property
    def program(self) -> Program:
        return self.file.program

    def error(self, node: Any, message: str) -> Diagnostic:
        return Diagnostic.at(
            node, filename=self.filename, rule_id=self.rule_id, severity="error", message=message
        )

    def warning(self, node: Any, message: str) -> Diagnostic:
        return Diagnostic.at(
            node, filename=self.filename, rule_id=self.rule_id, severity="warn", message=message
        )

    def resolve_type(self, ref: FieldType) -> FieldType | Definition | None:
        return resolve_type(ref, self.program, self.file.includes)

    def resolve_constant(self, name: str) -> Constant | EnumItem | None:
        return resolve_constant(name, self.program, self.file.includes)


# ---------------------------------------------------------------------------
# Check descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SingleFileCheck:
    """A stateless check over nodes of the given kinds."""

    rule_id: str
    node_kinds: tuple[type, ...]
    fn: Callable[[CheckContext, Any], list[Diagnostic]]


class Phase(enum.Enum):
    CREATED = "created"
    ACCUMULATING = "accumulating"
    FINALIZING = "finalizing"
    DONE = "done"


class MultiFileCheck(Generic[S]):
    """A stateful check whose findings are produced once all files are seen.

    The *state* object is owned exclusively by this check; *visit* mutates it
    once per matching node and *finalize* consumes it exactly once.
    """

    def __init__(
        self,
        rule_id: str,
        node_kinds: tuple[type, ...],
        visit: Callable[[CheckContext, S, Any], None],
        state: S,
        finalize: Callable[[S], list[Diagnostic]],
    ) -> None:
        self.rule_id = rule_id
        self.node_kinds = node_kinds
        self._visit = visit
        self._state = state
        self._finalize = finalize
        self.phase = Phase.CREATED

    def __repr__(self) -> str:
        return f"MultiFileCheck({self.rule_id!r}, phase={self.phase.value})"

    @property
    def state(self) -> S:
        return self._state

    def visit(self, ctx: CheckContext, node: Any) -> None:
        """Fold one node into the shared state."""
        if self.phase in (Phase.FINALIZING, Phase.DONE):
            msg = f"check '{self.rule_id}' visited after finalize"
            raise RuntimeError(msg)
        self.phase = Phase.ACCUMULATING
        self._visit(ctx, self._state, node)

    def finalize_once(self) -> list[Diagnostic]:
        """Run the finalize function; calling this twice is a driver bug."""
        if self.phase in (Phase.FINALIZING, Phase.DONE):
            msg = f"check '{self.rule_id}' finalized twice"
            raise RuntimeError(msg)
        self.phase = Phase.FINALIZING
        diagnostics = self._finalize(self._state)
        self.phase = Phase.DONE
        return diagnostics


Check = SingleFileCheck | MultiFileCheck
