"""Circular include detection (``import.cycle.disallowed``).

A multi-file check.  While files are walked, every ``include`` statement adds
an importer -> importee edge to an :class:`ImportGraph`.  After the last file,
Kahn's algorithm decides whether the graph is acyclic; if it is not, an
iterative DFS extracts one concrete cycle, reported as one diagnostic per edge
so the whole chain can be read back in order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from thriftlint.engine.check import InvariantError, MultiFileCheck
from thriftlint.engine.diagnostic import Diagnostic
from thriftlint.idl.nodes import Include

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from thriftlint.engine.check import CheckContext

logger = logging.getLogger(__name__)

RULE_ID = "import.cycle.disallowed"

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CycleInvariantError(InvariantError):
    """The topological pass found a cycle that the DFS could not reproduce.

    Unreachable with a consistent graph; signals a programming error.
    """


# ---------------------------------------------------------------------------
# Graph state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IncludeSite:
    """Where an edge was first seen: the including file and its ``include`` node."""

    filename: str
    include: Include


@dataclass
class ImportGraph:
    """Directed multigraph of file includes, keyed by integer vertex ids.

    ``adjacency`` keeps duplicate edges in discovery order and ``in_degree``
    counts insertion events, so the two always agree.  ``edge_meta`` keeps
    only the first include seen for each (importer, importee) pair.
    """

    adjacency: dict[int, list[int]] = field(default_factory=dict)
    in_degree: dict[int, int] = field(default_factory=dict)
    edge_meta: dict[tuple[int, int], IncludeSite] = field(default_factory=dict)
    ids: dict[str, int] = field(default_factory=dict)
    paths: dict[int, str] = field(default_factory=dict)
    frozen: bool = False

    def vertex_id(self, path: str) -> int:
        """Return the id for *path*, assigning the next one on first sight."""
        if path not in self.ids:
            next_id = len(self.ids) + 1
            self.ids[path] = next_id
            self.paths[next_id] = path
        return self.ids[path]

    def add_edge(
        self, importer: str, importee: str, include: Include, *, filename: str | None = None
    ) -> None:
        """Record that *importer* includes *importee* via *include*.

        *filename* is the including file as it should appear in diagnostics
        (defaults to *importer*).
        """
        if self.frozen:
            msg = "import graph is read-only once finalize has started"
            raise RuntimeError(msg)

        src = self.vertex_id(importer)
        dst = self.vertex_id(importee)
        for vertex in (src, dst):
            if vertex not in self.adjacency:
                self.adjacency[vertex] = []
                self.in_degree[vertex] = 0

        self.in_degree[dst] += 1
        self.adjacency[src].append(dst)
        self.edge_meta.setdefault((src, dst), IncludeSite(filename or importer, include))

    def distinct_edges(self) -> set[tuple[int, int]]:
        return set(self.edge_meta)


# ---------------------------------------------------------------------------
# Visit (accumulating phase)
# ---------------------------------------------------------------------------


def normalize_path(path: str | Path, cwd: Path | None = None) -> str:
    """Return *path* relative to the working directory, POSIX-style.

    Raises ``OSError`` if the file does not exist and ``ValueError`` if it
    lies outside the working directory.
    """
    base = (cwd or Path.cwd()).resolve()
    resolved = Path(path).resolve(strict=True)
    return resolved.relative_to(base).as_posix()


def visit_include(ctx: CheckContext, graph: ImportGraph, include: Include) -> None:
    """Add the edge for one ``include`` statement; unresolvable paths are skipped."""
    target = ctx.file.resolve_include(include.path)
    if target is None:
        logger.debug("%s: skipping unresolved include %r", ctx.filename, include.path)
        return
    try:
        importer = normalize_path(ctx.filename)
        importee = normalize_path(target)
    except (OSError, ValueError) as exc:
        logger.debug("%s: skipping include %r: %s", ctx.filename, include.path, exc)
        return
    graph.add_edge(importer, importee, include, filename=ctx.filename)


# ---------------------------------------------------------------------------
# Finalize (cycle detection)
# ---------------------------------------------------------------------------


def count_sortable(adjacency: Mapping[int, Sequence[int]], in_degree: Mapping[int, int]) -> int:
    """Run Kahn's algorithm and return how many vertices could be ordered.

    Works on a copy of *in_degree*.  Each generation of zero in-degree
    vertices is drained before the next one is started, so no vertex is
    counted twice.  The count equals ``len(adjacency)`` iff the graph is acyclic.
    """
    remaining = dict(in_degree)
    processed = 0
    current = [v for v in adjacency if remaining.get(v, 0) == 0]
    while current:
        upcoming: list[int] = []
        for vertex in current:
            processed += 1
            for neighbour in adjacency.get(vertex, ()):
                remaining[neighbour] -= 1
                if remaining[neighbour] == 0:
                    upcoming.append(neighbour)
        current = upcoming
    return processed


def _extract_cycle(adjacency: Mapping[int, Sequence[int]]) -> list[int]:
    """Return the vertices of one cycle, in edge order, via iterative DFS.

    Stack frames are ``(vertex, neighbour iterator)``; ``path`` mirrors the
    stack.  Vertices whose subtrees are exhausted go into ``explored`` and
    are never entered again.
    """
    explored: set[int] = set()
    for root in adjacency:
        if root in explored:
            continue
        path: list[int] = [root]
        on_path: set[int] = {root}
        stack: list[tuple[int, Iterator[int]]] = [(root, iter(adjacency[root]))]
        while stack:
            vertex, neighbours = stack[-1]
            descended = False
            for neighbour in neighbours:
                if neighbour in on_path:
                    # Drop the prefix that merely leads into the cycle.
                    return path[path.index(neighbour) :]
                if neighbour in explored:
                    continue
                path.append(neighbour)
                on_path.add(neighbour)
                stack.append((neighbour, iter(adjacency.get(neighbour, ()))))
                descended = True
                break
            if not descended:
                stack.pop()
                path.pop()
                on_path.discard(vertex)
                explored.add(vertex)

    msg = "topological pass reported a cycle but none was found"
    raise CycleInvariantError(msg)


def find_cycle(
    adjacency: Mapping[int, Sequence[int]], in_degree: Mapping[int, int]
) -> list[int] | None:
    """Return one cycle ``[v0, ..., vk]`` (closing back to v0), or ``None`` if acyclic."""
    if count_sortable(adjacency, in_degree) == len(adjacency):
        return None
    return _extract_cycle(adjacency)


def finalize_import_graph(graph: ImportGraph) -> list[Diagnostic]:
    """Emit one diagnostic per edge of the first cycle found, in cycle order."""
    graph.frozen = True
    cycle = find_cycle(graph.adjacency, graph.in_degree)
    if cycle is None:
        return []

    chain = " -> ".join(graph.paths[v] for v in [*cycle, cycle[0]])
    logger.info("Include cycle detected: %s", chain)

    diagnostics: list[Diagnostic] = []
    for index, vertex in enumerate(cycle):
        successor = cycle[(index + 1) % len(cycle)]
        site = graph.edge_meta[(vertex, successor)]
        diagnostics.append(
            Diagnostic.at(
                site.include,
                filename=site.filename,
                rule_id=RULE_ID,
                severity="error",
                message=(
                    f"circular include ({index + 1}/{len(cycle)}): "
                    f"{graph.paths[vertex]} -> {graph.paths[successor]} "
                    f'(included as "{site.include.path}")'
                ),
            )
        )
    return diagnostics


def check_import_cycles() -> MultiFileCheck[ImportGraph]:
    """Return a fresh ``import.cycle.disallowed`` check with its own graph."""
    return MultiFileCheck(RULE_ID, (Include,), visit_include, ImportGraph(), finalize_import_graph)
