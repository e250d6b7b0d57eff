"""Tests for circular include detection."""

from __future__ import annotations

import random
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from thriftlint.checks.imports import (
    RULE_ID,
    CycleInvariantError,
    ImportGraph,
    check_import_cycles,
    count_sortable,
    finalize_import_graph,
    find_cycle,
)
from thriftlint.engine.runner import Runner
from thriftlint.idl.nodes import Include

if TYPE_CHECKING:
    from thriftlint.engine.check import MultiFileCheck
    from thriftlint.engine.runner import RunResult


def _project(project: Path, files: dict[str, str]) -> list[Path]:
    for name, text in files.items():
        path = project / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return [Path(name) for name in files]


def _run(files: list[Path]) -> tuple[MultiFileCheck[ImportGraph], RunResult]:
    check = check_import_cycles()
    result = Runner([check]).run(files)
    return check, result


# ---------------------------------------------------------------------------
# End-to-end scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_two_file_cycle(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {
                "x.thrift": 'include "y.thrift"\n',
                "y.thrift": '\ninclude "x.thrift"\n',
            },
        )
        _, result = _run(files)
        assert [str(d) for d in result.diagnostics] == [
            'x.thrift:1:1: error: circular include (1/2): x.thrift -> y.thrift '
            '(included as "y.thrift") (import.cycle.disallowed)',
            'y.thrift:2:1: error: circular include (2/2): y.thrift -> x.thrift '
            '(included as "x.thrift") (import.cycle.disallowed)',
        ]

    def test_three_file_cycle_ignores_unrelated_chain(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {
                "a.thrift": 'include "b.thrift"\n',
                "b.thrift": 'include "c.thrift"\n',
                "c.thrift": 'include "a.thrift"\n',
                "d.thrift": 'include "e.thrift"\n',
                "e.thrift": "struct E {}\n",
            },
        )
        _, result = _run(files)
        assert len(result.diagnostics) == 3
        assert [d.filename for d in result.diagnostics] == ["a.thrift", "b.thrift", "c.thrift"]
        assert all(d.rule_id == RULE_ID and d.is_error for d in result.diagnostics)
        assert not any("d.thrift" in d.message or "e.thrift" in d.message for d in result.diagnostics)
        assert [d.message.split(": ", 1)[1].split(" (")[0] for d in result.diagnostics] == [
            "a.thrift -> b.thrift",
            "b.thrift -> c.thrift",
            "c.thrift -> a.thrift",
        ]

    def test_nested_files_include_by_working_directory_path(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {
                "api/a.thrift": 'include "shared/b.thrift"\n',
                "shared/b.thrift": 'include "api/a.thrift"\n',
            },
        )
        check, result = _run(files)
        assert check.state.ids == {"api/a.thrift": 1, "shared/b.thrift": 2}
        assert [str(d) for d in result.diagnostics] == [
            'api/a.thrift:1:1: error: circular include (1/2): api/a.thrift -> shared/b.thrift '
            '(included as "shared/b.thrift") (import.cycle.disallowed)',
            'shared/b.thrift:1:1: error: circular include (2/2): shared/b.thrift -> api/a.thrift '
            '(included as "api/a.thrift") (import.cycle.disallowed)',
        ]

    def test_no_includes(self, thrift_project: Path) -> None:
        files = _project(thrift_project, {"a.thrift": "struct A {}\n"})
        check, result = _run(files)
        assert result.diagnostics == []
        assert check.state.adjacency == {}
        assert check.state.frozen

    def test_duplicate_include_is_not_a_cycle(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {"a.thrift": 'include "b.thrift"\ninclude "./b.thrift"\n', "b.thrift": ""},
        )
        check, result = _run(files)
        assert result.diagnostics == []
        assert check.state.in_degree == {1: 0, 2: 2}

    def test_self_include(self, thrift_project: Path) -> None:
        files = _project(thrift_project, {"a.thrift": 'include "a.thrift"\n'})
        _, result = _run(files)
        assert [d.message for d in result.diagnostics] == [
            'circular include (1/1): a.thrift -> a.thrift (included as "a.thrift")'
        ]

    def test_prefix_leading_into_cycle_not_reported(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {
                "t.thrift": 'include "a.thrift"\n',
                "a.thrift": 'include "b.thrift"\n',
                "b.thrift": 'include "a.thrift"\n',
            },
        )
        _, result = _run(files)
        assert [d.filename for d in result.diagnostics] == ["a.thrift", "b.thrift"]

    def test_cycle_found_regardless_of_file_order(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {
                "a.thrift": 'include "b.thrift"\n',
                "b.thrift": 'include "c.thrift"\n',
                "c.thrift": 'include "a.thrift"\n',
            },
        )
        _, forward = _run(files)
        _, backward = _run(list(reversed(files)))
        assert len(forward.diagnostics) == len(backward.diagnostics) == 3
        assert {d.filename for d in forward.diagnostics} == {d.filename for d in backward.diagnostics}

    def test_only_first_cycle_reported(self, thrift_project: Path) -> None:
        files = _project(
            thrift_project,
            {
                "a.thrift": 'include "b.thrift"\n',
                "b.thrift": 'include "a.thrift"\n',
                "c.thrift": 'include "d.thrift"\n',
                "d.thrift": 'include "c.thrift"\n',
            },
        )
        _, result = _run(files)
        assert [d.filename for d in result.diagnostics] == ["a.thrift", "b.thrift"]


# ---------------------------------------------------------------------------
# Topological count
# ---------------------------------------------------------------------------


class TestCountSortable:
    def test_diamond(self) -> None:
        adjacency = {1: [2, 3], 2: [4], 3: [4], 4: []}
        in_degree = {1: 0, 2: 1, 3: 1, 4: 2}
        assert count_sortable(adjacency, in_degree) == 4

    def test_does_not_mutate_input(self) -> None:
        in_degree = {1: 0, 2: 1}
        count_sortable({1: [2], 2: []}, in_degree)
        assert in_degree == {1: 0, 2: 1}

    def test_cycle_leaves_vertices_unsorted(self) -> None:
        adjacency = {1: [2], 2: [3], 3: [2]}
        in_degree = {1: 0, 2: 2, 3: 1}
        assert count_sortable(adjacency, in_degree) == 1

    def test_parallel_edges(self) -> None:
        assert count_sortable({1: [2, 2], 2: []}, {1: 0, 2: 2}) == 2

    def test_empty(self) -> None:
        assert count_sortable({}, {}) == 0
        assert find_cycle({}, {}) is None


# ---------------------------------------------------------------------------
# Cycle extraction
# ---------------------------------------------------------------------------


def _graph(edges: list[tuple[int, int]], vertices: int) -> tuple[dict[int, list[int]], dict[int, int]]:
    adjacency: dict[int, list[int]] = {v: [] for v in range(1, vertices + 1)}
    in_degree = dict.fromkeys(adjacency, 0)
    for src, dst in edges:
        adjacency[src].append(dst)
        in_degree[dst] += 1
    return adjacency, in_degree


def _random_dag(seed: int, vertices: int = 40) -> list[tuple[int, int]]:
    rng = random.Random(seed)
    edges = [(v, v + 1) for v in range(1, vertices)]
    for _ in range(vertices * 2):
        src, dst = sorted(rng.sample(range(1, vertices + 1), 2))
        edges.append((src, dst))
    return edges


class TestFindCycle:
    @pytest.mark.parametrize("seed", range(8))
    def test_random_dag_is_acyclic(self, seed: int) -> None:
        adjacency, in_degree = _graph(_random_dag(seed), 40)
        assert count_sortable(adjacency, in_degree) == 40
        assert find_cycle(adjacency, in_degree) is None

    @pytest.mark.parametrize("seed", range(8))
    def test_back_edge_yields_real_cycle(self, seed: int) -> None:
        rng = random.Random(seed)
        edges = _random_dag(seed)
        src, dst = sorted(rng.sample(range(1, 41), 2))
        edges.append((dst, src))
        adjacency, in_degree = _graph(edges, 40)

        cycle = find_cycle(adjacency, in_degree)
        assert cycle is not None
        assert len(set(cycle)) == len(cycle)
        for index, vertex in enumerate(cycle):
            successor = cycle[(index + 1) % len(cycle)]
            assert successor in adjacency[vertex]

    def test_long_chain_does_not_recurse(self) -> None:
        size = 5000
        edges = [(v, v + 1) for v in range(1, size)] + [(size, 1)]
        adjacency, in_degree = _graph(edges, size)
        cycle = find_cycle(adjacency, in_degree)
        assert cycle is not None
        assert len(cycle) == size

    def test_inconsistent_in_degree_raises(self) -> None:
        with pytest.raises(CycleInvariantError):
            find_cycle({1: [2], 2: []}, {1: 0, 2: 2})


class TestFinalize:
    def test_finalize_freezes_graph(self) -> None:
        graph = ImportGraph()
        graph.add_edge("a.thrift", "b.thrift", Include("b.thrift"))
        assert finalize_import_graph(graph) == []
        assert graph.frozen

    def test_diagnostic_located_at_include(self) -> None:
        graph = ImportGraph()
        graph.add_edge("a.thrift", "b.thrift", Include("b.thrift", line=4, column=1))
        graph.add_edge("b.thrift", "a.thrift", Include("a.thrift", line=9, column=1))
        diagnostics = finalize_import_graph(graph)
        assert [(d.filename, d.line) for d in diagnostics] == [("a.thrift", 4), ("b.thrift", 9)]
