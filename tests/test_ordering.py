# tests/test_ordering.py
"""
Tests for strict-order cycle detection.
"""

from schema_unsat.atoms import Variable
from schema_unsat.diagnostics import ContradictionKind
from schema_unsat.ordering import (
    build_graph, cycle_contradiction, find_cycle, strict_edges,
)
from tests.conftest import atoms


def _v(*names):
    return [Variable(n) for n in names]


class TestStrictEdges:

    def test_edge_direction(self):
        edges = strict_edges(atoms((">", "a", "b"), ("<", "c", "d")))
        assert edges == [(Variable("b"), Variable("a")), (Variable("c"), Variable("d"))]

    def test_ignores_constants_and_non_strict(self):
        assert strict_edges(atoms((">", "a", 1), (">=", "a", "b"), ("!=", "a", "b"))) == []


class TestFindCycle:

    def test_two_cycle(self):
        a, b = _v("a", "b")
        cycle = find_cycle({a: [b], b: [a]})
        assert cycle == [a, b, a]

    def test_dag(self):
        a, b, c = _v("a", "b", "c")
        assert find_cycle({a: [b, c], b: [c], c: []}) is None

    def test_cycle_off_the_first_root(self):
        a, b, c, d = _v("a", "b", "c", "d")
        cycle = find_cycle(build_graph([(a, b), (c, d), (d, c)]))
        assert cycle is not None
        assert set(cycle) == {c, d}

    def test_deep_chain(self):
        names = [f"v{i}" for i in range(5000)]
        edges = [(Variable(x), Variable(y)) for x, y in zip(names, names[1:])]
        graph = build_graph(edges)
        assert find_cycle(graph) is None
        graph[Variable(names[-1])].append(Variable(names[0]))
        assert len(find_cycle(graph)) == 5001


class TestCycleContradiction:

    def test_three_cycle(self):
        hit = cycle_contradiction(atoms((">", "a", "b"), (">", "b", "c"), (">", "c", "a")))
        assert hit is not None
        assert hit.kind is ContradictionKind.CYCLE
        assert set(hit.variables) == {"a", "b", "c"}

    def test_mixed_directions(self):
        found = cycle_contradiction(atoms(("<", "a", "b"), (">", "a", "b")))
        assert found is not None

    def test_chain_is_fine(self):
        assert cycle_contradiction(atoms((">", "a", "b"), (">", "b", "c"))) is None

    def test_non_strict_loop_is_fine(self):
        assert cycle_contradiction(atoms((">=", "a", "b"), (">=", "b", "a"))) is None
