"""
ordering.py — Strict-order cycle detection
==========================================

Strict inequalities between two variables form a directed graph in which
an edge ``u → v`` reads "u is less than v":

    x > y   ⇒   y → x
    x < y   ⇒   x → y

A strict order is irreflexive and transitive, so any cycle
(``a < b < c < a``) is unsatisfiable.  Cycles are found with a
white/gray/black depth-first search; the search keeps its own stack so
deep derivation chains cannot exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

import enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .atoms import Atom, RelOp, Variable
from .diagnostics import Contradiction, ContradictionKind, DerivationTrace, record

Graph = Dict[Variable, List[Variable]]


class _Color(enum.Enum):
    WHITE = 0   # unvisited
    GRAY = 1    # on the current DFS path
    BLACK = 2   # finished


def strict_edges(atoms: Iterable[Atom]) -> List[Tuple[Variable, Variable]]:
    """``(smaller, larger)`` edges for strict atoms between two variables."""
    edges: List[Tuple[Variable, Variable]] = []
    for atom in atoms:
        if not (isinstance(atom.lhs, Variable) and isinstance(atom.rhs, Variable)):
            continue
        if atom.op is RelOp.GT:
            edges.append((atom.rhs, atom.lhs))
        elif atom.op is RelOp.LT:
            edges.append((atom.lhs, atom.rhs))
    return edges


def build_graph(edges: Iterable[Tuple[Variable, Variable]]) -> Graph:
    graph: Graph = {}
    for u, v in edges:
        graph.setdefault(u, [])
        graph.setdefault(v, [])
        if v not in graph[u]:
            graph[u].append(v)
    return graph


def find_cycle(graph: Graph) -> Optional[List[Variable]]:
    """Return the vertices of the first cycle found, or None."""
    color: Dict[Variable, _Color] = {v: _Color.WHITE for v in graph}

    for root in graph:
        if color[root] is not _Color.WHITE:
            continue
        path: List[Variable] = [root]
        stack: List[Iterator[Variable]] = [iter(graph[root])]
        color[root] = _Color.GRAY
        while stack:
            advanced = False
            for succ in stack[-1]:
                if color[succ] is _Color.GRAY:
                    # Back edge: the cycle is the path suffix starting at succ
                    return path[path.index(succ):] + [succ]
                if color[succ] is _Color.WHITE:
                    color[succ] = _Color.GRAY
                    path.append(succ)
                    stack.append(iter(graph[succ]))
                    advanced = True
                    break
            if not advanced:
                color[path.pop()] = _Color.BLACK
                stack.pop()
    return None


def cycle_contradiction(atoms: Iterable[Atom],
                        trace: Optional[DerivationTrace] = None
                        ) -> Optional[Contradiction]:
    edges = strict_edges(atoms)
    if not edges:
        return None
    record(trace, "strict edges: %s", ", ".join(f"{u}<{v}" for u, v in edges))
    cycle = find_cycle(build_graph(edges))
    if cycle is None:
        return None
    chain = " < ".join(str(v) for v in cycle)
    record(trace, "strict-order cycle: %s", chain)
    return Contradiction(ContradictionKind.CYCLE,
                         f"strict ordering is cyclic: {chain}",
                         tuple(v.name for v in cycle[:-1]))


__all__ = ["strict_edges", "build_graph", "find_cycle", "cycle_contradiction"]
