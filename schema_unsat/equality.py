"""
equality.py — Equality classes and strict-order conflicts
=========================================================

Atoms are sorted into three sets of *unordered* term pairs:

    equal_pairs      from  ==
    strict_pairs     from  >  and  <
    distinct_pairs   from  !=

A pair that is both equal and strict (``x == 5 and x > 5``) or equal and
distinct is a direct contradiction.  Equalities are then closed under
transitivity with a union-find: if ``x == y`` and ``y == z`` put x, y, z
into one class, any strict or distinct pair inside that class (``x > z``)
is contradictory even though no atom relates x and z directly, and a
class holding two different constants (``x == 5``, ``y == x``,
``y == 6``) can never be satisfied either.
"""

from __future__ import annotations

import itertools
from typing import (
    Dict,
    FrozenSet,
    Generic,
    Hashable,
    Iterable,
    List,
    Optional,
    Set,
    Tuple,
    TypeVar,
)

from .atoms import Atom, Constant, RelOp, Term, pair_key, same_kind
from .diagnostics import Contradiction, ContradictionKind, DerivationTrace, record

T = TypeVar("T", bound=Hashable)

Pair = FrozenSet[Term]


class UnionFind(Generic[T]):
    """
    Union-find with path compression and union by rank.

    Elements are registered lazily on first ``find``/``union``.
    """

    def __init__(self) -> None:
        self._parent: Dict[T, T] = {}
        self._rank: Dict[T, int] = {}

    def _ensure_registered(self, x: T) -> None:
        if x not in self._parent:
            self._parent[x] = x
            self._rank[x] = 0

    def find(self, x: T) -> T:
        self._ensure_registered(x)
        root = x
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression: point every node on the way at the root
        while self._parent[x] != root:
            self._parent[x], x = root, self._parent[x]
        return root

    def union(self, a: T, b: T) -> T:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return ra
        if self._rank[ra] < self._rank[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        if self._rank[ra] == self._rank[rb]:
            self._rank[ra] += 1
        return ra

    def classes(self) -> List[List[T]]:
        """All equivalence classes, in first-registration order."""
        groups: Dict[T, List[T]] = {}
        for x in self._parent:
            groups.setdefault(self.find(x), []).append(x)
        return list(groups.values())


def collect_pairs(atoms: Iterable[Atom]) -> Tuple[Set[Pair], Set[Pair], Set[Pair]]:
    """Split atoms into ``(equal_pairs, strict_pairs, distinct_pairs)``."""
    equal_pairs: Set[Pair] = set()
    strict_pairs: Set[Pair] = set()
    distinct_pairs: Set[Pair] = set()
    for atom in atoms:
        if not same_kind(atom.lhs, atom.rhs):
            continue
        pair = pair_key(atom.lhs, atom.rhs)
        if atom.op is RelOp.EQ:
            equal_pairs.add(pair)
        elif atom.op.is_strict:
            strict_pairs.add(pair)
        elif atom.op is RelOp.NE:
            distinct_pairs.add(pair)
    return equal_pairs, strict_pairs, distinct_pairs


def equivalence_classes(equal_pairs: Iterable[Pair]) -> List[List[Term]]:
    """Classes of two or more terms joined by equalities."""
    uf: UnionFind[Term] = UnionFind()
    for pair in equal_pairs:
        members = sorted(pair, key=str)
        uf.find(members[0])
        for other in members[1:]:
            uf.union(members[0], other)
    return [cls for cls in uf.classes() if len(cls) > 1]


def _show(pair: Pair) -> str:
    members = sorted(pair, key=str)
    if len(members) == 1:
        return f"{members[0]} and itself"
    return " and ".join(str(m) for m in members)


def equality_contradiction(atoms: Iterable[Atom],
                           trace: Optional[DerivationTrace] = None
                           ) -> Optional[Contradiction]:
    """Detect equalities that clash with strict or distinct relations."""
    equal_pairs, strict_pairs, distinct_pairs = collect_pairs(atoms)
    conflicting = strict_pairs | distinct_pairs

    # x != x, x > x
    for pair in conflicting:
        if len(pair) == 1:
            record(trace, "irreflexive relation on %s", _show(pair))
            return Contradiction(ContradictionKind.EQUALITY,
                                 f"{_show(pair)} must differ",
                                 tuple(sorted(str(t) for t in pair)))

    clash = equal_pairs & conflicting
    if clash:
        pair = sorted(clash, key=_show)[0]
        record(trace, "direct equality contradiction between %s", _show(pair))
        return Contradiction(
            ContradictionKind.EQUALITY,
            f"{_show(pair)} are required to be both equal and different",
            tuple(sorted(str(t) for t in pair)),
        )

    for cls in equivalence_classes(equal_pairs):
        constants = []
        for term in cls:
            if isinstance(term, Constant) and term not in constants:
                constants.append(term)
        if len(constants) > 1:
            names = ", ".join(str(t) for t in cls)
            record(trace, "equality class {%s} holds distinct constants", names)
            return Contradiction(
                ContradictionKind.EQUALITY,
                f"{{{names}}} would have to equal both {constants[0]} and {constants[1]}",
                tuple(str(t) for t in cls),
            )
        for a, b in itertools.combinations(cls, 2):
            pair = pair_key(a, b)
            if pair in conflicting:
                record(trace, "transitive equality contradiction between %s", _show(pair))
                return Contradiction(
                    ContradictionKind.EQUALITY,
                    f"{_show(pair)} are equal through "
                    f"{{{', '.join(str(t) for t in cls)}}} but required to differ",
                    tuple(sorted(str(t) for t in pair)),
                )
    return None


__all__ = [
    "UnionFind", "collect_pairs", "equivalence_classes", "equality_contradiction",
]
