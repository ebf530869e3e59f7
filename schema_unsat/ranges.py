"""
ranges.py — Value ranges derived from input domains
===================================================

Input fields may declare a numeric domain (``age: 18..65``).  Those
domains seed a range map, and the ranges are pushed through the
relationship graph with ordinary interval arithmetic:

    x ∈ [lo, hi]     x + c   →  [lo + c, hi + c]
                     x - c   →  [lo - c, hi - c]
                     c - x   →  [c - hi, c - lo]
                     x * c   →  [lo * c, hi * c]   (bounds swap when c < 0)
                     x / c   →  [lo / c, hi / c]   (c ≠ 0, swap when c < 0)
                     alias   →  [lo, hi]

Two ranged variables combine with interval ``+``, ``-`` and ``*``.
A target keeps the first range it is given, so the map only grows and
the fixpoint loop (capped at ``len(relationships) + 1`` rounds) ends.

Once the map is stable, every ``variable <op> number`` atom is tested
against the variable's range; ``age > 70`` with ``age ∈ [18, 65]`` can
never hold.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from .atoms import Atom, Number, RelOp, Variable, is_number
from .diagnostics import Contradiction, ContradictionKind, DerivationTrace, record
from .relationships import ArithOp, Relationship, exact_div

logger = logging.getLogger(__name__)

NEG_INF = float("-inf")
POS_INF = float("inf")


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[lo, hi]``; either end may be infinite."""
    lo: Number
    hi: Number

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"empty interval [{self.lo}, {self.hi}]")

    @classmethod
    def point(cls, value: Number) -> "Interval":
        return cls(value, value)

    @classmethod
    def from_domain(cls, domain: Any) -> Optional["Interval"]:
        """The interval spanned by a numeric domain, if it is one.

        A ``range`` is a set of integers; its interval is the hull from
        its smallest to its largest member, so every member lies inside.
        """
        if isinstance(domain, Interval):
            return domain
        if isinstance(domain, range) and len(domain) > 0:
            lo, hi = sorted((domain[0], domain[-1]))
            return cls(lo, hi)
        return None

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.lo) and math.isfinite(self.hi)

    def contains(self, value: Any) -> bool:
        return is_number(value) and self.lo <= value <= self.hi

    __contains__ = contains

    # -- arithmetic with a constant -----------------------------------

    def shift(self, c: Number) -> "Interval":
        return Interval(self.lo + c, self.hi + c)

    def reflect(self, c: Number) -> "Interval":
        """``c - self``."""
        return Interval(c - self.hi, c - self.lo)

    def scale(self, c: Number) -> "Interval":
        if c == 0:
            return Interval.point(0)
        if c > 0:
            return Interval(self.lo * c, self.hi * c)
        return Interval(self.hi * c, self.lo * c)

    def divide(self, c: Number) -> Optional["Interval"]:
        if c == 0:
            return None
        lo, hi = exact_div(self.lo, c), exact_div(self.hi, c)
        return Interval(lo, hi) if c > 0 else Interval(hi, lo)

    # -- arithmetic with another interval -----------------------------

    def add(self, other: "Interval") -> "Interval":
        return Interval(self.lo + other.lo, self.hi + other.hi)

    def sub(self, other: "Interval") -> "Interval":
        return Interval(self.lo - other.hi, self.hi - other.lo)

    def mul(self, other: "Interval") -> Optional["Interval"]:
        if not (self.is_finite and other.is_finite):
            return None
        products = [a * b for a in (self.lo, self.hi) for b in (other.lo, other.hi)]
        return Interval(min(products), max(products))

    def __str__(self) -> str:
        return f"[{self.lo}, {self.hi}]"


RangeMap = Dict[Variable, Interval]


def seed_ranges(input_meta: Optional[Mapping[str, Mapping[str, Any]]]) -> RangeMap:
    """Ranges of the input fields whose domain is a numeric range."""
    ranges: RangeMap = {}
    for name, meta in (input_meta or {}).items():
        if not isinstance(meta, Mapping):
            continue
        interval = Interval.from_domain(meta.get("domain"))
        if interval is not None:
            ranges[Variable(name)] = interval
    return ranges


def transform_range(rel: Relationship, ranges: RangeMap) -> Optional[Interval]:
    """The range of ``rel.target`` implied by its operands' ranges."""
    if rel.op is ArithOp.IDENTITY:
        operand = rel.operands[0]
        return ranges.get(operand) if isinstance(operand, Variable) else None

    mixed = rel.variable_constant()
    if mixed is not None:
        var, c, var_is_first = mixed
        source = ranges.get(var)
        if source is None:
            return None
        if rel.op is ArithOp.ADD:
            return source.shift(c)
        if rel.op is ArithOp.SUB:
            return source.shift(-c) if var_is_first else source.reflect(c)
        if rel.op is ArithOp.MUL:
            return source.scale(c)
        if rel.op is ArithOp.DIV and var_is_first:
            return source.divide(c)
        return None

    pair = rel.variable_pair()
    if pair is not None:
        a, b = ranges.get(pair[0]), ranges.get(pair[1])
        if a is None or b is None:
            return None
        if rel.op is ArithOp.ADD:
            return a.add(b)
        if rel.op is ArithOp.SUB:
            return a.sub(b)
        if rel.op is ArithOp.MUL:
            return a.mul(b)
    return None


def _usable(interval: Optional[Interval]) -> bool:
    return (interval is not None
            and not math.isnan(interval.lo) and not math.isnan(interval.hi))


def propagate_ranges(ranges: RangeMap,
                     relationships: Sequence[Relationship],
                     trace: Optional[DerivationTrace] = None) -> RangeMap:
    """Extend *ranges* through *relationships*; returns a new map."""
    result: RangeMap = dict(ranges)
    max_iterations = len(relationships) + 1
    for iteration in range(1, max_iterations + 1):
        changed = False
        for rel in relationships:
            if rel.target in result:
                continue
            interval = transform_range(rel, result)
            if not _usable(interval):
                continue
            result[rel.target] = interval
            changed = True
            record(trace, "range %s ∈ %s (via %s)", rel.target, interval, rel)
        if not changed:
            break
    logger.debug("range propagation: %d ranged variables", len(result))
    return result


def impossible_in_range(op: RelOp, value: Number, interval: Interval) -> bool:
    """Whether ``x <op> value`` cannot hold for any x in *interval*."""
    if op is RelOp.GT:
        return interval.hi <= value
    if op is RelOp.GE:
        return interval.hi < value
    if op is RelOp.LT:
        return interval.lo >= value
    if op is RelOp.LE:
        return interval.lo > value
    if op is RelOp.EQ:
        return not interval.contains(value)
    return False


def range_contradiction(atoms: Iterable[Atom], ranges: RangeMap,
                        trace: Optional[DerivationTrace] = None
                        ) -> Optional[Contradiction]:
    for atom in atoms:
        vc = atom.variable_constant()
        if vc is None:
            continue
        var, value, op = vc
        interval = ranges.get(var)
        if interval is None:
            continue
        if impossible_in_range(op, value, interval):
            record(trace, "range violation: %s with %s ∈ %s", atom, var, interval)
            return Contradiction(
                ContradictionKind.RANGE,
                f"`{var} {op.value} {value}` is impossible: {var} is always in {interval}",
                (var.name,),
            )
    return None


__all__ = [
    "Interval", "RangeMap", "seed_ranges", "transform_range",
    "propagate_ranges", "impossible_in_range", "range_contradiction",
]
