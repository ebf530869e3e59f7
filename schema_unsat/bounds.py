"""
bounds.py — Per-variable interval contradictions
================================================

Two cheap checks over raw atoms:

``literal_contradiction``
    An atom relating two constants is decided on the spot; ``5 > 5`` or
    ``1 == 2`` can never hold.

``bound_contradiction``
    Every ``variable <op> number`` atom narrows a running
    ``(lower, upper)`` pair for its variable, starting from
    ``(-inf, +inf)``.  The set is unsatisfiable as soon as some
    variable's upper bound falls below its lower bound.

Strict comparisons against an ``int`` constant are tightened by one
(``x > 5`` means ``x >= 6``), which is exact for integer-valued
variables.  Variables listed in *float_variables*, float constants, and
``integer_bounds=False`` keep the bound exact and remember that it is
strict instead, so ``x > 1 and x < 2`` stays satisfiable for a float.
A variable compared or equated to a fractional constant anywhere in the
set (``x == 2.5``) is not integer-valued either, so ``x == 2.5 and
x > 2`` holds.
"""

from __future__ import annotations

import math
import operator
from typing import Callable, Collection, Dict, Iterable, Optional, Tuple

from .atoms import Atom, Constant, Number, RelOp, Variable, is_number, same_kind
from .diagnostics import Contradiction, ContradictionKind, DerivationTrace, record

NEG_INF = float("-inf")
POS_INF = float("inf")

# (value, strict)
Bound = Tuple[Number, bool]

_EVAL: Dict[RelOp, Callable[[object, object], bool]] = {
    RelOp.EQ: operator.eq,
    RelOp.NE: operator.ne,
    RelOp.GT: operator.gt,
    RelOp.LT: operator.lt,
    RelOp.GE: operator.ge,
    RelOp.LE: operator.le,
}


# -------------------------------------------------------------------
# Constant-only atoms
# -------------------------------------------------------------------

def always_false(atom: Atom) -> bool:
    """Whether an atom between two constants can never be true."""
    lhs, rhs = atom.lhs, atom.rhs
    if not (isinstance(lhs, Constant) and isinstance(rhs, Constant)):
        return False
    if is_number(lhs.value) and is_number(rhs.value):
        return not _EVAL[atom.op](lhs.value, rhs.value)
    if atom.op in (RelOp.EQ, RelOp.NE):
        if not same_kind(lhs, rhs):
            return atom.op is RelOp.EQ
        return not _EVAL[atom.op](lhs.value, rhs.value)
    return False


def literal_contradiction(atoms: Iterable[Atom],
                          trace: Optional[DerivationTrace] = None
                          ) -> Optional[Contradiction]:
    for atom in atoms:
        if always_false(atom):
            record(trace, "always-false comparison: %s", atom)
            return Contradiction(ContradictionKind.LITERAL,
                                 f"comparison `{atom}` is always false")
    return None


# -------------------------------------------------------------------
# Variable bounds
# -------------------------------------------------------------------

def _tighter_lower(new: Bound, cur: Bound) -> bool:
    return new[0] > cur[0] or (new[0] == cur[0] and new[1] and not cur[1])


def _tighter_upper(new: Bound, cur: Bound) -> bool:
    return new[0] < cur[0] or (new[0] == cur[0] and new[1] and not cur[1])


def _empty(lower: Bound, upper: Bound) -> bool:
    if upper[0] < lower[0]:
        return True
    return upper[0] == lower[0] and (lower[1] or upper[1])


def _candidate_bounds(op: RelOp, value: Number, integral: bool
                      ) -> Tuple[Optional[Bound], Optional[Bound]]:
    """Lower and upper bound implied by ``variable <op> value``."""
    if op is RelOp.GT:
        return ((value + 1, False) if integral else (value, True)), None
    if op is RelOp.GE:
        return (value, False), None
    if op is RelOp.LT:
        return None, ((value - 1, False) if integral else (value, True))
    if op is RelOp.LE:
        return None, (value, False)
    if op is RelOp.EQ:
        return (value, False), (value, False)
    return None, None


def _fractional(value: Number) -> bool:
    return isinstance(value, float) and math.isfinite(value) and not value.is_integer()


def variable_bounds(atoms: Iterable[Atom],
                    float_variables: Collection[str] = (),
                    integer_bounds: bool = True,
                    ) -> Dict[Variable, Tuple[Bound, Bound]]:
    """Fold every variable-vs-number atom into ``{var: (lower, upper)}``.

    A variable compared with a fractional constant anywhere in *atoms*
    cannot be integer-valued, so none of its bounds are tightened.
    """
    facts = [vc for vc in (atom.variable_constant() for atom in atoms) if vc is not None]
    fractional = {var for var, value, _ in facts if _fractional(value)}

    bounds: Dict[Variable, Tuple[Bound, Bound]] = {}
    for var, value, op in facts:
        integral = (integer_bounds and isinstance(value, int)
                    and var.name not in float_variables
                    and var not in fractional)
        new_lo, new_hi = _candidate_bounds(op, value, integral)
        lower, upper = bounds.get(var, ((NEG_INF, False), (POS_INF, False)))
        if new_lo is not None and _tighter_lower(new_lo, lower):
            lower = new_lo
        if new_hi is not None and _tighter_upper(new_hi, upper):
            upper = new_hi
        bounds[var] = (lower, upper)
    return bounds


def _fmt(lower: Bound, upper: Bound) -> str:
    lo = ("(" if lower[1] else "[") + str(lower[0])
    hi = str(upper[0]) + (")" if upper[1] else "]")
    return f"{lo}, {hi}"


def bound_contradiction(atoms: Iterable[Atom],
                        float_variables: Collection[str] = (),
                        integer_bounds: bool = True,
                        trace: Optional[DerivationTrace] = None,
                        ) -> Optional[Contradiction]:
    """Detect a variable whose numeric bounds leave no possible value."""
    bounds = variable_bounds(atoms, float_variables, integer_bounds)
    for var, (lower, upper) in bounds.items():
        if _empty(lower, upper):
            record(trace, "bounds of %s are empty: %s", var, _fmt(lower, upper))
            return Contradiction(
                ContradictionKind.BOUNDS,
                f"no value of `{var}` lies in {_fmt(lower, upper)}",
                (var.name,),
            )
    return None


__all__ = [
    "NEG_INF", "POS_INF", "Bound",
    "always_false", "literal_contradiction",
    "variable_bounds", "bound_contradiction",
]
