"""
atoms.py — Ground Terms and Relational Atoms
============================================

The smallest vocabulary of the unsat engine.  A trait condition gathered
by the analyzer is flattened into a list of *atoms*, each one a single
binary relation between two *terms*:

    Atom(op, lhs, rhs)      e.g.   Atom(GT, Variable("x"), Constant(10))

Terms are either a named ``Variable`` (an input field or a declaration)
or a ``Constant`` literal (number, string or bool).  Both are frozen and
hashable so they can be used as dictionary keys, set members and
union-find elements.

Atoms are always kept in *normal form*: when exactly one side is a
variable it sits on the left, and the operator is flipped to match
(``10 < x`` becomes ``x > 10``).
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Tuple, Union

Number = Union[int, float]
Scalar = Union[int, float, str, bool]


# -------------------------------------------------------------------
# Terms
# -------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Variable:
    """A named value: an input field or a declaration."""
    name: str

    def __str__(self) -> str:
        return self.name


def value_kind(value: Any) -> str:
    """``"number"``, ``"bool"``, ``"str"`` or the type name of *value*."""
    if isinstance(value, bool):
        return "bool"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "str"
    return type(value).__name__


@dataclass(frozen=True, slots=True, eq=False)
class Constant:
    """A literal value appearing in a comparison.

    Equality and hashing include the value's kind: ``Constant(1)`` equals
    ``Constant(1.0)`` but not ``Constant(True)``.
    """
    value: Scalar

    def _key(self) -> Tuple[str, Any]:
        return value_kind(self.value), self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constant):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        if isinstance(self.value, str):
            return repr(self.value)
        return str(self.value)


Term = Union[Variable, Constant]


def is_number(value: Any) -> bool:
    """True for finite-or-infinite ints and floats, excluding ``bool``."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_numeric(term: Any) -> bool:
    """True when *term* is a ``Constant`` holding a real number."""
    return (isinstance(term, Constant) and is_number(term.value)
            and not (isinstance(term.value, float) and math.isnan(term.value)))


def as_term(value: Any) -> Term:
    """Coerce a raw Python value into a term.

    Strings name variables; wrap a string in ``Constant`` explicitly to
    compare against a string literal.
    """
    if isinstance(value, (Variable, Constant)):
        return value
    if isinstance(value, str):
        return Variable(value)
    return Constant(value)


def same_kind(a: Term, b: Term) -> bool:
    """Whether two constants can be ordered or compared for equality.

    Numbers compare with numbers, strings with strings, bools with bools.
    Variables are of every kind.
    """
    if isinstance(a, Variable) or isinstance(b, Variable):
        return True
    return value_kind(a.value) == value_kind(b.value)


# -------------------------------------------------------------------
# Relational operators
# -------------------------------------------------------------------

class RelOp(enum.Enum):
    EQ = "=="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    def flip(self) -> "RelOp":
        """The operator obtained by swapping both sides."""
        _flips = {
            RelOp.EQ: RelOp.EQ, RelOp.NE: RelOp.NE,
            RelOp.LT: RelOp.GT, RelOp.LE: RelOp.GE,
            RelOp.GT: RelOp.LT, RelOp.GE: RelOp.LE,
        }
        return _flips[self]

    @property
    def is_strict(self) -> bool:
        return self in (RelOp.GT, RelOp.LT)

    @classmethod
    def from_symbol(cls, symbol: Union[str, "RelOp"]) -> "RelOp":
        if isinstance(symbol, RelOp):
            return symbol
        for op in cls:
            if op.value == symbol:
                return op
        raise ValueError(f"unknown relational operator: {symbol!r}")


COMPARATORS: FrozenSet[str] = frozenset(op.value for op in RelOp)


# -------------------------------------------------------------------
# Atoms
# -------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Atom:
    """A ground relation ``lhs <op> rhs`` asserted to hold."""
    op: RelOp
    lhs: Term
    rhs: Term

    @classmethod
    def of(cls, op: Union[str, RelOp], lhs: Any, rhs: Any) -> "Atom":
        """Build a normalised atom from loose values.

        >>> Atom.of("<", 10, "x")
        Atom(op=<RelOp.GT: '>'>, lhs=Variable(name='x'), rhs=Constant(value=10))
        """
        return normalize(cls(RelOp.from_symbol(op), as_term(lhs), as_term(rhs)))

    def variables(self) -> Tuple[Variable, ...]:
        return tuple(t for t in (self.lhs, self.rhs) if isinstance(t, Variable))

    def variable_constant(self) -> Optional[Tuple[Variable, Number, RelOp]]:
        """``(variable, number, op)`` for a variable-vs-number atom, else None.

        The operator is oriented so that it reads ``variable <op> number``.
        """
        if isinstance(self.lhs, Variable) and is_numeric(self.rhs):
            return self.lhs, self.rhs.value, self.op
        if isinstance(self.rhs, Variable) and is_numeric(self.lhs):
            return self.rhs, self.lhs.value, self.op.flip()
        return None

    def __str__(self) -> str:
        return f"{self.lhs} {self.op.value} {self.rhs}"


def normalize(atom: Atom) -> Atom:
    """Prefer a variable on the left-hand side."""
    if isinstance(atom.lhs, Constant) and isinstance(atom.rhs, Variable):
        return Atom(atom.op.flip(), atom.rhs, atom.lhs)
    return atom


def pair_key(a: Term, b: Term) -> FrozenSet[Term]:
    """Unordered pair of terms, used by the equality classifier."""
    return frozenset((a, b))


__all__ = [
    "Number", "Scalar", "Variable", "Constant", "Term",
    "value_kind", "is_number", "is_numeric", "as_term", "same_kind",
    "RelOp", "COMPARATORS", "Atom", "normalize", "pair_key",
]
