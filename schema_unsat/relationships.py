"""
relationships.py — Arithmetic derivation edges between declarations
===================================================================

A declaration such as ``value v2 = add(v1, 2)`` ties its own value to the
values it is computed from.  The extractor turns the declaration's
top-level expression into a ``Relationship``:

    target = op(operands)

Recognised shapes:

* ``Call(fn, (a, b))`` where ``fn`` names one of the four arithmetic
  functions and each argument is a reference (``InputRef``/``DeclRef``)
  or a numeric ``Literal``;
* a bare reference, which makes the target an alias (``IDENTITY``).

Every other shape (nested calls, other functions, wrong arity, string
literals) yields no relationship.  That is not an error: the engine
simply cannot reason through that declaration.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .atoms import Constant, Number, Term, Variable, is_number
from .expressions import Call, Literal, Reference


class ArithOp(enum.Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    IDENTITY = "="


# Function names accepted for each operation.
FN_ALIASES: Dict[str, ArithOp] = {
    "add": ArithOp.ADD,
    "sub": ArithOp.SUB,
    "subtract": ArithOp.SUB,
    "mul": ArithOp.MUL,
    "multiply": ArithOp.MUL,
    "div": ArithOp.DIV,
    "divide": ArithOp.DIV,
}


@dataclass(frozen=True)
class Relationship:
    """``target = op(*operands)``; one operand for IDENTITY, two otherwise."""
    target: Variable
    op: ArithOp
    operands: Tuple[Term, ...]

    def variable_constant(self) -> Optional[Tuple[Variable, Number, bool]]:
        """``(variable, constant, variable_is_first)`` for a mixed binary edge."""
        if self.op is ArithOp.IDENTITY or len(self.operands) != 2:
            return None
        a, b = self.operands
        if isinstance(a, Variable) and isinstance(b, Constant):
            return a, b.value, True
        if isinstance(a, Constant) and isinstance(b, Variable):
            return b, a.value, False
        return None

    def variable_pair(self) -> Optional[Tuple[Variable, Variable]]:
        if self.op is ArithOp.IDENTITY or len(self.operands) != 2:
            return None
        a, b = self.operands
        if isinstance(a, Variable) and isinstance(b, Variable):
            return a, b
        return None

    def __str__(self) -> str:
        if self.op is ArithOp.IDENTITY:
            return f"{self.target} = {self.operands[0]}"
        a, b = self.operands
        return f"{self.target} = {a} {self.op.value} {b}"


# -------------------------------------------------------------------
# Extraction
# -------------------------------------------------------------------

def _operand(node: Any) -> Optional[Term]:
    if isinstance(node, Reference):
        return Variable(node.name)
    if isinstance(node, Literal) and is_number(node.value):
        return Constant(node.value)
    return None


def extract_relationship(target: str, expression: Any) -> Optional[Relationship]:
    """The relationship defined by *expression*, or None if unsupported."""
    if isinstance(expression, Reference):
        return Relationship(Variable(target), ArithOp.IDENTITY,
                            (Variable(expression.name),))
    if isinstance(expression, Call):
        op = FN_ALIASES.get(expression.fn)
        if op is None or len(expression.args) != 2:
            return None
        operands = tuple(_operand(arg) for arg in expression.args)
        if any(o is None for o in operands):
            return None
        return Relationship(Variable(target), op, operands)
    return None


def build_relationships(definitions: Optional[Mapping[str, Any]]) -> List[Relationship]:
    """One relationship per supported declaration, in declaration order.

    Values may be expression nodes or declaration objects exposing an
    ``expression`` attribute.
    """
    relationships: List[Relationship] = []
    for name, definition in (definitions or {}).items():
        expression = getattr(definition, "expression", definition)
        if expression is None:
            continue
        rel = extract_relationship(name, expression)
        if rel is not None:
            relationships.append(rel)
    return relationships


# -------------------------------------------------------------------
# Arithmetic helpers
# -------------------------------------------------------------------

def exact_div(a: Number, b: Number) -> Optional[Number]:
    """``a / b`` keeping ints when the quotient is integral; None on b == 0."""
    if b == 0:
        return None
    if isinstance(a, int) and isinstance(b, int) and a % b == 0:
        return a // b
    return a / b


def finite(value: Optional[Number]) -> Optional[Number]:
    """Drop results that overflowed to inf or nan."""
    if value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def apply_operation(op: ArithOp, var_value: Number, const: Number,
                    var_is_first: bool) -> Optional[Number]:
    """Value of ``target`` given the variable operand's value."""
    if op is ArithOp.ADD:
        result = var_value + const
    elif op is ArithOp.SUB:
        result = var_value - const if var_is_first else const - var_value
    elif op is ArithOp.MUL:
        result = var_value * const
    elif op is ArithOp.DIV:
        result = exact_div(var_value, const) if var_is_first else exact_div(const, var_value)
    else:
        return None
    return finite(result)


def reverse_operation(op: ArithOp, target_value: Number, const: Number,
                      var_is_first: bool) -> Optional[Number]:
    """Value of the variable operand given the target's value."""
    if op is ArithOp.ADD:
        result = target_value - const
    elif op is ArithOp.SUB:
        result = target_value + const if var_is_first else const - target_value
    elif op is ArithOp.MUL:
        result = exact_div(target_value, const)
    elif op is ArithOp.DIV:
        if const == 0:
            return None
        result = target_value * const if var_is_first else exact_div(const, target_value)
    else:
        return None
    return finite(result)


__all__ = [
    "ArithOp", "FN_ALIASES", "Relationship",
    "extract_relationship", "build_relationships",
    "exact_div", "finite", "apply_operation", "reverse_operation",
]
