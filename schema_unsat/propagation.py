"""
propagation.py — Equality propagation through relationships
===========================================================

Known equalities flow along relationship edges in both directions until
nothing new can be learned:

    forward     seed == 0,  v1 = seed + 1          ⇒  v1 == 1
    forward     a == 2, b == 3,  c = a + b         ⇒  c == 5
    identity    alias = v1,  v1 == 1               ⇒  alias == 1
    reverse     v3 == 10,  v3 = v2 + 3             ⇒  v2 == 7

Each round rebuilds a constraint map from the working atom set, derives
everything it can from it, and keeps only facts that are new.  New facts
join the working set for the next round.  The loop stops at the first
round that adds nothing, and never runs more than
``len(relationships) + 1`` rounds.

Only ``add`` combines two variable operands.  Two-variable ``sub``,
``mul`` and ``div`` derive nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .atoms import Atom, Constant, Number, RelOp, Variable, is_numeric
from .diagnostics import DerivationTrace, record
from .relationships import (
    ArithOp,
    Relationship,
    apply_operation,
    finite,
    reverse_operation,
)

logger = logging.getLogger(__name__)

ConstraintMap = Dict[Variable, List[Atom]]


@dataclass(frozen=True)
class DerivedConstraint:
    """An equality inferred by propagation, with the variables it came from."""
    variable: Variable
    op: RelOp
    value: Number
    derivation_path: Tuple[Variable, ...]

    def as_atom(self) -> Atom:
        return Atom(self.op, self.variable, Constant(self.value))

    def key(self) -> Tuple[Variable, RelOp, Number]:
        return (self.variable, self.op, self.value)

    def __str__(self) -> str:
        via = ", ".join(str(v) for v in self.derivation_path)
        return f"{self.variable} {self.op.value} {self.value}  (via {via})"


def build_constraint_map(atoms: Iterable[Atom]) -> ConstraintMap:
    """Group atoms by their left-hand variable."""
    constraint_map: ConstraintMap = {}
    for atom in atoms:
        if isinstance(atom.lhs, Variable):
            constraint_map.setdefault(atom.lhs, []).append(atom)
    return constraint_map


def known_values(constraint_map: ConstraintMap, var: Variable) -> List[Number]:
    """Numeric values *var* is asserted equal to, in atom order."""
    values: List[Number] = []
    for atom in constraint_map.get(var, ()):
        if atom.op is RelOp.EQ and is_numeric(atom.rhs) and atom.rhs.value not in values:
            values.append(atom.rhs.value)
    return values


def _derived(var: Variable, value: Number, path: Sequence[Variable]) -> DerivedConstraint:
    return DerivedConstraint(var, RelOp.EQ, value, tuple(path))


def derive_forward(rel: Relationship, constraint_map: ConstraintMap,
                   trace: Optional[DerivationTrace] = None) -> List[DerivedConstraint]:
    """Equalities on ``rel.target`` implied by equalities on its operands."""
    derived: List[DerivedConstraint] = []

    if rel.op is ArithOp.IDENTITY:
        operand = rel.operands[0]
        if isinstance(operand, Variable):
            for value in known_values(constraint_map, operand):
                derived.append(_derived(rel.target, value, [operand]))
                record(trace, "derived %s == %s (alias of %s)", rel.target, value, operand)
        return derived

    mixed = rel.variable_constant()
    if mixed is not None:
        var, const, var_is_first = mixed
        for value in known_values(constraint_map, var):
            result = apply_operation(rel.op, value, const, var_is_first)
            if result is None:
                continue
            derived.append(_derived(rel.target, result, [var]))
            record(trace, "derived %s == %s (from %s == %s via %s)",
                   rel.target, result, var, value, rel)
        return derived

    pair = rel.variable_pair()
    if pair is not None and rel.op is ArithOp.ADD and pair[0] != pair[1]:
        var1, var2 = pair
        for v1 in known_values(constraint_map, var1):
            for v2 in known_values(constraint_map, var2):
                result = finite(v1 + v2)
                if result is None:
                    continue
                derived.append(_derived(rel.target, result, [var1, var2]))
                record(trace, "derived %s == %s (from %s == %s and %s == %s)",
                       rel.target, result, var1, v1, var2, v2)
    return derived


def derive_reverse(rel: Relationship, constraint_map: ConstraintMap,
                   trace: Optional[DerivationTrace] = None) -> List[DerivedConstraint]:
    """Equalities on an operand implied by an equality on ``rel.target``."""
    derived: List[DerivedConstraint] = []
    targets = known_values(constraint_map, rel.target)
    if not targets:
        return derived

    if rel.op is ArithOp.IDENTITY:
        operand = rel.operands[0]
        if isinstance(operand, Variable):
            for value in targets:
                derived.append(_derived(operand, value, [rel.target]))
                record(trace, "reverse derived %s == %s (aliased by %s)",
                       operand, value, rel.target)
        return derived

    mixed = rel.variable_constant()
    if mixed is None:
        return derived
    var, const, var_is_first = mixed
    for value in targets:
        result = reverse_operation(rel.op, value, const, var_is_first)
        if result is None:
            continue
        derived.append(_derived(var, result, [rel.target]))
        record(trace, "reverse derived %s == %s (from %s == %s via %s)",
               var, result, rel.target, value, rel)
    return derived


def propagate_constraints(atoms: Sequence[Atom],
                          relationships: Sequence[Relationship],
                          trace: Optional[DerivationTrace] = None,
                          ) -> List[DerivedConstraint]:
    """Run forward/reverse propagation to a fixpoint.

    Returns every derived constraint in the order it was first found.
    """
    working: List[Atom] = list(atoms)
    seen: Set[Atom] = set(working)
    all_derived: List[DerivedConstraint] = []
    derived_keys: Set[Tuple[Variable, RelOp, Number]] = set()
    max_iterations = len(relationships) + 1

    iteration = 0
    for iteration in range(1, max_iterations + 1):
        constraint_map = build_constraint_map(working)
        round_derived: List[DerivedConstraint] = []
        for rel in relationships:
            round_derived.extend(derive_forward(rel, constraint_map, trace))
        for rel in relationships:
            round_derived.extend(derive_reverse(rel, constraint_map, trace))

        new: List[DerivedConstraint] = []
        for dc in round_derived:
            if dc.key() in derived_keys or dc.as_atom() in seen:
                continue
            derived_keys.add(dc.key())
            new.append(dc)

        if not new:
            break
        record(trace, "iteration %d: derived %d new constraints", iteration, len(new))
        for dc in new:
            atom = dc.as_atom()
            working.append(atom)
            seen.add(atom)
        all_derived.extend(new)

    logger.debug("propagation: %d derived constraints in %d iterations",
                 len(all_derived), iteration)
    record(trace, "total derived %d constraints in %d iterations",
           len(all_derived), iteration)
    return all_derived


__all__ = [
    "ConstraintMap", "DerivedConstraint",
    "build_constraint_map", "known_values",
    "derive_forward", "derive_reverse", "propagate_constraints",
]
