"""
domains.py — Equalities against declared input domains
======================================================

An equality that pins an input field to a value outside the field's
declared domain proves the schema demands an input that can never
legally occur.  Two sources of such equalities are checked:

* constraints derived by propagation (``age == 70`` derived from
  ``retire_in = 65 - age`` and ``retire_in == -5``);
* user atoms comparing a field directly to a literal.

Domain kinds:

    Interval                   real numbers between the two ends
    range                      the integers it yields (``range(18, 66)``
                               rejects ``65.5``); the range stage works
                               with its hull ``[18, 65]``
    list, tuple, set, frozenset     collection membership; ``1`` and
                               ``True`` are different values
    callable                   custom validator: cannot be run statically, passes
    anything else / None       no restriction
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from .atoms import Atom, Constant, RelOp, Variable, is_number
from .diagnostics import Contradiction, ContradictionKind, DerivationTrace, record
from .propagation import DerivedConstraint
from .ranges import Interval

InputMeta = Mapping[str, Mapping[str, Any]]


def field_domain(input_meta: Optional[InputMeta], name: str) -> Any:
    meta = (input_meta or {}).get(name)
    if not isinstance(meta, Mapping):
        return None
    return meta.get("domain")


def _member(value: Any, values: Iterable[Any]) -> bool:
    target = Constant(value)
    return any(target == Constant(v) for v in values)


def violates_domain(value: Any, domain: Any) -> bool:
    """Whether *value* lies outside *domain*; unknown domains never reject."""
    if domain is None or callable(domain):
        return False
    if isinstance(domain, Interval):
        return not domain.contains(value)
    if isinstance(domain, range):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return not (is_number(value) and isinstance(value, int) and value in domain)
    if isinstance(domain, (list, tuple, set, frozenset)):
        return not _member(value, domain)
    return False


def domain_contradiction(derived: Iterable[DerivedConstraint],
                         input_meta: Optional[InputMeta],
                         trace: Optional[DerivationTrace] = None
                         ) -> Optional[Contradiction]:
    """Derived equalities that force an input field outside its domain."""
    for dc in derived:
        if dc.op is not RelOp.EQ:
            continue
        domain = field_domain(input_meta, dc.variable.name)
        if violates_domain(dc.value, domain):
            record(trace, "domain violation: derived %s outside %r", dc, domain)
            return Contradiction(
                ContradictionKind.DOMAIN,
                f"`{dc.variable} == {dc.value}` is outside the domain of "
                f"`{dc.variable}`",
                (dc.variable.name,) + tuple(v.name for v in dc.derivation_path),
            )
    return None


def literal_domain_contradiction(atoms: Iterable[Atom],
                                 input_meta: Optional[InputMeta],
                                 trace: Optional[DerivationTrace] = None
                                 ) -> Optional[Contradiction]:
    """Atoms ``field == literal`` whose literal the domain excludes."""
    if not input_meta:
        return None
    for atom in atoms:
        if atom.op is not RelOp.EQ:
            continue
        if not (isinstance(atom.lhs, Variable) and isinstance(atom.rhs, Constant)):
            continue
        domain = field_domain(input_meta, atom.lhs.name)
        if violates_domain(atom.rhs.value, domain):
            record(trace, "domain violation: %s outside %r", atom, domain)
            return Contradiction(
                ContradictionKind.DOMAIN,
                f"`{atom}` is outside the domain of `{atom.lhs}`",
                (atom.lhs.name,),
            )
    return None


__all__ = [
    "InputMeta", "field_domain", "violates_domain",
    "domain_contradiction", "literal_domain_contradiction",
]
