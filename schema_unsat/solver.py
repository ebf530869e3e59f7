"""
solver.py — The ``unsat`` pipeline
==================================

Composes every check into one cheap-first pipeline that stops at the
first contradiction:

1. **baseline** over the raw atoms: constant comparisons, numeric
   bounds, equality classes, strict-order cycles; then literal
   equalities against input domains;
2. extract relationships from the declarations;
3. **ranges**: push input domains through the relationships and test
   every variable-vs-number atom against its range; the seeded domains
   are tested even when there are no relationships, after which the
   atoms are satisfiable;
4. **propagation**: derive equalities along the relationships;
5. **domains**: test derived equalities against input domains;
6. **baseline** again over atoms plus derived equalities.

Usage::

    from schema_unsat import Atom, unsat
    from schema_unsat.expressions import Call, DeclRef, Literal

    atoms = [Atom.of("==", "seed", 0), Atom.of("==", "v2", 10)]
    definitions = {
        "v1": Call("add", (DeclRef("seed"), Literal(1))),
        "v2": Call("add", (DeclRef("v1"), Literal(2))),
    }
    unsat(atoms, definitions)        # True: v2 must be 3

Every call allocates its own working state; nothing is shared between
calls and nothing raises.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Collection,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
)

from .atoms import Atom, normalize
from .bounds import bound_contradiction, literal_contradiction
from .diagnostics import Contradiction, DerivationTrace, record
from .domains import InputMeta, domain_contradiction, literal_domain_contradiction
from .equality import equality_contradiction
from .ordering import cycle_contradiction
from .propagation import DerivedConstraint, propagate_constraints
from .ranges import RangeMap, propagate_ranges, range_contradiction, seed_ranges
from .relationships import Relationship, build_relationships

logger = logging.getLogger(__name__)


# ===================================================================
#  Configuration
# ===================================================================

@dataclass(frozen=True)
class UnsatConfig:
    """Knobs of the unsat pipeline."""
    # Diagnostics
    debug: bool = False                     # send trace lines to the logger

    # Bounds
    integer_bounds: bool = True             # x > 5  ⇒  x >= 6 for int constants
    float_types: FrozenSet[str] = frozenset({"float", "decimal", "double"})

    # Stages
    check_ranges: bool = True
    check_domains: bool = True


DEFAULT_CONFIG = UnsatConfig()


class Stage(enum.Enum):
    BASELINE = "baseline"
    LITERAL_DOMAIN = "literal-domain"
    RANGE = "range"
    DOMAIN = "domain"
    PROPAGATION = "propagation"


@dataclass
class UnsatReport:
    """Verdict of one ``analyze`` run plus everything learned on the way."""
    unsat: bool = False
    contradiction: Optional[Contradiction] = None
    stage: Optional[Stage] = None
    relationships: List[Relationship] = field(default_factory=list)
    derived: List[DerivedConstraint] = field(default_factory=list)
    ranges: RangeMap = field(default_factory=dict)
    trace: DerivationTrace = field(default_factory=DerivationTrace)

    def __bool__(self) -> bool:
        return self.unsat

    def summary(self) -> str:
        lines = [
            "=" * 60,
            "  UNSAT ANALYSIS",
            "=" * 60,
            f"  Verdict        : {'UNSATISFIABLE' if self.unsat else 'satisfiable'}",
        ]
        if self.contradiction is not None:
            lines.append(f"  Stage          : {self.stage.value}")
            lines.append(f"  Contradiction  : {self.contradiction.pretty()}")
        lines.append(f"  Relationships  : {len(self.relationships)}")
        lines.append(f"  Derived        : {len(self.derived)}")
        lines.append(f"  Ranged vars    : {len(self.ranges)}")
        if self.trace.lines:
            lines.append("-" * 60)
            lines.extend(f"  {line}" for line in self.trace.lines)
        lines.append("=" * 60)
        return "\n".join(lines)


# ===================================================================
#  Baseline checks
# ===================================================================

def float_variables(input_meta: Optional[InputMeta],
                    config: UnsatConfig = DEFAULT_CONFIG) -> FrozenSet[str]:
    """Input fields whose declared type is not integer-valued."""
    names = set()
    for name, meta in (input_meta or {}).items():
        if isinstance(meta, Mapping) and str(meta.get("type", "")).lower() in config.float_types:
            names.add(name)
    return frozenset(names)


def baseline_contradiction(atoms: Sequence[Atom],
                           float_vars: Collection[str] = (),
                           integer_bounds: bool = True,
                           trace: Optional[DerivationTrace] = None,
                           ) -> Optional[Contradiction]:
    """Literal, bound, equality and cycle checks, first hit wins."""
    return (literal_contradiction(atoms, trace)
            or bound_contradiction(atoms, float_vars, integer_bounds, trace)
            or equality_contradiction(atoms, trace)
            or cycle_contradiction(atoms, trace))


# ===================================================================
#  Pipeline
# ===================================================================

def _finish(report: UnsatReport, contradiction: Optional[Contradiction],
            stage: Stage) -> UnsatReport:
    if contradiction is not None:
        report.unsat = True
        report.contradiction = contradiction
        report.stage = stage
        logger.debug("unsat at %s stage: %s", stage.value, contradiction.pretty())
    return report


def analyze(atoms: Iterable[Atom],
            definitions: Optional[Mapping[str, Any]] = None,
            input_meta: Optional[InputMeta] = None,
            *,
            debug: bool = False,
            config: Optional[UnsatConfig] = None) -> UnsatReport:
    """Run the full pipeline and return an :class:`UnsatReport`.

    Parameters
    ----------
    atoms : iterable of Atom
        Ground relations asserted together (a trait condition).
    definitions : mapping, optional
        Declaration name → expression node (or declaration object with an
        ``expression`` attribute).
    input_meta : mapping, optional
        Input field name → ``{"domain": ..., "type": ...}``.
    debug : bool
        Emit the derivation trace through ``logging`` as it is built.
    config : UnsatConfig, optional
        Pipeline configuration; ``debug=True`` overrides ``config.debug``.
    """
    config = config or DEFAULT_CONFIG
    trace = DerivationTrace(emit=debug or config.debug)
    report = UnsatReport(trace=trace)
    atoms = [normalize(a) for a in atoms]
    float_vars = float_variables(input_meta, config)

    record(trace, "checking %d atoms: %s", len(atoms), ", ".join(str(a) for a in atoms))

    # 1. Baseline over the raw atoms
    hit = baseline_contradiction(atoms, float_vars, config.integer_bounds, trace)
    if hit:
        return _finish(report, hit, Stage.BASELINE)
    if config.check_domains:
        hit = literal_domain_contradiction(atoms, input_meta, trace)
        if hit:
            return _finish(report, hit, Stage.LITERAL_DOMAIN)

    # 2. Relationships
    report.relationships = build_relationships(definitions)
    if report.relationships:
        record(trace, "relationships: %s", "; ".join(str(r) for r in report.relationships))

    # 3. Ranges; the seeded domains alone can already exclude an atom
    if config.check_ranges:
        report.ranges = propagate_ranges(seed_ranges(input_meta),
                                         report.relationships, trace)
        hit = range_contradiction(atoms, report.ranges, trace)
        if hit:
            return _finish(report, hit, Stage.RANGE)

    if not report.relationships:
        record(trace, "no relationships: satisfiable")
        return report

    # 4. Equality propagation
    report.derived = propagate_constraints(atoms, report.relationships, trace)

    # 5. Derived equalities against domains
    if config.check_domains:
        hit = domain_contradiction(report.derived, input_meta, trace)
        if hit:
            return _finish(report, hit, Stage.DOMAIN)

    # 6. Baseline over atoms and derived facts together
    combined = atoms + [dc.as_atom() for dc in report.derived]
    hit = baseline_contradiction(combined, float_vars, config.integer_bounds, trace)
    return _finish(report, hit, Stage.PROPAGATION)


def unsat(atoms: Iterable[Atom],
          definitions: Optional[Mapping[str, Any]] = None,
          input_meta: Optional[InputMeta] = None,
          *,
          debug: bool = False,
          config: Optional[UnsatConfig] = None) -> bool:
    """True when *atoms* can never hold together."""
    return analyze(atoms, definitions, input_meta, debug=debug, config=config).unsat


def unsat_any(branches: Iterable[Iterable[Atom]],
              definitions: Optional[Mapping[str, Any]] = None,
              input_meta: Optional[InputMeta] = None,
              *,
              debug: bool = False,
              config: Optional[UnsatConfig] = None) -> bool:
    """True when a disjunction of atom sets can never hold.

    A disjunction is impossible only if every branch is; a branch with no
    atoms constrains nothing and is always possible.
    """
    saw_branch = False
    for branch in branches:
        branch = list(branch)
        if not branch:
            return False
        saw_branch = True
        if not unsat(branch, definitions, input_meta, debug=debug, config=config):
            return False
    return saw_branch


__all__ = [
    "UnsatConfig", "DEFAULT_CONFIG", "Stage", "UnsatReport",
    "float_variables", "baseline_contradiction",
    "analyze", "unsat", "unsat_any",
]
