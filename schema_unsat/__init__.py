"""
schema_unsat — Static Constraint-Satisfiability Engine for Rule Schemas
=======================================================================

Proves, at schema-analysis time, that a trait condition can never hold
for any input, so the compiler can reject logically dead schemas before
they ever run.

Core modules
------------
atoms
    ``Variable``/``Constant`` terms, ``RelOp`` and normalised ``Atom``s.
expressions
    The closed set of declaration expression shapes the engine inspects.
bounds
    Constant-only comparisons and per-variable numeric bounds.
equality
    Union-find equality classes against strict and ``!=`` relations.
ordering
    Strict-order cycle detection (white/gray/black DFS).
relationships
    Arithmetic derivation edges extracted from declarations.
propagation
    Fixpoint forward/reverse equality propagation.
ranges
    Interval propagation seeded from input domains.
domains
    Derived and literal equalities against input domains.
solver
    The ``unsat`` / ``analyze`` pipeline and its configuration.

Addon modules
-------------
notation
    S-expression reader for atoms, declarations and fields (``sexpdata``).

Quick start
-----------
>>> from schema_unsat import Atom, unsat
>>> unsat([Atom.of(">", "x", 10), Atom.of("<", "x", 5)])
True
"""

from __future__ import annotations

import importlib
import logging
import sys
import warnings
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "schema-unsat contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated incrementally below

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Internal registry: (module_name, list_of_names_to_import)
#
#   CORE  : always imported; failure is fatal
#   ADDON : failure only warns
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "atoms": ["Variable", "Constant", "RelOp", "Atom", "normalize"],
    "expressions": ["Literal", "InputRef", "DeclRef", "Call"],
    "diagnostics": ["Contradiction", "ContradictionKind", "DerivationTrace"],
    "errors": ["UnsatError", "NotationError"],
    "bounds": ["literal_contradiction", "bound_contradiction"],
    "equality": ["UnionFind", "equality_contradiction"],
    "ordering": ["find_cycle", "cycle_contradiction"],
    "relationships": [
        "ArithOp",
        "Relationship",
        "extract_relationship",
        "build_relationships",
    ],
    "propagation": ["DerivedConstraint", "propagate_constraints"],
    "ranges": ["Interval", "seed_ranges", "propagate_ranges", "range_contradiction"],
    "domains": ["domain_contradiction", "literal_domain_contradiction"],
    "solver": [
        "UnsatConfig",
        "UnsatReport",
        "Stage",
        "baseline_contradiction",
        "analyze",
        "unsat",
        "unsat_any",
    ],
}

_ADDON_MODULES = {
    "notation": [
        "Problem",
        "read_atom",
        "read_atoms",
        "read_expression",
        "read_definitions",
        "read_fields",
        "read_problem",
    ],
}


def _import_names(module_rel_name: str, names: List[str], *, fatal: bool = True) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        if fatal:
            raise ImportError(
                f"schema_unsat: required submodule '{module_rel_name}' "
                f"failed to import: {exc}"
            ) from exc
        warnings.warn(
            f"schema_unsat: optional submodule '{module_rel_name}' "
            f"could not be imported ({exc}); related symbols will be unavailable.",
            ImportWarning,
            stacklevel=2,
        )
        _log.debug("Skipped optional module %s: %s", module_rel_name, exc)
        return

    current_module = sys.modules[__name__]
    for name in names:
        setattr(current_module, name, getattr(mod, name))
        __all__.append(name)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names, fatal=True)

for _mod, _names in _ADDON_MODULES.items():
    _import_names(_mod, _names, fatal=False)

del _mod, _names

__all__ += ["__version__"]

# ---------------------------------------------------------------------------
# TYPE_CHECKING block: full visibility for static tools
# ---------------------------------------------------------------------------

if TYPE_CHECKING:
    from .atoms import Atom, Constant, RelOp, Variable, normalize
    from .bounds import bound_contradiction, literal_contradiction
    from .diagnostics import Contradiction, ContradictionKind, DerivationTrace
    from .domains import domain_contradiction, literal_domain_contradiction
    from .equality import UnionFind, equality_contradiction
    from .errors import NotationError, UnsatError
    from .expressions import Call, DeclRef, InputRef, Literal
    from .notation import (
        Problem,
        read_atom,
        read_atoms,
        read_definitions,
        read_expression,
        read_fields,
        read_problem,
    )
    from .ordering import cycle_contradiction, find_cycle
    from .propagation import DerivedConstraint, propagate_constraints
    from .ranges import Interval, propagate_ranges, range_contradiction, seed_ranges
    from .relationships import (
        ArithOp,
        Relationship,
        build_relationships,
        extract_relationship,
    )
    from .solver import (
        Stage,
        UnsatConfig,
        UnsatReport,
        analyze,
        baseline_contradiction,
        unsat,
        unsat_any,
    )
