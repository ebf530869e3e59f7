# tests/conftest.py
"""
Shared fixtures and helpers for the schema_unsat test suite.
"""

import pytest

from schema_unsat.atoms import Atom
from schema_unsat.expressions import Call, DeclRef, InputRef, Literal
from schema_unsat.ranges import Interval


def atoms(*specs):
    """``atoms((">", "x", 10), ("<", "x", 5))`` → list of normalised atoms."""
    return [Atom.of(op, lhs, rhs) for op, lhs, rhs in specs]


# v1 = seed + 1, v2 = v1 + 2, v3 = v2 + 3
CHAIN_DEFINITIONS = {
    "v1": Call("add", (DeclRef("seed"), Literal(1))),
    "v2": Call("add", (DeclRef("v1"), Literal(2))),
    "v3": Call("add", (DeclRef("v2"), Literal(3))),
}

# retire_in = 65 - age
RETIREMENT_DEFINITIONS = {
    "retire_in": Call("sub", (Literal(65), InputRef("age"))),
}

UNRELATED_DEFINITIONS = {
    "bonus": Call("mul", (InputRef("salary"), Literal(2))),
}

AGE_META = {
    "age": {"type": "integer", "domain": Interval(18, 65)},
}

TIER_META = {
    "tier": {"type": "string", "domain": ("gold", "silver")},
}

CHAIN_NOTATION = """
    ;; a three step chain
    (let v1 (add seed 1))
    (let v2 (add v1 2))
    (let v3 (add v2 3))
"""

PROBLEM_NOTATION = """
    (field age :type integer :domain (range 18 65))
    (field tier :domain (one-of "gold" "silver"))
    (let retire_in (sub 65 (input age)))
    (> age 30)
    (== tier "gold")
"""


@pytest.fixture
def chain_definitions():
    return dict(CHAIN_DEFINITIONS)


@pytest.fixture
def age_meta():
    return {name: dict(meta) for name, meta in AGE_META.items()}
