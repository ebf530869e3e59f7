# tests/test_domains.py
"""
Tests for derived and literal equalities against input domains.
"""

import pytest

from schema_unsat.atoms import Constant, RelOp, Variable
from schema_unsat.diagnostics import ContradictionKind
from schema_unsat.domains import (
    domain_contradiction, field_domain, literal_domain_contradiction, violates_domain,
)
from schema_unsat.propagation import DerivedConstraint
from schema_unsat.ranges import Interval
from tests.conftest import AGE_META, TIER_META, atoms


def _eq(name, value, *path):
    return DerivedConstraint(Variable(name), RelOp.EQ, value,
                             tuple(Variable(p) for p in path))


class TestViolatesDomain:

    @pytest.mark.parametrize("value,domain,expected", [
        (70, Interval(18, 65), True),
        (40, Interval(18, 65), False),
        (70, range(18, 66), True),
        (20, range(18, 66), False),
        (20.0, range(18, 66), False),
        (20.5, range(18, 66), True),
        (float("inf"), range(18, 66), True),
        ("gold", ("gold", "silver"), False),
        ("bronze", ["gold", "silver"], True),
        (3, {1, 2}, True),
        (3, frozenset({3}), False),
    ])
    def test_known_domains(self, value, domain, expected):
        assert violates_domain(value, domain) is expected

    @pytest.mark.parametrize("domain", [None, lambda v: False, "free text", {"a": 1}])
    def test_unknown_domains_pass(self, domain):
        assert not violates_domain(12345, domain)

    def test_range_is_a_set_of_integers(self):
        domain = range(18, 66)
        assert violates_domain(65.5, domain)
        assert 65.5 in Interval.from_domain(domain)
        assert not violates_domain(40, range(0, 100, 10))
        assert violates_domain(45, range(0, 100, 10))

    def test_collections_tell_bools_from_numbers(self):
        assert violates_domain(True, (1, 2, 3))
        assert violates_domain(1, [True, False])
        assert not violates_domain(2.0, (1, 2, 3))

    def test_field_domain(self):
        assert field_domain(AGE_META, "age") == Interval(18, 65)
        assert field_domain(AGE_META, "name") is None
        assert field_domain(None, "age") is None


class TestDomainContradiction:

    def test_derived_outside_domain(self):
        hit = domain_contradiction([_eq("age", 70, "retire_in")], AGE_META)
        assert hit is not None
        assert hit.kind is ContradictionKind.DOMAIN
        assert hit.variables == ("age", "retire_in")

    def test_derived_inside_domain(self):
        assert domain_contradiction([_eq("age", 40, "retire_in")], AGE_META) is None

    def test_undeclared_field(self):
        assert domain_contradiction([_eq("v1", 10_000, "seed")], AGE_META) is None

    def test_only_equalities_count(self):
        derived = [DerivedConstraint(Variable("age"), RelOp.GT, 70, ())]
        assert domain_contradiction(derived, AGE_META) is None


class TestLiteralDomainContradiction:

    def test_literal_outside_collection(self):
        hit = literal_domain_contradiction(
            atoms(("==", "tier", Constant("bronze"))), TIER_META)
        assert hit is not None
        assert hit.variables == ("tier",)

    def test_literal_inside_collection(self):
        found = literal_domain_contradiction(
            atoms(("==", "tier", Constant("gold"))), TIER_META)
        assert found is None

    def test_constant_on_left(self):
        assert literal_domain_contradiction(atoms(("==", 99, "age")), AGE_META) is not None

    def test_inequalities_ignored(self):
        assert literal_domain_contradiction(atoms(("!=", "age", 99)), AGE_META) is None

    def test_no_metadata(self):
        assert literal_domain_contradiction(atoms(("==", "age", 99)), None) is None
