# tests/test_bounds.py
"""
Tests for constant-only comparisons and per-variable numeric bounds.
"""

import pytest

from schema_unsat.atoms import Atom, Constant, RelOp, Variable
from schema_unsat.bounds import (
    always_false, bound_contradiction, literal_contradiction, variable_bounds,
)
from schema_unsat.diagnostics import ContradictionKind, DerivationTrace
from tests.conftest import atoms


class TestAlwaysFalse:

    @pytest.mark.parametrize("op,a,b", [
        (RelOp.GT, 5, 5),
        (RelOp.LT, 7, 3),
        (RelOp.EQ, 1, 2),
        (RelOp.NE, 4, 4.0),
    ])
    def test_false_numeric_comparisons(self, op, a, b):
        assert always_false(Atom(op, Constant(a), Constant(b)))

    def test_true_numeric_comparison(self):
        assert not always_false(Atom(RelOp.GE, Constant(5), Constant(5)))

    def test_strings_of_different_kind_never_equal(self):
        assert always_false(Atom(RelOp.EQ, Constant("1"), Constant(1)))
        assert not always_false(Atom(RelOp.NE, Constant("1"), Constant(1)))

    def test_string_equality(self):
        assert always_false(Atom(RelOp.EQ, Constant("gold"), Constant("silver")))
        assert not always_false(Atom(RelOp.EQ, Constant("gold"), Constant("gold")))

    def test_string_ordering_is_not_decided(self):
        assert not always_false(Atom(RelOp.GT, Constant("a"), Constant("b")))

    def test_variables_are_not_decided(self):
        assert not always_false(Atom.of(">", "x", 10))

    def test_literal_contradiction(self):
        hit = literal_contradiction([Atom(RelOp.GT, Constant(5), Constant(5))])
        assert hit.kind is ContradictionKind.LITERAL
        assert "5 > 5" in hit.message


class TestVariableBounds:

    def test_integer_tightening(self):
        bounds = variable_bounds(atoms((">", "x", 5), ("<", "x", 10)))
        assert bounds[Variable("x")] == ((6, False), (9, False))

    def test_float_variable_keeps_strictness(self):
        bounds = variable_bounds(atoms((">", "x", 5)), float_variables={"x"})
        assert bounds[Variable("x")][0] == (5, True)

    def test_float_constant_keeps_strictness(self):
        bounds = variable_bounds(atoms(("<", "x", 2.5)))
        assert bounds[Variable("x")][1] == (2.5, True)

    def test_fractional_equality_disables_tightening(self):
        bounds = variable_bounds(atoms(("==", "x", 2.5), (">", "x", 2)))
        assert bounds[Variable("x")] == ((2.5, False), (2.5, False))
        assert variable_bounds(atoms((">", "x", 2), ("==", "x", 2.5)))[Variable("x")][0] == (2.5, False)

    def test_fractional_comparison_disables_tightening(self):
        bounds = variable_bounds(atoms((">", "x", 2), ("<", "x", 2.9)))
        assert bounds[Variable("x")] == ((2, True), (2.9, True))

    def test_integral_float_keeps_tightening_for_ints(self):
        bounds = variable_bounds(atoms((">", "x", 2), ("<=", "x", 4.0)))
        assert bounds[Variable("x")][0] == (3, False)

    def test_equality_pins_both_ends(self):
        bounds = variable_bounds(atoms(("==", "x", 4)))
        assert bounds[Variable("x")] == ((4, False), (4, False))

    def test_not_equal_adds_nothing(self):
        bounds = variable_bounds(atoms(("!=", "x", 4)))
        lower, upper = bounds[Variable("x")]
        assert lower[0] == float("-inf")
        assert upper[0] == float("inf")

    def test_tightest_bound_wins(self):
        bounds = variable_bounds(atoms((">=", "x", 1), (">=", "x", 3), (">=", "x", 2)))
        assert bounds[Variable("x")][0] == (3, False)

    def test_constant_on_left(self):
        bounds = variable_bounds(atoms(("<", 10, "x")))
        assert bounds[Variable("x")][0] == (11, False)


class TestBoundContradiction:

    def test_disjoint_bounds(self):
        hit = bound_contradiction(atoms((">", "x", 10), ("<", "x", 5)))
        assert hit is not None
        assert hit.kind is ContradictionKind.BOUNDS
        assert hit.variables == ("x",)

    def test_no_integer_between(self):
        assert bound_contradiction(atoms((">", "x", 5), ("<", "x", 6))) is not None

    def test_float_variable_has_room(self):
        found = bound_contradiction(atoms((">", "x", 1), ("<", "x", 2)),
                                    float_variables={"x"})
        assert found is None

    def test_integer_bounds_disabled(self):
        found = bound_contradiction(atoms((">", "x", 5), ("<", "x", 6)),
                                    integer_bounds=False)
        assert found is None

    def test_fractional_value_satisfies_strict_bound(self):
        assert bound_contradiction(atoms(("==", "x", 2.5), (">", "x", 2))) is None
        assert bound_contradiction(atoms((">", "x", 2), ("==", "x", 2.5))) is None

    def test_fractional_value_still_checked(self):
        assert bound_contradiction(atoms(("==", "x", 2.5), (">", "x", 3))) is not None

    def test_strict_touching_bounds(self):
        found = bound_contradiction(atoms((">", "x", 5), ("<=", "x", 5)),
                                    integer_bounds=False)
        assert found is not None

    def test_closed_touching_bounds(self):
        assert bound_contradiction(atoms((">=", "x", 5), ("<=", "x", 5))) is None

    def test_conflicting_equalities(self):
        assert bound_contradiction(atoms(("==", "x", 5), ("==", "x", 6))) is not None

    def test_separate_variables(self):
        assert bound_contradiction(atoms((">", "x", 10), ("<", "y", 5))) is None

    def test_trace_records_reason(self):
        trace = DerivationTrace()
        bound_contradiction(atoms((">", "x", 10), ("<", "x", 5)), trace=trace)
        assert len(trace) == 1
        assert "x" in trace.render()
