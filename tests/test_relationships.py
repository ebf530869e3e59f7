# tests/test_relationships.py
"""
Tests for relationship extraction and the arithmetic helpers.
"""

from types import SimpleNamespace

import pytest

from schema_unsat.atoms import Constant, Variable
from schema_unsat.expressions import Call, DeclRef, InputRef, Literal
from schema_unsat.relationships import (
    ArithOp, Relationship,
    apply_operation, build_relationships, exact_div, extract_relationship,
    reverse_operation,
)
from tests.conftest import CHAIN_DEFINITIONS


class TestExtractRelationship:

    def test_add_reference_and_literal(self):
        rel = extract_relationship("v1", Call("add", (DeclRef("seed"), Literal(1))))
        assert rel == Relationship(Variable("v1"), ArithOp.ADD,
                                   (Variable("seed"), Constant(1)))

    @pytest.mark.parametrize("fn,op", [
        ("sub", ArithOp.SUB), ("subtract", ArithOp.SUB),
        ("mul", ArithOp.MUL), ("multiply", ArithOp.MUL),
        ("div", ArithOp.DIV), ("divide", ArithOp.DIV),
    ])
    def test_function_aliases(self, fn, op):
        rel = extract_relationship("t", Call(fn, [InputRef("a"), InputRef("b")]))
        assert rel.op is op
        assert rel.variable_pair() == (Variable("a"), Variable("b"))

    def test_reference_is_identity(self):
        rel = extract_relationship("alias", InputRef("age"))
        assert rel.op is ArithOp.IDENTITY
        assert rel.operands == (Variable("age"),)
        assert str(rel) == "alias = age"

    @pytest.mark.parametrize("expression", [
        Literal(5),
        Call("add", (Call("add", (DeclRef("a"), Literal(1))), Literal(2))),
        Call("max", (DeclRef("a"), Literal(1))),
        Call("add", (DeclRef("a"), Literal(1), Literal(2))),
        Call("add", (DeclRef("a"),)),
        Call("add", (DeclRef("a"), Literal("x"))),
        Call("add", (DeclRef("a"), Literal(True))),
        "not an expression",
    ])
    def test_unsupported_shapes(self, expression):
        assert extract_relationship("t", expression) is None

    def test_variable_constant_orientation(self):
        first = extract_relationship("t", Call("sub", (DeclRef("x"), Literal(3))))
        second = extract_relationship("t", Call("sub", (Literal(3), DeclRef("x"))))
        assert first.variable_constant() == (Variable("x"), 3, True)
        assert second.variable_constant() == (Variable("x"), 3, False)
        assert first.variable_pair() is None


class TestBuildRelationships:

    def test_declaration_order(self):
        rels = build_relationships(CHAIN_DEFINITIONS)
        assert [str(r.target) for r in rels] == ["v1", "v2", "v3"]

    def test_skips_unsupported(self):
        rels = build_relationships({
            "a": Literal(1),
            "b": Call("add", (DeclRef("a"), Literal(1))),
            "c": None,
        })
        assert len(rels) == 1

    def test_declaration_objects(self):
        rels = build_relationships({
            "b": SimpleNamespace(expression=Call("mul", (DeclRef("a"), Literal(2)))),
            "c": SimpleNamespace(expression=None),
        })
        assert [r.op for r in rels] == [ArithOp.MUL]

    def test_empty(self):
        assert build_relationships(None) == []
        assert build_relationships({}) == []


class TestArithmetic:

    def test_exact_division_keeps_ints(self):
        assert exact_div(10, 2) == 5
        assert isinstance(exact_div(10, 2), int)
        assert exact_div(7, 2) == 3.5
        assert exact_div(1, 0) is None

    @pytest.mark.parametrize("op,value,const,first,expected", [
        (ArithOp.ADD, 4, 3, True, 7),
        (ArithOp.SUB, 4, 3, True, 1),
        (ArithOp.SUB, 4, 10, False, 6),
        (ArithOp.MUL, 4, 3, True, 12),
        (ArithOp.DIV, 12, 3, True, 4),
        (ArithOp.DIV, 4, 12, False, 3),
    ])
    def test_apply(self, op, value, const, first, expected):
        assert apply_operation(op, value, const, first) == expected

    @pytest.mark.parametrize("op,target,const,first,expected", [
        (ArithOp.ADD, 10, 3, True, 7),
        (ArithOp.SUB, 1, 3, True, 4),
        (ArithOp.SUB, 6, 10, False, 4),
        (ArithOp.MUL, 12, 3, True, 4),
        (ArithOp.DIV, 4, 3, True, 12),
        (ArithOp.DIV, 3, 12, False, 4),
    ])
    def test_reverse(self, op, target, const, first, expected):
        assert reverse_operation(op, target, const, first) == expected

    def test_zero_divisors_derive_nothing(self):
        assert apply_operation(ArithOp.DIV, 5, 0, True) is None
        assert apply_operation(ArithOp.DIV, 0, 5, False) is None
        assert reverse_operation(ArithOp.MUL, 0, 0, True) is None
        assert reverse_operation(ArithOp.DIV, 5, 0, True) is None
        assert reverse_operation(ArithOp.DIV, 0, 5, False) is None

    def test_overflow_derives_nothing(self):
        assert apply_operation(ArithOp.MUL, 1e308, 10, True) is None

    def test_identity_is_not_arithmetic(self):
        assert apply_operation(ArithOp.IDENTITY, 1, 1, True) is None
