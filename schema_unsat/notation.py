"""notation.py – S-expression notation for engine inputs.

Reads atoms, declaration expressions and input-field metadata written as
S-expressions (via ``sexpdata``) into the engine's own objects.  It is
the quickest way to state a problem by hand in tests, fixtures and
debugging sessions; the real analyzer builds the same objects directly.

Surface syntax
--------------
::

    ;; atoms: (<op> <term> <term>)  with op in == != > < >= <=
    (> x 10)
    (== tier "gold")
    (<= (input age) 65)          ;; (input name) is the same as a bare name

    ;; declarations
    (let v1 (add seed 1))        ;; Call("add", (DeclRef seed, Literal 1))
    (let age_copy (input age))   ;; InputRef
    (let alias v1)               ;; DeclRef

    ;; input fields
    (field age :type integer :domain (range 18 65))
    (field tier :domain (one-of "gold" "silver"))
    (field score :domain (range 0 inf))

Terms: bare symbols name variables; numbers, strings, ``true`` and
``false`` are constants.  ``inf`` and ``-inf`` are accepted only as range
ends; anywhere else they, like ``nan``, are rejected and cannot name a
variable.

Public API
----------
``read_atom(text)``, ``read_atoms(text)``, ``read_expression(text)``,
``read_definitions(text)``, ``read_fields(text)`` and
``read_problem(text)`` which accepts all three kinds of form mixed.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, NamedTuple, Optional

import sexpdata
from sexpdata import Symbol

from .atoms import COMPARATORS, Atom, Constant, Term, Variable, is_number
from .errors import NotationError
from .expressions import Call, DeclRef, Expression, InputRef, Literal
from .ranges import Interval

Sexp = Any  # Union[list, Symbol, str, int, float, bool]


class Problem(NamedTuple):
    """Positional arguments for :func:`schema_unsat.unsat`."""
    atoms: List[Atom]
    definitions: Dict[str, Expression]
    input_meta: Dict[str, Dict[str, Any]]


# ═══════════════════════════════════════════════════════════════════════
#  Reading
# ═══════════════════════════════════════════════════════════════════════

def _read_forms(text: str) -> List[Sexp]:
    # sexpdata reads a single form; wrap the text and strip the outer layer.
    try:
        parsed = sexpdata.loads(f"({text})", nil=None, true="true", false="false")
    except Exception as e:
        raise NotationError(f"cannot read S-expression text: {e}") from e
    if not isinstance(parsed, list):
        raise NotationError("expected a sequence of forms", parsed)
    return parsed


def _read_one(text: str) -> Sexp:
    forms = _read_forms(text)
    if len(forms) != 1:
        raise NotationError(f"expected exactly one form, got {len(forms)}")
    return forms[0]


# ═══════════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════════

def _is_symbol(s: Sexp) -> bool:
    return isinstance(s, Symbol)


def _sym_name(s: Sexp) -> str:
    if _is_symbol(s):
        return str(s)
    raise NotationError(f"expected symbol, got {type(s).__name__}", s)


def _head(form: Sexp) -> Optional[str]:
    if isinstance(form, list) and form and _is_symbol(form[0]):
        return str(form[0])
    return None


def _scalar(s: Sexp) -> Any:
    """A literal value: number, bool or string (but not a symbol)."""
    if isinstance(s, bool) or is_number(s):
        return s
    if isinstance(s, str) and not _is_symbol(s):
        return str(s)
    raise NotationError("expected a literal", s)


def _number(s: Sexp) -> Any:
    # sexpdata already reads inf, -inf and nan as floats
    if is_number(s) and not math.isnan(s):
        return s
    raise NotationError("expected a number", s)


def _finite(s: Sexp) -> Any:
    """A literal that may appear in an atom or an expression."""
    value = _scalar(s)
    if is_number(value) and not math.isfinite(value):
        raise NotationError("non-finite numbers are only allowed as range ends", s)
    return value


def _reference_name(form: Sexp) -> Optional[str]:
    """``name`` for a bare symbol or an ``(input name)`` form."""
    if _is_symbol(form):
        return str(form)
    if _head(form) == "input":
        if len(form) != 2:
            raise NotationError("(input <name>) takes exactly one name", form)
        return _sym_name(form[1])
    return None


# ═══════════════════════════════════════════════════════════════════════
#  Atoms and terms
# ═══════════════════════════════════════════════════════════════════════

def _term(s: Sexp) -> Term:
    name = _reference_name(s)
    if name is not None:
        return Variable(name)
    if isinstance(s, list):
        raise NotationError("atoms relate names and literals only", s)
    return Constant(_finite(s))


def _atom(form: Sexp) -> Atom:
    op = _head(form)
    if op not in COMPARATORS:
        raise NotationError("expected (<comparator> <term> <term>)", form)
    if len(form) != 3:
        raise NotationError(f"({op} ...) takes exactly two terms", form)
    return Atom.of(op, _term(form[1]), _term(form[2]))


def read_atom(text: str) -> Atom:
    return _atom(_read_one(text))


def read_atoms(text: str) -> List[Atom]:
    return [_atom(form) for form in _read_forms(text)]


# ═══════════════════════════════════════════════════════════════════════
#  Expressions and declarations
# ═══════════════════════════════════════════════════════════════════════

def _expression(s: Sexp) -> Expression:
    if _is_symbol(s):
        return DeclRef(str(s))
    if isinstance(s, list):
        if _head(s) == "input":
            return InputRef(_reference_name(s))
        fn = _head(s)
        if fn is None:
            raise NotationError("expected (<function> <arg> ...)", s)
        return Call(fn, tuple(_expression(arg) for arg in s[1:]))
    return Literal(_finite(s))


def read_expression(text: str) -> Expression:
    return _expression(_read_one(text))


def _let(form: Sexp) -> tuple:
    if len(form) != 3:
        raise NotationError("expected (let <name> <expression>)", form)
    return _sym_name(form[1]), _expression(form[2])


def read_definitions(text: str) -> Dict[str, Expression]:
    definitions: Dict[str, Expression] = {}
    for form in _read_forms(text):
        if _head(form) != "let":
            raise NotationError("expected (let <name> <expression>)", form)
        name, expression = _let(form)
        definitions[name] = expression
    return definitions


# ═══════════════════════════════════════════════════════════════════════
#  Input fields
# ═══════════════════════════════════════════════════════════════════════

def _domain(s: Sexp) -> Any:
    head = _head(s)
    if head == "range":
        if len(s) != 3:
            raise NotationError("expected (range <lo> <hi>)", s)
        lo, hi = _number(s[1]), _number(s[2])
        if lo > hi:
            raise NotationError("range lower end exceeds upper end", s)
        return Interval(lo, hi)
    if head == "one-of":
        return tuple(_scalar(v) for v in s[1:])
    raise NotationError("expected (range <lo> <hi>) or (one-of <value> ...)", s)


_FIELD_OPTIONS: Dict[str, Callable[[Sexp], Any]] = {}


def _register(option: str):
    """Decorator: register a reader for a ``:option`` of ``(field ...)``."""
    def deco(fn):
        _FIELD_OPTIONS[option] = fn
        return fn
    return deco


@_register(":domain")
def _field_domain(s: Sexp) -> Any:
    return _domain(s)


@_register(":type")
def _field_type(s: Sexp) -> str:
    return _sym_name(s)


def _field(form: Sexp) -> tuple:
    if len(form) < 2 or len(form) % 2 != 0:
        raise NotationError("expected (field <name> [:option value] ...)", form)
    name = _sym_name(form[1])
    meta: Dict[str, Any] = {}
    for key, value in zip(form[2::2], form[3::2]):
        option = _sym_name(key)
        reader = _FIELD_OPTIONS.get(option)
        if reader is None:
            raise NotationError(f"unknown field option {option}", form)
        meta[option[1:]] = reader(value)
    return name, meta


def read_fields(text: str) -> Dict[str, Dict[str, Any]]:
    fields: Dict[str, Dict[str, Any]] = {}
    for form in _read_forms(text):
        if _head(form) != "field":
            raise NotationError("expected (field <name> ...)", form)
        name, meta = _field(form)
        fields[name] = meta
    return fields


# ═══════════════════════════════════════════════════════════════════════
#  Whole problems
# ═══════════════════════════════════════════════════════════════════════

def read_problem(text: str) -> Problem:
    """Read atoms, ``let`` declarations and ``field`` forms in any order."""
    problem = Problem([], {}, {})
    for form in _read_forms(text):
        head = _head(form)
        if head == "let":
            name, expression = _let(form)
            problem.definitions[name] = expression
        elif head == "field":
            name, meta = _field(form)
            problem.input_meta[name] = meta
        else:
            problem.atoms.append(_atom(form))
    return problem


__all__ = [
    "Problem",
    "read_atom", "read_atoms", "read_expression",
    "read_definitions", "read_fields", "read_problem",
]
