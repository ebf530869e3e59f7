"""
expressions.py — Declaration expression shapes understood by the engine
=======================================================================

The analyzer hands the engine the expression of every declaration.  Only
a fixed, finite set of node shapes is ever inspected, so they are
modelled as a closed union of frozen dataclasses:

    Literal(value)          5, 2.5, "gold", true
    InputRef(name)          input.age
    DeclRef(name)           a reference to another declaration
    Call(fn, args)          add(seed, 1)

Any other object found in a definitions mapping is treated as an
unsupported shape by the relationship extractor.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .atoms import Scalar


@dataclass(frozen=True, slots=True)
class Literal:
    value: Scalar


@dataclass(frozen=True, slots=True)
class InputRef:
    """Reference to a declared input field."""
    name: str


@dataclass(frozen=True, slots=True)
class DeclRef:
    """Reference to another value declaration."""
    name: str


@dataclass(frozen=True, slots=True)
class Call:
    """Function application ``fn(*args)``."""
    fn: str
    args: Tuple["Expression", ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers; keep the node hashable.
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))


Expression = Union[Literal, InputRef, DeclRef, Call]

Reference = (InputRef, DeclRef)


__all__ = ["Literal", "InputRef", "DeclRef", "Call", "Expression", "Reference"]
