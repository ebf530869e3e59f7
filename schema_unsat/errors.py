"""
errors.py — Exception types
===========================

The engine itself is a total predicate and never raises.  Exceptions
exist only for the text notation used to write atoms, expressions and
domains by hand (tests, fixtures, debugging sessions).

    UnsatError
    └── NotationError      malformed notation text or form
"""

from __future__ import annotations

from typing import Any, Optional


class UnsatError(Exception):
    """Base class for every exception raised by ``schema_unsat``."""

    code: str = "UNSAT-0000"


class NotationError(UnsatError):
    """Raised when notation text cannot be read into engine objects.

    Attributes
    ----------
    message : str
        What was expected.
    form : Any
        The offending S-expression form, when one was isolated.
    """

    code = "UNSAT-1001"

    def __init__(self, message: str, form: Optional[Any] = None) -> None:
        self.message = message
        self.form = form
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.form is not None:
            return f"{self.code}: {self.message} (in {self.form!r})"
        return f"{self.code}: {self.message}"


__all__ = ["UnsatError", "NotationError"]
