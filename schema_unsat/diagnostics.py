"""
diagnostics.py — Contradiction records and the derivation trace
===============================================================

Every check in the engine answers with ``Optional[Contradiction]``:
``None`` when it found nothing, otherwise a small record saying which
class of contradiction was proven and why.  The record is what the
owning analyzer pass turns into a located compile-time error.

``DerivationTrace`` collects the human-readable propagation log.  It is
write-only from the engine's point of view and has no influence on any
verdict.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class ContradictionKind(enum.Enum):
    LITERAL = "literal"           # 5 > 5
    BOUNDS = "bounds"             # x > 10, x < 5
    EQUALITY = "equality"         # x == y, x > y
    CYCLE = "cycle"               # a > b, b > a
    RANGE = "range"               # age in 18..65, age > 70
    DOMAIN = "domain"             # age in 18..65, age == 70


@dataclass(frozen=True)
class Contradiction:
    """Proof that a set of atoms can never hold together."""
    kind: ContradictionKind
    message: str
    variables: Tuple[str, ...] = ()

    def pretty(self) -> str:
        return f"[{self.kind.value}] {self.message}"

    def __str__(self) -> str:
        return self.pretty()


@dataclass
class DerivationTrace:
    """Ordered log of what the engine derived and why.

    Parameters
    ----------
    emit : bool
        When true every recorded line is also sent to the package logger
        at DEBUG level as it is recorded.
    """
    emit: bool = False
    lines: List[str] = field(default_factory=list)

    def record(self, message: str, *args: object) -> None:
        line = message % args if args else message
        self.lines.append(line)
        if self.emit:
            logger.debug(line)

    def render(self) -> str:
        return "\n".join(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


def record(trace: Optional[DerivationTrace], message: str, *args: object) -> None:
    """Record on *trace* when one was supplied."""
    if trace is not None:
        trace.record(message, *args)


__all__ = ["ContradictionKind", "Contradiction", "DerivationTrace", "record"]
