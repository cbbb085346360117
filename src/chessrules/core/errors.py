"""Typed failures raised by the rules engine."""

from __future__ import annotations

from chessrules.core.enums import IllegalReason


class ChessError(ValueError):
    """Base class for rule violations reported to callers."""


class InvalidMove(ChessError):
    """A UCI or SAN string does not resolve to exactly one legal move."""

    def __init__(self, text: str, reason: str = "illegal move") -> None:
        super().__init__(f"Invalid move {text!r}: {reason}")
        self.text = text
        self.reason = reason


class IllegalPosition(ChessError):
    """A supplied layout fails the structural legality checks."""

    def __init__(self, reasons: IllegalReason) -> None:
        names = ", ".join(
            r.name.lower() for r in IllegalReason if r and r in reasons and r.name
        )
        super().__init__(f"Illegal position: {names or 'unknown reason'}")
        self.reasons = reasons
