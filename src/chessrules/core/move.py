"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import PieceType, Special
from chessrules.core.piece import Piece
from chessrules.core.types import Square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    ``capture`` holds the piece removed by the move (the enemy pawn for en
    passant) so that :meth:`Position.undo_move` can restore it.
    """

    src: Square
    dst: Square
    special: Special = Special.NONE
    capture: Piece | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.src)}{square_name(self.dst)}"
        promotion = self.special.promotion
        if promotion is not None:
            base += _PROMO_CHARS[promotion]
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    # ── Classification ───────────────────────────────────────────────────

    @property
    def promotion(self) -> PieceType | None:
        return self.special.promotion

    @property
    def is_capture(self) -> bool:
        return self.capture is not None
