"""UCI coordinate notation: ``e2e4``, ``e7e8q``."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from chessrules.core.enums import PieceType
from chessrules.core.errors import InvalidMove
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.types import Square, parse_square, square_name

if TYPE_CHECKING:
    from chessrules.core.move import Move
    from chessrules.core.position import Position

_UCI_RE = re.compile(r"([a-h][1-8])([a-h][1-8])([qrbnQRBN]?)")
_UCI_PROMOTION: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}


def parse_uci(text: str) -> tuple[Square, Square, PieceType | None]:
    """Split a UCI string into source, destination and promotion piece."""
    match = _UCI_RE.fullmatch(text)
    if match is None:
        raise InvalidMove(text, "not a UCI move string")
    src, dst, promo = match.groups()
    promotion = _UCI_PROMOTION[promo.lower()] if promo else None
    return parse_square(src), parse_square(dst), promotion


def find_legal_move(
    position: Position,
    src: Square,
    dst: Square,
    promotion: PieceType | None = None,
    *,
    text: str | None = None,
) -> Move:
    """The unique legal move from *src* to *dst* (with *promotion*, if any).

    A promotion tag must match whenever either the request or the candidate
    move carries one.
    """
    label = text if text is not None else square_name(src) + square_name(dst)
    candidates = [
        m
        for m in MoveGenerator(position).generate_legal_moves()
        if m.src == src and m.dst == dst and m.promotion == promotion
    ]
    if not candidates:
        raise InvalidMove(label, "no matching legal move")
    if len(candidates) > 1:
        raise InvalidMove(label, f"ambiguous: {[str(m) for m in candidates]}")
    return candidates[0]


def move_from_uci(position: Position, text: str) -> Move:
    """Resolve a UCI string to a legal move of *position*."""
    src, dst, promotion = parse_uci(text)
    return find_legal_move(position, src, dst, promotion, text=text)


def move_to_uci(move: Move) -> str:
    return move.uci


def play_uci(position: Position, text: str) -> Move:
    """Resolve and play *text*; the position is untouched if it is rejected."""
    move = move_from_uci(position, text)
    position.play_move(move)
    return move
