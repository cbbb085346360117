"""Notation package: FEN / UCI / SAN parsing and serialization."""

from chessrules.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.notation.san import move_to_san, parse_san, play_san
from chessrules.core.notation.uci import (
    find_legal_move,
    move_from_uci,
    move_to_uci,
    parse_uci,
    play_uci,
)

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "find_legal_move",
    "move_from_uci",
    "move_to_uci",
    "parse_uci",
    "play_uci",
    "move_to_san",
    "parse_san",
    "play_san",
]
