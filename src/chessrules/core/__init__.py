"""Core rules layer: pure chess logic with zero external dependencies.

Quick start::

    from chessrules.core import MoveGenerator, Rules, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        pos.apply_move(move)
        legal, terminal = Rules.evaluate(pos)
        pos.undo_move(move)
"""

from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    DrawType,
    GameResult,
    IllegalReason,
    PieceType,
    Special,
    TerminalKind,
)
from chessrules.core.errors import ChessError, IllegalPosition, InvalidMove
from chessrules.core.move import Move
from chessrules.core.move_generator import AnnotatedMove, MoveGenerator, is_square_attacked
from chessrules.core.notation import (
    STARTING_FEN,
    move_from_uci,
    move_to_san,
    move_to_uci,
    parse_san,
    play_san,
    play_uci,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.piece import Piece
from chessrules.core.position import Detail, Position
from chessrules.core.rules import FIFTY_MOVE_PLIES, REPETITION_DRAW_COUNT, Rules
from chessrules.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawType",
    "GameResult",
    "IllegalReason",
    "PieceType",
    "Special",
    "TerminalKind",
    # Errors
    "ChessError",
    "IllegalPosition",
    "InvalidMove",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "AnnotatedMove",
    "Board",
    "Detail",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "is_square_attacked",
    # Limits
    "FIFTY_MOVE_PLIES",
    "REPETITION_DRAW_COUNT",
    # Notation
    "STARTING_FEN",
    "move_from_uci",
    "move_to_san",
    "move_to_uci",
    "parse_san",
    "play_san",
    "play_uci",
    "position_from_fen",
    "position_to_fen",
]
