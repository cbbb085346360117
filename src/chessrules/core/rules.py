"""High-level chess rules: legality, checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from chessrules.core.enums import (
    Color,
    DrawType,
    GameResult,
    IllegalReason,
    PieceType,
    TerminalKind,
)
from chessrules.core.errors import IllegalPosition
from chessrules.core.move_generator import MoveGenerator, is_square_attacked
from chessrules.core.types import rank_of

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.position import Position

FIFTY_MOVE_PLIES: Final = 100
REPETITION_DRAW_COUNT: Final = 3

_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)
_NON_KING_PIECES = (
    PieceType.PAWN,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Draw policy:
    # - Automatic: bare kings, or a single knight or bishop on the board.
    # - Claimable: 50-move rule, threefold repetition, and the side whose
    #   opponent has a lone king.

    # ── Check / terminal states ──────────────────────────────────────────

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def evaluate(position: Position) -> tuple[bool, TerminalKind]:
        """Judge the position reached by the last applied move.

        Returns ``(legal, terminal)``. The position is illegal when the side
        that just moved left its own king attacked; ``terminal`` is then
        ``NONE``. Otherwise ``terminal`` reports checkmate or stalemate of the
        side to move.
        """
        gen = MoveGenerator(position)
        mover = position.side_to_move.opposite
        if gen.is_in_check(mover):
            return False, TerminalKind.NONE

        if gen.has_legal_move():
            return True, TerminalKind.NONE

        white = position.side_to_move == Color.WHITE
        if gen.is_in_check(position.side_to_move):
            terminal = TerminalKind.WHITE_CHECKMATE if white else TerminalKind.BLACK_CHECKMATE
        else:
            terminal = TerminalKind.WHITE_STALEMATE if white else TerminalKind.BLACK_STALEMATE
        return True, terminal

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        _, terminal = Rules.evaluate(position)
        return terminal in (TerminalKind.WHITE_CHECKMATE, TerminalKind.BLACK_CHECKMATE)

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        _, terminal = Rules.evaluate(position)
        return terminal in (TerminalKind.WHITE_STALEMATE, TerminalKind.BLACK_STALEMATE)

    # ── Draws ────────────────────────────────────────────────────────────

    @staticmethod
    def insufficient_material(position: Position, white_asks: bool) -> DrawType:
        """Material-based draw status for the side asking.

        K v K, K v K+N and K v K+B are automatic. Anything else is never
        automatic (K+B v K+N can still be lost in a corner); the asking side
        may only claim when its opponent has a bare king.
        """
        board = position.board
        piece_count = 0
        minor_count = 0
        lone = {Color.WHITE: True, Color.BLACK: True}
        for color in Color:
            for piece_type in _NON_KING_PIECES:
                n = board.count(color, piece_type)
                if n:
                    piece_count += n
                    lone[color] = False
                    if piece_type in _MINOR_PIECES:
                        minor_count += n

        if piece_count == 0 or (piece_count == 1 and minor_count == 1):
            return DrawType.INSUFFICIENT_AUTO
        opponent = Color.BLACK if white_asks else Color.WHITE
        if lone[opponent]:
            return DrawType.INSUFFICIENT
        return DrawType.NOT_DRAW

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """Automatic draw by insufficient material."""
        return (
            Rules.insufficient_material(position, white_asks=True)
            == DrawType.INSUFFICIENT_AUTO
        )

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= FIFTY_MOVE_PLIES

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= REPETITION_DRAW_COUNT

    @staticmethod
    def draw_type(position: Position, white_asks: bool) -> DrawType:
        """Why a draw is available to the asking side, checked in rule order."""
        result = Rules.insufficient_material(position, white_asks)
        if result != DrawType.NOT_DRAW:
            return result
        if Rules.is_fifty_move_rule(position):
            return DrawType.FIFTY_MOVE
        if Rules.is_threefold_repetition(position):
            return DrawType.REPETITION
        return DrawType.NOT_DRAW

    @staticmethod
    def is_claimable_draw(position: Position) -> bool:
        """Whether the side to move may claim an immediate draw by rule."""
        white_asks = position.side_to_move == Color.WHITE
        return Rules.draw_type(position, white_asks) != DrawType.NOT_DRAW

    @staticmethod
    def is_automatic_draw(position: Position) -> bool:
        """Whether the position is an automatic draw without player claim."""
        return Rules.is_insufficient_material(position)

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Determine the current game result."""
        _, terminal = Rules.evaluate(position)
        if terminal == TerminalKind.WHITE_CHECKMATE:
            return GameResult.BLACK_WINS
        if terminal == TerminalKind.BLACK_CHECKMATE:
            return GameResult.WHITE_WINS
        if terminal != TerminalKind.NONE:
            return GameResult.DRAW  # stalemate

        if Rules.is_automatic_draw(position):
            return GameResult.DRAW

        return GameResult.IN_PROGRESS

    # ── Structural legality of a supplied layout ─────────────────────────

    @staticmethod
    def illegal_reasons(board: Board, side_to_move: Color) -> IllegalReason:
        """Every structural defect of *board*; ``NONE`` when it is acceptable."""
        reasons = IllegalReason.NONE
        pawns = {
            color: board.pieces(color, PieceType.PAWN) for color in Color
        }
        if any(rank_of(sq) in (0, 7) for squares in pawns.values() for sq in squares):
            reasons |= IllegalReason.PAWN_POSITION

        white_kings = board.pieces(Color.WHITE, PieceType.KING)
        black_kings = board.pieces(Color.BLACK, PieceType.KING)
        if len(white_kings) != 1 or len(black_kings) != 1:
            reasons |= IllegalReason.NOT_ONE_KING_EACH

        # The side that just moved must not have its king en prise.
        waiting = side_to_move.opposite
        waiting_kings = board.pieces(waiting, PieceType.KING)
        if len(waiting_kings) == 1 and is_square_attacked(
            board, waiting_kings[0], side_to_move
        ):
            reasons |= IllegalReason.CAN_TAKE_KING

        too_many_pieces = (
            IllegalReason.WHITE_TOO_MANY_PIECES,
            IllegalReason.BLACK_TOO_MANY_PIECES,
        )
        too_many_pawns = (
            IllegalReason.WHITE_TOO_MANY_PAWNS,
            IllegalReason.BLACK_TOO_MANY_PAWNS,
        )
        for color in Color:
            pawn_count = len(pawns[color])
            piece_count = board.all_pieces_bitboard(color).bit_count() - pawn_count
            if piece_count > 8 and piece_count + pawn_count > 16:
                reasons |= too_many_pieces[color]
            if pawn_count > 8:
                reasons |= too_many_pawns[color]
        return reasons

    @staticmethod
    def validate(board: Board, side_to_move: Color) -> None:
        """Raise :class:`IllegalPosition` if *board* fails any structural check."""
        reasons = Rules.illegal_reasons(board, side_to_move)
        if reasons:
            raise IllegalPosition(reasons)
