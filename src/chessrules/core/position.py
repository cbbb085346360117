"""Position: complete game state (board + detail record) with apply/undo."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, IllegalReason, PieceType, Special
from chessrules.core.errors import IllegalPosition
from chessrules.core.geometry import PAWN_ATTACKER_MASKS
from chessrules.core.move import Move
from chessrules.core.piece import (
    BLACK_KING,
    BLACK_PAWN,
    BLACK_ROOK,
    WHITE_KING,
    WHITE_PAWN,
    WHITE_ROOK,
    Piece,
)
from chessrules.core.types import (
    A1,
    A8,
    C1,
    C8,
    D1,
    D8,
    E1,
    E8,
    F1,
    F8,
    G1,
    G8,
    H1,
    H8,
    Square,
    north,
    rank_of,
    south,
)


@dataclass(frozen=True, slots=True)
class Detail:
    """Everything a move changes besides the squares and the side to move.

    One snapshot is pushed per applied move so that :meth:`Position.undo_move`
    restores it verbatim.
    """

    wking_square: Square
    bking_square: Square
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None

    def king_square(self, color: Color) -> Square:
        return self.wking_square if color == Color.WHITE else self.bking_square


# Landing on one of these squares revokes the matching rights. Checking the
# destination alone covers both a king/rook leaving (it can only come back
# by landing there again) and an enemy capturing a rook in its corner.
_REVOKED_BY_DESTINATION: dict[Square, CastlingRights] = {
    A1: CastlingRights.WHITE_QUEENSIDE,
    E1: CastlingRights.WHITE_BOTH,
    H1: CastlingRights.WHITE_KINGSIDE,
    A8: CastlingRights.BLACK_QUEENSIDE,
    E8: CastlingRights.BLACK_BOTH,
    H8: CastlingRights.BLACK_KINGSIDE,
}

# special -> (king_from, king_to, rook_from, rook_to)
CASTLING_SQUARES: dict[Special, tuple[Square, Square, Square, Square]] = {
    Special.WHITE_KINGSIDE_CASTLING: (E1, G1, H1, F1),
    Special.WHITE_QUEENSIDE_CASTLING: (E1, C1, A1, D1),
    Special.BLACK_KINGSIDE_CASTLING: (E8, G8, H8, F8),
    Special.BLACK_QUEENSIDE_CASTLING: (E8, C8, A8, D8),
}

# right -> (king home, king, rook home, rook)
_CASTLING_HOMES: dict[CastlingRights, tuple[Square, Piece, Square, Piece]] = {
    CastlingRights.WHITE_KINGSIDE: (E1, WHITE_KING, H1, WHITE_ROOK),
    CastlingRights.WHITE_QUEENSIDE: (E1, WHITE_KING, A1, WHITE_ROOK),
    CastlingRights.BLACK_KINGSIDE: (E8, BLACK_KING, H8, BLACK_ROOK),
    CastlingRights.BLACK_QUEENSIDE: (E8, BLACK_KING, A8, BLACK_ROOK),
}


def effective_castling(board: Board, castling: CastlingRights) -> CastlingRights:
    """Rights that are set *and* still have king and rook on their home squares."""
    result = CastlingRights.NONE
    for right, (king_sq, king, rook_sq, rook) in _CASTLING_HOMES.items():
        if castling & right and board[king_sq] == king and board[rook_sq] == rook:
            result |= right
    return result


def real_en_passant(board: Board, en_passant: Square | None) -> Square | None:
    """Return *en_passant* if an enemy pawn can actually capture there, else ``None``."""
    if en_passant is None:
        return None
    rank = rank_of(en_passant)
    if rank == 5:
        capturer = Color.WHITE
    elif rank == 2:
        capturer = Color.BLACK
    else:
        return None
    pawns = board.pieces_bitboard(capturer, PieceType.PAWN)
    if pawns & PAWN_ATTACKER_MASKS[capturer][en_passant]:
        return en_passant
    return None


def plausible_en_passant(
    board: Board, side_to_move: Color, en_passant: Square | None
) -> Square | None:
    """Return *en_passant* if the last move could have been a double push onto it.

    The pushed enemy pawn must stand just beyond the target, and both the
    target and the pawn's starting square must be empty.
    """
    if en_passant is None:
        return None
    if side_to_move == Color.WHITE:
        if rank_of(en_passant) != 5:
            return None
        pushed, start, pawn = south(en_passant), north(en_passant), BLACK_PAWN
    else:
        if rank_of(en_passant) != 2:
            return None
        pushed, start, pawn = north(en_passant), south(en_passant), WHITE_PAWN
    if board[pushed] != pawn or not board.is_empty(en_passant) or not board.is_empty(start):
        return None
    return en_passant


class Position:
    """Full chess position: board + side to move + detail record + history.

    :meth:`apply_move` / :meth:`undo_move` form a strictly LIFO pair: every
    applied move pushes one :class:`Detail` snapshot and one history entry,
    every undo pops one of each. They do not touch the clocks; that is the
    job of :meth:`play_move`, so legality search stays counter-free.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "detail",
        "history",
        "halfmove_clock",
        "fullmove_number",
        "_detail_stack",
        "_clock_stack",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move

        white_kings = self.board.find_kings(Color.WHITE)
        black_kings = self.board.find_kings(Color.BLACK)
        if len(white_kings) != 1 or len(black_kings) != 1:
            raise IllegalPosition(IllegalReason.NOT_ONE_KING_EACH)
        en_passant = plausible_en_passant(self.board, side_to_move, en_passant)
        self.detail = Detail(white_kings[0], black_kings[0], castling, en_passant)

        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.history: list[Move] = []
        self._detail_stack: list[Detail] = []
        self._clock_stack: list[tuple[int, int]] = []

    # ── Detail accessors ─────────────────────────────────────────────────

    @property
    def castling(self) -> CastlingRights:
        return self.detail.castling

    @property
    def en_passant(self) -> Square | None:
        return self.detail.en_passant

    def king_square(self, color: Color) -> Square:
        return self.detail.king_square(color)

    @property
    def detail_stack(self) -> tuple[Detail, ...]:
        return tuple(self._detail_stack)

    # ── Core move operations ─────────────────────────────────────────────

    def apply_move(self, move: Move) -> None:
        """Apply *move* without judging its legality."""
        board = self.board
        piece = board[move.src]
        if piece is None:
            raise ValueError(f"No piece on {move.src} for move {move}")

        detail = self.detail
        self._detail_stack.append(detail)
        self.history.append(move)

        castling = detail.castling & ~_REVOKED_BY_DESTINATION.get(
            move.dst, CastlingRights.NONE
        )
        en_passant: Square | None = None
        wking_square = detail.wking_square
        bking_square = detail.bking_square
        white = self.side_to_move == Color.WHITE
        special = move.special

        if special == Special.NONE:
            board[move.dst] = piece
            board[move.src] = None
        elif special == Special.KING_MOVE:
            board[move.dst] = piece
            board[move.src] = None
            if white:
                wking_square = move.dst
            else:
                bking_square = move.dst
        elif special.is_promotion:
            board[move.src] = None
            board[move.dst] = Piece(piece.color, special.promotion)  # type: ignore[arg-type]
        elif special == Special.WHITE_EN_PASSANT:
            board[move.src] = None
            board[move.dst] = WHITE_PAWN
            board[south(move.dst)] = None
        elif special == Special.BLACK_EN_PASSANT:
            board[move.src] = None
            board[move.dst] = BLACK_PAWN
            board[north(move.dst)] = None
        elif special == Special.WHITE_PAWN_2SQUARES:
            board[move.src] = None
            board[move.dst] = WHITE_PAWN
            en_passant = south(move.dst)
        elif special == Special.BLACK_PAWN_2SQUARES:
            board[move.src] = None
            board[move.dst] = BLACK_PAWN
            en_passant = north(move.dst)
        elif special.is_castling:
            king_from, king_to, rook_from, rook_to = CASTLING_SQUARES[special]
            rook = board[rook_from]
            board[king_from] = None
            board[rook_from] = None
            board[king_to] = piece
            board[rook_to] = rook
            if white:
                wking_square = king_to
            else:
                bking_square = king_to
        else:
            raise AssertionError(f"Unhandled special move: {special!r}")

        self.detail = Detail(wking_square, bking_square, castling, en_passant)
        self.side_to_move = self.side_to_move.opposite

    def undo_move(self, move: Move) -> None:
        """Undo *move*, which must be the last applied move."""
        if not self.history or self.history[-1] != move:
            raise ValueError(f"Cannot undo {move}: not the last applied move")
        self.history.pop()
        self.detail = self._detail_stack.pop()
        self.side_to_move = self.side_to_move.opposite

        board = self.board
        special = move.special

        if special in (
            Special.NONE,
            Special.KING_MOVE,
            Special.WHITE_PAWN_2SQUARES,
            Special.BLACK_PAWN_2SQUARES,
        ):
            board[move.src] = board[move.dst]
            board[move.dst] = move.capture
        elif special.is_promotion:
            board[move.src] = Piece(self.side_to_move, PieceType.PAWN)
            board[move.dst] = move.capture
        elif special == Special.WHITE_EN_PASSANT:
            board[move.src] = WHITE_PAWN
            board[move.dst] = None
            board[south(move.dst)] = BLACK_PAWN
        elif special == Special.BLACK_EN_PASSANT:
            board[move.src] = BLACK_PAWN
            board[move.dst] = None
            board[north(move.dst)] = WHITE_PAWN
        elif special.is_castling:
            king_from, king_to, rook_from, rook_to = CASTLING_SQUARES[special]
            board[king_from] = board[king_to]
            board[rook_from] = board[rook_to]
            board[king_to] = None
            board[rook_to] = None
        else:
            raise AssertionError(f"Unhandled special move: {special!r}")

    # ── Game-level moves (with clocks) ───────────────────────────────────

    def play_move(self, move: Move) -> None:
        """Apply *move* and advance the half-move clock and move number.

        Caller is responsible for legality check.
        """
        piece = self.board[move.src]
        self._clock_stack.append((self.halfmove_clock, self.fullmove_number))
        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        if (piece is not None and piece.piece_type == PieceType.PAWN) or move.is_capture:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        self.apply_move(move)

    def unplay_move(self) -> Move:
        """Take back the last :meth:`play_move`, restoring the clocks."""
        if not self._clock_stack or not self.history:
            raise ValueError("No played move to take back")
        move = self.history[-1]
        self.undo_move(move)
        self.halfmove_clock, self.fullmove_number = self._clock_stack.pop()
        return move

    # ── Repetition ───────────────────────────────────────────────────────

    def repetition_count(self) -> int:
        """How many times the current position has occurred, itself included.

        Walks the history backwards with :meth:`undo_move` and replays it
        afterwards. Two positions count as the same when side to move, king
        squares and squares match and the castling and en-passant fields
        differ only where the difference has no effect on play. The walk stops
        at the first pawn move or capture.
        """
        current_board = self.board.copy()
        current_detail = self.detail
        current_side = self.side_to_move
        matches = 0
        undone: list[Move] = []
        try:
            for move in reversed(self.history.copy()):
                self.undo_move(move)
                undone.append(move)
                detail = self.detail
                if (
                    self.side_to_move == current_side
                    and detail.wking_square == current_detail.wking_square
                    and detail.bking_square == current_detail.bking_square
                    and self.board == current_board
                    and self._same_possibilities(detail, current_detail)
                ):
                    matches += 1

                moved = self.board[move.src]
                if move.is_capture or (
                    moved is not None and moved.piece_type == PieceType.PAWN
                ):
                    break
        finally:
            for move in reversed(undone):
                self.apply_move(move)
        return matches + 1

    def _same_possibilities(self, earlier: Detail, current: Detail) -> bool:
        if earlier == current:
            return True
        board = self.board
        if earlier.en_passant != current.en_passant and real_en_passant(
            board, earlier.en_passant
        ) != real_en_passant(board, current.en_passant):
            return False
        return effective_castling(board, earlier.castling) == effective_castling(
            board, current.castling
        )

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy including history, detail stack and clocks."""
        pos = Position.__new__(Position)
        pos.board = self.board.copy()
        pos.side_to_move = self.side_to_move
        pos.detail = self.detail
        pos.halfmove_clock = self.halfmove_clock
        pos.fullmove_number = self.fullmove_number
        pos.history = self.history.copy()
        pos._detail_stack = self._detail_stack.copy()
        pos._clock_stack = self._clock_stack.copy()
        return pos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.side_to_move == other.side_to_move
            and self.detail == other.detail
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
            and self.board == other.board
            and self.history == other.history
            and self._detail_stack == other._detail_stack
        )

    def __repr__(self) -> str:
        return f"{self.board!r}\n{self.side_to_move} to move, {self.detail}"
