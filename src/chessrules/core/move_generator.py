"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType, Special
from chessrules.core.geometry import (
    BISHOP_RAYS,
    KING_MASKS,
    KING_TARGETS,
    KNIGHT_MASKS,
    KNIGHT_TARGETS,
    PAWN_ADVANCES,
    PAWN_ATTACKER_MASKS,
    PAWN_CAPTURES,
    PROMOTION_RANK,
    QUEEN_RAYS,
    ROOK_RAYS,
)
from chessrules.core.move import Move
from chessrules.core.piece import BLACK_KING, BLACK_ROOK, WHITE_KING, WHITE_ROOK, Piece
from chessrules.core.types import (
    A1,
    A8,
    B1,
    B8,
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
    rank_of,
)

if TYPE_CHECKING:
    from chessrules.core.position import Position


# Fixed emission order for promotions.
_PROMOTION_SPECIALS: tuple[Special, ...] = (
    Special.PROMOTION_QUEEN,
    Special.PROMOTION_KNIGHT,
    Special.PROMOTION_BISHOP,
    Special.PROMOTION_ROOK,
)
_DOUBLE_PAWN = (Special.WHITE_PAWN_2SQUARES, Special.BLACK_PAWN_2SQUARES)
_EN_PASSANT = (Special.WHITE_EN_PASSANT, Special.BLACK_EN_PASSANT)

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)


@dataclass(frozen=True, slots=True)
class _CastlingPath:
    right: CastlingRights
    special: Special
    king: Piece
    rook: Piece
    king_sq: Square
    rook_sq: Square
    empty: tuple[Square, ...]
    unattacked: tuple[Square, ...]


# [color] -> kingside, queenside
_CASTLING_PATHS: tuple[tuple[_CastlingPath, ...], ...] = (
    (
        _CastlingPath(
            CastlingRights.WHITE_KINGSIDE,
            Special.WHITE_KINGSIDE_CASTLING,
            WHITE_KING, WHITE_ROOK, E1, H1,
            (F1, G1), (E1, F1, G1),
        ),
        _CastlingPath(
            CastlingRights.WHITE_QUEENSIDE,
            Special.WHITE_QUEENSIDE_CASTLING,
            WHITE_KING, WHITE_ROOK, E1, A1,
            (B1, C1, D1), (E1, D1, C1),
        ),
    ),
    (
        _CastlingPath(
            CastlingRights.BLACK_KINGSIDE,
            Special.BLACK_KINGSIDE_CASTLING,
            BLACK_KING, BLACK_ROOK, E8, H8,
            (F8, G8), (E8, F8, G8),
        ),
        _CastlingPath(
            CastlingRights.BLACK_QUEENSIDE,
            Special.BLACK_QUEENSIDE_CASTLING,
            BLACK_KING, BLACK_ROOK, E8, A8,
            (B8, C8, D8), (E8, D8, C8),
        ),
    ),
)


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?

    Works on a bare board so layouts can be checked before a
    :class:`Position` exists.
    """
    by_idx = int(by_color)

    if board.pieces_bitboard(by_color, PieceType.PAWN) & PAWN_ATTACKER_MASKS[by_idx][sq]:
        return True

    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & KNIGHT_MASKS[sq]:
        return True

    if board.pieces_bitboard(by_color, PieceType.KING) & KING_MASKS[sq]:
        return True

    if board.pieces_bitboard(by_color, PieceType.BISHOP) or board.pieces_bitboard(
        by_color, PieceType.QUEEN
    ):
        for ray in BISHOP_RAYS[sq]:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in _DIAGONAL_SLIDERS:
                    return True
                break

    if board.pieces_bitboard(by_color, PieceType.ROOK) or board.pieces_bitboard(
        by_color, PieceType.QUEEN
    ):
        for ray in ROOK_RAYS[sq]:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in _STRAIGHT_SLIDERS:
                    return True
                break

    return False


@dataclass(frozen=True, slots=True)
class AnnotatedMove:
    """A legal move plus what it does to the opponent."""

    move: Move
    check: bool = False
    mate: bool = False
    stalemate: bool = False


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``apply_move`` / ``undo_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return self._filter_legal(self.generate_pseudo_legal_moves())

    def select_legal(self, candidates: Iterable[Move]) -> list[Move]:
        """Keep the *candidates* that are legal here.

        Candidates that are not even pseudo-legal (wrong tag, wrong capture,
        blocked path) are dropped before anything is applied.
        """
        pseudo = set(self.generate_pseudo_legal_moves())
        return self._filter_legal(m for m in candidates if m in pseudo)

    def is_legal(self, move: Move) -> bool:
        return bool(self.select_legal((move,)))

    def _filter_legal(self, candidates: Iterable[Move]) -> list[Move]:
        legal: list[Move] = []
        pos = self._pos
        moving_color = pos.side_to_move
        append_legal = legal.append

        for move in candidates:
            pos.apply_move(move)
            if not self.is_in_check(moving_color):
                append_legal(move)
            pos.undo_move(move)
        return legal

    def has_legal_move(self) -> bool:
        pos = self._pos
        moving_color = pos.side_to_move
        for move in self.generate_pseudo_legal_moves():
            pos.apply_move(move)
            safe = not self.is_in_check(moving_color)
            pos.undo_move(move)
            if safe:
                return True
        return False

    def generate_legal_moves_annotated(self) -> list[AnnotatedMove]:
        """Legal moves, each flagged with check / mate / stalemate for the reply."""
        annotated: list[AnnotatedMove] = []
        pos = self._pos
        for move in self.generate_legal_moves():
            pos.apply_move(move)
            check = self.is_in_check(pos.side_to_move)
            stuck = not self.has_legal_move()
            pos.undo_move(move)
            annotated.append(
                AnnotatedMove(
                    move,
                    check=check and not stuck,
                    mate=check and stuck,
                    stalemate=stuck and not check,
                )
            )
        return annotated

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._board

        for sq in board.all_pieces(color):
            piece_type = board[sq].piece_type  # type: ignore[union-attr]
            if piece_type == PieceType.PAWN:
                self._gen_pawn(sq, color, moves)
            elif piece_type == PieceType.KNIGHT:
                self._gen_single_step(sq, color, KNIGHT_TARGETS[sq], Special.NONE, moves)
            elif piece_type == PieceType.BISHOP:
                self._gen_sliding(sq, color, BISHOP_RAYS[sq], moves)
            elif piece_type == PieceType.ROOK:
                self._gen_sliding(sq, color, ROOK_RAYS[sq], moves)
            elif piece_type == PieceType.QUEEN:
                self._gen_sliding(sq, color, QUEEN_RAYS[sq], moves)
            else:
                self._gen_single_step(sq, color, KING_TARGETS[sq], Special.KING_MOVE, moves)
                self._gen_castling(color, moves)

        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return is_square_attacked(
            self._board, self._pos.king_square(color), color.opposite
        )

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        return is_square_attacked(self._board, sq, by_color)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        promoting = rank_of(sq) + (1 if color == Color.WHITE else -1) == PROMOTION_RANK[color]
        en_passant = self._pos.en_passant

        for cap_sq in PAWN_CAPTURES[color][sq]:
            if cap_sq == en_passant:
                moves.append(
                    Move(sq, cap_sq, _EN_PASSANT[color], Piece(color.opposite, PieceType.PAWN))
                )
                continue
            target = board[cap_sq]
            if target is None or target.color == color:
                continue
            if promoting:
                for special in _PROMOTION_SPECIALS:
                    moves.append(Move(sq, cap_sq, special, target))
            else:
                moves.append(Move(sq, cap_sq, Special.NONE, target))

        for step, to_sq in enumerate(PAWN_ADVANCES[color][sq]):
            if not board.is_empty(to_sq):
                break
            if promoting:
                for special in _PROMOTION_SPECIALS:
                    moves.append(Move(sq, to_sq, special))
            else:
                moves.append(Move(sq, to_sq, _DOUBLE_PAWN[color] if step else Special.NONE))

    def _gen_single_step(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        special: Special,
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq, special))
            elif target.color != color:
                moves.append(Move(sq, to_sq, special, target))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, Special.NONE, target))
                break

    def _gen_castling(self, color: Color, moves: list[Move]) -> None:
        board = self._board
        castling = self._pos.castling
        opponent = color.opposite

        for path in _CASTLING_PATHS[color]:
            if (
                castling & path.right
                and board[path.king_sq] == path.king
                and board[path.rook_sq] == path.rook
                and all(board.is_empty(s) for s in path.empty)
                and not any(
                    is_square_attacked(board, s, opponent) for s in path.unattacked
                )
            ):
                moves.append(Move(path.king_sq, path.unattacked[-1], path.special))
