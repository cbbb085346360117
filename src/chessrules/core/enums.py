"""Core enumerations and flags for chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Special(IntEnum):
    """Special-move tag carried by every :class:`Move`.

    The tag cannot be inferred from the squares alone: it picks the
    promotion piece, separates en passant from an ordinary diagonal pawn
    move, and castling from a two-square king step.
    """

    NONE = 0
    KING_MOVE = auto()
    PROMOTION_QUEEN = auto()
    PROMOTION_ROOK = auto()
    PROMOTION_BISHOP = auto()
    PROMOTION_KNIGHT = auto()
    WHITE_EN_PASSANT = auto()
    BLACK_EN_PASSANT = auto()
    WHITE_PAWN_2SQUARES = auto()
    BLACK_PAWN_2SQUARES = auto()
    WHITE_KINGSIDE_CASTLING = auto()
    WHITE_QUEENSIDE_CASTLING = auto()
    BLACK_KINGSIDE_CASTLING = auto()
    BLACK_QUEENSIDE_CASTLING = auto()

    @property
    def promotion(self) -> PieceType | None:
        """Promoted piece type, or ``None`` for non-promotions."""
        return _PROMOTION_PIECES.get(self)

    @property
    def is_promotion(self) -> bool:
        return self in _PROMOTION_PIECES

    @property
    def is_en_passant(self) -> bool:
        return self in (Special.WHITE_EN_PASSANT, Special.BLACK_EN_PASSANT)

    @property
    def is_double_pawn(self) -> bool:
        return self in (Special.WHITE_PAWN_2SQUARES, Special.BLACK_PAWN_2SQUARES)

    @property
    def is_kingside_castling(self) -> bool:
        return self in (
            Special.WHITE_KINGSIDE_CASTLING,
            Special.BLACK_KINGSIDE_CASTLING,
        )

    @property
    def is_queenside_castling(self) -> bool:
        return self in (
            Special.WHITE_QUEENSIDE_CASTLING,
            Special.BLACK_QUEENSIDE_CASTLING,
        )

    @property
    def is_castling(self) -> bool:
        return self.is_kingside_castling or self.is_queenside_castling

    @classmethod
    def for_promotion(cls, piece_type: PieceType) -> Special:
        """Promotion tag for *piece_type* (knight, bishop, rook or queen)."""
        try:
            return _PROMOTION_TAGS[piece_type]
        except KeyError:
            raise ValueError(f"Cannot promote to {piece_type.name}") from None


_PROMOTION_PIECES: dict[Special, PieceType] = {
    Special.PROMOTION_QUEEN: PieceType.QUEEN,
    Special.PROMOTION_ROOK: PieceType.ROOK,
    Special.PROMOTION_BISHOP: PieceType.BISHOP,
    Special.PROMOTION_KNIGHT: PieceType.KNIGHT,
}
_PROMOTION_TAGS: dict[PieceType, Special] = {
    v: k for k, v in _PROMOTION_PIECES.items()
}


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH


class TerminalKind(IntEnum):
    """Terminal state of a position, named after the side that is stuck."""

    NONE = 0
    WHITE_CHECKMATE = 1
    BLACK_CHECKMATE = 2
    WHITE_STALEMATE = 3
    BLACK_STALEMATE = 4


class DrawType(IntEnum):
    """Reason a draw is available (or ``NOT_DRAW``)."""

    NOT_DRAW = 0
    INSUFFICIENT_AUTO = 1  # automatic, no claim needed
    INSUFFICIENT = 2  # claimable against a lone king
    FIFTY_MOVE = 3
    REPETITION = 4


class IllegalReason(IntFlag):
    """Structural defects of a supplied layout; several may apply at once."""

    NONE = 0
    PAWN_POSITION = auto()
    NOT_ONE_KING_EACH = auto()
    CAN_TAKE_KING = auto()
    WHITE_TOO_MANY_PIECES = auto()
    BLACK_TOO_MANY_PIECES = auto()
    WHITE_TOO_MANY_PAWNS = auto()
    BLACK_TOO_MANY_PAWNS = auto()


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3
