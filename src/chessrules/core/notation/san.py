"""SAN (Standard Algebraic Notation) conversion and parsing.

Parsing is tolerant: besides strict SAN it accepts ``0-0``/``oo`` castling,
an omitted ``=`` before the promotion letter, a trailing ``e.p.``/``ep``,
full source squares (``Ng1f3``, ``e2e4``) and the pawn-capture shorthand
``ef`` / ``e5f``. Any input that does not name exactly one legal move is
rejected.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessrules.core.enums import PieceType
from chessrules.core.errors import InvalidMove
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.types import file_of, rank_of, square_name

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.move import Move
    from chessrules.core.position import Position

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}
_PROMOTION_LETTERS: dict[str, PieceType] = {
    "Q": PieceType.QUEEN,
    "R": PieceType.ROOK,
    "B": PieceType.BISHOP,
    "N": PieceType.KNIGHT,
}

# ── Tokenizer ────────────────────────────────────────────────────────────────

_TOKEN_RE = re.compile(
    r"""
      (?P<castle>[O0o](?:-?[O0o]){1,2})
    | (?P<piece>[KQRBNP])
    | (?P<file>[a-h])
    | (?P<rank>[1-8])
    | (?P<promo>[qrn])
    | (?P<capture>[x:])
    | (?P<dash>-)
    | (?P<equals>=)
    """,
    re.VERBOSE,
)
_ANNOTATION_RE = re.compile(r"[+#!?\s]+$")
_EN_PASSANT_RE = re.compile(r"\s*e\.?p\.?$")


@dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    text: str


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise InvalidMove(text, f"unexpected character {text[pos]!r}")
        tokens.append(_Token(match.lastgroup or "", match.group()))
        pos = match.end()
    return tokens


@dataclass(slots=True)
class _SanQuery:
    """What the SAN text pins down; ``None`` fields are unconstrained."""

    piece_type: PieceType | None = None
    src_file: int | None = None
    src_rank: int | None = None
    dst_file: int | None = None
    dst_rank: int | None = None
    promotion: PieceType | None = None
    en_passant: bool = False
    kingside: bool = False
    queenside: bool = False

    def matches(self, board: Board, move: Move) -> bool:
        if self.kingside:
            return move.special.is_kingside_castling
        if self.queenside:
            return move.special.is_queenside_castling
        piece = board[move.src]
        if piece is None:
            return False
        if self.piece_type is not None and piece.piece_type != self.piece_type:
            return False
        if self.src_file is not None and file_of(move.src) != self.src_file:
            return False
        if self.src_rank is not None and rank_of(move.src) != self.src_rank:
            return False
        if self.dst_file is not None and file_of(move.dst) != self.dst_file:
            return False
        if self.dst_rank is not None and rank_of(move.dst) != self.dst_rank:
            return False
        if self.en_passant and not move.special.is_en_passant:
            return False
        # Without a promotion letter every promotion variant still matches,
        # so "e8" alone is reported as ambiguous rather than guessed.
        if self.promotion is not None and move.promotion != self.promotion:
            return False
        return True


def _strip_suffixes(text: str) -> tuple[str, bool]:
    """Drop check/annotation marks and an en-passant suffix."""
    clean = _ANNOTATION_RE.sub("", text.strip())
    en_passant = False
    match = _EN_PASSANT_RE.search(clean)
    if match is not None:
        en_passant = True
        clean = _ANNOTATION_RE.sub("", clean[: match.start()])
    return clean, en_passant


def _parse_query(san: str) -> _SanQuery:
    clean, en_passant = _strip_suffixes(san)
    if not clean:
        raise InvalidMove(san, "empty move text")
    tokens = _tokenize(clean)

    # Castling
    if tokens[0].kind == "castle":
        if len(tokens) != 1:
            raise InvalidMove(san, "trailing text after castling")
        letters = sum(1 for ch in tokens[0].text if ch in "O0o")
        return _SanQuery(kingside=letters == 2, queenside=letters == 3)

    query = _SanQuery(en_passant=en_passant)

    # Promotion: a trailing piece letter after "=" or after a last-rank digit
    if len(tokens) >= 2 and tokens[-1].text.upper() in _PROMOTION_LETTERS:
        prev = tokens[-2]
        if prev.kind == "equals" or (prev.kind == "rank" and prev.text in "18"):
            query.promotion = _PROMOTION_LETTERS[tokens[-1].text.upper()]
            tokens = tokens[:-2] if prev.kind == "equals" else tokens[:-1]

    # Piece letter
    if tokens and tokens[0].kind == "piece":
        query.piece_type = _SAN_PIECE_REV[tokens[0].text]
        tokens = tokens[1:]

    coords = [t for t in tokens if t.kind not in ("capture", "dash")]
    if any(t.kind not in ("file", "rank") for t in coords):
        raise InvalidMove(san, "malformed move text")
    shape = "".join("F" if t.kind == "file" else "R" for t in coords)
    files = [ord(t.text) - ord("a") for t in coords if t.kind == "file"]
    ranks = [int(t.text) - 1 for t in coords if t.kind == "rank"]

    if shape == "FR":
        query.dst_file, query.dst_rank = files[0], ranks[0]
    elif shape == "FFR":
        query.src_file, query.dst_file, query.dst_rank = files[0], files[1], ranks[0]
    elif shape == "RFR":
        query.src_rank, query.dst_file, query.dst_rank = ranks[0], files[0], ranks[1]
    elif shape == "FRFR":
        query.src_file, query.src_rank = files[0], ranks[0]
        query.dst_file, query.dst_rank = files[1], ranks[1]
        if query.piece_type is None:
            return query  # bare coordinates name any piece
    elif shape in ("FF", "FRF") and query.piece_type in (None, PieceType.PAWN):
        query.src_file, query.dst_file = files[0], files[1]
        if shape == "FRF":
            query.src_rank = ranks[0]
    else:
        raise InvalidMove(san, "malformed move text")

    if query.piece_type is None:
        query.piece_type = PieceType.PAWN
    return query


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*."""
    query = _parse_query(san)
    legal = MoveGenerator(position).generate_legal_moves()
    board = position.board
    candidates = [m for m in legal if query.matches(board, m)]

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise InvalidMove(san, "no matching legal move")
    raise InvalidMove(san, f"ambiguous: {[str(m) for m in candidates]}")


def play_san(position: Position, san: str) -> Move:
    """Resolve and play *san*; the position is untouched if it is rejected."""
    move = parse_san(position, san)
    position.play_move(move)
    return move


# ── Generation ───────────────────────────────────────────────────────────────

_SanForm = Callable[["Board", "Move"], str]


def _letter(board: Board, move: Move) -> str:
    piece = board[move.src]
    assert piece is not None
    return _SAN_PIECE[piece.piece_type]


def _takes(move: Move) -> str:
    return "x" if move.is_capture else ""


def _form_destination(board: Board, move: Move) -> str:
    return f"{_letter(board, move)}{_takes(move)}{square_name(move.dst)}"


def _form_source_file(board: Board, move: Move) -> str:
    src_file = square_name(move.src)[0]
    return f"{_letter(board, move)}{src_file}{_takes(move)}{square_name(move.dst)}"


def _form_source_rank(board: Board, move: Move) -> str:
    src_rank = square_name(move.src)[1]
    return f"{_letter(board, move)}{src_rank}{_takes(move)}{square_name(move.dst)}"


def _form_source_square(board: Board, move: Move) -> str:
    return (
        f"{_letter(board, move)}{square_name(move.src)}"
        f"{_takes(move)}{square_name(move.dst)}"
    )


_DISAMBIGUATION_FORMS: tuple[_SanForm, ...] = (
    _form_destination,
    _form_source_file,
    _form_source_rank,
)


def _base_san(board: Board, move: Move, legal: list[Move]) -> str:
    piece = board[move.src]
    assert piece is not None

    if piece.piece_type == PieceType.PAWN:
        if move.is_capture:
            san = f"{square_name(move.src)[0]}x{square_name(move.dst)}"
        else:
            san = square_name(move.dst)
        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]
        return san

    if move.special.is_kingside_castling:
        return "O-O"
    if move.special.is_queenside_castling:
        return "O-O-O"

    for form in _DISAMBIGUATION_FORMS:
        wanted = form(board, move)
        if sum(1 for m in legal if form(board, m) == wanted) == 1:
            return wanted
    return _form_source_square(board, move)


def move_to_san(position: Position, move: Move) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    gen = MoveGenerator(position)
    legal = gen.generate_legal_moves()
    if move not in legal:
        raise InvalidMove(move.uci, "not a legal move in this position")

    san = _base_san(position.board, move, legal)

    # Check / checkmate suffix
    position.apply_move(move)
    if gen.is_in_check(position.side_to_move):
        san += "+" if gen.has_legal_move() else "#"
    position.undo_move(move)

    return san
