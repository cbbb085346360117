"""Precomputed per-square move and attack tables.

Built once at import time from board geometry alone and never mutated, so
edge-of-board tests stay out of generation and attack detection. The
tables are plain tuples and are safe to share between threads.
"""

from __future__ import annotations

from typing import Final

from chessrules.core.enums import Color
from chessrules.core.types import Square, file_of, make_square, rank_of

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

SquareTable = tuple[tuple[Square, ...], ...]
RayTable = tuple[tuple[tuple[Square, ...], ...], ...]


def _offset(sq: Square, df: int, dr: int) -> Square | None:
    af = file_of(sq) + df
    ar = rank_of(sq) + dr
    if 0 <= af < 8 and 0 <= ar < 8:
        return make_square(af, ar)
    return None


def _build_targets(offsets: tuple[tuple[int, int], ...]) -> SquareTable:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        moves = [_offset(sq, df, dr) for df, dr in offsets]
        targets.append(tuple(to_sq for to_sq in moves if to_sq is not None))
    return tuple(targets)


def _build_rays(directions: tuple[tuple[int, int], ...]) -> RayTable:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            ray: list[Square] = []
            to_sq = _offset(sq, df, dr)
            while to_sq is not None:
                ray.append(to_sq)
                to_sq = _offset(to_sq, df, dr)
            if ray:
                square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_captures(forward: int) -> SquareTable:
    return _build_targets(((-1, forward), (1, forward)))


def _build_pawn_advances(forward: int, start_rank: int) -> SquareTable:
    advances: list[tuple[Square, ...]] = []
    for sq in range(64):
        one_step = _offset(sq, 0, forward)
        if one_step is None:
            advances.append(())
        elif rank_of(sq) == start_rank:
            advances.append((one_step, make_square(file_of(sq), rank_of(sq) + 2 * forward)))
        else:
            advances.append((one_step,))
    return tuple(advances)


def _build_masks(targets: SquareTable) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


KNIGHT_TARGETS: Final = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS: Final = _build_targets(KING_OFFSETS)

BISHOP_RAYS: Final = _build_rays(BISHOP_DIRS)
ROOK_RAYS: Final = _build_rays(ROOK_DIRS)
QUEEN_RAYS: Final = _build_rays(QUEEN_DIRS)

# [color][sq] -> diagonal capture squares / straight advance squares, in
# the order the pawn reaches them.
PAWN_CAPTURES: Final = (_build_pawn_captures(1), _build_pawn_captures(-1))
PAWN_ADVANCES: Final = (_build_pawn_advances(1, 1), _build_pawn_advances(-1, 6))

KNIGHT_MASKS: Final = _build_masks(KNIGHT_TARGETS)
KING_MASKS: Final = _build_masks(KING_TARGETS)

# [color][sq] -> squares a pawn of *color* must stand on to attack *sq*.
# A white pawn attacks upward, so it sits on the capture squares of a
# black pawn on *sq*, and vice versa.
PAWN_ATTACKER_MASKS: Final = (
    _build_masks(PAWN_CAPTURES[Color.BLACK]),
    _build_masks(PAWN_CAPTURES[Color.WHITE]),
)

PROMOTION_RANK: Final = (7, 0)
