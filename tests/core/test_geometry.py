"""Tests for the precomputed geometry tables and square helpers."""

import pytest

from chessrules.core.enums import Color
from chessrules.core.geometry import (
    BISHOP_RAYS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    PAWN_ADVANCES,
    PAWN_ATTACKER_MASKS,
    PAWN_CAPTURES,
    QUEEN_RAYS,
    ROOK_RAYS,
)
from chessrules.core.types import (
    A1, A8, B3, C2, D3, D4, D5, E2, E3, E4, E5, F3, F5, G1, H1, H3, H8,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)


class TestSquareHelpers:
    def test_corners(self) -> None:
        assert A8 == 0
        assert H1 == 63
        assert square_name(A8) == "a8"
        assert square_name(H1) == "h1"

    def test_file_and_rank(self) -> None:
        assert file_of(E4) == 4
        assert rank_of(E4) == 3
        assert make_square(4, 3) == E4

    def test_parse_round_trip(self) -> None:
        for sq in range(64):
            assert parse_square(square_name(sq)) == sq

    @pytest.mark.parametrize("name", ["", "e9", "i1", "e44"])
    def test_parse_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            parse_square(name)


class TestLeaperTables:
    def test_knight_corner(self) -> None:
        assert sorted(KNIGHT_TARGETS[A1]) == sorted([parse_square("b3"), parse_square("c2")])

    def test_knight_center(self) -> None:
        assert len(KNIGHT_TARGETS[D4]) == 8

    def test_knight_from_g1(self) -> None:
        assert set(KNIGHT_TARGETS[G1]) == {E2, F3, H3}

    def test_king_counts(self) -> None:
        assert len(KING_TARGETS[A1]) == 3
        assert len(KING_TARGETS[E4]) == 8
        assert len(KING_TARGETS[H8]) == 3


class TestRays:
    def test_empty_rays_dropped(self) -> None:
        assert len(BISHOP_RAYS[A1]) == 1
        assert len(ROOK_RAYS[A1]) == 2
        assert len(QUEEN_RAYS[A1]) == 3

    def test_ray_order_is_outward(self) -> None:
        (diagonal,) = BISHOP_RAYS[A1]
        assert diagonal[0] == parse_square("b2")
        assert diagonal[-1] == H8

    def test_center_rays(self) -> None:
        assert sum(len(ray) for ray in ROOK_RAYS[D4]) == 14
        assert sum(len(ray) for ray in BISHOP_RAYS[D4]) == 13


class TestPawnTables:
    def test_white_advances_from_start(self) -> None:
        assert PAWN_ADVANCES[Color.WHITE][E2] == (E3, E4)

    def test_black_advances_from_start(self) -> None:
        e7 = parse_square("e7")
        assert PAWN_ADVANCES[Color.BLACK][e7] == (parse_square("e6"), E5)

    def test_single_advance_off_start(self) -> None:
        assert PAWN_ADVANCES[Color.WHITE][E3] == (E4,)

    def test_captures_at_edge(self) -> None:
        a2 = parse_square("a2")
        assert PAWN_CAPTURES[Color.WHITE][a2] == (B3,)

    def test_captures_direction(self) -> None:
        assert set(PAWN_CAPTURES[Color.WHITE][E4]) == {D5, F5}
        assert set(PAWN_CAPTURES[Color.BLACK][E4]) == {D3, F3}

    def test_attacker_masks(self) -> None:
        # A white pawn on d3 or f3 attacks e4.
        mask = PAWN_ATTACKER_MASKS[Color.WHITE][E4]
        assert mask == (1 << D3) | (1 << F3)
        # Black pawns attack downward.
        mask = PAWN_ATTACKER_MASKS[Color.BLACK][E4]
        assert mask == (1 << D5) | (1 << F5)

    def test_c2_pawn_captures(self) -> None:
        assert set(PAWN_CAPTURES[Color.WHITE][C2]) == {B3, D3}
