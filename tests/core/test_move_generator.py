"""Perft tests: the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from chessrules.core.enums import Color, PieceType, Special
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator, is_square_attacked
from chessrules.core.notation import STARTING_FEN, position_from_fen
from chessrules.core.position import Position
from chessrules.core.types import A7, B8, C1, D1, E1, E2, E4, F1, G1, parse_square


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* using apply/undo."""
    if depth == 0:
        return 1
    gen = MoveGenerator(position)
    moves = gen.generate_legal_moves()
    nodes = 0
    for move in moves:
        position.apply_move(move)
        nodes += perft(position, depth - 1)
        position.undo_move(move)
    return nodes


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 1) == 20

    def test_depth_2(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 2) == 400

    def test_depth_3(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 4) == 197_281


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 1) == 48

    def test_depth_2(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 2) == 2_039

    def test_depth_3(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 3) == 97_862


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 1) == 14

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 2) == 191

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 3) == 2_812


# ── Position 4: mirrored, many promotions ────────────────────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 1) == 6

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 2) == 264

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 3) == 9_467


# ── Position 5 ───────────────────────────────────────────────────────────────

POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


class TestPerftPos5:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 1) == 44

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 2) == 1_486

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 3) == 62_379


# ── Targeted generation rules ────────────────────────────────────────────────


class TestPawnGeneration:
    def test_double_push_tagged(self, start_position: Position) -> None:
        moves = MoveGenerator(start_position).generate_legal_moves()
        assert Move(E2, E4, Special.WHITE_PAWN_2SQUARES) in moves
        assert Move(E2, parse_square("e3")) in moves

    def test_blocked_pawn_has_no_double_push(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/4n3/4P3/4K3 w - - 0 1")
        pawn_moves = [
            m for m in MoveGenerator(pos).generate_legal_moves() if m.src == E2
        ]
        assert pawn_moves == []

    def test_promotion_order(self) -> None:
        pos = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        a8 = parse_square("a8")
        specials = [
            m.special
            for m in MoveGenerator(pos).generate_pseudo_legal_moves()
            if m.src == A7 and m.dst == a8
        ]
        assert specials == [
            Special.PROMOTION_QUEEN,
            Special.PROMOTION_KNIGHT,
            Special.PROMOTION_BISHOP,
            Special.PROMOTION_ROOK,
        ]

    def test_capture_promotion_records_victim(self) -> None:
        pos = position_from_fen("1n2k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        captures = [
            m for m in MoveGenerator(pos).generate_legal_moves() if m.dst == B8
        ]
        assert len(captures) == 4
        assert all(m.capture is not None and m.capture.piece_type == PieceType.KNIGHT for m in captures)

    def test_en_passant_generated(self) -> None:
        pos = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        ep = [
            m for m in MoveGenerator(pos).generate_legal_moves()
            if m.special == Special.WHITE_EN_PASSANT
        ]
        assert len(ep) == 1
        assert ep[0].dst == parse_square("d6")
        assert ep[0].capture is not None and ep[0].capture.color == Color.BLACK

    def test_en_passant_exposing_king_is_illegal(self) -> None:
        # Removing both pawns from the 5th rank would expose the white king.
        pos = position_from_fen("8/8/8/K2pP2r/8/8/8/7k w - d6 0 1")
        moves = MoveGenerator(pos).generate_legal_moves()
        assert all(m.special != Special.WHITE_EN_PASSANT for m in moves)


class TestCastlingGeneration:
    def test_both_sides_available(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        moves = MoveGenerator(pos).generate_legal_moves()
        assert Move(E1, G1, Special.WHITE_KINGSIDE_CASTLING) in moves
        assert Move(E1, C1, Special.WHITE_QUEENSIDE_CASTLING) in moves

    def test_not_through_attacked_square(self) -> None:
        # The black rook on f8 covers f1.
        pos = position_from_fen("4kr2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        assert Move(E1, G1, Special.WHITE_KINGSIDE_CASTLING) not in pseudo
        assert Move(E1, C1, Special.WHITE_QUEENSIDE_CASTLING) in pseudo

    def test_not_out_of_check(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        assert not any(m.special.is_castling for m in pseudo)

    def test_blocked_path(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/RN2K1NR w KQ - 0 1")
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        assert not any(m.special.is_castling for m in pseudo)

    def test_missing_rook_not_castled(self) -> None:
        # The flag claims kingside but no rook stands on h1.
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w KQ - 0 1")
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        assert Move(E1, G1, Special.WHITE_KINGSIDE_CASTLING) not in pseudo

    def test_b1_may_be_attacked_for_queenside(self) -> None:
        pos = position_from_fen("1r2k3/8/8/8/8/8/8/R3K3 w Q - 0 1")
        moves = MoveGenerator(pos).generate_legal_moves()
        assert Move(E1, C1, Special.WHITE_QUEENSIDE_CASTLING) in moves


class TestLegality:
    def test_pinned_piece_cannot_move(self) -> None:
        pos = position_from_fen("4k3/4r3/8/8/8/8/4N3/4K3 w - - 0 1")
        moves = MoveGenerator(pos).generate_legal_moves()
        assert all(m.src != E2 for m in moves)

    def test_is_legal(self, start_position: Position) -> None:
        gen = MoveGenerator(start_position)
        assert gen.is_legal(Move(E2, E4, Special.WHITE_PAWN_2SQUARES))
        # Wrong tag for a double push.
        assert not gen.is_legal(Move(E2, E4))
        # Blocked bishop.
        assert not gen.is_legal(Move(F1, parse_square("c4")))

    def test_select_legal_filters(self, start_position: Position) -> None:
        gen = MoveGenerator(start_position)
        candidates = [
            Move(G1, parse_square("f3")),
            Move(D1, parse_square("h5")),
            Move(E2, E4, Special.WHITE_PAWN_2SQUARES),
        ]
        assert gen.select_legal(candidates) == [candidates[0], candidates[2]]

    def test_generation_restores_position(self, start_position: Position) -> None:
        snapshot = start_position.copy()
        MoveGenerator(start_position).generate_legal_moves_annotated()
        assert start_position == snapshot

    def test_has_legal_move(self) -> None:
        stalemate = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert not MoveGenerator(stalemate).has_legal_move()


class TestAttacks:
    def test_square_attacked_by_pawn(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/3P4/4K3 w - - 0 1")
        assert is_square_attacked(pos.board, parse_square("e3"), Color.WHITE)
        assert is_square_attacked(pos.board, parse_square("c3"), Color.WHITE)
        assert not is_square_attacked(pos.board, parse_square("d3"), Color.WHITE)

    def test_slider_blocked(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4R1K1 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.is_square_attacked(E2, Color.WHITE)
        assert not gen.is_square_attacked(E4, Color.WHITE)

    def test_is_in_check(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4R1K1 b - - 0 1")
        assert MoveGenerator(pos).is_in_check(Color.BLACK)


class TestAnnotatedMoves:
    def test_mate_flag(self) -> None:
        # Back-rank mate with Ra8.
        pos = position_from_fen("6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1")
        annotated = MoveGenerator(pos).generate_legal_moves_annotated()
        mates = [a.move for a in annotated if a.mate]
        assert mates == [Move(parse_square("a1"), parse_square("a8"))]
        assert not any(a.check for a in annotated if a.mate)

    def test_stalemate_flag(self) -> None:
        pos = position_from_fen("7k/8/5K2/8/8/8/8/6Q1 w - - 0 1")
        annotated = MoveGenerator(pos).generate_legal_moves_annotated()
        stalemating = {a.move.dst for a in annotated if a.stalemate}
        assert parse_square("g6") in stalemating
