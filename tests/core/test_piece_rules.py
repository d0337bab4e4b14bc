"""Tests for per-piece movement rules and attack detection."""

import pytest

from chessai.core.enums import Color, PieceType
from chessai.core.move import Move
from chessai.core.notation import board_from_placement, position_from_fen
from chessai.core.piece_rules import (
    attacks,
    is_square_attacked,
    is_valid_move,
    line_step,
    pseudo_legal_moves,
)
from chessai.core.types import (
    A1, A2, B1, C1, D1, D4, E1, E2, E3, E4, E5, E7, E8, G1, H1,
    parse_square,
)


def sq(name: str) -> int:
    result = parse_square(name)
    assert result is not None
    return result


class TestGeometry:
    def test_line_step(self) -> None:
        assert line_step(A1, sq("h8")) == (1, 1)
        assert line_step(E1, E8) == (0, 1)
        assert line_step(H1, A1) == (-1, 0)

    def test_line_step_unaligned(self) -> None:
        assert line_step(A1, sq("b3")) is None
        assert line_step(E4, E4) is None


class TestPawnRules:
    def test_single_and_double_push(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/4P3/4K3")
        assert is_valid_move(board, E2, E3)
        assert is_valid_move(board, E2, E4)
        assert not is_valid_move(board, E2, E5)

    def test_double_push_only_from_start_rank(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/4P3/8/4K3")
        assert not is_valid_move(board, E3, E5)

    def test_blocked_push(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/4n3/4P3/4K3")
        assert not is_valid_move(board, E2, E3)
        assert not is_valid_move(board, E2, E4)

    def test_double_push_blocked_on_far_square(self) -> None:
        board = board_from_placement("4k3/8/8/8/4n3/8/4P3/4K3")
        assert is_valid_move(board, E2, E3)
        assert not is_valid_move(board, E2, E4)

    def test_diagonal_requires_capture(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/3p4/4P3/4K3")
        assert is_valid_move(board, E2, sq("d3"))
        assert not is_valid_move(board, E2, sq("f3"))

    def test_no_backward_moves(self) -> None:
        board = board_from_placement("4k3/8/8/8/4P3/8/8/4K3")
        assert not is_valid_move(board, E4, E3)

    def test_black_moves_down(self) -> None:
        board = board_from_placement("4k3/4p3/8/8/8/8/8/4K3")
        assert is_valid_move(board, E7, sq("e6"))
        assert is_valid_move(board, E7, E5)
        assert not is_valid_move(board, E7, sq("e8"))

    def test_promotion_required_on_last_rank(self) -> None:
        board = board_from_placement("4k3/P7/8/8/8/8/8/4K3")
        a7, a8 = sq("a7"), sq("a8")
        assert not is_valid_move(board, a7, a8)
        for pt in (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT):
            assert is_valid_move(board, a7, a8, pt)
        assert not is_valid_move(board, a7, a8, PieceType.KING)
        assert not is_valid_move(board, a7, a8, PieceType.PAWN)

    def test_promotion_rejected_off_last_rank(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/4P3/4K3")
        assert not is_valid_move(board, E2, E3, PieceType.QUEEN)

    def test_promotion_rejected_for_non_pawn(self) -> None:
        board = board_from_placement("4k3/R7/8/8/8/8/8/4K3")
        assert not is_valid_move(board, sq("a7"), sq("a8"), PieceType.QUEEN)

    def test_generation_order_with_promotions(self) -> None:
        board = board_from_placement("1n2k3/P7/8/8/8/8/8/4K3")
        moves = pseudo_legal_moves(board, sq("a7"))
        assert moves == [
            Move(sq("a7"), sq("a8"), PieceType.QUEEN),
            Move(sq("a7"), sq("a8"), PieceType.ROOK),
            Move(sq("a7"), sq("a8"), PieceType.BISHOP),
            Move(sq("a7"), sq("a8"), PieceType.KNIGHT),
            Move(sq("a7"), sq("b8"), PieceType.QUEEN),
            Move(sq("a7"), sq("b8"), PieceType.ROOK),
            Move(sq("a7"), sq("b8"), PieceType.BISHOP),
            Move(sq("a7"), sq("b8"), PieceType.KNIGHT),
        ]


class TestEnPassant:
    def test_capture_on_target(self) -> None:
        pos = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        assert is_valid_move(pos.board, E5, sq("d6"))
        assert Move(E5, sq("d6")) in pseudo_legal_moves(pos.board, E5)

    def test_no_capture_without_target(self) -> None:
        board = board_from_placement("4k3/8/8/3pP3/8/8/8/4K3")
        assert not is_valid_move(board, E5, sq("d6"))
        assert Move(E5, sq("d6")) not in pseudo_legal_moves(board, E5)


class TestPieceRules:
    def test_knight_jumps(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/PPPPPPPP/RN2K3")
        targets = {m.to_sq for m in pseudo_legal_moves(board, B1)}
        assert targets == {sq("a3"), sq("c3")}

    def test_rook_blocked_by_own_piece(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/P7/R3K3")
        targets = {m.to_sq for m in pseudo_legal_moves(board, A1)}
        assert targets == {B1, C1, D1}

    def test_slider_captures_enemy_and_stops(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/R1n1K3")
        targets = {m.to_sq for m in pseudo_legal_moves(board, A1)}
        assert C1 in targets
        assert D1 not in targets

    def test_bishop_diagonals_only(self) -> None:
        board = board_from_placement("4k3/8/8/8/3B4/8/8/4K3")
        assert is_valid_move(board, D4, sq("h8"))
        assert is_valid_move(board, D4, A1)
        assert not is_valid_move(board, D4, sq("d8"))

    def test_queen_combines_lines(self) -> None:
        board = board_from_placement("4k3/8/8/8/3Q4/8/8/4K3")
        assert len(pseudo_legal_moves(board, D4)) == 27

    def test_cannot_capture_own_piece(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/RN2K3")
        assert not is_valid_move(board, A1, B1)

    def test_empty_square_has_no_moves(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/4K3")
        assert pseudo_legal_moves(board, D4) == []
        assert not is_valid_move(board, D4, sq("d5"))

    def test_same_square_rejected(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/4K3")
        assert not is_valid_move(board, E1, E1)

    @pytest.mark.parametrize("bad", [-1, 64])
    def test_off_board_rejected(self, bad: int) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/4K3")
        assert not is_valid_move(board, E1, bad)


class TestCastlingRules:
    def test_both_sides_available(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/R3K2R")
        assert is_valid_move(board, E1, G1)
        assert is_valid_move(board, E1, C1)
        moves = pseudo_legal_moves(board, E1)
        assert moves[-2:] == [Move(E1, G1), Move(E1, C1)]

    def test_blocked_path(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/RN2K1NR")
        assert not is_valid_move(board, E1, G1)
        assert not is_valid_move(board, E1, C1)

    def test_moved_king(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K2R w - - 0 1")
        assert not is_valid_move(pos.board, E1, G1)

    def test_moved_rook(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K2R w Q - 0 1")
        assert not is_valid_move(pos.board, E1, G1)
        assert is_valid_move(pos.board, E1, C1)

    def test_not_out_of_check(self) -> None:
        board = board_from_placement("4r2k/8/8/8/8/8/8/4K2R")
        assert not is_valid_move(board, E1, G1)

    def test_not_through_attacked_square(self) -> None:
        board = board_from_placement("5r1k/8/8/8/8/8/8/R3K2R")
        assert not is_valid_move(board, E1, G1)
        assert is_valid_move(board, E1, C1)

    def test_not_into_attacked_square(self) -> None:
        board = board_from_placement("2r4k/8/8/8/8/8/8/R3K2R")
        assert not is_valid_move(board, E1, C1)
        assert is_valid_move(board, E1, G1)

    def test_attacked_b_file_does_not_block_queenside(self) -> None:
        board = board_from_placement("1r5k/8/8/8/8/8/8/R3K3")
        assert is_valid_move(board, E1, C1)

    def test_king_off_home_square(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/R2K3R")
        assert not is_valid_move(board, D1, sq("b1"))


class TestAttacks:
    def test_pawn_attacks_diagonally_only(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/4P3/4K3")
        assert attacks(board, E2, sq("d3"))
        assert attacks(board, E2, sq("f3"))
        assert not attacks(board, E2, E3)

    def test_attack_ignores_occupant_colour(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/RN2K3")
        assert attacks(board, A1, B1)

    def test_slider_blocked(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/R1N1K3")
        assert not attacks(board, A1, D1)

    def test_empty_origin(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/4K3")
        assert not attacks(board, A1, A2)

    def test_square_attacked_by_each_kind(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/4K3")
        cases = {
            "p": (sq("d5"), False),
            "n": (sq("c2"), True),
            "b": (sq("a7"), True),
            "r": (sq("d8"), True),
            "q": (sq("h8"), True),
            "k": (sq("c5"), True),
        }
        for char, (origin, expected) in cases.items():
            probe = board.copy()
            probe[origin] = board_from_placement(f"{char}7/8/8/8/8/8/8/8")[sq("a8")]
            assert is_square_attacked(probe, D4, Color.BLACK) == expected, char

    def test_black_pawn_attacks_downward(self) -> None:
        board = board_from_placement("4k3/8/8/3p4/8/8/8/4K3")
        assert is_square_attacked(board, sq("c4"), Color.BLACK)
        assert is_square_attacked(board, E4, Color.BLACK)
        assert not is_square_attacked(board, sq("d4"), Color.BLACK)
        assert not is_square_attacked(board, sq("c6"), Color.BLACK)

    def test_colour_filter(self) -> None:
        board = board_from_placement("4k3/8/8/8/8/8/8/R3K3")
        assert is_square_attacked(board, A2, Color.WHITE)
        assert not is_square_attacked(board, A2, Color.BLACK)

    def test_attack_through_king_is_blocked(self) -> None:
        board = board_from_placement("r3K3/8/8/8/8/8/8/7k")
        assert is_square_attacked(board, E8, Color.BLACK)
        assert not is_square_attacked(board, sq("f8"), Color.BLACK)
