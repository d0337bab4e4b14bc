"""Tests for square helpers, Piece and Move value objects."""

import pytest

from chessai.core.enums import Color, PieceType
from chessai.core.move import Move, parse_move, promotion_from_char
from chessai.core.piece import Piece
from chessai.core.types import (
    A1, E2, E4, E7, E8, H8,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_from_coords,
    square_name,
)


class TestSquares:
    def test_corners(self) -> None:
        assert parse_square("a1") == A1 == 0
        assert parse_square("h8") == H8 == 63

    def test_name_round_trip(self) -> None:
        for sq in range(64):
            assert parse_square(square_name(sq)) == sq

    def test_file_and_rank(self) -> None:
        assert file_of(E4) == 4
        assert rank_of(E4) == 3
        assert make_square(4, 3) == E4

    def test_uppercase_file_accepted(self) -> None:
        assert parse_square("E4") == E4

    @pytest.mark.parametrize("name", ["", "e", "e9", "i1", "e0", "e44", "4e"])
    def test_invalid_names(self, name: str) -> None:
        assert parse_square(name) is None

    def test_square_from_coords(self) -> None:
        # row = rank index, col = file index
        assert square_from_coords(0, 0) == A1
        assert square_from_coords(3, 4) == E4
        assert square_from_coords(8, 0) is None
        assert square_from_coords(0, -1) is None


class TestColor:
    def test_opposite(self) -> None:
        assert Color.WHITE.opposite == Color.BLACK
        assert Color.BLACK.opposite == Color.WHITE

    def test_str(self) -> None:
        assert str(Color.WHITE) == "white"


class TestPiece:
    def test_fen_chars(self) -> None:
        assert str(Piece(Color.WHITE, PieceType.KNIGHT)) == "N"
        assert str(Piece(Color.BLACK, PieceType.QUEEN)) == "q"

    def test_from_char(self) -> None:
        assert Piece.from_char("k") == Piece(Color.BLACK, PieceType.KING)

    def test_from_char_invalid(self) -> None:
        with pytest.raises(ValueError):
            Piece.from_char("x")

    def test_moved_is_a_copy(self) -> None:
        rook = Piece(Color.WHITE, PieceType.ROOK)
        moved = rook.moved()
        assert moved.has_moved
        assert not rook.has_moved

    def test_promoted(self) -> None:
        pawn = Piece(Color.BLACK, PieceType.PAWN)
        queen = pawn.promoted(PieceType.QUEEN)
        assert queen == Piece(Color.BLACK, PieceType.QUEEN, has_moved=True)


class TestMoveText:
    def test_str(self) -> None:
        assert str(Move(E2, E4)) == "e2 e4"
        assert str(Move(E7, E8, PieceType.QUEEN)) == "e7 e8 Q"

    def test_parse_plain(self) -> None:
        assert parse_move("e2 e4") == Move(E2, E4)

    def test_parse_promotion(self) -> None:
        assert parse_move("e7 e8 N") == Move(E7, E8, PieceType.KNIGHT)
        assert parse_move("e7 e8 r") == Move(E7, E8, PieceType.ROOK)

    def test_parse_tolerates_extra_whitespace(self) -> None:
        assert parse_move("  e2   e4 ") == Move(E2, E4)

    @pytest.mark.parametrize(
        "text", ["", "e2", "e2e4", "e2 e9", "e7 e8 K", "e7 e8 QQ", "e2 e4 Q x"]
    )
    def test_parse_rejects(self, text: str) -> None:
        assert parse_move(text) is None

    def test_promotion_from_char(self) -> None:
        assert promotion_from_char("b") == PieceType.BISHOP
        assert promotion_from_char("P") is None
