"""Static position evaluation."""

from __future__ import annotations

from chessai.core.board import Board
from chessai.core.enums import Color, PieceType
from chessai.core.move_generator import MoveGenerator
from chessai.core.piece_rules import is_square_attacked
from chessai.core.rules import Rules
from chessai.core.types import file_of, make_square, rank_of

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 20_000,
}

CHECK_SCORE = 200
MATE_SCORE = 100_000

_GUARD_DIVISOR = 10
_CENTRAL_KING_PENALTY = 50
_CASTLED_KING_BONUS = 30
_SHIELD_PAWN_BONUS = 10
_CENTRAL_FILES = (3, 4)  # d, e
_CASTLED_FILES = (2, 6)  # c, g


class Evaluator:
    """Scores a board from one side's point of view (positive = good).

    Terms, all summed as own minus opponent:

    * material, with a tenth of each non-king piece's value added when a
      friendly piece defends it and subtracted when nothing does;
    * king safety: uncastled king on the d/e file, castled king, and the
      pawns sheltering a castled king;
    * a fixed bonus for giving check and a decisive one for checkmate.
    """

    __slots__ = ()

    def evaluate(self, board: Board, color: Color) -> int:
        score = 0
        for sq in range(64):
            piece = board[sq]
            if piece is None:
                continue

            value = PIECE_VALUES[piece.piece_type]
            if piece.piece_type != PieceType.KING:
                guard = value // _GUARD_DIVISOR
                if is_square_attacked(board, sq, piece.color):
                    value += guard
                else:
                    value -= guard
            score += value if piece.color == color else -value

        opponent = color.opposite
        score += self.king_safety(board, color) - self.king_safety(board, opponent)

        gen = MoveGenerator(board)
        if gen.is_in_check(opponent):
            score += CHECK_SCORE
            if Rules.is_checkmate(board, opponent):
                score += MATE_SCORE
        if gen.is_in_check(color):
            score -= CHECK_SCORE
            if Rules.is_checkmate(board, color):
                score -= MATE_SCORE
        return score

    def king_safety(self, board: Board, color: Color) -> int:
        king_sq = board.king_square(color)
        if king_sq is None:
            return 0

        score = 0
        king_file = file_of(king_sq)
        back_rank = 0 if color == Color.WHITE else 7
        if king_file in _CENTRAL_FILES:
            score -= _CENTRAL_KING_PENALTY

        if rank_of(king_sq) == back_rank and king_file in _CASTLED_FILES:
            score += _CASTLED_KING_BONUS
            shield_rank = 1 if color == Color.WHITE else 6
            for f in range(king_file - 1, king_file + 2):
                piece = board[make_square(f, shield_rank)]
                if (
                    piece is not None
                    and piece.color == color
                    and piece.piece_type == PieceType.PAWN
                ):
                    score += _SHIELD_PAWN_BONUS
        return score
