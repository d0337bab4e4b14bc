"""High-level chess rules: check, checkmate, stalemate, dead positions."""

from __future__ import annotations

from chessai.core.board import Board
from chessai.core.enums import Color, GameResult, PieceType
from chessai.core.move import Move
from chessai.core.move_generator import MoveGenerator
from chessai.core.types import file_of, rank_of


class Rules:
    """Static rule-checker that operates on a :class:`Board`.

    Repetition and the fifty-move rule need move history, so they live in
    :class:`chessai.game.state.GameState`.
    """

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        return MoveGenerator(board).is_in_check(color)

    @staticmethod
    def legal_moves(board: Board, color: Color) -> list[Move]:
        return MoveGenerator(board).generate_legal_moves(color)

    @staticmethod
    def is_checkmate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        if not gen.is_in_check(color):
            return False
        for move in gen.generate_pseudo_legal_moves(color):
            clone = board.copy()
            clone.make_move(move)
            if not MoveGenerator(clone).is_in_check(color):
                return False
        return True

    @staticmethod
    def is_stalemate(board: Board, color: Color) -> bool:
        gen = MoveGenerator(board)
        if gen.is_in_check(color):
            return False
        return not any(
            gen.is_legal_move(move) for move in gen.generate_pseudo_legal_moves(color)
        )

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        white = board.squares_of(Color.WHITE)
        black = board.squares_of(Color.BLACK)
        total = len(white) + len(black)

        # K vs K
        if total == 2:
            return True

        minors = (PieceType.KNIGHT, PieceType.BISHOP)

        # K+minor vs K
        if total == 3:
            pieces = [board[sq] for sq in white + black]
            return any(p is not None and p.piece_type in minors for p in pieces)

        # K+B vs K+B with same-colour bishops
        if total == 4:
            wb = board.pieces(Color.WHITE, PieceType.BISHOP)
            bb = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(wb) == 1 and len(bb) == 1:
                w_color = (file_of(wb[0]) + rank_of(wb[0])) % 2
                b_color = (file_of(bb[0]) + rank_of(bb[0])) % 2
                return w_color == b_color

        return False

    @staticmethod
    def game_result(board: Board, side_to_move: Color) -> GameResult:
        """Result decided by the board alone (mate, stalemate, dead position)."""
        gen = MoveGenerator(board)
        if not gen.generate_legal_moves(side_to_move):
            if gen.is_in_check(side_to_move):
                return (
                    GameResult.BLACK_WINS
                    if side_to_move == Color.WHITE
                    else GameResult.WHITE_WINS
                )
            return GameResult.DRAW  # stalemate

        if Rules.is_insufficient_material(board):
            return GameResult.DRAW

        return GameResult.IN_PROGRESS
