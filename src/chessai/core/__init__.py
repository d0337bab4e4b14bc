"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from chessai.core import Board, Color, MoveGenerator

    board = Board.initial()
    gen = MoveGenerator(board)
    for move in gen.generate_legal_moves(Color.WHITE):
        print(move)
"""

from chessai.core.board import Board
from chessai.core.enums import Color, GameResult, PieceType
from chessai.core.move import Move, parse_move
from chessai.core.move_generator import MoveGenerator
from chessai.core.notation import (
    STARTING_FEN,
    FenPosition,
    board_from_placement,
    position_from_fen,
)
from chessai.core.piece import Piece
from chessai.core.rules import Rules
from chessai.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_from_coords,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "GameResult",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_from_coords",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Rules",
    "parse_move",
    # Notation
    "STARTING_FEN",
    "FenPosition",
    "board_from_placement",
    "position_from_fen",
]
