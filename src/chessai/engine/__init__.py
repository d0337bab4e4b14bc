"""Chess engine package: static evaluation and minimax search."""

from chessai.engine.evaluation import MATE_SCORE, PIECE_VALUES, Evaluator
from chessai.engine.minimax import MinimaxEngine
from chessai.engine.search import (
    Difficulty,
    IEngine,
    SearchLimits,
    SearchResult,
)

__all__ = [
    "MATE_SCORE",
    "PIECE_VALUES",
    "Difficulty",
    "Evaluator",
    "IEngine",
    "MinimaxEngine",
    "SearchLimits",
    "SearchResult",
]
