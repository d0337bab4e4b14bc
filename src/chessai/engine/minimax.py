"""Pure-Python minimax search with alpha-beta pruning."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from time import perf_counter

from chessai.core.board import Board
from chessai.core.enums import Color, PieceType
from chessai.core.move import Move
from chessai.core.move_generator import MoveGenerator
from chessai.engine.evaluation import Evaluator
from chessai.engine.search import CancelCheck, IEngine, SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 10_000_000
_REPETITION_LIMIT = 3
_FIFTY_MOVE_HALFMOVES = 100


def _never_cancelled() -> bool:
    return False


class MinimaxEngine(IEngine):
    """Depth-limited minimax with alpha-beta pruning.

    Every node works on its own clone of the board, so sibling branches
    never share mutable state and the caller's board is left untouched.
    Moves are searched in generation order (row-major square scan, then the
    piece's own order) and a later move must score strictly better to
    replace an earlier one, which makes the chosen move reproducible.
    """

    __slots__ = (
        "_evaluator",
        "_cancel_check",
        "_deadline",
        "_nodes",
        "_repetitions",
    )

    def __init__(self, evaluator: Evaluator | None = None) -> None:
        self._evaluator = evaluator or Evaluator()
        self._cancel_check: CancelCheck = _never_cancelled
        self._deadline: float | None = None
        self._nodes = 0
        self._repetitions: Counter[str] = Counter()

    def search(
        self,
        board: Board,
        color: Color,
        limits: SearchLimits,
        history: Sequence[str] = (),
        halfmove_clock: int = 0,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        """Best move for *color* and its score from *color*'s point of view.

        *history* holds the piece-placement strings of the positions already
        played (current one included) for repetition detection;
        *halfmove_clock* counts half-moves since the last pawn move or capture.
        """
        self._nodes = 0
        self._cancel_check = is_cancelled or _never_cancelled
        self._repetitions = Counter(history)
        self._deadline = None
        if limits.time_limit_ms is not None:
            ms = max(limits.time_limit_ms, 1)
            self._deadline = perf_counter() + (ms / 1000.0)

        root_moves = MoveGenerator(board).generate_legal_moves(color)
        if not root_moves:
            return SearchResult(None, self._evaluator.evaluate(board, color), 0, 0)

        best_move = root_moves[0]
        best_score = self._evaluator.evaluate(board, color)
        completed_depth = 0

        if self._deadline is None:
            depths: Sequence[int] = (limits.max_depth,)
        else:
            depths = range(1, limits.max_depth + 1)

        for depth in depths:
            if self._should_stop():
                break

            score, move = self._search_root(
                board, color, root_moves, depth, halfmove_clock
            )
            if self._should_stop() or move is None:
                break

            best_move = move
            best_score = score
            completed_depth = depth

        _LOGGER.debug(
            "search %s depth=%d nodes=%d score=%d best=%s",
            color,
            completed_depth,
            self._nodes,
            best_score,
            best_move,
        )
        return SearchResult(best_move, best_score, completed_depth, self._nodes)

    def _search_root(
        self,
        board: Board,
        color: Color,
        root_moves: list[Move],
        depth: int,
        halfmove_clock: int,
    ) -> tuple[int, Move | None]:
        best_score = -_INF_SCORE
        best_move: Move | None = None
        alpha = -_INF_SCORE
        beta = _INF_SCORE

        for move in root_moves:
            if self._should_stop():
                break

            child, clock = self._play(board, move, halfmove_clock)
            score = self._minimax(
                child,
                color.opposite,
                depth - 1,
                alpha,
                beta,
                maximizing=False,
                root_color=color,
                halfmove_clock=clock,
            )

            if score > best_score:
                best_score = score
                best_move = move
            alpha = max(alpha, score)

        return best_score, best_move

    def _minimax(
        self,
        board: Board,
        to_move: Color,
        depth: int,
        alpha: int,
        beta: int,
        maximizing: bool,
        root_color: Color,
        halfmove_clock: int,
    ) -> int:
        self._nodes += 1
        key = board.placement()
        self._repetitions[key] += 1
        try:
            if (
                depth <= 0
                or self._should_stop()
                or self._is_draw(key, halfmove_clock)
            ):
                return self._evaluator.evaluate(board, root_color)

            moves = MoveGenerator(board).generate_legal_moves(to_move)
            if not moves:
                return self._evaluator.evaluate(board, root_color)

            best_score = -_INF_SCORE if maximizing else _INF_SCORE
            for move in moves:
                child, clock = self._play(board, move, halfmove_clock)
                score = self._minimax(
                    child,
                    to_move.opposite,
                    depth - 1,
                    alpha,
                    beta,
                    not maximizing,
                    root_color,
                    clock,
                )

                if maximizing:
                    best_score = max(best_score, score)
                    alpha = max(alpha, score)
                else:
                    best_score = min(best_score, score)
                    beta = min(beta, score)
                if beta <= alpha:
                    break
            return best_score
        finally:
            self._repetitions[key] -= 1

    def _play(self, board: Board, move: Move, halfmove_clock: int) -> tuple[Board, int]:
        """Clone *board*, apply *move*, and advance the fifty-move counter."""
        piece = board[move.from_sq]
        child = board.copy()
        captured = child.make_move(move)
        if captured is not None or (
            piece is not None and piece.piece_type == PieceType.PAWN
        ):
            return child, 0
        return child, halfmove_clock + 1

    def _is_draw(self, key: str, halfmove_clock: int) -> bool:
        return (
            self._repetitions[key] >= _REPETITION_LIMIT
            or halfmove_clock >= _FIFTY_MOVE_HALFMOVES
        )

    def _should_stop(self) -> bool:
        if self._cancel_check():
            return True
        return self._deadline is not None and perf_counter() >= self._deadline
