"""Game state — side to move, move history, draw rules, undo/redo."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum, auto

from chessai.core.board import Board
from chessai.core.enums import Color, GameResult, PieceType
from chessai.core.move import Move, parse_move, promotion_from_char
from chessai.core.move_generator import MoveGenerator
from chessai.core.notation import STARTING_FEN, position_from_fen
from chessai.core.piece import Piece
from chessai.core.rules import Rules
from chessai.core.types import parse_square
from chessai.engine.evaluation import Evaluator
from chessai.engine.minimax import MinimaxEngine
from chessai.engine.search import IEngine, SearchLimits, SearchResult

_LOGGER = logging.getLogger(__name__)

_REPETITION_LIMIT = 3
_FIFTY_MOVE_HALFMOVES = 100  # 100 half-moves = 50 full moves


class GameEndReason(IntEnum):
    """Why a game stopped."""

    CHECKMATE = auto()
    STALEMATE = auto()
    INSUFFICIENT_MATERIAL = auto()
    THREEFOLD_REPETITION = auto()
    FIFTY_MOVE_RULE = auto()


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    piece: Piece
    color: Color
    captured: Piece | None
    placement_after: str
    was_check: bool = False

    @property
    def was_capture(self) -> bool:
        return self.captured is not None


@dataclass(slots=True)
class _Snapshot:
    """State saved before each move so we can undo it."""

    board: Board
    halfmove_clock: int
    result: GameResult
    end_reason: GameEndReason | None


@dataclass
class GameState:
    """Owns everything the rules core deliberately does not: whose turn it
    is, what has been played, and the history-based draw rules.

    Every caller-facing method reports failure through its return value.
    The board is mutated in place only by moves that passed legality checks.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    halfmove_clock: int = 0
    engine: IEngine = field(default_factory=MinimaxEngine, repr=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    end_reason: GameEndReason | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    _positions: list[str] = field(default_factory=list, init=False, repr=False)
    _undo_stack: list[_Snapshot] = field(default_factory=list, init=False, repr=False)
    _redo_stack: list[Move] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._positions = [self.board.placement()]

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game from *fen* (default: start position)."""
        parsed = position_from_fen(fen or STARTING_FEN)
        self.board.restore(parsed.board)
        self.side_to_move = parsed.side_to_move
        self.halfmove_clock = parsed.halfmove_clock
        self.result = GameResult.IN_PROGRESS
        self.end_reason = None
        self.move_history.clear()
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._positions = [self.board.placement()]

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, from_sq: str, to_sq: str, promotion: str | None = None) -> bool:
        """Play a move given as algebraic squares and an optional Q/R/B/N code."""
        src = parse_square(from_sq)
        dst = parse_square(to_sq)
        if src is None or dst is None:
            _LOGGER.debug("Rejected move %s %s: bad coordinate", from_sq, to_sq)
            return False

        promotion_type: PieceType | None = None
        if promotion is not None:
            promotion_type = (
                promotion_from_char(promotion) if len(promotion) == 1 else None
            )
            if promotion_type is None:
                _LOGGER.debug("Rejected move %s %s: bad promotion %r", from_sq, to_sq, promotion)
                return False

        return self.submit_move(Move(src, dst, promotion_type))

    def apply_text(self, text: str) -> bool:
        """Play a move in its text form, e.g. ``"e2 e4"`` or ``"e7 e8 Q"``."""
        move = parse_move(text)
        if move is None:
            _LOGGER.debug("Rejected move %r: unparsable", text)
            return False
        return self.submit_move(move)

    def submit_move(self, move: Move) -> bool:
        """Validate and play *move* for the side to move."""
        if self.is_game_over:
            _LOGGER.debug("Rejected move %s: game is over", move)
            return False

        piece = self.board[move.from_sq]
        if piece is None or piece.color != self.side_to_move:
            _LOGGER.debug("Rejected move %s: no %s piece on origin", move, self.side_to_move)
            return False

        if not MoveGenerator(self.board).is_legal_move(move):
            _LOGGER.debug("Rejected move %s: illegal", move)
            return False

        self._push(move)
        self._redo_stack.clear()
        return True

    def undo_last_move(self) -> bool:
        """Take back the last move. Returns False when there is none."""
        if not self.move_history:
            return False

        record = self.move_history.pop()
        snapshot = self._undo_stack.pop()
        self._positions.pop()
        self.board.restore(snapshot.board)
        self.halfmove_clock = snapshot.halfmove_clock
        self.result = snapshot.result
        self.end_reason = snapshot.end_reason
        self.side_to_move = record.color
        self._redo_stack.append(record.move)
        return True

    def redo_last_move(self) -> bool:
        """Replay the most recently undone move."""
        if not self._redo_stack:
            return False
        self._push(self._redo_stack.pop())
        return True

    # ── Rules facade ─────────────────────────────────────────────────────

    def is_in_check(self, color: Color) -> bool:
        return Rules.is_in_check(self.board, color)

    def is_checkmate(self, color: Color) -> bool:
        return Rules.is_checkmate(self.board, color)

    def is_stalemate(self, color: Color) -> bool:
        return Rules.is_stalemate(self.board, color)

    def legal_moves(self, color: Color | None = None) -> list[Move]:
        """Legal moves for *color* (default: the side to move)."""
        return Rules.legal_moves(
            self.board, self.side_to_move if color is None else color
        )

    def best_move(
        self, color: Color | None = None, depth: int | None = None
    ) -> SearchResult:
        """Search the current position for *color* (default: side to move).

        A *depth* of zero or less skips the search and returns the static
        evaluation with no move.
        """
        if color is None:
            color = self.side_to_move
        if depth is not None and depth <= 0:
            return SearchResult(None, Evaluator().evaluate(self.board, color), 0, 0)
        limits = SearchLimits() if depth is None else SearchLimits(max_depth=depth)
        return self.engine.search(
            self.board,
            color,
            limits,
            history=tuple(self._positions),
            halfmove_clock=self.halfmove_clock,
        )

    def play_best_move(self, depth: int | None = None) -> SearchResult | None:
        """Search for the side to move and play the result.

        Returns ``None`` when the game is over or no move was found.
        """
        if self.is_game_over:
            return None
        result = self.best_move(depth=depth)
        if result.best_move is None or not self.submit_move(result.best_move):
            return None
        return result

    def piece_placement_fen(self) -> str:
        return self.board.placement()

    # ── Draw rules ───────────────────────────────────────────────────────

    def is_threefold_repetition(self) -> bool:
        """Has the current placement occurred at least three times?"""
        return self._positions.count(self._positions[-1]) >= _REPETITION_LIMIT

    def is_fifty_move_rule(self) -> bool:
        return self.halfmove_clock >= _FIFTY_MOVE_HALFMOVES

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def is_game_over(self) -> bool:
        return self.result != GameResult.IN_PROGRESS

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def can_undo(self) -> bool:
        return bool(self.move_history)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    # ── Internal ─────────────────────────────────────────────────────────

    def _push(self, move: Move) -> None:
        piece = self.board[move.from_sq]
        assert piece is not None
        color = piece.color

        self._undo_stack.append(
            _Snapshot(
                board=self.board.copy(),
                halfmove_clock=self.halfmove_clock,
                result=self.result,
                end_reason=self.end_reason,
            )
        )
        captured = self.board.make_move(move)

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        self.side_to_move = color.opposite
        placement = self.board.placement()
        self._positions.append(placement)
        self.move_history.append(
            MoveRecord(
                move=move,
                piece=piece,
                color=color,
                captured=captured,
                placement_after=placement,
                was_check=Rules.is_in_check(self.board, self.side_to_move),
            )
        )
        self._check_game_over()

    def _check_game_over(self) -> None:
        side = self.side_to_move
        result = Rules.game_result(self.board, side)
        reason: GameEndReason | None = None

        if result == GameResult.IN_PROGRESS:
            if self.is_threefold_repetition():
                result, reason = GameResult.DRAW, GameEndReason.THREEFOLD_REPETITION
            elif self.is_fifty_move_rule():
                result, reason = GameResult.DRAW, GameEndReason.FIFTY_MOVE_RULE
        elif result == GameResult.DRAW:
            reason = (
                GameEndReason.STALEMATE
                if Rules.is_stalemate(self.board, side)
                else GameEndReason.INSUFFICIENT_MATERIAL
            )
        else:
            reason = GameEndReason.CHECKMATE

        if result != GameResult.IN_PROGRESS:
            self.result = result
            self.end_reason = reason
            _LOGGER.info("Game over: %s (%s)", result.name, reason.name if reason else "")
