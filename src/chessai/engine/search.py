"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chessai.core.board import Board
    from chessai.core.enums import Color
    from chessai.core.move import Move

CancelCheck = Callable[[], bool]


class Difficulty(IntEnum):
    """Named search depths."""

    BEGINNER = 1
    EASY = 2
    INTERMEDIATE = 3
    ADVANCED = 4
    EXPERT = 5
    MASTER = 6

    @property
    def depth(self) -> int:
        return int(self.value)

    @classmethod
    def from_depth(cls, depth: int) -> Difficulty:
        """Closest level for *depth*, clamped to BEGINNER..MASTER."""
        return cls(min(max(depth, cls.BEGINNER), cls.MASTER))


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation.

    With ``time_limit_ms`` left as ``None`` the search runs exactly
    ``max_depth`` plies.  With a limit it deepens one ply at a time and keeps
    the last iteration that finished before the deadline.
    """

    max_depth: int = 3
    time_limit_ms: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth <= 0:
            raise ValueError("Search depth must be >= 1")

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty) -> SearchLimits:
        return cls(max_depth=difficulty.depth)


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_move: Move | None
    score: int
    depth: int
    nodes: int


class IEngine(Protocol):
    """Protocol for chess engines used by the game layer."""

    def search(
        self,
        board: Board,
        color: Color,
        limits: SearchLimits,
        history: Sequence[str] = (),
        halfmove_clock: int = 0,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...
