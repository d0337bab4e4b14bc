"""Game management layer — side to move, history, draw rules."""

from chessai.game.state import GameEndReason, GameState, MoveRecord

__all__ = ["GameEndReason", "GameState", "MoveRecord"]
