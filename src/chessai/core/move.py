"""Move value object and its whitespace-separated text form."""

from __future__ import annotations

from dataclasses import dataclass

from chessai.core.enums import PieceType
from chessai.core.types import Square, parse_square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.QUEEN: "Q",
    PieceType.ROOK: "R",
    PieceType.BISHOP: "B",
    PieceType.KNIGHT: "N",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}

PROMOTION_TYPES: tuple[PieceType, ...] = tuple(_PROMO_CHARS)


def promotion_from_char(char: str) -> PieceType | None:
    """Promotion kind for a one-letter code (``Q``/``R``/``B``/``N``)."""
    return _PROMO_TYPES.get(char.upper())


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move."""

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)} {square_name(self.to_sq)}"
        if self.promotion is not None:
            base += " " + _PROMO_CHARS[self.promotion]
        return base


def parse_move(text: str) -> Move | None:
    """Parse ``"e2 e4"`` or ``"e7 e8 Q"``; anything malformed gives ``None``."""
    tokens = text.split()
    if len(tokens) not in (2, 3):
        return None

    from_sq = parse_square(tokens[0])
    to_sq = parse_square(tokens[1])
    if from_sq is None or to_sq is None:
        return None

    promotion: PieceType | None = None
    if len(tokens) == 3:
        if len(tokens[2]) != 1:
            return None
        promotion = promotion_from_char(tokens[2])
        if promotion is None:
            return None
    return Move(from_sq, to_sq, promotion)
