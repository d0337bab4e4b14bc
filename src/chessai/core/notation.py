"""FEN parsing into a :class:`Board`.

Only the board-facing fields matter to the core: piece placement, side to
move, castling availability (mapped onto ``has_moved`` flags) and the
en-passant target.  Clocks are returned for the game layer.
"""

from __future__ import annotations

from dataclasses import dataclass

from chessai.core.board import Board
from chessai.core.enums import Color, PieceType
from chessai.core.piece import Piece
from chessai.core.types import Square, make_square, parse_square, rank_of

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# castling letter -> (king home, rook home)
_CASTLING_HOMES: dict[str, tuple[Square, Square]] = {
    "K": (make_square(4, 0), make_square(7, 0)),
    "Q": (make_square(4, 0), make_square(0, 0)),
    "k": (make_square(4, 7), make_square(7, 7)),
    "q": (make_square(4, 7), make_square(0, 7)),
}


@dataclass(slots=True)
class FenPosition:
    """Board plus the game-level fields of a FEN record."""

    board: Board
    side_to_move: Color
    halfmove_clock: int = 0
    fullmove_number: int = 1


def board_from_placement(placement: str) -> Board:
    """Parse a FEN piece-placement field. Every piece starts unmoved."""
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {placement!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {placement!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {placement!r}")
                board[make_square(file, rank)] = Piece.from_char(ch)
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {placement!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {placement!r}")
    return board


def position_from_fen(fen: str) -> FenPosition:
    """Parse a full FEN string (4-6 fields)."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]
    board = board_from_placement(placement)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    if castling_part != "-" and (
        any(ch not in _CASTLING_HOMES for ch in castling_part)
        or len(set(castling_part)) != len(castling_part)
    ):
        raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
    _apply_castling_field(board, "" if castling_part == "-" else castling_part)

    if ep_part != "-":
        ep = parse_square(ep_part)
        if ep is None or rank_of(ep) != (5 if side == Color.WHITE else 2):
            raise ValueError(f"Invalid FEN en-passant square: {ep_part!r}")
        board.en_passant = ep

    halfmove = _parse_clock(parts[4], "halfmove clock", 0) if len(parts) > 4 else 0
    fullmove = _parse_clock(parts[5], "fullmove number", 1) if len(parts) > 5 else 1

    return FenPosition(board, side, halfmove, fullmove)


def _apply_castling_field(board: Board, rights: str) -> None:
    """Mark home kings/rooks as moved when the matching right is absent."""
    keep: set[Square] = set()
    for ch in rights:
        keep.update(_CASTLING_HOMES[ch])

    for ch, homes in _CASTLING_HOMES.items():
        color = Color.WHITE if ch.isupper() else Color.BLACK
        for sq, piece_type in zip(homes, (PieceType.KING, PieceType.ROOK)):
            piece = board[sq]
            if (
                sq not in keep
                and piece is not None
                and piece.color == color
                and piece.piece_type == piece_type
            ):
                board[sq] = piece.moved()


def _parse_clock(text: str, name: str, minimum: int) -> int:
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Invalid FEN {name}: {text!r}") from None
    if value < minimum:
        raise ValueError(f"Invalid FEN {name}: {text!r}")
    return value
