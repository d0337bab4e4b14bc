"""Board - piece placement on an 8x8 board plus en-passant and capture state."""

from __future__ import annotations

from chessai.core.enums import Color, PieceType
from chessai.core.move import Move
from chessai.core.piece import Piece
from chessai.core.types import Square, file_of, make_square, parse_square, rank_of

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-square board.

    The grid is the only record of where a piece stands.  Besides placement
    the board carries the en-passant target square and, per color, the list
    of that color's pieces that have been captured.
    """

    __slots__ = ("_squares", "en_passant", "_captured")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        self.en_passant: Square | None = None
        # [color] -> pieces of that color removed from the board, in order.
        self._captured: tuple[list[Piece], list[Piece]] = ([], [])

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def piece_at(self, name: str) -> Piece | None:
        """Piece on the square called *name*; ``None`` if empty or invalid."""
        sq = parse_square(name)
        if sq is None:
            return None
        return self._squares[sq]

    def set_piece_at(self, name: str, piece: Piece | None) -> bool:
        """Place (or clear) a square by name. Returns False for a bad name."""
        sq = parse_square(name)
        if sq is None:
            return False
        self._squares[sq] = piece
        return True

    # -- Query helpers ------------------------------------------------------

    def squares_of(self, color: Color) -> list[Square]:
        """Squares occupied by *color*, in row-major scan order."""
        return [
            sq
            for sq, piece in enumerate(self._squares)
            if piece is not None and piece.color == color
        ]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return [
            sq
            for sq, piece in enumerate(self._squares)
            if piece is not None
            and piece.color == color
            and piece.piece_type == piece_type
        ]

    def king_square(self, color: Color) -> Square | None:
        """First square holding *color*'s king, or ``None`` if there is none."""
        for sq, piece in enumerate(self._squares):
            if (
                piece is not None
                and piece.piece_type == PieceType.KING
                and piece.color == color
            ):
                return sq
        return None

    def captured(self, color: Color) -> list[Piece]:
        """Pieces of *color* captured so far (a copy)."""
        return list(self._captured[int(color)])

    def placement(self) -> str:
        """FEN piece-placement field, e.g. ``rnbqkbnr/pppppppp/8/...``."""
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = ""
            empty = 0
            for file in range(8):
                piece = self._squares[make_square(file, rank)]
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
            if empty:
                row += str(empty)
            rows.append(row)
        return "/".join(rows)

    # -- Mutation / copying -------------------------------------------------

    def make_move(self, move: Move) -> Piece | None:
        """Execute *move* without checking it; returns the captured piece.

        Handles the side effects of special moves: the pawn taken en passant,
        the rook hop of a castling king, promotion, and the en-passant target
        left behind by a two-square pawn advance.
        """
        piece = self._squares[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        captured = self._squares[move.to_sq]
        capture_sq = move.to_sq
        is_pawn = piece.piece_type == PieceType.PAWN

        # En passant: the captured pawn sits beside the origin, not on the target
        if (
            is_pawn
            and captured is None
            and move.to_sq == self.en_passant
            and file_of(move.to_sq) != file_of(move.from_sq)
        ):
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            captured = self._squares[capture_sq]

        self._squares[move.from_sq] = None
        if captured is not None:
            self._squares[capture_sq] = None
            self._captured[int(captured.color)].append(captured)

        if move.promotion is not None:
            self._squares[move.to_sq] = piece.promoted(move.promotion)
        else:
            self._squares[move.to_sq] = piece.moved()

        # Slide the rook for castling
        if (
            piece.piece_type == PieceType.KING
            and abs(file_of(move.to_sq) - file_of(move.from_sq)) == 2
        ):
            r = rank_of(move.from_sq)
            if file_of(move.to_sq) > file_of(move.from_sq):
                rook_from, rook_to = make_square(7, r), make_square(5, r)
            else:
                rook_from, rook_to = make_square(0, r), make_square(3, r)
            rook = self._squares[rook_from]
            if rook is not None:
                self._squares[rook_from] = None
                self._squares[rook_to] = rook.moved()

        # En passant target for the opponent
        if is_pawn and abs(rank_of(move.to_sq) - rank_of(move.from_sq)) == 2:
            self.en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )
        else:
            self.en_passant = None

        return captured

    def copy(self) -> Board:
        """Independent clone; pieces are immutable so sharing them is safe."""
        b = Board()
        b._squares = self._squares.copy()
        b.en_passant = self.en_passant
        b._captured = (self._captured[0].copy(), self._captured[1].copy())
        return b

    def restore(self, snapshot: Board) -> None:
        """Overwrite this board in place with the state of *snapshot*."""
        self._squares = snapshot._squares.copy()
        self.en_passant = snapshot.en_passant
        self._captured = (snapshot._captured[0].copy(), snapshot._captured[1].copy())

    def clear(self) -> None:
        self._squares = [None] * 64
        self.en_passant = None
        self._captured = ([], [])

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)

        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._squares == other._squares and self.en_passant == other.en_passant
        )

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
