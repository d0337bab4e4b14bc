"""Legal move generation: check, pin and king-exposure detection."""

from __future__ import annotations

from chessai.core import piece_rules
from chessai.core.board import Board
from chessai.core.enums import Color, PieceType
from chessai.core.move import Move
from chessai.core.types import Square, file_of, make_square, rank_of

_ORTHOGONAL_PINNERS = (PieceType.ROOK, PieceType.QUEEN)
_DIAGONAL_PINNERS = (PieceType.BISHOP, PieceType.QUEEN)


class MoveGenerator:
    """Legalizes moves on a given :class:`Board`.

    The board is never mutated: every "what if" question is answered on a
    clone.  The side to move is not stored anywhere; each query names the
    color it is about.
    """

    __slots__ = ("_board",)

    def __init__(self, board: Board) -> None:
        self._board = board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self, color: Color) -> list[Move]:
        """All strictly legal moves for *color*, in row-major square order."""
        return [
            move
            for move in self.generate_pseudo_legal_moves(color)
            if self.is_legal_move(move)
        ]

    def generate_pseudo_legal_moves(self, color: Color) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        for sq in self._board.squares_of(color):
            moves.extend(piece_rules.pseudo_legal_moves(self._board, sq))
        return moves

    def is_legal_move(self, move: Move) -> bool:
        """Pseudo-legal and does not leave the mover's king attacked."""
        if not piece_rules.is_valid_move(
            self._board, move.from_sq, move.to_sq, move.promotion
        ):
            return False
        piece = self._board[move.from_sq]
        assert piece is not None
        if piece.piece_type == PieceType.KING:
            # Kings cannot be pinned, but they must not step into an attack.
            return not self._leaves_king_in_check(move, piece.color)
        return not self.would_expose_check(move.from_sq, move.to_sq, move.promotion)

    # -- Attack detection ---------------------------------------------------

    def find_king(self, color: Color) -> Square | None:
        return self._board.king_square(color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        return piece_rules.is_square_attacked(self._board, sq, by_color)

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent? No king means no check."""
        king_sq = self.find_king(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, color.opposite)

    # -- Pins -----------------------------------------------------------------

    def would_expose_check(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> bool:
        """Would moving the piece on *from_sq* to *to_sq* leave its king in check?

        A pinned piece may only travel along the segment between its king and
        the pinner (capturing the pinner included).  Anything that survives
        the pin test is settled by playing the move on a clone.
        """
        piece = self._board[from_sq]
        if piece is None or piece.piece_type == PieceType.KING:
            return False

        pin_line = self._pin_line(from_sq)
        if pin_line is not None and to_sq not in pin_line:
            return True

        return self._leaves_king_in_check(
            Move(from_sq, to_sq, promotion), piece.color
        )

    def is_pinned(self, sq: Square) -> bool:
        """Is the piece on *sq* pinned against its own king?

        Reported regardless of whether the piece could move along the pin
        line, so a knight with a pinner behind it is pinned.
        """
        return self._pin_line(sq) is not None

    def _pin_line(self, sq: Square) -> frozenset[Square] | None:
        """Squares a pinned piece may still occupy, or ``None`` if not pinned.

        The set runs from the square next to the king out to and including
        the pinning piece.
        """
        board = self._board
        piece = board[sq]
        if piece is None or piece.piece_type == PieceType.KING:
            return None
        king_sq = self.find_king(piece.color)
        if king_sq is None:
            return None

        step = piece_rules.line_step(king_sq, sq)
        if step is None:
            return None
        df, dr = step
        pinners = (
            _DIAGONAL_PINNERS if piece_rules.is_diagonal(step) else _ORTHOGONAL_PINNERS
        )

        line: set[Square] = set()

        # Walk from the piece back toward the king: nothing may stand between.
        f, r = file_of(sq) - df, rank_of(sq) - dr
        while (f, r) != (file_of(king_sq), rank_of(king_sq)):
            between = make_square(f, r)
            if board[between] is not None:
                return None
            line.add(between)
            f -= df
            r -= dr

        # Walk past the piece, away from the king, to the first occupant.
        f, r = file_of(sq) + df, rank_of(sq) + dr
        while 0 <= f < 8 and 0 <= r < 8:
            beyond = make_square(f, r)
            line.add(beyond)
            occupant = board[beyond]
            if occupant is not None:
                if occupant.color != piece.color and occupant.piece_type in pinners:
                    line.add(sq)
                    return frozenset(line)
                return None
            f += df
            r += dr
        return None

    # -- Simulation -----------------------------------------------------------

    def _leaves_king_in_check(self, move: Move, color: Color) -> bool:
        clone = self._board.copy()
        clone.make_move(move)
        return MoveGenerator(clone).is_in_check(color)
