"""Per-piece movement rules.

Each piece type maps to a pair of pure functions: one that validates a single
destination and one that enumerates pseudo-legal moves.  Both are looked up
through dispatch tables keyed by :class:`PieceType`, so there is exactly one
rule implementation per kind.

Pseudo-legal here means: geometry, blocking and capture rules hold, but the
mover's own king may still be left in check.  Legality is layered on top by
:class:`chessai.core.move_generator.MoveGenerator`.
"""

from __future__ import annotations

from collections.abc import Callable

from chessai.core.board import Board
from chessai.core.enums import Color, PieceType
from chessai.core.move import PROMOTION_TYPES, Move
from chessai.core.piece import Piece
from chessai.core.types import Square, file_of, is_valid_square, make_square, rank_of

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

# (file delta, rank delta)
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_PAWN_DIRECTION: tuple[int, int] = (1, -1)  # [color] -> rank delta
_PAWN_START_RANK: tuple[int, int] = (1, 6)
_PAWN_LAST_RANK: tuple[int, int] = (7, 0)
_KING_HOME: tuple[Square, Square] = (make_square(4, 0), make_square(4, 7))


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


# -- Geometry helpers -------------------------------------------------------


def line_step(from_sq: Square, to_sq: Square) -> tuple[int, int] | None:
    """Unit (file, rank) step from *from_sq* toward *to_sq* along a rank,
    file or diagonal; ``None`` when the squares are not aligned."""
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    if df == 0 and dr == 0:
        return None
    if df != 0 and dr != 0 and abs(df) != abs(dr):
        return None
    return ((df > 0) - (df < 0), (dr > 0) - (dr < 0))


def is_diagonal(step: tuple[int, int]) -> bool:
    return step[0] != 0 and step[1] != 0


def _path_clear(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Whether every square strictly between two aligned squares is empty."""
    step = line_step(from_sq, to_sq)
    assert step is not None
    delta = step[1] * 8 + step[0]
    sq = from_sq + delta
    while sq != to_sq:
        if board[sq] is not None:
            return False
        sq += delta
    return True


def _slides_to(
    board: Board, from_sq: Square, to_sq: Square, diagonal: bool, orthogonal: bool
) -> bool:
    step = line_step(from_sq, to_sq)
    if step is None:
        return False
    if is_diagonal(step) and not diagonal:
        return False
    if not is_diagonal(step) and not orthogonal:
        return False
    return _path_clear(board, from_sq, to_sq)


# -- Attack detection -------------------------------------------------------


def _pawn_reaches(board: Board, from_sq: Square, to_sq: Square, color: Color) -> bool:
    return rank_of(to_sq) - rank_of(from_sq) == _PAWN_DIRECTION[int(color)] and (
        abs(file_of(to_sq) - file_of(from_sq)) == 1
    )


def _knight_reaches(
    board: Board, from_sq: Square, to_sq: Square, color: Color
) -> bool:
    return to_sq in _KNIGHT_TARGETS[from_sq]


def _bishop_reaches(
    board: Board, from_sq: Square, to_sq: Square, color: Color
) -> bool:
    return _slides_to(board, from_sq, to_sq, diagonal=True, orthogonal=False)


def _rook_reaches(board: Board, from_sq: Square, to_sq: Square, color: Color) -> bool:
    return _slides_to(board, from_sq, to_sq, diagonal=False, orthogonal=True)


def _queen_reaches(
    board: Board, from_sq: Square, to_sq: Square, color: Color
) -> bool:
    return _slides_to(board, from_sq, to_sq, diagonal=True, orthogonal=True)


def _king_reaches(board: Board, from_sq: Square, to_sq: Square, color: Color) -> bool:
    return to_sq in _KING_TARGETS[from_sq]


_Reach = Callable[[Board, Square, Square, Color], bool]

_REACHES: dict[PieceType, _Reach] = {
    PieceType.PAWN: _pawn_reaches,
    PieceType.KNIGHT: _knight_reaches,
    PieceType.BISHOP: _bishop_reaches,
    PieceType.ROOK: _rook_reaches,
    PieceType.QUEEN: _queen_reaches,
    PieceType.KING: _king_reaches,
}


def attacks(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Does the piece on *from_sq* attack *to_sq*, whatever stands there?

    Pawns attack diagonally forward only; kings attack adjacent squares only
    (castling never counts as an attack).
    """
    piece = board[from_sq]
    if piece is None or from_sq == to_sq:
        return False
    return _REACHES[piece.piece_type](board, from_sq, to_sq, piece.color)


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?

    Looks outward from *sq* rather than asking every enemy piece, which
    gives the same answer for a fraction of the work.
    """
    # A pawn of by_color attacks sq from one rank behind it.
    pawn_rank = rank_of(sq) - _PAWN_DIRECTION[int(by_color)]
    if 0 <= pawn_rank < 8:
        for df in (-1, 1):
            pawn_file = file_of(sq) + df
            if 0 <= pawn_file < 8:
                piece = board[make_square(pawn_file, pawn_rank)]
                if (
                    piece is not None
                    and piece.color == by_color
                    and piece.piece_type == PieceType.PAWN
                ):
                    return True

    for from_sq in _KNIGHT_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KNIGHT
        ):
            return True

    for from_sq in _KING_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KING
        ):
            return True

    for ray in _BISHOP_RAYS[sq]:
        for from_sq in ray:
            piece = board[from_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in (
                PieceType.BISHOP,
                PieceType.QUEEN,
            ):
                return True
            break

    for ray in _ROOK_RAYS[sq]:
        for from_sq in ray:
            piece = board[from_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in (
                PieceType.ROOK,
                PieceType.QUEEN,
            ):
                return True
            break

    return False


# -- Single-destination validity -------------------------------------------


def _en_passant_victim(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Whether *to_sq* is the en-passant target with an enemy pawn behind it."""
    if to_sq != board.en_passant:
        return False
    mover = board[from_sq]
    victim = board[make_square(file_of(to_sq), rank_of(from_sq))]
    return (
        mover is not None
        and victim is not None
        and victim.piece_type == PieceType.PAWN
        and victim.color != mover.color
    )


def _valid_pawn(
    board: Board,
    from_sq: Square,
    to_sq: Square,
    piece: Piece,
    promotion: PieceType | None,
) -> bool:
    color_idx = int(piece.color)
    direction = _PAWN_DIRECTION[color_idx]
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)
    target = board[to_sq]

    if df == 0:
        if target is not None:
            return False
        if dr == direction:
            reached = True
        elif dr == 2 * direction and rank_of(from_sq) == _PAWN_START_RANK[color_idx]:
            reached = board[from_sq + 8 * direction] is None
        else:
            reached = False
    elif abs(df) == 1 and dr == direction:
        reached = target is not None or _en_passant_victim(board, from_sq, to_sq)
    else:
        reached = False

    if not reached:
        return False
    if rank_of(to_sq) == _PAWN_LAST_RANK[color_idx]:
        return promotion in PROMOTION_TYPES
    return promotion is None


def _valid_king(
    board: Board,
    from_sq: Square,
    to_sq: Square,
    piece: Piece,
    promotion: PieceType | None,
) -> bool:
    if to_sq in _KING_TARGETS[from_sq]:
        return True
    return _valid_castle(board, from_sq, to_sq, piece)


def _valid_castle(board: Board, king_sq: Square, to_sq: Square, king: Piece) -> bool:
    """Two-file king move from its home square toward an unmoved corner rook."""
    color_idx = int(king.color)
    if king.has_moved or king_sq != _KING_HOME[color_idx]:
        return False
    if rank_of(to_sq) != rank_of(king_sq):
        return False
    df = file_of(to_sq) - file_of(king_sq)
    if abs(df) != 2:
        return False

    rook_sq = make_square(7 if df > 0 else 0, rank_of(king_sq))
    rook = board[rook_sq]
    if (
        rook is None
        or rook.color != king.color
        or rook.piece_type != PieceType.ROOK
        or rook.has_moved
    ):
        return False
    if not _path_clear(board, king_sq, rook_sq):
        return False

    opponent = king.color.opposite
    pass_sq = king_sq + (1 if df > 0 else -1)
    return not any(
        is_square_attacked(board, sq, opponent) for sq in (king_sq, pass_sq, to_sq)
    )


def _geometric_validator(reach: _Reach) -> Callable[..., bool]:
    def validate(
        board: Board,
        from_sq: Square,
        to_sq: Square,
        piece: Piece,
        promotion: PieceType | None,
    ) -> bool:
        return reach(board, from_sq, to_sq, piece.color)

    return validate


_VALIDATORS: dict[PieceType, Callable[..., bool]] = {
    PieceType.PAWN: _valid_pawn,
    PieceType.KNIGHT: _geometric_validator(_knight_reaches),
    PieceType.BISHOP: _geometric_validator(_bishop_reaches),
    PieceType.ROOK: _geometric_validator(_rook_reaches),
    PieceType.QUEEN: _geometric_validator(_queen_reaches),
    PieceType.KING: _valid_king,
}


def is_valid_move(
    board: Board,
    from_sq: Square,
    to_sq: Square,
    promotion: PieceType | None = None,
) -> bool:
    """Pseudo-legal check for moving the piece on *from_sq* to *to_sq*."""
    if not (is_valid_square(from_sq) and is_valid_square(to_sq)):
        return False
    if from_sq == to_sq:
        return False
    piece = board[from_sq]
    if piece is None:
        return False
    target = board[to_sq]
    if target is not None and target.color == piece.color:
        return False
    if promotion is not None and piece.piece_type != PieceType.PAWN:
        return False
    return _VALIDATORS[piece.piece_type](board, from_sq, to_sq, piece, promotion)


# -- Pseudo-legal generation -----------------------------------------------


def _add_pawn_move(
    moves: list[Move], from_sq: Square, to_sq: Square, color: Color
) -> None:
    if rank_of(to_sq) == _PAWN_LAST_RANK[int(color)]:
        for pt in PROMOTION_TYPES:
            moves.append(Move(from_sq, to_sq, pt))
    else:
        moves.append(Move(from_sq, to_sq))


def _gen_pawn(board: Board, sq: Square, piece: Piece) -> list[Move]:
    moves: list[Move] = []
    color = piece.color
    direction = _PAWN_DIRECTION[int(color)]
    file_idx = file_of(sq)
    next_rank = rank_of(sq) + direction
    if not 0 <= next_rank < 8:
        return moves

    one_step = make_square(file_idx, next_rank)
    if board.is_empty(one_step):
        _add_pawn_move(moves, sq, one_step, color)
        if rank_of(sq) == _PAWN_START_RANK[int(color)]:
            two_step = one_step + 8 * direction
            if board.is_empty(two_step):
                moves.append(Move(sq, two_step))

    for df in (-1, 1):
        cap_file = file_idx + df
        if not 0 <= cap_file < 8:
            continue
        cap_sq = make_square(cap_file, next_rank)
        target = board[cap_sq]
        if target is not None:
            if target.color != color:
                _add_pawn_move(moves, sq, cap_sq, color)
        elif _en_passant_victim(board, sq, cap_sq):
            moves.append(Move(sq, cap_sq))
    return moves


def _gen_knight(board: Board, sq: Square, piece: Piece) -> list[Move]:
    moves: list[Move] = []
    for to_sq in _KNIGHT_TARGETS[sq]:
        target = board[to_sq]
        if target is None or target.color != piece.color:
            moves.append(Move(sq, to_sq))
    return moves


def _sliding_generator(
    rays: tuple[tuple[tuple[Square, ...], ...], ...],
) -> Callable[[Board, Square, Piece], list[Move]]:
    def generate(board: Board, sq: Square, piece: Piece) -> list[Move]:
        moves: list[Move] = []
        for ray in rays[sq]:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != piece.color:
                    moves.append(Move(sq, to_sq))
                break
        return moves

    return generate


def _gen_king(board: Board, sq: Square, piece: Piece) -> list[Move]:
    moves: list[Move] = []
    for to_sq in _KING_TARGETS[sq]:
        target = board[to_sq]
        if target is None or target.color != piece.color:
            moves.append(Move(sq, to_sq))

    if not piece.has_moved and sq == _KING_HOME[int(piece.color)]:
        for to_sq in (sq + 2, sq - 2):
            if _valid_castle(board, sq, to_sq, piece):
                moves.append(Move(sq, to_sq))
    return moves


_GENERATORS: dict[PieceType, Callable[[Board, Square, Piece], list[Move]]] = {
    PieceType.PAWN: _gen_pawn,
    PieceType.KNIGHT: _gen_knight,
    PieceType.BISHOP: _sliding_generator(_BISHOP_RAYS),
    PieceType.ROOK: _sliding_generator(_ROOK_RAYS),
    PieceType.QUEEN: _sliding_generator(_QUEEN_RAYS),
    PieceType.KING: _gen_king,
}


def pseudo_legal_moves(board: Board, sq: Square) -> list[Move]:
    """All pseudo-legal moves of the piece on *sq* (empty if none there)."""
    piece = board[sq]
    if piece is None:
        return []
    return _GENERATORS[piece.piece_type](board, sq, piece)
