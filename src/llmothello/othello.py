"""
Othello rules engine.

- Board model: immutable tuple-of-tuples grid of cells ("B", "W" or None).
- Legality: flips_for() walks the 8 compass rays from a candidate cell and
  collects bracketed opponent discs; can_play()/valid_moves() build on it.
- Application: apply_move() returns a new board with the placed and flipped discs.
- Scoring and game-over detection (neither side has a legal move).

Every function here is pure: boards are never mutated in place.
"""
from __future__ import annotations

from typing import Iterable, List, Literal, NamedTuple, Optional, Tuple

Player = Literal["B", "W"]
Cell = Optional[Player]
Board = Tuple[Tuple[Cell, ...], ...]

BLACK: Player = "B"
WHITE: Player = "W"
EMPTY: Cell = None

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MAX_SIZE = len(LETTERS)

DIRS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class Coord(NamedTuple):
    r: int
    c: int


def empty_board(size: int = 8) -> Board:
    if size <= 0:
        raise ValueError(f"Board size must be positive, got {size}")
    return tuple(tuple(EMPTY for _ in range(size)) for _ in range(size))


def validate_size(size: int) -> int:
    """Return `size` if it is even, positive and nameable in algebraic notation; else ValueError."""
    if size % 2 != 0 or size <= 0:
        raise ValueError(f"Board size must be a positive even number, got {size}")
    if size > MAX_SIZE:
        raise ValueError(f"Board size must be <= {MAX_SIZE}, got {size}")
    return size


def initial_board(size: int = 8) -> Board:
    """Standard opening: White on the main diagonal of the centre 2x2 block, Black on the other.

    Odd sizes have no centre block and are rejected, as are sizes the
    algebraic notation cannot name.
    """
    validate_size(size)
    rows = [list(row) for row in empty_board(size)]
    mid = size // 2
    rows[mid - 1][mid - 1] = WHITE
    rows[mid][mid] = WHITE
    rows[mid - 1][mid] = BLACK
    rows[mid][mid - 1] = BLACK
    return _freeze(rows)


def board_from_rows(rows: Iterable[str]) -> Board:
    """Build a board from text rows such as "..BW....". '.' (or space) is empty."""
    cells: List[List[Cell]] = []
    for line in rows:
        row: List[Cell] = []
        for ch in line:
            if ch in ("B", "W"):
                row.append(ch)  # type: ignore[arg-type]
            elif ch in (".", " "):
                row.append(EMPTY)
            else:
                raise ValueError(f"Unknown cell character {ch!r}")
        cells.append(row)
    if not cells or any(len(r) != len(cells) for r in cells):
        raise ValueError("Board rows must form a non-empty square grid")
    return _freeze(cells)


def _freeze(rows: List[List[Cell]]) -> Board:
    return tuple(tuple(row) for row in rows)


def opponent(player: Player) -> Player:
    return WHITE if player == BLACK else BLACK


# Name used by the game-flow code
next_player = opponent


def in_bounds(board: Board, r: int, c: int) -> bool:
    n = len(board)
    return 0 <= r < n and 0 <= c < n


def flips_for(board: Board, player: Player, move: Coord) -> List[Coord]:
    """Return the opponent discs captured if `player` plays at `move`, in ray order.

    Empty when the move is off the board, the cell is occupied, or no ray
    ends on one of the player's own discs after at least one opponent disc.
    """
    r0, c0 = move
    if not in_bounds(board, r0, c0) or board[r0][c0] is not EMPTY:
        return []
    opp = opponent(player)
    flips: List[Coord] = []
    for dr, dc in DIRS:
        r, c = r0 + dr, c0 + dc
        line: List[Coord] = []
        while in_bounds(board, r, c) and board[r][c] == opp:
            line.append(Coord(r, c))
            r += dr
            c += dc
        if line and in_bounds(board, r, c) and board[r][c] == player:
            flips.extend(line)
    return flips


def can_play(board: Board, player: Player, move: Coord) -> bool:
    return len(flips_for(board, player, move)) > 0


def valid_moves(board: Board, player: Player) -> List[Coord]:
    """All legal moves for `player` in row-major order."""
    n = len(board)
    return [Coord(r, c) for r in range(n) for c in range(n) if can_play(board, player, Coord(r, c))]


def has_valid_move(board: Board, player: Player) -> bool:
    n = len(board)
    return any(can_play(board, player, Coord(r, c)) for r in range(n) for c in range(n))


def apply_move(board: Board, player: Player, move: Coord) -> Board:
    """Place a disc and flip captures, returning a new board.

    An illegal move returns the input board unchanged; callers gate on
    can_play() first so a turn is never dropped silently.
    """
    flips = flips_for(board, player, move)
    if not flips:
        return board
    rows = [list(row) for row in board]
    rows[move[0]][move[1]] = player
    for r, c in flips:
        rows[r][c] = player
    return _freeze(rows)


def score(board: Board) -> Tuple[int, int]:
    """Return (black, white) disc counts."""
    black = sum(cell == BLACK for row in board for cell in row)
    white = sum(cell == WHITE for row in board for cell in row)
    return black, white


def is_game_over(board: Board) -> bool:
    return not has_valid_move(board, BLACK) and not has_valid_move(board, WHITE)
