"""
Board representation, winner/draw checks, serialization and validity.
Notes:
- Squares are keyed 1..9 row-major; internally a list of 9 single-character cells.
- EMPTY (a space) marks an unmarked square. Any other value is a player's marker.
- Markers are opaque: the board only compares them, it never interprets them.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

EMPTY = " "
SIZE = 3
TOTAL_SQUARES = SIZE * SIZE
KEYS = tuple(range(1, TOTAL_SQUARES + 1))

WINNING_LINES = (
    (1, 2, 3), (4, 5, 6), (7, 8, 9),  # rows
    (1, 4, 7), (2, 5, 8), (3, 6, 9),  # columns
    (1, 5, 9), (3, 5, 7),             # diagonals
)

# characters accepted as an empty square in board strings
EMPTY_CHARS = ".-_0 "


class Board:
    """Nine squares, each EMPTY or holding a marker."""

    def __init__(self, cells: Optional[Iterable[str]] = None):
        if cells is None:
            self._cells: List[str] = [EMPTY] * TOTAL_SQUARES
        else:
            self._cells = list(cells)
            if len(self._cells) != TOTAL_SQUARES:
                raise ValueError(f"A board has {TOTAL_SQUARES} squares, got {len(self._cells)}")

    @classmethod
    def from_marks(cls, marks: Dict[int, str]) -> "Board":
        board = cls()
        for key, marker in marks.items():
            board.set(key, marker)
        return board

    def __getitem__(self, key: int) -> str:
        return self._cells[key - 1]

    def __setitem__(self, key: int, marker: str) -> None:
        self.set(key, marker)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Board({serialize_board(self)!r})"

    def set(self, key: int, marker: str) -> None:
        # no legality check: callers only act on unmarked keys
        self._cells[key - 1] = marker

    def cells(self) -> Tuple[str, ...]:
        return tuple(self._cells)

    def unmarked_keys(self) -> List[int]:
        return [key for key, cell in zip(KEYS, self._cells) if cell == EMPTY]

    def count(self, marker: str) -> int:
        return self._cells.count(marker)

    def is_empty(self) -> bool:
        return len(self.unmarked_keys()) == TOTAL_SQUARES

    def is_full(self) -> bool:
        return not self.unmarked_keys()

    def winning_marker(self) -> Optional[str]:
        for line in WINNING_LINES:
            first, second, third = (self._cells[key - 1] for key in line)
            if first != EMPTY and first == second == third:
                return first
        return None

    def has_winner(self) -> bool:
        return self.winning_marker() is not None

    def is_draw(self) -> bool:
        return self.is_full() and not self.has_winner()

    def is_terminal(self) -> bool:
        return self.has_winner() or self.is_full()

    def clone(self) -> "Board":
        return Board(self._cells)

    def reset(self) -> None:
        self._cells = [EMPTY] * TOTAL_SQUARES


def serialize_board(board: Board, empty: str = ".") -> str:
    return ''.join(empty if cell == EMPTY else cell for cell in board.cells())


def parse_board(text: str) -> Board:
    """Parse a 9-character row-major string; '.', '-', '_', '0' or space are empty."""
    if len(text) != TOTAL_SQUARES:
        raise ValueError(f"Board string must have {TOTAL_SQUARES} characters, got {len(text)}")
    return Board(EMPTY if ch in EMPTY_CHARS else ch for ch in text)


def count_lines(board: Board, marker: str) -> int:
    return sum(1 for line in WINNING_LINES if all(board[key] == marker for key in line))


def side_to_move(board: Board, first: str, second: str) -> str:
    """The marker due to play next, given that `first` opened the round."""
    return first if board.count(first) == board.count(second) else second


def is_valid_state(board: Board, first: str, second: str) -> bool:
    """Whether the board is reachable by alternating play with `first` opening."""
    if first == second or EMPTY in (first, second):
        return False
    if any(cell not in (EMPTY, first, second) for cell in board.cells()):
        return False
    n_first, n_second = board.count(first), board.count(second)
    if not (n_first == n_second or n_first == n_second + 1):
        return False
    w = board.winning_marker()
    if w == first and n_first != n_second + 1:
        return False
    if w == second and n_first != n_second:
        return False
    # no double winners
    if count_lines(board, first) > 0 and count_lines(board, second) > 0:
        return False
    return True
