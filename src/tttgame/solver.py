"""
Exhaustive minimax search, scored from the side-to-move perspective.
Scoring:
- +10 when the mover holds a winning line, -10 when the opponent does, 0 otherwise.
- A move's value is the negation of the child position's score (10 <-> -10, 0 <-> 0).
- Every key reaching the best value is kept; ties are not broken here so that
  policies can choose among the full optimal set.
Results depend only on (cells, mover, opponent) and are memoized on that key.
"""
import logging
from functools import lru_cache
from typing import List, Optional, Tuple

from .board import Board

WIN = 10
DRAW = 0
LOSS = -10

SearchResult = Tuple[Optional[Tuple[int, ...]], int]


def score(mover: str, board: Board, opponent: str) -> int:
    w = board.winning_marker()
    if w == mover:
        return WIN
    if w == opponent:
        return LOSS
    return DRAW


def reverse(value: int) -> int:
    return -value


def perfect_choices(values: List[int]) -> List[int]:
    """Indices of every entry equal to the maximum."""
    best = max(values)
    return [i for i, v in enumerate(values) if v == best]


@lru_cache(maxsize=None)
def _search(cells: Tuple[str, ...], mover: str, opponent: str) -> SearchResult:
    board = Board(cells)
    if board.has_winner() or board.is_full():
        return None, score(mover, board, opponent)
    keys: List[int] = []
    child_scores: List[int] = []
    for key in board.unmarked_keys():
        child = board.clone()
        child.set(key, mover)
        _, child_score = _search(child.cells(), opponent, mover)
        keys.append(key)
        child_scores.append(child_score)
    values = [reverse(s) for s in child_scores]
    tied = perfect_choices(values)
    # all tied child scores are equal, any one of them gives the node's value
    return tuple(keys[i] for i in tied), reverse(child_scores[tied[0]])


def minimax(mover: str, board: Board, opponent: str) -> SearchResult:
    """Return (candidate keys or None on a terminal board, score for `mover`)."""
    return _search(board.cells(), mover, opponent)


def cache_info():
    return _search.cache_info()


def clear_cache() -> None:
    logging.debug("Clearing search cache (%s)", _search.cache_info())
    _search.cache_clear()
