"""
Tactics and simple motifs: immediate wins/blocks and forks.
Notes:
- A line is an opportunity for a marker when two of its squares hold that
  marker and the third is unmarked; the unmarked square is the opportunity.
- Blocking squares for one side are the other side's winning squares.
"""
from typing import List, Optional, Sequence

from .board import EMPTY, WINNING_LINES, Board


def completing_square(board: Board, line: Sequence[int], marker: str) -> Optional[int]:
    held = [key for key in line if board[key] == marker]
    if len(held) != len(line) - 1:
        return None
    (rest,) = [key for key in line if key not in held]
    return rest if board[rest] == EMPTY else None


def immediate_winning_moves(board: Board, marker: str) -> List[int]:
    wins: List[int] = []
    for line in WINNING_LINES:
        key = completing_square(board, line, marker)
        # one square can complete two lines at once
        if key is not None and key not in wins:
            wins.append(key)
    return sorted(wins)


def blocking_moves(board: Board, opponent: str) -> List[int]:
    return immediate_winning_moves(board, opponent)


def fork_moves(board: Board, marker: str) -> List[int]:
    forks: List[int] = []
    for key in board.unmarked_keys():
        b = board.clone()
        b.set(key, marker)
        if len(immediate_winning_moves(b, marker)) >= 2:
            forks.append(key)
    return forks


def gives_opponent_immediate_win(board: Board, marker: str, opponent: str, key: int) -> bool:
    if board[key] != EMPTY:
        return False
    b = board.clone()
    b.set(key, marker)
    return len(immediate_winning_moves(b, opponent)) > 0
