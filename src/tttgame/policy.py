"""
Difficulty-tiered move policies for the computer player.
Tiers:
- easy: uniform over unmarked squares.
- medium: take an immediate win, else block one, else play randomly.
- impossible: immediate win, else a random opening on an empty board, else the
  least-forcing square among the minimax-optimal candidates. Never loses.
Every tie is broken by the injected numpy Generator, so a seeded generator
makes a policy's choice reproducible.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .board import KEYS, Board
from .solver import LOSS, minimax
from .tactics import blocking_moves, immediate_winning_moves


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    IMPOSSIBLE = "impossible"

    @classmethod
    def parse(cls, value: "str | Difficulty") -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        raw = value.strip().lower()
        aliases = {
            "e": cls.EASY, "random": cls.EASY,
            "m": cls.MEDIUM, "heuristic": cls.MEDIUM,
            "i": cls.IMPOSSIBLE, "imposs": cls.IMPOSSIBLE, "optimal": cls.IMPOSSIBLE,
        }
        if raw in aliases:
            return aliases[raw]
        try:
            return cls(raw)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}") from None


DEFAULT_DIFFICULTY = Difficulty.MEDIUM


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def _sample(rng: np.random.Generator, options: Iterable[int]) -> int:
    choices = list(options)
    if not choices:
        raise ValueError("No squares to choose from")
    return int(rng.choice(choices))


def random_move(board: Board, me: str, opponent: str, rng: np.random.Generator) -> int:
    return _sample(rng, board.unmarked_keys())


def heuristic_move(board: Board, me: str, opponent: str, rng: np.random.Generator) -> int:
    wins = immediate_winning_moves(board, me)
    if wins:
        return _sample(rng, wins)
    blocks = blocking_moves(board, opponent)
    if blocks:
        return _sample(rng, blocks)
    return random_move(board, me, opponent, rng)


def is_non_forcing(board: Board, key: int, me: str, opponent: str) -> bool:
    """Whether playing `key` leaves the opponent more than one best reply."""
    b = board.clone()
    b.set(key, me)
    replies, _ = minimax(opponent, b, me)
    return replies is not None and len(replies) > 1


def least_forcing(
    board: Board,
    candidates: Sequence[int],
    me: str,
    opponent: str,
    rng: np.random.Generator,
) -> int:
    if not candidates:
        raise ValueError("least_forcing needs at least one candidate")
    if len(candidates) == 1:
        return candidates[0]
    non_forcing = [key for key in candidates if is_non_forcing(board, key, me, opponent)]
    return _sample(rng, non_forcing or candidates)


def optimal_move(board: Board, me: str, opponent: str, rng: np.random.Generator) -> int:
    if board.is_terminal():
        raise ValueError("No move available on a finished board")
    wins = immediate_winning_moves(board, me)
    if wins:
        return _sample(rng, wins)
    if board.is_empty():
        # every opening draws under perfect play
        return _sample(rng, KEYS)
    candidates, value = minimax(me, board, opponent)
    logging.debug("optimal candidates=%s value=%d", list(candidates), value)
    return least_forcing(board, candidates, me, opponent, rng)


def choose_move(
    difficulty: "Difficulty | str",
    board: Board,
    me: str,
    opponent: str,
    rng: Optional[np.random.Generator] = None,
) -> int:
    """Pick a square for `me` at the given difficulty."""
    tier = Difficulty.parse(difficulty)
    if rng is None:
        rng = make_rng()
    if tier is Difficulty.EASY:
        key = random_move(board, me, opponent, rng)
    elif tier is Difficulty.MEDIUM:
        key = heuristic_move(board, me, opponent, rng)
    else:
        key = optimal_move(board, me, opponent, rng)
    logging.debug("%s policy for %r chose %d", tier.value, me, key)
    return key


def compute_hint(board: Board, me: str, opponent: str) -> List[int]:
    """Squares worth highlighting for `me`.

    All squares on an empty board; otherwise immediate wins, then the
    minimax-optimal set. When every move loses against perfect play, the
    squares that block the opponent's immediate wins are shown instead.
    """
    if board.is_terminal():
        return []
    if board.is_empty():
        return list(KEYS)
    wins = immediate_winning_moves(board, me)
    if wins:
        return wins
    candidates, value = minimax(me, board, opponent)
    if value == LOSS:
        blocks = blocking_moves(board, opponent)
        if blocks:
            return blocks
    return list(candidates)
