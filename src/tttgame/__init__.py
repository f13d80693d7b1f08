"""tttgame package.

Board, minimax search, difficulty-tiered computer players, and a round /
tournament session, with a small terminal CLI on top.

Convenience imports are exposed for common workflows.
"""

from .board import Board, parse_board, serialize_board
from .policy import Difficulty, choose_move, compute_hint, make_rng
from .session import Round, Tournament, policy_source
from .solver import minimax

__all__ = [
    "Board",
    "parse_board",
    "serialize_board",
    "minimax",
    "Difficulty",
    "choose_move",
    "compute_hint",
    "make_rng",
    "Round",
    "Tournament",
    "policy_source",
]
