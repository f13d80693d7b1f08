"""
Round state machine and tournament scoring.

A round moves between two states: ``AwaitingMove(i)`` asks player ``i``'s move
source for a key, marks it on the board and either hands the turn to ``1 - i``
or ends in ``RoundOver(outcome)`` once the board has a winner or is full.
A tournament plays rounds on one board, alternating the opening player, until
someone reaches the win condition.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .board import Board
from .errors import DuplicateMarker, InvalidKey
from .players import Player
from .policy import Difficulty, choose_move

FIRST_TO_MOVE = 0
WIN_CONDITION = 5

# (board, own marker, opponent marker) -> key
MoveSource = Callable[[Board, str, str], int]


def policy_source(difficulty: "Difficulty | str", rng: np.random.Generator) -> MoveSource:
    tier = Difficulty.parse(difficulty)

    def source(board: Board, me: str, opponent: str) -> int:
        return choose_move(tier, board, me, opponent, rng)

    return source


@dataclass(frozen=True)
class Outcome:
    winner: Optional[Player] = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None


@dataclass(frozen=True)
class AwaitingMove:
    player_index: int


@dataclass(frozen=True)
class RoundOver:
    outcome: Outcome


RoundState = Union[AwaitingMove, RoundOver]


class Round:
    def __init__(
        self,
        board: Board,
        players: Sequence[Player],
        sources: Sequence[MoveSource],
        starting_index: int = FIRST_TO_MOVE,
    ):
        if len(players) != 2 or len(sources) != 2:
            raise ValueError("A round needs exactly two players and two move sources")
        if players[0].marker == players[1].marker:
            raise DuplicateMarker(f"Both players use marker {players[0].marker!r}")
        self.board = board
        self.players = tuple(players)
        self.sources = tuple(sources)
        self.moves: List[Tuple[int, int]] = []
        self.state: RoundState = AwaitingMove(starting_index)
        if board.is_terminal():
            self.state = RoundOver(self._outcome())

    @property
    def is_over(self) -> bool:
        return isinstance(self.state, RoundOver)

    @property
    def outcome(self) -> Optional[Outcome]:
        return self.state.outcome if isinstance(self.state, RoundOver) else None

    def step(self) -> RoundState:
        if isinstance(self.state, RoundOver):
            raise RuntimeError("The round is already over")
        i = self.state.player_index
        player, opponent = self.players[i], self.players[1 - i]
        key = self.sources[i](self.board, player.marker, opponent.marker)
        unmarked = self.board.unmarked_keys()
        if key not in unmarked:
            raise InvalidKey(key, unmarked)
        self.board.set(key, player.marker)
        self.moves.append((i, key))
        logging.debug("%s (%s) marked %d", player.name, player.marker, key)
        if self.board.has_winner() or self.board.is_full():
            self.state = RoundOver(self._outcome())
        else:
            self.state = AwaitingMove(1 - i)
        return self.state

    def play(self) -> Outcome:
        while not isinstance(self.state, RoundOver):
            self.step()
        return self.state.outcome

    def _outcome(self) -> Outcome:
        marker = self.board.winning_marker()
        for player in self.players:
            if player.marker == marker:
                return Outcome(winner=player)
        return Outcome()


class Tournament:
    """First player to ``win_condition`` round wins takes the tournament."""

    def __init__(
        self,
        players: Sequence[Player],
        sources: Sequence[MoveSource],
        win_condition: int = WIN_CONDITION,
        board: Optional[Board] = None,
    ):
        if win_condition < 1:
            raise ValueError(f"win_condition must be positive, got {win_condition}")
        self.players = tuple(players)
        self.sources = tuple(sources)
        self.win_condition = win_condition
        self.board = board if board is not None else Board()
        self.starting_index = FIRST_TO_MOVE
        self.rounds_played = 0
        self.draws = 0

    def reset(self) -> None:
        self.board.reset()
        self.starting_index = FIRST_TO_MOVE
        self.rounds_played = 0
        self.draws = 0
        for player in self.players:
            player.score = 0

    def new_round(self) -> Round:
        self.board.reset()
        return Round(self.board, self.players, self.sources, self.starting_index)

    def record(self, outcome: Outcome) -> None:
        self.rounds_played += 1
        if outcome.winner is None:
            self.draws += 1
        else:
            outcome.winner.score += 1
        logging.debug(
            "round %d: %s; score %s",
            self.rounds_played,
            "draw" if outcome.is_draw else f"{outcome.winner.name} won",
            " ".join(f"{p.name}={p.score}" for p in self.players),
        )
        self.starting_index = 1 - self.starting_index

    def play_round(self) -> Outcome:
        outcome = self.new_round().play()
        self.record(outcome)
        return outcome

    def is_over(self) -> bool:
        return self.champion() is not None

    def champion(self) -> Optional[Player]:
        for player in self.players:
            if player.score >= self.win_condition:
                return player
        return None

    def play(self, max_rounds: Optional[int] = None) -> Optional[Player]:
        """Play rounds until there is a champion; None if max_rounds ran out first.

        Two impossible players only ever draw, so pass max_rounds for them.
        """
        while not self.is_over():
            if max_rounds is not None and self.rounds_played >= max_rounds:
                break
            self.play_round()
        return self.champion()
