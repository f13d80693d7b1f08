"""
Players and the registry that keeps their names and markers distinct.

Both players of a session validate against the same registry, so a marker or
name taken by one is refused for the other (case-insensitively).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .board import EMPTY
from .errors import DuplicateMarker, DuplicateName, InvalidMarker, InvalidName

HUMAN_MARKER = "X"
COMPUTER_MARKER = "O"
COMPUTER_NAME = "TTT NET"


@dataclass(eq=False)
class Player:
    name: str
    marker: str
    score: int = 0

    def __repr__(self) -> str:
        return f"Player(name={self.name!r}, marker={self.marker!r}, score={self.score})"


class PlayerRegistry:
    """The two players of a session."""

    MAX_PLAYERS = 2

    def __init__(self) -> None:
        self._players: List[Player] = []

    def __iter__(self):
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    def add(self, name: str, marker: str) -> Player:
        if len(self._players) >= self.MAX_PLAYERS:
            raise ValueError(f"A session has at most {self.MAX_PLAYERS} players")
        self.check_name(name)
        self.check_marker(marker)
        player = Player(name=name, marker=marker)
        self._players.append(player)
        return player

    def rename(self, player: Player, name: str) -> None:
        self.check_name(name, exclude=player)
        player.name = name

    def change_marker(self, player: Player, marker: str) -> None:
        self.check_marker(marker, exclude=player)
        player.marker = marker

    def opponent_of(self, player: Player) -> Player:
        others = [p for p in self._players if p is not player]
        if len(others) != 1 or len(self._players) != self.MAX_PLAYERS:
            raise ValueError(f"{player.name!r} has no registered opponent")
        return others[0]

    def check_marker(self, marker: str, exclude: Optional[Player] = None) -> None:
        if len(marker) != 1 or marker == EMPTY:
            raise InvalidMarker(f"Marker must be a single character, got {marker!r}")
        for other in self._players:
            if other is not exclude and other.marker.lower() == marker.lower():
                raise DuplicateMarker(f"Marker {marker!r} is taken by {other.name}")

    def check_name(self, name: str, exclude: Optional[Player] = None) -> None:
        if not name.strip():
            raise InvalidName("You must enter a name")
        for other in self._players:
            if other is not exclude and other.name.lower() == name.lower():
                raise DuplicateName(f"Name {name!r} is taken")
