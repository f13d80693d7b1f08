"""Game settings with environment overrides.

Environment first (``TTT_*`` variables), then the built-in defaults. The
human's name is not a setting that "reset defaults" touches.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Tuple

from .players import COMPUTER_MARKER, COMPUTER_NAME, HUMAN_MARKER, Player, PlayerRegistry
from .policy import DEFAULT_DIFFICULTY, Difficulty
from .session import WIN_CONDITION

Layout = Tuple[Tuple[int, int, int], ...]

STANDARD_LAYOUT: Layout = ((1, 2, 3), (4, 5, 6), (7, 8, 9))
NUM_PAD_LAYOUT: Layout = ((7, 8, 9), (4, 5, 6), (1, 2, 3))
LAYOUTS = {"standard": STANDARD_LAYOUT, "num_pad": NUM_PAD_LAYOUT}
DEFAULT_LAYOUT = "standard"
DEFAULT_HUMAN_NAME = "Player"

_TRUE = {"1", "true", "yes", "on", "y"}


def _env_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE


@dataclass
class Settings:
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    layout: str = DEFAULT_LAYOUT
    human_name: str = DEFAULT_HUMAN_NAME
    computer_name: str = COMPUTER_NAME
    human_marker: str = HUMAN_MARKER
    computer_marker: str = COMPUTER_MARKER
    helper: bool = False
    win_condition: int = WIN_CONDITION

    def __post_init__(self) -> None:
        self.difficulty = Difficulty.parse(self.difficulty)
        if self.layout not in LAYOUTS:
            raise ValueError(f"Unknown layout {self.layout!r}; expected one of {sorted(LAYOUTS)}")
        if self.win_condition < 1:
            raise ValueError(f"win_condition must be positive, got {self.win_condition}")

    @property
    def grid(self) -> Layout:
        return LAYOUTS[self.layout]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """Build settings from ``TTT_*`` variables; explicit non-None overrides win."""
        env = os.environ if environ is None else environ
        values = {}
        mapping = {
            "difficulty": ("TTT_DIFFICULTY", str),
            "layout": ("TTT_LAYOUT", str),
            "human_name": ("TTT_HUMAN_NAME", str),
            "computer_name": ("TTT_COMPUTER_NAME", str),
            "human_marker": ("TTT_HUMAN_MARKER", str),
            "computer_marker": ("TTT_COMPUTER_MARKER", str),
            "helper": ("TTT_HELPER", _env_bool),
            "win_condition": ("TTT_WIN_CONDITION", int),
        }
        for name, (var, convert) in mapping.items():
            raw = env.get(var)
            if raw:
                values[name] = convert(raw)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def is_default(self) -> bool:
        defaults = Settings(human_name=self.human_name)
        return all(getattr(self, f.name) == getattr(defaults, f.name) for f in fields(self))

    def reset_defaults(self) -> None:
        defaults = Settings(human_name=self.human_name)
        for f in fields(self):
            setattr(self, f.name, getattr(defaults, f.name))

    def build_players(self) -> Tuple[PlayerRegistry, Player, Player]:
        registry = PlayerRegistry()
        human = registry.add(self.human_name, self.human_marker)
        computer = registry.add(self.computer_name, self.computer_marker)
        return registry, human, computer
