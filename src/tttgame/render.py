"""Plain-text views of a board for the terminal."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .board import Board

RED = "\x1b[31m"
RESET = "\x1b[0m"
TAKEN = "_"


def red(text: str) -> str:
    return f"{RED}{text}{RESET}"


def render_board(board: Board, layout: Sequence[Sequence[int]]) -> str:
    """The grid as drawn during play, rows taken from ``layout``."""
    blocks: List[str] = []
    for row in layout:
        cells = "|".join(f"  {board[key]}  " for key in row)
        pad = "|".join(" " * 5 for _ in row)
        blocks.append("\n".join([pad, cells, pad]))
    return "\n-----+-----+-----\n".join(blocks)


def render_available(
    board: Board,
    layout: Sequence[Sequence[int]],
    highlights: Iterable[int] = (),
    color: bool = True,
) -> str:
    """Unmarked squares by key, taken squares as ``_``; highlighted keys in red
    (or bracketed when color is off)."""
    marked = set(highlights)
    unmarked = set(board.unmarked_keys())
    lines: List[str] = []
    for row in layout:
        shown: List[str] = []
        for key in row:
            if key not in unmarked:
                shown.append(TAKEN)
            elif key in marked:
                shown.append(red(str(key)) if color else f"[{key}]")
            else:
                shown.append(str(key))
        lines.append(" ".join(shown))
    return "\n".join(lines)
