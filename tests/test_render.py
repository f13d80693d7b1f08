import io
import time

from tttgame.board import parse_board
from tttgame.config import NUM_PAD_LAYOUT, STANDARD_LAYOUT
from tttgame.render import RED, render_available, render_board
from tttgame.spinner import loading


def test_render_board_rows_follow_layout():
    b = parse_board("X.......O")
    standard = render_board(b, STANDARD_LAYOUT).splitlines()
    num_pad = render_board(b, NUM_PAD_LAYOUT).splitlines()
    assert len(standard) == 11
    assert standard[1].startswith("  X  |")
    assert standard[9].endswith("|  O  ")
    # num pad puts key 7..9 on top
    assert num_pad[1].endswith("|  O  ")
    assert num_pad[9].startswith("  X  |")


def test_render_available_marks_taken_squares():
    b = parse_board("X...O....")
    assert render_available(b, STANDARD_LAYOUT, color=False) == "_ 2 3\n4 _ 6\n7 8 9"


def test_render_available_highlights():
    b = parse_board("X...O....")
    plain = render_available(b, STANDARD_LAYOUT, highlights=[3, 7], color=False)
    assert plain.splitlines()[0] == "_ 2 [3]"
    colored = render_available(b, STANDARD_LAYOUT, highlights=[3], color=True)
    assert f"{RED}3" in colored


def test_loading_writes_frames_while_running():
    out = io.StringIO()
    with loading(out, label="SEARCHING"):
        time.sleep(0.25)
    assert "SEARCHING" in out.getvalue()


def test_loading_disabled_is_silent():
    out = io.StringIO()
    with loading(out, enabled=False):
        value = 42
    assert value == 42
    assert out.getvalue() == ""
