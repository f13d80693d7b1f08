from tttgame.board import parse_board
from tttgame.tactics import (
    blocking_moves,
    completing_square,
    fork_moves,
    gives_opponent_immediate_win,
    immediate_winning_moves,
)


def test_completing_square_needs_two_of_three_and_a_gap():
    b = parse_board("XX.O.....")
    assert completing_square(b, (1, 2, 3), "X") == 3
    assert completing_square(b, (1, 4, 7), "X") is None
    b.set(3, "O")
    assert completing_square(b, (1, 2, 3), "X") is None


def test_square_completing_two_lines_is_listed_once():
    # 3 completes both the top row and the right column
    b = parse_board("XX...X..X")
    assert immediate_winning_moves(b, "X") == [3, 5]


def test_blocks_are_opponent_wins():
    b = parse_board("OO.X.....")
    assert blocking_moves(b, "O") == [3]
    assert immediate_winning_moves(b, "X") == []


def test_fork_moves():
    # X on opposite corners, O in the centre: X to 3 or 7 threatens two lines
    b = parse_board("X...O...X")
    assert fork_moves(b, "X") == [3, 7]


def test_gives_opponent_immediate_win():
    b = parse_board("OO.X.....")
    assert gives_opponent_immediate_win(b, "X", "O", 5)
    assert not gives_opponent_immediate_win(b, "X", "O", 3)
    assert not gives_opponent_immediate_win(b, "X", "O", 1)
