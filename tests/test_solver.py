import pytest

from tttgame.board import KEYS, Board, parse_board
from tttgame.solver import DRAW, LOSS, WIN, cache_info, clear_cache, minimax, perfect_choices, score
from tttgame.tactics import immediate_winning_moves


def test_terminal_positions_return_score_and_no_candidates():
    x_win = parse_board("XXX.OO...")
    assert minimax("O", x_win, "X") == (None, LOSS)
    assert minimax("X", x_win, "O") == (None, WIN)

    draw = Board.from_marks({1: "A", 2: "B", 3: "A", 4: "A", 5: "B", 6: "B", 7: "B", 8: "A", 9: "A"})
    assert minimax("A", draw, "B") == (None, DRAW)
    assert minimax("B", draw, "A") == (None, DRAW)


def test_score_is_from_the_mover_side():
    b = parse_board("OOO.XX.X.")
    assert score("O", b, "X") == WIN
    assert score("X", b, "O") == LOSS
    assert score("X", Board(), "O") == DRAW


def test_empty_board_is_draw_and_all_moves_optimal():
    candidates, value = minimax("X", Board(), "O")
    assert value == DRAW
    assert candidates == KEYS


def test_corner_opening_only_centre_holds():
    candidates, value = minimax("O", parse_board("X........"), "X")
    assert value == DRAW
    assert candidates == (5,)


def test_centre_opening_only_corners_hold():
    candidates, value = minimax("O", parse_board("....X...."), "X")
    assert value == DRAW
    assert candidates == (1, 3, 7, 9)


def test_forced_block():
    candidates, value = minimax("O", parse_board("XX..O...."), "X")
    assert candidates == (3,)
    assert value == DRAW


def test_lost_position_keeps_every_move():
    # X threatens 3 and 7 at once
    b = parse_board("XX.X.O.O.")
    candidates, value = minimax("O", b, "X")
    assert value == LOSS
    assert candidates == tuple(b.unmarked_keys())


@pytest.mark.parametrize("raw,mover,opponent", [
    ("XX.OO....", "X", "O"),
    ("XX.OO..X.", "O", "X"),
    ("X.X.OO...", "X", "O"),
])
def test_immediate_win_agrees_with_search(raw, mover, opponent):
    b = parse_board(raw)
    wins = immediate_winning_moves(b, mover)
    candidates, value = minimax(mover, b, opponent)
    assert wins
    assert value == WIN
    assert set(wins) <= set(candidates)


def test_value_is_negated_child_score():
    b = parse_board("X...O..X.")
    candidates, value = minimax("O", b, "X")
    for key in b.unmarked_keys():
        child = b.clone()
        child.set(key, "O")
        _, child_score = minimax("X", child, "O")
        if key in candidates:
            assert -child_score == value
        else:
            assert -child_score < value


def test_search_leaves_board_untouched():
    b = parse_board("X...O....")
    before = b.clone()
    minimax("X", b, "O")
    assert b == before


def test_candidates_ascending():
    candidates, _ = minimax("X", parse_board("X...O...."), "O")
    assert list(candidates) == sorted(candidates)


def test_perfect_choices_keeps_ties():
    assert perfect_choices([0, 10, -10, 10]) == [1, 3]
    assert perfect_choices([-10, -10]) == [0, 1]


def test_cache_does_not_change_results():
    b = parse_board("X...O...X")
    warm = minimax("O", b, "X")
    clear_cache()
    assert cache_info().currsize == 0
    cold = minimax("O", b, "X")
    assert warm == cold
    assert cache_info().currsize > 0


def test_markers_are_opaque():
    # same position with other symbols gives the same answer
    a = minimax("O", parse_board("X........"), "X")
    b = minimax("#", parse_board("@........"), "@")
    assert a == b
