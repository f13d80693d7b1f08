import itertools
import logging

import pytest

from tttgame.cli import main


@pytest.fixture
def info_logs(caplog):
    caplog.set_level(logging.INFO)
    return caplog


def test_solve_reports_candidates(info_logs):
    assert main(["solve", "--board", "X........"]) == 0
    assert "to_move=O score=0 candidates=[5]" in info_logs.text


def test_solve_custom_markers(info_logs):
    assert main(["solve", "--board", "@........", "--markers", "@", "#"]) == 0
    assert "to_move=# score=0 candidates=[5]" in info_logs.text


def test_solve_stdin_streams_csv(monkeypatch, capsys):
    import io

    monkeypatch.setattr("sys.stdin", io.StringIO("X........\nbad\n\nXXXXXXXXX\n....X....\n"))
    assert main(["solve", "--stdin"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "board,to_move,score,candidates"
    assert lines[1] == "X........,O,0,5"
    assert lines[2] == "....X....,O,0,1 3 7 9"
    assert len(lines) == 3


def test_hint_and_tactics(info_logs):
    assert main(["hint", "--board", "XX.X.O.O."]) == 0
    assert "hint=[3, 7]" in info_logs.text
    assert main(["tactics", "--board", "XX.OO...."]) == 0
    assert "to_move=X wins=[3] blocks=[6]" in info_logs.text


@pytest.mark.parametrize("bad", ["abc", "XXXXXXXXX", "OO.......", "XXXOOO...", "X...Z...."])
@pytest.mark.parametrize("cmd", ["solve", "hint", "tactics"])
def test_invalid_boards_exit_2(cmd, bad, caplog):
    assert main([cmd, "--board", bad]) == 2
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_simulate_optimal_never_loses(info_logs):
    argv = ["--seed", "3", "simulate", "--first", "easy", "--second", "impossible",
            "--tournaments", "3", "--win-condition", "2"]
    assert main(argv) == 0
    assert "rounds: first=0" in info_logs.text


def test_simulate_rejects_bad_counts(caplog):
    assert main(["simulate", "--tournaments", "0"]) == 2


def test_version_and_info(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip()
    assert main(["--info"]) == 0
    assert "numpy=" in capsys.readouterr().out


def _scripted_input(first=()):
    digits = itertools.cycle("123456789")
    queued = list(first)

    def fake_input(prompt=""):
        if "again" in prompt:
            return "n"
        if queued:
            return queued.pop(0)
        return next(digits)

    return fake_input


def test_play_against_impossible(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", _scripted_input())
    argv = ["--seed", "4", "play", "--difficulty", "impossible", "--win-condition", "1",
            "--no-color", "--name", "Tester"]
    assert main(argv) == 0
    out = capsys.readouterr().out
    assert "First player to win 1 rounds" in out
    assert "You won!" not in out
    assert "won the tournament!" in out or "Goodbye" in out


def test_play_helper_highlights(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", _scripted_input(["help", "q"]))
    assert main(["play", "--helper", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert "[5]" in out
    assert "Goodbye" in out


def test_play_rejects_duplicate_markers(monkeypatch, caplog):
    monkeypatch.setattr("builtins.input", _scripted_input())
    assert main(["play", "--marker", "O"]) == 2
    assert "Invalid settings" in caplog.text


def test_play_reprompts_on_invalid_square(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", _scripted_input(["0", "ten", "quit"]))
    assert main(["play", "--no-color"]) == 0
    out = capsys.readouterr().out
    assert out.count("Sorry, that's not a valid choice.") == 2
