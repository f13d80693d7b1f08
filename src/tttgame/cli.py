from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO

import numpy as np

from .board import Board, is_valid_state, parse_board, serialize_board, side_to_move
from .config import LAYOUTS, Settings
from .players import Player, PlayerRegistry
from .policy import Difficulty, compute_hint, make_rng
from .render import render_available, render_board
from .session import AwaitingMove, Outcome, Tournament, policy_source
from .solver import cache_info, minimax
from .spinner import loading
from .tactics import blocking_moves, fork_moves, gives_opponent_immediate_win, immediate_winning_moves
from .tracking import log_metrics, log_params, maybe_mlflow_run

DIFFICULTIES = [d.value for d in Difficulty]
HELP_WORDS = {"help", "h", "?", "+"}
QUIT_WORDS = {"quit", "q", "exit"}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe against the computer")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--info", action="store_true", help="Print environment and dependency info and exit")
    p.add_argument("--seed", type=int, default=None, help="Seed for every random tie-break")

    # play
    p_play = sub.add_parser("play", help="Play a tournament against the computer")
    p_play.add_argument("--difficulty", choices=DIFFICULTIES, default=None,
                        help="Computer strength (default: medium, or TTT_DIFFICULTY)")
    p_play.add_argument("--layout", choices=sorted(LAYOUTS), default=None,
                        help="Square numbering: standard (1 top-left) or num_pad (7 top-left)")
    p_play.add_argument("--name", default=None, help="Your name")
    p_play.add_argument("--opponent-name", default=None, help="The computer's name")
    p_play.add_argument("--marker", default=None, help="Your marker (one character)")
    p_play.add_argument("--opponent-marker", default=None, help="The computer's marker (one character)")
    p_play.add_argument("--helper", action="store_true", default=None,
                        help="Allow 'help' during your turn to highlight good squares")
    p_play.add_argument("--win-condition", type=int, default=None,
                        help="Rounds needed to win the tournament (default: 5)")
    p_play.add_argument("--no-color", action="store_true", help="Disable ANSI colors")

    # analysis commands share board options
    for name, text in [
        ("solve", "Minimax candidates and score for the side to move"),
        ("hint", "Squares the helper would highlight for the side to move"),
        ("tactics", "Immediate wins, blocks and forks for the side to move"),
    ]:
        sp = sub.add_parser(name, help=text)
        sp.add_argument("--board", help="9 characters row-major, '.' for empty, e.g. X...O....")
        sp.add_argument("--markers", nargs=2, default=["X", "O"], metavar=("FIRST", "SECOND"),
                        help="Marker that opened the round, then the other (default: X O)")
        if name == "solve":
            sp.add_argument("--stdin", action="store_true",
                            help="Read many boards from stdin and stream CSV output")

    # simulate
    p_sim = sub.add_parser("simulate", help="Play computer-vs-computer tournaments")
    p_sim.add_argument("--first", choices=DIFFICULTIES, default="medium", help="Tier of the first player")
    p_sim.add_argument("--second", choices=DIFFICULTIES, default="impossible", help="Tier of the second player")
    p_sim.add_argument("--tournaments", type=int, default=10, help="Number of tournaments")
    p_sim.add_argument("--win-condition", type=int, default=5, help="Rounds needed to win a tournament")
    p_sim.add_argument("--max-rounds", type=int, default=50,
                       help="Stop a tournament after this many rounds (draw-heavy pairings)")
    p_sim.add_argument("--tracking", choices=["none", "mlflow"], default="none",
                       help="Experiment tracking backend")
    p_sim.add_argument("--log-dir", default=None, help="Directory for local mlflow runs")

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _load_board(raw: Optional[str], markers: Sequence[str]) -> Optional[Board]:
    first, second = markers
    raw = (raw or "").strip()
    try:
        board = parse_board(raw)
    except ValueError as exc:
        logging.error("Invalid board string: %s", exc)
        return None
    if not is_valid_state(board, first, second):
        logging.error("Board is not a valid reachable state for markers %s/%s.", first, second)
        return None
    return board


def _cmd_solve(ns: argparse.Namespace) -> int:
    first, second = ns.markers
    if ns.stdin:
        import csv as _csv

        w = _csv.writer(sys.stdout)
        w.writerow(["board", "to_move", "score", "candidates"])
        for line in sys.stdin:
            raw = line.strip()
            if not raw:
                continue
            try:
                board = parse_board(raw)
            except ValueError:
                continue
            if not is_valid_state(board, first, second):
                continue
            me = side_to_move(board, first, second)
            opp = second if me == first else first
            candidates, value = minimax(me, board, opp)
            w.writerow([serialize_board(board), me, value, ' '.join(map(str, candidates or ()))])
        return 0
    board = _load_board(ns.board, ns.markers)
    if board is None:
        return 2
    me = side_to_move(board, first, second)
    opp = second if me == first else first
    candidates, value = minimax(me, board, opp)
    logging.info("to_move=%s score=%d candidates=%s", me, value, list(candidates or ()))
    logging.debug("search cache: %s", cache_info())
    return 0


def _cmd_hint(ns: argparse.Namespace) -> int:
    board = _load_board(ns.board, ns.markers)
    if board is None:
        return 2
    first, second = ns.markers
    me = side_to_move(board, first, second)
    opp = second if me == first else first
    logging.info("to_move=%s hint=%s", me, compute_hint(board, me, opp))
    return 0


def _cmd_tactics(ns: argparse.Namespace) -> int:
    board = _load_board(ns.board, ns.markers)
    if board is None:
        return 2
    first, second = ns.markers
    me = side_to_move(board, first, second)
    opp = second if me == first else first
    unsafe = [k for k in board.unmarked_keys() if gives_opponent_immediate_win(board, me, opp, k)]
    logging.info(
        "to_move=%s wins=%s blocks=%s forks=%s unsafe=%s",
        me,
        immediate_winning_moves(board, me),
        blocking_moves(board, opp),
        fork_moves(board, me),
        unsafe,
    )
    return 0


def _cmd_simulate(ns: argparse.Namespace, rng: np.random.Generator) -> int:
    if ns.tournaments < 1 or ns.win_condition < 1 or ns.max_rounds < 1:
        logging.error("--tournaments, --win-condition and --max-rounds must be positive")
        return 2
    tiers = [Difficulty.parse(ns.first), Difficulty.parse(ns.second)]
    log_dir = Path(ns.log_dir) if ns.log_dir else None
    rounds = {"first": 0, "second": 0, "draw": 0}
    titles = {"first": 0, "second": 0, "unfinished": 0}
    with maybe_mlflow_run(ns.tracking == "mlflow", run_name="simulate", log_dir=log_dir) as active:
        log_params({
            "first": tiers[0].value,
            "second": tiers[1].value,
            "tournaments": ns.tournaments,
            "win_condition": ns.win_condition,
            "seed": ns.seed,
        }, active=active)
        for _ in range(ns.tournaments):
            registry = PlayerRegistry()
            players = [
                registry.add(f"first ({tiers[0].value})", "X"),
                registry.add(f"second ({tiers[1].value})", "O"),
            ]
            sources = [policy_source(t, rng) for t in tiers]
            tournament = Tournament(players, sources, win_condition=ns.win_condition)
            champion = tournament.play(max_rounds=ns.max_rounds)
            rounds["first"] += players[0].score
            rounds["second"] += players[1].score
            rounds["draw"] += tournament.draws
            if champion is None:
                titles["unfinished"] += 1
            else:
                titles["first" if champion is players[0] else "second"] += 1
        logging.info(
            "rounds: first=%d second=%d draw=%d | tournaments: first=%d second=%d unfinished=%d",
            rounds["first"], rounds["second"], rounds["draw"],
            titles["first"], titles["second"], titles["unfinished"],
        )
        log_metrics({f"rounds_{k}": float(v) for k, v in rounds.items()}, active=active)
        log_metrics({f"tournaments_{k}": float(v) for k, v in titles.items()}, active=active)
    # the impossible tier must never lose a round
    if tiers[0] is Difficulty.IMPOSSIBLE and rounds["second"] > 0:
        logging.error("impossible player lost %d round(s)", rounds["second"])
        return 1
    if tiers[1] is Difficulty.IMPOSSIBLE and rounds["first"] > 0:
        logging.error("impossible player lost %d round(s)", rounds["first"])
        return 1
    return 0


class QuitGame(Exception):
    pass


class InteractiveGame:
    """Terminal tournament between the user and the computer."""

    def __init__(
        self,
        settings: Settings,
        human: Player,
        computer: Player,
        rng: np.random.Generator,
        read: Callable[[str], str],
        out: TextIO,
        color: bool = True,
    ):
        self.settings = settings
        self.human = human
        self.computer = computer
        self.read = read
        self.out = out
        self.color = color
        self.animate = color and out.isatty()
        self._policy = policy_source(settings.difficulty, rng)
        self.tournament = Tournament(
            [human, computer],
            [self.human_moves, self.computer_moves],
            win_condition=settings.win_condition,
        )

    def say(self, text: str = "") -> None:
        print(text, file=self.out)

    def ask(self, prompt: str = "=> ") -> str:
        return self.read(prompt).strip()

    def human_moves(self, board: Board, me: str, opponent: str) -> int:
        grid = self.settings.grid
        self.say("Choose a square")
        if self.settings.helper:
            self.say("(Confused? Enter 'help' for guidance)")
        self.say(render_available(board, grid, color=self.color))
        helped = False
        while True:
            answer = self.ask()
            if answer.lower() in QUIT_WORDS:
                raise QuitGame()
            if answer.lower() in HELP_WORDS and self.settings.helper and not helped:
                with loading(self.out, enabled=self.animate):
                    hint = compute_hint(board, me, opponent)
                self.say(render_available(board, grid, highlights=hint, color=self.color))
                helped = True
                continue
            try:
                key = int(answer)
            except ValueError:
                key = None
            if key in board.unmarked_keys():
                return key
            self.say("Sorry, that's not a valid choice.")

    def computer_moves(self, board: Board, me: str, opponent: str) -> int:
        thinking = self.animate and self.settings.difficulty is Difficulty.IMPOSSIBLE
        with loading(self.out, enabled=thinking):
            key = self._policy(board, me, opponent)
        self.say(f"{self.computer.name} chose {key}")
        return key

    def display_board(self) -> None:
        self.say()
        self.say(f"You're a {self.human.marker}. {self.computer.name} is a {self.computer.marker}")
        self.say(f"Your score: {self.human.score}. {self.computer.name}'s score: {self.computer.score}")
        self.say()
        self.say(render_board(self.tournament.board, self.settings.grid))
        self.say()

    def display_result(self, outcome: Outcome) -> None:
        if outcome.winner is self.human:
            self.say("You won!")
        elif outcome.winner is self.computer:
            self.say(f"{self.computer.name} won!")
        else:
            self.say("It's a tie.")

    def yes_or_no(self, question: str) -> bool:
        while True:
            answer = self.ask(f"{question} (y/n) => ").lower()
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            if answer in QUIT_WORDS:
                return False
            self.say("Sorry, must be y or n")

    def run(self) -> int:
        self.say(f"First player to win {self.settings.win_condition} rounds wins the tournament!")
        try:
            while True:
                rnd = self.tournament.new_round()
                self.display_board()
                while isinstance(rnd.state, AwaitingMove):
                    rnd.step()
                    self.display_board()
                self.tournament.record(rnd.outcome)
                self.display_result(rnd.outcome)
                champion = self.tournament.champion()
                if champion is not None:
                    who = "You" if champion is self.human else champion.name
                    self.say(f"{who} won the tournament!")
                    self.say("FINAL SCORE")
                    self.say(f"{self.human.name}: {self.human.score} {self.computer.name}: {self.computer.score}")
                    return 0
                if not self.yes_or_no("Would you like to play again?"):
                    break
        except (QuitGame, EOFError):
            pass
        self.say("Thanks for playing Tic Tac Toe! Goodbye!")
        return 0


def _cmd_play(ns: argparse.Namespace, rng: np.random.Generator) -> int:
    try:
        settings = Settings.from_env(
            difficulty=ns.difficulty,
            layout=ns.layout,
            human_name=ns.name,
            computer_name=ns.opponent_name,
            human_marker=ns.marker,
            computer_marker=ns.opponent_marker,
            helper=ns.helper,
            win_condition=ns.win_condition,
        )
        _, human, computer = settings.build_players()
    except ValueError as exc:
        logging.error("Invalid settings: %s", exc)
        return 2
    logging.debug("settings=%s default=%s", settings, settings.is_default())
    game = InteractiveGame(settings, human, computer, rng, read=input, out=sys.stdout,
                           color=not ns.no_color)
    return game.run()


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("ttt-game"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    rng = make_rng(ns.seed)
    if ns.cmd == "play":
        return _cmd_play(ns, rng)
    if ns.cmd == "solve":
        return _cmd_solve(ns)
    if ns.cmd == "hint":
        return _cmd_hint(ns)
    if ns.cmd == "tactics":
        return _cmd_tactics(ns)
    if ns.cmd == "simulate":
        return _cmd_simulate(ns, rng)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
