#!/usr/bin/env python3
from __future__ import annotations

import math
import statistics as stats
import time
from dataclasses import dataclass
from typing import List, Tuple

from tttgame.board import Board
from tttgame.players import PlayerRegistry
from tttgame.policy import Difficulty, choose_move, make_rng
from tttgame.session import Tournament, policy_source
from tttgame.solver import clear_cache, minimax


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    seeds: int = 10
    tournaments: int = 5


def main() -> int:
    cfg = Config()
    cold_times: List[float] = []
    reply_times: List[float] = []
    sim_times: List[float] = []
    for s in range(cfg.seeds):
        rng = make_rng(s)
        clear_cache()
        opening = Board()
        opening.set(int(rng.integers(1, 10)), "X")
        t0 = time.perf_counter()
        minimax("O", opening, "X")
        t1 = time.perf_counter()
        cold_times.append(t1 - t0)

        t2 = time.perf_counter()
        choose_move(Difficulty.IMPOSSIBLE, opening, "O", "X", rng)
        t3 = time.perf_counter()
        reply_times.append(t3 - t2)

        t4 = time.perf_counter()
        for _ in range(cfg.tournaments):
            registry = PlayerRegistry()
            players = [registry.add("medium", "X"), registry.add("impossible", "O")]
            sources = [policy_source(Difficulty.MEDIUM, rng), policy_source(Difficulty.IMPOSSIBLE, rng)]
            Tournament(players, sources).play(max_rounds=50)
        t5 = time.perf_counter()
        sim_times.append(t5 - t4)

    for label, values in [
        ("minimax after opening (cold cache)", cold_times),
        ("impossible reply (warm cache)", reply_times),
        (f"{cfg.tournaments} tournaments medium vs impossible", sim_times),
    ]:
        m, h = ci95(values)
        print(f"- {label}: mean={m:.4f}s ± {h:.4f}s (95% CI, N={cfg.seeds})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
