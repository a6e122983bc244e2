"""ELO-style MMR deltas with a rank-dependent K-factor and a guaranteed minimum swing."""

from __future__ import annotations

import math
from typing import Sequence

MAX_SWING = 30
MIN_SWING = 10

# (MMR strictly above, K)
K_FACTOR_BREAKPOINTS = [
    (1900, 15),
    (1600, 20),
    (1000, 25),
]
DEFAULT_K_FACTOR = 30


def k_factor(mmr: float) -> int:
    for above, k in K_FACTOR_BREAKPOINTS:
        if mmr > above:
            return k
    return DEFAULT_K_FACTOR


def expected_score(current_mmr: float, opponent_mmr: float) -> float:
    return 1.0 / (1.0 + 10 ** ((opponent_mmr - current_mmr) / 400.0))


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def mmr_delta(current_mmr: int, is_win: bool, opponent_mmrs: Sequence[int]) -> int:
    """MMR change for one match.

    The result is clamped to [-30, 30]; a win is never worth less than +10
    and a loss never costs less than 10. An empty opponent list is treated
    as an even match.
    """
    if opponent_mmrs:
        avg_opponent = sum(opponent_mmrs) / len(opponent_mmrs)
    else:
        avg_opponent = float(current_mmr)

    expected = expected_score(current_mmr, avg_opponent)
    actual = 1.0 if is_win else 0.0
    raw = _round_half_away(k_factor(current_mmr) * (actual - expected))
    delta = max(-MAX_SWING, min(MAX_SWING, raw))

    if is_win and delta < MIN_SWING:
        return MIN_SWING
    if not is_win and delta > -MIN_SWING:
        return -MIN_SWING
    return delta
