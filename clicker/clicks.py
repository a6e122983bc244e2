"""Per-tick AI clicking model."""

from __future__ import annotations

import math
from typing import List, Tuple

from .randomness import RandomSource
from .ranks import GRAND_CHAMPION_MMR

CHAMPION_ADAPTIVE_MMR = 1900
GC_CPS_CEILING = 25
TICKS_PER_SECOND = 10
ROUNDING_NOISE_CHANCE = 0.3

# (upper bound exclusive, min CPS, max CPS)
BASE_CPS_STEPS: List[Tuple[int, float, float]] = [
    (400, 3.0, 5.0),
    (700, 4.0, 6.0),
    (1000, 5.0, 7.0),
    (1300, 6.0, 8.0),
    (1600, 7.0, 9.0),
    (CHAMPION_ADAPTIVE_MMR, 8.0, 10.0),
]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(max(low, high), value))


def target_cps(ai_mmr: int, player_cps: float, rng: RandomSource) -> float:
    """Clicks per second the AI aims for before jitter."""
    for upper, low, high in BASE_CPS_STEPS:
        if ai_mmr < upper:
            return rng.uniform(low, high)

    if ai_mmr < GRAND_CHAMPION_MMR:
        base = rng.uniform(8.0, 10.0)
        return _clamp(base, max(6.0, player_cps - 2), player_cps + 2)

    base = 9.0 if rng.chance(0.5) else 12.0
    base += (rng.random() - 0.5) * 0.5
    high = min(float(GC_CPS_CEILING), max(15.0, player_cps + 3))
    low = min(float(GC_CPS_CEILING), max(10.0, player_cps - 3))
    return _clamp(base, low, high)


def ai_clicks_per_tick(ai_mmr: int, player_cps: float, rng: RandomSource) -> int:
    """Integer clicks an AI lands in one 100ms tick. Never negative."""
    cps = target_cps(ai_mmr, max(0.0, player_cps), rng)
    cps *= rng.uniform(0.95, 1.05)
    noise = 1 if rng.chance(ROUNDING_NOISE_CHANCE) else 0
    return max(0, int(math.floor(cps / TICKS_PER_SECOND + noise)))
