"""Simulated online population and matchmaking queue estimates."""

from __future__ import annotations

from .randomness import RandomSource
from .types import GameMode, parse_mode

PEAK_HOURS = range(18, 24)
PEAK_POPULATION = 1200
OFF_PEAK_POPULATION = 400
POPULATION_JITTER = 100
MIN_POPULATION = 100

BASE_QUEUE_SECONDS = 30
MIN_QUEUE_SECONDS = 5
MAX_QUEUE_SECONDS = 300

MODE_MULTIPLIERS = {
    GameMode.ONES: 1.0,
    GameMode.TWOS: 1.3,
    GameMode.THREES: 1.8,
}
EXTREME_MMR_LOW = 300
EXTREME_MMR_HIGH = 1500
EXTREME_MMR_MULTIPLIER = 1.5


def is_peak_hour(hour: int) -> bool:
    return hour in PEAK_HOURS


def online_player_count(hour: int, rng: RandomSource) -> int:
    base = PEAK_POPULATION if is_peak_hour(hour) else OFF_PEAK_POPULATION
    jitter = rng.randint(-POPULATION_JITTER, POPULATION_JITTER - 1)
    return max(MIN_POPULATION, base + jitter)


def estimate_queue_time(mode: "GameMode | str", mmr: int, hour: int, rng: RandomSource) -> int:
    """Estimated wait in whole seconds, clamped to 5..300."""
    mode = parse_mode(mode)
    online = online_player_count(hour, rng)

    mmr_multiplier = 1.0
    if mmr < EXTREME_MMR_LOW or mmr > EXTREME_MMR_HIGH:
        mmr_multiplier = EXTREME_MMR_MULTIPLIER
    peak_multiplier = 0.6 if is_peak_hour(hour) else 1.4
    online_multiplier = max(0.5, 800 / online)

    estimate = (
        BASE_QUEUE_SECONDS
        * MODE_MULTIPLIERS[mode]
        * mmr_multiplier
        * peak_multiplier
        * online_multiplier
    )
    estimate *= rng.uniform(0.8, 1.2)
    return max(MIN_QUEUE_SECONDS, min(MAX_QUEUE_SECONDS, int(estimate)))
