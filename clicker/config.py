from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


APP_VERSION = "1.0.0"

DEFAULT_RELEASES_URL = "https://api.github.com/repos/user/ranked-clicker-game/releases/latest"

DEFAULT_DATA_DIR = ".cache/clicker"

# Persisted bucket names
PLAYER_STORE = "ranked-clicker-player-data"
TOURNAMENT_STORE = "tournament-storage"
RCCS_STORE = "rccs-tournament-store"
LEADERBOARD_STORE = "ranked-clicker-leaderboard"
NEWS_STORE = "news-storage"
ELITE_STORE = "ranked-ai-roster"

STORE_NAMES = (
    PLAYER_STORE,
    TOURNAMENT_STORE,
    RCCS_STORE,
    LEADERBOARD_STORE,
    NEWS_STORE,
    ELITE_STORE,
)

# Timer periods (ms)
SCORING_TICK_MS = 100
CLOCK_TICK_MS = 1000
LEADERBOARD_FLUCTUATION_MS = 30_000
TOURNAMENT_RECOMPUTE_MS = 60_000


@dataclass(frozen=True)
class StorageConfig:
    base_dir: Path


@dataclass(frozen=True)
class EngineConfig:
    seed: Optional[int]
    releases_url: str
    current_version: str


def storage_config_from_env() -> StorageConfig:
    base_dir = Path(os.environ.get("CLICKER_DATA_DIR", DEFAULT_DATA_DIR))
    return StorageConfig(base_dir=base_dir)


def engine_config_from_env() -> EngineConfig:
    raw_seed = os.environ.get("CLICKER_SEED", "").strip()
    seed = int(raw_seed) if raw_seed.lstrip("-").isdigit() else None
    return EngineConfig(
        seed=seed,
        releases_url=os.environ.get("CLICKER_RELEASES_URL", DEFAULT_RELEASES_URL),
        current_version=os.environ.get("CLICKER_VERSION", APP_VERSION),
    )
