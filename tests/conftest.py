from datetime import datetime, timezone
from typing import Iterable, List

import pytest

from clicker.randomness import RandomSource, SeededRandom
from clicker_service.infrastructure.adapters.json_state_store import InMemoryStateStore

FIXED_NOW = datetime(2026, 3, 4, 12, 3, 30, tzinfo=timezone.utc)


class ScriptedRandom(RandomSource):
    """Replays a fixed list of floats, cycling when exhausted."""

    def __init__(self, values: Iterable[float]):
        self.values: List[float] = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def rng() -> SeededRandom:
    return SeededRandom(1234)


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
