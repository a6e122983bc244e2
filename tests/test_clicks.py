from clicker.clicks import ai_clicks_per_tick, target_cps
from clicker.randomness import SeededRandom

from conftest import ScriptedRandom


def test_clicks_never_negative(rng) -> None:
    for mmr in (0, 300, 900, 1500, 2000, 2600, 3200):
        for cps in (-5.0, 0.0, 4.0, 12.0, 40.0):
            for _ in range(20):
                assert ai_clicks_per_tick(mmr, cps, rng) >= 0


def test_low_rank_target_band() -> None:
    rng = SeededRandom(3)
    for _ in range(100):
        assert 3.0 <= target_cps(200, 0.0, rng) <= 5.0


def test_champion_adapts_to_player() -> None:
    rng = SeededRandom(3)
    for _ in range(100):
        cps = target_cps(2000, 6.0, rng)
        assert 6.0 <= cps <= 8.0


def test_grand_champion_capped() -> None:
    rng = SeededRandom(3)
    for _ in range(100):
        assert target_cps(2800, 100.0, rng) <= 25.0


def test_rounding_noise_adds_a_click() -> None:
    # uniform(3,5)=3.0, jitter 0.95, noise roll hits
    rng = ScriptedRandom([0.0, 0.0, 0.1])
    assert ai_clicks_per_tick(200, 0.0, rng) == 1
