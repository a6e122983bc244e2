from clicker.queue import estimate_queue_time, is_peak_hour, online_player_count
from clicker.types import ALL_MODES


def test_peak_hours() -> None:
    assert is_peak_hour(18)
    assert is_peak_hour(23)
    assert not is_peak_hour(17)


def test_population_bands(rng) -> None:
    for _ in range(100):
        assert 1100 <= online_player_count(20, rng) < 1300
        assert 300 <= online_player_count(4, rng) < 500


def test_queue_time_is_clamped(rng) -> None:
    for mode in ALL_MODES:
        for mmr in (0, 800, 2500):
            for hour in (3, 12, 21):
                assert 5 <= estimate_queue_time(mode, mmr, hour, rng) <= 300
