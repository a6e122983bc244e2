from clicker.rating import k_factor, mmr_delta


def test_even_win_at_low_mmr_is_fifteen() -> None:
    assert mmr_delta(500, True, [500]) == 15


def test_even_loss_at_high_mmr_hits_minimum_swing() -> None:
    assert mmr_delta(2000, False, [2000]) == -10


def test_k_factor_steps() -> None:
    assert k_factor(1000) == 30
    assert k_factor(1001) == 25
    assert k_factor(1601) == 20
    assert k_factor(1901) == 15


def test_delta_is_bounded() -> None:
    for mmr in (0, 500, 1500, 2500, 3200):
        for opp in (0, 800, 1800, 3000):
            win = mmr_delta(mmr, True, [opp])
            loss = mmr_delta(mmr, False, [opp])
            assert 10 <= win <= 30
            assert -30 <= loss <= -10


def test_empty_opponents_is_even_match() -> None:
    assert mmr_delta(500, True, []) == mmr_delta(500, True, [500])


def test_opponents_are_averaged() -> None:
    assert mmr_delta(800, True, [600, 1000]) == mmr_delta(800, True, [800])
