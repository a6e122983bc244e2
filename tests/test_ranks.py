from clicker.ranks import (
    BASE_RANKS,
    DIVISIONS,
    RANK_COLORS,
    RANK_THRESHOLDS,
    base_rank_index,
    base_rank_of,
    rank_info,
    rank_ladder,
)


def test_thresholds_map_to_their_rank() -> None:
    for name, threshold in RANK_THRESHOLDS:
        assert rank_info(threshold).name == name


def test_mmr_just_below_threshold_stays_in_lower_rank() -> None:
    assert rank_info(2549).name == "Champion III"
    assert rank_info(599).name == "Silver III"


def test_grand_champion_levels_step_every_hundred() -> None:
    assert rank_info(2550).grand_champion_level == 1
    assert rank_info(2649).grand_champion_level == 1
    assert rank_info(2650).grand_champion_level == 2
    assert rank_info(3000).display_name == "Grand Champion 5"


def test_negative_mmr_falls_back_to_bronze() -> None:
    info = rank_info(-50)
    assert info.name == "Bronze I"
    assert info.division == "I"


def test_divisions_cover_the_band() -> None:
    assert rank_info(600).division == "I"
    assert rank_info(749).division == "V"


def test_base_rank_helpers() -> None:
    assert base_rank_of("Silver II") == "Silver"
    assert base_rank_of("Grand Champion 3") == "Grand Champion"
    assert base_rank_index(0) == 0
    assert base_rank_index(2600) == len(BASE_RANKS) - 1


def test_ladder_is_highest_first() -> None:
    ladder = rank_ladder()
    assert ladder[0]["name"] == "Grand Champion"
    assert ladder[-1]["name"] == "Bronze I"


def test_sweep_is_monotonic_and_pure() -> None:
    previous = (-1, -1)
    previous_base = 0
    for mmr in range(0, 4001):
        info = rank_info(mmr)
        assert info == rank_info(mmr)
        if info.grand_champion_level is None:
            step = DIVISIONS.index(info.division)
            assert info.display_name == f"{info.name} Div {info.division}"
        else:
            step = info.grand_champion_level
            assert info.division is None
            assert info.display_name == f"Grand Champion {step}"
        assert (info.tier, step) >= previous
        previous = (info.tier, step)

        assert info.color == RANK_COLORS[info.base_rank]
        assert RANK_THRESHOLDS[info.tier][0] == info.name
        assert base_rank_index(mmr) >= previous_base
        previous_base = base_rank_index(mmr)


def test_grand_champion_level_for_each_hundred() -> None:
    for k in range(15):
        assert rank_info(2550 + 100 * k).grand_champion_level == k + 1
        assert rank_info(2550 + 100 * k + 99).grand_champion_level == k + 1


def test_ladder_rows_mirror_thresholds() -> None:
    ladder = rank_ladder()
    assert len(ladder) == len(RANK_THRESHOLDS)
    mins = [row["min_mmr"] for row in ladder]
    assert mins == sorted(mins, reverse=True)
    assert [row["glow"] for row in ladder].count(True) == 1
    assert ladder[-1]["color"] == RANK_COLORS["Bronze"]
