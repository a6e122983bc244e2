from clicker.progression import (
    PlayerRecord,
    apply_match_result,
    apply_mmr_change,
    available_titles,
    check_season_rewards,
    equip_title,
    equipped_title_name,
    grant_xp,
    rollover_season,
    update_username,
    xp_to_next,
)
from clicker.titles import TitleLedger, TournamentTitle
from clicker.types import GameMode, TitleColor


def test_xp_curve() -> None:
    assert xp_to_next(1) == 100
    assert xp_to_next(2) == 125
    assert xp_to_next(3) == 156


def test_large_xp_grant_cascades_levels() -> None:
    record = PlayerRecord()
    reached = grant_xp(record, 1000)
    assert reached == [2, 3, 4, 5, 6]
    assert record.level == 6
    assert record.xp == 180
    assert record.xp_to_next == 305
    assert "level-novice" in record.unlocked_titles


def test_match_result_updates_stats_and_placements() -> None:
    record = PlayerRecord()
    apply_match_result(record, GameMode.TWOS, True)
    apply_match_result(record, "2v2", False)
    stats = record.stats[GameMode.TWOS]
    assert (stats.wins, stats.losses) == (1, 1)
    assert record.season_wins[GameMode.TWOS] == 1
    assert record.placement_matches[GameMode.TWOS] == 3
    assert record.xp == 35


def test_placements_never_go_negative() -> None:
    record = PlayerRecord()
    for _ in range(8):
        apply_match_result(record, GameMode.ONES, False)
    assert record.placement_matches[GameMode.ONES] == 0
    assert record.is_placed(GameMode.ONES)


def test_mmr_floor_and_best() -> None:
    record = PlayerRecord()
    assert apply_mmr_change(record, GameMode.ONES, -900) == 0
    apply_mmr_change(record, GameMode.ONES, 700)
    apply_mmr_change(record, GameMode.ONES, -100)
    assert record.mmr[GameMode.ONES] == 600
    assert record.stats[GameMode.ONES].best_mmr == 700


def test_season_rewards_unlock_once() -> None:
    record = PlayerRecord()
    record.mmr[GameMode.ONES] = 700
    record.season_wins[GameMode.ONES] = 20

    first = check_season_rewards(record)
    second = check_season_rewards(record)

    assert [r.rank for r in first] == ["Bronze", "Silver"]
    assert second == []
    assert len(record.season_rewards) == 3
    assert "season-s1-silver" in record.unlocked_titles


def test_rollover_decays_and_resets() -> None:
    record = PlayerRecord()
    record.mmr[GameMode.ONES] = 1000
    record.mmr[GameMode.TWOS] = 100
    record.season_wins[GameMode.ONES] = 15
    record.placement_matches[GameMode.ONES] = 0
    check_season_rewards(record)

    rollover_season(record)

    assert record.current_season == 2
    assert record.mmr[GameMode.ONES] == 800
    assert record.mmr[GameMode.TWOS] == 100
    assert record.placement_matches[GameMode.ONES] == 5
    assert record.total_season_wins == 0
    assert record.season_rewards == []
    # Earned season titles stay equippable.
    names = [t.name for t in available_titles(record)]
    assert "S1 BRONZE" in names


def test_equip_only_available_titles() -> None:
    record = PlayerRecord()
    assert equip_title(record, "level-rookie")
    assert equipped_title_name(record) == "ROOKIE"
    assert not equip_title(record, "level-legend")
    assert record.equipped_title == "level-rookie"
    assert equip_title(record, None)
    assert record.equipped_title is None


def test_ledger_titles_are_equippable() -> None:
    record = PlayerRecord()
    ledger = TitleLedger()
    ledger.award(
        TournamentTitle(
            id="rccs-s1-rccs-s1-contender",
            name="RCCS S1 CONTENDER",
            season=1,
            rank="RCCS",
            wins=1,
            color=TitleColor.AQUA,
            date_awarded="",
        )
    )
    assert equip_title(record, "rccs-s1-rccs-s1-contender", ledger)
    assert equipped_title_name(record, ledger) == "RCCS S1 CONTENDER"


def test_username_length_rules() -> None:
    record = PlayerRecord()
    assert not update_username(record, "   ")
    assert not update_username(record, "x" * 21)
    assert record.username == "Player"
    assert update_username(record, "  Ace ")
    assert record.username == "Ace"


def test_record_round_trip() -> None:
    record = PlayerRecord()
    apply_match_result(record, GameMode.THREES, True)
    apply_mmr_change(record, GameMode.THREES, 15)
    restored = PlayerRecord.from_dict(record.to_dict())
    assert restored == record
