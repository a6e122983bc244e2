from datetime import datetime, timedelta

import pytest

from clicker.tournament import (
    PLAYER_ENTRANT_ID,
    TournamentEngine,
    TournamentPlayer,
    TournamentState,
    ai_win_probability,
    game_mode_for,
    next_round_for,
    next_synergy_cup_time,
    next_tournament_time,
)
from clicker.titles import TitleLedger
from clicker.types import (
    BracketRound,
    GameMode,
    TitleColor,
    TitleId,
    TournamentPhase,
    TournamentType,
)

from conftest import FIXED_NOW


def _engine(rng, clock=lambda: FIXED_NOW) -> TournamentEngine:
    return TournamentEngine(TournamentState(), TitleLedger(), rng, clock)


def _entrant(i: int) -> TournamentPlayer:
    return TournamentPlayer(id=f"ai-{i}", name=f"Bot{i}", rank="Gold I", mmr=600)


def _win_out(engine: TournamentEngine) -> None:
    while engine.current.phase is TournamentPhase.IN_PROGRESS:
        engine.simulate_ai_matches()
        match = engine.player_match()
        while match is not None and not match.is_complete:
            engine.record_player_game(match.id, True, 30, 20)
        engine.advance_round()


def test_next_tournament_time_rounds_up_to_ten_minutes() -> None:
    assert next_tournament_time(FIXED_NOW) == FIXED_NOW.replace(minute=10, second=0)
    on_boundary = FIXED_NOW.replace(minute=20, second=0)
    assert next_tournament_time(on_boundary) == on_boundary
    late = FIXED_NOW.replace(minute=55)
    assert next_tournament_time(late) == FIXED_NOW.replace(hour=13, minute=0, second=0)


def test_synergy_cup_is_next_saturday_evening() -> None:
    start = next_synergy_cup_time(FIXED_NOW)
    assert start.weekday() == 5
    assert start.hour == 19
    assert FIXED_NOW <= start < FIXED_NOW + timedelta(days=7)


def test_ai_win_probability_is_a_sigmoid() -> None:
    assert ai_win_probability(1000, 1000) == pytest.approx(0.5)
    assert ai_win_probability(1200, 1000) > 0.5
    assert ai_win_probability(1000, 1200) == pytest.approx(1 - ai_win_probability(1200, 1000))


def test_next_round_is_always_later() -> None:
    assert next_round_for(4, BracketRound.ROUND1) is BracketRound.SEMIFINAL
    assert next_round_for(2, BracketRound.SEMIFINAL) is BracketRound.FINAL
    assert next_round_for(16, BracketRound.ROUND1) is BracketRound.ROUND2
    assert next_round_for(8, BracketRound.ROUND2) is BracketRound.ROUND3


def test_start_builds_first_round(rng) -> None:
    engine = _engine(rng)
    tournament = engine.start(TournamentType.ONES, "Ace", 1200)

    assert len(tournament.players) == 8
    matches = tournament.round_matches(BracketRound.ROUND1)
    assert len(matches) == 4
    assert all(m.best_of == 1 for m in matches)
    assert sum(m.has_player for m in matches) == 1
    assert engine.is_game_mode_blocked()


def test_team_tournament_entrants_are_teams(rng) -> None:
    engine = _engine(rng)
    tournament = engine.start(TournamentType.TWOS, "Ace", 1200)
    assert len(tournament.players) == 4
    assert len(tournament.player_entrant.members) == 1
    match = engine.player_match()
    opponents = engine.match_opponents(match.id)
    assert [o.is_teammate for o in opponents] == [True, False, False]


def test_odd_entrant_is_dropped(rng) -> None:
    engine = _engine(rng)
    entrants = [_entrant(i) for i in range(3)]
    matches = engine.generate_bracket(entrants)
    assert len(matches) == 1
    assert sum(p.eliminated for p in entrants) == 1


def test_player_loss_runs_bracket_to_completion(rng) -> None:
    engine = _engine(rng)
    engine.start(TournamentType.ONES, "Ace", 1200)
    assert engine.simulate_ai_matches() == 3
    match = engine.player_match()
    engine.record_player_game(match.id, False, 10, 20)
    assert match.is_complete
    assert match.winner != PLAYER_ENTRANT_ID

    while engine.advance_round() is not None:
        engine.simulate_ai_matches()

    assert engine.current.phase is TournamentPhase.FINISHED
    assert engine.current.player_entrant.eliminated
    assert len(engine.ledger) == 0
    assert not engine.is_game_mode_blocked()


def test_player_win_awards_title(rng) -> None:
    engine = _engine(rng)
    engine.start(TournamentType.ONES, "Ace", 1200)
    _win_out(engine)

    final = engine.current.round_matches(BracketRound.FINAL)
    assert len(final) == 1
    assert final[0].best_of == 5
    assert final[0].wins_for(PLAYER_ENTRANT_ID) == 3
    title = engine.ledger.get(TitleId("s1-1v1-platinum"))
    assert title is not None
    assert title.name == "S1 PLATINUM TOURNAMENT WINNER"
    assert title.color is TitleColor.DEFAULT


def test_repeat_wins_upgrade_one_title(rng) -> None:
    engine = _engine(rng)
    for _ in range(3):
        engine.award_title(TournamentType.ONES, "Grand Champion")
    for _ in range(3):
        engine.award_title(TournamentType.TWOS, "Diamond III")

    assert len(engine.ledger) == 2
    gc = engine.ledger.get(TitleId("s1-1v1-grand-champion"))
    assert gc.wins == 3
    assert gc.color is TitleColor.GOLDEN
    assert engine.ledger.get(TitleId("s1-2v2-diamond")).color is TitleColor.GREEN


def test_second_win_keeps_default_colour(rng) -> None:
    engine = _engine(rng)
    engine.award_title(TournamentType.ONES, "Gold")
    engine.award_title(TournamentType.ONES, "Gold")
    title = engine.ledger.get(TitleId("s1-1v1-gold"))
    assert title.wins == 2
    assert title.color is TitleColor.DEFAULT


def test_unknown_match_and_bad_winner(rng) -> None:
    engine = _engine(rng)
    engine.start(TournamentType.ONES, "Ace", 1200)
    with pytest.raises(KeyError):
        engine.record_player_game("nope", True, 1, 0)
    match = engine.current.round_matches()[0]
    with pytest.raises(ValueError):
        engine.complete_match(match.id, "not-in-match", [])


def test_queue_and_scheduled_start(rng) -> None:
    engine = _engine(rng)
    assert engine.join_queue(TournamentType.ONES, 800)
    assert 1 <= engine.state.queue_position <= 8
    assert engine.is_game_mode_blocked()

    assert engine.check_and_start(FIXED_NOW, "Ace", 800) is None
    due = FIXED_NOW.replace(minute=10, second=0)
    tournament = engine.check_and_start(due, "Ace", 800)
    assert tournament is not None
    assert not engine.state.is_queued
    assert datetime.fromisoformat(engine.state.next_tournament_time) == due + timedelta(minutes=10)
    assert datetime.fromisoformat(engine.state.next_synergy_cup_time) > due


def test_stale_schedule_recomputed_after_a_minute(rng) -> None:
    engine = _engine(rng)
    assert engine.refresh_stale_schedule(FIXED_NOW)
    due = datetime.fromisoformat(engine.state.next_tournament_time)

    assert not engine.refresh_stale_schedule(due + timedelta(seconds=59))
    assert engine.state.next_tournament_time == due.isoformat()

    engine.join_queue(TournamentType.ONES, 800)
    assert not engine.refresh_stale_schedule(due + timedelta(minutes=5))

    engine.leave_queue()
    assert engine.refresh_stale_schedule(due + timedelta(minutes=5))
    assert datetime.fromisoformat(engine.state.next_tournament_time) == due + timedelta(minutes=10)


def test_synergy_cup_requires_grand_champion(rng) -> None:
    engine = _engine(rng)
    assert not engine.join_queue(TournamentType.SYNERGY_CUP, 2549)
    assert not engine.state.is_queued
    assert engine.join_queue(TournamentType.SYNERGY_CUP, 2550)
    engine.leave_queue()
    assert engine.state.queued_type is None
    assert engine.state.queue_position == 0


def test_synergy_cup_bracket_has_32_teams(rng) -> None:
    engine = _engine(rng)
    tournament = engine.start(TournamentType.SYNERGY_CUP, "Ace", 2600)
    assert len(tournament.players) == 32
    assert all(2550 <= m.mmr < 3500 for p in tournament.players for m in p.members)


def test_synergy_cup_titles_and_elite(rng) -> None:
    engine = _engine(rng)
    assert engine.award_synergy_cup_title(5) == []

    engine.state.current_season = 2
    names = [t.name for t in engine.award_synergy_cup_title(2)]
    assert names == ["SYNERGY CUP S2 FINALIST"]

    engine.state.current_season = 3
    names = [t.name for t in engine.award_synergy_cup_title(8)]
    assert names == ["SYNERGY CUP ELITE"]

    engine.state.current_season = 4
    names = [t.name for t in engine.award_synergy_cup_title(1)]
    assert names == ["SYNERGY CUP S4 CHAMPION"]


def test_state_round_trip(rng) -> None:
    engine = _engine(rng)
    engine.start(TournamentType.TWOS, "Ace", 1200)
    engine.simulate_ai_matches()
    restored = TournamentState.from_dict(engine.state.to_dict())
    assert restored.to_dict() == engine.state.to_dict()


def test_bracket_playlists() -> None:
    assert game_mode_for(TournamentType.ONES) is GameMode.ONES
    assert game_mode_for("3v3") is GameMode.THREES
    assert game_mode_for(TournamentType.SYNERGY_CUP) is GameMode.TWOS
