from datetime import timedelta

from clicker.rccs import (
    STAGE_RULES,
    RCCSEngine,
    RCCSState,
    RCCSTournament,
    cascade_reward,
    is_eligible,
    reward_for,
)
from clicker.titles import TitleLedger
from clicker.types import RCCSStage, RCCSStatus, TitleColor

from conftest import FIXED_NOW


def _engine(rng) -> RCCSEngine:
    return RCCSEngine(RCCSState(), TitleLedger(), rng, lambda: FIXED_NOW)


def _place(tournament: RCCSTournament, team_id: str, placement: int) -> None:
    """Put ``team_id`` at ``placement`` and everyone else around it."""
    rules = STAGE_RULES[tournament.stage]
    team = tournament.team(team_id)
    others = [t for t in tournament.teams if t.id != team_id]
    ordered = others[: placement - 1] + [team] + others[placement - 1:]
    for index, t in enumerate(ordered):
        t.placement = index + 1
        t.eliminated = rules.cutoff is not None and t.placement > rules.cutoff
    tournament.teams = ordered
    tournament.status = RCCSStatus.ACTIVE


def test_eligibility_starts_at_champion_three() -> None:
    assert not is_eligible(2349)
    assert is_eligible(2350)


def test_reward_bands() -> None:
    assert reward_for(RCCSStage.QUALIFIERS, 32).tier == "CONTENDER"
    assert reward_for(RCCSStage.QUALIFIERS, 33) is None
    assert reward_for(RCCSStage.REGIONALS, 2) is None
    assert reward_for(RCCSStage.MAJORS, 4).tier == "WORLD CHALLENGER"
    assert cascade_reward(RCCSStage.QUALIFIERS) is None
    assert cascade_reward(RCCSStage.WORLDS).tier == "MAJOR CONTENDER"


def test_ineligible_registration_is_ignored(rng) -> None:
    engine = _engine(rng)
    assert engine.register("Ace", 2000) is None
    assert engine.state.current is None
    assert not engine.state.player_registered


def test_registration_seeds_qualifiers(rng) -> None:
    engine = _engine(rng)
    tournament = engine.register("Ace", 2400)
    assert tournament.stage is RCCSStage.QUALIFIERS
    assert len(tournament.teams) == 128
    assert engine.player_team is not None
    assert engine.player_team.teammate1.mmr >= 2200
    assert engine.state.player_registered


def test_resolve_assigns_every_placement(rng) -> None:
    engine = _engine(rng)
    tournament = engine.register("Ace", 2400)
    engine.resolve_stage(tournament)
    assert sorted(t.placement for t in tournament.teams) == list(range(1, 129))
    assert all(t.eliminated == (t.placement > 32) for t in tournament.teams)


def test_elimination_without_reward_clears_registration(rng) -> None:
    engine = _engine(rng)
    tournament = engine.register("Ace", 2400)
    _place(tournament, engine.state.player_team_id, 40)

    titles = engine.apply_stage_results(tournament)

    assert titles == []
    assert len(engine.ledger) == 0
    assert engine.state.current is None
    assert not engine.state.player_registered
    entry = engine.state.history[-1]
    assert (entry.stage, entry.placement, entry.eliminated) == (RCCSStage.QUALIFIERS, 40, True)


def test_qualifying_awards_contender_and_seeds_regionals(rng) -> None:
    engine = _engine(rng)
    tournament = engine.register("Ace", 2400)
    _place(tournament, engine.state.player_team_id, 20)

    titles = engine.apply_stage_results(tournament)

    assert [t.name for t in titles] == ["RCCS S1 CONTENDER"]
    assert titles[0].color is TitleColor.AQUA
    regionals = engine.state.current
    assert regionals.stage is RCCSStage.REGIONALS
    assert len(regionals.teams) == 32
    assert all(t.placement is None and not t.eliminated for t in regionals.teams)
    assert engine.player_team is not None


def test_run_to_worlds_with_cascades(rng) -> None:
    engine = _engine(rng)
    tournament = engine.register("Ace", 2400)
    _place(tournament, engine.state.player_team_id, 1)
    engine.apply_stage_results(tournament)

    # Second at Regionals falls in the gap between champion and elite.
    _place(engine.state.current, engine.state.player_team_id, 2)
    assert engine.apply_stage_results(engine.state.current) == []
    assert engine.state.current.stage is RCCSStage.MAJORS
    assert len(engine.state.current.teams) == 12

    _place(engine.state.current, engine.state.player_team_id, 4)
    names = [t.name for t in engine.apply_stage_results(engine.state.current)]
    assert names == ["RCCS S1 WORLD CHALLENGER", "RCCS S1 REGIONAL FINALIST"]

    worlds = engine.state.current
    assert worlds.stage is RCCSStage.WORLDS
    _place(worlds, engine.state.player_team_id, 1)
    names = [t.name for t in engine.apply_stage_results(worlds)]
    assert names == ["RCCS S1 WORLD CHAMPION", "RCCS S1 MAJOR CONTENDER"]
    assert worlds.status is RCCSStatus.COMPLETED
    assert not engine.state.player_registered
    assert engine.advance() == []


def test_titles_are_not_awarded_twice(rng) -> None:
    engine = _engine(rng)
    assert engine.award_title("RCCS S1 CONTENDER", 10) is not None
    assert engine.award_title("RCCS S1 CONTENDER", 12) is None
    assert len(engine.ledger) == 1


def test_force_start_opens_a_new_season_at_stage(rng) -> None:
    engine = _engine(rng)
    tournament = engine.force_start("majors", "Ace", 2400)
    assert engine.state.current_season == 2
    assert tournament.stage is RCCSStage.MAJORS
    assert len(tournament.teams) == 12
    assert engine.state.player_registered
    assert engine.player_team.player_name == "Ace"


def test_signup_notification_window(rng) -> None:
    engine = _engine(rng)
    engine.initialize(FIXED_NOW)
    assert engine.state.active_notifications() == []

    engine.initialize(FIXED_NOW + timedelta(days=15))
    assert [n.id for n in engine.state.active_notifications()] == ["tournament-signup-s1"]
    engine.open_signup()
    assert len(engine.state.notifications) == 1

    engine.decline_signup()
    assert engine.state.active_notifications() == []


def test_new_season_clears_everything(rng) -> None:
    engine = _engine(rng)
    engine.register("Ace", 2400)
    engine.open_signup()
    assert engine.start_new_season(FIXED_NOW) == 2
    assert engine.state.current is None
    assert not engine.state.player_registered
    assert engine.state.notifications == []


def test_state_round_trip(rng) -> None:
    engine = _engine(rng)
    engine.register("Ace", 2400)
    engine.advance()
    restored = RCCSState.from_dict(engine.state.to_dict())
    assert restored.to_dict() == engine.state.to_dict()
