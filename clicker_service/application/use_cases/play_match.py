"""Use cases for starting and completing a match."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from clicker.opponents import Opponent, apply_elite_results, generate_opponents
from clicker.progression import (
    apply_match_result,
    apply_mmr_change,
    check_season_rewards,
    equipped_title_name,
)
from clicker.randomness import RandomSource
from clicker.rating import mmr_delta
from clicker.tournament import TournamentEngine, game_mode_for
from clicker.types import GameMode, QueueMode, parse_mode

from ..ports.state_store import StateStorePort
from .context import load_context, save_context

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PrepareMatchRequest:
    """Request for a match roster."""

    mode: str
    queue_mode: QueueMode = QueueMode.RANKED
    tournament_match_id: str | None = None


@dataclass
class PrepareMatchResult:
    success: bool
    mode: GameMode | None = None
    player_mmr: int = 0
    opponents: List[Opponent] = field(default_factory=list)
    error: str | None = None


class PrepareMatchUseCase:
    """Build the opponent list for a ranked, casual or tournament match."""

    def __init__(self, store: StateStorePort, rng: RandomSource):
        self._store = store
        self._rng = rng

    def execute(self, request: PrepareMatchRequest) -> PrepareMatchResult:
        try:
            mode = parse_mode(request.mode)
        except ValueError:
            return PrepareMatchResult(success=False, error=f"Unknown mode: {request.mode}")

        ctx = load_context(self._store)
        engine = TournamentEngine(ctx.tournaments, ctx.ledger, self._rng)
        player_mmr = ctx.player.mmr[mode]

        if request.tournament_match_id:
            try:
                opponents = engine.match_opponents(request.tournament_match_id)
            except (KeyError, ValueError) as e:
                return PrepareMatchResult(success=False, error=str(e))
            bracket_mode = game_mode_for(engine.current.type)
            if bracket_mode is not mode:
                return PrepareMatchResult(
                    success=False,
                    error=f"Tournament matches are played in {bracket_mode.value}, not {mode.value}",
                )
            return PrepareMatchResult(
                success=True, mode=mode, player_mmr=player_mmr, opponents=list(opponents)
            )

        if engine.is_game_mode_blocked():
            return PrepareMatchResult(
                success=False,
                error="Game modes are blocked while queued for or playing a tournament.",
            )

        opponents = generate_opponents(
            mode, player_mmr, ctx.player.current_season, self._rng, ctx.roster
        )
        return PrepareMatchResult(success=True, mode=mode, player_mmr=player_mmr, opponents=opponents)


@dataclass
class CompleteMatchRequest:
    """Outcome of a finished match."""

    mode: str
    is_win: bool
    opponents: List[Opponent]
    queue_mode: QueueMode = QueueMode.RANKED
    player_score: int = 0
    team_score: int = 0
    opponent_team_score: int = 0
    tournament_match_id: str | None = None


@dataclass
class CompleteMatchResult:
    success: bool
    mmr_change: int = 0
    new_mmr: int = 0
    levels_gained: List[int] = field(default_factory=list)
    rewards_unlocked: List[str] = field(default_factory=list)
    elite_changes: Dict[str, int] = field(default_factory=dict)
    tournament: Dict[str, Any] | None = None
    error: str | None = None


class CompleteMatchUseCase:
    """Apply a finished match to progression, the elite roster and leaderboards.

    Tournament games only move the bracket; they do not touch MMR or stats.
    """

    def __init__(
        self,
        store: StateStorePort,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._rng = rng
        self._clock = clock

    def execute(self, request: CompleteMatchRequest) -> CompleteMatchResult:
        try:
            mode = parse_mode(request.mode)
        except ValueError:
            return CompleteMatchResult(success=False, error=f"Unknown mode: {request.mode}")

        ctx = load_context(self._store)
        player = ctx.player

        if request.tournament_match_id:
            engine = TournamentEngine(ctx.tournaments, ctx.ledger, self._rng, self._clock)
            try:
                engine.record_player_game(
                    request.tournament_match_id,
                    request.is_win,
                    request.team_score,
                    request.opponent_team_score,
                )
            except (KeyError, ValueError) as e:
                return CompleteMatchResult(success=False, error=str(e))
            engine.simulate_ai_matches()
            while engine.advance_round() is not None:
                engine.simulate_ai_matches()
            save_context(self._store, ctx)
            current = ctx.tournaments.current
            return CompleteMatchResult(
                success=True,
                new_mmr=player.mmr[mode],
                tournament=current.to_dict() if current else None,
            )

        mmr_before = player.mmr[mode]
        levels = apply_match_result(player, mode, request.is_win)

        change = 0
        elite_changes: Dict[str, int] = {}
        if request.queue_mode is QueueMode.RANKED:
            enemies = [o.mmr for o in request.opponents if not o.is_teammate]
            change = mmr_delta(mmr_before, request.is_win, enemies)
            apply_mmr_change(player, mode, change)
            elite_changes = apply_elite_results(
                ctx.roster, request.opponents, request.is_win, mode, mmr_before
            )

        rewards = check_season_rewards(player)
        now_ms = int(self._clock().timestamp() * 1000)
        ctx.leaderboards.initialize(self._rng, now_ms)
        ctx.leaderboards.splice_player(
            player.username,
            player.mmr,
            player.stats,
            title=equipped_title_name(player, ctx.ledger),
            now_ms=now_ms,
        )
        save_context(self._store, ctx)

        logger.info(
            f"{request.queue_mode.value} {mode.value} "
            f"{'win' if request.is_win else 'loss'}: {change:+d} MMR -> {player.mmr[mode]}"
        )
        return CompleteMatchResult(
            success=True,
            mmr_change=change,
            new_mmr=player.mmr[mode],
            levels_gained=levels,
            rewards_unlocked=[r.title_name for r in rewards],
            elite_changes=elite_changes,
        )

