"""Use cases for the scheduled standard and Synergy Cup tournaments."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from clicker.randomness import RandomSource
from clicker.tournament import TournamentEngine
from clicker.types import TournamentType

from ..ports.state_store import StateStorePort
from .context import load_context, save_context

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TournamentResult:
    """Queue and bracket snapshot after a tournament action."""

    success: bool
    state: Dict[str, Any] = field(default_factory=dict)
    player_match_id: str | None = None
    titles: List[str] = field(default_factory=list)
    error: str | None = None


class _TournamentUseCase:
    def __init__(
        self,
        store: StateStorePort,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._rng = rng
        self._clock = clock

    def _engine(self, ctx) -> TournamentEngine:
        return TournamentEngine(ctx.tournaments, ctx.ledger, self._rng, self._clock)

    @staticmethod
    def _result(ctx, engine: TournamentEngine, titles_before: int = 0) -> TournamentResult:
        match = engine.player_match()
        return TournamentResult(
            success=True,
            state=ctx.tournaments.to_dict(),
            player_match_id=match.id if match else None,
            titles=[t.name for t in ctx.ledger.list()[titles_before:]],
        )


class JoinQueueUseCase(_TournamentUseCase):
    def execute(self, tournament_type: str) -> TournamentResult:
        ctx = load_context(self._store)
        engine = self._engine(ctx)
        try:
            joined = engine.join_queue(TournamentType(tournament_type), ctx.player.highest_mmr)
        except ValueError:
            return TournamentResult(success=False, error=f"Unknown tournament type: {tournament_type}")
        if not joined:
            return TournamentResult(
                success=False,
                state=ctx.tournaments.to_dict(),
                error=f"Cannot join the {tournament_type} queue",
            )
        engine.refresh_schedule()
        save_context(self._store, ctx)
        return self._result(ctx, engine)


class TournamentStatusUseCase(_TournamentUseCase):
    """Snapshot the tournament state, recomputing a lapsed schedule first."""

    def execute(self) -> TournamentResult:
        ctx = load_context(self._store)
        engine = self._engine(ctx)
        if engine.refresh_stale_schedule(self._clock()):
            save_context(self._store, ctx)
        return self._result(ctx, engine, len(ctx.ledger))


class LeaveQueueUseCase(_TournamentUseCase):
    def execute(self) -> TournamentResult:
        ctx = load_context(self._store)
        engine = self._engine(ctx)
        engine.leave_queue()
        save_context(self._store, ctx)
        return self._result(ctx, engine)


class StartTournamentUseCase(_TournamentUseCase):
    """Start the queued tournament if it is due, or immediately when ``force`` is set."""

    def execute(self, force: bool = False) -> TournamentResult:
        ctx = load_context(self._store)
        engine = self._engine(ctx)
        if not ctx.tournaments.is_queued or ctx.tournaments.queued_type is None:
            return TournamentResult(
                success=False, state=ctx.tournaments.to_dict(), error="Not queued for a tournament"
            )
        if force:
            tournament = engine.start(
                ctx.tournaments.queued_type, ctx.player.username, ctx.player.highest_mmr
            )
        else:
            tournament = engine.check_and_start(
                self._clock(), ctx.player.username, ctx.player.highest_mmr
            )
        if tournament is None:
            save_context(self._store, ctx)
            return TournamentResult(
                success=False, state=ctx.tournaments.to_dict(), error="Tournament has not started yet"
            )
        engine.simulate_ai_matches()
        save_context(self._store, ctx)
        return self._result(ctx, engine)


class AdvanceTournamentUseCase(_TournamentUseCase):
    """Settle AI matches and move the bracket forward as far as it can go.

    A round with the player's match still open stops the bracket; once the
    player is out, the remaining rounds are simulated to the final.
    """

    def execute(self) -> TournamentResult:
        ctx = load_context(self._store)
        engine = self._engine(ctx)
        if engine.current is None:
            return TournamentResult(success=False, error="No tournament in progress")
        titles_before = len(ctx.ledger)
        engine.simulate_ai_matches()
        while engine.advance_round() is not None:
            engine.simulate_ai_matches()
        save_context(self._store, ctx)
        return self._result(ctx, engine, titles_before)
