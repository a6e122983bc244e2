"""Season rollover across player progression, tournaments and RCCS."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict

from clicker.progression import rollover_season
from clicker.randomness import RandomSource
from clicker.rccs import RCCSEngine
from clicker.tournament import TournamentEngine

from ..ports.state_store import StateStorePort
from .context import load_context, save_context

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SeasonRolloverResult:
    success: bool
    season: int = 0
    rccs_season: int = 0
    mmr: Dict[str, int] = field(default_factory=dict)
    error: str | None = None


class SeasonRolloverUseCase:
    """Start the next season: soft-reset MMR, reset placements and the RCCS cycle."""

    def __init__(
        self,
        store: StateStorePort,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._rng = rng
        self._clock = clock

    def execute(self) -> SeasonRolloverResult:
        ctx = load_context(self._store)
        rollover_season(ctx.player)
        ctx.sync_season()

        tournaments = TournamentEngine(ctx.tournaments, ctx.ledger, self._rng, self._clock)
        tournaments.leave_queue()
        tournaments.refresh_schedule()

        rccs = RCCSEngine(ctx.rccs, ctx.ledger, self._rng, self._clock)
        rccs_season = rccs.start_new_season()

        save_context(self._store, ctx)
        logger.info(f"Rolled over to season {ctx.player.current_season}")
        return SeasonRolloverResult(
            success=True,
            season=ctx.player.current_season,
            rccs_season=rccs_season,
            mmr={mode.value: mmr for mode, mmr in ctx.player.mmr.items()},
        )
