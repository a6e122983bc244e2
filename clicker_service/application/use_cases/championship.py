"""Use cases for the RCCS championship."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from clicker.randomness import RandomSource
from clicker.rccs import RCCSEngine, is_eligible

from ..ports.state_store import StateStorePort
from .context import load_context, save_context

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ChampionshipResult:
    """Outcome of an RCCS action."""

    success: bool
    tournament: Dict[str, Any] | None = None
    titles: List[str] = field(default_factory=list)
    registered: bool = False
    error: str | None = None


class _ChampionshipUseCase:
    def __init__(
        self,
        store: StateStorePort,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._rng = rng
        self._clock = clock

    def _engine(self, ctx) -> RCCSEngine:
        return RCCSEngine(ctx.rccs, ctx.ledger, self._rng, self._clock)

    @staticmethod
    def _result(ctx, titles: List[str] | None = None) -> ChampionshipResult:
        current = ctx.rccs.current
        return ChampionshipResult(
            success=True,
            tournament=current.to_dict() if current else None,
            titles=titles or [],
            registered=ctx.rccs.player_registered,
        )


class RegisterRCCSUseCase(_ChampionshipUseCase):
    """Sign the player's team up for Qualifiers (Champion III and above)."""

    def execute(self) -> ChampionshipResult:
        ctx = load_context(self._store)
        highest = ctx.player.highest_mmr
        if not is_eligible(highest):
            return ChampionshipResult(
                success=False,
                error=f"Champion III or higher required (highest MMR {highest})",
            )
        engine = self._engine(ctx)
        engine.register(ctx.player.username, highest)
        save_context(self._store, ctx)
        return self._result(ctx)


class DeclineRCCSUseCase(_ChampionshipUseCase):
    def execute(self) -> ChampionshipResult:
        ctx = load_context(self._store)
        self._engine(ctx).decline_signup()
        save_context(self._store, ctx)
        return self._result(ctx)


class AdvanceRCCSUseCase(_ChampionshipUseCase):
    """Resolve the current stage and move the player on, out, or to completion."""

    def execute(self) -> ChampionshipResult:
        ctx = load_context(self._store)
        if ctx.rccs.current is None:
            return ChampionshipResult(success=False, error="No RCCS stage in progress")
        stage = ctx.rccs.current
        titles = self._engine(ctx).advance()
        save_context(self._store, ctx)
        result = self._result(ctx, [t.name for t in titles])
        if result.tournament is None:
            # Eliminated: report the stage that was just resolved.
            result.tournament = stage.to_dict()
        return result


class ForceRCCSStageUseCase(_ChampionshipUseCase):
    """Debug entry point: start a new RCCS season directly at ``stage``."""

    def execute(self, stage: str) -> ChampionshipResult:
        ctx = load_context(self._store)
        try:
            self._engine(ctx).force_start(stage, ctx.player.username, ctx.player.highest_mmr)
        except ValueError:
            return ChampionshipResult(success=False, error=f"Unknown stage: {stage}")
        save_context(self._store, ctx)
        return self._result(ctx)
