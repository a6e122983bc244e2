"""Leaderboard refresh use case."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from clicker.leaderboard import BOARD_SIZE
from clicker.progression import equipped_title_name
from clicker.randomness import RandomSource
from clicker.types import parse_mode

from ..ports.state_store import StateStorePort
from .context import load_context, save_context


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LeaderboardResult:
    success: bool
    mode: str | None = None
    entries: List[Dict[str, Any]] = field(default_factory=list)
    player_rank: int = 0
    error: str | None = None


class RefreshLeaderboardUseCase:
    """Initialize on first use, apply any due fluctuation, then splice the player in."""

    def __init__(
        self,
        store: StateStorePort,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._rng = rng
        self._clock = clock

    def execute(self, mode: str, limit: int = BOARD_SIZE) -> LeaderboardResult:
        try:
            game_mode = parse_mode(mode)
        except ValueError:
            return LeaderboardResult(success=False, error=f"Unknown mode: {mode}")

        ctx = load_context(self._store)
        now_ms = int(self._clock().timestamp() * 1000)
        boards = ctx.leaderboards
        boards.initialize(self._rng, now_ms)
        boards.fluctuate(self._rng, now_ms)
        boards.splice_player(
            ctx.player.username,
            ctx.player.mmr,
            ctx.player.stats,
            title=equipped_title_name(ctx.player, ctx.ledger),
            now_ms=now_ms,
        )
        save_context(self._store, ctx)

        return LeaderboardResult(
            success=True,
            mode=game_mode.value,
            entries=[e.to_dict() for e in boards.board(game_mode)[:limit]],
            player_rank=boards.rank(game_mode, ctx.player.mmr[game_mode]),
        )
