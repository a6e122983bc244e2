"""GameContext: every piece of owned engine state, split into persisted buckets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .config import (
    APP_VERSION,
    ELITE_STORE,
    LEADERBOARD_STORE,
    NEWS_STORE,
    PLAYER_STORE,
    RCCS_STORE,
    TOURNAMENT_STORE,
)
from .elite import EliteRoster
from .leaderboard import Leaderboards
from .news import NewsFeed
from .progression import PlayerRecord
from .rccs import RCCSState
from .titles import TitleLedger
from .tournament import TournamentState

Buckets = Dict[str, Dict[str, Any]]


@dataclass
class GameContext:
    player: PlayerRecord = field(default_factory=PlayerRecord)
    ledger: TitleLedger = field(default_factory=TitleLedger)
    tournaments: TournamentState = field(default_factory=TournamentState)
    rccs: RCCSState = field(default_factory=RCCSState)
    leaderboards: Leaderboards = field(default_factory=Leaderboards)
    news: NewsFeed = field(default_factory=NewsFeed.seeded)
    roster: EliteRoster = field(default_factory=EliteRoster)

    def to_buckets(self) -> Buckets:
        tournament_bucket = self.tournaments.to_dict()
        tournament_bucket["titles"] = self.ledger.to_dict()["titles"]
        return {
            PLAYER_STORE: self.player.to_dict(),
            TOURNAMENT_STORE: tournament_bucket,
            RCCS_STORE: self.rccs.to_dict(),
            LEADERBOARD_STORE: self.leaderboards.to_dict(),
            NEWS_STORE: self.news.to_dict(),
            ELITE_STORE: self.roster.to_dict(),
        }

    @classmethod
    def from_buckets(
        cls,
        buckets: Mapping[str, Optional[Dict[str, Any]]],
        current_version: str = APP_VERSION,
    ) -> "GameContext":
        tournament_bucket = buckets.get(TOURNAMENT_STORE)
        return cls(
            player=PlayerRecord.from_dict(buckets.get(PLAYER_STORE)),
            ledger=TitleLedger.from_dict(tournament_bucket),
            tournaments=TournamentState.from_dict(tournament_bucket),
            rccs=RCCSState.from_dict(buckets.get(RCCS_STORE)),
            leaderboards=Leaderboards.from_dict(buckets.get(LEADERBOARD_STORE)),
            news=NewsFeed.from_dict(buckets.get(NEWS_STORE), current_version=current_version),
            roster=EliteRoster.from_dict(buckets.get(ELITE_STORE)),
        )

    def sync_season(self) -> None:
        """Tournament titles are stamped with the player's current season."""
        self.tournaments.current_season = self.player.current_season
