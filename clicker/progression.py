"""Player progression: MMR, stats, placements, XP/levels, season rewards and titles."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .ranks import BASE_RANKS, GRAND_CHAMPION_MMR, base_rank_index
from .titles import (
    LEVEL_TITLES,
    TitleLedger,
    TitleStyle,
    ledger_title_style,
    level_title_for,
    level_title_id,
    season_title_id,
    season_title_name,
    slugify,
    title_style,
)
from .types import ALL_MODES, GameMode, parse_mode

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "Player"
DEFAULT_MMR = 500
PLACEMENT_MATCHES = 5
MAX_USERNAME_LENGTH = 20

XP_PER_WIN = 25
XP_PER_LOSS = 10
XP_BASE = 100
XP_GROWTH = 1.25

SEASON_DECAY = 0.8
SEASON_MMR_FLOOR = 100
SEASON_REWARD_WINS_PER_TIER = 10


def xp_to_next(level: int) -> int:
    return int(math.floor(XP_BASE * XP_GROWTH ** (level - 1)))


@dataclass
class ModeStats:
    wins: int = 0
    losses: int = 0
    best_mmr: int = DEFAULT_MMR


@dataclass
class SeasonReward:
    rank: str
    season: int
    unlocked: bool = False

    @property
    def title_id(self) -> str:
        return season_title_id(self.season, self.rank)

    @property
    def title_name(self) -> str:
        return season_title_name(self.season, self.rank)


@dataclass
class AvailableTitle:
    id: str
    name: str
    kind: str
    style: TitleStyle


def _per_mode(value: Any) -> Dict[GameMode, Any]:
    return {mode: value for mode in ALL_MODES}


@dataclass
class PlayerRecord:
    username: str = DEFAULT_USERNAME
    current_season: int = 1
    mmr: Dict[GameMode, int] = field(default_factory=lambda: _per_mode(DEFAULT_MMR))
    stats: Dict[GameMode, ModeStats] = field(
        default_factory=lambda: {mode: ModeStats() for mode in ALL_MODES}
    )
    placement_matches: Dict[GameMode, int] = field(
        default_factory=lambda: _per_mode(PLACEMENT_MATCHES)
    )
    level: int = 1
    xp: int = 0
    xp_to_next: int = XP_BASE
    season_wins: Dict[GameMode, int] = field(default_factory=lambda: _per_mode(0))
    season_rewards: List[SeasonReward] = field(default_factory=list)
    unlocked_titles: List[str] = field(
        default_factory=lambda: [level_title_id(LEVEL_TITLES[0][0])]
    )
    equipped_title: Optional[str] = None

    @property
    def highest_mmr(self) -> int:
        return max(self.mmr.values()) if self.mmr else 0

    @property
    def total_season_wins(self) -> int:
        return sum(self.season_wins.values())

    def is_placed(self, mode: "GameMode | str") -> bool:
        return self.placement_matches[parse_mode(mode)] == 0

    def unlock_title(self, title_id: str) -> bool:
        if title_id in self.unlocked_titles:
            return False
        self.unlocked_titles.append(title_id)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "current_season": self.current_season,
            "mmr": {m.value: v for m, v in self.mmr.items()},
            "stats": {
                m.value: {"wins": s.wins, "losses": s.losses, "best_mmr": s.best_mmr}
                for m, s in self.stats.items()
            },
            "placement_matches": {m.value: v for m, v in self.placement_matches.items()},
            "level": self.level,
            "xp": self.xp,
            "xp_to_next": self.xp_to_next,
            "season_wins": {m.value: v for m, v in self.season_wins.items()},
            "season_rewards": [
                {"rank": r.rank, "season": r.season, "unlocked": r.unlocked}
                for r in self.season_rewards
            ],
            "unlocked_titles": list(self.unlocked_titles),
            "equipped_title": self.equipped_title,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlayerRecord":
        record = cls()
        if not data:
            return record

        def modes(key: str, default: Any) -> Dict[GameMode, Any]:
            raw = data.get(key) or {}
            return {m: raw.get(m.value, default) for m in ALL_MODES}

        record.username = data.get("username", DEFAULT_USERNAME)
        record.current_season = int(data.get("current_season", 1))
        record.mmr = {m: int(v) for m, v in modes("mmr", DEFAULT_MMR).items()}
        raw_stats = modes("stats", {})
        record.stats = {
            m: ModeStats(
                wins=int(s.get("wins", 0)),
                losses=int(s.get("losses", 0)),
                best_mmr=int(s.get("best_mmr", record.mmr[m])),
            )
            for m, s in raw_stats.items()
        }
        record.placement_matches = {
            m: int(v) for m, v in modes("placement_matches", PLACEMENT_MATCHES).items()
        }
        record.level = int(data.get("level", 1))
        record.xp = int(data.get("xp", 0))
        record.xp_to_next = int(data.get("xp_to_next", xp_to_next(record.level)))
        record.season_wins = {m: int(v) for m, v in modes("season_wins", 0).items()}
        record.season_rewards = [
            SeasonReward(rank=r["rank"], season=int(r["season"]), unlocked=bool(r.get("unlocked")))
            for r in data.get("season_rewards") or []
        ]
        record.unlocked_titles = list(data.get("unlocked_titles") or record.unlocked_titles)
        record.equipped_title = data.get("equipped_title")
        return record


def update_username(record: PlayerRecord, username: str) -> bool:
    name = (username or "").strip()
    if not 1 <= len(name) <= MAX_USERNAME_LENGTH:
        logger.info(f"Rejected username of length {len(name)}")
        return False
    record.username = name
    return True


def grant_xp(record: PlayerRecord, amount: int) -> List[int]:
    """Add XP and level up as many times as it covers. Returns the levels reached."""
    record.xp += max(0, amount)
    reached: List[int] = []
    while record.xp >= record.xp_to_next:
        record.xp -= record.xp_to_next
        record.level += 1
        record.xp_to_next = xp_to_next(record.level)
        reached.append(record.level)
        title = level_title_for(record.level)
        if title and record.unlock_title(level_title_id(title)):
            logger.info(f"Unlocked level title {title} at level {record.level}")
    return reached


def apply_match_result(record: PlayerRecord, mode: "GameMode | str", is_win: bool) -> List[int]:
    mode = parse_mode(mode)
    stats = record.stats[mode]
    if is_win:
        stats.wins += 1
        record.season_wins[mode] += 1
    else:
        stats.losses += 1
    record.placement_matches[mode] = max(0, record.placement_matches[mode] - 1)
    return grant_xp(record, XP_PER_WIN if is_win else XP_PER_LOSS)


def apply_mmr_change(record: PlayerRecord, mode: "GameMode | str", delta: int) -> int:
    mode = parse_mode(mode)
    new_mmr = max(0, record.mmr[mode] + delta)
    record.mmr[mode] = new_mmr
    stats = record.stats[mode]
    stats.best_mmr = max(stats.best_mmr, new_mmr)
    return new_mmr


def check_season_rewards(record: PlayerRecord) -> List[SeasonReward]:
    """Unlock season rewards earned so far; returns the ones unlocked by this call.

    Every base rank up to the player's highest current rank gets an entry for
    the current season. A rank at index i needs (i+1)*10 season wins summed
    over all modes. Rewards never re-lock.
    """
    top_index = base_rank_index(record.highest_mmr)
    wins = record.total_season_wins
    newly: List[SeasonReward] = []

    for index in range(top_index + 1):
        rank = BASE_RANKS[index]
        reward = next(
            (
                r
                for r in record.season_rewards
                if r.rank == rank and r.season == record.current_season
            ),
            None,
        )
        if reward is None:
            reward = SeasonReward(rank=rank, season=record.current_season)
            record.season_rewards.append(reward)
        if reward.unlocked:
            continue
        if wins >= (index + 1) * SEASON_REWARD_WINS_PER_TIER:
            reward.unlocked = True
            record.unlock_title(reward.title_id)
            newly.append(reward)
            logger.info(f"Season reward unlocked: {reward.title_name}")
    return newly


def rollover_season(record: PlayerRecord) -> None:
    record.current_season += 1
    for mode in ALL_MODES:
        record.mmr[mode] = max(SEASON_MMR_FLOOR, int(math.floor(record.mmr[mode] * SEASON_DECAY)))
        record.placement_matches[mode] = PLACEMENT_MATCHES
        record.season_wins[mode] = 0
    record.season_rewards = []
    logger.info(f"Season rolled over to {record.current_season}")


def _season_title_from_id(title_id: str) -> Optional[str]:
    # season-s{n}-{rank-slug}
    prefix, _, rest = title_id.partition("-s")
    if prefix != "season" or "-" not in rest:
        return None
    season, _, slug = rest.partition("-")
    if not season.isdigit():
        return None
    for rank in BASE_RANKS:
        if slugify(rank) == slug:
            return season_title_name(int(season), rank)
    return None


def available_titles(record: PlayerRecord, ledger: Optional[TitleLedger] = None) -> List[AvailableTitle]:
    """Every title the player may equip: level, season rewards, then ledger titles."""
    out: List[AvailableTitle] = []
    seen = set()

    def add(title_id: str, name: str, kind: str, style: TitleStyle) -> None:
        if title_id in seen:
            return
        seen.add(title_id)
        out.append(AvailableTitle(id=title_id, name=name, kind=kind, style=style))

    for name, _ in LEVEL_TITLES:
        title_id = level_title_id(name)
        if title_id in record.unlocked_titles:
            add(title_id, name, "level", title_style(name))

    for reward in record.season_rewards:
        if reward.unlocked:
            add(reward.title_id, reward.title_name, "season", title_style(reward.title_name))

    for title_id in record.unlocked_titles:
        name = _season_title_from_id(title_id)
        if name:
            add(title_id, name, "season", title_style(name))

    if ledger is not None:
        for title in ledger.list():
            add(title.id, title.name, "tournament", ledger_title_style(title))
    return out


def equip_title(record: PlayerRecord, title_id: Optional[str], ledger: Optional[TitleLedger] = None) -> bool:
    """Equip an available title (None clears it). Unknown ids leave the record unchanged."""
    if title_id is None:
        record.equipped_title = None
        return True
    if title_id not in {t.id for t in available_titles(record, ledger)}:
        logger.info(f"Cannot equip unavailable title {title_id}")
        return False
    record.equipped_title = title_id
    return True


def equipped_title_name(record: PlayerRecord, ledger: Optional[TitleLedger] = None) -> Optional[str]:
    for title in available_titles(record, ledger):
        if title.id == record.equipped_title:
            return title.name
    return None


def is_grand_champion(record: PlayerRecord) -> bool:
    return record.highest_mmr >= GRAND_CHAMPION_MMR
