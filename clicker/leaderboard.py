"""Simulated top-25 leaderboards, one per mode."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .config import LEADERBOARD_FLUCTUATION_MS
from .randomness import RandomSource
from .ranks import rank_info
from .types import ALL_MODES, GameMode, parse_mode

logger = logging.getLogger(__name__)

BOARD_SIZE = 25
MIN_BOARD_MMR = 2800
FLUCTUATION_RANGE = 10
FLUCTUATION_FLOOR = 2550
FLUCTUATION_CEILING = 3100
PLAYER_ENTRY_ID = "player"

TOP_MMR = {
    GameMode.ONES: 3400,
    GameMode.TWOS: 3500,
    GameMode.THREES: 3450,
}
PRO_SLOTS = {
    GameMode.ONES: 15,
    GameMode.TWOS: 18,
    GameMode.THREES: 12,
}

PRO_NAMES = [
    "Atomic", "jstn.", "GarrettG", "Chicago", "Kaydop", "Turbopolsa", "Fairy Peak!", "RV.",
    "joreuz", "ahmad", "MonkeyMoon", "M0nkey M00n", "Extra", "joyo", "Zen", "trk511", "Vatira",
    "rise.", "ApparentlyJack", "Archie", "Rezears", "Seikoo", "Relatingwave", "Kassio",
    "Itachi", "AztraL", "oKhaliD", "Rw9", "Senzo", "Yanxnz",
    "Wonder", "Firstkiller", "Daniel", "Beastmode", "Dreaz", "Ayyjayy", "Sypical", "Retals",
    "Allushin", "Arsenal", "Memory", "Gyro.", "Taroco.", "Scrub Killa", "Speed", "Flame",
    "Flakes", "CJCJ", "Eekso", "Chausette45", "Alpha54", "Kuxir97", "Paschy90", "Mognus",
    "Mikeboy", "Bluey", "Tigreee", "Ferra", "Acronik", "Polar",
    "Chronic", "Shock", "Hockser", "Comm", "Bmode", "Noly", "Kv1", "Lion", "Aqua", "Radoko",
    "Nwpo", "LCT", "Oscillon", "Dmentza", "Catalysm", "Stake", "Godsmilla", "VorteX",
    "Breezi", "Arju", "SiN.exe", "Kinseh", "Maxeew", "Sniper", "Oaly", "Crisp", "Lethamyr",
    "Musty", "JZR", "Pulse Fire",
]
ADDITIONAL_NAMES = [
    "fl1p", "echo", "nova", "storm", "blaze", "dash", "pulse", "zero", "volt", "frost",
    "viper", "ghost", "rage", "swift", "flame", "spark", "vapor", "shift", "flux", "drift",
    "neon", "cyber", "omega", "alpha", "prime", "nexus", "zenith", "vertex", "matrix",
    "vector", "prism", "surge", "titan", "quake", "wraith",
]
ALL_NAMES = PRO_NAMES + ADDITIONAL_NAMES

SEASON_TITLE_CHANCE = 0.3
DEFAULT_BOARD_TITLE = "LEGEND"


@dataclass
class LeaderboardEntry:
    id: str
    name: str
    mmr: int
    wins: int
    losses: int
    title: Optional[str] = None
    is_player: bool = False
    last_updated: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(**{k: data[k] for k in cls.__dataclass_fields__ if k in data})


def mmr_for_position(position: int, mode: GameMode) -> int:
    """Linear ramp from the mode's top MMR (position 1) to 2800 (position 25)."""
    top = TOP_MMR[mode]
    step = (top - MIN_BOARD_MMR) / (BOARD_SIZE - 1)
    mmr = int(top - (position - 1) * step)
    return max(MIN_BOARD_MMR, min(top, mmr))


def stats_for(mmr: int, position: int, rng: RandomSource) -> Dict[str, int]:
    wins = int(200 + mmr / 10 + rng.random() * 300)
    win_rate = 0.65 + (BOARD_SIZE - position) * 0.01
    losses = int(wins / win_rate - wins)
    return {"wins": wins, "losses": max(losses, 10)}


def title_for(mmr: int, rng: RandomSource) -> str:
    if rng.chance(SEASON_TITLE_CHANCE):
        return f"S{rng.randint(1, 5)} {rank_info(mmr).base_rank.upper()}"
    return DEFAULT_BOARD_TITLE


def sort_board(board: List[LeaderboardEntry]) -> None:
    """Sort descending and nudge AI entries so no two share an MMR.

    The player's MMR is never touched: AI entries above the player keep
    room for it and AI entries below drop under it.
    """
    board.sort(key=lambda e: (e.mmr, e.is_player), reverse=True)
    player_index = next((i for i, e in enumerate(board) if e.is_player), None)
    for index, entry in enumerate(board):
        if entry.is_player:
            continue
        if index > 0:
            entry.mmr = min(entry.mmr, board[index - 1].mmr - 1)
        if player_index is not None and index < player_index:
            entry.mmr = max(entry.mmr, board[player_index].mmr + player_index - index)


@dataclass
class Leaderboards:
    boards: Dict[GameMode, List[LeaderboardEntry]] = field(
        default_factory=lambda: {mode: [] for mode in ALL_MODES}
    )
    last_fluctuation: int = 0

    def board(self, mode: "GameMode | str") -> List[LeaderboardEntry]:
        return self.boards[parse_mode(mode)]

    def initialize(self, rng: RandomSource, now_ms: int = 0, force: bool = False) -> None:
        """Generate every empty board (all of them with ``force``)."""
        generated = False
        for mode in ALL_MODES:
            if force or not self.boards[mode]:
                self.boards[mode] = generate_board(mode, rng, now_ms)
                generated = True
        if generated:
            self.last_fluctuation = now_ms

    def splice_player(
        self,
        username: str,
        mmr: Dict[GameMode, int],
        stats: Dict[GameMode, Any],
        title: Optional[str] = None,
        now_ms: int = 0,
    ) -> None:
        """Place the player's entry on every board where they are good enough."""
        for mode in ALL_MODES:
            player_mmr = mmr.get(mode, 0)
            if player_mmr < MIN_BOARD_MMR:
                continue
            board = [e for e in self.boards[mode] if not e.is_player]
            lowest = min((e.mmr for e in board[:BOARD_SIZE]), default=0)
            if player_mmr > lowest or len(board) < BOARD_SIZE:
                mode_stats = stats.get(mode)
                board.append(
                    LeaderboardEntry(
                        id=PLAYER_ENTRY_ID,
                        name=username,
                        mmr=player_mmr,
                        wins=getattr(mode_stats, "wins", 0),
                        losses=getattr(mode_stats, "losses", 0),
                        title=title,
                        is_player=True,
                        last_updated=now_ms,
                    )
                )
                sort_board(board)
                board = board[:BOARD_SIZE]
            self.boards[mode] = board

    def fluctuate(self, rng: RandomSource, now_ms: int) -> bool:
        """Random-walk every AI entry; at most once per fluctuation window."""
        if now_ms - self.last_fluctuation < LEADERBOARD_FLUCTUATION_MS:
            logger.debug("Leaderboard fluctuation skipped (rate limited)")
            return False
        for mode in ALL_MODES:
            board = self.boards[mode]
            for entry in board:
                if entry.is_player:
                    continue
                change = rng.randint(-FLUCTUATION_RANGE, FLUCTUATION_RANGE)
                entry.mmr = max(FLUCTUATION_FLOOR, min(FLUCTUATION_CEILING, entry.mmr + change))
                if change > 5:
                    entry.wins += rng.randint(1, 3)
                elif change < -5:
                    entry.losses += rng.randint(1, 2)
                entry.last_updated = now_ms
            sort_board(board)
        self.last_fluctuation = now_ms
        return True

    def rank(self, mode: "GameMode | str", player_mmr: int) -> int:
        board = self.board(mode)
        for index, entry in enumerate(board):
            if player_mmr >= entry.mmr:
                return index + 1
        return len(board) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "boards": {m.value: [e.to_dict() for e in b] for m, b in self.boards.items()},
            "last_fluctuation": self.last_fluctuation,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Leaderboards":
        boards = cls()
        if not data:
            return boards
        raw = data.get("boards") or {}
        for mode in ALL_MODES:
            boards.boards[mode] = [LeaderboardEntry.from_dict(e) for e in raw.get(mode.value) or []]
        boards.last_fluctuation = int(data.get("last_fluctuation", 0))
        return boards


def generate_board(mode: "GameMode | str", rng: RandomSource, now_ms: int = 0) -> List[LeaderboardEntry]:
    mode = parse_mode(mode)
    used = set()
    entries: List[LeaderboardEntry] = []
    for position in range(1, BOARD_SIZE + 1):
        pool = PRO_NAMES if position <= PRO_SLOTS[mode] else ALL_NAMES
        available = [n for n in pool if n not in used] or [n for n in ALL_NAMES if n not in used]
        name = rng.choice(available)
        used.add(name)
        mmr = mmr_for_position(position, mode)
        stats = stats_for(mmr, position, rng)
        entries.append(
            LeaderboardEntry(
                id=f"ai_{mode.value}_{position}",
                name=name,
                mmr=mmr,
                wins=stats["wins"],
                losses=stats["losses"],
                title=title_for(mmr, rng),
                last_updated=now_ms,
            )
        )
    return entries
