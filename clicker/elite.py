"""Fixed roster of 30 elite AI with persistent, match-affected MMR."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .types import ALL_MODES, EliteId, GameMode, parse_mode

logger = logging.getLogger(__name__)

ELITE_MIN_MMR = 100
ELITE_GATE_MMR = 1900
ELITE_MATCH_RANGE = 150


@dataclass
class EliteAI:
    id: EliteId
    name: str
    current_mmr: Dict[str, int]
    title: str
    games_played: int
    win_rate: float

    def mmr_for(self, mode: GameMode) -> int:
        return self.current_mmr[parse_mode(mode).value]


def _elite(idx: int, name: str, mmr: tuple, title: str, games: int, win_rate: float) -> EliteAI:
    return EliteAI(
        id=EliteId(f"elite_{idx:02d}"),
        name=name,
        current_mmr={"1v1": mmr[0], "2v2": mmr[1], "3v3": mmr[2]},
        title=title,
        games_played=games,
        win_rate=win_rate,
    )


ELITE_SEED: List[EliteAI] = [
    # World champion tier
    _elite(1, "L", (2987, 2945, 2923), "RCCS S1 WORLD CHAMPION", 2847, 0.89),
    _elite(2, "kupid", (2965, 2978, 2901), "RCCS S1 WORLDS FINALIST", 3124, 0.87),
    _elite(3, "l0st", (2943, 2934, 2956), "RCCS S1 WORLD CHAMPION", 2653, 0.91),
    _elite(4, "jayleng", (2932, 2967, 2912), "RCCS S1 MAJOR CHAMPION", 2789, 0.86),
    _elite(5, "weweewew", (2919, 2898, 2943), "RCCS S1 WORLDS FINALIST", 3456, 0.88),
    _elite(6, "RisingPhoinex87", (2907, 2923, 2889), "RCCS S1 MAJOR CHAMPION", 2234, 0.85),
    _elite(7, "dr.1", (2901, 2887, 2934), "RCCS S1 WORLD CHALLENGER", 2967, 0.87),
    _elite(8, "prot", (2889, 2945, 2876), "RCCS S1 MAJOR CHAMPION", 3089, 0.84),
    _elite(9, "hunt", (2876, 2901, 2923), "RCCS S1 WORLDS FINALIST", 2567, 0.89),
    _elite(10, "kif", (2867, 2834, 2898), "RCCS S1 MAJOR CHAMPION", 2123, 0.86),
    # Major / regional tier
    _elite(11, "rivverott", (2834, 2867, 2823), "RCCS S1 REGIONAL CHAMPION", 2345, 0.83),
    _elite(12, "1x Dark", (2823, 2798, 2845), "RCCS S1 REGIONAL ELITE", 2789, 0.82),
    _elite(13, "Moxxy!", (2798, 2823, 2812), "RCCS S1 MAJOR CONTENDER", 2456, 0.81),
    _elite(14, "dark!", (2789, 2756, 2834), "RCCS S1 REGIONAL CHAMPION", 2678, 0.80),
    _elite(15, "Vortex", (2767, 2789, 2745), "S1 GRAND CHAMPION", 2234, 0.78),
    _elite(16, "FlickMaster17", (2745, 2734, 2778), "RCCS S1 REGIONAL FINALIST", 2567, 0.79),
    _elite(17, "Skywave!", (2734, 2767, 2723), "RCCS S1 REGIONAL ELITE", 2890, 0.77),
    _elite(18, "R3tr0", (2723, 2712, 2756), "RCCS S1 CONTENDER", 2123, 0.76),
    _elite(19, "TurboClash893", (2712, 2745, 2701), "S1 GRAND CHAMPION", 2345, 0.75),
    _elite(20, "Zynk", (2701, 2689, 2734), "RCCS S1 CHALLENGER", 2456, 0.74),
    # High grand champion tier
    _elite(21, "Null_Force", (2689, 2701, 2678), "RCCS S1 PARTICIPANT", 2234, 0.73),
    _elite(22, "Orbital", (2678, 2656, 2689), "S1 GRAND CHAMPION", 2567, 0.72),
    _elite(23, "Boosted", (2656, 2678, 2645), "RCCS S1 QUALIFIER", 2789, 0.71),
    _elite(24, "GravyTrain", (2645, 2634, 2667), "S1 GRAND CHAMPION", 2123, 0.70),
    _elite(25, "NitroNinja", (2634, 2645, 2623), "MASTER", 2345, 0.69),
    _elite(26, "PixelPlay", (2623, 2612, 2634), "S1 GRAND CHAMPION", 2456, 0.68),
    _elite(27, "PhantomX", (2612, 2623, 2601), "GRANDMASTER", 2567, 0.67),
    _elite(28, "Fury", (2601, 2589, 2612), "S1 GRAND CHAMPION", 2678, 0.66),
    _elite(29, "Zero!", (2589, 2601, 2578), "LEGEND", 2789, 0.65),
    _elite(30, "Moonlight", (2578, 2567, 2589), "S1 GRAND CHAMPION", 2890, 0.64),
]


@dataclass
class EliteRoster:
    """Runtime copy of the elite roster. Members are never added or removed."""

    members: List[EliteAI] = field(default_factory=lambda: copy.deepcopy(ELITE_SEED))

    def get(self, elite_id: EliteId) -> Optional[EliteAI]:
        for ai in self.members:
            if ai.id == elite_id:
                return ai
        return None

    def in_range(self, player_mmr: int, mode: GameMode, mmr_range: int = ELITE_MATCH_RANGE) -> List[EliteAI]:
        mode = parse_mode(mode)
        return [ai for ai in self.members if abs(ai.mmr_for(mode) - player_mmr) <= mmr_range]

    def should_use(self, player_mmr: int, mode: GameMode) -> bool:
        return player_mmr >= ELITE_GATE_MMR and len(self.in_range(player_mmr, mode)) > 0

    def update_mmr(self, elite_id: EliteId, mode: GameMode, mmr_change: int) -> None:
        ai = self.get(elite_id)
        if ai is None:
            logger.debug(f"Unknown elite id {elite_id}; skipping MMR update")
            return
        key = parse_mode(mode).value
        ai.current_mmr[key] = max(ELITE_MIN_MMR, ai.current_mmr[key] + mmr_change)

        previous_games = ai.games_played
        ai.games_played += 1
        wins = round(ai.win_rate * previous_games)
        if mmr_change > 0:
            wins += 1
        ai.win_rate = wins / ai.games_played
        logger.info(
            f"Elite {ai.name} ({ai.id}) {'gained' if mmr_change > 0 else 'lost'} "
            f"{abs(mmr_change)} MMR in {key}"
        )

    def leaderboard(self, mode: GameMode, limit: int = 10) -> List[EliteAI]:
        mode = parse_mode(mode)
        return sorted(self.members, key=lambda ai: ai.mmr_for(mode), reverse=True)[:limit]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "members": [
                {
                    "id": ai.id,
                    "current_mmr": dict(ai.current_mmr),
                    "games_played": ai.games_played,
                    "win_rate": ai.win_rate,
                }
                for ai in self.members
            ]
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EliteRoster":
        roster = cls()
        for row in (data or {}).get("members") or []:
            ai = roster.get(row.get("id", ""))
            if ai is None:
                continue
            for mode in ALL_MODES:
                value = (row.get("current_mmr") or {}).get(mode.value)
                if value is not None:
                    ai.current_mmr[mode.value] = int(value)
            ai.games_played = int(row.get("games_played", ai.games_played))
            ai.win_rate = float(row.get("win_rate", ai.win_rate))
        return roster
