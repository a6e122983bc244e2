"""Rank table: MMR -> tier, division and display colour."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# (rank name, minimum MMR), ascending
RANK_THRESHOLDS: List[Tuple[str, int]] = [
    ("Bronze I", 0),
    ("Bronze II", 100),
    ("Bronze III", 200),
    ("Silver I", 300),
    ("Silver II", 400),
    ("Silver III", 500),
    ("Gold I", 600),
    ("Gold II", 750),
    ("Gold III", 900),
    ("Platinum I", 1050),
    ("Platinum II", 1200),
    ("Platinum III", 1350),
    ("Diamond I", 1500),
    ("Diamond II", 1650),
    ("Diamond III", 1800),
    ("Champion I", 1950),
    ("Champion II", 2150),
    ("Champion III", 2350),
    ("Grand Champion", 2550),
]

RANK_COLORS: Dict[str, str] = {
    "Bronze": "#CD7F32",
    "Silver": "#C0C0C0",
    "Gold": "#FFD700",
    "Platinum": "#B9F2FF",
    "Diamond": "#0080FF",
    "Champion": "#9966CC",
    "Grand Champion": "#FF0000",
}

# Base ranks in ascending order, used for season rewards and title pools.
BASE_RANKS: List[str] = list(RANK_COLORS.keys())

DIVISIONS = ("I", "II", "III", "IV", "V")

GRAND_CHAMPION_MMR = RANK_THRESHOLDS[-1][1]
CHAMPION_III_MMR = 2350
GC_LEVEL_SPAN = 100


@dataclass(frozen=True)
class RankInfo:
    name: str
    color: str
    tier: int
    division: Optional[str] = None
    grand_champion_level: Optional[int] = None

    @property
    def base_rank(self) -> str:
        return base_rank_of(self.name)

    @property
    def display_name(self) -> str:
        if self.grand_champion_level is not None:
            return f"{self.name} {self.grand_champion_level}"
        return f"{self.name} Div {self.division}"


def base_rank_of(rank_name: str) -> str:
    """'Silver II' -> 'Silver', 'Grand Champion 3' -> 'Grand Champion'."""
    if rank_name.startswith("Grand Champion"):
        return "Grand Champion"
    return rank_name.split(" ")[0]


def _division(mmr: int, low: int, high: int) -> str:
    span = max(1, high - low)
    bucket = int((mmr - low) * len(DIVISIONS) / span)
    return DIVISIONS[max(0, min(len(DIVISIONS) - 1, bucket))]


def rank_info(mmr: int) -> RankInfo:
    """Map an MMR to its RankInfo. Total over all integers; negatives fall back to Bronze I."""
    for tier in range(len(RANK_THRESHOLDS) - 1, -1, -1):
        name, threshold = RANK_THRESHOLDS[tier]
        if mmr < threshold:
            continue
        color = RANK_COLORS[base_rank_of(name)]
        if name == "Grand Champion":
            level = (mmr - threshold) // GC_LEVEL_SPAN + 1
            return RankInfo(name=name, color=color, tier=tier, grand_champion_level=level)
        upper = RANK_THRESHOLDS[tier + 1][1]
        return RankInfo(
            name=name,
            color=color,
            tier=tier,
            division=_division(mmr, threshold, upper),
        )

    name, threshold = RANK_THRESHOLDS[0]
    return RankInfo(name=name, color=RANK_COLORS["Bronze"], tier=0, division="I")


def base_rank_index(mmr: int) -> int:
    """Index of the base rank (Bronze=0 ... Grand Champion=6) for an MMR."""
    return BASE_RANKS.index(rank_info(mmr).base_rank)


def rank_ladder() -> List[Dict[str, object]]:
    """Ladder rows for display, highest first."""
    rows: List[Dict[str, object]] = []
    for name, threshold in reversed(RANK_THRESHOLDS):
        rows.append(
            {
                "name": name,
                "min_mmr": threshold,
                "color": RANK_COLORS[base_rank_of(name)],
                "glow": name == "Grand Champion",
            }
        )
    return rows
