"""Display titles: level titles, title styling and the shared title ledger.

The ledger is the single store of tournament, Synergy Cup and RCCS titles.
Both tournament engines award into it and the progression store reads from
it, so neither engine touches the other's state.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .types import TitleColor, TitleId

logger = logging.getLogger(__name__)

LEVEL_TITLE_COLOR = "#9CA3AF"
DEFAULT_TITLE_COLOR = "#9CA3AF"
RCCS_COLOR = "#00FFFF"
GOLDEN_COLOR = "#FFD700"
GREEN_COLOR = "#22C55E"

# (title, level required)
LEVEL_TITLES = [
    ("ROOKIE", 1),
    ("NOVICE", 5),
    ("APPRENTICE", 10),
    ("JOURNEYMAN", 15),
    ("EXPERT", 20),
    ("MASTER", 25),
    ("GRANDMASTER", 30),
    ("LEGEND", 40),
]
LEVEL_TITLE_NAMES = [name for name, _ in LEVEL_TITLES]

TITLE_RANK_COLORS = {
    "BRONZE": "#CD7F32",
    "SILVER": "#C0C0C0",
    "GOLD": "#FFD700",
    "PLATINUM": "#E5E4E2",
    "DIAMOND": "#B9F2FF",
    "CHAMPION": "#9966CC",
    "GRAND CHAMPION": "#FFD700",
}

_SEASON_TITLE = re.compile(r"^S\d+ ")
_TOURNAMENT_RANK = re.compile(r"S\d+ (.+?) TOURNAMENT")


@dataclass(frozen=True)
class TitleStyle:
    color: str
    glow: bool


@dataclass
class TournamentTitle:
    id: TitleId
    name: str
    season: int
    rank: str
    wins: int
    color: TitleColor
    date_awarded: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["color"] = self.color.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentTitle":
        return cls(
            id=TitleId(data["id"]),
            name=data["name"],
            season=int(data.get("season", 0)),
            rank=data.get("rank", ""),
            wins=int(data.get("wins", 1)),
            color=TitleColor(data.get("color", TitleColor.DEFAULT.value)),
            date_awarded=data.get("date_awarded", ""),
        )


def level_title_id(name: str) -> str:
    return f"level-{name.lower()}"


def level_title_for(level: int) -> Optional[str]:
    """Level title whose requirement is exactly ``level``."""
    for name, required in LEVEL_TITLES:
        if required == level:
            return name
    return None


def slugify(text: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "-", text).lower()


def season_title_name(season: int, rank: str) -> str:
    return f"S{season} {rank.upper()}"


def season_title_id(season: int, rank: str) -> str:
    return f"season-s{season}-{slugify(rank)}"


def _rank_color(rank: str) -> str:
    upper = rank.upper()
    if "GRAND CHAMPION" in upper:
        return TITLE_RANK_COLORS["GRAND CHAMPION"]
    for rank_name, color in TITLE_RANK_COLORS.items():
        if rank_name in upper:
            return color
    return DEFAULT_TITLE_COLOR


def title_style(title: str) -> TitleStyle:
    """Colour and glow for a title string as shown next to a name."""
    if title in LEVEL_TITLE_NAMES:
        return TitleStyle(color=LEVEL_TITLE_COLOR, glow=title == "LEGEND")
    if "RCCS S" in title:
        return TitleStyle(color=RCCS_COLOR, glow=True)
    if "SYNERGY CUP" in title:
        return TitleStyle(color=GOLDEN_COLOR, glow=True)
    if "TOURNAMENT WINNER" in title:
        match = _TOURNAMENT_RANK.search(title)
        rank = match.group(1) if match else ""
        return TitleStyle(color=_rank_color(rank), glow="GRAND CHAMPION" in rank)
    if _SEASON_TITLE.match(title):
        rank = title.split(" ", 1)[1]
        return TitleStyle(color=_rank_color(rank), glow="GRAND CHAMPION" in rank)
    return TitleStyle(color=DEFAULT_TITLE_COLOR, glow=False)


def ledger_title_style(title: TournamentTitle) -> TitleStyle:
    if title.color is TitleColor.AQUA:
        return TitleStyle(color=RCCS_COLOR, glow=True)
    if title.color is TitleColor.GOLDEN:
        return TitleStyle(color=GOLDEN_COLOR, glow=True)
    if title.color is TitleColor.GREEN:
        return TitleStyle(color=GREEN_COLOR, glow=False)
    return title_style(title.name)


@dataclass
class TitleLedger:
    """Append-only store of awarded titles, unique by id."""

    titles: List[TournamentTitle] = field(default_factory=list)

    def get(self, title_id: TitleId) -> Optional[TournamentTitle]:
        for title in self.titles:
            if title.id == title_id:
                return title
        return None

    def award(self, title: TournamentTitle) -> bool:
        """Store ``title``; returns False (and changes nothing) if the id exists."""
        if self.get(title.id) is not None:
            logger.info(f"Title already awarded: {title.name}")
            return False
        self.titles.append(title)
        logger.info(f"Awarded title: {title.name}")
        return True

    def upgrade(self, title_id: TitleId, wins: int, color: TitleColor) -> bool:
        title = self.get(title_id)
        if title is None:
            return False
        title.wins = wins
        title.color = color
        return True

    def list(self) -> List[TournamentTitle]:
        return list(self.titles)

    def __len__(self) -> int:
        return len(self.titles)

    def to_dict(self) -> Dict[str, Any]:
        return {"titles": [t.to_dict() for t in self.titles]}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TitleLedger":
        rows = (data or {}).get("titles") or []
        return cls(titles=[TournamentTitle.from_dict(r) for r in rows])
