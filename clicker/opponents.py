"""AI opponent generation: elite picks, procedural names, MMRs and titles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .elite import ELITE_GATE_MMR, EliteAI, EliteRoster
from .randomness import RandomSource
from .rating import mmr_delta
from .titles import LEVEL_TITLE_NAMES
from .types import EliteId, GameMode, parse_mode

logger = logging.getLogger(__name__)

TEAMMATE_ELITE_CHANCE = 0.7
ENEMY_ELITE_CHANCE = 0.8
TEAMMATE_MMR_VARIATION = 100
ENEMY_MMR_VARIATION = 150
MIN_GENERATED_MMR = 100
RCCS_TITLE_CHANCE = 0.4
CHAMPION_GC_REWARD_CHANCE = 0.2

CASUAL_AI_NAMES: List[str] = [
    "QuickTap", "v1per", "Slugger", "MetaDrift", "Hydra", "Neo!", "ShadowDart", "SlipStream",
    "F1ick", "Karma", "Sparkz", "Glitch", "Dash7", "Ignite", "Cyclone", "Nova", "Opt1c",
    "Viral", "Stormz", "PyroBlast", "Bl1tz", "Echo", "Hover", "PulseRider", "yumi", "drali",
    "wez", "brickbybrick", "Rw9", "dark", "mawykzy!", "Speed", ".", "koto", "dani",
    "Qwert (OG)", "dr.k", "Void", "moon.", "Lru", "Kha0s", "rising.", "?", "dynamo", "f",
    "Hawk!", "newpo", "zen", "v", "a7md", "sieko", "Mino", "dyinq", "toxin", "Bez",
    "velocity", "Chronic", "Flinch", "vatsi", "Xyzle", "ca$h", "Darkmode", "nu3.",
    "LetsG0Brand0n", "VAWQK.", "helu30", "wizz", "Sczribbles.", "7up", "unkown", "t0es",
    "Jynx.", "Zapz", "Aur0", "Knight", "Cliqz", "Pyro.", "dash!", "ven", "flow.", "zenith",
    "volty", "Aqua!", "Styx", "cheeseboi", "Heat.", "Slyde", "fl1p", "Otto", "jetz", "Crisp",
    "snailracer", "Flickz", "tempo", "Blaze.", "skyfall", "steam", "storm", "rek:3", "vyna1",
    "deltairlines", "ph", "trace", "avidic", "tekk!", "fluwo", "climp?", "zark", "diza", "O",
    "Snooze", "gode", "cola", "hush(!)", "sh4oud", "vvv", "critt", "darkandlost2009",
    "pulse jubbo", "pl havicic", "ryft.", "Lyric", "dryft.", "horiz", "zeno", "octane",
    "wavetidess", "loster", "mamba", "Jack", "innadeze", "s", "offtenlost", "bivo", "Trace",
    "Talon", "{?}", "rraze", "Dark{?}", "zenhj", "rinshoros bf", "Cipher", "nova", "juzz",
    "officer", "strike", "Titan", "comp", "pahnton", "Mirage", "space", "boltt", "reeper",
    "piza", "cheese.", "frostbite", "warthunderisbest", "eecipe", "quantum", "vexz", "zylo",
    "frzno", "blurr", "scythe!", "wvr", "nxt", "griz", "jolt", "sift", "kryo", "wvn", "brixx",
]

# Coarse title-pool ranks: (upper bound exclusive, rank)
TITLE_POOL_RANKS = [
    (400, "Bronze"),
    (700, "Silver"),
    (1000, "Gold"),
    (1300, "Platinum"),
    (1600, "Diamond"),
    (1900, "Champion"),
]
TITLE_POOL_ORDER = ["Bronze", "Silver", "Gold", "Platinum", "Diamond", "Champion", "Grand Champion"]

# (minimum MMR, RCCS title suffixes), highest first
RCCS_TITLE_BRACKETS = [
    (2950, ("WORLD CHAMPION", "WORLDS FINALIST")),
    (2850, ("MAJOR CHAMPION", "WORLD CHALLENGER")),
    (2750, ("MAJOR CONTENDER", "REGIONAL CHAMPION")),
    (2650, ("REGIONAL ELITE", "REGIONAL FINALIST")),
    (2450, ("CONTENDER", "CHALLENGER")),
    (0, ("QUALIFIER", "PARTICIPANT")),
]


@dataclass
class Opponent:
    """Anything that occupies a non-player slot in a match."""

    name: str
    mmr: int
    is_teammate: bool
    title: str = ""

    kind = "generated"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "mmr": self.mmr,
            "is_teammate": self.is_teammate,
            "title": self.title,
        }


@dataclass
class GeneratedOpponent(Opponent):
    kind = "generated"


@dataclass
class EliteOpponent(Opponent):
    elite_id: EliteId = EliteId("")

    kind = "elite"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["elite_id"] = self.elite_id
        return data


@dataclass
class TournamentTeamMember(Opponent):
    entrant_id: str = ""

    kind = "tournament"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["entrant_id"] = self.entrant_id
        return data


def title_pool_rank(mmr: int) -> str:
    for upper, rank in TITLE_POOL_RANKS:
        if mmr < upper:
            return rank
    return "Grand Champion"


def random_ai_name(taken: Sequence[str], rng: RandomSource, pool: Sequence[str] = CASUAL_AI_NAMES) -> str:
    available = [name for name in pool if name not in taken]
    if not available:
        return f"Bot{rng.randint(0, 999)}"
    return rng.choice(available)


def generated_mmr(player_mmr: int, is_teammate: bool, rng: RandomSource) -> int:
    variation = TEAMMATE_MMR_VARIATION if is_teammate else ENEMY_MMR_VARIATION
    low = max(MIN_GENERATED_MMR, player_mmr - variation)
    high = max(low, player_mmr + variation)
    return rng.randint(low, high)


def rccs_title(mmr: int, current_season: int, rng: RandomSource) -> str:
    season = rng.randint(1, max(1, current_season))
    for minimum, suffixes in RCCS_TITLE_BRACKETS:
        if mmr >= minimum:
            return f"RCCS S{season} {rng.choice(suffixes)}"
    return f"RCCS S{season} PARTICIPANT"


def random_ai_title(ai_mmr: int, current_season: int, rng: RandomSource) -> str:
    """Rank-weighted title for a generated AI. Never empty."""
    rank_index = TITLE_POOL_ORDER.index(title_pool_rank(ai_mmr))
    seasons = range(1, max(1, current_season) + 1)

    if rank_index == len(TITLE_POOL_ORDER) - 1 and rng.chance(RCCS_TITLE_CHANCE):
        return rccs_title(ai_mmr, current_season, rng)

    season_titles: List[str] = []
    tournament_titles: List[str] = []
    for rank in TITLE_POOL_ORDER[: rank_index + 1]:
        for season in seasons:
            season_titles.append(f"S{season} {rank.upper()}")
            tournament_titles.append(f"S{season} {rank.upper()} TOURNAMENT WINNER")

    if rank_index <= 2:
        weights = (8, 2, 0)
    elif rank_index <= 4:
        weights = (5, 4, 1)
    else:
        weights = (2, 5, 3)

    pool: List[str] = []
    pool.extend(LEVEL_TITLE_NAMES * weights[0])
    pool.extend(season_titles * weights[1])
    pool.extend(tournament_titles * weights[2])
    if rank_index == 5 and rng.chance(CHAMPION_GC_REWARD_CHANCE):
        pool.extend(f"S{season} GRAND CHAMPION" for season in seasons)

    if not pool:
        return rng.choice(LEVEL_TITLE_NAMES)
    title = rng.choice(pool)
    return title or rng.choice(LEVEL_TITLE_NAMES)


def _elite_opponent(ai: EliteAI, mode: GameMode, is_teammate: bool) -> EliteOpponent:
    return EliteOpponent(
        name=ai.name,
        mmr=ai.mmr_for(mode),
        is_teammate=is_teammate,
        title=ai.title,
        elite_id=ai.id,
    )


def generate_opponents(
    mode: "GameMode | str",
    player_mmr: int,
    current_season: int,
    rng: RandomSource,
    roster: Optional[EliteRoster] = None,
) -> List[Opponent]:
    """Teammates (team size - 1) followed by enemies (team size) for one match."""
    mode = parse_mode(mode)
    team_size = mode.team_size
    elite_pool: List[EliteAI] = []
    if roster is not None and player_mmr >= ELITE_GATE_MMR:
        elite_pool = list(roster.in_range(player_mmr, mode))

    opponents: List[Opponent] = []

    def fill(count: int, is_teammate: bool, elite_chance: float) -> None:
        for _ in range(count):
            taken = [o.name for o in opponents]
            candidates = [ai for ai in elite_pool if ai.name not in taken]
            if candidates and rng.chance(elite_chance):
                ai = rng.choice(candidates)
                elite_pool.remove(ai)
                opponents.append(_elite_opponent(ai, mode, is_teammate))
                continue
            mmr = generated_mmr(player_mmr, is_teammate, rng)
            opponents.append(
                GeneratedOpponent(
                    name=random_ai_name(taken, rng),
                    mmr=mmr,
                    is_teammate=is_teammate,
                    title=random_ai_title(mmr, current_season, rng),
                )
            )

    fill(team_size - 1, True, TEAMMATE_ELITE_CHANCE)
    fill(team_size, False, ENEMY_ELITE_CHANCE)
    return opponents


def apply_elite_results(
    roster: EliteRoster,
    opponents: Sequence[Opponent],
    player_won: bool,
    mode: "GameMode | str",
    player_mmr: int,
) -> Dict[str, int]:
    """Update every elite participant's MMR after a match; returns id -> delta."""
    mode = parse_mode(mode)
    changes: Dict[str, int] = {}
    for opp in opponents:
        if not isinstance(opp, EliteOpponent):
            continue
        ai = roster.get(opp.elite_id)
        if ai is None:
            continue
        ai_won = player_won if opp.is_teammate else not player_won
        # The AI's opposition is whoever sat on the other side.
        if opp.is_teammate:
            against = [o.mmr for o in opponents if not o.is_teammate]
        else:
            against = [player_mmr] + [o.mmr for o in opponents if o.is_teammate]
        delta = mmr_delta(ai.mmr_for(mode), ai_won, against)
        roster.update_mmr(ai.id, mode, delta)
        changes[ai.id] = delta
    return changes


def opponent_from_dict(data: Dict[str, Any]) -> Opponent:
    """Rebuild an Opponent variant from ``Opponent.to_dict`` output."""
    common = {
        "name": data["name"],
        "mmr": int(data["mmr"]),
        "is_teammate": bool(data.get("is_teammate")),
        "title": data.get("title") or "",
    }
    kind = data.get("kind", GeneratedOpponent.kind)
    if kind == EliteOpponent.kind:
        return EliteOpponent(elite_id=EliteId(data.get("elite_id", "")), **common)
    if kind == TournamentTeamMember.kind:
        return TournamentTeamMember(entrant_id=data.get("entrant_id", ""), **common)
    return GeneratedOpponent(**common)
