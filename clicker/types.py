"""Shared enums and type aliases for the simulation engine."""

from enum import Enum
from typing import NewType

EliteId = NewType("EliteId", str)
TitleId = NewType("TitleId", str)


class GameMode(str, Enum):
    """Ranked playlist."""

    ONES = "1v1"
    TWOS = "2v2"
    THREES = "3v3"

    @property
    def team_size(self) -> int:
        return int(self.value[0])


ALL_MODES = (GameMode.ONES, GameMode.TWOS, GameMode.THREES)


class QueueMode(str, Enum):
    """Whether a match affects MMR."""

    CASUAL = "casual"
    RANKED = "ranked"


class MatchPhase(str, Enum):
    COUNTDOWN = "countdown"
    PLAYING = "playing"
    FINISHED = "finished"


class TournamentPhase(str, Enum):
    WAITING = "waiting"
    QUEUED = "queued"
    IN_PROGRESS = "in-progress"
    FINISHED = "finished"


class TournamentType(str, Enum):
    ONES = "1v1"
    TWOS = "2v2"
    THREES = "3v3"
    SYNERGY_CUP = "synergy-cup"


class BracketRound(str, Enum):
    ROUND1 = "round1"
    ROUND2 = "round2"
    ROUND3 = "round3"
    SEMIFINAL = "semifinal"
    FINAL = "final"


ROUND_ORDER = (
    BracketRound.ROUND1,
    BracketRound.ROUND2,
    BracketRound.ROUND3,
    BracketRound.SEMIFINAL,
    BracketRound.FINAL,
)


class TitleColor(str, Enum):
    DEFAULT = "default"
    GREEN = "green"
    GOLDEN = "golden"
    AQUA = "aqua"


class RCCSStage(str, Enum):
    QUALIFIERS = "qualifiers"
    REGIONALS = "regionals"
    MAJORS = "majors"
    WORLDS = "worlds"


RCCS_STAGE_ORDER = (
    RCCSStage.QUALIFIERS,
    RCCSStage.REGIONALS,
    RCCSStage.MAJORS,
    RCCSStage.WORLDS,
)


class RCCSStatus(str, Enum):
    UPCOMING = "upcoming"
    REGISTRATION = "registration"
    ACTIVE = "active"
    COMPLETED = "completed"


def parse_mode(value: "str | GameMode") -> GameMode:
    """Coerce a playlist string into a GameMode, raising ValueError if unknown."""
    if isinstance(value, GameMode):
        return value
    return GameMode(value)
