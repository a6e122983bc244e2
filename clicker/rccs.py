"""RCCS championship: Qualifiers -> Regionals -> Majors -> Worlds.

Each stage is resolved in one step: teams are ordered by a weighted random
score, placements are assigned, teams below the stage cutoff are
eliminated, and the player's team is rewarded from the stage's reward
bands. Titles go into the shared TitleLedger.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from .opponents import CASUAL_AI_NAMES
from .randomness import RandomSource
from .ranks import CHAMPION_III_MMR
from .titles import TitleLedger, TournamentTitle, slugify
from .tournament import TeamMember
from .types import RCCS_STAGE_ORDER, RCCSStage, RCCSStatus, TitleColor, TitleId

logger = logging.getLogger(__name__)

PLAYER_TEAM_PREFIX = "team-"
AI_TEAM_COUNT = 127

TEAMMATE_SPREAD = 150
TEAMMATE_FLOOR = 2200
AI_MEMBER_SPREAD = 75
AI_MEMBER_FLOOR = 2400

# (cumulative probability, low, high) for AI team target average MMR
AI_TEAM_TIERS: List[Tuple[float, int, int]] = [
    (0.05, 3700, 3800),
    (0.20, 3400, 3699),
    (0.45, 3100, 3399),
    (0.75, 2900, 3099),
    (1.00, 2700, 2899),
]

SEASON_LENGTH_DAYS = 28
SIGNUP_WINDOW_DAYS = 7


@dataclass(frozen=True)
class StageRules:
    max_teams: int
    spread: float
    skill_weight: float
    cutoff: Optional[int]


STAGE_RULES: Dict[RCCSStage, StageRules] = {
    RCCSStage.QUALIFIERS: StageRules(max_teams=160, spread=400, skill_weight=0.7, cutoff=32),
    RCCSStage.REGIONALS: StageRules(max_teams=32, spread=350, skill_weight=0.8, cutoff=6),
    RCCSStage.MAJORS: StageRules(max_teams=12, spread=300, skill_weight=0.9, cutoff=6),
    RCCSStage.WORLDS: StageRules(max_teams=12, spread=250, skill_weight=1.0, cutoff=None),
}


@dataclass(frozen=True)
class RCCSReward:
    tier: str
    min_placement: int
    max_placement: int

    def title_name(self, season: int) -> str:
        return f"RCCS S{season} {self.tier}".upper()

    def covers(self, placement: int) -> bool:
        return self.min_placement <= placement <= self.max_placement


# Best tier first.
RCCS_REWARDS: Dict[RCCSStage, List[RCCSReward]] = {
    RCCSStage.QUALIFIERS: [
        RCCSReward("CONTENDER", 1, 32),
    ],
    RCCSStage.REGIONALS: [
        RCCSReward("REGIONAL CHAMPION", 1, 1),
        RCCSReward("REGIONAL ELITE", 3, 8),
        RCCSReward("REGIONAL FINALIST", 9, 16),
    ],
    RCCSStage.MAJORS: [
        RCCSReward("MAJOR CHAMPION", 1, 1),
        RCCSReward("WORLD CHALLENGER", 2, 6),
        RCCSReward("MAJOR CONTENDER", 7, 12),
    ],
    RCCSStage.WORLDS: [
        RCCSReward("WORLD CHAMPION", 1, 1),
        RCCSReward("WORLDS FINALIST", 2, 4),
    ],
}

# Reaching a stage implies the gate title of the one before it.
CASCADE_TIERS: Dict[RCCSStage, str] = {
    RCCSStage.REGIONALS: "CONTENDER",
    RCCSStage.MAJORS: "REGIONAL FINALIST",
    RCCSStage.WORLDS: "MAJOR CONTENDER",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RCCSTeam:
    id: str
    player_name: str
    player_mmr: int
    teammate1: TeamMember
    teammate2: TeamMember
    average_mmr: int
    eliminated: bool = False
    placement: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_name": self.player_name,
            "player_mmr": self.player_mmr,
            "teammate1": {"name": self.teammate1.name, "mmr": self.teammate1.mmr},
            "teammate2": {"name": self.teammate2.name, "mmr": self.teammate2.mmr},
            "average_mmr": self.average_mmr,
            "eliminated": self.eliminated,
            "placement": self.placement,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RCCSTeam":
        t1, t2 = data["teammate1"], data["teammate2"]
        return cls(
            id=data["id"],
            player_name=data["player_name"],
            player_mmr=int(data["player_mmr"]),
            teammate1=TeamMember(t1["name"], int(t1["mmr"])),
            teammate2=TeamMember(t2["name"], int(t2["mmr"])),
            average_mmr=int(data["average_mmr"]),
            eliminated=bool(data.get("eliminated")),
            placement=data.get("placement"),
        )


@dataclass
class RCCSTournament:
    id: str
    season: int
    stage: RCCSStage
    teams: List[RCCSTeam]
    status: RCCSStatus
    max_teams: int
    start_date: str = ""
    end_date: Optional[str] = None

    @property
    def rewards(self) -> List[RCCSReward]:
        return RCCS_REWARDS[self.stage]

    def team(self, team_id: str) -> Optional[RCCSTeam]:
        for team in self.teams:
            if team.id == team_id:
                return team
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "season": self.season,
            "stage": self.stage.value,
            "teams": [t.to_dict() for t in self.teams],
            "status": self.status.value,
            "max_teams": self.max_teams,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RCCSTournament":
        return cls(
            id=data["id"],
            season=int(data["season"]),
            stage=RCCSStage(data["stage"]),
            teams=[RCCSTeam.from_dict(t) for t in data.get("teams") or []],
            status=RCCSStatus(data["status"]),
            max_teams=int(data["max_teams"]),
            start_date=data.get("start_date", ""),
            end_date=data.get("end_date"),
        )


@dataclass
class RCCSNotification:
    id: str
    season: int
    message: str
    persistent: bool = True
    dismissed: bool = False
    type: str = "tournament-signup"


@dataclass
class RCCSHistoryEntry:
    season: int
    stage: RCCSStage
    placement: Optional[int]
    eliminated: bool
    titles: List[str] = field(default_factory=list)


@dataclass
class RCCSState:
    current_season: int = 1
    current: Optional[RCCSTournament] = None
    player_registered: bool = False
    player_team_id: Optional[str] = None
    history: List[RCCSHistoryEntry] = field(default_factory=list)
    notifications: List[RCCSNotification] = field(default_factory=list)
    season_end_date: Optional[str] = None
    tournament_start_date: Optional[str] = None

    def active_notifications(self) -> List[RCCSNotification]:
        return [n for n in self.notifications if not n.dismissed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_season": self.current_season,
            "current": self.current.to_dict() if self.current else None,
            "player_registered": self.player_registered,
            "player_team_id": self.player_team_id,
            "history": [
                {
                    "season": h.season,
                    "stage": h.stage.value,
                    "placement": h.placement,
                    "eliminated": h.eliminated,
                    "titles": list(h.titles),
                }
                for h in self.history
            ],
            "notifications": [
                {
                    "id": n.id,
                    "season": n.season,
                    "message": n.message,
                    "persistent": n.persistent,
                    "dismissed": n.dismissed,
                    "type": n.type,
                }
                for n in self.notifications
                if n.persistent
            ],
            "season_end_date": self.season_end_date,
            "tournament_start_date": self.tournament_start_date,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RCCSState":
        if not data:
            return cls()
        return cls(
            current_season=int(data.get("current_season", 1)),
            current=RCCSTournament.from_dict(data["current"]) if data.get("current") else None,
            player_registered=bool(data.get("player_registered")),
            player_team_id=data.get("player_team_id"),
            history=[
                RCCSHistoryEntry(
                    season=int(h["season"]),
                    stage=RCCSStage(h["stage"]),
                    placement=h.get("placement"),
                    eliminated=bool(h.get("eliminated")),
                    titles=list(h.get("titles") or []),
                )
                for h in data.get("history") or []
            ],
            notifications=[
                RCCSNotification(
                    id=n["id"],
                    season=int(n["season"]),
                    message=n.get("message", ""),
                    persistent=bool(n.get("persistent", True)),
                    dismissed=bool(n.get("dismissed")),
                    type=n.get("type", "tournament-signup"),
                )
                for n in data.get("notifications") or []
            ],
            season_end_date=data.get("season_end_date"),
            tournament_start_date=data.get("tournament_start_date"),
        )


def is_eligible(highest_mmr: int) -> bool:
    return highest_mmr >= CHAMPION_III_MMR


def rccs_title_id(season: int, title_name: str) -> TitleId:
    return TitleId(f"rccs-s{season}-{slugify(title_name)}")


def reward_for(stage: RCCSStage, placement: int) -> Optional[RCCSReward]:
    """Best reward band containing ``placement``, or None."""
    for reward in RCCS_REWARDS[stage]:
        if reward.covers(placement):
            return reward
    return None


def cascade_reward(stage: RCCSStage) -> Optional[RCCSReward]:
    tier = CASCADE_TIERS.get(stage)
    if tier is None:
        return None
    for rewards in RCCS_REWARDS.values():
        for reward in rewards:
            if reward.tier == tier:
                return reward
    return None


def next_stage(stage: RCCSStage) -> Optional[RCCSStage]:
    idx = RCCS_STAGE_ORDER.index(stage)
    if idx + 1 >= len(RCCS_STAGE_ORDER):
        return None
    return RCCS_STAGE_ORDER[idx + 1]


def stage_scores(teams: List[RCCSTeam], rules: StageRules, rng: RandomSource) -> Dict[str, float]:
    """Weighted random score per team id: skill_weight * (avg - top avg) + U(0, spread)."""
    if not teams:
        return {}
    top = max(t.average_mmr for t in teams)
    return {
        t.id: rules.skill_weight * (t.average_mmr - top) + rng.uniform(0, rules.spread)
        for t in teams
    }


class RCCSEngine:
    def __init__(
        self,
        state: RCCSState,
        ledger: TitleLedger,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.state = state
        self.ledger = ledger
        self.rng = rng
        self.clock = clock

    # -- season and notifications ------------------------------------------

    def initialize(self, now: Optional[datetime] = None) -> None:
        now = now or self.clock()
        if self.state.season_end_date is None:
            end = now + timedelta(days=SEASON_LENGTH_DAYS)
            self.state.season_end_date = end.isoformat()
            self.state.tournament_start_date = (end - timedelta(days=SIGNUP_WINDOW_DAYS)).isoformat()
        start = datetime.fromisoformat(self.state.tournament_start_date)
        days_until = math.ceil((start - now).total_seconds() / 86400)
        if 0 <= days_until <= SIGNUP_WINDOW_DAYS:
            self.open_signup(
                f"RCCS Season {self.state.current_season} Tournament begins in {days_until} days! "
                "Sign up now (Champion III+ only)"
            )

    def open_signup(self, message: Optional[str] = None) -> RCCSNotification:
        season = self.state.current_season
        notification_id = f"tournament-signup-s{season}"
        for n in self.state.notifications:
            if n.id == notification_id:
                return n
        notification = RCCSNotification(
            id=notification_id,
            season=season,
            message=message
            or f"RCCS Season {season} Tournament is starting! Sign up now (Champion III+ only)",
        )
        self.state.notifications.append(notification)
        return notification

    def dismiss_notification(self, notification_id: str) -> None:
        for n in self.state.notifications:
            if n.id == notification_id:
                n.dismissed = True

    def decline_signup(self) -> None:
        self.dismiss_notification(f"tournament-signup-s{self.state.current_season}")

    def start_new_season(self, now: Optional[datetime] = None) -> int:
        now = now or self.clock()
        self.state.current_season += 1
        self.state.current = None
        self.state.player_registered = False
        self.state.player_team_id = None
        self.state.notifications = []
        end = now + timedelta(days=SEASON_LENGTH_DAYS)
        self.state.season_end_date = end.isoformat()
        self.state.tournament_start_date = (end - timedelta(days=SIGNUP_WINDOW_DAYS)).isoformat()
        logger.info(f"RCCS season {self.state.current_season} started")
        return self.state.current_season

    # -- registration --------------------------------------------------------

    def register(self, player_name: str, player_mmr: int) -> Optional[RCCSTournament]:
        """Register the player's team and seed Qualifiers. Ineligible players are ignored."""
        if not is_eligible(player_mmr):
            logger.info(f"Player not eligible for RCCS at {player_mmr} MMR (need Champion III+)")
            return None
        if self.state.player_registered and self.state.current is not None:
            logger.info("Player already registered for RCCS")
            return self.state.current

        player_team = self.build_player_team(player_name, player_mmr)
        teams = [player_team] + self.generate_ai_teams(AI_TEAM_COUNT)
        tournament = self._new_stage(RCCSStage.QUALIFIERS, teams, RCCSStatus.REGISTRATION)
        self.state.current = tournament
        self.state.player_registered = True
        self.state.player_team_id = player_team.id
        self.decline_signup()
        logger.info(f"Registered {player_name} for RCCS S{self.state.current_season}")
        return tournament

    def build_player_team(self, player_name: str, player_mmr: int) -> RCCSTeam:
        taken: List[str] = [player_name]

        def teammate() -> TeamMember:
            mmr = max(TEAMMATE_FLOOR, int(player_mmr + self.rng.uniform(-TEAMMATE_SPREAD, TEAMMATE_SPREAD)))
            return TeamMember(self._name(taken), mmr)

        t1, t2 = teammate(), teammate()
        return RCCSTeam(
            id=f"{PLAYER_TEAM_PREFIX}{player_name}",
            player_name=player_name,
            player_mmr=player_mmr,
            teammate1=t1,
            teammate2=t2,
            average_mmr=(player_mmr + t1.mmr + t2.mmr) // 3,
        )

    def generate_ai_teams(self, count: int) -> List[RCCSTeam]:
        teams: List[RCCSTeam] = []
        for i in range(count):
            roll = self.rng.random()
            low, high = AI_TEAM_TIERS[-1][1:]
            for cumulative, tier_low, tier_high in AI_TEAM_TIERS:
                if roll < cumulative:
                    low, high = tier_low, tier_high
                    break
            target = self.rng.uniform(low, high)
            taken: List[str] = []
            members = [
                TeamMember(
                    self._name(taken),
                    max(AI_MEMBER_FLOOR, int(target + self.rng.uniform(-AI_MEMBER_SPREAD, AI_MEMBER_SPREAD))),
                )
                for _ in range(3)
            ]
            teams.append(
                RCCSTeam(
                    id=f"ai-team-{i + 1}",
                    player_name=members[0].name,
                    player_mmr=members[0].mmr,
                    teammate1=members[1],
                    teammate2=members[2],
                    average_mmr=sum(m.mmr for m in members) // 3,
                )
            )
        teams.sort(key=lambda t: t.average_mmr, reverse=True)
        return teams

    def _name(self, taken: List[str]) -> str:
        available = [n for n in CASUAL_AI_NAMES if n not in taken]
        name = self.rng.choice(available) if available else f"Player{len(taken) + 1}"
        taken.append(name)
        return name

    def _new_stage(self, stage: RCCSStage, teams: List[RCCSTeam], status: RCCSStatus) -> RCCSTournament:
        season = self.state.current_season
        return RCCSTournament(
            id=f"rccs-s{season}-{stage.value}",
            season=season,
            stage=stage,
            teams=teams,
            status=status,
            max_teams=STAGE_RULES[stage].max_teams,
            start_date=self.clock().isoformat(),
        )

    # -- stage resolution ----------------------------------------------------

    @property
    def player_team(self) -> Optional[RCCSTeam]:
        if self.state.current is None or self.state.player_team_id is None:
            return None
        return self.state.current.team(self.state.player_team_id)

    def resolve_stage(self, tournament: RCCSTournament) -> None:
        """Assign placements 1..N and eliminate teams below the stage cutoff."""
        rules = STAGE_RULES[tournament.stage]
        tournament.status = RCCSStatus.ACTIVE
        scores = stage_scores(tournament.teams, rules, self.rng)
        ordered = sorted(tournament.teams, key=lambda t: scores[t.id], reverse=True)
        for index, team in enumerate(ordered):
            team.placement = index + 1
            team.eliminated = rules.cutoff is not None and team.placement > rules.cutoff
        tournament.teams = ordered

    def apply_stage_results(self, tournament: RCCSTournament) -> List[TournamentTitle]:
        """Reward the player's team, then clear, finish or move on to the next stage."""
        awarded: List[TournamentTitle] = []
        player = tournament.team(self.state.player_team_id or "")
        if player is not None and player.placement is not None:
            reward = reward_for(tournament.stage, player.placement)
            if reward is not None:
                earned = [reward]
                cascade = cascade_reward(tournament.stage)
                if cascade is not None:
                    earned.append(cascade)
                for r in earned:
                    title = self.award_title(r.title_name(tournament.season), player.placement)
                    if title is not None:
                        awarded.append(title)

        self.state.history.append(
            RCCSHistoryEntry(
                season=tournament.season,
                stage=tournament.stage,
                placement=player.placement if player else None,
                eliminated=player.eliminated if player else True,
                titles=[t.name for t in awarded],
            )
        )

        following = next_stage(tournament.stage)
        if following is None:
            tournament.status = RCCSStatus.COMPLETED
            tournament.end_date = self.clock().isoformat()
            self.state.player_registered = False
            logger.info(f"RCCS S{tournament.season} complete")
        elif player is None or player.eliminated:
            tournament.status = RCCSStatus.COMPLETED
            self.state.current = None
            self.state.player_registered = False
            logger.info(
                f"Player eliminated at {tournament.stage.value} "
                f"(placement {player.placement if player else '?'})"
            )
        else:
            tournament.status = RCCSStatus.COMPLETED
            size = STAGE_RULES[following].max_teams
            advancing = sorted(tournament.teams, key=lambda t: t.placement or 0)[:size]
            for team in advancing:
                team.eliminated = False
                team.placement = None
            self.state.current = self._new_stage(following, advancing, RCCSStatus.ACTIVE)
            logger.info(f"Advanced to {following.value} with {len(advancing)} teams")
        return awarded

    def advance(self) -> List[TournamentTitle]:
        tournament = self.state.current
        if tournament is None or tournament.status is RCCSStatus.COMPLETED:
            return []
        self.resolve_stage(tournament)
        return self.apply_stage_results(tournament)

    def award_title(self, title_name: str, placement: int) -> Optional[TournamentTitle]:
        season = self.state.current_season
        title = TournamentTitle(
            id=rccs_title_id(season, title_name),
            name=title_name.upper(),
            season=season,
            rank="RCCS",
            wins=1,
            color=TitleColor.AQUA,
            date_awarded=self.clock().isoformat(),
        )
        if not self.ledger.award(title):
            return None
        logger.info(f"RCCS title {title.name} for placement {placement}")
        return title

    # -- debug ---------------------------------------------------------------

    def force_start(self, stage: "RCCSStage | str", player_name: str, player_mmr: int) -> RCCSTournament:
        """Start a fresh season and drop the player's team straight into ``stage``."""
        stage = RCCSStage(stage)
        self.start_new_season()
        self.open_signup()
        player_team = self.build_player_team(player_name, player_mmr)
        size = STAGE_RULES[stage].max_teams
        teams = [player_team] + self.generate_ai_teams(size - 1)
        self.state.current = self._new_stage(stage, teams, RCCSStatus.ACTIVE)
        self.state.player_registered = True
        self.state.player_team_id = player_team.id
        logger.info(f"Forced RCCS S{self.state.current_season} {stage.value}")
        return self.state.current
