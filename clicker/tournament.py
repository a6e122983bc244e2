"""Standard single-elimination tournaments and the Synergy Cup.

Entrants are solo players (1v1) or whole teams (2v2, 3v3, Synergy Cup); a
bracket match always pairs exactly two entrants. Round 1 pairs a shuffled
field consecutively and drops an unpaired entrant. Later rounds pair the
previous round's winners in order, with best-of escalating to 3 at the
semifinal and 5 at the final.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .config import TOURNAMENT_RECOMPUTE_MS
from .opponents import TournamentTeamMember
from .randomness import RandomSource
from .ranks import GRAND_CHAMPION_MMR, base_rank_of, rank_info
from .titles import TitleLedger, TournamentTitle, slugify
from .types import (
    ROUND_ORDER,
    BracketRound,
    GameMode,
    TitleColor,
    TitleId,
    TournamentPhase,
    TournamentType,
)

logger = logging.getLogger(__name__)

PLAYER_ENTRANT_ID = "player"

# Entrants per bracket (players for 1v1, teams otherwise)
BRACKET_SIZES = {
    TournamentType.ONES: 8,
    TournamentType.TWOS: 4,
    TournamentType.THREES: 4,
    TournamentType.SYNERGY_CUP: 32,
}
TEAM_SIZES = {
    TournamentType.ONES: 1,
    TournamentType.TWOS: 2,
    TournamentType.THREES: 3,
    TournamentType.SYNERGY_CUP: 2,
}
BEST_OF = {
    BracketRound.ROUND1: 1,
    BracketRound.ROUND2: 1,
    BracketRound.ROUND3: 1,
    BracketRound.SEMIFINAL: 3,
    BracketRound.FINAL: 5,
}

STANDARD_MMR_RANGE = (1000, 3100)
SYNERGY_CUP_MMR_RANGE = (GRAND_CHAMPION_MMR, 3500)

TOURNAMENT_INTERVAL_MINUTES = 10
SYNERGY_CUP_WEEKDAY = 5  # Saturday
SYNERGY_CUP_HOUR = 19
MAX_QUEUE_POSITION = 8

TITLE_UPGRADE_WINS = 3
AI_WIN_SCALE = 200.0
AI_SCORE_RANGE = (30, 79)

SYNERGY_CUP_ELITE_ID = TitleId("synergy-cup-elite")
SYNERGY_CUP_ELITE_SEASONS = 3
SYNERGY_CUP_ELITE_PLACEMENT = 10

TOURNAMENT_AI_NAMES = [
    "L", "kupid", "l0st", "jayleng", "weweewew", "RisingPhoinex87", "dr.1", "prot", "hunt",
    "kif", "rivverott", "1x Dark", "Moxxy!", "dark!", "Vortex", "FlickMaster17", "r",
    "Skywave!", "R3tr0", "TurboClash893", "Zynk", "Null_Force", "Orbital", "Boosted",
    "GravyTrain", "NitroNinja", "PixelPlay", "PhantomX", "Fury", "Zero!", "Moonlight",
    "Phantom", "Rage", "Storm", "Elite", "Apex", "Titan", "Shadow", "Lightning", "Thunder",
    "Blaze", "Frost", "Magma", "Void", "Cosmic", "Nebula", "Galaxy", "Solar", "Lunar",
    "Eclipse", "Aurora", "Comet", "Meteor", "Quasar", "Pulsar", "Supernova", "Starfire",
    "Nightfall", "Dawn", "Twilight", "Horizon", "Zenith", "Velocity", "Momentum", "Energy",
    "Force", "Power", "Strength", "Dominance", "Victory", "Triumph", "Glory", "Honor",
    "Legend", "Myth", "Hero", "Champion", "Master", "Expert",
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TeamMember:
    name: str
    mmr: int


@dataclass
class TournamentPlayer:
    """One bracket entrant. ``members`` lists the AI behind it (teammates for the player)."""

    id: str
    name: str
    rank: str
    mmr: int
    is_player: bool = False
    eliminated: bool = False
    members: List[TeamMember] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rank": self.rank,
            "mmr": self.mmr,
            "is_player": self.is_player,
            "eliminated": self.eliminated,
            "members": [{"name": m.name, "mmr": m.mmr} for m in self.members],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentPlayer":
        return cls(
            id=data["id"],
            name=data["name"],
            rank=data.get("rank", ""),
            mmr=int(data.get("mmr", 0)),
            is_player=bool(data.get("is_player")),
            eliminated=bool(data.get("eliminated")),
            members=[TeamMember(m["name"], int(m["mmr"])) for m in data.get("members") or []],
        )


@dataclass
class GameResult:
    game_number: int
    winner: str
    scores: Dict[str, int] = field(default_factory=dict)


@dataclass
class TournamentMatch:
    id: str
    round: BracketRound
    players: List[TournamentPlayer]
    best_of: int = 1
    games: List[GameResult] = field(default_factory=list)
    is_complete: bool = False
    winner: Optional[str] = None

    @property
    def has_player(self) -> bool:
        return any(p.is_player for p in self.players)

    @property
    def wins_needed(self) -> int:
        return self.best_of // 2 + 1

    def wins_for(self, entrant_id: str) -> int:
        return sum(1 for g in self.games if g.winner == entrant_id)

    def entrant(self, entrant_id: str) -> Optional[TournamentPlayer]:
        for p in self.players:
            if p.id == entrant_id:
                return p
        return None

    def opponent_of(self, entrant_id: str) -> Optional[TournamentPlayer]:
        for p in self.players:
            if p.id != entrant_id:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "round": self.round.value,
            "players": [p.id for p in self.players],
            "best_of": self.best_of,
            "games": [
                {"game_number": g.game_number, "winner": g.winner, "scores": dict(g.scores)}
                for g in self.games
            ],
            "is_complete": self.is_complete,
            "winner": self.winner,
        }


@dataclass
class StandardTournament:
    id: str
    type: TournamentType
    phase: TournamentPhase
    players: List[TournamentPlayer]
    matches: List[TournamentMatch] = field(default_factory=list)
    current_round: BracketRound = BracketRound.ROUND1
    start_time: str = ""

    def match(self, match_id: str) -> TournamentMatch:
        for m in self.matches:
            if m.id == match_id:
                return m
        raise KeyError(f"Unknown tournament match: {match_id}")

    def round_matches(self, rnd: Optional[BracketRound] = None) -> List[TournamentMatch]:
        rnd = rnd or self.current_round
        return [m for m in self.matches if m.round is rnd]

    @property
    def player_entrant(self) -> Optional[TournamentPlayer]:
        for p in self.players:
            if p.is_player:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "phase": self.phase.value,
            "players": [p.to_dict() for p in self.players],
            "matches": [m.to_dict() for m in self.matches],
            "current_round": self.current_round.value,
            "start_time": self.start_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StandardTournament":
        players = [TournamentPlayer.from_dict(p) for p in data.get("players") or []]
        by_id = {p.id: p for p in players}
        matches = [
            TournamentMatch(
                id=m["id"],
                round=BracketRound(m["round"]),
                players=[by_id[pid] for pid in m["players"] if pid in by_id],
                best_of=int(m.get("best_of", 1)),
                games=[
                    GameResult(int(g["game_number"]), g["winner"], dict(g.get("scores") or {}))
                    for g in m.get("games") or []
                ],
                is_complete=bool(m.get("is_complete")),
                winner=m.get("winner"),
            )
            for m in data.get("matches") or []
        ]
        return cls(
            id=data["id"],
            type=TournamentType(data["type"]),
            phase=TournamentPhase(data["phase"]),
            players=players,
            matches=matches,
            current_round=BracketRound(data.get("current_round", BracketRound.ROUND1.value)),
            start_time=data.get("start_time", ""),
        )


@dataclass
class SynergyCupPlacement:
    season: int
    placement: int
    date: str


@dataclass
class TournamentState:
    current_season: int = 1
    next_tournament_time: Optional[str] = None
    next_synergy_cup_time: Optional[str] = None
    current: Optional[StandardTournament] = None
    is_queued: bool = False
    queued_type: Optional[TournamentType] = None
    queue_position: int = 0
    season_wins: Dict[str, int] = field(default_factory=dict)
    synergy_cup_placements: List[SynergyCupPlacement] = field(default_factory=list)
    synergy_cup_notification_shown: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_season": self.current_season,
            "next_tournament_time": self.next_tournament_time,
            "next_synergy_cup_time": self.next_synergy_cup_time,
            "current": self.current.to_dict() if self.current else None,
            "is_queued": self.is_queued,
            "queued_type": self.queued_type.value if self.queued_type else None,
            "queue_position": self.queue_position,
            "season_wins": dict(self.season_wins),
            "synergy_cup_placements": [
                {"season": p.season, "placement": p.placement, "date": p.date}
                for p in self.synergy_cup_placements
            ],
            "synergy_cup_notification_shown": self.synergy_cup_notification_shown,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TournamentState":
        if not data:
            return cls()
        queued = data.get("queued_type")
        return cls(
            current_season=int(data.get("current_season", 1)),
            next_tournament_time=data.get("next_tournament_time"),
            next_synergy_cup_time=data.get("next_synergy_cup_time"),
            current=StandardTournament.from_dict(data["current"]) if data.get("current") else None,
            is_queued=bool(data.get("is_queued")),
            queued_type=TournamentType(queued) if queued else None,
            queue_position=int(data.get("queue_position", 0)),
            season_wins={k: int(v) for k, v in (data.get("season_wins") or {}).items()},
            synergy_cup_placements=[
                SynergyCupPlacement(int(p["season"]), int(p["placement"]), p.get("date", ""))
                for p in data.get("synergy_cup_placements") or []
            ],
            synergy_cup_notification_shown=bool(data.get("synergy_cup_notification_shown")),
        )


# -- scheduling --------------------------------------------------------------


def next_tournament_time(now: datetime) -> datetime:
    """Next 10-minute boundary at or after ``now``."""
    floored = now.replace(second=0, microsecond=0)
    if floored == now and now.minute % TOURNAMENT_INTERVAL_MINUTES == 0:
        return now
    minutes = (now.minute // TOURNAMENT_INTERVAL_MINUTES + 1) * TOURNAMENT_INTERVAL_MINUTES
    return floored.replace(minute=0) + timedelta(minutes=minutes)


def next_synergy_cup_time(now: datetime) -> datetime:
    """Next Saturday 19:00 at or after ``now``."""
    days = (SYNERGY_CUP_WEEKDAY - now.weekday()) % 7
    start = (now + timedelta(days=days)).replace(
        hour=SYNERGY_CUP_HOUR, minute=0, second=0, microsecond=0
    )
    if start < now:
        start += timedelta(days=7)
    return start


def game_mode_for(tournament_type: "TournamentType | str") -> GameMode:
    """Playlist a bracket's matches are played in; the Synergy Cup is 2v2."""
    size = TEAM_SIZES[TournamentType(tournament_type)]
    return GameMode(f"{size}v{size}")


def ai_win_probability(mmr_a: float, mmr_b: float) -> float:
    return 1.0 / (1.0 + math.exp(-(mmr_a - mmr_b) / AI_WIN_SCALE))


def next_round_for(remaining: int, current: BracketRound) -> BracketRound:
    """Round that follows ``current`` for ``remaining`` entrants; always strictly later."""
    if remaining <= 2:
        target = BracketRound.FINAL
    elif remaining <= 4:
        target = BracketRound.SEMIFINAL
    elif remaining <= 8:
        target = BracketRound.ROUND3
    elif remaining <= 16:
        target = BracketRound.ROUND2
    else:
        target = ROUND_ORDER[min(ROUND_ORDER.index(current) + 1, len(ROUND_ORDER) - 1)]
    floor_index = min(ROUND_ORDER.index(current) + 1, len(ROUND_ORDER) - 1)
    return ROUND_ORDER[max(ROUND_ORDER.index(target), floor_index)]


class TournamentEngine:
    """Owns a TournamentState and awards into the shared title ledger."""

    def __init__(
        self,
        state: TournamentState,
        ledger: TitleLedger,
        rng: RandomSource,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.state = state
        self.ledger = ledger
        self.rng = rng
        self.clock = clock

    @property
    def current(self) -> Optional[StandardTournament]:
        return self.state.current

    # -- schedule and queue ---------------------------------------------------

    def refresh_schedule(self, now: Optional[datetime] = None) -> None:
        now = now or self.clock()
        self.state.next_tournament_time = next_tournament_time(now).isoformat()
        self.state.next_synergy_cup_time = next_synergy_cup_time(now).isoformat()

    def refresh_stale_schedule(self, now: Optional[datetime] = None) -> bool:
        """Recompute due times that lapsed a full recompute period ago.

        A queued player keeps their due time so the start is not skipped.
        """
        now = now or self.clock()
        if self.state.next_tournament_time is not None:
            lapsed = now - datetime.fromisoformat(self.state.next_tournament_time)
            if self.state.is_queued or lapsed < timedelta(milliseconds=TOURNAMENT_RECOMPUTE_MS):
                return False
        self.refresh_schedule(now)
        logger.debug(f"Tournament schedule recomputed: next at {self.state.next_tournament_time}")
        return True

    def is_game_mode_blocked(self) -> bool:
        current = self.state.current
        return self.state.is_queued or (
            current is not None and current.phase is TournamentPhase.IN_PROGRESS
        )

    def join_queue(self, tournament_type: "TournamentType | str", highest_mmr: int = 0) -> bool:
        tournament_type = TournamentType(tournament_type)
        current = self.state.current
        if current is not None and current.phase is TournamentPhase.IN_PROGRESS:
            logger.info("Cannot queue while a tournament is in progress")
            return False
        if tournament_type is TournamentType.SYNERGY_CUP and not self.is_eligible_for_synergy_cup(highest_mmr):
            logger.info(f"Not eligible for the Synergy Cup at {highest_mmr} MMR")
            return False
        self.state.is_queued = True
        self.state.queued_type = tournament_type
        self.state.queue_position = self.rng.randint(1, MAX_QUEUE_POSITION)
        return True

    def leave_queue(self) -> None:
        self.state.is_queued = False
        self.state.queued_type = None
        self.state.queue_position = 0

    @staticmethod
    def is_eligible_for_synergy_cup(highest_mmr: int) -> bool:
        return highest_mmr >= GRAND_CHAMPION_MMR

    def check_and_start(
        self, now: datetime, player_name: str, highest_mmr: int
    ) -> Optional[StandardTournament]:
        """Start the queued tournament once its scheduled time has arrived."""
        if not self.state.is_queued or self.state.queued_type is None:
            return None
        if self.state.next_tournament_time is None:
            self.refresh_schedule(now)

        if self.state.queued_type is TournamentType.SYNERGY_CUP:
            due = datetime.fromisoformat(self.state.next_synergy_cup_time)
            if not self.is_eligible_for_synergy_cup(highest_mmr):
                return None
            if now >= due and not self.state.synergy_cup_notification_shown:
                self.state.synergy_cup_notification_shown = True
                logger.info("Synergy Cup starting")
        else:
            due = datetime.fromisoformat(self.state.next_tournament_time)
        if now < due:
            return None
        tournament = self.start(self.state.queued_type, player_name, highest_mmr)
        # The slot just used is taken; move both due times past it.
        self.refresh_schedule(now + timedelta(seconds=1))
        return tournament

    # -- bracket ---------------------------------------------------------------

    def start(
        self,
        tournament_type: "TournamentType | str",
        player_name: str,
        player_mmr: int,
    ) -> StandardTournament:
        tournament_type = TournamentType(tournament_type)
        now = self.clock()
        entrants = self._build_field(tournament_type, player_name, player_mmr)
        tournament = StandardTournament(
            id=f"tournament-{int(now.timestamp() * 1000)}",
            type=tournament_type,
            phase=TournamentPhase.IN_PROGRESS,
            players=entrants,
            start_time=now.isoformat(),
        )
        self.state.current = tournament
        self.leave_queue()
        tournament.matches = self.generate_bracket(entrants)
        logger.info(
            f"Started {tournament_type.value} tournament with {len(entrants)} entrants"
        )
        return tournament

    def generate_bracket(self, entrants: List[TournamentPlayer]) -> List[TournamentMatch]:
        return self._pair(self.rng.sample(entrants, len(entrants)), BracketRound.ROUND1)

    def _pair(self, entrants: List[TournamentPlayer], rnd: BracketRound) -> List[TournamentMatch]:
        matches: List[TournamentMatch] = []
        for i in range(0, len(entrants) - 1, 2):
            matches.append(
                TournamentMatch(
                    id=f"{rnd.value}-{i // 2}",
                    round=rnd,
                    players=[entrants[i], entrants[i + 1]],
                    best_of=BEST_OF[rnd],
                )
            )
        if len(entrants) % 2:
            dropped = entrants[-1]
            dropped.eliminated = True
            logger.info(f"{dropped.name} left unpaired in {rnd.value}")
        return matches

    def _build_field(
        self, tournament_type: TournamentType, player_name: str, player_mmr: int
    ) -> List[TournamentPlayer]:
        team_size = TEAM_SIZES[tournament_type]
        low, high = (
            SYNERGY_CUP_MMR_RANGE if tournament_type is TournamentType.SYNERGY_CUP else STANDARD_MMR_RANGE
        )
        names = list(TOURNAMENT_AI_NAMES)
        self.rng.shuffle(names)

        def next_name(i: int) -> str:
            return names.pop() if names else f"Player{i + 1}"

        counter = 0
        player_members: List[TeamMember] = []
        for _ in range(team_size - 1):
            counter += 1
            player_members.append(TeamMember(next_name(counter), self.rng.randint(low, high - 1)))
        entrants = [
            TournamentPlayer(
                id=PLAYER_ENTRANT_ID,
                name=player_name,
                rank=rank_info(player_mmr).name,
                mmr=player_mmr,
                is_player=True,
                members=player_members,
            )
        ]
        for i in range(BRACKET_SIZES[tournament_type] - 1):
            members = []
            for _ in range(team_size):
                counter += 1
                members.append(TeamMember(next_name(counter), self.rng.randint(low, high - 1)))
            mmr = sum(m.mmr for m in members) // len(members)
            entrants.append(
                TournamentPlayer(
                    id=f"ai-{i}",
                    name=" & ".join(m.name for m in members),
                    rank=rank_info(mmr).name,
                    mmr=mmr,
                    members=members,
                )
            )
        return entrants

    # -- match play ------------------------------------------------------------

    def simulate_ai_matches(self) -> int:
        """Resolve every open AI-only match in the current round; returns how many."""
        tournament = self.state.current
        if tournament is None:
            return 0
        resolved = 0
        for match in tournament.round_matches():
            if match.is_complete or match.has_player:
                continue
            a, b = match.players
            p_a = ai_win_probability(a.mmr, b.mmr)
            while match.wins_for(a.id) < match.wins_needed and match.wins_for(b.id) < match.wins_needed:
                winner = a if self.rng.chance(p_a) else b
                match.games.append(
                    GameResult(
                        game_number=len(match.games) + 1,
                        winner=winner.id,
                        scores={p.id: self.rng.randint(*AI_SCORE_RANGE) for p in match.players},
                    )
                )
            self.complete_match(
                match.id,
                a.id if match.wins_for(a.id) >= match.wins_needed else b.id,
                match.games,
            )
            resolved += 1
        return resolved

    def complete_match(self, match_id: str, winner: str, games: List[GameResult]) -> TournamentMatch:
        tournament = self._require_current()
        match = tournament.match(match_id)
        if match.entrant(winner) is None:
            raise ValueError(f"{winner} is not in match {match_id}")
        match.games = list(games)
        match.is_complete = True
        match.winner = winner
        return match

    def player_match(self) -> Optional[TournamentMatch]:
        tournament = self.state.current
        if tournament is None or tournament.phase is not TournamentPhase.IN_PROGRESS:
            return None
        for match in tournament.round_matches():
            if match.has_player and not match.is_complete:
                return match
        return None

    def match_opponents(self, match_id: str) -> List[TournamentTeamMember]:
        """Match-runner opponents for the player's match: teammates first, then enemies."""
        match = self._require_current().match(match_id)
        player = match.entrant(PLAYER_ENTRANT_ID)
        enemy = match.opponent_of(PLAYER_ENTRANT_ID)
        if player is None or enemy is None:
            raise ValueError(f"Player is not in match {match_id}")
        out = [
            TournamentTeamMember(name=m.name, mmr=m.mmr, is_teammate=True, entrant_id=player.id)
            for m in player.members
        ]
        members = enemy.members or [TeamMember(enemy.name, enemy.mmr)]
        # Solo entrants play as themselves.
        out.extend(
            TournamentTeamMember(name=m.name, mmr=m.mmr, is_teammate=False, entrant_id=enemy.id)
            for m in members
        )
        return out

    def record_player_game(
        self, match_id: str, player_won: bool, player_score: int, opponent_score: int
    ) -> TournamentMatch:
        tournament = self._require_current()
        match = tournament.match(match_id)
        if match.is_complete:
            return match
        enemy = match.opponent_of(PLAYER_ENTRANT_ID)
        if enemy is None or match.entrant(PLAYER_ENTRANT_ID) is None:
            raise ValueError(f"Player is not in match {match_id}")
        match.games.append(
            GameResult(
                game_number=len(match.games) + 1,
                winner=PLAYER_ENTRANT_ID if player_won else enemy.id,
                scores={PLAYER_ENTRANT_ID: player_score, enemy.id: opponent_score},
            )
        )
        if match.wins_for(PLAYER_ENTRANT_ID) >= match.wins_needed:
            self.complete_match(match.id, PLAYER_ENTRANT_ID, match.games)
        elif match.wins_for(enemy.id) >= match.wins_needed:
            self.complete_match(match.id, enemy.id, match.games)
        return match

    def advance_round(self) -> Optional[BracketRound]:
        """Build the next round from the current round's winners.

        Returns the new round, or None if the round is still open or the
        tournament just finished.
        """
        tournament = self.state.current
        if tournament is None or tournament.phase is not TournamentPhase.IN_PROGRESS:
            return None
        matches = tournament.round_matches()
        if not matches or not all(m.is_complete for m in matches):
            return None

        winners: List[TournamentPlayer] = []
        for match in matches:
            for p in match.players:
                if p.id == match.winner:
                    winners.append(p)
                else:
                    p.eliminated = True

        player = tournament.player_entrant
        if player is not None and player.eliminated and any(
            m.has_player for m in matches
        ) and tournament.type is TournamentType.SYNERGY_CUP:
            self.award_synergy_cup_title(len(winners) + 1)

        if len(winners) <= 1:
            tournament.phase = TournamentPhase.FINISHED
            if winners and winners[0].is_player:
                if tournament.type is TournamentType.SYNERGY_CUP:
                    self.award_synergy_cup_title(1)
                else:
                    self.award_title(tournament.type, base_rank_of(winners[0].rank))
            logger.info(f"Tournament {tournament.id} finished")
            return None

        next_round = next_round_for(len(winners), tournament.current_round)
        tournament.current_round = next_round
        tournament.matches.extend(self._pair(winners, next_round))
        return next_round

    # -- titles ------------------------------------------------------------------

    def award_title(self, tournament_type: "TournamentType | str", rank: str) -> TournamentTitle:
        tournament_type = TournamentType(tournament_type)
        season = self.state.current_season
        base_rank = base_rank_of(rank)
        key = f"s{season}-{tournament_type.value}"
        wins = self.state.season_wins.get(key, 0) + 1
        self.state.season_wins[key] = wins

        color = TitleColor.DEFAULT
        if wins >= TITLE_UPGRADE_WINS:
            color = TitleColor.GOLDEN if base_rank == "Grand Champion" else TitleColor.GREEN

        title_id = TitleId(f"s{season}-{tournament_type.value}-{slugify(base_rank)}")
        existing = self.ledger.get(title_id)
        if existing is not None:
            self.ledger.upgrade(title_id, wins, color if wins >= TITLE_UPGRADE_WINS else existing.color)
            return existing

        title = TournamentTitle(
            id=title_id,
            name=f"S{season} {base_rank.upper()} TOURNAMENT WINNER",
            season=season,
            rank=base_rank,
            wins=wins,
            color=color,
            date_awarded=self.clock().isoformat(),
        )
        self.ledger.award(title)
        return title

    def award_synergy_cup_title(self, placement: int) -> List[TournamentTitle]:
        season = self.state.current_season
        now = self.clock().isoformat()
        self.state.synergy_cup_placements.append(SynergyCupPlacement(season, placement, now))

        awarded: List[TournamentTitle] = []
        name = None
        if placement == 1:
            name = f"SYNERGY CUP S{season} CHAMPION"
        elif placement <= 3:
            name = f"SYNERGY CUP S{season} FINALIST"
        if name:
            title = TournamentTitle(
                id=TitleId(f"synergy-cup-s{season}-p{placement}"),
                name=name,
                season=season,
                rank="Synergy Cup",
                wins=1,
                color=TitleColor.GOLDEN,
                date_awarded=now,
            )
            if self.ledger.award(title):
                awarded.append(title)

        top_seasons = {
            p.season
            for p in self.state.synergy_cup_placements
            if p.placement <= SYNERGY_CUP_ELITE_PLACEMENT
        }
        if placement <= SYNERGY_CUP_ELITE_PLACEMENT and len(top_seasons) >= SYNERGY_CUP_ELITE_SEASONS:
            elite = TournamentTitle(
                id=SYNERGY_CUP_ELITE_ID,
                name="SYNERGY CUP ELITE",
                season=0,
                rank="Elite",
                wins=len(top_seasons),
                color=TitleColor.GOLDEN,
                date_awarded=now,
            )
            if self.ledger.award(elite):
                awarded.append(elite)
        return awarded

    def _require_current(self) -> StandardTournament:
        if self.state.current is None:
            raise ValueError("No tournament in progress")
        return self.state.current
