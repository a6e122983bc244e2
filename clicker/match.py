"""Match runner: countdown -> playing -> finished, advanced by explicit ticks.

A MatchSession owns its timers. The caller feeds elapsed time with
``tick()`` (normally 100ms at a time) and forwards player clicks with
``click()``. ``cancel()`` stops every owned timer; a cancelled or finished
session ignores further ticks and clicks.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Sequence

from .clicks import ai_clicks_per_tick
from .clock import TimerGroup
from .config import CLOCK_TICK_MS, SCORING_TICK_MS
from .opponents import Opponent
from .randomness import RandomSource
from .types import GameMode, MatchPhase, QueueMode, parse_mode

logger = logging.getLogger(__name__)

COUNTDOWN_SECONDS = 3
MIN_DURATION_SECONDS = 30
MAX_DURATION_SECONDS = 50

FREEZE_CHANCE_PER_SECOND = 0.05
FREEZE_MIN_MS = 1000
FREEZE_MAX_MS = 3000
REACTION_MIN_MS = 200
REACTION_MAX_MS = 800
FREEZE_PENALTY = 2

FORFEIT_DEFICIT = 15
FORFEIT_TIME_LEFT_SECONDS = 20
FORFEIT_CHANCE_PER_TICK = 0.1


@dataclass
class Participant:
    """Scoring slot in a match: the player or one AI."""

    name: str
    mmr: int
    on_player_team: bool
    is_player: bool = False
    score: int = 0
    forfeited: bool = False
    reaction_ms: int = 0
    opponent: Optional[Opponent] = None

    @property
    def is_out(self) -> bool:
        return self.forfeited


@dataclass
class FreezeWindow:
    duration_ms: int
    elapsed_ms: int = 0

    @property
    def expired(self) -> bool:
        return self.elapsed_ms >= self.duration_ms


@dataclass
class MatchResult:
    mode: GameMode
    queue_mode: QueueMode
    is_win: bool
    team_score: int
    opponent_team_score: int
    player_score: int
    duration_seconds: int
    opponents: List[Opponent] = field(default_factory=list)
    participants: List[Participant] = field(default_factory=list)

    @property
    def enemy_mmrs(self) -> List[int]:
        return [o.mmr for o in self.opponents if not o.is_teammate]


class MatchSession:
    def __init__(
        self,
        mode: "GameMode | str",
        opponents: Sequence[Opponent],
        rng: RandomSource,
        queue_mode: QueueMode = QueueMode.RANKED,
        player_name: str = "You",
        player_mmr: int = 0,
        duration_seconds: Optional[int] = None,
    ):
        self.mode = parse_mode(mode)
        self.queue_mode = queue_mode
        self.rng = rng
        self.opponents = list(opponents)
        self.player = Participant(
            name=player_name, mmr=player_mmr, on_player_team=True, is_player=True
        )
        self.ai: List[Participant] = [
            Participant(name=o.name, mmr=o.mmr, on_player_team=o.is_teammate, opponent=o)
            for o in self.opponents
        ]

        self.phase = MatchPhase.COUNTDOWN
        self.countdown_left = COUNTDOWN_SECONDS
        self.duration_seconds = duration_seconds or rng.randint(
            MIN_DURATION_SECONDS, MAX_DURATION_SECONDS
        )
        self.time_left = self.duration_seconds
        self.play_ms = 0
        self.freeze: Optional[FreezeWindow] = None
        self.cancelled = False
        self.team_score = 0
        self.opponent_team_score = 0
        self._click_times: Deque[int] = deque()

        self.timers = TimerGroup()
        self.timers.every("scoring", SCORING_TICK_MS, self._on_scoring_tick)
        self.timers.every("clock", CLOCK_TICK_MS, self._on_clock_tick)

    # -- external drive ---------------------------------------------------

    def tick(self, ms: int = SCORING_TICK_MS) -> None:
        if self.cancelled or self.phase is MatchPhase.FINISHED:
            return
        self.timers.advance(ms)

    def click(self) -> int:
        """Register one player click; returns the score change applied."""
        if self.cancelled or self.phase is not MatchPhase.PLAYING:
            return 0
        before = self.player.score
        if self.is_frozen:
            self.player.score = max(0, before - FREEZE_PENALTY)
        else:
            self.player.score = before + 1
        self._click_times.append(self.play_ms)
        self._recompute_team_scores()
        return self.player.score - before

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self.timers.cancel_all()
        logger.info(f"Match cancelled ({self.mode.value}, phase {self.phase.value})")

    # -- state ---------------------------------------------------------------

    @property
    def is_frozen(self) -> bool:
        return self.freeze is not None and not self.freeze.expired

    @property
    def player_cps(self) -> float:
        horizon = self.play_ms - CLOCK_TICK_MS
        while self._click_times and self._click_times[0] <= horizon:
            self._click_times.popleft()
        return float(len(self._click_times))

    @property
    def participants(self) -> List[Participant]:
        return [self.player] + self.ai

    def team_totals(self) -> Dict[bool, int]:
        """Score per side (True = player's team), forfeited AI excluded."""
        totals = {True: self.player.score, False: 0}
        for p in self.ai:
            if not p.forfeited:
                totals[p.on_player_team] += p.score
        return totals

    def result(self) -> Optional[MatchResult]:
        if self.phase is not MatchPhase.FINISHED:
            return None
        return MatchResult(
            mode=self.mode,
            queue_mode=self.queue_mode,
            # A tie is not a win.
            is_win=self.team_score > self.opponent_team_score,
            team_score=self.team_score,
            opponent_team_score=self.opponent_team_score,
            player_score=self.player.score,
            duration_seconds=self.duration_seconds,
            opponents=list(self.opponents),
            participants=self.participants,
        )

    def snapshot(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "countdown": self.countdown_left,
            "time_left": self.time_left,
            "frozen": self.is_frozen,
            "player_score": self.player.score,
            "team_score": self.team_score,
            "opponent_team_score": self.opponent_team_score,
            "participants": [
                {
                    "name": p.name,
                    "score": p.score,
                    "is_player": p.is_player,
                    "on_player_team": p.on_player_team,
                    "forfeited": p.forfeited,
                }
                for p in self.participants
            ],
        }

    # -- timer callbacks -----------------------------------------------------

    def _on_clock_tick(self) -> None:
        if self.phase is MatchPhase.COUNTDOWN:
            self.countdown_left -= 1
            if self.countdown_left <= 0:
                self.countdown_left = 0
                self.phase = MatchPhase.PLAYING
            return

        if self.phase is not MatchPhase.PLAYING:
            return

        self.time_left -= 1
        if self.time_left <= 0:
            self.time_left = 0
            self._finish()
            return

        if not self.is_frozen and self.rng.chance(FREEZE_CHANCE_PER_SECOND):
            self._start_freeze()

    def _on_scoring_tick(self) -> None:
        if self.phase is not MatchPhase.PLAYING:
            return

        self.play_ms += SCORING_TICK_MS
        snapshot = self.team_totals()
        cps = self.player_cps
        frozen = self.is_frozen
        freeze_elapsed = self.freeze.elapsed_ms if self.freeze else 0

        new_scores: Dict[int, int] = {}
        forfeits: List[int] = []
        for idx, ai in enumerate(self.ai):
            if ai.forfeited:
                continue
            deficit = snapshot[not ai.on_player_team] - snapshot[ai.on_player_team]
            if (
                deficit > FORFEIT_DEFICIT
                and self.time_left < FORFEIT_TIME_LEFT_SECONDS
                and self.rng.chance(FORFEIT_CHANCE_PER_TICK)
            ):
                forfeits.append(idx)
                continue

            if frozen:
                if freeze_elapsed < ai.reaction_ms:
                    clicks = ai_clicks_per_tick(ai.mmr, cps, self.rng)
                    new_scores[idx] = max(0, ai.score - FREEZE_PENALTY * clicks)
            else:
                new_scores[idx] = ai.score + ai_clicks_per_tick(ai.mmr, cps, self.rng)

        for idx, score in new_scores.items():
            self.ai[idx].score = score
        for idx in forfeits:
            self.ai[idx].forfeited = True
            logger.info(f"{self.ai[idx].name} forfeited")

        if self.freeze is not None:
            self.freeze.elapsed_ms += SCORING_TICK_MS
            if self.freeze.expired:
                self.freeze = None

        self._recompute_team_scores()

    # -- helpers -------------------------------------------------------------

    def _start_freeze(self) -> None:
        self.freeze = FreezeWindow(duration_ms=self.rng.randint(FREEZE_MIN_MS, FREEZE_MAX_MS))
        for ai in self.ai:
            ai.reaction_ms = self.rng.randint(REACTION_MIN_MS, REACTION_MAX_MS)

    def _recompute_team_scores(self) -> None:
        totals = self.team_totals()
        self.team_score = totals[True]
        self.opponent_team_score = totals[False]

    def _finish(self) -> None:
        self._recompute_team_scores()
        self.phase = MatchPhase.FINISHED
        self.freeze = None
        self.timers.cancel_all()
        logger.info(
            f"Match finished {self.team_score}-{self.opponent_team_score} "
            f"({self.mode.value}, {self.queue_mode.value})"
        )
