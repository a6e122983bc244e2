"""Application use cases."""

from .championship import (
    AdvanceRCCSUseCase,
    ChampionshipResult,
    DeclineRCCSUseCase,
    ForceRCCSStageUseCase,
    RegisterRCCSUseCase,
)
from .check_updates import CheckUpdatesResult, CheckUpdatesUseCase
from .context import load_context, save_context
from .leaderboard import LeaderboardResult, RefreshLeaderboardUseCase
from .play_match import (
    CompleteMatchRequest,
    CompleteMatchResult,
    CompleteMatchUseCase,
    PrepareMatchRequest,
    PrepareMatchResult,
    PrepareMatchUseCase,
)
from .profile import EquipTitleUseCase, ProfileResult, UpdateUsernameUseCase
from .season import SeasonRolloverResult, SeasonRolloverUseCase
from .tournament import (
    AdvanceTournamentUseCase,
    JoinQueueUseCase,
    LeaveQueueUseCase,
    StartTournamentUseCase,
    TournamentResult,
    TournamentStatusUseCase,
)

__all__ = [
    "AdvanceRCCSUseCase",
    "AdvanceTournamentUseCase",
    "ChampionshipResult",
    "CheckUpdatesResult",
    "CheckUpdatesUseCase",
    "CompleteMatchRequest",
    "CompleteMatchResult",
    "CompleteMatchUseCase",
    "DeclineRCCSUseCase",
    "EquipTitleUseCase",
    "ForceRCCSStageUseCase",
    "JoinQueueUseCase",
    "LeaderboardResult",
    "LeaveQueueUseCase",
    "PrepareMatchRequest",
    "PrepareMatchResult",
    "PrepareMatchUseCase",
    "ProfileResult",
    "RefreshLeaderboardUseCase",
    "RegisterRCCSUseCase",
    "SeasonRolloverResult",
    "SeasonRolloverUseCase",
    "StartTournamentUseCase",
    "TournamentResult",
    "TournamentStatusUseCase",
    "UpdateUsernameUseCase",
    "load_context",
    "save_context",
]
