"""REST API routes for the ranked clicker game."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from clicker.config import engine_config_from_env
from clicker.opponents import opponent_from_dict
from clicker.queue import estimate_queue_time, online_player_count
from clicker.randomness import RandomSource, default_random
from clicker.ranks import rank_ladder
from clicker.types import QueueMode, parse_mode

from ..transformers.state_transformer import (
    camelize,
    transform_news,
    transform_opponents,
    transform_player,
    transform_rccs,
    transform_tournaments,
)
from ...application.ports.release_feed import ReleaseFeedPort
from ...application.ports.state_store import StateStorePort
from ...application.use_cases import (
    AdvanceRCCSUseCase,
    AdvanceTournamentUseCase,
    CheckUpdatesUseCase,
    CompleteMatchRequest,
    CompleteMatchUseCase,
    DeclineRCCSUseCase,
    EquipTitleUseCase,
    ForceRCCSStageUseCase,
    JoinQueueUseCase,
    LeaveQueueUseCase,
    PrepareMatchRequest,
    PrepareMatchUseCase,
    RefreshLeaderboardUseCase,
    RegisterRCCSUseCase,
    SeasonRolloverUseCase,
    StartTournamentUseCase,
    TournamentStatusUseCase,
    UpdateUsernameUseCase,
    load_context,
    save_context,
)
from ...infrastructure.adapters.github_release_feed import GitHubReleaseFeed
from ...infrastructure.adapters.json_state_store import JsonFileStateStore

router = APIRouter(prefix="/api", tags=["game"])

_store: StateStorePort | None = None
_rng: RandomSource | None = None


def get_store() -> StateStorePort:
    """Process-wide state store; override in tests."""
    global _store
    if _store is None:
        _store = JsonFileStateStore()
    return _store


def get_rng() -> RandomSource:
    global _rng
    if _rng is None:
        _rng = default_random(engine_config_from_env().seed)
    return _rng


def get_release_feed() -> ReleaseFeedPort:
    return GitHubReleaseFeed(engine_config_from_env().releases_url)


def _error(status_code: int, code: str, message: str, details: Dict[str, Any] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
    )


class UsernameRequest(BaseModel):
    username: str = Field(..., description="New display name (1-20 characters)")


class EquipTitleRequest(BaseModel):
    title_id: Optional[str] = Field(
        default=None,
        alias="titleId",
        description="Title to equip; null unequips",
    )

    class Config:
        populate_by_name = True


class PrepareMatchBody(BaseModel):
    """Request body for a new match roster."""

    mode: str = Field(..., description="Playlist: 1v1, 2v2 or 3v3")
    queue_mode: QueueMode = Field(default=QueueMode.RANKED, alias="queueMode")
    tournament_match_id: Optional[str] = Field(default=None, alias="tournamentMatchId")

    class Config:
        populate_by_name = True


class CompleteMatchBody(BaseModel):
    """Request body for a finished match."""

    mode: str
    is_win: bool = Field(..., alias="isWin")
    opponents: List[Dict[str, Any]] = Field(default_factory=list)
    queue_mode: QueueMode = Field(default=QueueMode.RANKED, alias="queueMode")
    player_score: int = Field(default=0, alias="playerScore", ge=0)
    team_score: int = Field(default=0, alias="teamScore", ge=0)
    opponent_team_score: int = Field(default=0, alias="opponentTeamScore", ge=0)
    tournament_match_id: Optional[str] = Field(default=None, alias="tournamentMatchId")

    class Config:
        populate_by_name = True


class JoinQueueBody(BaseModel):
    tournament_type: str = Field(..., alias="type", description="1v1, 2v2, 3v3 or synergy-cup")

    class Config:
        populate_by_name = True


class StartTournamentBody(BaseModel):
    force: bool = False


class ForceStageBody(BaseModel):
    stage: str = Field(..., description="qualifiers, regionals, majors or worlds")


def _require_mode(mode: str):
    try:
        return parse_mode(mode)
    except ValueError:
        raise _error(400, "INVALID_REQUEST", f"Unknown mode: {mode}", {"mode": mode})


def _snake_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for key, value in data.items():
        snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
        out[snake] = value
    return out


# -- player ------------------------------------------------------------------


@router.get("/player")
async def get_player(store: StateStorePort = Depends(get_store)):
    """Get the player profile with ranks and available titles."""
    return transform_player(load_context(store))


@router.put("/player/username")
async def put_username(body: UsernameRequest, store: StateStorePort = Depends(get_store)):
    result = UpdateUsernameUseCase(store).execute(body.username)
    if not result.success:
        raise _error(400, "INVALID_USERNAME", result.error or "Invalid username", {"username": body.username})
    return transform_player(load_context(store))


@router.put("/player/title")
async def put_title(body: EquipTitleRequest, store: StateStorePort = Depends(get_store)):
    result = EquipTitleUseCase(store).execute(body.title_id)
    if not result.success:
        raise _error(404, "TITLE_NOT_AVAILABLE", result.error or "Title not available", {"titleId": body.title_id})
    return transform_player(load_context(store))


@router.post("/season/rollover")
async def post_season_rollover(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    """Start the next season for the player, tournaments and RCCS."""
    result = SeasonRolloverUseCase(store, rng).execute()
    return {"season": result.season, "rccsSeason": result.rccs_season, "mmr": result.mmr}


@router.get("/ranks")
async def get_ranks():
    return camelize(rank_ladder())


# -- matches -----------------------------------------------------------------


@router.post("/matches/prepare")
async def prepare_match(
    body: PrepareMatchBody,
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    """Generate teammates and enemies for a match."""
    _require_mode(body.mode)
    request = PrepareMatchRequest(
        mode=body.mode,
        queue_mode=body.queue_mode,
        tournament_match_id=body.tournament_match_id,
    )
    result = PrepareMatchUseCase(store, rng).execute(request)
    if not result.success:
        raise _error(409, "MATCH_UNAVAILABLE", result.error or "Cannot start a match", {"mode": body.mode})
    return {
        "mode": result.mode.value,
        "queueMode": body.queue_mode.value,
        "playerMmr": result.player_mmr,
        "opponents": transform_opponents(result.opponents),
    }


@router.post("/matches/complete")
async def complete_match(
    body: CompleteMatchBody,
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    """Apply a finished match to MMR, stats, XP and leaderboards."""
    _require_mode(body.mode)
    try:
        opponents = [opponent_from_dict(_snake_keys(o)) for o in body.opponents]
    except (KeyError, TypeError, ValueError) as e:
        raise _error(400, "INVALID_REQUEST", f"Malformed opponent: {e}")

    request = CompleteMatchRequest(
        mode=body.mode,
        is_win=body.is_win,
        opponents=opponents,
        queue_mode=body.queue_mode,
        player_score=body.player_score,
        team_score=body.team_score,
        opponent_team_score=body.opponent_team_score,
        tournament_match_id=body.tournament_match_id,
    )
    try:
        result = CompleteMatchUseCase(store, rng).execute(request)
    except Exception as e:
        raise _error(500, "INTERNAL_ERROR", f"Error completing match: {str(e)}")
    if not result.success:
        raise _error(400, "INVALID_REQUEST", result.error or "Cannot complete match")
    return {
        "mmrChange": result.mmr_change,
        "newMmr": result.new_mmr,
        "levelsGained": result.levels_gained,
        "rewardsUnlocked": result.rewards_unlocked,
        "eliteChanges": result.elite_changes,
        "tournament": camelize(result.tournament) if result.tournament else None,
    }


@router.get("/queue/{mode}")
async def get_queue_estimate(
    mode: str,
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    game_mode = _require_mode(mode)
    hour = datetime.now(timezone.utc).hour
    mmr = load_context(store).player.mmr[game_mode]
    return {
        "mode": game_mode.value,
        "estimatedSeconds": estimate_queue_time(game_mode, mmr, hour, rng),
        "playersOnline": online_player_count(hour, rng),
    }


# -- tournaments -------------------------------------------------------------


def _tournament_response(store: StateStorePort, result) -> Dict[str, Any]:
    payload = transform_tournaments(load_context(store), result.player_match_id)
    payload["newTitles"] = result.titles
    return payload


@router.get("/tournaments")
async def get_tournaments(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    return _tournament_response(store, TournamentStatusUseCase(store, rng).execute())


@router.post("/tournaments/queue")
async def join_tournament_queue(
    body: JoinQueueBody,
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    result = JoinQueueUseCase(store, rng).execute(body.tournament_type)
    if not result.success:
        raise _error(409, "QUEUE_REJECTED", result.error or "Cannot join queue", {"type": body.tournament_type})
    return _tournament_response(store, result)


@router.delete("/tournaments/queue")
async def leave_tournament_queue(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    return _tournament_response(store, LeaveQueueUseCase(store, rng).execute())


@router.post("/tournaments/start")
async def start_tournament(
    body: StartTournamentBody,
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    result = StartTournamentUseCase(store, rng).execute(force=body.force)
    if not result.success:
        raise _error(409, "TOURNAMENT_NOT_STARTED", result.error or "Tournament not started")
    return _tournament_response(store, result)


@router.post("/tournaments/advance")
async def advance_tournament(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    result = AdvanceTournamentUseCase(store, rng).execute()
    if not result.success:
        raise _error(409, "NO_TOURNAMENT", result.error or "No tournament in progress")
    return _tournament_response(store, result)


# -- RCCS --------------------------------------------------------------------


def _rccs_response(store: StateStorePort, result) -> Dict[str, Any]:
    if not result.success:
        raise _error(409, "RCCS_REJECTED", result.error or "RCCS action rejected")
    payload = transform_rccs(load_context(store))
    payload["stage"] = camelize(result.tournament) if result.tournament else None
    payload["newTitles"] = result.titles
    return payload


@router.get("/rccs")
async def get_rccs(store: StateStorePort = Depends(get_store)):
    return transform_rccs(load_context(store))


@router.post("/rccs/register")
async def register_rccs(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    return _rccs_response(store, RegisterRCCSUseCase(store, rng).execute())


@router.post("/rccs/decline")
async def decline_rccs(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    return _rccs_response(store, DeclineRCCSUseCase(store, rng).execute())


@router.post("/rccs/advance")
async def advance_rccs(
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    return _rccs_response(store, AdvanceRCCSUseCase(store, rng).execute())


@router.post("/rccs/force")
async def force_rccs_stage(
    body: ForceStageBody,
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    """Debug: jump straight into an RCCS stage."""
    return _rccs_response(store, ForceRCCSStageUseCase(store, rng).execute(body.stage))


# -- leaderboard and news ----------------------------------------------------


@router.get("/leaderboard/{mode}")
async def get_leaderboard(
    mode: str,
    limit: int = Query(25, ge=1, le=25),
    store: StateStorePort = Depends(get_store),
    rng: RandomSource = Depends(get_rng),
):
    result = RefreshLeaderboardUseCase(store, rng).execute(mode, limit)
    if not result.success:
        raise _error(404, "UNKNOWN_MODE", result.error or "Unknown mode", {"mode": mode})
    return {
        "mode": result.mode,
        "entries": camelize(result.entries),
        "playerRank": result.player_rank,
    }


@router.get("/news")
async def get_news(store: StateStorePort = Depends(get_store)):
    return transform_news(load_context(store).news)


@router.post("/news/{article_id}/read")
async def read_news(article_id: str, store: StateStorePort = Depends(get_store)):
    ctx = load_context(store)
    if not ctx.news.mark_as_read(article_id):
        raise _error(404, "ARTICLE_NOT_FOUND", f"No article {article_id}", {"articleId": article_id})
    save_context(store, ctx)
    return transform_news(ctx.news)


@router.post("/updates/check")
async def check_updates(
    store: StateStorePort = Depends(get_store),
    feed: ReleaseFeedPort = Depends(get_release_feed),
):
    """Look up the latest release; an unreachable feed keeps the last known result."""
    result = await CheckUpdatesUseCase(store, feed).execute()
    return {
        "checked": result.success,
        "currentVersion": result.current_version,
        "latestVersion": result.latest_version,
        "hasUpdate": result.has_update,
    }


@router.post("/updates/dismiss")
async def dismiss_update(store: StateStorePort = Depends(get_store)):
    ctx = load_context(store)
    ctx.news.dismiss_update()
    save_context(store, ctx)
    return transform_news(ctx.news)
