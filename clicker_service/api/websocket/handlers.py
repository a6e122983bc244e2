"""WebSocket handler for live matches."""

import asyncio
import json
import logging
from typing import Any, Dict

from fastapi import WebSocket, WebSocketDisconnect

from clicker.config import SCORING_TICK_MS
from clicker.match import MatchSession
from clicker.randomness import RandomSource
from clicker.types import MatchPhase, QueueMode

from ..transformers.state_transformer import camelize, transform_opponents
from ...application.ports.state_store import StateStorePort
from ...application.use_cases.context import load_context
from ...application.use_cases.play_match import (
    CompleteMatchRequest,
    CompleteMatchUseCase,
    PrepareMatchRequest,
    PrepareMatchUseCase,
)

logger = logging.getLogger(__name__)

# Wall-clock seconds per scoring tick
TICK_SECONDS = SCORING_TICK_MS / 1000
SNAPSHOT_EVERY_TICKS = 10


async def _send_error(websocket: WebSocket, message: str) -> None:
    await websocket.send_json({"status": "error", "message": message})


async def _run_match(
    websocket: WebSocket,
    session: MatchSession,
    store: StateStorePort,
    rng: RandomSource,
    tournament_match_id: str | None,
    tick_seconds: float,
) -> None:
    """Drive the session in real time, then record and report the result."""
    ticks = 0
    last_phase = session.phase
    while session.phase is not MatchPhase.FINISHED and not session.cancelled:
        await asyncio.sleep(tick_seconds)
        session.tick(SCORING_TICK_MS)
        ticks += 1
        if ticks % SNAPSHOT_EVERY_TICKS == 0 or session.phase is not last_phase:
            last_phase = session.phase
            await websocket.send_json({"status": "playing", "match": camelize(session.snapshot())})

    result = session.result()
    if result is None:
        return

    completed = CompleteMatchUseCase(store, rng).execute(
        CompleteMatchRequest(
            mode=result.mode.value,
            is_win=result.is_win,
            opponents=result.opponents,
            queue_mode=result.queue_mode,
            player_score=result.player_score,
            team_score=result.team_score,
            opponent_team_score=result.opponent_team_score,
            tournament_match_id=tournament_match_id,
        )
    )
    await websocket.send_json({
        "status": "completed",
        "isWin": result.is_win,
        "teamScore": result.team_score,
        "opponentTeamScore": result.opponent_team_score,
        "playerScore": result.player_score,
        "mmrChange": completed.mmr_change,
        "newMmr": completed.new_mmr,
        "levelsGained": completed.levels_gained,
        "rewardsUnlocked": completed.rewards_unlocked,
    })


def _apply_message(session: MatchSession, data: Dict[str, Any]) -> bool:
    """Apply one client message; returns False when the client left the match."""
    action = data.get("action")
    if action == "click":
        session.click()
    elif action == "cancel":
        session.cancel()
        return False
    return True


async def handle_match_websocket(
    websocket: WebSocket,
    store: StateStorePort,
    rng: RandomSource,
    tick_seconds: float | None = None,
) -> None:
    """Handle a live match over a WebSocket connection.

    Expected first client message:
    {
        "action": "start",
        "mode": "2v2",
        "queueMode": "ranked",          // Optional
        "tournamentMatchId": "r1-m3"   // Optional
    }

    Then any number of {"action": "click"} and an optional {"action": "cancel"}.

    Server sends {"status": "started", ...}, periodic {"status": "playing",
    "match": {...}} snapshots and a final {"status": "completed", ...}.

    Args:
        websocket: FastAPI WebSocket connection
        store: State store the result is recorded in
        rng: Random source for the session
        tick_seconds: Wall-clock delay per scoring tick
    """
    await websocket.accept()
    session: MatchSession | None = None
    runner: asyncio.Task | None = None
    if tick_seconds is None:
        tick_seconds = TICK_SECONDS

    try:
        data = await websocket.receive_json()
        action = data.get("action")
        if action != "start":
            await _send_error(websocket, f"Unknown action: {action}")
            return

        try:
            queue_mode = QueueMode(data.get("queueMode", QueueMode.RANKED.value))
        except ValueError:
            await _send_error(websocket, f"Unknown queue mode: {data.get('queueMode')}")
            return
        tournament_match_id = data.get("tournamentMatchId")

        prepared = PrepareMatchUseCase(store, rng).execute(
            PrepareMatchRequest(
                mode=data.get("mode", ""),
                queue_mode=queue_mode,
                tournament_match_id=tournament_match_id,
            )
        )
        if not prepared.success:
            await _send_error(websocket, prepared.error or "Cannot start a match")
            return

        player = load_context(store).player
        session = MatchSession(
            prepared.mode,
            prepared.opponents,
            rng,
            queue_mode=queue_mode,
            player_name=player.username,
            player_mmr=prepared.player_mmr,
        )
        await websocket.send_json({
            "status": "started",
            "mode": prepared.mode.value,
            "durationSeconds": session.duration_seconds,
            "opponents": transform_opponents(prepared.opponents),
        })

        runner = asyncio.create_task(
            _run_match(websocket, session, store, rng, tournament_match_id, tick_seconds)
        )
        while not runner.done():
            receive = asyncio.create_task(websocket.receive_json())
            done, _ = await asyncio.wait(
                {receive, runner}, return_when=asyncio.FIRST_COMPLETED
            )
            if receive not in done:
                receive.cancel()
                break
            if not _apply_message(session, receive.result()):
                break
        await runner

    except WebSocketDisconnect:
        logger.info("Match client disconnected")
    except json.JSONDecodeError:
        await _send_error(websocket, "Invalid JSON message")
    except Exception as e:
        logger.error(f"Match websocket error: {e}")
        try:
            await _send_error(websocket, f"Error: {str(e)}")
        except RuntimeError:
            pass
    finally:
        if session is not None and session.phase is not MatchPhase.FINISHED:
            session.cancel()
        if runner is not None and not runner.done():
            runner.cancel()
        try:
            await websocket.close()
        except RuntimeError:
            pass
