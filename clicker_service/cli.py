from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from clicker.config import SCORING_TICK_MS, engine_config_from_env
from clicker.leaderboard import BOARD_SIZE, LeaderboardEntry
from clicker.match import MatchSession
from clicker.progression import apply_mmr_change
from clicker.randomness import RandomSource, default_random
from clicker.render import render_leaderboard, render_match, render_status
from clicker.types import ALL_MODES, MatchPhase, QueueMode

from .application.ports.state_store import StateStorePort
from .application.use_cases import (
    AdvanceRCCSUseCase,
    CompleteMatchRequest,
    CompleteMatchUseCase,
    ForceRCCSStageUseCase,
    PrepareMatchRequest,
    PrepareMatchUseCase,
    RefreshLeaderboardUseCase,
    RegisterRCCSUseCase,
    SeasonRolloverUseCase,
    load_context,
    save_context,
)
from .infrastructure.adapters.json_state_store import JsonFileStateStore

BOOST_MMR = 2400


def _load_env() -> None:
    try:
        from dotenv import load_dotenv  # type: ignore

        load_dotenv()
    except Exception:
        pass


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ranked clicker debug console")
    parser.add_argument("--status", action="store_true", help="Print player, title and RCCS status")
    parser.add_argument("--new-season", action="store_true", help="Roll over to the next season")
    parser.add_argument(
        "--boost",
        nargs="?",
        type=int,
        const=BOOST_MMR,
        default=None,
        help=f"Set every playlist to this MMR (default {BOOST_MMR}, Champion III)",
    )
    parser.add_argument("--register", action="store_true", help="Register for the RCCS")
    parser.add_argument("--advance", action="store_true", help="Resolve the current RCCS stage")
    parser.add_argument(
        "--force-stage",
        choices=["qualifiers", "regionals", "majors", "worlds"],
        default=None,
        help="Start a new RCCS season directly at this stage",
    )
    parser.add_argument("--leaderboard", default=None, help="Show the leaderboard for 1v1, 2v2 or 3v3")
    parser.add_argument("--play", default=None, help="Auto-play one match in 1v1, 2v2 or 3v3")
    parser.add_argument("--casual", action="store_true", help="Play the auto match unranked")
    parser.add_argument("--cps", type=float, default=8.0, help="Scripted clicks per second for --play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--data-dir", default=None, help="Override CLICKER_DATA_DIR")
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    return parser.parse_args(argv)


def _boost(store: StateStorePort, mmr: int) -> None:
    ctx = load_context(store)
    for mode in ALL_MODES:
        apply_mmr_change(ctx.player, mode, mmr - ctx.player.mmr[mode])
    save_context(store, ctx)
    print(f"Boosted all playlists to {mmr} MMR")


def _play(store: StateStorePort, rng: RandomSource, mode: str, cps: float, queue_mode: QueueMode) -> None:
    prepared = PrepareMatchUseCase(store, rng).execute(
        PrepareMatchRequest(mode=mode, queue_mode=queue_mode)
    )
    if not prepared.success:
        print(prepared.error)
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
    # Scripted clicker: accumulate fractional clicks per tick, skip while frozen.
    per_tick = cps * SCORING_TICK_MS / 1000
    pending = 0.0
    while session.phase is not MatchPhase.FINISHED:
        session.tick(SCORING_TICK_MS)
        if session.phase is not MatchPhase.PLAYING or session.is_frozen:
            continue
        pending += per_tick
        while pending >= 1:
            session.click()
            pending -= 1

    result = session.result()
    completed = CompleteMatchUseCase(store, rng).execute(
        CompleteMatchRequest(
            mode=result.mode.value,
            is_win=result.is_win,
            opponents=result.opponents,
            queue_mode=result.queue_mode,
            player_score=result.player_score,
            team_score=result.team_score,
            opponent_team_score=result.opponent_team_score,
        )
    )
    print(render_match(result, completed.mmr_change if queue_mode is QueueMode.RANKED else None))
    for level in completed.levels_gained:
        print(f"Level up: {level}")
    for title in completed.rewards_unlocked:
        print(f"Unlocked: {title}")


def main(argv: Optional[list] = None) -> None:
    _load_env()
    args = _parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else os.environ.get("LOG_LEVEL", "WARNING"))

    if args.data_dir:
        os.environ["CLICKER_DATA_DIR"] = args.data_dir
    seed = args.seed if args.seed is not None else engine_config_from_env().seed
    rng = default_random(seed)
    store = JsonFileStateStore()

    if args.new_season:
        result = SeasonRolloverUseCase(store, rng).execute()
        print(f"Season {result.season} started (RCCS season {result.rccs_season})")

    if args.boost is not None:
        _boost(store, args.boost)

    if args.force_stage:
        result = ForceRCCSStageUseCase(store, rng).execute(args.force_stage)
        print(result.error or f"RCCS {args.force_stage} started")

    if args.register:
        result = RegisterRCCSUseCase(store, rng).execute()
        print(result.error or "Registered for RCCS qualifiers")

    if args.advance:
        result = AdvanceRCCSUseCase(store, rng).execute()
        if not result.success:
            print(result.error)
        else:
            stage = (result.tournament or {}).get("stage", "?")
            print(f"Resolved {stage}")
            for name in result.titles:
                print(f"Awarded: {name}")

    if args.play:
        _play(store, rng, args.play, args.cps, QueueMode.CASUAL if args.casual else QueueMode.RANKED)

    if args.leaderboard:
        result = RefreshLeaderboardUseCase(store, rng).execute(args.leaderboard, BOARD_SIZE)
        if not result.success:
            print(result.error)
        else:
            entries = [LeaderboardEntry.from_dict(e) for e in result.entries]
            print(render_leaderboard(entries, f"LEADERBOARD {result.mode} (you: #{result.player_rank})"))

    if args.status:
        print(render_status(load_context(store)))


if __name__ == "__main__":
    main()
