from __future__ import annotations

from typing import List, Optional

from .leaderboard import LeaderboardEntry
from .match import MatchResult
from .progression import equipped_title_name
from .ranks import rank_info
from .state import GameContext
from .types import ALL_MODES


def render_status(ctx: GameContext) -> str:
    player = ctx.player
    lines = []
    lines.append("PLAYER STATUS")
    title = equipped_title_name(player, ctx.ledger)
    lines.append(f"{player.username}" + (f" [{title}]" if title else ""))
    lines.append(
        f"Season {player.current_season} | Level {player.level} "
        f"({player.xp}/{player.xp_to_next} XP)"
    )
    lines.append("")

    lines.append("Ranks")
    for mode in ALL_MODES:
        mmr = player.mmr[mode]
        stats = player.stats[mode]
        placements = player.placement_matches[mode]
        rank = "Unranked" if placements else rank_info(mmr).display_name
        lines.append(
            f"- {mode.value}: {rank} | MMR {mmr} (best {stats.best_mmr}) | "
            f"W/L {stats.wins}/{stats.losses} | season wins {player.season_wins[mode]}"
            + (f" | placements left {placements}" if placements else "")
        )
    lines.append("")

    lines.append("Titles")
    titles = ctx.ledger.list()
    if not titles:
        lines.append("- none")
    for t in titles:
        lines.append(f"- {t.name} ({t.color.value}, wins {t.wins})")

    rccs = ctx.rccs
    lines.append("")
    lines.append(f"RCCS Season {rccs.current_season}")
    if rccs.current is None:
        lines.append("- not registered" if not rccs.player_registered else "- registered")
    else:
        lines.append(
            f"- {rccs.current.stage.value}: {rccs.current.status.value} | "
            f"{len(rccs.current.teams)} teams"
        )
    for entry in rccs.history[-4:]:
        lines.append(
            f"  S{entry.season} {entry.stage.value}: placement {entry.placement}"
            + (" (eliminated)" if entry.eliminated else "")
        )
    return "\n".join(lines)


def render_leaderboard(board: List[LeaderboardEntry], heading: Optional[str] = None) -> str:
    lines = [heading or "LEADERBOARD"]
    for position, entry in enumerate(board, start=1):
        marker = "*" if entry.is_player else " "
        title = f" [{entry.title}]" if entry.title else ""
        lines.append(
            f"{marker}{position:>2}. {entry.name}{title} | {entry.mmr} | "
            f"{entry.wins}W {entry.losses}L"
        )
    return "\n".join(lines)


def render_match(result: MatchResult, mmr_change: Optional[int] = None) -> str:
    lines = []
    outcome = "VICTORY" if result.is_win else "DEFEAT"
    lines.append(f"{outcome} ({result.mode.value} {result.queue_mode.value})")
    lines.append(
        f"Score {result.team_score}-{result.opponent_team_score} | "
        f"you {result.player_score} | {result.duration_seconds}s"
    )
    for p in result.participants:
        side = "team" if p.on_player_team else "enemy"
        status = " (forfeit)" if p.forfeited else ""
        lines.append(f"- {p.name} [{side}] {p.score}{status}")
    if mmr_change is not None:
        lines.append(f"MMR {mmr_change:+d}")
    return "\n".join(lines)
