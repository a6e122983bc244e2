"""Transform engine state into the camelCase payloads the frontend expects."""

import logging
from typing import Any, Dict, List, Optional

from clicker.news import NewsFeed
from clicker.progression import available_titles, equipped_title_name, is_grand_champion
from clicker.ranks import rank_info
from clicker.state import GameContext
from clicker.tournament import TournamentEngine
from clicker.rccs import is_eligible

logger = logging.getLogger(__name__)


def _to_camel_case(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def camelize(value: Any) -> Any:
    """Recursively camelCase every dict key; mode keys like '1v1' pass through."""
    if isinstance(value, dict):
        return {
            _to_camel_case(k) if isinstance(k, str) else k: camelize(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [camelize(v) for v in value]
    return value


def _rank_payload(mmr: int) -> Dict[str, Any]:
    info = rank_info(mmr)
    return {
        "name": info.name,
        "displayName": info.display_name,
        "color": info.color,
        "division": info.division,
        "grandChampionLevel": info.grand_champion_level,
    }


def transform_player(ctx: GameContext) -> Dict[str, Any]:
    """Player profile with ranks, titles and eligibility flags."""
    player = ctx.player
    payload = camelize(player.to_dict())
    payload["ranks"] = {mode.value: _rank_payload(mmr) for mode, mmr in player.mmr.items()}
    payload["highestMmr"] = player.highest_mmr
    payload["totalSeasonWins"] = player.total_season_wins
    payload["equippedTitleName"] = equipped_title_name(player, ctx.ledger)
    payload["availableTitles"] = [
        {
            "id": t.id,
            "name": t.name,
            "kind": t.kind,
            "color": t.style.color,
            "glow": t.style.glow,
        }
        for t in available_titles(player, ctx.ledger)
    ]
    payload["isGrandChampion"] = is_grand_champion(player)
    payload["rccsEligible"] = is_eligible(player.highest_mmr)
    payload["synergyCupEligible"] = TournamentEngine.is_eligible_for_synergy_cup(player.highest_mmr)
    return payload


def transform_opponents(opponents: List[Any]) -> List[Dict[str, Any]]:
    return [camelize(o.to_dict()) for o in opponents]


def transform_news(feed: NewsFeed) -> Dict[str, Any]:
    payload = camelize(feed.to_dict())
    payload["unreadCount"] = feed.unread_count()
    return payload


def transform_tournaments(ctx: GameContext, player_match_id: Optional[str] = None) -> Dict[str, Any]:
    payload = camelize(ctx.tournaments.to_dict())
    payload["titles"] = camelize(ctx.ledger.to_dict()["titles"])
    payload["playerMatchId"] = player_match_id
    return payload


def transform_rccs(ctx: GameContext) -> Dict[str, Any]:
    payload = camelize(ctx.rccs.to_dict())
    payload["activeNotifications"] = [
        {"id": n.id, "season": n.season, "message": n.message}
        for n in ctx.rccs.active_notifications()
    ]
    return payload
