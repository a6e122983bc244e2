from typing import Optional

import pytest
from fastapi.testclient import TestClient

from clicker.randomness import SeededRandom
from clicker.rccs import RCCSNotification
from clicker_service.api.rest.routes import get_release_feed, get_rng, get_store
from clicker_service.api.websocket import handlers
from clicker_service.application.ports.release_feed import ReleaseFeedPort, ReleaseInfo
from clicker_service.application.use_cases import load_context, save_context
from clicker_service.main import app


class StaticFeed(ReleaseFeedPort):
    def __init__(self, tag: Optional[str] = None):
        self.tag = tag

    def latest_release(self) -> Optional[ReleaseInfo]:
        return ReleaseInfo(tag_name=self.tag) if self.tag else None


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setenv("CLICKER_CHECK_UPDATES", "0")
    rng = SeededRandom(99)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_rng] = lambda: rng
    app.dependency_overrides[get_release_feed] = lambda: StaticFeed("v9.0.0")
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_get_player(client) -> None:
    data = client.get("/api/player").json()
    assert data["username"] == "Player"
    assert data["mmr"] == {"1v1": 500, "2v2": 500, "3v3": 500}
    assert data["ranks"]["1v1"]["name"] == "Silver III"
    assert data["highestMmr"] == 500
    assert data["availableTitles"][0]["id"] == "level-rookie"
    assert data["rccsEligible"] is False


def test_invalid_username_error_shape(client) -> None:
    response = client.put("/api/player/username", json={"username": "   "})
    assert response.status_code == 400
    error = response.json()["detail"]["error"]
    assert error["code"] == "INVALID_USERNAME"
    assert "message" in error
    assert "details" in error


def test_equip_unknown_title(client) -> None:
    response = client.put("/api/player/title", json={"titleId": "s1-1v1-gold"})
    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "TITLE_NOT_AVAILABLE"


def test_prepare_and_complete_match(client) -> None:
    prepared = client.post("/api/matches/prepare", json={"mode": "2v2"})
    assert prepared.status_code == 200
    body = prepared.json()
    assert body["playerMmr"] == 500
    assert len(body["opponents"]) == 3
    assert "isTeammate" in body["opponents"][0]

    completed = client.post(
        "/api/matches/complete",
        json={
            "mode": "2v2",
            "isWin": True,
            "opponents": body["opponents"],
            "teamScore": 120,
            "opponentTeamScore": 90,
        },
    )
    assert completed.status_code == 200
    result = completed.json()
    assert result["mmrChange"] >= 10
    assert result["newMmr"] == 500 + result["mmrChange"]
    assert client.get("/api/player").json()["mmr"]["2v2"] == result["newMmr"]


def test_unknown_mode_is_rejected(client) -> None:
    response = client.post("/api/matches/prepare", json={"mode": "4v4"})
    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "INVALID_REQUEST"


def test_queued_player_cannot_start_match(client) -> None:
    assert client.post("/api/tournaments/queue", json={"type": "1v1"}).status_code == 200
    response = client.post("/api/matches/prepare", json={"mode": "1v1"})
    assert response.status_code == 409
    assert response.json()["detail"]["error"]["code"] == "MATCH_UNAVAILABLE"


def test_forced_tournament_start(client) -> None:
    client.post("/api/tournaments/queue", json={"type": "1v1"})
    data = client.post("/api/tournaments/start", json={"force": True}).json()
    assert data["current"]["phase"] == "in-progress"
    assert data["playerMatchId"] is not None
    assert data["isQueued"] is False


def test_rccs_register_needs_champion(client) -> None:
    response = client.post("/api/rccs/register")
    assert response.status_code == 409
    assert response.json()["detail"]["error"]["code"] == "RCCS_REJECTED"


def test_leaderboard(client) -> None:
    data = client.get("/api/leaderboard/3v3").json()
    assert data["mode"] == "3v3"
    assert len(data["entries"]) == 25
    assert data["playerRank"] == 26
    assert client.get("/api/leaderboard/9v9").status_code == 404


def test_news_and_update_check(client) -> None:
    news = client.get("/api/news").json()
    published = [a for a in news["articles"] if a["isPublished"]]
    assert news["unreadCount"] == len(published)

    article_id = published[0]["id"]
    read = client.post(f"/api/news/{article_id}/read").json()
    assert read["unreadCount"] == news["unreadCount"] - 1
    assert client.post("/api/news/missing/read").status_code == 404

    check = client.post("/api/updates/check").json()
    assert check["checked"] is True
    assert check["latestVersion"] == "9.0.0"
    assert check["hasUpdate"] is True


def test_websocket_match_plays_to_completion(client, monkeypatch) -> None:
    monkeypatch.setattr(handlers, "TICK_SECONDS", 0)
    with client.websocket_connect("/ws/match") as ws:
        ws.send_json({"action": "start", "mode": "1v1", "queueMode": "casual"})
        started = ws.receive_json()
        assert started["status"] == "started"
        assert len(started["opponents"]) == 1

        ws.send_json({"action": "click"})
        message = ws.receive_json()
        for _ in range(500):
            if message["status"] != "playing":
                break
            message = ws.receive_json()

    assert message["status"] == "completed"
    assert message["mmrChange"] == 0
    player = client.get("/api/player").json()
    assert player["stats"]["1v1"]["wins"] + player["stats"]["1v1"]["losses"] == 1


def test_websocket_rejects_unknown_action(client) -> None:
    with client.websocket_connect("/ws/match") as ws:
        ws.send_json({"action": "jump"})
        assert ws.receive_json() == {"status": "error", "message": "Unknown action: jump"}


def test_rccs_lists_active_notifications(client, store) -> None:
    ctx = load_context(store)
    ctx.rccs.notifications = [
        RCCSNotification(id="tournament-signup-s1", season=1, message="Sign up"),
        RCCSNotification(id="old", season=0, message="Gone", dismissed=True),
    ]
    save_context(store, ctx)

    data = client.get("/api/rccs").json()
    assert data["activeNotifications"] == [
        {"id": "tournament-signup-s1", "season": 1, "message": "Sign up"}
    ]

    declined = client.post("/api/rccs/decline").json()
    assert declined["activeNotifications"] == []


def test_tournament_match_in_wrong_playlist_is_unavailable(client) -> None:
    client.post("/api/tournaments/queue", json={"type": "2v2"})
    started = client.post("/api/tournaments/start", json={"force": True}).json()
    response = client.post(
        "/api/matches/prepare",
        json={"mode": "1v1", "tournamentMatchId": started["playerMatchId"]},
    )
    assert response.status_code == 409
    assert response.json()["detail"]["error"]["code"] == "MATCH_UNAVAILABLE"

    ok = client.post(
        "/api/matches/prepare",
        json={"mode": "2v2", "tournamentMatchId": started["playerMatchId"]},
    )
    assert ok.status_code == 200
    assert len(ok.json()["opponents"]) == 3


def test_get_tournaments_reports_schedule(client) -> None:
    data = client.get("/api/tournaments").json()
    assert data["nextTournamentTime"] is not None
    assert data["newTitles"] == []
