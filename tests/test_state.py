from clicker.config import PLAYER_STORE, StorageConfig
from clicker.progression import apply_match_result, apply_mmr_change
from clicker.state import GameContext
from clicker.tournament import TournamentEngine
from clicker.types import GameMode, TournamentType
from clicker_service.application.use_cases import load_context, save_context
from clicker_service.infrastructure.adapters.json_state_store import JsonFileStateStore


def _played_context(rng) -> GameContext:
    ctx = GameContext()
    apply_match_result(ctx.player, GameMode.TWOS, True)
    apply_mmr_change(ctx.player, GameMode.TWOS, 40)
    ctx.player.username = "Ace"
    engine = TournamentEngine(ctx.tournaments, ctx.ledger, rng)
    engine.join_queue(TournamentType.TWOS, ctx.player.highest_mmr)
    ctx.leaderboards.initialize(rng)
    return ctx


def test_buckets_round_trip(rng) -> None:
    ctx = _played_context(rng)
    restored = GameContext.from_buckets(ctx.to_buckets())

    assert restored.player.username == "Ace"
    assert restored.player.mmr[GameMode.TWOS] == 540
    assert restored.player.stats[GameMode.TWOS].wins == 1
    assert restored.tournaments.is_queued
    assert restored.tournaments.queued_type is TournamentType.TWOS
    assert len(restored.leaderboards.board(GameMode.ONES)) == len(ctx.leaderboards.board(GameMode.ONES))
    assert restored.player.to_dict() == ctx.player.to_dict()


def test_empty_store_gives_fresh_context(store) -> None:
    ctx = load_context(store)
    assert ctx.player.username == "Player"
    assert ctx.player.mmr[GameMode.ONES] == 500
    assert ctx.tournaments.current_season == ctx.player.current_season
    assert ctx.rccs.current is None


def test_json_store_persists_buckets(tmp_path, rng) -> None:
    store = JsonFileStateStore(StorageConfig(base_dir=tmp_path / "state"))
    save_context(store, _played_context(rng))

    assert (tmp_path / "state" / f"{PLAYER_STORE}.json").exists()
    ctx = load_context(store)
    assert ctx.player.username == "Ace"
    assert ctx.tournaments.is_queued


def test_json_store_ignores_corrupt_bucket(tmp_path) -> None:
    store = JsonFileStateStore(StorageConfig(base_dir=tmp_path))
    store.save(PLAYER_STORE, {"username": "Ace"})
    (tmp_path / f"{PLAYER_STORE}.json").write_text("{not json", encoding="utf-8")
    assert store.load(PLAYER_STORE) is None
    assert store.load("missing") is None
