from clicker.config import StorageConfig
from clicker.types import GameMode
from clicker_service.application.use_cases import load_context
from clicker_service.cli import main
from clicker_service.infrastructure.adapters.json_state_store import JsonFileStateStore


def _store(path) -> JsonFileStateStore:
    return JsonFileStateStore(StorageConfig(base_dir=path))


def test_boost_and_register(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("CLICKER_DATA_DIR", str(tmp_path))
    main(["--data-dir", str(tmp_path), "--seed", "7", "--boost", "--register"])

    out = capsys.readouterr().out
    assert "Boosted all playlists to 2400 MMR" in out
    assert "Registered for RCCS qualifiers" in out
    ctx = load_context(_store(tmp_path))
    assert ctx.player.mmr[GameMode.THREES] == 2400
    assert ctx.rccs.player_registered


def test_register_without_rank_is_refused(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("CLICKER_DATA_DIR", str(tmp_path))
    main(["--data-dir", str(tmp_path), "--register"])
    assert "Champion III" in capsys.readouterr().out
    assert not load_context(_store(tmp_path)).rccs.player_registered


def test_scripted_casual_match(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("CLICKER_DATA_DIR", str(tmp_path))
    main(["--data-dir", str(tmp_path), "--seed", "3", "--play", "1v1", "--casual", "--cps", "12"])

    ctx = load_context(_store(tmp_path))
    stats = ctx.player.stats[GameMode.ONES]
    assert stats.wins + stats.losses == 1
    assert ctx.player.mmr[GameMode.ONES] == 500
    assert capsys.readouterr().out
