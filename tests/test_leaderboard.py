from clicker.leaderboard import (
    BOARD_SIZE,
    MIN_BOARD_MMR,
    PLAYER_ENTRY_ID,
    LeaderboardEntry,
    Leaderboards,
    generate_board,
    mmr_for_position,
    sort_board,
)
from clicker.progression import ModeStats
from clicker.types import ALL_MODES, GameMode


def _player_mmr(value: int):
    return {mode: value for mode in ALL_MODES}


def _player_stats():
    return {mode: ModeStats(wins=40, losses=20) for mode in ALL_MODES}


def test_position_ramp() -> None:
    assert mmr_for_position(1, GameMode.ONES) == 3400
    assert mmr_for_position(BOARD_SIZE, GameMode.TWOS) == MIN_BOARD_MMR


def test_generated_board_is_sorted_and_unique(rng) -> None:
    for mode in ALL_MODES:
        board = generate_board(mode, rng)
        assert len(board) == BOARD_SIZE
        mmrs = [e.mmr for e in board]
        assert mmrs == sorted(mmrs, reverse=True)
        assert len({e.name for e in board}) == BOARD_SIZE
        assert all(e.title for e in board)
        assert all(e.losses >= 10 for e in board)


def test_player_spliced_when_good_enough(rng) -> None:
    boards = Leaderboards()
    boards.initialize(rng)
    boards.splice_player("Ace", _player_mmr(3010), _player_stats(), title="LEGEND")

    board = boards.board(GameMode.ONES)
    assert len(board) == BOARD_SIZE
    players = [e for e in board if e.is_player]
    assert len(players) == 1
    assert players[0].wins == 40
    assert [e.mmr for e in board] == sorted((e.mmr for e in board), reverse=True)
    assert boards.rank(GameMode.ONES, 3010) == board.index(players[0]) + 1


def test_player_below_board_floor_keeps_previous_entry(rng) -> None:
    boards = Leaderboards()
    boards.initialize(rng)
    boards.splice_player("Ace", _player_mmr(3000), _player_stats())
    boards.splice_player("Ace", _player_mmr(2500), _player_stats())
    players = [e for e in boards.board(GameMode.TWOS) if e.is_player]
    assert len(players) == 1
    assert players[0].mmr == 3000


def test_fluctuation_is_rate_limited(rng) -> None:
    boards = Leaderboards()
    boards.initialize(rng, now_ms=0)
    assert not boards.fluctuate(rng, 10_000)
    assert boards.fluctuate(rng, 30_000)
    assert boards.last_fluctuation == 30_000
    for mode in ALL_MODES:
        board = boards.board(mode)
        assert all(2550 <= e.mmr <= 3100 for e in board if not e.is_player)
        assert [e.mmr for e in board] == sorted((e.mmr for e in board), reverse=True)


def test_initialize_keeps_existing_boards(rng) -> None:
    boards = Leaderboards()
    boards.initialize(rng)
    first = [e.name for e in boards.board(GameMode.ONES)]
    boards.initialize(rng)
    assert [e.name for e in boards.board(GameMode.ONES)] == first


def test_round_trip(rng) -> None:
    boards = Leaderboards()
    boards.initialize(rng, now_ms=5)
    restored = Leaderboards.from_dict(boards.to_dict())
    assert restored == boards


def _assert_strict(board) -> None:
    mmrs = [e.mmr for e in board]
    assert len(board) == BOARD_SIZE
    assert all(a > b for a, b in zip(mmrs, mmrs[1:]))
    assert sum(1 for e in board if e.is_player) <= 1


def test_boards_stay_strictly_descending_through_fluctuation(rng) -> None:
    boards = Leaderboards()
    boards.initialize(rng, now_ms=0)
    for window in range(1, 51):
        boards.splice_player("Ace", _player_mmr(2900 + (window * 37) % 300), _player_stats())
        assert boards.fluctuate(rng, window * 30_000)
        for mode in ALL_MODES:
            _assert_strict(boards.board(mode))


def test_ties_with_player_nudge_ai_entries() -> None:
    board = [
        LeaderboardEntry(id=f"ai-{i}", name=f"AI {i}", mmr=3000, wins=1, losses=1)
        for i in range(3)
    ]
    board.append(
        LeaderboardEntry(id=PLAYER_ENTRY_ID, name="Ace", mmr=3000, wins=1, losses=1, is_player=True)
    )
    sort_board(board)
    assert board[0].is_player
    assert [e.mmr for e in board] == [3000, 2999, 2998, 2997]

    board[1].mmr = 3001
    board[2].mmr = 3001
    sort_board(board)
    assert [e.is_player for e in board] == [False, False, True, False]
    assert [e.mmr for e in board] == [3002, 3001, 3000, 2997]
