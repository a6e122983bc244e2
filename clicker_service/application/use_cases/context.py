"""Loading and saving the whole GameContext through a StateStorePort."""

from clicker.config import APP_VERSION, STORE_NAMES
from clicker.state import GameContext

from ..ports.state_store import StateStorePort


def load_context(store: StateStorePort, current_version: str = APP_VERSION) -> GameContext:
    ctx = GameContext.from_buckets(
        {name: store.load(name) for name in STORE_NAMES},
        current_version=current_version,
    )
    ctx.sync_season()
    return ctx


def save_context(store: StateStorePort, ctx: GameContext) -> None:
    for name, data in ctx.to_buckets().items():
        store.save(name, data)
