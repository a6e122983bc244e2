"""Profile edits: username and equipped title."""

from dataclasses import dataclass

from clicker.progression import equip_title, equipped_title_name, update_username

from ..ports.state_store import StateStorePort
from .context import load_context, save_context


@dataclass
class ProfileResult:
    success: bool
    username: str | None = None
    equipped_title: str | None = None
    equipped_title_name: str | None = None
    error: str | None = None


class UpdateUsernameUseCase:
    def __init__(self, store: StateStorePort):
        self._store = store

    def execute(self, username: str) -> ProfileResult:
        ctx = load_context(self._store)
        if not update_username(ctx.player, username):
            return ProfileResult(
                success=False,
                username=ctx.player.username,
                error="Username must be 1-20 characters",
            )
        save_context(self._store, ctx)
        return ProfileResult(success=True, username=ctx.player.username)


class EquipTitleUseCase:
    """Equip one of the player's available titles; None unequips."""

    def __init__(self, store: StateStorePort):
        self._store = store

    def execute(self, title_id: str | None) -> ProfileResult:
        ctx = load_context(self._store)
        if not equip_title(ctx.player, title_id, ctx.ledger):
            return ProfileResult(
                success=False,
                equipped_title=ctx.player.equipped_title,
                error=f"Title not available: {title_id}",
            )
        save_context(self._store, ctx)
        return ProfileResult(
            success=True,
            username=ctx.player.username,
            equipped_title=ctx.player.equipped_title,
            equipped_title_name=equipped_title_name(ctx.player, ctx.ledger),
        )
