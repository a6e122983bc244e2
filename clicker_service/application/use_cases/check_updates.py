"""Use case for checking the release feed for a newer version."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from clicker.config import APP_VERSION

from ..ports.release_feed import ReleaseFeedPort
from ..ports.state_store import StateStorePort
from .context import load_context, save_context

logger = logging.getLogger(__name__)

# Thread pool for the blocking HTTP call
_executor = ThreadPoolExecutor(max_workers=2)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CheckUpdatesResult:
    """Result of a version check."""

    success: bool
    current_version: str = APP_VERSION
    latest_version: str | None = None
    has_update: bool = False
    error: str | None = None


class CheckUpdatesUseCase:
    """Compare the running version with the latest published release.

    A failed lookup leaves the stored version info untouched.
    """

    def __init__(
        self,
        store: StateStorePort,
        feed: ReleaseFeedPort,
        current_version: str = APP_VERSION,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._feed = feed
        self._current_version = current_version
        self._clock = clock

    async def execute(self) -> CheckUpdatesResult:
        """Execute the update check.

        Returns:
            Check result with the latest known version
        """
        loop = asyncio.get_event_loop()
        release = await loop.run_in_executor(_executor, self._feed.latest_release)

        ctx = load_context(self._store, self._current_version)
        if release is None:
            info = ctx.news.version
            return CheckUpdatesResult(
                success=False,
                current_version=info.current_version,
                latest_version=info.latest_version,
                has_update=info.has_update,
                error="Release feed unavailable",
            )

        info = ctx.news.apply_release(
            release.tag_name, int(self._clock().timestamp() * 1000)
        )
        save_context(self._store, ctx)
        if info.has_update:
            logger.info(f"Update available: {info.current_version} -> {info.latest_version}")
        return CheckUpdatesResult(
            success=True,
            current_version=info.current_version,
            latest_version=info.latest_version,
            has_update=info.has_update,
        )
