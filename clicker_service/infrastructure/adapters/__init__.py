"""Infrastructure adapters."""

from .github_release_feed import GitHubReleaseFeed
from .json_state_store import InMemoryStateStore, JsonFileStateStore

__all__ = [
    "GitHubReleaseFeed",
    "InMemoryStateStore",
    "JsonFileStateStore",
]
