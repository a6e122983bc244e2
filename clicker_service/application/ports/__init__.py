"""Application ports (interfaces)."""

from .release_feed import ReleaseFeedPort, ReleaseInfo
from .state_store import StateStorePort

__all__ = [
    "ReleaseFeedPort",
    "ReleaseInfo",
    "StateStorePort",
]
