"""Port (interface) for persisted game state."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class StateStorePort(ABC):
    """Opaque key-value storage for whole state buckets."""

    @abstractmethod
    def load(self, name: str) -> Optional[Dict[str, Any]]:
        """Load a bucket.

        Args:
            name: Fixed bucket name (see clicker.config.STORE_NAMES)

        Returns:
            The stored dictionary, or None if nothing was saved yet
        """
        ...

    @abstractmethod
    def save(self, name: str, data: Dict[str, Any]) -> None:
        """Replace a bucket with ``data``."""
        ...
