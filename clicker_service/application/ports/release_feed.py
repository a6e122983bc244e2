"""Port (interface) for the release/version feed."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ReleaseInfo:
    """Latest published release."""

    tag_name: Optional[str]
    name: Optional[str] = None
    html_url: Optional[str] = None


class ReleaseFeedPort(ABC):
    """Port for fetching the latest release."""

    @abstractmethod
    def latest_release(self) -> Optional[ReleaseInfo]:
        """Fetch the latest release.

        Returns:
            ReleaseInfo, or None if the feed could not be reached. Adapters
            must not raise.
        """
        ...
