"""Adapter for the GitHub "latest release" endpoint."""

import logging
from typing import Optional

import requests

from clicker.config import DEFAULT_RELEASES_URL

from ...application.ports.release_feed import ReleaseFeedPort, ReleaseInfo

logger = logging.getLogger(__name__)


class GitHubReleaseFeed(ReleaseFeedPort):
    """Best-effort release lookup. Every failure is logged and reported as None."""

    def __init__(self, url: str = DEFAULT_RELEASES_URL, timeout_s: float = 5.0):
        self._url = url
        self._timeout_s = timeout_s
        self.session = requests.Session()
        self.session.headers.update({"accept": "application/vnd.github+json"})

    def latest_release(self) -> Optional[ReleaseInfo]:
        try:
            resp = self.session.get(self._url, timeout=self._timeout_s)
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not check for updates: {e}")
            return None

        if not isinstance(body, dict):
            logger.warning("Unexpected release payload shape")
            return None
        return ReleaseInfo(
            tag_name=body.get("tag_name"),
            name=body.get("name"),
            html_url=body.get("html_url"),
        )
