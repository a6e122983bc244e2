"""News articles and the cached version-check result."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .config import APP_VERSION

FEATURE = "feature"
REGULAR = "regular"


@dataclass
class NewsArticle:
    id: str
    title: str
    content: str
    type: str = REGULAR
    is_published: bool = True
    created_at: str = ""
    read_by_user: bool = False


@dataclass
class VersionInfo:
    current_version: str = APP_VERSION
    latest_version: str = APP_VERSION
    has_update: bool = False
    last_checked: int = 0
    update_dismissed: bool = False


def seed_articles(now: datetime) -> List[NewsArticle]:
    return [
        NewsArticle(
            id="1",
            title="Welcome to Ranked Clicker!",
            content=(
                "Welcome to the ultimate competitive clicking experience! Compete in 1v1, 2v2, "
                "and 3v3 matches across multiple ranks from Bronze to Grand Champion. Earn "
                "titles, climb the seasonal leaderboards, and prove your clicking skills!"
            ),
            type=FEATURE,
            created_at=now.isoformat(),
        ),
        NewsArticle(
            id="2",
            title="New Tournament System Released",
            content=(
                "Tournaments are now live! Compete in bracket-style competitions for exclusive "
                "tournament titles. Win multiple tournaments in a season to unlock special "
                "golden title variants."
            ),
            type=FEATURE,
            created_at=(now - timedelta(days=1)).isoformat(),
        ),
        NewsArticle(
            id="3",
            title="Bug Fixes and Improvements",
            content=(
                "This update includes various bug fixes and performance improvements:\n"
                "- Fixed Grand Champion title colors\n"
                "- Improved AI clicking patterns\n"
                "- Reduced queue times across all ranks\n"
                "- Added MMR display during matches"
            ),
            type=REGULAR,
            created_at=(now - timedelta(days=2)).isoformat(),
        ),
    ]


def parse_release_tag(tag: Optional[str]) -> str:
    """'v1.2.0' -> '1.2.0'; missing tags fall back to the bundled version."""
    if not tag:
        return APP_VERSION
    return tag[1:] if tag.startswith("v") else tag


@dataclass
class NewsFeed:
    articles: List[NewsArticle] = field(default_factory=list)
    version: VersionInfo = field(default_factory=VersionInfo)

    @classmethod
    def seeded(cls, now: Optional[datetime] = None, current_version: str = APP_VERSION) -> "NewsFeed":
        now = now or datetime.now(timezone.utc)
        return cls(
            articles=seed_articles(now),
            version=VersionInfo(current_version=current_version, latest_version=current_version),
        )

    def mark_as_read(self, article_id: str) -> bool:
        for article in self.articles:
            if article.id == article_id:
                article.read_by_user = True
                return True
        return False

    def add_article(self, title: str, content: str, article_type: str = REGULAR, now: Optional[datetime] = None) -> NewsArticle:
        now = now or datetime.now(timezone.utc)
        article = NewsArticle(
            id=str(int(now.timestamp() * 1000)),
            title=title,
            content=content,
            type=article_type,
            created_at=now.isoformat(),
        )
        self.articles.insert(0, article)
        return article

    def unread_count(self) -> int:
        return sum(1 for a in self.articles if a.is_published and not a.read_by_user)

    def featured(self) -> List[NewsArticle]:
        return [a for a in self.articles if a.type == FEATURE and a.is_published]

    def regular(self) -> List[NewsArticle]:
        return [a for a in self.articles if a.type == REGULAR and a.is_published]

    def apply_release(self, tag_name: Optional[str], checked_at_ms: int) -> VersionInfo:
        latest = parse_release_tag(tag_name)
        self.version.latest_version = latest
        self.version.has_update = (
            latest != self.version.current_version and not self.version.update_dismissed
        )
        self.version.last_checked = checked_at_ms
        return self.version

    def dismiss_update(self) -> None:
        self.version.has_update = False
        self.version.update_dismissed = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "articles": [asdict(a) for a in self.articles],
            "version": asdict(self.version),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], current_version: str = APP_VERSION) -> "NewsFeed":
        if not data:
            return cls.seeded(current_version=current_version)
        version = VersionInfo(**(data.get("version") or {}))
        version.current_version = current_version
        return cls(
            articles=[NewsArticle(**a) for a in data.get("articles") or []],
            version=version,
        )
