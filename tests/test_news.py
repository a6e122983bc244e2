import asyncio
from typing import Optional

from clicker.news import NewsFeed, parse_release_tag
from clicker_service.application.ports.release_feed import ReleaseFeedPort, ReleaseInfo
from clicker_service.application.use_cases.check_updates import CheckUpdatesUseCase
from clicker_service.application.use_cases.context import load_context, save_context

from conftest import FIXED_NOW


class FakeFeed(ReleaseFeedPort):
    def __init__(self, tag: Optional[str]):
        self.tag = tag
        self.calls = 0

    def latest_release(self) -> Optional[ReleaseInfo]:
        self.calls += 1
        if self.tag is None:
            return None
        return ReleaseInfo(tag_name=self.tag)


def _check(store, feed, clock):
    return asyncio.run(CheckUpdatesUseCase(store, feed, "1.0.0", clock).execute())


def test_release_tag_parsing() -> None:
    assert parse_release_tag("v1.2.0") == "1.2.0"
    assert parse_release_tag("2.0") == "2.0"
    assert parse_release_tag(None) == "1.0.0"


def test_seeded_feed_counts_unread() -> None:
    feed = NewsFeed.seeded(FIXED_NOW)
    assert feed.unread_count() == 3
    assert len(feed.featured()) == 2
    assert feed.mark_as_read("1")
    assert not feed.mark_as_read("missing")
    assert feed.unread_count() == 2


def test_added_article_goes_first() -> None:
    feed = NewsFeed.seeded(FIXED_NOW)
    article = feed.add_article("Patch", "Notes", now=FIXED_NOW)
    assert feed.articles[0] is article
    assert feed.regular()[0] is article


def test_newer_release_flags_update(store, clock) -> None:
    result = _check(store, FakeFeed("v1.1.0"), clock)
    assert result.success
    assert result.has_update
    assert result.latest_version == "1.1.0"
    version = load_context(store, "1.0.0").news.version
    assert version.has_update
    assert version.last_checked == int(FIXED_NOW.timestamp() * 1000)


def test_same_release_is_not_an_update(store, clock) -> None:
    result = _check(store, FakeFeed("v1.0.0"), clock)
    assert result.success
    assert not result.has_update


def test_unreachable_feed_leaves_state_alone(store, clock) -> None:
    _check(store, FakeFeed("v1.1.0"), clock)
    result = _check(store, FakeFeed(None), clock)
    assert not result.success
    assert result.latest_version == "1.1.0"
    assert result.has_update


def test_dismissed_update_stays_dismissed(store, clock) -> None:
    _check(store, FakeFeed("v1.1.0"), clock)
    ctx = load_context(store, "1.0.0")
    ctx.news.dismiss_update()
    save_context(store, ctx)
    result = _check(store, FakeFeed("v1.2.0"), clock)
    assert not result.has_update
