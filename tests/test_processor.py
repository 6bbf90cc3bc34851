from __future__ import annotations

from typing import Sequence

import pytest

from adapters.html_document import parse_document
from adapters.notification_formatting import build_payload
from adapters.sqlite_storage import SQLiteReviewStore
from core.config import NotificationConfig
from core.errors import DeliveryFailed, FetchFailed
from core.models import ReviewRecord
from core.processor import ReviewHarvester
from reviews_html import page_html, review_html

CONFIG = NotificationConfig(
    review_count=2,
    bot_name="review-bot",
    icon_emoji=":iphone:",
    message_text="New reviews",
    web_hook_uri="https://hooks.example.com/T000/B000",
)

PAGE = page_html(
    review_html(permalink="/r/a", date="2016年3月1日"),
    review_html(permalink="/r/b", date="2016年3月5日"),
    review_html(permalink="/r/c", date="2016年3月3日"),
    review_html(permalink="/r/d", date="2016年3月9日"),
    review_html(permalink="/r/e", date="2016年3月7日"),
    review_html(permalink="/r/bad", date="??"),
)


class FakeFetcher:
    def __init__(self, markup: str) -> None:
        self.markup = markup
        self.calls: list[str] = []

    def fetch(self, app_id: str):
        self.calls.append(app_id)
        return parse_document(self.markup)


class FakeNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.batches: list[list[ReviewRecord]] = []
        self.payloads: list[dict] = []
        self._fail = fail

    def send(self, records: Sequence[ReviewRecord]) -> int:
        self.batches.append(list(records))
        if self._fail:
            raise DeliveryFailed("webhook down")
        if not records:
            return 0
        payload = build_payload(records, CONFIG)
        self.payloads.append(payload)
        return len(payload["attachments"])


class FailingFetcher:
    def fetch(self, app_id: str):
        raise FetchFailed(f"AppID: {app_id} does not exist")


@pytest.fixture
def store(tmp_path) -> SQLiteReviewStore:
    store = SQLiteReviewStore(str(tmp_path / "reviews.db"))
    store.init_db()
    return store


def _harvester(store, notifier, fetcher=None) -> ReviewHarvester:
    return ReviewHarvester(
        fetcher=fetcher or FakeFetcher(PAGE),
        store=store,
        notifier=notifier,
        app_id="com.example",
    )


def test_first_run_saves_all_and_notifies_newest(store: SQLiteReviewStore) -> None:
    notifier = FakeNotifier()

    result = _harvester(store, notifier).run()

    assert result.extracted == 5
    assert [record.author_key for record in result.new_reviews] == ["/r/d", "/r/e", "/r/b", "/r/c", "/r/a"]
    assert result.notified == 2
    [payload] = notifier.payloads
    assert [a["title_link"] for a in payload["attachments"]] == [
        "https://play.google.com/r/d",
        "https://play.google.com/r/e",
    ]


def test_second_run_is_empty(store: SQLiteReviewStore) -> None:
    _harvester(store, FakeNotifier()).run()
    notifier = FakeNotifier()

    result = _harvester(store, notifier).run()

    assert result.new_reviews == []
    assert result.notified == 0
    assert notifier.batches == [[]]
    assert notifier.payloads == []


def test_only_new_review_is_notified(store: SQLiteReviewStore) -> None:
    _harvester(store, FakeNotifier()).run()
    fetcher = FakeFetcher(PAGE.replace("</div></body>", review_html(permalink="/r/new", date="2016年2月1日") + "</div></body>"))
    notifier = FakeNotifier()

    result = _harvester(store, notifier, fetcher).run()

    assert [record.author_key for record in result.new_reviews] == ["/r/new"]
    assert result.new_reviews[0].id == 6


def test_delivery_failure_propagates_after_persisting(store: SQLiteReviewStore) -> None:
    with pytest.raises(DeliveryFailed):
        _harvester(store, FakeNotifier(fail=True)).run()

    assert store.exists("/r/a")
    assert store.next_id() == 6


def test_fetch_failure_propagates(store: SQLiteReviewStore) -> None:
    notifier = FakeNotifier()

    with pytest.raises(FetchFailed):
        _harvester(store, notifier, FailingFetcher()).run()

    assert notifier.batches == []
    assert store.next_id() == 1
