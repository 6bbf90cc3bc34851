from __future__ import annotations

from datetime import date

import pytest

from adapters.html_document import parse_document
from core.errors import ExtractionFailed
from core.extractor import extract_reviews, parse_review_date
from core.models import Rating
from core.rating import LOCALES
from reviews_html import page_html, review_html


def test_extracts_all_fields() -> None:
    document = parse_document(page_html(review_html()))

    [record] = extract_reviews(document)

    assert record.id == 0
    assert record.author == "Taro"
    assert record.author_key == "/reviews/abc"
    assert record.title == "Great app"
    assert record.body == "Works well."
    assert record.rate == Rating.THREE
    assert record.updated_at == date(2016, 3, 9)


def test_orders_newest_first_and_keeps_document_order_on_ties() -> None:
    document = parse_document(
        page_html(
            review_html(permalink="/r/old", date="2016年1月1日"),
            review_html(permalink="/r/tie-a", date="2016年3月9日"),
            review_html(permalink="/r/new", date="2016年12月24日"),
            review_html(permalink="/r/tie-b", date="2016年3月9日"),
        )
    )

    keys = [record.author_key for record in extract_reviews(document)]

    assert keys == ["/r/new", "/r/tie-a", "/r/tie-b", "/r/old"]


def test_unparsable_date_drops_only_that_review() -> None:
    document = parse_document(
        page_html(
            review_html(permalink="/r/1", date="2016年3月9日"),
            review_html(permalink="/r/bad", date="yesterday"),
            review_html(permalink="/r/2", date="2016年3月8日"),
        )
    )

    keys = [record.author_key for record in extract_reviews(document)]

    assert keys == ["/r/1", "/r/2"]


def test_review_without_permalink_is_skipped() -> None:
    markup = review_html(permalink="/r/1").replace('class="reviews-permalink" href="/r/1"', 'class="other"')
    document = parse_document(page_html(markup, review_html(permalink="/r/2")))

    assert [record.author_key for record in extract_reviews(document)] == ["/r/2"]


def test_empty_body_and_unknown_label() -> None:
    document = parse_document(page_html(review_html(body="", label="no rating")))

    [record] = extract_reviews(document)

    assert record.body == ""
    assert record.rate is Rating.UNRATED


def test_page_without_reviews_yields_nothing() -> None:
    assert extract_reviews(parse_document("<html><body><p>nothing</p></body></html>")) == []


def test_english_locale_dates_and_labels() -> None:
    en = LOCALES["en"]
    document = parse_document(
        page_html(review_html(date="March 9, 2016", label="Rated 4 stars out of five stars"))
    )

    [record] = extract_reviews(document, en)

    assert record.updated_at == date(2016, 3, 9)
    assert record.rate == Rating.FOUR


def test_parse_review_date() -> None:
    assert parse_review_date(" 2015年11月30日 ") == date(2015, 11, 30)
    assert parse_review_date("2015/11/30") is None
    assert parse_review_date("") is None


@pytest.mark.parametrize("markup", ["", "just some text", None])
def test_unreadable_markup_fails_extraction(markup) -> None:
    with pytest.raises(ExtractionFailed):
        parse_document(markup)


def test_document_that_cannot_select_fails_extraction() -> None:
    class BrokenDocument:
        def select(self, selector: str):
            raise TypeError("not a document")

    with pytest.raises(ExtractionFailed):
        extract_reviews(BrokenDocument())


def test_text_split_across_inline_tags_is_joined() -> None:
    document = parse_document(
        page_html(review_html(date="<span>2016年</span>3月9日", body="Works <b>very</b>well."))
    )

    [record] = extract_reviews(document)

    assert record.updated_at == date(2016, 3, 9)
    assert record.body == "Works verywell."
