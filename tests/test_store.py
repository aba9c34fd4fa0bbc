"""Tests for the article stores"""

import json
import logging
from datetime import datetime, timezone

import pytest

from blog_generator.errors import NotFoundError, UpstreamError, ValidationError
from blog_generator.models import ArticleQuery
from blog_generator.pipeline import build_article
from blog_generator.store import JsonSlotArticleStore, parse_date_bound


@pytest.fixture
def three_articles(store, make_article):
    """Store holding three articles created on consecutive days."""
    for day, topic in ((1, "Banana bread"), (2, "Apple pie"), (3, "Cherry tart")):
        store.add(make_article(topic, f"All about {topic}.", f"2024-03-0{day}T10:00:00.000Z"))
    return store


def test_create_rejects_empty_content_and_topic(store):
    with pytest.raises(ValidationError):
        store.create("", "ai")
    with pytest.raises(ValidationError):
        store.create("Body", "   ")
    with pytest.raises(ValidationError):
        store.create("Body", "x" * 101)
    with pytest.raises(ValidationError):
        store.create("Body", 42)
    assert len(store) == 0


def test_blank_content_is_an_upstream_failure(store):
    with pytest.raises(UpstreamError):
        store.create("   \n", "ai")


def test_create_normalizes_topic_and_title(store):
    article = store.create("Valid body text.", "Machine Learning")

    assert article.topic == "machine learning"
    assert article.title == "Machine learning"
    assert article.content == "Valid body text."
    assert article.created_at.endswith("Z")
    assert store.get(article.id) == article


def test_topic_of_exactly_max_length_is_accepted(store):
    article = store.create("Body", "  " + "y" * 100 + "  ")

    assert article.topic == "y" * 100


def test_new_articles_go_to_the_front(store):
    first = store.create("One", "first")
    second = store.create("Two", "second")

    assert store.stats().latest_blog == second
    assert store.stats().oldest_blog == first


def test_sort_by_title_ascending(store, make_article):
    store.add(make_article("Banana"))
    store.add(make_article("Apple"))

    result = store.list(ArticleQuery(sort_by="title", order="asc"))

    assert [a.title for a in result.items] == ["Apple", "Banana"]


def test_default_sort_is_newest_first(three_articles):
    result = three_articles.list()

    assert [a.topic for a in result.items] == ["cherry tart", "apple pie", "banana bread"]


def test_unknown_sort_field_falls_back_to_created_at(three_articles):
    result = three_articles.list(ArticleQuery(sort_by="bogus", order="asc"))

    assert [a.topic for a in result.items] == ["banana bread", "apple pie", "cherry tart"]


def test_limit_and_offset(three_articles):
    result = three_articles.list(ArticleQuery(limit=1, offset=0))

    assert result.total == 3
    assert result.total_all == 3
    assert result.has_more is True
    assert result.limit == 1
    assert len(result.items) == 1

    last_page = three_articles.list(ArticleQuery(limit=2, offset=2))
    assert [a.topic for a in last_page.items] == ["banana bread"]
    assert last_page.has_more is False


def test_no_limit_returns_everything(three_articles):
    result = three_articles.list(ArticleQuery(offset=2))

    assert len(result.items) == 3
    assert result.limit == 3
    assert result.has_more is False


def test_search_matches_title_content_and_topic(three_articles, make_article):
    three_articles.add(make_article("Soups", "A warm BANANA smoothie is not a soup."))

    result = three_articles.list(ArticleQuery(search="  banana "))

    assert result.total == 2
    assert result.total_all == 4


def test_topics_filter_is_any_match(three_articles):
    result = three_articles.list(ArticleQuery(topics=("APPLE", "tart")))

    assert sorted(a.topic for a in result.items) == ["apple pie", "cherry tart"]


def test_date_range_is_inclusive(three_articles):
    query = ArticleQuery(
        date_from=parse_date_bound("2024-03-02T10:00:00Z", "dateFrom"),
        date_to=parse_date_bound("2024-03-03T10:00:00.000Z", "dateTo"),
    )

    result = three_articles.list(query)

    assert [a.topic for a in result.items] == ["cherry tart", "apple pie"]


def test_date_only_bounds_are_read_as_utc_midnight():
    assert parse_date_bound("2024-03-02", "dateFrom") == datetime(2024, 3, 2, tzinfo=timezone.utc)
    assert parse_date_bound("", "dateFrom") is None


def test_invalid_date_bound_is_a_validation_error():
    with pytest.raises(ValidationError, match="dateTo"):
        parse_date_bound("next tuesday", "dateTo")


def test_filters_are_applied_before_paging(three_articles):
    result = three_articles.list(ArticleQuery(search="a", limit=1, offset=1, sort_by="title", order="asc"))

    assert result.total == 3
    assert [a.title for a in result.items] == ["Banana bread"]
    assert result.has_more is True


def test_list_is_idempotent(three_articles):
    query = ArticleQuery(search="pie", sort_by="topic")

    assert three_articles.list(query) == three_articles.list(query)


def test_delete_removes_article(three_articles):
    target = three_articles.list().items[0]

    result = three_articles.delete(target.id)

    assert result.deleted_id == target.id
    assert result.remaining_count == 2
    assert target.id not in [a.id for a in three_articles.list().items]


def test_delete_unknown_id_leaves_store_unchanged(three_articles):
    with pytest.raises(NotFoundError):
        three_articles.delete("missing")
    assert len(three_articles) == 3


def test_delete_requires_id(three_articles):
    with pytest.raises(ValidationError):
        three_articles.delete("")
    with pytest.raises(ValidationError):
        three_articles.delete(None)


def test_get_unknown_id(store):
    with pytest.raises(NotFoundError):
        store.get("nope")


def test_duplicate_ids_are_rejected(store, make_article):
    article = make_article("Once")
    store.add(article)

    with pytest.raises(ValidationError):
        store.add(article)


def test_stats(three_articles, make_article):
    three_articles.add(make_article("Apple pie", "x" * 100))

    stats = three_articles.stats()

    assert stats.total_blogs == 4
    assert stats.unique_topics == 3
    assert stats.topic_distribution == {"banana bread": 1, "apple pie": 2, "cherry tart": 1}
    assert stats.oldest_blog.topic == "banana bread"
    assert stats.to_dict()["latest_blog"]["content"] == "x" * 100


def test_stats_on_empty_store(store):
    stats = store.stats()

    assert stats.total_blogs == 0
    assert stats.latest_blog is None
    assert stats.average_content_length == 0


class TestJsonSlotArticleStore:
    """Key/value slot persistence"""

    def test_articles_survive_reload(self, tmp_path):
        path = str(tmp_path / "slots.json")
        first = JsonSlotArticleStore(path=path)
        article = first.create("Persistent body.", "Storage")

        reloaded = JsonSlotArticleStore(path=path)

        assert reloaded.get(article.id) == article
        assert len(reloaded) == 1

    def test_slot_holds_one_serialized_array_under_key(self, tmp_path):
        path = tmp_path / "slots.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        store = JsonSlotArticleStore(path=str(path), key="blogs")

        store.create("Body.", "Keys")

        slots = json.loads(path.read_text(encoding="utf-8"))
        assert slots["theme"] == "dark"
        records = json.loads(slots["blogs"])
        assert records[0]["topic"] == "keys"
        assert "createdAt" in records[0]

    def test_delete_is_persisted(self, tmp_path):
        path = str(tmp_path / "slots.json")
        store = JsonSlotArticleStore(path=path)
        article = store.create("Body.", "Gone soon")

        store.delete(article.id)

        assert len(JsonSlotArticleStore(path=path)) == 0

    def test_failed_write_does_not_insert(self, tmp_path):
        store = JsonSlotArticleStore(path=str(tmp_path))

        with pytest.raises(OSError):
            store.add(build_article("Body.", "ai"))

        assert len(store) == 0
        assert store.list().items == []

    def test_failed_write_does_not_delete(self, tmp_path):
        store = JsonSlotArticleStore(path=str(tmp_path / "slots.json"))
        article = store.create("Body.", "Kept")
        store.path = str(tmp_path)

        with pytest.raises(OSError):
            store.delete(article.id)

        assert store.get(article.id) == article
        assert len(store) == 1

    def test_corrupt_slot_file_loads_empty(self, tmp_path):
        path = tmp_path / "slots.json"
        path.write_text("{not json", encoding="utf-8")

        assert len(JsonSlotArticleStore(path=str(path))) == 0

    def test_corrupt_slot_file_is_logged(self, tmp_path, caplog):
        path = tmp_path / "slots.json"
        path.write_text("{not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="blog_generator.store"):
            JsonSlotArticleStore(path=str(path))

        record = caplog.records[0]
        assert record.msg == "Failed to read article slot file %s: %s"
        assert str(path) in record.getMessage()

    def test_corrupt_slot_value_loads_empty(self, tmp_path):
        path = tmp_path / "slots.json"
        path.write_text(json.dumps({"blogs": "[{\"id\": 1}]"}), encoding="utf-8")

        assert len(JsonSlotArticleStore(path=str(path))) == 0
