"""Article collections answering filter / sort / paginate queries.

Two implementations share the query logic: a process-lifetime in-memory list
and a key/value slot file that keeps the whole collection as one JSON array
under a fixed key, rewritten on every mutation.
"""

import json
import logging
import os
from collections import Counter
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from blog_generator.errors import NotFoundError, ValidationError
from blog_generator.models import (
    DEFAULT_SORT,
    Article,
    ArticleQuery,
    DeleteResult,
    ListResult,
    StoreStats,
    parse_timestamp,
)
from blog_generator.pipeline import build_article

logger = logging.getLogger(__name__)


def _matches_search(article: Article, needle: str) -> bool:
    return (
        needle in article.title.lower()
        or needle in article.content.lower()
        or needle in article.topic.lower()
    )


def _sort_key(sort_by: str) -> Callable[[Article], Any]:
    if sort_by == "title":
        return lambda article: article.title.lower()
    if sort_by == "topic":
        return lambda article: article.topic.lower()
    return lambda article: article.created_at_dt


def filter_articles(articles: Iterable[Article], query: ArticleQuery) -> List[Article]:
    """Apply search, topic and date filters, in that order."""
    result = list(articles)

    search = (query.search or "").strip().lower()
    if search:
        result = [a for a in result if _matches_search(a, search)]

    topics = [t.strip().lower() for t in query.topics if t and t.strip()]
    if topics:
        result = [a for a in result if any(t in a.topic.lower() for t in topics)]

    if query.date_from is not None:
        result = [a for a in result if a.created_at_dt >= query.date_from]
    if query.date_to is not None:
        result = [a for a in result if a.created_at_dt <= query.date_to]

    return result


def sort_articles(articles: List[Article], sort_by: str, order: str) -> List[Article]:
    """Sort by title, topic or creation time. Order among equal keys is unspecified."""
    if sort_by not in ("title", "topic"):
        sort_by = DEFAULT_SORT
    return sorted(articles, key=_sort_key(sort_by), reverse=order != "asc")


class ArticleStore:
    """Base collection; subclasses decide where the list lives."""

    def __init__(self, articles: Optional[Iterable[Article]] = None):
        self._articles: List[Article] = list(articles or [])

    def __len__(self) -> int:
        return len(self._articles)

    def _persist(self, articles: List[Article]) -> None:
        """Write a candidate collection; raising leaves the store unchanged."""

    def add(self, article: Article) -> Article:
        """Insert a built article at the front (newest first)."""
        if any(existing.id == article.id for existing in self._articles):
            raise ValidationError(f"Duplicate blog ID: {article.id}")
        updated = [article] + self._articles
        self._persist(updated)
        self._articles = updated
        logger.info("Stored article %s (%s); %d total", article.id, article.topic, len(self))
        return article

    def create(self, content: str, topic: Any) -> Article:
        return self.add(build_article(content, topic))

    def get(self, article_id: str) -> Article:
        for article in self._articles:
            if article.id == article_id:
                return article
        raise NotFoundError("Blog post not found")

    def list(self, query: Optional[ArticleQuery] = None) -> ListResult:
        query = query or ArticleQuery()
        filtered = filter_articles(self._articles, query)
        ordered = sort_articles(filtered, query.sort_by, query.order)

        total = len(ordered)
        offset = query.offset or 0
        limit = query.limit or None
        if limit:
            ordered = ordered[offset:offset + limit]

        return ListResult(
            items=ordered,
            total=total,
            total_all=len(self._articles),
            offset=offset,
            limit=limit or total,
            has_more=bool(limit) and offset + limit < total,
        )

    def delete(self, article_id: Optional[str]) -> DeleteResult:
        if not article_id or not isinstance(article_id, str):
            raise ValidationError("Blog ID is required")

        remaining = [a for a in self._articles if a.id != article_id]
        if len(remaining) == len(self._articles):
            raise NotFoundError("Blog post not found")

        self._persist(remaining)
        self._articles = remaining
        logger.info("Deleted article %s; %d remaining", article_id, len(remaining))
        return DeleteResult(deleted_id=article_id, remaining_count=len(remaining))

    def stats(self) -> StoreStats:
        articles = self._articles
        distribution = dict(Counter(a.topic for a in articles))
        average = 0
        if articles:
            average = round(sum(len(a.content) for a in articles) / len(articles))
        return StoreStats(
            total_blogs=len(articles),
            unique_topics=len(distribution),
            topic_distribution=distribution,
            latest_blog=articles[0] if articles else None,
            oldest_blog=articles[-1] if articles else None,
            average_content_length=average,
        )


class InMemoryArticleStore(ArticleStore):
    """Lives as long as the process; nothing is written anywhere."""


class JsonSlotArticleStore(ArticleStore):
    """Key/value slot file holding the collection as one JSON array."""

    def __init__(self, path: str = "blogs.json", key: str = "blogs"):
        self.path = path
        self.key = key
        super().__init__(self._load())

    def _read_slots(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                slots = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Failed to read article slot file %s: %s", self.path, e)
            return {}
        if not isinstance(slots, dict):
            logger.warning("Ignoring malformed slot file %s", self.path)
            return {}
        return slots

    def _load(self) -> List[Article]:
        raw = self._read_slots().get(self.key) or "[]"
        try:
            records = json.loads(raw) if isinstance(raw, str) else raw
            return [Article.from_dict(record) for record in records]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning("Failed to load articles from slot %r: %s", self.key, e)
            return []

    def _persist(self, articles: List[Article]) -> None:
        slots = self._read_slots()
        slots[self.key] = json.dumps([a.to_dict() for a in articles], ensure_ascii=False)
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(slots, f, ensure_ascii=False, indent=2)
        except IOError as e:
            logger.error("Failed to save article slot file %s: %s", self.path, e)
            raise


def build_store(settings) -> ArticleStore:
    """Construct the configured store; called once per app."""
    if settings.STORE_BACKEND == "json":
        logger.info("Using JSON slot store at %s (key=%s)", settings.STORE_PATH, settings.STORE_KEY)
        return JsonSlotArticleStore(path=settings.STORE_PATH, key=settings.STORE_KEY)
    logger.info("Using in-memory article store")
    return InMemoryArticleStore()


def parse_date_bound(value: Optional[str], name: str) -> Optional[datetime]:
    """Parse a `dateFrom`/`dateTo` filter value, raising `ValidationError` if invalid."""
    if value is None or not str(value).strip():
        return None
    try:
        return parse_timestamp(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid {name}: {value}") from exc
