"""Core records passed between the gateway, the store and the API layer."""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

SORT_FIELDS = ("title", "topic", "createdAt")
DEFAULT_SORT = "createdAt"


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and `Z` suffix."""
    moment = moment or datetime.now(timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO date or datetime string; naive values are read as UTC.

    Raises ValueError for anything `datetime.fromisoformat` rejects.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class Article:
    """One generated blog post. Immutable once created."""

    id: str
    title: str
    topic: str
    content: str
    created_at: str

    @property
    def created_at_dt(self) -> datetime:
        return parse_timestamp(self.created_at)

    def to_dict(self) -> Dict[str, str]:
        """Serialize with the camelCase keys used on the wire and in the slot."""
        return {
            "id": self.id,
            "title": self.title,
            "topic": self.topic,
            "content": self.content,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            topic=str(data["topic"]),
            content=str(data["content"]),
            created_at=str(data["createdAt"]),
        )


@dataclass
class ArticleQuery:
    """Filter, sort and paging options for `ArticleStore.list`."""

    search: Optional[str] = None
    topics: Tuple[str, ...] = ()
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort_by: str = DEFAULT_SORT
    order: str = "desc"
    limit: Optional[int] = None
    offset: int = 0


@dataclass
class ListResult:
    items: List[Article]
    total: int
    total_all: int
    offset: int
    limit: int
    has_more: bool


@dataclass
class DeleteResult:
    deleted_id: str
    remaining_count: int


@dataclass
class StoreStats:
    """Aggregate view over the whole collection."""

    total_blogs: int
    unique_topics: int
    topic_distribution: Dict[str, int] = field(default_factory=dict)
    latest_blog: Optional[Article] = None
    oldest_blog: Optional[Article] = None
    average_content_length: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["latest_blog"] = self.latest_blog.to_dict() if self.latest_blog else None
        data["oldest_blog"] = self.oldest_blog.to_dict() if self.oldest_blog else None
        return data
