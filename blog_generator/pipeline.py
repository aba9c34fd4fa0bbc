"""Input preprocessing pipeline for article generation.

This module validates and normalizes the raw topic a user submits and wraps
model output into an `Article` record.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from blog_generator.errors import EmptyContentError, ValidationError
from blog_generator.models import Article, utc_timestamp

logger = logging.getLogger(__name__)

MAX_TOPIC_LENGTH = 100


@dataclass
class PreparedTopic:
    """Normalized topic consumed by prompt building and article construction."""

    clean_topic: str
    topic: str
    title: str


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def prepare_topic(raw_topic: Any) -> PreparedTopic:
    """Validate a user-supplied topic and derive its normalized forms.

    Raises `ValidationError` when the topic is missing, not a string, blank, or
    longer than `MAX_TOPIC_LENGTH` characters once trimmed.
    """
    if not isinstance(raw_topic, str) or not raw_topic.strip():
        raise ValidationError("Topic is required and must be a non-empty string")

    clean_topic = raw_topic.strip()
    if len(clean_topic) > MAX_TOPIC_LENGTH:
        raise ValidationError(
            f"Topic must be less than {MAX_TOPIC_LENGTH} characters"
        )

    topic = clean_topic.lower()
    return PreparedTopic(
        clean_topic=clean_topic,
        topic=topic,
        title=_capitalize_first(topic),
    )


def build_article(
    content: Optional[str],
    raw_topic: Any,
    created_at: Optional[str] = None,
) -> Article:
    """Wrap generated content into a new `Article`.

    The topic is validated before the content so a bad request never reports an
    upstream failure.
    """
    prepared = prepare_topic(raw_topic)

    body = (content or "").strip()
    if not body:
        raise EmptyContentError("Failed to generate content")

    article = Article(
        id=str(uuid.uuid4()),
        title=prepared.title,
        topic=prepared.topic,
        content=body,
        created_at=created_at or utc_timestamp(),
    )
    logger.debug("Built article %s for topic %r", article.id, article.topic)
    return article
