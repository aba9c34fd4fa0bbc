"""Generation gateway: topic in, validated `Article` out.

The gateway owns no state beyond its backend handle. It validates the topic,
builds the fixed prompt, makes exactly one backend call and maps backend
failures onto the service error taxonomy.
"""

import logging
from typing import Any, Optional

from blog_generator.backends import TextBackend, build_backend
from blog_generator.config import Settings
from blog_generator.errors import (
    AuthError,
    BlogGeneratorError,
    RateLimitError,
    UpstreamError,
)
from blog_generator.models import Article
from blog_generator.pipeline import build_article, prepare_topic
from blog_generator.prompting import build_generation_prompt

logger = logging.getLogger(__name__)


def classify_backend_error(exc: Exception) -> BlogGeneratorError:
    """Map an unexpected backend exception to the error it represents."""
    message = str(exc).lower()
    if "api key" in message or "api_key" in message:
        return AuthError("Invalid API key configuration")
    if "quota" in message:
        return RateLimitError("API quota exceeded. Please try again later.")
    return UpstreamError("Failed to generate blog post. Please try again.")


class ArticleGenerator:
    """Generates blog articles from a user topic."""

    def __init__(self, backend: TextBackend):
        self.backend = backend

    @property
    def backend_name(self) -> str:
        return getattr(self.backend, "name", type(self.backend).__name__)

    def generate(self, topic: Any) -> Article:
        """Validate `topic`, call the backend once and wrap the reply.

        Raises `ValidationError`, `UpstreamError`, `AuthError` or
        `RateLimitError`; no article is produced on failure.
        """
        prepared = prepare_topic(topic)
        prompt = build_generation_prompt(prepared)

        logger.info("Generating article for topic %r via %s", prepared.topic, self.backend_name)
        try:
            content = self.backend.generate_text(prompt)
        except BlogGeneratorError:
            raise
        except Exception as exc:
            logger.error("Text backend failed: %s", exc, exc_info=True)
            raise classify_backend_error(exc) from exc

        article = build_article(content, prepared.clean_topic)
        logger.info("Generated article %s (%d chars)", article.id, len(article.content))
        return article


def get_generator(settings: Settings, backend: Optional[TextBackend] = None) -> ArticleGenerator:
    """Build a generator around the configured (or given) backend."""
    return ArticleGenerator(backend or build_backend(settings))
