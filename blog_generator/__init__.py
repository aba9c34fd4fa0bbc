"""Blog generation service: topic prompting, article storage and display formatting."""

__version__ = "1.0.0"

from .generator import ArticleGenerator
from .models import Article, ArticleQuery
from .pipeline import prepare_topic
from .prompting import build_generation_prompt
from .store import InMemoryArticleStore, JsonSlotArticleStore
from .structurer import structure_content
from .summarizer import summarize

__all__ = [
    "Article",
    "ArticleGenerator",
    "ArticleQuery",
    "InMemoryArticleStore",
    "JsonSlotArticleStore",
    "build_generation_prompt",
    "prepare_topic",
    "structure_content",
    "summarize",
]
