"""Shared fixtures for the blog generator tests."""

import pytest

from blog_generator.config import Settings
from blog_generator.pipeline import build_article
from blog_generator.store import InMemoryArticleStore
from tests.fakes import FakeBackend

_ENV_KEYS = (
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GENERATOR_BACKEND",
    "MODEL_PATH",
    "STORE_BACKEND",
    "STORE_PATH",
    "STORE_KEY",
    "LOG_FILE",
    "DEBUG",
)


@pytest.fixture
def settings(monkeypatch):
    """Settings built from defaults only."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return Settings()


@pytest.fixture
def make_article():
    """Factory building articles with an explicit creation time."""

    def _make(topic, content="Body text.", created_at="2024-01-01T00:00:00.000Z"):
        return build_article(content, topic, created_at=created_at)

    return _make


@pytest.fixture
def store():
    return InMemoryArticleStore()


@pytest.fixture
def fake_backend():
    return FakeBackend()
