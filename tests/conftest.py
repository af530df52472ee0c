"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Generator

import pytest

# Set test environment
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["JSON_LOGGING"] = "false"
os.environ["TIMEZONE"] = "UTC"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def mock_env(monkeypatch, temp_dir):
    """Point storage at a temp dir and drop any cached settings."""
    from bigtech_news import config

    monkeypatch.setenv("DATA_DIR", str(temp_dir / "data"))
    monkeypatch.setenv("PUBLIC_DIR", str(temp_dir / "public"))
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setattr(config, "_settings", None)


@pytest.fixture
def lexicon():
    """The packaged keyword tables."""
    from bigtech_news.processing.lexicon import load_lexicon

    return load_lexicon()


@pytest.fixture
def small_lexicon():
    """A tiny hand-built lexicon for exact score arithmetic."""
    from bigtech_news.config import CategoryConfig, LexiconConfig
    from bigtech_news.processing.lexicon import Lexicon

    return Lexicon.from_config(LexiconConfig(
        companies=["Apple", "Google"],
        high_impact_keywords=["acquires", "lawsuit"],
        relevant_topics=["chip", "cloud"],
        excluded_patterns=[r"\bdeals?\b", r"\breview\b"],
        categories=[
            CategoryConfig(key="hardware", name="Hardware", icon="🔧", keywords=["chip", "iphone"]),
            CategoryConfig(key="cloud", name="Cloud", icon="☁️", keywords=["cloud", "server"]),
            CategoryConfig(key="legal", name="Legal", icon="⚖️", keywords=["lawsuit", "court"]),
        ],
    ))


@pytest.fixture
def feb_5_2026() -> datetime:
    """A Thursday in ISO week 6 of 2026."""
    return datetime(2026, 2, 5, 15, 30, tzinfo=UTC)


@pytest.fixture
def sample_article(feb_5_2026):
    """Sample article for testing."""
    from bigtech_news.models import Article

    return Article(
        title="OpenAI announces GPT-5, stock jumps",
        link="https://example.com/openai-gpt5",
        description="",
        published=feb_5_2026,
        source="TechCrunch",
        source_key="techcrunch",
        priority=1,
    )


@pytest.fixture
def sample_articles(feb_5_2026):
    """Sample articles list for testing."""
    from bigtech_news.models import Article

    return [
        Article(
            title="Google acquires chip startup in cloud push",
            link="https://example.com/google-chip",
            description="The deal strengthens Google Cloud.",
            published=feb_5_2026,
            source="The Verge",
            source_key="theverge",
            priority=1,
        ),
        Article(
            title="Apple faces lawsuit over iPhone chip",
            link="https://example.com/apple-lawsuit",
            description="A court filing targets Apple.",
            published=feb_5_2026,
            source="Reuters",
            source_key="reuters_tech",
            priority=2,
        ),
        Article(
            title="Best Apple deals this week",
            link="https://example.com/apple-deals",
            description="Discounts on Apple gear.",
            published=feb_5_2026,
            source="Engadget",
            source_key="engadget",
            priority=2,
        ),
        Article(
            title="Local bakery opens second store",
            link="https://example.com/bakery",
            description="Nothing to do with tech.",
            published=feb_5_2026,
            source="Engadget",
            source_key="engadget",
            priority=2,
        ),
    ]
