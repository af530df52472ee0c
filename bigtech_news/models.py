"""
Core data models for the digest pipeline.

Pydantic models are used for validation and for the JSON written to the
digest store. Field names are snake_case in Python and camelCase on disk.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PeriodKind(str, Enum):
    """Digest granularity."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Article(_Record):
    """A news article as fetched from an RSS feed."""

    title: str = Field("", description="Headline")
    link: str = Field("", description="Article URL")
    description: str = Field("", description="Summary, plain text or HTML")
    published: datetime | None = Field(None, description="Publication timestamp")
    source: str = Field("", description="Source display name")
    source_key: str = Field("", description="Source registry key")
    priority: int = Field(2, ge=1, le=3, description="Source quality, 1 = high")
    image: str | None = Field(None, description="Lead image URL")

    @field_validator("title", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return v or ""


class ScoredArticle(Article):
    """An article annotated by the scorer and categorizer."""

    relevance_score: int = Field(0, ge=0)
    matched_keywords: list[str] = Field(default_factory=list, max_length=5)
    category: str | None = None


class Digest(_Record):
    """Scored, deduplicated and categorized articles for one time window."""

    id: str
    type: PeriodKind
    title: str
    date_range: str
    generated_at: datetime
    start: datetime
    end: datetime
    highlights: list[ScoredArticle] = Field(default_factory=list)
    by_category: dict[str, list[ScoredArticle]] = Field(default_factory=dict)
    total_articles: int = 0


class IndexEntry(_Record):
    """Summary of one stored digest."""

    id: str
    title: str
    date_range: str
    total_articles: int
    highlight_count: int
    start: datetime

    @classmethod
    def from_digest(cls, digest: Digest) -> "IndexEntry":
        return cls(
            id=digest.id,
            title=digest.title,
            date_range=digest.date_range,
            total_articles=digest.total_articles,
            highlight_count=len(digest.highlights),
            start=digest.start,
        )


class DigestIndex(_Record):
    """Directory of all published digests, newest first per kind."""

    last_updated: datetime
    daily: list[IndexEntry] = Field(default_factory=list)
    weekly: list[IndexEntry] = Field(default_factory=list)
    monthly: list[IndexEntry] = Field(default_factory=list)

    def entries(self, kind: PeriodKind) -> list[IndexEntry]:
        return getattr(self, kind.value)
