"""Configuration management for the Big Tech News digest builder."""

import re
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, HttpUrl, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent
DEFAULT_LEXICON_PATH = PACKAGE_DIR / "lexicon.yaml"
DEFAULT_SOURCES_PATH = PACKAGE_DIR / "sources.yaml"


class FeedSource(BaseModel):
    """RSS feed source configuration."""
    key: str
    name: str
    rss: HttpUrl
    categories: list[str] = Field(default_factory=list)
    priority: int = Field(2, ge=1, le=3, description="1 = high quality source")


class CategoryConfig(BaseModel):
    """One digest category and the keywords that select it."""
    key: str
    name: str
    icon: str = "📰"
    keywords: list[str] = Field(default_factory=list)


class LexiconConfig(BaseModel):
    """Raw keyword tables as read from lexicon.yaml."""
    companies: list[str] = Field(default_factory=list)
    high_impact_keywords: list[str] = Field(default_factory=list)
    relevant_topics: list[str] = Field(default_factory=list)
    excluded_patterns: list[str] = Field(default_factory=list)
    categories: list[CategoryConfig] = Field(default_factory=list)

    @field_validator("excluded_patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """Reject exclusion patterns that are not valid regular expressions."""
        for pattern in v:
            try:
                re.compile(pattern, re.IGNORECASE)
            except re.error as e:
                raise ValueError(f"Invalid exclusion pattern {pattern!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_category_keys(self) -> "LexiconConfig":
        """Category keys must be unique, they name the digest buckets."""
        seen: set[str] = set()
        for category in self.categories:
            if category.key in seen:
                raise ValueError(f"Duplicate category key: {category.key}")
            seen.add(category.key)
        return self


class Settings(BaseSettings):
    """Main application settings."""

    # ── Storage ────────────────────────────────────────────────────────────
    data_dir: Path = Field(Path("./data"), description="Digest JSON store")
    public_dir: Path = Field(Path("./public"), description="Rendered static site")

    # ── Digest Assembly ────────────────────────────────────────────────────
    min_relevance_score: int = Field(3, description="Minimum score to enter a digest")
    max_highlights: int = Field(10, description="Highlights kept per digest")
    timezone: str | None = Field(
        None, description="IANA zone for day/week/month boundaries (host local zone if unset)"
    )

    # ── Backfill ───────────────────────────────────────────────────────────
    backfill_days: int = Field(7, description="Daily digests produced by backfill")
    backfill_weeks: int = Field(4, description="Weekly digests produced by backfill")
    backfill_months: int = Field(2, description="Monthly digests produced by backfill")

    # ── Lexicon & Sources ──────────────────────────────────────────────────
    lexicon_path: Path | None = Field(None, description="Override for the packaged lexicon.yaml")
    sources_path: Path | None = Field(None, description="Override for the packaged sources.yaml")

    # ── Ingestion ──────────────────────────────────────────────────────────
    fetch_timeout_seconds: float = Field(15.0, description="Per-feed request timeout")
    global_parallel: int = Field(10, description="Concurrent feed requests")
    user_agent: str = Field(
        "BigTechNews/1.0 (News Aggregator)",
        description="User agent for feed requests"
    )

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = Field("INFO", description="Log level")
    json_logging: bool = Field(False, description="Enable JSON logging")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("min_relevance_score")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        """Scores are never negative, so neither is the threshold."""
        if v < 0:
            raise ValueError("Relevance threshold must be zero or greater")
        return v

    @field_validator(
        "max_highlights", "backfill_days", "backfill_weeks", "backfill_months", "global_parallel"
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts are positive."""
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Validate the time zone name against the IANA database."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v}") from e
        return v

    @property
    def tzinfo(self) -> tzinfo | None:
        """Time zone used for period boundaries, None for the host local zone."""
        if self.timezone:
            return ZoneInfo(self.timezone)
        return None

    def now(self) -> datetime:
        """Current time in the configured zone."""
        return datetime.now(UTC).astimezone(self.tzinfo)


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Invalid {path.name}: top-level structure must be a mapping")
    return data


def load_lexicon_config(path: str | Path | None = None) -> LexiconConfig:
    """Load keyword tables from a YAML file (packaged defaults if None)."""
    return LexiconConfig(**_read_yaml(Path(path) if path else DEFAULT_LEXICON_PATH))


def load_sources(path: str | Path | None = None) -> list[FeedSource]:
    """Load feed sources from a YAML file, keeping file order."""
    data = _read_yaml(Path(path) if path else DEFAULT_SOURCES_PATH)
    raw_sources = data.get("sources") or {}
    if not isinstance(raw_sources, dict):
        raise ValueError("Invalid sources file: 'sources' must be a mapping")

    return [
        FeedSource(key=str(key), **source)
        for key, source in raw_sources.items()
    ]


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings (created on first use)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
