"""RSS feed fetching and parsing into Article records."""

import asyncio
import calendar
from datetime import UTC, datetime
from typing import Any

import aiohttp
import feedparser

from ..config import FeedSource, Settings, get_settings, load_sources
from ..logging import PerformanceLogger, get_logger, log_error, log_processing_stage
from ..models import Article
from ..processing.text_utils import clean_html_text, first_image_src
from ..utils import parse_date_string

logger = get_logger(__name__)


def _entry_published(entry: Any) -> datetime | None:
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            return datetime.fromtimestamp(calendar.timegm(parsed), tz=UTC)
    return parse_date_string(entry.get("published") or entry.get("updated"))


def _entry_description(entry: Any) -> str:
    if entry.get("summary"):
        return entry["summary"]
    for content in entry.get("content") or []:
        if content.get("value"):
            return content["value"]
    return ""


def _entry_image(entry: Any) -> str | None:
    for enclosure in entry.get("enclosures") or []:
        if (enclosure.get("type") or "").startswith("image/") and enclosure.get("href"):
            return enclosure["href"]

    for key in ("media_content", "media_thumbnail"):
        for media in entry.get(key) or []:
            if media.get("url"):
                return media["url"]

    html = entry.get("summary") or ""
    for content in entry.get("content") or []:
        html += content.get("value") or ""
    return first_image_src(html)


def parse_feed(source: FeedSource, payload: str | bytes) -> list[Article]:
    """Parse an RSS/Atom document into articles.

    Descriptions are reduced to plain text so markup and link targets never
    reach the scorer. Entries without a usable date keep ``published=None``
    and so fall outside every digest window.
    """
    feed = feedparser.parse(payload)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Unparseable feed: {feed.get('bozo_exception')}")

    articles = []
    for entry in feed.entries:
        articles.append(Article(
            title=(entry.get("title") or "").strip(),
            link=entry.get("link") or "",
            description=clean_html_text(_entry_description(entry)),
            published=_entry_published(entry),
            source=source.name,
            source_key=source.key,
            priority=source.priority,
            image=_entry_image(entry),
        ))
    return articles


class FeedFetcher:
    """Fetches every configured feed concurrently."""

    def __init__(self, sources: list[FeedSource], settings: Settings | None = None):
        self.sources = sources
        self.settings = settings or get_settings()

    async def _fetch_text(self, session: aiohttp.ClientSession, url: str) -> bytes:
        async with session.get(url) as response:
            response.raise_for_status()
            return await response.read()

    async def fetch_source(
        self,
        session: aiohttp.ClientSession,
        source: FeedSource,
        semaphore: asyncio.Semaphore,
    ) -> list[Article]:
        """Fetch one feed; failures are logged and yield no articles."""
        async with semaphore:
            try:
                payload = await self._fetch_text(session, str(source.rss))
                articles = parse_feed(source, payload)
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                logger.warning(**log_error(e, context="feed fetch failed", source=source.name))
                return []

        logger.info(**log_processing_stage(
            stage=f"fetch_{source.key}",
            input_count=1,
            output_count=len(articles),
        ))
        return articles

    async def fetch_all(self) -> list[Article]:
        """Articles from all sources, flattened in registry order."""
        if not self.sources:
            logger.warning("No sources configured")
            return []

        semaphore = asyncio.Semaphore(self.settings.global_parallel)
        timeout = aiohttp.ClientTimeout(total=self.settings.fetch_timeout_seconds)

        with PerformanceLogger("fetch_all_sources", logger):
            async with aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": self.settings.user_agent},
            ) as session:
                results = await asyncio.gather(*(
                    self.fetch_source(session, source, semaphore)
                    for source in self.sources
                ))

        all_articles = [article for articles in results for article in articles]
        logger.info(**log_processing_stage(
            stage="fetch_all_sources",
            input_count=len(self.sources),
            output_count=len(all_articles),
        ))
        return all_articles


async def fetch_articles(settings: Settings | None = None) -> list[Article]:
    """Fetch all articles from the configured source registry."""
    settings = settings or get_settings()
    fetcher = FeedFetcher(load_sources(settings.sources_path), settings)
    return await fetcher.fetch_all()
