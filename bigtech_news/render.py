"""
Static site rendering for stored digests.

Produces ``index.html`` (latest stories, week to date, archives and a
client-side search index) plus one page per digest under
``daily/``, ``weekly/`` and ``monthly/``.
"""

import shutil
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .config import PACKAGE_DIR
from .logging import PerformanceLogger, get_logger, log_error
from .models import Digest, DigestIndex, IndexEntry, PeriodKind, ScoredArticle
from .processing.lexicon import Lexicon
from .processing.text_utils import clean_html_text, title_key
from .storage import DigestStore
from .utils import ensure_directory, truncate_text

logger = get_logger(__name__)

TEMPLATE_DIR = PACKAGE_DIR / "templates"
DEFAULT_ICON = "📰"

HERO_SECONDARY = 3
WEEK_TO_DATE_PER_DAY = 5
WEEK_TO_DATE_SHOWN = 8
TODAY_SHOWN = 8
SIDEBAR_RECENT = 5
SIDEBAR_GROUPED = 20
SIDEBAR_PER_YEAR = 8
ARCHIVE_CARDS = 12
MORE_PER_CATEGORY = 5


@dataclass(frozen=True)
class WeekItem:
    """A highlight from one of this week's daily digests."""
    article: ScoredArticle
    day: date

    @property
    def day_label(self) -> str:
        return f"{self.day:%a}"


def _format_timestamp(value: datetime, tz: tzinfo | None = None) -> str:
    value = value.astimezone(tz)
    hour = value.hour % 12 or 12
    return f"{value:%b} {value.day}, {hour}:{value:%M %p}"


def _year_of(entry: IndexEntry) -> int:
    return entry.start.year


class SiteRenderer:
    """Renders the digest store into a static site."""

    def __init__(
        self,
        store: DigestStore,
        lexicon: Lexicon,
        public_dir: str | Path,
        tz: tzinfo | None = None,
        template_dir: Path | None = None,
    ):
        self.store = store
        self.lexicon = lexicon
        self.public_dir = Path(public_dir)
        self.tz = tz
        self.template_dir = Path(template_dir or TEMPLATE_DIR)

        self.jinja_env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._register_filters()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters."""

        def plain_truncate(text: str | None, max_length: int = 180) -> str:
            return truncate_text(clean_html_text(text), max_length)

        def category_icon(article: ScoredArticle) -> str:
            category = self.lexicon.get_category(article.category) if article.category else None
            return category.icon if category else DEFAULT_ICON

        self.jinja_env.filters['plain_truncate'] = plain_truncate
        self.jinja_env.filters['category_icon'] = category_icon
        self.jinja_env.filters['timestamp'] = lambda value: _format_timestamp(value, self.tz)

    # ── Page data ──────────────────────────────────────────────────────────

    def more_sections(self, digest: Digest) -> list[dict[str, Any]]:
        """Category buckets, largest first."""
        sections = []
        for key, articles in digest.by_category.items():
            if not articles:
                continue
            category = self.lexicon.get_category(key)
            sections.append({
                "key": key,
                "name": category.name if category else key,
                "icon": category.icon if category else DEFAULT_ICON,
                "count": len(articles),
                "articles": articles[:MORE_PER_CATEGORY],
            })
        sections.sort(key=lambda section: section["count"], reverse=True)
        return sections

    def week_to_date(self, index: DigestIndex, now: datetime) -> list[WeekItem]:
        """Top highlights of this ISO week's daily digests, one copy per story."""
        today = now.date()
        monday = today - timedelta(days=today.weekday())
        items: list[WeekItem] = []
        seen: set[str] = set()

        for entry in index.daily:
            day = entry.start.date()
            if not monday <= day <= today:
                continue
            try:
                digest = self.store.load(PeriodKind.DAILY, entry.id)
            except (OSError, ValueError) as e:
                logger.warning(**log_error(e, context="week-to-date digest unreadable", digest_id=entry.id))
                continue
            for article in digest.highlights[:WEEK_TO_DATE_PER_DAY]:
                key = title_key(article.title)
                if key in seen:
                    continue
                seen.add(key)
                items.append(WeekItem(article=article, day=day))

        items.sort(key=lambda item: (item.article.relevance_score, item.day), reverse=True)
        return items

    @staticmethod
    def search_index(
        latest_daily: Digest | None,
        week_items: list[WeekItem],
    ) -> list[dict[str, Any]]:
        """Recent articles for client-side search, unique by link."""
        candidates = list(latest_daily.highlights if latest_daily else [])
        candidates.extend(item.article for item in week_items)

        entries = []
        seen: set[str] = set()
        for article in candidates:
            if article.link in seen:
                continue
            seen.add(article.link)
            entries.append({
                "title": article.title,
                "source": article.source,
                "link": article.link,
                "keywords": article.matched_keywords,
            })
        return entries

    @staticmethod
    def group_by_year(entries: list[IndexEntry]) -> list[tuple[int, list[IndexEntry]]]:
        groups: dict[int, list[IndexEntry]] = {}
        for entry in entries[:SIDEBAR_GROUPED]:
            groups.setdefault(_year_of(entry), []).append(entry)
        return [
            (year, groups[year][:SIDEBAR_PER_YEAR])
            for year in sorted(groups, reverse=True)
        ]

    # ── Rendering ──────────────────────────────────────────────────────────

    def render_digest_page(self, digest: Digest) -> str:
        template = self.jinja_env.get_template("digest.html")
        return template.render(
            digest=digest,
            type_label=digest.type.label,
            more_sections=self.more_sections(digest),
            root="../",
        )

    def render_index_page(self, index: DigestIndex, now: datetime) -> str:
        latest_daily = self._load_latest(index, PeriodKind.DAILY)
        week_items = self.week_to_date(index, now)
        highlights = latest_daily.highlights if latest_daily else []
        monday = now.date() - timedelta(days=now.weekday())

        template = self.jinja_env.get_template("index.html")
        return template.render(
            index=index,
            lead=highlights[0] if highlights else None,
            secondary=highlights[1:1 + HERO_SECONDARY],
            today_more=highlights[1 + HERO_SECONDARY:][:TODAY_SHOWN],
            week_items=week_items[:WEEK_TO_DATE_SHOWN],
            week_range=f"{monday:%b} {monday.day} – {now:%b} {now.day}",
            sidebar_recent=index.daily[:SIDEBAR_RECENT],
            sidebar_weekly=self.group_by_year(index.weekly),
            sidebar_monthly=self.group_by_year(index.monthly),
            archive_cards=ARCHIVE_CARDS,
            search_articles=self.search_index(latest_daily, week_items),
            root="",
        )

    def _load_latest(self, index: DigestIndex, kind: PeriodKind) -> Digest | None:
        entries = index.entries(kind)
        if not entries:
            return None
        try:
            return self.store.load(kind, entries[0].id)
        except (OSError, ValueError) as e:
            logger.warning(**log_error(e, context="latest digest unreadable", digest_id=entries[0].id))
            return None

    def build(self, now: datetime | None = None) -> list[Path]:
        """Write the full site and return the paths written."""
        now = now or datetime.now(UTC).astimezone(self.tz)
        index = self.store.load_index()
        written: list[Path] = []

        with PerformanceLogger("build_site", logger):
            css_dir = ensure_directory(self.public_dir / "css")
            shutil.copyfile(self.template_dir / "styles.css", css_dir / "styles.css")
            written.append(css_dir / "styles.css")

            index_path = self.public_dir / "index.html"
            index_path.write_text(self.render_index_page(index, now), encoding="utf-8")
            written.append(index_path)

            for kind in PeriodKind:
                out_dir = ensure_directory(self.public_dir / kind.value)
                for entry in index.entries(kind):
                    try:
                        digest = self.store.load(kind, entry.id)
                    except (OSError, ValueError) as e:
                        logger.error(**log_error(e, context="digest page skipped", digest_id=entry.id))
                        continue
                    page = out_dir / f"{digest.id}.html"
                    page.write_text(self.render_digest_page(digest), encoding="utf-8")
                    written.append(page)

        logger.info("Site built", pages=len(written), public_dir=str(self.public_dir))
        return written
