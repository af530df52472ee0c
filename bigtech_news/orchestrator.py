"""Command-line entry point: scrape feeds into digests and build the site."""

import asyncio
import sys
from datetime import datetime

import click
from rich import box
from rich.console import Console
from rich.table import Table

from .config import Settings, get_settings
from .digest import DigestAssembler
from .ingest.sources import fetch_articles
from .logging import PerformanceLogger, get_logger, setup_logging
from .models import Article, Digest, PeriodKind
from .processing.lexicon import load_lexicon
from .render import SiteRenderer
from .storage import DigestStore
from .windows import Window, backfill_windows, target_window

logger = get_logger(__name__)
console = Console()


def plan_windows(
    mode: str,
    now: datetime,
    settings: Settings,
    weeks: int | None = None,
) -> list[Window]:
    """Windows to (re)generate for a run mode."""
    if mode == "backfill":
        return backfill_windows(
            now,
            days=settings.backfill_days,
            weeks=weeks or settings.backfill_weeks,
            months=settings.backfill_months,
            tz=settings.tzinfo,
        )
    return [target_window(PeriodKind(mode), now, settings.tzinfo)]


def run_pipeline(
    articles: list[Article],
    mode: str,
    now: datetime,
    settings: Settings,
    weeks: int | None = None,
) -> list[Digest]:
    """Assemble every digest a run mode calls for from one article list."""
    assembler = DigestAssembler(
        load_lexicon(settings.lexicon_path),
        min_relevance_score=settings.min_relevance_score,
        max_highlights=settings.max_highlights,
    )
    windows = plan_windows(mode, now, settings, weeks=weeks)
    with PerformanceLogger(f"assemble_{mode}", logger):
        return [assembler.assemble(articles, window) for window in windows]


def _show_summary(digests: list[Digest]) -> None:
    table = Table(title="Digests", box=box.SIMPLE)
    table.add_column("Type")
    table.add_column("Id")
    table.add_column("Title")
    table.add_column("Articles", justify="right")
    table.add_column("Highlights", justify="right")
    for digest in digests:
        table.add_row(
            digest.type.value,
            digest.id,
            digest.title,
            str(digest.total_articles),
            str(len(digest.highlights)),
        )
    console.print(table)


@click.group()
@click.option("--log-level", default=None, help="Log level (default from settings)")
@click.option("--json-logs/--no-json-logs", default=None, help="Emit JSON log lines")
@click.pass_context
def cli(ctx, log_level, json_logs):
    """Big Tech News - relevance-ranked tech news digests."""
    setup_logging(log_level=log_level, json_logging=json_logs)
    ctx.obj = get_settings()


@cli.command()
@click.option("--daily", "-d", "mode", flag_value="daily", default=True, help="Today's digest (default)")
@click.option("--weekly", "-w", "mode", flag_value="weekly", help="Last completed ISO week")
@click.option("--monthly", "-m", "mode", flag_value="monthly", help="Last completed month")
@click.option("--backfill", "-b", "mode", flag_value="backfill", help="Recent days, weeks and months")
@click.option("--weeks", "-n", type=click.IntRange(min=1), default=None, help="Weeks to backfill")
@click.pass_obj
def scrape(settings: Settings, mode: str, weeks: int | None):
    """Fetch all feeds and save digests for the selected period(s)."""
    try:
        articles = asyncio.run(fetch_articles(settings))
        if not articles:
            logger.error("No articles fetched")
            click.echo("❌ No articles fetched. Check your internet connection.", err=True)
            sys.exit(1)

        digests = run_pipeline(articles, mode, settings.now(), settings, weeks=weeks)

        store = DigestStore(settings.data_dir)
        for digest in digests:
            store.save(digest)
        store.write_index()
        _show_summary(digests)

    except Exception as e:
        logger.error("Scrape failed", error=str(e), exc_info=True)
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Site output directory (default from settings)",
)
@click.pass_obj
def build(settings: Settings, output: str | None):
    """Render the static site from stored digests."""
    try:
        renderer = SiteRenderer(
            DigestStore(settings.data_dir),
            load_lexicon(settings.lexicon_path),
            output or settings.public_dir,
            tz=settings.tzinfo,
        )
        pages = renderer.build(now=settings.now())
        click.echo(f"✅ Wrote {len(pages)} files to {renderer.public_dir}")

    except Exception as e:
        logger.error("Site build failed", error=str(e), exc_info=True)
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--daily", "-d", "mode", flag_value="daily", default=True)
@click.option("--weekly", "-w", "mode", flag_value="weekly")
@click.option("--monthly", "-m", "mode", flag_value="monthly")
@click.option("--backfill", "-b", "mode", flag_value="backfill")
@click.option("--weeks", "-n", type=click.IntRange(min=1), default=None)
@click.pass_context
def run(ctx, mode: str, weeks: int | None):
    """Scrape, then build the site."""
    ctx.invoke(scrape, mode=mode, weeks=weeks)
    ctx.invoke(build, output=None)


if __name__ == "__main__":
    cli()
