"""Tests for digest assembly."""

from datetime import UTC, datetime, timedelta

import pytest

from bigtech_news.digest import DigestAssembler
from bigtech_news.models import Article, PeriodKind
from bigtech_news.windows import day_window, week_window

GENERATED_AT = datetime(2026, 2, 5, 23, 0, tzinfo=UTC)


@pytest.fixture
def assembler(small_lexicon):
    return DigestAssembler(small_lexicon, clock=lambda: GENERATED_AT)


@pytest.fixture
def window(feb_5_2026):
    return day_window(feb_5_2026.date(), UTC)


def test_assemble_basic(assembler, window, sample_articles):
    digest = assembler.assemble(sample_articles, window)

    assert digest.id == "26-02-05"
    assert digest.type is PeriodKind.DAILY
    assert digest.generated_at == GENERATED_AT
    assert digest.total_articles == 2
    assert [a.link for a in digest.highlights] == [
        "https://example.com/google-chip",
        "https://example.com/apple-lawsuit",
    ]
    assert digest.highlights[0].relevance_score == 10
    assert digest.highlights[0].matched_keywords == ["google", "acquires", "chip", "cloud"]
    assert digest.highlights[0].category == "hardware"


def test_highlights_sorted_and_thresholded(assembler, window, sample_articles):
    digest = assembler.assemble(sample_articles, window)

    scores = [a.relevance_score for a in digest.highlights]
    assert scores == sorted(scores, reverse=True)
    assert all(score >= assembler.min_relevance_score for score in scores)


def test_by_category_partitions_ranked_articles(assembler, window, sample_articles):
    digest = assembler.assemble(sample_articles, window)

    for key, articles in digest.by_category.items():
        assert articles
        assert all(article.category == key for article in articles)
    bucketed = sum(len(articles) for articles in digest.by_category.values())
    assert bucketed <= digest.total_articles
    assert list(digest.by_category) == ["hardware"]


def test_uncategorized_articles_only_in_highlights(small_lexicon, window, feb_5_2026):
    assembler = DigestAssembler(small_lexicon, min_relevance_score=1)
    article = Article(title="Google shares climb", published=feb_5_2026)

    digest = assembler.assemble([article], window)

    assert digest.total_articles == 1
    assert digest.highlights[0].category is None
    assert digest.by_category == {}


def test_max_highlights(small_lexicon, window, feb_5_2026):
    assembler = DigestAssembler(small_lexicon, max_highlights=3)
    articles = [
        Article(title=f"Google acquires startup number{i:02d} {'word' * (i + 1)}", published=feb_5_2026)
        for i in range(6)
    ]

    digest = assembler.assemble(articles, window)

    assert digest.total_articles == 6
    assert len(digest.highlights) == 3


def test_equal_scores_keep_input_order(small_lexicon, window, feb_5_2026):
    assembler = DigestAssembler(small_lexicon)
    articles = [
        Article(title="Apple lawsuit filed in Texas", link="a", published=feb_5_2026),
        Article(title="Google lawsuit filed in Ohio", link="b", published=feb_5_2026),
    ]

    digest = assembler.assemble(articles, window)

    assert [a.link for a in digest.highlights] == ["a", "b"]


def test_duplicates_keep_highest_score(small_lexicon, window, feb_5_2026):
    assembler = DigestAssembler(small_lexicon)
    articles = [
        Article(title="Apple lawsuit ruling arrives", link="low", published=feb_5_2026),
        Article(title="Ruling arrives: Apple lawsuit", link="high", priority=1, published=feb_5_2026),
    ]

    digest = assembler.assemble(articles, window)

    assert [a.link for a in digest.highlights] == ["high"]
    assert digest.total_articles == 1


def test_articles_outside_window_ignored(assembler, window, sample_articles):
    yesterday = sample_articles[0].model_copy(
        update={"published": window.start - timedelta(seconds=1)}
    )
    undated = sample_articles[1].model_copy(update={"published": None})

    digest = assembler.assemble([yesterday, undated], window)

    assert digest.total_articles == 0
    assert digest.highlights == []
    assert digest.by_category == {}


def test_naive_timestamps_treated_as_utc(assembler, window, sample_articles):
    naive = sample_articles[0].model_copy(update={"published": datetime(2026, 2, 5, 12, 0)})

    digest = assembler.assemble([naive], window)

    assert digest.total_articles == 1


def test_empty_input(assembler, window):
    digest = assembler.assemble([], window)

    assert digest.total_articles == 0
    assert digest.highlights == []


def test_same_article_in_daily_and_weekly(assembler, feb_5_2026, sample_articles):
    daily = assembler.assemble(sample_articles, day_window(feb_5_2026.date(), UTC))
    weekly = assembler.assemble(sample_articles, week_window(feb_5_2026.date(), UTC))

    assert daily.total_articles == weekly.total_articles == 2
    assert weekly.id == "26-6"


def test_assembly_is_deterministic(assembler, window, sample_articles):
    first = assembler.assemble(sample_articles, window)
    second = assembler.assemble(sample_articles, window)

    assert first == second
