"""Tests for relevance scoring and categorization."""

import pytest

from bigtech_news.models import Article
from bigtech_news.processing.categorize import Categorizer
from bigtech_news.processing.scoring import (
    EXCLUDED_REASON,
    MAX_REASONS,
    RelevanceScorer,
)


def _article(title: str, description: str = "", priority: int = 2) -> Article:
    return Article(title=title, description=description, priority=priority)


class TestRelevanceScorer:
    """Test keyword relevance scoring."""

    def test_headline_with_company_and_launch(self, lexicon, sample_article):
        """Company +2, two high-impact +6, topic +1, priority +1, title company +2."""
        result = RelevanceScorer(lexicon).score(sample_article)

        assert result.score == 12
        assert result.reasons == ["openai", "gpt-5", "stock"]
        assert not result.excluded

    def test_excluded_title_scores_zero(self, lexicon):
        article = _article(
            "Black Friday deals on Apple iPhone",
            "Apple Google Microsoft acquisition lawsuit billion",
            priority=1,
        )
        result = RelevanceScorer(lexicon).score(article)

        assert result.score == 0
        assert result.reasons == [EXCLUDED_REASON]
        assert result.excluded

    @pytest.mark.parametrize("title", [
        "Best Black Friday deals on laptops",
        "iPhone 17 review: Apple's best phone yet",
        "How to set up Google Gemini on Android",
        "You won't believe what Tesla just did",
    ])
    def test_packaged_exclusions(self, lexicon, title):
        assert RelevanceScorer(lexicon).score(_article(title, priority=1)).score == 0

    def test_exclusion_checks_title_only(self, small_lexicon):
        article = _article("Google acquires chip maker", "Great deals inside")
        result = RelevanceScorer(small_lexicon).score(article)

        assert result.score > 0
        assert not result.excluded

    def test_exact_arithmetic(self, small_lexicon, sample_articles):
        scorer = RelevanceScorer(small_lexicon)

        first = scorer.score(sample_articles[0])
        assert first.score == 2 + 3 + 1 + 1 + 1 + 2
        assert first.reasons == ["google", "acquires", "chip", "cloud"]

        second = scorer.score(sample_articles[1])
        assert second.score == 2 + 3 + 1 + 2
        assert second.reasons == ["apple", "lawsuit", "chip"]

    def test_company_in_title_counts_twice(self, small_lexicon):
        scorer = RelevanceScorer(small_lexicon)

        in_title = scorer.score(_article("Apple news", "nothing else"))
        in_description = scorer.score(_article("Some news", "about Apple"))

        assert in_title.score == 4
        assert in_description.score == 2

    def test_priority_bonus(self, small_lexicon):
        scorer = RelevanceScorer(small_lexicon)

        high = scorer.score(_article("Cloud outage", priority=1))
        normal = scorer.score(_article("Cloud outage", priority=2))

        assert high.score == normal.score + 1

    def test_priority_alone_without_matches(self, small_lexicon):
        result = RelevanceScorer(small_lexicon).score(_article("Weather today", priority=1))

        assert result.score == 1
        assert result.reasons == []

    def test_reasons_capped(self, lexicon):
        article = _article(
            "Google, Microsoft, Apple, Amazon and Nvidia face antitrust lawsuit",
            "Billion dollar merger talk",
        )
        result = RelevanceScorer(lexicon).score(article)

        assert len(result.reasons) == MAX_REASONS
        assert result.reasons[:5] == ["google", "microsoft", "apple", "amazon", "nvidia"]
        assert result.score > 20

    def test_description_scan_limit(self, small_lexicon):
        padding = "x" * 600
        result = RelevanceScorer(small_lexicon).score(_article("Plain", padding + " Google"))

        assert result.score == 0

    def test_case_insensitive(self, small_lexicon):
        scorer = RelevanceScorer(small_lexicon)

        assert scorer.score(_article("GOOGLE")).score == scorer.score(_article("google")).score

    def test_score_never_negative(self, lexicon, sample_articles):
        scorer = RelevanceScorer(lexicon)
        for article in sample_articles:
            assert scorer.score(article).score >= 0


class TestCategorizer:
    """Test best-fit category assignment."""

    def test_single_best_category(self, small_lexicon):
        article = _article("Lawsuit heads to court", "Cloud contract dispute")

        assert Categorizer(small_lexicon).categorize(article) == "legal"

    def test_tie_goes_to_first_listed(self, small_lexicon, sample_articles):
        # hardware (chip, iphone) and legal (lawsuit, court) both hit twice
        assert Categorizer(small_lexicon).categorize(sample_articles[1]) == "hardware"

    def test_no_hits_means_no_category(self, small_lexicon, sample_articles):
        assert Categorizer(small_lexicon).categorize(sample_articles[3]) is None

    def test_packaged_categories(self, lexicon, sample_article):
        assert Categorizer(lexicon).categorize(sample_article) == "ai"

    @pytest.mark.parametrize("title,expected", [
        ("Nvidia GPU shortage hits data center builds", "chips_cloud"),
        ("SpaceX Starship launch reaches orbit", "space"),
        ("Waymo robotaxi expands to new city", "ev_autonomous"),
    ])
    def test_packaged_examples(self, lexicon, title, expected):
        assert Categorizer(lexicon).categorize(_article(title)) == expected
