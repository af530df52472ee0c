"""
Digest assembly: window filter, score, threshold, rank, dedupe, bucket.
"""

from collections.abc import Callable, Iterable
from datetime import datetime

from .logging import get_logger, log_processing_stage
from .models import Article, Digest, ScoredArticle
from .processing.categorize import Categorizer
from .processing.dedupe import deduplicate_articles
from .processing.lexicon import Lexicon
from .processing.scoring import RelevanceScorer
from .utils import ensure_aware, utc_now
from .windows import Window

logger = get_logger(__name__)

MIN_RELEVANCE_SCORE = 3
MAX_HIGHLIGHTS = 10


class DigestAssembler:
    """Builds Digest records from a flat article list.

    Assembly is a pure function of the article list, the window and the
    lexicon, except for ``generated_at`` which comes from ``clock``.
    """

    def __init__(
        self,
        lexicon: Lexicon,
        min_relevance_score: int = MIN_RELEVANCE_SCORE,
        max_highlights: int = MAX_HIGHLIGHTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.scorer = RelevanceScorer(lexicon)
        self.categorizer = Categorizer(lexicon)
        self.min_relevance_score = min_relevance_score
        self.max_highlights = max_highlights
        self.clock = clock

    def annotate(self, article: Article) -> ScoredArticle:
        """Attach relevance score, reasons and category to an article."""
        result = self.scorer.score(article)
        return ScoredArticle(
            **article.model_dump(include=set(Article.model_fields)),
            relevance_score=result.score,
            matched_keywords=result.reasons,
            category=self.categorizer.categorize(article),
        )

    def rank(self, articles: Iterable[Article]) -> list[ScoredArticle]:
        """Scored, thresholded, score-sorted and deduplicated articles."""
        scored = [self.annotate(article) for article in articles]
        relevant = [a for a in scored if a.relevance_score >= self.min_relevance_score]
        # sorted() is stable: equal scores keep fetch order.
        relevant = sorted(relevant, key=lambda a: a.relevance_score, reverse=True)
        unique = deduplicate_articles(relevant)

        logger.debug(**log_processing_stage(
            stage="rank",
            input_count=len(scored),
            output_count=len(unique),
            below_threshold=len(scored) - len(relevant),
        ))
        return unique

    def assemble(self, articles: Iterable[Article], window: Window) -> Digest:
        """Build the digest for one window."""
        articles = list(articles)
        in_window = [
            article for article in articles
            if article.published is not None and window.contains(ensure_aware(article.published))
        ]
        ranked = self.rank(in_window)

        by_category: dict[str, list[ScoredArticle]] = {}
        for article in ranked:
            if article.category:
                by_category.setdefault(article.category, []).append(article)

        digest = Digest(
            id=window.id,
            type=window.kind,
            title=window.title,
            date_range=window.date_range,
            generated_at=self.clock(),
            start=window.start,
            end=window.end,
            highlights=ranked[:self.max_highlights],
            by_category=by_category,
            total_articles=len(ranked),
        )

        logger.info(**log_processing_stage(
            stage=f"assemble_{window.kind.value}",
            input_count=len(articles),
            output_count=digest.total_articles,
            digest_id=digest.id,
            in_window=len(in_window),
            categories=len(by_category),
        ))
        return digest
