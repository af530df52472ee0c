"""
Keyword-based "big tech" relevance scoring.

Score composition for one article:
- company mentioned anywhere in title/description: +2 each
- high-impact keyword: +3 each
- relevant topic: +1 each
- high-priority source: +1
- company mentioned in the title: +2 each, on top of the first +2

Titles matching an exclusion pattern score 0 regardless of content.
Matching is plain lowercase substring search, so short terms can hit inside
longer words.
"""

from dataclasses import dataclass, field

from ..logging import get_logger
from ..models import Article
from .lexicon import Lexicon

logger = get_logger(__name__)

DESCRIPTION_SCAN_CHARS = 500
MAX_REASONS = 5

COMPANY_WEIGHT = 2
HIGH_IMPACT_WEIGHT = 3
TOPIC_WEIGHT = 1
PRIORITY_BONUS = 1
TITLE_COMPANY_BONUS = 2

EXCLUDED_REASON = "excluded"


@dataclass(frozen=True)
class RelevanceResult:
    """Relevance score and the terms that produced it."""
    score: int
    reasons: list[str] = field(default_factory=list)

    @property
    def excluded(self) -> bool:
        return self.reasons == [EXCLUDED_REASON]


class RelevanceScorer:
    """Scores articles against a Lexicon."""

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def score(self, article: Article) -> RelevanceResult:
        """Compute relevance score and matched-keyword reasons."""
        if self.lexicon.is_excluded(article.title):
            return RelevanceResult(score=0, reasons=[EXCLUDED_REASON])

        title = article.title.lower()
        haystack = f"{title} {article.description[:DESCRIPTION_SCAN_CHARS].lower()}"

        score = 0
        reasons: list[str] = []

        for terms, weight in (
            (self.lexicon.companies, COMPANY_WEIGHT),
            (self.lexicon.high_impact_keywords, HIGH_IMPACT_WEIGHT),
            (self.lexicon.relevant_topics, TOPIC_WEIGHT),
        ):
            for term in terms:
                if term in haystack:
                    score += weight
                    if term not in reasons:
                        reasons.append(term)

        if article.priority == 1:
            score += PRIORITY_BONUS

        # Title mentions count twice: once above, once here.
        for company in self.lexicon.companies:
            if company in title:
                score += TITLE_COMPANY_BONUS

        return RelevanceResult(score=score, reasons=reasons[:MAX_REASONS])
