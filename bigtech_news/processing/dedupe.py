"""
Near-duplicate removal for articles covering the same story.

Two titles are treated as the same story when they share a signature: the
first five (alphabetically) of their lowercase alphanumeric words longer
than three characters. The signature ignores word order, punctuation and
short connector words. Short generic titles can collide.
"""

import re
from collections.abc import Iterable
from typing import TypeVar

from ..logging import get_logger, log_processing_stage
from ..models import Article

logger = get_logger(__name__)

A = TypeVar("A", bound=Article)

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
MIN_WORD_LENGTH = 4
SIGNATURE_WORDS = 5
SIGNATURE_SEPARATOR = "|"


def title_signature(title: str) -> str:
    """Order- and punctuation-insensitive title fingerprint."""
    words = _NON_ALNUM.sub("", title.lower()).split()
    significant = sorted(word for word in words if len(word) >= MIN_WORD_LENGTH)
    return SIGNATURE_SEPARATOR.join(significant[:SIGNATURE_WORDS])


def deduplicate_articles(articles: Iterable[A]) -> list[A]:
    """Keep the first article for each title signature.

    Callers sort by descending relevance first so that the surviving copy
    of a story is its best-scoring one. Survivors keep their input order.
    """
    seen: set[str] = set()
    unique: list[A] = []
    total = 0

    for article in articles:
        total += 1
        signature = title_signature(article.title)
        if signature in seen:
            continue
        seen.add(signature)
        unique.append(article)

    logger.debug(**log_processing_stage(
        stage="deduplicate",
        input_count=total,
        output_count=len(unique),
    ))
    return unique
