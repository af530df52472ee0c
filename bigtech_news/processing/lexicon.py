"""
Immutable keyword tables for relevance scoring and categorization.

A Lexicon is built once (from the packaged lexicon.yaml or a test fixture)
and handed to the scorer and categorizer; nothing mutates it afterwards.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from ..config import LexiconConfig, load_lexicon_config


@dataclass(frozen=True)
class Category:
    """A digest bucket and the keywords that select it."""
    key: str
    name: str
    icon: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class Lexicon:
    """Read-only keyword tables.

    ``categories`` is an ordered tuple; its order is the tie-break order
    used by the categorizer.
    """
    companies: tuple[str, ...] = ()
    high_impact_keywords: tuple[str, ...] = ()
    relevant_topics: tuple[str, ...] = ()
    exclusion_patterns: tuple[re.Pattern, ...] = ()
    categories: tuple[Category, ...] = ()

    @classmethod
    def from_config(cls, config: LexiconConfig) -> "Lexicon":
        return cls(
            companies=tuple(term.lower() for term in config.companies),
            high_impact_keywords=tuple(term.lower() for term in config.high_impact_keywords),
            relevant_topics=tuple(term.lower() for term in config.relevant_topics),
            exclusion_patterns=tuple(
                re.compile(pattern, re.IGNORECASE) for pattern in config.excluded_patterns
            ),
            categories=tuple(
                Category(
                    key=category.key,
                    name=category.name,
                    icon=category.icon,
                    keywords=tuple(keyword.lower() for keyword in category.keywords),
                )
                for category in config.categories
            ),
        )

    def is_excluded(self, title: str) -> bool:
        """True if the title matches any exclusion pattern."""
        return any(pattern.search(title) for pattern in self.exclusion_patterns)

    def get_category(self, key: str) -> Category | None:
        for category in self.categories:
            if category.key == key:
                return category
        return None


def load_lexicon(path: str | Path | None = None) -> Lexicon:
    """Load a lexicon from YAML (packaged defaults if path is None)."""
    return Lexicon.from_config(load_lexicon_config(path))
