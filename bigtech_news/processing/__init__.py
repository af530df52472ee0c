"""Relevance scoring, categorization and deduplication."""

from .categorize import Categorizer
from .dedupe import deduplicate_articles, title_signature
from .lexicon import Category, Lexicon, load_lexicon
from .scoring import RelevanceResult, RelevanceScorer
from .text_utils import clean_html_text, first_image_src, title_key

__all__ = [
    'Categorizer',
    'Category',
    'Lexicon',
    'load_lexicon',
    'RelevanceResult',
    'RelevanceScorer',
    'deduplicate_articles',
    'title_signature',
    'clean_html_text',
    'first_image_src',
    'title_key',
]
