"""Best-fit category assignment by keyword hit count."""

from ..models import Article
from .lexicon import Lexicon


class Categorizer:
    """Assigns at most one category per article.

    The category with the most keyword hits wins. Ties go to the category
    listed first in the lexicon, and zero hits means no category.
    """

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def categorize(self, article: Article) -> str | None:
        text = f"{article.title} {article.description}".lower()

        best_key: str | None = None
        best_hits = 0
        for category in self.lexicon.categories:
            hits = sum(1 for keyword in category.keywords if keyword in text)
            if hits > best_hits:
                best_key, best_hits = category.key, hits

        return best_key
