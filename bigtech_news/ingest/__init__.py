"""Feed ingestion."""

from .sources import FeedFetcher, fetch_articles, parse_feed

__all__ = ['FeedFetcher', 'fetch_articles', 'parse_feed']
