"""Big Tech News: relevance-scored daily, weekly and monthly tech news digests."""

__version__ = "0.1.0"
