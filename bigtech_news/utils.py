"""Utility functions for the Big Tech News digest builder."""

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from pathlib import Path

from .logging import get_logger

logger = get_logger(__name__)

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%d %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
]


def parse_date_string(date_str: str | None) -> datetime | None:
    """Parse the date formats commonly found in RSS and Atom feeds.

    Args:
        date_str: Date string to parse

    Returns:
        Timezone-aware datetime, or None if the string cannot be parsed
    """
    if not date_str:
        return None

    date_str = date_str.strip()

    # RFC 2822, e.g. "Thu, 17 Jul 2025 23:17:14 GMT"
    try:
        return ensure_aware(parsedate_to_datetime(date_str))
    except (ValueError, TypeError, IndexError):
        pass

    try:
        return ensure_aware(datetime.fromisoformat(date_str.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return ensure_aware(datetime.strptime(date_str, fmt))
        except ValueError:
            continue

    logger.warning("Failed to parse date string", date_string=date_str)
    return None


def ensure_aware(dt: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def utc_now() -> datetime:
    """Current time in UTC, without microseconds."""
    return datetime.now(UTC).replace(microsecond=0)


def ensure_directory(path: str | Path, mode: int = 0o755) -> Path:
    """Ensure directory exists.

    Args:
        path: Directory path
        mode: Permissions used when the directory is created

    Returns:
        Path object
    """
    path_obj = Path(path)
    path_obj.mkdir(parents=True, exist_ok=True, mode=mode)
    return path_obj


def truncate_text(text: str, max_length: int, suffix: str = "…") -> str:
    """Truncate text to maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length, including the suffix
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)].rstrip() + suffix
