"""
Day, ISO-week and month boundaries and their canonical digest identifiers.

Identifiers:
- daily:   ``YY-MM-DD``  (26-02-05)
- weekly:  ``YY-W``      ISO week-year and unpadded ISO week number (26-6)
- monthly: ``YY-MM``     (26-02)

Boundaries are computed in the caller's time zone and are inclusive at both
ends; ``end`` is the last microsecond of the period. A ``tz`` of None means
the host's local zone, with the UTC offset looked up separately for each
boundary so that periods spanning a DST change keep local midnights.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from .models import PeriodKind
from .utils import ensure_aware

_ONE_TICK = timedelta(microseconds=1)


@dataclass(frozen=True)
class Window:
    """A digest period."""
    kind: PeriodKind
    start: datetime
    end: datetime
    id: str
    title: str
    date_range: str

    def contains(self, moment: datetime | None) -> bool:
        """Inclusive membership test; a missing timestamp never matches."""
        if moment is None:
            return False
        return self.start <= moment <= self.end


def _two_digit_year(year: int) -> str:
    return f"{year % 100:02d}"


def _midnight(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def _local_date(now: datetime, tz: tzinfo | None) -> date:
    """Calendar date of ``now`` in ``tz``; naive ``now`` is read as UTC."""
    return ensure_aware(now).astimezone(tz).date()


def _short(day: date) -> str:
    return f"{day:%b} {day.day}"


def _span_label(first: date, last: date) -> str:
    return f"{_short(first)} – {_short(last)}, {last.year}"


def _add_months(day: date, months: int) -> date:
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def day_window(day: date, tz: tzinfo | None = None) -> Window:
    start = _midnight(day, tz)
    return Window(
        kind=PeriodKind.DAILY,
        start=start,
        end=_midnight(day + timedelta(days=1), tz) - _ONE_TICK,
        id=f"{_two_digit_year(day.year)}-{day:%m-%d}",
        title=f"{day:%A}, {_short(day)}",
        date_range=f"{day:%B} {day.day}, {day.year}",
    )


def week_window(day: date, tz: tzinfo | None = None) -> Window:
    """The ISO-8601 week (Monday to Sunday) containing ``day``."""
    iso_year, iso_week, _ = day.isocalendar()
    monday = date.fromisocalendar(iso_year, iso_week, 1)
    sunday = monday + timedelta(days=6)
    return Window(
        kind=PeriodKind.WEEKLY,
        start=_midnight(monday, tz),
        end=_midnight(sunday + timedelta(days=1), tz) - _ONE_TICK,
        id=f"{_two_digit_year(iso_year)}-{iso_week}",
        title=f"Week {iso_week}",
        date_range=_span_label(monday, sunday),
    )


def month_window(day: date, tz: tzinfo | None = None) -> Window:
    first = day.replace(day=1)
    next_first = _add_months(first, 1)
    last = next_first - timedelta(days=1)
    return Window(
        kind=PeriodKind.MONTHLY,
        start=_midnight(first, tz),
        end=_midnight(next_first, tz) - _ONE_TICK,
        id=f"{_two_digit_year(first.year)}-{first:%m}",
        title=f"{first:%B} {first.year}",
        date_range=_span_label(first, last),
    )


_BUILDERS = {
    PeriodKind.DAILY: day_window,
    PeriodKind.WEEKLY: week_window,
    PeriodKind.MONTHLY: month_window,
}


def window_for(kind: PeriodKind, day: date, tz: tzinfo | None = None) -> Window:
    """Window of the given kind containing ``day``."""
    return _BUILDERS[PeriodKind(kind)](day, tz)


def target_window(kind: PeriodKind, now: datetime, tz: tzinfo | None = None) -> Window:
    """The period a scheduled run should publish.

    Daily runs cover today; weekly and monthly runs cover the most recently
    completed week or month.
    """
    kind = PeriodKind(kind)
    today = _local_date(now, tz)
    if kind is PeriodKind.DAILY:
        return day_window(today, tz)
    if kind is PeriodKind.WEEKLY:
        return week_window(today - timedelta(weeks=1), tz)
    return month_window(_add_months(today, -1), tz)


def trailing_windows(
    kind: PeriodKind,
    now: datetime,
    count: int,
    tz: tzinfo | None = None,
) -> Iterator[Window]:
    """The current period and the ``count - 1`` before it, newest first."""
    kind = PeriodKind(kind)
    today = _local_date(now, tz)
    for i in range(count):
        if kind is PeriodKind.DAILY:
            yield day_window(today - timedelta(days=i), tz)
        elif kind is PeriodKind.WEEKLY:
            yield week_window(today - timedelta(weeks=i), tz)
        else:
            yield month_window(_add_months(today, -i), tz)


def backfill_windows(
    now: datetime,
    days: int = 7,
    weeks: int = 4,
    months: int = 2,
    tz: tzinfo | None = None,
) -> list[Window]:
    """Windows regenerated by a backfill run: dailies, then weeklies, then monthlies."""
    return [
        *trailing_windows(PeriodKind.DAILY, now, days, tz),
        *trailing_windows(PeriodKind.WEEKLY, now, weeks, tz),
        *trailing_windows(PeriodKind.MONTHLY, now, months, tz),
    ]
