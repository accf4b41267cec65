"""
Filter, sort and pagination composition for event listings.

Two date conventions coexist here:

* explicit ``startDate``/``endDate`` ranges assume a fixed UTC-3 day,
  so a calendar day D spans [D 03:00 UTC, D+1 02:59:59.999 UTC];
* named buckets (``hoje``, ``amanha``...) are computed on the server's
  local wall clock and converted to UTC for the query.

Stored event dates are naive UTC.
"""

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.orm import Session

from letsgo.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SEARCH_FIELDS
from letsgo.core.errors import ValidationFailed
from letsgo.models import Event

DATE_BUCKETS = ("hoje", "amanha", "esta-semana", "este-fim-de-semana", "este-mes")

# Hour (UTC) at which a calendar day starts under the fixed-offset convention
UTC_DAY_START_HOUR = 3

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class Pagination:
    """1-indexed page of ``limit`` rows."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_params(cls, page: Optional[int], limit: Optional[int] = None) -> "Pagination":
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else DEFAULT_PAGE_SIZE
        return cls(page=page, limit=min(limit, MAX_PAGE_SIZE))

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive [gte, lte] window on ``Event.date``; ``lte`` may be open."""

    gte: datetime
    lte: Optional[datetime] = None

    def clause(self) -> ColumnElement[bool]:
        if self.lte is None:
            return Event.date >= self.gte
        return and_(Event.date >= self.gte, Event.date <= self.lte)


def _local_to_utc(value: datetime) -> datetime:
    # naive datetimes are read as server local time by astimezone()
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_calendar_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` query value."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationFailed(f"Invalid date {value!r}, expected YYYY-MM-DD")


def explicit_range_window(
    start_date: Optional[str],
    end_date: Optional[str],
    now: Optional[datetime] = None,
) -> DateWindow:
    """
    Window for the paginated listing.

    The lower bound never precedes today's start; the upper bound, when
    given, includes the whole of ``end_date``.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    today = now.replace(hour=UTC_DAY_START_HOUR, minute=0, second=0, microsecond=0)

    gte = today
    if start_date:
        start = datetime.combine(parse_calendar_date(start_date), time(UTC_DAY_START_HOUR))
        gte = max(start, today)

    lte = None
    if end_date:
        next_day = parse_calendar_date(end_date) + timedelta(days=1)
        lte = datetime.combine(next_day, time(UTC_DAY_START_HOUR)) - timedelta(milliseconds=1)

    return DateWindow(gte=gte, lte=lte)


def bucket_window(name: Optional[str], now: Optional[datetime] = None) -> DateWindow:
    """
    Window for a named date bucket, anchored on local ``now``.

    Unknown or empty names select everything from the start of today.
    """
    now = now or datetime.now()
    today = datetime.combine(now.date(), time.min)
    weekday = now.weekday()  # Monday == 0

    def end_of(day: datetime) -> datetime:
        return datetime.combine(day.date(), END_OF_DAY)

    if name == "hoje":
        start, end = today, end_of(today)
    elif name == "amanha":
        tomorrow = today + timedelta(days=1)
        start, end = tomorrow, end_of(tomorrow)
    elif name == "esta-semana":
        sunday = today + timedelta(days=6 - weekday)
        start, end = today, end_of(sunday)
    elif name == "este-fim-de-semana":
        sunday = today + timedelta(days=6 - weekday)
        if weekday >= calendar.FRIDAY:
            start = today
        else:
            start = today + timedelta(days=calendar.FRIDAY - weekday)
        end = end_of(sunday)
    elif name == "este-mes":
        last_day = calendar.monthrange(now.year, now.month)[1]
        start, end = today, end_of(today.replace(day=last_day))
    else:
        return DateWindow(gte=_local_to_utc(today))

    return DateWindow(gte=_local_to_utc(start), lte=_local_to_utc(end))


def search_clause(term: Optional[str], fields: Sequence[str] = SEARCH_FIELDS) -> Optional[ColumnElement[bool]]:
    """Case-insensitive substring match on any of ``fields``."""
    if not term:
        return None
    return or_(*[getattr(Event, field).icontains(term, autoescape=True) for field in fields])


def category_clause(category: Optional[str]) -> Optional[ColumnElement[bool]]:
    """Exact category match; no filter at all when ``category`` is empty."""
    if not category:
        return None
    return Event.category == category


class EventQuery:
    """Accumulates predicates and a date ordering, then runs a paged query."""

    def __init__(self):
        self._clauses: List[ColumnElement[bool]] = []
        self._descending = False

    def where(self, clause: Optional[ColumnElement[bool]]) -> "EventQuery":
        if clause is not None:
            self._clauses.append(clause)
        return self

    def within(self, window: DateWindow) -> "EventQuery":
        return self.where(window.clause())

    def matching(self, term: Optional[str]) -> "EventQuery":
        return self.where(search_clause(term))

    def in_category(self, category: Optional[str]) -> "EventQuery":
        return self.where(category_clause(category))

    def order_by_date(self, descending: bool = False) -> "EventQuery":
        self._descending = descending
        return self

    @property
    def criteria(self) -> ColumnElement[bool]:
        return and_(True, *self._clauses)

    def statement(self):
        order = Event.date.desc() if self._descending else Event.date.asc()
        return select(Event).where(self.criteria).order_by(order, Event.id)

    def count(self, db: Session) -> int:
        return db.scalar(select(func.count()).select_from(Event).where(self.criteria)) or 0

    def fetch(self, db: Session, limit: int) -> List[Event]:
        return list(db.scalars(self.statement().limit(limit)))

    def page(self, db: Session, pagination: Pagination) -> Tuple[List[Event], int]:
        """Rows of the requested page plus the total page count."""
        rows = db.scalars(
            self.statement().offset(pagination.skip).limit(pagination.limit)
        )
        return list(rows), pagination.total_pages(self.count(db))
