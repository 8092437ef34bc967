from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from .base import BaseDomainModel, coerce_calendar_date


def quarter_of(d: date) -> int:
    """Returns the calendar quarter (1-4) a date falls in."""
    return (d.month - 1) // 3 + 1


def to_calendar_date(d: date | datetime | str | None) -> date | None:
    """
    Reduces a date-like value to its calendar date.

    Args:
        d (date | datetime | str | None): A date, datetime or ISO date/timestamp string.

    Returns:
        date | None: The calendar date, or None when the value is missing
            or cannot be parsed.
    """
    value = coerce_calendar_date(d)
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def in_period(d: date | datetime | str | None, year: int, quarter: int) -> bool:
    """
    Checks whether a date belongs to the given (year, quarter).

    Only the calendar date counts: timestamps are truncated to their
    date-only part first, so boundary days are never shifted into an
    adjacent quarter by a timezone offset.

    Args:
        d (date | datetime | str | None): A date, datetime or ISO date/timestamp string.
        year (int): Target calendar year.
        quarter (int): Target quarter, 1-4.

    Returns:
        bool: True if both the year and the quarter match exactly. Missing
            or unparseable dates are in no period.
    """
    value = to_calendar_date(d)
    if value is None:
        return False
    return value.year == year and quarter_of(value) == quarter


class DateRange(BaseDomainModel):
    """
    An inclusive calendar-date filter for the sales list.

    The filter only applies once both ends are set; a half-filled range
    lets every sale through.
    """

    start_date: date | None = Field(None, description="First day included")
    end_date: date | None = Field(None, description="Last day included")

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def truncate_bounds(cls, v: Any) -> Any:
        return coerce_calendar_date(v)

    @property
    def is_complete(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def contains(self, d: date | datetime | str | None) -> bool:
        if not self.is_complete:
            return True
        value = to_calendar_date(d)
        return value is not None and self.start_date <= value <= self.end_date


class ReportingPeriod(BaseDomainModel):
    """
    A (year, quarter) reporting window of three calendar months.

    Q1 spans January-March, Q2 April-June, Q3 July-September and Q4
    October-December. The window is half-open: ``start_date`` is included,
    ``end_date`` (the first day of the next quarter) is not.
    """

    year: int = Field(..., description="Calendar year")
    quarter: int = Field(..., ge=1, le=4, description="Calendar quarter, 1-4")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def containing(cls, d: date) -> "ReportingPeriod":
        """Returns the period a given date falls in."""
        return cls(year=d.year, quarter=quarter_of(d))

    @classmethod
    def current(cls, today: date | None = None) -> "ReportingPeriod":
        """Returns the period containing today (or the supplied date)."""
        return cls.containing(today or date.today())

    @property
    def start_date(self) -> date:
        return date(self.year, (self.quarter - 1) * 3 + 1, 1)

    @property
    def end_date(self) -> date:
        if self.quarter == 4:
            return date(self.year + 1, 1, 1)
        return date(self.year, self.quarter * 3 + 1, 1)

    @property
    def last_day(self) -> date:
        return self.end_date - timedelta(days=1)

    @property
    def label(self) -> str:
        return f"Q{self.quarter} {self.year}"

    def contains(self, d: Any) -> bool:
        return in_period(d, self.year, self.quarter)


class PeriodSelector:
    """
    Keeps the period being edited apart from the period driving the report.

    ``pending`` is mutated live by the caller through :meth:`select`;
    ``applied`` only changes on :meth:`apply` or :meth:`clear`. Both start
    at the period containing today.
    """

    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        """
        Initializes both selections to the current period.

        Args:
            clock (Callable[[], date]): Source of "today". Defaults to date.today.
        """
        self._clock = clock
        current = ReportingPeriod.current(self._clock())
        self.pending: ReportingPeriod = current
        self.applied: ReportingPeriod = current

    @property
    def current(self) -> ReportingPeriod:
        return ReportingPeriod.current(self._clock())

    @property
    def has_pending_changes(self) -> bool:
        """True when applying would change the report."""
        return self.pending != self.applied

    @property
    def is_filtered(self) -> bool:
        """True when the applied period is not the current one."""
        return self.applied != self.current

    def select(self, year: int | None = None, quarter: int | None = None) -> ReportingPeriod:
        """
        Changes the pending selection without touching the applied one.

        Args:
            year (int | None): New pending year, unchanged if None.
            quarter (int | None): New pending quarter, unchanged if None.

        Returns:
            ReportingPeriod: The new pending period.

        Raises:
            pydantic.ValidationError: If the quarter is outside 1-4.
        """
        self.pending = ReportingPeriod(
            year=self.pending.year if year is None else year,
            quarter=self.pending.quarter if quarter is None else quarter,
        )
        return self.pending

    def apply(self) -> ReportingPeriod:
        """Copies the pending selection into the applied one."""
        self.applied = self.pending
        return self.applied

    def clear(self) -> ReportingPeriod:
        """Resets both selections to the period containing today."""
        current = self.current
        self.pending = current
        self.applied = current
        return current

    def available_years(self) -> list[int]:
        """The selectable years: the current one and the two before it."""
        year = self._clock().year
        return [year - 2, year - 1, year]
