from datetime import date, datetime

import pytest
from pydantic import ValidationError

from bikeshop.domain.period import (
    DateRange,
    PeriodSelector,
    ReportingPeriod,
    in_period,
    quarter_of,
    to_calendar_date,
)


# --- 1. Quarter Mapping ---

@pytest.mark.parametrize(
    ("month", "quarter"),
    [(1, 1), (3, 1), (4, 2), (6, 2), (7, 3), (9, 3), (10, 4), (12, 4)],
)
def test_quarter_of_month(month: int, quarter: int) -> None:
    assert quarter_of(date(2024, month, 15)) == quarter


def test_quarter_boundaries_are_inclusive() -> None:
    """First and last day of a quarter belong to it, neighbours do not."""
    assert in_period(date(2024, 10, 1), 2024, 4)
    assert in_period(date(2024, 12, 31), 2024, 4)
    assert not in_period(date(2024, 9, 30), 2024, 4)
    assert not in_period(date(2025, 1, 1), 2024, 4)


def test_in_period_requires_matching_year() -> None:
    assert not in_period(date(2023, 10, 15), 2024, 4)


def test_in_period_ignores_time_and_offset() -> None:
    """A late-evening timestamp with a negative offset stays on its calendar day."""
    assert in_period("2024-09-30T23:30:00-05:00", 2024, 3)
    assert not in_period("2024-09-30T23:30:00-05:00", 2024, 4)
    assert in_period("2024-10-01T00:00:00Z", 2024, 4)
    assert in_period(datetime(2024, 12, 31, 23, 59), 2024, 4)


def test_in_period_missing_date() -> None:
    assert not in_period(None, 2024, 4)
    assert not in_period("", 2024, 4)


def test_in_period_unparseable_date() -> None:
    assert not in_period("10/05/2024", 2024, 4)
    assert not in_period("not a date", 2024, 4)
    assert to_calendar_date("2024-13-01") is None
    assert to_calendar_date("2024-10-05T08:00:00+02:00") == date(2024, 10, 5)


# --- 1b. DateRange (sales list filter) ---

@pytest.mark.parametrize(
    ("day", "included"),
    [
        ("2024-09-30", False),
        ("2024-10-01", True),
        ("2024-10-15", True),
        ("2024-10-31", True),
        ("2024-11-01", False),
    ],
)
def test_date_range_includes_both_ends(day: str, included: bool) -> None:
    october = DateRange(start_date="2024-10-01", end_date="2024-10-31")
    assert october.contains(day) is included


def test_date_range_single_day() -> None:
    day = DateRange(start_date="2024-10-01T00:00:00Z", end_date="2024-10-01T00:00:00Z")
    assert day.contains("2024-10-01T23:59:00-05:00")
    assert not day.contains(date(2024, 10, 2))


def test_date_range_applies_only_when_complete() -> None:
    assert DateRange().contains("2020-01-01")
    assert DateRange(start_date="2024-10-01").contains("2020-01-01")
    assert DateRange(start_date="", end_date="2024-10-31").contains("2030-01-01")
    assert not DateRange(start_date="2024-10-01", end_date="2024-10-31").contains(None)


def test_date_range_rejects_malformed_bounds() -> None:
    with pytest.raises(ValidationError):
        DateRange(start_date="10/01/2024", end_date="2024-10-31")


# --- 2. ReportingPeriod ---

def test_reporting_period_interval() -> None:
    q2 = ReportingPeriod(year=2024, quarter=2)
    assert q2.start_date == date(2024, 4, 1)
    assert q2.end_date == date(2024, 7, 1)
    assert q2.last_day == date(2024, 6, 30)
    assert q2.label == "Q2 2024"


def test_fourth_quarter_ends_next_year() -> None:
    q4 = ReportingPeriod(year=2024, quarter=4)
    assert q4.end_date == date(2025, 1, 1)
    assert q4.last_day == date(2024, 12, 31)


def test_reporting_period_containing() -> None:
    assert ReportingPeriod.current(date(2024, 2, 29)) == ReportingPeriod(year=2024, quarter=1)
    assert ReportingPeriod.containing(date(2024, 7, 1)).quarter == 3


@pytest.mark.parametrize("quarter", [0, 5])
def test_reporting_period_rejects_invalid_quarter(quarter: int) -> None:
    with pytest.raises(ValidationError):
        ReportingPeriod(year=2024, quarter=quarter)


def test_reporting_period_is_immutable() -> None:
    period = ReportingPeriod(year=2024, quarter=1)
    with pytest.raises(ValidationError):
        period.quarter = 2


# --- 3. PeriodSelector (pending vs applied) ---

@pytest.fixture
def selector() -> PeriodSelector:
    return PeriodSelector(clock=lambda: date(2024, 11, 5))


def test_selector_starts_on_current_period(selector: PeriodSelector) -> None:
    current = ReportingPeriod(year=2024, quarter=4)
    assert selector.pending == current
    assert selector.applied == current
    assert not selector.has_pending_changes
    assert not selector.is_filtered


def test_select_only_changes_pending(selector: PeriodSelector) -> None:
    selector.select(year=2023, quarter=2)

    assert selector.pending == ReportingPeriod(year=2023, quarter=2)
    assert selector.applied == ReportingPeriod(year=2024, quarter=4)
    assert selector.has_pending_changes


def test_select_keeps_unspecified_parts(selector: PeriodSelector) -> None:
    selector.select(quarter=1)
    assert selector.pending == ReportingPeriod(year=2024, quarter=1)
    selector.select(year=2022)
    assert selector.pending == ReportingPeriod(year=2022, quarter=1)


def test_apply_copies_pending(selector: PeriodSelector) -> None:
    selector.select(year=2023, quarter=2)
    applied = selector.apply()

    assert applied == ReportingPeriod(year=2023, quarter=2)
    assert selector.applied == selector.pending
    assert not selector.has_pending_changes
    assert selector.is_filtered


def test_clear_resets_both(selector: PeriodSelector) -> None:
    selector.select(year=2023, quarter=2)
    selector.apply()
    selector.select(quarter=3)

    selector.clear()

    assert selector.pending == ReportingPeriod(year=2024, quarter=4)
    assert selector.applied == ReportingPeriod(year=2024, quarter=4)
    assert not selector.is_filtered


def test_select_invalid_quarter_leaves_pending(selector: PeriodSelector) -> None:
    with pytest.raises(ValidationError):
        selector.select(quarter=7)
    assert selector.pending == ReportingPeriod(year=2024, quarter=4)


def test_available_years(selector: PeriodSelector) -> None:
    assert selector.available_years() == [2022, 2023, 2024]
