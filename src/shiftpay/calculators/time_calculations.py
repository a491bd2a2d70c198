"""Worked-time arithmetic and rounding helpers.

Rounding:
- Internal compute at full Decimal precision
- Money reported to 2 decimals, ROUND_HALF_UP
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from shiftpay.calculators.types import ZERO, BreakPeriod

OUTPUT_PRECISION = Decimal("0.01")
MINUTES_PER_HOUR = Decimal("60")
ONE_MINUTE = timedelta(minutes=1)


class _HasHours(Protocol):
    hours: Decimal


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(OUTPUT_PRECISION, rounding=ROUND_HALF_UP)


def as_utc(value: datetime) -> datetime:
    """Aware datetimes converted to UTC; naive ones returned unchanged.

    Aware datetimes sharing one tzinfo subtract and compare by wall clock,
    so elapsed time across a DST change is only exact in UTC.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole elapsed minutes from start to end, truncated toward zero."""
    delta = as_utc(end) - as_utc(start)
    if delta < timedelta(0):
        return -(-delta // ONE_MINUTE)
    return delta // ONE_MINUTE


def minutes_to_hours(minutes: int) -> Decimal:
    return Decimal(minutes) / MINUTES_PER_HOUR


def adjust_end_time_for_minimum_shift(
    start_time: datetime,
    end_time: datetime,
    minimum_shift_hours: Decimal | None,
) -> datetime:
    """Extend a short shift so it lasts at least minimum_shift_hours of elapsed time."""
    if not minimum_shift_hours:
        return end_time
    minimum_end = as_utc(start_time) + timedelta(seconds=int(minimum_shift_hours * 3600))
    if as_utc(end_time) < minimum_end:
        return minimum_end
    return end_time


def calculate_worked_hours(
    start_time: datetime,
    end_time: datetime,
    break_periods: Iterable[BreakPeriod],
) -> tuple[Decimal, int, int]:
    """Return (total_hours, worked_minutes, break_minutes) for a shift.

    Worked minutes are clamped at zero so a break-heavy shift never reports
    negative time.
    """
    total_minutes = minutes_between(start_time, end_time)
    break_minutes = sum(
        minutes_between(bp.start_time, bp.end_time) for bp in break_periods
    )
    worked_minutes = max(0, total_minutes - break_minutes)
    return minutes_to_hours(worked_minutes), worked_minutes, break_minutes


def calculate_overtime_hours(
    total_worked_hours: Decimal, maximum_hours: Decimal
) -> tuple[Decimal, Decimal]:
    """Split worked hours into (overtime_hours, regular_hours)."""
    overtime_hours = max(ZERO, total_worked_hours - maximum_hours)
    regular_hours = total_worked_hours - overtime_hours
    return overtime_hours, regular_hours


def sum_hours(items: Iterable[_HasHours]) -> Decimal:
    return sum((item.hours for item in items), ZERO)