"""Unpaid break accounting."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from shiftpay.calculators.time_calculations import as_utc, minutes_between
from shiftpay.calculators.types import BreakPeriod, Period


class BreakValidationError(ValueError):
    """Raised when a break period is malformed or outside its shift."""

    def __init__(self, message: str, break_period: BreakPeriod):
        self.break_period = break_period
        super().__init__(message)


class BreakCalculator:
    """Interval arithmetic over unpaid break periods.

    Overlapping breaks are not merged: each break's overlap with a period is
    counted on its own.
    """

    @staticmethod
    def calculate_break_overlap(
        period: Period, break_periods: Sequence[BreakPeriod]
    ) -> int:
        """Minutes of break time falling inside period."""
        total_overlap_minutes = 0

        for bp in break_periods:
            overlap_start = max(as_utc(period.start), as_utc(bp.start_time))
            overlap_end = min(as_utc(period.end), as_utc(bp.end_time))

            if overlap_start < overlap_end:
                total_overlap_minutes += minutes_between(overlap_start, overlap_end)

        return total_overlap_minutes

    @staticmethod
    def calculate_total_break_minutes(break_periods: Sequence[BreakPeriod]) -> int:
        return sum(minutes_between(bp.start_time, bp.end_time) for bp in break_periods)

    @staticmethod
    def validate_break_periods(
        break_periods: Sequence[BreakPeriod],
        shift_start: datetime,
        shift_end: datetime,
    ) -> None:
        """Raise BreakValidationError for the first malformed break."""
        for bp in break_periods:
            if bp.end_time <= bp.start_time:
                raise BreakValidationError(
                    "Break end time must be after break start time", bp
                )

            if bp.start_time < shift_start or bp.end_time > shift_end:
                raise BreakValidationError(
                    "Break periods must be within shift duration", bp
                )

    @staticmethod
    def is_break_time(instant: datetime, break_periods: Sequence[BreakPeriod]) -> bool:
        return any(bp.start_time <= instant < bp.end_time for bp in break_periods)
