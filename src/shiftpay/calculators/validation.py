"""Input validation for pay guides and shifts."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from shiftpay.calculators.break_calculator import BreakCalculator
from shiftpay.calculators.time_calculations import minutes_between
from shiftpay.calculators.types import BreakPeriod, PayGuide


class PayGuideValidationError(ValueError):
    """Raised when a pay guide cannot be used for calculation."""

    def __init__(self, message: str, field_name: str):
        self.field_name = field_name
        super().__init__(message)


class ShiftValidationError(ValueError):
    """Raised when shift bounds are malformed."""


def validate_pay_guide(pay_guide: PayGuide) -> None:
    if pay_guide.base_rate <= 0:
        raise PayGuideValidationError("Base rate must be greater than zero", "base_rate")

    for field_name, value in (
        ("minimum_shift_hours", pay_guide.minimum_shift_hours),
        ("maximum_shift_hours", pay_guide.maximum_shift_hours),
    ):
        if value is not None and value < 0:
            label = field_name.replace("_", " ").capitalize()
            raise PayGuideValidationError(f"{label} cannot be negative", field_name)

    if (
        pay_guide.minimum_shift_hours is not None
        and pay_guide.maximum_shift_hours is not None
        and pay_guide.minimum_shift_hours > pay_guide.maximum_shift_hours
    ):
        raise PayGuideValidationError(
            "Minimum shift hours cannot exceed maximum shift hours",
            "minimum_shift_hours",
        )


def validate_shift_times(
    start_time: datetime,
    end_time: datetime,
    break_periods: Sequence[BreakPeriod],
) -> None:
    """Check shift ordering and breaks before any pay is computed.

    Raises:
        ShiftValidationError: shift shorter than a minute, reversed, or mostly break
        BreakValidationError: a break is reversed or outside the shift
    """
    if end_time == start_time:
        raise ShiftValidationError("Shift must be at least 1 minute long")
    if end_time < start_time:
        raise ShiftValidationError("End time must be after start time")

    total_minutes = minutes_between(start_time, end_time)
    if total_minutes < 1:
        raise ShiftValidationError("Shift must be at least 1 minute long")

    BreakCalculator.validate_break_periods(break_periods, start_time, end_time)

    if BreakCalculator.calculate_total_break_minutes(break_periods) >= total_minutes:
        raise ShiftValidationError("Total break time cannot exceed shift duration")

