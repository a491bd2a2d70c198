"""Pytest fixtures for shiftpay tests."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from shiftpay.calculators.types import (
    BreakPeriod,
    OvertimeTimeFrame,
    PayGuide,
    PenaltyTimeFrame,
    PublicHoliday,
    StslRate,
    StslScale,
)

# Brisbane has no daylight saving; Sydney does
TIMEZONE = "Australia/Brisbane"
DST_TIMEZONE = "Australia/Sydney"
BASE_RATE = Decimal("26.55")

# 2024-07-03 is a Wednesday, 2024-07-06 a Saturday
WEDNESDAY = date(2024, 7, 3)
SATURDAY = date(2024, 7, 6)
CHRISTMAS = date(2024, 12, 25)

# Sydney clocks go back an hour on 2024-04-07 and forward on 2024-10-06
DST_END_SUNDAY = date(2024, 4, 7)
DST_START_SUNDAY = date(2024, 10, 6)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    """Naive local datetime, read in the pay guide's zone."""
    return datetime(day.year, day.month, day.day, hour, minute)


def brk(day: date, start: tuple[int, int], end: tuple[int, int]) -> BreakPeriod:
    return BreakPeriod(start_time=at(day, *start), end_time=at(day, *end))


@pytest.fixture
def retail_guide() -> PayGuide:
    """Retail award guide with no shift limits set."""
    return PayGuide(name="Retail Award", base_rate=BASE_RATE, timezone=TIMEZONE)


@pytest.fixture
def eight_hour_guide() -> PayGuide:
    """Guide with an 8 hour regular-hours threshold."""
    return PayGuide(
        name="Retail Award (8h)",
        base_rate=BASE_RATE,
        timezone=TIMEZONE,
        minimum_shift_hours=Decimal("3"),
        maximum_shift_hours=Decimal("8"),
    )


@pytest.fixture
def sydney_guide() -> PayGuide:
    """Guide in a daylight-saving zone with room for a weekend-long shift."""
    return PayGuide(
        name="Hospitality Award (Sydney)",
        base_rate=BASE_RATE,
        timezone=DST_TIMEZONE,
        maximum_shift_hours=Decimal("30"),
    )


@pytest.fixture
def saturday_penalty() -> PenaltyTimeFrame:
    return PenaltyTimeFrame(
        id="sat",
        name="Saturday",
        multiplier=Decimal("1.5"),
        day_of_week=6,
    )


@pytest.fixture
def evening_penalty() -> PenaltyTimeFrame:
    return PenaltyTimeFrame(
        id="evening",
        name="Weekday evening",
        multiplier=Decimal("1.25"),
        start_time="18:00",
        end_time="24:00",
    )


@pytest.fixture
def night_penalty() -> PenaltyTimeFrame:
    return PenaltyTimeFrame(
        id="night",
        name="Night shift",
        multiplier=Decimal("1.3"),
        start_time="22:00",
        end_time="06:00",
    )


@pytest.fixture
def holiday_penalty() -> PenaltyTimeFrame:
    return PenaltyTimeFrame(
        id="ph",
        name="Public holiday",
        multiplier=Decimal("2.25"),
        is_public_holiday=True,
    )


@pytest.fixture
def daily_overtime() -> OvertimeTimeFrame:
    return OvertimeTimeFrame(
        id="ot",
        name="Daily overtime",
        first_three_hours_mult=Decimal("1.5"),
        after_three_hours_mult=Decimal("2.0"),
    )


@pytest.fixture
def christmas() -> PublicHoliday:
    return PublicHoliday(date=CHRISTMAS, name="Christmas Day")


@pytest.fixture
def stsl_rates() -> list[StslRate]:
    """Two-row study loan table for the tax-free-threshold scale."""
    return [
        StslRate(
            scale=StslScale.WITH_TFT_OR_FR.value,
            earnings_from=Decimal("0"),
            earnings_to=Decimal("770"),
            coefficient_a=Decimal("0.02"),
            coefficient_b=Decimal("0"),
        ),
        StslRate(
            scale=StslScale.WITH_TFT_OR_FR.value,
            earnings_from=Decimal("770"),
            earnings_to=None,
            coefficient_a=Decimal("0.03"),
            coefficient_b=Decimal("5"),
        ),
    ]
