"""Type definitions for the pay and tax calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Union

ZERO = Decimal("0")


class RuleType(str, Enum):
    """Rate rule variants."""

    PENALTY = "penalty"
    OVERTIME = "overtime"


class PayPeriodType(str, Enum):
    """Pay cadence."""

    WEEKLY = "WEEKLY"
    FORTNIGHTLY = "FORTNIGHTLY"
    MONTHLY = "MONTHLY"


class MedicareExemption(str, Enum):
    """Medicare levy exemption level."""

    NONE = "none"
    HALF = "half"
    FULL = "full"


class TaxScale(str, Enum):
    """PAYG withholding scales (Schedule 1)."""

    SCALE1 = "scale1"  # Tax-free threshold not claimed
    SCALE2 = "scale2"  # Tax-free threshold claimed
    SCALE3 = "scale3"  # Foreign resident
    SCALE4 = "scale4"
    SCALE5 = "scale5"
    SCALE6 = "scale6"


class StslScale(str, Enum):
    """Study and training support loan scales (Schedule 8)."""

    WITH_TFT_OR_FR = "WITH_TFT_OR_FR"
    NO_TFT = "NO_TFT"


# ============================================================================
# Shift and pay guide inputs
# ============================================================================


@dataclass(frozen=True)
class Period:
    """A half-open span of time between two aware instants."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class BreakPeriod:
    """An unpaid break inside a shift."""

    start_time: datetime
    end_time: datetime


@dataclass(frozen=True)
class PenaltyTimeFrame:
    """Penalty rate applying on a day, in a local time window, or on holidays.

    start_time/end_time are "HH:MM" local times; the window is half-open and
    wraps past midnight when end_time <= start_time (or end_time is "24:00").
    """

    id: str
    name: str
    multiplier: Decimal
    day_of_week: int | None = None  # 0=Sunday ... 6=Saturday
    start_time: str | None = None
    end_time: str | None = None
    is_public_holiday: bool = False
    is_active: bool = True
    description: str | None = None


@dataclass(frozen=True)
class OvertimeTimeFrame:
    """Two-tier overtime rate: first three overtime hours, then the rest."""

    id: str
    name: str
    first_three_hours_mult: Decimal
    after_three_hours_mult: Decimal
    day_of_week: int | None = None
    start_time: str | None = None
    end_time: str | None = None
    is_public_holiday: bool = False
    is_active: bool = True
    description: str | None = None


@dataclass(frozen=True)
class PublicHoliday:
    """A public holiday date attached to a pay guide."""

    date: date
    name: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class PayGuide:
    """Base rate and shift limits for an award or agreement.

    maximum_shift_hours is the regular-hours threshold; worked time beyond it
    is overtime. When unset the configured default applies.
    """

    name: str
    base_rate: Decimal
    timezone: str = "Australia/Sydney"
    minimum_shift_hours: Decimal | None = None
    maximum_shift_hours: Decimal | None = None


# ============================================================================
# Derived rate rules
# ============================================================================


@dataclass(frozen=True)
class PenaltyRateRule:
    """A penalty frame resolved to a concrete period of a shift."""

    period: Period
    time_frame: PenaltyTimeFrame
    multiplier: Decimal
    rule_type: RuleType = field(default=RuleType.PENALTY, init=False)

    def with_period(self, period: Period) -> PenaltyRateRule:
        return replace(self, period=period)


@dataclass(frozen=True)
class OvertimeRateRule:
    """An overtime frame resolved to the overtime tail of a shift."""

    period: Period
    time_frame: OvertimeTimeFrame
    multiplier: Decimal
    rule_type: RuleType = field(default=RuleType.OVERTIME, init=False)

    def with_period(self, period: Period) -> OvertimeRateRule:
        return replace(self, period=period)


RateRule = Union[PenaltyRateRule, OvertimeRateRule]


# ============================================================================
# Pay results
# ============================================================================


@dataclass
class AppliedPenalty:
    """Billed penalty segment after break and regular-hours adjustment."""

    time_frame_id: str
    name: str
    multiplier: Decimal
    hours: Decimal
    pay: Decimal
    start_time: datetime
    end_time: datetime


@dataclass
class AppliedOvertime:
    """Billed overtime tier. A frame yields one row per tier used."""

    time_frame_id: str
    name: str
    multiplier: Decimal
    hours: Decimal
    pay: Decimal
    start_time: datetime
    end_time: datetime


@dataclass
class ShiftSummary:
    """Shift bounds as calculated."""

    start_time: datetime
    end_time: datetime
    break_periods: list[BreakPeriod]
    total_hours: Decimal


@dataclass
class PayBreakdown:
    """Hours and pay by category. Pay fields are rounded to cents."""

    base_hours: Decimal = ZERO
    base_pay: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    penalty_hours: Decimal = ZERO
    penalty_pay: Decimal = ZERO
    total_pay: Decimal = ZERO


@dataclass
class PayCalculationResult:
    """Full pay breakdown for one shift."""

    shift: ShiftSummary
    breakdown: PayBreakdown
    penalties: list[AppliedPenalty] = field(default_factory=list)
    overtimes: list[AppliedOvertime] = field(default_factory=list)
    pay_guide_name: str = ""
    base_rate: Decimal = ZERO


# ============================================================================
# Tax inputs and results
# ============================================================================


@dataclass(frozen=True)
class TaxSettings:
    """Withholding declaration details that select scales and levy treatment.

    has_tax_file_number is accepted but does not affect withholding. Scale
    selection reads only residency and the tax-free threshold claim.
    """

    claimed_tax_free_threshold: bool = True
    is_foreign_resident: bool = False
    has_tax_file_number: bool = True
    medicare_exemption: MedicareExemption = MedicareExemption.NONE


@dataclass(frozen=True)
class BracketRow:
    """A coefficient bracket: weekly amount = x * A - B on [from, to)."""

    scale: str
    earnings_from: Decimal
    earnings_to: Decimal | None  # None = no upper limit
    coefficient_a: Decimal
    coefficient_b: Decimal

    def contains(self, weekly_amount: Decimal) -> bool:
        if weekly_amount < self.earnings_from:
            return False
        return self.earnings_to is None or weekly_amount < self.earnings_to

    def apply(self, weekly_amount: Decimal) -> Decimal:
        return max(ZERO, weekly_amount * self.coefficient_a - self.coefficient_b)


@dataclass(frozen=True)
class TaxCoefficient(BracketRow):
    """PAYG withholding bracket."""


@dataclass(frozen=True)
class StslRate(BracketRow):
    """Study loan repayment bracket."""


@dataclass(frozen=True)
class YearToDateTax:
    """Cumulative income and withholdings for one tax year."""

    tax_year: str
    gross_income: Decimal = ZERO
    payg_withholding: Decimal = ZERO
    medicare_levy: Decimal = ZERO
    stsl_amount: Decimal = ZERO
    total_withholdings: Decimal = ZERO

    def accumulate(self, breakdown: TaxBreakdown) -> YearToDateTax:
        """Return a copy with one period's figures added."""
        return replace(
            self,
            gross_income=self.gross_income + breakdown.gross_pay,
            payg_withholding=self.payg_withholding + breakdown.payg_withholding,
            medicare_levy=self.medicare_levy + breakdown.medicare_levy,
            stsl_amount=self.stsl_amount + breakdown.stsl_amount,
            total_withholdings=self.total_withholdings + breakdown.total_withholdings,
        )


@dataclass(frozen=True)
class TaxBreakdown:
    """Per-period withholding figures, rounded to cents."""

    gross_pay: Decimal = ZERO
    payg_withholding: Decimal = ZERO
    medicare_levy: Decimal = ZERO
    stsl_amount: Decimal = ZERO
    total_withholdings: Decimal = ZERO
    net_pay: Decimal = ZERO


@dataclass(frozen=True)
class TaxCalculationResult:
    """Withholding result for a pay period plus the updated year-to-date."""

    pay_period_id: str
    gross_pay: Decimal
    pay_period_type: PayPeriodType
    tax_scale: TaxScale
    breakdown: TaxBreakdown
    year_to_date: YearToDateTax
