"""PAYG withholding, Medicare levy and study loan repayment per pay period."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from decimal import ROUND_FLOOR, Decimal

from shiftpay.calculators.tax_tables import TaxConfigurationError, TaxRateConfig
from shiftpay.calculators.time_calculations import round_to_cents
from shiftpay.calculators.types import (
    ZERO,
    BracketRow,
    MedicareExemption,
    PayPeriodType,
    StslRate,
    StslScale,
    TaxBreakdown,
    TaxCalculationResult,
    TaxCoefficient,
    TaxScale,
    TaxSettings,
    YearToDateTax,
)

__all__ = ["TaxCalculator", "TaxConfigurationError"]

logger = logging.getLogger(__name__)

# (numerator, denominator) converting a period amount to its weekly equivalent
WEEKLY_CONVERSION: dict[PayPeriodType, tuple[Decimal, Decimal]] = {
    PayPeriodType.WEEKLY: (Decimal("1"), Decimal("1")),
    PayPeriodType.FORTNIGHTLY: (Decimal("1"), Decimal("2")),
    PayPeriodType.MONTHLY: (Decimal("3"), Decimal("13")),
}

PERIODS_PER_YEAR: dict[PayPeriodType, Decimal] = {
    PayPeriodType.WEEKLY: Decimal("52"),
    PayPeriodType.FORTNIGHTLY: Decimal("26"),
    PayPeriodType.MONTHLY: Decimal("12"),
}

# First matching predicate wins; scale2 otherwise
SCALE_LOOKUP: tuple[tuple[Callable[[TaxSettings], bool], TaxScale], ...] = (
    (lambda s: s.is_foreign_resident, TaxScale.SCALE3),
    (lambda s: not s.claimed_tax_free_threshold, TaxScale.SCALE1),
)

STSL_CENTS_OFFSET = Decimal("0.99")


class TaxCalculator:
    """Calculates withholding for one pay period from coefficient tables.

    Each component uses the weekly formula y = x * A - B, where the bracket
    row is chosen by the weekly equivalent of gross pay:

    1) Select the withholding scale from the tax settings
    2) PAYG: weekly equivalent -> bracket row -> back to the pay cadence
    3) Medicare levy: shade-in on annualised income, then exemptions
    4) Study loan: same formula on the study loan table, whole dollars + 99c
    5) Round each component to cents; total and net follow by addition

    The calculator keeps no state between calls. Year-to-date figures are
    passed in and a new YearToDateTax is returned.
    """

    def __init__(
        self,
        tax_settings: TaxSettings,
        coefficients: Sequence[TaxCoefficient],
        stsl_rates: Sequence[StslRate] = (),
        medicare_levy_rate: Decimal = Decimal("0.02"),
        medicare_low_threshold: Decimal = Decimal("26000"),
        medicare_high_threshold: Decimal = Decimal("32500"),
    ):
        if medicare_high_threshold <= medicare_low_threshold:
            raise TaxConfigurationError(
                "Medicare high threshold must be greater than the low threshold"
            )
        self.tax_settings = tax_settings
        self.coefficients = list(coefficients)
        self.stsl_rates = list(stsl_rates)
        self.medicare_levy_rate = medicare_levy_rate
        self.medicare_low_threshold = medicare_low_threshold
        self.medicare_high_threshold = medicare_high_threshold

    @classmethod
    def from_config(cls, tax_settings: TaxSettings, config: TaxRateConfig) -> TaxCalculator:
        return cls(
            tax_settings,
            coefficients=config.coefficients,
            stsl_rates=config.stsl_rates,
            medicare_levy_rate=config.medicare_levy_rate,
            medicare_low_threshold=config.medicare_low_threshold,
            medicare_high_threshold=config.medicare_high_threshold,
        )

    def calculate_pay_period_tax(
        self,
        pay_period_id: str,
        gross_pay: Decimal,
        pay_period_type: PayPeriodType,
        year_to_date: YearToDateTax,
    ) -> TaxCalculationResult:
        """Withholding for one pay period and the updated year-to-date totals.

        Raises:
            ValueError: If gross_pay is negative
            TaxConfigurationError: If no PAYG bracket covers the weekly amount,
                or the study loan table has a gap at it
        """
        if gross_pay < 0:
            raise ValueError(f"Gross pay cannot be negative: {gross_pay}")

        tax_scale = self.select_tax_scale()

        if gross_pay == 0:
            breakdown = TaxBreakdown()
        else:
            payg = round_to_cents(self.calculate_payg(gross_pay, pay_period_type, tax_scale))
            levy = round_to_cents(self.calculate_medicare_levy(gross_pay, pay_period_type))
            stsl = round_to_cents(self.calculate_stsl(gross_pay, pay_period_type))
            total = payg + levy + stsl
            breakdown = TaxBreakdown(
                gross_pay=gross_pay,
                payg_withholding=payg,
                medicare_levy=levy,
                stsl_amount=stsl,
                total_withholdings=total,
                net_pay=gross_pay - total,
            )

        logger.debug(
            "Pay period %s: %s %s gross on %s -> %s withheld",
            pay_period_id,
            gross_pay,
            pay_period_type.value,
            tax_scale.value,
            breakdown.total_withholdings,
        )

        return TaxCalculationResult(
            pay_period_id=pay_period_id,
            gross_pay=gross_pay,
            pay_period_type=pay_period_type,
            tax_scale=tax_scale,
            breakdown=breakdown,
            year_to_date=year_to_date.accumulate(breakdown),
        )

    # === Scale selection ===

    def select_tax_scale(self) -> TaxScale:
        for predicate, scale in SCALE_LOOKUP:
            if predicate(self.tax_settings):
                return scale
        return TaxScale.SCALE2

    def select_stsl_scale(self) -> StslScale:
        settings = self.tax_settings
        if settings.claimed_tax_free_threshold or settings.is_foreign_resident:
            return StslScale.WITH_TFT_OR_FR
        return StslScale.NO_TFT

    # === Cadence conversion ===

    @staticmethod
    def to_weekly(amount: Decimal, pay_period_type: PayPeriodType) -> Decimal:
        numerator, denominator = WEEKLY_CONVERSION[pay_period_type]
        return amount * numerator / denominator

    @staticmethod
    def from_weekly(amount: Decimal, pay_period_type: PayPeriodType) -> Decimal:
        numerator, denominator = WEEKLY_CONVERSION[pay_period_type]
        return amount * denominator / numerator

    # === Components (unrounded, pay cadence) ===

    def calculate_payg(
        self,
        gross_pay: Decimal,
        pay_period_type: PayPeriodType,
        tax_scale: TaxScale,
    ) -> Decimal:
        weekly = self.to_weekly(gross_pay, pay_period_type)
        row = self._find_row(self.coefficients, tax_scale.value, weekly)
        if row is None:
            raise TaxConfigurationError(
                f"No tax coefficient found for {tax_scale.value} at weekly earnings {weekly}",
                scale=tax_scale.value,
                earnings=weekly,
            )
        return self.from_weekly(row.apply(weekly), pay_period_type)

    def calculate_medicare_levy(
        self,
        gross_pay: Decimal,
        pay_period_type: PayPeriodType,
    ) -> Decimal:
        """Levy with the low-income shade-in, evaluated on annualised income.

        Inside the shade-in band the levy rises linearly from 0 at the low
        threshold to rate * income at the high threshold.
        """
        exemption = self.tax_settings.medicare_exemption
        if exemption == MedicareExemption.FULL:
            return ZERO

        periods = PERIODS_PER_YEAR[pay_period_type]
        annual_income = gross_pay * periods
        low = self.medicare_low_threshold
        high = self.medicare_high_threshold
        rate = self.medicare_levy_rate

        if annual_income <= low:
            return ZERO
        if annual_income >= high:
            levy = rate * gross_pay
        else:
            annual_levy = rate * high * (annual_income - low) / (high - low)
            levy = annual_levy / periods

        if exemption == MedicareExemption.HALF:
            levy = levy / 2
        return levy

    def calculate_stsl(
        self,
        gross_pay: Decimal,
        pay_period_type: PayPeriodType,
    ) -> Decimal:
        stsl_scale = self.select_stsl_scale()
        rows = [r for r in self.stsl_rates if r.scale == stsl_scale.value]
        if not rows:
            return ZERO

        weekly = self.to_weekly(gross_pay, pay_period_type)
        weekly = weekly.to_integral_value(rounding=ROUND_FLOOR) + STSL_CENTS_OFFSET
        row = self._find_row(rows, stsl_scale.value, weekly)
        if row is None:
            raise TaxConfigurationError(
                f"No study loan rate found for {stsl_scale.value} at weekly earnings {weekly}",
                scale=stsl_scale.value,
                earnings=weekly,
            )
        return self.from_weekly(row.apply(weekly), pay_period_type)

    @staticmethod
    def _find_row(
        rows: Sequence[BracketRow],
        scale: str,
        weekly_amount: Decimal,
    ) -> BracketRow | None:
        for row in rows:
            if row.scale == scale and row.contains(weekly_amount):
                return row
        return None
