"""Withholding coefficient tables.

Scale selection is a table lookup: each scale id keys its own list of
weekly-earnings brackets, and adding a scale means adding rows, not code.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from shiftpay.calculators.types import StslRate, TaxCoefficient, TaxScale
from shiftpay.config import get_settings


class TaxConfigurationError(Exception):
    """Raised when a required withholding table or bracket is missing."""

    def __init__(
        self,
        message: str,
        scale: str | None = None,
        earnings: Decimal | None = None,
    ):
        self.scale = scale
        self.earnings = earnings
        super().__init__(message)


@dataclass(frozen=True)
class TaxRateConfig:
    """Everything the withholding formulas need for one tax year."""

    tax_year: str
    coefficients: Sequence[TaxCoefficient]
    stsl_rates: Sequence[StslRate] = field(default_factory=tuple)
    medicare_levy_rate: Decimal = Decimal("0.02")
    medicare_low_threshold: Decimal = Decimal("26000")
    medicare_high_threshold: Decimal = Decimal("32500")


def _rows(scale: TaxScale, rows: list[tuple[str, str | None, str, str]]) -> list[TaxCoefficient]:
    return [
        TaxCoefficient(
            scale=scale.value,
            earnings_from=Decimal(earnings_from),
            earnings_to=Decimal(earnings_to) if earnings_to is not None else None,
            coefficient_a=Decimal(a),
            coefficient_b=Decimal(b),
        )
        for earnings_from, earnings_to, a, b in rows
    ]


# Weekly earnings brackets: (earnings_from, earnings_to, a, b)
COEFFICIENTS_2024_25: tuple[TaxCoefficient, ...] = tuple(
    _rows(
        TaxScale.SCALE1,
        [
            ("0", "150", "0.1600", "0.1600"),
            ("150", "371", "0.2117", "7.7550"),
            ("371", "515", "0.1890", "-0.6702"),
            ("515", "932", "0.3227", "68.2367"),
            ("932", "1957", "0.3200", "65.7202"),
            ("1957", "3111", "0.3900", "202.7886"),
            ("3111", None, "0.4700", "451.7886"),
        ],
    )
    + _rows(
        TaxScale.SCALE2,
        [
            ("0", "361", "0", "0"),
            ("361", "500", "0.1600", "57.8462"),
            ("500", "625", "0.2600", "107.8462"),
            ("625", "721", "0.1800", "57.8462"),
            ("721", "865", "0.1890", "64.3365"),
            ("865", "1282", "0.3227", "180.0385"),
            ("1282", "2596", "0.3200", "176.5769"),
            ("2596", "3653", "0.3900", "358.3077"),
            ("3653", None, "0.4700", "650.6154"),
        ],
    )
    + _rows(
        TaxScale.SCALE3,
        [
            ("0", "2596", "0.3000", "0.3000"),
            ("2596", "3653", "0.3700", "181.7308"),
            ("3653", None, "0.4500", "474.0385"),
        ],
    )
)

DEFAULT_COEFFICIENTS: dict[str, tuple[TaxCoefficient, ...]] = {
    "2024-25": COEFFICIENTS_2024_25,
}


def get_tax_rate_config(tax_year: str) -> TaxRateConfig:
    """Built-in configuration for a tax year, levy parameters from settings.

    Study loan rows are not bundled; callers supply them for users with a
    study loan debt.

    Raises:
        TaxConfigurationError: If no table exists for tax_year
    """
    coefficients = DEFAULT_COEFFICIENTS.get(tax_year)
    if coefficients is None:
        raise TaxConfigurationError(f"No tax configuration found for tax year {tax_year}")

    settings = get_settings()
    return TaxRateConfig(
        tax_year=tax_year,
        coefficients=coefficients,
        stsl_rates=(),
        medicare_levy_rate=settings.medicare_levy_rate,
        medicare_low_threshold=settings.medicare_low_threshold,
        medicare_high_threshold=settings.medicare_high_threshold,
    )
