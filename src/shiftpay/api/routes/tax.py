"""Pay period withholding endpoint."""

from fastapi import APIRouter

from shiftpay.api.schemas import (
    ErrorResponse,
    TaxCalculationRequest,
    TaxCalculationResponse,
)
from shiftpay.calculators.tax_calculator import TaxCalculator
from shiftpay.calculators.tax_tables import TaxRateConfig, get_tax_rate_config
from shiftpay.calculators.tax_year import normalize_tax_year
from shiftpay.calculators.types import YearToDateTax
from shiftpay.config import get_settings

router = APIRouter(prefix="/tax", tags=["tax"])


@router.post(
    "/calculate",
    response_model=TaxCalculationResponse,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def calculate_tax(payload: TaxCalculationRequest) -> TaxCalculationResponse:
    """Calculate PAYG, Medicare levy and study loan withholding for a pay period.

    Uses the built-in tables for the tax year unless the request supplies its own.
    """
    settings = get_settings()
    tax_year = normalize_tax_year(payload.tax_year or settings.default_tax_year)

    if payload.tax_tables is None:
        config = get_tax_rate_config(tax_year)
    else:
        defaults = TaxRateConfig(
            tax_year=tax_year,
            coefficients=(),
            medicare_levy_rate=settings.medicare_levy_rate,
            medicare_low_threshold=settings.medicare_low_threshold,
            medicare_high_threshold=settings.medicare_high_threshold,
        )
        config = payload.tax_tables.to_config(tax_year, defaults)

    if payload.year_to_date is None:
        year_to_date = YearToDateTax(tax_year=tax_year)
    else:
        year_to_date = payload.year_to_date.to_core(
            normalize_tax_year(payload.year_to_date.tax_year)
        )

    calculator = TaxCalculator.from_config(payload.tax_settings.to_core(), config)
    result = calculator.calculate_pay_period_tax(
        payload.pay_period_id,
        payload.gross_pay,
        payload.pay_period_type,
        year_to_date,
    )
    return TaxCalculationResponse.model_validate(result)
