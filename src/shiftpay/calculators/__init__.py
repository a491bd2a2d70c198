"""Shift pay and tax withholding calculators."""

from shiftpay.calculators.break_calculator import BreakCalculator, BreakValidationError
from shiftpay.calculators.pay_calculator import PayCalculator, calculate_total_hours
from shiftpay.calculators.tax_calculator import TaxCalculator
from shiftpay.calculators.tax_tables import (
    TaxConfigurationError,
    TaxRateConfig,
    get_tax_rate_config,
)
from shiftpay.calculators.time_rule_engine import TimeRuleEngine
from shiftpay.calculators.validation import PayGuideValidationError, ShiftValidationError

__all__ = [
    "BreakCalculator",
    "BreakValidationError",
    "PayCalculator",
    "calculate_total_hours",
    "TaxCalculator",
    "TaxConfigurationError",
    "TaxRateConfig",
    "get_tax_rate_config",
    "TimeRuleEngine",
    "PayGuideValidationError",
    "ShiftValidationError",
]
