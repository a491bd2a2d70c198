"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shiftpay.calculators.tax_tables import TaxRateConfig
from shiftpay.calculators.timezone_helper import parse_hhmm
from shiftpay.calculators.types import (
    BreakPeriod,
    MedicareExemption,
    OvertimeTimeFrame,
    PayGuide,
    PayPeriodType,
    PenaltyTimeFrame,
    PublicHoliday,
    StslRate,
    TaxCoefficient,
    TaxScale,
    TaxSettings,
    YearToDateTax,
)


# ============================================================================
# Pay guide schemas
# ============================================================================


class PayGuideSchema(BaseModel):
    """Base rate and shift limits."""

    name: str
    base_rate: Decimal = Field(gt=0)
    timezone: str = "Australia/Sydney"
    minimum_shift_hours: Decimal | None = Field(default=None, ge=0)
    maximum_shift_hours: Decimal | None = Field(default=None, ge=0)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    def to_core(self) -> PayGuide:
        return PayGuide(
            name=self.name,
            base_rate=self.base_rate,
            timezone=self.timezone,
            minimum_shift_hours=self.minimum_shift_hours,
            maximum_shift_hours=self.maximum_shift_hours,
        )


class TimeFrameConditions(BaseModel):
    """Conditions shared by penalty and overtime frames."""

    id: str
    name: str
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: str | None = None
    end_time: str | None = None
    is_public_holiday: bool = False
    is_active: bool = True
    description: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def check_local_time(cls, value: str | None) -> str | None:
        if value is not None:
            parse_hhmm(value)
        return value


class PenaltyTimeFrameSchema(TimeFrameConditions):
    multiplier: Decimal = Field(gt=0)

    def to_core(self) -> PenaltyTimeFrame:
        return PenaltyTimeFrame(
            id=self.id,
            name=self.name,
            multiplier=self.multiplier,
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            is_public_holiday=self.is_public_holiday,
            is_active=self.is_active,
            description=self.description,
        )


class OvertimeTimeFrameSchema(TimeFrameConditions):
    first_three_hours_mult: Decimal = Field(gt=0)
    after_three_hours_mult: Decimal = Field(gt=0)

    def to_core(self) -> OvertimeTimeFrame:
        return OvertimeTimeFrame(
            id=self.id,
            name=self.name,
            first_three_hours_mult=self.first_three_hours_mult,
            after_three_hours_mult=self.after_three_hours_mult,
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            is_public_holiday=self.is_public_holiday,
            is_active=self.is_active,
            description=self.description,
        )


class PublicHolidaySchema(BaseModel):
    date: date
    name: str = ""
    is_active: bool = True

    def to_core(self) -> PublicHoliday:
        return PublicHoliday(date=self.date, name=self.name, is_active=self.is_active)


class BreakPeriodSchema(BaseModel):
    """Unpaid break. Naive times are local to the pay guide's timezone."""

    model_config = ConfigDict(from_attributes=True)

    start_time: datetime
    end_time: datetime

    def to_core(self) -> BreakPeriod:
        return BreakPeriod(start_time=self.start_time, end_time=self.end_time)


# ============================================================================
# Shift calculation schemas
# ============================================================================


class ShiftCalculationRequest(BaseModel):
    """Schema for a shift pay preview."""

    pay_guide: PayGuideSchema
    penalty_time_frames: list[PenaltyTimeFrameSchema] = Field(default_factory=list)
    overtime_time_frames: list[OvertimeTimeFrameSchema] = Field(default_factory=list)
    public_holidays: list[PublicHolidaySchema] = Field(default_factory=list)
    start_time: datetime
    end_time: datetime
    break_periods: list[BreakPeriodSchema] = Field(default_factory=list)


class ShiftSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start_time: datetime
    end_time: datetime
    break_periods: list[BreakPeriodSchema]
    total_hours: Decimal


class PayBreakdownResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    base_hours: Decimal
    base_pay: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    penalty_hours: Decimal
    penalty_pay: Decimal
    total_pay: Decimal


class AppliedRateResponse(BaseModel):
    """A billed penalty segment or overtime tier."""

    model_config = ConfigDict(from_attributes=True)

    time_frame_id: str
    name: str
    multiplier: Decimal
    hours: Decimal
    pay: Decimal
    start_time: datetime
    end_time: datetime


class PayCalculationResponse(BaseModel):
    """Schema for shift pay results."""

    model_config = ConfigDict(from_attributes=True)

    shift: ShiftSummaryResponse
    breakdown: PayBreakdownResponse
    penalties: list[AppliedRateResponse]
    overtimes: list[AppliedRateResponse]
    pay_guide_name: str
    base_rate: Decimal


# ============================================================================
# Tax calculation schemas
# ============================================================================


class TaxSettingsSchema(BaseModel):
    claimed_tax_free_threshold: bool = True
    is_foreign_resident: bool = False
    has_tax_file_number: bool = True
    medicare_exemption: MedicareExemption = MedicareExemption.NONE

    def to_core(self) -> TaxSettings:
        return TaxSettings(
            claimed_tax_free_threshold=self.claimed_tax_free_threshold,
            is_foreign_resident=self.is_foreign_resident,
            has_tax_file_number=self.has_tax_file_number,
            medicare_exemption=self.medicare_exemption,
        )


class BracketRowSchema(BaseModel):
    """Weekly earnings bracket: amount = x * coefficient_a - coefficient_b."""

    scale: str
    earnings_from: Decimal = Field(ge=0)
    earnings_to: Decimal | None = None
    coefficient_a: Decimal
    coefficient_b: Decimal


class TaxTablesSchema(BaseModel):
    """Caller-supplied tables. Levy parameters default to configuration."""

    coefficients: list[BracketRowSchema]
    stsl_rates: list[BracketRowSchema] = Field(default_factory=list)
    medicare_levy_rate: Decimal | None = Field(default=None, ge=0)
    medicare_low_threshold: Decimal | None = Field(default=None, ge=0)
    medicare_high_threshold: Decimal | None = Field(default=None, ge=0)

    def to_config(self, tax_year: str, defaults: TaxRateConfig) -> TaxRateConfig:
        return TaxRateConfig(
            tax_year=tax_year,
            coefficients=[TaxCoefficient(**row.model_dump()) for row in self.coefficients],
            stsl_rates=[StslRate(**row.model_dump()) for row in self.stsl_rates],
            medicare_levy_rate=(
                self.medicare_levy_rate
                if self.medicare_levy_rate is not None
                else defaults.medicare_levy_rate
            ),
            medicare_low_threshold=(
                self.medicare_low_threshold
                if self.medicare_low_threshold is not None
                else defaults.medicare_low_threshold
            ),
            medicare_high_threshold=(
                self.medicare_high_threshold
                if self.medicare_high_threshold is not None
                else defaults.medicare_high_threshold
            ),
        )


class YearToDateSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tax_year: str
    gross_income: Decimal = Decimal("0")
    payg_withholding: Decimal = Decimal("0")
    medicare_levy: Decimal = Decimal("0")
    stsl_amount: Decimal = Decimal("0")
    total_withholdings: Decimal = Decimal("0")

    def to_core(self, tax_year: str) -> YearToDateTax:
        return YearToDateTax(
            tax_year=tax_year,
            gross_income=self.gross_income,
            payg_withholding=self.payg_withholding,
            medicare_levy=self.medicare_levy,
            stsl_amount=self.stsl_amount,
            total_withholdings=self.total_withholdings,
        )


class TaxCalculationRequest(BaseModel):
    """Schema for a pay period withholding preview."""

    pay_period_id: str
    gross_pay: Decimal = Field(ge=0)
    pay_period_type: PayPeriodType
    tax_settings: TaxSettingsSchema = Field(default_factory=TaxSettingsSchema)
    tax_year: str | None = None
    tax_tables: TaxTablesSchema | None = None
    year_to_date: YearToDateSchema | None = None


class TaxBreakdownResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gross_pay: Decimal
    payg_withholding: Decimal
    medicare_levy: Decimal
    stsl_amount: Decimal
    total_withholdings: Decimal
    net_pay: Decimal


class TaxCalculationResponse(BaseModel):
    """Schema for withholding results."""

    model_config = ConfigDict(from_attributes=True)

    pay_period_id: str
    gross_pay: Decimal
    pay_period_type: PayPeriodType
    tax_scale: TaxScale
    breakdown: TaxBreakdownResponse
    year_to_date: YearToDateSchema


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
