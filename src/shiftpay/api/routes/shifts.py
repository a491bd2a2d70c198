"""Shift pay preview endpoint."""

from fastapi import APIRouter

from shiftpay.api.schemas import (
    ErrorResponse,
    PayCalculationResponse,
    ShiftCalculationRequest,
)
from shiftpay.calculators.pay_calculator import PayCalculator

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post(
    "/calculate",
    response_model=PayCalculationResponse,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_shift_pay(payload: ShiftCalculationRequest) -> PayCalculationResponse:
    """Calculate base, penalty and overtime pay for a single shift.

    Nothing is stored; the result reflects only the request body.
    """
    calculator = PayCalculator(
        payload.pay_guide.to_core(),
        penalty_time_frames=[ptf.to_core() for ptf in payload.penalty_time_frames],
        overtime_time_frames=[otf.to_core() for otf in payload.overtime_time_frames],
        public_holidays=[ph.to_core() for ph in payload.public_holidays],
    )
    result = calculator.calculate(
        payload.start_time,
        payload.end_time,
        [bp.to_core() for bp in payload.break_periods],
    )
    return PayCalculationResponse.model_validate(result)
