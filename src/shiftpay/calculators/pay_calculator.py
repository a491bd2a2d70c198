"""Shift pay calculation - main orchestrator."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from shiftpay.calculators.time_calculations import (
    adjust_end_time_for_minimum_shift,
    calculate_overtime_hours,
    calculate_worked_hours,
    round_to_cents,
    sum_hours,
)
from shiftpay.calculators.time_rule_engine import TimeRuleEngine
from shiftpay.calculators.types import (
    ZERO,
    AppliedOvertime,
    AppliedPenalty,
    BreakPeriod,
    OvertimeRateRule,
    OvertimeTimeFrame,
    PayBreakdown,
    PayCalculationResult,
    PayGuide,
    PenaltyRateRule,
    PenaltyTimeFrame,
    PublicHoliday,
    RateRule,
    ShiftSummary,
)
from shiftpay.calculators.validation import validate_pay_guide, validate_shift_times
from shiftpay.config import get_settings

logger = logging.getLogger(__name__)


class PayCalculator:
    """Calculates the pay breakdown for a shift under one pay guide.

    Calculation pipeline (stable order per shift):
    1) Validate shift and breaks
    2) Extend shifts shorter than the guide minimum
    3) Worked hours = elapsed shift time minus break time
    4) Split worked hours into regular and overtime at the guide's threshold
    5) Collect and select penalty/overtime rules
    6) Price selected rules; penalties draw down unbilled regular hours
    7) Remaining worked hours are paid at the base rate

    Pay is accumulated at full precision. base_pay, overtime_pay and
    penalty_pay are each rounded once, and total_pay is their sum.
    """

    def __init__(
        self,
        pay_guide: PayGuide,
        penalty_time_frames: Sequence[PenaltyTimeFrame] = (),
        overtime_time_frames: Sequence[OvertimeTimeFrame] = (),
        public_holidays: Sequence[PublicHoliday] = (),
        default_maximum_shift_hours: Decimal | None = None,
    ):
        validate_pay_guide(pay_guide)
        self.pay_guide = pay_guide
        self.penalty_time_frames = [ptf for ptf in penalty_time_frames if ptf.is_active]
        self.overtime_time_frames = [otf for otf in overtime_time_frames if otf.is_active]
        self.public_holidays = [ph for ph in public_holidays if ph.is_active]
        self.rule_engine = TimeRuleEngine(pay_guide, self.public_holidays)

        if pay_guide.maximum_shift_hours:
            self.regular_hours_threshold = pay_guide.maximum_shift_hours
        elif default_maximum_shift_hours is not None:
            self.regular_hours_threshold = default_maximum_shift_hours
        else:
            self.regular_hours_threshold = get_settings().default_maximum_shift_hours

    def calculate(
        self,
        start_time: datetime,
        end_time: datetime,
        break_periods: Sequence[BreakPeriod] = (),
    ) -> PayCalculationResult:
        """Calculate the complete pay breakdown for a shift.

        Naive datetimes are read as wall-clock times in the pay guide's zone.
        Reported times are in the pay guide's zone.

        Raises:
            ShiftValidationError: If the shift bounds are malformed
            BreakValidationError: If a break is malformed or outside the shift
        """
        tz_helper = self.rule_engine.tz_helper
        # All arithmetic below runs on UTC instants
        start_time = tz_helper.to_instant(start_time)
        end_time = tz_helper.to_instant(end_time)
        break_periods = [
            BreakPeriod(
                start_time=tz_helper.to_instant(bp.start_time),
                end_time=tz_helper.to_instant(bp.end_time),
            )
            for bp in break_periods
        ]

        validate_shift_times(start_time, end_time, break_periods)
        end_time = adjust_end_time_for_minimum_shift(
            start_time, end_time, self.pay_guide.minimum_shift_hours
        )

        total_hours, _, _ = calculate_worked_hours(start_time, end_time, break_periods)
        overtime_hours, regular_hours = calculate_overtime_hours(
            total_hours, self.regular_hours_threshold
        )

        all_rules = self.rule_engine.collect_applicable_rules(
            start_time,
            end_time,
            self.penalty_time_frames,
            self.overtime_time_frames,
            overtime_hours,
            break_periods,
        )
        selected_rules = self.rule_engine.select_optimal_rules(all_rules)

        penalties, overtimes = self._apply_selected_rules(
            selected_rules, break_periods, regular_hours
        )

        penalty_hours = sum_hours(penalties)
        billed_overtime_hours = sum_hours(overtimes)
        # Overtime hours no overtime frame billed fall back to the base rate
        base_hours = max(ZERO, total_hours - penalty_hours - billed_overtime_hours)

        base_pay = round_to_cents(base_hours * self.pay_guide.base_rate)
        penalty_pay = round_to_cents(self._exact_pay(penalties))
        overtime_pay = round_to_cents(self._exact_pay(overtimes))

        logger.debug(
            "Shift %s-%s: %s worked hours, %s overtime, %d penalty rows, %d overtime rows",
            start_time.isoformat(),
            end_time.isoformat(),
            total_hours,
            overtime_hours,
            len(penalties),
            len(overtimes),
        )

        return PayCalculationResult(
            shift=ShiftSummary(
                start_time=tz_helper.to_local(start_time),
                end_time=tz_helper.to_local(end_time),
                break_periods=[
                    BreakPeriod(
                        start_time=tz_helper.to_local(bp.start_time),
                        end_time=tz_helper.to_local(bp.end_time),
                    )
                    for bp in break_periods
                ],
                total_hours=total_hours,
            ),
            breakdown=PayBreakdown(
                base_hours=base_hours,
                base_pay=base_pay,
                overtime_hours=billed_overtime_hours,
                overtime_pay=overtime_pay,
                penalty_hours=penalty_hours,
                penalty_pay=penalty_pay,
                total_pay=base_pay + overtime_pay + penalty_pay,
            ),
            penalties=penalties,
            overtimes=overtimes,
            pay_guide_name=self.pay_guide.name,
            base_rate=self.pay_guide.base_rate,
        )

    def _apply_selected_rules(
        self,
        selected_rules: Sequence[RateRule],
        break_periods: Sequence[BreakPeriod],
        regular_hours: Decimal,
    ) -> tuple[list[AppliedPenalty], list[AppliedOvertime]]:
        penalties: list[AppliedPenalty] = []
        overtimes: list[AppliedOvertime] = []
        available_regular_hours = regular_hours

        for rule in selected_rules:
            if isinstance(rule, PenaltyRateRule):
                penalty = self.rule_engine.create_applied_penalty(
                    rule, break_periods, available_regular_hours
                )
                if penalty is not None:
                    penalties.append(penalty)
                    available_regular_hours -= penalty.hours
            elif isinstance(rule, OvertimeRateRule):
                overtimes.extend(
                    self.rule_engine.create_applied_overtimes(
                        rule, break_periods, prior_overtime_hours=sum_hours(overtimes)
                    )
                )

        return penalties, overtimes

    def _exact_pay(self, rows: Sequence[AppliedPenalty | AppliedOvertime]) -> Decimal:
        """Unrounded pay for applied rows."""
        return sum(
            (row.hours * self.rule_engine.rate_for(row.multiplier) for row in rows),
            ZERO,
        )


def calculate_total_hours(
    start_time: datetime,
    end_time: datetime,
    break_periods: Sequence[BreakPeriod] = (),
) -> Decimal:
    """Worked hours for a shift, net of breaks."""
    total_hours, _, _ = calculate_worked_hours(start_time, end_time, break_periods)
    return total_hours
