"""Penalty and overtime rule resolution over a shift."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from shiftpay.calculators.break_calculator import BreakCalculator
from shiftpay.calculators.time_calculations import (
    minutes_between,
    minutes_to_hours,
    round_to_cents,
)
from shiftpay.calculators.timezone_helper import END_OF_DAY, TimeZoneHelper
from shiftpay.calculators.types import (
    ZERO,
    AppliedOvertime,
    AppliedPenalty,
    BreakPeriod,
    OvertimeRateRule,
    OvertimeTimeFrame,
    PayGuide,
    PenaltyRateRule,
    PenaltyTimeFrame,
    Period,
    PublicHoliday,
    RateRule,
    RuleType,
)

logger = logging.getLogger(__name__)

FIRST_TIER_HOURS = Decimal("3")
ONE_SECOND = timedelta(seconds=1)


class TimeRuleEngine:
    """Resolves which penalty/overtime rates apply to each part of a shift.

    Pipeline:
    1) collect_applicable_rules: every active frame becomes zero or more
       RateRules, each a concrete sub-period of the shift
    2) select_optimal_rules: boundary sweep picking the best rule for every
       elementary interval (highest multiplier, then overtime over penalty,
       then input order), coalescing neighbours from the same frame
    3) create_applied_penalty / create_applied_overtimes: subtract break time
       and price the selected periods

    The pay guide and holidays are fixed for the engine's lifetime; no method
    mutates its inputs.
    """

    def __init__(self, pay_guide: PayGuide, public_holidays: Sequence[PublicHoliday] = ()):
        self.pay_guide = pay_guide
        self.tz_helper = TimeZoneHelper(pay_guide.timezone)
        self._holiday_dates = frozenset(h.date for h in public_holidays if h.is_active)

    # === Rule collection ===

    def collect_applicable_rules(
        self,
        shift_start: datetime,
        shift_end: datetime,
        penalty_time_frames: Sequence[PenaltyTimeFrame],
        overtime_time_frames: Sequence[OvertimeTimeFrame],
        overtime_hours: Decimal,
        break_periods: Sequence[BreakPeriod],
    ) -> list[RateRule]:
        rules: list[RateRule] = []

        for ptf in penalty_time_frames:
            if not ptf.is_active:
                continue
            for period in self.find_rule_periods(shift_start, shift_end, ptf):
                rules.append(
                    PenaltyRateRule(period=period, time_frame=ptf, multiplier=ptf.multiplier)
                )

        if overtime_hours > 0:
            overtime_start = self.calculate_overtime_start(
                shift_start, shift_end, break_periods, overtime_hours
            )
            for otf in overtime_time_frames:
                if not otf.is_active:
                    continue
                # Frames are matched against the overtime tail only
                for period in self.find_rule_periods(overtime_start, shift_end, otf):
                    rules.append(
                        OvertimeRateRule(
                            period=period,
                            time_frame=otf,
                            multiplier=otf.first_three_hours_mult,
                        )
                    )

        return rules

    def find_rule_periods(
        self,
        shift_start: datetime,
        shift_end: datetime,
        time_frame: PenaltyTimeFrame | OvertimeTimeFrame,
    ) -> list[Period]:
        """Sub-periods of [shift_start, shift_end) where the frame's conditions hold.

        Day-of-week, time window and public holiday conditions combine with
        AND. A frame with no conditions covers the whole span.
        """
        shift_start = self.tz_helper.to_instant(shift_start)
        shift_end = self.tz_helper.to_instant(shift_end)
        if shift_end <= shift_start:
            return []

        has_window = bool(time_frame.start_time and time_frame.end_time)
        if (
            time_frame.day_of_week is None
            and not has_window
            and not time_frame.is_public_holiday
        ):
            return [Period(start=shift_start, end=shift_end)]

        window_start = time_frame.start_time if has_window else "00:00"
        window_end = time_frame.end_time if has_window else END_OF_DAY
        bounds = Period(start=shift_start, end=shift_end)

        # Start a day early so a window wrapping past midnight into the
        # shift's first local day is seen.
        day = self.tz_helper.local_date(shift_start) - timedelta(days=1)
        last_day = self.tz_helper.local_date(shift_end)

        periods: list[Period] = []
        while day <= last_day:
            if self._day_matches(day, time_frame):
                window = self.tz_helper.local_window(day, window_start, window_end)
                intersection = self.tz_helper.intersect(window, bounds)
                if intersection is not None:
                    periods.append(intersection)
            day += timedelta(days=1)

        return periods

    def _day_matches(self, day: date, time_frame: PenaltyTimeFrame | OvertimeTimeFrame) -> bool:
        if (
            time_frame.day_of_week is not None
            and self.tz_helper.day_of_week(day) != time_frame.day_of_week
        ):
            return False
        if time_frame.is_public_holiday and not self.is_public_holiday(day):
            return False
        return True

    def is_public_holiday(self, day: date) -> bool:
        return day in self._holiday_dates

    def calculate_overtime_start(
        self,
        shift_start: datetime,
        shift_end: datetime,
        break_periods: Sequence[BreakPeriod],
        overtime_hours: Decimal,
    ) -> datetime:
        """Instant from which the last overtime_hours of worked time run to shift_end.

        Break time inside the tail does not count toward the overtime span.
        """
        shift_start = self.tz_helper.to_instant(shift_start)
        shift_end = self.tz_helper.to_instant(shift_end)
        remaining = (overtime_hours * 3600).to_integral_value(rounding=ROUND_HALF_UP)

        for segment in reversed(self._worked_segments(shift_start, shift_end, break_periods)):
            segment_seconds = (segment.end - segment.start) // ONE_SECOND
            if segment_seconds >= remaining:
                return segment.end - timedelta(seconds=int(remaining))
            remaining -= segment_seconds

        return shift_start

    def _worked_segments(
        self,
        shift_start: datetime,
        shift_end: datetime,
        break_periods: Sequence[BreakPeriod],
    ) -> list[Period]:
        to_instant = self.tz_helper.to_instant
        breaks = sorted(
            (
                Period(start=to_instant(bp.start_time), end=to_instant(bp.end_time))
                for bp in break_periods
            ),
            key=lambda p: p.start,
        )

        segments: list[Period] = []
        cursor = shift_start
        for bp in breaks:
            start = max(bp.start, shift_start)
            end = min(bp.end, shift_end)
            if end <= cursor:
                continue
            if start > cursor:
                segments.append(Period(start=cursor, end=start))
            cursor = max(cursor, end)
        if cursor < shift_end:
            segments.append(Period(start=cursor, end=shift_end))
        return segments

    # === Rule selection ===

    def select_optimal_rules(self, rules: Sequence[RateRule]) -> list[RateRule]:
        """Non-overlapping, time-ordered partition of the best rule per instant."""
        if not rules:
            return []

        time_points = sorted(
            {r.period.start for r in rules} | {r.period.end for r in rules}
        )
        selected: list[RateRule] = []

        for segment_start, segment_end in zip(time_points, time_points[1:]):
            best = self._find_highest_rate_rule(rules, segment_start, segment_end)
            if best is None:
                continue

            previous = selected[-1] if selected else None
            if (
                previous is not None
                and previous.rule_type == best.rule_type
                and previous.time_frame.id == best.time_frame.id
                and previous.multiplier == best.multiplier
                and previous.period.end == segment_start
            ):
                selected[-1] = previous.with_period(
                    Period(start=previous.period.start, end=segment_end)
                )
            else:
                selected.append(best.with_period(Period(start=segment_start, end=segment_end)))

        logger.debug(
            "Selected %d of %d rate rules for %s", len(selected), len(rules), self.pay_guide.name
        )
        return selected

    @staticmethod
    def _rank(rule: RateRule) -> tuple[Decimal, bool]:
        return rule.multiplier, rule.rule_type == RuleType.OVERTIME

    def _find_highest_rate_rule(
        self,
        rules: Sequence[RateRule],
        segment_start: datetime,
        segment_end: datetime,
    ) -> RateRule | None:
        best: RateRule | None = None
        for rule in rules:
            if rule.period.start <= segment_start and rule.period.end >= segment_end:
                # Strict comparison keeps the earliest rule on a full tie
                if best is None or self._rank(rule) > self._rank(best):
                    best = rule
        return best

    # === Pricing ===

    def rate_for(self, multiplier: Decimal) -> Decimal:
        return self.pay_guide.base_rate * multiplier

    def _worked_hours(self, period: Period, break_periods: Sequence[BreakPeriod]) -> Decimal:
        minutes = minutes_between(period.start, period.end)
        break_minutes = BreakCalculator.calculate_break_overlap(period, break_periods)
        return minutes_to_hours(max(0, minutes - break_minutes))

    def create_applied_penalty(
        self,
        rule: PenaltyRateRule,
        break_periods: Sequence[BreakPeriod],
        available_regular_hours: Decimal,
    ) -> AppliedPenalty | None:
        """Price a penalty period, capped at the regular hours still unbilled."""
        hours = min(self._worked_hours(rule.period, break_periods), available_regular_hours)
        if hours <= 0:
            return None

        time_frame = rule.time_frame
        return AppliedPenalty(
            time_frame_id=time_frame.id,
            name=time_frame.name,
            multiplier=time_frame.multiplier,
            hours=hours,
            pay=round_to_cents(hours * self.rate_for(time_frame.multiplier)),
            start_time=self.tz_helper.to_local(rule.period.start),
            end_time=self.tz_helper.to_local(rule.period.end),
        )

    def create_applied_overtimes(
        self,
        rule: OvertimeRateRule,
        break_periods: Sequence[BreakPeriod],
        prior_overtime_hours: Decimal = ZERO,
    ) -> list[AppliedOvertime]:
        """Split an overtime period into first-three-hours and remainder tiers.

        prior_overtime_hours is overtime already billed earlier in the same
        shift; it uses up first-tier capacity.
        """
        hours = self._worked_hours(rule.period, break_periods)
        if hours <= 0:
            return []

        time_frame = rule.time_frame
        first_tier_capacity = max(ZERO, FIRST_TIER_HOURS - prior_overtime_hours)
        first_tier_hours = min(hours, first_tier_capacity)
        second_tier_hours = hours - first_tier_hours

        results: list[AppliedOvertime] = []
        for tier_hours, multiplier in (
            (first_tier_hours, time_frame.first_three_hours_mult),
            (second_tier_hours, time_frame.after_three_hours_mult),
        ):
            if tier_hours <= 0:
                continue
            results.append(
                AppliedOvertime(
                    time_frame_id=time_frame.id,
                    name=time_frame.name,
                    multiplier=multiplier,
                    hours=tier_hours,
                    pay=round_to_cents(tier_hours * self.rate_for(multiplier)),
                    start_time=self.tz_helper.to_local(rule.period.start),
                    end_time=self.tz_helper.to_local(rule.period.end),
                )
            )
        return results
