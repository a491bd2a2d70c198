"""Local-time arithmetic in a pay guide's timezone."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from shiftpay.calculators.types import Period

END_OF_DAY = "24:00"


def parse_hhmm(value: str) -> tuple[int, int]:
    """Parse "HH:MM" (00:00 to 24:00) into (hour, minute)."""
    hours, _, minutes = value.partition(":")
    hour, minute = int(hours), int(minutes or 0)
    if not (0 <= hour <= 24 and 0 <= minute < 60) or (hour == 24 and minute):
        raise ValueError(f"Invalid local time {value!r}, expected HH:MM")
    return hour, minute


def does_time_wrap(start_time: str, end_time: str) -> bool:
    """True when a start/end window runs past local midnight."""
    if end_time == END_OF_DAY:
        return True
    return parse_hhmm(end_time) <= parse_hhmm(start_time)


class TimeZoneHelper:
    """Converts between instants and local dates/times for one IANA zone."""

    def __init__(self, time_zone: str):
        self.time_zone = time_zone
        self.tz = ZoneInfo(time_zone)

    def to_instant(self, value: datetime) -> datetime:
        """The UTC instant for value; naive datetimes are wall-clock in this zone."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=self.tz)
        return value.astimezone(timezone.utc)

    def to_local(self, value: datetime) -> datetime:
        return self.to_instant(value).astimezone(self.tz)

    def local_date(self, instant: datetime) -> date:
        return self.to_local(instant).date()

    @staticmethod
    def day_of_week(local_day: date) -> int:
        """0=Sunday ... 6=Saturday."""
        return local_day.isoweekday() % 7

    def at_local_time(self, local_day: date, hhmm: str) -> datetime:
        """UTC instant for a wall-clock time on a local day.

        "24:00" is midnight at the start of the following day.
        """
        hour, minute = parse_hhmm(hhmm)
        if hour == 24:
            local_day, hour = local_day + timedelta(days=1), 0
        return self.to_instant(datetime.combine(local_day, time(hour, minute)))

    def local_window(self, local_day: date, start_time: str, end_time: str) -> Period:
        """The window opening on local_day, ending the next day if it wraps."""
        start = self.at_local_time(local_day, start_time)
        if does_time_wrap(start_time, end_time):
            end_day = local_day + timedelta(days=1)
            end_hhmm = "00:00" if end_time == END_OF_DAY else end_time
            end = self.at_local_time(end_day, end_hhmm)
        else:
            end = self.at_local_time(local_day, end_time)
        return Period(start=start, end=end)

    @staticmethod
    def intersect(window: Period, bounds: Period) -> Period | None:
        start = max(window.start, bounds.start)
        end = min(window.end, bounds.end)
        return Period(start=start, end=end) if end > start else None
