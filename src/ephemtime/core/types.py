from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, IntEnum
from typing import Optional

from .errors import DomainRangeError

class CalendarSystem(Enum):
    GREGORIAN = "gregorian"
    JULIAN = "julian"

    def __str__(self) -> str:
        return self.value.title()

class WeekDay(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    def __str__(self) -> str:
        return self.name.title()

def _check_range(name: str, value: int, lo: int, hi: int) -> None:
    if not (lo <= value <= hi):
        raise DomainRangeError(f"{name} must be in [{lo}, {hi}], got {value!r}")

@dataclass(frozen=True, order=True)
class CalendarDate:
    """
    Plain calendar date and time of day.

    Years use astronomical numbering (0 = 1 BC, -1 = 2 BC). The day of the month
    is not bounded so that conversions can round-trip whatever they are given.
    """
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    def __post_init__(self) -> None:
        _check_range("month", self.month, 1, 12)
        _check_range("hour", self.hour, 0, 23)
        _check_range("minute", self.minute, 0, 59)
        _check_range("second", self.second, 0, 59)

    @property
    def hour_value(self) -> float:
        """Time of day as decimal hours."""
        from .time import hour_value
        return hour_value(self.hour, self.minute, self.second)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "CalendarDate":
        return cls(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second)

    def to_datetime(self) -> datetime:
        """Naive datetime; only years 1..9999 are representable."""
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def format(self, pattern: Optional[str] = None) -> str:
        from .formatting import format_date
        return format_date(self, pattern)

    def __str__(self) -> str:
        return self.format()

    # Arithmetic goes through a Gregorian Julian Day.
    def __add__(self, other: object) -> "CalendarDate":
        if not isinstance(other, timedelta):
            return NotImplemented
        from .time import calendar_date_from_julian_day, julian_day_from_date
        jd = julian_day_from_date(self, CalendarSystem.GREGORIAN)
        return calendar_date_from_julian_day(jd + other.total_seconds() / 86400.0, CalendarSystem.GREGORIAN)

    __radd__ = __add__

    def __sub__(self, other: object):
        from .time import julian_day_from_date
        if isinstance(other, timedelta):
            return self + (-other)
        if isinstance(other, CalendarDate):
            a = julian_day_from_date(self, CalendarSystem.GREGORIAN)
            b = julian_day_from_date(other, CalendarSystem.GREGORIAN)
            return timedelta(seconds=round((a - b) * 86400.0))
        return NotImplemented

@dataclass(frozen=True)
class JulianDay:
    """
    Julian Day in Universal Time.

    The calendar tag only matters when converting back to a calendar date; the
    numeric value is calendar independent. When omitted it is derived from the
    value (Gregorian from JD 2299160.5 onward).
    """
    value: float
    calendar: Optional[CalendarSystem] = field(default=None)

    J2000 = 2451545.0
    B1950 = 2433282.42345905
    J1900 = 2415020.0
    GREGORIAN_FIRST_JD = 2299160.5

    def __post_init__(self) -> None:
        if self.calendar is None:
            from .time import default_calendar_for_jd
            object.__setattr__(self, "calendar", default_calendar_for_jd(self.value))

    @classmethod
    def from_components(
        cls,
        year: int,
        month: int,
        day: int,
        hour: float = 0.0,
        calendar: Optional[CalendarSystem] = None,
    ) -> "JulianDay":
        from .time import default_calendar, julian_day_from_components
        cal = calendar if calendar is not None else default_calendar(year, month, day)
        return cls(julian_day_from_components(year, month, day, hour, cal), cal)

    @classmethod
    def from_date(cls, d: CalendarDate, calendar: Optional[CalendarSystem] = None) -> "JulianDay":
        from .time import default_calendar, julian_day_from_date
        cal = calendar if calendar is not None else default_calendar(d.year, d.month, d.day)
        return cls(julian_day_from_date(d, cal), cal)

    @classmethod
    def from_datetime(cls, dt: datetime) -> "JulianDay":
        """Naive (or UTC) datetime -> JD, proleptic Gregorian."""
        from .time import datetime_to_jd
        return cls(datetime_to_jd(dt))

    def to_float(self) -> float:
        return self.value

    def to_calendar_date(self) -> CalendarDate:
        from .time import calendar_date_from_julian_day
        return calendar_date_from_julian_day(self.value, self.calendar)

    def to_datetime(self) -> datetime:
        return self.to_calendar_date().to_datetime()

    def day_of_week(self) -> WeekDay:
        from .time import day_of_week
        return day_of_week(self.value)

    def __str__(self) -> str:
        return repr(self.value)

@dataclass(frozen=True)
class DeltaTRecord:
    """One tabulated Delta-T value (seconds) for the start of a year."""
    year: int
    value: float

@dataclass(frozen=True)
class EphemerisTime:
    julian_day: JulianDay
    delta_t: float  # days

    @classmethod
    def from_julian_day(cls, jd: JulianDay, engine=None) -> "EphemerisTime":
        if engine is None:
            from ..api import get_delta_t_engine
            engine = get_delta_t_engine()
        return cls(jd, engine.delta_t(jd.value))

    @property
    def value(self) -> float:
        return self.julian_day.value + self.delta_t

    def to_float(self) -> float:
        return self.value

    def to_calendar_date(self) -> CalendarDate:
        """Calendar date of the underlying Universal Time Julian Day."""
        return self.julian_day.to_calendar_date()

    def __str__(self) -> str:
        return repr(self.value)

@dataclass(frozen=True)
class SiderealTime:
    """Sidereal time in hours."""
    value: float

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        from .formatting import format_as_time
        return format_as_time(self.value)
