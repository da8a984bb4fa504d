"""
ephemtime.core.time
-------------------
Calendar date <-> Julian Day conversion (Julian and Gregorian calendars).

JD 0.0 is noon of 1 January -4712 in the Julian calendar; midnight always has a
fractional part of .5. Years use astronomical numbering: year 0 is 1 BC, year
-1 is 2 BC and so on.

References: O. Montenbruck, Grundlagen der Ephemeridenrechnung (1987), p.49 ff.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from .types import CalendarDate, CalendarSystem, WeekDay

J2000 = 2451545.0
GREGORIAN_FIRST_JD = 2299160.5   # 1582-10-15 00:00 Gregorian
GREGORIAN_FIRST_DATE = 15821015  # yyyymmdd

_JD_UNIX_EPOCH = 2440587.5  # JD at 1970-01-01 00:00:00 UTC
_UNIX_EPOCH = datetime(1970, 1, 1)


def hour_value(hour: int, minute: int, second: int) -> float:
    """Decimal hours."""
    return hour + minute / 60.0 + second / 3600.0


def default_calendar(year: int, month: int, day: int) -> CalendarSystem:
    """Gregorian from 1582-10-15 onward, Julian before."""
    ymd = year * 10000 + month * 100 + day
    return CalendarSystem.GREGORIAN if ymd >= GREGORIAN_FIRST_DATE else CalendarSystem.JULIAN


def default_calendar_for_jd(jd: float) -> CalendarSystem:
    return CalendarSystem.JULIAN if jd < GREGORIAN_FIRST_JD else CalendarSystem.GREGORIAN


def julian_day_from_components(
    year: int,
    month: int,
    day: int,
    hour: float,
    calendar: CalendarSystem,
) -> float:
    """
    Absolute Julian Day for a calendar date and decimal hour.

    Algorithm by Marc Pottenger with the year < -4711 fix by Alois Treindl.
    """
    u = float(year)
    if month < 3:
        u -= 1.0
    u0 = u + 4712.0
    u1 = month + 1.0
    if u1 < 4:
        u1 += 12.0
    jd = math.floor(u0 * 365.25) + math.floor(30.6 * u1 + 0.000001) + day + hour / 24.0 - 63.5
    if calendar is CalendarSystem.GREGORIAN:
        u2 = math.floor(abs(u) / 100) - math.floor(abs(u) / 400)
        if u < 0.0:
            u2 = -u2
        jd = jd - u2 + 2
        # negative century years that are not leap years
        if u < 0.0 and u / 100 == math.floor(u / 100) and u / 400 != math.floor(u / 400):
            jd -= 1
    return jd


def julian_day_from_date(d: CalendarDate, calendar: Optional[CalendarSystem] = None) -> float:
    if calendar is None:
        calendar = default_calendar(d.year, d.month, d.day)
    return julian_day_from_components(d.year, d.month, d.day, d.hour_value, calendar)


def calendar_date_from_julian_day(jd: float, calendar: Optional[CalendarSystem] = None) -> CalendarDate:
    """
    Inverse of julian_day_from_components.

    The time of day gets a 0.5 s bias before truncation to whole seconds; when
    that carries it to 24:00 the result is 00:00:00 of the following day.
    """
    if calendar is None:
        calendar = default_calendar_for_jd(jd)

    u0 = jd + 32082.5
    if calendar is CalendarSystem.GREGORIAN:
        u1 = u0 + math.floor(u0 / 36525.0) - math.floor(u0 / 146100.0) - 38.0
        if jd >= 1830691.5:
            u1 += 1
        u0 = u0 + math.floor(u1 / 36525.0) - math.floor(u1 / 146100.0) - 38.0
    u2 = math.floor(u0 + 123.0)
    u3 = math.floor((u2 - 122.2) / 365.25)
    u4 = math.floor((u2 - math.floor(365.25 * u3)) / 30.6001)
    month = int(u4 - 1.0)
    if month > 12:
        month -= 12
    day = int(u2 - math.floor(365.25 * u3) - math.floor(30.6001 * u4))
    year = int(u3 + math.floor((u4 - 2.0) / 12.0) - 4800)

    jut = (jd - math.floor(jd + 0.5) + 0.5) * 24.0
    jut += 0.5 / 3600.0
    hour = int(jut)
    if hour >= 24:
        return calendar_date_from_julian_day(math.floor(jd + 0.5) + 0.5, calendar)
    minute = int(math.floor(math.fmod(jut * 60.0, 60.0)))
    second = int(math.floor(math.fmod(jut * 3600.0, 60.0)))
    return CalendarDate(year, month, day, hour, minute, second)


def day_of_week(jd: float) -> WeekDay:
    """Weekday of the civil day containing jd (0 = Monday)."""
    return WeekDay(((math.floor(jd - 2433282 - 1.5) % 7) + 7) % 7)


def datetime_to_jd(dt: datetime) -> float:
    """
    datetime -> JD (proleptic Gregorian). Naive datetimes are taken as UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return _JD_UNIX_EPOCH + (dt - _UNIX_EPOCH).total_seconds() / 86400.0


def T_centuries(jd: float) -> float:
    """Julian centuries from J2000.0."""
    return (jd - J2000) / 36525.0
