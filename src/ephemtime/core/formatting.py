from __future__ import annotations

import math
from typing import Optional

from .types import CalendarDate

DEFAULT_DATE_PATTERN = "dd/MM/yyyy HH:mm:ss"

_DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
_MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_as_degrees(value: float) -> str:
    """Format degrees as ' DDD° MM' SS.SSSS' (leading '-' when negative)."""
    minus = value < 0
    value = abs(value)
    deg = int(value)
    mins = int((value * 60.0) % 60.0)
    sec = (value * 3600.0) % 60.0
    return f"{'-' if minus else ' '}{deg:3d}° {mins:2d}' {sec:7.4f}"


def format_as_hour(value: float) -> str:
    """Format hours as 'H h MM m SS s'."""
    hours = int(value)
    value = abs(value)
    mins = int((value * 60.0) % 60.0)
    sec = int((value * 3600.0) % 60.0)
    return f"{hours:2d} h {mins:02d} m {sec:02d} s"


def format_as_time(value: float) -> str:
    """Format hours as 'HH:MM:SS'."""
    hours = int(value)
    value = abs(value)
    mins = int((value * 60.0) % 60.0)
    sec = int((value * 3600.0) % 60.0)
    return f"{hours:02d}:{mins:02d}:{sec:02d}"


def format_date(d: CalendarDate, pattern: Optional[str] = None) -> str:
    """
    Format a CalendarDate with a .NET-like pattern.

    Tokens: d dd ddd dddd, M MM MMM MMMM, y yy yyyy, h hh, H HH, m mm, s ss,
    t tt. A backslash escapes the next character; anything else is literal.
    Day and month names are English.
    """
    from .time import day_of_week, julian_day_from_date

    if not pattern or not pattern.strip():
        pattern = DEFAULT_DATE_PATTERN

    out = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            i += 1
            out.append(pattern[i] if i < n else "\\")
            i += 1
            continue
        if c not in "dMyhHmst":
            out.append(c)
            i += 1
            continue

        cnt = 1
        while i + cnt < n and pattern[i + cnt] == c:
            cnt += 1
        i += cnt

        if c == "d":
            if cnt == 1:
                out.append(str(d.day))
            elif cnt == 2:
                out.append(f"{d.day:02d}")
            else:
                # WeekDay counts from Monday, the name table from Sunday
                nd = (int(day_of_week(julian_day_from_date(d))) + 1) % 7
                name = _DAY_NAMES[nd]
                out.append(name[:3] if cnt == 3 else name)
        elif c == "M":
            if cnt == 1:
                out.append(str(d.month))
            elif cnt == 2:
                out.append(f"{d.month:02d}")
            else:
                name = _MONTH_NAMES[d.month - 1]
                out.append(name[:3] if cnt == 3 else name)
        elif c == "y":
            # truncated remainder: year -1 gives -1, not 99
            yy = int(math.fmod(d.year, 100))
            if cnt == 1:
                out.append(str(yy))
            elif cnt == 2:
                out.append(f"{'-' if yy < 0 else ''}{abs(yy):02d}")
            else:
                out.append(str(d.year))
        elif c == "h":
            out.append(str(d.hour % 12) if cnt == 1 else f"{d.hour % 12:02d}")
        elif c == "H":
            out.append(str(d.hour) if cnt == 1 else f"{d.hour:02d}")
        elif c == "m":
            out.append(str(d.minute) if cnt == 1 else f"{d.minute:02d}")
        elif c == "s":
            out.append(str(d.second) if cnt == 1 else f"{d.second:02d}")
        elif c == "t":
            des = "AM" if d.hour < 12 else "PM"
            out.append(des[0] if cnt == 1 else des)
    return "".join(out)
