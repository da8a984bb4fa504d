"""ephemtime public API.

Calendar <-> Julian Day conversion, Delta-T, Ephemeris Time and the mean
obliquity of the ecliptic. Most users only need the functions re-exported here.
"""

from .api import (
    adelta_t,
    date_from_julian_day,
    day_of_week,
    default_calendar,
    delta_t,
    ephemeris_time,
    get_delta_t_engine,
    get_settings,
    julian_day_from_date,
    obliquity,
    set_delta_t_engine,
    set_settings,
)
from .core.errors import DataSourceError, DomainRangeError, EphemTimeError, UnsupportedOperationError
from .core.types import (
    CalendarDate,
    CalendarSystem,
    DeltaTRecord,
    EphemerisTime,
    JulianDay,
    SiderealTime,
    WeekDay,
)
from .reference.deltat import DeltaTEngine
from .reference.precession import JplHorizonMode, PrecessionCoefficients, PrecessionConfig, PrecessionIAU

__all__ = [
    "adelta_t",
    "date_from_julian_day",
    "day_of_week",
    "default_calendar",
    "delta_t",
    "ephemeris_time",
    "get_delta_t_engine",
    "get_settings",
    "julian_day_from_date",
    "obliquity",
    "set_delta_t_engine",
    "set_settings",
    "CalendarDate",
    "CalendarSystem",
    "DeltaTRecord",
    "EphemerisTime",
    "JulianDay",
    "SiderealTime",
    "WeekDay",
    "DeltaTEngine",
    "JplHorizonMode",
    "PrecessionCoefficients",
    "PrecessionConfig",
    "PrecessionIAU",
    "EphemTimeError",
    "DomainRangeError",
    "UnsupportedOperationError",
    "DataSourceError",
]
