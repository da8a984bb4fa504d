from __future__ import annotations

import threading
from typing import Optional, Union

from .config import Settings, load_settings
from .core import time as _time
from .core.types import CalendarDate, CalendarSystem, EphemerisTime, JulianDay, WeekDay
from .reference import precession as _prec
from .reference.deltat import DeltaTEngine

JDLike = Union[float, int, JulianDay]

_settings: Optional[Settings] = None
_engine: Optional[DeltaTEngine] = None
_lock = threading.Lock()


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    global _settings
    if _settings is None:
        with _lock:
            if _settings is None:
                _settings = load_settings()
    return _settings


def set_settings(settings: Optional[Settings]) -> None:
    """Replace the settings; None re-reads the environment on next use."""
    global _settings
    with _lock:
        _settings = settings


def get_delta_t_engine() -> DeltaTEngine:
    global _engine
    if _engine is None:
        s = get_settings()
        with _lock:
            if _engine is None:
                _engine = s.make_delta_t_engine()
    return _engine


def set_delta_t_engine(engine: Optional[DeltaTEngine]) -> None:
    """Install a Delta-T engine; None rebuilds one from the settings on next use."""
    global _engine
    with _lock:
        _engine = engine


def _jd(jd: JDLike) -> float:
    return jd.value if isinstance(jd, JulianDay) else float(jd)


def _as_julian_day(jd: JDLike) -> JulianDay:
    return jd if isinstance(jd, JulianDay) else JulianDay(float(jd))


def julian_day_from_date(d: CalendarDate, calendar: Optional[CalendarSystem] = None) -> float:
    return _time.julian_day_from_date(d, calendar)


def date_from_julian_day(jd: JDLike, calendar: Optional[CalendarSystem] = None) -> CalendarDate:
    if calendar is None and isinstance(jd, JulianDay):
        calendar = jd.calendar
    return _time.calendar_date_from_julian_day(_jd(jd), calendar)


def default_calendar(year: int, month: int, day: int) -> CalendarSystem:
    return _time.default_calendar(year, month, day)


def day_of_week(jd: JDLike) -> WeekDay:
    return _time.day_of_week(_jd(jd))


def delta_t(jd: JDLike) -> float:
    """Delta-T in days from the process-wide engine."""
    return get_delta_t_engine().delta_t(_jd(jd))


async def adelta_t(jd: JDLike) -> float:
    return await get_delta_t_engine().adelta_t(_jd(jd))


def ephemeris_time(jd: JDLike) -> EphemerisTime:
    return EphemerisTime.from_julian_day(_as_julian_day(jd), get_delta_t_engine())


def obliquity(
    jd: JDLike,
    horizon_mode: _prec.JplHorizonMode = _prec.JplHorizonMode.NONE,
    config: Optional[_prec.PrecessionConfig] = None,
) -> float:
    """Mean obliquity (radians); config defaults to the process settings."""
    if config is None:
        config = get_settings().precession
    return _prec.obliquity(_jd(jd), horizon_mode, config)
