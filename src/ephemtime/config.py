"""
Settings read from the environment.

    EPHEMTIME_EPHE_PATH                directory searched for swe_deltat.txt / sedeltat.txt
    EPHEMTIME_DELTAT_FILE              explicit Delta-T file (overrides the search)
    EPHEMTIME_ESPENAK_MEEUS            use the Espenak-Meeus 2006 polynomials (bool)
    EPHEMTIME_TIDAL_ACCELERATION       float, or an ephemeris name such as DE431
    EPHEMTIME_PRECESSION_IAU           none | iau_1976 | iau_2000 | iau_2006
    EPHEMTIME_PRECESSION_COEFFICIENT   vondrak_2011 | williams_1994 | simon_1994 | laskar_1986 | bretagnon_2003
    EPHEMTIME_INCLUDE_DPSI_DEPS        bool
    EPHEMTIME_APPROXIMATE_HORIZONS     bool
    EPHEMTIME_HORIZONS_BEFORE_1980     bool
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Type, TypeVar

from .core.errors import DomainRangeError
from .reference import deltat as dt
from .reference.precession import PrecessionCoefficients, PrecessionConfig, PrecessionIAU

ENV_PREFIX = "EPHEMTIME_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

_TIDAL_NAMES = {
    "26": dt.TIDAL_26,
    "DE200": dt.TIDAL_DE200,
    "DE403": dt.TIDAL_DE403,
    "DE404": dt.TIDAL_DE404,
    "DE405": dt.TIDAL_DE405,
    "DE406": dt.TIDAL_DE406,
    "DE421": dt.TIDAL_DE421,
    "DE430": dt.TIDAL_DE430,
    "DE431": dt.TIDAL_DE431,
    "DEFAULT": dt.TIDAL_DEFAULT,
}

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class Settings:
    ephe_path: Path = Path(".")
    deltat_file: Optional[Path] = None
    use_espenak_meeus_2006: bool = False
    tidal_acceleration: float = dt.TIDAL_DEFAULT
    precession: PrecessionConfig = PrecessionConfig()

    def make_delta_t_engine(self) -> dt.DeltaTEngine:
        from .ephemeris.deltat_file import DeltaTFileSource

        return dt.DeltaTEngine(
            DeltaTFileSource(self.deltat_file, directory=self.ephe_path),
            tidal_acceleration=self.tidal_acceleration,
            use_espenak_meeus_2006=self.use_espenak_meeus_2006,
        )


def parse_bool(name: str, raw: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise DomainRangeError(f"{name}: expected a boolean, got {raw!r}")


def parse_tidal(name: str, raw: str) -> float:
    key = raw.strip().upper()
    if key in _TIDAL_NAMES:
        return _TIDAL_NAMES[key]
    try:
        return float(raw)
    except ValueError:
        raise DomainRangeError(f"{name}: expected a number or one of {sorted(_TIDAL_NAMES)}, got {raw!r}") from None


def parse_enum(name: str, raw: str, enum_cls: Type[E]) -> E:
    v = raw.strip().lower().replace("-", "_")
    for member in enum_cls:
        if v in (str(member.value).lower(), member.name.lower()):
            return member
    choices = ", ".join(str(m.value) for m in enum_cls)
    raise DomainRangeError(f"{name}: expected one of {choices}, got {raw!r}")


def _parse_path(name: str, raw: str) -> Path:
    return Path(raw).expanduser()


# env suffix -> (field, parser); "precession." fields belong to PrecessionConfig
_FIELDS = (
    ("EPHE_PATH", "ephe_path", _parse_path),
    ("DELTAT_FILE", "deltat_file", _parse_path),
    ("ESPENAK_MEEUS", "use_espenak_meeus_2006", parse_bool),
    ("TIDAL_ACCELERATION", "tidal_acceleration", parse_tidal),
    ("PRECESSION_IAU", "precession.use_precession_iau",
     lambda name, raw: parse_enum(name, raw, PrecessionIAU)),
    ("PRECESSION_COEFFICIENT", "precession.use_precession_coefficient",
     lambda name, raw: parse_enum(name, raw, PrecessionCoefficients)),
    ("INCLUDE_DPSI_DEPS", "precession.include_dpsi_deps_iau1980", parse_bool),
    ("APPROXIMATE_HORIZONS", "precession.approximate_horizons_astrodienst", parse_bool),
    ("HORIZONS_BEFORE_1980", "precession.use_horizons_method_before_1980", parse_bool),
)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from `env` (default: os.environ). Unset or blank variables keep defaults."""
    if env is None:
        env = os.environ

    top = {}
    prec = {}
    for suffix, field, parse in _FIELDS:
        name = ENV_PREFIX + suffix
        raw = env.get(name)
        if raw is None or not raw.strip():
            continue
        if field.startswith("precession."):
            prec[field.split(".", 1)[1]] = parse(name, raw)
        else:
            top[field] = parse(name, raw)

    s = Settings()
    if prec:
        top["precession"] = replace(s.precession, **prec)
    return replace(s, **top)
