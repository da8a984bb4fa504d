"""
Geographic coordinates in degrees/minutes/seconds.

Conventions
-----------
- Latitude is positive North, longitude positive East.
- Degrees are whole numbers below 180; `value` is the signed decimal degree
  recomposed from the (truncated) d/m/s parts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .core.errors import DomainRangeError


class LatitudePolarity(Enum):
    NORTH = "N"
    SOUTH = "S"


class LongitudePolarity(Enum):
    EAST = "E"
    WEST = "W"


def _split_dms(value: float) -> Tuple[int, int, int, int]:
    """Signed decimal degrees -> (sign, degrees, minutes, seconds), truncating."""
    sign = (value > 0) - (value < 0)
    a = abs(value)
    deg = int(a)
    mins = int(a * 60.0) % 60
    sec = int(a * 3600.0) % 60
    while deg >= 180:
        deg -= 180
    return sign, deg, mins, sec


def _check_components(degrees: int, minutes: int, seconds: int, *, signed: bool) -> None:
    if signed:
        if not (-180 < degrees < 180):
            raise DomainRangeError(f"degrees must be in (-180, 180), got {degrees!r}")
    elif not (0 <= degrees < 180):
        raise DomainRangeError(f"degrees must be in [0, 180), got {degrees!r}")
    if not (0 <= minutes < 60):
        raise DomainRangeError(f"minutes must be in [0, 60), got {minutes!r}")
    if not (0 <= seconds < 60):
        raise DomainRangeError(f"seconds must be in [0, 60), got {seconds!r}")


def _compose(degrees: int, minutes: int, seconds: int, negative: bool) -> float:
    v = degrees + minutes / 60.0 + seconds / 3600.0
    return -v if negative else v


@dataclass(frozen=True)
class Latitude:
    degrees: int
    minutes: int
    seconds: int
    polarity: LatitudePolarity = LatitudePolarity.NORTH

    def __post_init__(self) -> None:
        _check_components(self.degrees, self.minutes, self.seconds, signed=False)

    @classmethod
    def from_float(cls, value: float) -> "Latitude":
        sign, d, m, s = _split_dms(value)
        return cls(d, m, s, LatitudePolarity.SOUTH if sign < 0 else LatitudePolarity.NORTH)

    @classmethod
    def from_components(
        cls,
        degrees: int,
        minutes: int,
        seconds: int,
        polarity: Optional[LatitudePolarity] = None,
    ) -> "Latitude":
        """Without polarity, a negative `degrees` means South."""
        if polarity is None:
            _check_components(degrees, minutes, seconds, signed=True)
            polarity = LatitudePolarity.SOUTH if degrees < 0 else LatitudePolarity.NORTH
            degrees = abs(degrees)
        return cls(degrees, minutes, seconds, polarity)

    @property
    def value(self) -> float:
        return _compose(self.degrees, self.minutes, self.seconds, self.polarity is LatitudePolarity.SOUTH)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.degrees}{self.polarity.value}{self.minutes:02d}'{self.seconds:02d}\""


@dataclass(frozen=True)
class Longitude:
    degrees: int
    minutes: int
    seconds: int
    polarity: LongitudePolarity = LongitudePolarity.EAST

    def __post_init__(self) -> None:
        _check_components(self.degrees, self.minutes, self.seconds, signed=False)

    @classmethod
    def from_float(cls, value: float) -> "Longitude":
        if not (-180.0 <= value <= 180.0):
            raise DomainRangeError(f"value must be between -180 and 180 degrees, got {value!r}")
        sign, d, m, s = _split_dms(value)
        return cls(d, m, s, LongitudePolarity.WEST if sign < 0 else LongitudePolarity.EAST)

    @classmethod
    def from_components(
        cls,
        degrees: int,
        minutes: int,
        seconds: int,
        polarity: Optional[LongitudePolarity] = None,
    ) -> "Longitude":
        """Without polarity, a negative `degrees` means West."""
        if polarity is None:
            _check_components(degrees, minutes, seconds, signed=True)
            polarity = LongitudePolarity.WEST if degrees < 0 else LongitudePolarity.EAST
            degrees = abs(degrees)
        return cls(degrees, minutes, seconds, polarity)

    @property
    def value(self) -> float:
        return _compose(self.degrees, self.minutes, self.seconds, self.polarity is LongitudePolarity.WEST)

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.degrees}{self.polarity.value}{self.minutes:02d}'{self.seconds:02d}\""


@dataclass(frozen=True)
class GeoPosition:
    longitude: Longitude = Longitude(0, 0, 0)
    latitude: Latitude = Latitude(0, 0, 0)
    altitude: float = 0.0  # metres

    @classmethod
    def from_degrees(cls, longitude: float, latitude: float, altitude: float = 0.0) -> "GeoPosition":
        return cls(Longitude.from_float(longitude), Latitude.from_float(latitude), float(altitude))

    def __str__(self) -> str:
        return f"{self.longitude}, {self.latitude}, {self.altitude} m"
