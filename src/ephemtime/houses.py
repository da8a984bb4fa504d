"""
House systems: names, letter codes and special points.

Cusp computation needs nutation, which this package does not provide, so
houses() always raises UnsupportedOperationError.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional, Tuple, Union

from .core.errors import UnsupportedOperationError
from .core.types import JulianDay
from .geography import GeoPosition


class HouseSystem(IntEnum):
    PLACIDUS = 0
    KOCH = 1
    PORPHYRIUS = 2
    REGIOMONTANUS = 3
    CAMPANUS = 4
    EQUAL = 5
    VEHLOW_EQUAL = 6
    WHOLE_SIGN = 7
    MERIDIAN_SYSTEM = 8
    HORIZON = 9
    POLICH_PAGE = 10
    ALCABITUS = 11
    MORINUS = 12
    KRUSINSKI_PISA = 13
    GAUQUELIN_SECTOR = 14
    APC = 15

    @property
    def display_name(self) -> str:
        return house_system_name(self)

    @property
    def letter(self) -> str:
        return house_system_to_char(self)


_NAMES: Dict[HouseSystem, str] = {
    HouseSystem.KOCH: "Koch",
    HouseSystem.PORPHYRIUS: "Porphyrius",
    HouseSystem.REGIOMONTANUS: "Regiomontanus",
    HouseSystem.CAMPANUS: "Campanus",
    HouseSystem.EQUAL: "Equal",
    HouseSystem.VEHLOW_EQUAL: "Vehlow equal",
    HouseSystem.WHOLE_SIGN: "Whole sign",
    HouseSystem.MERIDIAN_SYSTEM: "Axial rotation system / Meridian system / Zariel",
    HouseSystem.HORIZON: "Azimuthal / Horizontal system",
    HouseSystem.POLICH_PAGE: 'Polich/Page ("topocentric" system)',
    HouseSystem.ALCABITUS: "Alcabitus",
    HouseSystem.MORINUS: "Morinus",
    HouseSystem.KRUSINSKI_PISA: "Krusinski-Pisa",
    HouseSystem.GAUQUELIN_SECTOR: "Gauquelin sector",
    HouseSystem.APC: "APC houses",
}

# 'K' is not accepted on input: unknown letters, Koch's included, read as Placidus.
_FROM_CHAR: Dict[str, HouseSystem] = {
    "A": HouseSystem.EQUAL,
    "E": HouseSystem.EQUAL,
    "B": HouseSystem.ALCABITUS,
    "C": HouseSystem.CAMPANUS,
    "G": HouseSystem.GAUQUELIN_SECTOR,
    "H": HouseSystem.HORIZON,
    "M": HouseSystem.MORINUS,
    "O": HouseSystem.PORPHYRIUS,
    "R": HouseSystem.REGIOMONTANUS,
    "T": HouseSystem.POLICH_PAGE,
    "U": HouseSystem.KRUSINSKI_PISA,
    "V": HouseSystem.VEHLOW_EQUAL,
    "W": HouseSystem.WHOLE_SIGN,
    "X": HouseSystem.MERIDIAN_SYSTEM,
    "Y": HouseSystem.APC,
}

_TO_CHAR: Dict[HouseSystem, str] = {
    HouseSystem.KOCH: "K",
    HouseSystem.PORPHYRIUS: "O",
    HouseSystem.REGIOMONTANUS: "R",
    HouseSystem.CAMPANUS: "C",
    HouseSystem.EQUAL: "E",
    HouseSystem.VEHLOW_EQUAL: "V",
    HouseSystem.WHOLE_SIGN: "W",
    HouseSystem.MERIDIAN_SYSTEM: "X",
    HouseSystem.HORIZON: "H",
    HouseSystem.POLICH_PAGE: "T",
    HouseSystem.ALCABITUS: "B",
    HouseSystem.MORINUS: "M",
    HouseSystem.KRUSINSKI_PISA: "U",
    HouseSystem.GAUQUELIN_SECTOR: "G",
    HouseSystem.APC: "Y",
}


def house_system_name(hs: HouseSystem) -> str:
    return _NAMES.get(hs, "Placidus")


def house_system_from_char(c: str) -> HouseSystem:
    return _FROM_CHAR.get(c[:1].upper(), HouseSystem.PLACIDUS)


def house_system_to_char(hs: HouseSystem) -> str:
    return _TO_CHAR.get(hs, "P")


@dataclass(frozen=True)
class HousePoint:
    id: int
    name: str

    def __int__(self) -> int:
        return self.id


HOUSE_POINTS: Tuple[HousePoint, ...] = (
    HousePoint(0, "Ascendant"),
    HousePoint(1, "MC"),
    HousePoint(2, "ARMC"),
    HousePoint(3, "Vertex"),
    HousePoint(4, "Equatorial ascendant"),
    HousePoint(5, "Co-Ascendant Koch (W. Koch)"),
    HousePoint(6, "Co-Ascendant (M. Munkasey)"),
    HousePoint(7, "Polar ascendant (M. Munkasey)"),
)


def house_point(id: int) -> Optional[HousePoint]:
    """Point by index, None when out of range."""
    if 0 <= id < len(HOUSE_POINTS):
        return HOUSE_POINTS[id]
    return None


@dataclass(frozen=True)
class HouseResult:
    cusps: Tuple[float, ...]
    points: Tuple[float, ...]


def houses(
    jd: Union[float, JulianDay],
    position: GeoPosition,
    system: HouseSystem = HouseSystem.PLACIDUS,
) -> HouseResult:
    raise UnsupportedOperationError(
        f"house cusps ({house_system_name(system)}) require nutation, which is not implemented"
    )
