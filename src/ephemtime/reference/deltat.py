"""
ephemtime.reference.deltat

Delta-T (= ET − UT) for any Julian Day, returned in days.

Regimes
-------
- Espenak–Meeus (2006) polynomials, optional, before ~1633.
- Morrison–Stephenson (2004) before 1600: long-term parabola before -1000,
  linear interpolation of the centennial table from -1000 to 1600.
- 1600..1620: linear bridge between the two tables.
- 1620..end of table: Besselian interpolation (Astronomical Almanac, p. K11).
- After the table: Stephenson (1997, p. 507), faded in over 100 years.

Every regime applies the tidal-acceleration correction of AA p. K8 before 1955.

The yearly table can be extended and overwritten once, from an external
source, on the first evaluation. After that it is never modified.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.types import DeltaTRecord
from .deltat_tables import (
    TABLE_DT,
    TABLE_DT2,
    TABLE_DT2_END,
    TABLE_DT2_START,
    TABLE_DT2_STEP,
    TABLE_DT_LIMIT,
    TABLE_DT_START,
)

logger = logging.getLogger(__name__)

J2000 = 2451545.0

# Intrinsic tidal acceleration in the mean motion of the Moon (arcsec/cy^2).
# Chapront/Chapront-Touzé/Francou A&A 387 (2002), p. 705 and JPL memoranda.
TIDAL_26 = -26.0
TIDAL_DE200 = -23.8946
TIDAL_DE403 = -25.580
TIDAL_DE404 = -25.580
TIDAL_DE405 = -25.826
TIDAL_DE406 = -25.826
TIDAL_DE421 = -25.85
TIDAL_DE430 = -25.82
TIDAL_DE431 = -25.82
TIDAL_DEFAULT = TIDAL_DE431

# jd below which the Espenak–Meeus polynomials are used when enabled
ESPENAK_MEEUS_JD_LIMIT = 2317746.13090277789


def year_julian(jd: float) -> float:
    """Epoch year using Julian years (365.25 d)."""
    return 2000.0 + (jd - J2000) / 365.25


def year_gregorian(jd: float) -> float:
    """Epoch year using Gregorian years (365.2425 d)."""
    return 2000.0 + (jd - J2000) / 365.2425


def longterm_morrison_stephenson(jd: float) -> float:
    """Long-term parabola of Morrison & Stephenson (2004), seconds."""
    u = (year_gregorian(jd) - 1820.0) / 100.0
    return -20.0 + 32.0 * u * u


# ---------------------------------------------------------------------------
# Table model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeltaTTable:
    """
    Yearly Delta-T values in seconds; values[i] belongs to start_year + i.
    """
    values: Tuple[float, ...]
    start_year: int = TABLE_DT_START

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, i: int) -> float:
        return self.values[i]

    @property
    def end_year(self) -> int:
        return self.start_year + len(self.values) - 1

    def with_records(self, records: Iterable[DeltaTRecord], *, limit: int = TABLE_DT_LIMIT) -> "DeltaTTable":
        """
        Return a copy extended and overwritten with the records whose year is in
        [start_year, limit). The table never shrinks. Years opened up by an
        extension and not covered by a record take the preceding value.
        """
        recs = sorted(
            (r for r in records if self.start_year <= r.year < limit),
            key=lambda r: r.year,
        )
        if not recs:
            return self

        size = max(len(self.values), recs[-1].year - self.start_year + 1)
        vals: List[Optional[float]] = list(self.values) + [None] * (size - len(self.values))
        for r in recs:
            vals[r.year - self.start_year] = float(r.value)
        for i in range(len(self.values), size):
            if vals[i] is None:
                vals[i] = vals[i - 1]
        return DeltaTTable(tuple(vals), self.start_year)  # type: ignore[arg-type]


BUILTIN_TABLE = DeltaTTable(TABLE_DT)


# ---------------------------------------------------------------------------
# Regime dispatch
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeltaTRegime:
    name: str
    applies: Callable[["DeltaTEngine", float, float], bool]   # (engine, jd, y_julian)
    evaluate: Callable[["DeltaTEngine", float], float]        # (engine, jd) -> days


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class DeltaTEngine:
    """
    Delta-T evaluator owning the yearly table.

    source:
        Optional provider of DeltaTRecord overrides. Anything iterable works;
        objects with __aiter__ are consumed asynchronously by ainitialize().
    tidal_acceleration:
        ndot of the ephemeris in use (default DE431).
    use_espenak_meeus_2006:
        Use the Espenak–Meeus polynomials before ~1633 instead of the
        Morrison–Stephenson table.
    """

    def __init__(
        self,
        source: Optional[Any] = None,
        *,
        tidal_acceleration: float = TIDAL_DEFAULT,
        use_espenak_meeus_2006: bool = False,
        table: DeltaTTable = BUILTIN_TABLE,
    ) -> None:
        self.source = source
        self.tidal_acceleration = float(tidal_acceleration)
        self.use_espenak_meeus_2006 = bool(use_espenak_meeus_2006)
        self._table = table
        self._initialized = False
        self._lock = threading.Lock()

    # -- state ---------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def table(self) -> DeltaTTable:
        return self._table

    def info(self) -> Dict[str, object]:
        return {
            "tidal_acceleration": self.tidal_acceleration,
            "espenak_meeus_2006": self.use_espenak_meeus_2006,
            "table_start": self._table.start_year,
            "table_end": self._table.end_year,
            "initialized": self._initialized,
        }

    def _apply(self, records: List[DeltaTRecord]) -> None:
        with self._lock:
            if self._initialized:
                return
            table = self._table.with_records(records)
            if table is not self._table:
                logger.info(
                    "Delta-T table updated from %d records, now %d..%d",
                    len(records), table.start_year, table.end_year,
                )
            self._table = table
            self._initialized = True

    def initialize(self) -> DeltaTTable:
        """
        Load overrides from the source once. Read failures are logged and
        leave the built-in table in place.
        """
        if self._initialized:
            return self._table
        with self._lock:
            if self._initialized:
                return self._table
            records: List[DeltaTRecord] = []
            if self.source is not None:
                try:
                    records = list(self.source)
                except Exception as e:
                    logger.warning("Delta-T source failed (%s); using built-in table.", e)
                    records = []
            self._table = self._table.with_records(records)
            if records:
                logger.info("Delta-T table now covers %d..%d", self._table.start_year, self._table.end_year)
            self._initialized = True
        return self._table

    async def ainitialize(self) -> DeltaTTable:
        """
        Async form of initialize(). The source is read completely before the
        table is touched, so a cancelled read leaves it unchanged; concurrent
        callers apply identical data and only the first one takes effect.

        Applying the records takes the same threading.Lock that a sync
        initialize() holds while it reads, so the event loop can block until
        that read finishes. A source that is only async-iterable cannot be
        read by initialize(); if delta_t() runs first it logs a warning and
        finalizes on the built-in table, and this method is then a no-op.
        """
        if self._initialized:
            return self._table
        records: List[DeltaTRecord] = []
        if self.source is not None:
            try:
                if hasattr(self.source, "__aiter__"):
                    records = [r async for r in self.source]
                else:
                    records = list(self.source)
            except Exception as e:
                logger.warning("Delta-T source failed (%s); using built-in table.", e)
                records = []
        self._apply(records)
        return self._table

    # -- tidal correction ------------------------------------------------------

    def adjust_for_tidal_acceleration(self, ans: float, y: float) -> float:
        """
        Astronomical Almanac correction -0.000091 (ndot + 26)(year-1955)^2 s
        for entries prior to 1955 (AA page K8). Later entries refer to atomic
        time and are left alone.
        """
        if y < 1955.0:
            b = y - 1955.0
            ans += -0.000091 * (self.tidal_acceleration + 26.0) * b * b
        return ans

    # -- public evaluation ----------------------------------------------------

    def regime(self, jd: float) -> str:
        """Name of the regime used for jd."""
        y = year_julian(jd)
        for r in _REGIMES:
            if r.applies(self, jd, y):
                return r.name
        raise RuntimeError("unreachable")

    def delta_t(self, jd: float) -> float:
        """Delta-T in days for a Julian Day in UT."""
        self.initialize()
        return self._evaluate(jd)

    async def adelta_t(self, jd: float) -> float:
        await self.ainitialize()
        return self._evaluate(jd)

    def delta_t_seconds(self, jd: float) -> float:
        return self.delta_t(jd) * 86400.0

    def _evaluate(self, jd: float) -> float:
        y = year_julian(jd)
        for r in _REGIMES:
            if r.applies(self, jd, y):
                return r.evaluate(self, jd)
        raise RuntimeError("unreachable")

    # -- regimes ------------------------------------------------------------

    def _espenak_meeus_1620(self, jd: float) -> float:
        """
        Espenak & Meeus (2006), derived from Stephenson & Morrison (2004).

        Years from 2005 on have no polynomial here and evaluate to zero; they
        are only reachable if ESPENAK_MEEUS_JD_LIMIT is moved.
        """
        ans = 0.0
        ygreg = year_gregorian(jd)
        if ygreg < -500:
            ans = longterm_morrison_stephenson(jd)
        elif ygreg < 500:
            u = ygreg / 100.0
            ans = (((((0.0090316521 * u + 0.022174192) * u - 0.1798452) * u - 5.952053) * u + 33.78311) * u - 1014.41) * u + 10583.6
        elif ygreg < 1600:
            u = (ygreg - 1000) / 100.0
            ans = (((((0.0083572073 * u - 0.005050998) * u - 0.8503463) * u + 0.319781) * u + 71.23472) * u - 556.01) * u + 1574.2
        elif ygreg < 1700:
            u = ygreg - 1600
            ans = 120 - 0.9808 * u - 0.01532 * u * u + u * u * u / 7129.0
        elif ygreg < 1800:
            u = ygreg - 1700
            ans = (((-u / 1174000.0 + 0.00013336) * u - 0.0059285) * u + 0.1603) * u + 8.83
        elif ygreg < 1860:
            u = ygreg - 1800
            ans = ((((((0.000000000875 * u - 0.0000001699) * u + 0.0000121272) * u - 0.00037436) * u + 0.0041116) * u + 0.0068612) * u - 0.332447) * u + 13.72
        elif ygreg < 1900:
            u = ygreg - 1860
            ans = ((((u / 233174.0 - 0.0004473624) * u + 0.01680668) * u - 0.251754) * u + 0.5737) * u + 7.62
        elif ygreg < 1920:
            u = ygreg - 1900
            ans = (((-0.000197 * u + 0.0061966) * u - 0.0598939) * u + 1.494119) * u - 2.79
        elif ygreg < 1941:
            u = ygreg - 1920
            ans = 21.20 + 0.84493 * u - 0.076100 * u * u + 0.0020936 * u * u * u
        elif ygreg < 1961:
            u = ygreg - 1950
            ans = 29.07 + 0.407 * u - u * u / 233.0 + u * u * u / 2547.0
        elif ygreg < 1986:
            u = ygreg - 1975
            ans = 45.45 + 1.067 * u - u * u / 260.0 - u * u * u / 718.0
        elif ygreg < 2005:
            u = ygreg - 2000
            ans = ((((0.00002373599 * u + 0.000651814) * u + 0.0017275) * u - 0.060374) * u + 0.3345) * u + 63.86

        ans = self.adjust_for_tidal_acceleration(ans, ygreg)
        return ans / 86400.0

    def _morrison_stephenson_1600(self, jd: float) -> float:
        ans = 0.0
        y = year_gregorian(jd)

        # before -1000: Stephenson & Morrison (2004, p. 335), fitted to the
        # start of the centennial table over 100 years
        if y < TABLE_DT2_START:
            ans = longterm_morrison_stephenson(jd)
            ans = self.adjust_for_tidal_acceleration(ans, y)
            if y >= TABLE_DT2_START - 100:
                ans2 = self.adjust_for_tidal_acceleration(TABLE_DT2[0], TABLE_DT2_START)
                jd0 = (TABLE_DT2_START - 2000) * 365.2425 + J2000
                ans3 = longterm_morrison_stephenson(jd0)
                ans3 = self.adjust_for_tidal_acceleration(ans3, y)
                dd = ans3 - ans2
                b = (y - (TABLE_DT2_START - 100)) * 0.01
                ans -= dd * b

        # -1000 .. 1600: linear interpolation of the centennial table
        if TABLE_DT2_START <= y < TABLE_DT2_END:
            yjul = 2000 + (jd - 2451557.5) / 365.25
            p = math.floor(yjul)
            iy = int((p - TABLE_DT2_START) / TABLE_DT2_STEP)
            dd = (yjul - (TABLE_DT2_START + TABLE_DT2_STEP * iy)) / TABLE_DT2_STEP
            ans = TABLE_DT2[iy] + (TABLE_DT2[iy + 1] - TABLE_DT2[iy]) * dd
            ans = self.adjust_for_tidal_acceleration(ans, y)

        return ans / 86400.0

    def _bridge_1600_1620(self, jd: float) -> float:
        tab = self._table
        b = tab.start_year - TABLE_DT2_END
        iy = (TABLE_DT2_END - TABLE_DT2_START) // TABLE_DT2_STEP
        dd = (year_julian(jd) - TABLE_DT2_END) / b
        ans = TABLE_DT2[iy] + dd * (tab[0] - TABLE_DT2[iy])
        ans = self.adjust_for_tidal_acceleration(ans, year_gregorian(jd))
        return ans / 86400.0

    def _tabulated(self, jd: float) -> float:
        """
        Besselian interpolation in the yearly table (AA page K11), then the
        Stephenson (1997) parabola beyond its end.
        """
        tab = self._table
        tabsiz = len(tab)
        tabend = tab.start_year + tabsiz - 1
        y = year_gregorian(jd)

        if y <= tabend:
            p = math.floor(y)
            iy = int(p - tab.start_year)
            if iy < 0:
                # a few days before 1620.0 in Gregorian years
                iy = 0
                p = float(tab.start_year)
            ans = self._besselian(tab, iy, y - p)
            ans = self.adjust_for_tidal_acceleration(ans, y)
            return ans / 86400.0

        b = 0.01 * (y - 1820)
        ans = -20 + 31 * b * b
        # slow transition from the table to the formula
        if y <= tabend + 100:
            b2 = 0.01 * (tabend - 1820)
            ans2 = -20 + 31 * b2 * b2
            ans3 = tab[tabsiz - 1]
            dd = ans2 - ans3
            ans += dd * (y - (tabend + 100)) * 0.01
        ans = self.adjust_for_tidal_acceleration(ans, y)
        return ans / 86400.0

    @staticmethod
    def _besselian(tab: DeltaTTable, iy: int, p: float) -> float:
        tabsiz = len(tab)
        # zeroth order: value at start of year
        ans = tab[iy]
        k = iy + 1
        if k >= tabsiz:
            return ans

        # first order
        ans += p * (tab[k] - tab[iy])
        if iy - 1 < 0 or iy + 2 >= tabsiz:
            return ans

        # first differences
        d = [0.0] * 6
        k = iy - 2
        for i in range(5):
            d[i] = 0.0 if (k < 0 or k + 1 >= tabsiz) else tab[k + 1] - tab[k]
            k += 1

        # second differences
        for i in range(4):
            d[i] = d[i + 1] - d[i]
        b = 0.25 * p * (p - 1.0)
        ans += b * (d[1] + d[2])
        if iy + 2 >= tabsiz:
            return ans

        # third differences
        for i in range(3):
            d[i] = d[i + 1] - d[i]
        b = 2.0 * b / 3.0
        ans += (p - 0.5) * b * d[1]
        if iy - 2 < 0 or iy + 3 > tabsiz:
            return ans

        # fourth differences
        for i in range(2):
            d[i] = d[i + 1] - d[i]
        b = 0.125 * b * (p + 1.0) * (p - 2.0)
        ans += b * (d[0] + d[1])
        return ans


# Fixed priority order; the first regime whose predicate holds is used.
_REGIMES: Tuple[DeltaTRegime, ...] = (
    DeltaTRegime(
        "espenak-meeus",
        lambda eng, jd, y: eng.use_espenak_meeus_2006 and jd < ESPENAK_MEEUS_JD_LIMIT,
        DeltaTEngine._espenak_meeus_1620,
    ),
    DeltaTRegime(
        "morrison-stephenson",
        lambda eng, jd, y: y < TABLE_DT2_END,
        DeltaTEngine._morrison_stephenson_1600,
    ),
    DeltaTRegime(
        "bridge",
        lambda eng, jd, y: y < eng.table.start_year,
        DeltaTEngine._bridge_1600_1620,
    ),
    DeltaTRegime(
        "tabulated",
        lambda eng, jd, y: True,
        DeltaTEngine._tabulated,
    ),
)
