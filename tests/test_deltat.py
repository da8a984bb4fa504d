# tests/test_deltat.py

import asyncio
import logging
import threading
import time

import pytest

from ephemtime.core.types import DeltaTRecord
from ephemtime.reference import deltat as dt
from ephemtime.reference.deltat import DeltaTEngine

J2000 = 2451545.0


def jd_of_greg_year(y):
    return J2000 + (y - 2000.0) * 365.2425


def jd_of_julian_year(y):
    return J2000 + (y - 2000.0) * 365.25


def seconds(eng, jd):
    return eng.delta_t(jd) * 86400.0


@pytest.fixture
def eng():
    return DeltaTEngine(source=[])


def test_j2000_is_tabulated_value(eng):
    assert eng.regime(J2000) == "tabulated"
    assert seconds(eng, J2000) == pytest.approx(63.83, abs=1e-9)


def test_tidal_default_before_initialize():
    e = DeltaTEngine()
    assert e.tidal_acceleration == dt.TIDAL_DE431
    assert not e.initialized


def test_1900_with_tidal_correction(eng):
    # table value -2.72 s, ndot correction -0.000091 * 0.18 * 55^2
    expected = -2.72 - 0.000091 * (dt.TIDAL_DE431 + 26.0) * 55.0 ** 2
    assert seconds(eng, jd_of_greg_year(1900.0)) == pytest.approx(expected, abs=1e-3)


def test_no_tidal_correction_after_1955(eng):
    other = DeltaTEngine(source=[], tidal_acceleration=dt.TIDAL_DE200)
    jd = jd_of_greg_year(1980.5)
    assert eng.delta_t(jd) == other.delta_t(jd)


@pytest.mark.parametrize("year", [-3000.0, 500.0, 1000.0, 1700.0, 1900.0])
def test_tidal_monotonic(year):
    jd = jd_of_greg_year(year)
    ndots = sorted([dt.TIDAL_26, dt.TIDAL_DE200, dt.TIDAL_DE403, dt.TIDAL_DE405, dt.TIDAL_DE421, dt.TIDAL_DE431])
    vals = [DeltaTEngine(source=[], tidal_acceleration=n).delta_t(jd) for n in ndots]
    # larger ndot -> smaller Delta-T before 1955
    assert all(a >= b for a, b in zip(vals, vals[1:]))
    assert vals[0] > vals[-1]


def test_adjust_for_tidal_acceleration(eng):
    assert eng.adjust_for_tidal_acceleration(10.0, 1960.0) == 10.0
    assert eng.adjust_for_tidal_acceleration(10.0, 1855.0) == pytest.approx(10.0 - 0.000091 * 0.18 * 1e4)
    e26 = DeltaTEngine(source=[], tidal_acceleration=dt.TIDAL_26)
    assert e26.adjust_for_tidal_acceleration(10.0, 0.0) == 10.0


@pytest.mark.parametrize(
    "year,regime",
    [(-5000.0, "morrison-stephenson"), (0.0, "morrison-stephenson"), (1599.0, "morrison-stephenson"),
     (1610.0, "bridge"), (1700.0, "tabulated"), (2500.0, "tabulated")],
)
def test_regimes(eng, year, regime):
    assert eng.regime(jd_of_julian_year(year)) == regime


def test_espenak_meeus_regime():
    e = DeltaTEngine(source=[], use_espenak_meeus_2006=True)
    assert e.regime(jd_of_greg_year(1500.0)) == "espenak-meeus"
    assert e.regime(jd_of_greg_year(1700.0)) == "tabulated"
    assert e.regime(dt.ESPENAK_MEEUS_JD_LIMIT - 1.0) == "espenak-meeus"
    assert e.regime(dt.ESPENAK_MEEUS_JD_LIMIT) == "tabulated"


def test_espenak_meeus_year_1000():
    e = DeltaTEngine(source=[], use_espenak_meeus_2006=True)
    expected = 1574.2 - 0.000091 * (dt.TIDAL_DE431 + 26.0) * 955.0 ** 2
    assert seconds(e, jd_of_greg_year(1000.0)) == pytest.approx(expected, abs=1e-3)


def test_long_term_parabola(eng):
    expected = -20.0 + 32.0 * 48.2 ** 2 - 0.000091 * (dt.TIDAL_DE431 + 26.0) * 4955.0 ** 2
    assert seconds(eng, jd_of_greg_year(-3000.0)) == pytest.approx(expected, abs=1e-3)


def test_centennial_table_interpolation(eng):
    # 1550 Julian-ish epoch lies between the 1500 (200 s) and 1600 (120 s) entries
    v = seconds(eng, jd_of_julian_year(1550.0))
    assert 120.0 < v < 200.0


def test_stephenson_parabola_after_table(eng):
    tabend = eng.table.end_year
    y = tabend + 200.0
    assert seconds(eng, jd_of_greg_year(y)) == pytest.approx(-20 + 31 * (0.01 * (y - 1820)) ** 2, abs=1e-6)


@pytest.mark.parametrize("year", [1600.0, 1620.0])
def test_continuity_at_regime_boundaries(eng, year):
    jd = jd_of_julian_year(year)
    before = seconds(eng, jd - 1e-3)
    after = seconds(eng, jd + 1e-3)
    assert abs(after - before) < 1.0


def test_long_term_joins_centennial_table(eng):
    # the centennial table is indexed on a Julian-year epoch, offset by ~0.1 yr
    jd = jd_of_greg_year(-1000.0)
    before = seconds(eng, jd - 1e-3)
    after = seconds(eng, jd + 1e-3)
    assert abs(after - before) < 2.0
    assert before == pytest.approx(eng.adjust_for_tidal_acceleration(25400.0, -1000.0), abs=0.1)


def test_continuity_at_table_end(eng):
    jd = jd_of_greg_year(eng.table.end_year)
    assert abs(seconds(eng, jd + 1.0) - seconds(eng, jd - 1.0)) < 1.0


def test_continuity_across_tabulated_years(eng):
    prev = seconds(eng, jd_of_greg_year(1620.0))
    for k in range(1, 4 * (2019 - 1620)):
        cur = seconds(eng, jd_of_greg_year(1620.0 + k * 0.25))
        assert abs(cur - prev) < 2.0
        prev = cur


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

def test_records_extend_and_overwrite():
    recs = [
        DeltaTRecord(2000, 99.0),
        DeltaTRecord(2020, 69.36),
        DeltaTRecord(2022, 69.2),
        DeltaTRecord(1500, 1.0),   # before the table, ignored
        DeltaTRecord(2060, 1.0),   # past the limit, ignored
    ]
    e = DeltaTEngine(source=recs)
    table = e.initialize()
    assert table.start_year == 1620
    assert table.end_year == 2022
    assert table[2000 - 1620] == 99.0
    assert table[2020 - 1620] == 69.36
    assert table[2021 - 1620] == 69.36  # gap carries the preceding value
    assert table[2022 - 1620] == 69.2
    assert seconds(e, J2000) == pytest.approx(99.0, abs=1e-9)


def test_table_never_shrinks():
    e = DeltaTEngine(source=[DeltaTRecord(1700, 9.5)])
    e.initialize()
    assert len(e.table) == len(dt.BUILTIN_TABLE)
    assert e.table[80] == 9.5


def test_initialize_is_one_shot():
    recs = [DeltaTRecord(2000, 99.0)]
    e = DeltaTEngine(source=recs)
    e.initialize()
    recs.append(DeltaTRecord(2001, 1.0))
    e.initialize()
    assert e.table[2001 - 1620] == dt.BUILTIN_TABLE[2001 - 1620]


class _FailingSource:
    def __iter__(self):
        raise OSError("disk on fire")


def test_source_failure_keeps_builtin_table(caplog):
    e = DeltaTEngine(source=_FailingSource())
    with caplog.at_level(logging.WARNING, logger="ephemtime.reference.deltat"):
        v = seconds(e, J2000)
    assert v == pytest.approx(63.83, abs=1e-9)
    assert e.initialized
    assert e.table is dt.BUILTIN_TABLE
    assert "built-in table" in caplog.text


class _CountingSource:
    def __init__(self, recs, delay=0.0):
        self.recs = recs
        self.delay = delay
        self.reads = 0

    def __iter__(self):
        self.reads += 1
        time.sleep(self.delay)
        return iter(self.recs)


def test_concurrent_initialize_threads():
    src = _CountingSource([DeltaTRecord(2000, 99.0)], delay=0.05)
    e = DeltaTEngine(source=src)
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(e.delta_t(J2000))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()

    assert src.reads == 1
    assert len(set(results)) == 1
    assert results[0] * 86400.0 == pytest.approx(99.0, abs=1e-9)


class _AsyncSource:
    def __init__(self, recs):
        self.recs = recs
        self.reads = 0

    async def __aiter__(self):
        self.reads += 1
        for r in self.recs:
            await asyncio.sleep(0)
            yield r


def test_concurrent_ainitialize():
    src = _AsyncSource([DeltaTRecord(2000, 99.0), DeltaTRecord(2021, 69.4)])
    e = DeltaTEngine(source=src)

    async def run():
        return await asyncio.gather(*(e.adelta_t(J2000) for _ in range(10)))

    results = asyncio.run(run())
    assert len(set(results)) == 1
    assert results[0] * 86400.0 == pytest.approx(99.0, abs=1e-9)
    assert e.table.end_year == 2021


def test_async_matches_sync():
    recs = [DeltaTRecord(2000, 99.0)]
    a = DeltaTEngine(source=_AsyncSource(recs))
    b = DeltaTEngine(source=list(recs))
    jd = jd_of_greg_year(1987.3)
    assert asyncio.run(a.adelta_t(jd)) == b.delta_t(jd)


class _CancelledSource:
    async def __aiter__(self):
        raise asyncio.CancelledError()
        yield  # pragma: no cover


def test_cancellation_leaves_table_untouched():
    e = DeltaTEngine(source=_CancelledSource())
    with pytest.raises(asyncio.CancelledError):
        asyncio.run(e.ainitialize())
    assert not e.initialized
    assert e.table is dt.BUILTIN_TABLE


def test_table_with_records_is_pure():
    t2 = dt.BUILTIN_TABLE.with_records([DeltaTRecord(2030, 75.0)])
    assert len(dt.BUILTIN_TABLE) == 400
    assert t2.end_year == 2030
    assert t2[len(dt.BUILTIN_TABLE)] == dt.BUILTIN_TABLE[-1]


# Besselian interpolation in the yearly table

def quartic(j):
    return 0.01 * j ** 4 - 0.2 * j ** 3 + 2.0 * j ** 2 + 5.0 * j + 30.0


SYNTH = dt.DeltaTTable(tuple(quartic(j) for j in range(16)), start_year=1960)


def besselian(f, i, p, order):
    """Bessel's formula truncated after `order` differences; missing first differences are 0."""
    def d1(j):
        return f[j + 1] - f[j] if 0 <= j and j + 1 < len(f) else 0.0

    def d2(j):
        return d1(j) - d1(j - 1)

    def d3(j):
        return d2(j + 1) - d2(j)

    def d4(j):
        return d3(j) - d3(j - 1)

    terms = [
        f[i],
        p * d1(i),
        p * (p - 1.0) / 4.0 * (d2(i) + d2(i + 1)),
        p * (p - 1.0) * (p - 0.5) / 6.0 * d3(i),
        (p + 1.0) * p * (p - 1.0) * (p - 2.0) / 48.0 * (d4(i) + d4(i + 1)),
    ]
    return sum(terms[: order + 1])


def test_besselian_mid_table_builtin(eng):
    expected = besselian(dt.BUILTIN_TABLE.values, 1987 - 1620, 0.3, 4)
    assert seconds(eng, jd_of_greg_year(1987.3)) == pytest.approx(expected, abs=1e-9)


def test_besselian_is_exact_for_quartic():
    e = DeltaTEngine(source=[], table=SYNTH)
    assert seconds(e, jd_of_greg_year(1967.3)) == pytest.approx(quartic(7.3), abs=1e-9)
    # third and fourth order terms both contribute here
    assert abs(besselian(SYNTH.values, 7, 0.3, 2) - quartic(7.3)) > 1e-3
    assert abs(besselian(SYNTH.values, 7, 0.3, 3) - quartic(7.3)) > 1e-3


@pytest.mark.parametrize(
    "year, iy, order",
    [
        (1975.0 - 0.5, 14, 1),   # last interval: linear
        (1975.0 - 1.5, 13, 4),   # first difference past the end counts as 0
        (1975.0 - 2.5, 12, 4),
        (1960.4, 0, 1),          # no preceding year
        (1961.4, 1, 3),          # one preceding year
    ],
)
def test_besselian_truncation_at_table_ends(year, iy, order):
    e = DeltaTEngine(source=[], table=SYNTH)
    p = year - (1960 + iy)
    expected = besselian(SYNTH.values, iy, p, order)
    assert seconds(e, jd_of_greg_year(year)) == pytest.approx(expected, abs=1e-9)
    assert DeltaTEngine._besselian(SYNTH, iy, p) == pytest.approx(expected, abs=1e-9)
    if order < 4:
        assert expected != pytest.approx(besselian(SYNTH.values, iy, p, order + 1), abs=1e-6)


def test_sync_initialize_cannot_read_async_only_source(caplog):
    src = _AsyncSource([DeltaTRecord(2000, 99.0)])
    e = DeltaTEngine(source=src)
    with caplog.at_level(logging.WARNING, logger="ephemtime.reference.deltat"):
        assert seconds(e, J2000) == pytest.approx(63.83, abs=1e-9)
    assert "using built-in table" in caplog.text
    assert e.initialized
    # already initialized: the async read never happens
    asyncio.run(e.ainitialize())
    assert src.reads == 0
    assert seconds(e, J2000) == pytest.approx(63.83, abs=1e-9)
