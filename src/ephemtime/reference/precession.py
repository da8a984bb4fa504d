"""
ephemtime.reference.precession

Mean obliquity of the ecliptic for a selectable precession model.

All polynomials take T = Julian centuries from J2000 (TT) and return arcseconds;
obliquity() converts the result to radians.

References:
- IAU 1976: Lieske et al. (1977)
- IAU 2000: Capitaine et al. (2003) with the P03 obliquity rate
- IAU 2006: Capitaine, Wallace & Chapront (2003), P03
- Vondrák, Capitaine & Wallace (2011), long-term precession
- Williams (1994), Simon et al. (1994), Laskar (1986), Bretagnon et al. (2003)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Callable, Optional, Tuple

J2000 = 2451545.0

# Julian centuries of validity for the short-term IAU polynomials
IAU_1976_2000_LIMIT = 2.0
IAU_2006_LIMIT = 75.0

# JPL Horizons EPS correction table, one value per year from 1962 (mas)
JPL_DCOR_START_JD = 2437846.5
JPL_DCOR_EPS: Tuple[float, ...] = (
    36.726, 36.627, 36.595, 36.578, 36.640, 36.659, 36.731, 36.765,
    36.662, 36.555, 36.335, 36.321, 36.354, 36.227, 36.289, 36.348, 36.257, 36.163,
    35.979, 35.896, 35.842, 35.825, 35.912, 35.950, 36.093, 36.191, 36.009, 35.943,
    35.875, 35.771, 35.788, 35.753, 35.822, 35.866, 35.771, 35.732, 35.543, 35.498,
    35.449, 35.409, 35.497, 35.556, 35.672, 35.760, 35.596, 35.565, 35.510, 35.394,
    35.385, 35.375, 35.415,
)
JPL_DCOR_LAST = len(JPL_DCOR_EPS) - 1


class PrecessionIAU(Enum):
    NONE = "none"
    IAU_1976 = "iau_1976"
    IAU_2000 = "iau_2000"
    IAU_2006 = "iau_2006"


class PrecessionCoefficients(Enum):
    VONDRAK_2011 = "vondrak_2011"
    WILLIAMS_1994 = "williams_1994"
    SIMON_1994 = "simon_1994"
    LASKAR_1986 = "laskar_1986"
    BRETAGNON_2003 = "bretagnon_2003"


class JplHorizonMode(IntFlag):
    NONE = 0
    JPL_HORIZONS = 262144
    JPL_APPROXIMATE = 524288


@dataclass(frozen=True)
class PrecessionConfig:
    """
    Precession/obliquity settings.

    use_precession_iau:
        An IAU model takes priority inside its range of validity.
    use_precession_coefficient:
        Long-term fallback used outside that range (or when use_precession_iau is NONE).
    include_dpsi_deps_iau1980:
        Reproduce JPL Horizons, which uses IAU 1976 obliquity.
    approximate_horizons_astrodienst:
        Suppress the IAU 1976 approximation of Horizons mode.
    use_horizons_method_before_1980:
        Horizons nutation before 1962-01-20; carried for completeness, the
        mean obliquity does not depend on it.
    """
    use_precession_iau: PrecessionIAU = PrecessionIAU.NONE
    use_precession_coefficient: PrecessionCoefficients = PrecessionCoefficients.VONDRAK_2011
    include_dpsi_deps_iau1980: bool = True
    approximate_horizons_astrodienst: bool = True
    use_horizons_method_before_1980: bool = True


DEFAULT_CONFIG = PrecessionConfig()


def arcsec_to_rad(x: float) -> float:
    return math.radians(x / 3600.0)


# ---------------------------------------------------------------------------
# Vondrák, Capitaine & Wallace (2011)
# ---------------------------------------------------------------------------

_PEPER_PERIODS = (409.90, 396.15, 537.22, 402.90, 417.15, 288.92, 4043.00, 306.00, 277.00, 203.00)
_PEPER_P_COS = (-6908.287473, -3198.706291, 1453.674527, -857.748557, 1173.231614,
                -156.981465, 371.836550, -216.619040, 193.691479, 11.891524)
_PEPER_Q_COS = (753.872780, -247.805823, 379.471484, -53.880558, -90.109153,
                -353.600190, -63.115353, -28.248187, 17.703387, 38.911307)
_PEPER_P_SIN = (-2845.175469, 449.844989, -1255.915323, 886.736783, 418.887514,
                997.912441, -240.979710, 76.541307, -36.788069, -170.964086)
_PEPER_Q_SIN = (-1704.720302, -862.308358, 447.832178, -889.571909, 190.402846,
                -56.564991, -296.222622, -75.859952, 67.473503, 3.014055)
_PEPOL = (
    (8134.017132, 84028.206305),
    (5043.0520035, 0.3624445),
    (-0.00710733, -0.00004039),
    (0.000000271, -0.000000110),
)


def ldp_peps(jd: float) -> Tuple[float, float]:
    """
    Long-term general precession in longitude and mean obliquity (radians),
    valid for +-200000 years around J2000.
    """
    t = (jd - J2000) / 36525.0
    p = 0.0
    q = 0.0

    w = 2.0 * math.pi * t
    for per, pc, qc, ps, qs in zip(_PEPER_PERIODS, _PEPER_P_COS, _PEPER_Q_COS, _PEPER_P_SIN, _PEPER_Q_SIN):
        a = w / per
        s = math.sin(a)
        c = math.cos(a)
        p += c * pc + s * ps
        q += c * qc + s * qs

    w = 1.0
    for pp, qq in _PEPOL:
        p += pp * w
        q += qq * w
        w *= t

    return arcsec_to_rad(p), arcsec_to_rad(q)


def jpl_epsilon_correction(jd: float) -> float:
    """
    JPL Horizons correction to the obliquity, radians.

    Values before 1962 use the first table entry and values from 2012 on the
    last one.
    """
    tofs = (jd - JPL_DCOR_START_JD) / 365.25
    if tofs < 0:
        dofs = JPL_DCOR_EPS[0]
    elif tofs >= JPL_DCOR_LAST:
        dofs = JPL_DCOR_EPS[JPL_DCOR_LAST]
    else:
        t0 = int(tofs)
        t1 = t0 + 1
        dofs = (tofs - t0) * (JPL_DCOR_EPS[t0] - JPL_DCOR_EPS[t1]) + JPL_DCOR_EPS[t0]
    return math.radians(dofs / (1000.0 * 3600.0))


# ---------------------------------------------------------------------------
# Polynomials (arcseconds)
# ---------------------------------------------------------------------------

def eps_iau_1976(T: float) -> float:
    return (((1.813e-3 * T - 5.9e-4) * T - 46.8150) * T + 84381.448)


def eps_iau_2000(T: float) -> float:
    return (((1.813e-3 * T - 5.9e-4) * T - 46.84024) * T + 84381.406)


def eps_iau_2006(T: float) -> float:
    return (((((-4.34e-8 * T - 5.76e-7) * T + 2.0034e-3) * T - 1.831e-4) * T - 46.836769) * T + 84381.406)


def eps_bretagnon_2003(T: float) -> float:
    return ((((((-3e-11 * T - 2.48e-8) * T - 5.23e-7) * T + 1.99911e-3) * T - 1.667e-4) * T - 46.836051) * T + 84381.40880)


def eps_simon_1994(T: float) -> float:
    return (((((2.5e-8 * T - 5.1e-7) * T + 1.9989e-3) * T - 1.52e-4) * T - 46.80927) * T + 84381.412)


def eps_williams_1994(T: float) -> float:
    return ((((-1.0e-6 * T + 2.0e-3) * T - 1.74e-4) * T - 46.833960) * T + 84381.409)


def eps_laskar_1986(T: float) -> float:
    T /= 10.0
    return ((((((((((2.45e-10 * T + 5.79e-9) * T + 2.787e-7) * T + 7.12e-7) * T - 3.905e-5) * T
                  - 2.4967e-3) * T - 5.138e-3) * T + 1.99925) * T - 0.0155) * T - 468.093) * T + 84381.448)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Model:
    name: str
    applies: Callable[[PrecessionConfig, JplHorizonMode, float], bool]
    eps: Callable[[float], float]   # arcsec polynomial in T


_MODELS: Tuple[_Model, ...] = (
    _Model(
        "iau_1976",
        lambda cfg, mode, T: bool(mode & JplHorizonMode.JPL_HORIZONS) and cfg.include_dpsi_deps_iau1980,
        eps_iau_1976,
    ),
    _Model(
        "iau_1976",
        lambda cfg, mode, T: bool(mode & JplHorizonMode.JPL_APPROXIMATE) and not cfg.approximate_horizons_astrodienst,
        eps_iau_1976,
    ),
    _Model(
        "iau_1976",
        lambda cfg, mode, T: cfg.use_precession_iau is PrecessionIAU.IAU_1976 and abs(T) <= IAU_1976_2000_LIMIT,
        eps_iau_1976,
    ),
    _Model(
        "iau_2000",
        lambda cfg, mode, T: cfg.use_precession_iau is PrecessionIAU.IAU_2000 and abs(T) <= IAU_1976_2000_LIMIT,
        eps_iau_2000,
    ),
    _Model(
        "iau_2006",
        lambda cfg, mode, T: cfg.use_precession_iau is PrecessionIAU.IAU_2006 and abs(T) <= IAU_2006_LIMIT,
        eps_iau_2006,
    ),
    _Model(
        "bretagnon_2003",
        lambda cfg, mode, T: cfg.use_precession_coefficient is PrecessionCoefficients.BRETAGNON_2003,
        eps_bretagnon_2003,
    ),
    _Model(
        "simon_1994",
        lambda cfg, mode, T: cfg.use_precession_coefficient is PrecessionCoefficients.SIMON_1994,
        eps_simon_1994,
    ),
    _Model(
        "williams_1994",
        lambda cfg, mode, T: cfg.use_precession_coefficient is PrecessionCoefficients.WILLIAMS_1994,
        eps_williams_1994,
    ),
    _Model(
        "laskar_1986",
        lambda cfg, mode, T: cfg.use_precession_coefficient is PrecessionCoefficients.LASKAR_1986,
        eps_laskar_1986,
    ),
)


def obliquity_model(
    jd: float,
    mode: JplHorizonMode = JplHorizonMode.NONE,
    config: Optional[PrecessionConfig] = None,
) -> str:
    """Name of the model obliquity() would use."""
    cfg = config or DEFAULT_CONFIG
    T = (jd - J2000) / 36525.0
    for m in _MODELS:
        if m.applies(cfg, JplHorizonMode(mode), T):
            return m.name
    return "vondrak_2011"


def obliquity(
    jd: float,
    mode: JplHorizonMode = JplHorizonMode.NONE,
    config: Optional[PrecessionConfig] = None,
) -> float:
    """
    Mean obliquity of the ecliptic in radians for a Julian Day in TT.

    The first matching model wins: Horizons modes, then the configured IAU
    model inside its validity range, then the configured long-term
    coefficients, with Vondrák (2011) as the final fallback.
    """
    cfg = config or DEFAULT_CONFIG
    mode = JplHorizonMode(mode)
    T = (jd - J2000) / 36525.0
    for m in _MODELS:
        if m.applies(cfg, mode, T):
            return arcsec_to_rad(m.eps(T))

    eps = ldp_peps(jd)[1]
    # shadowed by the JPL_APPROXIMATE model above; kept for the full ordering
    if (mode & JplHorizonMode.JPL_APPROXIMATE) and not cfg.approximate_horizons_astrodienst:
        eps += jpl_epsilon_correction(jd)
    return eps


def obliquity_degrees(
    jd: float,
    mode: JplHorizonMode = JplHorizonMode.NONE,
    config: Optional[PrecessionConfig] = None,
) -> float:
    return math.degrees(obliquity(jd, mode, config))
