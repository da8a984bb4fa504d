# tests/test_precession.py

import math

import pytest

from ephemtime.reference import precession as pr
from ephemtime.reference.precession import (
    JplHorizonMode,
    PrecessionCoefficients,
    PrecessionConfig,
    PrecessionIAU,
)

J2000 = 2451545.0


def arcsec(rad):
    return math.degrees(rad) * 3600.0


def test_default_obliquity_at_j2000():
    assert pr.obliquity_degrees(J2000) == pytest.approx(23.4392911, abs=1e-4)
    assert pr.obliquity_model(J2000) == "vondrak_2011"


def test_meeus_example_22a_iau1976():
    """
    Jean Meeus, Astronomical Algorithms (2nd Ed), Example 22.a.
    1987 April 10, 0h TD: mean obliquity 23°26'27.407"
    """
    cfg = PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_1976)
    eps = pr.obliquity(2446895.5, config=cfg)
    assert arcsec(eps) == pytest.approx(23 * 3600 + 26 * 60 + 27.407, abs=1e-3)
    assert pr.obliquity_model(2446895.5, config=cfg) == "iau_1976"


@pytest.mark.parametrize(
    "cfg,expected",
    [
        (PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_1976), 84381.448),
        (PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_2000), 84381.406),
        (PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_2006), 84381.406),
        (PrecessionConfig(use_precession_coefficient=PrecessionCoefficients.BRETAGNON_2003), 84381.4088),
        (PrecessionConfig(use_precession_coefficient=PrecessionCoefficients.SIMON_1994), 84381.412),
        (PrecessionConfig(use_precession_coefficient=PrecessionCoefficients.WILLIAMS_1994), 84381.409),
        (PrecessionConfig(use_precession_coefficient=PrecessionCoefficients.LASKAR_1986), 84381.448),
    ],
)
def test_constant_terms_at_j2000(cfg, expected):
    assert arcsec(pr.obliquity(J2000, config=cfg)) == pytest.approx(expected, abs=1e-6)


def test_iau_models_limited_to_validity_range():
    far = J2000 + 3.0 * 36525.0
    cfg = PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_1976)
    assert pr.obliquity_model(far, config=cfg) == "vondrak_2011"
    cfg = PrecessionConfig(
        use_precession_iau=PrecessionIAU.IAU_2000,
        use_precession_coefficient=PrecessionCoefficients.WILLIAMS_1994,
    )
    assert pr.obliquity_model(far, config=cfg) == "williams_1994"
    cfg = PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_2006)
    assert pr.obliquity_model(far, config=cfg) == "iau_2006"
    assert pr.obliquity_model(J2000 + 80.0 * 36525.0, config=cfg) == "vondrak_2011"


def test_iau_takes_priority_over_coefficients():
    cfg = PrecessionConfig(
        use_precession_iau=PrecessionIAU.IAU_2006,
        use_precession_coefficient=PrecessionCoefficients.LASKAR_1986,
    )
    assert pr.obliquity_model(J2000, config=cfg) == "iau_2006"


def test_jpl_horizons_mode():
    cfg = PrecessionConfig(use_precession_iau=PrecessionIAU.IAU_2006)
    assert pr.obliquity_model(J2000, JplHorizonMode.JPL_HORIZONS, cfg) == "iau_1976"
    assert arcsec(pr.obliquity(J2000, JplHorizonMode.JPL_HORIZONS, cfg)) == pytest.approx(84381.448, abs=1e-6)
    off = PrecessionConfig(include_dpsi_deps_iau1980=False)
    assert pr.obliquity_model(J2000, JplHorizonMode.JPL_HORIZONS, off) == "vondrak_2011"


def test_jpl_approximate_mode():
    assert pr.obliquity_model(J2000, JplHorizonMode.JPL_APPROXIMATE) == "vondrak_2011"
    cfg = PrecessionConfig(approximate_horizons_astrodienst=False)
    assert pr.obliquity_model(J2000, JplHorizonMode.JPL_APPROXIMATE, cfg) == "iau_1976"


def test_horizon_mode_accepts_plain_int():
    assert pr.obliquity(J2000, 262144) == pr.obliquity(J2000, JplHorizonMode.JPL_HORIZONS)


def test_ldp_peps_at_j2000():
    p, eps = pr.ldp_peps(J2000)
    assert p == pytest.approx(0.0, abs=1e-6)
    assert arcsec(eps) == pytest.approx(84381.406, abs=1e-3)


def test_ldp_peps_long_term_bounded():
    # the obliquity stays within ~22..25 degrees over +-100000 years
    for k in range(-1000, 1001, 50):
        _, eps = pr.ldp_peps(J2000 + k * 36525.0)
        assert 21.5 < math.degrees(eps) < 25.5


def test_jpl_epsilon_correction_clamped():
    first = math.radians(36.726 / 3.6e6)
    last = math.radians(35.415 / 3.6e6)
    assert pr.jpl_epsilon_correction(2400000.5) == pytest.approx(first, rel=1e-12)
    assert pr.jpl_epsilon_correction(2470000.5) == pytest.approx(last, rel=1e-12)
    assert pr.jpl_epsilon_correction(pr.JPL_DCOR_START_JD) == pytest.approx(first, rel=1e-12)


def test_jpl_epsilon_correction_between_entries():
    jd = pr.JPL_DCOR_START_JD + 10.5 * 365.25
    v = pr.jpl_epsilon_correction(jd) * 3.6e6 * 180.0 / math.pi
    # (t - t0) * (dcor[t0] - dcor[t1]) + dcor[t0]
    assert v == pytest.approx(0.5 * (36.335 - 36.321) + 36.335, abs=1e-9)
