"""Brouwer-Lyddane averaged orbital state.

Brouwer's zonal theory in Lyddane's formulation: secular, long-period and
short-period effects of ``J2`` to ``J5`` on Keplerian mean elements, with
second-order ``J2`` secular rates.  The ``1 / (1 - 5 cos^2 i)`` factor is
replaced by Phipps' smooth approximation, and an optional empirical
along-track acceleration ``M2`` [rad/s^2] adds a quadratic drift of the
mean anomaly with the matching decay of ``a`` and ``e``.

References:
    1. D. Brouwer, *Solution of the problem of artificial satellite theory
       without drag*, Astronomical Journal 64, 1959.
    2. R. H. Lyddane, *Small eccentricities or inclinations in the Brouwer
       theory of the artificial satellite*, Astronomical Journal 68, 1963.
    3. W. E. Phipps, *Parallelization of the Navy Space Surveillance Center
       (NAVSPASUR) satellite motion model*, NPS thesis, 1992.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from dsstjax.averaging._base import HarmonicsBasedOrbitalState
from dsstjax.fields import REAL, Field
from dsstjax.gravity import GravityModel
from dsstjax.orbits import (
    AveragedKeplerianElements,
    Orbit,
    OrbitType,
    PositionAngleType,
    brouwer_transform,
    convert_orbit,
    longitude_eccentric_to_true,
    longitude_mean_to_eccentric,
)

logger = logging.getLogger(__name__)

_EQUATORIAL_SIN_TOLERANCE = 1e-10
_CRITICAL_TOLERANCE = 1e-3
_BETA = math.ldexp(100.0, -11)


# ---------------------------------------------------------------------------
# Mean to osculating mapping
# ---------------------------------------------------------------------------


def _critical_factor(F: Field, cos_i):
    """Smooth approximation of ``1 / (1 - 5 cos^2 i)`` (Phipps, eq. 2.47-2.48)."""
    x = 1.0 - 5.0 * cos_i * cos_i
    x2 = x * x
    total = 0.0
    term = 1.0
    for k in range(13):
        sign = 1.0 if k % 2 == 0 else -1.0
        total = total + sign * term / math.factorial(k + 1)
        term = term * (_BETA * x2)
    product = 1.0
    for k in range(11):
        product = product * (1.0 + F.exp(-math.ldexp(1.0, k) * _BETA * x2))
    return _BETA * x * total * product


def brouwer_lyddane_mean_to_osculating(
    F: Field,
    elements: tuple,
    zonals: dict[int, float],
    radius: float,
    mu: float,
    dt=0.0,
    m2: float = 0.0,
) -> tuple:
    """Osculating Keplerian elements from Brouwer-Lyddane mean elements.

    The mean elements are propagated by *dt* seconds with the secular
    rates before the periodic corrections are applied, so ``dt = 0``
    gives the osculating orbit at the epoch of the mean elements.

    Args:
        F: Scalar field of *elements*.
        elements: Mean Keplerian elements ``(a, e, i, raan, argp, M)``.
        zonals: Unnormalized ``J_n`` for ``n = 2..5`` (missing degrees are
            0). ``J2`` must be non-zero.
        radius: Reference radius of the harmonics [m].
        mu: Gravitational parameter [m^3/s^2].
        dt: Time since the epoch of the mean elements [s].
        m2: Empirical along-track acceleration coefficient [rad/s^2].

    Returns:
        tuple: Osculating Keplerian elements with mean anomaly.
    """
    a, e, i, raan, argp, m_anom = elements

    mean_motion = F.sqrt(mu / a) / a

    # yp_n from C_n0 = -J_n
    q = radius / a
    ql = q * q
    y2 = 0.5 * zonals.get(2, 0.0) * ql
    eta = F.sqrt(1.0 - e * e)
    n2 = eta * eta
    n3 = n2 * eta
    n4 = n2 * n2
    n6 = n4 * n2
    n8 = n4 * n4
    n10 = n8 * n2
    yp2 = y2 / n4
    ql = ql * q
    yp3 = -zonals.get(3, 0.0) * ql / n6
    ql = ql * q
    yp4 = -0.375 * zonals.get(4, 0.0) * ql / n8
    ql = ql * q
    yp5 = -zonals.get(5, 0.0) * ql / n10

    sin_i = F.sin(i)
    sin_i2 = sin_i * sin_i
    cos_i = F.cos(i)
    cos_i2 = cos_i * cos_i
    cos_i3 = cos_i2 * cos_i
    cos_i4 = cos_i2 * cos_i2
    cos_i6 = cos_i4 * cos_i2
    c5c2 = 1.0 / _critical_factor(F, cos_i)
    c3c2 = 3.0 * cos_i2 - 1.0

    e2 = e * e
    e3 = e2 * e
    e4 = e2 * e2

    # ── secular rates (in units of the Keplerian mean motion) ──
    lt = (1.0
          + 1.5 * yp2 * eta * c3c2
          + 0.09375 * yp2 * yp2 * eta * (
              -15.0 + 16.0 * eta + 25.0 * n2
              + (30.0 - 96.0 * eta - 90.0 * n2) * cos_i2
              + (105.0 + 144.0 * eta + 25.0 * n2) * cos_i4)
          + 0.9375 * yp4 * eta * e2 * (3.0 - 30.0 * cos_i2 + 35.0 * cos_i4))
    gt = (-1.5 * yp2 * c5c2
          + 0.09375 * yp2 * yp2 * (
              -35.0 + 24.0 * eta + 25.0 * n2
              + (90.0 - 192.0 * eta - 126.0 * n2) * cos_i2
              + (385.0 + 360.0 * eta + 45.0 * n2) * cos_i4)
          + 0.3125 * yp4 * (
              21.0 - 9.0 * n2 + (-270.0 + 126.0 * n2) * cos_i2 + (385.0 - 189.0 * n2) * cos_i4))
    ht = (-3.0 * yp2 * cos_i
          + 0.375 * yp2 * yp2 * (
              (-5.0 + 12.0 * eta + 9.0 * n2) * cos_i + (-35.0 - 36.0 * eta - 5.0 * n2) * cos_i3)
          + 1.25 * yp4 * (5.0 - 3.0 * n2) * cos_i * (3.0 - 7.0 * cos_i2))

    # ── long-period coefficients ──
    c_a = 1.0 - 11.0 * cos_i2 - 40.0 * cos_i4 / c5c2
    c_b = 1.0 - 3.0 * cos_i2 - 8.0 * cos_i4 / c5c2
    c_c = 1.0 - 9.0 * cos_i2 - 24.0 * cos_i4 / c5c2
    c_d = 1.0 - 5.0 * cos_i2 - 16.0 * cos_i4 / c5c2

    qyp2_4 = 3.0 * yp2 * yp2 * c_a - 10.0 * yp4 * c_b
    qyp52 = e3 * cos_i * (
        0.5 * c_d / sin_i
        + sin_i * (5.0 + 32.0 * cos_i2 / c5c2 + 80.0 * cos_i4 / c5c2 / c5c2))
    qyp22 = (2.0 + e2 - 11.0 * (2.0 + 3.0 * e2) * cos_i2
             - 40.0 * (2.0 + 5.0 * e2) * cos_i4 / c5c2
             - 400.0 * e2 * cos_i6 / c5c2 / c5c2)
    qyp42 = (qyp22 + 4.0 * (2.0 + e2 - (2.0 + 3.0 * e2) * cos_i2)) / 5.0
    qyp52bis = (e * cos_i * sin_i * (4.0 + 3.0 * e2)
                * (3.0 + 16.0 * cos_i2 / c5c2 + 40.0 * cos_i4 / c5c2 / c5c2))

    dei3sg = 35.0 / 96.0 * yp5 / yp2 * e2 * n2 * c_d * sin_i
    de2sg = -1.0 / 12.0 * e * n2 / yp2 * qyp2_4
    deisg = (-35.0 / 128.0 * yp5 / yp2 * e2 * n2 * c_d
             + 0.25 * n2 / yp2 * (yp3 + 5.0 / 16.0 * yp5 * (4.0 + 3.0 * e2) * c_c)) * sin_i
    de0 = e2 * n2 / 24.0 / yp2 * qyp2_4

    qyp52quotient = e * (-32.0 + 81.0 * e4) / (4.0 + 3.0 * e2 + eta * (4.0 + 9.0 * e2))
    dlgs2g = (1.0 / 48.0 / yp2 * (-3.0 * yp2 * yp2 * qyp22 + 10.0 * yp4 * qyp42)
              + n3 / yp2 * qyp2_4 / 24.0)
    dlgc3g = (35.0 / 384.0 * yp5 / yp2 * n3 * e * c_d * sin_i
              + 35.0 / 1152.0 * yp5 / yp2 * (
                  2.0 * qyp52 * cos_i - e * c_d * sin_i * (3.0 + 2.0 * e2)))
    dlgcg = (-yp3 * e * cos_i2 / (4.0 * yp2 * sin_i)
             + 0.078125 * yp5 / yp2 * (
                 -e * cos_i2 / sin_i * (4.0 + 3.0 * e2) + e2 * sin_i * (26.0 + 9.0 * e2)) * c_c
             - 0.46875 * yp5 / yp2 * qyp52bis * cos_i
             + 0.25 * yp3 / yp2 * sin_i * e / (1.0 + n3) * (3.0 - e2 * (3.0 - e2))
             + 0.078125 * yp5 / yp2 * n2 * c_c * qyp52quotient * sin_i)

    qyp24 = (3.0 * yp2 * yp2 * (11.0 + 80.0 * cos_i2 / sin_i + 200.0 * cos_i4 / sin_i2)
             - 10.0 * yp4 * (3.0 + 16.0 * cos_i2 / sin_i + 40.0 * cos_i4 / sin_i2))
    dh2sgcg = 35.0 / 144.0 * yp5 / yp2 * qyp52
    dhsgcg = -e2 * cos_i / (12.0 * yp2) * qyp24
    dhcg = (-35.0 / 576.0 * yp5 / yp2 * qyp52
            + e * cos_i / (4.0 * yp2 * sin_i) * (yp3 + 0.3125 * yp5 * (4.0 + 3.0 * e2) * c_c)
            + 1.875 / (4.0 * yp2) * yp5 * qyp52bis)

    # ── short-period coefficients ──
    a_c = -yp2 * c3c2 * a / n3
    a_cbis = y2 * a * c3c2
    a_c2g2f = y2 * a * 3.0 * sin_i2

    qe = 0.5 * n2 * y2 * c3c2 / n6
    e_c = qe * e / (1.0 + n3) * (3.0 - e2 * (3.0 - e2))
    e_cf = 3.0 * qe
    e_2cf = 3.0 * e * qe
    e_3cf = e2 * qe
    qe = 0.5 * n2 * y2 * 3.0 * (1.0 - cos_i2) / n6
    e_c2f2g = qe * e
    e_cfc2f2g = 3.0 * qe
    e_2cfc2f2g = 3.0 * e * qe
    e_3cfc2f2g = e2 * qe
    qe = -0.5 * yp2 * n2 * (1.0 - cos_i2)
    e_c2gf = 3.0 * qe
    e_c2g3f = qe

    i_de = -e * cos_i / (n2 * sin_i)
    i_sfs2f2g = e * yp2 * cos_i * sin_i
    i_cfc2f2g = 2.0 * i_sfs2f2g
    i_c2f2g = 1.5 * yp2 * cos_i * sin_i

    qgl1 = 0.25 * yp2
    qgl2 = 0.25 * yp2 * e * n2 / (1.0 + eta)
    gl_f = -6.0 * qgl1 * c5c2
    gl_l = 6.0 * qgl1 * c5c2
    gl_sf = -6.0 * qgl1 * c5c2 * e + 2.0 * qgl2 * c3c2
    gl_osf = 2.0 * qgl2 * c3c2
    qgl1 = qgl1 * (3.0 - 5.0 * cos_i2)
    qgl2 = qgl2 * 3.0 * (1.0 - cos_i2)
    gl_s2f2g = 3.0 * qgl1
    gl_s2gf = 3.0 * e * qgl1 + qgl2
    gl_os2gf = -qgl2
    gl_s2g3f = qgl1 * e + qgl2 / 3.0
    gl_os2g3f = qgl2

    qh = 3.0 * yp2 * cos_i
    h_f = -qh
    h_l = qh
    h_sf = -e * qh
    h_cfs2g2f = 2.0 * e * yp2 * cos_i
    h_s2g2f = 1.5 * yp2 * cos_i
    h_sfc2g2f = -e * yp2 * cos_i

    qedl = -0.25 * yp2 * n3
    edl_s2g = 1.0 / 24.0 * e * n3 / yp2 * qyp2_4
    edl_cg = (-0.25 * yp3 / yp2 * n3 * sin_i
              - 0.078125 * yp5 / yp2 * n3 * sin_i * (4.0 + 9.0 * e2) * c_c)
    edl_c3g = 35.0 / 384.0 * yp5 / yp2 * n3 * e2 * c_d * sin_i
    edl_sf = 2.0 * qedl * c3c2
    edl_s2gf = 3.0 * qedl * (1.0 - cos_i2)
    edl_s2g3f = qedl / 3.0

    # Phipps eq. 2.41 and 2.45
    a_rate = -4.0 * a / (3.0 * mean_motion)
    e_rate = -4.0 * e * n2 / (3.0 * mean_motion)

    # ── secular propagation ──
    xnot = mean_motion * dt
    lpp = m_anom + lt * xnot + m2 * dt * dt
    gpp = argp + gt * xnot
    hpp = raan + ht * xnot
    a_drag = a_rate * m2 * dt
    e_drag = e_rate * m2 * dt

    # ── long-period terms ──
    cg1 = F.cos(gpp)
    sg1 = F.sin(gpp)
    c2g = cg1 * cg1 - sg1 * sg1
    s2g = 2.0 * cg1 * sg1
    c3g = c2g * cg1 - s2g * sg1
    sg2 = sg1 * sg1
    sg3 = sg1 * sg2

    d1e = sg3 * dei3sg + sg1 * deisg + sg2 * de2sg + de0
    lp_p_gp = s2g * dlgs2g + c3g * dlgc3g + cg1 * dlgcg + lpp + gpp
    hp = sg2 * cg1 * dh2sgcg + sg1 * cg1 * dhsgcg + cg1 * dhcg + hpp

    # ── short-period terms ──
    # True anomaly on the same branch as the mean anomaly
    ecc_anom = longitude_mean_to_eccentric(F, e, 0.0, lpp)
    f = longitude_eccentric_to_true(F, e, 0.0, ecc_anom)
    cos_ea = F.cos(ecc_anom)
    e_e = 1.0 / (1.0 - e * cos_ea)
    cf1 = (cos_ea - e) * e_e
    sf1 = F.sin(ecc_anom) * eta * e_e

    c2f = cf1 * cf1 - sf1 * sf1
    s2f = 2.0 * cf1 * sf1
    c3f = c2f * cf1 - s2f * sf1
    s3f = c2f * sf1 + s2f * cf1
    cf2 = cf1 * cf1
    cf3 = cf1 * cf2

    c2g1f = cf1 * c2g - sf1 * s2g
    c2g2f = c2f * c2g - s2f * s2g
    c2g3f = c3f * c2g - s3f * s2g
    s2g1f = cf1 * s2g + c2g * sf1
    s2g2f = c2f * s2g + c2g * s2f
    s2g3f = c3f * s2g + c2g * s3f

    e_e3 = e_e * e_e * e_e
    sigma = e_e * e_e * n2 + e_e

    a_osc = e_e3 * a_cbis + a_drag + a + a_c + e_e3 * c2g2f * a_c2g2f

    e_osc = (d1e + e_drag + e + e_c
             + cf1 * e_cf + cf2 * e_2cf + cf3 * e_3cf
             + c2g2f * (e_c2f2g + cf1 * e_cfc2f2g + cf2 * e_2cfc2f2g + cf3 * e_3cfc2f2g)
             + c2g1f * e_c2gf + c2g3f * e_c2g3f)

    i_osc = (d1e * i_de + i + sf1 * s2g2f * i_sfs2f2g
             + cf1 * c2g2f * i_cfc2f2g + c2g2f * i_c2f2g)

    g_p_l = (lp_p_gp + f * gl_f + lpp * gl_l + sf1 * gl_sf + sigma * sf1 * gl_osf
             + s2g2f * gl_s2f2g + s2g1f * gl_s2gf + sigma * s2g1f * gl_os2gf
             + s2g3f * gl_s2g3f + sigma * s2g3f * gl_os2g3f)

    h_osc = (hp + f * h_f + lpp * h_l + sf1 * h_sf + cf1 * s2g2f * h_cfs2g2f
             + s2g2f * h_s2g2f + c2g2f * sf1 * h_sfc2g2f)

    edl = (s2g * edl_s2g + cg1 * edl_cg + c3g * edl_c3g + sf1 * edl_sf
           + s2g1f * edl_s2gf + s2g3f * edl_s2g3f
           + sf1 * sigma * edl_sf - s2g1f * sigma * edl_s2gf + 3.0 * s2g3f * sigma * edl_s2g3f)

    # Argument of (e + i edl) exp(i lpp), kept continuous with lpp
    l_osc = lpp + F.arctan2(edl, e_osc)
    g_osc = g_p_l - l_osc

    return (a_osc, e_osc, i_osc, h_osc, g_osc, l_osc)


# ---------------------------------------------------------------------------
# Averaged state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class BrouwerLyddaneOrbitalState(HarmonicsBasedOrbitalState):
    """Keplerian mean elements of the Brouwer-Lyddane theory.

    Uses the unnormalized ``J2`` to ``J5`` of the gravity model; ``J2``
    must be non-zero.

    Args:
        epoch: Epoch of the mean elements.
        averaged_elements: Keplerian mean elements.
        frame: Pseudo-inertial frame of the elements.
        gravity_model: Gravity field providing ``J_n``, ``radius`` and ``gm``.

    Examples:
        ```python
        from dsstjax import GCRF, Epoch
        from dsstjax.averaging import BrouwerLyddaneOrbitalState
        from dsstjax.gravity import GravityModel
        from dsstjax.orbits import AveragedKeplerianElements

        model = GravityModel.zonal(3.986004415e14, 6378136.3, {2: 1.0826e-3})
        state = BrouwerLyddaneOrbitalState(
            Epoch(2024, 1, 1), AveragedKeplerianElements(7.0e6, 1e-3, 0.9, 0.1, 0.2, 0.3),
            GCRF, model)
        osc = state.to_osculating_orbit()
        ```
    """

    THEORY = "Brouwer-Lyddane"
    ELEMENTS_TYPE = AveragedKeplerianElements

    @property
    def j2(self) -> float:
        return self._zonals(2)[2]

    def _check_domain(self, a: float, e: float, i: float) -> None:
        radius = self.gravity_model.radius
        if self.j2 == 0.0:
            raise self._fail("the gravity model has no J2 term")
        if not a > radius:
            raise self._fail(f"semi-major axis {a} m is not above the reference radius {radius} m")
        if e < 0.0 or e >= 1.0:
            raise self._fail(f"eccentricity must be in [0, 1), got {e}")
        if abs(math.sin(i)) < _EQUATORIAL_SIN_TOLERANCE:
            raise self._fail(f"inclination {i} rad is too close to equatorial")
        cos_i = math.cos(i)
        if abs(1.0 - 5.0 * cos_i * cos_i) < _CRITICAL_TOLERANCE:
            raise self._fail(f"inclination {i} rad is too close to the critical inclination")

    def _checked_values(self, result: tuple) -> tuple[float, ...]:
        values = tuple(float(REAL.value(x)) for x in result)
        if not all(math.isfinite(x) for x in values):
            raise self._fail("mapping produced non-finite elements")
        if not 0.0 <= values[1] < 1.0:
            raise self._fail(f"mapping produced an eccentricity {values[1]} outside [0, 1)")
        return values

    def to_osculating_orbit(self) -> Orbit:
        elements = self.averaged_elements.to_tuple()
        self._check_domain(*elements[:3])
        result = brouwer_lyddane_mean_to_osculating(
            REAL, tuple(REAL.constant(x) for x in elements), self._zonals(5),
            self.gravity_model.radius, self.mu,
        )
        return self._checked(
            Orbit(OrbitType.KEPLERIAN, self._checked_values(result), self.epoch, self.frame,
                  self.mu, PositionAngleType.MEAN)
        )

    @classmethod
    def from_osculating(
        cls, orbit: Orbit, gravity_model: GravityModel
    ) -> BrouwerLyddaneOrbitalState:
        """First-order mean elements of an osculating orbit.

        Removes the first-order ``J2`` periodic terms only, which is a
        starting estimate for the full theory.  For an exact inverse use
        :class:`~dsstjax.averaging.FixedPointConverter`.

        Args:
            orbit: Osculating orbit in any representation.
            gravity_model: Gravity field of the theory.

        Returns:
            BrouwerLyddaneOrbitalState: State at the orbit's epoch and frame.

        Raises:
            OrbitConversionError: If the orbit is outside the theory's domain.
        """
        kep = convert_orbit(orbit, OrbitType.KEPLERIAN, PositionAngleType.MEAN)
        osc = tuple(float(kep.field.value(x)) for x in kep.elements)
        template = cls(orbit.epoch, AveragedKeplerianElements(*osc), orbit.frame, gravity_model)
        template._check_domain(*osc[:3])
        result = brouwer_transform(
            REAL, tuple(REAL.constant(x) for x in osc), -1.0,
            template.j2, gravity_model.radius,
        )
        mean = template._checked_values(result)
        logger.debug("Brouwer-Lyddane mean elements from osculating orbit: %s", mean)
        return template.with_averaged_elements(AveragedKeplerianElements(*mean))
