"""Eckstein-Hechler averaged orbital state.

Closed-form J2 to J6 periodic corrections for near-circular, non
critically inclined orbits, expressed on circular elements with mean
latitude argument.  Corrections are evaluated at the epoch of the mean
elements, where the secular drift vanishes.

References:
    1. M. C. Eckstein and F. Hechler, *A reliable derivation of the
       perturbations due to any zonal and tesseral harmonics of the
       geopotential for nearly-circular satellite orbits*, ESRO SR-13, 1970.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from dsstjax.averaging._base import HarmonicsBasedOrbitalState
from dsstjax.fields import Field
from dsstjax.orbits import AveragedCircularElements, Orbit, OrbitType, PositionAngleType

_MAX_ECCENTRICITY = 0.1
_EQUATORIAL_SIN_TOLERANCE = 1e-10
_CRITICAL_TOLERANCE = 1e-3
# 63.4 and 116.6 degrees
_CRITICAL_INCLINATIONS = (1.1071487, 2.0344439)


def eckstein_hechler_mean_to_osculating(
    F: Field, elements: tuple, zonals: dict[int, float], radius: float
) -> tuple:
    """Osculating circular elements from Eckstein-Hechler mean elements.

    Args:
        F: Scalar field of *elements*.
        elements: Mean circular elements ``(a, ex, ey, i, raan, alpha_m)``.
        zonals: Unnormalized ``J_n`` for ``n = 2..6`` (missing degrees are 0).
        radius: Reference radius of the harmonics [m].

    Returns:
        tuple: Osculating circular elements with mean latitude argument.
    """
    a, ex, ey, i, raan, alpha = elements

    # g_n = C_n0 (R/a)^n with C_n0 = -J_n
    r_over_a = radius / a
    g = {}
    ratio_n = r_over_a
    for n in range(2, 7):
        ratio_n = ratio_n * r_over_a
        g[n] = -zonals.get(n, 0.0) * ratio_n
    g2, g3, g4, g5, g6 = g[2], g[3], g[4], g[5], g[6]

    cos_i = F.cos(i)
    sin_i = F.sin(i)
    s2 = sin_i * sin_i
    s4 = s2 * s2
    s6 = s4 * s2

    rdpom = -0.75 * g2 * (4.0 - 5.0 * s2)
    q = 3.0 * sin_i / (8.0 * rdpom)
    eps2 = q * g3 * (4.0 - 5.0 * s2) - q * g5 * (10.0 - 35.0 * s2 + 26.25 * s4)

    rdl = 1.0 - 1.5 * g2 * (3.0 - 4.0 * s2)
    qq = -1.5 * g2 / rdl
    qh = 0.375 * (ey - eps2) / rdpom
    ql = 0.375 * ex / (sin_i * rdpom)

    cl1 = F.cos(alpha)
    sl1 = F.sin(alpha)
    cl2 = 2.0 * cl1 * cl1 - 1.0
    sl2 = 2.0 * cl1 * sl1
    cl3 = cl2 * cl1 - sl2 * sl1
    sl3 = cl2 * sl1 + sl2 * cl1
    cl4 = cl3 * cl1 - sl3 * sl1
    sl4 = cl3 * sl1 + sl3 * cl1
    cl5 = cl4 * cl1 - sl4 * sl1
    sl5 = cl4 * sl1 + sl4 * cl1
    cl6 = cl5 * cl1 - sl5 * sl1

    # ── semi-major axis ──
    rda = (
        qq * ((2.0 - 3.5 * s2) * ex * cl1 + (2.0 - 2.5 * s2) * ey * sl1
              + s2 * cl2 + 3.5 * s2 * (ex * cl3 + ey * sl3))
        + 0.75 * g2 * g2 * s2 * (7.0 * (2.0 - 3.0 * s2) * cl2 + s2 * cl4)
        - 0.75 * g3 * sin_i * ((4.0 - 5.0 * s2) * sl1 + 5.0 / 3.0 * s2 * sl3)
        + 0.25 * g4 * s2 * ((15.0 - 17.5 * s2) * cl2 + 4.375 * s2 * cl4)
        + 3.75 * g5 * sin_i * ((2.625 * s4 - 3.5 * s2 + 1.0) * sl1
                               + 7.0 / 6.0 * s2 * (1.0 - 1.125 * s2) * sl3
                               + 21.0 / 80.0 * s4 * sl5)
        + 105.0 / 16.0 * g6 * s2 * ((3.0 * s2 - 1.0 - 33.0 / 16.0 * s4) * cl2
                                    + 0.75 * (1.1 * s4 - s2) * cl4
                                    - 11.0 / 80.0 * s4 * cl6)
    )

    # ── eccentricity vector ──
    rdex = qq * (
        (1.0 - 1.25 * s2) * cl1 + 0.5 * (3.0 - 5.0 * s2) * ex * cl2
        + (2.0 - 1.5 * s2) * ey * sl2 + 7.0 / 12.0 * s2 * cl3
        + 17.0 / 8.0 * s2 * (ex * cl4 + ey * sl4)
    )
    rdey = qq * (
        (1.0 - 1.75 * s2) * sl1 + (1.0 - 3.0 * s2) * ex * sl2
        + (2.0 * s2 - 1.5) * ey * cl2 + 7.0 / 12.0 * s2 * sl3
        + 17.0 / 8.0 * s2 * (ex * sl4 - ey * cl4)
    )

    # ── node ──
    rdom = (
        -qq * cos_i * (3.5 * ex * sl1 - 2.5 * ey * cl1 - 0.5 * sl2
                       + 7.0 / 6.0 * (ey * cl3 - ex * sl3))
        + ql * g3 * cos_i * (4.0 - 15.0 * s2)
        - ql * 2.5 * g5 * cos_i * (4.0 - 42.0 * s2 + 52.5 * s4)
    )

    # ── inclination ──
    rdxi = (
        0.5 * qq * sin_i * cos_i * (ey * sl1 - ex * cl1 + cl2
                                    + 7.0 / 3.0 * (ex * cl3 + ey * sl3))
        - qh * g3 * cos_i * (4.0 - 5.0 * s2)
        + qh * 2.5 * g5 * cos_i * (4.0 - 14.0 * s2 + 10.5 * s4)
    )

    # ── latitude argument ──
    rdxl = (
        qq * ((7.0 - 77.0 / 8.0 * s2) * ex * sl1 + (55.0 / 8.0 * s2 - 7.5) * ey * cl1
              + (1.25 * s2 - 0.5) * sl2
              + (77.0 / 24.0 * s2 - 7.0 / 6.0) * (ex * sl3 - ey * cl3))
        + ql * g3 * (53.0 * s2 - 4.0 - 57.5 * s4)
        + ql * 2.5 * g5 * (4.0 - 96.0 * s2 + 269.5 * s4 - 183.75 * s6)
    )

    return (
        a * (1.0 + rda),
        ex + rdex,
        ey + rdey,
        i + rdxi,
        raan + rdom,
        alpha + rdxl,
    )


@dataclass(frozen=True, eq=False)
class EcksteinHechlerOrbitalState(HarmonicsBasedOrbitalState):
    """Circular mean elements of the Eckstein-Hechler theory.

    Uses the unnormalized zonal coefficients ``J_2 .. J_6`` of the gravity
    model.

    Args:
        epoch: Epoch of the mean elements.
        averaged_elements: Circular mean elements.
        frame: Pseudo-inertial frame of the elements.
        gravity_model: Gravity field of the theory.
    """

    THEORY = "Eckstein-Hechler"
    ELEMENTS_TYPE = AveragedCircularElements

    def _check_domain(self) -> None:
        el = self.averaged_elements
        radius = self.gravity_model.radius
        if el.semi_major_axis < radius:
            raise self._fail(
                f"semi-major axis {el.semi_major_axis} m is below the reference radius {radius} m"
            )
        e = math.hypot(el.circular_ex, el.circular_ey)
        if e > _MAX_ECCENTRICITY:
            raise self._fail(f"eccentricity {e} is too large (max {_MAX_ECCENTRICITY})")
        i = el.inclination
        if i < 0.0 or i > math.pi or abs(math.sin(i)) < _EQUATORIAL_SIN_TOLERANCE:
            raise self._fail(f"inclination {i} rad is equatorial or out of range")
        for critical in _CRITICAL_INCLINATIONS:
            if abs(i - critical) < _CRITICAL_TOLERANCE:
                raise self._fail(f"inclination {i} rad is too close to the critical inclination")

    def to_osculating_orbit(self) -> Orbit:
        self._check_domain()
        mean = self.mean_orbit()
        elements = eckstein_hechler_mean_to_osculating(
            mean.field, mean.elements, self._zonals(6), self.gravity_model.radius
        )
        return self._checked(
            Orbit(OrbitType.CIRCULAR, elements, self.epoch, self.frame, self.mu,
                  PositionAngleType.MEAN)
        )
