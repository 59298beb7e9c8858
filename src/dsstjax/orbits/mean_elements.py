"""Brouwer-Lyddane mean-osculating Keplerian element mapping.

First-order J2 mapping from Schaub and Junkins, *Analytical Mechanics of
Space Systems*, Appendix F: "First-Order Mapping Between Mean and
Osculating Orbit Elements".  It covers the short-period and long-period
J2 terms.

A sign on the perturbation parameter gamma_2 selects the direction
(mean-to-osculating or osculating-to-mean) with a single code path.  The
mapping is written against a :class:`~dsstjax.fields.Field`, so it runs on
plain reals and on dual numbers; it has no data-dependent branching.

The mapping is singular at zero inclination (``tan(i)`` in the
inclination correction) and at the critical inclination
(``1 - 5 cos^2 i = 0``); callers must reject such orbits beforehand.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from dsstjax.config import get_dtype
from dsstjax.constants import J2_EARTH, R_EARTH, TWO_PI
from dsstjax.fields import REAL, Field
from dsstjax.orbits.conversions import (
    longitude_eccentric_to_true,
    longitude_mean_to_eccentric,
)


def brouwer_transform(F: Field, elements: tuple, sign: float, j2: float, radius: float) -> tuple:
    """Apply the first-order Brouwer-Lyddane J2 transformation.

    Implements equations F.1-F.22 from Schaub & Junkins Appendix F.

    Args:
        F: Scalar field of *elements*.
        elements: Keplerian elements ``(a, e, i, raan, argp, M)`` in
            metres and radians.
        sign: ``+1.0`` for mean-to-osculating, ``-1.0`` for
            osculating-to-mean.
        j2: Unnormalized second zonal harmonic (``-C20``).
        radius: Reference radius of *j2* [m].

    Returns:
        tuple: Transformed Keplerian elements. Angles are not wrapped.
    """
    a, e, i, raan, argp, m_anom = elements

    # (F.1/F.2) gamma_2 = sign * (J2/2) * (R/a)^2
    gamma2 = sign * (j2 / 2.0) * (radius / a) ** 2

    eta2 = 1.0 - e * e
    eta = F.sqrt(eta2)
    eta3 = eta2 * eta
    eta4 = eta2 * eta2
    eta6 = eta4 * eta2

    # (F.3) gamma'_2 = gamma_2 / eta^4
    gamma2_prime = gamma2 / eta4

    # (F.4-F.5) eccentric and true anomalies
    e_anom = longitude_mean_to_eccentric(F, e, 0.0, m_anom)
    f = longitude_eccentric_to_true(F, e, 0.0, e_anom)

    cos_f = F.cos(f)
    sin_f = F.sin(f)
    cos2_f = cos_f * cos_f
    cos3_f = cos2_f * cos_f

    # (F.6) a/r = (1 + e*cos(f)) / eta^2
    a_over_r = (1.0 + e * cos_f) / eta2
    a_over_r_cubed = a_over_r * a_over_r * a_over_r

    cos_i = F.cos(i)
    cos2_i = cos_i * cos_i
    cos4_i = cos2_i * cos2_i
    cos6_i = cos4_i * cos2_i

    two_argp = 2.0 * argp
    cos_2argp = F.cos(two_argp)
    cos_2argp_f = F.cos(two_argp + f)
    sin_2argp_f = F.sin(two_argp + f)
    cos_2argp_2f = F.cos(two_argp + 2.0 * f)
    sin_2argp_2f = F.sin(two_argp + 2.0 * f)
    cos_2argp_3f = F.cos(two_argp + 3.0 * f)
    sin_2argp_3f = F.sin(two_argp + 3.0 * f)

    one_minus_5cos2_i = 1.0 - 5.0 * cos2_i
    one_minus_5cos2_i_sq = one_minus_5cos2_i * one_minus_5cos2_i
    long_period = 1.0 - 11.0 * cos2_i - 40.0 * cos4_i / one_minus_5cos2_i

    # ── (F.7) Semi-major axis ──
    a_prime = a + a * gamma2 * (
        (3.0 * cos2_i - 1.0) * (a_over_r_cubed - 1.0 / eta3)
        + 3.0 * (1.0 - cos2_i) * a_over_r_cubed * cos_2argp_2f
    )

    # ── (F.8-F.9) Eccentricity ──
    delta_e1 = (gamma2_prime / 8.0) * e * eta2 * long_period * cos_2argp
    de_inner1 = ((3.0 * cos2_i - 1.0) / eta6) * (
        e * eta + e / (1.0 + eta) + 3.0 * cos_f + 3.0 * e * cos2_f + e * e * cos3_f
    )
    de_inner2 = (
        3.0 * ((1.0 - cos2_i) / eta6)
        * (e + 3.0 * cos_f + 3.0 * e * cos2_f + e * e * cos3_f)
        * cos_2argp_2f
    )
    de_third_term = -gamma2_prime * (1.0 - cos2_i) * (3.0 * cos_2argp_f + cos_2argp_3f)
    delta_e = delta_e1 + (eta2 / 2.0) * (gamma2 * (de_inner1 + de_inner2) + de_third_term)

    # ── (F.10) Inclination ──
    sin_i = F.sqrt(1.0 - cos2_i)
    delta_i = -(e * delta_e1) / (eta2 * F.tan(i)) + (gamma2_prime / 2.0) * cos_i * sin_i * (
        3.0 * cos_2argp_2f + 3.0 * e * cos_2argp_f + e * cos_2argp_3f
    )

    # ── (F.11) M' + omega' + Omega' ──
    equation_of_center = f - m_anom + e * sin_f
    short_period_node = -(gamma2_prime / 2.0) * cos_i * (
        6.0 * equation_of_center
        - 3.0 * sin_2argp_2f
        - 3.0 * e * sin_2argp_f
        - e * sin_2argp_3f
    )
    long_period_node = -(gamma2_prime / 8.0) * e * e * cos_i * (
        11.0 + 80.0 * cos2_i / one_minus_5cos2_i + 200.0 * cos4_i / one_minus_5cos2_i_sq
    )
    mpo = (
        m_anom + argp + raan
        + (gamma2_prime / 8.0) * eta3 * long_period
        - (gamma2_prime / 16.0) * (
            2.0 + e * e
            - 11.0 * (2.0 + 3.0 * e * e) * cos2_i
            - 40.0 * (2.0 + 5.0 * e * e) * cos4_i / one_minus_5cos2_i
            - 400.0 * e * e * cos6_i / one_minus_5cos2_i_sq
        )
        + (gamma2_prime / 4.0) * (
            -6.0 * one_minus_5cos2_i * equation_of_center
            + (3.0 - 5.0 * cos2_i) * (3.0 * sin_2argp_2f + 3.0 * e * sin_2argp_f + e * sin_2argp_3f)
        )
        + long_period_node
        + short_period_node
    )

    # ── (F.12) e * delta_M ──
    aeta_over_r = a_over_r * eta
    aeta_over_r_sq = aeta_over_r * aeta_over_r
    edm_term1 = 2.0 * (3.0 * cos2_i - 1.0) * (aeta_over_r_sq + a_over_r + 1.0) * sin_f
    edm_term2 = 3.0 * (1.0 - cos2_i) * (
        (-aeta_over_r_sq - a_over_r + 1.0) * sin_2argp_f
        + (aeta_over_r_sq + a_over_r + 1.0 / 3.0) * sin_2argp_3f
    )
    e_delta_m = ((gamma2_prime / 8.0) * e * eta3 * long_period
                 - (gamma2_prime / 4.0) * eta3 * (edm_term1 + edm_term2))

    # ── (F.13) Node ──
    delta_raan = long_period_node + short_period_node

    # ── (F.14-F.17) Mean anomaly and eccentricity recovery ──
    sin_m = F.sin(m_anom)
    cos_m = F.cos(m_anom)
    d1 = (e + delta_e) * sin_m + e_delta_m * cos_m
    d2 = (e + delta_e) * cos_m - e_delta_m * sin_m
    m_prime = F.arctan2(d1, d2)
    e_prime = F.sqrt(d1 * d1 + d2 * d2)

    # ── (F.18-F.21) Inclination and node recovery ──
    sin_half_i = F.sin(i / 2.0)
    cos_half_i = F.cos(i / 2.0)
    sin_raan = F.sin(raan)
    cos_raan = F.cos(raan)
    d3 = (sin_half_i + cos_half_i * delta_i / 2.0) * sin_raan + sin_half_i * delta_raan * cos_raan
    d4 = (sin_half_i + cos_half_i * delta_i / 2.0) * cos_raan - sin_half_i * delta_raan * sin_raan
    raan_prime = F.arctan2(d3, d4)
    i_prime = 2.0 * F.arcsin(F.sqrt(d3 * d3 + d4 * d4))

    # (F.22) omega' = (M' + omega' + Omega') - M' - Omega'
    argp_prime = mpo - m_prime - raan_prime

    return a_prime, e_prime, i_prime, raan_prime, argp_prime, m_prime


def _wrap(angle: Array) -> Array:
    return (angle % TWO_PI + TWO_PI) % TWO_PI


def _transform_array(oe: ArrayLike, sign: float, j2: float, radius: float) -> Array:
    oe = jnp.asarray(oe, dtype=get_dtype())
    a, e, i, raan, argp, m = brouwer_transform(REAL, tuple(oe), sign, j2, radius)
    return jnp.array([a, e, i, _wrap(raan), _wrap(argp), _wrap(m)])


def state_koe_mean_to_osc(oe: ArrayLike, j2: float = J2_EARTH, radius: float = R_EARTH) -> Array:
    """Convert mean Keplerian elements to osculating Keplerian elements.

    Args:
        oe: Mean Keplerian elements ``[a, e, i, Omega, omega, M]`` in
            metres and radians.
        j2: Unnormalized second zonal harmonic. Default: ``J2_EARTH``.
        radius: Reference radius [m]. Default: ``R_EARTH``.

    Returns:
        Osculating Keplerian elements, angles wrapped to ``[0, 2 pi)``.

    Examples:
        ```python
        import jax.numpy as jnp
        from dsstjax.constants import R_EARTH
        from dsstjax.orbits import state_koe_mean_to_osc

        mean = jnp.array([R_EARTH + 500e3, 0.001, 0.785, 0.0, 0.0, 0.0])
        osc = state_koe_mean_to_osc(mean)
        ```
    """
    return _transform_array(oe, +1.0, j2, radius)


def state_koe_osc_to_mean(oe: ArrayLike, j2: float = J2_EARTH, radius: float = R_EARTH) -> Array:
    """Convert osculating Keplerian elements to mean Keplerian elements.

    Args:
        oe: Osculating Keplerian elements ``[a, e, i, Omega, omega, M]``
            in metres and radians.
        j2: Unnormalized second zonal harmonic. Default: ``J2_EARTH``.
        radius: Reference radius [m]. Default: ``R_EARTH``.

    Returns:
        Mean Keplerian elements, angles wrapped to ``[0, 2 pi)``.
    """
    return _transform_array(oe, -1.0, j2, radius)
