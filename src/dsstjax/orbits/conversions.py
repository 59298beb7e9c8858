"""Field-generic conversions between orbit element sets and angle types.

Every conversion goes through the equinoctial elements, which are
non-singular for circular and equatorial orbits.  Functions take the
scalar :class:`~dsstjax.fields.Field` explicitly and work unchanged on
batched scalars, so the quadrature code can convert all nodes at once.

The Keplerian element set is singular for ``e = 0`` (perigee undefined)
and ``i = 0`` (node undefined); values produced for such orbits are
finite but arbitrary in the undefined angles.

References:
    1. R. A. Broucke and P. J. Cefola, "On the equinoctial orbit elements",
       *Celestial Mechanics* 5, 1972, pp. 303-310.
    2. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, 2012.
"""

from __future__ import annotations

from dsstjax.fields import Field, Vector3, cross, dot, linear_combination, norm
from dsstjax.orbits.orbit import Orbit, OrbitType, PositionAngleType

# Newton iterations for the Kepler equation; quadratic convergence from a
# first-order starter reaches machine precision well before this for e < 0.95.
_KEPLER_ITERATIONS = 15


# ---------------------------------------------------------------------------
# Longitude (anomaly) conversions
# ---------------------------------------------------------------------------


def longitude_eccentric_to_true(F: Field, ex, ey, le):
    """Eccentric longitude to true longitude.

    Args:
        F: Scalar field.
        ex: Eccentricity vector x component.
        ey: Eccentricity vector y component.
        le: Eccentric longitude [rad].

    Returns:
        True longitude [rad].
    """
    epsilon = F.sqrt(1.0 - ex * ex - ey * ey)
    cos_le = F.cos(le)
    sin_le = F.sin(le)
    num = ex * sin_le - ey * cos_le
    den = epsilon + 1.0 - ex * cos_le - ey * sin_le
    return le + 2.0 * F.arctan(num / den)


def longitude_true_to_eccentric(F: Field, ex, ey, lv):
    """True longitude to eccentric longitude."""
    epsilon = F.sqrt(1.0 - ex * ex - ey * ey)
    cos_lv = F.cos(lv)
    sin_lv = F.sin(lv)
    num = ey * cos_lv - ex * sin_lv
    den = epsilon + 1.0 + ex * cos_lv + ey * sin_lv
    return lv + 2.0 * F.arctan(num / den)


def longitude_eccentric_to_mean(F: Field, ex, ey, le):
    """Eccentric longitude to mean longitude (Kepler's equation)."""
    return le - ex * F.sin(le) + ey * F.cos(le)


def longitude_mean_to_eccentric(F: Field, ex, ey, lm):
    """Mean longitude to eccentric longitude.

    Solves ``lE - ex sin(lE) + ey cos(lE) = lM`` with a fixed number of
    Newton iterations, so the same operations run for every field and
    derivatives converge together with the value.
    """
    le = lm + ex * F.sin(lm) - ey * F.cos(lm)
    for _ in range(_KEPLER_ITERATIONS):
        cos_le = F.cos(le)
        sin_le = F.sin(le)
        f = le - ex * sin_le + ey * cos_le - lm
        fp = 1.0 - ex * cos_le - ey * sin_le
        le = le - f / fp
    return le


def convert_longitude(
    F: Field,
    ex,
    ey,
    longitude,
    from_type: PositionAngleType,
    to_type: PositionAngleType,
):
    """Convert a longitude between mean, eccentric and true kinds.

    Args:
        F: Scalar field.
        ex: Eccentricity vector x component.
        ey: Eccentricity vector y component.
        longitude: Longitude of kind *from_type* [rad].
        from_type: Kind of *longitude*.
        to_type: Requested kind.

    Returns:
        Longitude of kind *to_type* [rad].
    """
    if from_type == to_type:
        return longitude
    if from_type == PositionAngleType.MEAN:
        le = longitude_mean_to_eccentric(F, ex, ey, longitude)
    elif from_type == PositionAngleType.TRUE:
        le = longitude_true_to_eccentric(F, ex, ey, longitude)
    else:
        le = longitude
    if to_type == PositionAngleType.MEAN:
        return longitude_eccentric_to_mean(F, ex, ey, le)
    if to_type == PositionAngleType.TRUE:
        return longitude_eccentric_to_true(F, ex, ey, le)
    return le


# ---------------------------------------------------------------------------
# Element-set conversions (angle kind preserved)
# ---------------------------------------------------------------------------


def keplerian_to_equinoctial(F: Field, a, e, i, raan, argp, anomaly) -> tuple:
    """Keplerian elements to equinoctial elements."""
    pa = argp + raan
    tan_half_i = F.tan(i / 2.0)
    return (
        a,
        e * F.cos(pa),
        e * F.sin(pa),
        tan_half_i * F.cos(raan),
        tan_half_i * F.sin(raan),
        anomaly + pa,
    )


def equinoctial_to_keplerian(F: Field, a, ex, ey, hx, hy, l) -> tuple:
    """Equinoctial elements to Keplerian elements."""
    raan = F.arctan2(hy, hx)
    pa = F.arctan2(ey, ex)
    return (
        a,
        F.sqrt(ex * ex + ey * ey),
        2.0 * F.arctan(F.sqrt(hx * hx + hy * hy)),
        raan,
        pa - raan,
        l - pa,
    )


def circular_to_equinoctial(F: Field, a, ex, ey, i, raan, alpha) -> tuple:
    """Circular elements to equinoctial elements."""
    cos_raan = F.cos(raan)
    sin_raan = F.sin(raan)
    tan_half_i = F.tan(i / 2.0)
    return (
        a,
        ex * cos_raan - ey * sin_raan,
        ex * sin_raan + ey * cos_raan,
        tan_half_i * cos_raan,
        tan_half_i * sin_raan,
        alpha + raan,
    )


def equinoctial_to_circular(F: Field, a, ex, ey, hx, hy, l) -> tuple:
    """Equinoctial elements to circular elements."""
    raan = F.arctan2(hy, hx)
    cos_raan = F.cos(raan)
    sin_raan = F.sin(raan)
    return (
        a,
        ex * cos_raan + ey * sin_raan,
        ey * cos_raan - ex * sin_raan,
        2.0 * F.arctan(F.sqrt(hx * hx + hy * hy)),
        raan,
        l - raan,
    )


# ---------------------------------------------------------------------------
# Equinoctial <-> Cartesian
# ---------------------------------------------------------------------------


def equinoctial_to_cartesian(F: Field, mu, a, ex, ey, hx, hy, le) -> tuple[Vector3, Vector3]:
    """Position and velocity from equinoctial elements.

    Args:
        F: Scalar field.
        mu: Gravitational parameter [m^3/s^2].
        a: Semi-major axis [m].
        ex: Eccentricity vector x component.
        ey: Eccentricity vector y component.
        hx: Inclination vector x component.
        hy: Inclination vector y component.
        le: Eccentric longitude [rad].

    Returns:
        tuple: ``(position, velocity)`` 3-tuples [m, m/s].
    """
    hx2 = hx * hx
    hy2 = hy * hy
    fact_h = 1.0 / (1.0 + hx2 + hy2)

    # Orbital plane axes
    u = ((1.0 + hx2 - hy2) * fact_h, 2.0 * hx * hy * fact_h, -2.0 * hy * fact_h)
    v = (2.0 * hx * hy * fact_h, (1.0 - hx2 + hy2) * fact_h, 2.0 * hx * fact_h)

    exey = ex * ey
    ex2 = ex * ex
    ey2 = ey * ey
    beta = 1.0 / (1.0 + F.sqrt(1.0 - ex2 - ey2))

    cos_le = F.cos(le)
    sin_le = F.sin(le)
    ex_cos_ey_sin = ex * cos_le + ey * sin_le

    x = a * ((1.0 - beta * ey2) * cos_le + beta * exey * sin_le - ex)
    y = a * ((1.0 - beta * ex2) * sin_le + beta * exey * cos_le - ey)
    factor = F.sqrt(mu / a) / (1.0 - ex_cos_ey_sin)
    x_dot = factor * (-sin_le + beta * ey * ex_cos_ey_sin)
    y_dot = factor * (cos_le - beta * ex * ex_cos_ey_sin)

    return linear_combination((x, u), (y, v)), linear_combination((x_dot, u), (y_dot, v))


def cartesian_to_equinoctial(F: Field, mu, position: Vector3, velocity: Vector3) -> tuple:
    """Equinoctial elements (true longitude) from position and velocity.

    Singular only for exactly retrograde equatorial orbits (``i = pi``).

    Args:
        F: Scalar field.
        mu: Gravitational parameter [m^3/s^2].
        position: Position 3-tuple [m].
        velocity: Velocity 3-tuple [m/s].

    Returns:
        tuple: ``(a, ex, ey, hx, hy, lv)``.
    """
    r = norm(F, position)
    v2 = dot(velocity, velocity)
    r_v2_on_mu = r * v2 / mu
    a = r / (2.0 - r_v2_on_mu)

    momentum = cross(position, velocity)
    h = norm(F, momentum)
    w = (momentum[0] / h, momentum[1] / h, momentum[2] / h)
    d = 1.0 / (1.0 + w[2])
    hx = -d * w[1]
    hy = d * w[0]

    cos_lv = (position[0] - d * position[2] * w[0]) / r
    sin_lv = (position[1] - d * position[2] * w[1]) / r
    lv = F.arctan2(sin_lv, cos_lv)

    e_sin_e = dot(position, velocity) / F.sqrt(mu * a)
    e_cos_e = r_v2_on_mu - 1.0
    e2 = e_cos_e * e_cos_e + e_sin_e * e_sin_e
    f = e_cos_e - e2
    g = F.sqrt(1.0 - e2) * e_sin_e
    ex = a * (f * cos_lv + g * sin_lv) / r
    ey = a * (f * sin_lv - g * cos_lv) / r

    return a, ex, ey, hx, hy, lv


# ---------------------------------------------------------------------------
# Orbit-level conversions
# ---------------------------------------------------------------------------


def _to_equinoctial_elements(orbit: Orbit) -> tuple[tuple, PositionAngleType]:
    F = orbit.field
    if orbit.orbit_type == OrbitType.EQUINOCTIAL:
        return orbit.elements, orbit.angle_type
    if orbit.orbit_type == OrbitType.KEPLERIAN:
        return keplerian_to_equinoctial(F, *orbit.elements), orbit.angle_type
    if orbit.orbit_type == OrbitType.CIRCULAR:
        return circular_to_equinoctial(F, *orbit.elements), orbit.angle_type
    el = orbit.elements
    return cartesian_to_equinoctial(F, orbit.mu, el[:3], el[3:]), PositionAngleType.TRUE


def convert_orbit(
    orbit: Orbit,
    orbit_type: OrbitType,
    angle_type: PositionAngleType = PositionAngleType.MEAN,
) -> Orbit:
    """Convert an orbit to another element set and angle kind.

    The result shares the epoch, frame, gravitational parameter and field
    of *orbit*.  An orbit already in the requested representation is
    returned unchanged.

    Args:
        orbit: Orbit to convert.
        orbit_type: Requested element set.
        angle_type: Requested anomaly kind (ignored for ``CARTESIAN``).
            Default: ``MEAN``.

    Returns:
        Orbit: Converted orbit.

    Examples:
        ```python
        from dsstjax.orbits import OrbitType, convert_orbit
        cart = convert_orbit(orbit, OrbitType.CARTESIAN)
        ```
    """
    if orbit.orbit_type == orbit_type and (
        orbit_type == OrbitType.CARTESIAN or orbit.angle_type == angle_type
    ):
        return orbit

    F = orbit.field
    (a, ex, ey, hx, hy, l), from_type = _to_equinoctial_elements(orbit)

    if orbit_type == OrbitType.CARTESIAN:
        le = convert_longitude(F, ex, ey, l, from_type, PositionAngleType.ECCENTRIC)
        position, velocity = equinoctial_to_cartesian(F, orbit.mu, a, ex, ey, hx, hy, le)
        elements = tuple(position) + tuple(velocity)
        return Orbit(orbit_type, elements, orbit.epoch, orbit.frame, orbit.mu,
                     angle_type, F)

    l = convert_longitude(F, ex, ey, l, from_type, angle_type)
    equinoctial = (a, ex, ey, hx, hy, l)
    if orbit_type == OrbitType.EQUINOCTIAL:
        elements = equinoctial
    elif orbit_type == OrbitType.KEPLERIAN:
        elements = equinoctial_to_keplerian(F, *equinoctial)
    else:
        elements = equinoctial_to_circular(F, *equinoctial)
    return Orbit(orbit_type, elements, orbit.epoch, orbit.frame, orbit.mu, angle_type, F)


def orbit_position_velocity(orbit: Orbit) -> tuple[Vector3, Vector3]:
    """Position and velocity 3-tuples of an orbit [m, m/s]."""
    cart = convert_orbit(orbit, OrbitType.CARTESIAN)
    return cart.elements[:3], cart.elements[3:]
