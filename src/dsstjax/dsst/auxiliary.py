"""Auxiliary elements of the semi-analytical theory.

:class:`AuxiliaryElements` derives, from one orbit, every quantity shared
by the averaging and short-period computations: the equinoctial-like
elements ``(a, k, h, q, p)``, the mean/eccentric/true longitudes, the
common factors ``A``, ``B``, ``C``, the mean motion, the orthonormal triad
``(f, g, w)`` and the direction cosines of a reference direction.

The elements are built from the Cartesian state with a retrograde factor
``I``: ``+1`` gives the usual equinoctial elements (``q = hx``,
``p = hy``), singular for an exactly retrograde equatorial orbit; ``-1``
gives the retrograde set, singular for an exactly prograde equatorial
orbit.  :func:`retrograde_factor` picks the factor whose denominator
``1 + I w_z`` is at least one.

References:
    1. D. A. Danielson et al., *Semianalytic Satellite Theory*, Naval
       Postgraduate School, 1995, section 2.1.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from dsstjax.constants import TWO_PI
from dsstjax.fields import Vector3, cross, dot, norm
from dsstjax.orbits import (
    Orbit,
    longitude_eccentric_to_mean,
    longitude_true_to_eccentric,
    orbit_position_velocity,
)


def retrograde_factor(orbit: Orbit) -> int:
    """Retrograde factor suited to an orbit.

    Returns ``+1`` when the orbit normal has a non-negative z component
    (inclination up to 90 degrees) and ``-1`` otherwise.  Either way the
    ``1 + I w_z`` denominator of :class:`AuxiliaryElements` is at least
    one.

    Args:
        orbit: Orbit in any representation.

    Returns:
        int: ``+1`` or ``-1``.
    """
    position, velocity = orbit_position_velocity(orbit)
    wz = cross(position, velocity)[2]
    return 1 if orbit.field.value(wz) >= 0.0 else -1


@dataclass(frozen=True, eq=False)
class AuxiliaryElements:
    """Geometry of one orbit as needed by the averaging machinery.

    Args:
        orbit: Orbit in any representation; its field is used throughout.
        retrograde_factor: ``+1`` or ``-1``.  ``None`` picks the factor
            with :func:`retrograde_factor`.
        reference_direction: Unit vector whose direction cosines in the
            ``(f, g, w)`` triad are computed. Default: inertial +Z.

    Raises:
        ValueError: If *retrograde_factor* is neither ``+1`` nor ``-1``.

    Examples:
        ```python
        from dsstjax.dsst import AuxiliaryElements
        aux = AuxiliaryElements(orbit, retrograde_factor=1)
        aux.k, aux.h, aux.q, aux.p
        ```
    """

    orbit: Orbit
    retrograde_factor: int | None = None
    reference_direction: Vector3 = (0.0, 0.0, 1.0)

    # Derived quantities
    field: object = dataclasses.field(init=False)
    date: object = dataclasses.field(init=False)
    frame: object = dataclasses.field(init=False)
    mu: float = dataclasses.field(init=False)
    sma: object = dataclasses.field(init=False)
    k: object = dataclasses.field(init=False)
    h: object = dataclasses.field(init=False)
    q: object = dataclasses.field(init=False)
    p: object = dataclasses.field(init=False)
    ecc: object = dataclasses.field(init=False)
    lv: object = dataclasses.field(init=False)
    le: object = dataclasses.field(init=False)
    lm: object = dataclasses.field(init=False)
    B: object = dataclasses.field(init=False)
    A: object = dataclasses.field(init=False)
    C: object = dataclasses.field(init=False)
    mean_motion: object = dataclasses.field(init=False)
    keplerian_period: object = dataclasses.field(init=False)
    f: Vector3 = dataclasses.field(init=False)
    g: Vector3 = dataclasses.field(init=False)
    w: Vector3 = dataclasses.field(init=False)
    alpha: object = dataclasses.field(init=False)
    beta: object = dataclasses.field(init=False)
    gamma: object = dataclasses.field(init=False)

    def __post_init__(self):
        orbit = self.orbit
        F = orbit.field
        if self.retrograde_factor is None:
            factor = retrograde_factor(orbit)
        elif self.retrograde_factor in (1, -1):
            factor = int(self.retrograde_factor)
        else:
            raise ValueError(
                f"Retrograde factor must be +1 or -1, got {self.retrograde_factor}."
            )

        mu = orbit.mu
        position, velocity = orbit_position_velocity(orbit)

        r = norm(F, position)
        v2 = dot(velocity, velocity)
        sma = r / (2.0 - r * v2 / mu)

        momentum = cross(position, velocity)
        h_norm = norm(F, momentum)
        w = (momentum[0] / h_norm, momentum[1] / h_norm, momentum[2] / h_norm)

        # Inclination components, denominator 1 + I w_z >= 1 for the default factor
        den = 1.0 + factor * w[2]
        p = w[0] / den
        q = -w[1] / den

        p2 = p * p
        q2 = q * q
        C = 1.0 + p2 + q2
        pq2 = 2.0 * p * q
        f = ((1.0 - p2 + q2) / C, pq2 / C, (-2.0 * factor) * p / C)
        g = (factor * pq2 / C, factor * (1.0 + p2 - q2) / C, 2.0 * q / C)

        # Eccentricity vector (v x h)/mu - r/|r| projected on f, g
        vxh = cross(velocity, momentum)
        e_vec = tuple(vxh[j] / mu - position[j] / r for j in range(3))
        k = dot(e_vec, f)
        h = dot(e_vec, g)

        lv = F.arctan2(dot(position, g), dot(position, f))
        le = longitude_true_to_eccentric(F, k, h, lv)
        lm = longitude_eccentric_to_mean(F, k, h, le)

        B = F.sqrt(1.0 - k * k - h * h)
        A = F.sqrt(mu * sma)
        n = A / (sma * sma)

        ref = self.reference_direction

        values = {
            "retrograde_factor": factor,
            "field": F,
            "date": orbit.epoch,
            "frame": orbit.frame,
            "mu": mu,
            "sma": sma,
            "k": k,
            "h": h,
            "q": q,
            "p": p,
            "ecc": F.sqrt(k * k + h * h),
            "lv": lv,
            "le": le,
            "lm": lm,
            "B": B,
            "A": A,
            "C": C,
            "mean_motion": n,
            "keplerian_period": TWO_PI / n,
            "f": f,
            "g": g,
            "w": w,
            "alpha": dot(f, ref),
            "beta": dot(g, ref),
            "gamma": dot(w, ref),
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)
