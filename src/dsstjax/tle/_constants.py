"""
Earth gravity constants of the SGP4/SDP4 theory.

Provides three standard gravity models: WGS72OLD, WGS72 (standard), and
WGS84, in SI units.  Each model carries the matching gravity-constant
selector of the ``sgp4`` library.
"""

from math import sqrt
from typing import NamedTuple

from sgp4 import api as _sgp4_api


class EarthGravity(NamedTuple):
    """Earth gravity model constants for SGP4 propagation.

    Attributes:
        name: Model name.
        mu: Gravitational parameter [m^3/s^2].
        radius: Earth equatorial radius [m].
        xke: ``sqrt(mu)`` in SGP4 units (Earth radii^1.5 per minute).
        j2: Second zonal harmonic.
        j3: Third zonal harmonic.
        j4: Fourth zonal harmonic.
        sgp4_constant: Gravity selector passed to ``Satrec.sgp4init``.
    """

    name: str
    mu: float
    radius: float
    xke: float
    j2: float
    j3: float
    j4: float
    sgp4_constant: int


# WGS 72 Old gravity constants
WGS72OLD = EarthGravity(
    name="wgs72old",
    mu=398600.79964e9,
    radius=6378135.0,
    xke=0.0743669161,
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    sgp4_constant=_sgp4_api.WGS72OLD,
)
"""WGS 72 Old gravity model (legacy)."""

# WGS 72 gravity constants (standard)
WGS72 = EarthGravity(
    name="wgs72",
    mu=398600.8e9,
    radius=6378135.0,
    xke=60.0 / sqrt(6378.135**3 / 398600.8),
    j2=0.001082616,
    j3=-0.00000253881,
    j4=-0.00000165597,
    sgp4_constant=_sgp4_api.WGS72,
)
"""WGS 72 gravity model (standard for SGP4)."""

# WGS 84 gravity constants
WGS84 = EarthGravity(
    name="wgs84",
    mu=398600.5e9,
    radius=6378137.0,
    xke=60.0 / sqrt(6378.137**3 / 398600.5),
    j2=0.00108262998905,
    j3=-0.00000253215306,
    j4=-0.00000161098761,
    sgp4_constant=_sgp4_api.WGS84,
)
"""WGS 84 gravity model."""

# Gravity constant lookup by name
GRAVITY_MODELS = {
    "wgs72old": WGS72OLD,
    "wgs72": WGS72,
    "wgs84": WGS84,
}
"""Mapping of gravity model names to ``EarthGravity`` instances."""
