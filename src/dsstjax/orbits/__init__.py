"""Orbit states, element-set conversions and averaged element types.

This sub-module provides:

- **Orbits**: the immutable :class:`Orbit` record in Cartesian, Keplerian,
  circular or equinoctial elements with mean, eccentric or true angles.
- **Conversions**: field-generic conversions between every element set
  and angle kind, going through the equinoctial elements.
- **Averaged elements**: the fixed-size Keplerian, circular and
  equinoctial mean-element vectors used by averaged orbital states.
- **Mean-osculating mapping**: first-order Brouwer-Lyddane J2 mapping
  between mean and osculating Keplerian elements.
"""

from .averaged_elements import (
    AveragedCircularElements,
    AveragedEquinoctialElements,
    AveragedKeplerianElements,
    AveragedOrbitalElements,
)
from .conversions import (
    cartesian_to_equinoctial,
    circular_to_equinoctial,
    convert_longitude,
    convert_orbit,
    equinoctial_to_cartesian,
    equinoctial_to_circular,
    equinoctial_to_keplerian,
    keplerian_to_equinoctial,
    longitude_eccentric_to_mean,
    longitude_eccentric_to_true,
    longitude_mean_to_eccentric,
    longitude_true_to_eccentric,
    orbit_position_velocity,
)
from .mean_elements import (
    brouwer_transform,
    state_koe_mean_to_osc,
    state_koe_osc_to_mean,
)
from .orbit import ELEMENT_NAMES, Orbit, OrbitType, PositionAngleType

__all__ = [
    "Orbit",
    "OrbitType",
    "PositionAngleType",
    "ELEMENT_NAMES",
    "convert_orbit",
    "orbit_position_velocity",
    "convert_longitude",
    "longitude_eccentric_to_true",
    "longitude_true_to_eccentric",
    "longitude_eccentric_to_mean",
    "longitude_mean_to_eccentric",
    "keplerian_to_equinoctial",
    "equinoctial_to_keplerian",
    "circular_to_equinoctial",
    "equinoctial_to_circular",
    "equinoctial_to_cartesian",
    "cartesian_to_equinoctial",
    "AveragedOrbitalElements",
    "AveragedKeplerianElements",
    "AveragedCircularElements",
    "AveragedEquinoctialElements",
    "brouwer_transform",
    "state_koe_mean_to_osc",
    "state_koe_osc_to_mean",
]
