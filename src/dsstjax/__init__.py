"""
dsstjax is a semi-analytical orbit averaging library implemented in JAX.

It converts averaged (mean) orbital elements of several perturbation
theories into osculating orbits, and computes mean element rates and
short-period corrections by Gaussian-quadrature averaging over plain reals
or dual numbers carrying partial derivatives.
"""

from .constants import (
    PI,
    TWO_PI,
    DEG2RAD,
    RAD2DEG,
    JD_MJD_OFFSET,
    SECONDS_PER_DAY,
    R_EARTH,
    GM_EARTH,
    J2_EARTH,
)

from .config import set_dtype, get_dtype
from .epoch import Epoch
from .errors import OrbitConversionError
from .frames import Frame, GCRF, EME2000, TEME, ITRF

from .fields import REAL, Dual, DualField, Field

from .gravity import GravityModel

from .orbits import (
    Orbit,
    OrbitType,
    PositionAngleType,
    convert_orbit,
    AveragedKeplerianElements,
    AveragedCircularElements,
    AveragedEquinoctialElements,
)

from .tle import TLE, parse_tle

from .dsst import (
    AveragingConfig,
    AuxiliaryElements,
    ZonalContribution,
    ConstantThrustContribution,
    compute_mean_element_rates,
    compute_short_period_corrections,
    compute_osculating_orbit,
)

from .averaging import (
    DSSTOrbitalState,
    BrouwerLyddaneOrbitalState,
    EcksteinHechlerOrbitalState,
    SGP4OrbitalState,
    FixedPointConverter,
)

__all__ = [
    # Constants
    "PI",
    "TWO_PI",
    "DEG2RAD",
    "RAD2DEG",
    "JD_MJD_OFFSET",
    "SECONDS_PER_DAY",
    "R_EARTH",
    "GM_EARTH",
    "J2_EARTH",
    # Config
    "set_dtype",
    "get_dtype",
    # Epoch
    "Epoch",
    # Errors
    "OrbitConversionError",
    # Frames
    "Frame",
    "GCRF",
    "EME2000",
    "TEME",
    "ITRF",
    # Fields
    "Field",
    "REAL",
    "Dual",
    "DualField",
    # Gravity
    "GravityModel",
    # Orbits
    "Orbit",
    "OrbitType",
    "PositionAngleType",
    "convert_orbit",
    "AveragedKeplerianElements",
    "AveragedCircularElements",
    "AveragedEquinoctialElements",
    # TLE
    "TLE",
    "parse_tle",
    # Averaging engine
    "AveragingConfig",
    "AuxiliaryElements",
    "ZonalContribution",
    "ConstantThrustContribution",
    "compute_mean_element_rates",
    "compute_short_period_corrections",
    "compute_osculating_orbit",
    # Averaged states
    "DSSTOrbitalState",
    "BrouwerLyddaneOrbitalState",
    "EcksteinHechlerOrbitalState",
    "SGP4OrbitalState",
    "FixedPointConverter",
]
