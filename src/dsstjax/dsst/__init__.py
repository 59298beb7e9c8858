"""Semi-analytical averaging engine.

This sub-module provides:

- **Auxiliary elements**: the per-evaluation geometry of a mean orbit.
- **Gaussian contributions**: mean element rates and Fourier short-period
  terms of any perturbing acceleration, averaged by Gauss-Legendre
  quadrature (zonal gravity and constant thrust are provided).
- **Attitude providers**: inertial and local-orbital-frame attitudes.
- **Osculating assembly**: summed mean rates, short-period corrections and
  osculating orbits for a set of contributions.
- **Configuration**: quadrature orders and truncation settings.
"""

from .attitude import Attitude, AttitudeProvider, InertialAttitude, LofAttitude
from .auxiliary import AuxiliaryElements, retrograde_factor
from .config import AveragingConfig
from .contributions import EQUINOCTIAL_RATE_NAMES, DSSTContribution, ShortPeriodTerms
from .gaussian import GaussianContribution, GaussianShortPeriodicTerms
from .osculating import (
    compute_mean_element_rates,
    compute_osculating_orbit,
    compute_short_period_corrections,
)
from .quadrature import gauss_legendre, map_nodes
from .thrust import ConstantThrustContribution
from .zonal import ZonalContribution

__all__ = [
    # Configuration
    "AveragingConfig",
    # Geometry
    "AuxiliaryElements",
    "retrograde_factor",
    # Attitude
    "Attitude",
    "AttitudeProvider",
    "InertialAttitude",
    "LofAttitude",
    # Quadrature
    "gauss_legendre",
    "map_nodes",
    # Contributions
    "EQUINOCTIAL_RATE_NAMES",
    "DSSTContribution",
    "ShortPeriodTerms",
    "GaussianContribution",
    "GaussianShortPeriodicTerms",
    "ZonalContribution",
    "ConstantThrustContribution",
    # Assembly
    "compute_mean_element_rates",
    "compute_short_period_corrections",
    "compute_osculating_orbit",
]
