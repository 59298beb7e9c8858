"""Averaged orbital states of several perturbation theories.

This sub-module provides:

- **State hierarchy**: the abstract :class:`AveragedOrbitalState` and the
  gravity-field based :class:`HarmonicsBasedOrbitalState`.
- **Theories**: semi-analytical (DSST), Brouwer-Lyddane, Eckstein-Hechler
  and SGP4 averaged states, each convertible to an osculating orbit.
- **Inversion**: :class:`FixedPointConverter` recovering averaged
  elements of any theory from an osculating orbit.
"""

from ._base import AveragedOrbitalState, HarmonicsBasedOrbitalState
from .brouwer import BrouwerLyddaneOrbitalState, brouwer_lyddane_mean_to_osculating
from .converter import FixedPointConverter
from .dsst_state import DSSTOrbitalState
from .eckstein_hechler import EcksteinHechlerOrbitalState, eckstein_hechler_mean_to_osculating
from .sgp4_state import SGP4OrbitalState

__all__ = [
    "AveragedOrbitalState",
    "HarmonicsBasedOrbitalState",
    "DSSTOrbitalState",
    "BrouwerLyddaneOrbitalState",
    "brouwer_lyddane_mean_to_osculating",
    "EcksteinHechlerOrbitalState",
    "eckstein_hechler_mean_to_osculating",
    "SGP4OrbitalState",
    "FixedPointConverter",
]
