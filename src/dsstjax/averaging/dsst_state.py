"""Semi-analytical (DSST) averaged orbital state."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass

from dsstjax.averaging._base import HarmonicsBasedOrbitalState
from dsstjax.dsst import AveragingConfig, ZonalContribution, compute_osculating_orbit
from dsstjax.orbits import AveragedEquinoctialElements, Orbit

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class DSSTOrbitalState(HarmonicsBasedOrbitalState):
    """Equinoctial mean elements of the semi-analytical zonal theory.

    The osculating orbit is the mean orbit plus the Gaussian short-period
    corrections of the zonal harmonics ``J_2 .. J_N`` of the gravity
    model, ``N = config.max_zonal_degree``.

    Args:
        epoch: Epoch of the mean elements.
        averaged_elements: Equinoctial mean elements.
        frame: Pseudo-inertial frame of the elements.
        gravity_model: Gravity field of the theory.
        config: Quadrature and truncation settings.
            Default: ``AveragingConfig.default()``.

    Examples:
        ```python
        from dsstjax import GCRF, Epoch
        from dsstjax.averaging import DSSTOrbitalState
        from dsstjax.gravity import GravityModel
        from dsstjax.orbits import AveragedEquinoctialElements

        model = GravityModel.zonal(3.986004415e14, 6378136.3, {2: 1.0826e-3})
        state = DSSTOrbitalState(
            Epoch(2024, 1, 1), AveragedEquinoctialElements(7.0e6, 1e-3, 0.0, 0.4, 0.1, 0.5),
            GCRF, model)
        orbit = state.to_osculating_orbit()
        ```
    """

    THEORY = "DSST"
    ELEMENTS_TYPE = AveragedEquinoctialElements

    config: AveragingConfig = dataclasses.field(default_factory=AveragingConfig.default)

    def contributions(self) -> list[ZonalContribution]:
        """Force contributions of the theory (a single zonal contribution)."""
        return [
            ZonalContribution(self.gravity_model, self.config.max_zonal_degree, self.config)
        ]

    def to_osculating_orbit(self) -> Orbit:
        a = self.averaged_elements.semi_major_axis
        if not a > self.gravity_model.radius:
            raise self._fail(
                f"semi-major axis {a} m is inside the reference radius "
                f"{self.gravity_model.radius} m"
            )
        mean = self.mean_orbit()
        if not mean.is_finite():
            raise self._fail("mean orbit has non-finite elements")
        logger.debug(
            "Adding zonal short-period terms up to degree %d", self.config.max_zonal_degree
        )
        return self._checked(compute_osculating_orbit(mean, self.contributions()))
