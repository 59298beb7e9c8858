"""Osculating-to-averaged conversion by fixed-point iteration.

Any theory providing the mean-to-osculating direction can be inverted
numerically: starting from the osculating elements as first guess, the
mean elements are corrected by the difference between the target
osculating orbit and the osculating orbit the current guess produces,

    mean_{k+1} = mean_k + damping * (osc_target - osc(mean_k)),

until the correction falls below a per-element threshold.  The iteration
runs on equinoctial elements with mean longitude, which are regular for
circular and equatorial orbits.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from dsstjax.averaging._base import AveragedOrbitalState
from dsstjax.errors import OrbitConversionError
from dsstjax.orbits import Orbit, OrbitType, PositionAngleType, convert_orbit

logger = logging.getLogger(__name__)


def _equinoctial_values(orbit: Orbit) -> np.ndarray:
    eq = convert_orbit(orbit, OrbitType.EQUINOCTIAL, PositionAngleType.MEAN)
    return np.array([float(eq.field.value(x)) for x in eq.elements], dtype=np.float64)


def _normalize_angle(angle: float) -> float:
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


class FixedPointConverter:
    """Recover averaged elements from an osculating orbit for any theory.

    Args:
        threshold: Relative convergence threshold. Default: ``1e-12``.
        max_iterations: Maximum number of iterations. Default: ``100``.
        damping: Fraction of the correction applied per iteration, in
            ``(0, 1]``. Default: ``1.0``.

    Raises:
        ValueError: If a setting is out of range.

    Examples:
        ```python
        from dsstjax.averaging import BrouwerLyddaneOrbitalState, FixedPointConverter
        converter = FixedPointConverter(threshold=1e-10)
        state = converter.convert(osculating_orbit, template_state)
        ```
    """

    def __init__(self, threshold: float = 1e-12, max_iterations: int = 100, damping: float = 1.0):
        if not threshold > 0.0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        if not 0.0 < damping <= 1.0:
            raise ValueError(f"damping must be in (0, 1], got {damping}")
        self.threshold = threshold
        self.max_iterations = max_iterations
        self.damping = damping

    def _tolerances(self, target: np.ndarray) -> np.ndarray:
        a, ex, ey, hx, hy, _ = target
        e = math.hypot(ex, ey)
        h = math.hypot(hx, hy)
        eps = self.threshold
        return np.array([
            eps * (1.0 + abs(a)),
            eps * (1.0 + e),
            eps * (1.0 + e),
            eps * (1.0 + h),
            eps * (1.0 + h),
            eps * math.pi,
        ])

    def convert(self, osculating: Orbit, template: AveragedOrbitalState) -> AveragedOrbitalState:
        """Averaged state whose osculating orbit matches *osculating*.

        Args:
            osculating: Target osculating orbit, any representation.
            template: State of the desired theory; its parameters (gravity
                model, drag terms, ...) are reused, its elements ignored.

        Returns:
            AveragedOrbitalState: State of *template*'s theory at the epoch
            and in the frame of *osculating*.

        Raises:
            OrbitConversionError: If the iteration does not converge, or
                the theory rejects an intermediate mean orbit.
        """
        elements_type = template.ELEMENTS_TYPE
        target = _equinoctial_values(osculating)
        tolerances = self._tolerances(target)

        def to_state(mean: np.ndarray) -> AveragedOrbitalState:
            orbit = Orbit(OrbitType.EQUINOCTIAL, tuple(mean), osculating.epoch,
                          osculating.frame, template.mu, PositionAngleType.MEAN)
            return template.with_averaged_elements(
                elements_type.from_orbit(orbit), epoch=osculating.epoch, frame=osculating.frame
            )

        mean = target.copy()
        state = to_state(mean)
        for iteration in range(1, self.max_iterations + 1):
            delta = target - _equinoctial_values(state.to_osculating_orbit())
            delta[5] = _normalize_angle(delta[5])
            mean = mean + self.damping * delta
            state = to_state(mean)
            logger.debug(
                "%s fixed-point iteration %d: max scaled correction %.3e",
                template.THEORY, iteration, float(np.max(np.abs(delta) / tolerances)),
            )
            if np.all(np.abs(delta) <= tolerances):
                logger.debug("%s converged after %d iterations", template.THEORY, iteration)
                return state
            if not np.all(np.isfinite(mean)):
                break

        logger.warning(
            "%s osculating-to-averaged conversion did not converge in %d iterations",
            template.THEORY, self.max_iterations,
        )
        raise OrbitConversionError(
            template.THEORY,
            f"fixed-point conversion did not converge after {self.max_iterations} iterations",
        )
