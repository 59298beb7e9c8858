"""Constant-thrust contribution averaged by Gaussian quadrature."""

from __future__ import annotations

from dsstjax.constants import TWO_PI
from dsstjax.dsst.attitude import AttitudeProvider
from dsstjax.dsst.config import AveragingConfig
from dsstjax.dsst.gaussian import GaussianContribution
from dsstjax.fields import Vector3, scale


class ConstantThrustContribution(GaussianContribution):
    """Constant acceleration along a body-fixed direction.

    The thrust may be restricted to an arc of true longitude, in which
    case the averaging integrates over that arc only (the acceleration is
    zero elsewhere on the revolution).

    Args:
        direction: Thrust direction in the body frame (normalized here).
        attitude_provider: Attitude mapping the body frame to inertial.
        acceleration_magnitude: Nominal thrust acceleration [m/s^2]; the
            ``thrust_acceleration`` parameter.
        longitude_arc: Optional ``(start, end)`` true longitudes [rad] of
            the burn arc. ``end`` is taken past ``start`` modulo 2 pi.
        config: Quadrature settings. Default: ``AveragingConfig.default()``.

    Raises:
        ValueError: If *direction* is the zero vector.
    """

    def __init__(
        self,
        direction: Vector3,
        attitude_provider: AttitudeProvider,
        acceleration_magnitude: float,
        longitude_arc: tuple[float, float] | None = None,
        config: AveragingConfig | None = None,
    ):
        super().__init__("thrust", attitude_provider=attitude_provider, config=config)
        d = tuple(float(x) for x in direction)
        length = (d[0] * d[0] + d[1] * d[1] + d[2] * d[2]) ** 0.5
        if length == 0.0:
            raise ValueError("Thrust direction must be non-zero.")
        self.direction = (d[0] / length, d[1] / length, d[2] / length)
        self.acceleration_magnitude = float(acceleration_magnitude)
        if longitude_arc is not None:
            start, end = (float(x) for x in longitude_arc)
            span = (end - start) % TWO_PI
            longitude_arc = (start, start + (span if span > 0.0 else TWO_PI))
        self.longitude_arc = longitude_arc

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("thrust_acceleration",)

    def default_parameters(self) -> tuple[float, ...]:
        return (self.acceleration_magnitude,)

    def get_l_limits(self, aux):
        if self.longitude_arc is None:
            return super().get_l_limits(aux)
        F = aux.field
        return F.constant(self.longitude_arc[0]), F.constant(self.longitude_arc[1])

    def acceleration(self, F, position, velocity, attitude, parameters):
        (magnitude,) = parameters
        return scale(magnitude, attitude.to_inertial(self.direction))
