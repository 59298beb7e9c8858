"""Zonal gravity field contribution averaged by Gaussian quadrature."""

from __future__ import annotations

from dsstjax.dsst.config import AveragingConfig
from dsstjax.dsst.gaussian import GaussianContribution
from dsstjax.gravity import GravityModel, accel_zonal_harmonics


class ZonalContribution(GaussianContribution):
    """Averaged effect of the zonal harmonics ``J_2 .. J_N`` of a gravity field.

    The acceleration is evaluated from the unnormalized ``J_n`` of the
    model and its reference radius.  The single parameter is the
    gravitational parameter ``mu`` scaling the zonal acceleration (the
    two-body motion itself uses the orbit's ``mu``).

    Args:
        gravity_model: Gravity field providing ``J_n``, ``radius`` and ``gm``.
        max_degree: Highest zonal degree included. Default: ``6``.
        config: Quadrature settings. Default: ``AveragingConfig.default()``.

    Raises:
        ValueError: If *max_degree* is lower than 2.

    Examples:
        ```python
        from dsstjax.dsst import ZonalContribution
        from dsstjax.gravity import GravityModel
        model = GravityModel.zonal(3.986004415e14, 6378136.3, {2: 1.0826e-3})
        zonal = ZonalContribution(model, max_degree=2)
        ```
    """

    def __init__(
        self,
        gravity_model: GravityModel,
        max_degree: int = 6,
        config: AveragingConfig | None = None,
    ):
        if max_degree < 2:
            raise ValueError(f"max_degree must be >= 2, got {max_degree}")
        super().__init__("zonal", config=config)
        self.gravity_model = gravity_model
        self.max_degree = max_degree
        self.j_coefficients = gravity_model.zonal_coefficients(max_degree)

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return ("mu",)

    def default_parameters(self) -> tuple[float, ...]:
        return (self.gravity_model.gm,)

    def acceleration(self, F, position, velocity, attitude, parameters):
        (mu,) = parameters
        return accel_zonal_harmonics(
            F, position, mu, self.gravity_model.radius, self.j_coefficients
        )
