"""Configuration of the semi-analytical averaging machinery.

Provides :class:`AveragingConfig`, which selects the Gauss-Legendre
quadrature orders used to average perturbing accelerations over one
revolution, the number of Fourier harmonics kept in the short-period
terms, and the zonal degree used by the harmonics-based theory.
Configuration is static: it is read by plain Python code while the
averaging runs and never participates in differentiation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AveragingConfig:
    """Quadrature and truncation settings for averaging.

    Args:
        quadrature_orders: Increasing Gauss-Legendre orders tried in turn
            when averaging adaptively.
        convergence_threshold: Relative change of the mean element rates
            between two successive orders below which the adaptive
            averaging stops.
        fixed_order: If set, always average with this single order and
            skip the adaptive search.
        n_harmonics: Number of Fourier harmonics ``J`` kept in the
            short-period terms.
        short_period_quadrature_order: Gauss-Legendre order used to compute
            the short-period Fourier coefficients.
        max_zonal_degree: Highest zonal degree included by the
            harmonics-based theory.

    Examples:
        ```python
        from dsstjax.dsst import AveragingConfig
        config = AveragingConfig(fixed_order=24)
        config.orders()  # (24,)
        ```
    """

    quadrature_orders: tuple[int, ...] = (12, 16, 20, 24, 32, 40, 48)
    convergence_threshold: float = 1e-10
    fixed_order: int | None = None
    n_harmonics: int = 12
    short_period_quadrature_order: int = 48
    max_zonal_degree: int = 6

    def __post_init__(self) -> None:
        orders = tuple(int(n) for n in self.quadrature_orders)
        if not orders:
            raise ValueError("quadrature_orders must contain at least one order")
        if any(n < 1 for n in orders):
            raise ValueError(f"quadrature orders must be positive, got {orders}")
        if any(b <= a for a, b in zip(orders, orders[1:])):
            raise ValueError(f"quadrature_orders must be strictly increasing, got {orders}")
        object.__setattr__(self, "quadrature_orders", orders)
        if not self.convergence_threshold > 0.0:
            raise ValueError(
                f"convergence_threshold must be positive, got {self.convergence_threshold}"
            )
        if self.fixed_order is not None and self.fixed_order < 1:
            raise ValueError(f"fixed_order must be positive, got {self.fixed_order}")
        if self.n_harmonics < 1:
            raise ValueError(f"n_harmonics must be positive, got {self.n_harmonics}")
        if self.short_period_quadrature_order < 2 * self.n_harmonics:
            raise ValueError(
                f"short_period_quadrature_order ({self.short_period_quadrature_order}) "
                f"must be at least twice n_harmonics ({self.n_harmonics})"
            )
        if self.max_zonal_degree < 2:
            raise ValueError(f"max_zonal_degree must be >= 2, got {self.max_zonal_degree}")

    @property
    def is_adaptive(self) -> bool:
        """Whether the quadrature order is searched adaptively."""
        return self.fixed_order is None

    def orders(self) -> tuple[int, ...]:
        """Quadrature orders to try, in order."""
        if self.fixed_order is not None:
            return (self.fixed_order,)
        return self.quadrature_orders

    @staticmethod
    def default() -> AveragingConfig:
        """Preset: adaptive averaging, 12 harmonics, zonals up to J6.

        Returns:
            AveragingConfig: Default configuration.
        """
        return AveragingConfig()

    @staticmethod
    def fast() -> AveragingConfig:
        """Preset: single low-order quadrature and fewer harmonics.

        Suitable for near-circular orbits and quick checks.

        Returns:
            AveragingConfig: Reduced-cost configuration.

        Examples:
            ```python
            config = AveragingConfig.fast()
            config.is_adaptive
            ```
        """
        return AveragingConfig(
            fixed_order=16,
            n_harmonics=6,
            short_period_quadrature_order=24,
            max_zonal_degree=4,
        )
