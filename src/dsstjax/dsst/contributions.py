"""Force-model contribution protocol of the semi-analytical theory.

A contribution supplies two things about one perturbation:

- the secular drift of the mean elements
  (:meth:`DSSTContribution.get_mean_element_rate`), and
- the short-period terms that, added to the mean elements, recover the
  osculating ones (:meth:`DSSTContribution.initialize` then
  :meth:`DSSTContribution.update_short_period_terms`).

Rates and short-period corrections are ordered
``(a, ex, ey, hx, hy, lambda)`` in the element set of the auxiliary
elements' retrograde factor (the equinoctial elements for ``I = +1``).
"""

from __future__ import annotations

import abc
from collections.abc import Iterable, Sequence

import numpy as np

from dsstjax.fields import Field
from dsstjax.orbits import Orbit

EQUINOCTIAL_RATE_NAMES = ("a", "ex", "ey", "hx", "hy", "lambda")
"""Names of the six rate / correction components, in order."""


class ShortPeriodTerms(abc.ABC):
    """Short-period corrections of one contribution.

    Instances are created by :meth:`DSSTContribution.initialize`, updated
    once per mean state by :meth:`DSSTContribution.update_short_period_terms`
    and then evaluated with :meth:`value`.

    Attributes:
        code: Name of the contribution the terms belong to.
    """

    code: str

    @abc.abstractmethod
    def value(self, orbit: Orbit) -> tuple:
        """Additive corrections ``(da, dex, dey, dhx, dhy, dlambda)`` at *orbit*.

        Raises:
            ValueError: If the terms have not been updated yet.
        """

    @abc.abstractmethod
    def get_coefficients(self, selected: Iterable[str] | None = None) -> dict[str, np.ndarray]:
        """Current coefficient values by name.

        Args:
            selected: Names to return. ``None`` returns all.

        Raises:
            ValueError: If the terms have not been updated yet, or a
                selected name is unknown.
        """


class DSSTContribution(abc.ABC):
    """A perturbation expressed in the averaged (mean-element) theory."""

    code: str

    @property
    @abc.abstractmethod
    def parameter_names(self) -> tuple[str, ...]:
        """Names of the force-model parameters, in order."""

    @abc.abstractmethod
    def default_parameters(self) -> tuple[float, ...]:
        """Nominal values of the force-model parameters."""

    def resolve_parameters(self, F: Field, parameters: Sequence | None) -> tuple:
        """Embed *parameters* (or the defaults) in field *F*.

        Raises:
            ValueError: If the number of parameters does not match
                :attr:`parameter_names`.
        """
        if parameters is None:
            parameters = self.default_parameters()
        parameters = tuple(parameters)
        if len(parameters) != len(self.parameter_names):
            raise ValueError(
                f"{self.code} expects {len(self.parameter_names)} parameters "
                f"{self.parameter_names}, got {len(parameters)}."
            )
        return tuple(F.constant(p) for p in parameters)

    @abc.abstractmethod
    def initialize(self, aux, include_short_period: bool, parameters=None) -> list[ShortPeriodTerms]:
        """Prepare the contribution for a mean state.

        Args:
            aux: Auxiliary elements of the initial mean state.
            include_short_period: Whether short-period terms are wanted.
            parameters: Force-model parameters (``None`` for defaults).

        Returns:
            list[ShortPeriodTerms]: The terms to update and evaluate, empty
            when *include_short_period* is false.
        """

    @abc.abstractmethod
    def get_mean_element_rate(self, orbit: Orbit, aux, parameters=None) -> tuple:
        """Secular rates ``(a, ex, ey, hx, hy, lambda)`` at a mean state."""

    @abc.abstractmethod
    def update_short_period_terms(self, parameters, mean_orbit: Orbit) -> None:
        """Recompute the short-period coefficients at a mean state."""
