"""Abstract averaged orbital states.

An averaged orbital state couples mean elements of a given perturbation
theory with the epoch and frame they refer to and the theory parameters
(a gravitational parameter, or a full gravity field).  Every concrete
theory knows how to rebuild the osculating orbit from its mean elements.

States are frozen dataclasses; transformations return new instances.
"""

from __future__ import annotations

import abc
import dataclasses
from dataclasses import dataclass
from typing import ClassVar

from dsstjax.epoch import Epoch
from dsstjax.errors import OrbitConversionError
from dsstjax.fields import REAL, Field
from dsstjax.frames import Frame
from dsstjax.gravity import GravityModel
from dsstjax.orbits import (
    AveragedOrbitalElements,
    Orbit,
    OrbitType,
    PositionAngleType,
)


@dataclass(frozen=True, eq=False)
class AveragedOrbitalState(abc.ABC):
    """Mean elements of one theory at one epoch.

    Args:
        epoch: Epoch of the mean elements.
        averaged_elements: Mean elements, of the theory's element type.
        frame: Pseudo-inertial frame of the elements.

    Raises:
        ValueError: If *averaged_elements* is not of the theory's type.
    """

    THEORY: ClassVar[str]
    ELEMENTS_TYPE: ClassVar[type[AveragedOrbitalElements]]

    epoch: Epoch
    averaged_elements: AveragedOrbitalElements
    frame: Frame

    def __post_init__(self):
        if not isinstance(self.averaged_elements, self.ELEMENTS_TYPE):
            raise ValueError(
                f"{self.THEORY} requires {self.ELEMENTS_TYPE.__name__}, "
                f"got {type(self.averaged_elements).__name__}."
            )
        if not self.frame.pseudo_inertial:
            raise ValueError(
                f"Averaged states must be defined in a pseudo-inertial frame, "
                f"got {self.frame.name}."
            )

    @property
    def orbit_type(self) -> OrbitType:
        return self.averaged_elements.orbit_type

    @property
    def position_angle_type(self) -> PositionAngleType:
        return self.averaged_elements.position_angle_type

    @property
    @abc.abstractmethod
    def mu(self) -> float:
        """Gravitational parameter of the theory [m^3/s^2]."""

    @abc.abstractmethod
    def to_osculating_orbit(self) -> Orbit:
        """Osculating orbit at the state's epoch, in the state's frame.

        Raises:
            OrbitConversionError: If the mean elements are outside the
                theory's domain or the recovery produces an invalid orbit.
        """

    def mean_orbit(self, field: Field = REAL) -> Orbit:
        """The mean elements as an :class:`~dsstjax.orbits.Orbit`."""
        return self.averaged_elements.to_orbit(self.epoch, self.frame, self.mu, field)

    def with_averaged_elements(
        self,
        averaged_elements: AveragedOrbitalElements,
        epoch: Epoch | None = None,
        frame: Frame | None = None,
    ) -> AveragedOrbitalState:
        """Copy of this state with new mean elements (and optionally epoch/frame).

        Theory parameters are kept.
        """
        changes = {"averaged_elements": averaged_elements}
        if epoch is not None:
            changes["epoch"] = epoch
        if frame is not None:
            changes["frame"] = frame
        return dataclasses.replace(self, **changes)

    def _fail(self, message: str) -> OrbitConversionError:
        return OrbitConversionError(self.THEORY, message)

    def _checked(self, orbit: Orbit) -> Orbit:
        if not orbit.is_finite():
            raise self._fail("osculating orbit has non-finite elements")
        return orbit


@dataclass(frozen=True, eq=False)
class HarmonicsBasedOrbitalState(AveragedOrbitalState):
    """Averaged state of a theory driven by a spherical-harmonics field.

    Args:
        epoch: Epoch of the mean elements.
        averaged_elements: Mean elements, of the theory's element type.
        frame: Pseudo-inertial frame of the elements.
        gravity_model: Gravity field of the theory.
    """

    gravity_model: GravityModel

    @property
    def mu(self) -> float:
        return self.gravity_model.gm

    def _zonals(self, max_degree: int) -> dict[int, float]:
        """``J_n`` for ``2 <= n <= max_degree``, zero where the field stops."""
        available = self.gravity_model.zonal_coefficients(max_degree)
        return {n: available.get(n, 0.0) for n in range(2, max_degree + 1)}
