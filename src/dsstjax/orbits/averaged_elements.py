"""Averaged (mean) orbital element sets.

Each variant is an immutable vector of six named components with a mean
anomaly-like angle.  The canonical array projection ``to_array()`` returns
the components in declaration order.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import ClassVar

import jax.numpy as jnp
import numpy as np
from jax import Array
from jax.typing import ArrayLike

from dsstjax.config import get_dtype
from dsstjax.epoch import Epoch
from dsstjax.fields import REAL, Field
from dsstjax.frames import Frame
from dsstjax.orbits.conversions import convert_orbit
from dsstjax.orbits.orbit import Orbit, OrbitType, PositionAngleType


@dataclass(frozen=True)
class AveragedOrbitalElements:
    """Base class of the averaged element variants.

    Subclasses declare exactly six float fields, in canonical order, and
    the class variables ``ORBIT_TYPE`` and ``ANGLE_INDICES``.
    """

    ORBIT_TYPE: ClassVar[OrbitType]
    ANGLE_INDICES: ClassVar[tuple[int, ...]]

    def __post_init__(self):
        for f in dataclasses.fields(self):
            object.__setattr__(self, f.name, float(getattr(self, f.name)))

    @classmethod
    def names(cls) -> tuple[str, ...]:
        """Accessor names in canonical order."""
        return tuple(f.name for f in dataclasses.fields(cls))

    @property
    def orbit_type(self) -> OrbitType:
        return self.ORBIT_TYPE

    @property
    def position_angle_type(self) -> PositionAngleType:
        return PositionAngleType.MEAN

    def to_tuple(self) -> tuple[float, ...]:
        """Components in canonical order as Python floats."""
        return tuple(getattr(self, name) for name in self.names())

    def to_array(self) -> Array:
        """Components in canonical order, shape ``(6,)``.

        A new array is built on every call.
        """
        return jnp.array(self.to_tuple(), dtype=get_dtype())

    @classmethod
    def from_array(cls, values: ArrayLike):
        """Build the element set from a length-6 vector in canonical order.

        Args:
            values: Six components.

        Returns:
            The element set.

        Raises:
            ValueError: If *values* is not a one-dimensional vector of six
                components.
        """
        arr = np.asarray(values, dtype=np.float64)
        if arr.shape != (6,):
            raise ValueError(
                f"{cls.__name__} requires a vector of 6 components, got shape {arr.shape}."
            )
        return cls(*(float(v) for v in arr))

    @classmethod
    def from_orbit(cls, orbit: Orbit):
        """Read the element set off any orbit (derivatives are dropped)."""
        converted = convert_orbit(orbit, cls.ORBIT_TYPE, PositionAngleType.MEAN)
        return cls(*(converted.field.value(x) for x in converted.elements))

    def to_orbit(self, epoch: Epoch, frame: Frame, mu: float, field: Field = REAL) -> Orbit:
        """Interpret the components as a mean-angle orbit of the variant's type."""
        return Orbit(self.ORBIT_TYPE, self.to_tuple(), epoch, frame, mu,
                     PositionAngleType.MEAN, field)


@dataclass(frozen=True)
class AveragedKeplerianElements(AveragedOrbitalElements):
    """Keplerian elements with mean anomaly.

    Args:
        semi_major_axis: Semi-major axis [m].
        eccentricity: Eccentricity.
        inclination: Inclination [rad].
        raan: Right ascension of the ascending node [rad].
        perigee_argument: Argument of perigee [rad].
        mean_anomaly: Mean anomaly [rad].
    """

    ORBIT_TYPE: ClassVar[OrbitType] = OrbitType.KEPLERIAN
    ANGLE_INDICES: ClassVar[tuple[int, ...]] = (2, 3, 4, 5)

    semi_major_axis: float
    eccentricity: float
    inclination: float
    raan: float
    perigee_argument: float
    mean_anomaly: float


@dataclass(frozen=True)
class AveragedCircularElements(AveragedOrbitalElements):
    """Circular elements with mean latitude argument.

    Args:
        semi_major_axis: Semi-major axis [m].
        circular_ex: ``e cos(argp)``.
        circular_ey: ``e sin(argp)``.
        inclination: Inclination [rad].
        raan: Right ascension of the ascending node [rad].
        mean_latitude_argument: ``argp + M`` [rad].
    """

    ORBIT_TYPE: ClassVar[OrbitType] = OrbitType.CIRCULAR
    ANGLE_INDICES: ClassVar[tuple[int, ...]] = (3, 4, 5)

    semi_major_axis: float
    circular_ex: float
    circular_ey: float
    inclination: float
    raan: float
    mean_latitude_argument: float


@dataclass(frozen=True)
class AveragedEquinoctialElements(AveragedOrbitalElements):
    """Equinoctial elements with mean longitude argument.

    Args:
        semi_major_axis: Semi-major axis [m].
        equinoctial_ex: ``e cos(argp + raan)``.
        equinoctial_ey: ``e sin(argp + raan)``.
        hx: ``tan(i/2) cos(raan)``.
        hy: ``tan(i/2) sin(raan)``.
        mean_longitude_argument: ``M + argp + raan`` [rad].
    """

    ORBIT_TYPE: ClassVar[OrbitType] = OrbitType.EQUINOCTIAL
    ANGLE_INDICES: ClassVar[tuple[int, ...]] = (5,)

    semi_major_axis: float
    equinoctial_ex: float
    equinoctial_ey: float
    hx: float
    hy: float
    mean_longitude_argument: float
