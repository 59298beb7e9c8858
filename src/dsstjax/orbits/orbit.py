"""Orbit states expressed in one of four element sets.

An :class:`Orbit` is an immutable record of six scalars of a given
:class:`~dsstjax.fields.Field` together with the epoch, frame and
gravitational parameter they refer to.  Element layouts (SI units,
radians):

- ``CARTESIAN``:   ``[x, y, z, vx, vy, vz]``
- ``KEPLERIAN``:   ``[a, e, i, raan, argp, anomaly]``
- ``CIRCULAR``:    ``[a, ex, ey, i, raan, alpha]`` with
  ``ex = e cos(argp)``, ``ey = e sin(argp)``, ``alpha = anomaly + argp``
- ``EQUINOCTIAL``: ``[a, ex, ey, hx, hy, l]`` with
  ``ex = e cos(argp + raan)``, ``ey = e sin(argp + raan)``,
  ``hx = tan(i/2) cos(raan)``, ``hy = tan(i/2) sin(raan)``,
  ``l = anomaly + argp + raan``

The anomaly-like element is mean, eccentric or true according to
``angle_type``.  Conversions live in :mod:`dsstjax.orbits.conversions`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array

from dsstjax.config import get_dtype
from dsstjax.epoch import Epoch
from dsstjax.fields import REAL, Field
from dsstjax.frames import Frame


class OrbitType(enum.Enum):
    """Element set of an orbit."""

    CARTESIAN = "cartesian"
    KEPLERIAN = "keplerian"
    CIRCULAR = "circular"
    EQUINOCTIAL = "equinoctial"


class PositionAngleType(enum.Enum):
    """Kind of the anomaly / longitude element."""

    MEAN = "mean"
    ECCENTRIC = "eccentric"
    TRUE = "true"


ELEMENT_NAMES = {
    OrbitType.CARTESIAN: ("x", "y", "z", "vx", "vy", "vz"),
    OrbitType.KEPLERIAN: ("a", "e", "i", "raan", "argp", "anomaly"),
    OrbitType.CIRCULAR: ("a", "ex", "ey", "i", "raan", "alpha"),
    OrbitType.EQUINOCTIAL: ("a", "ex", "ey", "hx", "hy", "l"),
}
"""Short element names per orbit type, in storage order."""


@dataclass(frozen=True, eq=False)
class Orbit:
    """An orbit state at one epoch.

    Args:
        orbit_type: Element set of *elements*.
        elements: Six field scalars (plain numbers are embedded in *field*).
        epoch: Epoch of the state.
        frame: Pseudo-inertial frame of the state.
        mu: Central-body gravitational parameter [m^3/s^2].
        angle_type: Kind of the anomaly-like element. Default: ``MEAN``.
        field: Scalar field of the elements. Default: ``REAL``.

    Raises:
        ValueError: If *elements* does not hold six values, *mu* is not
            positive, or *frame* is not pseudo-inertial.

    Examples:
        ```python
        from dsstjax import GCRF, Epoch
        from dsstjax.orbits import Orbit, OrbitType
        orbit = Orbit(OrbitType.KEPLERIAN,
                      (7.0e6, 0.01, 0.9, 0.1, 0.2, 0.3),
                      Epoch(2024, 1, 1), GCRF, 3.986004415e14)
        ```
    """

    orbit_type: OrbitType
    elements: tuple
    epoch: Epoch
    frame: Frame
    mu: float
    angle_type: PositionAngleType = PositionAngleType.MEAN
    field: Field = REAL

    def __post_init__(self):
        if len(self.elements) != 6:
            raise ValueError(
                f"{self.orbit_type.value} orbit requires 6 elements, got {len(self.elements)}."
            )
        if not float(self.mu) > 0.0:
            raise ValueError(f"Gravitational parameter must be positive, got {self.mu}.")
        if not self.frame.pseudo_inertial:
            raise ValueError(
                f"Orbits must be defined in a pseudo-inertial frame, got {self.frame.name}."
            )
        object.__setattr__(
            self, "elements", tuple(self.field.constant(x) for x in self.elements)
        )

    def __getitem__(self, name: str):
        """Return an element by its short name (see :data:`ELEMENT_NAMES`)."""
        names = ELEMENT_NAMES[self.orbit_type]
        if name not in names:
            raise KeyError(f"{self.orbit_type.value} orbit has no element {name!r}.")
        return self.elements[names.index(name)]

    def to_array(self) -> Array:
        """Values of the six elements (derivatives dropped), shape ``(6,)``."""
        return jnp.array([self.field.value(x) for x in self.elements], dtype=get_dtype())

    def is_finite(self) -> bool:
        """Whether every element value is finite."""
        return all(self.field.is_finite(x) for x in self.elements)

    def replace_elements(self, elements, angle_type: PositionAngleType | None = None) -> Orbit:
        """Copy of this orbit with new elements of the same type, epoch and frame."""
        return Orbit(
            self.orbit_type,
            tuple(elements),
            self.epoch,
            self.frame,
            self.mu,
            self.angle_type if angle_type is None else angle_type,
            self.field,
        )
