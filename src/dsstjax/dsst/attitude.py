"""Attitude providers for attitude-dependent Gaussian contributions.

An :class:`Attitude` holds the rotation from the inertial frame to the
spacecraft body frame (as three rows of field scalars) and the inertial
spin vector.  Providers build attitudes from the two-body position and
velocity at every quadrature node, so every quantity may be batched.

Two flavours are offered by every provider:

- :meth:`AttitudeProvider.attitude` computes rotation *and* spin, for
  force models whose acceleration depends on the attitude rate.
- :meth:`AttitudeProvider.rotation_only` computes the rotation with a
  zero spin, which is all most force models need.

Local orbital frames (``lof_type``):

- **QSW** (also RTN): Q radial outward, W along the orbital momentum,
  S = W x Q completes the triad.
- **TNW**: T along the velocity, W along the orbital momentum,
  N = W x T completes the triad.

References:
    1. H. Schaub and J. Junkins, *Analytical Mechanics of Space Systems*,
       2nd ed., AIAA, 2009.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass

from dsstjax.fields import Field, Vector3, cross, dot, norm, scale

_LOF_TYPES = ("QSW", "RTN", "TNW")


@dataclass(frozen=True, eq=False)
class Attitude:
    """Orientation of the body frame with respect to the inertial frame.

    Args:
        rotation: Rows of the inertial-to-body rotation matrix.  Each row
            is a body axis expressed in inertial coordinates.
        spin: Angular velocity of the body frame, in inertial coordinates
            [rad/s].
    """

    rotation: tuple[Vector3, Vector3, Vector3]
    spin: Vector3

    def to_body(self, vector: Vector3) -> Vector3:
        """Express an inertial vector in the body frame."""
        return tuple(dot(row, vector) for row in self.rotation)

    def to_inertial(self, vector: Vector3) -> Vector3:
        """Express a body-frame vector in the inertial frame (``R^T d``)."""
        r0, r1, r2 = self.rotation
        return tuple(
            r0[j] * vector[0] + r1[j] * vector[1] + r2[j] * vector[2] for j in range(3)
        )


class AttitudeProvider(abc.ABC):
    """Source of spacecraft attitudes along a two-body arc."""

    @abc.abstractmethod
    def attitude(self, F: Field, position: Vector3, velocity: Vector3, mu) -> Attitude:
        """Rotation and spin at the given state.

        Args:
            F: Scalar field of the state.
            position: Inertial position [m].
            velocity: Inertial velocity [m/s].
            mu: Gravitational parameter [m^3/s^2].

        Returns:
            Attitude: Rate-aware attitude.
        """

    def rotation_only(self, F: Field, position: Vector3, velocity: Vector3, mu) -> Attitude:
        """Rotation at the given state with a zero spin."""
        rotation = self.attitude(F, position, velocity, mu).rotation
        zero = F.zero()
        return Attitude(rotation, (zero, zero, zero))


class InertialAttitude(AttitudeProvider):
    """Body frame aligned with the inertial frame."""

    def attitude(self, F, position, velocity, mu):
        return self.rotation_only(F, position, velocity, mu)

    def rotation_only(self, F, position, velocity, mu):
        one = F.one()
        zero = F.zero()
        return Attitude(
            ((one, zero, zero), (zero, one, zero), (zero, zero, one)),
            (zero, zero, zero),
        )


class LofAttitude(AttitudeProvider):
    """Body frame aligned with a local orbital frame.

    The spin is exact for Keplerian motion: ``(r x v)/r^2`` for QSW and
    ``(v x a)/v^2`` with the two-body acceleration ``a`` for TNW.

    Args:
        lof_type: ``"QSW"`` (or its alias ``"RTN"``) or ``"TNW"``.
            Default: ``"QSW"``.

    Raises:
        ValueError: If *lof_type* is not recognized.
    """

    def __init__(self, lof_type: str = "QSW"):
        lof_type = lof_type.upper()
        if lof_type not in _LOF_TYPES:
            raise ValueError(
                f"lof_type must be one of {_LOF_TYPES}, got {lof_type!r}"
            )
        self.lof_type = "QSW" if lof_type == "RTN" else lof_type

    def _rotation(self, F, position, velocity):
        momentum = cross(position, velocity)
        w = scale(1.0 / norm(F, momentum), momentum)
        if self.lof_type == "QSW":
            q = scale(1.0 / norm(F, position), position)
            return (q, cross(w, q), w)
        t = scale(1.0 / norm(F, velocity), velocity)
        return (t, cross(w, t), w)

    def rotation_only(self, F, position, velocity, mu):
        zero = F.zero()
        return Attitude(self._rotation(F, position, velocity), (zero, zero, zero))

    def attitude(self, F, position, velocity, mu):
        rotation = self._rotation(F, position, velocity)
        if self.lof_type == "QSW":
            r2 = dot(position, position)
            spin = scale(1.0 / r2, cross(position, velocity))
        else:
            r = norm(F, position)
            accel = scale(-mu / (r * r * r), position)
            spin = scale(1.0 / dot(velocity, velocity), cross(velocity, accel))
        return Attitude(rotation, spin)

    def __repr__(self) -> str:
        return f"LofAttitude(lof_type={self.lof_type!r})"
