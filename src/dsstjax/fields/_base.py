"""Abstract scalar field and 3-vector helpers.

A :class:`Field` is the numeric type an averaging algorithm is written
against.  Arithmetic (``+ - * /``, unary ``-`` and ``**`` with a constant
exponent) is carried by the scalars themselves; transcendental functions,
constants and reductions go through the field instance so that the same
code runs on plain JAX arrays and on :class:`~dsstjax.fields.Dual` numbers.

Scalars may carry leading batch axes.  Batching is how quadrature
evaluates every node in a single pass: a mean-orbit scalar of shape ``()``
broadcasts against node-dependent scalars of shape ``(N,)``.

Vectors are plain 3-tuples of field scalars, manipulated with the helpers
at the bottom of this module.
"""

from __future__ import annotations

import abc
from typing import Any

import numpy as np

Vector3 = tuple[Any, Any, Any]


class Field(abc.ABC):
    """Interface of a scalar realization."""

    # ------------------------------------------------------------------
    # Construction and inspection
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def constant(self, x) -> Any:
        """Embed a number (or array of numbers) as a field scalar."""

    def zero(self) -> Any:
        return self.constant(0.0)

    def one(self) -> Any:
        return self.constant(1.0)

    @abc.abstractmethod
    def value(self, x) -> float | np.ndarray:
        """Return the real value of a field scalar.

        Returns a Python ``float`` for unbatched scalars and a numpy array
        otherwise.
        """

    @abc.abstractmethod
    def is_finite(self, x) -> bool:
        """Whether every value of *x* is finite."""

    # ------------------------------------------------------------------
    # Elementary functions
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def sqrt(self, x): ...

    @abc.abstractmethod
    def cbrt(self, x): ...

    @abc.abstractmethod
    def sin(self, x): ...

    @abc.abstractmethod
    def cos(self, x): ...

    @abc.abstractmethod
    def tan(self, x): ...

    @abc.abstractmethod
    def arcsin(self, x): ...

    @abc.abstractmethod
    def arccos(self, x): ...

    @abc.abstractmethod
    def arctan(self, x): ...

    @abc.abstractmethod
    def arctan2(self, y, x): ...

    @abc.abstractmethod
    def exp(self, x): ...

    @abc.abstractmethod
    def log(self, x): ...

    @abc.abstractmethod
    def abs(self, x): ...

    @abc.abstractmethod
    def power(self, x, k: float): ...

    # ------------------------------------------------------------------
    # Reductions
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def sum(self, x, axis: int = -1):
        """Sum a batched scalar over one of its batch axes."""

    @abc.abstractmethod
    def stack(self, xs):
        """Stack scalars of a common batch shape along a new trailing batch axis."""


# ---------------------------------------------------------------------------
# 3-vector helpers
# ---------------------------------------------------------------------------


def dot(u: Vector3, v: Vector3):
    """Scalar product of two 3-vectors."""
    return u[0] * v[0] + u[1] * v[1] + u[2] * v[2]


def cross(u: Vector3, v: Vector3) -> Vector3:
    """Cross product of two 3-vectors."""
    return (
        u[1] * v[2] - u[2] * v[1],
        u[2] * v[0] - u[0] * v[2],
        u[0] * v[1] - u[1] * v[0],
    )


def norm(field: Field, u: Vector3):
    """Euclidean norm of a 3-vector."""
    return field.sqrt(dot(u, u))


def scale(s, u: Vector3) -> Vector3:
    """Multiply a 3-vector by a scalar."""
    return (s * u[0], s * u[1], s * u[2])


def linear_combination(*terms: tuple[Any, Vector3]) -> Vector3:
    """Compute ``sum(a_i * u_i)`` for ``(a_i, u_i)`` pairs."""
    a0, u0 = terms[0]
    x, y, z = a0 * u0[0], a0 * u0[1], a0 * u0[2]
    for a, u in terms[1:]:
        x = x + a * u[0]
        y = y + a * u[1]
        z = z + a * u[2]
    return (x, y, z)
