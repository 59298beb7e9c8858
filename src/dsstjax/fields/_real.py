"""Plain real realization of the scalar field, backed by ``jax.numpy``."""

from __future__ import annotations

import jax.numpy as jnp
import numpy as np

from dsstjax.config import get_dtype
from dsstjax.fields._base import Field


class RealField(Field):
    """Field of real numbers stored as JAX arrays of the configured dtype.

    Use the module-level :data:`REAL` instance.
    """

    def constant(self, x):
        return jnp.asarray(x, dtype=get_dtype())

    def value(self, x):
        arr = np.asarray(x, dtype=np.float64)
        if arr.ndim == 0:
            return float(arr)
        return arr

    def is_finite(self, x) -> bool:
        return bool(jnp.all(jnp.isfinite(x)))

    def sqrt(self, x):
        return jnp.sqrt(x)

    def cbrt(self, x):
        return jnp.cbrt(x)

    def sin(self, x):
        return jnp.sin(x)

    def cos(self, x):
        return jnp.cos(x)

    def tan(self, x):
        return jnp.tan(x)

    def arcsin(self, x):
        return jnp.arcsin(x)

    def arccos(self, x):
        return jnp.arccos(x)

    def arctan(self, x):
        return jnp.arctan(x)

    def arctan2(self, y, x):
        return jnp.arctan2(y, x)

    def exp(self, x):
        return jnp.exp(x)

    def log(self, x):
        return jnp.log(x)

    def abs(self, x):
        return jnp.abs(x)

    def power(self, x, k):
        return jnp.power(x, k)

    def sum(self, x, axis=-1):
        return jnp.sum(x, axis=axis)

    def stack(self, xs):
        return jnp.stack(jnp.broadcast_arrays(*xs), axis=-1)

    def __eq__(self, other):
        return isinstance(other, RealField)

    def __hash__(self):
        return hash(RealField)

    def __repr__(self) -> str:
        return "RealField()"


REAL = RealField()
"""The shared plain-real field."""
