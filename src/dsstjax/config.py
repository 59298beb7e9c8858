"""Package-wide floating-point precision configuration.

``set_dtype`` and ``get_dtype`` control the float dtype of every JAX array
created by dsstjax (field constants, quadrature nodes, element arrays).

Semi-analytical averaging compares element differences against thresholds
of order ``1e-12``, so the default is ``jnp.float64`` and importing this
module switches JAX into 64-bit mode.  Lower precisions are accepted for
experimentation; the averaging thresholds in
:class:`~dsstjax.dsst.config.AveragingConfig` must then be loosened
accordingly.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float32, jnp.float64)

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Set the package-wide float dtype.

    Selecting ``jnp.float64`` (re-)enables JAX's 64-bit mode.

    Args:
        dtype: ``jnp.float32`` or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current package-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_epoch_eq_tolerance() -> float:
    """Return the tolerance used by :class:`~dsstjax.epoch.Epoch` equality.

    Epoch arithmetic is carried in Python floats, so only the float64
    tolerance is meaningful; ``float32`` mode loosens it to a millisecond
    to match arrays produced from epochs in that mode.

    Returns:
        float: Tolerance in seconds.
    """
    if _dtype == jnp.float64:
        return 1e-9
    return 1e-3
