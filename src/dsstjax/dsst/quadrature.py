"""Gauss-Legendre quadrature over field-valued integration limits.

Nodes and weights on ``[-1, 1]`` come from
:func:`numpy.polynomial.legendre.leggauss` and are cached per order.  The
mapping onto ``[lower, upper]`` is done with field arithmetic, so limits
that depend on the orbit (and hence carry derivatives) propagate into the
nodes and the weights.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp
import numpy as np

from dsstjax.config import get_dtype
from dsstjax.fields import Field

logger = logging.getLogger(__name__)

_RULES: dict[int, tuple[np.ndarray, np.ndarray]] = {}


def gauss_legendre(order: int) -> tuple[np.ndarray, np.ndarray]:
    """Gauss-Legendre nodes and weights on ``[-1, 1]``.

    Args:
        order: Number of nodes.

    Returns:
        tuple[np.ndarray, np.ndarray]: Read-only ``(nodes, weights)``, each
        of shape ``(order,)``.

    Raises:
        ValueError: If *order* is not positive.
    """
    if order < 1:
        raise ValueError(f"Quadrature order must be positive, got {order}.")
    rule = _RULES.get(order)
    if rule is None:
        nodes, weights = np.polynomial.legendre.leggauss(order)
        nodes.setflags(write=False)
        weights.setflags(write=False)
        rule = (nodes, weights)
        _RULES[order] = rule
        logger.debug("Computed Gauss-Legendre rule of order %d", order)
    return rule


def map_nodes(F: Field, lower, upper, order: int):
    """Gauss-Legendre nodes and weights on ``[lower, upper]``.

    Args:
        F: Scalar field of the limits.
        lower: Lower integration limit (unbatched field scalar).
        upper: Upper integration limit (unbatched field scalar).
        order: Number of nodes.

    Returns:
        tuple: ``(nodes, weights)``, field scalars batched with shape
        ``(order,)``.
    """
    x, w = gauss_legendre(order)
    x = jnp.asarray(x, dtype=get_dtype())
    w = jnp.asarray(w, dtype=get_dtype())
    half = (F.constant(upper) - lower) * 0.5
    mid = (F.constant(upper) + lower) * 0.5
    return mid + half * x, half * w
