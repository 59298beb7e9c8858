import jax.numpy as jnp
import numpy as np
import pytest

from dsstjax.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Semi-analytical thresholds assume double precision; tests that need a
    different dtype override it locally (e.g. test_config.py has its own
    autouse fixture that resets the dtype).
    """
    set_dtype(jnp.float64)


# 8-point central difference weights for offsets +-1..+-4 steps
_FD_WEIGHTS = (4.0 / 5.0, -1.0 / 5.0, 4.0 / 105.0, -1.0 / 280.0)


def _central_difference_jacobian(func, x0, steps):
    """Jacobian of ``func`` at ``x0`` by 8-point central differences.

    Args:
        func: Maps a float64 vector of shape ``(n,)`` to a vector ``(m,)``.
        x0: Evaluation point, shape ``(n,)``.
        steps: Step per input variable, shape ``(n,)``.

    Returns:
        np.ndarray: Jacobian, shape ``(m, n)``.
    """
    x0 = np.asarray(x0, dtype=np.float64)
    steps = np.broadcast_to(np.asarray(steps, dtype=np.float64), x0.shape)
    columns = []
    for j in range(x0.size):
        column = 0.0
        for k, weight in enumerate(_FD_WEIGHTS, start=1):
            dx = np.zeros_like(x0)
            dx[j] = k * steps[j]
            plus = np.asarray(func(x0 + dx), dtype=np.float64)
            minus = np.asarray(func(x0 - dx), dtype=np.float64)
            column = column + weight * (plus - minus)
        columns.append(column / steps[j])
    return np.stack(columns, axis=-1)


@pytest.fixture
def finite_difference_jacobian():
    """8-point central finite-difference Jacobian helper."""
    return _central_difference_jacobian
