"""Factorial products used by gravity-field normalization."""

from __future__ import annotations

import math


def factorial_ratio(n: int, m: int) -> float:
    """Compute ``(n-m)!/(n+m)!`` without forming the factorials.

    Args:
        n: Degree.
        m: Order, ``0 <= m <= n``.

    Returns:
        float: The factorial ratio.

    Raises:
        ValueError: If ``m`` is outside ``[0, n]``.
    """
    if m < 0 or m > n:
        raise ValueError(f"Order m={m} must satisfy 0 <= m <= n={n}.")
    p = 1.0
    for i in range(n - m + 1, n + m + 1):
        p /= i
    return p


def normalization_factor(n: int, m: int) -> float:
    """Full normalization factor of the associated Legendre function ``P_nm``.

    Unnormalized coefficients are obtained as ``C_nm = N_nm * Cbar_nm`` with
    ``N_nm = sqrt((2 - delta_0m)(2n + 1)(n - m)!/(n + m)!)``.

    Args:
        n: Degree.
        m: Order, ``0 <= m <= n``.

    Returns:
        float: ``N_nm``.
    """
    delta = 1.0 if m == 0 else 2.0
    return math.sqrt(delta * (2 * n + 1) * factorial_ratio(n, m))
