"""The Gamma^{m,s}_n inclination function of the DSST tesseral and zonal theories.

``Gamma^{m,s}_n(gamma)`` depends on the direction cosine ``gamma`` of the
body pole in the equinoctial frame and on the retrograde factor ``I``.
For ``0 <= m <= n`` and ``|s| <= n`` (Danielson et al., eq. 2.7.1-(7)):

- ``s <= -m``:      ``(-1)^(m - I s) 2^s (1 + I gamma)^(-I m)``
- ``-m < s < m``:   ``(-1)^(m - I s) 2^-m r(m, n, s) (1 + I gamma)^(I s)``
- ``s >= m``:       ``2^-s (1 + I gamma)^(I m)``

The factorial ratios ``r(m, n, s)`` do not depend on ``gamma``; they are
kept in a single process-wide table shared by every function instance and
grown on demand.

References:
    1. P. J. Cefola et al., *Semi-analytical Satellite Theory*, Danielson
       et al., NASA-CR-199225, 1995.
"""

from __future__ import annotations

import logging
import math
import threading
from fractions import Fraction

import numpy as np

from dsstjax.fields import REAL, Field

logger = logging.getLogger(__name__)


def gamma_mns_index(m: int, n: int, s: int) -> int:
    """Offset of ``(m, n, s)`` in the flattened coefficient tables.

    Entries are enumerated with ``n`` outer, ``m`` middle and ``s``
    inner, each degree ``n`` occupying ``(n + 1)(2n + 1)`` slots.

    Args:
        m: Order, ``0 <= m <= n``.
        n: Degree.
        s: Index, ``-n <= s <= n``.

    Returns:
        int: Flat offset.

    Raises:
        ValueError: If the indices are out of range.
    """
    if not (0 <= m <= n and -n <= s <= n):
        raise ValueError(
            f"Invalid Gamma index (m={m}, n={n}, s={s}): requires 0 <= m <= n and |s| <= n."
        )
    return n * (n + 1) * (4 * n - 1) // 6 + m * (2 * n + 1) + s + n


def gamma_mns_table_size(n_max: int) -> int:
    """Number of ``(m, n, s)`` entries for all degrees up to *n_max*."""
    return (n_max + 1) * (n_max + 2) * (4 * n_max + 3) // 6


def _compute_ratios(n_max: int) -> np.ndarray:
    """Compute every ratio up to *n_max* with exact rational arithmetic."""
    exact = [Fraction(0)] * gamma_mns_table_size(n_max)
    for n in range(n_max + 1):
        exact[gamma_mns_index(0, n, 0)] = Fraction(1)
        for m in range(1, n + 1):
            exact[gamma_mns_index(m, n, 0)] = (
                exact[gamma_mns_index(m - 1, n, 0)] * (n + m) / (n - (m - 1))
            )
        for abs_s in range(1, n + 1):
            for m in range(n + 1):
                ratio = exact[gamma_mns_index(m, n, abs_s - 1)] * (n - (abs_s - 1)) / (n + abs_s)
                exact[gamma_mns_index(m, n, abs_s)] = ratio
                exact[gamma_mns_index(m, n, -abs_s)] = ratio
    return np.array([float(r) for r in exact], dtype=np.float64)


class RatioTable:
    """Process-wide, grow-only table of Gamma factorial ratios.

    Growth reallocates the table and recomputes it entirely from exact
    fractions, so entries present before a growth are bitwise identical
    afterwards.  Growth is serialized by a lock; lookups against an already
    large enough table take no lock and only ever see a fully built array.

    Use the module-level :data:`RATIO_TABLE` instance.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ratios = np.zeros(0, dtype=np.float64)
        self._n_max = -1

    @property
    def n_max(self) -> int:
        """Largest degree currently covered (``-1`` when empty)."""
        return self._n_max

    def ensure_capacity(self, n_max: int) -> np.ndarray:
        """Make sure the table covers degree *n_max* and return it.

        Idempotent: a table already covering *n_max* is returned unchanged.

        Args:
            n_max: Required maximum degree.

        Returns:
            np.ndarray: Read-only ratio table covering at least *n_max*.

        Raises:
            ValueError: If *n_max* is negative.
        """
        if n_max < 0:
            raise ValueError(f"Maximum degree must be non-negative, got {n_max}.")
        if self._n_max >= n_max:
            return self._ratios
        with self._lock:
            if self._n_max < n_max:
                logger.debug(
                    "Growing Gamma ratio table from degree %d to %d", self._n_max, n_max
                )
                ratios = _compute_ratios(n_max)
                ratios.flags.writeable = False
                # Publish the array before the degree: readers check the degree first
                self._ratios = ratios
                self._n_max = n_max
            return self._ratios

    def ratio(self, m: int, n: int, s: int) -> float:
        """Return ``r(m, n, s)``, growing the table if needed.

        Raises:
            ValueError: If the indices are out of range.
        """
        index = gamma_mns_index(m, n, s)
        return float(self.ensure_capacity(n)[index])


RATIO_TABLE = RatioTable()
"""The shared ratio table."""


class GammaMnsFunction:
    """Memoized ``Gamma^{m,s}_n(gamma)`` for one value of ``gamma``.

    Args:
        n_max: Maximum degree that will be requested.
        gamma: Direction cosine of the body pole (float or field scalar).
        retrograde_factor: ``+1`` for the direct equinoctial frame, ``-1``
            for the retrograde one.
        field: Scalar field of *gamma*. Default: :data:`~dsstjax.fields.REAL`.

    Raises:
        ValueError: If *n_max* is negative or *retrograde_factor* is not
            ``+1`` or ``-1``.

    Examples:
        ```python
        from dsstjax.special import GammaMnsFunction
        gamma = GammaMnsFunction(4, 0.3, 1)
        gamma.get_value(2, 3, -1)
        ```
    """

    def __init__(self, n_max: int, gamma, retrograde_factor: int, field: Field = REAL):
        if retrograde_factor not in (-1, 1):
            raise ValueError(
                f"Retrograde factor must be +1 or -1, got {retrograde_factor}."
            )
        self.n_max = n_max
        self.retrograde_factor = retrograde_factor
        self.field = field
        RATIO_TABLE.ensure_capacity(n_max)
        self._op_ig = 1.0 + retrograde_factor * field.constant(gamma)
        self._values = {}

    def _check(self, m: int, n: int, s: int) -> None:
        if not (0 <= m <= n <= self.n_max and -n <= s <= n):
            raise ValueError(
                f"Invalid Gamma index (m={m}, n={n}, s={s}): requires "
                f"0 <= m <= n <= {self.n_max} and |s| <= n."
            )

    def _exponent(self, m: int, s: int) -> int:
        """Exponent ``I * e`` such that the value is proportional to ``(1 + I gamma)^e``."""
        if s <= -m:
            return -m
        if s < m:
            return s
        return m

    def get_value(self, m: int, n: int, s: int):
        """Evaluate ``Gamma^{m,s}_n``.

        May be infinite (with the correct sign) when ``1 + I gamma = 0``.

        Args:
            m: Order, ``0 <= m <= n``.
            n: Degree, ``n <= n_max``.
            s: Index, ``|s| <= n``.

        Returns:
            Field scalar value.

        Raises:
            ValueError: If the indices are out of range.
        """
        self._check(m, n, s)
        i = gamma_mns_index(m, n, s)
        if i not in self._values:
            I = self.retrograde_factor
            if s <= -m:
                sign = -1.0 if (m - I * s) % 2 else 1.0
                value = math.ldexp(sign, s) * self.field.power(self._op_ig, -I * m)
            elif s < m:
                sign = -1.0 if (m - I * s) % 2 else 1.0
                value = (math.ldexp(sign, -m) * RATIO_TABLE.ratio(m, n, s)
                         * self.field.power(self._op_ig, I * s))
            else:
                value = math.ldexp(1.0, -s) * self.field.power(self._op_ig, I * m)
            self._values[i] = value
        return self._values[i]

    def get_derivative(self, m: int, n: int, s: int):
        """Derivative of ``Gamma^{m,s}_n`` with respect to ``gamma``.

        Args:
            m: Order, ``0 <= m <= n``.
            n: Degree, ``n <= n_max``.
            s: Index, ``|s| <= n``.

        Returns:
            Field scalar derivative.
        """
        value = self.get_value(m, n, s)
        return self._exponent(m, s) * value / self._op_ig
