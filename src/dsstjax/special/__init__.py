"""Special functions of the semi-analytical theories.

- **Factorial products**: ``(n-m)!/(n+m)!`` and Legendre normalization
  factors.
- **Gamma^{m,s}_n**: inclination function backed by a shared, grow-only
  factorial-ratio table.
"""

from .factorials import factorial_ratio, normalization_factor
from .gamma_mns import (
    RATIO_TABLE,
    GammaMnsFunction,
    RatioTable,
    gamma_mns_index,
    gamma_mns_table_size,
)

__all__ = [
    "factorial_ratio",
    "normalization_factor",
    "gamma_mns_index",
    "gamma_mns_table_size",
    "RatioTable",
    "RATIO_TABLE",
    "GammaMnsFunction",
]
