"""Generic scalar fields.

Averaging algorithms are written once against a :class:`Field` and run
either on plain reals (:data:`REAL`) or on first-order dual numbers
(:class:`DualField`) that carry partial derivatives with respect to
orbital elements and force-model parameters.
"""

from ._base import (
    Field,
    Vector3,
    cross,
    dot,
    linear_combination,
    norm,
    scale,
)
from ._dual import Dual, DualField
from ._real import REAL, RealField

__all__ = [
    "Field",
    "Vector3",
    "RealField",
    "REAL",
    "Dual",
    "DualField",
    "dot",
    "cross",
    "norm",
    "scale",
    "linear_combination",
]
