"""First-order dual numbers (forward-mode derivatives).

A :class:`Dual` pairs a value with the vector of its partial derivatives
with respect to ``n`` declared free variables (orbital elements and/or
force-model parameters).  Every operation computes the value with exactly
the same ``jax.numpy`` call as :class:`~dsstjax.fields.RealField`, so a
dual computation reproduces the real one bit for bit, and propagates the
derivatives with the chain rule.

Values may be batched: ``value`` has shape ``S`` and ``derivatives`` has
shape ``S + (n,)``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import numpy as np
from jax.typing import ArrayLike

from dsstjax.config import get_dtype
from dsstjax.fields._base import Field


def _col(x):
    """Append a trailing axis so *x* broadcasts against derivative vectors."""
    return jnp.asarray(x)[..., None]


class Dual:
    """A value with its first-order partial derivatives.

    Args:
        value: Value, scalar or batched.
        derivatives: Partial derivatives, shape ``value.shape + (n,)``
            (broadcast if needed).

    Examples:
        ```python
        from dsstjax.fields import DualField
        F = DualField(2)
        x, y = F.variables([3.0, 4.0])
        r = F.sqrt(x * x + y * y)
        r.value        # 5.0
        r.derivatives  # [0.6, 0.8]
        ```
    """

    __slots__ = ("value", "derivatives")

    # Let numpy and JAX defer binary operators to the reflected Dual methods
    __array_ufunc__ = None
    __array_priority__ = 1000

    def __init__(self, value: ArrayLike, derivatives: ArrayLike):
        value = jnp.asarray(value, dtype=get_dtype())
        derivatives = jnp.asarray(derivatives, dtype=get_dtype())
        target = value.shape + derivatives.shape[-1:]
        if derivatives.shape != target:
            derivatives = jnp.broadcast_to(derivatives, target)
        self.value = value
        self.derivatives = derivatives

    @property
    def n_variables(self) -> int:
        return self.derivatives.shape[-1]

    @property
    def shape(self) -> tuple[int, ...]:
        return self.value.shape

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other):
        if isinstance(other, Dual):
            return _broadcast_dual(self.value + other.value,
                                   self.derivatives, other.derivatives, 1.0, 1.0)
        return Dual(self.value + other, self.derivatives)

    def __radd__(self, other):
        return Dual(other + self.value, self.derivatives)

    def __sub__(self, other):
        if isinstance(other, Dual):
            return _broadcast_dual(self.value - other.value,
                                   self.derivatives, other.derivatives, 1.0, -1.0)
        return Dual(self.value - other, self.derivatives)

    def __rsub__(self, other):
        return Dual(other - self.value, -self.derivatives)

    def __neg__(self):
        return Dual(-self.value, -self.derivatives)

    def __pos__(self):
        return self

    def __mul__(self, other):
        if isinstance(other, Dual):
            return _broadcast_dual(self.value * other.value,
                                   self.derivatives, other.derivatives,
                                   _col(other.value), _col(self.value))
        return Dual(self.value * other, _col(other) * self.derivatives)

    def __rmul__(self, other):
        return Dual(other * self.value, _col(other) * self.derivatives)

    def __truediv__(self, other):
        if isinstance(other, Dual):
            q = self.value / other.value
            inv = 1.0 / _col(other.value)
            return _broadcast_dual(q, self.derivatives, other.derivatives,
                                   inv, -_col(q) * inv)
        return Dual(self.value / other, self.derivatives / _col(other))

    def __rtruediv__(self, other):
        q = other / self.value
        return Dual(q, -_col(q / self.value) * self.derivatives)

    def __pow__(self, k):
        if isinstance(k, Dual):
            raise TypeError("Dual exponents are not supported, use exp/log")
        v = self.value ** k
        return Dual(v, _col(k * self.value ** (k - 1)) * self.derivatives)

    # ------------------------------------------------------------------
    # Comparison (on values only)
    # ------------------------------------------------------------------

    def __lt__(self, other):
        return self.value < _value_of(other)

    def __le__(self, other):
        return self.value <= _value_of(other)

    def __gt__(self, other):
        return self.value > _value_of(other)

    def __ge__(self, other):
        return self.value >= _value_of(other)

    def __float__(self):
        return float(self.value)

    def __getitem__(self, index):
        return Dual(self.value[index], self.derivatives[index])

    def __repr__(self) -> str:
        return f"Dual(value={np.asarray(self.value)}, derivatives={np.asarray(self.derivatives)})"


def _value_of(x):
    return x.value if isinstance(x, Dual) else x


def _broadcast_dual(value, da, db, ca, cb):
    """Build ``Dual(value, ca * da + cb * db)`` broadcasting batch shapes."""
    return Dual(value, ca * da + cb * db)


def _unflatten_dual(_, children):
    # Leaves may be tracers or placeholders, skip validation
    dual = object.__new__(Dual)
    dual.value, dual.derivatives = children
    return dual


# Register Dual as a JAX pytree so dual computations can be jitted or vmapped.
jax.tree_util.register_pytree_node(
    Dual,
    lambda d: ((d.value, d.derivatives), None),
    _unflatten_dual,
)


class DualField(Field):
    """Field of :class:`Dual` numbers with ``n`` free variables.

    Args:
        n_variables: Number of free variables carried by every scalar.

    Raises:
        ValueError: If *n_variables* is not positive.
    """

    def __init__(self, n_variables: int):
        if n_variables < 1:
            raise ValueError(f"DualField requires at least one variable, got {n_variables}.")
        self.n_variables = n_variables

    # ------------------------------------------------------------------
    # Construction and seeding
    # ------------------------------------------------------------------

    def constant(self, x):
        if isinstance(x, Dual):
            if x.n_variables != self.n_variables:
                raise ValueError(
                    f"Dual carries {x.n_variables} derivatives, field expects {self.n_variables}."
                )
            return x
        v = jnp.asarray(x, dtype=get_dtype())
        return Dual(v, jnp.zeros(v.shape + (self.n_variables,), dtype=get_dtype()))

    def variable(self, value: float, index: int) -> Dual:
        """Create a free variable whose derivative seed is the *index*-th unit vector.

        Args:
            value: Value of the variable.
            index: Position of the variable in the derivative vector.

        Returns:
            Dual: The seeded variable.

        Raises:
            ValueError: If *index* is outside ``[0, n_variables)``.
        """
        if not 0 <= index < self.n_variables:
            raise ValueError(
                f"Variable index {index} outside [0, {self.n_variables})."
            )
        seed = jnp.zeros(self.n_variables, dtype=get_dtype()).at[index].set(1.0)
        return Dual(value, seed)

    def variables(self, values, offset: int = 0) -> list[Dual]:
        """Seed consecutive free variables starting at *offset*.

        Args:
            values: Values of the variables.
            offset: Derivative index of the first variable.

        Returns:
            list[Dual]: One seeded variable per value.

        Raises:
            ValueError: If the variables do not fit in the derivative vector.
        """
        values = list(values)
        if offset < 0 or offset + len(values) > self.n_variables:
            raise ValueError(
                f"Cannot seed {len(values)} variables at offset {offset} "
                f"in a field of {self.n_variables} variables."
            )
        return [self.variable(v, offset + i) for i, v in enumerate(values)]

    def value(self, x):
        arr = np.asarray(_value_of(x), dtype=np.float64)
        if arr.ndim == 0:
            return float(arr)
        return arr

    def derivatives(self, x) -> np.ndarray:
        """Return the derivative vector of *x* as a numpy array (zeros for constants)."""
        if isinstance(x, Dual):
            return np.asarray(x.derivatives, dtype=np.float64)
        return np.zeros(np.shape(x) + (self.n_variables,))

    def is_finite(self, x) -> bool:
        return bool(jnp.all(jnp.isfinite(_value_of(x))))

    # ------------------------------------------------------------------
    # Elementary functions
    # ------------------------------------------------------------------

    def _lift(self, x) -> Dual:
        return x if isinstance(x, Dual) else self.constant(x)

    def sqrt(self, x):
        x = self._lift(x)
        v = jnp.sqrt(x.value)
        return Dual(v, _col(0.5 / v) * x.derivatives)

    def cbrt(self, x):
        x = self._lift(x)
        v = jnp.cbrt(x.value)
        return Dual(v, _col(1.0 / (3.0 * v * v)) * x.derivatives)

    def sin(self, x):
        x = self._lift(x)
        return Dual(jnp.sin(x.value), _col(jnp.cos(x.value)) * x.derivatives)

    def cos(self, x):
        x = self._lift(x)
        return Dual(jnp.cos(x.value), _col(-jnp.sin(x.value)) * x.derivatives)

    def tan(self, x):
        x = self._lift(x)
        v = jnp.tan(x.value)
        return Dual(v, _col(1.0 + v * v) * x.derivatives)

    def arcsin(self, x):
        x = self._lift(x)
        return Dual(jnp.arcsin(x.value),
                    _col(1.0 / jnp.sqrt(1.0 - x.value * x.value)) * x.derivatives)

    def arccos(self, x):
        x = self._lift(x)
        return Dual(jnp.arccos(x.value),
                    _col(-1.0 / jnp.sqrt(1.0 - x.value * x.value)) * x.derivatives)

    def arctan(self, x):
        x = self._lift(x)
        return Dual(jnp.arctan(x.value),
                    _col(1.0 / (1.0 + x.value * x.value)) * x.derivatives)

    def arctan2(self, y, x):
        y = self._lift(y)
        x = self._lift(x)
        r2 = x.value * x.value + y.value * y.value
        return Dual(jnp.arctan2(y.value, x.value),
                    _col(x.value / r2) * y.derivatives - _col(y.value / r2) * x.derivatives)

    def exp(self, x):
        x = self._lift(x)
        v = jnp.exp(x.value)
        return Dual(v, _col(v) * x.derivatives)

    def log(self, x):
        x = self._lift(x)
        return Dual(jnp.log(x.value), x.derivatives / _col(x.value))

    def abs(self, x):
        x = self._lift(x)
        return Dual(jnp.abs(x.value), _col(jnp.sign(x.value)) * x.derivatives)

    def power(self, x, k):
        x = self._lift(x)
        v = jnp.power(x.value, k)
        return Dual(v, _col(k * jnp.power(x.value, k - 1)) * x.derivatives)

    def sum(self, x, axis=-1):
        x = self._lift(x)
        d_axis = axis - 1 if axis < 0 else axis
        return Dual(jnp.sum(x.value, axis=axis), jnp.sum(x.derivatives, axis=d_axis))

    def stack(self, xs):
        xs = [self._lift(x) for x in xs]
        shape = jnp.broadcast_shapes(*(x.shape for x in xs))
        values = [jnp.broadcast_to(x.value, shape) for x in xs]
        derivatives = [jnp.broadcast_to(x.derivatives, shape + (self.n_variables,)) for x in xs]
        return Dual(jnp.stack(values, axis=-1), jnp.stack(derivatives, axis=-2))

    def __eq__(self, other):
        return isinstance(other, DualField) and other.n_variables == self.n_variables

    def __hash__(self):
        return hash((DualField, self.n_variables))

    def __repr__(self) -> str:
        return f"DualField(n_variables={self.n_variables})"
