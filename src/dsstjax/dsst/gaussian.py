"""Gaussian-quadrature averaging of non-conservative or arbitrary forces.

A :class:`GaussianContribution` only needs the perturbing acceleration.
Its mean element rates are obtained by projecting the acceleration
through the partial derivatives of the elements with respect to the
velocity (Gauss' form of the variational equations) and averaging over
one revolution:

``d(elem)/dt = 1/(2 pi) int_{L1}^{L2} (d elem/d v . acc) (r/a)^2 / B dL``

where ``L`` is the true longitude and ``(r/a)^2 / B = d lambda / d L`` on
the two-body arc.  All quadrature nodes are evaluated in one batched
field computation.

The short-period terms are the Fourier series of the same integrand in
the mean longitude, truncated after ``J`` harmonics.

References:
    1. D. A. Danielson et al., *Semianalytic Satellite Theory*, Naval
       Postgraduate School, 1995, sections 2.2 and 4.4.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Iterable

import jax.numpy as jnp
import numpy as np

from dsstjax.config import get_dtype
from dsstjax.constants import PI, TWO_PI
from dsstjax.dsst.attitude import Attitude, AttitudeProvider, InertialAttitude
from dsstjax.dsst.auxiliary import AuxiliaryElements
from dsstjax.dsst.config import AveragingConfig
from dsstjax.dsst.contributions import (
    EQUINOCTIAL_RATE_NAMES,
    DSSTContribution,
    ShortPeriodTerms,
)
from dsstjax.dsst.quadrature import map_nodes
from dsstjax.fields import Field, Vector3, dot, linear_combination
from dsstjax.orbits import Orbit, longitude_eccentric_to_mean, longitude_true_to_eccentric

logger = logging.getLogger(__name__)


class GaussianContribution(DSSTContribution):
    """Averaged contribution of a perturbing acceleration.

    Subclasses implement :meth:`acceleration` and declare their parameters.

    Args:
        code: Name of the contribution, used to label its short-period
            terms.
        attitude_provider: Attitude along the arc.
            Default: :class:`~dsstjax.dsst.attitude.InertialAttitude`.
        config: Quadrature settings. Default: ``AveragingConfig.default()``.
    """

    def __init__(
        self,
        code: str,
        attitude_provider: AttitudeProvider | None = None,
        config: AveragingConfig | None = None,
    ):
        self.code = code
        self.attitude_provider = attitude_provider or InertialAttitude()
        self.config = config or AveragingConfig.default()
        self._short_period_terms: GaussianShortPeriodicTerms | None = None

    # ------------------------------------------------------------------
    # Force model interface
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def acceleration(
        self,
        F: Field,
        position: Vector3,
        velocity: Vector3,
        attitude: Attitude,
        parameters: tuple,
    ) -> Vector3:
        """Perturbing acceleration in the inertial frame [m/s^2].

        Every argument may be batched over the quadrature nodes.
        """

    @property
    def depends_on_attitude_rate(self) -> bool:
        """Whether :meth:`acceleration` reads the attitude spin."""
        return False

    def get_l_limits(self, aux: AuxiliaryElements) -> tuple:
        """True-longitude integration limits, a full revolution by default."""
        return aux.lv - PI, aux.lv + PI

    # ------------------------------------------------------------------
    # Mean element rates
    # ------------------------------------------------------------------

    def element_rates(self, aux: AuxiliaryElements, true_longitude, parameters: tuple):
        """Osculating element rates due to the acceleration on the two-body arc.

        Args:
            aux: Auxiliary elements of the mean state.
            true_longitude: True longitudes of the evaluation points
                (field scalar, possibly batched).
            parameters: Force-model parameters embedded in ``aux.field``.

        Returns:
            tuple: ``(rates, dlambda_dl)`` where *rates* are the six rates
            ``(a, k, h, q, p, lambda)`` and *dlambda_dl* is
            ``(r/a)^2 / B``.
        """
        F = aux.field
        a, k, h, q, p = aux.sma, aux.k, aux.h, aux.q, aux.p
        A, B, C = aux.A, aux.B, aux.C
        n = aux.mean_motion
        I = aux.retrograde_factor
        f, g, w = aux.f, aux.g, aux.w
        mu = aux.mu

        cos_l = F.cos(true_longitude)
        sin_l = F.sin(true_longitude)
        roa = B * B / (1.0 + k * cos_l + h * sin_l)

        # Two-body position and velocity in the (f, g) plane
        x = a * roa * cos_l
        y = a * roa * sin_l
        naob = n * a / B
        x_dot = -naob * (h + sin_l)
        y_dot = naob * (k + cos_l)
        position = linear_combination((x, f), (y, g))
        velocity = linear_combination((x_dot, f), (y_dot, g))

        if self.depends_on_attitude_rate:
            attitude = self.attitude_provider.attitude(F, position, velocity, mu)
        else:
            attitude = self.attitude_provider.rotation_only(F, position, velocity, mu)

        acc = self.acceleration(F, position, velocity, attitude, parameters)

        acc_f = dot(f, acc)
        acc_g = dot(g, acc)
        acc_w = dot(w, acc)

        oo_mu = 1.0 / mu
        oo_a = 1.0 / A
        oo_ab = oo_a / B
        co2ab = C * oo_ab / 2.0
        iqy_px = I * q * y - p * x

        # Velocity partials projected on the acceleration
        da = 2.0 / (n * n * a) * dot(velocity, acc)
        dh = ((2.0 * x_dot * y - x * y_dot) * acc_f - x * x_dot * acc_g) * oo_mu \
            + k * iqy_px * oo_ab * acc_w
        dk = ((2.0 * x * y_dot - x_dot * y) * acc_g - y * y_dot * acc_f) * oo_mu \
            - h * iqy_px * oo_ab * acc_w
        dp = co2ab * y * acc_w
        dq = I * co2ab * x * acc_w
        dl = -2.0 * oo_a * dot(position, acc) + (k * dh - h * dk) / (1.0 + B) \
            + iqy_px * oo_a * acc_w

        return (da, dk, dh, dq, dp, dl), roa * roa / B

    def _average(self, aux: AuxiliaryElements, parameters: tuple, order: int) -> tuple:
        F = aux.field
        ll, ul = self.get_l_limits(aux)
        nodes, weights = map_nodes(F, ll, ul, order)
        rates, jac = self.element_rates(aux, nodes, parameters)
        factor = weights * jac
        return tuple(F.sum(rate * factor) / TWO_PI for rate in rates)

    def _relative_change(self, aux: AuxiliaryElements, new: tuple, old: tuple) -> float:
        F = aux.field
        scale = np.array([1.0 / F.value(aux.sma), 1.0, 1.0, 1.0, 1.0, 1.0])
        new_v = np.array([F.value(x) for x in new]) * scale
        old_v = np.array([F.value(x) for x in old]) * scale
        reference = np.max(np.abs(new_v))
        if reference == 0.0:
            return 0.0 if np.all(old_v == 0.0) else np.inf
        return float(np.max(np.abs(new_v - old_v)) / reference)

    def get_mean_element_rate(self, orbit: Orbit, aux: AuxiliaryElements, parameters=None) -> tuple:
        """Secular rates ``(a, ex, ey, hx, hy, lambda)`` at a mean state.

        With an adaptive configuration the quadrature order is raised
        through ``config.quadrature_orders`` until the relative change of
        the rates (semi-major axis rate scaled by ``1/a``) drops below
        ``config.convergence_threshold``.  The decision reads values only,
        so real and dual evaluations pick the same order.

        Args:
            orbit: Mean orbit (unused beyond *aux*; kept for the protocol).
            aux: Auxiliary elements of *orbit*.
            parameters: Force-model parameters (``None`` for defaults).

        Returns:
            tuple: Six field scalars.
        """
        parameters = self.resolve_parameters(aux.field, parameters)
        orders = self.config.orders()
        rates = self._average(aux, parameters, orders[0])
        for order in orders[1:]:
            new_rates = self._average(aux, parameters, order)
            change = self._relative_change(aux, new_rates, rates)
            rates = new_rates
            if change <= self.config.convergence_threshold:
                logger.debug("%s mean rates converged with %d nodes", self.code, order)
                return rates
        if len(orders) > 1:
            logger.debug(
                "%s mean rates did not converge below %.1e, using %d nodes",
                self.code, self.config.convergence_threshold, orders[-1],
            )
        return rates

    # ------------------------------------------------------------------
    # Short-period terms
    # ------------------------------------------------------------------

    def initialize(self, aux: AuxiliaryElements, include_short_period: bool, parameters=None) -> list:
        self.resolve_parameters(aux.field, parameters)
        if not include_short_period:
            self._short_period_terms = None
            return []
        self._short_period_terms = GaussianShortPeriodicTerms(
            self.code, self.config.n_harmonics, aux.retrograde_factor
        )
        return [self._short_period_terms]

    def update_short_period_terms(self, parameters, mean_orbit: Orbit) -> None:
        """Recompute the Fourier coefficients of the element rates.

        ``C_j = 1/pi int rate cos(j lambda) dlambda`` and likewise ``S_j``
        with ``sin``, for ``j = 1..J``, integrated over the true longitude
        limits with ``config.short_period_quadrature_order`` nodes.

        Raises:
            ValueError: If :meth:`initialize` did not request short-period
                terms.
        """
        terms = self._short_period_terms
        if terms is None:
            raise ValueError(
                f"{self.code}: short-period terms were not requested at initialization."
            )
        aux = AuxiliaryElements(mean_orbit, terms.retrograde_factor)
        F = aux.field
        parameters = self.resolve_parameters(F, parameters)

        ll, ul = self.get_l_limits(aux)
        nodes, weights = map_nodes(F, ll, ul, self.config.short_period_quadrature_order)
        rates, jac = self.element_rates(aux, nodes, parameters)

        # Mean longitude at every node
        le = longitude_true_to_eccentric(F, aux.k, aux.h, nodes)
        lm = longitude_eccentric_to_mean(F, aux.k, aux.h, le)

        harmonics = jnp.arange(1, terms.n_harmonics + 1, dtype=get_dtype())[:, None]
        j_lm = harmonics * lm
        cos_jl = F.cos(j_lm)
        sin_jl = F.sin(j_lm)
        factor = weights * jac / PI

        cos_coefs = []
        sin_coefs = []
        for rate in rates:
            weighted = rate * factor
            cos_coefs.append(F.sum(weighted * cos_jl, axis=-1))
            sin_coefs.append(F.sum(weighted * sin_jl, axis=-1))
        terms.set_coefficients(F, tuple(cos_coefs), tuple(sin_coefs))


class GaussianShortPeriodicTerms(ShortPeriodTerms):
    """Truncated Fourier short-period terms of a Gaussian contribution.

    With coefficients ``C_j``, ``S_j`` of an element rate and the mean
    motion ``n``, the correction is

    ``eta = 1/n sum_j (C_j sin(j lambda) - S_j cos(j lambda)) / j``

    and the mean longitude also receives the drift caused by the
    semi-major axis correction,
    ``3/(2 a n) sum_j (Ca_j cos(j lambda) + Sa_j sin(j lambda)) / j^2``.

    Args:
        code: Name of the owning contribution.
        n_harmonics: Number of harmonics ``J``.
        retrograde_factor: Retrograde factor of the element set.
    """

    def __init__(self, code: str, n_harmonics: int, retrograde_factor: int):
        self.code = code
        self.n_harmonics = n_harmonics
        self.retrograde_factor = retrograde_factor
        self._field: Field | None = None
        self._cos: tuple | None = None
        self._sin: tuple | None = None

    def set_coefficients(self, F: Field, cos_coefs: tuple, sin_coefs: tuple) -> None:
        """Store freshly computed coefficients (each of shape ``(J,)``)."""
        self._field = F
        self._cos = cos_coefs
        self._sin = sin_coefs

    def _check_updated(self) -> None:
        if self._cos is None:
            raise ValueError(f"{self.code}: short-period terms have not been updated yet.")

    def value(self, orbit: Orbit) -> tuple:
        self._check_updated()
        aux = AuxiliaryElements(orbit, self.retrograde_factor)
        F = aux.field
        n = aux.mean_motion

        j = jnp.arange(1, self.n_harmonics + 1, dtype=get_dtype())
        j_lm = j * aux.lm
        cos_jl = F.cos(j_lm)
        sin_jl = F.sin(j_lm)

        corrections = [
            F.sum((c * sin_jl - s * cos_jl) / j) / n
            for c, s in zip(self._cos, self._sin)
        ]
        ca, sa = self._cos[0], self._sin[0]
        corrections[5] = corrections[5] + 3.0 / (2.0 * aux.sma * n) * F.sum(
            (ca * cos_jl + sa * sin_jl) / (j * j)
        )
        return tuple(corrections)

    def get_coefficients(self, selected: Iterable[str] | None = None) -> dict[str, np.ndarray]:
        """Coefficient values keyed ``"<code>-c-<element>"`` / ``"<code>-s-<element>"``.

        Each value is a numpy array of the ``J`` harmonics.
        """
        self._check_updated()
        F = self._field
        coefficients = {}
        for name, c, s in zip(EQUINOCTIAL_RATE_NAMES, self._cos, self._sin):
            coefficients[f"{self.code}-c-{name}"] = np.atleast_1d(F.value(c))
            coefficients[f"{self.code}-s-{name}"] = np.atleast_1d(F.value(s))
        if selected is None:
            return coefficients
        selected = list(selected)
        unknown = [key for key in selected if key not in coefficients]
        if unknown:
            raise ValueError(f"{self.code}: unknown coefficients {unknown}.")
        return {key: coefficients[key] for key in selected}
