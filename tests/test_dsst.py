"""Tests for the semi-analytical averaging engine (dsstjax.dsst)."""

import math

import numpy as np
import pytest

from dsstjax.constants import GM_EARTH, J2_EARTH, R_EARTH, TWO_PI
from dsstjax.dsst import (
    EQUINOCTIAL_RATE_NAMES,
    Attitude,
    AttitudeProvider,
    AuxiliaryElements,
    AveragingConfig,
    ConstantThrustContribution,
    GaussianContribution,
    InertialAttitude,
    LofAttitude,
    ZonalContribution,
    compute_mean_element_rates,
    compute_osculating_orbit,
    compute_short_period_corrections,
    gauss_legendre,
    map_nodes,
    retrograde_factor,
)
from dsstjax.epoch import Epoch
from dsstjax.fields import REAL, DualField, scale
from dsstjax.frames import GCRF
from dsstjax.gravity import GravityModel
from dsstjax.orbits import Orbit, OrbitType, PositionAngleType, brouwer_transform, convert_orbit

_RATE_RTOL = 1e-7
_ANGLE_TOL = 1e-12

_EPOCH = Epoch(2024, 6, 1)
_KEPLERIAN = (7.0e6, 0.01, 0.9, 0.3, 1.2, 0.5)
_THRUST = 1e-6  # [m/s^2]


def _orbit(elements=_KEPLERIAN, orbit_type=OrbitType.KEPLERIAN, field=REAL):
    return Orbit(orbit_type, elements, _EPOCH, GCRF, GM_EARTH, PositionAngleType.MEAN, field)


def _equinoctial_values(elements=_KEPLERIAN):
    eq = convert_orbit(_orbit(elements), OrbitType.EQUINOCTIAL)
    return np.array([REAL.value(x) for x in eq.elements])


def _j2_model():
    return GravityModel.zonal(GM_EARTH, R_EARTH, {2: J2_EARTH})


def _values(F, scalars):
    return np.array([F.value(x) for x in scalars])


# ──────────────────────────────────────────────
# Configuration
# ──────────────────────────────────────────────


class TestAveragingConfig:
    def test_default_is_adaptive(self):
        config = AveragingConfig.default()
        assert config.is_adaptive
        assert config.orders() == config.quadrature_orders
        assert config.max_zonal_degree == 6

    def test_fast_preset(self):
        config = AveragingConfig.fast()
        assert not config.is_adaptive
        assert config.orders() == (16,)
        assert config.short_period_quadrature_order >= 2 * config.n_harmonics

    def test_orders_coerced_to_tuple(self):
        config = AveragingConfig(quadrature_orders=[8, 16])
        assert config.quadrature_orders == (8, 16)

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"quadrature_orders": ()}, "at least one order"),
            ({"quadrature_orders": (0, 8)}, "must be positive"),
            ({"quadrature_orders": (16, 8)}, "strictly increasing"),
            ({"convergence_threshold": 0.0}, "convergence_threshold"),
            ({"fixed_order": 0}, "fixed_order"),
            ({"n_harmonics": 0}, "n_harmonics"),
            ({"n_harmonics": 30}, "at least twice"),
            ({"max_zonal_degree": 1}, "max_zonal_degree"),
        ],
    )
    def test_invalid_settings(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            AveragingConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            AveragingConfig().n_harmonics = 3


# ──────────────────────────────────────────────
# Quadrature
# ──────────────────────────────────────────────


class TestQuadrature:
    def test_invalid_order(self):
        with pytest.raises(ValueError, match="must be positive"):
            gauss_legendre(0)

    def test_rules_cached_and_read_only(self):
        nodes, weights = gauss_legendre(7)
        assert gauss_legendre(7)[0] is nodes
        with pytest.raises(ValueError):
            weights[0] = 1.0

    def test_polynomial_exactness(self):
        nodes, weights = gauss_legendre(5)
        # Exact up to degree 2n - 1 = 9
        assert np.sum(weights * nodes ** 8) == pytest.approx(2.0 / 9.0, rel=1e-14)
        assert np.sum(weights) == pytest.approx(2.0, rel=1e-15)

    def test_map_nodes(self):
        nodes, weights = map_nodes(REAL, 1.0, 3.0, 4)
        x = REAL.value(nodes)
        w = REAL.value(weights)
        assert x.shape == (4,)
        assert np.all((x > 1.0) & (x < 3.0))
        assert np.sum(w) == pytest.approx(2.0, rel=1e-15)
        assert np.sum(w * x ** 3) == pytest.approx(20.0, rel=1e-14)

    def test_map_nodes_dual_limits(self):
        F = DualField(1)
        upper = F.variable(3.0, 0)
        nodes, weights = map_nodes(F, 1.0, upper, 6)
        # d/du int_1^u x^2 dx = u^2
        integral = F.sum(weights * nodes * nodes)
        assert F.value(integral) == pytest.approx(26.0 / 3.0, rel=1e-14)
        assert F.derivatives(integral)[0] == pytest.approx(9.0, rel=1e-13)


# ──────────────────────────────────────────────
# Auxiliary elements
# ──────────────────────────────────────────────


class TestAuxiliaryElements:
    def test_prograde_matches_equinoctial(self):
        a, ex, ey, hx, hy, lm = _equinoctial_values()
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1)
        assert REAL.value(aux.sma) == pytest.approx(a, rel=1e-13)
        assert REAL.value(aux.k) == pytest.approx(ex, abs=1e-13)
        assert REAL.value(aux.h) == pytest.approx(ey, abs=1e-13)
        assert REAL.value(aux.q) == pytest.approx(hx, abs=1e-13)
        assert REAL.value(aux.p) == pytest.approx(hy, abs=1e-13)
        assert math.remainder(REAL.value(aux.lm) - lm, TWO_PI) == pytest.approx(0.0, abs=1e-11)

    def test_common_factors(self):
        a, e = _KEPLERIAN[:2]
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1)
        n = math.sqrt(GM_EARTH / a ** 3)
        assert REAL.value(aux.ecc) == pytest.approx(e, rel=1e-11)
        assert REAL.value(aux.B) == pytest.approx(math.sqrt(1.0 - e * e), rel=1e-13)
        assert REAL.value(aux.A) == pytest.approx(math.sqrt(GM_EARTH * a), rel=1e-13)
        assert REAL.value(aux.mean_motion) == pytest.approx(n, rel=1e-13)
        assert REAL.value(aux.keplerian_period) == pytest.approx(TWO_PI / n, rel=1e-13)
        p, q = REAL.value(aux.p), REAL.value(aux.q)
        assert REAL.value(aux.C) == pytest.approx(1.0 + p * p + q * q, rel=1e-15)

    def test_triad_orthonormal(self):
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1)
        basis = np.array([[REAL.value(c) for c in v] for v in (aux.f, aux.g, aux.w)])
        np.testing.assert_allclose(basis @ basis.T, np.eye(3), atol=1e-14)

    def test_reference_direction_cosines(self):
        i = _KEPLERIAN[2]
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1)
        assert REAL.value(aux.gamma) == pytest.approx(math.cos(i), rel=1e-13)
        assert REAL.value(aux.alpha) == REAL.value(aux.f[2])
        assert REAL.value(aux.beta) == REAL.value(aux.g[2])

    def test_custom_reference_direction(self):
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1, reference_direction=(1.0, 0.0, 0.0))
        assert REAL.value(aux.alpha) == REAL.value(aux.f[0])

    def test_retrograde_factor_selection(self):
        assert retrograde_factor(_orbit()) == 1
        retro = _orbit((7.0e6, 0.01, 2.6, 0.3, 1.2, 0.5))
        assert retrograde_factor(retro) == -1

    def test_retrograde_elements_regular(self):
        retro = _orbit((7.0e6, 0.01, 3.1, 0.3, 1.2, 0.5))
        aux = AuxiliaryElements(retro)
        assert aux.retrograde_factor == -1
        assert REAL.value(aux.sma) == pytest.approx(7.0e6, rel=1e-13)
        assert REAL.value(aux.ecc) == pytest.approx(0.01, rel=1e-10)
        # |q|, |p| = tan((pi - i)/2) for I = -1
        tan_half = math.tan((math.pi - 3.1) / 2.0)
        assert math.hypot(REAL.value(aux.p), REAL.value(aux.q)) == pytest.approx(tan_half, rel=1e-12)

    def test_invalid_retrograde_factor(self):
        with pytest.raises(ValueError, match="Retrograde factor"):
            AuxiliaryElements(_orbit(), retrograde_factor=0)

    def test_context_copied(self):
        aux = AuxiliaryElements(_orbit())
        assert aux.date is _EPOCH
        assert aux.frame is GCRF
        assert aux.mu == GM_EARTH


# ──────────────────────────────────────────────
# Attitude providers
# ──────────────────────────────────────────────


class TestAttitude:
    def _state(self):
        r = 7.0e6
        v = math.sqrt(GM_EARTH / r)
        return (r, 0.0, 0.0), (0.0, v, 0.0), v / r

    def test_inertial_is_identity(self):
        att = InertialAttitude().attitude(REAL, (1.0, 2.0, 3.0), (0.0, 1.0, 0.0), GM_EARTH)
        assert [REAL.value(c) for c in att.to_body((1.0, 2.0, 3.0))] == [1.0, 2.0, 3.0]

    def test_qsw_axes_and_spin(self):
        position, velocity, n = self._state()
        att = LofAttitude("QSW").attitude(REAL, position, velocity, GM_EARTH)
        rotation = np.array([[REAL.value(c) for c in row] for row in att.rotation])
        np.testing.assert_allclose(rotation, np.eye(3), atol=1e-15)
        spin = [REAL.value(c) for c in att.spin]
        np.testing.assert_allclose(spin, [0.0, 0.0, n], rtol=1e-14, atol=1e-20)

    def test_tnw_spin_matches_qsw_on_circular_orbit(self):
        position, velocity, n = self._state()
        att = LofAttitude("TNW").attitude(REAL, position, velocity, GM_EARTH)
        assert REAL.value(att.spin[2]) == pytest.approx(n, rel=1e-14)

    def test_rotation_only_has_zero_spin(self):
        position, velocity, _ = self._state()
        att = LofAttitude("TNW").rotation_only(REAL, position, velocity, GM_EARTH)
        assert all(REAL.value(c) == 0.0 for c in att.spin)

    def test_to_inertial_inverts_to_body(self):
        att = LofAttitude("TNW").attitude(REAL, (6.0e6, 2.0e6, 1.0e6), (-1.0e3, 7.0e3, 1.0e3),
                                          GM_EARTH)
        vector = (0.3, -0.2, 0.9)
        back = att.to_inertial(att.to_body(vector))
        np.testing.assert_allclose([REAL.value(c) for c in back], vector, atol=1e-15)

    def test_rtn_alias(self):
        assert LofAttitude("rtn").lof_type == "QSW"

    def test_invalid_lof_type(self):
        with pytest.raises(ValueError, match="lof_type"):
            LofAttitude("XYZ")


class _SpyProvider(AttitudeProvider):
    """LOF attitude recording which flavour the contribution asked for."""

    def __init__(self):
        self.inner = LofAttitude("QSW")
        self.calls = []

    def attitude(self, F, position, velocity, mu):
        self.calls.append("attitude")
        return self.inner.attitude(F, position, velocity, mu)

    def rotation_only(self, F, position, velocity, mu):
        self.calls.append("rotation_only")
        return self.inner.rotation_only(F, position, velocity, mu)


class _SpinAcceleration(GaussianContribution):
    """Acceleration proportional to the attitude spin."""

    def __init__(self, provider, needs_rate):
        super().__init__("spin", attitude_provider=provider,
                         config=AveragingConfig(fixed_order=8))
        self._needs_rate = needs_rate

    @property
    def parameter_names(self):
        return ("gain",)

    def default_parameters(self):
        return (1.0,)

    @property
    def depends_on_attitude_rate(self):
        return self._needs_rate

    def acceleration(self, F, position, velocity, attitude: Attitude, parameters):
        (gain,) = parameters
        return scale(gain, attitude.spin)


class TestAttitudeRateDependency:
    def test_rate_aware_attitude_requested(self):
        spy = _SpyProvider()
        contribution = _SpinAcceleration(spy, needs_rate=True)
        rates = compute_mean_element_rates(_orbit(), [contribution])
        assert set(spy.calls) == {"attitude"}
        # Out-of-plane acceleration tilts the orbital plane
        assert abs(REAL.value(rates[3])) + abs(REAL.value(rates[4])) > 0.0

    def test_rotation_only_requested(self):
        spy = _SpyProvider()
        contribution = _SpinAcceleration(spy, needs_rate=False)
        rates = compute_mean_element_rates(_orbit(), [contribution])
        assert set(spy.calls) == {"rotation_only"}
        assert all(REAL.value(r) == 0.0 for r in rates[:5])


# ──────────────────────────────────────────────
# Zonal contribution
# ──────────────────────────────────────────────


def _j2_secular_rates(elements, mu=GM_EARTH, j2=J2_EARTH, radius=R_EARTH):
    """First-order J2 secular rates of the equinoctial elements (a, ex, ey, hx, hy)."""
    a, e, i, raan, argp, _ = elements
    n = math.sqrt(mu / a ** 3)
    p = a * (1.0 - e * e)
    k = n * j2 * (radius / p) ** 2
    raan_dot = -1.5 * k * math.cos(i)
    argp_dot = 0.75 * k * (5.0 * math.cos(i) ** 2 - 1.0)
    pa = raan + argp
    t = math.tan(i / 2.0)
    return np.array([
        0.0,
        -e * math.sin(pa) * (raan_dot + argp_dot),
        e * math.cos(pa) * (raan_dot + argp_dot),
        -t * math.sin(raan) * raan_dot,
        t * math.cos(raan) * raan_dot,
    ])


class TestZonalContribution:
    def test_invalid_degree(self):
        with pytest.raises(ValueError, match="max_degree"):
            ZonalContribution(_j2_model(), max_degree=1)

    def test_parameters(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        assert zonal.parameter_names == ("mu",)
        assert zonal.default_parameters() == (GM_EARTH,)
        assert zonal.j_coefficients == {2: J2_EARTH}

    def test_wrong_parameter_count(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        with pytest.raises(ValueError, match="expects 1 parameters"):
            compute_mean_element_rates(_orbit(), [zonal], parameters=[(1.0, 2.0)])

    def test_j2_secular_rates(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        rates = _values(REAL, compute_mean_element_rates(_orbit(), [zonal]))
        expected = _j2_secular_rates(_KEPLERIAN)
        assert abs(rates[0]) < 1e-6
        np.testing.assert_allclose(rates[1:5], expected[1:], rtol=_RATE_RTOL)

    def test_fixed_order_matches_adaptive(self):
        adaptive = ZonalContribution(_j2_model(), max_degree=2)
        fixed = ZonalContribution(_j2_model(), max_degree=2,
                                  config=AveragingConfig(fixed_order=48))
        r1 = _values(REAL, compute_mean_element_rates(_orbit(), [adaptive]))
        r2 = _values(REAL, compute_mean_element_rates(_orbit(), [fixed]))
        np.testing.assert_allclose(r1[1:], r2[1:], rtol=1e-8)

    def test_kepler_only_rates(self):
        a = _KEPLERIAN[0]
        rates = _values(REAL, compute_mean_element_rates(_orbit(), []))
        np.testing.assert_array_equal(rates[:5], np.zeros(5))
        assert rates[5] == pytest.approx(math.sqrt(GM_EARTH / a ** 3), rel=1e-13)

    def test_rates_scale_with_mu_parameter(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2,
                                  config=AveragingConfig(fixed_order=32))
        nominal = _values(REAL, compute_mean_element_rates(_orbit(), [zonal]))
        doubled = _values(REAL, compute_mean_element_rates(_orbit(), [zonal],
                                                           parameters=[(2.0 * GM_EARTH,)]))
        np.testing.assert_allclose(doubled[1:5], 2.0 * nominal[1:5], rtol=1e-12)

    def test_parameter_sets_must_match_contributions(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        with pytest.raises(ValueError, match="parameter sets"):
            compute_mean_element_rates(_orbit(), [zonal], parameters=[None, None])
        with pytest.raises(ValueError, match="parameter sets"):
            compute_short_period_corrections(_orbit(), [zonal], parameters=[])


class TestZonalShortPeriodTerms:
    def _updated_terms(self, orbit):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        aux = AuxiliaryElements(orbit, retrograde_factor=1)
        terms = zonal.initialize(aux, True)
        zonal.update_short_period_terms(None, orbit)
        return zonal, terms

    def test_initialize_without_short_periods(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1)
        assert zonal.initialize(aux, False) == []
        with pytest.raises(ValueError, match="not requested"):
            zonal.update_short_period_terms(None, _orbit())

    def test_value_before_update_raises(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        aux = AuxiliaryElements(_orbit(), retrograde_factor=1)
        (terms,) = zonal.initialize(aux, True)
        with pytest.raises(ValueError, match="have not been updated"):
            terms.value(_orbit())
        with pytest.raises(ValueError, match="have not been updated"):
            terms.get_coefficients()

    def test_coefficients(self):
        orbit = convert_orbit(_orbit(), OrbitType.EQUINOCTIAL)
        zonal, (terms,) = self._updated_terms(orbit)
        coefficients = terms.get_coefficients()
        assert len(coefficients) == 12
        for name in EQUINOCTIAL_RATE_NAMES:
            assert coefficients[f"zonal-c-{name}"].shape == (zonal.config.n_harmonics,)
            assert f"zonal-s-{name}" in coefficients
        subset = terms.get_coefficients(["zonal-c-a"])
        assert list(subset) == ["zonal-c-a"]
        np.testing.assert_array_equal(subset["zonal-c-a"], coefficients["zonal-c-a"])
        with pytest.raises(ValueError, match="unknown coefficients"):
            terms.get_coefficients(["zonal-c-z"])

    def test_corrections_have_zero_mean(self):
        orbit = convert_orbit(_orbit(), OrbitType.EQUINOCTIAL)
        _, (terms,) = self._updated_terms(orbit)
        base = [REAL.value(x) for x in orbit.elements]
        samples = []
        for j in range(32):
            elements = base[:5] + [TWO_PI * j / 32.0]
            samples.append(_values(REAL, terms.value(orbit.replace_elements(elements))))
        samples = np.array(samples)
        mean = samples.mean(axis=0)
        assert np.max(np.abs(samples[:, 0])) > 1.0
        assert abs(mean[0]) < 1e-9
        np.testing.assert_allclose(mean[1:], 0.0, atol=1e-14)

    def test_semi_major_axis_matches_brouwer(self):
        a = _KEPLERIAN[0]
        corrections = compute_short_period_corrections(
            _orbit(), [ZonalContribution(_j2_model(), max_degree=2)]
        )
        osc = brouwer_transform(REAL, _KEPLERIAN, 1.0, J2_EARTH, R_EARTH)
        expected = REAL.value(osc[0]) - a
        assert REAL.value(corrections[0]) == pytest.approx(expected, abs=1e-3)

    def test_osculating_orbit(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2)
        mean = _orbit()
        osc = compute_osculating_orbit(mean, [zonal])
        corrections = _values(REAL, compute_short_period_corrections(mean, [zonal]))
        assert osc.orbit_type == OrbitType.EQUINOCTIAL
        assert osc.angle_type == PositionAngleType.MEAN
        assert osc.epoch is mean.epoch
        np.testing.assert_allclose(np.asarray(osc.to_array()),
                                   _equinoctial_values() + corrections, rtol=1e-15, atol=1e-15)


# ──────────────────────────────────────────────
# Dual-number evaluation
# ──────────────────────────────────────────────


def _perturbation_rates(orbit, contribution):
    """Mean rates without the Keplerian mean motion."""
    total = compute_mean_element_rates(orbit, [contribution])
    kepler = compute_mean_element_rates(orbit, [])
    return tuple(t - k for t, k in zip(total, kepler))


def _zonal(config):
    return ZonalContribution(_j2_model(), max_degree=4, config=config)


def _thrust(config):
    return ConstantThrustContribution((1.0, 0.3, -0.2), LofAttitude("TNW"), _THRUST,
                                      config=config)


# The zonal semi-major axis rate vanishes identically, so its row is skipped
_DUAL_CASES = [
    pytest.param(_zonal, range(1, 6), id="zonal"),
    pytest.param(_thrust, range(6), id="thrust"),
]

_FD_STEPS = np.array([10.0, 1e-4, 1e-4, 1e-4, 1e-4, 1e-4])


class TestDualEvaluation:
    def _dual_orbit(self, n_vars=6):
        F = DualField(n_vars)
        values = _equinoctial_values()
        return F, _orbit(tuple(F.variables(values)), OrbitType.EQUINOCTIAL, F)

    def _assert_jacobian_close(self, jac, fd, rows):
        for row in rows:
            scale_row = np.max(np.abs(fd[row]))
            np.testing.assert_allclose(jac[row], fd[row], rtol=1e-6, atol=1e-7 * scale_row)

    @pytest.mark.parametrize("make, rows", _DUAL_CASES)
    def test_mean_rates_match_real_values(self, make, rows):
        contribution = make(None)
        F, dual_orbit = self._dual_orbit()
        real_orbit = _orbit(tuple(_equinoctial_values()), OrbitType.EQUINOCTIAL)
        dual = _values(F, compute_mean_element_rates(dual_orbit, [contribution]))
        real = _values(REAL, compute_mean_element_rates(real_orbit, [contribution]))
        np.testing.assert_allclose(dual, real, rtol=1e-14, atol=1e-20)

    @pytest.mark.parametrize("make, rows", _DUAL_CASES)
    def test_short_period_match_real_values(self, make, rows):
        contribution = make(AveragingConfig.fast())
        F, dual_orbit = self._dual_orbit()
        real_orbit = _orbit(tuple(_equinoctial_values()), OrbitType.EQUINOCTIAL)
        dual = _values(F, compute_short_period_corrections(dual_orbit, [contribution]))
        real = _values(REAL, compute_short_period_corrections(real_orbit, [contribution]))
        np.testing.assert_allclose(dual, real, rtol=1e-14, atol=1e-20)

    @pytest.mark.parametrize("make, rows", _DUAL_CASES)
    def test_mean_rate_jacobian_matches_finite_differences(
        self, make, rows, finite_difference_jacobian
    ):
        contribution = make(AveragingConfig(fixed_order=32))
        F, dual_orbit = self._dual_orbit()
        jac = np.stack([F.derivatives(r) for r in _perturbation_rates(dual_orbit, contribution)])

        def func(x):
            orbit = _orbit(tuple(x), OrbitType.EQUINOCTIAL)
            return _values(REAL, _perturbation_rates(orbit, contribution))

        fd = finite_difference_jacobian(func, _equinoctial_values(), _FD_STEPS)
        self._assert_jacobian_close(jac, fd, rows)

    @pytest.mark.parametrize("make, rows", _DUAL_CASES)
    def test_short_period_jacobian_matches_finite_differences(
        self, make, rows, finite_difference_jacobian
    ):
        contribution = make(AveragingConfig.fast())
        F, dual_orbit = self._dual_orbit()
        corrections = compute_short_period_corrections(dual_orbit, [contribution])
        jac = np.stack([F.derivatives(c) for c in corrections])

        def func(x):
            orbit = _orbit(tuple(x), OrbitType.EQUINOCTIAL)
            return _values(REAL, compute_short_period_corrections(orbit, [contribution]))

        fd = finite_difference_jacobian(func, _equinoctial_values(), _FD_STEPS)
        self._assert_jacobian_close(jac, fd, range(6))

    def test_parameter_derivative(self):
        zonal = ZonalContribution(_j2_model(), max_degree=2,
                                  config=AveragingConfig(fixed_order=32))
        F = DualField(7)
        orbit = _orbit(tuple(F.constant(v) for v in _equinoctial_values()),
                       OrbitType.EQUINOCTIAL, F)
        mu = F.variable(GM_EARTH, 6)
        rates = compute_mean_element_rates(orbit, [zonal], parameters=[(mu,)])
        # Zonal rates are linear in the scaling parameter
        for r in rates[1:5]:
            assert F.derivatives(r)[6] * GM_EARTH == pytest.approx(F.value(r), rel=1e-12)
        assert F.derivatives(rates[5])[6] == pytest.approx(
            REAL.value(compute_mean_element_rates(_orbit(), [zonal])[5]
                       - compute_mean_element_rates(_orbit(), [])[5]) / GM_EARTH,
            rel=1e-10,
        )


# ──────────────────────────────────────────────
# Constant thrust
# ──────────────────────────────────────────────


class TestConstantThrust:
    _CIRCULAR = (7.0e6, 0.0, 0.9, 0.3, 0.0, 0.5)

    def _rates(self, contribution, parameters=None):
        return _values(REAL, compute_mean_element_rates(_orbit(self._CIRCULAR), [contribution],
                                                        parameters))

    def _expected_a_rate(self):
        a = self._CIRCULAR[0]
        return 2.0 * _THRUST / math.sqrt(GM_EARTH / a ** 3)

    def test_zero_direction_rejected(self):
        with pytest.raises(ValueError, match="non-zero"):
            ConstantThrustContribution((0.0, 0.0, 0.0), InertialAttitude(), _THRUST)

    def test_direction_normalized(self):
        thrust = ConstantThrustContribution((2.0, 0.0, 0.0), InertialAttitude(), _THRUST)
        assert thrust.direction == (1.0, 0.0, 0.0)
        assert thrust.parameter_names == ("thrust_acceleration",)
        assert thrust.default_parameters() == (_THRUST,)

    def test_tangential_thrust_raises_orbit(self):
        thrust = ConstantThrustContribution((1.0, 0.0, 0.0), LofAttitude("TNW"), _THRUST)
        rates = self._rates(thrust)
        assert rates[0] == pytest.approx(self._expected_a_rate(), rel=1e-10)
        np.testing.assert_allclose(rates[3:5], 0.0, atol=1e-20)

    def test_along_track_qsw_matches_tnw_on_circular_orbit(self):
        qsw = ConstantThrustContribution((0.0, 1.0, 0.0), LofAttitude("QSW"), _THRUST)
        tnw = ConstantThrustContribution((1.0, 0.0, 0.0), LofAttitude("TNW"), _THRUST)
        np.testing.assert_allclose(self._rates(qsw)[0], self._rates(tnw)[0], rtol=1e-10)

    def test_half_arc(self):
        thrust = ConstantThrustContribution((1.0, 0.0, 0.0), LofAttitude("TNW"), _THRUST,
                                            longitude_arc=(0.0, math.pi))
        rates = self._rates(thrust)
        assert rates[0] == pytest.approx(0.5 * self._expected_a_rate(), rel=1e-10)

    def test_arc_wraps_past_two_pi(self):
        thrust = ConstantThrustContribution((1.0, 0.0, 0.0), InertialAttitude(), _THRUST,
                                            longitude_arc=(1.5 * math.pi, 0.5 * math.pi))
        start, end = thrust.longitude_arc
        assert start == 1.5 * math.pi
        assert end == pytest.approx(2.5 * math.pi, rel=1e-15)

    def test_parameter_override(self):
        thrust = ConstantThrustContribution((1.0, 0.0, 0.0), LofAttitude("TNW"), _THRUST)
        rates = self._rates(thrust, parameters=[(2.0 * _THRUST,)])
        assert rates[0] == pytest.approx(2.0 * self._expected_a_rate(), rel=1e-10)

    def test_out_of_plane_thrust_changes_plane_only(self):
        thrust = ConstantThrustContribution((0.0, 0.0, 1.0), LofAttitude("QSW"), _THRUST,
                                            longitude_arc=(0.0, math.pi))
        rates = self._rates(thrust)
        assert abs(rates[0]) < 1e-12
        assert abs(rates[3]) + abs(rates[4]) > 0.0
