"""Tests for the special-function recurrences (factorial ratios and Gamma^{m,s}_n)."""

import math
import threading

import numpy as np
import pytest

from dsstjax.fields import REAL, DualField
from dsstjax.special import (
    RATIO_TABLE,
    GammaMnsFunction,
    RatioTable,
    factorial_ratio,
    gamma_mns_index,
    gamma_mns_table_size,
    normalization_factor,
)

_TOL = 1e-14


# ──────────────────────────────────────────────
# Factorials
# ──────────────────────────────────────────────


class TestFactorialRatio:
    def test_known_values(self):
        assert factorial_ratio(3, 1) == pytest.approx(1.0 / 12.0, rel=_TOL)
        assert factorial_ratio(4, 0) == 1.0
        assert factorial_ratio(2, 2) == pytest.approx(1.0 / 24.0, rel=_TOL)

    def test_matches_math_factorial(self):
        for n in range(0, 12):
            for m in range(0, n + 1):
                expected = math.factorial(n - m) / math.factorial(n + m)
                assert factorial_ratio(n, m) == pytest.approx(expected, rel=1e-13)

    def test_invalid_order_raises(self):
        with pytest.raises(ValueError, match="must satisfy"):
            factorial_ratio(2, 3)
        with pytest.raises(ValueError, match="must satisfy"):
            factorial_ratio(2, -1)

    def test_normalization_factor(self):
        assert normalization_factor(2, 0) == pytest.approx(math.sqrt(5.0), rel=_TOL)
        assert normalization_factor(2, 2) == pytest.approx(math.sqrt(10.0 / 24.0), rel=_TOL)


# ──────────────────────────────────────────────
# Index and ratio table
# ──────────────────────────────────────────────


class TestGammaIndex:
    def test_bijection(self):
        n_max = 6
        indices = [
            gamma_mns_index(m, n, s)
            for n in range(n_max + 1)
            for m in range(n + 1)
            for s in range(-n, n + 1)
        ]
        assert indices == list(range(gamma_mns_table_size(n_max)))

    def test_table_size(self):
        assert gamma_mns_table_size(0) == 1
        assert gamma_mns_table_size(1) == 7
        assert gamma_mns_table_size(2) == 22

    @pytest.mark.parametrize("m, n, s", [(0, 2, 3), (3, 2, 0), (0, -1, 0), (-1, 2, 0), (1, 2, -3)])
    def test_out_of_range_rejected(self, m, n, s):
        with pytest.raises(ValueError, match="Invalid Gamma index"):
            gamma_mns_index(m, n, s)

    def test_out_of_range_does_not_alias(self):
        # (0, 2, 3) and (3, 2, 0) would land on the slots of (1, 2, -2) and (0, 3, -1)
        assert gamma_mns_index(1, 2, -2) == 12
        assert gamma_mns_index(0, 3, -1) == 24
        with pytest.raises(ValueError):
            gamma_mns_index(0, 2, 3)
        with pytest.raises(ValueError):
            gamma_mns_index(3, 2, 0)


class TestRatioTable:
    def test_initial_ratios(self):
        table = RatioTable()
        ratios = table.ensure_capacity(3)
        assert ratios[gamma_mns_index(0, 3, 0)] == 1.0
        # r(2, 3, 0) = 10/3, r(2, 3, 1) = r(2, 3, -1) = 5/2
        assert ratios[gamma_mns_index(2, 3, 0)] == pytest.approx(10.0 / 3.0, rel=_TOL)
        assert ratios[gamma_mns_index(2, 3, 1)] == pytest.approx(2.5, rel=_TOL)
        assert ratios[gamma_mns_index(2, 3, -1)] == ratios[gamma_mns_index(2, 3, 1)]

    def test_symmetric_in_s(self):
        table = RatioTable()
        for n in range(6):
            for m in range(n + 1):
                for s in range(1, n + 1):
                    assert table.ratio(m, n, s) == table.ratio(m, n, -s)

    def test_ratio_lookup(self):
        table = RatioTable()
        assert table.ratio(2, 3, 0) == pytest.approx(10.0 / 3.0, rel=_TOL)
        assert table.ratio(2, 3, -1) == pytest.approx(2.5, rel=_TOL)
        assert table.n_max == 3

    @pytest.mark.parametrize("m, n, s", [(0, 2, 3), (3, 2, 0), (0, -1, 0)])
    def test_ratio_out_of_range_rejected(self, m, n, s):
        table = RatioTable()
        with pytest.raises(ValueError, match="Invalid Gamma index"):
            table.ratio(m, n, s)
        assert table.n_max == -1

    def test_ensure_capacity_idempotent(self):
        table = RatioTable()
        first = table.ensure_capacity(5)
        assert table.ensure_capacity(5) is first
        assert table.ensure_capacity(2) is first
        assert table.n_max == 5

    def test_growth_keeps_entries_bitwise(self):
        table = RatioTable()
        small = table.ensure_capacity(4).copy()
        large = table.ensure_capacity(12)
        assert table.n_max == 12
        assert large.size == gamma_mns_table_size(12)
        np.testing.assert_array_equal(large[: small.size], small)

    def test_never_shrinks(self):
        table = RatioTable()
        table.ensure_capacity(7)
        table.ensure_capacity(3)
        assert table.n_max == 7

    def test_read_only(self):
        ratios = RatioTable().ensure_capacity(2)
        with pytest.raises(ValueError):
            ratios[0] = 2.0

    def test_negative_degree_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            RatioTable().ensure_capacity(-1)

    def test_concurrent_growth(self):
        table = RatioTable()
        reference = RatioTable().ensure_capacity(15)
        errors = []

        def grow(n):
            try:
                ratios = table.ensure_capacity(n)
                assert ratios.size >= gamma_mns_table_size(n)
            except AssertionError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=grow, args=(n % 16,)) for n in range(48)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert table.n_max == 15
        np.testing.assert_array_equal(table.ensure_capacity(15), reference)

    def test_shared_instance(self):
        RATIO_TABLE.ensure_capacity(3)
        assert RATIO_TABLE.n_max >= 3


# ──────────────────────────────────────────────
# Gamma^{m,s}_n
# ──────────────────────────────────────────────


class TestGammaMnsFunction:
    def test_middle_branch(self):
        gamma = GammaMnsFunction(4, 0.3, 1)
        # (-1)^(2+1) 2^-2 r(2,3,-1) (1.3)^-1
        expected = -0.25 * 2.5 / 1.3
        assert REAL.value(gamma.get_value(2, 3, -1)) == pytest.approx(expected, rel=_TOL)

    def test_lower_branch(self):
        gamma = GammaMnsFunction(4, 0.3, 1)
        # s = -3 <= -m = -2: (-1)^(2+3) 2^-3 (1.3)^-2
        expected = -(2.0 ** -3) * 1.3 ** -2
        assert REAL.value(gamma.get_value(2, 3, -3)) == pytest.approx(expected, rel=_TOL)

    def test_upper_branch(self):
        gamma = GammaMnsFunction(4, 0.3, 1)
        expected = 2.0 ** -3 * 1.3 ** 2
        assert REAL.value(gamma.get_value(2, 3, 3)) == pytest.approx(expected, rel=_TOL)

    def test_retrograde_factor(self):
        gamma = GammaMnsFunction(4, 0.3, -1)
        # s >= m: 2^-s (1 - gamma)^(-m)
        expected = 2.0 ** -3 * 0.7 ** -2
        assert REAL.value(gamma.get_value(2, 3, 3)) == pytest.approx(expected, rel=_TOL)

    def test_memoized(self):
        gamma = GammaMnsFunction(4, 0.3, 1)
        assert gamma.get_value(1, 2, 0) is gamma.get_value(1, 2, 0)

    def test_signed_infinity(self):
        gamma = GammaMnsFunction(2, -1.0, 1)
        assert REAL.value(gamma.get_value(1, 2, -2)) == -math.inf
        assert REAL.value(gamma.get_value(2, 2, -2)) == math.inf

    def test_invalid_indices(self):
        gamma = GammaMnsFunction(3, 0.3, 1)
        for m, n, s in [(2, 1, 0), (0, 4, 0), (1, 2, 3), (-1, 2, 0)]:
            with pytest.raises(ValueError, match="Invalid Gamma index"):
                gamma.get_value(m, n, s)

    def test_invalid_retrograde_factor(self):
        with pytest.raises(ValueError, match="Retrograde factor"):
            GammaMnsFunction(3, 0.3, 0)

    def test_derivative_matches_finite_differences(self, finite_difference_jacobian):
        n_max = 5
        g0 = 0.35
        indices = [(m, n, s) for n in range(n_max + 1) for m in range(n + 1)
                   for s in range(-n, n + 1)]

        def values(x):
            fn = GammaMnsFunction(n_max, float(x[0]), 1)
            return np.array([REAL.value(fn.get_value(*idx)) for idx in indices])

        fd = finite_difference_jacobian(values, np.array([g0]), 1e-3)[:, 0]
        fn = GammaMnsFunction(n_max, g0, 1)
        analytic = np.array([REAL.value(fn.get_derivative(*idx)) for idx in indices])
        np.testing.assert_allclose(analytic, fd, rtol=1e-8, atol=1e-10)

    def test_dual_gamma_carries_derivative(self):
        F = DualField(1)
        fn_dual = GammaMnsFunction(4, F.variable(0.2, 0), -1, F)
        fn_real = GammaMnsFunction(4, 0.2, -1)
        for m, n, s in [(0, 2, 1), (1, 3, -2), (2, 4, 4), (3, 4, -1)]:
            value = fn_dual.get_value(m, n, s)
            assert F.value(value) == REAL.value(fn_real.get_value(m, n, s))
            assert F.derivatives(value)[0] == pytest.approx(
                REAL.value(fn_real.get_derivative(m, n, s)), rel=1e-12, abs=1e-15
            )
