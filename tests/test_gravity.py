"""Tests for the gravity field provider and the zonal acceleration."""

import math

import numpy as np
import pytest

from dsstjax.constants import EIGEN6S_GM, EIGEN6S_RADIUS, EIGEN6S_ZONALS, GM_EARTH, R_EARTH
from dsstjax.fields import REAL, DualField
from dsstjax.gravity import GravityModel, accel_zonal_harmonics

_J2 = 1.0826e-3
_ACC_TOL = 1e-15  # [m/s^2]

_GFC_CONTENT = """\
product_type       gravity_field
modelname          TESTFIELD
earth_gravity_constant  0.3986004415E+15
radius             0.6378136300E+07
max_degree         3
norm               fully_normalized
tide_system        tide_free

key    L    M    C                  S                  sigma C   sigma S
end_of_head =================================================================
gfc    0    0    1.000000000000E+00  0.000000000000E+00  0 0
gfc    2    0   -4.841651437908D-04  0.000000000000E+00  0 0
gfc    2    1   -2.066155090741E-10  1.384413891379E-09  0 0
gfc    2    2    2.439383573283E-06 -1.400273703859E-06  0 0
gfc    3    0    9.571612070934E-07  0.000000000000E+00  0 0
gfc    3    1    2.030462010478E-06  2.482004158568E-07  0 0
gfc    3    2    9.047878948095E-07 -6.190054751776E-07  0 0
gfc    3    3    7.213217571215E-07  1.414349261929E-06  0 0
"""


@pytest.fixture
def gfc_file(tmp_path):
    path = tmp_path / "test.gfc"
    path.write_text(_GFC_CONTENT)
    return path


# ──────────────────────────────────────────────
# GravityModel
# ──────────────────────────────────────────────


class TestGravityModelFromFile:
    def test_header(self, gfc_file):
        model = GravityModel.from_file(gfc_file)
        assert model.model_name == "TESTFIELD"
        assert model.gm == 3.986004415e14
        assert model.radius == 6378136.3
        assert model.n_max == 3
        assert model.m_max == 3
        assert model.tide_system == "tide_free"
        assert model.is_normalized

    def test_fortran_exponent(self, gfc_file):
        model = GravityModel.from_file(gfc_file)
        c20, s20 = model.get(2, 0)
        assert c20 == -4.841651437908e-4
        assert s20 == 0.0

    def test_sine_coefficients(self, gfc_file):
        model = GravityModel.from_file(gfc_file)
        c, s = model.get(3, 3)
        assert c == 7.213217571215e-07
        assert s == 1.414349261929e-06

    def test_unnormalized_j2(self, gfc_file):
        model = GravityModel.from_file(gfc_file)
        c20, _ = model.get_unnormalized(2, 0)
        assert c20 == pytest.approx(-4.841651437908e-4 * math.sqrt(5.0), rel=1e-14)
        j = model.zonal_coefficients(6)
        assert sorted(j) == [2, 3]
        assert j[2] == pytest.approx(4.841651437908e-4 * math.sqrt(5.0), rel=1e-14)
        assert j[3] == pytest.approx(-9.571612070934e-07 * math.sqrt(7.0), rel=1e-14)

    def test_nonexistent_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            GravityModel.from_file(tmp_path / "missing.gfc")

    def test_missing_end_of_head(self, tmp_path):
        path = tmp_path / "bad.gfc"
        path.write_text("modelname X\nradius 1.0\n")
        with pytest.raises(ValueError, match="end_of_head"):
            GravityModel.from_file(path)

    def test_missing_required_header(self, tmp_path):
        path = tmp_path / "bad.gfc"
        path.write_text("modelname X\nradius 1.0\nmax_degree 2\nend_of_head\n")
        with pytest.raises(ValueError, match="earth_gravity_constant"):
            GravityModel.from_file(path)


class TestGravityModelZonal:
    def test_zonal_factory(self):
        model = GravityModel.zonal(GM_EARTH, R_EARTH, {2: _J2, 4: -1.6e-6})
        assert model.n_max == 4
        assert model.m_max == 0
        assert not model.is_normalized
        assert model.get(2, 0) == (-_J2, 0.0)
        assert model.get(3, 0) == (0.0, 0.0)
        assert model.zonal_coefficients(4) == {2: _J2, 3: 0.0, 4: -1.6e-6}

    def test_zonal_truncates_to_model(self):
        model = GravityModel.zonal(GM_EARTH, R_EARTH, {2: _J2})
        assert model.zonal_coefficients(6) == {2: _J2}

    def test_eigen6s_constants(self):
        model = GravityModel.zonal(EIGEN6S_GM, EIGEN6S_RADIUS, EIGEN6S_ZONALS)
        assert model.zonal_coefficients(6) == EIGEN6S_ZONALS

    def test_invalid_degree(self):
        with pytest.raises(ValueError, match="Zonal degrees"):
            GravityModel.zonal(GM_EARTH, R_EARTH, {1: 1e-3})

    def test_get_out_of_bounds(self):
        model = GravityModel.zonal(GM_EARTH, R_EARTH, {2: _J2})
        with pytest.raises(ValueError, match="exceeds model bounds"):
            model.get(3, 0)
        with pytest.raises(ValueError, match="exceeds model bounds"):
            model.get(2, 1)

    def test_data_shape_validated(self):
        with pytest.raises(ValueError, match="too small"):
            GravityModel("x", GM_EARTH, R_EARTH, 4, 0, np.zeros((3, 1)))

    def test_repr(self):
        model = GravityModel.zonal(GM_EARTH, R_EARTH, {2: _J2})
        assert "n_max=2" in repr(model)


# ──────────────────────────────────────────────
# Zonal acceleration
# ──────────────────────────────────────────────


def _j2_closed_form(position, gm, radius, j2):
    x, y, z = position
    r = math.sqrt(x * x + y * y + z * z)
    k = -1.5 * gm * j2 * radius ** 2 / r ** 5
    zr2 = 5.0 * z * z / (r * r)
    return np.array([k * x * (1.0 - zr2), k * y * (1.0 - zr2), k * z * (3.0 - zr2)])


class TestAccelZonalHarmonics:
    def test_matches_j2_closed_form(self):
        position = (4.0e6, -3.5e6, 4.5e6)
        acc = accel_zonal_harmonics(REAL, position, GM_EARTH, R_EARTH, {2: _J2})
        expected = _j2_closed_form(position, GM_EARTH, R_EARTH, _J2)
        np.testing.assert_allclose([REAL.value(a) for a in acc], expected, rtol=1e-12, atol=_ACC_TOL)

    def test_pole_points_outward(self):
        r = R_EARTH + 700e3
        acc = accel_zonal_harmonics(REAL, (0.0, 0.0, r), GM_EARTH, R_EARTH, {2: _J2})
        expected = 3.0 * GM_EARTH * _J2 * R_EARTH ** 2 / r ** 4
        assert REAL.value(acc[2]) == pytest.approx(expected, rel=1e-12)

    def test_equator_points_inward(self):
        r = R_EARTH + 700e3
        acc = accel_zonal_harmonics(REAL, (r, 0.0, 0.0), GM_EARTH, R_EARTH, {2: _J2})
        expected = -1.5 * GM_EARTH * _J2 * R_EARTH ** 2 / r ** 4
        assert REAL.value(acc[0]) == pytest.approx(expected, rel=1e-12)
        assert REAL.value(acc[2]) == pytest.approx(0.0, abs=_ACC_TOL)

    def test_batched_positions(self):
        xs = np.array([7.0e6, 0.0, 5.0e6])
        ys = np.array([0.0, 7.0e6, 5.0e6])
        zs = np.array([0.0, 1.0e6, -2.0e6])
        acc = accel_zonal_harmonics(
            REAL, (REAL.constant(xs), REAL.constant(ys), REAL.constant(zs)),
            GM_EARTH, R_EARTH, EIGEN6S_ZONALS,
        )
        assert REAL.value(acc[0]).shape == (3,)
        for idx in range(3):
            single = accel_zonal_harmonics(
                REAL, (xs[idx], ys[idx], zs[idx]), GM_EARTH, R_EARTH, EIGEN6S_ZONALS
            )
            for c in range(3):
                assert REAL.value(acc[c])[idx] == pytest.approx(REAL.value(single[c]), rel=1e-13)

    def test_dual_derivatives(self, finite_difference_jacobian):
        p0 = np.array([5.1e6, 2.3e6, 3.9e6])
        F = DualField(3)
        position = tuple(F.variables(p0))
        acc = accel_zonal_harmonics(F, position, GM_EARTH, R_EARTH, EIGEN6S_ZONALS)
        jac = np.stack([F.derivatives(a) for a in acc])

        def func(p):
            a = accel_zonal_harmonics(REAL, tuple(REAL.constant(v) for v in p),
                                      GM_EARTH, R_EARTH, EIGEN6S_ZONALS)
            return np.array([REAL.value(c) for c in a])

        fd = finite_difference_jacobian(func, p0, 10.0)
        np.testing.assert_allclose(jac, fd, rtol=1e-7, atol=1e-16)
