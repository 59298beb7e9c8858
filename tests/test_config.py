"""Tests for the dsstjax.config module."""

import jax
import jax.numpy as jnp
import pytest

from dsstjax.config import get_dtype, get_epoch_eq_tolerance, set_dtype
from dsstjax.epoch import Epoch
from dsstjax.fields import REAL


@pytest.fixture(autouse=True)
def reset_dtype():
    """Restore float64 after each test."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float16_rejected(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.float16)

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestEpochEqTolerance:
    def test_float32_tolerance(self):
        set_dtype(jnp.float32)
        assert get_epoch_eq_tolerance() == 1e-3

    def test_float64_tolerance(self):
        set_dtype(jnp.float64)
        assert get_epoch_eq_tolerance() == 1e-9

    def test_tolerance_drives_epoch_equality(self):
        e1 = Epoch(2024, 1, 1)
        e2 = e1 + 1e-4
        set_dtype(jnp.float64)
        assert e1 != e2
        set_dtype(jnp.float32)
        assert e1 == e2


class TestDtypePropagation:
    def test_real_field_constants_follow_dtype(self):
        set_dtype(jnp.float32)
        assert REAL.constant(1.0).dtype == jnp.float32
        set_dtype(jnp.float64)
        assert REAL.constant(1.0).dtype == jnp.float64
