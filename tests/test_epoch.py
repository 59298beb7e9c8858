import pytest
from sgp4.api import jday

from dsstjax.epoch import Epoch

_SEC_TOL = 1e-6


# ──────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────


class TestEpochConstruction:
    def test_from_date(self):
        year, month, day, hour, minute, second = Epoch(2024, 3, 15, 6, 30, 45.0).caldate()
        assert (year, month, day, hour, minute) == (2024, 3, 15, 6, 30)
        assert second == pytest.approx(45.0, abs=_SEC_TOL)

    def test_from_date_defaults(self):
        year, month, day, hour, minute, second = Epoch(2000, 1, 1).caldate()
        assert (year, month, day, hour, minute) == (2000, 1, 1, 0, 0)
        assert second == pytest.approx(0.0, abs=_SEC_TOL)

    def test_seconds_overflow_rolls_day(self):
        epc = Epoch(2000, 1, 1, 23, 59, 90.0)
        year, month, day, hour, minute, second = epc.caldate()
        assert (year, month, day, hour, minute) == (2000, 1, 2, 0, 0)
        assert second == pytest.approx(30.0, abs=_SEC_TOL)

    @pytest.mark.parametrize(
        "string, expected",
        [
            ("2018-01-01", (2018, 1, 1, 0, 0, 0.0)),
            ("2018-01-01T12:34:56Z", (2018, 1, 1, 12, 34, 56.0)),
            ("2018-01-01T12:34:56.25Z", (2018, 1, 1, 12, 34, 56.25)),
        ],
    )
    def test_from_string(self, string, expected):
        result = Epoch(string).caldate()
        assert result[:5] == expected[:5]
        assert result[5] == pytest.approx(expected[5], abs=_SEC_TOL)

    def test_copy(self):
        epc = Epoch(2024, 6, 1, 6, 0, 0.0)
        copy = Epoch(epc)
        assert copy == epc
        assert copy is not epc

    def test_from_jd(self):
        epc = Epoch.from_jd(2451545.0)
        assert epc == Epoch(2000, 1, 1, 12, 0, 0.0)

    def test_from_split_jd(self):
        epc = Epoch.from_jd(2452978.5, 0.49496229)
        assert epc.jd() == pytest.approx(2452978.99496229, abs=1e-8)

    def test_invalid_type(self):
        with pytest.raises(ValueError, match="Cannot construct Epoch"):
            Epoch(1.5)

    def test_invalid_arity(self):
        with pytest.raises(ValueError, match="requires date components"):
            Epoch(2000, 1)

    def test_invalid_string(self):
        with pytest.raises(ValueError, match="not ISO 8601"):
            Epoch("2000/01/01")

    def test_immutable(self):
        epc = Epoch(2000, 1, 1)
        with pytest.raises(AttributeError, match="immutable"):
            epc._jd = 0


# ──────────────────────────────────────────────
# Julian dates
# ──────────────────────────────────────────────


class TestEpochJulianDate:
    def test_jd(self):
        assert Epoch(2000, 1, 1, 12, 0, 0.0).jd() == pytest.approx(2451545.0, abs=1e-9)

    def test_mjd(self):
        assert Epoch(2000, 1, 1).mjd() == pytest.approx(51544.0, abs=1e-9)

    def test_jd_split_matches_sgp4(self):
        jd, fr = Epoch(2024, 6, 1, 6, 0, 0.0).jd_split()
        expected_jd, expected_fr = jday(2024, 6, 1, 6, 0, 0.0)
        assert jd == expected_jd
        assert fr == pytest.approx(expected_fr, abs=1e-12)

    def test_jd_split_before_noon(self):
        jd, fr = Epoch(2000, 1, 1, 3, 0, 0.0).jd_split()
        assert jd == 2451544.5
        assert fr == pytest.approx(0.125, abs=1e-12)


# ──────────────────────────────────────────────
# Arithmetic
# ──────────────────────────────────────────────


class TestEpochArithmetic:
    def test_add_seconds(self):
        epc = Epoch(2024, 3, 15, 6, 30, 45.0) + 3600.0
        year, month, day, hour, minute, second = epc.caldate()
        assert (year, month, day, hour, minute) == (2024, 3, 15, 7, 30)
        assert second == pytest.approx(45.0, abs=_SEC_TOL)

    def test_add_across_day(self):
        epc = Epoch(2024, 12, 31, 23, 0, 0.0) + 7200.0
        assert epc == Epoch(2025, 1, 1, 1, 0, 0.0)

    def test_subtract_seconds(self):
        epc = Epoch(2024, 1, 1) - 60.0
        assert epc == Epoch(2023, 12, 31, 23, 59, 0.0)

    def test_difference(self):
        assert Epoch(2024, 1, 2) - Epoch(2024, 1, 1) == 86400.0
        assert Epoch(2024, 1, 1) - Epoch(2024, 1, 1, 0, 0, 1.5) == pytest.approx(-1.5, abs=1e-9)

    def test_kahan_compensated_steps(self):
        start = Epoch(2000, 1, 1)
        epc = start
        for _ in range(10000):
            epc = epc + 0.1
        assert epc - start == pytest.approx(1000.0, abs=1e-8)

    def test_original_unchanged(self):
        epc = Epoch(2000, 1, 1)
        _ = epc + 10.0
        assert epc.mjd() == pytest.approx(51544.0, abs=1e-12)


# ──────────────────────────────────────────────
# Comparison and representation
# ──────────────────────────────────────────────


class TestEpochComparison:
    def test_equal_within_tolerance(self):
        epc = Epoch(2000, 1, 1)
        assert epc == epc + 1e-10
        assert not (epc != epc + 1e-10)

    def test_ordering(self):
        early = Epoch(2000, 1, 1)
        late = early + 1.0
        assert early < late
        assert early <= late
        assert late > early
        assert late >= early
        assert early <= early + 1e-10
        assert not early < early + 1e-10

    def test_not_equal_to_other_types(self):
        assert Epoch(2000, 1, 1) != 2451544.5

    def test_hash_matches_equal_epochs(self):
        assert hash(Epoch.from_jd(2451545.0)) == hash(Epoch(2000, 1, 1, 12, 0, 0.0))
        assert len({Epoch(2000, 1, 1), Epoch("2000-01-01")}) == 1

    def test_str(self):
        assert str(Epoch(2000, 1, 1, 12, 0, 0.0)) == "2000-01-01T12:00:00.000Z"
        assert str(Epoch(2024, 3, 15, 6, 30, 45.25)) == "2024-03-15T06:30:45.250Z"
