import pytest

from dsstjax.time import caldate_to_jd, caldate_to_mjd, jd_to_caldate


def test_caldate_to_mjd():
    assert caldate_to_mjd(2000, 1, 1, 12, 0, 0) == pytest.approx(51544.5, abs=1e-9)


def test_caldate_to_jd():
    assert caldate_to_jd(2000, 1, 1, 12, 0, 0) == pytest.approx(2451545.0, abs=1e-9)


def test_caldate_to_mjd_defaults_to_midnight():
    assert caldate_to_mjd(2000, 1, 1) == pytest.approx(51544.0, abs=1e-9)


def test_caldate_to_mjd_february():
    # Months before March are counted in the previous year
    assert caldate_to_mjd(2024, 3, 1) - caldate_to_mjd(2024, 2, 28) == pytest.approx(2.0, abs=1e-9)
    assert caldate_to_mjd(2023, 3, 1) - caldate_to_mjd(2023, 2, 28) == pytest.approx(1.0, abs=1e-9)


def test_jd_to_caldate_j2000():
    year, month, day, hour, minute, second = jd_to_caldate(2451545.0)
    assert year == 2000
    assert month == 1
    assert day == 1
    assert hour == 12
    assert minute == 0
    assert second == pytest.approx(0.0, abs=1e-6)


def test_jd_to_caldate_midnight():
    year, month, day, hour, minute, second = jd_to_caldate(2451544.5)
    assert (year, month, day, hour, minute) == (2000, 1, 1, 0, 0)
    assert second == pytest.approx(0.0, abs=1e-6)


def test_jd_to_caldate_with_time():
    year, month, day, hour, minute, second = jd_to_caldate(2451545.25)
    assert (year, month, day, hour, minute) == (2000, 1, 1, 18, 0)
    assert second == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize(
    "date",
    [
        (2000, 1, 1, 0, 0, 0.0),
        (2003, 12, 5, 11, 52, 43.0),
        (2024, 2, 29, 23, 59, 30.0),
        (2031, 7, 14, 6, 15, 1.5),
    ],
)
def test_jd_caldate_roundtrip(date):
    result = jd_to_caldate(caldate_to_jd(*date))
    assert result[:5] == date[:5]
    assert result[5] == pytest.approx(date[5], abs=1e-3)
