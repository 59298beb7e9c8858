"""
Two-Line Element (TLE) parsing.

Provides pure-Python functions to validate and parse Two-Line Element sets
into an immutable :class:`TLE` record whose angles are already in radians
and whose mean motion is in rad/s.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import pi

from dsstjax.constants import SECONDS_PER_DAY
from dsstjax.epoch import Epoch

logger = logging.getLogger(__name__)

# Conversion constants
_DEG2RAD = pi / 180.0
_REV_PER_DAY = 2.0 * pi / SECONDS_PER_DAY  # rev/day -> rad/s


@dataclass(frozen=True)
class TLE:
    """A parsed Two-Line Element set.

    Angles are in radians, mean motion in rad/s.  ``ndot`` and ``nddot``
    keep the TLE convention (first derivative of mean motion over two,
    second derivative over six) converted to rad/s^2 and rad/s^3.

    Attributes:
        satnum: Satellite catalog number.
        classification: Classification character (``"U"``, ``"C"``, ``"S"``).
        international_designator: Launch designator, e.g. ``"93061A"``.
        epoch: Epoch of the elements (UTC).
        mean_motion: Kozai mean motion [rad/s].
        ndot: Half the first time derivative of mean motion [rad/s^2].
        nddot: Sixth of the second time derivative of mean motion [rad/s^3].
        bstar: Drag term [1/earth radii].
        ephemeris_type: Ephemeris type (always 0 in distributed TLEs).
        element_number: Element set number.
        inclination: Inclination [rad].
        raan: Right ascension of the ascending node [rad].
        eccentricity: Eccentricity.
        perigee_argument: Argument of perigee [rad].
        mean_anomaly: Mean anomaly [rad].
        revolution_number: Revolution number at epoch.
        line1: Original first line.
        line2: Original second line.
    """

    satnum: int
    classification: str
    international_designator: str
    epoch: Epoch
    mean_motion: float
    ndot: float
    nddot: float
    bstar: float
    ephemeris_type: int
    element_number: int
    inclination: float
    raan: float
    eccentricity: float
    perigee_argument: float
    mean_anomaly: float
    revolution_number: int
    line1: str
    line2: str

    @classmethod
    def from_lines(cls, line1: str, line2: str) -> TLE:
        """Alias of :func:`parse_tle`."""
        return parse_tle(line1, line2)


def compute_checksum(line: str) -> int:
    """Compute the TLE checksum for a line.

    The checksum is the sum of all digit characters plus 1 for each
    minus sign, modulo 10, computed over the first 68 characters.

    Args:
        line: A TLE line string (at least 68 characters).

    Returns:
        The checksum digit (0-9).
    """
    return sum((int(c) if c.isdigit() else c == "-") for c in line[:68]) % 10


def validate_tle_line(line: str, line_number: int) -> None:
    """Validate a TLE line's format and checksum.

    Args:
        line: A TLE line string.
        line_number: Expected line number (1 or 2).

    Raises:
        ValueError: If the line fails format or checksum validation.
    """
    line = line.rstrip()

    if len(line) < 69:
        raise ValueError(
            f"TLE line {line_number} is too short ({len(line)} chars, expected 69): {line}"
        )

    if line[0] != str(line_number):
        raise ValueError(f"TLE line {line_number} does not start with '{line_number}': {line}")

    checksum_char = line[68]
    if not checksum_char.isdigit():
        raise ValueError(f"TLE line {line_number} has non-digit checksum: {line}")

    expected = compute_checksum(line)
    actual = int(checksum_char)
    if expected != actual:
        raise ValueError(
            f"TLE line {line_number} checksum mismatch: computed {expected}, found {actual}: {line}"
        )


def _implied_decimal(mantissa: str, exponent: str) -> float:
    """Decode the ``" 10336-3"`` style fields (implied leading decimal point)."""
    return float(mantissa[0] + "." + mantissa[1:]) * 10.0 ** int(exponent)


def parse_tle(line1: str, line2: str) -> TLE:
    """Parse a Two-Line Element set.

    Follows the fixed-column TLE format specification.

    Args:
        line1: First TLE line (69 characters including checksum).
        line2: Second TLE line (69 characters including checksum).

    Returns:
        TLE: The parsed record.

    Raises:
        ValueError: If lines fail format validation, checksum check,
            or satellite numbers don't match.

    Examples:
        ```python
        from dsstjax.tle import parse_tle
        tle = parse_tle(
            "1 22823U 93061A   03339.49496229  .00000173  00000-0  10336-3 0   133",
            "2 22823  98.4132 359.2998 0017888 100.4310 259.8872 14.18403464527664",
        )
        tle.eccentricity   # 0.0017888
        ```
    """
    validate_tle_line(line1, 1)
    validate_tle_line(line2, 2)

    l1 = line1.rstrip()
    l2 = line2.rstrip()

    # Line 1
    satnum_str = l1[2:7]
    classification = l1[7].strip() or "U"
    intldesg = l1[9:17].rstrip()
    two_digit_year = int(l1[18:20])
    epochdays = float(l1[20:32])
    ndot = float(l1[33:43])
    nddot = _implied_decimal(l1[44:50], l1[50:52])
    bstar = _implied_decimal(l1[53:59], l1[59:61])
    ephemeris_type = int(l1[62].strip() or "0")
    element_number = int(l1[64:68])

    # Line 2
    if satnum_str != l2[2:7]:
        raise ValueError("Object numbers in lines 1 and 2 do not match")

    inclination = float(l2[8:16]) * _DEG2RAD
    raan = float(l2[17:25]) * _DEG2RAD
    eccentricity = float("0." + l2[26:33].replace(" ", "0"))
    perigee_argument = float(l2[34:42]) * _DEG2RAD
    mean_anomaly = float(l2[43:51]) * _DEG2RAD
    mean_motion = float(l2[52:63]) * _REV_PER_DAY
    revolution_number = int(l2[63:68])

    # 4-digit year, pivot at 1957
    year = two_digit_year + (2000 if two_digit_year < 57 else 1900)

    # Split Julian date, as python-sgp4 Satrec.twoline2rv() builds it
    days_int, fraction = divmod(epochdays, 1.0)
    jd_whole = year * 365 + (year - 1) // 4 + int(days_int) + 1721044.5
    epoch = Epoch.from_jd(jd_whole, round(fraction, 8))

    logger.debug("Parsed TLE for satellite %s at %s", satnum_str.strip(), epoch)

    return TLE(
        satnum=int(satnum_str),
        classification=classification,
        international_designator=intldesg,
        epoch=epoch,
        mean_motion=mean_motion,
        ndot=ndot * _REV_PER_DAY / SECONDS_PER_DAY,
        nddot=nddot * _REV_PER_DAY / (SECONDS_PER_DAY * SECONDS_PER_DAY),
        bstar=bstar,
        ephemeris_type=ephemeris_type,
        element_number=element_number,
        inclination=inclination,
        raan=raan,
        eccentricity=eccentricity,
        perigee_argument=perigee_argument,
        mean_anomaly=mean_anomaly,
        revolution_number=revolution_number,
        line1=l1,
        line2=l2,
    )
