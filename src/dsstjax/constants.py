"""Physical and mathematical constants used by dsstjax.

All values are SI (metres, seconds, radians).
"""

import math

PI = math.pi
"""Pi, the ratio of a circle's circumference to its diameter."""

TWO_PI = 2.0 * math.pi
"""Full revolution [rad]."""

DEG2RAD = 2.0 * PI / 360.0
"""Degrees to radians conversion factor."""

RAD2DEG = 360.0 / (PI * 2.0)
"""Radians to degrees conversion factor."""

JD_MJD_OFFSET = 2400000.5  # Offset between Julian Date and Modified Julian Date
"""Offset between Julian Date and Modified Julian Date [days]."""

SECONDS_PER_DAY = 86400.0
"""Seconds in a (UTC) day."""

R_EARTH = 6.378136300e6  # [m] GGM05s Value
"""Earth equatorial radius [m], GGM05S value."""

GM_EARTH = 3.986004415e14  # [m^3/s^2] GGM05s Value
"""Earth gravitational parameter [m^3/s^2], GGM05S value."""

J2_EARTH = 0.0010826358191967  # [] GGM05s value
"""Earth second zonal harmonic (unnormalized, positive sign), GGM05S value."""

EIGEN6S_ZONALS = {
    2: 1.082626173852e-3,
    3: -2.532410518567e-6,
    4: -1.619897599916e-6,
    5: -2.277535907339e-7,
    6: 5.406665762838e-7,
}
"""Unnormalized zonal harmonics J2..J6 of the EIGEN-6S field (J_n = -C_n0)."""

EIGEN6S_RADIUS = 6378136.46
"""Reference radius of the EIGEN-6S field [m]."""

EIGEN6S_GM = 3.986004415e14
"""Gravitational parameter of the EIGEN-6S field [m^3/s^2]."""
