"""SGP4-compatible averaged orbital state.

The mean elements are Keplerian (Kozai) elements with mean anomaly.  The
osculating orbit is the SGP4 state at the element epoch (``tsince = 0``),
computed by the ``sgp4`` library in improved mode.  Position and velocity
come out in the frame of the elements (TEME for published TLEs).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from sgp4.api import SGP4_ERRORS, Satrec

from dsstjax.averaging._base import AveragedOrbitalState
from dsstjax.frames import Frame
from dsstjax.orbits import AveragedKeplerianElements, Orbit, OrbitType
from dsstjax.tle import TLE, WGS72, EarthGravity

logger = logging.getLogger(__name__)

# sgp4init epoch origin: 1949 December 31 00:00 UT
_SGP4_EPOCH_JD = 2433281.5
_SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True, eq=False)
class SGP4OrbitalState(AveragedOrbitalState):
    """Averaged state of the SGP4 theory.

    Args:
        epoch: Epoch of the mean elements.
        averaged_elements: Keplerian mean elements (``a`` from the Kozai
            mean motion and the model's ``mu``).
        frame: Frame of the elements, usually TEME.
        gravity: SGP4 gravity constants. Default: WGS72.
        bstar: Drag term [1/earth radii]. Default: 0.
        ndot: Half the first derivative of mean motion [rad/s^2]. Default: 0.
        nddot: Sixth of the second derivative of mean motion [rad/s^3].
            Default: 0.
        satnum: Catalog number passed to SGP4. Default: 0.

    Examples:
        ```python
        from dsstjax import TEME
        from dsstjax.averaging import SGP4OrbitalState
        from dsstjax.tle import parse_tle
        state = SGP4OrbitalState.of(parse_tle(line1, line2), TEME)
        orbit = state.to_osculating_orbit()
        ```
    """

    THEORY = "SGP4"
    ELEMENTS_TYPE = AveragedKeplerianElements

    gravity: EarthGravity = WGS72
    bstar: float = 0.0
    ndot: float = 0.0
    nddot: float = 0.0
    satnum: int = 0

    @property
    def mu(self) -> float:
        return self.gravity.mu

    @classmethod
    def of(cls, tle: TLE, frame: Frame, gravity: EarthGravity = WGS72) -> SGP4OrbitalState:
        """Averaged state read directly off a Two-Line Element record.

        Eccentricity, inclination, node, perigee argument and mean anomaly
        are copied unchanged; the semi-major axis follows from the mean
        motion through Kepler's third law.

        Args:
            tle: Parsed element set.
            frame: Frame of the elements (TEME for published TLEs).
            gravity: SGP4 gravity constants. Default: WGS72.

        Returns:
            SGP4OrbitalState: The averaged state at the TLE epoch.
        """
        n = tle.mean_motion
        elements = AveragedKeplerianElements(
            semi_major_axis=(gravity.mu / (n * n)) ** (1.0 / 3.0),
            eccentricity=tle.eccentricity,
            inclination=tle.inclination,
            raan=tle.raan,
            perigee_argument=tle.perigee_argument,
            mean_anomaly=tle.mean_anomaly,
        )
        return cls(
            epoch=tle.epoch,
            averaged_elements=elements,
            frame=frame,
            gravity=gravity,
            bstar=tle.bstar,
            ndot=tle.ndot,
            nddot=tle.nddot,
            satnum=tle.satnum,
        )

    def _satrec(self) -> Satrec:
        el = self.averaged_elements
        a = el.semi_major_axis
        if not a > 0.0:
            raise self._fail(f"semi-major axis must be positive, got {a}")
        no_kozai = math.sqrt(self.mu / (a * a * a)) * _SECONDS_PER_MINUTE  # rad/min

        sat = Satrec()
        sat.sgp4init(
            self.gravity.sgp4_constant,
            "i",
            self.satnum,
            self.epoch.jd() - _SGP4_EPOCH_JD,
            self.bstar,
            self.ndot * _SECONDS_PER_MINUTE**2,
            self.nddot * _SECONDS_PER_MINUTE**3,
            el.eccentricity,
            el.perigee_argument,
            el.inclination,
            el.mean_anomaly,
            no_kozai,
            el.raan,
        )
        if sat.error != 0:
            raise self._fail(SGP4_ERRORS.get(sat.error, f"error code {sat.error}"))
        return sat

    def to_osculating_orbit(self) -> Orbit:
        sat = self._satrec()
        error, r_km, v_kms = sat.sgp4(sat.jdsatepoch, sat.jdsatepochF)
        if error != 0:
            raise self._fail(SGP4_ERRORS.get(error, f"error code {error}"))
        logger.debug("SGP4 state of satellite %d evaluated at %s", self.satnum, self.epoch)
        elements = tuple(x * 1e3 for x in r_km) + tuple(x * 1e3 for x in v_kms)
        return self._checked(
            Orbit(OrbitType.CARTESIAN, elements, self.epoch, self.frame, self.mu)
        )
