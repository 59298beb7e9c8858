"""
Two-Line Element records and the SGP4 gravity constants.

The SGP4/SDP4 propagation mechanics themselves come from the ``sgp4``
library; this sub-module only parses and validates element sets.
"""

from dsstjax.tle._constants import GRAVITY_MODELS, WGS72, WGS72OLD, WGS84, EarthGravity
from dsstjax.tle._tle import TLE, compute_checksum, parse_tle, validate_tle_line

__all__ = [
    # Types
    "TLE",
    "EarthGravity",
    # Constants
    "WGS72OLD",
    "WGS72",
    "WGS84",
    "GRAVITY_MODELS",
    # Parsing
    "parse_tle",
    "compute_checksum",
    "validate_tle_line",
]
