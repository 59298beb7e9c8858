"""Gravity field provider and zonal acceleration.

Stores Stokes coefficients (C_nm, S_nm) parsed from ICGEM GFC format
files or built directly from a handful of zonal harmonics, and evaluates
the zonal part of the geopotential acceleration over any
:class:`~dsstjax.fields.Field`.  All inputs and outputs use SI base units
(metres, metres/second squared).

References:
    1. O. Montenbruck and E. Gill, *Satellite Orbits: Models, Methods
       and Applications*, 2012, p. 56-68.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from dsstjax.fields import Field, Vector3, dot
from dsstjax.special import normalization_factor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Gravity model data type
# ---------------------------------------------------------------------------


class GravityModel:
    """Spherical harmonic gravity field model.

    The coefficient matrix layout follows the Montenbruck & Gill
    convention:

    - ``data[n, m]`` stores the C coefficient for degree *n*, order *m*
    - ``data[m-1, n]`` stores the S coefficient for *m* > 0

    This is a plain Python class (not a JAX pytree) since it holds static
    configuration data that does not participate in differentiation.

    Args:
        model_name: Human-readable name of the gravity model.
        gm: Gravitational parameter [m^3/s^2].
        radius: Reference radius [m].
        n_max: Maximum degree of the model.
        m_max: Maximum order of the model.
        data: Coefficient matrix, shape ``(n_max+1, m_max+1)``.
        tide_system: Tide system convention (e.g. ``"tide_free"``).
        normalization: Normalization convention (``"fully_normalized"`` or
            ``"unnormalized"``).

    Examples:
        ```python
        from dsstjax.gravity import GravityModel
        model = GravityModel.zonal(3.986004415e14, 6378136.3, {2: 1.0826e-3})
        model.zonal_coefficients(2)   # {2: 0.0010826}
        ```
    """

    def __init__(
        self,
        model_name: str,
        gm: float,
        radius: float,
        n_max: int,
        m_max: int,
        data: np.ndarray,
        tide_system: str = "unknown",
        normalization: str = "fully_normalized",
    ):
        data = np.asarray(data, dtype=np.float64)
        if data.shape[0] < n_max + 1 or data.shape[1] < m_max + 1:
            raise ValueError(
                f"Coefficient matrix of shape {data.shape} is too small for "
                f"n_max={n_max}, m_max={m_max} (need at least ({n_max + 1}, {m_max + 1}))."
            )
        self.model_name = model_name
        self.gm = gm
        self.radius = radius
        self.n_max = n_max
        self.m_max = m_max
        self.data = data
        self.tide_system = tide_system
        self.normalization = normalization

    @property
    def is_normalized(self) -> bool:
        """Whether the coefficients are fully normalized."""
        return self.normalization == "fully_normalized"

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def from_file(cls, filepath: str | Path) -> GravityModel:
        """Load a gravity model from a GFC format file.

        Args:
            filepath: Path to the ``.gfc`` file.

        Returns:
            GravityModel: Loaded gravity model.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If required header fields are missing.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Gravity model file not found: {filepath}")
        with open(filepath) as f:
            return cls._parse_gfc(f)

    @classmethod
    def zonal(
        cls,
        gm: float,
        radius: float,
        zonals: dict[int, float],
        model_name: str = "zonal",
    ) -> GravityModel:
        """Build an unnormalized, zonal-only model from ``J_n`` values.

        Args:
            gm: Gravitational parameter [m^3/s^2].
            radius: Reference radius [m].
            zonals: Mapping degree ``n >= 2`` to ``J_n = -C_n0``.
            model_name: Name of the model. Default: ``"zonal"``.

        Returns:
            GravityModel: Model of degree ``max(zonals)`` and order 0.

        Raises:
            ValueError: If a degree is lower than 2.
        """
        if any(n < 2 for n in zonals):
            raise ValueError(f"Zonal degrees must be >= 2, got {sorted(zonals)}.")
        n_max = max(zonals, default=0)
        data = np.zeros((n_max + 1, n_max + 1), dtype=np.float64)
        data[0, 0] = 1.0
        for n, jn in zonals.items():
            data[n, 0] = -jn
        return cls(
            model_name=model_name,
            gm=gm,
            radius=radius,
            n_max=n_max,
            m_max=0,
            data=data,
            normalization="unnormalized",
        )

    # ------------------------------------------------------------------
    # Coefficient access
    # ------------------------------------------------------------------

    def get(self, n: int, m: int) -> tuple[float, float]:
        """Retrieve the stored (C_nm, S_nm) coefficients for degree *n*, order *m*.

        Args:
            n: Degree of the harmonic.
            m: Order of the harmonic.

        Returns:
            tuple[float, float]: (C_nm, S_nm) coefficient pair, in the
            model's own normalization.

        Raises:
            ValueError: If (n, m) exceeds the model bounds.
        """
        if n > self.n_max or m > self.m_max or m > n or m < 0:
            raise ValueError(
                f"Requested (n={n}, m={m}) exceeds model bounds "
                f"(n_max={self.n_max}, m_max={self.m_max})."
            )
        if m == 0:
            return float(self.data[n, m]), 0.0
        return float(self.data[n, m]), float(self.data[m - 1, n])

    def get_unnormalized(self, n: int, m: int) -> tuple[float, float]:
        """Retrieve the unnormalized (C_nm, S_nm) coefficients.

        Args:
            n: Degree of the harmonic.
            m: Order of the harmonic.

        Returns:
            tuple[float, float]: Unnormalized (C_nm, S_nm).

        Raises:
            ValueError: If (n, m) exceeds the model bounds.
        """
        c, s = self.get(n, m)
        if self.is_normalized:
            factor = normalization_factor(n, m)
            return c * factor, s * factor
        return c, s

    def zonal_coefficients(self, max_degree: int) -> dict[int, float]:
        """Unnormalized zonal harmonics ``J_n = -C_n0`` for ``2 <= n <= max_degree``.

        Degrees above the model's ``n_max`` are silently left out.

        Args:
            max_degree: Highest degree requested.

        Returns:
            dict[int, float]: Degree to ``J_n``.
        """
        top = min(max_degree, self.n_max)
        return {n: -self.get_unnormalized(n, 0)[0] for n in range(2, top + 1)}

    # ------------------------------------------------------------------
    # GFC parser
    # ------------------------------------------------------------------

    @classmethod
    def _parse_gfc(cls, fileobj) -> GravityModel:
        """Parse an ICGEM GFC format file.

        Args:
            fileobj: File-like object (or iterable of lines) with GFC content.

        Returns:
            GravityModel: Parsed gravity model.
        """
        header = {
            "modelname": "Unknown",
            "tide_system": "unknown",
            "norm": "fully_normalized",
        }

        in_header = True
        lines = iter(fileobj)
        for line in lines:
            line = line.strip()
            if line.startswith("end_of_head"):
                in_header = False
                break
            parts = line.split()
            if len(parts) < 2:
                continue
            key = "norm" if parts[0].lower() == "normalization" else parts[0].lower()
            header[key] = parts[-1]

        if in_header:
            raise ValueError("GFC file missing 'end_of_head' marker.")
        for required in ("earth_gravity_constant", "radius", "max_degree"):
            if required not in header:
                raise ValueError(f"GFC header missing {required!r}.")

        gm = _parse_float(header["earth_gravity_constant"])
        radius = _parse_float(header["radius"])
        n_max = int(header["max_degree"])
        m_max = n_max

        data = np.zeros((n_max + 1, m_max + 1), dtype=np.float64)
        count = 0
        for line in lines:
            line = line.strip()
            if not line.startswith("gfc"):
                continue

            # gfc  n  m  C  S  [sig_C  sig_S]
            parts = line.split()
            n = int(parts[1])
            m = int(parts[2])
            if n <= n_max and m <= m_max:
                data[n, m] = _parse_float(parts[3])
                if m > 0:
                    data[m - 1, n] = _parse_float(parts[4])
                count += 1

        logger.debug("Parsed %d coefficients of gravity model %s", count, header["modelname"])

        return cls(
            model_name=header["modelname"],
            gm=gm,
            radius=radius,
            n_max=n_max,
            m_max=m_max,
            data=data,
            tide_system=header["tide_system"],
            normalization=header["norm"],
        )

    def __repr__(self) -> str:
        return (
            f"GravityModel(name={self.model_name!r}, "
            f"n_max={self.n_max}, m_max={self.m_max}, "
            f"gm={self.gm:.6e}, radius={self.radius:.1f})"
        )


def _parse_float(token: str) -> float:
    # Fortran-style D/d exponent notation
    return float(token.replace("D", "e").replace("d", "e"))


# ---------------------------------------------------------------------------
# Zonal acceleration
# ---------------------------------------------------------------------------


def accel_zonal_harmonics(
    F: Field,
    position: Vector3,
    gm,
    radius: float,
    j_coefficients: dict[int, float],
) -> Vector3:
    """Acceleration due to the zonal harmonics of a gravity field.

    Only the perturbing part is returned (the central ``-gm r / r^3`` term
    is excluded).  With ``u = z / r`` and Legendre polynomials ``P_n(u)``:

    ``a = sum_n gm J_n R^n / r^(n+2) [(n+1) P_n r_hat + P'_n (u r_hat - z_hat)]``

    Args:
        F: Scalar field of *position* and *gm*.
        position: Inertial position ``(x, y, z)`` [m], possibly batched.
        gm: Gravitational parameter [m^3/s^2] (a field scalar or number).
        radius: Reference radius of the coefficients [m].
        j_coefficients: Degree to unnormalized ``J_n``.

    Returns:
        Vector3: Perturbing acceleration [m/s^2].
    """
    x, y, z = position
    r2 = dot(position, position)
    r = F.sqrt(r2)
    ux, uy, u = x / r, y / r, z / r

    n_max = max(j_coefficients, default=1)

    # Legendre recurrences, P_0 = 1, P_1 = u, P'_0 = 0, P'_1 = 1
    p_prev, p_curr = 1.0, u
    dp_prev, dp_curr = 0.0, 1.0

    radial = 0.0
    polar = 0.0
    ratio = radius / r
    ratio_n = ratio
    for n in range(2, n_max + 1):
        p_next = ((2 * n - 1) * u * p_curr - (n - 1) * p_prev) / n
        dp_next = u * dp_curr + n * p_curr
        p_prev, p_curr = p_curr, p_next
        dp_prev, dp_curr = dp_curr, dp_next
        ratio_n = ratio_n * ratio

        jn = j_coefficients.get(n, 0.0)
        if jn == 0.0:
            continue
        radial = radial + jn * ratio_n * ((n + 1) * p_curr + u * dp_curr)
        polar = polar + jn * ratio_n * dp_curr

    factor = gm / r2
    return (
        factor * (radial * ux),
        factor * (radial * uy),
        factor * (radial * u - polar),
    )
