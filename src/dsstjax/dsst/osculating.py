"""Caller-side assembly of mean rates and osculating states.

These helpers sum the output of several contributions for one mean
orbit.  Every computation runs in the mean orbit's field, so seeding the
orbit (and the parameters) with dual numbers yields the partial
derivatives of the results.

The mean orbit is handled in equinoctial elements with mean longitude,
i.e. the element set of retrograde factor ``I = +1``.
"""

from __future__ import annotations

from collections.abc import Sequence

from dsstjax.dsst.auxiliary import AuxiliaryElements
from dsstjax.dsst.contributions import DSSTContribution
from dsstjax.orbits import Orbit, OrbitType, PositionAngleType, convert_orbit


def _equinoctial(orbit: Orbit) -> Orbit:
    return convert_orbit(orbit, OrbitType.EQUINOCTIAL, PositionAngleType.MEAN)


def _parameter_sets(contributions: Sequence[DSSTContribution], parameters) -> list:
    if parameters is None:
        return [None] * len(contributions)
    parameters = list(parameters)
    if len(parameters) != len(contributions):
        raise ValueError(
            f"Got {len(parameters)} parameter sets for {len(contributions)} contributions."
        )
    return parameters


def compute_mean_element_rates(
    mean_orbit: Orbit,
    contributions: Sequence[DSSTContribution],
    parameters: Sequence | None = None,
) -> tuple:
    """Total mean element rates, including the Keplerian mean motion.

    Args:
        mean_orbit: Mean orbit in any representation.
        contributions: Contributions to sum.
        parameters: One parameter sequence (or ``None``) per contribution.
            ``None`` uses every contribution's defaults.

    Returns:
        tuple: Rates ``(a, ex, ey, hx, hy, lambda)`` as field scalars.

    Raises:
        ValueError: If *parameters* does not match *contributions*.
    """
    orbit = _equinoctial(mean_orbit)
    aux = AuxiliaryElements(orbit, retrograde_factor=1)
    F = orbit.field
    totals = [F.zero() for _ in range(6)]
    for contribution, params in zip(contributions, _parameter_sets(contributions, parameters)):
        rates = contribution.get_mean_element_rate(orbit, aux, params)
        totals = [t + r for t, r in zip(totals, rates)]
    totals[5] = totals[5] + aux.mean_motion
    return tuple(totals)


def compute_short_period_corrections(
    mean_orbit: Orbit,
    contributions: Sequence[DSSTContribution],
    parameters: Sequence | None = None,
) -> tuple:
    """Sum of all short-period corrections at a mean orbit.

    Every contribution is initialized with short-period terms, updated at
    *mean_orbit* and evaluated there.

    Args:
        mean_orbit: Mean orbit in any representation.
        contributions: Contributions to sum.
        parameters: One parameter sequence (or ``None``) per contribution.

    Returns:
        tuple: Corrections ``(a, ex, ey, hx, hy, lambda)`` as field scalars.

    Raises:
        ValueError: If *parameters* does not match *contributions*.
    """
    orbit = _equinoctial(mean_orbit)
    aux = AuxiliaryElements(orbit, retrograde_factor=1)
    F = orbit.field
    totals = [F.zero() for _ in range(6)]
    for contribution, params in zip(contributions, _parameter_sets(contributions, parameters)):
        terms = contribution.initialize(aux, True, params)
        contribution.update_short_period_terms(params, orbit)
        for term in terms:
            totals = [t + c for t, c in zip(totals, term.value(orbit))]
    return tuple(totals)


def compute_osculating_orbit(
    mean_orbit: Orbit,
    contributions: Sequence[DSSTContribution],
    parameters: Sequence | None = None,
) -> Orbit:
    """Osculating orbit: mean equinoctial elements plus short-period corrections.

    Args:
        mean_orbit: Mean orbit in any representation.
        contributions: Contributions to sum.
        parameters: One parameter sequence (or ``None``) per contribution.

    Returns:
        Orbit: Equinoctial orbit (mean longitude) at the epoch and in the
        frame of *mean_orbit*.
    """
    orbit = _equinoctial(mean_orbit)
    corrections = compute_short_period_corrections(orbit, contributions, parameters)
    elements = tuple(m + c for m, c in zip(orbit.elements, corrections))
    return orbit.replace_elements(elements)
