# /// script
# requires-python = ">=3.10"
# dependencies = ["typer>=0.9.0", "dsstjax"]
#
# [tool.uv.sources]
# dsstjax = { path = ".." }
# ///
"""Recover the mean elements of several theories from one TLE.

Evaluates the SGP4 osculating state of a TLE at its epoch, then inverts the
DSST, Brouwer-Lyddane and Eckstein-Hechler mean-to-osculating mappings with
the fixed-point converter and prints the mean elements of each theory side
by side.

Requires dsstjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/mean_elements.py [OPTIONS]

Examples:
    # ISS reference TLE
    uv run examples/mean_elements.py

    # Custom TLE with the fast DSST preset
    uv run examples/mean_elements.py --line1 "1 22823U ..." --line2 "2 22823 ..." --fast
"""

import logging
import math
from typing import Annotated

import typer

from dsstjax import (
    TEME,
    AveragedCircularElements,
    AveragedEquinoctialElements,
    AveragedKeplerianElements,
    AveragingConfig,
    BrouwerLyddaneOrbitalState,
    DSSTOrbitalState,
    EcksteinHechlerOrbitalState,
    FixedPointConverter,
    GravityModel,
    OrbitConversionError,
    SGP4OrbitalState,
    parse_tle,
)
from dsstjax.constants import EIGEN6S_GM, EIGEN6S_RADIUS, EIGEN6S_ZONALS

_ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
_ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"


def main(
    line1: Annotated[str, typer.Option(help="First TLE line")] = _ISS_LINE1,
    line2: Annotated[str, typer.Option(help="Second TLE line")] = _ISS_LINE2,
    fast: Annotated[bool, typer.Option(help="Use the fast DSST averaging preset")] = False,
    threshold: Annotated[float, typer.Option(help="Relative convergence threshold")] = 1e-10,
    verbose: Annotated[bool, typer.Option(help="Log every fixed-point iteration")] = False,
) -> None:
    """Print SGP4, DSST, Brouwer-Lyddane and Eckstein-Hechler mean elements."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    sgp4_state = SGP4OrbitalState.of(parse_tle(line1, line2), TEME)
    osculating = sgp4_state.to_osculating_orbit()
    typer.echo(f"Epoch: {osculating.epoch}")

    model = GravityModel.zonal(EIGEN6S_GM, EIGEN6S_RADIUS, EIGEN6S_ZONALS)
    config = AveragingConfig.fast() if fast else AveragingConfig.default()
    templates = [
        DSSTOrbitalState(osculating.epoch, AveragedEquinoctialElements.from_orbit(osculating),
                         TEME, model, config),
        BrouwerLyddaneOrbitalState(osculating.epoch, AveragedKeplerianElements.from_orbit(osculating),
                                   TEME, model),
        EcksteinHechlerOrbitalState(osculating.epoch, AveragedCircularElements.from_orbit(osculating),
                                    TEME, model),
    ]

    converter = FixedPointConverter(threshold=threshold)
    rows = [("SGP4", sgp4_state.mean_orbit())]
    for template in templates:
        try:
            rows.append((template.THEORY, converter.convert(osculating, template).mean_orbit()))
        except OrbitConversionError as exc:
            typer.echo(f"{template.THEORY}: {exc}", err=True)

    typer.echo(f"{'theory':<20} {'a [km]':>12} {'e':>10} {'i [deg]':>10}")
    for name, orbit in rows:
        keplerian = AveragedKeplerianElements.from_orbit(orbit)
        typer.echo(
            f"{name:<20} {keplerian.semi_major_axis / 1e3:12.4f} "
            f"{keplerian.eccentricity:10.7f} {math.degrees(keplerian.inclination):10.5f}"
        )


if __name__ == "__main__":
    typer.run(main)
