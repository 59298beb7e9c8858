"""Reference frame identity tokens.

The averaging engine never transforms between frames: it only needs to
know *which* frame an orbit is expressed in and to hand the very same
frame to the osculating orbit it produces.  Frames are therefore opaque
tokens compared by identity, never by name or numeric closeness.
"""

from __future__ import annotations


class Frame:
    """An inertial (or quasi-inertial) reference frame token.

    Two frames are equal only if they are the same object.  Creating a new
    ``Frame("GCRF")`` yields a frame distinct from :data:`GCRF`.

    Args:
        name: Human-readable frame name.
        pseudo_inertial: Whether Keplerian motion is meaningful in the frame.

    Examples:
        ```python
        from dsstjax.frames import GCRF, Frame
        GCRF == GCRF            # True
        Frame("GCRF") == GCRF   # False
        ```
    """

    __slots__ = ("name", "pseudo_inertial")

    def __init__(self, name: str, pseudo_inertial: bool = True):
        self.name = name
        self.pseudo_inertial = pseudo_inertial

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return id(self)

    def __repr__(self) -> str:
        return f"Frame({self.name!r})"


GCRF = Frame("GCRF")
"""Geocentric Celestial Reference Frame."""

EME2000 = Frame("EME2000")
"""Mean equator and equinox of J2000."""

TEME = Frame("TEME")
"""True equator, mean equinox frame used by SGP4."""

ITRF = Frame("ITRF", pseudo_inertial=False)
"""International Terrestrial Reference Frame (rotating)."""
