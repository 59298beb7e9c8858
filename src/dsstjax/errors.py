"""Domain exceptions.

Precondition violations raise the builtin :class:`ValueError` directly.
The only domain exception is raised when a mean-to-osculating (or
osculating-to-mean) recovery cannot produce a valid orbit.
"""

from __future__ import annotations


class OrbitConversionError(ValueError):
    """A theory could not convert between averaged and osculating orbits.

    Args:
        theory: Name of the theory that failed (e.g. ``"Brouwer-Lyddane"``).
        message: Description of the violated geometric constraint.
    """

    def __init__(self, theory: str, message: str):
        super().__init__(f"{theory}: {message}")
        self.theory = theory
