"""The epoch module provides the ``Epoch`` class for representing instants in time.

An Epoch is stored as an integer Julian Day number, the seconds elapsed
within that day, and a Kahan summation compensator.  The compensator
tracks rounding errors accumulated by repeated additions so that stepping
an epoch many times keeps O(1) machine-epsilon error.

Epochs are metadata for averaged orbital states: they are carried by
identity from an averaged state to the osculating orbit it produces, and
are never traced or differentiated.  The internal values are therefore
plain Python ``int`` / ``float`` (float64) numbers.
"""

from __future__ import annotations

import math
import re

from .config import get_epoch_eq_tolerance
from .constants import JD_MJD_OFFSET, SECONDS_PER_DAY
from .time import caldate_to_jd, jd_to_caldate

# Valid ISO 8601 epoch string patterns
_EPOCH_PATTERNS = [
    # YYYY-MM-DD
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})$'),
    # YYYY-MM-DDTHH:MM:SSZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})Z$'),
    # YYYY-MM-DDTHH:MM:SS.fffZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})\.(\d+)Z$'),
]


class Epoch:
    """A single instant in time with compensated arithmetic.

    Epochs are immutable: arithmetic returns new instances.

    Constructors:
        Epoch(2018, 1, 1)
        Epoch(2018, 1, 1, 12, 0, 0.0)
        Epoch("2018-01-01T12:00:00Z")
        Epoch(other_epoch)
        Epoch.from_jd(2452975.5, 0.49496229)
    """

    __slots__ = ('_jd', '_seconds', '_kahan_c')

    def __init__(self, *args: int | float | str | Epoch) -> None:
        """Initialize Epoch. Supports multiple constructor forms.

        Args:
            *args: Either (year, month, day[, hour, minute, second]),
                a string in ISO 8601 format, or another Epoch instance.

        Raises:
            ValueError: If the arguments match no constructor form.
        """
        if len(args) == 1:
            if isinstance(args[0], str):
                self._init_string(args[0])
            elif isinstance(args[0], Epoch):
                self._set(args[0]._jd, args[0]._seconds, args[0]._kahan_c)
            else:
                raise ValueError(f"Cannot construct Epoch from {type(args[0])}")
        elif 3 <= len(args) <= 6:
            self._init_date(*args)
        else:
            raise ValueError(
                "Epoch requires date components (3-6 args), a string, or an Epoch"
            )

    @classmethod
    def _from_internal(cls, jd: int, seconds: float, kahan_c: float) -> Epoch:
        obj = object.__new__(cls)
        obj._set(jd, seconds, kahan_c)
        return obj

    @classmethod
    def from_jd(cls, jd: float, fraction: float = 0.0) -> Epoch:
        """Create an Epoch from a (possibly split) Julian Date.

        Args:
            jd: Julian Date, or its whole part when *fraction* is given.
            fraction: Additional fraction of a day. Default: ``0.0``

        Returns:
            Epoch: The corresponding instant.
        """
        jd_int = int(math.floor(jd))
        seconds = (jd - jd_int) * SECONDS_PER_DAY + fraction * SECONDS_PER_DAY
        day_offset = int(math.floor(seconds / SECONDS_PER_DAY))
        return cls._from_internal(
            jd_int + day_offset, seconds - day_offset * SECONDS_PER_DAY, 0.0
        )

    def _set(self, jd, seconds, kahan_c):
        object.__setattr__(self, '_jd', int(jd))
        object.__setattr__(self, '_seconds', float(seconds))
        object.__setattr__(self, '_kahan_c', float(kahan_c))

    def __setattr__(self, name, value):
        raise AttributeError("Epoch is immutable")

    def _init_date(self, year, month, day, hour=0, minute=0, second=0.0):
        jd_full = caldate_to_jd(year, month, day)
        jd_int = int(math.floor(jd_full))
        seconds = ((jd_full - jd_int) * SECONDS_PER_DAY
                   + hour * 3600.0 + minute * 60.0 + second)
        day_offset = int(math.floor(seconds / SECONDS_PER_DAY))
        self._set(jd_int + day_offset, seconds - day_offset * SECONDS_PER_DAY, 0.0)

    def _init_string(self, string):
        for pattern in _EPOCH_PATTERNS:
            m = pattern.match(string)
            if m:
                groups = m.groups()
                year, month, day = int(groups[0]), int(groups[1]), int(groups[2])

                hour = 0
                minute = 0
                second = 0.0
                if len(groups) >= 6:
                    hour = int(groups[3])
                    minute = int(groups[4])
                    second = float(groups[5])
                if len(groups) == 7:
                    second += float(f"0.{groups[6]}")

                self._init_date(year, month, day, hour, minute, second)
                return

        raise ValueError(
            f'Invalid Epoch string: "{string}" is not ISO 8601 compliant'
        )

    def _compensated_seconds(self) -> float:
        return self._seconds - self._kahan_c

    # Arithmetic operators

    def __add__(self, delta: float) -> Epoch:
        """Return a new Epoch advanced by *delta* seconds (Kahan summation).

        Args:
            delta (float): Seconds to add.

        Returns:
            Epoch: New Epoch.
        """
        y = float(delta) - self._kahan_c
        t = self._seconds + y
        new_kahan_c = (t - self._seconds) - y

        day_offset = int(math.floor(t / SECONDS_PER_DAY))
        new_seconds = t - day_offset * SECONDS_PER_DAY
        return Epoch._from_internal(self._jd + day_offset, new_seconds, new_kahan_c)

    def __sub__(self, other: Epoch | float) -> Epoch | float:
        """Subtract seconds, or compute the difference between two Epochs.

        Args:
            other: If Epoch, returns the time difference in seconds.
                If numeric, returns a new Epoch with seconds subtracted.

        Returns:
            float or Epoch: Time difference in seconds, or new Epoch.
        """
        if isinstance(other, Epoch):
            return ((self._jd - other._jd) * SECONDS_PER_DAY
                    + (self._compensated_seconds() - other._compensated_seconds()))
        return self.__add__(-float(other))

    # Comparison operators

    def __eq__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return abs(self - other) < get_epoch_eq_tolerance()

    def __ne__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return not self.__eq__(other)

    def __lt__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return (self - other) < 0.0 and not self.__eq__(other)

    def __le__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self.__lt__(other) or self.__eq__(other)

    def __gt__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return (self - other) > 0.0 and not self.__eq__(other)

    def __ge__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self.__gt__(other) or self.__eq__(other)

    def __hash__(self):
        return hash((self._jd, round(self._compensated_seconds(), 6)))

    # Time properties

    def caldate(self) -> tuple[int, int, int, int, int, float]:
        """Return the calendar date components.

        Returns:
            tuple: (year, month, day, hour, minute, second) where second
                includes the fractional part.
        """
        comp_seconds = self._compensated_seconds()
        year, month, day, _, _, _ = jd_to_caldate(self._jd + comp_seconds / SECONDS_PER_DAY)

        # JD days start at noon
        civil_time = (comp_seconds + 43200.0) % SECONDS_PER_DAY
        hour = int(civil_time // 3600)
        civil_time -= hour * 3600
        minute = int(civil_time // 60)
        second = civil_time - minute * 60

        return year, month, day, hour, minute, second

    def jd(self) -> float:
        """Return the Julian Date.

        Returns:
            float: Julian Date.
        """
        return self._jd + self._compensated_seconds() / SECONDS_PER_DAY

    def jd_split(self) -> tuple[float, float]:
        """Return the Julian Date split into a midnight-aligned whole part and a day fraction.

        This is the two-part form expected by the ``sgp4`` library.

        Returns:
            tuple[float, float]: ``(jd_whole, fraction)`` with
                ``jd_whole`` ending in ``.5``.
        """
        seconds = self._compensated_seconds() - 43200.0
        jd_whole = self._jd + 0.5
        if seconds < 0.0:
            seconds += SECONDS_PER_DAY
            jd_whole -= 1.0
        return jd_whole, seconds / SECONDS_PER_DAY

    def mjd(self) -> float:
        """Return the Modified Julian Date.

        Returns:
            float: Modified Julian Date.
        """
        return (self._jd - JD_MJD_OFFSET) + self._compensated_seconds() / SECONDS_PER_DAY

    # String representations

    def __str__(self):
        year, month, day, hour, minute, second = self.caldate()
        return (f'{year:04d}-{month:02d}-{day:02d}T'
                f'{hour:02d}:{minute:02d}:{second:06.3f}Z')

    def __repr__(self):
        return (f'Epoch(_jd={self._jd}, _seconds={self._seconds}, '
                f'_kahan_c={self._kahan_c})')
