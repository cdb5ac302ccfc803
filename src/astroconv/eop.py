"""
astroconv.eop — Earth Orientation Parameters
==============================================

Daily Earth Orientation Parameter (EOP) records and a history container
that interpolates them between days.

Each :class:`EOPEntry` holds, for one UTC midnight (MJD):

  - ``ut1_minus_utc`` : UT1 − UTC                      [s]
  - ``lod``           : excess length of day           [s]
  - ``x_pole``, ``y_pole`` : polar motion              [rad]
  - ``ddpsi``, ``ddeps``   : nutation corrections in longitude / obliquity [rad]

Values between two daily entries are linearly interpolated.  Dates outside
the history raise :class:`~astroconv.errors.EOPRangeError`; extrapolation is
never attempted.
"""

from typing import Iterable, NamedTuple

import numpy as np

from .errors import EOPRangeError


class EOPEntry(NamedTuple):
    """Earth orientation parameters for one day."""
    mjd: float
    ut1_minus_utc: float
    lod: float
    x_pole: float
    y_pole: float
    ddpsi: float = 0.0
    ddeps: float = 0.0


class EOPHistory:
    """Time-ordered collection of :class:`EOPEntry` records."""

    def __init__(self, entries: Iterable[EOPEntry]):
        data = sorted((EOPEntry(*e) for e in entries), key=lambda e: e.mjd)
        if not data:
            raise ValueError("EOP history requires at least one entry")
        mjds = np.array([e.mjd for e in data], dtype=np.float64)
        if np.any(np.diff(mjds) == 0.0):
            dup = mjds[1:][np.diff(mjds) == 0.0][0]
            raise ValueError(f"duplicate EOP entry for MJD {dup}")

        self._entries = tuple(data)
        self._mjd = mjds
        # (N, 6) columns follow EOPEntry field order after mjd
        self._table = np.array([e[1:] for e in data], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    @property
    def start_mjd(self) -> float:
        return float(self._mjd[0])

    @property
    def end_mjd(self) -> float:
        return float(self._mjd[-1])

    def contains(self, mjd: float) -> bool:
        """True if ``mjd`` lies within the covered span (inclusive)."""
        return self.start_mjd <= mjd <= self.end_mjd

    def entry(self, mjd: float) -> EOPEntry:
        """Return the entry recorded exactly at ``mjd``."""
        idx = np.searchsorted(self._mjd, mjd)
        if idx < len(self._mjd) and self._mjd[idx] == mjd:
            return self._entries[idx]
        raise KeyError(f"no EOP entry at MJD {mjd}")

    def _interpolate(self, mjd: float, column: int) -> float:
        if not self.contains(mjd):
            raise EOPRangeError(mjd, self.start_mjd, self.end_mjd)
        return float(np.interp(mjd, self._mjd, self._table[:, column]))

    def ut1_minus_utc(self, mjd: float) -> float:
        """UT1 − UTC [s] at ``mjd``."""
        return self._interpolate(mjd, 0)

    def lod(self, mjd: float) -> float:
        """Excess length of day [s] at ``mjd``."""
        return self._interpolate(mjd, 1)

    def pole_correction(self, mjd: float) -> tuple[float, float]:
        """Polar motion (x, y) [rad] at ``mjd``."""
        return self._interpolate(mjd, 2), self._interpolate(mjd, 3)

    def nutation_correction(self, mjd: float) -> tuple[float, float]:
        """Nutation corrections (ddpsi, ddeps) [rad] at ``mjd``."""
        return self._interpolate(mjd, 4), self._interpolate(mjd, 5)
