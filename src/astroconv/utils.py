"""
astroconv.utils — Foundational Utilities
==========================================

Physical constants, array validation and time-scale conversions shared by the
propagation, fitting and Earth-orientation modules.  All functions are pure
NumPy.
"""

import numpy as np
from numpy.typing import NDArray

# ── Physical Constants ──────────────────────────────────────────────────────
MU_EARTH = 3.986004418e14       # Earth gravitational parameter  [m³/s²]
R_EARTH = 6_378_137.0           # WGS-84 semi-major axis          [m]
OMEGA_EARTH = 7.2921150e-5      # Earth rotation rate              [rad/s]
J2 = 1.08263e-3                 # J2 zonal harmonic

DAILY_SECONDS = 86400.0
MJD_OFFSET = 2_400_000.5        # JD − MJD


# ── Array Helpers ───────────────────────────────────────────────────────────

def as_vector3(v, name: str = "vector") -> NDArray:
    """Copy ``v`` into a read-only float64 (3,) array."""
    arr = np.array(v, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {arr.shape}")
    arr.setflags(write=False)
    return arr


# ── Time Utilities ──────────────────────────────────────────────────────────

def julian_date(year: int, month: int, day: int,
                hour: float = 0.0, minute: float = 0.0,
                second: float = 0.0) -> float:
    """Compute Julian Date from calendar date (UTC)."""
    if month <= 2:
        year -= 1
        month += 12
    A = int(year / 100)
    B = 2 - A + int(A / 4)
    JD = (int(365.25 * (year + 4716))
          + int(30.6001 * (month + 1))
          + day + B - 1524.5)
    JD += (hour + minute / 60.0 + second / 3600.0) / 24.0
    return JD


def jd_to_mjd(jd: float) -> float:
    """Julian Date → Modified Julian Date."""
    return jd - MJD_OFFSET


def mjd_to_jd(mjd: float) -> float:
    """Modified Julian Date → Julian Date."""
    return mjd + MJD_OFFSET


def shift_epoch(epoch: float, dt: float) -> float:
    """Return the Julian Date ``dt`` seconds after ``epoch``.

    Epochs are single float64 Julian Dates: near JD 2.46e6 one unit in the
    last place is about 40 µs, so shifted epochs are only resolved to a few
    tens of microseconds (roughly 0.3 m along-track in LEO).  Offsets
    computed with :func:`seconds_between` from epochs built here are
    consistent with each other to that resolution.
    """
    return epoch + dt / DAILY_SECONDS


def seconds_between(epoch: float, reference: float) -> float:
    """Elapsed seconds from ``reference`` to ``epoch`` (both JD)."""
    return (epoch - reference) * DAILY_SECONDS


def gmst(jd: float) -> float:
    """Greenwich Mean Sidereal Time [rad] from Julian Date (UT1).

    Uses the IAU 1982 model (accurate to ~0.1 arcsec for dates near J2000).
    """
    T = (jd - 2_451_545.0) / 36_525.0
    # GMST in seconds of time at 0h UT
    theta_sec = 67310.54841 + (876600.0 * 3600.0 + 8640184.812866) * T \
                + 0.093104 * T**2 - 6.2e-6 * T**3
    theta_deg = (theta_sec / 240.0) % 360.0
    return np.deg2rad(theta_deg)
