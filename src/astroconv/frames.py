"""
astroconv.frames — ECI / ECR Frame Transforms
===============================================

Spacecraft states are exchanged between two frames, routed through ECI::

    ECR (ECEF)  ←→  ECI (J2000)

**ECI (Earth-Centered Inertial, J2000)**
  - Inertial — the frame propagators integrate in.

**ECR (Earth-Centered Rotating / ECEF)**
  - Rotates with the Earth at ω_⊕ about Z.
  - Full-state transforms include the transport theorem (ω × r).

Earth rotation angle is GMST evaluated at UT1.  When an
:class:`~astroconv.eop.EOPHistory` is supplied, UT1 = UTC + (UT1−UTC) from
the history; otherwise UT1 ≈ UTC.
"""

import numpy as np
from numpy.typing import NDArray

from .utils import gmst, jd_to_mjd, OMEGA_EARTH, DAILY_SECONDS

FRAMES = {"eci", "ecr"}

_OMEGA = np.array([0.0, 0.0, OMEGA_EARTH])


def check_frame(frame: str) -> str:
    """Return the normalized frame name, raising on unknown frames."""
    name = frame.lower()
    if name not in FRAMES:
        raise ValueError(f"Unknown frame {frame!r}. Valid: {sorted(FRAMES)}")
    return name


def _ut1(jd: float, eop=None) -> float:
    if eop is None:
        return jd
    return jd + eop.ut1_minus_utc(jd_to_mjd(jd)) / DAILY_SECONDS


def eci_to_ecr_matrix(jd: float, eop=None) -> NDArray:
    """ECI→ECR 3×3 rotation about Z by the Earth rotation angle.

    Parameters
    ----------
    jd : float — Julian Date (UTC)
    eop : EOPHistory or None — source of UT1−UTC

    Returns
    -------
    R : (3,3) ndarray — DCM such that r_ecr = R @ r_eci
    """
    theta = gmst(_ut1(jd, eop))
    c, s = np.cos(theta), np.sin(theta)
    return np.array([
        [ c,  s, 0.0],
        [-s,  c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def state_eci_to_ecr(r_eci: NDArray, v_eci: NDArray,
                     jd: float, eop=None) -> tuple[NDArray, NDArray]:
    """Full state ECI → ECR:  v_ecr = R · (v_eci − ω × r_eci)."""
    r = np.asarray(r_eci, dtype=np.float64)
    v = np.asarray(v_eci, dtype=np.float64)
    R = eci_to_ecr_matrix(jd, eop)
    return R @ r, R @ (v - np.cross(_OMEGA, r))


def state_ecr_to_eci(r_ecr: NDArray, v_ecr: NDArray,
                     jd: float, eop=None) -> tuple[NDArray, NDArray]:
    """Full state ECR → ECI:  v_eci = Rᵀ · v_ecr + ω × r_eci."""
    R_inv = eci_to_ecr_matrix(jd, eop).T
    r_eci = R_inv @ np.asarray(r_ecr, dtype=np.float64)
    v_eci = R_inv @ np.asarray(v_ecr, dtype=np.float64) + np.cross(_OMEGA, r_eci)
    return r_eci, v_eci


def convert_state(r: NDArray, v: NDArray, jd: float,
                  from_frame: str, to_frame: str,
                  eop=None) -> tuple[NDArray, NDArray]:
    """Convert a position/velocity pair between any two supported frames.

    Always returns fresh arrays, even when both frames are the same.
    """
    fr = check_frame(from_frame)
    to = check_frame(to_frame)
    r = np.array(r, dtype=np.float64)
    v = np.array(v, dtype=np.float64)
    if fr == to:
        return r, v
    if fr == "ecr":
        r, v = state_ecr_to_eci(r, v, jd, eop)
    if to == "ecr":
        r, v = state_eci_to_ecr(r, v, jd, eop)
    return r, v
