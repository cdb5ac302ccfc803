"""
astroconv.orbits — Two-Body Orbital Mechanics
===============================================

Keplerian element ↔ Cartesian conversion, Kepler equation solver, and the
closed-form motion models behind the analytical propagators: pure two-body
and two-body with secular J2 drift of the node and perigee.
"""

import numpy as np
from numpy.typing import NDArray

from .errors import PropagationError
from .utils import MU_EARTH, R_EARTH, J2


# ════════════════════════════════════════════════════════════════════════════
#  Kepler Equation
# ════════════════════════════════════════════════════════════════════════════

def _solve_kepler(M: float, e: float, tol: float = 1e-12,
                  max_iter: int = 50) -> float:
    """Solve Kepler's equation  M = E − e sin(E)  via Newton–Raphson.

    Returns
    -------
    E : float — eccentric anomaly [rad]
    """
    E = M + 0.85 * e * np.sign(np.sin(M)) if e < 0.8 else np.pi
    for _ in range(max_iter):
        dE = -(E - e * np.sin(E) - M) / (1.0 - e * np.cos(E))
        E += dE
        if abs(dE) < tol:
            break
    return E


def _true_anomaly(E: float, e: float) -> float:
    return 2.0 * np.arctan2(
        np.sqrt(1.0 + e) * np.sin(E / 2.0),
        np.sqrt(1.0 - e) * np.cos(E / 2.0),
    )


# ════════════════════════════════════════════════════════════════════════════
#  Keplerian ↔ Cartesian Conversions
# ════════════════════════════════════════════════════════════════════════════

def keplerian_to_eci(
    a: float, e: float, i: float,
    raan: float, argp: float, nu: float,
    mu: float = MU_EARTH,
) -> tuple[NDArray, NDArray]:
    """Convert classical Keplerian elements to an inertial state vector.

    Parameters
    ----------
    a : float — semi-major axis [m]
    e : float — eccentricity
    i : float — inclination [rad]
    raan : float — right ascension of ascending node [rad]
    argp : float — argument of periapsis [rad]
    nu : float — true anomaly [rad]
    mu : float — gravitational parameter [m³/s²]

    Returns
    -------
    r_eci : (3,) ndarray — position [m]
    v_eci : (3,) ndarray — velocity [m/s]
    """
    p = a * (1.0 - e**2)
    r_mag = p / (1.0 + e * np.cos(nu))

    r_pqw = r_mag * np.array([np.cos(nu), np.sin(nu), 0.0])
    v_pqw = np.sqrt(mu / p) * np.array([-np.sin(nu), e + np.cos(nu), 0.0])

    cos_raan, sin_raan = np.cos(raan), np.sin(raan)
    cos_argp, sin_argp = np.cos(argp), np.sin(argp)
    cos_i, sin_i = np.cos(i), np.sin(i)

    # PQW → ECI
    R = np.array([
        [cos_raan * cos_argp - sin_raan * sin_argp * cos_i,
         -cos_raan * sin_argp - sin_raan * cos_argp * cos_i,
         sin_raan * sin_i],
        [sin_raan * cos_argp + cos_raan * sin_argp * cos_i,
         -sin_raan * sin_argp + cos_raan * cos_argp * cos_i,
         -cos_raan * sin_i],
        [sin_argp * sin_i,
         cos_argp * sin_i,
         cos_i],
    ])

    return R @ r_pqw, R @ v_pqw


def _angle_from(cos_value: float, flip: bool) -> float:
    angle = np.arccos(np.clip(cos_value, -1.0, 1.0))
    return 2.0 * np.pi - angle if flip else angle


def eci_to_keplerian(
    r_eci: NDArray, v_eci: NDArray, mu: float = MU_EARTH
) -> dict:
    """Convert an inertial state vector to classical Keplerian elements.

    Returns
    -------
    dict with keys: a, e, i, raan, argp, nu, E (eccentric anomaly),
    M (mean anomaly).  All angles in [rad].
    """
    r = np.asarray(r_eci, dtype=np.float64)
    v = np.asarray(v_eci, dtype=np.float64)
    r_mag = np.linalg.norm(r)
    v_mag = np.linalg.norm(v)

    h = np.cross(r, v)
    h_mag = np.linalg.norm(h)
    if h_mag < 1e-12 or r_mag < 1e-12:
        raise PropagationError("degenerate state: zero position or angular momentum")

    n = np.cross([0.0, 0.0, 1.0], h)
    n_mag = np.linalg.norm(n)

    e_vec = ((v_mag**2 - mu / r_mag) * r - np.dot(r, v) * v) / mu
    e = np.linalg.norm(e_vec)

    xi = v_mag**2 / 2.0 - mu / r_mag
    a = -mu / (2.0 * xi) if abs(1.0 - e) > 1e-10 else np.inf

    inc = np.arccos(np.clip(h[2] / h_mag, -1.0, 1.0))
    raan = _angle_from(n[0] / n_mag, n[1] < 0.0) if n_mag > 1e-12 else 0.0

    if n_mag > 1e-12 and e > 1e-12:
        argp = _angle_from(np.dot(n, e_vec) / (n_mag * e), e_vec[2] < 0.0)
    else:
        argp = 0.0

    if e > 1e-12:
        nu = _angle_from(np.dot(e_vec, r) / (e * r_mag), np.dot(r, v) < 0.0)
    elif n_mag > 1e-12:
        # circular: argument of latitude
        nu = _angle_from(np.dot(n, r) / (n_mag * r_mag), r[2] < 0.0)
    else:
        # circular equatorial: true longitude
        nu = _angle_from(r[0] / r_mag, r[1] < 0.0)

    if e < 1.0:
        E_anom = 2.0 * np.arctan2(
            np.sqrt(1.0 - e) * np.sin(nu / 2.0),
            np.sqrt(1.0 + e) * np.cos(nu / 2.0),
        )
        M_anom = E_anom - e * np.sin(E_anom)
    else:
        E_anom = M_anom = 0.0

    return {"a": a, "e": e, "i": inc, "raan": raan, "argp": argp, "nu": nu,
            "E": E_anom, "M": M_anom}


# ════════════════════════════════════════════════════════════════════════════
#  Closed-Form Propagation
# ════════════════════════════════════════════════════════════════════════════

def compute_orbital_period(a: float, mu: float = MU_EARTH) -> float:
    """Orbital period [s] for semi-major axis a [m]."""
    return 2.0 * np.pi * np.sqrt(a**3 / mu)


def compute_mean_motion(a: float, mu: float = MU_EARTH) -> float:
    """Mean motion [rad/s] for semi-major axis a [m]."""
    return np.sqrt(mu / a**3)


def _bound_elements(r0: NDArray, v0: NDArray, mu: float) -> dict:
    if not mu > 0.0:
        raise PropagationError(f"gravitational parameter must be positive, got {mu}")
    if not (np.all(np.isfinite(r0)) and np.all(np.isfinite(v0))):
        raise PropagationError("non-finite initial state")
    oe = eci_to_keplerian(r0, v0, mu)
    if oe["e"] >= 1.0:
        raise PropagationError(
            f"hyperbolic/parabolic orbit (e = {oe['e']:.6f}) cannot be propagated"
        )
    return oe


def propagate_kepler(
    r0_eci: NDArray, v0_eci: NDArray, dt: float,
    mu: float = MU_EARTH,
) -> tuple[NDArray, NDArray]:
    """Propagate an elliptic orbit by dt seconds (two-body).

    Raises
    ------
    PropagationError — non-elliptic or degenerate initial state
    """
    oe = _bound_elements(r0_eci, v0_eci, mu)
    a, e = oe["a"], oe["e"]

    M1 = (oe["M"] + compute_mean_motion(a, mu) * dt) % (2.0 * np.pi)
    nu1 = _true_anomaly(_solve_kepler(M1, e), e)

    return keplerian_to_eci(a, e, oe["i"], oe["raan"], oe["argp"], nu1, mu)


def propagate_j2(
    r0_eci: NDArray, v0_eci: NDArray, dt: float,
    mu: float = MU_EARTH, j2: float = J2,
) -> tuple[NDArray, NDArray]:
    """Propagate with J2 secular drift of RAAN and argument of perigee.

    Semi-major axis, eccentricity and inclination stay fixed; the mean
    anomaly advances at the unperturbed mean motion.
    """
    oe = _bound_elements(r0_eci, v0_eci, mu)
    a, e, inc = oe["a"], oe["e"], oe["i"]
    n = compute_mean_motion(a, mu)
    p = a * (1.0 - e**2)

    # J2 secular rates (Brouwer)
    factor = -1.5 * n * j2 * (R_EARTH / p) ** 2
    raan_dot = factor * np.cos(inc)
    argp_dot = -factor * (2.0 - 2.5 * np.sin(inc) ** 2)

    M1 = (oe["M"] + n * dt) % (2.0 * np.pi)
    nu1 = _true_anomaly(_solve_kepler(M1, e), e)

    return keplerian_to_eci(a, e, inc,
                            oe["raan"] + raan_dot * dt,
                            oe["argp"] + argp_dot * dt,
                            nu1, mu)
