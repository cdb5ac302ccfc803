"""
astroconv.chebyshev — Chebyshev Position/Velocity Segments
============================================================

Ephemeris segment storing one Chebyshev series per Cartesian axis over a
validity interval ``[start, start + duration]``.  Inside the interval time is
normalized to::

    t = (2·Δt − duration) / duration   ∈ [−1, 1]

Position is the series value at ``t``; velocity is the derivative series
scaled by ``dt/dΔt = 2 / duration``.
"""

from dataclasses import dataclass

import numpy as np
from numpy.polynomial import chebyshev as C
from numpy.typing import NDArray

from .utils import seconds_between


@dataclass(frozen=True, eq=False)
class PosVelChebyshev:
    """Chebyshev ephemeris segment."""
    start: float            # Julian Date of the segment start
    duration: float         # [s]
    x_coeffs: NDArray
    y_coeffs: NDArray
    z_coeffs: NDArray

    def __post_init__(self):
        if not self.duration > 0.0:
            raise ValueError(f"duration must be positive, got {self.duration}")
        coeffs = [np.array(c, dtype=np.float64) for c in
                  (self.x_coeffs, self.y_coeffs, self.z_coeffs)]
        sizes = {c.size for c in coeffs}
        if len(sizes) != 1 or 0 in sizes:
            raise ValueError("x, y, z coefficient arrays must be non-empty and equal length")
        for name, c in zip(("x_coeffs", "y_coeffs", "z_coeffs"), coeffs):
            c.setflags(write=False)
            object.__setattr__(self, name, c)

    @property
    def _coeffs(self) -> NDArray:
        # (n_coeffs, 3): chebval evaluates all three axes at once
        return np.stack([self.x_coeffs, self.y_coeffs, self.z_coeffs], axis=1)

    def in_range(self, epoch: float) -> bool:
        """True if ``epoch`` lies inside the validity interval (inclusive)."""
        dt = seconds_between(epoch, self.start)
        return 0.0 <= dt <= self.duration

    def position_velocity(self, epoch: float) -> tuple[NDArray, NDArray]:
        """Position [m] and velocity [m/s] at ``epoch``."""
        t = (2.0 * seconds_between(epoch, self.start) - self.duration) / self.duration
        coeffs = self._coeffs
        position = C.chebval(t, coeffs)
        if coeffs.shape[0] > 1:
            velocity = C.chebval(t, C.chebder(coeffs)) * (2.0 / self.duration)
        else:
            velocity = np.zeros(3)
        return position, velocity
