"""
astroconv.state — Spacecraft State
====================================

Immutable snapshot of a spacecraft at one instant: epoch (Julian Date),
Cartesian position / velocity in a named frame, and the central body's
gravitational parameter.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .frames import check_frame, convert_state
from .utils import MU_EARTH, as_vector3, seconds_between


@dataclass(frozen=True, eq=False)
class SpacecraftState:
    """Position / velocity of a body at ``epoch``.

    ``position`` and ``velocity`` are stored as read-only (3,) arrays; use
    :meth:`position_velocity` to obtain writable copies in any frame.
    """
    epoch: float                # Julian Date (UTC)
    position: NDArray           # [m]
    velocity: NDArray           # [m/s]
    mu: float = MU_EARTH        # [m³/s²]
    frame: str = "eci"

    def __post_init__(self):
        object.__setattr__(self, "position", as_vector3(self.position, "position"))
        object.__setattr__(self, "velocity", as_vector3(self.velocity, "velocity"))
        object.__setattr__(self, "frame", check_frame(self.frame))
        object.__setattr__(self, "epoch", float(self.epoch))
        object.__setattr__(self, "mu", float(self.mu))

    def position_velocity(self, frame: str | None = None,
                          eop=None) -> tuple[NDArray, NDArray]:
        """Return (r, v) copies expressed in ``frame`` (default: own frame)."""
        return convert_state(self.position, self.velocity, self.epoch,
                             self.frame, frame or self.frame, eop)

    def in_frame(self, frame: str, eop=None) -> "SpacecraftState":
        """New state with the same epoch and µ, expressed in ``frame``."""
        r, v = self.position_velocity(frame, eop)
        return SpacecraftState(self.epoch, r, v, self.mu, frame)

    def duration_from(self, epoch: float) -> float:
        """Seconds elapsed from ``epoch`` to this state's epoch."""
        return seconds_between(self.epoch, epoch)

    def __eq__(self, other):
        if not isinstance(other, SpacecraftState):
            return NotImplemented
        return (self.epoch == other.epoch and self.mu == other.mu
                and self.frame == other.frame
                and np.array_equal(self.position, other.position)
                and np.array_equal(self.velocity, other.velocity))

    def __hash__(self):
        return hash((self.epoch, self.mu, self.frame,
                     self.position.tobytes(), self.velocity.tobytes()))
