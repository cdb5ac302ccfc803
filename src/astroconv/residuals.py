"""
astroconv.residuals — Fit Targets and Weights
===============================================

Flattens a state sample into the target vector a fit must reproduce, and
the matching per-component weights::

    target = [x₁ y₁ z₁ (vx₁ vy₁ vz₁)  x₂ y₂ z₂ (vx₂ vy₂ vz₂)  ...]

Position components weigh 1.  Velocity components of state *i* weigh::

    w_v = |v| · |r|² / µ

which puts velocity residuals on the same footing as position residuals at
the local vis-viva scale.
"""

from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .state import SpacecraftState


def build_targets(states: Sequence[SpacecraftState], frame: str,
                  only_position: bool, eop=None) -> tuple[NDArray, NDArray]:
    """Return ``(target, weight)`` for ``states`` expressed in ``frame``.

    Both arrays have ``3·N`` elements when ``only_position`` is set and
    ``6·N`` otherwise.
    """
    if len(states) == 0:
        raise ValueError("cannot build fit targets from an empty sample")

    width = 3 if only_position else 6
    target = np.empty((len(states), width))
    weight = np.ones((len(states), width))

    for row, state in enumerate(states):
        r, v = state.position_velocity(frame, eop)
        target[row, :3] = r
        if not only_position:
            target[row, 3:] = v
            weight[row, 3:] = np.linalg.norm(v) * np.dot(r, r) / state.mu

    return target.ravel(), weight.ravel()


def compute_rms(residuals: NDArray) -> float:
    """Root mean square over all residual components."""
    residuals = np.asarray(residuals, dtype=np.float64)
    return float(np.sqrt(np.sum(residuals**2) / residuals.size))
