"""
astroconv.sampling — Trajectory Sampling
==========================================

Draws a fixed-step sequence of states from a propagator without leaving any
trace on it: the propagator's initial state is restored afterwards, whether
sampling succeeded or not.
"""

import logging

from .errors import SamplingError
from .propagators import Propagator
from .state import SpacecraftState
from .utils import shift_epoch

logger = logging.getLogger(__name__)


def sample_trajectory(propagator: Propagator, time_span: float,
                      nb_points: int) -> list[SpacecraftState]:
    """Sample ``propagator`` every ``time_span / (nb_points − 1)`` seconds.

    Offsets start at 0 and accumulate while strictly below ``time_span``;
    the nominal end point at ``time_span`` is therefore normally not
    included, so ``nb_points − 1`` states are usually returned.

    Parameters
    ----------
    propagator : Propagator — source of the states (left unchanged)
    time_span : float — sampled span after the initial epoch [s], > 0
    nb_points : int — nominal number of points, >= 2

    Raises
    ------
    SamplingError — a propagation failed; no partial sample is returned
    """
    if nb_points < 2:
        raise ValueError(f"nb_points must be >= 2, got {nb_points}")
    if not time_span > 0.0:
        raise ValueError(f"time_span must be positive, got {time_span}")

    initial_state = propagator.initial_state
    step = time_span / (nb_points - 1)
    states = []
    try:
        dt = 0.0
        while dt < time_span:
            try:
                states.append(propagator.propagate(shift_epoch(initial_state.epoch, dt)))
            except Exception as ex:
                raise SamplingError(
                    f"propagation failed {dt:.3f} s after the initial epoch: {ex}"
                ) from ex
            dt += step
    finally:
        propagator.reset_initial_state(initial_state)

    logger.debug("sampled %d states over %.1f s (step %.3f s)",
                 len(states), time_span, step)
    return states
