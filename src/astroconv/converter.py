"""
astroconv.converter — Propagator Conversion
=============================================

Fits the free parameters of one propagator model so that it reproduces the
trajectory of another propagator, or of a given state sample.

Pipeline
--------
1. **Parameter check**: every requested free parameter must be offered by
   the target builder; nothing is sampled or evaluated otherwise.
2. **Sampling** (propagator input only): fixed-step states over the
   requested time span, see :func:`~astroconv.sampling.sample_trajectory`.
3. **First guess**: the osculating position / velocity of the first sample
   point in the builder frame, plus the builder's current free parameter
   values::

       p₀ = [x, y, z, vx, vy, vz, p1, ..., pk]

4. **Warm-up**: fit against a minimal sub-sample (1 state when velocities
   are fitted, 2 when only positions are) so early iterations stay cheap.
5. **Refinement**: fit against the full sample from the warm-up result.
6. **Outcome**: RMS of the unweighted residuals over all components and the
   adapted propagator built at the first sample epoch.

How a candidate point is turned into modelled positions / velocities is an
injected strategy (``objective_factory``); the default builds a propagator
from the point and propagates it to every sample epoch.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from .config import ConverterSettings
from .errors import UnknownParameterError
from .optimizer import LevenbergMarquardtOptimizer, ObjectiveFunction
from .propagators import Propagator, PropagatorBuilder
from .residuals import build_targets, compute_rms
from .sampling import sample_trajectory
from .state import SpacecraftState

logger = logging.getLogger(__name__)


class PropagatedPVFunction:
    """Objective: propagate the candidate model to every sample epoch.

    The output follows the layout of :func:`~astroconv.residuals.build_targets`
    for the same sample, frame and ``only_position`` flag.
    """

    def __init__(self, builder: PropagatorBuilder,
                 states: Sequence[SpacecraftState], frame: str,
                 only_position: bool, reference_epoch: float, eop=None):
        self.builder = builder
        self.epochs = [s.epoch for s in states]
        self.frame = frame
        self.only_position = only_position
        self.reference_epoch = reference_epoch
        self.eop = eop

    def value(self, point: NDArray) -> NDArray:
        propagator = self.builder.build_propagator(self.reference_epoch, point)
        rows = []
        for epoch in self.epochs:
            r, v = propagator.propagate(epoch).position_velocity(self.frame, self.eop)
            rows.append(r if self.only_position else np.concatenate([r, v]))
        return np.concatenate(rows)


class _CountedObjective:
    """Counts model evaluations and forwards everything else (e.g. ``jacobian``)."""

    def __init__(self, objective: ObjectiveFunction):
        self._objective = objective
        self.calls = 0

    def value(self, point: NDArray) -> NDArray:
        self.calls += 1
        return self._objective.value(point)

    def __getattr__(self, name):
        return getattr(self._objective, name)


ObjectiveFactory = Callable[..., ObjectiveFunction]


@dataclass(frozen=True, eq=False)
class ConversionResult:
    """Summary of the last conversion."""
    propagator: Propagator
    rms: float
    evaluations: int
    point: NDArray


class PropagatorConverter:
    """Least-squares conversion of trajectories into a builder's model.

    Parameters
    ----------
    builder : PropagatorBuilder — model to adapt
    threshold : float or None — optimizer convergence threshold
    max_iterations : int or None — objective evaluation budget per phase
    objective_factory : callable — ``(builder, states, frame, only_position,
        reference_epoch, eop=None) -> ObjectiveFunction``
    optimizer : optional optimizer exposing ``optimize(max_evaluations,
        objective, target, weight, initial_guess)``
    settings : ConverterSettings or None — defaults for the unset arguments
    eop : EOPHistory or None — Earth orientation for ECR targets and models;
        set on the builder so the propagators it builds use it too (default:
        keep the builder's)
    """

    def __init__(self, builder: PropagatorBuilder,
                 threshold: float | None = None,
                 max_iterations: int | None = None,
                 objective_factory: ObjectiveFactory = PropagatedPVFunction,
                 optimizer=None,
                 settings: ConverterSettings | None = None,
                 eop=None):
        settings = settings or ConverterSettings()
        self.builder = builder
        self.frame = builder.frame
        if eop is not None:
            builder.eop = eop
        self.max_iterations = settings.max_iterations if max_iterations is None else max_iterations
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        self.objective_factory = objective_factory
        self.optimizer = optimizer or LevenbergMarquardtOptimizer(
            settings.threshold if threshold is None else threshold,
            settings.jacobian,
        )

        self._sample: list[SpacecraftState] = []
        self._reference_epoch: float | None = None
        self._free_parameters: tuple[str, ...] = ()
        self._only_position = False
        self._target = np.empty(0)
        self._weight = np.empty(0)
        self._evaluations = 0
        self._result: ConversionResult | None = None

    # ── accessors ───────────────────────────────────────────────────────────

    @property
    def eop(self):
        return self.builder.eop

    @property
    def available_parameters(self) -> tuple[str, ...]:
        return self.builder.available_parameter_names

    def is_available(self, name: str) -> bool:
        return name in self.builder.available_parameter_names

    @property
    def adapted_propagator(self) -> Propagator | None:
        return self._result.propagator if self._result else None

    @property
    def rms(self) -> float:
        """RMS of the residuals of the last conversion (NaN before any)."""
        return self._result.rms if self._result else float("nan")

    @property
    def evaluations(self) -> int:
        """Objective evaluations of the last conversion, both phases included."""
        return self._evaluations

    @property
    def last_result(self) -> ConversionResult | None:
        return self._result

    @property
    def reference_epoch(self) -> float | None:
        return self._reference_epoch

    @property
    def sample(self) -> list[SpacecraftState]:
        return list(self._sample)

    @property
    def free_parameters(self) -> tuple[str, ...]:
        return self._free_parameters

    @property
    def only_position(self) -> bool:
        return self._only_position

    @property
    def target_size(self) -> int:
        return self._target.size

    # ── conversion ──────────────────────────────────────────────────────────

    def convert(self, source: Propagator, time_span: float, nb_points: int,
                *free_parameters: str) -> Propagator:
        """Adapt the builder's model to the trajectory of ``source``.

        Positions and velocities are both fitted.

        Parameters
        ----------
        source : Propagator — propagator to reproduce (left unchanged)
        time_span : float — fitted span after the source initial epoch [s]
        nb_points : int — nominal number of sample points
        free_parameters : names of the builder parameters to adjust
        """
        self._check_parameters(free_parameters)
        states = sample_trajectory(source, time_span, nb_points)
        return self.convert_states(states, False, *free_parameters)

    def convert_states(self, states: Sequence[SpacecraftState], position_only: bool,
                       *free_parameters: str) -> Propagator:
        """Adapt the builder's model to a state sample (ascending epochs)."""
        self._check_parameters(free_parameters)
        states = list(states)
        minimum = 2 if position_only else 1
        if len(states) < minimum:
            raise ValueError(
                f"at least {minimum} states are required, got {len(states)}"
            )

        self._free_parameters = tuple(free_parameters)
        self.builder.set_free_parameters(self._free_parameters)
        return self._adapt(states, position_only)

    def _check_parameters(self, names: Iterable[str]) -> None:
        for name in names:
            if not self.is_available(name):
                raise UnknownParameterError(name, self.available_parameters)

    def _adapt(self, states: list[SpacecraftState], position_only: bool) -> Propagator:
        self._reference_epoch = states[0].epoch
        self._only_position = position_only
        self._evaluations = 0
        self._result = None

        # rough first guess: osculating state of the first sample point
        r, v = states[0].position_velocity(self.frame, self.eop)
        initial = np.concatenate([
            r, v,
            [self.builder.get_parameter_value(name) for name in self._free_parameters],
        ])

        logger.info("converting %d states (%s) with free parameters %s",
                    len(states), "positions" if position_only else "positions+velocities",
                    list(self._free_parameters) or "none")

        # warm-up on a few points, then the full sample
        self._set_sample(states[:2 if position_only else 1])
        intermediate = self._fit(initial, "warm-up")

        self._set_sample(states)
        point = self._fit(intermediate, "refinement")

        rms = compute_rms(self._residuals(point))
        propagator = self.builder.build_propagator(self._reference_epoch, point)
        self._result = ConversionResult(propagator, rms, self._evaluations, point)

        logger.info("conversion done: rms %.6e, %d evaluations", rms, self._evaluations)
        return propagator

    def _set_sample(self, states: list[SpacecraftState]) -> None:
        self._sample = states
        self._target, self._weight = build_targets(states, self.frame, self._only_position,
                                                   self.eop)

    def _objective(self) -> ObjectiveFunction:
        return self.objective_factory(self.builder, self._sample, self.frame,
                                      self._only_position, self._reference_epoch,
                                      eop=self.eop)

    def _fit(self, initial: NDArray, phase: str) -> NDArray:
        objective = _CountedObjective(self._objective())
        try:
            optimum = self.optimizer.optimize(self.max_iterations, objective,
                                              self._target, self._weight, initial)
        finally:
            # failed phases still count what they spent
            self._evaluations += objective.calls
        logger.debug("%s phase: %d states, %d evaluations",
                     phase, len(self._sample), optimum.evaluations)
        return np.asarray(optimum.point, dtype=np.float64)

    def _residuals(self, point: NDArray) -> NDArray:
        return self._target - np.asarray(self._objective().value(point), dtype=np.float64)
