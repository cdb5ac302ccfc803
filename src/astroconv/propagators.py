"""
astroconv.propagators — Analytical Propagators and Builders
=============================================================

Propagators compute a :class:`~astroconv.state.SpacecraftState` at any
requested epoch from an initial state.  Builders create configured
propagators from a flat parameter vector, which is what the propagator
converter adjusts during a fit::

    point = [x, y, z, vx, vy, vz, p1, ..., pk]

where (x … vz) is the initial state in the builder frame and p1 … pk are the
values of the builder's *free* parameters, in the order they were freed.

Models
------
- :class:`KeplerianPropagator` — two-body motion.
- :class:`J2Propagator` — two-body motion plus secular J2 drift of RAAN and
  argument of perigee.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

import numpy as np

from .errors import UnknownParameterError
from .frames import check_frame
from .orbits import propagate_kepler, propagate_j2
from .parameters import Parameter
from .state import SpacecraftState
from .utils import MU_EARTH, J2, seconds_between

MU = "mu"
J2_PARAMETER = "j2"


# ════════════════════════════════════════════════════════════════════════════
#  Propagators
# ════════════════════════════════════════════════════════════════════════════

class Propagator(ABC):
    """Base class: holds a resettable initial state.

    ``eop`` is the Earth orientation history used whenever a state has to be
    moved between ECR and ECI; ``None`` means UT1 = UTC.
    """

    def __init__(self, initial_state: SpacecraftState, eop=None):
        self._initial_state = initial_state
        self.eop = eop

    @property
    def initial_state(self) -> SpacecraftState:
        return self._initial_state

    def reset_initial_state(self, state: SpacecraftState) -> None:
        self._initial_state = state

    @abstractmethod
    def propagate(self, epoch: float) -> SpacecraftState:
        """Return the state at ``epoch`` (Julian Date)."""


class KeplerianPropagator(Propagator):
    """Two-body propagator.  Output states are inertial (ECI)."""

    def _advance(self, r0, v0, dt, mu):
        return propagate_kepler(r0, v0, dt, mu)

    def propagate(self, epoch: float) -> SpacecraftState:
        state = self._initial_state
        r0, v0 = state.position_velocity("eci", self.eop)
        r1, v1 = self._advance(r0, v0, seconds_between(epoch, state.epoch), state.mu)
        return SpacecraftState(epoch, r1, v1, state.mu, "eci")


class J2Propagator(KeplerianPropagator):
    """Two-body propagator with secular J2 node / perigee drift."""

    def __init__(self, initial_state: SpacecraftState, j2: float = J2, eop=None):
        super().__init__(initial_state, eop)
        self.j2 = j2

    def _advance(self, r0, v0, dt, mu):
        return propagate_j2(r0, v0, dt, mu, self.j2)


# ════════════════════════════════════════════════════════════════════════════
#  Builders
# ════════════════════════════════════════════════════════════════════════════

class PropagatorBuilder(ABC):
    """Factory for propagators configured from a flat parameter vector."""

    def __init__(self, frame: str, parameters: Sequence[Parameter], eop=None):
        self._frame = check_frame(frame)
        self.eop = eop
        self._parameters = {p.name: p for p in parameters}
        self._free: tuple[str, ...] = ()

    @property
    def frame(self) -> str:
        return self._frame

    @property
    def available_parameter_names(self) -> tuple[str, ...]:
        return tuple(self._parameters)

    @property
    def free_parameter_names(self) -> tuple[str, ...]:
        return self._free

    def _parameter(self, name: str) -> Parameter:
        try:
            return self._parameters[name]
        except KeyError:
            raise UnknownParameterError(name, self._parameters) from None

    def get_parameter_value(self, name: str) -> float:
        return float(self._parameter(name).value[0])

    def set_parameter_value(self, name: str, value: float) -> None:
        self._parameter(name).value = value

    def set_free_parameters(self, names: Iterable[str]) -> None:
        """Mark ``names`` as estimated, in order; every other parameter is fixed."""
        names = tuple(names)
        for name in names:
            self._parameter(name)
        for param in self._parameters.values():
            param.estimated = param.name in names
        self._free = names

    def build_propagator(self, epoch: float, point) -> Propagator:
        """Build a propagator whose initial state sits at ``epoch``."""
        point = np.asarray(point, dtype=np.float64)
        expected = 6 + len(self._free)
        if point.shape != (expected,):
            raise ValueError(
                f"parameter vector must have {expected} elements "
                f"(6 + {len(self._free)} free), got shape {point.shape}"
            )
        for name, value in zip(self._free, point[6:]):
            self._parameters[name].value = value
        state = SpacecraftState(epoch, point[:3], point[3:6],
                                self.get_parameter_value(MU), self._frame)
        return self._create(state)

    @abstractmethod
    def _create(self, state: SpacecraftState) -> Propagator:
        """Instantiate the propagator for ``state`` and current parameters."""


class KeplerianPropagatorBuilder(PropagatorBuilder):
    """Builder for :class:`KeplerianPropagator`; parameters: ``mu``."""

    def __init__(self, mu: float = MU_EARTH, frame: str = "eci", eop=None):
        super().__init__(frame, [Parameter(MU, mu)], eop)

    def _create(self, state):
        return KeplerianPropagator(state, self.eop)


class J2PropagatorBuilder(PropagatorBuilder):
    """Builder for :class:`J2Propagator`; parameters: ``mu``, ``j2``."""

    def __init__(self, mu: float = MU_EARTH, j2: float = J2, frame: str = "eci",
                 eop=None):
        super().__init__(frame, [Parameter(MU, mu), Parameter(J2_PARAMETER, j2)], eop)

    def _create(self, state):
        return J2Propagator(state, self.get_parameter_value(J2_PARAMETER), self.eop)
