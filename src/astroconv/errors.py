"""
astroconv.errors — Exception Hierarchy
========================================

Every failure raised by the library derives from :class:`AstroconvError`, so
callers can catch the whole family or one category.  Nothing here retries:
a failed fit or propagation aborts the current operation.
"""

from typing import Iterable


class AstroconvError(Exception):
    """Base class for all library errors."""


class UnknownParameterError(AstroconvError, ValueError):
    """A requested free parameter is not supported by the propagator builder."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f"unknown parameter {name!r}, supported parameters: "
            f"{', '.join(self.available) or '(none)'}"
        )


class PropagationError(AstroconvError):
    """A propagation model could not produce a state."""


class SamplingError(PropagationError):
    """Propagation failed while sampling a trajectory."""


class ObjectiveEvaluationError(PropagationError):
    """The fit objective could not model a candidate parameter vector."""


class ConvergenceError(AstroconvError):
    """The optimizer exhausted its evaluation budget without converging."""

    def __init__(self, evaluations: int, max_evaluations: int):
        self.evaluations = evaluations
        self.max_evaluations = max_evaluations
        super().__init__(
            f"maximal count ({max_evaluations}) exceeded: "
            f"{evaluations} objective evaluations without convergence"
        )


class EOPRangeError(AstroconvError, ValueError):
    """A date falls outside the span covered by an EOP history."""

    def __init__(self, mjd: float, start: float, end: float):
        self.mjd = mjd
        self.start = start
        self.end = end
        super().__init__(
            f"no Earth orientation data for MJD {mjd}, "
            f"history covers [{start}, {end}]"
        )
