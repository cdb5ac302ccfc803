"""
astroconv.config — Converter Settings
=======================================

Defaults for propagator conversion, optionally overridden from the
environment::

    ASTROCONV_THRESHOLD       convergence threshold       (default 1e-10)
    ASTROCONV_MAX_ITERATIONS  objective evaluation budget (default 1000)
    ASTROCONV_JACOBIAN        '2-point' or '3-point'      (default '2-point')
"""

import os
from dataclasses import dataclass

DEFAULT_THRESHOLD = 1e-10
DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_JACOBIAN = "2-point"

JACOBIAN_SCHEMES = ("2-point", "3-point")


@dataclass(frozen=True)
class ConverterSettings:
    """Optimizer configuration for a :class:`~astroconv.converter.PropagatorConverter`."""
    threshold: float = DEFAULT_THRESHOLD
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    jacobian: str = DEFAULT_JACOBIAN

    def __post_init__(self):
        if not self.threshold > 0.0:
            raise ValueError(f"threshold must be positive, got {self.threshold}")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.jacobian not in JACOBIAN_SCHEMES:
            raise ValueError(
                f"jacobian must be one of {JACOBIAN_SCHEMES}, got {self.jacobian!r}"
            )

    @classmethod
    def from_env(cls, environ=None) -> "ConverterSettings":
        """Build settings from ``ASTROCONV_*`` environment variables."""
        env = os.environ if environ is None else environ
        try:
            threshold = float(env.get("ASTROCONV_THRESHOLD", DEFAULT_THRESHOLD))
            max_iterations = int(env.get("ASTROCONV_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS))
        except ValueError as ex:
            raise ValueError(f"invalid converter setting in environment: {ex}") from ex
        jacobian = env.get("ASTROCONV_JACOBIAN", DEFAULT_JACOBIAN)
        return cls(threshold=threshold, max_iterations=max_iterations, jacobian=jacobian)
