"""
astroconv — Propagator Conversion & Semi-Analytical Coefficients
==================================================================

Astrodynamics toolkit built on NumPy / SciPy:

  - **Propagator conversion** — sample any propagator (or take a state
    sample) and fit the initial state and free parameters of another model
    to it by weighted Levenberg–Marquardt least squares.
  - **Modified Newcomb operators** — lazily generated, cached polynomial
    coefficients of the semi-analytical satellite theory.
  - **Supporting models** — two-body / J2 analytical propagators and their
    builders, ECI / ECR state transforms, Earth orientation parameter
    histories, Chebyshev position/velocity ephemeris segments.

Pipeline::

    source propagator ──sample──▶ states ──targets/weights──▶ LM fit ──▶ adapted propagator

The package logs through the standard ``logging`` module under the
``astroconv`` logger and installs no handlers; see
:func:`astroconv.logging_config.configure_logging`.
"""

import logging

from .errors import (
    AstroconvError,
    UnknownParameterError,
    PropagationError,
    SamplingError,
    ObjectiveEvaluationError,
    ConvergenceError,
    EOPRangeError,
)

from .config import ConverterSettings

from .utils import (
    MU_EARTH,
    R_EARTH,
    J2,
    OMEGA_EARTH,
    DAILY_SECONDS,
    julian_date,
    jd_to_mjd,
    mjd_to_jd,
    shift_epoch,
    gmst,
)

from .eop import EOPEntry, EOPHistory
from .frames import FRAMES, convert_state, eci_to_ecr_matrix
from .state import SpacecraftState
from .parameters import Parameter

from .orbits import (
    keplerian_to_eci,
    eci_to_keplerian,
    propagate_kepler,
    propagate_j2,
    compute_orbital_period,
    compute_mean_motion,
)

from .propagators import (
    Propagator,
    KeplerianPropagator,
    J2Propagator,
    PropagatorBuilder,
    KeplerianPropagatorBuilder,
    J2PropagatorBuilder,
)

from .chebyshev import PosVelChebyshev

from .polynomials import (
    polynomial_list,
    multiply_polynomial_list,
    sum_polynomial_list,
    shift_polynomial_list,
    evaluate_polynomial_list,
)

from .newcomb import (
    NewcombOperators,
    default_operators,
    reset_default_operators,
)

from .sampling import sample_trajectory
from .residuals import build_targets, compute_rms
from .optimizer import LevenbergMarquardtOptimizer, Optimum
from .converter import PropagatorConverter, PropagatedPVFunction, ConversionResult
from .logging_config import configure_logging, reset_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    # ── Errors ──
    "AstroconvError", "UnknownParameterError", "PropagationError",
    "SamplingError", "ObjectiveEvaluationError", "ConvergenceError",
    "EOPRangeError",
    # ── Configuration ──
    "ConverterSettings",
    # ── Constants / time ──
    "MU_EARTH", "R_EARTH", "J2", "OMEGA_EARTH", "DAILY_SECONDS",
    "julian_date", "jd_to_mjd", "mjd_to_jd", "shift_epoch", "gmst",
    # ── Earth orientation / frames / states ──
    "EOPEntry", "EOPHistory",
    "FRAMES", "convert_state", "eci_to_ecr_matrix",
    "SpacecraftState", "Parameter",
    # ── Orbital mechanics ──
    "keplerian_to_eci", "eci_to_keplerian", "propagate_kepler", "propagate_j2",
    "compute_orbital_period", "compute_mean_motion",
    # ── Propagators ──
    "Propagator", "KeplerianPropagator", "J2Propagator",
    "PropagatorBuilder", "KeplerianPropagatorBuilder", "J2PropagatorBuilder",
    "PosVelChebyshev",
    # ── Newcomb operators ──
    "polynomial_list", "multiply_polynomial_list", "sum_polynomial_list",
    "shift_polynomial_list", "evaluate_polynomial_list",
    "NewcombOperators", "default_operators", "reset_default_operators",
    # ── Conversion ──
    "sample_trajectory", "build_targets", "compute_rms",
    "LevenbergMarquardtOptimizer", "Optimum",
    "PropagatorConverter", "PropagatedPVFunction", "ConversionResult",
    # ── Logging ──
    "configure_logging", "reset_logging",
]
