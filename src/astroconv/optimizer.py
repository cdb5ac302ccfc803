"""
astroconv.optimizer — Weighted Nonlinear Least Squares
========================================================

Levenberg–Marquardt fitting of a vector model to a target vector::

    minimize   Σᵢ wᵢ · (targetᵢ − modelᵢ(p))²

built on :func:`scipy.optimize.least_squares`.  Residuals are scaled by
√wᵢ.  MINPACK's Levenberg–Marquardt (``method="lm"``) is used whenever there
are at least as many residuals as unknowns; underdetermined problems (e.g. a
one-point warm-up with extra free parameters) fall back to the trust-region
reflective solver, which accepts them.

The evaluation budget is enforced here, counting every call of the model
including finite-difference steps.  Running out of budget is a
:class:`~astroconv.errors.ConvergenceError`; errors raised by the model
itself reach the caller unchanged.
"""

import logging
from typing import NamedTuple, Protocol

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import least_squares

from .config import DEFAULT_JACOBIAN, DEFAULT_THRESHOLD, JACOBIAN_SCHEMES
from .errors import ConvergenceError, ObjectiveEvaluationError

logger = logging.getLogger(__name__)


class ObjectiveFunction(Protocol):
    """Vector model of the fit: parameter point → modelled components.

    Implementations may also provide ``jacobian(point) -> (m, n) array``; it
    is then used instead of finite differences.
    """

    def value(self, point: NDArray) -> NDArray: ...


class Optimum(NamedTuple):
    """Outcome of a converged optimization."""
    point: NDArray
    evaluations: int
    cost: float         # ½ Σ wᵢ rᵢ²
    status: int         # scipy termination status (> 0)


class _BudgetExhausted(Exception):
    pass


class LevenbergMarquardtOptimizer:
    """Weighted least-squares optimizer with an evaluation budget.

    Parameters
    ----------
    threshold : float — relative convergence tolerance on cost reduction,
        parameter step and gradient (``ftol``/``xtol``/``gtol``)
    jacobian : str — finite-difference scheme, '2-point' or '3-point'
    """

    def __init__(self, threshold: float = DEFAULT_THRESHOLD,
                 jacobian: str = DEFAULT_JACOBIAN):
        if not threshold > 0.0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        if jacobian not in JACOBIAN_SCHEMES:
            raise ValueError(f"jacobian must be one of {JACOBIAN_SCHEMES}, got {jacobian!r}")
        self.threshold = threshold
        self.jacobian = jacobian

    def optimize(self, max_evaluations: int, objective: ObjectiveFunction,
                 target: NDArray, weight: NDArray,
                 initial_guess: NDArray) -> Optimum:
        """Fit ``objective`` to ``target`` starting from ``initial_guess``.

        Raises
        ------
        ConvergenceError — more than ``max_evaluations`` model evaluations
        ObjectiveEvaluationError — the model returned a malformed vector
        """
        target = np.asarray(target, dtype=np.float64)
        weight = np.asarray(weight, dtype=np.float64)
        x0 = np.asarray(initial_guess, dtype=np.float64)
        if target.shape != weight.shape:
            raise ValueError(f"target {target.shape} and weight {weight.shape} differ in shape")
        if np.any(weight <= 0.0):
            raise ValueError("weights must be strictly positive")

        sqrt_w = np.sqrt(weight)
        evaluations = 0

        def residuals(point):
            nonlocal evaluations
            if evaluations >= max_evaluations:
                raise _BudgetExhausted()
            evaluations += 1
            model = np.asarray(objective.value(point), dtype=np.float64)
            if model.shape != target.shape:
                raise ObjectiveEvaluationError(
                    f"model returned shape {model.shape}, expected {target.shape}"
                )
            if not np.all(np.isfinite(model)):
                raise ObjectiveEvaluationError("model returned non-finite values")
            return sqrt_w * (model - target)

        jac = self.jacobian
        if callable(getattr(objective, "jacobian", None)):
            def jac(point):
                return sqrt_w[:, np.newaxis] * np.asarray(objective.jacobian(point))

        method = "lm" if target.size >= x0.size else "trf"
        try:
            result = least_squares(
                residuals, x0, jac=jac, method=method, x_scale="jac",
                ftol=self.threshold, xtol=self.threshold, gtol=self.threshold,
                max_nfev=max_evaluations,
            )
        except _BudgetExhausted:
            raise ConvergenceError(evaluations, max_evaluations) from None

        if result.status == 0:
            raise ConvergenceError(evaluations, max_evaluations)

        logger.debug("%s converged after %d evaluations (status %d, cost %.6e)",
                     method, evaluations, result.status, result.cost)
        return Optimum(result.x, evaluations, float(result.cost), int(result.status))
