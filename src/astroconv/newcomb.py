"""
astroconv.newcomb — Modified Newcomb Operators
================================================

Modified Newcomb operators Y[ρ,σ](n, s) appear in the series expansions of
the semi-analytical satellite theory.  They obey the recurrence (Danielson,
eq. 2.7.3-(12)(13))::

    4(ρ + σ) Y[ρ,σ](n,s) =   2(2s − n) Y[ρ−1,σ](n,s+1)
                           +  (s − n)  Y[ρ−2,σ](n,s+2)
                           − 2(2s + n) Y[ρ,σ−1](n,s−1)
                           −  (s + n)  Y[ρ,σ−2](n,s−2)
                           + 2(2ρ + 2σ + 2 + 3n) Y[ρ−1,σ−1](n,s)

with Y[ρ,σ] = 0 whenever an index is negative, and the seeds::

    Y[0,0] = 1      Y[1,0] = s − n/2      Y[0,1] = −s − n/2

Each operator is stored as a polynomial list (see
:mod:`astroconv.polynomials`): polynomials in ``s`` indexed by the power of
``n``.

Operators are generated along anti-diagonals of constant ρ + σ::

    Y[0,0]
    Y[1,0]
    Y[2,0] Y[1,1]
    Y[3,0] Y[2,1]
    Y[4,0] Y[3,1] Y[2,2]
    ...

A :class:`NewcombOperators` instance is an append-only cache: values are
pure functions of (ρ, σ), so entries are never invalidated and the computed
frontiers only move forward.  Extension is serialized by a lock and new
entries are stored before the frontier that exposes them is advanced, so
concurrent readers never see a frontier without its entries.
"""

import logging
import threading
from functools import reduce

from .polynomials import (
    PolynomialList,
    evaluate_polynomial_list,
    multiply_polynomial_list,
    polynomial_list,
    shift_polynomial_list,
    sum_polynomial_list,
    zero_list,
)

logger = logging.getLogger(__name__)


def _seeds() -> dict[tuple[int, int], PolynomialList]:
    return {
        (0, 0): polynomial_list([1.0]),
        (1, 0): polynomial_list([0.0, 1.0], [-0.5]),
        (0, 1): polynomial_list([0.0, -1.0], [-0.5]),
    }


def recurrence_coefficients(rho: int, sigma: int) -> tuple[PolynomialList, ...]:
    """The five recurrence factors for (ρ, σ), each divided by 4(ρ + σ)."""
    den = 4.0 * (rho + sigma)
    return (
        polynomial_list([0.0, 4.0 / den], [-2.0 / den]),        # 2(2s − n)
        polynomial_list([0.0, 1.0 / den], [-1.0 / den]),        # (s − n)
        polynomial_list([0.0, -4.0 / den], [-2.0 / den]),       # −2(2s + n)
        polynomial_list([0.0, -1.0 / den], [-1.0 / den]),       # −(s + n)
        polynomial_list([4.0 * (rho + sigma + 1) / den], [6.0 / den]),  # 2(2ρ+2σ+2+3n)
    )


class NewcombOperators:
    """Lazily extended cache of Modified Newcomb operator polynomials."""

    def __init__(self):
        self._lock = threading.Lock()
        self._polynomials = _seeds()
        self._direct_order = 0
        self._reverse_order = 0

    @property
    def computed_direct_order(self) -> int:
        """Highest ρ for which every Y[ρ',σ'] with σ' ≤ ρ' ≤ ρ is cached."""
        return self._direct_order

    @property
    def computed_reverse_order(self) -> int:
        """Highest σ for which every Y[ρ',σ'] with ρ' < σ' ≤ σ is cached."""
        return self._reverse_order

    def __len__(self) -> int:
        return len(self._polynomials)

    def __contains__(self, key) -> bool:
        return tuple(key) in self._polynomials

    def clear(self) -> None:
        """Drop every computed operator, keeping only the seeds."""
        with self._lock:
            self._polynomials = _seeds()
            self._direct_order = 0
            self._reverse_order = 0

    def get_polynomials(self, rho: int, sigma: int) -> PolynomialList:
        """Polynomial list of Y[ρ,σ], computing it first if needed."""
        self._ensure(rho, sigma)
        return self._polynomials[(rho, sigma)]

    def get_value(self, rho: int, sigma: int, n: float, s: float) -> float:
        """Evaluate Y[ρ,σ](n, s)."""
        return evaluate_polynomial_list(self.get_polynomials(rho, sigma), n, s)

    # ── cache extension ─────────────────────────────────────────────────────

    def _covered(self, rho: int, sigma: int) -> bool:
        if rho < sigma:
            return sigma <= self._reverse_order
        return rho <= self._direct_order

    def _ensure(self, rho: int, sigma: int) -> None:
        if rho < 0 or sigma < 0:
            raise ValueError(f"Newcomb operator indices must be >= 0, got ({rho}, {sigma})")
        if self._covered(rho, sigma):
            return
        with self._lock:
            if rho < sigma:
                if sigma > self._reverse_order:
                    if sigma > self._direct_order:
                        self._compute_up_to_degree(sigma, self._direct_order, False)
                    self._compute_up_to_degree(sigma, self._reverse_order, True)
            elif rho > self._direct_order:
                self._compute_up_to_degree(rho, self._direct_order, False)

    def _compute_up_to_degree(self, order: int, frontier: int, reverse: bool) -> None:
        logger.debug("extending Newcomb operators %s order %d -> %d",
                     "reverse" if reverse else "direct", frontier, order)
        # 2·order + 1 anti-diagonals are needed to reach Y[order, order]
        for i in range(2 * min(frontier, order) + 1, 2 * order + 1):
            k, j = i, 0
            while j <= k:
                key = (j, k) if reverse else (k, j)
                self._polynomials[key] = self._recurrence(key[0], key[1], i + j + 1)
                j += 1
                k -= 1

        # publish only once every entry of the sweep is stored
        self._direct_order = max(self._direct_order, order)
        if reverse:
            self._reverse_order = order

    def _recurrence(self, rho: int, sigma: int, length: int) -> PolynomialList:
        Y = self._polynomials
        c0, c1, c2, c3, c4 = recurrence_coefficients(rho, sigma)
        # (guard, factor, source index, shift in s)
        terms = (
            (rho - 1 >= sigma, c0, (rho - 1, sigma), 1),
            (rho - 2 >= sigma, c1, (rho - 2, sigma), 2),
            (sigma - 1 >= 0, c2, (rho, sigma - 1), -1),
            (sigma - 2 >= 0, c3, (rho, sigma - 2), -2),
            (rho - 1 >= 0 and sigma - 1 >= 0, c4, (rho - 1, sigma - 1), 0),
        )
        return reduce(
            lambda acc, term: sum_polynomial_list(
                acc,
                multiply_polynomial_list(
                    term[1],
                    shift_polynomial_list(Y[term[2]], term[3]) if term[3] else Y[term[2]],
                ),
            ),
            (t for t in terms if t[0]),
            zero_list(length),
        )


# ════════════════════════════════════════════════════════════════════════════
#  Shared instance
# ════════════════════════════════════════════════════════════════════════════

_default: NewcombOperators | None = None
_default_lock = threading.Lock()


def default_operators() -> NewcombOperators:
    """Process-wide cache, created on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = NewcombOperators()
        return _default


def reset_default_operators() -> None:
    """Discard the process-wide cache; the next access starts from the seeds."""
    global _default
    with _default_lock:
        _default = None


def get_value(rho: int, sigma: int, n: float, s: float) -> float:
    """Evaluate Y[ρ,σ](n, s) with the shared cache."""
    return default_operators().get_value(rho, sigma, n, s)


def get_polynomials(rho: int, sigma: int) -> PolynomialList:
    """Polynomial list of Y[ρ,σ] from the shared cache."""
    return default_operators().get_polynomials(rho, sigma)
