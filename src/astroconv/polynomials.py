"""
astroconv.polynomials — Polynomial Lists in (n, s)
====================================================

A *polynomial list* represents a function of two variables as a power series
in ``n`` whose coefficients are polynomials in ``s``::

    F(n, s) = P₀(s) + P₁(s)·n + P₂(s)·n² + ...   ⇔   (P₀, P₁, P₂, ...)

Each ``Pₖ`` is a :class:`numpy.polynomial.Polynomial`; lists are plain
tuples and every operation returns a new tuple.
"""

from functools import reduce
from typing import Sequence

from numpy.polynomial import Polynomial

PolynomialList = tuple[Polynomial, ...]

ZERO = Polynomial([0.0])


def polynomial_list(*coefficients: Sequence[float]) -> PolynomialList:
    """Build a list from per-power-of-``n`` coefficient sequences (in ``s``)."""
    return tuple(Polynomial(list(c)) for c in coefficients)


def zero_list(length: int) -> PolynomialList:
    """``length`` zero polynomials."""
    return (ZERO,) * length


def sum_polynomial_list(a: Sequence[Polynomial],
                        b: Sequence[Polynomial]) -> PolynomialList:
    """Term-by-term sum; the shorter list is padded with zeros."""
    common = min(len(a), len(b))
    tail = a[common:] if len(a) > len(b) else b[common:]
    return tuple(a[k] + b[k] for k in range(common)) + tuple(tail)


def multiply_polynomial_list(a: Sequence[Polynomial],
                             b: Sequence[Polynomial]) -> PolynomialList:
    """Product of two series in ``n`` (discrete convolution).

    The result has ``len(a) + len(b) − 1`` terms and term ``k`` is
    ``Σ_{i+j=k} a[i]·b[j]``.
    """
    length = len(a) + len(b) - 1
    return tuple(
        reduce(lambda acc, i: acc + a[i] * b[k - i],
               range(max(0, k - len(b) + 1), min(k, len(a) - 1) + 1),
               ZERO)
        for k in range(length)
    )


def shift_polynomial_list(a: Sequence[Polynomial], shift: int) -> PolynomialList:
    """Replace each ``Pₖ(s)`` by ``Pₖ(s + shift)``.

    The shift acts on ``s`` only; powers of ``n`` are untouched.
    """
    affine = Polynomial([float(shift), 1.0])
    return tuple(p(affine) for p in a)


def evaluate_polynomial_list(a: Sequence[Polynomial], n: float, s: float) -> float:
    """Evaluate ``Σ_k a[k](s)·n^k``."""
    result = 0.0
    power = 1.0
    for p in a:
        result += p(s) * power
        power *= n
    return float(result)
