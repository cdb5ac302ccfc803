"""
astroconv.parameters — Estimable Parameters
=============================================

A :class:`Parameter` is a named value that a fitting process may adjust
(``estimated=True``) or must keep fixed.  Parameters compare, sort and hash
by name only, so a set of parameters never holds two entries with the same
name.
"""

from functools import total_ordering

import numpy as np
from numpy.typing import NDArray


@total_ordering
class Parameter:
    """Named, possibly multi-dimensional, estimable value."""

    def __init__(self, name: str, value, estimated: bool = False):
        self._name = name
        self._value = np.atleast_1d(np.array(value, dtype=np.float64))
        if self._value.ndim != 1:
            raise ValueError(f"parameter {name!r} value must be 1-D")
        self.estimated = bool(estimated)

    @property
    def name(self) -> str:
        return self._name

    @property
    def dimension(self) -> int:
        return self._value.size

    @property
    def value(self) -> NDArray:
        """Copy of the current value."""
        return self._value.copy()

    @value.setter
    def value(self, value) -> None:
        new = np.atleast_1d(np.asarray(value, dtype=np.float64))
        if new.shape != self._value.shape:
            raise ValueError(
                f"parameter {self._name!r} has dimension {self.dimension}, "
                f"cannot set value of shape {new.shape}"
            )
        self._value[:] = new

    def __eq__(self, other):
        if not isinstance(other, Parameter):
            return NotImplemented
        return self._name == other._name

    def __lt__(self, other):
        if not isinstance(other, Parameter):
            return NotImplemented
        return self._name < other._name

    def __hash__(self):
        return hash(self._name)

    def __repr__(self):
        flag = "estimated" if self.estimated else "fixed"
        return f"Parameter({self._name!r}, {self._value.tolist()}, {flag})"
