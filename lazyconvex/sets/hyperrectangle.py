"""
Axis-aligned boxes: hyperrectangles, infinity-norm balls and intervals.
"""

from __future__ import annotations

import numpy as np

from ..exceptions import DimensionMismatchError
from ..utils import as_vector, check_direction
from .abstract import AbstractHyperrectangle


class Hyperrectangle(AbstractHyperrectangle):
    """
    A box `{x : |x_i - c_i| <= r_i}` given by its center and radius vector.

    Args:
        center: The center c.
        radius: The non-negative radius vector r.
        check_bounds: If True (default), negative radius entries raise a
            ValueError.
    """

    def __init__(self, center, radius, check_bounds: bool = True) -> None:
        center = as_vector(center, copy=True)
        radius = as_vector(radius, copy=True)
        if center.shape != radius.shape:
            raise DimensionMismatchError(
                f"Center of length {center.shape[0]} and radius of length "
                f"{radius.shape[0]} do not match."
            )
        if check_bounds and any(ri < 0 for ri in radius):
            raise ValueError(f"The radius of a hyperrectangle must be non-negative, got {radius}.")
        self._center = center
        self._radius = radius

    @classmethod
    def from_bounds(cls, low, high, check_bounds: bool = True) -> Hyperrectangle:
        """Creates the box `[low, high]` from its lower and upper corners."""
        low = as_vector(low)
        high = as_vector(high)
        return cls((high + low) / 2, (high - low) / 2, check_bounds=check_bounds)

    @property
    def center(self) -> np.ndarray:
        return self._center

    @property
    def radius(self) -> np.ndarray:
        return self._radius

    def radius_hyperrectangle(self) -> np.ndarray:
        return self._radius

    def translate(self, v) -> Hyperrectangle:
        v = check_direction(v, self.dim)
        return Hyperrectangle(self._center + v, self._radius)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> Hyperrectangle:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim), np.abs(rng.standard_normal(dim)))

    def __repr__(self) -> str:
        return f"Hyperrectangle({self._center.tolist()}, {self._radius.tolist()})"


class BallInf(AbstractHyperrectangle):
    """
    A ball in the infinity norm, i.e. a hypercube with uniform radius.

    Args:
        center: The center.
        radius: The non-negative scalar radius.
    """

    def __init__(self, center, radius) -> None:
        if radius < 0:
            raise ValueError(f"The radius of a ball must be non-negative, got {radius}.")
        self._center = as_vector(center, copy=True)
        self._radius = radius

    @property
    def center(self) -> np.ndarray:
        return self._center

    @property
    def radius(self):
        return self._radius

    def radius_hyperrectangle(self) -> np.ndarray:
        r = np.empty(self.dim, dtype=np.result_type(self._center.dtype, np.asarray(self._radius).dtype))
        r[:] = self._radius
        return r

    def translate(self, v) -> BallInf:
        v = check_direction(v, self.dim)
        return BallInf(self._center + v, self._radius)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> BallInf:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim), abs(rng.standard_normal()))

    def __repr__(self) -> str:
        return f"BallInf({self._center.tolist()}, {self._radius})"


class Interval(AbstractHyperrectangle):
    """
    A closed interval `[lo, hi]` of the real line, as a one-dimensional set.
    """

    def __init__(self, lo, hi) -> None:
        if lo > hi:
            raise ValueError(f"The bounds of an interval must satisfy lo <= hi, got [{lo}, {hi}].")
        self._lo = lo
        self._hi = hi

    @property
    def lo(self):
        """The left end point."""
        return self._lo

    @property
    def hi(self):
        """The right end point."""
        return self._hi

    @property
    def dim(self) -> int:
        return 1

    @property
    def center(self) -> np.ndarray:
        return as_vector([(self._hi + self._lo) / 2])

    def radius_hyperrectangle(self) -> np.ndarray:
        return as_vector([(self._hi - self._lo) / 2])

    def low(self) -> np.ndarray:
        return as_vector([self._lo])

    def high(self) -> np.ndarray:
        return as_vector([self._hi])

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, 1)
        if d[0] > 0:
            return self.high()
        if d[0] < 0:
            return self.low()
        return self.center

    def support_function(self, d):
        d = check_direction(d, 1)
        return d[0] * (self._hi if d[0] >= 0 else self._lo)

    def vertices_list(self):
        if self._lo == self._hi:
            return [self.low()]
        return [self.low(), self.high()]

    def translate(self, v) -> Interval:
        v = check_direction(v, 1)
        return Interval(self._lo + v[0], self._hi + v[0])

    @classmethod
    def random(cls, dim: int = 1, rng=None) -> Interval:
        if dim != 1:
            raise ValueError("An interval is one-dimensional.")
        rng = np.random.default_rng(rng)
        lo, hi = sorted(rng.standard_normal(2))
        return cls(lo, hi)

    def __repr__(self) -> str:
        return f"Interval({self._lo}, {self._hi})"
