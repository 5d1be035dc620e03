"""
Balls in the 1-norm and the 2-norm.
"""

from __future__ import annotations

import itertools
from typing import List

import numpy as np

from ..convex_set import ConvexSet
from ..tolerance import _leq, isapproxzero
from ..utils import as_vector, check_direction
from .abstract import AbstractPolytope


class Ball2(ConvexSet):
    """
    A Euclidean ball `{x : ||x - c||_2 <= r}`.

    Args:
        center: The center c.
        radius: The non-negative radius r.
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

    @property
    def dim(self) -> int:
        return self._center.shape[0]

    def support_vector(self, d) -> np.ndarray:
        """
        Returns `c + r d / ||d||`, or the center if `d` is zero.
        """
        d = check_direction(d, self.dim)
        norm = np.linalg.norm(d.astype(float))
        if isapproxzero(norm):
            return np.array(self._center)
        return self._center + self._radius * d / norm

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return np.dot(d, self._center) + self._radius * np.linalg.norm(d.astype(float))

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        return _leq(np.linalg.norm((x - self._center).astype(float)), self._radius)

    def is_bounded(self) -> bool:
        return True

    def an_element(self) -> np.ndarray:
        return np.array(self._center)

    def translate(self, v) -> Ball2:
        v = check_direction(v, self.dim)
        return Ball2(self._center + v, self._radius)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> Ball2:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim), abs(rng.standard_normal()))

    def __repr__(self) -> str:
        return f"Ball2({self._center.tolist()}, {self._radius})"


class Ball1(AbstractPolytope):
    """
    A ball in the 1-norm (cross-polytope) `{x : ||x - c||_1 <= r}`.

    Args:
        center: The center c.
        radius: The non-negative radius r.
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

    @property
    def dim(self) -> int:
        return self._center.shape[0]

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        v = np.array(self._center)
        i = int(np.argmax(np.abs(d)))
        if d[i] > 0:
            v[i] = v[i] + self._radius
        elif d[i] < 0:
            v[i] = v[i] - self._radius
        return v

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return np.dot(d, self._center) + self._radius * np.max(np.abs(d))

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        return _leq(np.sum(np.abs(x - self._center)), self._radius)

    def vertices_list(self) -> List[np.ndarray]:
        if self._radius == 0:
            return [np.array(self._center)]
        vertices = []
        for i in range(self.dim):
            for sign in (1, -1):
                v = np.array(self._center)
                v[i] = v[i] + sign * self._radius
                vertices.append(v)
        return vertices

    def constraints_list(self) -> List:
        """One constraint `s . x <= s . c + r` per sign vector s."""
        from .halfspaces import HalfSpace

        constraints = []
        for signs in itertools.product((1.0, -1.0), repeat=self.dim):
            s = np.array(signs)
            constraints.append(HalfSpace(s, np.dot(s, self._center) + self._radius))
        return constraints

    def an_element(self) -> np.ndarray:
        return np.array(self._center)

    def translate(self, v) -> Ball1:
        v = check_direction(v, self.dim)
        return Ball1(self._center + v, self._radius)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> Ball1:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim), abs(rng.standard_normal()))

    def __repr__(self) -> str:
        return f"Ball1({self._center.tolist()}, {self._radius})"
