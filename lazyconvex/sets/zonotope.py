"""
Zonotopes and planar line segments.
"""

from __future__ import annotations

from typing import List

import numpy as np

from ..exceptions import DimensionMismatchError
from ..tolerance import _leq, isapproxzero, isapprox_vector
from ..utils import as_matrix, as_vector, check_direction, right_turn
from .abstract import AbstractZonotope


class Zonotope(AbstractZonotope):
    """
    A zonotope `{c + G xi : xi in [-1, 1]^p}`.

    Args:
        center: The center c, of length n.
        generators: The generator matrix G of shape (n, p), one generator
            per column.
    """

    def __init__(self, center, generators) -> None:
        center = as_vector(center, copy=True)
        generators = as_matrix(generators)
        if generators.shape[0] != center.shape[0]:
            raise DimensionMismatchError(
                f"Generator matrix with {generators.shape[0]} rows does not match "
                f"a center of length {center.shape[0]}."
            )
        self._center = center
        self._generators = np.array(generators)

    @property
    def center(self) -> np.ndarray:
        return self._center

    @property
    def generators(self) -> np.ndarray:
        return self._generators

    def genmat(self) -> np.ndarray:
        return self._generators

    def order(self) -> float:
        """The ratio of the number of generators to the dimension."""
        return self.ngens() / self.dim

    def remove_zero_generators(self) -> Zonotope:
        """Returns an equivalent zonotope without zero columns."""
        G = self._generators
        keep = [j for j in range(G.shape[1]) if not all(isapproxzero(g) for g in G[:, j])]
        return Zonotope(self._center, G[:, keep])

    def translate(self, v) -> Zonotope:
        v = check_direction(v, self.dim)
        return Zonotope(self._center + v, self._generators)

    @classmethod
    def random(cls, dim: int = 2, rng=None, ngens: int = None) -> Zonotope:
        rng = np.random.default_rng(rng)
        ngens = dim if ngens is None else ngens
        return cls(rng.standard_normal(dim), rng.standard_normal((dim, ngens)))

    def __repr__(self) -> str:
        return f"Zonotope({self._center.tolist()}, {self._generators.tolist()})"


class LineSegment(AbstractZonotope):
    """
    A line segment between two points of the plane.

    Args:
        p: The first end point.
        q: The second end point.
    """

    def __init__(self, p, q) -> None:
        p = as_vector(p, copy=True)
        q = as_vector(q, copy=True)
        if p.shape[0] != 2 or q.shape[0] != 2:
            raise DimensionMismatchError("A line segment is defined by two points of the plane.")
        self._p = p
        self._q = q

    @property
    def p(self) -> np.ndarray:
        return self._p

    @property
    def q(self) -> np.ndarray:
        return self._q

    @property
    def dim(self) -> int:
        return 2

    @property
    def center(self) -> np.ndarray:
        return (self._p + self._q) / 2

    def genmat(self) -> np.ndarray:
        g = (self._q - self._p) / 2
        if all(isapproxzero(gi) for gi in g):
            return np.zeros((2, 0))
        return g.reshape(2, 1)

    def support_vector(self, d) -> np.ndarray:
        """Returns q if `d . (q - p) >= 0`, and p otherwise."""
        d = check_direction(d, 2)
        if np.dot(d, self._q - self._p) >= 0:
            return np.array(self._q)
        return np.array(self._p)

    def is_element(self, x) -> bool:
        """
        A point lies on the segment if it is collinear with the end points
        and inside their bounding box.
        """
        x = check_direction(x, 2)
        p, q = self._p, self._q
        if not isapproxzero(right_turn(p, q, x)):
            return False
        return all(
            _leq(min(pi, qi), xi) and _leq(xi, max(pi, qi)) for pi, qi, xi in zip(p, q, x)
        )

    def vertices_list(self) -> List[np.ndarray]:
        if isapprox_vector(self._p, self._q):
            return [np.array(self._p)]
        return [np.array(self._p), np.array(self._q)]

    def constraints_list(self) -> List:
        """
        The two half-spaces bounding the supporting line plus one half-space
        at each end point.
        """
        from .halfspaces import HalfSpace

        p, q = self._p, self._q
        u = q - p
        if all(isapproxzero(ui) for ui in u):
            return [
                HalfSpace([1.0, 0.0], p[0]),
                HalfSpace([-1.0, 0.0], -p[0]),
                HalfSpace([0.0, 1.0], p[1]),
                HalfSpace([0.0, -1.0], -p[1]),
            ]
        normal = np.array([-u[1], u[0]])
        return [
            HalfSpace(normal, np.dot(normal, p)),
            HalfSpace(-normal, -np.dot(normal, p)),
            HalfSpace(u, np.dot(u, q)),
            HalfSpace(-u, -np.dot(u, p)),
        ]

    def translate(self, v) -> LineSegment:
        v = check_direction(v, 2)
        return LineSegment(self._p + v, self._q + v)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> LineSegment:
        if dim != 2:
            raise ValueError("A line segment is two-dimensional.")
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(2), rng.standard_normal(2))

    def __repr__(self) -> str:
        return f"LineSegment({self._p.tolist()}, {self._q.tolist()})"
