"""
Abstract families of explicit convex sets.

The hierarchy mirrors the inclusions between the families:

    ConvexSet
      AbstractPolyhedron          finite list of half-spaces
        AbstractPolytope          bounded polyhedron with a vertex list
          AbstractZonotope        center plus bounded generator combination
            AbstractHyperrectangle    axis-aligned box
              AbstractSingleton       single point

Each level implements the evaluation protocol once in terms of the data
that the level exposes, so that concrete classes only store their fields.
"""

from __future__ import annotations

import itertools
from abc import abstractmethod
from typing import List

import numpy as np

from ..backends import get_polyhedral_backend, require_feasibility, solve_lp
from ..convex_hull import convex_hull
from ..convex_set import ConvexSet
from ..exceptions import EmptySetError
from ..tolerance import _leq, isapprox_vector
from ..utils import abs_sum, as_vector, check_direction


class AbstractPolyhedron(ConvexSet):
    """
    A convex set given by a finite list of linear constraints.

    Subclasses provide `constraints_list`. Membership is the conjunction of
    the constraints.
    """

    @abstractmethod
    def constraints_list(self) -> List:
        """Returns the list of `HalfSpace` constraints."""

    def is_polyhedral(self) -> bool:
        return True

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        return all(_leq(np.dot(c.a, x), c.b) for c in self.constraints_list())

    def tosimplehrep(self):
        """
        Returns the constraints as a pair `(A, b)` describing `A x <= b`.
        """
        constraints = self.constraints_list()
        if not constraints:
            return np.zeros((0, self.dim)), np.zeros(0)
        A = np.array([c.a for c in constraints])
        b = np.array([c.b for c in constraints])
        return A, b


class AbstractPolytope(AbstractPolyhedron):
    """
    A bounded polyhedron.

    The support vector defaults to an argmax scan over the vertices and the
    constraints default to a conversion by the polyhedral backend.
    """

    def is_bounded(self) -> bool:
        return True

    def support_vector(self, d) -> np.ndarray:
        vertices = self.vertices_list()
        if not vertices:
            raise EmptySetError(
                f"The support vector of an empty {self.__class__.__name__} is undefined."
            )
        d = check_direction(d, self.dim)
        best, best_value = vertices[0], np.dot(d, vertices[0])
        for v in vertices[1:]:
            value = np.dot(d, v)
            if value > best_value:
                best, best_value = v, value
        return np.array(best)

    def support_function(self, d):
        vertices = self.vertices_list()
        if not vertices:
            raise EmptySetError(
                f"The support function of an empty {self.__class__.__name__} is undefined."
            )
        d = check_direction(d, self.dim)
        return max(np.dot(d, v) for v in vertices)

    def constraints_list(self) -> List:
        from .halfspaces import HalfSpace

        A, b = get_polyhedral_backend().to_constraints(self.vertices_list())
        return [HalfSpace(ai, bi) for ai, bi in zip(A, b)]

    def an_element(self) -> np.ndarray:
        vertices = self.vertices_list()
        if not vertices:
            raise EmptySetError(f"An empty {self.__class__.__name__} has no element.")
        return np.array(vertices[0])


class AbstractZonotope(AbstractPolytope):
    """
    A zonotope `{c + G xi : xi in [-1, 1]^p}` given by its center c and
    generator matrix G (one generator per column).
    """

    @property
    @abstractmethod
    def center(self) -> np.ndarray:
        """The center of the zonotope."""

    @abstractmethod
    def genmat(self) -> np.ndarray:
        """The generator matrix, of shape (dim, ngens)."""

    @property
    def dim(self) -> int:
        return self.center.shape[0]

    def ngens(self) -> int:
        """The number of generators."""
        return self.genmat().shape[1]

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        G = self.genmat()
        return self.center + G @ np.sign(G.T @ d)

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return np.dot(d, self.center) + abs_sum(d, self.genmat())

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        G = self.genmat()
        if G.shape[1] == 0:
            return isapprox_vector(x, self.center)
        res = solve_lp(
            np.zeros(G.shape[1]), G, "=" * self.dim, x - self.center, lb=-1.0, ub=1.0
        )
        return require_feasibility(res)

    def an_element(self) -> np.ndarray:
        return np.array(self.center)

    def vertices_list(self) -> List[np.ndarray]:
        """
        Returns the vertices, computed from the 2^p generator sign patterns.
        """
        c, G = self.center, self.genmat()
        p = G.shape[1]
        if p == 0:
            return [np.array(c)]
        points = [c + G @ np.array(signs) for signs in itertools.product((-1.0, 1.0), repeat=p)]
        return convex_hull(points)

    def constraints_list(self) -> List:
        if self.dim == 2:
            from .polytopes import VPolygon

            return VPolygon(self.vertices_list(), apply_convex_hull=False).constraints_list()
        return super().constraints_list()


class AbstractHyperrectangle(AbstractZonotope):
    """
    An axis-aligned box given by its center and per-axis radius.
    """

    @abstractmethod
    def radius_hyperrectangle(self) -> np.ndarray:
        """The vector of per-axis radii."""

    def genmat(self) -> np.ndarray:
        r = self.radius_hyperrectangle()
        nonzero = [i for i, ri in enumerate(r) if ri != 0]
        G = np.zeros((self.dim, len(nonzero)), dtype=r.dtype)
        for j, i in enumerate(nonzero):
            G[i, j] = r[i]
        return G

    def low(self) -> np.ndarray:
        """The vector of lower bounds."""
        return self.center - self.radius_hyperrectangle()

    def high(self) -> np.ndarray:
        """The vector of upper bounds."""
        return self.center + self.radius_hyperrectangle()

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return self.center + np.sign(d) * self.radius_hyperrectangle()

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return np.dot(d, self.center) + np.dot(np.abs(d), self.radius_hyperrectangle())

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        c, r = self.center, self.radius_hyperrectangle()
        return all(_leq(abs(xi - ci), ri) for xi, ci, ri in zip(x, c, r))

    def vertices_list(self) -> List[np.ndarray]:
        c, r = self.center, self.radius_hyperrectangle()
        axes = [(ci - ri, ci + ri) if ri != 0 else (ci,) for ci, ri in zip(c, r)]
        return [np.array(corner) for corner in itertools.product(*axes)]

    def constraints_list(self) -> List:
        from .halfspaces import HalfSpace

        n = self.dim
        low, high = self.low(), self.high()
        constraints = []
        for i in range(n):
            e = np.zeros(n)
            e[i] = 1.0
            constraints.append(HalfSpace(e, high[i]))
            constraints.append(HalfSpace(-e, -low[i]))
        return constraints


class AbstractSingleton(AbstractHyperrectangle):
    """
    A set consisting of a single point.
    """

    @property
    @abstractmethod
    def element(self) -> np.ndarray:
        """The unique element."""

    @property
    def center(self) -> np.ndarray:
        return self.element

    def radius_hyperrectangle(self) -> np.ndarray:
        return np.zeros(self.dim)

    def genmat(self) -> np.ndarray:
        return np.zeros((self.dim, 0))

    def support_vector(self, d) -> np.ndarray:
        check_direction(d, self.dim)
        return np.array(self.element)

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return np.dot(d, self.element)

    def is_element(self, x) -> bool:
        x = as_vector(x)
        return x.shape[0] == self.dim and isapprox_vector(x, self.element)

    def vertices_list(self) -> List[np.ndarray]:
        return [np.array(self.element)]

    def an_element(self) -> np.ndarray:
        return np.array(self.element)
