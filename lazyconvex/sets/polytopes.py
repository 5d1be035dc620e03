"""
Polytopes in vertex representation.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..backends import PolyhedralBackend, convex_combination_lp, get_polyhedral_backend, require_feasibility
from ..convex_hull import convex_hull_inplace
from ..exceptions import DimensionMismatchError, EmptySetError
from ..tolerance import _geq, isapprox_vector
from ..utils import as_vector, check_direction, right_turn
from .abstract import AbstractPolytope


def _vertex_list(vertices) -> List[np.ndarray]:
    vertices = [as_vector(v, copy=True) for v in vertices]
    if vertices and any(v.shape[0] != vertices[0].shape[0] for v in vertices):
        raise DimensionMismatchError("All vertices must have the same dimension.")
    return vertices


class VPolytope(AbstractPolytope):
    """
    A polytope given as the convex hull of a finite list of vertices.

    Args:
        vertices: The vertices, a sequence of points of equal length. The
            list may be empty, in which case the polytope is empty and has
            dimension -1.
    """

    def __init__(self, vertices=()) -> None:
        self._vertices = _vertex_list(vertices)

    @property
    def vertices(self) -> List[np.ndarray]:
        return self._vertices

    @property
    def dim(self) -> int:
        if not self._vertices:
            return -1
        return self._vertices[0].shape[0]

    def vertices_list(self) -> List[np.ndarray]:
        return list(self._vertices)

    def is_element(self, x) -> bool:
        """
        Returns True if `x` is a convex combination of the vertices.

        Decided by a feasibility linear program over the combination
        coefficients.

        Raises:
            LPSolverError: If the LP solver fails.
        """
        if not self._vertices:
            return False
        x = check_direction(x, self.dim)
        if len(self._vertices) == 1:
            return isapprox_vector(x, self._vertices[0])
        return require_feasibility(convex_combination_lp(x, self._vertices))

    def is_empty(self, witness: bool = False):
        empty = not self._vertices
        if witness:
            return (True, np.zeros(0)) if empty else (False, np.array(self._vertices[0]))
        return empty

    def remove_redundant_vertices(self, backend: Optional[PolyhedralBackend] = None) -> VPolytope:
        """Returns the polytope described by its extreme points only."""
        if len(self._vertices) <= 1:
            return VPolytope(self._vertices)
        backend = backend if backend is not None else get_polyhedral_backend()
        return VPolytope(backend.remove_redundant_vertices(self._vertices))

    def translate(self, v, inplace: bool = False) -> VPolytope:
        """
        Returns the polytope translated by `v`.

        Args:
            v: The translation vector.
            inplace: If True, the vertices are updated in place and `self`
                is returned.
        """
        if not self._vertices:
            return self
        v = check_direction(v, self.dim)
        if inplace:
            self._vertices = [u + v for u in self._vertices]
            return self
        return VPolytope([u + v for u in self._vertices])

    @classmethod
    def random(cls, dim: int = 2, rng=None, num_vertices: int = None) -> VPolytope:
        rng = np.random.default_rng(rng)
        num_vertices = dim + 1 if num_vertices is None else num_vertices
        return cls(list(rng.standard_normal((num_vertices, dim))))

    def __repr__(self) -> str:
        return f"VPolytope({[v.tolist() for v in self._vertices]})"


class VPolygon(AbstractPolytope):
    """
    A convex polygon given by its vertices in counter-clockwise order.

    Args:
        vertices: The vertices, a sequence of points of the plane.
        apply_convex_hull: If True (default), the vertices are reduced to
            their convex hull and sorted counter-clockwise. Pass False only
            for vertices that are already in that form.
    """

    def __init__(self, vertices=(), apply_convex_hull: bool = True) -> None:
        vertices = _vertex_list(vertices)
        if vertices and vertices[0].shape[0] != 2:
            raise DimensionMismatchError("The vertices of a polygon must be two-dimensional.")
        if apply_convex_hull:
            convex_hull_inplace(vertices)
        self._vertices = vertices

    @property
    def vertices(self) -> List[np.ndarray]:
        return self._vertices

    @property
    def dim(self) -> int:
        return 2

    def vertices_list(self) -> List[np.ndarray]:
        return list(self._vertices)

    def is_element(self, x) -> bool:
        """
        Returns True if `x` lies on the left of (or on) every edge.
        """
        x = check_direction(x, 2)
        vertices = self._vertices
        if not vertices:
            return False
        if len(vertices) == 1:
            return isapprox_vector(x, vertices[0])
        if len(vertices) == 2:
            from .zonotope import LineSegment

            return LineSegment(vertices[0], vertices[1]).is_element(x)
        m = len(vertices)
        return all(_geq(right_turn(vertices[i], vertices[(i + 1) % m], x), 0) for i in range(m))

    def is_empty(self, witness: bool = False):
        empty = not self._vertices
        if witness:
            return (True, np.zeros(0)) if empty else (False, np.array(self._vertices[0]))
        return empty

    def constraints_list(self) -> List:
        """One half-space per edge, with outward normal."""
        from .halfspaces import HalfSpace
        from .zonotope import LineSegment

        vertices = self._vertices
        if not vertices:
            raise EmptySetError("An empty polygon has no constraint representation.")
        if len(vertices) <= 2:
            return LineSegment(vertices[0], vertices[-1]).constraints_list()
        constraints = []
        m = len(vertices)
        for i in range(m):
            p, q = vertices[i], vertices[(i + 1) % m]
            normal = np.array([q[1] - p[1], p[0] - q[0]])
            constraints.append(HalfSpace(normal, np.dot(normal, p)))
        return constraints

    def remove_redundant_vertices(self) -> VPolygon:
        return VPolygon(self._vertices)

    def translate(self, v, inplace: bool = False) -> VPolygon:
        v = check_direction(v, 2)
        if inplace:
            self._vertices = [u + v for u in self._vertices]
            return self
        return VPolygon([u + v for u in self._vertices], apply_convex_hull=False)

    @classmethod
    def random(cls, dim: int = 2, rng=None, num_vertices: int = 5) -> VPolygon:
        if dim != 2:
            raise ValueError("A polygon is two-dimensional.")
        rng = np.random.default_rng(rng)
        return cls(list(rng.standard_normal((num_vertices, 2))))

    def __repr__(self) -> str:
        return f"VPolygon({[v.tolist() for v in self._vertices]})"
