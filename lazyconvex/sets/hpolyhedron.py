"""
Polyhedra in constraint representation.

An `HPolyhedron` is the intersection of a finite list of half-spaces
`a_i . x <= b_i`. Support queries are linear programs over the constraints;
vertex enumeration goes through the polyhedral backend.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from ..backends import LPStatus, PolyhedralBackend, feasible_point, get_polyhedral_backend, solve_lp
from ..exceptions import (
    BoundednessError,
    DimensionMismatchError,
    EmptySetError,
    LPSolverError,
    UnboundedDirectionError,
)
from ..tolerance import isapproxzero
from ..utils import as_vector, check_direction, unit_vector
from .abstract import AbstractPolyhedron, AbstractPolytope
from .halfspaces import HalfSpace

logger = logging.getLogger(__name__)


class HPolyhedron(AbstractPolyhedron):
    """
    A polyhedron `{x : A x <= b}` given by a list of half-spaces.

    Args:
        constraints: A sequence of `HalfSpace` objects of equal dimension.
        dim: The ambient dimension. Required only when `constraints` is
            empty, in which case the polyhedron is the whole space.
    """

    def __init__(self, constraints=(), dim: Optional[int] = None) -> None:
        constraints = list(constraints)
        if constraints:
            n = constraints[0].dim
            if any(c.dim != n for c in constraints):
                raise DimensionMismatchError("All constraints must have the same dimension.")
            if dim is not None and dim != n:
                raise DimensionMismatchError(
                    f"Constraints of dimension {n} do not match the requested dimension {dim}."
                )
            dim = n
        elif dim is None:
            raise ValueError("The dimension of a polyhedron without constraints must be given.")
        self._constraints: List[HalfSpace] = constraints
        self._dim = int(dim)

    @classmethod
    def from_matrix(cls, A, b, **kwargs):
        """Creates the polyhedron `{x : A x <= b}` from a matrix and a vector."""
        A = np.atleast_2d(np.asarray(A))
        b = as_vector(b)
        if A.shape[0] != b.shape[0]:
            raise DimensionMismatchError(
                f"Constraint matrix with {A.shape[0]} rows and right-hand side of "
                f"length {b.shape[0]}."
            )
        return cls([HalfSpace(ai, bi) for ai, bi in zip(A, b)], dim=A.shape[1], **kwargs)

    @property
    def dim(self) -> int:
        return self._dim

    def constraints_list(self) -> List[HalfSpace]:
        return list(self._constraints)

    def add_constraint(self, constraint: HalfSpace) -> None:
        """Adds a half-space to the constraint list in place."""
        if constraint.dim != self.dim:
            raise DimensionMismatchError(
                f"Constraint of dimension {constraint.dim} for a polyhedron of dimension {self.dim}."
            )
        self._constraints.append(constraint)

    def _support_lp(self, d):
        A, b = self.tosimplehrep()
        return solve_lp(d, A, "<" * A.shape[0], b, maximize=True)

    def support_vector(self, d) -> np.ndarray:
        """
        Returns a maximizer of `d . x` computed by a linear program.

        Raises:
            EmptySetError: If the polyhedron is empty.
            UnboundedDirectionError: If it is unbounded in direction `d`.
            LPSolverError: If the LP solver fails.
        """
        d = check_direction(d, self.dim)
        if not self._constraints:
            if all(isapproxzero(di) for di in d):
                return np.zeros(self.dim)
            raise UnboundedDirectionError("A polyhedron without constraints is unbounded.")
        res = self._support_lp(d)
        if res.status is LPStatus.OPTIMAL:
            return res.x
        if res.status is LPStatus.UNBOUNDED:
            raise UnboundedDirectionError(
                f"The {self.__class__.__name__} is unbounded in direction {d.tolist()}."
            )
        if res.status is LPStatus.INFEASIBLE:
            raise EmptySetError(f"The support vector of an empty {self.__class__.__name__} is undefined.")
        raise LPSolverError(f"LP solver returned status {res.status.value}: {res.message}")

    def support_function(self, d):
        d = check_direction(d, self.dim)
        if not self._constraints:
            return 0.0 if all(isapproxzero(di) for di in d) else np.inf
        res = self._support_lp(d)
        if res.status is LPStatus.OPTIMAL:
            return res.objective
        if res.status is LPStatus.UNBOUNDED:
            return np.inf
        if res.status is LPStatus.INFEASIBLE:
            raise EmptySetError(f"The support function of an empty {self.__class__.__name__} is undefined.")
        raise LPSolverError(f"LP solver returned status {res.status.value}: {res.message}")

    def is_empty(self, witness: bool = False):
        """
        Decides emptiness with a feasibility linear program.

        Args:
            witness: If True, also returns a feasible point (or an empty
                array if there is none).
        """
        if not self._constraints:
            return (False, np.zeros(self.dim)) if witness else False
        x = feasible_point(*self.tosimplehrep())
        if witness:
            return (True, np.zeros(0)) if x is None else (False, x)
        return x is None

    def is_bounded(self) -> bool:
        if self.is_empty():
            return True
        for i in range(self.dim):
            e = unit_vector(i, self.dim)
            if not np.isfinite(self.support_function(e)):
                return False
            if not np.isfinite(self.support_function(-e)):
                return False
        return True

    def an_element(self) -> np.ndarray:
        empty, x = self.is_empty(witness=True)
        if empty:
            raise EmptySetError(f"An empty {self.__class__.__name__} has no element.")
        return x

    def vertices_list(self, backend: Optional[PolyhedralBackend] = None) -> List[np.ndarray]:
        """
        Returns the vertices, enumerated by the polyhedral backend.

        Raises:
            BoundednessError: If the polyhedron is unbounded.
        """
        if not self.is_bounded():
            raise BoundednessError("Only a bounded polyhedron has a finite vertex list.")
        backend = backend if backend is not None else get_polyhedral_backend()
        return backend.to_vertices(*self.tosimplehrep())

    def remove_redundant_constraints(self, backend: Optional[PolyhedralBackend] = None):
        """
        Returns an equivalent polyhedron without redundant constraints.

        Returns:
            A polyhedron of the same type, or an `EmptySet` if the
            constraints are infeasible.
        """
        from .empty_set import EmptySet

        if not self._constraints:
            return self
        backend = backend if backend is not None else get_polyhedral_backend()
        reduced = backend.remove_redundant_constraints(*self.tosimplehrep())
        if reduced is None:
            logger.debug("Infeasible constraints while removing redundancy")
            return EmptySet(self.dim)
        A, b = reduced
        return self.__class__([HalfSpace(ai, bi) for ai, bi in zip(A, b)], dim=self.dim)

    def translate(self, v) -> HPolyhedron:
        v = check_direction(v, self.dim)
        return self.__class__([c.translate(v) for c in self._constraints], dim=self.dim)

    @classmethod
    def random(cls, dim: int = 2, rng=None, num_constraints: int = None) -> HPolyhedron:
        rng = np.random.default_rng(rng)
        num_constraints = dim + 1 if num_constraints is None else num_constraints
        # positive offsets keep the origin feasible
        return cls(
            [HalfSpace(rng.standard_normal(dim), abs(rng.standard_normal()) + 0.1) for _ in range(num_constraints)],
            dim=dim,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._constraints!r})"


class HPolytope(HPolyhedron, AbstractPolytope):
    """
    A bounded polyhedron in constraint representation.

    Args:
        constraints: A sequence of `HalfSpace` objects of equal dimension.
        dim: The ambient dimension, needed only without constraints.
        check_boundedness: If True, boundedness is verified with linear
            programs and an unbounded set raises a ValueError.
    """

    def __init__(self, constraints=(), dim: Optional[int] = None, check_boundedness: bool = False) -> None:
        super().__init__(constraints, dim=dim)
        if check_boundedness and not HPolyhedron.is_bounded(self):
            raise ValueError("The constraints do not describe a bounded set.")

    def is_bounded(self) -> bool:
        return True

    def vertices_list(self, backend: Optional[PolyhedralBackend] = None) -> List[np.ndarray]:
        if not self._constraints:
            raise BoundednessError("A polytope needs at least one constraint.")
        backend = backend if backend is not None else get_polyhedral_backend()
        return backend.to_vertices(*self.tosimplehrep())

    @classmethod
    def random(cls, dim: int = 2, rng=None, num_constraints: int = None) -> HPolytope:
        rng = np.random.default_rng(rng)
        num_constraints = 2 * dim + 2 if num_constraints is None else num_constraints
        # the axis constraints keep the set bounded
        constraints = []
        for i in range(dim):
            e = unit_vector(i, dim)
            constraints.append(HalfSpace(e, 1.0 + abs(rng.standard_normal())))
            constraints.append(HalfSpace(-e, 1.0 + abs(rng.standard_normal())))
        for _ in range(num_constraints - 2 * dim):
            constraints.append(HalfSpace(rng.standard_normal(dim), abs(rng.standard_normal()) + 0.5))
        return cls(constraints, dim=dim)
