"""
Defines the abstract base class for convex sets and the evaluation protocol.

Every set, whether an explicit representation (a box, a polytope, a ball) or
a lazy operation on other sets (a Minkowski sum, an intersection), is
described by the same small interface:

- `dim`: the ambient dimension;
- `support_vector(d)`: a point of the set maximizing `d . x` (sigma);
- `support_function(d)`: the maximum of `d . x` over the set (rho);
- `is_element(x)`: membership.

Lazy operations are built with the operators `+` (Minkowski sum),
`&` (intersection), `|` (union), `*` (Cartesian product) and `M @ X`
(linear map), which simplify neutral and absorbing operands.
"""

from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

import numpy as np

from .checks.convex_set import ConvexSetChecks
from .exceptions import DimensionMismatchError, EmptySetError
from .utils import as_matrix, check_direction, check_same_dim, unit_vector

if TYPE_CHECKING:
    from .sets.halfspaces import HalfSpace


class ConvexSet(ConvexSetChecks, ABC):
    """
    Abstract base class for a (possibly lazy) convex set in R^n.

    Subclasses must provide `dim`, `support_vector` and `is_element`. The
    remaining methods have generic defaults that specialised representations
    override with exact or faster algorithms.
    """

    # lets `M @ X` reach __rmatmul__ when M is a numpy array
    __array_ufunc__ = None

    @property
    @abstractmethod
    def dim(self) -> int:
        """The ambient dimension of the set."""

    @abstractmethod
    def support_vector(self, d) -> np.ndarray:
        """
        Returns a point of the set maximizing `d . x`.

        Args:
            d: The direction, of length `dim`.

        Raises:
            EmptySetError: If the set is empty.
            UnboundedDirectionError: If the set is unbounded in direction `d`.
        """

    def support_function(self, d):
        """
        Returns the maximum of `d . x` over the set.

        The value is `+inf` in directions in which the set is unbounded.

        Raises:
            EmptySetError: If the set is empty.
        """
        d = check_direction(d, self.dim)
        return np.dot(d, self.support_vector(d))

    @abstractmethod
    def is_element(self, x) -> bool:
        """Returns True if the point `x` lies in the set."""

    def __contains__(self, x) -> bool:
        return self.is_element(x)

    def is_empty(self, witness: bool = False):
        """
        Returns True if the set is empty.

        Args:
            witness: If True, returns a pair `(empty, point)` where `point`
                is an element of the set if it is non-empty, and an empty
                array otherwise.
        """
        if witness:
            return False, self.an_element()
        return False

    def is_bounded(self) -> bool:
        """
        Returns True if the set is bounded.

        The default implementation checks that the support function is finite
        along all positive and negative unit directions.
        """
        for i in range(self.dim):
            e = unit_vector(i, self.dim)
            if not np.isfinite(self.support_function(e)):
                return False
            if not np.isfinite(self.support_function(-e)):
                return False
        return True

    def is_polyhedral(self) -> bool:
        """True if the set is known to be a polyhedron."""
        return False

    def is_operation(self) -> bool:
        """True for lazy set operations."""
        return False

    def has_exact_support_function(self) -> bool:
        """
        True if `support_function` returns the exact value. Sets that can
        only bound it from above return False.
        """
        return True

    def is_convex(self) -> bool:
        return True

    def an_element(self) -> np.ndarray:
        """
        Returns some element of the set.

        Raises:
            EmptySetError: If the set is empty.
        """
        if self.is_empty():
            raise EmptySetError(f"An empty {self.__class__.__name__} has no element.")
        return self.support_vector(unit_vector(0, self.dim))

    def constraints_list(self) -> List[HalfSpace]:
        """Returns a list of half-spaces whose intersection is the set."""
        raise NotImplementedError(
            f"{self.__class__.__name__} does not provide a constraint representation."
        )

    def vertices_list(self) -> List[np.ndarray]:
        """Returns the list of vertices of the set."""
        raise NotImplementedError(
            f"{self.__class__.__name__} does not provide a vertex representation."
        )

    def concretize(self) -> ConvexSet:
        """
        Returns an explicit (non-lazy) representation of the set.

        Explicit representations return themselves.
        """
        return self

    def translate(self, v) -> ConvexSet:
        """Returns the set translated by the vector `v`."""
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support translation."
        )

    def isdisjoint(self, other: ConvexSet, witness: bool = False, **kwargs):
        """Shorthand for `lazyconvex.isdisjoint(self, other, ...)`."""
        from .isdisjoint import isdisjoint

        return isdisjoint(self, other, witness=witness, **kwargs)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> ConvexSet:
        """Returns a random instance of the set type."""
        raise NotImplementedError(f"{cls.__name__} does not provide random instances.")

    # ------------------------------------------------------------------
    # Lazy operations
    # ------------------------------------------------------------------

    def minkowski_sum(self, other: ConvexSet) -> ConvexSet:
        """
        Returns the lazy Minkowski sum of two sets.

        The zero set is neutral and the empty set is absorbing.
        """
        from .operations.minkowski_sum import MinkowskiSum
        from .sets.empty_set import EmptySet
        from .sets.singleton import ZeroSet

        check_same_dim(self, other)
        if isinstance(self, EmptySet):
            return self
        if isinstance(other, EmptySet):
            return other
        if isinstance(other, ZeroSet):
            return self
        if isinstance(self, ZeroSet):
            return other
        return MinkowskiSum(self, other)

    def intersect(self, other: ConvexSet) -> ConvexSet:
        """
        Returns the lazy intersection of two sets.

        The universe is neutral and the empty set is absorbing. Two
        half-spaces combine directly into an `HPolyhedron`.
        """
        from .operations.intersection import Intersection
        from .sets.empty_set import EmptySet
        from .sets.halfspaces import HalfSpace
        from .sets.hpolyhedron import HPolyhedron
        from .sets.universe import Universe

        check_same_dim(self, other)
        if isinstance(self, EmptySet):
            return self
        if isinstance(other, EmptySet):
            return other
        if isinstance(other, Universe):
            return self
        if isinstance(self, Universe):
            return other
        if isinstance(self, HalfSpace) and isinstance(other, HalfSpace):
            return HPolyhedron([self, other])
        return Intersection(self, other)

    def union(self, other: ConvexSet) -> ConvexSet:
        """
        Returns the lazy union of two sets.

        The empty set is neutral and the universe is absorbing.
        """
        from .operations.union import UnionSet
        from .sets.empty_set import EmptySet
        from .sets.universe import Universe

        check_same_dim(self, other)
        if isinstance(self, EmptySet):
            return other
        if isinstance(other, EmptySet):
            return self
        if isinstance(self, Universe):
            return self
        if isinstance(other, Universe):
            return other
        return UnionSet(self, other)

    def linear_map(self, M) -> ConvexSet:
        """
        Returns the lazy image of the set under the matrix `M`.

        Empty and zero sets are mapped directly. A `SparseMatrixExp` builds
        an `ExponentialMap`.
        """
        from .operations.exponential_map import ProjectionSparseMatrixExp, SparseMatrixExp
        from .operations.linear_map import LinearMap
        from .sets.empty_set import EmptySet
        from .sets.singleton import ZeroSet

        if isinstance(M, (SparseMatrixExp, ProjectionSparseMatrixExp)):
            return M @ self
        M = as_matrix(M)
        n_rows = M.shape[0]
        if M.shape[1] != self.dim:
            raise DimensionMismatchError(
                f"A matrix with {M.shape[1]} columns cannot map a set of dimension {self.dim}."
            )
        if isinstance(self, EmptySet):
            return EmptySet(n_rows)
        if isinstance(self, ZeroSet):
            return ZeroSet(n_rows)
        return LinearMap(M, self)

    def cartesian_product(self, other: ConvexSet) -> ConvexSet:
        """Returns the lazy Cartesian product of two sets."""
        from .operations.cartesian_product import CartesianProduct

        return CartesianProduct(self, other)

    def __add__(self, other):
        if not isinstance(other, ConvexSet):
            return NotImplemented
        return self.minkowski_sum(other)

    def __and__(self, other):
        if not isinstance(other, ConvexSet):
            return NotImplemented
        return self.intersect(other)

    def __or__(self, other):
        if not isinstance(other, ConvexSet):
            return NotImplemented
        return self.union(other)

    def __mul__(self, other):
        if isinstance(other, ConvexSet):
            return self.cartesian_product(other)
        if isinstance(other, numbers.Real):
            return self.__rmul__(other)
        return NotImplemented

    def __rmul__(self, other):
        if not isinstance(other, numbers.Real):
            return NotImplemented
        return self.linear_map(other * np.eye(self.dim))

    def __rmatmul__(self, M):
        return self.linear_map(M)


def sigma(d, X: ConvexSet) -> np.ndarray:
    """Support vector of `X` in direction `d`."""
    return X.support_vector(d)


def rho(d, X: ConvexSet):
    """Support function of `X` in direction `d`."""
    return X.support_function(d)


def dim(X: ConvexSet) -> int:
    """Ambient dimension of `X`."""
    return X.dim
