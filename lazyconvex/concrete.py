"""
Concrete (eager) set operations.

These functions compute an explicit representation of an intersection,
Minkowski sum, linear image or Cartesian product. They are what the lazy
operation nodes return from `concretize`. Lazy operands are concretized
first; pairs without an explicit algorithm raise `NotImplementedError`.
"""

from __future__ import annotations

import logging

import numpy as np

from .convex_hull import _set_from_hull, convex_hull
from .convex_set import ConvexSet
from .dispatch import PairDispatcher
from .exceptions import DimensionMismatchError
from .sets.abstract import AbstractHyperrectangle, AbstractPolytope, AbstractSingleton, AbstractZonotope
from .sets.empty_set import EmptySet
from .sets.halfspaces import HalfSpace, Hyperplane
from .sets.hpolyhedron import HPolyhedron, HPolytope
from .sets.hyperrectangle import Hyperrectangle, Interval
from .sets.singleton import Singleton, ZeroSet
from .sets.universe import Universe
from .sets.zonotope import Zonotope
from .tolerance import _leq
from .utils import as_matrix, check_same_dim, samedir

logger = logging.getLogger(__name__)


def _concretize_pair(X: ConvexSet, Y: ConvexSet):
    """Concretizes lazy operands; returns None if nothing changes."""
    if not (X.is_operation() or Y.is_operation()):
        return None
    Xc, Yc = X.concretize(), Y.concretize()
    if Xc is X and Yc is Y:
        return None
    logger.debug("Concretized %s and %s", type(X).__name__, type(Y).__name__)
    return Xc, Yc


# ============================================================================
# Intersection
# ============================================================================

_intersection = PairDispatcher("intersection")


def intersection(X: ConvexSet, Y: ConvexSet) -> ConvexSet:
    """
    Returns an explicit representation of `X & Y`.

    Raises:
        DimensionMismatchError: If the dimensions differ.
        NotImplementedError: If no algorithm covers the pair.
    """
    check_same_dim(X, Y)
    return _intersection(X, Y)


@_intersection.register(EmptySet, ConvexSet, priority=100)
def _intersection_empty(E, X):
    return E


@_intersection.register(Universe, ConvexSet, priority=90)
def _intersection_universe(U, X):
    return X


@_intersection.register(AbstractSingleton, ConvexSet, priority=80)
def _intersection_singleton(S, X):
    return S if X.is_element(S.element) else EmptySet(S.dim)


@_intersection.register(Interval, Interval, priority=70)
def _intersection_intervals(X, Y):
    lo = max(X.lo, Y.lo)
    hi = min(X.hi, Y.hi)
    if not _leq(lo, hi):
        return EmptySet(1)
    return Interval(lo, max(lo, hi))


@_intersection.register(AbstractHyperrectangle, AbstractHyperrectangle, priority=65)
def _intersection_hyperrectangles(X, Y):
    low = np.maximum(X.low(), Y.low())
    high = np.minimum(X.high(), Y.high())
    if not all(_leq(lo, hi) for lo, hi in zip(low, high)):
        return EmptySet(X.dim)
    return Hyperrectangle.from_bounds(low, np.maximum(low, high))


@_intersection.register(Hyperplane, Hyperplane, priority=65)
def _intersection_hyperplanes(X, Y):
    if X.is_equivalent(Y):
        return X
    if samedir(X.a, Y.a)[0] or samedir(X.a, -Y.a)[0]:
        return EmptySet(X.dim)
    return HPolyhedron(X.constraints_list() + Y.constraints_list())


@_intersection.register(ConvexSet, ConvexSet, priority=0)
def _intersection_generic(X, Y):
    from .operations.union import UnionSet, UnionSetArray

    if isinstance(X, (UnionSet, UnionSetArray)) or isinstance(Y, (UnionSet, UnionSetArray)):
        U, Z = (X, Y) if isinstance(X, (UnionSet, UnionSetArray)) else (Y, X)
        pieces = [intersection(member, Z) for member in U.array]
        pieces = [P for P in pieces if not isinstance(P, EmptySet)]
        if not pieces:
            return EmptySet(X.dim)
        return UnionSetArray(pieces, dim=X.dim)

    pair = _concretize_pair(X, Y)
    if pair is not None:
        return intersection(*pair)

    if X.is_polyhedral() and Y.is_polyhedral():
        constraints = X.constraints_list() + Y.constraints_list()
        bounded = isinstance(X, AbstractPolytope) or isinstance(Y, AbstractPolytope)
        cls = HPolytope if bounded else HPolyhedron
        return cls(constraints, dim=X.dim).remove_redundant_constraints()

    raise NotImplementedError(
        f"The intersection of {type(X).__name__} and {type(Y).__name__} has no explicit representation."
    )


# ============================================================================
# Minkowski sum
# ============================================================================

_minkowski_sum = PairDispatcher("minkowski_sum")


def minkowski_sum(X: ConvexSet, Y: ConvexSet) -> ConvexSet:
    """
    Returns an explicit representation of `X + Y`.

    Raises:
        DimensionMismatchError: If the dimensions differ.
        NotImplementedError: If no algorithm covers the pair.
    """
    check_same_dim(X, Y)
    return _minkowski_sum(X, Y)


@_minkowski_sum.register(EmptySet, ConvexSet, priority=100)
def _minkowski_sum_empty(E, X):
    return E


@_minkowski_sum.register(ZeroSet, ConvexSet, priority=95)
def _minkowski_sum_zero(Z, X):
    return X


@_minkowski_sum.register(AbstractSingleton, ConvexSet, priority=90)
def _minkowski_sum_singleton(S, X):
    return X.translate(S.element)


@_minkowski_sum.register(Universe, ConvexSet, priority=85)
def _minkowski_sum_universe(U, X):
    return EmptySet(U.dim) if X.is_empty() else U


@_minkowski_sum.register(Interval, Interval, priority=75)
def _minkowski_sum_intervals(X, Y):
    return Interval(X.lo + Y.lo, X.hi + Y.hi)


@_minkowski_sum.register(AbstractHyperrectangle, AbstractHyperrectangle, priority=70)
def _minkowski_sum_hyperrectangles(X, Y):
    return Hyperrectangle(
        X.center + Y.center, X.radius_hyperrectangle() + Y.radius_hyperrectangle()
    )


@_minkowski_sum.register(AbstractZonotope, AbstractZonotope, priority=60)
def _minkowski_sum_zonotopes(X, Y):
    return Zonotope(X.center + Y.center, np.hstack([X.genmat(), Y.genmat()]))


@_minkowski_sum.register(ConvexSet, ConvexSet, priority=0)
def _minkowski_sum_generic(X, Y):
    pair = _concretize_pair(X, Y)
    if pair is not None:
        return minkowski_sum(*pair)

    if _has_vertices(X) and _has_vertices(Y):
        points = [v + w for v in X.vertices_list() for w in Y.vertices_list()]
        return _set_from_hull(convex_hull(points), X.dim)

    raise NotImplementedError(
        f"The Minkowski sum of {type(X).__name__} and {type(Y).__name__} has no explicit representation."
    )


def _has_vertices(X: ConvexSet) -> bool:
    return isinstance(X, AbstractPolytope) or (X.is_polyhedral() and X.is_bounded())


# ============================================================================
# Linear map
# ============================================================================


def linear_map(M, X: ConvexSet) -> ConvexSet:
    """
    Returns an explicit representation of the image `M X`.

    Vertex representations are mapped vertex-wise, zonotopes through their
    center and generators, and constraint representations through the
    inverse transpose when M is invertible.

    Raises:
        DimensionMismatchError: If `M` does not have `X.dim` columns.
        NotImplementedError: If no algorithm covers the operand.
    """
    M = as_matrix(M)
    if hasattr(M, "toarray"):
        M = M.toarray()
    m, n = M.shape
    if n != X.dim:
        raise DimensionMismatchError(
            f"A matrix with {n} columns cannot map a set of dimension {X.dim}."
        )

    if isinstance(X, EmptySet):
        return EmptySet(m)
    if isinstance(X, ZeroSet):
        return ZeroSet(m)
    if isinstance(X, AbstractSingleton):
        return Singleton(M @ X.element)
    if isinstance(X, AbstractZonotope):
        return Zonotope(M @ X.center, M @ X.genmat())
    if isinstance(X, Universe):
        if np.linalg.matrix_rank(M.astype(float)) == m:
            return Universe(m)
        raise NotImplementedError("The image of the universe under a rank-deficient map is not supported.")
    if isinstance(X, AbstractPolytope):
        return _set_from_hull(convex_hull([M @ v for v in X.vertices_list()]), m)
    if X.is_polyhedral() and not X.is_operation():
        return _linear_map_polyhedron(M, X)
    if X.is_operation():
        Xc = X.concretize()
        if Xc is not X:
            return linear_map(M, Xc)
    raise NotImplementedError(
        f"The linear image of a {type(X).__name__} has no explicit representation."
    )


def _linear_map_polyhedron(M, X):
    m, n = M.shape
    if m != n or np.linalg.matrix_rank(M.astype(float)) < n:
        if X.is_bounded():
            return _set_from_hull(convex_hull([M @ v for v in X.vertices_list()]), m)
        raise NotImplementedError(
            "The image of an unbounded polyhedron under a singular map is not supported."
        )
    # {M x : A x <= b} = {y : A M^{-1} y <= b}
    Minv_T = np.linalg.inv(M.astype(float)).T
    if isinstance(X, HalfSpace):
        return HalfSpace(Minv_T @ X.a, X.b)
    if isinstance(X, Hyperplane):
        return Hyperplane(Minv_T @ X.a, X.b)
    constraints = [HalfSpace(Minv_T @ c.a, c.b) for c in X.constraints_list()]
    return type(X)(constraints, dim=m) if isinstance(X, HPolyhedron) else HPolyhedron(constraints, dim=m)


# ============================================================================
# Cartesian product
# ============================================================================


def cartesian_product(X: ConvexSet, Y: ConvexSet) -> ConvexSet:
    """
    Returns an explicit representation of `X x Y`.

    Raises:
        NotImplementedError: If no algorithm covers the pair.
    """
    from .operations.cartesian_product import CartesianProduct

    n = X.dim + Y.dim
    if isinstance(X, EmptySet) or isinstance(Y, EmptySet):
        return EmptySet(n)
    if isinstance(X, AbstractSingleton) and isinstance(Y, AbstractSingleton):
        return Singleton(np.concatenate([X.element, Y.element]))
    if isinstance(X, AbstractHyperrectangle) and isinstance(Y, AbstractHyperrectangle):
        return Hyperrectangle(
            np.concatenate([X.center, Y.center]),
            np.concatenate([X.radius_hyperrectangle(), Y.radius_hyperrectangle()]),
        )
    if X.is_operation() or Y.is_operation():
        pair = _concretize_pair(X, Y)
        if pair is not None:
            return cartesian_product(*pair)
    if X.is_polyhedral() and Y.is_polyhedral():
        constraints = CartesianProduct(X, Y).constraints_list()
        if not constraints:
            return Universe(n)
        if isinstance(X, AbstractPolytope) and isinstance(Y, AbstractPolytope):
            return HPolytope(constraints, dim=n)
        return HPolyhedron(constraints, dim=n)
    raise NotImplementedError(
        f"The Cartesian product of {type(X).__name__} and {type(Y).__name__} has no explicit representation."
    )
