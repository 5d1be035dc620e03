"""
Convex hulls of finite point sets and of sets.

Points are 1-D numpy arrays of equal length. The dimension of the points
selects the algorithm:

- one dimension: the minimum and maximum point;
- two dimensions: closed-form orientation tests for 2, 3 and 4 points and
  Andrew's monotone chain otherwise, returning the vertices in
  counter-clockwise order;
- higher dimensions: redundancy removal by the polyhedral backend.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from .backends import PolyhedralBackend, get_polyhedral_backend
from .exceptions import DimensionMismatchError, UnknownAlgorithmError
from .tolerance import _isapprox, isapproxzero, isapprox_vector
from .utils import arg_minmax, check_same_dim, right_turn

logger = logging.getLogger(__name__)

CONVEX_HULL_ALGORITHMS = ("monotone_chain", "monotone_chain_sorted")


def convex_hull(
    points,
    algorithm: Optional[str] = None,
    backend: Optional[PolyhedralBackend] = None,
) -> List[np.ndarray]:
    """
    Returns the vertices of the convex hull of a list of points.

    Args:
        points: A list of points of equal dimension. It is not modified.
        algorithm: The planar algorithm, "monotone_chain" (default) or
            "monotone_chain_sorted" for input that is already sorted.
        backend: Polyhedral backend used for points of dimension three or
            higher. Defaults to the process-wide backend.

    Returns:
        A new list with the extreme points. In two dimensions the points are
        in counter-clockwise order.

    Raises:
        UnknownAlgorithmError: If `algorithm` is not a known name.
    """
    return convex_hull_inplace(list(points), algorithm=algorithm, backend=backend)


def convex_hull_inplace(
    points: List[np.ndarray],
    algorithm: Optional[str] = None,
    backend: Optional[PolyhedralBackend] = None,
) -> List[np.ndarray]:
    """
    In-place version of `convex_hull`.

    The list `points` is overwritten with the hull vertices and returned.
    """
    if algorithm is not None and algorithm not in CONVEX_HULL_ALGORITHMS:
        raise UnknownAlgorithmError(algorithm, CONVEX_HULL_ALGORITHMS)

    m = len(points)
    if m <= 1:
        return points
    n = len(points[0])
    if any(len(p) != n for p in points):
        raise DimensionMismatchError("All points of a convex hull must have the same dimension.")

    if n == 1:
        if m == 2:
            return _two_points_1d(points)
        return _convex_hull_1d(points)
    if n == 2:
        if m == 2:
            return _two_points_2d(points)
        if m == 3:
            return _three_points_2d(points)
        if m == 4:
            return _four_points_2d(points)
        return monotone_chain(points, sort=(algorithm != "monotone_chain_sorted"))
    return _convex_hull_nd(points, backend)


def _two_points_1d(points):
    if _isapprox(points[0][0], points[1][0]):
        points.pop()
    elif points[0][0] > points[1][0]:
        points[0], points[1] = points[1], points[0]
    return points


def _convex_hull_1d(points):
    low = min(points, key=lambda p: p[0])
    high = max(points, key=lambda p: p[0])
    points[:] = [low, high]
    return _two_points_1d(points)


def _two_points_2d(points):
    if isapprox_vector(points[0], points[1]):
        points.pop()
    return points


def _three_points_2d(points):
    A, B, C = points[0], points[1], points[2]
    turn = right_turn(A, B, C)
    if isapproxzero(turn):
        # collinear: keep the extreme points along the axis of spread
        if _isapprox(A[0], B[0]) and _isapprox(B[0], C[0]):
            if _isapprox(A[1], B[1]) and _isapprox(B[1], C[1]):
                del points[1:]
                return points
            i, j = arg_minmax(A[1], B[1], C[1])
        else:
            i, j = arg_minmax(A[0], B[0], C[0])
        points[:] = [(A, B, C)[i], (A, B, C)[j]]
        return _two_points_2d(points)
    if turn < 0:
        points[:] = [C, B, A]
    return points


def _collinear_case(points, A, B, C, D):
    """
    Hull of four points of which A, B, C are collinear.

    The middle one of A, B, C is dropped and the remaining three points are
    handled by the three-point case.
    """
    if _isapprox(A[0], B[0]) and _isapprox(B[0], C[0]):
        if _isapprox(A[1], B[1]) and _isapprox(B[1], C[1]):
            points[:] = [A, D]
            return _two_points_2d(points)
        i, j = arg_minmax(A[1], B[1], C[1])
    else:
        i, j = arg_minmax(A[0], B[0], C[0])
    points[:] = [(A, B, C)[i], (A, B, C)[j], D]
    return _three_points_2d(points)


# Counter-clockwise hull order for each sign pattern of the orientation tests
# (ABC, ABD, BCD, CAD); True means a strict left turn.
_FOUR_POINTS_ORDER = {
    (True, True, True, True): "ABC",
    (True, True, True, False): "ABCD",
    (True, True, False, True): "ABDC",
    (True, True, False, False): "ABD",
    (True, False, True, True): "ADBC",
    (True, False, True, False): "BCD",
    (True, False, False, True): "CAD",
    (False, True, True, False): "ACD",
    (False, True, False, True): "DCB",
    (False, True, False, False): "DACB",
    (False, False, True, True): "ADB",
    (False, False, True, False): "ACDB",
    (False, False, False, True): "ADCB",
    (False, False, False, False): "ACB",
}


def _four_points_2d(points):
    A, B, C, D = points[0], points[1], points[2], points[3]
    tri_ABC = right_turn(A, B, C)
    tri_ABD = right_turn(A, B, D)
    tri_BCD = right_turn(B, C, D)
    tri_CAD = right_turn(C, A, D)

    if isapproxzero(tri_ABC):
        return _collinear_case(points, A, B, C, D)
    if isapproxzero(tri_ABD):
        return _collinear_case(points, A, B, D, C)
    if isapproxzero(tri_BCD):
        return _collinear_case(points, B, C, D, A)
    if isapproxzero(tri_CAD):
        return _collinear_case(points, C, A, D, B)

    key = (tri_ABC > 0, tri_ABD > 0, tri_BCD > 0, tri_CAD > 0)
    try:
        order = _FOUR_POINTS_ORDER[key]
    except KeyError:
        raise AssertionError(f"Unexpected orientation pattern {key} in convex hull.") from None
    named = {"A": A, "B": B, "C": C, "D": D}
    points[:] = [named[name] for name in order]
    return points


def monotone_chain(points: List[np.ndarray], sort: bool = True) -> List[np.ndarray]:
    """
    Andrew's monotone chain algorithm for planar convex hulls.

    Builds the lower and the upper chain by scanning the lexicographically
    sorted points in both directions, popping the last chain point whenever
    the last three points do not make a left turn. The list is modified in
    place.

    Args:
        points: The points, modified in place.
        sort: If False, the points are assumed to be sorted already.

    Returns:
        The hull vertices in counter-clockwise order.
    """
    if len(points) <= 1:
        return points
    if sort:
        points.sort(key=lambda p: (p[0], p[1]))

    def build_hull(indices):
        semihull = []
        for i in indices:
            while len(semihull) >= 2 and right_turn(semihull[-2], semihull[-1], points[i]) <= 0:
                semihull.pop()
            semihull.append(points[i])
        return semihull

    lower = build_hull(range(len(points)))
    upper = build_hull(range(len(points) - 1, -1, -1))

    # the last point of each chain starts the other one
    points[:] = lower[:-1] + upper[:-1]
    if len(points) == 2 and isapprox_vector(points[0], points[1]):
        points.pop()
    return points


def _convex_hull_nd(points, backend):
    backend = backend if backend is not None else get_polyhedral_backend()
    hull = backend.remove_redundant_vertices(points)
    logger.debug("Reduced %d points to %d hull vertices", len(points), len(hull))
    points[:] = hull
    return points


# ============================================================================
# Convex hulls of sets
# ============================================================================


def convex_hull_sets(X, Y, algorithm: Optional[str] = None, backend: Optional[PolyhedralBackend] = None):
    """
    Returns the convex hull of two sets with a vertex representation.

    The result is a `Singleton` for a single point, an `Interval` in one
    dimension, a `VPolygon` in two dimensions and a `VPolytope` otherwise.
    The empty set is the identity.
    """
    from .sets.empty_set import EmptySet

    n = check_same_dim(X, Y)
    if isinstance(X, EmptySet):
        return Y
    if isinstance(Y, EmptySet):
        return X
    hull = convex_hull_inplace(
        list(X.vertices_list()) + list(Y.vertices_list()), algorithm=algorithm, backend=backend
    )
    return _set_from_hull(hull, n)


def convex_hull_union(U, algorithm: Optional[str] = None, backend: Optional[PolyhedralBackend] = None):
    """
    Returns the convex hull of a union of sets with a vertex representation.

    Empty members are skipped. The result type follows `convex_hull_sets`.
    """
    vertices = []
    for X in U.array:
        vertices.extend(X.vertices_list())
    hull = convex_hull_inplace(vertices, algorithm=algorithm, backend=backend)
    return _set_from_hull(hull, U.dim)


def _set_from_hull(hull, n):
    from .sets.empty_set import EmptySet
    from .sets.hyperrectangle import Interval
    from .sets.polytopes import VPolygon, VPolytope
    from .sets.singleton import Singleton

    if len(hull) == 0:
        return EmptySet(n)
    if len(hull) == 1:
        return Singleton(hull[0])
    if n == 1:
        low, high = sorted((hull[0][0], hull[1][0]))
        return Interval(low, high)
    if n == 2:
        return VPolygon(hull, apply_convex_hull=False)
    return VPolytope(hull)
