"""
Lazy operations on sets.

An operation node stores its operands and answers support-function and
membership queries without computing the result set.
"""

from .base import LazyOperation
from .minkowski_sum import MinkowskiSum, MinkowskiSumArray, CachedMinkowskiSumArray
from .intersection import (
    Intersection,
    IntersectionArray,
    IntersectionCache,
    line_search,
    INTERSECTION_RHO_ALGORITHMS,
)
from .union import UnionSet, UnionSetArray, UNION_SIGMA_ALGORITHMS
from .linear_map import LinearMap
from .exponential_map import (
    SparseMatrixExp,
    ExponentialMap,
    ProjectionSparseMatrixExp,
    ExponentialProjectionMap,
    exponential_map,
)
from .cartesian_product import CartesianProduct, CartesianProductArray

__all__ = [
    "LazyOperation",
    # Minkowski sums
    "MinkowskiSum",
    "MinkowskiSumArray",
    "CachedMinkowskiSumArray",
    # Intersections
    "Intersection",
    "IntersectionArray",
    "IntersectionCache",
    "line_search",
    "INTERSECTION_RHO_ALGORITHMS",
    # Unions
    "UnionSet",
    "UnionSetArray",
    "UNION_SIGMA_ALGORITHMS",
    # Maps
    "LinearMap",
    "SparseMatrixExp",
    "ExponentialMap",
    "ProjectionSparseMatrixExp",
    "ExponentialProjectionMap",
    "exponential_map",
    # Products
    "CartesianProduct",
    "CartesianProductArray",
]
