"""
Vector helpers and geometric primitives shared by all set representations.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from .exceptions import DimensionMismatchError
from .tolerance import _isapprox, isapproxzero, isapprox_vector


def as_vector(v, copy: bool = False) -> np.ndarray:
    """
    Converts an array-like into a 1-D numpy array.

    Integer and boolean input is promoted to float64. Object arrays (e.g.
    holding `fractions.Fraction`) are kept as they are so that exact
    arithmetic survives.
    """
    arr = np.array(v, copy=True) if copy else np.asarray(v)
    if arr.ndim != 1:
        raise ValueError(f"Expected a vector, got an array of shape {arr.shape}.")
    if arr.dtype != object and not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float64)
    return arr


def as_matrix(M):
    """Converts an array-like into a 2-D array; sparse matrices stay sparse."""
    if sp.issparse(M):
        return sp.csr_matrix(M)
    arr = np.asarray(M)
    if arr.ndim != 2:
        raise ValueError(f"Expected a matrix, got an array of shape {arr.shape}.")
    if arr.dtype != object and not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float64)
    return arr


def unit_vector(i: int, n: int, dtype=np.float64) -> np.ndarray:
    """The i-th canonical basis vector of length n."""
    e = np.zeros(n, dtype=dtype)
    e[i] = 1
    return e


def check_direction(d, n: int) -> np.ndarray:
    """Converts `d` to a vector and checks that it has length `n`."""
    d = as_vector(d)
    if d.shape[0] != n:
        raise DimensionMismatchError(
            f"Direction of length {d.shape[0]} incompatible with a set of dimension {n}."
        )
    return d


def check_same_dim(*sets) -> int:
    """
    Checks that all sets share the same ambient dimension and returns it.

    Raises:
        DimensionMismatchError: If two sets differ in dimension.
    """
    dims = {X.dim for X in sets}
    if len(dims) > 1:
        raise DimensionMismatchError(
            f"Sets of different dimensions: {[X.dim for X in sets]}."
        )
    return dims.pop()


def right_turn(O, A, B):
    """
    Orientation predicate for three points in the plane.

    Returns the cross product `(A - O) x (B - O)`. The result is positive if
    O, A, B make a counter-clockwise (left) turn, negative for a clockwise
    turn and zero if the points are collinear.
    """
    return (A[0] - O[0]) * (B[1] - O[1]) - (A[1] - O[1]) * (B[0] - O[0])


def minmax(A, B, C) -> Tuple:
    """Returns the minimum and maximum of three scalars."""
    i, j = arg_minmax(A, B, C)
    values = (A, B, C)
    return values[i], values[j]


def arg_minmax(A, B, C) -> Tuple[int, int]:
    """Returns the positions (0, 1 or 2) of the minimum and maximum of three scalars."""
    if A > B:
        if B > C:
            return 2, 0
        elif A > C:
            return 1, 0
        else:
            return 1, 2
    else:
        if B < C:
            return 0, 2
        elif A < C:
            return 0, 1
        else:
            return 2, 1


def samedir(u, v) -> Tuple[bool, float]:
    """
    Checks whether `u` is a positive multiple of `v`.

    Returns:
        A pair `(same, k)` where `same` is True if `u = k * v` for some
        `k > 0`. If `same` is False, `k` is 0.
    """
    if len(u) != len(v):
        raise DimensionMismatchError("Vectors of different length.")
    factor = None
    for ui, vi in zip(u, v):
        if isapproxzero(ui):
            if not isapproxzero(vi):
                return False, 0
            continue
        if isapproxzero(vi):
            return False, 0
        ratio = ui / vi
        if factor is None:
            if ratio < 0:
                return False, 0
            factor = ratio
        elif not _isapprox(factor, ratio):
            return False, 0
    if factor is None:
        # both vectors are zero
        return True, 1
    return True, factor


def nonzero_indices(v) -> List[int]:
    """Indices of the entries of `v` that are not approximately zero."""
    return [i for i, vi in enumerate(v) if not isapproxzero(vi)]


def abs_sum(d, G) -> float:
    """Returns `sum_i |d . g_i|` over the columns `g_i` of G."""
    return np.sum(np.abs(np.asarray(d) @ np.asarray(G)))


def ispermutation(points: Sequence, other: Sequence) -> bool:
    """
    Checks whether two lists of vectors hold the same points up to order.

    Points are matched with approximate equality; multiplicities count.
    """
    if len(points) != len(other):
        return False
    remaining = list(other)
    for p in points:
        for k, q in enumerate(remaining):
            if isapprox_vector(p, q):
                del remaining[k]
                break
        else:
            return False
    return True
