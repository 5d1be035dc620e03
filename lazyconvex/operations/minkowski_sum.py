"""
Lazy Minkowski sums.

The support function of a Minkowski sum is the sum of the support functions
of its operands, and a support vector is the sum of support vectors, so the
sum never has to be computed explicitly to be queried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..convex_set import ConvexSet
from ..exceptions import DimensionMismatchError
from ..utils import check_direction, check_same_dim
from .base import LazyOperation, array_dim

logger = logging.getLogger(__name__)


class MinkowskiSum(LazyOperation):
    """
    The Minkowski sum `X + Y = {x + y : x in X, y in Y}` of two sets.

    Args:
        X: The first summand.
        Y: The second summand, of the same dimension.

    Raises:
        DimensionMismatchError: If the dimensions differ.
    """

    def __init__(self, X: ConvexSet, Y: ConvexSet) -> None:
        check_same_dim(X, Y)
        self._X = X
        self._Y = Y

    @property
    def X(self) -> ConvexSet:
        return self._X

    @property
    def Y(self) -> ConvexSet:
        return self._Y

    @property
    def operands(self) -> List[ConvexSet]:
        return [self._X, self._Y]

    @property
    def dim(self) -> int:
        return self._X.dim

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return self._X.support_vector(d) + self._Y.support_vector(d)

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return self._X.support_function(d) + self._Y.support_function(d)

    def is_element(self, x) -> bool:
        """Decided on the concrete sum."""
        return self.concretize().is_element(x)

    def is_empty(self, witness: bool = False):
        empty = self._X.is_empty() or self._Y.is_empty()
        if witness:
            if empty:
                return True, np.zeros(0)
            return False, self._X.an_element() + self._Y.an_element()
        return empty

    def is_bounded(self) -> bool:
        if self.is_empty():
            return True
        return self._X.is_bounded() and self._Y.is_bounded()

    def an_element(self) -> np.ndarray:
        return self._X.an_element() + self._Y.an_element()

    def concretize(self) -> ConvexSet:
        from ..concrete import minkowski_sum

        return minkowski_sum(self._X.concretize(), self._Y.concretize())

    def swap(self) -> MinkowskiSum:
        """Returns the sum with the operands exchanged."""
        return MinkowskiSum(self._Y, self._X)

    def translate(self, v) -> MinkowskiSum:
        return MinkowskiSum(self._X.translate(v), self._Y)


class MinkowskiSumArray(LazyOperation):
    """
    The Minkowski sum of a list of sets.

    Args:
        sets: The summands, all of the same dimension.
        dim: The dimension. Required only for an empty list, which
            represents the zero set.
    """

    def __init__(self, sets=(), dim: Optional[int] = None) -> None:
        sets = list(sets)
        self._dim = array_dim(sets, dim)
        self._array = sets

    @property
    def array(self) -> List[ConvexSet]:
        """The list of summands."""
        return self._array

    @property
    def operands(self) -> List[ConvexSet]:
        return self._array

    @property
    def dim(self) -> int:
        return self._dim

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        result = np.zeros(self.dim)
        for X in self._array:
            result = result + X.support_vector(d)
        return result

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return sum((X.support_function(d) for X in self._array), 0.0)

    def is_element(self, x) -> bool:
        return self.concretize().is_element(x)

    def is_empty(self, witness: bool = False):
        empty = any(X.is_empty() for X in self._array)
        if witness:
            if empty:
                return True, np.zeros(0)
            return False, self.an_element()
        return empty

    def is_bounded(self) -> bool:
        if self.is_empty():
            return True
        return all(X.is_bounded() for X in self._array)

    def an_element(self) -> np.ndarray:
        result = np.zeros(self.dim)
        for X in self._array:
            result = result + X.an_element()
        return result

    def concretize(self) -> ConvexSet:
        from ..concrete import minkowski_sum
        from ..sets.singleton import ZeroSet

        result: ConvexSet = ZeroSet(self.dim)
        for X in self._array:
            result = minkowski_sum(result, X.concretize())
        return result


@dataclass
class _CachedPair:
    """Cache entry: the number of folded summands and their support vector sum."""

    index: int
    vector: np.ndarray


class CachedMinkowskiSumArray(MinkowskiSumArray):
    """
    A Minkowski sum of a growing list of sets that caches support vectors.

    For every queried direction the cache stores how many summands have
    been folded into the running support vector. A later query in the same
    direction only adds the summands appended since. Directions are cached
    by value, so the caller may reuse or mutate its direction arrays.

    The live list of summands is `array`; sets are added with `append` or
    by appending to `array` directly. Summands that every cached direction
    has already folded in can be released with `forget_sets`.

    Args:
        sets: The initial summands.
        dim: The dimension. Required only for an empty initial list.
    """

    def __init__(self, sets=(), dim: Optional[int] = None) -> None:
        sets = list(sets)
        if sets:
            array_dim(sets, dim)
        self._explicit_dim = dim
        self._array = sets
        self._cache: Dict[Tuple, _CachedPair] = {}
        self._forgotten = 0

    @property
    def dim(self) -> int:
        if self._explicit_dim is not None:
            return self._explicit_dim
        if not self._array:
            raise ValueError("The dimension of an empty cached Minkowski sum is unknown.")
        return self._array[0].dim

    @property
    def cache(self) -> Dict[Tuple, _CachedPair]:
        """The direction cache, keyed by the direction as a tuple."""
        return self._cache

    def append(self, X: ConvexSet) -> None:
        """Adds a summand."""
        if (self._array or self._explicit_dim is not None) and X.dim != self.dim:
            raise DimensionMismatchError(
                f"Cannot add a set of dimension {X.dim} to a sum of dimension {self.dim}."
            )
        self._array.append(X)

    def support_vector(self, d) -> np.ndarray:
        """
        Returns a support vector, folding in only the summands that were
        added since the last query in direction `d`.

        Raises:
            ValueError: If `d` was not queried before and summands have
                already been forgotten.
        """
        d = check_direction(d, self.dim)
        key = tuple(d.tolist())
        entry = self._cache.get(key)
        if entry is None:
            if self._forgotten > 0:
                raise ValueError(
                    "Cannot evaluate a new direction after summands have been forgotten."
                )
            entry = _CachedPair(0, np.zeros(self.dim))
            self._cache[key] = entry
        else:
            logger.debug("Cache hit at index %d of %d", entry.index, len(self._array))

        n = len(self._array)
        if entry.index < n:
            for X in self._array[entry.index:]:
                entry.vector = entry.vector + X.support_vector(d)
            logger.debug("Folded summands %d to %d", entry.index, n)
            entry.index = n
        return np.array(entry.vector)

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return np.dot(d, self.support_vector(d))

    def forget_sets(self) -> int:
        """
        Removes the summands that every cached direction has folded in.

        The cached support vectors are kept and their indices are shifted
        to the shortened list. Afterwards only cached directions can be
        queried.

        Returns:
            The number of removed summands.
        """
        k = min((entry.index for entry in self._cache.values()), default=0)
        if k > 0:
            del self._array[:k]
            for entry in self._cache.values():
                entry.index -= k
            self._forgotten += k
        return k

    def concretize(self) -> ConvexSet:
        if self._forgotten > 0:
            raise ValueError("Cannot concretize a sum whose summands have been forgotten.")
        return MinkowskiSumArray(self._array, dim=self.dim).concretize()

