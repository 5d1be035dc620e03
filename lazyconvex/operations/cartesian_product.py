"""
Lazy Cartesian products.

A point of `X1 x ... x Xk` is the concatenation of one point per block. All
queries decompose block-wise: support vectors concatenate, support
functions add up, and membership splits the point.
"""

from __future__ import annotations

import itertools
from typing import List

import numpy as np

from ..convex_set import ConvexSet
from ..exceptions import EmptySetError
from ..utils import check_direction
from .base import LazyOperation


class CartesianProductArray(LazyOperation):
    """
    The Cartesian product of a list of sets.

    Args:
        sets: The blocks, in order. Their dimensions may differ.
    """

    def __init__(self, sets=()) -> None:
        self._array = list(sets)

    @property
    def array(self) -> List[ConvexSet]:
        return self._array

    @property
    def operands(self) -> List[ConvexSet]:
        return self._array

    @property
    def dim(self) -> int:
        return sum(X.dim for X in self.operands)

    def block_dims(self) -> List[int]:
        """The dimension of each block."""
        return [X.dim for X in self.operands]

    def split(self, x) -> List[np.ndarray]:
        """Splits a vector of length `dim` into the blocks."""
        x = check_direction(x, self.dim)
        offsets = np.cumsum([0] + self.block_dims())
        return [x[offsets[i]:offsets[i + 1]] for i in range(len(self.operands))]

    def support_vector(self, d) -> np.ndarray:
        blocks = self.split(d)
        if not blocks:
            return np.zeros(0)
        return np.concatenate([X.support_vector(di) for X, di in zip(self.operands, blocks)])

    def support_function(self, d):
        blocks = self.split(d)
        return sum((X.support_function(di) for X, di in zip(self.operands, blocks)), 0.0)

    def is_element(self, x) -> bool:
        blocks = self.split(x)
        return all(X.is_element(xi) for X, xi in zip(self.operands, blocks))

    def is_empty(self, witness: bool = False):
        empty = any(X.is_empty() for X in self.operands)
        if witness:
            if empty:
                return True, np.zeros(0)
            return False, self.an_element()
        return empty

    def is_bounded(self) -> bool:
        if self.is_empty():
            return True
        return all(X.is_bounded() for X in self.operands)

    def an_element(self) -> np.ndarray:
        if not self.operands:
            return np.zeros(0)
        if self.is_empty():
            raise EmptySetError("An empty Cartesian product has no element.")
        return np.concatenate([X.an_element() for X in self.operands])

    def constraints_list(self) -> List:
        """The constraints of every block, lifted by zero padding."""
        from ..sets.halfspaces import HalfSpace

        n = self.dim
        constraints = []
        offset = 0
        for X in self.operands:
            k = X.dim
            for c in X.constraints_list():
                a = np.zeros(n, dtype=np.result_type(c.a.dtype, np.float64))
                a[offset:offset + k] = c.a
                constraints.append(HalfSpace(a, c.b))
            offset += k
        return constraints

    def vertices_list(self) -> List[np.ndarray]:
        """All concatenations of one vertex per block."""
        vertex_lists = [X.vertices_list() for X in self.operands]
        return [np.concatenate(choice) for choice in itertools.product(*vertex_lists)]

    def concretize(self) -> ConvexSet:
        from ..concrete import cartesian_product

        if not self.operands:
            from ..sets.universe import Universe

            return Universe(0)
        result = self.operands[0].concretize()
        for X in self.operands[1:]:
            result = cartesian_product(result, X.concretize())
        return result

    def translate(self, v) -> CartesianProductArray:
        blocks = self.split(v)
        return CartesianProductArray([X.translate(vi) for X, vi in zip(self.operands, blocks)])


class CartesianProduct(CartesianProductArray):
    """
    The Cartesian product `X x Y` of two sets.

    Args:
        X: The first block.
        Y: The second block.
    """

    def __init__(self, X: ConvexSet, Y: ConvexSet) -> None:
        self._X = X
        self._Y = Y

    @property
    def X(self) -> ConvexSet:
        return self._X

    @property
    def Y(self) -> ConvexSet:
        return self._Y

    @property
    def array(self) -> List[ConvexSet]:
        return [self._X, self._Y]

    @property
    def operands(self) -> List[ConvexSet]:
        return [self._X, self._Y]

    def swap(self) -> CartesianProduct:
        return CartesianProduct(self._Y, self._X)

    def translate(self, v) -> CartesianProduct:
        v_X, v_Y = self.split(v)
        return CartesianProduct(self._X.translate(v_X), self._Y.translate(v_Y))
