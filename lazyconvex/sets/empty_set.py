from __future__ import annotations

from typing import List

import numpy as np

from ..convex_set import ConvexSet
from ..exceptions import EmptySetError
from ..utils import check_direction


class EmptySet(ConvexSet):
    """
    The empty set of a given ambient dimension.

    It is the absorbing element for Minkowski sums and intersections and the
    neutral element for unions. Support vector, support function and
    `an_element` are undefined and raise `EmptySetError`.
    """

    def __init__(self, dim: int) -> None:
        if dim < 0:
            raise ValueError("The dimension of an empty set must be non-negative.")
        self._dim = int(dim)

    @property
    def dim(self) -> int:
        return self._dim

    def support_vector(self, d) -> np.ndarray:
        raise EmptySetError("The support vector of an empty set is undefined.")

    def support_function(self, d):
        raise EmptySetError("The support function of an empty set is undefined.")

    def is_element(self, x) -> bool:
        check_direction(x, self.dim)
        return False

    def is_empty(self, witness: bool = False):
        if witness:
            return True, np.zeros(0)
        return True

    def is_bounded(self) -> bool:
        return True

    def an_element(self) -> np.ndarray:
        raise EmptySetError("An empty set has no element.")

    def vertices_list(self) -> List[np.ndarray]:
        return []

    def translate(self, v, inplace: bool = False) -> EmptySet:
        """Translating the empty set gives the empty set."""
        check_direction(v, self.dim)
        return self

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> EmptySet:
        return cls(dim)

    def __eq__(self, other) -> bool:
        return isinstance(other, EmptySet) and other.dim == self.dim

    def __hash__(self) -> int:
        return hash((EmptySet, self._dim))

    def __repr__(self) -> str:
        return f"EmptySet({self._dim})"
