"""
Lazy unions of sets.

A union of convex sets is not convex in general. The union types implement
the evaluation protocol nevertheless: the support function of a union equals
the support function of its convex hull, and a support vector of the hull can
be chosen among the members' support vectors.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..convex_set import ConvexSet
from ..exceptions import EmptySetError, UnknownAlgorithmError
from ..utils import check_direction, check_same_dim
from .base import LazyOperation, array_dim

UNION_SIGMA_ALGORITHMS = ("support_vector", "support_function")


class _UnionBase(LazyOperation):
    """Shared evaluation for `UnionSet` and `UnionSetArray`."""

    @property
    def array(self) -> List[ConvexSet]:
        return self.operands

    def is_convex(self) -> bool:
        return False

    def is_polyhedral(self) -> bool:
        return False

    def _nonempty_members(self) -> List[ConvexSet]:
        return [X for X in self.operands if not X.is_empty()]

    def support_vector(self, d, algorithm: str = "support_vector") -> np.ndarray:
        """
        Returns the support vector of the member that maximizes `d . x`.

        Args:
            d: The direction.
            algorithm: "support_vector" compares `d . sigma(d, X_i)` over the
                members; "support_function" compares `rho(d, X_i)` first and
                only computes the support vector of the maximizing member.

        Raises:
            UnknownAlgorithmError: If `algorithm` is not a known name.
            EmptySetError: If every member is empty.
        """
        if algorithm not in UNION_SIGMA_ALGORITHMS:
            raise UnknownAlgorithmError(algorithm, UNION_SIGMA_ALGORITHMS)
        d = check_direction(d, self.dim)
        members = self._nonempty_members()
        if not members:
            raise EmptySetError("The support vector of an empty union is undefined.")
        if algorithm == "support_vector":
            vectors = [X.support_vector(d) for X in members]
            values = [np.dot(d, v) for v in vectors]
            return vectors[int(np.argmax(values))]
        values = [X.support_function(d) for X in members]
        return members[int(np.argmax(values))].support_vector(d)

    def support_function(self, d):
        d = check_direction(d, self.dim)
        members = self._nonempty_members()
        if not members:
            raise EmptySetError("The support function of an empty union is undefined.")
        return max(X.support_function(d) for X in members)

    def is_element(self, x) -> bool:
        return any(X.is_element(x) for X in self.operands)

    def is_empty(self, witness: bool = False):
        members = self._nonempty_members()
        if witness:
            if not members:
                return True, np.zeros(0)
            return False, members[0].an_element()
        return not members

    def is_bounded(self) -> bool:
        return all(X.is_bounded() for X in self.operands)

    def an_element(self) -> np.ndarray:
        members = self._nonempty_members()
        if not members:
            raise EmptySetError("An empty union has no element.")
        return members[0].an_element()

    def vertices_list(self, apply_convex_hull: bool = False) -> List[np.ndarray]:
        """
        Returns the concatenated vertex lists of the members.

        Args:
            apply_convex_hull: If True, the list is reduced to the vertices
                of the convex hull.
        """
        from ..convex_hull import convex_hull

        vertices = []
        for X in self.operands:
            vertices.extend(X.vertices_list())
        if apply_convex_hull:
            return convex_hull(vertices)
        return vertices

    def concretize(self) -> ConvexSet:
        return self

    def constraints_list(self) -> List:
        raise NotImplementedError("A union of sets has no constraint representation.")


class UnionSet(_UnionBase):
    """
    The union `X | Y` of two sets.

    Args:
        X: The first set.
        Y: The second set, of the same dimension.
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

    def swap(self) -> UnionSet:
        return UnionSet(self._Y, self._X)

    def translate(self, v) -> UnionSet:
        return UnionSet(self._X.translate(v), self._Y.translate(v))


class UnionSetArray(_UnionBase):
    """
    The union of a list of sets.

    Args:
        sets: The sets, all of the same dimension.
        dim: The dimension. Required only for an empty list, which
            represents the empty set.
    """

    def __init__(self, sets=(), dim: Optional[int] = None) -> None:
        sets = list(sets)
        self._dim = array_dim(sets, dim)
        self._array = sets

    @property
    def operands(self) -> List[ConvexSet]:
        return self._array

    @property
    def dim(self) -> int:
        return self._dim

    def translate(self, v) -> UnionSetArray:
        return UnionSetArray([X.translate(v) for X in self._array], dim=self._dim)
