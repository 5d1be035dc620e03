"""
Lazy images of sets under linear maps.
"""

from __future__ import annotations

from typing import List

import numpy as np

from ..backends import require_feasibility, solve_lp
from ..convex_set import ConvexSet
from ..exceptions import DimensionMismatchError
from ..utils import as_matrix, check_direction
from .base import LazyOperation


class LinearMap(LazyOperation):
    """
    The image `M X = {M x : x in X}` of a set under a matrix.

    The support function is pushed through the transpose,
    `rho(d, M X) = rho(M^T d, X)`, so the image is never computed.

    Args:
        M: A matrix of shape (m, n).
        X: A set of dimension n.
    """

    def __init__(self, M, X: ConvexSet) -> None:
        M = as_matrix(M)
        if M.shape[1] != X.dim:
            raise DimensionMismatchError(
                f"A matrix with {M.shape[1]} columns cannot map a set of dimension {X.dim}."
            )
        self._M = M
        self._X = X

    @property
    def M(self):
        """The matrix."""
        return self._M

    @property
    def X(self) -> ConvexSet:
        """The mapped set."""
        return self._X

    @property
    def operands(self) -> List[ConvexSet]:
        return [self._X]

    @property
    def dim(self) -> int:
        return self._M.shape[0]

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return self._M @ self._X.support_vector(self._M.T @ d)

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return self._X.support_function(self._M.T @ d)

    def is_element(self, x) -> bool:
        """
        Membership test for the image.

        An invertible square matrix is inverted. For a polyhedral operand
        with constraints `A y <= b` the LP `A y <= b, M y = x` is solved.

        Raises:
            NotImplementedError: For a singular or non-square matrix and a
                non-polyhedral operand.
        """
        x = check_direction(x, self.dim)
        M = _dense(self._M)
        m, n = M.shape
        if m == n and np.linalg.matrix_rank(M.astype(float)) == n:
            return self._X.is_element(np.linalg.solve(M.astype(float), x.astype(float)))
        if self._X.is_polyhedral():
            constraints = self._X.constraints_list()
            A = np.array([c.a for c in constraints], dtype=float).reshape(-1, n)
            b = np.array([c.b for c in constraints], dtype=float)
            senses = "<" * A.shape[0] + "=" * m
            res = solve_lp(np.zeros(n), np.vstack([A, M]), senses, np.concatenate([b, x]))
            return require_feasibility(res)
        raise NotImplementedError(
            f"Membership in the image of a {self._X.__class__.__name__} under a singular "
            "or non-square matrix is not supported."
        )

    def is_empty(self, witness: bool = False):
        empty = self._X.is_empty()
        if witness:
            if empty:
                return True, np.zeros(0)
            return False, self.an_element()
        return empty

    def is_bounded(self) -> bool:
        if self._X.is_bounded():
            return True
        return super().is_bounded()

    def an_element(self) -> np.ndarray:
        return self._M @ self._X.an_element()

    def vertices_list(self) -> List[np.ndarray]:
        """The images of the operand's vertices (not reduced to the hull)."""
        return [self._M @ v for v in self._X.vertices_list()]

    def concretize(self) -> ConvexSet:
        from ..concrete import linear_map

        return linear_map(_dense(self._M), self._X.concretize())

    def __repr__(self) -> str:
        return f"LinearMap({self._M.shape[0]}x{self._M.shape[1]}, {self._X!r})"


def _dense(M) -> np.ndarray:
    if hasattr(M, "toarray"):
        return M.toarray()
    return M
