"""
Lazy matrix exponentials and the images of sets under them.

`SparseMatrixExp` represents `exp(M)` for a sparse matrix M without
computing it: rows, columns and products with vectors are evaluated with
`scipy.sparse.linalg.expm_multiply`, which only needs the action of M on
vectors. `ExponentialMap` uses this to evaluate support functions of
`exp(M) X` through the transposed action, `rho(d, exp(M) X) = rho(exp(M)^T d, X)`.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import scipy.sparse as sp
import scipy.sparse.linalg

from ..convex_set import ConvexSet
from ..exceptions import DimensionMismatchError
from ..utils import as_matrix, as_vector, check_direction, unit_vector
from .base import LazyOperation


class SparseMatrixExp:
    """
    The matrix exponential `exp(M)` of a square sparse matrix, kept lazy.

    Args:
        M: A square `scipy.sparse` matrix.

    Raises:
        TypeError: If `M` is not a sparse matrix.
        ValueError: If `M` is not square.
    """

    __array_ufunc__ = None

    def __init__(self, M) -> None:
        if not sp.issparse(M):
            raise TypeError(
                f"SparseMatrixExp expects a scipy.sparse matrix, got {type(M).__name__}; "
                "use scipy.linalg.expm for dense matrices."
            )
        if M.shape[0] != M.shape[1]:
            raise ValueError(f"The matrix exponential needs a square matrix, got shape {M.shape}.")
        self._M = sp.csc_matrix(M, dtype=float)

    @property
    def M(self):
        """The sparse matrix whose exponential is represented."""
        return self._M

    @property
    def shape(self):
        return self._M.shape

    def get_column(self, j: int) -> np.ndarray:
        """Returns the j-th column `exp(M) e_j`."""
        return scipy.sparse.linalg.expm_multiply(self._M, unit_vector(j, self.shape[0]))

    def get_columns(self, J: Sequence[int]) -> np.ndarray:
        """Returns the columns with indices J as a dense matrix."""
        n = self.shape[0]
        E = np.zeros((n, len(J)))
        for k, j in enumerate(J):
            E[j, k] = 1.0
        return scipy.sparse.linalg.expm_multiply(self._M, E)

    def get_row(self, i: int) -> np.ndarray:
        """Returns the i-th row, computed as the column of `exp(M^T)`."""
        return scipy.sparse.linalg.expm_multiply(self._M.T, unit_vector(i, self.shape[0]))

    def get_rows(self, I: Sequence[int]) -> np.ndarray:
        """Returns the rows with indices I as a dense matrix."""
        n = self.shape[0]
        E = np.zeros((n, len(I)))
        for k, i in enumerate(I):
            E[i, k] = 1.0
        return scipy.sparse.linalg.expm_multiply(self._M.T, E).T

    def apply(self, v) -> np.ndarray:
        """Returns `exp(M) v`."""
        v = check_direction(v, self.shape[1])
        return scipy.sparse.linalg.expm_multiply(self._M, v.astype(float))

    def apply_transpose(self, v) -> np.ndarray:
        """Returns `exp(M)^T v = exp(M^T) v`."""
        v = check_direction(v, self.shape[0])
        return scipy.sparse.linalg.expm_multiply(self._M.T, v.astype(float))

    def apply_inverse(self, v) -> np.ndarray:
        """Returns `exp(M)^{-1} v = exp(-M) v`."""
        v = check_direction(v, self.shape[0])
        return scipy.sparse.linalg.expm_multiply(-self._M, v.astype(float))

    def transpose(self) -> SparseMatrixExp:
        """The lazy exponential of `M^T`, i.e. `exp(M)^T`."""
        return SparseMatrixExp(self._M.T)

    @property
    def T(self) -> SparseMatrixExp:
        return self.transpose()

    def to_dense(self) -> np.ndarray:
        """Computes the exponential as a dense array."""
        return scipy.sparse.linalg.expm(self._M).toarray()

    def __matmul__(self, other):
        if isinstance(other, ConvexSet):
            return exponential_map(self, other)
        return self.apply(other)

    def __repr__(self) -> str:
        return f"SparseMatrixExp({self.shape[0]}x{self.shape[1]}, nnz={self._M.nnz})"


def exponential_map(E, X: ConvexSet) -> ConvexSet:
    """
    Returns the lazy image of X under a lazy exponential, simplifying the
    zero set and the empty set.
    """
    from ..sets.empty_set import EmptySet
    from ..sets.singleton import ZeroSet

    rows = E.shape[0]
    if isinstance(X, (ZeroSet, EmptySet)):
        if X.dim != E.shape[1]:
            raise DimensionMismatchError(
                f"A {E.shape[0]}x{E.shape[1]} exponential cannot map a set of dimension {X.dim}."
            )
        return type(X)(rows)
    if isinstance(E, ProjectionSparseMatrixExp):
        return ExponentialProjectionMap(E, X)
    return ExponentialMap(E, X)


class ExponentialMap(LazyOperation):
    """
    The image `exp(M) X` of a set under a lazy matrix exponential.

    Args:
        E: A `SparseMatrixExp`.
        X: A set of matching dimension.
    """

    def __init__(self, E: SparseMatrixExp, X: ConvexSet) -> None:
        if E.shape[1] != X.dim:
            raise DimensionMismatchError(
                f"A {E.shape[0]}x{E.shape[1]} exponential cannot map a set of dimension {X.dim}."
            )
        self._E = E
        self._X = X

    @property
    def E(self) -> SparseMatrixExp:
        return self._E

    @property
    def X(self) -> ConvexSet:
        return self._X

    @property
    def operands(self) -> List[ConvexSet]:
        return [self._X]

    @property
    def dim(self) -> int:
        return self._E.shape[0]

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return self._E.apply(self._X.support_vector(self._E.apply_transpose(d)))

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return self._X.support_function(self._E.apply_transpose(d))

    def is_element(self, x) -> bool:
        """Tests `exp(-M) x` against the operand."""
        x = check_direction(x, self.dim)
        return self._X.is_element(self._E.apply_inverse(x))

    def is_empty(self, witness: bool = False):
        empty = self._X.is_empty()
        if witness:
            if empty:
                return True, np.zeros(0)
            return False, self.an_element()
        return empty

    def is_bounded(self) -> bool:
        return self._X.is_bounded()

    def an_element(self) -> np.ndarray:
        return self._E.apply(self._X.an_element())

    def vertices_list(self) -> List[np.ndarray]:
        return [self._E.apply(v) for v in self._X.vertices_list()]

    def concretize(self) -> ConvexSet:
        from ..concrete import linear_map

        return linear_map(self._E.to_dense(), self._X.concretize())


class ProjectionSparseMatrixExp:
    """
    The product `L exp(M) R` of a lazy exponential with two matrices.

    Only products with vectors are evaluated.

    Args:
        L: The left matrix, of shape (m, n).
        E: A `SparseMatrixExp` of shape (n, n).
        R: The right matrix, of shape (n, k).
    """

    __array_ufunc__ = None

    def __init__(self, L, E: SparseMatrixExp, R) -> None:
        L = as_matrix(L)
        R = as_matrix(R)
        n = E.shape[0]
        if L.shape[1] != n or R.shape[0] != n:
            raise DimensionMismatchError(
                f"Cannot form the product of shapes {L.shape}, {E.shape} and {R.shape}."
            )
        self._L = L
        self._E = E
        self._R = R

    @property
    def L(self):
        return self._L

    @property
    def E(self) -> SparseMatrixExp:
        return self._E

    @property
    def R(self):
        return self._R

    @property
    def shape(self):
        return self._L.shape[0], self._R.shape[1]

    def apply(self, v) -> np.ndarray:
        """Returns `L exp(M) R v`."""
        v = check_direction(v, self.shape[1])
        return np.asarray(self._L @ self._E.apply(np.asarray(self._R @ v).ravel())).ravel()

    def apply_transpose(self, v) -> np.ndarray:
        """Returns `R^T exp(M)^T L^T v`."""
        v = check_direction(v, self.shape[0])
        return np.asarray(self._R.T @ self._E.apply_transpose(np.asarray(self._L.T @ v).ravel())).ravel()

    def to_dense(self) -> np.ndarray:
        L = self._L.toarray() if sp.issparse(self._L) else self._L
        R = self._R.toarray() if sp.issparse(self._R) else self._R
        return L @ self._E.to_dense() @ R

    def __matmul__(self, other):
        if isinstance(other, ConvexSet):
            return exponential_map(self, other)
        return self.apply(other)

    def __repr__(self) -> str:
        return f"ProjectionSparseMatrixExp({self.shape[0]}x{self.shape[1]})"


class ExponentialProjectionMap(LazyOperation):
    """
    The image `L exp(M) R X` of a set.

    Args:
        P: A `ProjectionSparseMatrixExp`.
        X: A set of dimension `P.shape[1]`.
    """

    def __init__(self, P: ProjectionSparseMatrixExp, X: ConvexSet) -> None:
        if P.shape[1] != X.dim:
            raise DimensionMismatchError(
                f"A {P.shape[0]}x{P.shape[1]} map cannot be applied to a set of dimension {X.dim}."
            )
        self._P = P
        self._X = X

    @property
    def P(self) -> ProjectionSparseMatrixExp:
        return self._P

    @property
    def X(self) -> ConvexSet:
        return self._X

    @property
    def operands(self) -> List[ConvexSet]:
        return [self._X]

    @property
    def dim(self) -> int:
        return self._P.shape[0]

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return self._P.apply(self._X.support_vector(self._P.apply_transpose(d)))

    def support_function(self, d):
        d = check_direction(d, self.dim)
        return self._X.support_function(self._P.apply_transpose(d))

    def is_element(self, x) -> bool:
        """Decided on the image under the dense product."""
        from .linear_map import LinearMap

        return LinearMap(self._P.to_dense(), self._X).is_element(as_vector(x))

    def is_empty(self, witness: bool = False):
        empty = self._X.is_empty()
        if witness:
            if empty:
                return True, np.zeros(0)
            return False, self._P.apply(self._X.an_element())
        return empty

    def is_bounded(self) -> bool:
        if self._X.is_bounded():
            return True
        return super().is_bounded()

    def an_element(self) -> np.ndarray:
        return self._P.apply(self._X.an_element())

    def vertices_list(self) -> List[np.ndarray]:
        return [self._P.apply(v) for v in self._X.vertices_list()]

    def concretize(self) -> ConvexSet:
        from ..concrete import linear_map

        return linear_map(self._P.to_dense(), self._X.concretize())
