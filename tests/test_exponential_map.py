"""
Tests for lazy matrix exponentials and the exponential map of a set.
"""

import pytest
import numpy as np
import scipy.linalg
import scipy.sparse as sp
from numpy.testing import assert_allclose

from lazyconvex.exceptions import DimensionMismatchError
from lazyconvex.operations import (
    ExponentialMap,
    ExponentialProjectionMap,
    ProjectionSparseMatrixExp,
    SparseMatrixExp,
    exponential_map,
)
from lazyconvex.sets import BallInf, EmptySet, Hyperrectangle, Zonotope, ZeroSet

from .checks.convex_set import ConvexSetChecks

E1 = np.e
ROTATION = np.array([[0.0, -0.5], [0.5, 0.0]])


@pytest.fixture
def diagonal():
    """exp(diag(1, -1)) = diag(e, 1/e)."""
    return SparseMatrixExp(sp.diags([1.0, -1.0]))


@pytest.fixture
def rotation():
    return SparseMatrixExp(sp.csc_matrix(ROTATION))


class TestExponentialMapContract(ConvexSetChecks):
    @pytest.fixture
    def convex_set(self):
        E = SparseMatrixExp(sp.csc_matrix([[0.1, 0.5], [-0.5, 0.1]]))
        return ExponentialMap(E, Hyperrectangle([1.0, 0.0], [0.5, 1.0]))


class TestSparseMatrixExp:
    def test_rejects_dense_matrices(self):
        with pytest.raises(TypeError):
            SparseMatrixExp(np.eye(2))

    def test_rejects_non_square_matrices(self):
        with pytest.raises(ValueError):
            SparseMatrixExp(sp.csc_matrix(np.ones((2, 3))))

    def test_to_dense(self, rotation):
        assert rotation.shape == (2, 2)
        assert_allclose(rotation.to_dense(), scipy.linalg.expm(ROTATION), atol=1e-12)

    def test_columns_and_rows(self, rotation):
        expected = scipy.linalg.expm(ROTATION)
        assert_allclose(rotation.get_column(1), expected[:, 1], atol=1e-10)
        assert_allclose(rotation.get_row(0), expected[0, :], atol=1e-10)
        assert_allclose(rotation.get_columns([1, 0]), expected[:, [1, 0]], atol=1e-10)
        assert_allclose(rotation.get_rows([1]), expected[[1], :], atol=1e-10)

    def test_apply(self, diagonal):
        assert_allclose(diagonal.apply([1.0, 1.0]), [E1, 1.0 / E1])
        assert_allclose(diagonal @ np.array([2.0, 0.0]), [2.0 * E1, 0.0], atol=1e-12)
        with pytest.raises(DimensionMismatchError):
            diagonal.apply([1.0, 1.0, 1.0])

    def test_apply_transpose(self, rotation):
        expected = scipy.linalg.expm(ROTATION).T @ np.array([1.0, 2.0])
        assert_allclose(rotation.apply_transpose([1.0, 2.0]), expected, atol=1e-10)

    def test_apply_inverse(self, rotation):
        v = np.array([0.3, -1.2])
        assert_allclose(rotation.apply(rotation.apply_inverse(v)), v, atol=1e-10)

    def test_transpose(self, rotation):
        assert_allclose(rotation.T.to_dense(), rotation.to_dense().T, atol=1e-12)


class TestExponentialMap:
    def test_support_function(self, diagonal):
        Y = ExponentialMap(diagonal, BallInf([0.0, 0.0], 1.0))
        assert Y.dim == 2
        assert Y.support_function([1.0, 0.0]) == pytest.approx(E1)
        assert Y.support_function([0.0, -1.0]) == pytest.approx(1.0 / E1)
        assert_allclose(Y.support_vector([1.0, 1.0]), [E1, 1.0 / E1])

    def test_membership(self, diagonal):
        Y = ExponentialMap(diagonal, BallInf([0.0, 0.0], 1.0))
        assert Y.is_element([2.5, 0.3])
        assert not Y.is_element([3.0, 0.0])
        assert not Y.is_element([0.0, 0.5])

    def test_dimension_mismatch(self, diagonal):
        with pytest.raises(DimensionMismatchError):
            ExponentialMap(diagonal, BallInf([0.0, 0.0, 0.0], 1.0))

    def test_emptiness_and_an_element(self, diagonal):
        Y = ExponentialMap(diagonal, BallInf([1.0, 1.0], 1.0))
        empty, point = Y.is_empty(witness=True)
        assert not empty
        assert_allclose(point, [E1, 1.0 / E1])
        assert Y.is_bounded()

    def test_vertices(self, diagonal):
        Y = ExponentialMap(diagonal, BallInf([0.0, 0.0], 1.0))
        vertices = Y.vertices_list()
        assert len(vertices) == 4
        assert any(np.allclose(v, [E1, 1.0 / E1]) for v in vertices)

    def test_concretize(self, rotation):
        X = BallInf([0.0, 0.0], 1.0)
        Z = ExponentialMap(rotation, X).concretize()
        assert isinstance(Z, Zonotope)
        d = np.array([1.0, 2.0])
        assert Z.support_function(d) == pytest.approx(X.support_function(rotation.apply_transpose(d)))

    def test_matmul_builds_exponential_map(self, diagonal):
        X = BallInf([0.0, 0.0], 1.0)
        assert isinstance(diagonal @ X, ExponentialMap)
        assert isinstance(X.linear_map(diagonal), ExponentialMap)

    def test_trivial_sets(self, diagonal):
        zero = exponential_map(diagonal, ZeroSet(2))
        assert isinstance(zero, ZeroSet) and zero.dim == 2
        assert isinstance(diagonal @ EmptySet(2), EmptySet)
        with pytest.raises(DimensionMismatchError):
            exponential_map(diagonal, ZeroSet(3))


class TestProjection:
    @pytest.fixture
    def projection(self, diagonal):
        return ProjectionSparseMatrixExp([[1.0, 0.0]], diagonal, np.eye(2))

    def test_shape(self, projection, diagonal):
        assert projection.shape == (1, 2)
        with pytest.raises(DimensionMismatchError):
            ProjectionSparseMatrixExp([[1.0, 0.0, 0.0]], diagonal, np.eye(2))

    def test_apply(self, projection):
        assert_allclose(projection.apply([1.0, 1.0]), [E1])
        assert_allclose(projection.apply_transpose([2.0]), [2.0 * E1, 0.0], atol=1e-12)
        assert_allclose(projection.to_dense(), [[E1, 0.0]], atol=1e-12)

    def test_exponential_projection_map(self, projection):
        Y = projection @ BallInf([0.0, 0.0], 1.0)
        assert isinstance(Y, ExponentialProjectionMap)
        assert Y.dim == 1
        assert Y.support_function([1.0]) == pytest.approx(E1)
        assert_allclose(Y.support_vector([-1.0]), [-E1])
        assert Y.is_element([1.0])
        assert not Y.is_element([3.0])
        assert_allclose(Y.an_element(), [0.0], atol=1e-12)
        assert Y.is_bounded()

    def test_dimension_mismatch(self, projection):
        with pytest.raises(DimensionMismatchError):
            ExponentialProjectionMap(projection, BallInf([0.0], 1.0))
