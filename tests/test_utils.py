"""
Tests for the vector helpers and planar predicates.
"""

import pytest
import numpy as np
import scipy.sparse as sp
from numpy.testing import assert_allclose

from lazyconvex.exceptions import DimensionMismatchError
from lazyconvex.sets import Ball2, Interval
from lazyconvex.utils import (
    abs_sum,
    arg_minmax,
    as_matrix,
    as_vector,
    check_direction,
    check_same_dim,
    ispermutation,
    minmax,
    nonzero_indices,
    right_turn,
    samedir,
    unit_vector,
)


def test_as_vector_promotes_integers():
    v = as_vector([1, 2, 3])
    assert v.dtype == np.float64


def test_as_vector_keeps_object_arrays():
    from fractions import Fraction

    v = as_vector(np.array([Fraction(1, 2)], dtype=object))
    assert v.dtype == object


def test_as_vector_rejects_matrices():
    with pytest.raises(ValueError):
        as_vector([[1.0, 2.0]])


def test_as_matrix_keeps_sparse():
    M = as_matrix(sp.eye(3))
    assert sp.issparse(M)
    with pytest.raises(ValueError):
        as_matrix([1.0, 2.0])


def test_unit_vector():
    assert_allclose(unit_vector(1, 3), [0.0, 1.0, 0.0])


def test_check_direction():
    assert_allclose(check_direction([1, 0], 2), [1.0, 0.0])
    with pytest.raises(DimensionMismatchError):
        check_direction([1.0, 0.0, 0.0], 2)


def test_check_same_dim():
    assert check_same_dim(Ball2([0.0, 0.0], 1.0), Ball2([1.0, 1.0], 2.0)) == 2
    with pytest.raises(DimensionMismatchError):
        check_same_dim(Ball2([0.0, 0.0], 1.0), Interval(0.0, 1.0))


def test_right_turn():
    O, A = np.array([0.0, 0.0]), np.array([1.0, 0.0])
    assert right_turn(O, A, np.array([0.0, 1.0])) > 0
    assert right_turn(O, A, np.array([0.0, -1.0])) < 0
    assert right_turn(O, A, np.array([2.0, 0.0])) == 0


@pytest.mark.parametrize(
    "values, expected",
    [((1, 2, 3), (0, 2)), ((3, 2, 1), (2, 0)), ((2, 3, 1), (2, 1)), ((2, 1, 3), (1, 2))],
)
def test_arg_minmax(values, expected):
    assert arg_minmax(*values) == expected
    i, j = expected
    assert minmax(*values) == (values[i], values[j])


class TestSamedir:
    def test_positive_multiple(self):
        same, k = samedir([2.0, 0.0, 4.0], [1.0, 0.0, 2.0])
        assert same
        assert k == pytest.approx(2.0)

    def test_negative_multiple(self):
        assert samedir([-1.0, -2.0], [1.0, 2.0]) == (False, 0)

    def test_zero_pattern_mismatch(self):
        assert samedir([1.0, 0.0], [1.0, 1.0])[0] is False

    def test_zero_vectors(self):
        assert samedir([0.0, 0.0], [0.0, 0.0])[0]

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            samedir([1.0], [1.0, 2.0])


def test_nonzero_indices():
    assert nonzero_indices([0.0, 1.0, 1e-20, -2.0]) == [1, 3]


def test_abs_sum():
    G = np.array([[1.0, -1.0], [0.0, 2.0]])
    # columns (1, 0) and (-1, 2) against d = (1, 1): |1| + |1|
    assert abs_sum([1.0, 1.0], G) == pytest.approx(2.0)


def test_ispermutation():
    a = [np.array([0.0, 0.0]), np.array([1.0, 0.0])]
    assert ispermutation(a, a[::-1])
    assert not ispermutation(a, [a[0], a[0]])
    assert not ispermutation(a, a[:1])
