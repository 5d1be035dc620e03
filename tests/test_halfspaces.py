"""
Tests for Hyperplane and HalfSpace.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from lazyconvex.exceptions import UnboundedDirectionError
from lazyconvex.sets import HalfSpace, Hyperplane
from lazyconvex.sets.halfspaces import an_element_helper, support_vector_helper


# ============================================================================
# Helpers
# ============================================================================


def test_an_element_helper_uses_first_nonzero_entry():
    x = an_element_helper(np.array([0.0, 2.0, 1.0]), 4.0)
    assert_allclose(x, [0.0, 2.0, 0.0])


def test_an_element_helper_zero_normal():
    with pytest.raises(ValueError):
        an_element_helper(np.array([0.0, 0.0]), 1.0)


def test_support_vector_helper_reports_unbounded():
    point, unbounded = support_vector_helper(
        np.array([1.0, 1.0]), np.array([1.0, 0.0]), 1.0, error_unbounded=False
    )
    assert unbounded
    assert point.shape == (0,)


# ============================================================================
# Hyperplane
# ============================================================================


class TestHyperplane:
    def test_zero_normal_raises(self):
        with pytest.raises(ValueError):
            Hyperplane([0.0, 0.0], 1.0)

    def test_membership(self):
        P = Hyperplane([1.0, 1.0], 1.0)
        assert P.is_element([0.5, 0.5])
        assert P.is_element([1.0, 0.0])
        assert not P.is_element([1.0, 1.0])

    def test_support_function(self):
        P = Hyperplane([1.0, 1.0], 1.0)
        assert P.support_function([2.0, 2.0]) == pytest.approx(2.0)
        assert P.support_function([-1.0, -1.0]) == pytest.approx(-1.0)
        assert P.support_function([1.0, 0.0]) == np.inf

    def test_support_vector_unbounded(self):
        with pytest.raises(UnboundedDirectionError):
            Hyperplane([1.0, 0.0], 0.0).support_vector([0.0, 1.0])

    def test_project_distance_reflect(self):
        P = Hyperplane([0.0, 2.0], 2.0)  # y = 1
        x = np.array([3.0, 4.0])
        assert_allclose(P.project(x), [3.0, 1.0])
        assert P.distance(x) == pytest.approx(3.0)
        assert_allclose(P.reflect(x), [3.0, -2.0])

    def test_is_equivalent(self):
        P = Hyperplane([1.0, 2.0], 3.0)
        assert P.is_equivalent(Hyperplane([2.0, 4.0], 6.0))
        assert P.is_equivalent(Hyperplane([-1.0, -2.0], -3.0))
        assert not P.is_equivalent(Hyperplane([1.0, 2.0], 4.0))
        assert not P.is_equivalent(Hyperplane([1.0, 0.0], 3.0))

    def test_translate(self):
        P = Hyperplane([1.0, 0.0], 1.0).translate([2.0, 5.0])
        assert P.is_element([3.0, 0.0])

    def test_constraints(self):
        constraints = Hyperplane([1.0, 0.0], 1.0).constraints_list()
        assert len(constraints) == 2
        assert all(c.is_element([1.0, 7.0]) for c in constraints)

    def test_boundedness(self):
        assert Hyperplane([2.0], 1.0).is_bounded()
        assert not Hyperplane([1.0, 0.0], 1.0).is_bounded()


# ============================================================================
# HalfSpace
# ============================================================================


class TestHalfSpace:
    def test_membership(self):
        H = HalfSpace([1.0, 1.0], 1.0)
        assert H.is_element([0.0, 0.0])
        assert H.is_element([0.5, 0.5])
        assert not H.is_element([1.0, 1.0])

    def test_from_geq(self):
        H = HalfSpace.from_geq([1.0, 0.0], 2.0)
        assert H.is_element([3.0, 0.0])
        assert not H.is_element([1.0, 0.0])

    def test_support_function(self):
        H = HalfSpace([1.0, 0.0], 2.0)
        assert H.support_function([3.0, 0.0]) == pytest.approx(6.0)
        assert H.support_function([-1.0, 0.0]) == np.inf
        assert H.support_function([1.0, 1.0]) == np.inf

    def test_support_vector(self):
        H = HalfSpace([0.0, 2.0], 4.0)
        v = H.support_vector([0.0, 1.0])
        assert v[1] == pytest.approx(2.0)
        with pytest.raises(UnboundedDirectionError):
            H.support_vector([0.0, -1.0])

    def test_boundary_and_complement(self):
        H = HalfSpace([1.0, 0.0], 1.0)
        assert H.boundary.is_element([1.0, 3.0])
        C = H.complement()
        assert C.is_element([2.0, 0.0])
        assert not C.is_element([0.0, 0.0])
        assert C.is_element([1.0, 0.0])

    def test_an_element(self):
        H = HalfSpace([0.0, 3.0], 6.0)
        assert H.is_element(H.an_element())

    def test_is_not_bounded(self):
        assert not HalfSpace([1.0], 1.0).is_bounded()
