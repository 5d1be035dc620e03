"""
Tests for the lazy Minkowski sums, including the cached array.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from lazyconvex.convex_set import rho, sigma
from lazyconvex.exceptions import DimensionMismatchError
from lazyconvex.operations import CachedMinkowskiSumArray, MinkowskiSum, MinkowskiSumArray
from lazyconvex.sets import Ball1, Ball2, BallInf, EmptySet, Hyperrectangle, Singleton, ZeroSet, Zonotope

from .checks.convex_set import ConvexSetChecks


class TestMinkowskiSumContract(ConvexSetChecks):
    @pytest.fixture
    def convex_set(self):
        return MinkowskiSum(BallInf([0.0, 0.0], 2.0), Ball1([1.0, 0.0], 1.0))


class TestMinkowskiSumArrayContract(ConvexSetChecks):
    @pytest.fixture
    def convex_set(self):
        return MinkowskiSumArray(
            [Ball1([0.0, 0.0, 0.0], 1.0), Singleton([1.0, 2.0, 3.0]), BallInf([0.0, 0.0, 0.0], 0.5)]
        )


class TestMinkowskiSum:
    def test_support_vector_of_box_and_diamond(self):
        S = MinkowskiSum(BallInf([0.0, 0.0], 2.0), Ball1([0.0, 0.0], 1.0))
        assert_allclose(sigma([1.0, 0.0], S), [3.0, 0.0])
        assert rho([1.0, 0.0], S) == pytest.approx(3.0)

    def test_support_function_adds_up(self):
        X, Y = Ball2([0.0, 0.0], 1.0), Hyperrectangle([1.0, 1.0], [1.0, 2.0])
        d = np.array([0.3, -0.7])
        assert (X + Y).support_function(d) == pytest.approx(X.support_function(d) + Y.support_function(d))

    def test_membership_uses_concrete_sum(self):
        S = MinkowskiSum(Hyperrectangle([0.0, 0.0], [1.0, 1.0]), Hyperrectangle([1.0, 0.0], [0.5, 0.5]))
        assert S.is_element([2.5, 1.5])
        assert not S.is_element([2.6, 0.0])

    def test_concretize_zonotopes(self):
        S = MinkowskiSum(Zonotope([0.0, 0.0], [[1.0], [0.0]]), Zonotope([1.0, 1.0], [[0.0], [1.0]]))
        Z = S.concretize()
        assert isinstance(Z, Zonotope)
        assert Z.ngens() == 2
        assert_allclose(Z.center, [1.0, 1.0])

    def test_swap(self):
        X, Y = Ball2([0.0, 0.0], 1.0), Singleton([1.0, 1.0])
        S = MinkowskiSum(X, Y).swap()
        assert S.X is Y and S.Y is X

    def test_an_element(self):
        S = MinkowskiSum(Singleton([1.0, 1.0]), Singleton([2.0, 0.0]))
        assert_allclose(S.an_element(), [3.0, 1.0])

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatchError):
            MinkowskiSum(Ball2([0.0], 1.0), Ball2([0.0, 0.0], 1.0))

    def test_operator_simplifications(self):
        X = Ball2([0.0, 0.0], 1.0)
        assert isinstance(X + Ball2([1.0, 1.0], 1.0), MinkowskiSum)
        assert (X + ZeroSet(2)) is X
        assert (ZeroSet(2) + X) is X
        assert isinstance(X + EmptySet(2), EmptySet)

    def test_simplifications_check_dimensions(self):
        X = Ball2([0.0, 0.0], 1.0)
        for neutral in (EmptySet(3), ZeroSet(3)):
            with pytest.raises(DimensionMismatchError):
                neutral + X
            with pytest.raises(DimensionMismatchError):
                X + neutral


class TestMinkowskiSumArray:
    def test_support_vector(self):
        S = MinkowskiSumArray([BallInf([0.0, 0.0], 1.0), BallInf([1.0, 0.0], 1.0), Singleton([0.0, 5.0])])
        assert_allclose(S.support_vector([1.0, 1.0]), [3.0, 7.0])
        assert S.support_function([1.0, 1.0]) == pytest.approx(10.0)

    def test_empty_array_is_the_zero_set(self):
        S = MinkowskiSumArray([], dim=3)
        assert_allclose(S.support_vector([1.0, 0.0, 0.0]), np.zeros(3))
        assert S.support_function([1.0, 0.0, 0.0]) == 0.0

    def test_empty_summand(self):
        S = MinkowskiSumArray([Ball2([0.0, 0.0], 1.0), EmptySet(2)])
        assert S.is_empty()
        assert S.is_bounded()

    def test_concretize(self):
        S = MinkowskiSumArray([Hyperrectangle([0.0, 0.0], [1.0, 1.0]), Hyperrectangle([1.0, 1.0], [1.0, 1.0])])
        H = S.concretize()
        assert isinstance(H, Hyperrectangle)
        assert_allclose(H.radius, [2.0, 2.0])


# ============================================================================
# Cached sums
# ============================================================================


class TestCachedMinkowskiSumArray:
    def test_matches_uncached_sum(self):
        sets = [Ball2([0.0, 0.0], 1.0), BallInf([1.0, 1.0], 0.5), Ball1([0.0, 2.0], 2.0)]
        cached = CachedMinkowskiSumArray(sets[:1])
        d = np.array([1.0, 2.0])
        cached.support_vector(d)
        for X in sets[1:]:
            cached.append(X)
        assert_allclose(cached.support_vector(d), MinkowskiSumArray(sets).support_vector(d))
        assert cached.support_function(d) == pytest.approx(MinkowskiSumArray(sets).support_function(d))

    def test_only_new_summands_are_evaluated(self):
        calls = []

        class Counting(Ball2):
            def support_vector(self, d):
                calls.append(1)
                return super().support_vector(d)

        S = CachedMinkowskiSumArray([Counting([0.0, 0.0], 1.0)])
        d = np.array([1.0, 0.0])
        S.support_vector(d)
        S.support_vector(d)
        assert len(calls) == 1
        S.append(Counting([1.0, 0.0], 1.0))
        assert_allclose(S.support_vector(d), [3.0, 0.0])
        assert len(calls) == 2

    def test_cache_is_keyed_by_value(self):
        S = CachedMinkowskiSumArray([BallInf([0.0, 0.0], 1.0)])
        d = np.array([1.0, 1.0])
        S.support_vector(d)
        d[0] = -1.0
        S.support_vector(d)
        assert set(S.cache) == {(1.0, 1.0), (-1.0, 1.0)}

    def test_forget_sets_after_two_queries(self):
        S = CachedMinkowskiSumArray(dim=2)
        d = np.array([1.0, 0.0])
        S.append(Ball2([0.0, 0.0], 1.0))
        S.support_vector(d)
        S.append(Ball2([1.0, 0.0], 1.0))
        expected = S.support_vector(d)
        assert S.forget_sets() == 2
        assert len(S.array) == 0
        assert_allclose(S.support_vector(d), expected)

    def test_forget_sets_keeps_unfolded_summands(self):
        S = CachedMinkowskiSumArray(dim=2)
        d = np.array([1.0, 0.0])
        S.append(Ball2([0.0, 0.0], 1.0))
        S.support_vector(d)
        S.append(Ball2([1.0, 0.0], 1.0))
        assert S.forget_sets() == 1
        assert len(S.array) == 1
        assert_allclose(S.support_vector(d), [3.0, 0.0])

    def test_new_direction_after_forgetting(self):
        S = CachedMinkowskiSumArray([Ball2([0.0, 0.0], 1.0)])
        S.support_vector([1.0, 0.0])
        S.forget_sets()
        with pytest.raises(ValueError):
            S.support_vector([0.0, 1.0])
        with pytest.raises(ValueError):
            S.concretize()

    def test_forget_without_cache(self):
        S = CachedMinkowskiSumArray([Ball2([0.0, 0.0], 1.0)])
        assert S.forget_sets() == 0
        assert len(S.array) == 1

    def test_append_checks_dimension(self):
        S = CachedMinkowskiSumArray([Ball2([0.0, 0.0], 1.0)])
        with pytest.raises(DimensionMismatchError):
            S.append(Ball2([0.0], 1.0))

    def test_unknown_dimension(self):
        with pytest.raises(ValueError):
            CachedMinkowskiSumArray().dim
