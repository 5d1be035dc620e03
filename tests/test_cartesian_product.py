"""
Tests for the lazy Cartesian products CartesianProduct and CartesianProductArray.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from lazyconvex.exceptions import DimensionMismatchError, EmptySetError
from lazyconvex.operations import CartesianProduct, CartesianProductArray
from lazyconvex.sets import (
    Ball2,
    EmptySet,
    HalfSpace,
    HPolyhedron,
    HPolytope,
    Hyperrectangle,
    Interval,
    Singleton,
    Universe,
)

from .checks.convex_set import ConvexSetChecks


class TestCartesianProductContract(ConvexSetChecks):
    @pytest.fixture
    def convex_set(self):
        return CartesianProduct(Interval(0.0, 1.0), Ball2([0.0, 0.0], 1.0))


class TestCartesianProductArrayContract(ConvexSetChecks):
    @pytest.fixture
    def convex_set(self):
        return CartesianProductArray(
            [Ball2([1.0, 1.0], 0.5), Singleton([3.0]), Hyperrectangle([0.0, 0.0], [1.0, 2.0])]
        )


@pytest.fixture
def product():
    return CartesianProduct(Interval(0.0, 1.0), Ball2([0.0, 0.0], 1.0))


class TestCartesianProduct:
    def test_dimension_and_blocks(self, product):
        assert product.dim == 3
        assert product.block_dims() == [1, 2]
        first, second = product.split([1.0, 2.0, 3.0])
        assert_allclose(first, [1.0])
        assert_allclose(second, [2.0, 3.0])
        with pytest.raises(DimensionMismatchError):
            product.split([1.0, 2.0])

    def test_support_vector_concatenates(self, product):
        assert_allclose(product.support_vector([1.0, 1.0, 0.0]), [1.0, 1.0, 0.0])
        assert_allclose(product.support_vector([-1.0, 0.0, -2.0]), [0.0, 0.0, -1.0])

    def test_support_function_adds_up(self, product):
        assert product.support_function([1.0, 1.0, 0.0]) == pytest.approx(2.0)
        assert product.support_function([-1.0, 0.0, 0.0]) == pytest.approx(0.0)

    def test_membership(self, product):
        assert product.is_element([0.5, 0.0, 0.5])
        assert not product.is_element([2.0, 0.0, 0.0])
        assert not product.is_element([0.5, 1.0, 1.0])

    def test_swap(self, product):
        swapped = product.swap()
        assert swapped.X is product.Y and swapped.Y is product.X
        assert swapped.support_function([0.0, 0.0, 1.0]) == pytest.approx(1.0)

    def test_translate(self, product):
        moved = product.translate([1.0, 2.0, 0.0])
        assert isinstance(moved, CartesianProduct)
        assert moved.is_element([1.5, 2.0, 0.0])

    def test_is_polyhedral(self, product):
        assert not product.is_polyhedral()
        assert CartesianProduct(Interval(0.0, 1.0), Interval(2.0, 3.0)).is_polyhedral()

    def test_operator(self):
        X, Y = Interval(0.0, 1.0), Ball2([0.0, 0.0], 1.0)
        Z = X * Y
        assert isinstance(Z, CartesianProduct)
        assert Z.array == [X, Y]


class TestEmptyBlocks:
    def test_empty_block_makes_the_product_empty(self):
        P = CartesianProduct(Interval(0.0, 1.0), EmptySet(2))
        assert P.is_empty()
        empty, point = P.is_empty(witness=True)
        assert empty and point.shape == (0,)
        assert P.is_bounded()
        with pytest.raises(EmptySetError):
            P.an_element()

    def test_no_blocks(self):
        P = CartesianProductArray()
        assert P.dim == 0
        assert P.support_vector(np.zeros(0)).shape == (0,)
        assert P.support_function(np.zeros(0)) == 0.0
        assert isinstance(P.concretize(), Universe)


class TestExplicitRepresentations:
    def test_constraints_are_lifted(self):
        P = CartesianProductArray([Interval(0.0, 1.0), Interval(2.0, 3.0)])
        constraints = P.constraints_list()
        assert len(constraints) == 4
        assert all(c.dim == 2 for c in constraints)
        assert all(c.is_element([0.5, 2.5]) for c in constraints)
        assert not all(c.is_element([0.5, 3.5]) for c in constraints)

    def test_vertices_are_combined(self):
        P = CartesianProductArray([Interval(0.0, 1.0), Interval(2.0, 3.0)])
        vertices = P.vertices_list()
        assert len(vertices) == 4
        assert any(np.allclose(v, [1.0, 3.0]) for v in vertices)

    def test_concretize_hyperrectangles(self):
        H = CartesianProductArray([Interval(0.0, 1.0), Interval(2.0, 3.0)]).concretize()
        assert isinstance(H, Hyperrectangle)
        assert_allclose(H.center, [0.5, 2.5])
        assert_allclose(H.radius_hyperrectangle(), [0.5, 0.5])

    def test_concretize_singletons(self):
        S = CartesianProduct(Singleton([1.0]), Singleton([2.0, 3.0])).concretize()
        assert isinstance(S, Singleton)
        assert_allclose(S.element, [1.0, 2.0, 3.0])

    def test_concretize_polyhedra(self):
        P = CartesianProduct(HalfSpace([1.0], 1.0), Interval(0.0, 1.0)).concretize()
        assert type(P) is HPolyhedron
        assert len(P.constraints_list()) == 3
        assert P.is_element([-5.0, 0.5])

    def test_concretize_polytopes(self):
        square = HPolytope.from_matrix([[1.0], [-1.0]], [1.0, 1.0])
        P = CartesianProduct(square, square).concretize()
        assert isinstance(P, HPolytope)

    def test_concretize_universes(self):
        U = CartesianProduct(Universe(1), Universe(2)).concretize()
        assert isinstance(U, Universe) and U.dim == 3

    def test_concretize_unsupported(self):
        with pytest.raises(NotImplementedError):
            CartesianProduct(Ball2([0.0, 0.0], 1.0), Interval(0.0, 1.0)).concretize()
