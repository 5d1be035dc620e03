"""
Tests for the constraint representations HPolyhedron and HPolytope.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from lazyconvex.exceptions import (
    BoundednessError,
    DimensionMismatchError,
    EmptySetError,
    UnboundedDirectionError,
)
from lazyconvex.sets import EmptySet, HalfSpace, HPolyhedron, HPolytope
from lazyconvex.utils import ispermutation

from .checks.convex_set import ConvexSetChecks


def unit_square(cls=HPolytope):
    return cls.from_matrix(
        [[1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0]], [1.0, 0.0, 1.0, 0.0]
    )


class TestHPolytopeContract(ConvexSetChecks):
    @pytest.fixture
    def convex_set(self):
        return HPolytope.random(dim=3, rng=7)


class TestHPolyhedron:
    def test_requires_dimension_without_constraints(self):
        with pytest.raises(ValueError):
            HPolyhedron()
        P = HPolyhedron(dim=2)
        assert P.support_function([0.0, 0.0]) == 0.0
        assert P.support_function([1.0, 0.0]) == np.inf
        with pytest.raises(UnboundedDirectionError):
            P.support_vector([1.0, 0.0])

    def test_mixed_dimensions(self):
        with pytest.raises(DimensionMismatchError):
            HPolyhedron([HalfSpace([1.0, 0.0], 1.0), HalfSpace([1.0], 1.0)])

    def test_support_function_bounded(self):
        P = unit_square(HPolyhedron)
        assert P.support_function([1.0, 1.0]) == pytest.approx(2.0)
        assert_allclose(P.support_vector([1.0, 1.0]), [1.0, 1.0], atol=1e-9)

    def test_support_function_unbounded(self):
        P = HPolyhedron([HalfSpace([1.0, 0.0], 1.0)])
        assert P.support_function([1.0, 0.0]) == pytest.approx(1.0)
        assert P.support_function([0.0, 1.0]) == np.inf
        with pytest.raises(UnboundedDirectionError):
            P.support_vector([0.0, 1.0])
        assert not P.is_bounded()

    def test_empty_polyhedron(self):
        P = HPolyhedron([HalfSpace([1.0, 0.0], 0.0), HalfSpace([-1.0, 0.0], -1.0)])
        assert P.is_empty()
        empty, point = P.is_empty(witness=True)
        assert empty and point.shape == (0,)
        with pytest.raises(EmptySetError):
            P.support_function([1.0, 0.0])
        with pytest.raises(EmptySetError):
            P.an_element()
        assert P.is_bounded()

    def test_witness_is_feasible(self):
        P = unit_square(HPolyhedron)
        empty, point = P.is_empty(witness=True)
        assert not empty
        assert P.is_element(point)

    def test_add_constraint(self):
        P = HPolyhedron([HalfSpace([1.0, 0.0], 1.0)])
        P.add_constraint(HalfSpace([-1.0, 0.0], 0.0))
        assert len(P.constraints_list()) == 2
        with pytest.raises(DimensionMismatchError):
            P.add_constraint(HalfSpace([1.0], 0.0))

    def test_vertices(self):
        P = unit_square(HPolyhedron)
        expected = [np.array(v) for v in ([0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0])]
        assert ispermutation([np.round(v, 9) for v in P.vertices_list()], expected)

    def test_vertices_of_unbounded_polyhedron(self):
        with pytest.raises(BoundednessError):
            HPolyhedron([HalfSpace([1.0, 0.0], 1.0)]).vertices_list()

    def test_remove_redundant_constraints(self):
        constraints = unit_square(HPolyhedron).constraints_list() + [HalfSpace([1.0, 1.0], 5.0)]
        P = HPolyhedron(constraints).remove_redundant_constraints()
        assert isinstance(P, HPolyhedron)
        assert len(P.constraints_list()) == 4

    def test_remove_redundant_constraints_infeasible(self):
        P = HPolyhedron([HalfSpace([1.0], 0.0), HalfSpace([-1.0], -1.0)])
        assert isinstance(P.remove_redundant_constraints(), EmptySet)

    def test_translate(self):
        P = unit_square(HPolyhedron).translate([2.0, 3.0])
        assert P.is_element([2.5, 3.5])
        assert not P.is_element([0.5, 0.5])

    def test_random_contains_origin(self):
        P = HPolyhedron.random(dim=3, rng=0)
        assert P.is_element(np.zeros(3))


class TestHPolytope:
    def test_boundedness_check(self):
        with pytest.raises(ValueError):
            HPolytope([HalfSpace([1.0, 0.0], 1.0)], check_boundedness=True)
        unit_square(HPolytope)

    def test_is_bounded_without_lp(self):
        assert unit_square().is_bounded()

    def test_no_constraints_has_no_vertices(self):
        with pytest.raises(BoundednessError):
            HPolytope(dim=2).vertices_list()

    def test_redundancy_removal_keeps_type(self):
        P = HPolytope(unit_square().constraints_list() + [HalfSpace([1.0, 0.0], 3.0)])
        assert isinstance(P.remove_redundant_constraints(), HPolytope)
