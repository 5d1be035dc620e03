"""
Tests for the LP wrapper and the polyhedral backends.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from lazyconvex.backends import (
    LPResult,
    LPStatus,
    ScipyPolyhedralBackend,
    UnavailablePolyhedralBackend,
    chebyshev_center,
    convex_combination_lp,
    feasible_point,
    get_polyhedral_backend,
    require_feasibility,
    set_polyhedral_backend,
    solve_lp,
)
from lazyconvex.convex_hull import convex_hull
from lazyconvex.exceptions import BackendUnavailableError, LPSolverError
from lazyconvex.sets import HalfSpace, HPolytope, VPolytope
from lazyconvex.utils import ispermutation


SQUARE_A = np.array([[1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0]])
SQUARE_B = np.array([1.0, 0.0, 1.0, 0.0])


@pytest.fixture
def backend():
    return ScipyPolyhedralBackend()


@pytest.fixture
def no_backend():
    previous = set_polyhedral_backend(None)
    try:
        yield
    finally:
        set_polyhedral_backend(previous)


# ============================================================================
# Linear programming
# ============================================================================


class TestSolveLP:
    def test_optimal_maximum(self):
        res = solve_lp([1.0, 1.0], SQUARE_A, "<<<<", SQUARE_B, maximize=True)
        assert res.status is LPStatus.OPTIMAL
        assert res.is_optimal
        assert res.objective == pytest.approx(2.0)
        assert_allclose(res.x, [1.0, 1.0], atol=1e-9)

    def test_minimum_with_equality(self):
        res = solve_lp([1.0, 0.0], [[1.0, 1.0]], "=", [1.0], lb=0.0)
        assert res.objective == pytest.approx(0.0)
        assert res.x.sum() == pytest.approx(1.0)

    def test_greater_equal_sense(self):
        res = solve_lp([1.0], [[1.0]], ">", [2.0])
        assert res.objective == pytest.approx(2.0)

    def test_unbounded(self):
        res = solve_lp([1.0, 0.0], [[1.0, 0.0]], "<", [1.0], maximize=False)
        assert res.status is LPStatus.UNBOUNDED
        assert res.x is None

    def test_infeasible(self):
        res = solve_lp([0.0], [[1.0], [-1.0]], "<<", [0.0, -1.0])
        assert res.status is LPStatus.INFEASIBLE
        assert not require_feasibility(res)

    def test_bad_sense(self):
        with pytest.raises(ValueError):
            solve_lp([1.0], [[1.0]], "!", [1.0])

    def test_inconsistent_shapes(self):
        with pytest.raises(ValueError):
            solve_lp([1.0], [[1.0], [2.0]], "<", [1.0])

    def test_require_feasibility_raises_on_solver_failure(self):
        with pytest.raises(LPSolverError):
            require_feasibility(LPResult(LPStatus.OTHER, message="iteration limit"))


def test_feasible_point():
    x = feasible_point(SQUARE_A, SQUARE_B)
    assert np.all(SQUARE_A @ x <= SQUARE_B + 1e-9)
    assert feasible_point([[1.0], [-1.0]], [0.0, -1.0]) is None


def test_convex_combination_lp():
    vertices = [np.array([0.0, 0.0]), np.array([1.0, 0.0]), np.array([0.0, 1.0])]
    assert require_feasibility(convex_combination_lp([0.25, 0.25], vertices))
    assert not require_feasibility(convex_combination_lp([1.0, 1.0], vertices))


def test_chebyshev_center():
    center, radius = chebyshev_center(SQUARE_A, SQUARE_B)
    assert_allclose(center, [0.5, 0.5], atol=1e-9)
    assert radius == pytest.approx(0.5)
    with pytest.raises(ValueError):
        chebyshev_center([[1.0], [-1.0]], [0.0, -1.0])


# ============================================================================
# Polyhedral backend
# ============================================================================


class TestScipyPolyhedralBackend:
    def test_to_vertices(self, backend):
        vertices = backend.to_vertices(SQUARE_A, SQUARE_B)
        expected = [np.array(v) for v in ([0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0])]
        assert ispermutation(vertices, expected)

    def test_to_vertices_infeasible(self, backend):
        assert backend.to_vertices([[1.0, 0.0], [-1.0, 0.0]], [0.0, -1.0]) == []

    def test_to_vertices_of_a_flat_set(self, backend):
        # the segment x = 1, 0 <= y <= 1
        A = np.vstack([SQUARE_A, [[-1.0, 0.0]]])
        b = np.append(SQUARE_B, -1.0)
        vertices = backend.to_vertices(A, b)
        assert ispermutation(vertices, [np.array([1.0, 0.0]), np.array([1.0, 1.0])])

    def test_to_vertices_interval(self, backend):
        vertices = backend.to_vertices([[2.0], [-1.0]], [4.0, 1.0])
        assert ispermutation(vertices, [np.array([-1.0]), np.array([2.0])])

    def test_to_vertices_unbounded(self, backend):
        with pytest.raises(ValueError):
            backend.to_vertices([[1.0]], [1.0])

    def test_to_constraints(self, backend):
        A, b = backend.to_constraints([np.array(v) for v in ([0.0, 0.0], [2.0, 0.0], [0.0, 2.0])])
        assert A.shape == (3, 2)
        assert np.all(A @ np.array([0.5, 0.5]) <= b + 1e-9)
        assert not np.all(A @ np.array([1.5, 1.5]) <= b + 1e-9)

    def test_to_constraints_of_a_segment(self, backend):
        A, b = backend.to_constraints([np.array([0.0, 0.0]), np.array([1.0, 1.0])])
        assert np.all(A @ np.array([0.5, 0.5]) <= b + 1e-9)
        assert not np.all(A @ np.array([0.5, 0.6]) <= b + 1e-9)

    def test_remove_redundant_vertices_of_a_flat_set(self, backend):
        pts = [np.array(v) for v in ([0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.5, 0.0, 0.0], [0.0, 1.0, 0.0])]
        assert len(backend.remove_redundant_vertices(pts)) == 3

    def test_remove_redundant_constraints(self, backend):
        A = np.vstack([SQUARE_A, [[1.0, 1.0]]])
        b = np.append(SQUARE_B, 5.0)
        A_red, b_red = backend.remove_redundant_constraints(A, b)
        assert A_red.shape == (4, 2)
        assert b_red.shape == (4,)

    def test_remove_redundant_constraints_infeasible(self, backend):
        assert backend.remove_redundant_constraints([[1.0], [-1.0]], [0.0, -1.0]) is None


def test_default_backend_is_scipy():
    assert isinstance(get_polyhedral_backend(), ScipyPolyhedralBackend)


def test_unavailable_backend(no_backend):
    assert isinstance(get_polyhedral_backend(), UnavailablePolyhedralBackend)
    with pytest.raises(BackendUnavailableError):
        VPolytope([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]).constraints_list()
    with pytest.raises(BackendUnavailableError):
        HPolytope([HalfSpace([1.0], 1.0), HalfSpace([-1.0], 0.0)]).vertices_list()
    with pytest.raises(BackendUnavailableError):
        convex_hull([np.zeros(3), np.ones(3)])


def test_explicit_backend_argument_overrides_default(no_backend):
    P = VPolytope([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0], [0.2, 0.2]])
    Q = P.remove_redundant_vertices(backend=ScipyPolyhedralBackend())
    assert len(Q.vertices_list()) == 3
