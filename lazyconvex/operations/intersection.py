"""
Lazy intersections.

The support function of an intersection has no closed form in general. The
`Intersection.support_function` evaluation picks a regime from the operand
kinds:

- two polyhedral operands: one LP over the combined constraints (exact);
- a half-space or hyperplane operand and a bounded other operand: the
  one-dimensional convex problem `min_lambda rho(d - lambda a, X) + lambda b`
  solved by a bounded line search (exact up to the search tolerance);
- a polyhedron and a bounded non-polyhedral operand: the minimum of the
  line searches over the constraints (an upper bound);
- otherwise `min(rho(d, X), rho(d, Y))` (an upper bound).
"""

from __future__ import annotations

import enum
import logging
import warnings
from typing import List, Optional, Tuple

import numpy as np
import scipy.optimize

from ..convex_set import ConvexSet
from ..exceptions import BoundednessError, EmptySetError, UnknownAlgorithmError
from ..utils import check_direction, check_same_dim
from .base import LazyOperation, array_dim

logger = logging.getLogger(__name__)

INTERSECTION_RHO_ALGORITHMS = ("line_search", "projection", "simple")

# default search interval for the multiplier of a half-space / hyperplane
_LINE_SEARCH_BOUND = 1e6


class _Emptiness(enum.Enum):
    UNKNOWN = "unknown"
    EMPTY = "empty"
    NONEMPTY = "nonempty"


class IntersectionCache:
    """
    Tri-state record of whether an intersection is empty.

    The state starts unknown and is set once by `Intersection.is_empty`.
    """

    def __init__(self) -> None:
        self._state = _Emptiness.UNKNOWN

    def is_known(self) -> bool:
        return self._state is not _Emptiness.UNKNOWN

    def is_empty(self) -> bool:
        """
        Returns the cached answer.

        Raises:
            ValueError: If the emptiness status is still unknown.
        """
        if self._state is _Emptiness.UNKNOWN:
            raise ValueError("The emptiness status of the intersection is not known yet.")
        return self._state is _Emptiness.EMPTY

    def set_empty(self, empty: bool) -> None:
        self._state = _Emptiness.EMPTY if empty else _Emptiness.NONEMPTY

    def __repr__(self) -> str:
        return f"IntersectionCache({self._state.value})"


def _is_linear_constraint(X: ConvexSet) -> bool:
    from ..sets.halfspaces import HalfSpace, Hyperplane

    return isinstance(X, (HalfSpace, Hyperplane))


class Intersection(LazyOperation):
    """
    The intersection `X & Y` of two sets.

    Args:
        X: The first set.
        Y: The second set, of the same dimension.
        cache: An emptiness cache to share with another intersection of the
            same operands. A fresh cache is created by default.

    Raises:
        DimensionMismatchError: If the dimensions differ.
    """

    def __init__(self, X: ConvexSet, Y: ConvexSet, cache: Optional[IntersectionCache] = None) -> None:
        check_same_dim(X, Y)
        self._X = X
        self._Y = Y
        self._cache = cache if cache is not None else IntersectionCache()

    @property
    def X(self) -> ConvexSet:
        return self._X

    @property
    def Y(self) -> ConvexSet:
        return self._Y

    @property
    def cache(self) -> IntersectionCache:
        """The emptiness cache."""
        return self._cache

    @property
    def operands(self) -> List[ConvexSet]:
        return [self._X, self._Y]

    @property
    def dim(self) -> int:
        return self._X.dim

    def swap(self) -> Intersection:
        """Returns the intersection with the operands exchanged, sharing the cache."""
        return Intersection(self._Y, self._X, cache=self._cache)

    def is_element(self, x) -> bool:
        return self._X.is_element(x) and self._Y.is_element(x)

    def is_empty(self, witness: bool = False):
        """
        Returns True if the operands are disjoint.

        The answer is computed with `isdisjoint` on the first query and then
        read from the cache. Witness queries always run `isdisjoint` so
        that a point can be returned; they fill the cache as well.
        """
        from ..isdisjoint import isdisjoint

        if witness:
            empty, point = isdisjoint(self._X, self._Y, witness=True)
            self._cache.set_empty(empty)
            return empty, point
        if self._cache.is_known():
            return self._cache.is_empty()
        empty = isdisjoint(self._X, self._Y)
        self._cache.set_empty(empty)
        return empty

    def an_element(self) -> np.ndarray:
        empty, point = self.is_empty(witness=True)
        if empty:
            raise EmptySetError("An empty intersection has no element.")
        return point

    def is_bounded(self) -> bool:
        if self._X.is_bounded() or self._Y.is_bounded():
            return True
        if self.is_polyhedral():
            return self.concretize().is_bounded()
        return super().is_bounded()

    def has_exact_support_function(self) -> bool:
        """
        True for two polyhedral operands and for a linear constraint with a
        bounded operand whose own support function is exact. The other
        regimes of `support_function` return an upper bound.
        """
        X, Y = self._X, self._Y
        if X.is_polyhedral() and Y.is_polyhedral():
            return True
        if _is_linear_constraint(Y):
            return X.is_bounded() and X.has_exact_support_function()
        if _is_linear_constraint(X):
            return Y.is_bounded() and Y.has_exact_support_function()
        return False

    def support_vector(self, d) -> np.ndarray:
        """Support vector of the concrete intersection."""
        d = check_direction(d, self.dim)
        return self.concretize().support_vector(d)

    def support_function(self, d, algorithm: Optional[str] = None, **options):
        """
        Evaluates the support function of the intersection.

        Args:
            d: The direction.
            algorithm: None (default) selects a regime from the operand
                kinds. "line_search" and "projection" require a half-space
                or hyperplane operand ("projection" a hyperplane). "simple"
                returns `min(rho(d, X), rho(d, Y))`.
            **options: Passed to the line search: `lower` and `upper` bound
                the multiplier, any other key (e.g. `xatol`, `maxiter`) goes
                to `scipy.optimize.minimize_scalar`.

        Raises:
            UnknownAlgorithmError: If `algorithm` is not a known name.
            BoundednessError: If the line search is applied with an
                unbounded operand.
            EmptySetError: If the line search is applied to an empty
                intersection.
        """
        if algorithm is not None and algorithm not in INTERSECTION_RHO_ALGORITHMS:
            raise UnknownAlgorithmError(algorithm, INTERSECTION_RHO_ALGORITHMS)
        d = check_direction(d, self.dim)
        X, Y = self._X, self._Y

        if algorithm == "simple":
            return min(X.support_function(d), Y.support_function(d))

        if _is_linear_constraint(Y):
            S, H = X, Y
        elif _is_linear_constraint(X):
            S, H = Y, X
        else:
            S, H = None, None

        if algorithm is not None:
            if H is None:
                raise ValueError(
                    f"The algorithm {algorithm!r} requires a half-space or hyperplane operand."
                )
            if algorithm == "projection":
                return self._projection(d, S, H, **options)
            return self._line_search(d, S, H, **options)

        if X.is_polyhedral() and Y.is_polyhedral():
            from ..sets.hpolyhedron import HPolyhedron

            P = HPolyhedron(X.constraints_list() + Y.constraints_list(), dim=self.dim)
            return P.support_function(d)

        if H is not None:
            return self._line_search(d, S, H, **options)

        if X.is_polyhedral() or Y.is_polyhedral():
            P, S = (X, Y) if X.is_polyhedral() else (Y, X)
            if S.is_bounded():
                return self._polyhedral_line_search(d, P, S, **options)
            warnings.warn(
                f"The non-polyhedral operand {S.__class__.__name__} is unbounded; "
                "returning the upper bound min(rho(d, X), rho(d, Y)).",
                UserWarning,
                stacklevel=2,
            )

        logger.debug("Upper bound for the support function of %s", self)
        return min(X.support_function(d), Y.support_function(d))

    def _check_line_search(self, S: ConvexSet) -> None:
        if not S.is_bounded():
            raise BoundednessError(
                f"The line search requires a bounded operand, got an unbounded {S.__class__.__name__}."
            )
        if self.is_empty():
            raise EmptySetError("The support function of an empty intersection is undefined.")

    def _line_search(self, d, S: ConvexSet, H, **options):
        self._check_line_search(S)
        value, _ = line_search(d, S, H, **options)
        return value

    def _projection(self, d, S: ConvexSet, H, **options):
        """
        Reduces the problem to two dimensions through the map `[a; d]`.

        The image of `S` under the map is intersected with the line
        `{(x, y) : x = b}`, whose support function in direction `(0, 1)` is
        the requested value.
        """
        from ..sets.halfspaces import Hyperplane
        from .linear_map import LinearMap

        if not isinstance(H, Hyperplane):
            raise ValueError(
                f"The algorithm 'projection' only works with a hyperplane, got a {H.__class__.__name__}."
            )
        self._check_line_search(S)
        projected = LinearMap(np.vstack([H.a, d]), S)
        line = Hyperplane([1.0, 0.0], H.b)
        return Intersection(projected, line).support_function(
            [0.0, 1.0], algorithm="line_search", **options
        )

    def _polyhedral_line_search(self, d, P: ConvexSet, S: ConvexSet, **options):
        from ..isdisjoint import isdisjoint

        constraints = P.constraints_list()
        if not constraints:
            return S.support_function(d)
        values = []
        for c in constraints:
            if isdisjoint(S, c):
                self._cache.set_empty(True)
                raise EmptySetError("The support function of an empty intersection is undefined.")
            value, _ = line_search(d, S, c, **options)
            values.append(value)
        return min(min(values), P.support_function(d))

    def concretize(self) -> ConvexSet:
        from ..concrete import intersection

        return intersection(self._X.concretize(), self._Y.concretize())

    def constraints_list(self) -> List:
        """
        Returns the combined constraints of both operands with the redundant
        ones removed.

        If the constraints are infeasible, the combined list is returned
        unchanged.
        """
        from ..backends import get_polyhedral_backend
        from ..sets.halfspaces import HalfSpace

        constraints = self._X.constraints_list() + self._Y.constraints_list()
        if not constraints:
            return constraints
        A = np.array([c.a for c in constraints])
        b = np.array([c.b for c in constraints])
        reduced = get_polyhedral_backend().remove_redundant_constraints(A, b)
        if reduced is None:
            return constraints
        return [HalfSpace(ai, bi) for ai, bi in zip(*reduced)]

    def translate(self, v) -> Intersection:
        return Intersection(self._X.translate(v), self._Y.translate(v))


def line_search(d, X: ConvexSet, H, lower=None, upper=None, **options) -> Tuple[float, float]:
    """
    Minimizes `f(lambda) = rho(d - lambda a, X) + lambda b` over an interval.

    For a half-space `a . x <= b` (lambda >= 0) or a hyperplane `a . x = b`
    (lambda free) and a compact convex X, the minimum is the support
    function of the intersection in direction `d`.

    Args:
        d: The direction.
        X: A bounded convex set.
        H: A `HalfSpace` or `Hyperplane`.
        lower: Lower end of the search interval. Defaults to 0 for a
            half-space and -1e6 for a hyperplane.
        upper: Upper end of the search interval. Defaults to 1e6.
        **options: Solver options for `scipy.optimize.minimize_scalar`
            (method "bounded"), e.g. `xatol` or `maxiter`.

    Returns:
        The pair `(f_min, lambda_min)`.
    """
    from ..sets.halfspaces import HalfSpace

    a, b = H.a, H.b
    halfspace = isinstance(H, HalfSpace)
    if lower is None:
        lower = 0.0 if halfspace else -_LINE_SEARCH_BOUND
    if upper is None:
        upper = _LINE_SEARCH_BOUND
    solver_options = {"xatol": 1e-9}
    solver_options.update(options)

    def f(lam):
        return X.support_function(d - lam * a) + lam * b

    res = scipy.optimize.minimize_scalar(
        f, bounds=(lower, upper), method="bounded", options=solver_options
    )
    fmin, lmin = float(res.fun), float(res.x)
    # the bounded method never evaluates the end points
    for end in (lower, upper):
        f_end = f(end)
        if f_end <= fmin:
            fmin, lmin = float(f_end), float(end)
    logger.debug("Line search on [%g, %g]: lambda=%g, value=%g", lower, upper, lmin, fmin)
    return fmin, lmin


class IntersectionArray(LazyOperation):
    """
    The intersection of a list of sets.

    Args:
        sets: The sets, all of the same dimension.
        dim: The dimension. Required only for an empty list, which
            represents the whole space.
    """

    def __init__(self, sets=(), dim: Optional[int] = None) -> None:
        sets = list(sets)
        self._dim = array_dim(sets, dim)
        self._array = sets

    @property
    def array(self) -> List[ConvexSet]:
        return self._array

    @property
    def operands(self) -> List[ConvexSet]:
        return self._array

    @property
    def dim(self) -> int:
        return self._dim

    def is_element(self, x) -> bool:
        return all(X.is_element(x) for X in self._array)

    def _combined(self):
        from ..sets.hpolyhedron import HPolyhedron

        constraints = []
        for X in self._array:
            constraints.extend(X.constraints_list())
        return HPolyhedron(constraints, dim=self.dim)

    def support_function(self, d):
        """
        Exact for polyhedral operands, otherwise the minimum of the
        operands' support functions, which is an upper bound.
        """
        d = check_direction(d, self.dim)
        if self.is_polyhedral():
            return self._combined().support_function(d)
        if not self._array:
            from ..sets.universe import Universe

            return Universe(self.dim).support_function(d)
        return min(X.support_function(d) for X in self._array)

    def has_exact_support_function(self) -> bool:
        if len(self._array) == 1:
            return self._array[0].has_exact_support_function()
        return self.is_polyhedral()

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return self.concretize().support_vector(d)

    def is_empty(self, witness: bool = False):
        if self.is_polyhedral():
            return self._combined().is_empty(witness=witness)
        return self.concretize().is_empty(witness=witness)

    def an_element(self) -> np.ndarray:
        empty, point = self.is_empty(witness=True)
        if empty:
            raise EmptySetError("An empty intersection has no element.")
        return point

    def is_bounded(self) -> bool:
        if any(X.is_bounded() for X in self._array):
            return True
        if self.is_polyhedral():
            return self._combined().is_bounded()
        return super().is_bounded()

    def constraints_list(self) -> List:
        return self._combined().constraints_list()

    def concretize(self) -> ConvexSet:
        from ..concrete import intersection
        from ..sets.universe import Universe

        result: ConvexSet = Universe(self.dim)
        for X in self._array:
            result = intersection(result, X.concretize())
        return result
