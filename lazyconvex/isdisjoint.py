"""
Disjointness checks between pairs of sets.

`isdisjoint(X, Y)` decides whether `X & Y` is empty. With `witness=True` it
returns a pair `(disjoint, point)`, where `point` lies in both sets when they
intersect and is an empty array otherwise.

The algorithm is chosen from a rule table over pairs of set types (see
`registered_rules`). Specialised rules use closed-form tests; the generic
rule concretizes lazy operands, or computes the concrete intersection and
tests it for emptiness. Pairs that no rule covers raise `NotImplementedError`.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np
import scipy.optimize

from .backends import LPStatus, feasible_point, solve_lp
from .convex_set import ConvexSet
from .dispatch import PairDispatcher
from .exceptions import EmptySetError, LPSolverError, UnknownAlgorithmError
from .sets.abstract import AbstractHyperrectangle, AbstractPolyhedron, AbstractSingleton, AbstractZonotope
from .sets.balls import Ball2
from .sets.empty_set import EmptySet
from .sets.halfspaces import HalfSpace, Hyperplane, an_element_helper
from .sets.hyperrectangle import Hyperrectangle, Interval
from .sets.universe import Universe
from .sets.zonotope import LineSegment
from .tolerance import _geq, _leq, isapprox_vector, isapproxzero
from .utils import abs_sum, check_same_dim, samedir

logger = logging.getLogger(__name__)

POLYHEDRAL_ALGORITHMS = ("exact", "sufficient")

_isdisjoint = PairDispatcher("isdisjoint")


def isdisjoint(X: ConvexSet, Y: ConvexSet, witness: bool = False, **kwargs):
    """
    Checks whether two sets do not intersect.

    Args:
        X: A set.
        Y: A set of the same dimension.
        witness: If True, also return a common point.
        **kwargs: Options for specific rules, e.g. `algorithm="sufficient"`
            for polyhedra.

    Returns:
        `disjoint` if `witness` is False, otherwise `(disjoint, point)`.
        The point is an empty array if the sets are disjoint.

    Raises:
        DimensionMismatchError: If the dimensions differ.
        NotImplementedError: If no algorithm covers the pair.
    """
    check_same_dim(X, Y)
    return _isdisjoint(X, Y, witness, **kwargs)


def registered_rules() -> List[Tuple[str, str, int, str]]:
    """Lists the disjointness rules as `(left, right, priority, function)`."""
    return _isdisjoint.rules()


def _answer(disjoint: bool, point, witness: bool):
    if not witness:
        return disjoint
    if disjoint:
        return True, np.zeros(0)
    return False, point


def _no_witness(result) -> bool:
    return result[0] if isinstance(result, tuple) else result


# ============================================================================
# Trivial sets
# ============================================================================


@_isdisjoint.register(EmptySet, ConvexSet, priority=100)
def _isdisjoint_empty(E, X, witness=False, **kwargs):
    return _answer(True, None, witness)


@_isdisjoint.register(Universe, ConvexSet, priority=90)
def _isdisjoint_universe(U, X, witness=False, **kwargs):
    empty, point = X.is_empty(witness=True)
    return _answer(empty, point, witness)


@_isdisjoint.register(AbstractSingleton, AbstractSingleton, priority=85)
def _isdisjoint_singletons(S1, S2, witness=False, **kwargs):
    return _answer(not isapprox_vector(S1.element, S2.element), S1.element, witness)


@_isdisjoint.register(AbstractSingleton, ConvexSet, priority=80)
def _isdisjoint_singleton(S, X, witness=False, **kwargs):
    return _answer(not X.is_element(S.element), S.element, witness)


def _union_types():
    from .operations.union import UnionSet, UnionSetArray

    return UnionSet, UnionSetArray


def _isdisjoint_union(U, X, witness=False, **kwargs):
    for member in U.array:
        disjoint, point = isdisjoint(member, X, witness=True, **kwargs)
        if not disjoint:
            return _answer(False, point, witness)
    return _answer(True, None, witness)


# ============================================================================
# One-dimensional and axis-aligned sets
# ============================================================================


@_isdisjoint.register(Interval, Interval, priority=70)
def _isdisjoint_intervals(I1, I2, witness=False, **kwargs):
    lo = max(I1.lo, I2.lo)
    hi = min(I1.hi, I2.hi)
    return _answer(not _leq(lo, hi), np.array([lo]), witness)


def _cross(u, v):
    return u[0] * v[1] - u[1] * v[0]


@_isdisjoint.register(LineSegment, LineSegment, priority=70)
def _isdisjoint_line_segments(L1, L2, witness=False, **kwargs):
    """
    Parametrises the intersection of the supporting lines, `p1 + t r` and
    `p2 + u s`, and checks that both parameters lie in [0, 1]. Parallel
    segments intersect only if they are collinear and an endpoint of one
    lies in the other.
    """
    r = L1.q - L1.p
    s = L2.q - L2.p
    if all(isapproxzero(ri) for ri in r):
        return _answer(not L2.is_element(L1.q), L1.q, witness)
    if all(isapproxzero(si) for si in s):
        return _answer(not L1.is_element(L2.q), L2.q, witness)

    p1p2 = L2.p - L1.p
    numerator = _cross(p1p2, r)
    denominator = _cross(r, s)
    if isapproxzero(denominator):
        if not isapproxzero(numerator):
            # parallel, not collinear
            return _answer(True, None, witness)
        for point in (L1.p, L1.q, L2.p, L2.q):
            if L1.is_element(point) and L2.is_element(point):
                return _answer(False, point, witness)
        return _answer(True, None, witness)

    u = numerator / denominator
    t = _cross(p1p2, s) / denominator
    disjoint = not (_geq(u, 0) and _leq(u, 1) and _geq(t, 0) and _leq(t, 1))
    return _answer(disjoint, L1.p + min(max(t, 0), 1) * r, witness)


@_isdisjoint.register(AbstractHyperrectangle, AbstractHyperrectangle, priority=65)
def _isdisjoint_hyperrectangles(H1, H2, witness=False, **kwargs):
    """
    Two hyperrectangles are disjoint iff their centers are farther apart
    than the sum of their radii along some axis. The witness moves from the
    first center toward the second one, by at most the first radius per
    axis.
    """
    c1, c2 = H1.center, H2.center
    r1, r2 = H1.radius_hyperrectangle(), H2.radius_hyperrectangle()
    gap = c2 - c1
    disjoint = any(not _leq(abs(g), a + b) for g, a, b in zip(gap, r1, r2))
    if not witness or disjoint:
        return _answer(disjoint, None, witness)

    v = np.array(c1, dtype=np.result_type(c1.dtype, c2.dtype, np.float64))
    for i in range(len(v)):
        if v[i] <= c2[i]:
            v[i] += min(r1[i], gap[i])
        else:
            v[i] -= min(r1[i], -gap[i])
    return False, v


@_isdisjoint.register(Ball2, Ball2, priority=65)
def _isdisjoint_balls(B1, B2, witness=False, **kwargs):
    distance = np.linalg.norm(B2.center - B1.center)
    disjoint = not _leq(distance, B1.radius + B2.radius)
    if not witness or disjoint:
        return _answer(disjoint, None, witness)

    smaller, bigger = (B1, B2) if B1.radius <= B2.radius else (B2, B1)
    if distance <= bigger.radius:
        return False, smaller.center
    direction = bigger.center - smaller.center
    return False, smaller.center + direction / distance * smaller.radius


# ============================================================================
# Hyperplanes and half-spaces
# ============================================================================


def _common_point(a1, b1, a2, b2) -> np.ndarray:
    """Least-squares solution of `a1 . x = b1, a2 . x = b2`."""
    A = np.vstack([a1, a2]).astype(float)
    b = np.array([b1, b2], dtype=float)
    return np.linalg.lstsq(A, b, rcond=None)[0]


@_isdisjoint.register(HalfSpace, HalfSpace, priority=65)
def _isdisjoint_halfspaces(H1, H2, witness=False, **kwargs):
    a1, b1, a2, b2 = H1.a, H1.b, H2.a, H2.b

    opposite, k = samedir(a1, -a2)
    if opposite:
        # a1 = -k a2, so H2 is {x : a1 . x >= -k b2}
        disjoint = not _geq(b1 + k * b2, 0)
        return _answer(disjoint, an_element_helper(a1, b1), witness)

    same, k = samedir(a1, a2)
    if same:
        # a1 = k a2, so H1 is {x : a2 . x <= b1 / k}
        return _answer(False, an_element_helper(a2, min(b1 / k, b2)), witness)

    return _answer(False, _common_point(a1, b1, a2, b2), witness)


@_isdisjoint.register(Hyperplane, Hyperplane, priority=65)
def _isdisjoint_hyperplanes(P1, P2, witness=False, **kwargs):
    if P1.is_equivalent(P2):
        return _answer(False, P1.an_element(), witness)
    if samedir(P1.a, P2.a)[0] or samedir(P1.a, -P2.a)[0]:
        return _answer(True, None, witness)
    return _answer(False, _common_point(P1.a, P1.b, P2.a, P2.b), witness)


@_isdisjoint.register(Hyperplane, HalfSpace, priority=64)
def _isdisjoint_hyperplane_halfspace(P, H, witness=False, **kwargs):
    same, k = samedir(P.a, H.a)
    if same:
        return _answer(not _leq(P.b / k, H.b), P.an_element(), witness)
    opposite, k = samedir(P.a, -H.a)
    if opposite:
        return _answer(not _leq(-P.b / k, H.b), P.an_element(), witness)
    return _answer(False, _common_point(P.a, P.b, H.a, H.b), witness)


# ============================================================================
# Zonotopes
# ============================================================================


@_isdisjoint.register(AbstractZonotope, Hyperplane, priority=60)
def _isdisjoint_zonotope_hyperplane(Z, P, witness=False, **kwargs):
    """
    `Z` and `P` intersect iff `b - a . c` lies in `[-s, s]` with
    `s = sum_i |a . g_i|`. A witness solves `a . (c + G xi) = b` for
    `xi` in the unit box.
    """
    c, G = Z.center, Z.genmat()
    v = P.b - np.dot(P.a, c)
    if G.shape[1] == 0:
        return _answer(not isapproxzero(v), c, witness)
    s = abs_sum(P.a, G)
    disjoint = not _geq(v, -s) or not _leq(v, s)
    if not witness or disjoint:
        return _answer(disjoint, None, witness)

    res = solve_lp(np.zeros(G.shape[1]), (P.a @ G).reshape(1, -1), "=", [v], lb=-1.0, ub=1.0)
    if res.status is not LPStatus.OPTIMAL:
        raise LPSolverError(f"Witness LP returned status {res.status.value}: {res.message}")
    return False, c + G @ res.x


@_isdisjoint.register(AbstractZonotope, AbstractZonotope, priority=55)
def _isdisjoint_zonotopes(Z1, Z2, witness=False, **kwargs):
    """
    `Z1` and `Z2` intersect iff `c2 - c1 = G1 xi1 - G2 xi2` has a solution
    in the unit box, decided by a feasibility LP.
    """
    c1, c2 = Z1.center, Z2.center
    G1, G2 = Z1.genmat(), Z2.genmat()
    p1 = G1.shape[1]
    G = np.hstack([G1, -G2]).astype(float)
    if G.shape[1] == 0:
        return _answer(not isapprox_vector(c1, c2), c1, witness)

    res = solve_lp(np.zeros(G.shape[1]), G, "=" * G.shape[0], c2 - c1, lb=-1.0, ub=1.0)
    if res.status is LPStatus.INFEASIBLE:
        return _answer(True, None, witness)
    if res.status is not LPStatus.OPTIMAL:
        raise LPSolverError(f"Zonotope LP returned status {res.status.value}: {res.message}")
    return _answer(False, c1 + G1 @ res.x[:p1], witness)


# ============================================================================
# Cartesian products
# ============================================================================


def _cartesian_product_array():
    from .operations.cartesian_product import CartesianProductArray

    return CartesianProductArray


def _blockwise(pairs, witness, **kwargs):
    points = []
    for X, Y in pairs:
        disjoint, point = isdisjoint(X, Y, witness=True, **kwargs)
        if disjoint:
            return _answer(True, None, witness)
        points.append(point)
    return _answer(False, np.concatenate(points) if points else np.zeros(0), witness)


def _isdisjoint_cpa_hyperrectangle(C, H, witness=False, **kwargs):
    centers = C.split(H.center)
    radii = C.split(H.radius_hyperrectangle())
    blocks = [Hyperrectangle(c, r) for c, r in zip(centers, radii)]
    return _blockwise(zip(C.array, blocks), witness, **kwargs)


def _isdisjoint_cpas(C1, C2, witness=False, **kwargs):
    if C1.block_dims() != C2.block_dims():
        return _isdisjoint_generic(C1, C2, witness, **kwargs)
    return _blockwise(zip(C1.array, C2.array), witness, **kwargs)


# ============================================================================
# Sets with an upper bound for the support function
# ============================================================================


def _intersection_operands(X) -> List[ConvexSet]:
    from .operations.intersection import Intersection, IntersectionArray

    if isinstance(X, Intersection):
        return [X.X, X.Y]
    if isinstance(X, IntersectionArray):
        return list(X.array)
    return []


def _bound_separates(X, H) -> bool:
    """True if an upper bound for the support function of X shows that X misses H."""
    if not _leq(-X.support_function(-H.a), H.b):
        return True
    return isinstance(H, Hyperplane) and not _leq(H.b, X.support_function(H.a))


def _crossing(p, q, H) -> np.ndarray:
    """The point where the segment from `p`, outside of H, to `q` in H reaches H."""
    outside = np.dot(H.a, p) - H.b
    inside = np.dot(H.a, q) - H.b
    return p + outside / (outside - inside) * (q - p)


def _separating_direction(X, Y, d0):
    """
    Searches a direction d with `rho(d, X) + rho(-d, Y) < 0`, which proves
    that X and Y are disjoint.

    The left side is convex and positively homogeneous in d, so it is
    minimized over the unit ball with `scipy.optimize.minimize`, starting
    from `d0`. Returns None if no separating direction was found.
    """

    def gap(d):
        return X.support_function(d) + Y.support_function(-d)

    def separates(d):
        value = gap(d)
        return value < 0 and not _geq(value, 0.0)

    if separates(d0):
        return d0
    res = scipy.optimize.minimize(
        gap,
        d0,
        method="SLSQP",
        constraints=[{"type": "ineq", "fun": lambda d: 1.0 - np.dot(d, d)}],
    )
    d = np.asarray(res.x, dtype=float)
    if separates(d):
        return d
    return None


def _isdisjoint_upper_bound(X, H, witness, **kwargs):
    """
    Disjointness of a half-space or hyperplane H and a set X whose support
    function is only an upper bound.

    The bound can prove disjointness but never the converse. A common point
    is looked for among an element p of X and the points where the segments
    from p toward the parts of X's operands in H reach H. For the
    intersection `S & T` of two sets the question is re-associated to S
    against `T & H`, whose support function is exact, and a separating
    direction is searched.

    Raises:
        NotImplementedError: If none of these tests decides the pair.
    """
    from .operations.intersection import Intersection

    try:
        if _bound_separates(X, H):
            return _answer(True, None, witness)
    except EmptySetError:
        return _answer(True, None, witness)

    empty, p = X.is_empty(witness=True)
    if empty:
        return _answer(True, None, witness)
    if H.is_element(p):
        return _answer(False, p, witness)

    operands = _intersection_operands(X)
    points = []
    for T in operands:
        disjoint, q = isdisjoint(T, H, witness=True, **kwargs)
        if disjoint:
            return _answer(True, None, witness)
        r = _crossing(p, q, H)
        if X.is_element(r) and H.is_element(r):
            return _answer(False, r, witness)
        points.append(q)

    if len(operands) == 2:
        pairs = ((operands[0], operands[1], points[1]), (operands[1], operands[0], points[0]))
        for S, T, q in pairs:
            W = Intersection(T, H)
            if not (S.has_exact_support_function() and W.has_exact_support_function()):
                continue
            # p lies in S and q in W
            d0 = (q - p) / np.linalg.norm(q - p)
            d = _separating_direction(S, W, d0)
            if d is not None:
                logger.debug("Direction %s separates %s from %s", d, type(S).__name__, W)
                return _answer(True, None, witness)

    raise NotImplementedError(
        f"Cannot decide whether {type(X).__name__} and {type(H).__name__} intersect: "
        "its support function is only an upper bound."
    )


# ============================================================================
# Support-function tests
# ============================================================================


@_isdisjoint.register(ConvexSet, HalfSpace, priority=50)
def _isdisjoint_halfspace(X, H, witness=False, **kwargs):
    """`X` and `H` intersect iff the minimum of `a . x` over X is at most b."""
    if not X.has_exact_support_function():
        return _isdisjoint_upper_bound(X, H, witness, **kwargs)
    try:
        lowest = -X.support_function(-H.a)
    except EmptySetError:
        return _answer(True, None, witness)
    if np.isinf(lowest) and witness and X.is_polyhedral():
        return _isdisjoint_polyhedra(X, H, witness)
    disjoint = not _leq(lowest, H.b)
    if not witness or disjoint:
        return _answer(disjoint, None, witness)
    return False, X.support_vector(-H.a)


@_isdisjoint.register(AbstractPolyhedron, Hyperplane, priority=47)
def _isdisjoint_polyhedron_hyperplane(P, H, witness=False, **kwargs):
    return _isdisjoint_polyhedra(P, H, witness)


@_isdisjoint.register(ConvexSet, Hyperplane, priority=45)
def _isdisjoint_hyperplane(X, H, witness=False, **kwargs):
    """
    For compact X, `X` and `H` intersect iff `-rho(-a) <= b <= rho(a)`. The
    witness is where the segment between the two support vectors crosses
    the hyperplane.
    """
    if not X.has_exact_support_function():
        return _isdisjoint_upper_bound(X, H, witness, **kwargs)
    a, b = H.a, H.b
    try:
        low, high = -X.support_function(-a), X.support_function(a)
    except EmptySetError:
        return _answer(True, None, witness)
    disjoint = not _leq(low, b) or not _leq(b, high)
    if not witness or disjoint:
        return _answer(disjoint, None, witness)

    left = X.support_vector(-a)
    right = X.support_vector(a)
    direction = right - left
    slope = np.dot(direction, a)
    if isapproxzero(slope):
        return False, left
    t = (b - np.dot(left, a)) / slope
    return False, left + t * direction


# ============================================================================
# Polyhedra
# ============================================================================


def _isdisjoint_polyhedra(X, Y, witness):
    constraints = X.constraints_list() + Y.constraints_list()
    if not constraints:
        return _answer(False, np.zeros(X.dim), witness)
    A = np.array([c.a for c in constraints], dtype=float)
    b = np.array([c.b for c in constraints], dtype=float)
    point = feasible_point(A, b)
    return _answer(point is None, point, witness)


@_isdisjoint.register(AbstractPolyhedron, ConvexSet, priority=40)
def _isdisjoint_polyhedron(P, X, witness=False, algorithm="exact", **kwargs):
    """
    Polyhedron against another set.

    Args:
        algorithm: `"exact"` solves a feasibility LP over the constraints of
            both sets (the other set must be polyhedral). `"sufficient"`
            reports disjointness if one constraint of P is disjoint from X;
            a False answer is then inconclusive.
    """
    if algorithm == "exact":
        if X.is_polyhedral():
            return _isdisjoint_polyhedra(P, X, witness)
        return _isdisjoint_generic(P, X, witness, **kwargs)
    if algorithm == "sufficient":
        if witness:
            raise NotImplementedError("The sufficient algorithm does not produce witnesses.")
        for constraint in P.constraints_list():
            if _no_witness(isdisjoint(constraint, X)):
                logger.debug("Constraint %s separates the sets", constraint)
                return True
        return False
    raise UnknownAlgorithmError(algorithm, POLYHEDRAL_ALGORITHMS)


# ============================================================================
# Generic rule
# ============================================================================


@_isdisjoint.register(ConvexSet, ConvexSet, priority=0)
def _isdisjoint_generic(X, Y, witness=False, **kwargs):
    from .concrete import _concretize_pair, intersection

    pair = _concretize_pair(X, Y)
    if pair is not None:
        return isdisjoint(*pair, witness=witness, **kwargs)

    logger.debug("Deciding disjointness of %s and %s by intersection", type(X).__name__, type(Y).__name__)
    Z = intersection(X, Y)
    if not witness:
        return Z.is_empty()
    return Z.is_empty(witness=True)


_isdisjoint.register(_union_types(), ConvexSet, priority=75)(_isdisjoint_union)
_isdisjoint.register(_cartesian_product_array(), AbstractHyperrectangle, priority=55)(
    _isdisjoint_cpa_hyperrectangle
)
_isdisjoint.register(_cartesian_product_array(), _cartesian_product_array(), priority=55)(_isdisjoint_cpas)
