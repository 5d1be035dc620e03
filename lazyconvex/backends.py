"""
Linear-programming and polyhedral-computation services.

The rest of the package talks to numerical solvers only through this module:

- `solve_lp` wraps `scipy.optimize.linprog` (HiGHS) behind a small contract
  returning a typed `LPResult`.
- `PolyhedralBackend` converts between vertex and constraint representations
  and removes redundant vertices or constraints. The process-wide backend is
  read with `get_polyhedral_backend` and replaced with
  `set_polyhedral_backend`.
"""

from __future__ import annotations

import enum
import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import scipy.optimize
import scipy.spatial

from .exceptions import BackendUnavailableError, LPSolverError
from .tolerance import _leq

logger = logging.getLogger(__name__)


# ============================================================================
# Linear programming
# ============================================================================


class LPStatus(enum.Enum):
    """Outcome of a linear program."""

    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    OTHER = "other"


_LINPROG_STATUS = {
    0: LPStatus.OPTIMAL,
    2: LPStatus.INFEASIBLE,
    3: LPStatus.UNBOUNDED,
}


@dataclass
class LPResult:
    """
    Result of `solve_lp`.

    Attributes:
        status: The solver outcome.
        x: The solution vector if the status is OPTIMAL, else None.
        objective: The optimal objective value (in the sense requested,
            i.e. a maximum if `maximize=True`), else None.
        message: The solver's message, useful for diagnostics.
    """

    status: LPStatus
    x: Optional[np.ndarray] = None
    objective: Optional[float] = None
    message: str = ""

    @property
    def is_optimal(self) -> bool:
        return self.status is LPStatus.OPTIMAL


def _variable_bounds(lb, ub, n: int) -> List[Tuple[Optional[float], Optional[float]]]:
    lower = np.full(n, -np.inf) if lb is None else np.broadcast_to(np.asarray(lb, dtype=float), (n,))
    upper = np.full(n, np.inf) if ub is None else np.broadcast_to(np.asarray(ub, dtype=float), (n,))
    return [
        (None if np.isneginf(lo) else float(lo), None if np.isposinf(hi) else float(hi))
        for lo, hi in zip(lower, upper)
    ]


def solve_lp(
    c,
    A,
    senses: Sequence[str],
    b,
    lb=None,
    ub=None,
    maximize: bool = False,
) -> LPResult:
    """
    Solves the linear program `min (or max) c.x` subject to `A x (senses) b`.

    Args:
        c: Objective vector of length n.
        A: Constraint matrix of shape (m, n).
        senses: Sequence of m relation symbols, each one of "<", "=" or ">".
            "<" and ">" are non-strict.
        b: Right-hand side of length m.
        lb: Lower bounds of the variables (scalar or vector). None means
            unbounded below.
        ub: Upper bounds of the variables (scalar or vector). None means
            unbounded above.
        maximize: If True, maximizes the objective instead.

    Returns:
        An `LPResult`. Solver failures are reported with status OTHER rather
        than raised; use `require_feasibility` to turn them into errors.
    """
    c = np.asarray(c, dtype=float).reshape(-1)
    n = c.shape[0]
    A = np.asarray(A, dtype=float).reshape(-1, n)
    b = np.asarray(b, dtype=float).reshape(-1)
    senses = list(senses)
    if not (A.shape[0] == b.shape[0] == len(senses)):
        raise ValueError(
            f"Inconsistent LP: {A.shape[0]} rows, {b.shape[0]} right-hand sides "
            f"and {len(senses)} senses."
        )

    ub_rows, ub_rhs, eq_rows, eq_rhs = [], [], [], []
    for row, sense, rhs in zip(A, senses, b):
        if sense == "<":
            ub_rows.append(row)
            ub_rhs.append(rhs)
        elif sense == ">":
            ub_rows.append(-row)
            ub_rhs.append(-rhs)
        elif sense == "=":
            eq_rows.append(row)
            eq_rhs.append(rhs)
        else:
            raise ValueError(f"Unknown constraint sense {sense!r}.")

    res = scipy.optimize.linprog(
        -c if maximize else c,
        A_ub=np.array(ub_rows) if ub_rows else None,
        b_ub=np.array(ub_rhs) if ub_rows else None,
        A_eq=np.array(eq_rows) if eq_rows else None,
        b_eq=np.array(eq_rhs) if eq_rows else None,
        bounds=_variable_bounds(lb, ub, n),
        method="highs",
    )
    status = _LINPROG_STATUS.get(res.status, LPStatus.OTHER)
    logger.debug("LP with %d variables and %d constraints: %s", n, len(senses), status.value)

    if status is not LPStatus.OPTIMAL:
        return LPResult(status, message=res.message)
    objective = -res.fun if maximize else res.fun
    return LPResult(status, x=np.asarray(res.x, dtype=float), objective=float(objective), message=res.message)


def require_feasibility(result: LPResult) -> bool:
    """
    Maps the result of a feasibility LP to a boolean.

    Returns:
        True if the LP was solved to optimality, False if it is infeasible.

    Raises:
        LPSolverError: For any other solver status.
    """
    if result.status is LPStatus.OPTIMAL:
        return True
    if result.status is LPStatus.INFEASIBLE:
        return False
    raise LPSolverError(f"LP solver returned status {result.status.value}: {result.message}")


def feasible_point(A, b) -> Optional[np.ndarray]:
    """
    Finds a point satisfying `A x <= b`.

    Returns:
        A feasible point, or None if the constraints are infeasible.
    """
    A = np.asarray(A, dtype=float)
    res = solve_lp(np.zeros(A.shape[1]), A, "<" * A.shape[0], b)
    return res.x if require_feasibility(res) else None


def convex_combination_lp(x, vertices) -> LPResult:
    """
    Feasibility LP for `x` being a convex combination of `vertices`.

    Solves for `lambda >= 0` with `V lambda = x` and `sum(lambda) = 1`.
    """
    V = np.array([np.asarray(v, dtype=float) for v in vertices]).T
    n, m = V.shape
    A = np.vstack([V, np.ones((1, m))])
    rhs = np.append(np.asarray(x, dtype=float), 1.0)
    return solve_lp(np.zeros(m), A, "=" * (n + 1), rhs, lb=0.0)


def chebyshev_center(A, b, max_radius: float = 1.0) -> Tuple[np.ndarray, float]:
    """
    Computes an interior point of `{x : A x <= b}` via the Chebyshev center LP.

    Maximizes r such that `a_i.x + r ||a_i|| <= b_i`. The radius is capped at
    `max_radius` so that the LP stays bounded for unbounded polyhedra.

    Returns:
        (x, r). If r is (close to) zero the set is lower-dimensional.

    Raises:
        ValueError: If the constraints are infeasible.
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    k = A.shape[1]
    norms = np.linalg.norm(A, axis=1)
    c = np.zeros(k + 1)
    c[-1] = 1.0
    A_lp = np.hstack([A, norms[:, None]])
    lb = np.append(np.full(k, -np.inf), 0.0)
    ub = np.append(np.full(k, np.inf), max_radius)
    res = solve_lp(c, A_lp, "<" * A.shape[0], b, lb=lb, ub=ub, maximize=True)
    if not require_feasibility(res):
        raise ValueError("Failed to find an interior point: the constraints are infeasible.")
    return res.x[:k], float(res.x[-1])


# ============================================================================
# Polyhedral computations
# ============================================================================


class PolyhedralBackend(ABC):
    """
    Conversion service between vertex and constraint representations.

    Constraints are exchanged as a pair `(A, b)` describing `A x <= b`.
    """

    @abstractmethod
    def to_constraints(self, vertices: Sequence[np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
        """Returns `(A, b)` with `conv(vertices) = {x : A x <= b}`."""

    @abstractmethod
    def to_vertices(self, A, b) -> List[np.ndarray]:
        """Returns the vertices of the bounded polyhedron `{x : A x <= b}`."""

    @abstractmethod
    def remove_redundant_vertices(self, points: Sequence[np.ndarray]) -> List[np.ndarray]:
        """Returns the extreme points of `conv(points)`."""

    @abstractmethod
    def remove_redundant_constraints(self, A, b) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """
        Removes constraints implied by the others.

        Returns None if the constraints are infeasible.
        """


class UnavailablePolyhedralBackend(PolyhedralBackend):
    """Placeholder backend that fails on every call."""

    def _fail(self, operation: str):
        raise BackendUnavailableError(
            f"'{operation}' requires a polyhedral backend; "
            "configure one with lazyconvex.backends.set_polyhedral_backend()."
        )

    def to_constraints(self, vertices):
        self._fail("to_constraints")

    def to_vertices(self, A, b):
        self._fail("to_vertices")

    def remove_redundant_vertices(self, points):
        self._fail("remove_redundant_vertices")

    def remove_redundant_constraints(self, A, b):
        self._fail("remove_redundant_constraints")


class ScipyPolyhedralBackend(PolyhedralBackend):
    """
    Polyhedral backend built on Qhull (`scipy.spatial`) and HiGHS.

    Full-dimensional inputs go through `ConvexHull` and
    `HalfspaceIntersection`. Lower-dimensional inputs, which Qhull rejects,
    are handled by projecting onto the affine hull or by LP-based
    elimination.

    Args:
        degeneracy_tol: Chebyshev radius below which a constraint set is
            treated as lower-dimensional.
    """

    def __init__(self, degeneracy_tol: float = 1e-9) -> None:
        self.degeneracy_tol = degeneracy_tol

    # ------------------------------------------------------------------
    # V -> H
    # ------------------------------------------------------------------

    def to_constraints(self, vertices):
        P = np.array([np.asarray(v, dtype=float) for v in vertices])
        if P.size == 0:
            raise ValueError("Cannot compute the constraints of an empty vertex list.")
        n = P.shape[1]
        mean = P.mean(axis=0)
        basis, null = _affine_hull(P - mean)

        rows, rhs = [], []
        for u in null:
            rows.extend([u, -u])
            rhs.extend([u @ mean, -(u @ mean)])

        rank = basis.shape[1]
        if rank == 1:
            u = basis[:, 0]
            q = (P - mean) @ u
            rows.extend([u, -u])
            rhs.extend([q.max() + u @ mean, -q.min() - u @ mean])
        elif rank >= 2:
            Q = (P - mean) @ basis
            hull = scipy.spatial.ConvexHull(Q)
            for eq in _unique_rows(hull.equations):
                # Qhull facets read normal.q + offset <= 0
                a = basis @ eq[:-1]
                rows.append(a)
                rhs.append(-eq[-1] + a @ mean)

        return np.array(rows).reshape(-1, n), np.array(rhs, dtype=float)

    # ------------------------------------------------------------------
    # H -> V
    # ------------------------------------------------------------------

    def to_vertices(self, A, b):
        A = np.asarray(A, dtype=float)
        b = np.asarray(b, dtype=float)
        n = A.shape[1]
        if A.shape[0] == 0:
            raise ValueError("Cannot enumerate the vertices of an unbounded polyhedron.")
        if n == 1:
            return _interval_vertices(A[:, 0], b)

        try:
            center, radius = chebyshev_center(A, b)
        except ValueError:
            return []

        if radius <= self.degeneracy_tol:
            logger.debug("Lower-dimensional H-representation; enumerating constraint bases")
            return self._enumerate_vertices(A, b)

        halfspaces = np.hstack([A, -b[:, None]])
        hs = scipy.spatial.HalfspaceIntersection(halfspaces, center)
        pts = np.asarray(hs.intersections, dtype=float)
        if not np.all(np.isfinite(pts)):
            raise ValueError("Cannot enumerate the vertices of an unbounded polyhedron.")
        return self.remove_redundant_vertices(list(pts))

    def _enumerate_vertices(self, A, b):
        m, n = A.shape
        scale = max(1.0, float(np.max(np.abs(b)))) if b.size else 1.0
        candidates = []
        for rows in itertools.combinations(range(m), n):
            sub = A[list(rows)]
            if abs(np.linalg.det(sub)) <= 1e-12:
                continue
            x = np.linalg.solve(sub, b[list(rows)])
            if np.all(A @ x <= b + 1e-9 * scale):
                candidates.append(x)
        if not candidates:
            return []
        return self.remove_redundant_vertices(candidates)

    # ------------------------------------------------------------------
    # Redundancy removal
    # ------------------------------------------------------------------

    def remove_redundant_vertices(self, points):
        pts = [np.asarray(p) for p in points]
        if len(pts) <= 1:
            return pts
        P = np.array([np.asarray(p, dtype=float) for p in pts])
        n = P.shape[1]
        if n == 1:
            lo, hi = int(np.argmin(P[:, 0])), int(np.argmax(P[:, 0]))
            return [pts[lo]] if np.isclose(P[lo, 0], P[hi, 0]) else [pts[lo], pts[hi]]
        if len(pts) > n:
            try:
                hull = scipy.spatial.ConvexHull(P)
                return [pts[i] for i in sorted(hull.vertices)]
            except scipy.spatial.QhullError:
                logger.debug("Qhull rejected a degenerate point set; using LP elimination")
        return _remove_redundant_vertices_lp(pts)

    def remove_redundant_constraints(self, A, b):
        A = np.asarray(A, dtype=float)
        b = np.asarray(b, dtype=float)
        if feasible_point(A, b) is None:
            return None
        keep = list(range(A.shape[0]))
        for i in range(A.shape[0]):
            others = [j for j in keep if j != i]
            # the relaxed copy of row i keeps the LP bounded
            A_lp = np.vstack([A[others], A[i]])
            b_lp = np.append(b[others], b[i] + 1.0)
            res = solve_lp(A[i], A_lp, "<" * A_lp.shape[0], b_lp, maximize=True)
            if res.status is LPStatus.INFEASIBLE:
                return None
            if res.status is LPStatus.OPTIMAL:
                if _leq(res.objective, b[i]):
                    keep.remove(i)
            elif res.status is LPStatus.OTHER:
                raise LPSolverError(f"LP solver failed: {res.message}")
        return A[keep], b[keep]


def _affine_hull(P: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Orthonormal bases of the span of the (centered) rows of P and of its
    orthogonal complement.
    """
    n = P.shape[1]
    _, s, Vt = np.linalg.svd(P, full_matrices=True)
    if s.size == 0 or s[0] == 0:
        return np.zeros((n, 0)), Vt
    tol = s[0] * max(P.shape) * np.finfo(float).eps * 1e3
    rank = int(np.sum(s > tol))
    return Vt[:rank].T, Vt[rank:]


def _unique_rows(rows: np.ndarray) -> List[np.ndarray]:
    unique: List[np.ndarray] = []
    for row in rows:
        if not any(np.allclose(row, u) for u in unique):
            unique.append(row)
    return unique


def _interval_vertices(a: np.ndarray, b: np.ndarray) -> List[np.ndarray]:
    lo, hi = -np.inf, np.inf
    for ai, bi in zip(a, b):
        if ai > 0:
            hi = min(hi, bi / ai)
        elif ai < 0:
            lo = max(lo, bi / ai)
        elif bi < 0:
            return []
    if not (np.isfinite(lo) and np.isfinite(hi)):
        raise ValueError("Cannot enumerate the vertices of an unbounded polyhedron.")
    if lo > hi and not np.isclose(lo, hi):
        return []
    if np.isclose(lo, hi):
        return [np.array([lo])]
    return [np.array([lo]), np.array([hi])]


def _remove_redundant_vertices_lp(pts: List[np.ndarray]) -> List[np.ndarray]:
    kept = list(pts)
    i = 0
    while i < len(kept):
        others = kept[:i] + kept[i + 1:]
        if others and require_feasibility(convex_combination_lp(kept[i], others)):
            del kept[i]
        else:
            i += 1
    return kept


_POLYHEDRAL_BACKEND: PolyhedralBackend = ScipyPolyhedralBackend()


def get_polyhedral_backend() -> PolyhedralBackend:
    """Returns the process-wide polyhedral backend."""
    return _POLYHEDRAL_BACKEND


def set_polyhedral_backend(backend: Optional[PolyhedralBackend]) -> PolyhedralBackend:
    """
    Replaces the process-wide polyhedral backend.

    Args:
        backend: The new backend. None installs an
            `UnavailablePolyhedralBackend`.

    Returns:
        The previous backend.
    """
    global _POLYHEDRAL_BACKEND
    previous = _POLYHEDRAL_BACKEND
    _POLYHEDRAL_BACKEND = backend if backend is not None else UnavailablePolyhedralBackend()
    return previous
