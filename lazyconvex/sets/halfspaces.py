"""
Hyperplanes `{x : a . x = b}` and half-spaces `{x : a . x <= b}`.

Both sets share the same data, a non-zero normal vector `a` and an offset
`b`, and the same support-vector computation: the set is bounded in
direction `d` only if `d` is parallel to the normal (with a positive factor
for half-spaces), in which case every point on the boundary is a maximizer.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

from ..exceptions import UnboundedDirectionError
from ..tolerance import _isapprox, _leq, isapproxzero
from ..utils import as_vector, check_direction, samedir
from .abstract import AbstractPolyhedron


def an_element_helper(a, b) -> np.ndarray:
    """
    Returns a point x with `a . x = b`.

    The point is zero except at the first non-zero entry i of `a`, where it
    is `b / a[i]`.
    """
    for i, ai in enumerate(a):
        if not isapproxzero(ai):
            x = np.zeros(len(a), dtype=a.dtype)
            x[i] = b / ai
            return x
    raise ValueError("The normal vector must not be zero.")


def support_vector_helper(
    d, a, b, error_unbounded: bool = True, halfspace: bool = False
) -> Tuple[np.ndarray, bool]:
    """
    Support vector of a hyperplane or half-space with normal `a` and offset `b`.

    Args:
        d: The direction.
        a: The normal vector.
        b: The offset.
        error_unbounded: If True, an unbounded direction raises. If False,
            the function reports it through the returned flag.
        halfspace: If True, the set is the half-space `a . x <= b`,
            otherwise the hyperplane `a . x = b`.

    Returns:
        A pair `(point, unbounded)`. If `unbounded` is True, `point` is an
        empty array.

    Raises:
        UnboundedDirectionError: If the set is unbounded in direction `d`
            and `error_unbounded` is True.
    """
    if all(isapproxzero(di) for di in d):
        return an_element_helper(a, b), False
    if samedir(d, a)[0] or (not halfspace and samedir(d, -a)[0]):
        return an_element_helper(a, b), False
    if error_unbounded:
        kind = "half-space" if halfspace else "hyperplane"
        raise UnboundedDirectionError(
            f"The support vector of a {kind} is undefined in a direction not parallel to its normal."
        )
    return np.zeros(0), True


class _LinearGeometry:
    """
    Mixin holding the normal vector and offset of a linear constraint.
    """

    def _init_linear(self, a, b) -> None:
        a = as_vector(a, copy=True)
        if all(isapproxzero(ai) for ai in a):
            raise ValueError(
                f"The normal vector of a {self.__class__.__name__} must not be zero."
            )
        if isinstance(b, np.ndarray):
            b = b.item()
        self._a = a
        self._b = b

    @property
    def a(self) -> np.ndarray:
        """The normal vector."""
        return self._a

    @property
    def b(self):
        """The offset."""
        return self._b

    @property
    def dim(self) -> int:
        return self._a.shape[0]

    def an_element(self) -> np.ndarray:
        return an_element_helper(self._a, self._b)


class Hyperplane(_LinearGeometry, AbstractPolyhedron):
    """
    A hyperplane `{x : a . x = b}`.

    Args:
        a: The non-zero normal vector.
        b: The offset.
    """

    def __init__(self, a, b) -> None:
        self._init_linear(a, b)

    def constraints_list(self) -> List[HalfSpace]:
        return [HalfSpace(self._a, self._b), HalfSpace(-self._a, -self._b)]

    def support_vector_helper(self, d, error_unbounded: bool = True, halfspace: bool = False):
        """See `support_vector_helper`."""
        d = check_direction(d, self.dim)
        return support_vector_helper(
            d, self._a, self._b, error_unbounded=error_unbounded, halfspace=halfspace
        )

    def support_vector(self, d) -> np.ndarray:
        return self.support_vector_helper(d)[0]

    def support_function(self, d):
        d = check_direction(d, self.dim)
        v, unbounded = self.support_vector_helper(d, error_unbounded=False)
        if unbounded:
            return np.inf
        return np.dot(d, v)

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        return _isapprox(np.dot(self._a, x), self._b)

    def is_bounded(self) -> bool:
        return self.dim == 1

    def project(self, x) -> np.ndarray:
        """Orthogonal projection of `x` onto the hyperplane."""
        x = check_direction(x, self.dim)
        a = self._a
        return x - (np.dot(a, x) - self._b) / np.dot(a, a) * a

    def distance(self, x) -> float:
        """Euclidean distance of `x` to the hyperplane."""
        x = check_direction(x, self.dim)
        return abs(np.dot(self._a, x) - self._b) / np.linalg.norm(self._a.astype(float))

    def reflect(self, x) -> np.ndarray:
        """Mirror image of `x` with respect to the hyperplane."""
        x = check_direction(x, self.dim)
        a = self._a
        return x - 2 * (np.dot(a, x) - self._b) / np.dot(a, a) * a

    def is_equivalent(self, other: Hyperplane) -> bool:
        """True if both hyperplanes describe the same set."""
        same, k = samedir(self._a, other.a)
        if same:
            return _isapprox(self._b, k * other.b)
        opposite, k = samedir(self._a, -other.a)
        if opposite:
            return _isapprox(self._b, -k * other.b)
        return False

    def translate(self, v) -> Hyperplane:
        v = check_direction(v, self.dim)
        return Hyperplane(self._a, self._b + np.dot(self._a, v))

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> Hyperplane:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim), rng.standard_normal())

    def __repr__(self) -> str:
        return f"Hyperplane({self._a.tolist()}, {self._b})"


class HalfSpace(_LinearGeometry, AbstractPolyhedron):
    """
    A half-space `{x : a . x <= b}`.

    Args:
        a: The non-zero normal vector.
        b: The offset.
    """

    def __init__(self, a, b) -> None:
        self._init_linear(a, b)

    @classmethod
    def from_geq(cls, a, b) -> HalfSpace:
        """Creates the half-space `{x : a . x >= b}`."""
        return cls(-as_vector(a), -b)

    def constraints_list(self) -> List[HalfSpace]:
        return [self]

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        return support_vector_helper(d, self._a, self._b, halfspace=True)[0]

    def support_function(self, d):
        """
        Returns `k b` if `d = k a` for some `k >= 0`, and `+inf` otherwise.
        """
        d = check_direction(d, self.dim)
        v, unbounded = support_vector_helper(
            d, self._a, self._b, error_unbounded=False, halfspace=True
        )
        if unbounded:
            return np.inf
        return np.dot(d, v)

    def is_element(self, x) -> bool:
        x = check_direction(x, self.dim)
        return _leq(np.dot(self._a, x), self._b)

    def is_bounded(self) -> bool:
        return False

    @property
    def boundary(self) -> Hyperplane:
        """The hyperplane `a . x = b`."""
        return Hyperplane(self._a, self._b)

    def complement(self) -> HalfSpace:
        """The closure of the complement, `{x : a . x >= b}`."""
        return HalfSpace(-self._a, -self._b)

    def translate(self, v) -> HalfSpace:
        v = check_direction(v, self.dim)
        return HalfSpace(self._a, self._b + np.dot(self._a, v))

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> HalfSpace:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim), rng.standard_normal())

    def __repr__(self) -> str:
        return f"HalfSpace({self._a.tolist()}, {self._b})"
