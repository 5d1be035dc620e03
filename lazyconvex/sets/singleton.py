from __future__ import annotations

import numpy as np

from ..utils import as_vector, check_direction
from .abstract import AbstractSingleton


class Singleton(AbstractSingleton):
    """
    A set containing exactly one point.

    Args:
        element: The point.
    """

    def __init__(self, element) -> None:
        self._element = as_vector(element, copy=True)

    @property
    def element(self) -> np.ndarray:
        return self._element

    def translate(self, v, inplace: bool = False) -> Singleton:
        """
        Returns the singleton translated by `v`.

        Args:
            v: The translation vector.
            inplace: If True, the element is updated in place and `self` is
                returned.
        """
        v = check_direction(v, self.dim)
        if inplace:
            self._element = self._element + v
            return self
        return Singleton(self._element + v)

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> Singleton:
        rng = np.random.default_rng(rng)
        return cls(rng.standard_normal(dim))

    def __repr__(self) -> str:
        return f"Singleton({self._element.tolist()})"


class ZeroSet(AbstractSingleton):
    """
    The singleton containing the origin of R^n.

    It only stores its dimension. It is the neutral element for Minkowski
    sums.
    """

    def __init__(self, dim: int) -> None:
        if dim < 0:
            raise ValueError("The dimension of a zero set must be non-negative.")
        self._dim = int(dim)

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def element(self) -> np.ndarray:
        return np.zeros(self._dim)

    def translate(self, v) -> Singleton:
        """Translating the origin by `v` gives the singleton `{v}`."""
        return Singleton(check_direction(v, self.dim))

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> ZeroSet:
        return cls(dim)

    def __repr__(self) -> str:
        return f"ZeroSet({self._dim})"
