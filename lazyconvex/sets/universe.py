from __future__ import annotations

from typing import List

import numpy as np

from ..exceptions import UnboundedDirectionError
from ..tolerance import isapproxzero
from ..utils import check_direction
from .abstract import AbstractPolyhedron


class Universe(AbstractPolyhedron):
    """
    The whole space R^n, a polyhedron without constraints.

    It is the neutral element for intersections and the absorbing element
    for unions.
    """

    def __init__(self, dim: int) -> None:
        if dim < 0:
            raise ValueError("The dimension of a universe must be non-negative.")
        self._dim = int(dim)

    @property
    def dim(self) -> int:
        return self._dim

    def constraints_list(self) -> List:
        return []

    def support_vector(self, d) -> np.ndarray:
        d = check_direction(d, self.dim)
        if all(isapproxzero(di) for di in d):
            return np.zeros(self.dim)
        raise UnboundedDirectionError(
            "The support vector of a universe in a non-zero direction is undefined."
        )

    def support_function(self, d):
        d = check_direction(d, self.dim)
        if all(isapproxzero(di) for di in d):
            return 0.0
        return np.inf

    def is_element(self, x) -> bool:
        check_direction(x, self.dim)
        return True

    def is_bounded(self) -> bool:
        return self.dim == 0

    def an_element(self) -> np.ndarray:
        return np.zeros(self.dim)

    def translate(self, v) -> Universe:
        check_direction(v, self.dim)
        return self

    @classmethod
    def random(cls, dim: int = 2, rng=None) -> Universe:
        return cls(dim)

    def __repr__(self) -> str:
        return f"Universe({self._dim})"
