"""
Common behaviour of lazy set operations.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import List, Optional

import numpy as np

from ..convex_set import ConvexSet
from ..exceptions import DimensionMismatchError
from ..utils import check_same_dim


class LazyOperation(ConvexSet):
    """
    Base class for a set defined by an operation on other sets.

    The operands are held by reference and are not copied. Evaluation
    queries recurse into them; the explicit representations (`constraints_list`,
    `vertices_list`) are obtained through `concretize`.
    """

    @property
    @abstractmethod
    def operands(self) -> List[ConvexSet]:
        """The sets the operation is applied to."""

    def is_operation(self) -> bool:
        return True

    def is_polyhedral(self) -> bool:
        return all(X.is_polyhedral() for X in self.operands)

    def has_exact_support_function(self) -> bool:
        return all(X.has_exact_support_function() for X in self.operands)

    def concretize(self) -> ConvexSet:
        raise NotImplementedError(
            f"{self.__class__.__name__} has no explicit representation."
        )

    def constraints_list(self) -> List:
        return self.concretize().constraints_list()

    def vertices_list(self) -> List[np.ndarray]:
        return self.concretize().vertices_list()

    def __repr__(self) -> str:
        args = ", ".join(repr(X) for X in self.operands)
        return f"{self.__class__.__name__}({args})"


def array_dim(sets, dim: Optional[int] = None) -> int:
    """
    Returns the common dimension of a list of operands.

    Args:
        sets: The operands.
        dim: The expected dimension. Required if `sets` is empty.

    Raises:
        DimensionMismatchError: If the operands disagree with each other or
            with `dim`.
    """
    if not sets:
        if dim is None:
            raise ValueError("The dimension of an empty set array must be given.")
        return int(dim)
    n = check_same_dim(*sets)
    if dim is not None and dim != n:
        raise DimensionMismatchError(f"Sets of dimension {n} in an array of dimension {dim}.")
    return n
