"""
Exception types raised by the lazyconvex package.

Most of them subclass `ValueError` so that callers written against plain
precondition errors keep working.
"""


class LazyConvexError(Exception):
    """Base class for all errors raised by lazyconvex."""


class DimensionMismatchError(LazyConvexError, ValueError):
    """Operands or query vectors do not share the same ambient dimension."""


class EmptySetError(LazyConvexError, ValueError):
    """A query (support vector, support function, element) on an empty set."""


class UnboundedDirectionError(LazyConvexError, ValueError):
    """The set is unbounded in the requested direction."""


class BoundednessError(LazyConvexError, ValueError):
    """An algorithm requiring a bounded operand received an unbounded one."""


class UnknownAlgorithmError(LazyConvexError, ValueError):
    """An `algorithm=` selector that the operation does not know."""

    def __init__(self, algorithm, accepted=()) -> None:
        self.algorithm = algorithm
        self.accepted = tuple(accepted)
        msg = f"unknown algorithm {algorithm!r}"
        if self.accepted:
            msg += f"; accepted values are {', '.join(map(repr, self.accepted))}"
        super().__init__(msg)


class LPSolverError(LazyConvexError, RuntimeError):
    """The LP solver returned a status other than optimal/infeasible/unbounded."""


class BackendUnavailableError(LazyConvexError, RuntimeError):
    """A polyhedral computation was requested but no backend is configured."""
