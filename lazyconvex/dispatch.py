"""
Rule tables for binary operations on pairs of set types.

A `PairDispatcher` holds a list of rules `(left, right, priority, func)` and
selects, for a pair of operands, the rule to apply:

1. A rule matches if the operands are instances of `(left, right)`, or of
   `(right, left)` for a commutative operation. A rule matched in swapped
   orientation is called with the operands exchanged, so that a function
   registered for `(A, B)` always receives an `A` first.
2. Among the matching rules the highest priority wins. Ties go to the most
   specific rule (the smallest summed distance between the operand types
   and the rule types in the method resolution order), then to the
   earliest registration, then to the unswapped orientation.

Example:
    >>> table = PairDispatcher("isdisjoint")
    >>> @table.register(Hyperrectangle, Hyperrectangle, priority=65)
    ... def _(X, Y, witness=False):
    ...     ...
    >>> table(X, Y, witness=True)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

TypeSpec = Union[type, Tuple[type, ...]]


@dataclass(frozen=True)
class Rule:
    """A registered rule of a `PairDispatcher`."""

    left: TypeSpec
    right: TypeSpec
    priority: int
    func: Callable
    order: int

    def describe(self) -> Tuple[str, str, int, str]:
        return (_type_name(self.left), _type_name(self.right), self.priority, self.func.__name__)


def _type_name(spec: TypeSpec) -> str:
    if isinstance(spec, tuple):
        return " | ".join(t.__name__ for t in spec)
    return spec.__name__


def _distance(obj, spec: TypeSpec) -> Optional[int]:
    """Position of the closest class of `spec` in the MRO of `obj`, or None."""
    classes = spec if isinstance(spec, tuple) else (spec,)
    mro = type(obj).__mro__
    distances = [mro.index(cls) for cls in classes if cls in mro]
    return min(distances) if distances else None


class PairDispatcher:
    """
    Priority-ordered rule table for a binary operation.

    Args:
        name: The name of the operation, used in messages.
        commutative: If True (default), rules also match with the operands
            exchanged.
    """

    def __init__(self, name: str, commutative: bool = True) -> None:
        self.name = name
        self.commutative = commutative
        self._rules: List[Rule] = []

    def register(self, left: TypeSpec, right: TypeSpec, priority: int = 0) -> Callable:
        """Decorator registering `func(X, Y, ...)` for the pair `(left, right)`."""

        def decorator(func: Callable) -> Callable:
            self._rules.append(Rule(left, right, priority, func, len(self._rules)))
            return func

        return decorator

    def resolve(self, X, Y) -> Optional[Tuple[Rule, bool]]:
        """
        Returns the winning rule for `(X, Y)` and whether it applies swapped,
        or None if no rule matches.
        """
        best_key, best = None, None
        for rule in self._rules:
            orientations = [(X, Y, False)]
            if self.commutative:
                orientations.append((Y, X, True))
            for A, B, swapped in orientations:
                dA = _distance(A, rule.left)
                dB = _distance(B, rule.right)
                if dA is None or dB is None:
                    continue
                key = (-rule.priority, dA + dB, rule.order, swapped)
                if best_key is None or key < best_key:
                    best_key, best = key, (rule, swapped)
        return best

    def __call__(self, X, Y, *args, **kwargs):
        """
        Applies the winning rule.

        Raises:
            NotImplementedError: If no rule matches the pair.
        """
        resolved = self.resolve(X, Y)
        if resolved is None:
            raise NotImplementedError(
                f"{self.name} is not implemented for {type(X).__name__} and {type(Y).__name__}."
            )
        rule, swapped = resolved
        logger.debug(
            "%s(%s, %s) -> %s%s",
            self.name,
            type(X).__name__,
            type(Y).__name__,
            rule.func.__name__,
            " (swapped)" if swapped else "",
        )
        if swapped:
            return rule.func(Y, X, *args, **kwargs)
        return rule.func(X, Y, *args, **kwargs)

    def rules(self) -> List[Tuple[str, str, int, str]]:
        """Lists the rules as `(left, right, priority, function)`, highest priority first."""
        ordered = sorted(self._rules, key=lambda r: (-r.priority, r.order))
        return [rule.describe() for rule in ordered]

    def __repr__(self) -> str:
        return f"PairDispatcher({self.name!r}, {len(self._rules)} rules)"
