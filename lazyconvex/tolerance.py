"""
Numeric tolerance configuration and approximate comparison primitives.

Every predicate in the package (emptiness, orientation, tie-breaking,
membership) compares numbers through the functions in this module. The
tolerance used depends on the numeric type of the operands:

- floating types use a relative tolerance `rtol`, a zero tolerance `ztol`
  and an absolute tolerance `atol`;
- exact types (integers, `fractions.Fraction`, numpy `object` arrays holding
  them) compare with plain equality.

The tolerance for a numeric type is process-wide configuration read through
`get_tolerance`. It can be changed globally with `set_tolerance`, or for the
current context only with the `tolerance_context` context manager.
"""

from __future__ import annotations

import contextvars
import dataclasses
import numbers
from contextlib import contextmanager
from dataclasses import dataclass
from fractions import Fraction
from typing import Dict, Iterator, Optional

import numpy as np


@dataclass(frozen=True)
class Tolerance:
    """
    Tolerance triple for approximate comparisons.

    Attributes:
        rtol: Relative tolerance used by `_isapprox`.
        ztol: Tolerance below which a value counts as zero.
        atol: Absolute tolerance used by `_isapprox`.

    Example:
        >>> tol = Tolerance.default_for(np.float64)
        >>> loose = tol.copy(rtol=1e-6)
    """

    rtol: float
    ztol: float
    atol: float = 0.0

    def copy(self, **overrides) -> "Tolerance":
        """Create a copy with optional field overrides."""
        fields = {f.name for f in dataclasses.fields(self)}
        for key in overrides:
            if key not in fields:
                raise ValueError(f"Unknown parameter: {key}")
        return dataclasses.replace(self, **overrides)

    @property
    def is_exact(self) -> bool:
        """True if all three tolerances are zero."""
        return self.rtol == 0 and self.ztol == 0 and self.atol == 0

    @classmethod
    def exact(cls) -> "Tolerance":
        """Tolerance for exact arithmetic: comparisons are equalities."""
        return cls(rtol=0, ztol=0, atol=0)

    @classmethod
    def default_for(cls, dtype) -> "Tolerance":
        """
        Default tolerance for a numeric type.

        Floating types get `rtol = ztol = sqrt(eps)` and `atol = 0`, all
        other types are exact.
        """
        dtype = np.dtype(dtype)
        if np.issubdtype(dtype, np.floating):
            sqrt_eps = float(np.sqrt(np.finfo(dtype).eps))
            return cls(rtol=sqrt_eps, ztol=sqrt_eps, atol=0.0)
        return cls.exact()


_EXACT_DTYPE = np.dtype(object)

# Process-wide settings, keyed by the canonical numpy dtype.
_TOLERANCES: Dict[np.dtype, Tolerance] = {}

# Per-context overrides layered on top of the process-wide settings.
_OVERRIDES: contextvars.ContextVar[Dict[np.dtype, Tolerance]] = contextvars.ContextVar(
    "lazyconvex_tolerance_overrides", default={}
)


def _canonical(dtype) -> np.dtype:
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.floating):
        return dtype
    return _EXACT_DTYPE


def numeric_type(*values) -> np.dtype:
    """
    Returns the numeric type governing a comparison between `values`.

    If any operand is floating point, the widest floating type wins.
    Otherwise (integers, Fractions, object arrays) the comparison is exact.
    """
    floating = []
    for value in values:
        if isinstance(value, (np.ndarray, np.generic)):
            dtype = value.dtype
        elif isinstance(value, float):
            dtype = np.dtype(np.float64)
        elif isinstance(value, (Fraction, numbers.Integral)):
            continue
        else:
            dtype = np.asarray(value).dtype
        if np.issubdtype(dtype, np.floating):
            floating.append(dtype)
    if floating:
        return np.result_type(*floating)
    return _EXACT_DTYPE


def get_tolerance(dtype=np.float64) -> Tolerance:
    """
    Returns the tolerance in effect for the numeric type `dtype`.

    Context overrides installed by `tolerance_context` take precedence over
    the process-wide value set by `set_tolerance`.
    """
    key = _canonical(dtype)
    overrides = _OVERRIDES.get()
    if key in overrides:
        return overrides[key]
    if key not in _TOLERANCES:
        _TOLERANCES[key] = Tolerance.default_for(key)
    return _TOLERANCES[key]


def set_tolerance(dtype=np.float64, tol: Optional[Tolerance] = None, **fields) -> Tolerance:
    """
    Sets the process-wide tolerance for the numeric type `dtype`.

    Args:
        dtype: Numeric type whose tolerance is changed.
        tol: A complete `Tolerance`. If omitted, the current tolerance is
            copied with the keyword `fields` overridden.
        **fields: Individual fields (`rtol`, `ztol`, `atol`) to override.

    Returns:
        The previous process-wide tolerance, so that it can be restored.
    """
    key = _canonical(dtype)
    previous = _TOLERANCES.get(key, Tolerance.default_for(key))
    base = tol if tol is not None else previous
    _TOLERANCES[key] = base.copy(**fields)
    return previous


def reset_tolerance(dtype=None) -> None:
    """Restores the default tolerance for `dtype`, or for all types if None."""
    if dtype is None:
        _TOLERANCES.clear()
    else:
        _TOLERANCES.pop(_canonical(dtype), None)


@contextmanager
def tolerance_context(dtype=np.float64, tol: Optional[Tolerance] = None, **fields) -> Iterator[Tolerance]:
    """
    Overrides the tolerance of `dtype` inside a `with` block.

    The override is local to the current thread or task and is undone on
    exit, even if the block raises.

    Example:
        >>> with tolerance_context(np.float64, ztol=1e-3):
        ...     isapproxzero(1e-4)
        True
    """
    key = _canonical(dtype)
    base = tol if tol is not None else get_tolerance(key)
    new_tol = base.copy(**fields)
    overrides = dict(_OVERRIDES.get())
    overrides[key] = new_tol
    token = _OVERRIDES.set(overrides)
    try:
        yield new_tol
    finally:
        _OVERRIDES.reset(token)


def _resolve(tol: Optional[Tolerance], *values) -> Tolerance:
    if tol is not None:
        return tol
    return get_tolerance(numeric_type(*values))


def isapproxzero(x, tol: Optional[Tolerance] = None) -> bool:
    """Returns True if `x` is zero up to the zero tolerance."""
    tol = _resolve(tol, x)
    if tol.ztol == 0:
        return bool(x == 0)
    return bool(abs(x) <= tol.ztol)


def _isapprox(x, y, tol: Optional[Tolerance] = None) -> bool:
    """
    Approximate equality of two scalars.

    Two values are approximately equal if both are approximately zero, or if
    `|x - y| <= max(atol, rtol * max(|x|, |y|))`. For exact types this is
    plain equality.
    """
    tol = _resolve(tol, x, y)
    if x == y:
        return True
    if tol.is_exact:
        return False
    if isapproxzero(x, tol) and isapproxzero(y, tol):
        return True
    return bool(abs(x - y) <= max(tol.atol, tol.rtol * max(abs(x), abs(y))))


def _leq(x, y, tol: Optional[Tolerance] = None) -> bool:
    """Returns True if `x <= y` or `x` is approximately equal to `y`."""
    return bool(x <= y) or _isapprox(x, y, tol)


def _geq(x, y, tol: Optional[Tolerance] = None) -> bool:
    """Returns True if `x >= y` or `x` is approximately equal to `y`."""
    return bool(x >= y) or _isapprox(x, y, tol)


def isapprox_vector(x, y, tol: Optional[Tolerance] = None) -> bool:
    """Componentwise `_isapprox` of two vectors of equal length."""
    if len(x) != len(y):
        return False
    tol = _resolve(tol, x, y)
    return all(_isapprox(xi, yi, tol) for xi, yi in zip(x, y))
