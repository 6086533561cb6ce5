"""Decide the single numeric representation shared by a set of values.

Two representations exist: plain ``float`` and ``UFloat`` (a value carrying a
propagated standard deviation). A single uncertain leaf anywhere in the inputs,
including inside materials, parts or whole aggregates, selects ``UFloat``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from uncertainties import UFloat

Scalar = Union[float, UFloat]

NUMERIC_TYPES: tuple[type, ...] = (float, UFloat)


def is_uncertain(value: Any) -> bool:
    """Return True if ``value`` is an uncertain number."""
    return isinstance(value, UFloat)


def is_real(value: Any) -> bool:
    """Return True for plain or uncertain real scalars (``bool`` excluded)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float, UFloat))


def _has_uncertain(value: Any) -> bool:
    if isinstance(value, UFloat):
        return True
    if value is None or isinstance(value, (bool, int, float, str, type)):
        return False
    # Models and proxies report their own representation.
    numeric_type = getattr(value, "numeric_type", None)
    if numeric_type is not None:
        return numeric_type is UFloat
    if isinstance(value, Mapping):
        return any(_has_uncertain(v) for v in value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(_has_uncertain(v) for v in value)
    return False


def resolve_type(*values: Any) -> type:
    """Return the numeric type every one of ``values`` must be coerced to.

    Parameters
    ----------
    *values : Any
        Scalars, containers, proxies or cable models, inspected transitively.

    Returns
    -------
    type
        ``UFloat`` if any numeric leaf is uncertain, otherwise ``float``.
    """
    if any(_has_uncertain(v) for v in values):
        return UFloat
    return float


def type_of(value: Any) -> type:
    """Current numeric representation of a single value or object graph."""
    return resolve_type(value)
