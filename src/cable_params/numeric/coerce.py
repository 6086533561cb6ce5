"""Convert scalars, containers and cable models to a target numeric type.

``coerce`` is a single-dispatch function. Scalars and builtin containers are
handled here; cable models register their own implementation in
``cable_params.datamodel.base`` so that this module stays free of model imports.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any

from uncertainties import UFloat, ufloat

from cable_params.errors import InvalidArgumentError
from cable_params.numeric.resolve import NUMERIC_TYPES


def check_target(target: type) -> None:
    """Reject anything that is not one of the two numeric representations."""
    if target not in NUMERIC_TYPES:
        raise InvalidArgumentError(
            "coerce",
            f"target type must be float or UFloat, got {target!r}",
        )


@singledispatch
def coerce(value: Any, target: type) -> Any:
    """Return ``value`` converted to the numeric type ``target``.

    Values already of type ``target`` are returned unchanged (same object).
    An ``int`` is raw input rather than a normalized number and is always
    converted, so ``coerce(2, type_of(2))`` gives ``2.0``.
    Promotions done here are silent; only ``add`` emits a ``PromotionWarning``.
    Non-numeric leaves (strings, ``None``, booleans, types, callables) pass
    through untouched.

    Parameters
    ----------
    value : Any
        Scalar, container or cable model.
    target : type
        ``float`` or ``UFloat``.

    Returns
    -------
    Any
        The coerced value.
    """
    check_target(target)
    return value


@coerce.register
def _coerce_bool(value: bool, target: type) -> bool:
    check_target(target)
    return value


@coerce.register
def _coerce_int(value: int, target: type) -> Any:
    check_target(target)
    if target is float:
        return float(value)
    return ufloat(float(value), 0.0)


@coerce.register
def _coerce_float(value: float, target: type) -> Any:
    check_target(target)
    if target is float:
        return value
    return ufloat(value, 0.0)


@coerce.register(UFloat)
def _coerce_ufloat(value: UFloat, target: type) -> Any:
    check_target(target)
    if target is UFloat:
        # keep the original object so correlations are preserved
        return value
    return float(value.nominal_value)


@coerce.register
def _coerce_list(value: list, target: type) -> list:
    return [coerce(v, target) for v in value]


@coerce.register
def _coerce_tuple(value: tuple, target: type) -> tuple:
    return tuple(coerce(v, target) for v in value)


@coerce.register
def _coerce_dict(value: dict, target: type) -> dict:
    return {k: coerce(v, target) for k, v in value.items()}
