"""Validation rules applied to normalized constructor records.

Each rule is a small immutable value object naming one or two fields. Rules are
declared once per entity type in the trait registry and evaluated in order
against the record produced by the parse stage.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from uncertainties import nominal_value, std_dev

from cable_params.errors import InvalidArgumentError, NumericDomainError
from cable_params.numeric.resolve import is_real, is_uncertain


def _lookup(record: Mapping[str, Any], name: str, entity: str) -> Any:
    if name not in record:
        raise InvalidArgumentError(entity, f"missing field '{name}'", field=name)
    return record[name]


def _ensure_real(name: str, value: Any, entity: str) -> None:
    if not is_real(value):
        raise InvalidArgumentError(
            entity,
            f"{name} must be a real number, got {type(value).__name__}: {value!r}",
            field=name,
        )


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        raise NotImplementedError


class _FieldRule(_Rule):
    field: str

    def __init__(self, field: str, **data: Any):
        super().__init__(field=field, **data)


class _PairRule(_Rule):
    a: str
    b: str

    def __init__(self, a: str, b: str, **data: Any):
        super().__init__(a=a, b=b, **data)

    def _operands(self, record: Mapping[str, Any], entity: str) -> tuple[Any, Any]:
        x = _lookup(record, self.a, entity)
        y = _lookup(record, self.b, entity)
        _ensure_real(self.a, x, entity)
        _ensure_real(self.b, y, entity)
        return x, y


class Normalized(_FieldRule):
    """Field must already be a number; guards that parsing removed every proxy."""

    kind: Literal["normalized"] = "normalized"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        if not is_real(value):
            raise InvalidArgumentError(
                entity,
                f"{self.field} must be a normalized number; got {type(value).__name__}",
                field=self.field,
            )


class Finite(_FieldRule):
    """Field must be finite (for uncertain numbers, value and deviation)."""

    kind: Literal["finite"] = "finite"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        _ensure_real(self.field, value, entity)
        finite = math.isfinite(nominal_value(value))
        if finite and is_uncertain(value):
            finite = math.isfinite(std_dev(value))
        if not finite:
            raise NumericDomainError(
                entity, f"{self.field} must be finite, got {value}", field=self.field
            )


class Nonneg(_FieldRule):
    kind: Literal["nonneg"] = "nonneg"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        _ensure_real(self.field, value, entity)
        if not nominal_value(value) >= 0:
            raise NumericDomainError(
                entity, f"{self.field} must be >= 0, got {value}", field=self.field
            )


class Positive(_FieldRule):
    kind: Literal["positive"] = "positive"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        _ensure_real(self.field, value, entity)
        if not nominal_value(value) > 0:
            raise NumericDomainError(
                entity, f"{self.field} must be > 0, got {value}", field=self.field
            )


class IntegerField(_FieldRule):
    kind: Literal["integer"] = "integer"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        if isinstance(value, bool) or not isinstance(value, int):
            raise NumericDomainError(
                entity,
                f"{self.field} must be an integer, got {type(value).__name__}",
                field=self.field,
            )


class Less(_PairRule):
    """Strict ordering ``a < b``."""

    kind: Literal["less"] = "less"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        x, y = self._operands(record, entity)
        if not nominal_value(x) < nominal_value(y):
            raise InvalidArgumentError(
                entity, f"{self.a} < {self.b} violated (got {x} >= {y})", field=self.a
            )


class LessEq(_PairRule):
    """Non-strict ordering ``a <= b``."""

    kind: Literal["less_eq"] = "less_eq"

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        x, y = self._operands(record, entity)
        if not nominal_value(x) <= nominal_value(y):
            raise InvalidArgumentError(
                entity, f"{self.a} <= {self.b} violated (got {x} > {y})", field=self.a
            )


class IsA(_Rule):
    """Field must be an instance of ``capability`` (e.g. a material-properties object)."""

    kind: Literal["is_a"] = "is_a"
    capability: type
    field: str

    def __init__(self, capability: type, field: str, **data: Any):
        super().__init__(capability=capability, field=field, **data)

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        if not isinstance(value, self.capability):
            raise InvalidArgumentError(
                entity,
                f"{self.field} must be {self.capability.__name__}, got {type(value).__name__}",
                field=self.field,
            )


class OneOf(_Rule):
    """Field must be one of a fixed set of choices."""

    kind: Literal["one_of"] = "one_of"
    field: str
    choices: tuple[Any, ...]

    def __init__(self, field: str, choices: tuple[Any, ...], **data: Any):
        super().__init__(field=field, choices=tuple(choices), **data)

    def apply(self, record: Mapping[str, Any], entity: str) -> None:
        value = _lookup(record, self.field, entity)
        if isinstance(value, bool) or value not in self.choices:
            raise InvalidArgumentError(
                entity,
                f"{self.field} must be one of {list(self.choices)}; got {value!r}",
                field=self.field,
            )


Rule = Annotated[
    Union[Normalized, Finite, Nonneg, Positive, IntegerField, Less, LessEq, IsA, OneOf],
    Field(discriminator="kind"),
]


def apply(rule: Rule, record: Mapping[str, Any], entity: str) -> None:
    """Evaluate one rule against a normalized record, raising on violation."""
    rule.apply(record, entity)
