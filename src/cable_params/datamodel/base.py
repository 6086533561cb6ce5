"""Shared machinery for every cable model: construction, promotion and ``add``.

Construction of a registered entity always goes through :func:`construct`::

    validate -> resolve_type -> coerce -> Entity.build(...)

``Entity.build`` is the numeric core constructor: it only accepts normalized,
homogeneously typed inputs and computes the derived fields.
"""

from __future__ import annotations

import copy
import logging
import warnings
from functools import singledispatch
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from uncertainties import UFloat

from cable_params.errors import InvalidArgumentError, PromotionWarning
from cable_params.numeric.coerce import check_target, coerce
from cable_params.numeric.resolve import is_uncertain, resolve_type
from cable_params.validation.pipeline import validate
from cable_params.validation.traits import traits

logger = logging.getLogger(__name__)


class CableModel(BaseModel):
    """Base class of parts, materials and aggregates.

    Subclasses list in ``_exact_fields`` the fields that are never converted
    between numeric types (identifiers, integer counts, phase maps).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _exact_fields: ClassVar[tuple[str, ...]] = ()

    @property
    def numeric_type(self) -> type:
        """``UFloat`` if any numeric leaf of this object graph is uncertain."""
        return resolve_type(*(getattr(self, name) for name in type(self).model_fields))

    @classmethod
    def create(cls, *args: Any, **kwargs: Any):
        """Validated convenience constructor."""
        return construct(cls, *args, **kwargs)

    def rebuild(self, target: type):
        """Return a disjoint copy with every numeric field converted to ``target``."""
        update = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if name in self._exact_fields:
                update[name] = copy.deepcopy(value)
            else:
                update[name] = coerce(value, target)
        return self.model_copy(update=update)


class CoreModel(CableModel):
    """A registered entity whose derived fields are recomputed by ``build``."""

    def rebuild(self, target: type):
        spec = traits(type(self))
        values = []
        for name in spec.field_order:
            value = getattr(self, name)
            values.append(coerce(value, target) if name in spec.coercive_fields else value)
        return type(self).build(*values)


class AnnularModel(CableModel):
    """Anything a new layer can be stacked on: exposes ``radius_in`` and ``radius_ext``."""


@coerce.register(CableModel)
def _coerce_model(value: CableModel, target: type) -> CableModel:
    check_target(target)
    if value.numeric_type is target:
        return value
    logger.debug("Converting %s to %s", type(value).__name__, target.__name__)
    return value.rebuild(target)


def core_type(entity: str, **values: Any) -> type:
    """Check the inputs of a numeric core constructor and return their common type.

    Every value must be a ``float``, a ``UFloat`` or a cable model; mixing the
    two representations is rejected.
    """
    found = set()
    for name, value in values.items():
        if isinstance(value, CableModel):
            found.add(value.numeric_type)
        elif is_uncertain(value):
            found.add(UFloat)
        elif isinstance(value, float):
            found.add(float)
        else:
            raise InvalidArgumentError(
                entity,
                f"{name} must be a normalized float or UFloat, got {type(value).__name__}",
                field=name,
            )
    if len(found) > 1:
        raise InvalidArgumentError(entity, "inputs mix plain and uncertain numbers")
    return found.pop() if found else float


def build_record(entity: type, record: dict[str, Any], target: type | None = None):
    """Coerce a normalized record and hand it to ``entity.build``.

    Parameters
    ----------
    entity : type
        Registered entity class.
    record : dict[str, Any]
        Output of :func:`cable_params.validation.pipeline.validate`.
    target : type | None
        Numeric type to build at; resolved from the coercive fields if omitted.
    """
    spec = traits(entity)
    coercive = spec.coercive_fields
    if target is None:
        target = resolve_type(*(record[name] for name in coercive))
    values = [
        coerce(record[name], target) if name in coercive else record[name]
        for name in spec.field_order
    ]
    return entity.build(*values)


def construct(entity: type, *args: Any, **kwargs: Any):
    """Validate raw input and build an instance of ``entity``."""
    record = validate(entity, *args, **kwargs)
    return build_record(entity, record)


@singledispatch
def add(aggregate: Any, *args: Any, **kwargs: Any):
    """Append to an aggregate; returns the aggregate itself or a promoted copy.

    Always rebind the result: ``group = add(group, WireArray, ...)``.
    """
    raise InvalidArgumentError(type(aggregate).__name__, "does not support add")


def promote_for_append(aggregate: CableModel, target: type, added: str) -> CableModel:
    """Promote ``aggregate`` ahead of an append that needs a wider numeric type."""
    name = type(aggregate).__name__
    current = aggregate.numeric_type.__name__
    warnings.warn(
        f"Adding a {target.__name__} {added} to a {current} {name} returns a promoted "
        f"{name}; capture the result of add()",
        PromotionWarning,
        stacklevel=4,
    )
    logger.debug("Promoting %s from %s to %s", name, current, target.__name__)
    return coerce(aggregate, target)
