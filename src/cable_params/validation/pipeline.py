"""Sanitize, parse and rule-check raw constructor input.

The pipeline is the only path from loosely typed user input to the normalized
record consumed by numeric core constructors:

    sanitize  -> arity, presence, unknown names, raw radius admissibility
    parse     -> proxy resolution (thickness, diameter, inherited radius)
    rules     -> ordered rule bundle from the trait registry

Every stage raises on the first violation; nothing is ever half-built.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from cable_params.errors import InvalidArgumentError
from cable_params.validation.traits import REGISTRY, TraitSpec

logger = logging.getLogger(__name__)


def sanitize(entity: type, args: tuple, kwargs: Mapping[str, Any]) -> dict[str, Any]:
    """Map raw positional and keyword input onto the entity's declared fields.

    Parameters
    ----------
    entity : type
        Registered entity class.
    args : tuple
        Positional arguments, matched in order against the required fields.
    kwargs : Mapping[str, Any]
        Keyword arguments; may name required or optional fields.

    Returns
    -------
    dict[str, Any]
        Record in declared field order, defaults filled in, proxies untouched.
    """
    spec = REGISTRY.get(entity)
    name = entity.__name__

    if len(args) > len(spec.required):
        raise InvalidArgumentError(
            name,
            f"expected at most {len(spec.required)} positional arguments "
            f"({', '.join(spec.required)}), got {len(args)}",
        )

    record: dict[str, Any] = dict(zip(spec.required, args))

    for key, value in kwargs.items():
        if key not in spec.field_order:
            raise InvalidArgumentError(name, f"unexpected argument '{key}'", field=key)
        if key in record:
            raise InvalidArgumentError(
                name, f"argument '{key}' given both positionally and by keyword", field=key
            )
        record[key] = value

    for field in spec.required:
        if field not in record:
            raise InvalidArgumentError(name, f"missing required argument '{field}'", field=field)

    for field, default in spec.optional:
        record.setdefault(field, default)

    _check_radius_inputs(name, spec, record)

    return {field: record[field] for field in spec.field_order}


def _check_radius_inputs(name: str, spec: TraitSpec, record: Mapping[str, Any]) -> None:
    for field in spec.checked_radius_fields:
        value = record[field]
        if not spec.admits_radius(field, value):
            raise InvalidArgumentError(
                name,
                f"{field} does not accept {type(value).__name__} input",
                field=field,
            )


def parse(entity: type, record: dict[str, Any]) -> dict[str, Any]:
    """Resolve proxy inputs into plain or uncertain numbers."""
    spec = REGISTRY.get(entity)
    if spec.parse is None:
        return record
    return spec.parse(entity, record)


def check_rules(entity: type, record: Mapping[str, Any]) -> None:
    """Evaluate the entity's rule bundle in order, stopping at the first failure."""
    rules = REGISTRY.rules_for(entity)
    for rule in rules:
        rule.apply(record, entity.__name__)
    logger.debug("%s: %d rules passed", entity.__name__, len(rules))


def validate(entity: type, /, *args: Any, **kwargs: Any) -> dict[str, Any]:
    """Run sanitize, parse and rule evaluation; return the normalized record."""
    record = sanitize(entity, args, kwargs)
    record = parse(entity, record)
    check_rules(entity, record)
    return record
