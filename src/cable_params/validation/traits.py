"""Per-entity declarative configuration and rule generation.

Every entity type (part, material, aggregate) registers exactly one
:class:`TraitSpec` at import time. The spec is the single source of truth for
the validation pipeline (which fields, which defaults, which proxies, which
rules) and for introspection tooling such as the rule dictionary script.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cable_params.errors import InvalidArgumentError
from cable_params.numeric.resolve import is_real
from cable_params.validation.rules import Finite, Less, Nonneg, Normalized, Rule

logger = logging.getLogger(__name__)

RADII_FIELDS = ("radius_in", "radius_ext")

# Fixed order of the annular radii bundle.
RADII_BUNDLE: tuple[Rule, ...] = (
    Normalized("radius_in"),
    Normalized("radius_ext"),
    Finite("radius_in"),
    Nonneg("radius_in"),
    Finite("radius_ext"),
    Nonneg("radius_ext"),
    Less("radius_in", "radius_ext"),
)

TEMPERATURE_BUNDLE: tuple[Rule, ...] = (Finite("temperature"),)

ParseFn = Callable[[type, dict[str, Any]], dict[str, Any]]


class TraitSpec(BaseModel):
    """Declarative construction traits of one entity type."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    required: tuple[str, ...] = Field(description="Positional fields, in order")
    optional: tuple[tuple[str, Any], ...] = Field(
        default=(), description="Keyword fields and their defaults, in order"
    )
    radii: bool = Field(default=False, description="Apply the annular radii bundle")
    temperature: bool = Field(default=False, description="Apply the temperature bundle")
    coercive: tuple[str, ...] | None = Field(
        default=None,
        description="Fields converted to the resolved numeric type (default: all fields)",
    )
    radius_fields: tuple[str, ...] | None = Field(
        default=None,
        description="Raw radius inputs checked for admissibility during sanitize",
    )
    radius_proxies: dict[str, tuple[type, ...]] = Field(
        default_factory=dict,
        description="Proxy classes admitted per radius field, beyond plain numbers",
    )
    extra_rules: tuple[Rule, ...] = Field(default=(), description="Appended verbatim")
    parse: ParseFn | None = Field(default=None, description="Proxy normalization")
    description: str = ""

    @model_validator(mode="after")
    def _check_fields(self) -> TraitSpec:
        optional = self.optional_fields
        overlap = set(self.required) & set(optional)
        if overlap:
            raise ValueError(f"fields both required and optional: {sorted(overlap)}")
        if len(set(self.field_order)) != len(self.field_order):
            raise ValueError("duplicate field names")
        unknown = set(self.coercive_fields) - set(self.field_order)
        unknown |= set(self.checked_radius_fields) - set(self.field_order)
        unknown |= set(self.radius_proxies) - set(self.field_order)
        if unknown:
            raise ValueError(f"unknown fields referenced: {sorted(unknown)}")
        return self

    @property
    def optional_fields(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.optional)

    @property
    def defaults(self) -> dict[str, Any]:
        return dict(self.optional)

    @property
    def field_order(self) -> tuple[str, ...]:
        """Positional order expected by the entity's numeric core constructor."""
        return self.required + self.optional_fields

    @property
    def coercive_fields(self) -> tuple[str, ...]:
        return self.field_order if self.coercive is None else self.coercive

    @property
    def checked_radius_fields(self) -> tuple[str, ...]:
        if self.radius_fields is not None:
            return self.radius_fields
        return RADII_FIELDS if self.radii else ()

    def admits_radius(self, field: str, value: Any) -> bool:
        """Raw-input admissibility: plain numbers always, proxies only if registered."""
        if is_real(value):
            return True
        return isinstance(value, self.radius_proxies.get(field, ()))


class TraitRegistry:
    """Explicit mapping from entity type to its :class:`TraitSpec`."""

    def __init__(self) -> None:
        self._entries: dict[type, TraitSpec] = {}
        self._rules: dict[type, tuple[Rule, ...]] = {}

    def register(self, entity: type, spec: TraitSpec) -> None:
        existing = self._entries.get(entity)
        if existing is not None:
            if existing == spec:
                return
            raise InvalidArgumentError(
                entity.__name__, "entity type is already registered with different traits"
            )
        self._entries[entity] = spec
        logger.debug("Registered traits for %s", entity.__name__)

    def get(self, entity: type) -> TraitSpec:
        try:
            return self._entries[entity]
        except KeyError:
            name = getattr(entity, "__name__", repr(entity))
            raise InvalidArgumentError(name, "is not a registered entity type") from None

    def __contains__(self, entity: object) -> bool:
        return entity in self._entries

    def __iter__(self) -> Iterator[type]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def rules_for(self, entity: type) -> tuple[Rule, ...]:
        """Ordered rule bundle for ``entity``: radii, temperature, then extras.

        The result is cached and free of duplicates; the first occurrence of a
        rule fixes its position.
        """
        cached = self._rules.get(entity)
        if cached is not None:
            return cached

        spec = self.get(entity)
        bundle: list[Rule] = []
        if spec.radii:
            bundle.extend(RADII_BUNDLE)
        if spec.temperature:
            bundle.extend(TEMPERATURE_BUNDLE)
        bundle.extend(spec.extra_rules)

        rules = tuple(dict.fromkeys(bundle))
        self._rules[entity] = rules
        return rules

    def describe(self) -> list[dict[str, str]]:
        """One row per (entity, field), for data-dictionary style documentation."""
        rows = []
        for entity, spec in self._entries.items():
            rules = self.rules_for(entity)
            defaults = spec.defaults
            for name in spec.field_order:
                applied = [
                    type(rule).__name__
                    for rule in rules
                    if name in (getattr(rule, "field", None), getattr(rule, "a", None), getattr(rule, "b", None))
                ]
                proxies = spec.radius_proxies.get(name, ())
                rows.append(
                    {
                        "entity": entity.__name__,
                        "field": name,
                        "kind": "required" if name in spec.required else "optional",
                        "default": repr(defaults[name]) if name in defaults else "",
                        "coercive": "yes" if name in spec.coercive_fields else "no",
                        "proxies": ", ".join(p.__name__ for p in proxies),
                        "rules": ", ".join(applied),
                    }
                )
        return rows


REGISTRY = TraitRegistry()


def register(entity: type, spec: TraitSpec) -> None:
    """Register ``entity`` in the package-wide registry."""
    REGISTRY.register(entity, spec)


def traits(entity: type) -> TraitSpec:
    return REGISTRY.get(entity)


def rules_for(entity: type) -> tuple[Rule, ...]:
    return REGISTRY.rules_for(entity)
