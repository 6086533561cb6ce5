"""Geometric proxy inputs and their resolution into absolute radii."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from uncertainties import nominal_value

from cable_params.errors import InvalidArgumentError
from cable_params.numeric.resolve import is_real, is_uncertain, resolve_type


def _check_value(kind: str, value: Any) -> None:
    if not is_real(value):
        raise InvalidArgumentError(kind, f"value must be a real number, got {type(value).__name__}")


@dataclass(frozen=True)
class Thickness:
    """Radial thickness added on top of the inner radius."""

    value: Any

    def __post_init__(self):
        _check_value("Thickness", self.value)
        if not nominal_value(self.value) >= 0:
            raise InvalidArgumentError("Thickness", f"value must be >= 0, got {self.value}")

    @property
    def numeric_type(self) -> type:
        return resolve_type(self.value)


@dataclass(frozen=True)
class Diameter:
    """Diameter, halved into a radius during parsing."""

    value: Any

    def __post_init__(self):
        _check_value("Diameter", self.value)
        if not nominal_value(self.value) > 0:
            raise InvalidArgumentError("Diameter", f"value must be > 0, got {self.value}")

    @property
    def numeric_type(self) -> type:
        return resolve_type(self.value)


def strip_uncertainty(value: Any) -> Any:
    """Drop the deviation of an uncertain number, keep plain numbers as they are."""
    if is_uncertain(value):
        return float(nominal_value(value))
    return value


def inherited_radius(source: Any, entity: type) -> Any:
    """Outer radius of a previously built part or group.

    The deviation is kept only when ``source`` is of the same class as the
    entity being built, so that one layer's measurement uncertainty does not
    leak into a different kind of layer.
    """
    radius = source.radius_ext
    return radius if type(source) is entity else strip_uncertainty(radius)


def parse_radius(value: Any, entity: type) -> Any:
    """First normalization pass: diameters halved, parts read, thickness kept."""
    if isinstance(value, Diameter):
        return value.value / 2
    if isinstance(value, Thickness) or is_real(value):
        return value
    if hasattr(value, "radius_ext"):
        return inherited_radius(value, entity)
    raise InvalidArgumentError(
        entity.__name__, f"unsupported radius parameter {type(value).__name__}: {value!r}"
    )


def normalize_radii(entity: type, radius_in: Any, radius_ext: Any) -> tuple[Any, Any]:
    """Resolve an (inner, outer) pair of raw radius inputs into two numbers."""
    rin = parse_radius(radius_in, entity)
    rex = parse_radius(radius_ext, entity)
    if isinstance(rin, Thickness):
        raise InvalidArgumentError(
            entity.__name__, "radius_in cannot be given as a thickness", field="radius_in"
        )
    if isinstance(rex, Thickness):
        rex = rin + rex.value
    return rin, rex


def parse_annular(entity: type, record: dict[str, Any]) -> dict[str, Any]:
    """Parse hook for entities bounded by ``radius_in`` and ``radius_ext``."""
    rin, rex = normalize_radii(entity, record["radius_in"], record["radius_ext"])
    return {**record, "radius_in": rin, "radius_ext": rex}
