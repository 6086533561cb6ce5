"""Conductor and insulator groups: concentric stacks of parts.

Groups are mutable. ``add`` appends a new layer in place when the numeric type
is unchanged and otherwise returns a promoted copy, so callers must always
rebind the result::

    group = add(group, WireArray, Diameter(0.002), 18, 11.0, copper)
"""

from __future__ import annotations

import logging
import math
from typing import Any, ClassVar

from pydantic import Field
from uncertainties import nominal_value

from cable_params import formulas
from cable_params.constants import F0
from cable_params.datamodel.base import AnnularModel, add, build_record, promote_for_append
from cable_params.datamodel.parts import ConductorPart, InsulatorPart, Strip, WireArray
from cable_params.errors import InvalidArgumentError
from cable_params.numeric.coerce import coerce
from cable_params.numeric.resolve import Scalar, resolve_type
from cable_params.validation.pipeline import validate
from cable_params.validation.rules import Finite, IsA, Positive
from cable_params.validation.traits import REGISTRY, TraitSpec, register

logger = logging.getLogger(__name__)


def _check_part_type(group_name: str, part_type: Any, base: type) -> None:
    if not (isinstance(part_type, type) and issubclass(part_type, base) and part_type in REGISTRY):
        name = getattr(part_type, "__name__", repr(part_type))
        raise InvalidArgumentError(group_name, f"cannot add parts of type {name}")


def _build_layer(group: AnnularModel, part_type: type, args: tuple, kwargs: dict, *extra: Any):
    """Validate and build the new layer at the type shared with ``group``."""
    radius_in = kwargs.pop("radius_in", group.radius_ext)
    record = validate(part_type, radius_in, *args, **kwargs)
    coercive = REGISTRY.get(part_type).coercive_fields
    target = resolve_type(group, *extra, *(record[name] for name in coercive))
    return build_record(part_type, record, target), target


def _helix(part: ConductorPart, target: type) -> tuple[int, Any]:
    """Wire count and turns per metre contributed by a helical part."""
    wires = part.num_wires if isinstance(part, WireArray) else 1
    turns = 1 / part.pitch_length if nominal_value(part.pitch_length) > 0 else coerce(0.0, target)
    return wires, turns


def _geometry(part: ConductorPart) -> tuple[list, Any, Any]:
    if isinstance(part, WireArray):
        return part.coords(), part.radius_wire, math.pi * part.radius_wire**2
    return [(0.0, 0.0)], part.radius_ext, part.cross_section


class ConductorGroup(AnnularModel):
    """Concentric conductive layers with their equivalent electrical parameters."""

    _exact_fields: ClassVar[tuple[str, ...]] = ("num_wires",)

    radius_in: Scalar = Field(description="Inner radius [m]")
    radius_ext: Scalar = Field(description="Outer radius [m]")
    cross_section: Scalar = Field(description="Total conductive cross-section [m²]")
    num_wires: int = Field(description="Total number of wires")
    num_turns: Scalar = Field(description="Mean number of turns per metre [1/m]")
    resistance: Scalar = Field(description="Equivalent DC resistance [Ω/m]")
    alpha: Scalar = Field(description="Equivalent temperature coefficient [1/°C]")
    gmr: Scalar = Field(description="Equivalent geometric mean radius [m]")
    layers: list[ConductorPart]

    @classmethod
    def from_part(cls, part: ConductorPart) -> ConductorGroup:
        """Start a group from its central conductor."""
        if not isinstance(part, ConductorPart):
            raise InvalidArgumentError(
                "ConductorGroup", f"central conductor must be a conductor part, got {type(part).__name__}"
            )
        target = part.numeric_type
        num_wires, num_turns = 0, coerce(0.0, target)
        if isinstance(part, (WireArray, Strip)):
            num_wires, num_turns = _helix(part, target)
        return cls(
            radius_in=part.radius_in,
            radius_ext=part.radius_ext,
            cross_section=part.cross_section,
            num_wires=num_wires,
            num_turns=num_turns,
            resistance=part.resistance,
            alpha=part.material_props.alpha,
            gmr=part.gmr,
            layers=[part],
        )

    @classmethod
    def build(cls, initial_part: ConductorPart) -> ConductorGroup:
        return cls.from_part(initial_part)

    def _append(self, part: ConductorPart, target: type) -> None:
        gmd = formulas.gmd(_geometry(self.layers[-1]), _geometry(part))
        gmr = formulas.equivalent_gmr(self.gmr, self.cross_section, part.gmr, part.cross_section, gmd)
        alpha = formulas.equivalent_alpha(
            self.alpha, self.resistance, part.material_props.alpha, part.resistance
        )
        resistance = formulas.parallel_equivalent(self.resistance, part.resistance)
        num_wires, num_turns = self.num_wires, self.num_turns
        if isinstance(part, (WireArray, Strip)):
            new_wires, new_turns = _helix(part, target)
            num_turns = (num_wires * num_turns + new_wires * new_turns) / (num_wires + new_wires)
            num_wires += new_wires

        self.gmr, self.alpha, self.resistance, self.num_turns = (
            coerce(v, target) for v in (gmr, alpha, resistance, num_turns)
        )
        self.num_wires = num_wires
        self.radius_ext += part.radius_ext - part.radius_in
        self.cross_section += part.cross_section
        self.layers.append(part)


class InsulatorGroup(AnnularModel):
    """Concentric insulating layers with their equivalent shunt admittance."""

    radius_in: Scalar = Field(description="Inner radius [m]")
    radius_ext: Scalar = Field(description="Outer radius [m]")
    cross_section: Scalar = Field(description="Total cross-section [m²]")
    shunt_capacitance: Scalar = Field(description="Equivalent shunt capacitance [F/m]")
    shunt_conductance: Scalar = Field(description="Equivalent shunt conductance [S/m]")
    layers: list[InsulatorPart]

    @classmethod
    def from_part(cls, part: InsulatorPart) -> InsulatorGroup:
        """Start a group from its innermost insulating layer."""
        if not isinstance(part, InsulatorPart):
            raise InvalidArgumentError(
                "InsulatorGroup", f"initial layer must be an insulator part, got {type(part).__name__}"
            )
        return cls(
            radius_in=part.radius_in,
            radius_ext=part.radius_ext,
            cross_section=part.cross_section,
            shunt_capacitance=part.shunt_capacitance,
            shunt_conductance=part.shunt_conductance,
            layers=[part],
        )

    @classmethod
    def build(cls, initial_part: InsulatorPart) -> InsulatorGroup:
        return cls.from_part(initial_part)

    def _append(self, part: InsulatorPart, frequency: Any, target: type) -> None:
        omega = 2 * math.pi * coerce(frequency, target)
        conductance, susceptance = formulas.series_admittance(
            self.shunt_conductance,
            omega * self.shunt_capacitance,
            part.shunt_conductance,
            omega * part.shunt_capacitance,
        )
        self.shunt_conductance = coerce(conductance, target)
        self.shunt_capacitance = coerce(susceptance / omega, target)
        self.radius_ext += part.radius_ext - part.radius_in
        self.cross_section += part.cross_section
        self.layers.append(part)


@add.register
def _add_conductor(group: ConductorGroup, part_type: type, *args: Any, **kwargs: Any) -> ConductorGroup:
    """Stack a new conductive layer on ``group``.

    ``radius_in`` defaults to the group's outer radius and ``temperature`` to
    the temperature of the central conductor.
    """
    _check_part_type("ConductorGroup", part_type, ConductorPart)
    kwargs.setdefault("temperature", group.layers[0].temperature)
    part, target = _build_layer(group, part_type, args, kwargs)
    if target is not group.numeric_type:
        group = promote_for_append(group, target, part_type.__name__)
    group._append(part, target)
    logger.debug("ConductorGroup: added %s, %d layers", part_type.__name__, len(group.layers))
    return group


@add.register
def _add_insulator(
    group: InsulatorGroup, part_type: type, *args: Any, frequency: Any = F0, **kwargs: Any
) -> InsulatorGroup:
    """Stack a new insulating layer on ``group``.

    Layers combine in series at ``frequency`` [Hz]; the frequency takes part in
    type resolution. ``radius_in`` defaults to the group's outer radius.
    """
    _check_part_type("InsulatorGroup", part_type, InsulatorPart)
    for rule in (Finite("frequency"), Positive("frequency")):
        rule.apply({"frequency": frequency}, "InsulatorGroup")
    part, target = _build_layer(group, part_type, args, kwargs, frequency)
    if target is not group.numeric_type:
        group = promote_for_append(group, target, part_type.__name__)
    group._append(part, frequency, target)
    logger.debug("InsulatorGroup: added %s, %d layers", part_type.__name__, len(group.layers))
    return group


register(
    ConductorGroup,
    TraitSpec(
        required=("initial_part",),
        coercive=(),
        extra_rules=(IsA(ConductorPart, "initial_part"),),
        description="Stack of conductive layers",
    ),
)

register(
    InsulatorGroup,
    TraitSpec(
        required=("initial_part",),
        coercive=(),
        extra_rules=(IsA(InsulatorPart, "initial_part"),),
        description="Stack of insulating layers",
    ),
)
