"""Concentric cable parts: conductive layers and insulating layers.

Each part has two constructors:

- ``Part.create(...)`` accepts raw input (ints, uncertain numbers, proxies such
  as :class:`Thickness`, :class:`Diameter` or a previously built part) and runs
  the validation pipeline first.
- ``Part.build(...)`` is the numeric core: normalized, homogeneously typed
  inputs only, in declared field order. It computes the derived fields.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import ConfigDict, Field

from cable_params import formulas
from cable_params.constants import T0
from cable_params.datamodel.base import AnnularModel, CoreModel, core_type
from cable_params.datamodel.materials import Material
from cable_params.datamodel.radii import Diameter, Thickness, parse_annular, parse_radius
from cable_params.numeric.coerce import coerce
from cable_params.numeric.resolve import Scalar
from cable_params.validation.rules import (
    Finite,
    IntegerField,
    IsA,
    Nonneg,
    Normalized,
    OneOf,
    Positive,
)
from cable_params.validation.traits import TraitSpec, register


def _as(target: type, *values: Any) -> tuple:
    return tuple(coerce(v, target) for v in values)


class CablePart(CoreModel, AnnularModel):
    """Immutable concentric layer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    radius_in: Scalar = Field(description="Inner radius [m]")
    radius_ext: Scalar = Field(description="Outer radius [m]")
    material_props: Material
    temperature: Scalar = Field(description="Operating temperature [°C]")
    cross_section: Scalar = Field(description="Cross-sectional area [m²]")
    resistance: Scalar = Field(description="DC resistance [Ω/m]")
    gmr: Scalar = Field(description="Geometric mean radius [m]")


class ConductorPart(CablePart):
    """Base class of the conductive layers stacked in a conductor group."""


class InsulatorPart(CablePart):
    """Base class of the layers stacked in an insulator group."""

    shunt_capacitance: Scalar = Field(description="Shunt capacitance [F/m]")
    shunt_conductance: Scalar = Field(description="Shunt conductance [S/m]")


class WireArray(ConductorPart):
    """Helical array of round wires laid around a circle."""

    radius_wire: Scalar = Field(description="Radius of each wire [m]")
    num_wires: int = Field(description="Number of wires")
    lay_ratio: Scalar = Field(description="Lay ratio (pitch / mean diameter)")
    mean_diameter: Scalar
    pitch_length: Scalar
    lay_direction: int = Field(description="1 for unilay, -1 for contralay")

    @classmethod
    def build(
        cls, radius_in, radius_wire, num_wires, lay_ratio, material_props, temperature, lay_direction
    ) -> WireArray:
        target = core_type(
            "WireArray",
            radius_in=radius_in,
            radius_wire=radius_wire,
            lay_ratio=lay_ratio,
            material_props=material_props,
            temperature=temperature,
        )
        mat = material_props
        radius_ext = radius_wire if num_wires == 1 else radius_in + 2 * radius_wire
        mean_diameter, pitch_length, overlength = formulas.helical_params(
            radius_in, radius_ext, lay_ratio
        )
        cross_section = num_wires * (math.pi * radius_wire**2)
        r_wire = (
            formulas.tubular_resistance(0.0, radius_wire, mat.rho, mat.alpha, mat.T0, temperature)
            * overlength
        )
        gmr = formulas.wirearray_gmr(radius_in + radius_wire, num_wires, radius_wire, mat.mu_r)
        radius_ext, mean_diameter, pitch_length, cross_section, resistance, gmr = _as(
            target, radius_ext, mean_diameter, pitch_length, cross_section, r_wire / num_wires, gmr
        )
        return cls(
            radius_in=radius_in,
            radius_ext=radius_ext,
            radius_wire=radius_wire,
            num_wires=num_wires,
            lay_ratio=lay_ratio,
            mean_diameter=mean_diameter,
            pitch_length=pitch_length,
            lay_direction=lay_direction,
            material_props=material_props,
            temperature=temperature,
            cross_section=cross_section,
            resistance=resistance,
            gmr=gmr,
        )

    def coords(self, center=(0.0, 0.0)) -> list[tuple[Any, Any]]:
        return formulas.wirearray_coords(self.num_wires, self.radius_wire, self.radius_in, center)


class Tubular(ConductorPart):
    """Solid or hollow tubular conductor."""

    @classmethod
    def build(cls, radius_in, radius_ext, material_props, temperature) -> Tubular:
        target = core_type(
            "Tubular",
            radius_in=radius_in,
            radius_ext=radius_ext,
            material_props=material_props,
            temperature=temperature,
        )
        mat = material_props
        cross_section = math.pi * (radius_ext**2 - radius_in**2)
        resistance = formulas.tubular_resistance(
            radius_in, radius_ext, mat.rho, mat.alpha, mat.T0, temperature
        )
        gmr = formulas.tubular_gmr(radius_ext, radius_in, mat.mu_r)
        cross_section, resistance, gmr = _as(target, cross_section, resistance, gmr)
        return cls(
            radius_in=radius_in,
            radius_ext=radius_ext,
            material_props=material_props,
            temperature=temperature,
            cross_section=cross_section,
            resistance=resistance,
            gmr=gmr,
        )


class Strip(ConductorPart):
    """Helically wound rectangular strip."""

    thickness: Scalar = Field(description="Radial thickness [m]")
    width: Scalar = Field(description="Strip width [m]")
    lay_ratio: Scalar
    mean_diameter: Scalar
    pitch_length: Scalar
    lay_direction: int

    @classmethod
    def build(
        cls, radius_in, radius_ext, width, lay_ratio, material_props, temperature, lay_direction
    ) -> Strip:
        target = core_type(
            "Strip",
            radius_in=radius_in,
            radius_ext=radius_ext,
            width=width,
            lay_ratio=lay_ratio,
            material_props=material_props,
            temperature=temperature,
        )
        mat = material_props
        thickness = radius_ext - radius_in
        mean_diameter, pitch_length, overlength = formulas.helical_params(
            radius_in, radius_ext, lay_ratio
        )
        cross_section = thickness * width
        resistance = (
            formulas.strip_resistance(thickness, width, mat.rho, mat.alpha, mat.T0, temperature)
            * overlength
        )
        gmr = formulas.tubular_gmr(radius_ext, radius_in, mat.mu_r)
        thickness, mean_diameter, pitch_length, cross_section, resistance, gmr = _as(
            target, thickness, mean_diameter, pitch_length, cross_section, resistance, gmr
        )
        return cls(
            radius_in=radius_in,
            radius_ext=radius_ext,
            thickness=thickness,
            width=width,
            lay_ratio=lay_ratio,
            mean_diameter=mean_diameter,
            pitch_length=pitch_length,
            lay_direction=lay_direction,
            material_props=material_props,
            temperature=temperature,
            cross_section=cross_section,
            resistance=resistance,
            gmr=gmr,
        )


def _build_insulating(cls, radius_in, radius_ext, material_props, temperature):
    target = core_type(
        cls.__name__,
        radius_in=radius_in,
        radius_ext=radius_ext,
        material_props=material_props,
        temperature=temperature,
    )
    mat = material_props
    cross_section = math.pi * (radius_ext**2 - radius_in**2)
    resistance = formulas.tubular_resistance(
        radius_in, radius_ext, mat.rho, mat.alpha, mat.T0, temperature
    )
    gmr = formulas.tubular_gmr(radius_ext, radius_in, mat.mu_r)
    capacitance = formulas.shunt_capacitance(radius_in, radius_ext, mat.eps_r)
    conductance = formulas.shunt_conductance(radius_in, radius_ext, mat.rho)
    cross_section, resistance, gmr, capacitance, conductance = _as(
        target, cross_section, resistance, gmr, capacitance, conductance
    )
    return cls(
        radius_in=radius_in,
        radius_ext=radius_ext,
        material_props=material_props,
        temperature=temperature,
        cross_section=cross_section,
        resistance=resistance,
        gmr=gmr,
        shunt_capacitance=capacitance,
        shunt_conductance=conductance,
    )


class Insulator(InsulatorPart):
    """Dielectric insulation layer."""

    @classmethod
    def build(cls, radius_in, radius_ext, material_props, temperature) -> Insulator:
        return _build_insulating(cls, radius_in, radius_ext, material_props, temperature)


class Semicon(InsulatorPart):
    """Semiconducting screen layer."""

    @classmethod
    def build(cls, radius_in, radius_ext, material_props, temperature) -> Semicon:
        return _build_insulating(cls, radius_in, radius_ext, material_props, temperature)


def _parse_wirearray(entity: type, record: dict[str, Any]) -> dict[str, Any]:
    rin = parse_radius(record["radius_in"], entity)
    rw = parse_radius(record["radius_wire"], entity)
    return {**record, "radius_in": rin, "radius_wire": rw}


_STACKABLE = (AnnularModel,)
_OUTER_PROXIES = (Thickness, Diameter)

register(
    WireArray,
    TraitSpec(
        required=("radius_in", "radius_wire", "num_wires", "lay_ratio", "material_props"),
        optional=(("temperature", T0), ("lay_direction", 1)),
        temperature=True,
        coercive=("radius_in", "radius_wire", "lay_ratio", "material_props", "temperature"),
        radius_fields=("radius_in", "radius_wire"),
        radius_proxies={"radius_in": _STACKABLE, "radius_wire": (Diameter,)},
        extra_rules=(
            Normalized("radius_in"),
            Finite("radius_in"),
            Nonneg("radius_in"),
            Normalized("radius_wire"),
            Finite("radius_wire"),
            Positive("radius_wire"),
            IntegerField("num_wires"),
            Positive("num_wires"),
            Finite("lay_ratio"),
            Nonneg("lay_ratio"),
            IsA(Material, "material_props"),
            OneOf("lay_direction", (-1, 1)),
        ),
        parse=_parse_wirearray,
        description="Helical array of round wires",
    ),
)

register(
    Tubular,
    TraitSpec(
        required=("radius_in", "radius_ext", "material_props"),
        optional=(("temperature", T0),),
        radii=True,
        temperature=True,
        radius_proxies={"radius_in": _STACKABLE, "radius_ext": _OUTER_PROXIES},
        extra_rules=(IsA(Material, "material_props"),),
        parse=parse_annular,
        description="Solid or hollow tubular conductor",
    ),
)

register(
    Strip,
    TraitSpec(
        required=("radius_in", "radius_ext", "width", "lay_ratio", "material_props"),
        optional=(("temperature", T0), ("lay_direction", 1)),
        radii=True,
        temperature=True,
        coercive=("radius_in", "radius_ext", "width", "lay_ratio", "material_props", "temperature"),
        radius_proxies={"radius_in": _STACKABLE, "radius_ext": _OUTER_PROXIES},
        extra_rules=(
            IsA(Material, "material_props"),
            OneOf("lay_direction", (-1, 1)),
            Finite("lay_ratio"),
            Nonneg("lay_ratio"),
            Finite("width"),
            Positive("width"),
        ),
        parse=parse_annular,
        description="Helically wound rectangular strip",
    ),
)

# A zero inner radius would put log(0) in the shunt admittance formulas.
for _insulating, _description in (
    (Insulator, "Dielectric insulation layer"),
    (Semicon, "Semiconducting screen layer"),
):
    register(
        _insulating,
        TraitSpec(
            required=("radius_in", "radius_ext", "material_props"),
            optional=(("temperature", T0),),
            radii=True,
            temperature=True,
            radius_proxies={"radius_in": _STACKABLE, "radius_ext": _OUTER_PROXIES},
            extra_rules=(Positive("radius_in"), IsA(Material, "material_props")),
            parse=parse_annular,
            description=_description,
        ),
    )
