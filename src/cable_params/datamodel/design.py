"""Cable designs: ordered components plus nominal catalogue data."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, ClassVar

from pydantic import ConfigDict, Field

from cable_params.datamodel.base import CableModel, CoreModel, add, core_type, promote_for_append
from cable_params.datamodel.component import CableComponent
from cable_params.datamodel.groups import ConductorGroup, InsulatorGroup
from cable_params.errors import InvalidArgumentError
from cable_params.numeric.coerce import coerce
from cable_params.numeric.resolve import Scalar, is_real, resolve_type
from cable_params.validation.rules import IsA
from cable_params.validation.traits import TraitSpec, register

logger = logging.getLogger(__name__)

NOMINAL_FIELDS = (
    "U0",
    "U",
    "conductor_cross_section",
    "screen_cross_section",
    "armor_cross_section",
    "resistance",
    "capacitance",
    "inductance",
)


class NominalData(CoreModel):
    """Nominal catalogue values of a cable design; every entry is optional."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    designation_code: str | None = Field(default=None, description="Designation per DIN VDE 0271/0276")
    U0: Scalar | None = Field(default=None, description="Rated phase-to-earth voltage [kV]")
    U: Scalar | None = Field(default=None, description="Rated phase-to-phase voltage [kV]")
    conductor_cross_section: Scalar | None = Field(default=None, description="[mm²]")
    screen_cross_section: Scalar | None = Field(default=None, description="[mm²]")
    armor_cross_section: Scalar | None = Field(default=None, description="[mm²]")
    resistance: Scalar | None = Field(default=None, description="DC resistance [Ω/km]")
    capacitance: Scalar | None = Field(default=None, description="Capacitance [μF/km]")
    inductance: Scalar | None = Field(default=None, description="Trifoil inductance [mH/km]")

    @classmethod
    def build(cls, designation_code, *values) -> NominalData:
        present = {name: v for name, v in zip(NOMINAL_FIELDS, values) if v is not None}
        core_type("NominalData", **present)
        return cls(designation_code=designation_code, **dict(zip(NOMINAL_FIELDS, values)))

    def rebuild(self, target: type) -> NominalData:
        # without numbers there is no numeric type to convert
        if all(getattr(self, name) is None for name in NOMINAL_FIELDS):
            return self
        return super().rebuild(target)


def _parse_nominal(entity: type, record: dict[str, Any]) -> dict[str, Any]:
    code = record["designation_code"]
    if code is not None and not isinstance(code, str):
        raise InvalidArgumentError(
            "NominalData", "designation_code must be a string", field="designation_code"
        )
    for name in NOMINAL_FIELDS:
        value = record[name]
        if value is not None and not is_real(value):
            raise InvalidArgumentError(
                "NominalData", f"{name} must be a number or None, got {type(value).__name__}", field=name
            )
    return record


register(
    NominalData,
    TraitSpec(
        required=(),
        optional=(("designation_code", None),) + tuple((name, None) for name in NOMINAL_FIELDS),
        coercive=NOMINAL_FIELDS,
        parse=_parse_nominal,
        description="Nominal catalogue data",
    ),
)


class CableDesign(CableModel):
    """A complete cable: one or more concentric components."""

    _exact_fields: ClassVar[tuple[str, ...]] = ("cable_id",)

    cable_id: str
    nominal_data: NominalData
    components: list[CableComponent]

    @classmethod
    def build(cls, cable_id, component, nominal_data) -> CableDesign:
        # nominal data may hold no numbers at all, so only the component fixes the type
        core_type("CableDesign", component=component)
        return cls(cable_id=cable_id, nominal_data=nominal_data, components=[component])

    @classmethod
    def from_groups(
        cls,
        cable_id: str,
        conductor_group: ConductorGroup,
        insulator_group: InsulatorGroup,
        component_id: str = "component1",
        nominal_data: NominalData | None = None,
    ) -> CableDesign:
        component = CableComponent.create(component_id, conductor_group, insulator_group)
        return cls.create(cable_id, component, nominal_data=nominal_data)

    def component_ids(self) -> list[str]:
        return [c.id for c in self.components]

    def _put(self, component: CableComponent) -> None:
        for i, existing in enumerate(self.components):
            if existing.id == component.id:
                logger.warning(
                    "Component with ID '%s' already exists and will be overwritten.", component.id
                )
                self.components[i] = component
                return
        self.components.append(component)


def _parse_design(entity: type, record: dict[str, Any]) -> dict[str, Any]:
    if record["nominal_data"] is None:
        return {**record, "nominal_data": NominalData.create()}
    return record


register(
    CableDesign,
    TraitSpec(
        required=("cable_id", "component"),
        optional=(("nominal_data", None),),
        coercive=("component", "nominal_data"),
        extra_rules=(
            IsA(str, "cable_id"),
            IsA(CableComponent, "component"),
            IsA(NominalData, "nominal_data"),
        ),
        parse=_parse_design,
        description="Cable design made of concentric components",
    ),
)


@add.register
def _add_component(design: CableDesign, component: Any, *groups: Any) -> CableDesign:
    """Append ``component``, or build one from ``(id, conductor_group, insulator_group)``.

    A component whose id already exists replaces the old one.
    """
    if groups:
        component = CableComponent.create(component, *groups)
    if not isinstance(component, CableComponent):
        raise InvalidArgumentError(
            "CableDesign", f"expected a CableComponent, got {type(component).__name__}"
        )
    target = resolve_type(design, component)
    component = coerce(component, target)
    if target is not design.numeric_type:
        design = promote_for_append(design, target, "CableComponent")
    design._put(component)
    return design


def simplify(design: CableDesign, new_id: str = "") -> CableDesign:
    """Equivalent design with each component reduced to one tube and one insulator."""
    if not design.components:
        raise InvalidArgumentError("CableDesign", "design must contain at least one component")

    equivalent_id = new_id or f"{design.cable_id}_equivalent"
    equivalent = None
    for component in design.components:
        cg = ConductorGroup.from_part(component.equivalent_conductor())
        ig = InsulatorGroup.from_part(component.equivalent_insulator())
        if equivalent is None:
            first = CableComponent.create(component.id, cg, ig)
            equivalent = CableDesign.create(
                equivalent_id, first, nominal_data=design.nominal_data
            )
        else:
            equivalent = add(equivalent, component.id, cg, ig)
    return equivalent


class CablesLibrary(Mapping):
    """Cable designs keyed by ``cable_id``.

    Adding a design whose id is already present replaces the stored design.
    """

    def __init__(self):
        self._designs: dict[str, CableDesign] = {}

    def __getitem__(self, cable_id: str) -> CableDesign:
        try:
            return self._designs[cable_id]
        except KeyError:
            raise KeyError(f"Cable design '{cable_id}' not found in library") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._designs)

    def __len__(self) -> int:
        return len(self._designs)

    def add(self, design: CableDesign) -> None:
        if not isinstance(design, CableDesign):
            raise InvalidArgumentError(
                "CablesLibrary", f"expected a CableDesign, got {type(design).__name__}"
            )
        if design.cable_id in self._designs:
            logger.warning(
                "Cable design '%s' already exists and will be overwritten.", design.cable_id
            )
        self._designs[design.cable_id] = design
        logger.info("Added cable design '%s', %d designs in library", design.cable_id, len(self))

    def remove(self, cable_id: str) -> None:
        if cable_id not in self._designs:
            raise KeyError(f"Cable design '{cable_id}' not found in library")
        del self._designs[cable_id]
        logger.info("Removed cable design '%s'", cable_id)
