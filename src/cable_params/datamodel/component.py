"""Cable component: a conductor group wrapped by its insulator group."""

from __future__ import annotations

import math
from typing import Any

from pydantic import ConfigDict
from uncertainties import nominal_value

from cable_params import formulas
from cable_params.datamodel.base import CoreModel, core_type
from cable_params.datamodel.groups import ConductorGroup, InsulatorGroup
from cable_params.datamodel.materials import Material
from cable_params.datamodel.parts import Insulator, Tubular
from cable_params.errors import InvalidArgumentError
from cable_params.numeric.coerce import coerce
from cable_params.validation.rules import IsA
from cable_params.validation.traits import TraitSpec, register


def _interface_matches(outer: Any, inner: Any) -> bool:
    if outer == inner:
        return True
    return math.isclose(nominal_value(outer), nominal_value(inner), rel_tol=1e-8)


class CableComponent(CoreModel):
    """Conductor and insulator groups plus their effective homogeneous materials.

    ``conductor_props`` and ``insulator_props`` describe the solid tube and the
    single dielectric layer that reproduce the groups' equivalent resistance,
    GMR, capacitance and conductance.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    conductor_group: ConductorGroup
    conductor_props: Material
    insulator_group: InsulatorGroup
    insulator_props: Material

    @classmethod
    def build(cls, id, conductor_group, insulator_group) -> CableComponent:
        target = core_type(
            "CableComponent", conductor_group=conductor_group, insulator_group=insulator_group
        )
        if not _interface_matches(conductor_group.radius_ext, insulator_group.radius_in):
            raise InvalidArgumentError(
                "CableComponent",
                "conductor outer radius must match insulator inner radius "
                f"({conductor_group.radius_ext} != {insulator_group.radius_in})",
            )

        r1 = conductor_group.radius_in
        r2 = conductor_group.radius_ext
        r3 = insulator_group.radius_ext

        rho_con = formulas.equivalent_rho(conductor_group.resistance, r2, r1)
        mu_con = formulas.equivalent_mu(conductor_group.gmr, r2, r1)
        conductor_props = Material.build(
            *(
                coerce(v, target)
                for v in (
                    rho_con,
                    0.0,
                    mu_con,
                    conductor_group.layers[0].temperature,
                    conductor_group.alpha,
                )
            )
        )

        eps_ins = formulas.equivalent_eps(insulator_group.shunt_capacitance, r3, r2)
        sigma_ins = formulas.sigma_lossfact(insulator_group.shunt_conductance, r2, r3)
        rho_ins = math.inf if nominal_value(sigma_ins) == 0 else 1 / sigma_ins
        mu_ins = formulas.solenoid_correction(conductor_group.num_turns, r2, r3)
        insulator_props = Material.build(
            *(
                coerce(v, target)
                for v in (rho_ins, eps_ins, mu_ins, insulator_group.layers[0].temperature, 0.0)
            )
        )

        return cls(
            id=id,
            conductor_group=conductor_group,
            conductor_props=conductor_props,
            insulator_group=insulator_group,
            insulator_props=insulator_props,
        )

    def equivalent_conductor(self) -> Tubular:
        """Solid tube with the same geometry and the effective conductor material."""
        cg = self.conductor_group
        return Tubular.create(
            cg.radius_in, cg.radius_ext, self.conductor_props, temperature=cg.layers[0].temperature
        )

    def equivalent_insulator(self) -> Insulator:
        """Single dielectric layer with the same geometry and the effective material."""
        ig = self.insulator_group
        return Insulator.create(
            ig.radius_in, ig.radius_ext, self.insulator_props, temperature=ig.layers[0].temperature
        )


register(
    CableComponent,
    TraitSpec(
        required=("id", "conductor_group", "insulator_group"),
        coercive=("conductor_group", "insulator_group"),
        extra_rules=(
            IsA(str, "id"),
            IsA(ConductorGroup, "conductor_group"),
            IsA(InsulatorGroup, "insulator_group"),
        ),
        description="Conductor group wrapped by its insulator group",
    ),
)
