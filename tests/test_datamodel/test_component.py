"""Tests for cable components and their equivalent materials."""

import pytest
from uncertainties import UFloat, ufloat

from cable_params.datamodel.component import CableComponent
from cable_params.datamodel.groups import ConductorGroup, InsulatorGroup
from cable_params.datamodel.parts import Insulator, Tubular
from cable_params.errors import InvalidArgumentError
from cable_params.numeric.resolve import type_of


def test_equivalent_conductor_material(core_group, insulation_group):
    component = CableComponent.create("core", core_group, insulation_group)
    props = component.conductor_props
    assert props.rho == pytest.approx(1.7241e-8, rel=1e-9)
    assert props.mu_r == pytest.approx(0.999994, rel=1e-9)
    assert props.alpha == pytest.approx(0.00393)
    assert props.T0 == 20.0


def test_equivalent_insulator_material(core_group, insulation_group):
    component = CableComponent.create("core", core_group, insulation_group)
    props = component.insulator_props
    assert props.eps_r == pytest.approx(2.5, rel=1e-9)
    assert props.rho == pytest.approx(1.97e14, rel=1e-9)
    # straight conductor, no solenoid effect
    assert props.mu_r == 1.0


def test_equivalent_parts(core_group, insulation_group):
    component = CableComponent.create("core", core_group, insulation_group)
    conductor = component.equivalent_conductor()
    insulator = component.equivalent_insulator()
    assert isinstance(conductor, Tubular)
    assert conductor.resistance == pytest.approx(core_group.resistance)
    assert insulator.shunt_capacitance == pytest.approx(insulation_group.shunt_capacitance)


def test_interface_radii_must_match(core_group, xlpe):
    loose = InsulatorGroup.from_part(Insulator.create(0.011, 0.02, xlpe))
    with pytest.raises(InvalidArgumentError, match="must match insulator inner radius"):
        CableComponent.create("core", core_group, loose)


def test_component_checks_argument_kinds(core_group, insulation_group):
    with pytest.raises(InvalidArgumentError, match="id must be str"):
        CableComponent.create(1, core_group, insulation_group)
    with pytest.raises(InvalidArgumentError, match="conductor_group must be ConductorGroup"):
        CableComponent.create("core", insulation_group, core_group)


def test_mixed_groups_promote_component(copper, insulation_group):
    uncertain_core = ConductorGroup.from_part(Tubular.create(0.0, ufloat(0.01, 1e-5), copper))
    component = CableComponent.create("core", uncertain_core, insulation_group)
    assert type_of(component) is UFloat
    assert isinstance(component.insulator_props.eps_r, UFloat)
    assert component.insulator_group is not insulation_group
    assert type_of(insulation_group) is float
