"""Tests for cable positions, line cable systems and formation helpers."""

import logging
import math

import pytest
from uncertainties import UFloat, ufloat

from cable_params.datamodel.base import add
from cable_params.datamodel.design import CableDesign
from cable_params.datamodel.groups import ConductorGroup
from cable_params.datamodel.parts import Tubular
from cable_params.datamodel.system import (
    CablePosition,
    LineCableSystem,
    flat_formation,
    trifoil_formation,
)
from cable_params.errors import InvalidArgumentError, NumericDomainError, PromotionWarning
from cable_params.numeric.resolve import type_of


@pytest.fixture
def design(core_group, insulation_group):
    return CableDesign.from_groups("cable", core_group, insulation_group, component_id="core")


@pytest.fixture
def system(design):
    return LineCableSystem.create("line", 1000, CablePosition.create(design, 0.0, -1.0))


def test_position_defaults(design):
    position = CablePosition.create(design, 0, -1)
    assert position.conn == [1]
    assert isinstance(position.horz, float)
    assert position.phase_map() == {"core": 1}


def test_position_conn_by_component_id(design):
    position = CablePosition.create(design, 0.0, -1.0, conn={"core": 3})
    assert position.conn == [3]


def test_position_rejects_unknown_component(design):
    with pytest.raises(InvalidArgumentError, match="component ID 'screen' not found"):
        CablePosition.create(design, 0.0, -1.0, conn={"screen": 1})


def test_position_rejects_bad_phase(design):
    with pytest.raises(InvalidArgumentError, match="phases must be non-negative integers"):
        CablePosition.create(design, 0.0, -1.0, conn=[-1])
    with pytest.raises(InvalidArgumentError, match="one phase per component"):
        CablePosition.create(design, 0.0, -1.0, conn=[1, 2])


def test_position_not_at_interface(design):
    with pytest.raises(InvalidArgumentError, match="air/earth interface"):
        CablePosition.create(design, 0.0, 0.0)
    with pytest.raises(InvalidArgumentError, match="must be at least the cable outer radius"):
        CablePosition.create(design, 0.0, -0.01)


def test_grounded_position_logs_warning(design, caplog):
    with caplog.at_level(logging.WARNING):
        position = CablePosition.create(design, 0.0, -1.0, conn=[0])
    assert position.conn == [0]
    assert "non-zero phase" in caplog.text


def test_system_create(system):
    assert system.num_cables == 1
    assert system.num_phases == 1
    assert system.line_length == 1000.0
    assert isinstance(system.line_length, float)


def test_system_line_length_positive(design):
    position = CablePosition.create(design, 0.0, -1.0)
    with pytest.raises(NumericDomainError, match="line_length must be > 0"):
        LineCableSystem.create("line", 0.0, position)


def test_add_position_assigns_next_phase(system, design):
    result = add(system, design, 0.5, -1.0)
    assert result is system
    assert system.num_cables == 2
    assert system.num_phases == 2
    assert system.cables[-1].conn == [2]


def test_add_position_with_explicit_conn(system, design):
    system = add(system, design, 0.5, -1.0, conn={"core": 1})
    assert system.num_cables == 2
    assert system.num_phases == 1


def test_overlapping_position_rejected(system, design):
    with pytest.raises(InvalidArgumentError, match="overlaps with existing cable"):
        add(system, design, 0.0, -1.0)
    assert system.num_cables == 1


def test_uncertain_design_promotes_system(system, copper, insulation_group):
    core = ConductorGroup.from_part(Tubular.create(0.0, ufloat(0.01, 1e-5), copper))
    uncertain = CableDesign.from_groups("cable2", core, insulation_group)
    with pytest.warns(PromotionWarning):
        promoted = add(system, uncertain, 0.5, -1.0)
    assert type_of(promoted) is UFloat
    assert promoted.num_cables == 2
    assert system.num_cables == 1
    assert type_of(system) is float


def test_trifoil_formation_touching_cables():
    xa, ya, xb, yb, xc, yc = trifoil_formation(0.0, -1.0, 0.05)
    assert xa == 0.0
    assert math.dist((xa, ya), (xb, yb)) == pytest.approx(0.1)
    assert math.dist((xb, yb), (xc, yc)) == pytest.approx(0.1)
    assert yb == pytest.approx(yc)


def test_trifoil_formation_needs_positive_radius():
    with pytest.raises(InvalidArgumentError, match="external radius must be positive"):
        trifoil_formation(0.0, -1.0, 0.0)


def test_flat_formation():
    assert flat_formation(0.0, -1.0, 0.2) == pytest.approx((0.0, -1.0, 0.2, -1.0, 0.4, -1.0))
    assert flat_formation(0.0, -1.0, 0.2, vertical=True) == pytest.approx(
        (0.0, -1.0, 0.0, -1.2, 0.0, -1.4)
    )
