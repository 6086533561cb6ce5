"""Shared fixtures: materials and small cable building blocks."""

import pytest

from cable_params.datamodel.groups import ConductorGroup, InsulatorGroup
from cable_params.datamodel.materials import Material
from cable_params.datamodel.parts import Insulator, Tubular


@pytest.fixture
def copper():
    return Material.create(1.7241e-8, 1.0, 0.999994, 20.0, 0.00393)


@pytest.fixture
def xlpe():
    return Material.create(1.97e14, 2.5, 1.0, 20.0, 0.0)


@pytest.fixture
def semicon():
    return Material.create(1000.0, 1000.0, 1.0, 20.0, 0.0)


@pytest.fixture
def core_group(copper):
    """Solid 10 mm copper core."""
    return ConductorGroup.from_part(Tubular.create(0.0, 0.01, copper))


@pytest.fixture
def insulation_group(xlpe):
    """10 mm of XLPE around the core."""
    return InsulatorGroup.from_part(Insulator.create(0.01, 0.02, xlpe))
