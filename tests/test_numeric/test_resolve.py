"""Tests for numeric type resolution."""

from uncertainties import UFloat, ufloat

from cable_params.datamodel.materials import Material
from cable_params.datamodel.radii import Diameter, Thickness
from cable_params.numeric.resolve import is_real, is_uncertain, resolve_type, type_of


def test_plain_numbers_resolve_to_float():
    assert resolve_type(1.0, 2, 3.5) is float
    assert resolve_type() is float


def test_single_uncertain_leaf_wins():
    assert resolve_type(1.0, ufloat(2.0, 0.1), 3) is UFloat


def test_containers_are_inspected_transitively():
    assert resolve_type([1.0, (2.0, {"x": ufloat(1.0, 0.0)})]) is UFloat
    assert resolve_type({"a": [1.0, 2.0]}) is float


def test_non_numeric_leaves_are_ignored():
    assert resolve_type("copper", None, True, float) is float


def test_models_and_proxies_report_their_type(copper):
    uncertain = Material.create(ufloat(1.7e-8, 1e-10), 1.0, 1.0, 20.0, 0.0039)
    assert resolve_type(copper) is float
    assert resolve_type(copper, uncertain) is UFloat
    assert type_of(Thickness(ufloat(0.001, 1e-5))) is UFloat
    assert type_of(Diameter(0.002)) is float


def test_predicates():
    assert is_uncertain(ufloat(1.0, 0.0))
    assert not is_uncertain(1.0)
    assert is_real(3)
    assert is_real(ufloat(1.0, 0.1))
    assert not is_real(True)
    assert not is_real("1.0")
