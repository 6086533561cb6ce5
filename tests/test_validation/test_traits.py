"""Tests for the trait registry and rule generation."""

import pytest

from cable_params.datamodel.parts import Insulator, Tubular, WireArray
from cable_params.datamodel.radii import Diameter, Thickness
from cable_params.errors import InvalidArgumentError
from cable_params.validation.rules import Finite, IsA, Less, Nonneg, Normalized, Positive
from cable_params.validation.traits import (
    RADII_BUNDLE,
    REGISTRY,
    TraitRegistry,
    TraitSpec,
    rules_for,
    traits,
)


class Ring:
    pass


def test_tubular_rule_bundle_order():
    rules = rules_for(Tubular)
    assert rules[: len(RADII_BUNDLE)] == RADII_BUNDLE
    assert rules[len(RADII_BUNDLE)] == Finite("temperature")
    assert rules[-1].kind == "is_a"
    assert RADII_BUNDLE[0] == Normalized("radius_in")
    assert RADII_BUNDLE[-1] == Less("radius_in", "radius_ext")


def test_insulator_checks_positive_inner_radius():
    rules = rules_for(Insulator)
    assert Positive("radius_in") in rules
    assert rules.index(Positive("radius_in")) > rules.index(Less("radius_in", "radius_ext"))


def test_rules_for_is_deterministic():
    assert rules_for(WireArray) is rules_for(WireArray)
    fresh = TraitRegistry()
    fresh.register(WireArray, traits(WireArray))
    assert fresh.rules_for(WireArray) == rules_for(WireArray)


def test_duplicate_rules_keep_first_position():
    registry = TraitRegistry()
    registry.register(
        Ring,
        TraitSpec(
            required=("radius_in", "radius_ext"),
            radii=True,
            extra_rules=(Finite("radius_in"), Positive("radius_in")),
        ),
    )
    assert registry.rules_for(Ring) == RADII_BUNDLE + (Positive("radius_in"),)


def test_register_same_spec_twice_is_noop():
    registry = TraitRegistry()
    spec = TraitSpec(required=("x",), extra_rules=(Finite("x"),))
    registry.register(Ring, spec)
    registry.register(Ring, TraitSpec(required=("x",), extra_rules=(Finite("x"),)))
    assert len(registry) == 1


def test_register_conflicting_spec_raises():
    registry = TraitRegistry()
    registry.register(Ring, TraitSpec(required=("x",)))
    with pytest.raises(InvalidArgumentError, match="already registered"):
        registry.register(Ring, TraitSpec(required=("y",)))


def test_unregistered_entity_raises():
    with pytest.raises(InvalidArgumentError, match="is not a registered entity type"):
        traits(Ring)
    assert Ring not in REGISTRY


def test_spec_rejects_overlapping_fields():
    with pytest.raises(ValueError, match="both required and optional"):
        TraitSpec(required=("x",), optional=(("x", 1.0),))


def test_spec_rejects_unknown_coercive_field():
    with pytest.raises(ValueError, match="unknown fields"):
        TraitSpec(required=("x",), coercive=("y",))


def test_spec_field_order_and_defaults():
    spec = traits(WireArray)
    assert spec.field_order == (
        "radius_in",
        "radius_wire",
        "num_wires",
        "lay_ratio",
        "material_props",
        "temperature",
        "lay_direction",
    )
    assert spec.defaults == {"temperature": 20.0, "lay_direction": 1}
    assert "num_wires" not in spec.coercive_fields


def test_admits_radius_per_field():
    spec = traits(WireArray)
    assert spec.admits_radius("radius_wire", Diameter(0.002))
    assert spec.admits_radius("radius_wire", 0.001)
    assert not spec.admits_radius("radius_wire", Thickness(0.002))
    assert not spec.admits_radius("radius_in", "0.01")


def test_describe_lists_fields_with_rules():
    registry = TraitRegistry()
    registry.register(Tubular, traits(Tubular))
    rows = {row["field"]: row for row in registry.describe()}
    assert list(rows) == ["radius_in", "radius_ext", "material_props", "temperature"]
    assert rows["radius_ext"]["proxies"] == "Thickness, Diameter"
    assert rows["radius_ext"]["rules"] == "Normalized, Finite, Nonneg, Less"
    assert rows["temperature"]["default"] == "20.0"
    assert rows["material_props"]["rules"] == "IsA"


def test_is_a_rule_in_extras():
    assert IsA(WireArray, "x") != IsA(Tubular, "x")
    assert Nonneg("lay_ratio") in rules_for(WireArray)
