"""Tests for the sanitize / parse / rules pipeline."""

import logging
import math

import pytest
from uncertainties import UFloat, ufloat

from cable_params.datamodel.parts import Insulator, Tubular, WireArray
from cable_params.datamodel.radii import Diameter, Thickness
from cable_params.errors import InvalidArgumentError, NumericDomainError
from cable_params.validation.pipeline import sanitize, validate


def test_sanitize_fills_defaults_in_field_order(copper):
    record = sanitize(Tubular, (0.01, 0.02, copper), {})
    assert list(record) == ["radius_in", "radius_ext", "material_props", "temperature"]
    assert record["temperature"] == 20.0


def test_sanitize_accepts_keywords(copper):
    record = sanitize(Tubular, (0.01,), {"radius_ext": 0.02, "material_props": copper})
    assert record["radius_ext"] == 0.02


def test_too_many_positional_arguments(copper):
    with pytest.raises(InvalidArgumentError, match="at most 3 positional"):
        sanitize(Tubular, (0.01, 0.02, copper, 25.0), {})


def test_missing_required_argument():
    with pytest.raises(InvalidArgumentError, match="missing required argument 'material_props'"):
        sanitize(Tubular, (0.01, 0.02), {})


def test_unexpected_keyword(copper):
    with pytest.raises(InvalidArgumentError, match="unexpected argument 'colour'"):
        sanitize(Tubular, (0.01, 0.02, copper), {"colour": "red"})


def test_argument_given_twice(copper):
    with pytest.raises(InvalidArgumentError, match="given both positionally and by keyword"):
        sanitize(Tubular, (0.01, 0.02, copper), {"radius_in": 0.0})


def test_inadmissible_radius_input(copper):
    with pytest.raises(InvalidArgumentError, match="radius_ext does not accept str input"):
        sanitize(Tubular, (0.01, "0.02", copper), {})
    with pytest.raises(InvalidArgumentError, match="radius_wire does not accept Thickness input"):
        sanitize(WireArray, (0.0, Thickness(0.001), 1, 0.0, copper), {})


def test_validate_resolves_thickness(copper):
    record = validate(Tubular, 0.01, Thickness(0.002), copper)
    assert record["radius_ext"] == pytest.approx(0.012)


def test_validate_resolves_diameter(copper):
    record = validate(Tubular, 0.01, Diameter(0.04), copper)
    assert record["radius_ext"] == pytest.approx(0.02)


def test_validate_keeps_raw_types(copper):
    record = validate(Tubular, 0, ufloat(0.02, 0.001), copper)
    assert record["radius_in"] == 0
    assert isinstance(record["radius_ext"], UFloat)


def test_first_failing_rule_is_reported(copper):
    with pytest.raises(NumericDomainError) as exc_info:
        validate(Tubular, math.inf, 0.01, copper)
    assert exc_info.value.field == "radius_in"


def test_reversed_radii(copper):
    with pytest.raises(InvalidArgumentError, match="radius_in < radius_ext violated"):
        validate(Tubular, 0.02, 0.01, copper)


def test_insulator_needs_positive_inner_radius(xlpe):
    with pytest.raises(NumericDomainError, match="radius_in must be > 0"):
        validate(Insulator, 0.0, 0.01, xlpe)


def test_wrong_material_kind():
    with pytest.raises(InvalidArgumentError, match="material_props must be Material"):
        validate(Tubular, 0.01, 0.02, "copper")


def test_rule_summary_is_logged(copper, caplog):
    with caplog.at_level(logging.DEBUG, logger="cable_params.validation.pipeline"):
        validate(Tubular, 0.01, 0.02, copper)
    assert "Tubular: 9 rules passed" in caplog.text
