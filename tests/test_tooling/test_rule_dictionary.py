"""Tests for the Excel rule dictionary."""

from openpyxl import load_workbook

import cable_params.datamodel.system  # noqa: F401
from cable_params.datamodel.parts import Tubular
from cable_params.rule_dictionary import COLUMNS, build_workbook, save_workbook
from cable_params.validation.traits import TraitRegistry, traits


def test_workbook_has_one_sheet_per_entity():
    wb = build_workbook()
    for name in ("Material", "WireArray", "Tubular", "ConductorGroup", "LineCableSystem"):
        assert name in wb.sheetnames


def test_sheet_layout():
    registry = TraitRegistry()
    registry.register(Tubular, traits(Tubular))
    ws = build_workbook(registry)["Tubular"]
    assert [c.value for c in ws[1]] == [header for header, _, _ in COLUMNS]
    assert ws["A2"].value == "radius_in"
    assert ws.freeze_panes == "A2"
    assert ws.max_row == 5


def test_save_workbook(tmp_path):
    registry = TraitRegistry()
    registry.register(Tubular, traits(Tubular))
    path = save_workbook(tmp_path / "docs" / "rules.xlsx", registry)
    assert path.exists()
    ws = load_workbook(path)["Tubular"]
    assert ws["B3"].value == "required"
    assert ws["C5"].value == "20.0"
