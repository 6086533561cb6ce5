"""Render the trait registry as an Excel data dictionary.

One sheet per registered entity, one row per constructor field, listing its
default, whether it is coerced, which proxy inputs it admits and the rules
that check it.
"""

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from cable_params.validation.traits import REGISTRY, TraitRegistry

HEADER_FONT = Font(name="Calibri", bold=True, size=11, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
CELL_ALIGN = Alignment(vertical="top", wrap_text=True)

COLUMNS = [
    ("Field", "field", 22),
    ("Kind", "kind", 10),
    ("Default", "default", 12),
    ("Coerced", "coercive", 9),
    ("Proxy Inputs", "proxies", 28),
    ("Rules", "rules", 50),
]


def write_entity_sheet(ws, rows: list[dict[str, str]]) -> None:
    """Write one entity's fields to a worksheet."""
    for col_idx, (header, _, _) in enumerate(COLUMNS, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGN

    for row_idx, row in enumerate(rows, 2):
        for col_idx, (_, key, _) in enumerate(COLUMNS, 1):
            ws.cell(row=row_idx, column=col_idx, value=row[key]).alignment = CELL_ALIGN

    for i, (_, _, width) in enumerate(COLUMNS, 1):
        ws.column_dimensions[get_column_letter(i)].width = width

    # Freeze header row
    ws.freeze_panes = "A2"


def build_workbook(registry: TraitRegistry = REGISTRY) -> Workbook:
    """Build the data dictionary workbook for every entity in ``registry``."""
    rows_by_entity: dict[str, list[dict[str, str]]] = {}
    for row in registry.describe():
        rows_by_entity.setdefault(row["entity"], []).append(row)

    wb = Workbook()
    # Remove default sheet
    wb.remove(wb.active)
    for entity_name, rows in rows_by_entity.items():
        # Sheet name max 31 chars
        ws = wb.create_sheet(title=entity_name[:31])
        write_entity_sheet(ws, rows)
    return wb


def save_workbook(path: str | Path, registry: TraitRegistry = REGISTRY) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb = build_workbook(registry)
    wb.save(path)
    return path
