"""Generate the cable model Rule Dictionary Excel workbook.

Imports every model module so that all entity types are registered, then
writes one sheet per entity with its fields, defaults, proxy inputs and rules.

Usage:
    python scripts/generate_rule_dictionary.py [output.xlsx]
"""

from __future__ import annotations

import sys
from pathlib import Path

import cable_params.datamodel.system  # noqa: F401  (registers every entity type)
from cable_params.rule_dictionary import save_workbook
from cable_params.validation.traits import REGISTRY

SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_DIR = SCRIPT_DIR.parent
OUTPUT_PATH = PROJECT_DIR / "docs" / "rule_dictionary.xlsx"


def main() -> None:
    output = Path(sys.argv[1]) if len(sys.argv) > 1 else OUTPUT_PATH

    print(f"Registered entity types: {len(REGISTRY)}")
    for entity in REGISTRY:
        print(f"  {entity.__name__}: {len(REGISTRY.rules_for(entity))} rules")

    path = save_workbook(output)
    print(f"\nSaved: {path}")


if __name__ == "__main__":
    main()
