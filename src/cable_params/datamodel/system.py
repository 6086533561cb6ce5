"""Cable positions in a cross-section and the line cable system that holds them."""

from __future__ import annotations

import logging
import math
from typing import Any, ClassVar

from pydantic import ConfigDict, Field
from uncertainties import nominal_value

from cable_params.datamodel.base import CableModel, CoreModel, add, core_type, promote_for_append
from cable_params.datamodel.design import CableDesign
from cable_params.errors import InvalidArgumentError
from cable_params.numeric.coerce import coerce
from cable_params.numeric.resolve import Scalar, resolve_type
from cable_params.validation.rules import Finite, IsA, Positive
from cable_params.validation.traits import TraitSpec, register

logger = logging.getLogger(__name__)


class CablePosition(CoreModel):
    """A cable design placed at ``(horz, vert)`` with a component-to-phase map.

    ``conn`` lists one phase per component, in component order. Phase 0 marks a
    grounded component; components sharing a phase are bundled.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    design: CableDesign
    horz: Scalar = Field(description="Horizontal coordinate [m]")
    vert: Scalar = Field(description="Vertical coordinate [m], negative underground")
    conn: list[int]

    @classmethod
    def build(cls, design, horz, vert, conn) -> CablePosition:
        core_type("CablePosition", design=design, horz=horz, vert=vert)
        last = design.components[-1]
        r_max = max(
            nominal_value(last.conductor_group.radius_ext),
            nominal_value(last.insulator_group.radius_ext),
        )
        if nominal_value(vert) == 0:
            raise InvalidArgumentError(
                "CablePosition", "vertical position cannot be at the air/earth interface", field="vert"
            )
        if abs(nominal_value(vert)) < r_max:
            raise InvalidArgumentError(
                "CablePosition",
                f"|vert| = {abs(vert)} must be at least the cable outer radius {r_max}",
                field="vert",
            )
        if conn is None:
            conn = [1 if i == 0 else 0 for i in range(len(design.components))]
        else:
            conn = list(conn)
        if not any(conn):
            logger.warning("At least one component must be assigned to a non-zero phase.")
        return cls(design=design, horz=horz, vert=vert, conn=conn)

    def phase_map(self) -> dict[str, int]:
        return dict(zip(self.design.component_ids(), self.conn))


def _parse_position(entity: type, record: dict[str, Any]) -> dict[str, Any]:
    design, conn = record["design"], record["conn"]
    if conn is None or not isinstance(design, CableDesign):
        return record
    ids = design.component_ids()
    if isinstance(conn, dict):
        for component_id in conn:
            if component_id not in ids:
                raise InvalidArgumentError(
                    "CablePosition",
                    f"component ID '{component_id}' not found in the cable design",
                    field="conn",
                )
        conn = [conn.get(component_id, 0) for component_id in ids]
    elif isinstance(conn, (list, tuple)):
        if len(conn) != len(ids):
            raise InvalidArgumentError(
                "CablePosition",
                f"conn must give one phase per component ({len(ids)}), got {len(conn)}",
                field="conn",
            )
        conn = list(conn)
    else:
        raise InvalidArgumentError(
            "CablePosition", f"conn must be a mapping or a list, got {type(conn).__name__}", field="conn"
        )
    for phase in conn:
        if isinstance(phase, bool) or not isinstance(phase, int) or phase < 0:
            raise InvalidArgumentError(
                "CablePosition", f"phases must be non-negative integers, got {phase!r}", field="conn"
            )
    return {**record, "conn": conn}


register(
    CablePosition,
    TraitSpec(
        required=("design", "horz", "vert"),
        optional=(("conn", None),),
        coercive=("design", "horz", "vert"),
        extra_rules=(IsA(CableDesign, "design"), Finite("horz"), Finite("vert")),
        parse=_parse_position,
        description="Cable design placed in the system cross-section",
    ),
)


def _count_phases(positions: list[CablePosition]) -> int:
    return len({phase for position in positions for phase in position.conn if phase > 0})


class LineCableSystem(CableModel):
    """Cable positions of one line section, with phase bookkeeping."""

    _exact_fields: ClassVar[tuple[str, ...]] = ("system_id", "num_cables", "num_phases")

    system_id: str
    line_length: Scalar = Field(description="Line length [m]")
    num_cables: int
    num_phases: int
    cables: list[CablePosition]

    @classmethod
    def build(cls, system_id, line_length, position) -> LineCableSystem:
        core_type("LineCableSystem", line_length=line_length, position=position)
        return cls(
            system_id=system_id,
            line_length=line_length,
            num_cables=1,
            num_phases=_count_phases([position]),
            cables=[position],
        )

    def _occupied(self, horz: Any, vert: Any) -> bool:
        h, v = nominal_value(horz), nominal_value(vert)
        return any(
            nominal_value(p.horz) == h and nominal_value(p.vert) == v for p in self.cables
        )


register(
    LineCableSystem,
    TraitSpec(
        required=("system_id", "line_length", "position"),
        coercive=("line_length", "position"),
        extra_rules=(
            IsA(str, "system_id"),
            Finite("line_length"),
            Positive("line_length"),
            IsA(CablePosition, "position"),
        ),
        description="Line cable system",
    ),
)


@add.register
def _add_position(
    system: LineCableSystem, design: Any, horz: Any, vert: Any, conn: Any = None
) -> LineCableSystem:
    """Place ``design`` at ``(horz, vert)``.

    Without ``conn`` the first component is assigned the next free phase and
    the others are grounded.
    """
    if conn is None and isinstance(design, CableDesign):
        max_phase = max((max(p.conn) for p in system.cables), default=0)
        conn = {cid: (max_phase + 1 if i == 0 else 0) for i, cid in enumerate(design.component_ids())}
    if system._occupied(horz, vert):
        raise InvalidArgumentError("LineCableSystem", "cable position overlaps with existing cable")
    position = CablePosition.create(design, horz, vert, conn=conn)

    target = resolve_type(system, position)
    position = coerce(position, target)
    if target is not system.numeric_type:
        system = promote_for_append(system, target, "CablePosition")
    system.cables.append(position)
    system.num_cables += 1
    system.num_phases = _count_phases(system.cables)
    return system


def trifoil_formation(x0, y0, r_ext):
    """Centres of three touching cables in trifoil around ``(x0, y0)``.

    Returns ``(xa, ya, xb, yb, xc, yc)``; cable A is on top.
    """
    if not nominal_value(r_ext) > 0:
        raise InvalidArgumentError("trifoil_formation", "external radius must be positive", field="r_ext")
    d = r_ext / math.cos(math.radians(30))
    xa = x0
    ya = y0 + d * math.sin(math.radians(90))
    xb = x0 + d * math.cos(math.radians(210))
    yb = y0 + d * math.sin(math.radians(210))
    xc = x0 + d * math.cos(math.radians(330))
    yc = y0 + d * math.sin(math.radians(330))
    return xa, ya, xb, yb, xc, yc


def flat_formation(xc, yc, s, vertical=False):
    """Centres of three cables in flat formation with spacing ``s``."""
    if vertical:
        return xc, yc, xc, yc - s, xc, yc - 2 * s
    return xc, yc, xc + s, yc, xc + 2 * s, yc
