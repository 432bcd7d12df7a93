"""
Pitch layout projection.

Turns a formation and its slot states into percentage coordinates on a
rendering surface, attack at the top and the goalkeeper at the bottom.
"""
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from ..models import FormationTemplate, LineupSlotState, PitchPosition
from .slot_classifier import Lane, Line, classify

# vertical band per line, percent from the top
LINE_Y: Dict[Line, float] = {
    Line.ATTACK: 10.0,
    Line.ATTACKING_MID: 28.0,
    Line.MIDFIELD: 46.0,
    Line.DEFENSIVE_MID: 64.0,
    Line.DEFENSE: 82.0,
    Line.GOALKEEPER: 94.0,
}

LANE_X: Dict[Lane, float] = {
    Lane.LEFT: 14.0,
    Lane.CENTER: 50.0,
    Lane.RIGHT: 86.0,
}

LINE_ORDER = (
    Line.ATTACK, Line.ATTACKING_MID, Line.MIDFIELD,
    Line.DEFENSIVE_MID, Line.DEFENSE, Line.GOALKEEPER,
)
LANE_ORDER = (Lane.LEFT, Lane.CENTER, Lane.RIGHT)

FAN_SPREAD = 18.0
MIN_X = 6.0
MAX_X = 94.0


def fan_out_x(base: float, index: int, total: int) -> float:
    """
    Horizontal position of the ``index``-th of ``total`` slots sharing a cell.

    Slots are spread evenly over ``FAN_SPREAD`` points centred on ``base``
    and kept within the pitch margins.
    """
    if total <= 1:
        return base
    step = FAN_SPREAD / (total - 1)
    x = base - FAN_SPREAD / 2 + index * step
    return max(MIN_X, min(MAX_X, x))


def project(
    template: FormationTemplate,
    slots: Union[Mapping[str, LineupSlotState], Iterable[LineupSlotState]],
) -> List[PitchPosition]:
    """
    Project populated slots onto the pitch.

    Slots are grouped by (line, lane) in template order. Slots of the template
    with no state are skipped.

    Args:
        template: Formation supplying slot order and labels
        slots: Slot states keyed by slot id, or as a sequence

    Returns:
        Positions ordered from attack to goalkeeper, left to right
    """
    if isinstance(slots, Mapping):
        present = set(slots.keys())
    else:
        present = {state.slot_id for state in slots}

    groups: Dict[Tuple[Line, Lane], List[str]] = {}
    for slot in template.slots:
        if slot.slot_id not in present:
            continue
        cls = classify(slot.label, slot.slot_id)
        groups.setdefault((cls.line, cls.lane), []).append(slot.slot_id)

    positions = []
    for line in LINE_ORDER:
        for lane in LANE_ORDER:
            members = groups.get((line, lane), [])
            for index, slot_id in enumerate(members):
                positions.append(
                    PitchPosition(
                        slot_id=slot_id,
                        x_percent=fan_out_x(LANE_X[lane], index, len(members)),
                        y_percent=LINE_Y[line],
                    )
                )
    return positions
