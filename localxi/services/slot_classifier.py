"""
Slot classification for pitch layout and grouping.

Maps a positional label (falling back to the slot id tier) to a tactical
line and a lateral lane. The classifier is total: it never raises and
unrecognized labels degrade to a central midfield slot.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Line(Enum):
    """Tactical lines, from the goalkeeper forward."""
    GOALKEEPER = "GK"
    DEFENSE = "DEF"
    DEFENSIVE_MID = "DM"
    MIDFIELD = "MID"
    ATTACKING_MID = "AM"
    ATTACK = "ATT"


class Lane(Enum):
    """Lateral zones across the pitch."""
    LEFT = "L"
    CENTER = "C"
    RIGHT = "R"


@dataclass(frozen=True)
class SlotClass:
    line: Line
    lane: Lane


# Checked in this order; the first match wins
LINE_BUCKETS = (
    (Line.GOALKEEPER, frozenset({"GK"})),
    (Line.DEFENSE, frozenset({"LB", "RB", "CB", "LCB", "RCB", "LWB", "RWB"})),
    (Line.DEFENSIVE_MID, frozenset({"CDM", "DM", "LDM", "RDM"})),
    # wide midfielders sit in the attacking-mid band
    (Line.ATTACKING_MID, frozenset({"CAM", "AM", "LAM", "RAM", "LM", "RM"})),
    (Line.MIDFIELD, frozenset({"CM", "LCM", "RCM"})),
    (Line.ATTACK, frozenset({"ST", "CF", "LW", "RW", "LF", "RF"})),
)

TIER_LINES = {
    "GK": Line.GOALKEEPER,
    "DEF": Line.DEFENSE,
    "MID": Line.MIDFIELD,
    "ATT": Line.ATTACK,
}

LEFT_LABELS = frozenset({"LM", "LW", "LB", "LWB", "LCB", "LDM", "LAM", "LF"})
RIGHT_LABELS = frozenset({"RM", "RW", "RB", "RWB", "RCB", "RDM", "RAM", "RF"})

DEFAULT_LINE = Line.MIDFIELD
DEFAULT_LANE = Lane.CENTER


def _normalize(value: Optional[str]) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().upper()


def _tier_line(slot_id: Optional[str]) -> Optional[Line]:
    """Line implied by a slot id prefix such as ``"DEF-2"``."""
    tier = _normalize(slot_id).split("-", 1)[0]
    return TIER_LINES.get(tier)


def classify_line(label: Optional[str], slot_id: Optional[str] = None) -> Line:
    """Tactical line for a label, then the slot id tier, then midfield."""
    normalized = _normalize(label)
    for line, labels in LINE_BUCKETS:
        if normalized in labels:
            return line
    tier_line = _tier_line(slot_id)
    if tier_line is not None:
        return tier_line
    return DEFAULT_LINE


def classify_lane(label: Optional[str]) -> Lane:
    """Lateral lane for a label."""
    normalized = _normalize(label)
    if normalized in LEFT_LABELS or normalized.startswith("L"):
        return Lane.LEFT
    if normalized in RIGHT_LABELS or normalized.startswith("R"):
        return Lane.RIGHT
    return DEFAULT_LANE


def classify(label: Optional[str], slot_id: Optional[str] = None) -> SlotClass:
    """
    Classify a slot into its line and lane.

    Args:
        label: Positional label such as "LB" or "CAM"
        slot_id: Optional stable slot id, used when the label is unrecognized

    Returns:
        SlotClass with the line and lane
    """
    return SlotClass(line=classify_line(label, slot_id), lane=classify_lane(label))
