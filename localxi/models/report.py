"""Dataclasses representing derived lineup views for the lineup manager."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class SlotSummary:
    """One row of the lineup stats table."""

    slot_id: str
    label: str
    player_id: Optional[int]
    player_name: str
    is_captain: bool
    rating: Optional[float]
    is_potm: bool = False


@dataclass
class StatLeader:
    """Leader for a single stat counter."""

    stat_field: str
    player_id: int
    player_name: str
    value: int


@dataclass
class EligiblePlayer:
    """A roster player as offered in a slot's selection list."""

    player_id: int
    shirt_number: int
    name: str
    positions: List[str]
    disabled: bool
    out_of_position: bool = False


@dataclass
class PitchPosition:
    """Normalized pitch coordinates for a slot, as percentages of the surface."""

    slot_id: str
    x_percent: float
    y_percent: float

    def to_dict(self) -> Dict[str, object]:
        return {"slotId": self.slot_id, "xPercent": self.x_percent, "yPercent": self.y_percent}


@dataclass
class LineupReport:
    """Snapshot of derived statistics for one lineup."""

    match_id: int
    formation_id: Optional[int]
    slot_count: int
    assigned_count: int
    average_rating: Optional[float]
    potm_slot_id: Optional[str]
    rows: List[SlotSummary] = field(default_factory=list)
    leaders: Dict[str, Optional[StatLeader]] = field(default_factory=dict)
    totals: Dict[str, int] = field(default_factory=dict)
