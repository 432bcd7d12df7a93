"""Formation template models for the Local XI lineup manager."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..utils.constants import OUTFIELD_PLAYERS


class LineupValidationError(Exception):
    """User-correctable validation error; the message is shown verbatim."""
    pass


# Label tables keyed by line count; anything else falls back to numbered labels
DEFENDER_LABELS: Dict[int, List[str]] = {
    3: ["LCB", "CB", "RCB"],
    4: ["LB", "LCB", "RCB", "RB"],
    5: ["LWB", "LCB", "CB", "RCB", "RWB"],
}

MIDFIELD_LABELS: Dict[int, List[str]] = {
    2: ["CM", "CM"],
    3: ["CM", "CM", "CM"],
    4: ["LM", "CM", "CM", "RM"],
    5: ["LM", "CM", "CM", "CM", "RM"],
}

ATTACKER_LABELS: Dict[int, List[str]] = {
    1: ["ST"],
    2: ["ST", "ST"],
    3: ["LW", "ST", "RW"],
}

_SEPARATOR_RE = re.compile(r"\s+")


@dataclass
class FormationSlot:
    """A stable positional slot; ``slot_id`` never changes, ``label`` may."""
    slot_id: str
    label: str

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {"slotId": self.slot_id, "position": self.label}

    @classmethod
    def from_dict(cls, data: Dict) -> FormationSlot:
        """Create from dictionary."""
        return cls(
            slot_id=str(data["slotId"]).strip(),
            label=str(data.get("position") or data.get("pos") or "").strip(),
        )


def normalize_shape(shape: Optional[str]) -> str:
    """Collapse whitespace runs to hyphens, e.g. ``"4 4 2"`` -> ``"4-4-2"``."""
    return _SEPARATOR_RE.sub("-", (shape or "").strip())


def parse_shape(shape: Optional[str]) -> List[int]:
    """
    Parse a shape string such as ``"4-4-2"`` into outfield line counts.

    Args:
        shape: Shape text; hyphens and whitespace both separate lines

    Returns:
        Line counts from defence to attack, e.g. ``[4, 4, 2]``

    Raises:
        LineupValidationError: If the shape is blank, has fewer than two lines,
            contains anything but positive integers, or does not add up to 10
    """
    normalized = normalize_shape(shape)
    if not normalized:
        raise LineupValidationError("Shape is required (e.g. 4-4-2).")

    tokens = [token for token in normalized.split("-") if token]
    if len(tokens) < 2:
        raise LineupValidationError("Shape must have at least 2 lines (e.g. 4-4-2).")

    counts = []
    for token in tokens:
        if not token.isdecimal() or int(token) <= 0:
            raise LineupValidationError(
                "Shape must be numbers like 4-4-2 (positive integers only)."
            )
        counts.append(int(token))

    total = sum(counts)
    if total != OUTFIELD_PLAYERS:
        raise LineupValidationError(
            f"Shape must add up to {OUTFIELD_PLAYERS} outfield players. Yours adds to {total}."
        )
    return counts


def _labels_for(count: int, table: Dict[int, List[str]], fallback_prefix: str) -> List[str]:
    if count in table:
        return list(table[count])
    return [f"{fallback_prefix}{i + 1}" for i in range(count)]


def build_slots(counts: List[int]) -> List[FormationSlot]:
    """
    Expand parsed line counts into formation slots.

    The first count is the defence, the last the attack, and every count in
    between is merged into one midfield band. A goalkeeper slot always comes
    first. Slot ids take the form ``"{tier}-{ordinal}"``.
    """
    if len(counts) < 2:
        raise LineupValidationError("Shape must have at least 2 lines (e.g. 4-4-2).")

    def_count = counts[0]
    att_count = counts[-1]
    mid_count = sum(counts[1:-1])

    tiers = [
        ("GK", ["GK"]),
        ("DEF", _labels_for(def_count, DEFENDER_LABELS, "DEF")),
        ("MID", _labels_for(mid_count, MIDFIELD_LABELS, "MID")),
        ("ATT", _labels_for(att_count, ATTACKER_LABELS, "ATT")),
    ]

    slots = []
    for tier, labels in tiers:
        for ordinal, label in enumerate(labels, start=1):
            slots.append(FormationSlot(slot_id=f"{tier}-{ordinal}", label=label))
    return slots


def shape_labels(shape: str) -> List[str]:
    """Ordered slot labels a shape string produces, goalkeeper first."""
    return [slot.label for slot in build_slots(parse_shape(shape))]


@dataclass
class FormationTemplate:
    """
    A named tactical shape made of ordered, stable slots.

    Attributes:
        id: Identifier used by lineups to reference this formation
        name: Display name, e.g. "Cup Final XI"
        shape: Normalized shape string, e.g. "4-4-2"
        slots: Ordered slots; count and ids are fixed after creation
    """
    id: int
    name: str
    shape: str
    slots: List[FormationSlot] = field(default_factory=list)

    @classmethod
    def from_shape(cls, formation_id: int, name: str, shape: str) -> FormationTemplate:
        """
        Create a formation by parsing a shape string.

        Raises:
            LineupValidationError: If the name is blank or the shape is invalid
        """
        if not name or not name.strip():
            raise LineupValidationError("Formation name is required.")
        counts = parse_shape(shape)
        return cls(
            id=formation_id,
            name=name.strip(),
            shape=normalize_shape(shape),
            slots=build_slots(counts),
        )

    @property
    def slot_ids(self) -> List[str]:
        return [slot.slot_id for slot in self.slots]

    def get_slot(self, slot_id: str) -> Optional[FormationSlot]:
        """Get a slot by its stable id."""
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot
        return None

    def label_for(self, slot_id: str) -> str:
        slot = self.get_slot(slot_id)
        return slot.label if slot else ""

    def rename_slot(self, slot_id: str, new_label: str) -> FormationSlot:
        """
        Relabel a slot without touching its id or the slot count.

        Raises:
            LineupValidationError: If the label is blank or the slot is unknown
        """
        label = (new_label or "").strip()
        if not label:
            raise LineupValidationError("Slot label cannot be blank.")
        slot = self.get_slot(slot_id)
        if slot is None:
            raise LineupValidationError(f"Unknown slot '{slot_id}'.")
        slot.label = label
        return slot

    def to_dict(self) -> Dict:
        """Convert formation to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "shape": self.shape,
            "slots": [slot.to_dict() for slot in self.slots],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> FormationTemplate:
        """Create formation from dictionary."""
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            shape=data.get("shape", ""),
            slots=[FormationSlot.from_dict(slot) for slot in data.get("slots") or []],
        )


# Hand-labelled presets offered alongside shape parsing
PRESET_SLOTS: Dict[str, List[tuple]] = {
    "4-4-2": [
        ("GK-1", "GK"),
        ("DEF-1", "LB"), ("DEF-2", "CB"), ("DEF-3", "CB"), ("DEF-4", "RB"),
        ("MID-1", "LM"), ("MID-2", "CM"), ("MID-3", "CM"), ("MID-4", "RM"),
        ("ATT-1", "ST"), ("ATT-2", "ST"),
    ],
    "4-3-3": [
        ("GK-1", "GK"),
        ("DEF-1", "LB"), ("DEF-2", "CB"), ("DEF-3", "CB"), ("DEF-4", "RB"),
        ("MID-1", "CM"), ("MID-2", "CM"), ("MID-3", "CM"),
        ("ATT-1", "LW"), ("ATT-2", "ST"), ("ATT-3", "RW"),
    ],
    "4-2-3-1": [
        ("GK-1", "GK"),
        ("DEF-1", "LB"), ("DEF-2", "CB"), ("DEF-3", "CB"), ("DEF-4", "RB"),
        ("MID-1", "LM"), ("MID-2", "CDM"), ("MID-3", "CAM"), ("MID-4", "CDM"), ("MID-5", "RM"),
        ("ATT-1", "ST"),
    ],
}


class FormationPresets:
    """Pre-defined formations with hand-picked labels."""

    @staticmethod
    def names() -> List[str]:
        return list(PRESET_SLOTS.keys())

    @staticmethod
    def create(shape: str, formation_id: int, name: Optional[str] = None) -> Optional[FormationTemplate]:
        """Create a preset formation, or None if the shape has no preset."""
        preset = PRESET_SLOTS.get(normalize_shape(shape))
        if preset is None:
            return None
        return FormationTemplate(
            id=formation_id,
            name=(name or normalize_shape(shape)).strip(),
            shape=normalize_shape(shape),
            slots=[FormationSlot(slot_id=slot_id, label=label) for slot_id, label in preset],
        )
