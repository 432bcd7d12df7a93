"""
Roster player model for the Local XI lineup manager.

Players come from the roster provider and are read-only inside a lineup
session.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet


@dataclass(frozen=True)
class RosterPlayer:
    """
    A squad member available for selection.

    Attributes:
        id: Stable player identifier referenced by lineup slots and stats
        shirt_number: Unique shirt number (1-99)
        name: Player's full name
        eligible_positions: Position labels the player can fill (e.g. {"CB", "LB"})
    """
    id: int
    shirt_number: int
    name: str
    eligible_positions: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def display_name(self) -> str:
        """Name as shown on team sheets, e.g. ``"#9 Sam Kerr"``."""
        return f"#{self.shirt_number} {self.name}"

    def can_play(self, label: str) -> bool:
        """Check whether a position label is among the player's eligible positions."""
        return (label or "").strip().upper() in self.eligible_positions

    def to_dict(self) -> Dict[str, Any]:
        """Convert player to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "number": self.shirt_number,
            "name": self.name,
            "positions": sorted(self.eligible_positions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RosterPlayer":
        """Create player from dictionary for JSON deserialization."""
        positions = data.get("positions") or []
        if isinstance(positions, str):
            # legacy rosters store "ST,CM"
            positions = positions.split(",")
        return cls(
            id=int(data["id"]),
            shirt_number=int(data.get("number", 0)),
            name=data.get("name", ""),
            eligible_positions=frozenset(p.strip().upper() for p in positions if p.strip()),
        )
