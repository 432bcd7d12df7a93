"""
Lineup models for the Local XI lineup manager.

This module contains the per-match lineup aggregate: one slot state per
formation slot plus per-player match statistics keyed by player id.
"""
from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..utils.constants import STAT_FIELDS, STAT_WIRE_NAMES
from ..utils.parsing import round_one_decimal


def _stored_rating(value: Any) -> Optional[float]:
    if value is None:
        return None
    rating = float(value)
    if not math.isfinite(rating):
        raise ValueError(f"Invalid rating {value!r}.")
    return round_one_decimal(rating)


@dataclass
class LineupSlotState:
    """
    Matchday state of a single formation slot.

    Attributes:
        slot_id: References ``FormationSlot.slot_id``
        assigned_player_id: Player in the slot, or None when empty
        is_captain: Whether the slot occupant wears the armband
        rating: Match rating 0.0-10.0 with one decimal, or None
    """
    slot_id: str
    assigned_player_id: Optional[int] = None
    is_captain: bool = False
    rating: Optional[float] = None

    @property
    def is_assigned(self) -> bool:
        return self.assigned_player_id is not None

    def clear(self) -> None:
        """Reset the slot to its empty state."""
        self.assigned_player_id = None
        self.is_captain = False
        self.rating = None

    def to_dict(self, label: Optional[str] = None) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            "slotId": self.slot_id,
            "playerId": self.assigned_player_id,
            "isCaptain": self.is_captain,
            "rating": self.rating,
        }
        if label is not None:
            data["pos"] = label
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LineupSlotState:
        """Create from dictionary for JSON deserialization."""
        player_id = data.get("playerId")
        rating = data.get("rating")
        return cls(
            slot_id=str(data["slotId"]).strip(),
            assigned_player_id=int(player_id) if player_id is not None else None,
            is_captain=bool(data.get("isCaptain", False)),
            rating=_stored_rating(rating),
        )


def _whole_number(value: Any) -> Optional[int]:
    """Read a stored counter; fractional or boolean values are rejected, never truncated."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid stat value {value!r}.")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Stat value {value!r} is not a whole number.")
        return int(value)
    return int(value)


@dataclass
class PlayerMatchStat:
    """Per-player match counters; every counter is optional and non-negative."""
    player_id: int
    goals: Optional[int] = None
    assists: Optional[int] = None
    yellow_cards: Optional[int] = None
    red_cards: Optional[int] = None

    def get(self, stat_field: str) -> Optional[int]:
        if stat_field not in STAT_FIELDS:
            raise KeyError(stat_field)
        return getattr(self, stat_field)

    def set(self, stat_field: str, value: Optional[int]) -> None:
        if stat_field not in STAT_FIELDS:
            raise KeyError(stat_field)
        setattr(self, stat_field, value)

    def counters(self) -> Dict[str, Optional[int]]:
        return {name: getattr(self, name) for name in STAT_FIELDS}

    def is_empty(self) -> bool:
        """True when every counter is None or zero."""
        return not any(self.counters().values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {"playerId": self.player_id}
        for name in STAT_FIELDS:
            data[STAT_WIRE_NAMES[name]] = getattr(self, name)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlayerMatchStat:
        """Create from dictionary for JSON deserialization."""
        stat = cls(player_id=int(data["playerId"]))
        for name in STAT_FIELDS:
            value = data.get(STAT_WIRE_NAMES[name])
            stat.set(name, _whole_number(value))
        return stat


def _stats_from_legacy_slots(raw_slots: Iterable[Mapping[str, Any]]) -> Dict[int, PlayerMatchStat]:
    """Sum stat counters that older payloads stored on slots into per-player records."""
    by_player: Dict[int, PlayerMatchStat] = {}
    for raw in raw_slots:
        player_id = raw.get("playerId")
        if player_id is None:
            continue
        wire_values = [raw.get(STAT_WIRE_NAMES[name]) for name in STAT_FIELDS]
        if all(value is None for value in wire_values):
            continue
        stat = by_player.setdefault(
            int(player_id),
            PlayerMatchStat(int(player_id), goals=0, assists=0, yellow_cards=0, red_cards=0),
        )
        for name, value in zip(STAT_FIELDS, wire_values):
            stat.set(name, stat.get(name) + max(0, _whole_number(value) or 0))
    return by_player


@dataclass
class Lineup:
    """
    The lineup persisted per match.

    Attributes:
        match_id: Match this lineup belongs to
        formation_id: Formation template the slots were built from (None until chosen)
        slots: Slot states keyed by slot id, in formation order
        player_stats: Match statistics keyed by player id
    """
    match_id: int
    formation_id: Optional[int] = None
    slots: Dict[str, LineupSlotState] = field(default_factory=dict)
    player_stats: Dict[int, PlayerMatchStat] = field(default_factory=dict)

    @property
    def slot_order(self) -> List[str]:
        return list(self.slots.keys())

    def slot_list(self) -> List[LineupSlotState]:
        return list(self.slots.values())

    def captain_slot(self) -> Optional[LineupSlotState]:
        for slot in self.slots.values():
            if slot.is_captain:
                return slot
        return None

    def slot_of_player(self, player_id: int) -> Optional[LineupSlotState]:
        """Find the slot a player currently occupies."""
        for slot in self.slots.values():
            if slot.assigned_player_id == player_id:
                return slot
        return None

    def assigned_player_ids(self) -> List[int]:
        return [s.assigned_player_id for s in self.slots.values() if s.assigned_player_id is not None]

    def stat_for(self, player_id: int) -> Optional[PlayerMatchStat]:
        return self.player_stats.get(player_id)

    def copy(self) -> Lineup:
        return copy.deepcopy(self)

    def to_dict(self, labels: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Convert lineup to dictionary for JSON serialization.

        Args:
            labels: Optional slot id -> position label mapping; when given each
                slot carries a ``pos`` key
        """
        return {
            "matchId": self.match_id,
            "formationId": self.formation_id,
            "slots": [
                slot.to_dict(labels.get(slot_id, "") if labels is not None else None)
                for slot_id, slot in self.slots.items()
            ],
            "playerStats": [stat.to_dict() for stat in self.player_stats.values()],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Lineup:
        """
        Create lineup from dictionary for JSON deserialization.

        Payloads without a ``playerStats`` block but with counters on the slots
        are converted into per-player records.
        """
        raw_slots = data.get("slots") or []
        slots: Dict[str, LineupSlotState] = {}
        for raw in raw_slots:
            state = LineupSlotState.from_dict(raw)
            slots[state.slot_id] = state

        raw_stats = data.get("playerStats")
        if raw_stats:
            player_stats = {}
            for raw in raw_stats:
                stat = PlayerMatchStat.from_dict(raw)
                player_stats[stat.player_id] = stat
        else:
            player_stats = _stats_from_legacy_slots(raw_slots)

        formation_id = data.get("formationId")
        return cls(
            match_id=int(data["matchId"]),
            formation_id=int(formation_id) if formation_id is not None else None,
            slots=slots,
            player_stats=player_stats,
        )
