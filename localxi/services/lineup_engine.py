"""
Lineup assignment engine for the Local XI lineup manager.

The engine owns one match's working lineup: it maps formation slots to
players, captaincy and ratings, records per-player match stats, and keeps the
mapping consistent when the formation changes. Every operation either applies
fully or leaves the lineup untouched.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..models import (
    EligiblePlayer, FormationTemplate, Lineup, LineupSlotState, PlayerMatchStat, RosterPlayer
)
from ..utils.constants import STAT_ALIASES
from ..utils.parsing import ParseRejection, parse_rating, parse_stat
from .lineup_validator import LineupValidationService, ValidationResult
from .persistence_service import LineupGateway

logger = logging.getLogger(__name__)


def merge_slots(
    template: FormationTemplate,
    existing: Union[Mapping[str, LineupSlotState], Iterable[LineupSlotState], None],
) -> Dict[str, LineupSlotState]:
    """
    Build slot states for a template, carrying over prior state by slot id.

    Slots of the template with no prior state start empty; prior states whose
    slot id is not in the template are dropped. Only the first captain found
    keeps the armband.

    Args:
        template: Formation whose slots define the result
        existing: Prior slot states, keyed by slot id or as a sequence

    Returns:
        Slot states keyed by slot id, in template order
    """
    if existing is None:
        by_id: Mapping[str, LineupSlotState] = {}
    elif isinstance(existing, Mapping):
        by_id = existing
    else:
        by_id = {state.slot_id: state for state in existing}

    merged: Dict[str, LineupSlotState] = {}
    captain_taken = False
    for slot in template.slots:
        prev = by_id.get(slot.slot_id)
        if prev is None:
            merged[slot.slot_id] = LineupSlotState(slot_id=slot.slot_id)
            continue
        is_captain = bool(prev.is_captain) and not captain_taken
        captain_taken = captain_taken or is_captain
        merged[slot.slot_id] = LineupSlotState(
            slot_id=slot.slot_id,
            assigned_player_id=prev.assigned_player_id,
            is_captain=is_captain,
            rating=prev.rating,
        )
    return merged


@dataclass
class SaveResult:
    """Outcome of a save attempt."""
    success: bool
    error: str = ""
    lineup: Optional[Lineup] = None


class LineupEngine:
    """
    Working state for editing one match's lineup.

    Holds the lineup aggregate, the selected formation, a roster snapshot and
    the ephemeral selection state used by click-to-place interactions.
    """

    def __init__(self, match_id: int, validation_service: Optional[LineupValidationService] = None):
        """
        Initialize an engine for a match.

        Args:
            match_id: Match whose lineup is being edited
            validation_service: Optional custom validation service
        """
        self.match_id = match_id
        self.validation_service = validation_service or LineupValidationService()
        self.template: Optional[FormationTemplate] = None
        self.lineup = Lineup(match_id=match_id)
        self._roster: Dict[int, RosterPlayer] = {}

        # selection state, never persisted
        self.armed_player_id: Optional[int] = None
        self.selected_slot_id: Optional[str] = None

        self._save_lock = threading.Lock()

    # ---------- Setup ---------- #

    def initialize(
        self,
        template: Optional[FormationTemplate],
        roster: Iterable[RosterPlayer],
        persisted: Optional[Lineup] = None,
    ) -> Lineup:
        """
        Build the working lineup from a formation, roster and optional saved lineup.

        Saved slot states are merged into the current template by slot id, so
        relabelled slots keep their players. Saved match stats are kept as-is.
        """
        self._roster = {player.id: player for player in roster}
        self.template = template
        self.clear_selection()

        player_stats: Dict[int, PlayerMatchStat] = {}
        existing = None
        if persisted is not None:
            existing = persisted.slots
            player_stats = {pid: PlayerMatchStat(**vars(stat)) for pid, stat in persisted.player_stats.items()}

        self.lineup = Lineup(
            match_id=self.match_id,
            formation_id=template.id if template is not None else None,
            slots=merge_slots(template, existing) if template is not None else {},
            player_stats=player_stats,
        )
        logger.debug(
            "Initialized lineup for match %s with formation %s",
            self.match_id, self.lineup.formation_id,
        )
        return self.lineup

    def change_formation(self, template: FormationTemplate) -> Lineup:
        """
        Switch to another formation, keeping players whose slot ids both share.

        Every other slot resets to empty. Match stats are untouched.
        """
        self.lineup.slots = merge_slots(template, self.lineup.slots)
        self.lineup.formation_id = template.id
        self.template = template
        self.clear_selection()
        logger.info("Match %s switched to formation %s (%s)", self.match_id, template.id, template.shape)
        return self.lineup

    # ---------- Lookups ---------- #

    @property
    def roster(self) -> List[RosterPlayer]:
        """Roster ordered by shirt number."""
        return sorted(self._roster.values(), key=lambda p: (p.shirt_number, p.id))

    def player(self, player_id: Optional[int]) -> Optional[RosterPlayer]:
        if player_id is None:
            return None
        return self._roster.get(player_id)

    def slot(self, slot_id: str) -> Optional[LineupSlotState]:
        return self.lineup.slots.get(slot_id)

    def label_for(self, slot_id: str) -> str:
        return self.template.label_for(slot_id) if self.template else ""

    def _require_slot(self, slot_id: str) -> Optional[LineupSlotState]:
        state = self.lineup.slots.get(slot_id)
        if state is None:
            logger.warning("Ignoring operation on unknown slot %r for match %s", slot_id, self.match_id)
        return state

    def eligible_players_for(self, slot_id: str) -> List[EligiblePlayer]:
        """
        Roster as offered in a slot's selection list.

        Players occupying a different slot are disabled; the slot's own
        occupant stays selectable. Players whose listed positions do not
        include the slot label are flagged out of position.
        """
        current = self.lineup.slots.get(slot_id)
        label = self.label_for(slot_id)
        own_player = current.assigned_player_id if current else None
        taken = set(self.lineup.assigned_player_ids())
        return [
            EligiblePlayer(
                player_id=p.id,
                shirt_number=p.shirt_number,
                name=p.name,
                positions=sorted(p.eligible_positions),
                disabled=p.id != own_player and p.id in taken,
                out_of_position=bool(p.eligible_positions) and not p.can_play(label),
            )
            for p in self.roster
        ]

    def bench(self) -> List[RosterPlayer]:
        """Roster players not currently in any slot."""
        taken = set(self.lineup.assigned_player_ids())
        return [p for p in self.roster if p.id not in taken]

    # ---------- Slot Operations ---------- #

    def assign(self, slot_id: str, player_id: Optional[int]) -> Lineup:
        """
        Put a player in a slot, or empty it with None.

        Uniqueness is not checked here; :meth:`validate` rejects duplicates.
        """
        state = self._require_slot(slot_id)
        if state is not None:
            state.assigned_player_id = player_id
        return self.lineup

    def set_captain(self, slot_id: str) -> Lineup:
        """Toggle captaincy on a slot; at most one slot ever holds it."""
        state = self._require_slot(slot_id)
        if state is None:
            return self.lineup
        make_captain = not state.is_captain
        for other in self.lineup.slots.values():
            other.is_captain = False
        state.is_captain = make_captain
        return self.lineup

    def set_rating(self, slot_id: str, raw_input: Optional[str]) -> Lineup:
        """
        Set a slot's rating from typed input.

        Blank input clears the rating; input that is not a number is ignored.
        """
        state = self._require_slot(slot_id)
        if state is None:
            return self.lineup
        try:
            state.rating = parse_rating(raw_input)
        except ParseRejection:
            # TODO: surface an inline hint once the editor has a place for field-level messages
            logger.debug("Ignored rating input %r for slot %s", raw_input, slot_id)
        return self.lineup

    def record_stat(self, player_id: int, stat_field: str, raw_input: Optional[str]) -> Lineup:
        """
        Record a match stat against a player (not a slot).

        Blank input clears the counter; anything but a non-negative whole
        number is ignored.
        """
        name = STAT_ALIASES.get(stat_field)
        if name is None:
            logger.warning("Ignoring unknown stat field %r", stat_field)
            return self.lineup
        try:
            value = parse_stat(raw_input)
        except ParseRejection:
            logger.debug("Ignored %s input %r for player %s", name, raw_input, player_id)
            return self.lineup
        stat = self.lineup.player_stats.setdefault(player_id, PlayerMatchStat(player_id=player_id))
        stat.set(name, value)
        return self.lineup

    def swap_slots(self, slot_id_a: str, slot_id_b: str) -> Lineup:
        """Exchange player, rating and captaincy between two slots."""
        a = self._require_slot(slot_id_a)
        b = self._require_slot(slot_id_b)
        if a is None or b is None or a is b:
            return self.lineup
        a.assigned_player_id, b.assigned_player_id = b.assigned_player_id, a.assigned_player_id
        a.rating, b.rating = b.rating, a.rating
        a.is_captain, b.is_captain = b.is_captain, a.is_captain
        return self.lineup

    def assign_bench_player(self, player_id: int, slot_id: str) -> Lineup:
        """
        Place a player directly into a slot.

        The slot's previous occupant goes to the bench. If the player was
        already in another slot, that slot is emptied.
        """
        target = self._require_slot(slot_id)
        if target is None:
            return self.lineup
        if target.assigned_player_id == player_id:
            return self.lineup
        previous = self.lineup.slot_of_player(player_id)
        if previous is not None:
            previous.clear()
        target.assigned_player_id = player_id
        return self.lineup

    # ---------- Selection ---------- #

    def arm_bench_player(self, player_id: int) -> None:
        """Pick up a bench player; the next slot click places them."""
        self.armed_player_id = player_id
        self.selected_slot_id = None

    def click_slot(self, slot_id: str) -> Lineup:
        """
        Handle a click on a slot.

        With a bench player armed the player is placed in the slot. Otherwise
        the first click selects the slot, a second click on the same slot
        deselects it, and a click on another slot swaps the two.
        """
        if slot_id not in self.lineup.slots:
            return self.lineup
        if self.armed_player_id is not None:
            player_id = self.armed_player_id
            self.clear_selection()
            return self.assign_bench_player(player_id, slot_id)
        if self.selected_slot_id is None:
            self.selected_slot_id = slot_id
        elif self.selected_slot_id == slot_id:
            self.selected_slot_id = None
        else:
            selected = self.selected_slot_id
            self.clear_selection()
            self.swap_slots(selected, slot_id)
        return self.lineup

    def clear_selection(self) -> None:
        self.armed_player_id = None
        self.selected_slot_id = None

    # ---------- Validation & Saving ---------- #

    def validate(self) -> ValidationResult:
        """Check the lineup, stopping at the first problem."""
        return self.validation_service.validate(self.lineup, self.template)

    def build_payload(self) -> Lineup:
        """
        Copy of the lineup as it should be stored.

        Stat records whose counters are all empty or zero are left out.
        """
        payload = self.lineup.copy()
        payload.player_stats = {
            pid: stat for pid, stat in payload.player_stats.items() if not stat.is_empty()
        }
        return payload

    def save(self, gateway: LineupGateway) -> SaveResult:
        """
        Validate and persist the lineup.

        Validation failures come back as an unsuccessful result and the
        gateway is not called. Gateway errors propagate unchanged; in both
        cases the working lineup is left as it was. Concurrent saves for this
        engine wait for the one in flight.
        """
        with self._save_lock:
            result = self.validate()
            if not result.is_valid:
                return SaveResult(success=False, error=result.message)

            stored = gateway.save_lineup(self.match_id, self.build_payload())
            logger.info(
                "Saved lineup for match %s: %d/%d slots filled",
                self.match_id, len(stored.assigned_player_ids()), len(stored.slots),
            )
            return SaveResult(success=True, lineup=stored)
