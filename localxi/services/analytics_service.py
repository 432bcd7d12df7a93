"""Derived statistics for lineups: ratings, player of the match, stat leaders."""

from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, List, Optional

from ..models import (
    FormationTemplate, Lineup, LineupReport, LineupSlotState, RosterPlayer, SlotSummary,
    StatLeader
)
from ..utils.constants import STAT_ALIASES, STAT_FIELDS, STAT_WIRE_NAMES, UNKNOWN_PLAYER_LABEL
from ..utils.parsing import round_one_decimal


def _potm_sort_key(slot: LineupSlotState):
    # highest rating, then the captain, then slot id ascending
    return (-(slot.rating or 0.0), not slot.is_captain, slot.slot_id)


class LineupAnalytics:
    """
    Read-only views over a lineup and the roster.

    Nothing here mutates the lineup; every method can be called at any time
    during editing.
    """

    def __init__(
        self,
        lineup: Lineup,
        roster: Iterable[RosterPlayer],
        template: Optional[FormationTemplate] = None,
    ) -> None:
        self.lineup = lineup
        self.template = template
        self._roster: Dict[int, RosterPlayer] = {player.id: player for player in roster}

    # ---------- Labels ---------- #

    def player_label(self, player_id: Optional[int]) -> str:
        """Display name for a player id; ids missing from the roster render as unknown."""
        if player_id is None:
            return "-"
        player = self._roster.get(player_id)
        if player is None:
            return UNKNOWN_PLAYER_LABEL
        return player.display_name

    def _label_for(self, slot_id: str) -> str:
        return self.template.label_for(slot_id) if self.template else ""

    # ---------- Aggregates ---------- #

    def _assigned_slots(self) -> List[LineupSlotState]:
        return [slot for slot in self.lineup.slots.values() if slot.assigned_player_id is not None]

    def assigned_count(self) -> int:
        """Number of slots with a player in them."""
        return len(self._assigned_slots())

    def average_rating(self) -> Optional[float]:
        """Mean of all slot ratings to one decimal, or None if nothing is rated."""
        ratings = [slot.rating for slot in self.lineup.slots.values() if slot.rating is not None]
        if not ratings:
            return None
        return round_one_decimal(sum(ratings) / len(ratings))

    def player_of_the_match(self) -> Optional[LineupSlotState]:
        """
        Highest-rated occupied slot.

        Ties go to the captain's slot, then to the lowest slot id.
        """
        rated = [slot for slot in self._assigned_slots() if slot.rating is not None]
        if not rated:
            return None
        return min(rated, key=_potm_sort_key)

    def _assigned_stats(self):
        for slot in self._assigned_slots():
            stat = self.lineup.player_stats.get(slot.assigned_player_id)
            if stat is not None:
                yield slot.assigned_player_id, stat

    def leader_for(self, stat_field: str) -> Optional[StatLeader]:
        """
        Assigned player with the most of one stat.

        Only positive counts qualify. On a tie the player in the earliest
        slot wins. Wire spellings such as ``"yellowCards"`` are accepted.
        """
        if stat_field not in STAT_ALIASES:
            raise KeyError(stat_field)
        stat_field = STAT_ALIASES[stat_field]
        best: Optional[StatLeader] = None
        for player_id, stat in self._assigned_stats():
            value = stat.get(stat_field) or 0
            if value > 0 and (best is None or value > best.value):
                best = StatLeader(
                    stat_field=stat_field,
                    player_id=player_id,
                    player_name=self.player_label(player_id),
                    value=value,
                )
        return best

    def totals(self) -> Dict[str, int]:
        """Sum of every stat counter across assigned players."""
        sums = {name: 0 for name in STAT_FIELDS}
        for _, stat in self._assigned_stats():
            for name in STAT_FIELDS:
                sums[name] += stat.get(name) or 0
        return sums

    # ---------- Reports ---------- #

    def generate_report(self) -> LineupReport:
        """Build a :class:`LineupReport` snapshot for the lineup."""
        potm = self.player_of_the_match()
        potm_slot_id = potm.slot_id if potm else None

        rows = [
            SlotSummary(
                slot_id=slot.slot_id,
                label=self._label_for(slot.slot_id),
                player_id=slot.assigned_player_id,
                player_name=self.player_label(slot.assigned_player_id),
                is_captain=slot.is_captain,
                rating=slot.rating,
                is_potm=slot.slot_id == potm_slot_id,
            )
            for slot in self.lineup.slots.values()
        ]

        return LineupReport(
            match_id=self.lineup.match_id,
            formation_id=self.lineup.formation_id,
            slot_count=len(self.lineup.slots),
            assigned_count=self.assigned_count(),
            average_rating=self.average_rating(),
            potm_slot_id=potm_slot_id,
            rows=rows,
            leaders={name: self.leader_for(name) for name in STAT_FIELDS},
            totals=self.totals(),
        )

    def generate_report_csv(self, report: Optional[LineupReport] = None) -> str:
        """Return a CSV document with the summary followed by one row per slot."""
        report = report or self.generate_report()

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")

        writer.writerow(["Lineup Report"])
        writer.writerow(["Match", report.match_id])
        writer.writerow(["Formation", report.formation_id if report.formation_id is not None else ""])
        writer.writerow(["Assigned", f"{report.assigned_count}/{report.slot_count}"])
        writer.writerow(["Average Rating", report.average_rating if report.average_rating is not None else ""])
        for name in STAT_FIELDS:
            writer.writerow([f"Total {name.replace('_', ' ').title()}", report.totals.get(name, 0)])
        writer.writerow([])

        writer.writerow(["Slot", "Position", "Player", "Captain", "Rating", "POTM"])
        for row in report.rows:
            writer.writerow(
                [
                    row.slot_id,
                    row.label,
                    row.player_name,
                    "yes" if row.is_captain else "no",
                    row.rating if row.rating is not None else "",
                    "yes" if row.is_potm else "no",
                ]
            )

        csv_text = buffer.getvalue()
        buffer.close()
        return csv_text


def season_totals(lineups: Iterable[Lineup]) -> Dict[int, Dict[str, int]]:
    """
    Sum each player's stat counters across many lineups.

    Returns:
        Mapping of player id to counter totals
    """
    totals: Dict[int, Dict[str, int]] = {}
    for lineup in lineups:
        for player_id, stat in lineup.player_stats.items():
            counters = totals.setdefault(player_id, {name: 0 for name in STAT_FIELDS})
            for name in STAT_FIELDS:
                counters[name] += stat.get(name) or 0
    return totals


def player_totals(lineups: Iterable[Lineup], player_id: int) -> Dict[str, int]:
    """
    Career counters for one player across stored lineups, in wire format.

    Players with no recorded stats get zeros.
    """
    counters = season_totals(lineups).get(player_id, {name: 0 for name in STAT_FIELDS})
    data: Dict[str, int] = {"playerId": player_id}
    for name in STAT_FIELDS:
        data[STAT_WIRE_NAMES[name]] = counters[name]
    return data
