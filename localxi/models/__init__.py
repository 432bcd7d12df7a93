"""
Models package for the Local XI lineup manager.

This package contains the core data models used throughout the application.
"""
from .formation import (
    FormationPresets, FormationSlot, FormationTemplate, LineupValidationError,
    build_slots, normalize_shape, parse_shape, shape_labels
)
from .player import RosterPlayer
from .lineup import Lineup, LineupSlotState, PlayerMatchStat
from .report import EligiblePlayer, LineupReport, PitchPosition, SlotSummary, StatLeader

__all__ = [
    "FormationPresets", "FormationSlot", "FormationTemplate", "LineupValidationError",
    "build_slots", "normalize_shape", "parse_shape", "shape_labels",
    "RosterPlayer", "Lineup", "LineupSlotState", "PlayerMatchStat",
    "EligiblePlayer", "LineupReport", "PitchPosition", "SlotSummary", "StatLeader"
]
