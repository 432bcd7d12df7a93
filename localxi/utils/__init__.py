"""
Utilities package for the Local XI lineup manager.

This package contains constants, configuration and input parsing helpers.
"""
from .constants import (
    APP_TITLE, DEFAULT_SHAPE, OUTFIELD_PLAYERS, STAT_FIELDS, STAT_WIRE_NAMES,
    UNKNOWN_PLAYER_LABEL
)
from .config import LineupConfig
from .parsing import ParseRejection, clamp_rating, parse_rating, parse_stat, round_one_decimal

__all__ = [
    "APP_TITLE", "DEFAULT_SHAPE", "OUTFIELD_PLAYERS", "STAT_FIELDS", "STAT_WIRE_NAMES",
    "UNKNOWN_PLAYER_LABEL", "LineupConfig", "ParseRejection", "clamp_rating",
    "parse_rating", "parse_stat", "round_one_decimal"
]
