"""
Constants for the Local XI lineup manager.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Local XI"

# Formation shape rules (goalkeeper is always added separately)
OUTFIELD_PLAYERS = 10
DEFAULT_SHAPE = "4-4-2"

# Rating scale for matchday ratings
MIN_RATING = 0.0
MAX_RATING = 10.0

# Per-player match stat counters, in display order
STAT_FIELDS = ("goals", "assists", "yellow_cards", "red_cards")

# Wire names for the stat counters (payloads use camelCase)
STAT_WIRE_NAMES = {
    "goals": "goals",
    "assists": "assists",
    "yellow_cards": "yellowCards",
    "red_cards": "redCards",
}

# Accepted spellings of each stat counter (python and wire names)
STAT_ALIASES = {name: name for name in STAT_FIELDS}
STAT_ALIASES.update({wire: name for name, wire in STAT_WIRE_NAMES.items()})

UNKNOWN_PLAYER_LABEL = "Unknown player"

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_DATA_DIR = "data"
