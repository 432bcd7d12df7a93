"""
Local XI Lineup Manager

Builds matchday lineups for a local football club: formations made of stable
slots, player assignment with captaincy and ratings, per-player match stats
and derived views such as player of the match and pitch coordinates.

This package provides a Flask web interface over the lineup engine.
"""
from .models import FormationTemplate, Lineup, RosterPlayer
from .services import JsonCatalog, JsonFileLineupGateway, LineupAnalytics, LineupEngine
from .ui import create_app, run_web_app
from .utils import APP_TITLE, LineupConfig

__version__ = "1.0.0"

__all__ = [
    "FormationTemplate", "Lineup", "RosterPlayer",
    "JsonCatalog", "JsonFileLineupGateway", "LineupAnalytics", "LineupEngine",
    "create_app", "run_web_app", "APP_TITLE", "LineupConfig"
]
