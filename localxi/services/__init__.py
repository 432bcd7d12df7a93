"""
Services package for the Local XI lineup manager.

This package contains service classes that handle business logic.
Includes factory for proper dependency injection.
"""
from .slot_classifier import Lane, Line, SlotClass, classify, classify_lane, classify_line
from .lineup_validator import LineupValidationService, ValidationResult, validate_template
from .persistence_service import GatewayError, InMemoryLineupGateway, JsonFileLineupGateway, LineupGateway
from .catalog_service import JsonCatalog
from .lineup_engine import LineupEngine, SaveResult, merge_slots
from .analytics_service import LineupAnalytics, player_totals, season_totals
from .pitch_layout import project
from .lineup_service import LineupService, choose_formation
from .service_factory import ServiceFactory

__all__ = [
    "Lane", "Line", "SlotClass", "classify", "classify_lane", "classify_line",
    "LineupValidationService", "ValidationResult", "validate_template",
    "GatewayError", "InMemoryLineupGateway", "JsonFileLineupGateway", "LineupGateway",
    "JsonCatalog", "LineupEngine", "SaveResult", "merge_slots",
    "LineupAnalytics", "player_totals", "season_totals", "project",
    "LineupService", "choose_formation", "ServiceFactory"
]
