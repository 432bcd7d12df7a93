"""
Lineup editing sessions.

Ties the engine to its collaborators: the roster/formation providers and the
persistence gateway. One session exists per match being edited.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol

from ..models import FormationTemplate, LineupValidationError, RosterPlayer, normalize_shape
from ..utils.config import LineupConfig
from .analytics_service import LineupAnalytics, player_totals
from .lineup_engine import LineupEngine, SaveResult
from .persistence_service import LineupGateway
from .pitch_layout import project

logger = logging.getLogger(__name__)


class CatalogProvider(Protocol):
    """Read-only roster and formation provider."""

    def list_players(self) -> List[RosterPlayer]:
        ...

    def list_formations(self) -> List[FormationTemplate]:
        ...


def choose_formation(
    formations: List[FormationTemplate],
    persisted_formation_id: Optional[int],
    default_shape: Optional[str],
) -> Optional[FormationTemplate]:
    """
    Pick the formation a session opens with.

    The saved lineup's formation wins; otherwise the first formation (by name)
    with the configured default shape; otherwise the first formation by name.
    """
    ordered = sorted(formations, key=lambda f: (f.name.lower(), f.id))
    if persisted_formation_id is not None:
        for formation in ordered:
            if formation.id == persisted_formation_id:
                return formation
        logger.warning("Saved formation %s no longer exists", persisted_formation_id)
    if default_shape:
        wanted = normalize_shape(default_shape)
        for formation in ordered:
            if formation.shape == wanted:
                return formation
    return ordered[0] if ordered else None


class LineupService:
    """
    Opens, edits and saves per-match lineup sessions.
    """

    def __init__(self, catalog: CatalogProvider, gateway: LineupGateway, config: LineupConfig):
        self.catalog = catalog
        self.gateway = gateway
        self.config = config
        self._sessions: Dict[int, LineupEngine] = {}

    def open_session(self, match_id: int, reload: bool = False) -> LineupEngine:
        """
        Get the editing session for a match, creating it on first use.

        Args:
            match_id: Match to edit
            reload: Discard any working state and rebuild from storage

        Raises:
            GatewayError: If the stored lineup cannot be loaded
        """
        if not reload and match_id in self._sessions:
            return self._sessions[match_id]

        persisted = self.gateway.load_lineup(match_id)
        formations = self.catalog.list_formations()
        template = choose_formation(
            formations,
            persisted.formation_id if persisted else None,
            self.config.default_shape,
        )

        engine = LineupEngine(match_id)
        engine.initialize(template, self.catalog.list_players(), persisted)
        self._sessions[match_id] = engine
        logger.info(
            "Opened lineup session for match %s (%s)",
            match_id, "saved lineup" if persisted else "new lineup",
        )
        return engine

    def close_session(self, match_id: int) -> None:
        self._sessions.pop(match_id, None)

    def change_formation(self, match_id: int, formation_id: int) -> LineupEngine:
        """
        Switch a session to another stored formation.

        Raises:
            LineupValidationError: If the formation does not exist
        """
        engine = self.open_session(match_id)
        for formation in self.catalog.list_formations():
            if formation.id == formation_id:
                engine.change_formation(formation)
                return engine
        raise LineupValidationError(f"Formation {formation_id} not found.")

    def save(self, match_id: int) -> SaveResult:
        """
        Validate and persist a session's lineup.

        A successful save closes the session; the next open rebuilds it from
        the stored lineup.
        """
        result = self.open_session(match_id).save(self.gateway)
        if result.success:
            self.close_session(match_id)
        return result

    def player_totals(self, player_id: int) -> Dict[str, int]:
        """
        Stat counters for one player summed over every stored lineup.

        Raises:
            GatewayError: If stored lineups cannot be read
        """
        return player_totals(self.gateway.list_lineups(), player_id)

    def analytics(self, engine: LineupEngine) -> LineupAnalytics:
        return LineupAnalytics(engine.lineup, engine.roster, engine.template)

    def pitch(self, engine: LineupEngine):
        """Pitch coordinates for a session, or an empty list without a formation."""
        if engine.template is None:
            return []
        return project(engine.template, engine.lineup.slots)
