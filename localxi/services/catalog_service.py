"""Roster and formation catalog backed by JSON files."""

from __future__ import annotations

import json
import logging
import os
from typing import Dict, List, Optional

from ..models import FormationPresets, FormationTemplate, LineupValidationError, RosterPlayer
from .lineup_validator import validate_template
from .persistence_service import GatewayError

logger = logging.getLogger(__name__)


class JsonCatalog:
    """
    Read-only roster provider and formation store.

    Players are read from ``players.json`` and formations from
    ``formations.json`` inside the data directory.
    """

    def __init__(self, data_dir: str):
        """
        Initialize the catalog.

        Args:
            data_dir: Directory holding the catalog files
        """
        self.data_dir = data_dir
        self.players_file = os.path.join(data_dir, "players.json")
        self.formations_file = os.path.join(data_dir, "formations.json")

        self._players: Dict[int, RosterPlayer] = {}
        self._formations: Dict[int, FormationTemplate] = {}

        self._load_data()

    # ---------- Providers ---------- #

    def list_players(self) -> List[RosterPlayer]:
        """Get the roster ordered by shirt number."""
        return sorted(self._players.values(), key=lambda p: (p.shirt_number, p.id))

    def list_formations(self) -> List[FormationTemplate]:
        """Get all formations ordered by name."""
        return sorted(self._formations.values(), key=lambda f: (f.name.lower(), f.id))

    def get_formation(self, formation_id: int) -> Optional[FormationTemplate]:
        return self._formations.get(formation_id)

    # ---------- Formation Management ---------- #

    def add_formation(self, name: str, shape: str) -> FormationTemplate:
        """
        Create a formation from a shape string and store it.

        Raises:
            LineupValidationError: If the name or shape is invalid
        """
        formation = FormationTemplate.from_shape(self._next_formation_id(), name, shape)
        return self._store(formation)

    def add_preset(self, shape: str, name: Optional[str] = None) -> FormationTemplate:
        """Store one of the hand-labelled preset formations."""
        formation = FormationPresets.create(shape, self._next_formation_id(), name)
        if formation is None:
            raise LineupValidationError(f"No preset for shape '{shape}'.")
        return self._store(formation)

    def rename_slot(self, formation_id: int, slot_id: str, label: str) -> FormationTemplate:
        """
        Relabel one slot of a stored formation.

        Raises:
            LineupValidationError: If the formation or slot is unknown or the label blank
        """
        formation = self._formations.get(formation_id)
        if formation is None:
            raise LineupValidationError(f"Formation {formation_id} not found.")
        formation.rename_slot(slot_id, label)
        self._save_data()
        return formation

    def _store(self, formation: FormationTemplate) -> FormationTemplate:
        result = validate_template(formation)
        if not result.is_valid:
            raise LineupValidationError(result.message)
        self._formations[formation.id] = formation
        self._save_data()
        logger.info("Created formation %s '%s' (%s)", formation.id, formation.name, formation.shape)
        return formation

    def _next_formation_id(self) -> int:
        return max(self._formations.keys(), default=0) + 1

    # ---------- Data Persistence ---------- #

    def _load_data(self) -> None:
        """Load catalog files; a missing file means an empty list."""
        players = self._read_json(self.players_file)
        self._players = {}
        for raw in players:
            player = RosterPlayer.from_dict(raw)
            self._players[player.id] = player

        formations = self._read_json(self.formations_file)
        self._formations = {}
        for raw in formations:
            formation = FormationTemplate.from_dict(raw)
            self._formations[formation.id] = formation

    def _save_data(self) -> None:
        """Write formations back to disk."""
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            with open(self.formations_file, "w", encoding="utf-8") as f:
                json.dump([formation.to_dict() for formation in self.list_formations()], f, indent=2)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.formations_file, e)
            raise GatewayError(f"Failed to save formations: {e}") from e

    @staticmethod
    def _read_json(file_path: str) -> list:
        if not os.path.exists(file_path):
            return []
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f) or []
        except (OSError, ValueError) as e:
            logger.error("Failed to read %s: %s", file_path, e)
            raise GatewayError(f"Failed to read {os.path.basename(file_path)}: {e}") from e
