"""
Persistence service for the Local XI lineup manager.

This module handles loading and saving lineups per match. The JSON gateway
keeps one file per match; the in-memory gateway backs tests and previews.
"""
import json
import logging
import os
import re
from typing import Dict, List, Optional, Protocol

from ..models import Lineup

logger = logging.getLogger(__name__)

_LINEUP_FILE_RE = re.compile(r"^match_(\d+)\.json$")


class GatewayError(Exception):
    """Raised when the storage layer rejects or fails a load or save."""
    pass


class LineupGateway(Protocol):
    """Load/save contract the lineup engine depends on."""

    def load_lineup(self, match_id: int) -> Optional[Lineup]:
        """Return the stored lineup, or None when the match has none yet."""
        ...

    def save_lineup(self, match_id: int, lineup: Lineup) -> Lineup:
        """Persist a lineup and return its canonical stored form."""
        ...

    def list_lineups(self) -> List[Lineup]:
        """Return every stored lineup, ordered by match id."""
        ...


def _check_match(match_id: int, lineup: Lineup) -> None:
    if lineup.match_id != match_id:
        raise GatewayError(
            f"Lineup belongs to match {lineup.match_id}, not match {match_id}"
        )
    if lineup.formation_id is None:
        raise GatewayError("formationId is required")


class JsonFileLineupGateway:
    """
    Store each match's lineup as a JSON file.

    Files live at ``{data_dir}/lineups/match_{match_id}.json``.
    """

    def __init__(self, data_dir: str):
        self.lineup_dir = os.path.join(data_dir, "lineups")

    def _path_for(self, match_id: int) -> str:
        return os.path.join(self.lineup_dir, f"match_{int(match_id)}.json")

    def load_lineup(self, match_id: int) -> Optional[Lineup]:
        """
        Load the lineup for a match.

        Returns:
            Lineup instance, or None if the match has no saved lineup

        Raises:
            GatewayError: If the file exists but cannot be read or parsed
        """
        file_path = self._path_for(match_id)
        if not os.path.exists(file_path):
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Lineup.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to load lineup for match %s: %s", match_id, e)
            raise GatewayError(f"Failed to load lineup for match {match_id}: {e}") from e

    def save_lineup(self, match_id: int, lineup: Lineup) -> Lineup:
        """
        Save a lineup, replacing any previous one for the match.

        Returns:
            The lineup as read back from storage

        Raises:
            GatewayError: If the lineup is rejected or cannot be written
        """
        _check_match(match_id, lineup)
        file_path = self._path_for(match_id)
        temp_path = file_path + ".tmp"
        try:
            os.makedirs(self.lineup_dir, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(lineup.to_dict(), f, indent=2)
            os.replace(temp_path, file_path)
        except OSError as e:
            logger.error("Failed to save lineup for match %s: %s", match_id, e)
            raise GatewayError(f"Failed to save lineup for match {match_id}: {e}") from e

        logger.info("Saved lineup for match %s (%d slots)", match_id, len(lineup.slots))
        stored = self.load_lineup(match_id)
        if stored is None:
            raise GatewayError(f"Lineup for match {match_id} vanished after saving")
        return stored

    def lineup_summaries(self, match_ids: List[int]) -> List[Dict[str, Optional[int]]]:
        """Get ``{matchId, formationId}`` pairs for the matches that have a lineup."""
        summaries = []
        for match_id in match_ids:
            lineup = self.load_lineup(match_id)
            if lineup is not None:
                summaries.append({"matchId": lineup.match_id, "formationId": lineup.formation_id})
        return summaries

    def list_lineups(self) -> List[Lineup]:
        """
        Load every stored lineup, ordered by match id.

        Raises:
            GatewayError: If the lineup directory or a stored file cannot be read
        """
        if not os.path.isdir(self.lineup_dir):
            return []
        try:
            names = os.listdir(self.lineup_dir)
        except OSError as e:
            logger.error("Failed to list lineups in %s: %s", self.lineup_dir, e)
            raise GatewayError(f"Failed to list lineups: {e}") from e

        match_ids = []
        for name in names:
            match = _LINEUP_FILE_RE.match(name)
            if match:
                match_ids.append(int(match.group(1)))

        lineups = []
        for match_id in sorted(match_ids):
            lineup = self.load_lineup(match_id)
            if lineup is not None:
                lineups.append(lineup)
        return lineups


class InMemoryLineupGateway:
    """Gateway that keeps serialized lineups in a dictionary."""

    def __init__(self) -> None:
        self._store: Dict[int, dict] = {}

    def load_lineup(self, match_id: int) -> Optional[Lineup]:
        data = self._store.get(int(match_id))
        return Lineup.from_dict(data) if data is not None else None

    def save_lineup(self, match_id: int, lineup: Lineup) -> Lineup:
        _check_match(match_id, lineup)
        self._store[int(match_id)] = lineup.to_dict()
        logger.debug("Stored lineup for match %s in memory", match_id)
        return Lineup.from_dict(self._store[int(match_id)])

    def lineup_summaries(self, match_ids: List[int]) -> List[Dict[str, Optional[int]]]:
        return [
            {"matchId": int(m), "formationId": self._store[int(m)].get("formationId")}
            for m in match_ids
            if int(m) in self._store
        ]

    def list_lineups(self) -> List[Lineup]:
        return [Lineup.from_dict(self._store[m]) for m in sorted(self._store)]
