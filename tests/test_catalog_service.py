"""
Unit tests for the JSON roster and formation catalog.
"""
import json
import os
import tempfile
import shutil
import unittest

from localxi.models import LineupValidationError
from localxi.services.catalog_service import JsonCatalog
from localxi.services.persistence_service import GatewayError


class TestJsonCatalog(unittest.TestCase):
    """Test JsonCatalog functionality."""

    def setUp(self) -> None:
        """Set up a temporary data directory with a roster."""
        self.data_dir = tempfile.mkdtemp()
        players = [
            {"id": 9, "number": 9, "name": "Alessia Russo", "positions": ["ST"]},
            {"id": 1, "number": 1, "name": "Mary Earps", "positions": "gk"},
            {"id": 5, "number": 5, "name": "Alex Greenwood", "positions": "CB, LB"},
        ]
        with open(os.path.join(self.data_dir, "players.json"), "w", encoding="utf-8") as f:
            json.dump(players, f)
        self.catalog = JsonCatalog(self.data_dir)

    def tearDown(self) -> None:
        """Clean up the temporary directory."""
        shutil.rmtree(self.data_dir, ignore_errors=True)

    def test_players_sorted_by_shirt_number(self) -> None:
        """Test roster ordering and position parsing."""
        players = self.catalog.list_players()

        self.assertEqual([p.shirt_number for p in players], [1, 5, 9])
        self.assertEqual(players[0].eligible_positions, frozenset({"GK"}))
        self.assertTrue(players[1].can_play("lb"))

    def test_missing_files_mean_empty_catalog(self) -> None:
        """Test a fresh data directory."""
        empty_dir = os.path.join(self.data_dir, "fresh")
        catalog = JsonCatalog(empty_dir)

        self.assertEqual(catalog.list_players(), [])
        self.assertEqual(catalog.list_formations(), [])

    def test_add_formation_persists(self) -> None:
        """Test creating formations from shapes."""
        first = self.catalog.add_formation("Sunday", "4-4-2")
        second = self.catalog.add_formation("Away Day", "5 3 2")

        self.assertEqual((first.id, second.id), (1, 2))
        self.assertEqual(second.shape, "5-3-2")
        self.assertEqual([f.name for f in self.catalog.list_formations()], ["Away Day", "Sunday"])

        reloaded = JsonCatalog(self.data_dir)
        self.assertEqual(reloaded.get_formation(2), second)

    def test_add_formation_rejects_bad_shape(self) -> None:
        """Test shape errors surface as validation errors and nothing is stored."""
        with self.assertRaises(LineupValidationError) as ctx:
            self.catalog.add_formation("Broken", "4-4-1")
        self.assertIn("Yours adds to 9", str(ctx.exception))
        self.assertEqual(self.catalog.list_formations(), [])

    def test_add_preset(self) -> None:
        """Test storing a preset formation."""
        formation = self.catalog.add_preset("4-3-3")

        self.assertEqual(formation.name, "4-3-3")
        self.assertEqual(formation.label_for("ATT-3"), "RW")
        with self.assertRaises(LineupValidationError):
            self.catalog.add_preset("6-3-1")

    def test_rename_slot_persists(self) -> None:
        """Test relabelling a stored formation."""
        formation = self.catalog.add_formation("Sunday", "4-4-2")

        self.catalog.rename_slot(formation.id, "MID-2", "CDM")

        reloaded = JsonCatalog(self.data_dir)
        self.assertEqual(reloaded.get_formation(formation.id).label_for("MID-2"), "CDM")
        self.assertEqual(reloaded.get_formation(formation.id).slot_ids, formation.slot_ids)

    def test_rename_slot_unknown_formation(self) -> None:
        """Test relabelling a formation that does not exist."""
        with self.assertRaises(LineupValidationError):
            self.catalog.rename_slot(99, "GK-1", "GK")

    def test_corrupt_catalog_raises_gateway_error(self) -> None:
        """Test unreadable catalog files."""
        with open(os.path.join(self.data_dir, "formations.json"), "w", encoding="utf-8") as f:
            f.write("[{")
        with self.assertRaises(GatewayError):
            JsonCatalog(self.data_dir)


if __name__ == "__main__":
    unittest.main()
