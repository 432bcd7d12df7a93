"""
Unit tests for the lineup models.

Tests how stored and posted slot states and stat records are read.
"""
import unittest

import pytest

from localxi.models import Lineup, LineupSlotState, PlayerMatchStat


class TestSlotStateFromDict(unittest.TestCase):
    """Test reading one slot state."""

    def test_rating_rounded_half_up(self) -> None:
        """Test ratings keep one decimal, rounding halves up."""
        slot = LineupSlotState.from_dict({"slotId": "ATT-1", "playerId": 9, "rating": 7.55})
        self.assertEqual(slot.rating, 7.6)
        self.assertEqual(LineupSlotState.from_dict({"slotId": "GK-1", "rating": "6.04"}).rating, 6.0)

    def test_missing_rating_stays_empty(self) -> None:
        """Test a slot without a rating."""
        slot = LineupSlotState.from_dict({"slotId": " DEF-2 "})
        self.assertEqual(slot, LineupSlotState("DEF-2"))

    def test_non_finite_rating_rejected(self) -> None:
        """Test infinity and NaN are not accepted as ratings."""
        with self.assertRaises(ValueError):
            LineupSlotState.from_dict({"slotId": "ATT-1", "rating": "inf"})
        with self.assertRaises(ValueError):
            LineupSlotState.from_dict({"slotId": "ATT-1", "rating": float("nan")})


class TestPlayerMatchStatFromDict(unittest.TestCase):
    """Test reading one player's match counters."""

    def test_whole_numbers_accepted(self) -> None:
        """Test integral values, including 2.0 and numeric strings."""
        stat = PlayerMatchStat.from_dict({"playerId": 9, "goals": 2.0, "assists": "1", "yellowCards": None})
        self.assertEqual(stat, PlayerMatchStat(9, goals=2, assists=1))

    def test_fractional_values_rejected(self) -> None:
        """Test 1.5 goals is an error rather than one goal."""
        with self.assertRaises(ValueError):
            PlayerMatchStat.from_dict({"playerId": 9, "goals": 1.5})
        with self.assertRaises(ValueError):
            PlayerMatchStat.from_dict({"playerId": 9, "assists": "1.5"})
        with self.assertRaises(ValueError):
            PlayerMatchStat.from_dict({"playerId": 9, "redCards": True})


def test_legacy_slot_stats_reject_fractions():
    data = {
        "matchId": 4,
        "formationId": 1,
        "slots": [{"slotId": "ATT-1", "playerId": 9, "goals": 0.5}],
    }

    with pytest.raises(ValueError):
        Lineup.from_dict(data)
