"""
Unit tests for lineup and formation validation.
"""
import unittest

from localxi.models import FormationPresets, FormationSlot, FormationTemplate, Lineup, LineupSlotState
from localxi.services.lineup_engine import merge_slots
from localxi.services.lineup_validator import (
    CaptainRule,
    LineupValidationService,
    ValidationResult,
    ValidationRule,
    validate_template,
)


class TestValidationResult(unittest.TestCase):
    """Test ValidationResult behaviour."""

    def test_add_error_marks_invalid(self) -> None:
        """Test adding errors."""
        result = ValidationResult()
        self.assertTrue(result)
        self.assertEqual(result.message, "")

        result.add_error("first")
        result.add_error("second")

        self.assertFalse(result)
        self.assertEqual(result.message, "first")


class TestLineupValidationService(unittest.TestCase):
    """Test rule ordering and custom rules."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.template = FormationPresets.create("4-3-3", 4)
        self.lineup = Lineup(match_id=1, formation_id=4, slots=merge_slots(self.template, None))

    def test_valid_empty_lineup(self) -> None:
        """Test an empty lineup with a formation is valid."""
        self.assertTrue(LineupValidationService().validate(self.lineup, self.template).is_valid)

    def test_custom_rules(self) -> None:
        """Test supplying a custom rule list."""

        class NeedsGoalkeeper(ValidationRule):
            def validate(self, lineup, template):
                result = ValidationResult()
                if lineup.slots["GK-1"].assigned_player_id is None:
                    result.add_error("Pick a goalkeeper.")
                return result

        service = LineupValidationService([CaptainRule(), NeedsGoalkeeper()])

        self.assertEqual(service.validate(self.lineup, self.template).message, "Pick a goalkeeper.")


class TestValidateTemplate(unittest.TestCase):
    """Test checks run before a formation is stored."""

    def test_valid_template(self) -> None:
        """Test a parsed formation passes."""
        self.assertTrue(validate_template(FormationTemplate.from_shape(1, "Park", "4-4-2")).is_valid)

    def test_problems_reported_in_order(self) -> None:
        """Test each structural problem."""
        cases = [
            (FormationTemplate(1, "", "4-4-2", [FormationSlot("GK-1", "GK")]), "Formation name is required."),
            (FormationTemplate(1, "Park", "", [FormationSlot("GK-1", "GK")]), "Formation shape is required."),
            (FormationTemplate(1, "Park", "4-4-2", []), "Formation must include slots."),
            (FormationTemplate(1, "Park", "4-4-2", [FormationSlot("", "GK")]), "Each slot must include slotId."),
            (FormationTemplate(1, "Park", "4-4-2", [FormationSlot("GK-1", " ")]), "Each slot must include position."),
            (
                FormationTemplate(1, "Park", "4-4-2", [FormationSlot("GK-1", "GK"), FormationSlot("GK-1", "SW")]),
                "slotId must be unique within a formation.",
            ),
        ]
        for template, message in cases:
            with self.subTest(message=message):
                self.assertEqual(validate_template(template).message, message)


def test_captain_on_empty_slot_is_invalid():
    template = FormationPresets.create("4-4-2", 1)
    lineup = Lineup(match_id=1, formation_id=1, slots=merge_slots(template, [LineupSlotState("GK-1", is_captain=True)]))

    result = LineupValidationService().validate(lineup, template)

    assert not result.is_valid
    assert result.errors == ["Captain must have a player assigned."]
