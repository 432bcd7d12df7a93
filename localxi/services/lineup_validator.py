"""
Lineup validation service for ensuring lineup integrity before saving.

Each rule checks one invariant of the lineup. Rules run in a fixed order and
validation stops at the first failure, so the user always sees the single
most relevant message.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Set

from ..models import FormationTemplate, Lineup
from ..utils.constants import MAX_RATING, MIN_RATING

MSG_NO_FORMATION = "Select a formation first."
MSG_CAPTAIN_WITHOUT_PLAYER = "Captain must have a player assigned."
MSG_DUPLICATE_PLAYER = "A player can only be assigned once in the lineup."
MSG_RATING_RANGE = "Ratings must be between 0 and 10."
MSG_NEGATIVE_STAT = "Match stats cannot be negative."


class ValidationResult:
    """Result of a validation operation with success status and error messages."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[str]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str) -> None:
        """Add an error message and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    @property
    def message(self) -> str:
        """First error message, or an empty string when valid."""
        return self.errors[0] if self.errors else ""

    def __bool__(self) -> bool:
        return self.is_valid

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors!r})"


class ValidationRule(ABC):
    """Abstract base class for lineup validation rules."""

    @abstractmethod
    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        """Perform validation and return result."""
        pass


class FormationSelectedRule(ValidationRule):
    """A lineup needs a formation before anything else can be checked."""

    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        result = ValidationResult()
        if template is None or lineup.formation_id is None:
            result.add_error(MSG_NO_FORMATION)
        return result


class CaptainRule(ValidationRule):
    """The captain flag can only sit on an occupied slot."""

    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        result = ValidationResult()
        for slot in lineup.slots.values():
            if slot.is_captain and slot.assigned_player_id is None:
                result.add_error(MSG_CAPTAIN_WITHOUT_PLAYER)
                break
        return result


class UniquePlayerRule(ValidationRule):
    """No player may fill two slots."""

    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        result = ValidationResult()
        seen: Set[int] = set()
        for player_id in lineup.assigned_player_ids():
            if player_id in seen:
                result.add_error(MSG_DUPLICATE_PLAYER)
                break
            seen.add(player_id)
        return result


class RatingRangeRule(ValidationRule):
    """Ratings stay on the 0-10 scale."""

    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        result = ValidationResult()
        for slot in lineup.slots.values():
            if slot.rating is not None and not (MIN_RATING <= slot.rating <= MAX_RATING):
                result.add_error(MSG_RATING_RANGE)
                break
        return result


class StatRangeRule(ValidationRule):
    """Stat counters are never negative."""

    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        result = ValidationResult()
        for stat in lineup.player_stats.values():
            if any(value is not None and value < 0 for value in stat.counters().values()):
                result.add_error(MSG_NEGATIVE_STAT)
                break
        return result


DEFAULT_RULES = (
    FormationSelectedRule(),
    CaptainRule(),
    UniquePlayerRule(),
    RatingRangeRule(),
    StatRangeRule(),
)


class LineupValidationService:
    """
    Runs the lineup rules in order and stops at the first violation.
    """

    def __init__(self, rules: Optional[List[ValidationRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def validate(self, lineup: Lineup, template: Optional[FormationTemplate]) -> ValidationResult:
        """
        Validate a lineup against its formation.

        Args:
            lineup: Working lineup
            template: Selected formation, or None when none is selected

        Returns:
            The first failing rule's result, or a successful result
        """
        for rule in self.rules:
            result = rule.validate(lineup, template)
            if not result.is_valid:
                return result
        return ValidationResult()


def validate_template(template: FormationTemplate) -> ValidationResult:
    """
    Check a formation template before it is stored.

    Returns:
        ValidationResult carrying the first problem found
    """
    result = ValidationResult()
    if not template.name or not template.name.strip():
        result.add_error("Formation name is required.")
        return result
    if not template.shape or not template.shape.strip():
        result.add_error("Formation shape is required.")
        return result
    if not template.slots:
        result.add_error("Formation must include slots.")
        return result

    seen: Set[str] = set()
    for slot in template.slots:
        if not slot.slot_id or not slot.slot_id.strip():
            result.add_error("Each slot must include slotId.")
            return result
        if not slot.label or not slot.label.strip():
            result.add_error("Each slot must include position.")
            return result
        if slot.slot_id in seen:
            result.add_error("slotId must be unique within a formation.")
            return result
        seen.add(slot.slot_id)
    return result
