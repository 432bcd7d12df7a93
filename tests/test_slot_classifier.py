"""Tests for slot classification."""

import pytest

from localxi.services.slot_classifier import Lane, Line, SlotClass, classify, classify_lane, classify_line


@pytest.mark.parametrize(
    "label, line",
    [
        ("GK", Line.GOALKEEPER),
        ("LB", Line.DEFENSE),
        ("RCB", Line.DEFENSE),
        ("LWB", Line.DEFENSE),
        ("CDM", Line.DEFENSIVE_MID),
        ("DM", Line.DEFENSIVE_MID),
        ("CAM", Line.ATTACKING_MID),
        ("LM", Line.ATTACKING_MID),
        ("RM", Line.ATTACKING_MID),
        ("CM", Line.MIDFIELD),
        ("RCM", Line.MIDFIELD),
        ("ST", Line.ATTACK),
        ("LW", Line.ATTACK),
        ("CF", Line.ATTACK),
    ],
)
def test_known_labels(label, line):
    assert classify_line(label) is line


def test_labels_are_case_and_space_insensitive():
    assert classify(" lb ") == SlotClass(Line.DEFENSE, Lane.LEFT)


@pytest.mark.parametrize(
    "label, lane",
    [
        ("LB", Lane.LEFT),
        ("LCB", Lane.LEFT),
        ("LIBERO", Lane.LEFT),
        ("RW", Lane.RIGHT),
        ("RDM", Lane.RIGHT),
        ("CB", Lane.CENTER),
        ("ST", Lane.CENTER),
        ("GK", Lane.CENTER),
    ],
)
def test_lanes(label, lane):
    assert classify_lane(label) is lane


def test_unknown_label_falls_back_to_slot_id_tier():
    assert classify_line("DEF1", "DEF-1") is Line.DEFENSE
    assert classify_line("Sweeper", "DEF-3") is Line.DEFENSE
    assert classify_line("ATT2", "ATT-2") is Line.ATTACK
    assert classify_line("Keeper", "GK-1") is Line.GOALKEEPER


def test_label_wins_over_slot_id_tier():
    # a relabelled defender slot that now plays up front
    assert classify_line("ST", "DEF-4") is Line.ATTACK


def test_unrecognized_input_degrades_to_central_midfield():
    expected = SlotClass(Line.MIDFIELD, Lane.CENTER)

    assert classify("XYZ") == expected
    assert classify("") == expected
    assert classify(None) == expected
    assert classify(42) == expected
    assert classify("XYZ", "BENCH-1") == expected
