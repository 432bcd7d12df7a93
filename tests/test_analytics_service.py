"""Tests for lineup analytics and reporting."""

import csv
import io

import pytest

from localxi.models import FormationPresets, Lineup, PlayerMatchStat, RosterPlayer
from localxi.services.analytics_service import LineupAnalytics, player_totals, season_totals
from localxi.services.lineup_engine import merge_slots

ROSTER = [
    RosterPlayer(id=1, shirt_number=1, name="Mary Earps"),
    RosterPlayer(id=3, shirt_number=8, name="Georgia Stanway"),
    RosterPlayer(id=9, shirt_number=9, name="Alessia Russo"),
    RosterPlayer(id=11, shirt_number=11, name="Lauren Hemp"),
]


def make_lineup(**overrides):
    template = FormationPresets.create("4-4-2", 1)
    lineup = Lineup(match_id=5, formation_id=1, slots=merge_slots(template, None))
    for slot_id, values in overrides.items():
        slot = lineup.slots[slot_id.replace("_", "-")]
        for key, value in values.items():
            setattr(slot, key, value)
    return template, lineup


def test_empty_lineup():
    _, lineup = make_lineup()
    analytics = LineupAnalytics(lineup, ROSTER)

    assert analytics.assigned_count() == 0
    assert analytics.average_rating() is None
    assert analytics.player_of_the_match() is None
    assert analytics.leader_for("goals") is None
    assert analytics.totals() == {"goals": 0, "assists": 0, "yellow_cards": 0, "red_cards": 0}


def test_average_rating_rounds_half_up():
    _, lineup = make_lineup(
        GK_1={"assigned_player_id": 1, "rating": 7.0},
        ATT_1={"assigned_player_id": 9, "rating": 8.5},
    )

    assert LineupAnalytics(lineup, ROSTER).average_rating() == 7.8


def test_average_rating_counts_every_rated_slot():
    _, lineup = make_lineup(
        GK_1={"assigned_player_id": 1, "rating": 7.0},
        ATT_1={"assigned_player_id": 9, "rating": 8.0},
        DEF_1={"rating": 6.0},
    )

    analytics = LineupAnalytics(lineup, ROSTER)

    assert analytics.average_rating() == 7.0
    assert analytics.assigned_count() == 2


def test_potm_tie_goes_to_captain():
    _, lineup = make_lineup(
        ATT_1={"assigned_player_id": 9, "rating": 8.0},
        MID_1={"assigned_player_id": 11, "rating": 8.0, "is_captain": True},
    )

    assert LineupAnalytics(lineup, ROSTER).player_of_the_match().slot_id == "MID-1"


def test_potm_tie_without_captain_uses_lowest_slot_id():
    _, lineup = make_lineup(
        MID_1={"assigned_player_id": 11, "rating": 8.0},
        ATT_1={"assigned_player_id": 9, "rating": 8.0},
    )

    assert LineupAnalytics(lineup, ROSTER).player_of_the_match().slot_id == "ATT-1"


def test_potm_ignores_unassigned_slots():
    _, lineup = make_lineup(
        DEF_1={"rating": 9.5},
        GK_1={"assigned_player_id": 1, "rating": 6.5},
    )

    assert LineupAnalytics(lineup, ROSTER).player_of_the_match().slot_id == "GK-1"


def test_leaders_and_totals_use_assigned_players_only():
    _, lineup = make_lineup(
        MID_1={"assigned_player_id": 11},
        ATT_1={"assigned_player_id": 9},
    )
    lineup.player_stats = {
        9: PlayerMatchStat(9, goals=2, yellow_cards=1),
        11: PlayerMatchStat(11, goals=2, assists=1),
        3: PlayerMatchStat(3, goals=5),
    }

    analytics = LineupAnalytics(lineup, ROSTER)
    leader = analytics.leader_for("goals")

    # tie between 9 and 11; MID-1 comes before ATT-1
    assert leader.player_id == 11
    assert leader.player_name == "#11 Lauren Hemp"
    assert leader.value == 2
    assert analytics.leader_for("red_cards") is None
    assert analytics.totals() == {"goals": 4, "assists": 1, "yellow_cards": 1, "red_cards": 0}


def test_leader_for_accepts_wire_names():
    _, lineup = make_lineup(ATT_1={"assigned_player_id": 9}, ATT_2={"assigned_player_id": 11})
    lineup.player_stats = {9: PlayerMatchStat(9, yellow_cards=1), 11: PlayerMatchStat(11, red_cards=1)}

    analytics = LineupAnalytics(lineup, ROSTER)

    assert analytics.leader_for("yellowCards") == analytics.leader_for("yellow_cards")
    assert analytics.leader_for("yellowCards").player_id == 9
    assert analytics.leader_for("redCards").stat_field == "red_cards"


def test_leader_for_unknown_field():
    _, lineup = make_lineup()
    with pytest.raises(KeyError):
        LineupAnalytics(lineup, ROSTER).leader_for("saves")


def test_dangling_player_renders_as_unknown():
    template, lineup = make_lineup(ATT_2={"assigned_player_id": 99, "rating": 7.0})

    report = LineupAnalytics(lineup, ROSTER, template).generate_report()
    row = next(r for r in report.rows if r.slot_id == "ATT-2")

    assert row.player_name == "Unknown player"
    assert row.label == "ST"
    assert row.is_potm
    assert report.potm_slot_id == "ATT-2"


def test_generate_report_summary():
    template, lineup = make_lineup(
        GK_1={"assigned_player_id": 1, "rating": 6.0},
        ATT_1={"assigned_player_id": 9, "rating": 9.0, "is_captain": True},
    )
    lineup.player_stats = {9: PlayerMatchStat(9, goals=1)}

    report = LineupAnalytics(lineup, ROSTER, template).generate_report()

    assert report.match_id == 5
    assert report.slot_count == 11
    assert report.assigned_count == 2
    assert report.average_rating == 7.5
    assert report.leaders["goals"].player_id == 9
    assert report.leaders["assists"] is None
    assert [r.player_name for r in report.rows][:2] == ["#1 Mary Earps", "-"]


def test_generate_report_csv_contains_slot_rows():
    template, lineup = make_lineup(
        ATT_1={"assigned_player_id": 9, "rating": 9.0, "is_captain": True},
    )
    lineup.player_stats = {9: PlayerMatchStat(9, goals=3)}

    csv_text = LineupAnalytics(lineup, ROSTER, template).generate_report_csv()
    rows = list(csv.reader(io.StringIO(csv_text)))

    assert rows[0] == ["Lineup Report"]
    assert ["Total Goals", "3"] in rows
    assert ["Average Rating", "9.0"] in rows
    header_index = rows.index(["Slot", "Position", "Player", "Captain", "Rating", "POTM"])
    slot_rows = rows[header_index + 1:]
    assert len(slot_rows) == 11
    assert ["ATT-1", "ST", "#9 Alessia Russo", "yes", "9.0", "yes"] in slot_rows


def test_season_totals_sum_across_lineups():
    first = Lineup(match_id=1, formation_id=1, player_stats={9: PlayerMatchStat(9, goals=2)})
    second = Lineup(
        match_id=2,
        formation_id=1,
        player_stats={9: PlayerMatchStat(9, goals=1, assists=1), 11: PlayerMatchStat(11, red_cards=1)},
    )

    totals = season_totals([first, second])

    assert totals[9] == {"goals": 3, "assists": 1, "yellow_cards": 0, "red_cards": 0}
    assert totals[11]["red_cards"] == 1


def test_player_totals_use_wire_names():
    lineups = [
        Lineup(match_id=1, formation_id=1, player_stats={9: PlayerMatchStat(9, goals=2, yellow_cards=1)}),
        Lineup(match_id=2, formation_id=1, player_stats={9: PlayerMatchStat(9, assists=1)}),
    ]

    assert player_totals(lineups, 9) == {
        "playerId": 9, "goals": 2, "assists": 1, "yellowCards": 1, "redCards": 0
    }
    assert player_totals(lineups, 11)["goals"] == 0
