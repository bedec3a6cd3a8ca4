from boxscore.ingest import extract_player_rows
from boxscore.ingest.players import clean_player_name, parse_player_line
from boxscore.models import STAT_FIELDS

from .conftest import TARGET_PLAYER_LINES


def test_roster_block_is_extracted(profile, box_score_lines):
    rows = extract_player_rows(box_score_lines, profile)
    assert [row.name for row in rows] == [
        "Ivan Petrov",
        "Georgi Dimitrov",
        "Nikolay Stoyanov",
        "Todor Kolev",
        "Petar Ivanov",
    ]
    assert [row.number for row in rows] == ["4", "7", "11", "15", "9"]
    assert sum(row.points or 0 for row in rows) == 80


def test_player_fields_follow_column_offsets(profile):
    row = parse_player_line(TARGET_PLAYER_LINES[0], profile)
    assert row.name == "Ivan Petrov"
    assert row.minutes == "32:15"
    assert (row.field_goals_made, row.field_goals_attempted) == (7, 15)
    assert (row.two_points_made, row.two_points_attempted) == (5, 9)
    assert (row.three_points_made, row.three_points_attempted) == (2, 6)
    assert (row.free_throws_made, row.free_throws_attempted) == (3, 4)
    assert row.offensive_rebounds == 2
    assert row.defensive_rebounds == 5
    assert row.total_rebounds == 7
    assert row.assists == 4
    assert row.turnovers == 3
    assert row.steals == 1
    assert row.blocks == 0
    assert row.fouls == 2
    assert row.fouls_drawn == 3
    assert row.plus_minus == 8
    assert row.efficiency == 18
    assert row.points == 19


def test_negative_plus_minus(profile):
    row = parse_player_line(TARGET_PLAYER_LINES[3], profile)
    assert row.plus_minus == -2
    assert row.points == 12


def test_dnp_row_has_no_statistics(profile):
    row = parse_player_line("9 Petar Ivanov DNP", profile)
    assert row.did_not_play is True
    assert row.name == "Petar Ivanov"
    assert all(getattr(row, name) is None for name in STAT_FIELDS)


def test_unparseable_fields_default_to_zero(profile):
    row = parse_player_line("12 Kiril Vasilev 10:00 x/y 0.0 1/2 50.0", profile)
    assert row.minutes == "10:00"
    assert row.field_goals_made == 0
    assert row.field_goals_attempted == 0
    assert (row.two_points_made, row.two_points_attempted) == (1, 2)
    assert row.points == 0


def test_clean_player_name_strips_captain_marker(profile):
    assert clean_player_name("  Ivan Petrov (C)  ", profile) == "Ivan Petrov"


def test_section_start_requires_name_and_abbreviation(profile):
    lines = ["Етрос", *TARGET_PLAYER_LINES[:2]]
    assert extract_player_rows(lines, profile) == []


def test_section_end_stops_extraction(profile):
    lines = [
        "Етрос (ЕТР)",
        TARGET_PLAYER_LINES[0],
        "Coach: Stefan Georgiev",
        TARGET_PLAYER_LINES[1],
    ]
    rows = extract_player_rows(lines, profile)
    assert [row.name for row in rows] == ["Ivan Petrov"]


def test_last_player_flushed_without_section_end(profile):
    lines = ["Етрос (ЕТР)", "", TARGET_PLAYER_LINES[0], TARGET_PLAYER_LINES[1]]
    rows = extract_player_rows(lines, profile)
    assert [row.name for row in rows] == ["Ivan Petrov", "Georgi Dimitrov"]


def test_non_player_lines_are_ignored(profile):
    lines = ["Етрос (ЕТР)", "Starting five", TARGET_PLAYER_LINES[2]]
    rows = extract_player_rows(lines, profile)
    assert [row.number for row in rows] == ["11"]
