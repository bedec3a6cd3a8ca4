import pytest

from boxscore.ingest import extract_team_totals
from boxscore.ingest.fields import FieldParseError
from boxscore.ingest.totals import find_totals_lines, parse_totals_line
from boxscore.models import TeamTotals

from .conftest import OPPONENT_TOTALS, TARGET_TOTALS


SAMPLE_TOTALS = "Totals 200:00 30/60 50.0 20/40 50.0 10/20 50.0 9/12 75.0 10 25 35 20 12 8 4 15 90"


def test_parse_totals_line(profile):
    totals = parse_totals_line(SAMPLE_TOTALS, profile)
    assert totals.field_goals_made == 30
    assert totals.field_goals_attempted == 60
    assert totals.two_points_made == 20
    assert totals.three_points_made == 10
    assert totals.free_throws_made == 9
    assert totals.offensive_rebounds == 10
    assert totals.defensive_rebounds == 25
    assert totals.assists == 20
    assert totals.turnovers == 12
    assert totals.steals == 8
    assert totals.blocks == 4
    assert totals.fouls == 15
    assert totals.total_points == 90


def test_overtime_duration_token(profile):
    totals = parse_totals_line(SAMPLE_TOTALS.replace("200:00", "225:00"), profile)
    assert totals.total_points == 90


def test_find_totals_lines_requires_duration_token(profile):
    lines = ["Totals 30/60", SAMPLE_TOTALS, "Team Totals 200:00 1/1"]
    assert find_totals_lines(lines, profile) == [SAMPLE_TOTALS]


def test_home_target_takes_first_row(profile):
    totals = extract_team_totals([TARGET_TOTALS, OPPONENT_TOTALS], True, profile)
    assert totals.total_points == 80
    assert totals.field_goals_made == 30


def test_away_target_takes_second_row(profile):
    totals = extract_team_totals([TARGET_TOTALS, OPPONENT_TOTALS], False, profile)
    assert totals.total_points == 75
    assert totals.field_goals_made == 27


def test_malformed_row_degrades_to_zero(profile, caplog):
    broken = "Totals 200:00 30/60 50.0 twenty/40 50.0"
    with caplog.at_level("WARNING"):
        totals = extract_team_totals([broken, OPPONENT_TOTALS], True, profile)
    assert totals == TeamTotals()
    assert "team totals" in caplog.text


def test_wrong_row_count_degrades_to_zero(profile):
    assert extract_team_totals([TARGET_TOTALS], True, profile) == TeamTotals()
    assert extract_team_totals([], False, profile) == TeamTotals()


def test_parse_totals_line_is_strict(profile):
    with pytest.raises(FieldParseError):
        parse_totals_line("Totals 200:00 30/60", profile)
