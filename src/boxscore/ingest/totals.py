"""Extract the target team's aggregate ``Totals`` row."""

from __future__ import annotations

import logging
from typing import List, Sequence

from boxscore.config import TeamProfile
from boxscore.ingest.fields import FieldParseError, FieldSpec, read_fields
from boxscore.models import TeamTotals


logger = logging.getLogger(__name__)

# Offsets are relative to the full-game duration token; every split is
# followed by a percentage column that is not read.
TEAM_TOTALS_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("field_goals", 1, "split"),
    FieldSpec("two_points", 3, "split"),
    FieldSpec("three_points", 5, "split"),
    FieldSpec("free_throws", 7, "split"),
    FieldSpec("offensive_rebounds", 9),
    FieldSpec("defensive_rebounds", 10),
    FieldSpec("assists", 12),
    FieldSpec("turnovers", 13),
    FieldSpec("steals", 14),
    FieldSpec("blocks", 15),
    FieldSpec("fouls", 16),
    FieldSpec("total_points", -1),
)


def find_totals_lines(lines: Sequence[str], profile: TeamProfile) -> List[str]:
    return [
        line
        for line in lines
        if line.strip().startswith("Totals") and any(token in line for token in profile.duration_tokens)
    ]


def parse_totals_line(line: str, profile: TeamProfile) -> TeamTotals:
    parts = line.split()
    duration_index = next(
        (index for index, part in enumerate(parts) if part in profile.duration_tokens),
        None,
    )
    if duration_index is None:
        raise FieldParseError(f"totals row has no duration token: {line!r}")
    values = read_fields(parts, TEAM_TOTALS_FIELDS, start=duration_index)
    return TeamTotals(**values)


def extract_team_totals(lines: Sequence[str], home_is_target: bool, profile: TeamProfile) -> TeamTotals:
    """Return the target team's totals, or zeros when the row cannot be read.

    The two totals rows carry no team name, so the home team's row is taken
    to be the first one.
    """
    totals_lines = find_totals_lines(lines, profile)
    if len(totals_lines) != 2:
        logger.warning("Expected 2 totals rows, found %d; using empty team totals", len(totals_lines))
        return TeamTotals()

    line = totals_lines[0 if home_is_target else 1]
    try:
        return parse_totals_line(line, profile)
    except FieldParseError as exc:
        logger.warning("Could not parse team totals row: %s", exc)
        return TeamTotals()
