"""Extract the target team's roster block from box-score lines."""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, Optional

from boxscore.config import TeamProfile
from boxscore.ingest.fields import FieldSpec, read_fields
from boxscore.models import PlayerRow


PLAYER_START_RE = re.compile(r"^\s*(?P<starter>\*)?(?P<number>\d+)\s+(?P<name>[^0-9]+)")
HEADER_MARKERS = ("No.", "Team/Coach", "Field Goals", "M/A")
SECTION_END_MARKERS = ("Coach:", "Totals")
DNP_TOKEN = "DNP"

# Offsets into the tokens that follow the player's number and name.
PLAYER_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("minutes", 0, "text"),
    FieldSpec("field_goals", 1, "split"),
    FieldSpec("two_points", 3, "split"),
    FieldSpec("three_points", 5, "split"),
    FieldSpec("free_throws", 7, "split"),
    FieldSpec("offensive_rebounds", 9),
    FieldSpec("defensive_rebounds", 10),
    FieldSpec("total_rebounds", 11),
    FieldSpec("assists", 12),
    FieldSpec("turnovers", 13),
    FieldSpec("steals", 14),
    FieldSpec("blocks", 15),
    FieldSpec("fouls", 16),
    FieldSpec("fouls_drawn", 17),
    FieldSpec("plus_minus", 18),
    FieldSpec("efficiency", 19),
    FieldSpec("points", 20),
)


class SectionState(Enum):
    BEFORE_SECTION = "before_section"
    IN_SECTION = "in_section"
    AFTER_SECTION = "after_section"


def clean_player_name(raw: str, profile: TeamProfile) -> str:
    name = raw.replace(profile.captain_marker, " ")
    tokens = [token for token in name.split() if token != DNP_TOKEN]
    return " ".join(tokens)


def parse_player_line(line: str, profile: TeamProfile) -> Optional[PlayerRow]:
    match = PLAYER_START_RE.match(line)
    if not match:
        return None
    name = clean_player_name(match.group("name"), profile)
    if not name:
        return None
    number = match.group("number")
    if DNP_TOKEN in line.split():
        return PlayerRow(number=number, name=name, did_not_play=True)

    stats = line[match.end():].split()
    values = read_fields(stats, PLAYER_FIELDS, strict=False)
    return PlayerRow(number=number, name=name, **values)


def _is_header(line: str) -> bool:
    return not line.strip() or any(marker in line for marker in HEADER_MARKERS)


def extract_player_rows(lines: Iterable[str], profile: TeamProfile) -> List[PlayerRow]:
    players: List[PlayerRow] = []
    state = SectionState.BEFORE_SECTION
    current: Optional[PlayerRow] = None

    def flush() -> None:
        nonlocal current
        if current is not None:
            players.append(current)
            current = None

    for line in lines:
        if state is SectionState.BEFORE_SECTION:
            if profile.name in line and profile.section_marker in line:
                state = SectionState.IN_SECTION
            continue
        if state is SectionState.AFTER_SECTION:
            break
        if any(marker in line for marker in SECTION_END_MARKERS):
            flush()
            state = SectionState.AFTER_SECTION
            continue
        if _is_header(line):
            continue
        row = parse_player_line(line, profile)
        if row is not None:
            flush()
            current = row

    flush()
    return players
