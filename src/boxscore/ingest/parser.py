"""Turn box-score documents into :class:`ParsedMatch` instances."""

from __future__ import annotations

import logging
from typing import Sequence

from boxscore.config import TeamProfile
from boxscore.ingest.layout import build_lines, extract_tokens, line_texts
from boxscore.ingest.metadata import extract_match_info
from boxscore.ingest.players import extract_player_rows
from boxscore.ingest.totals import extract_team_totals
from boxscore.models import MatchMetadata, ParsedMatch, TeamSide


logger = logging.getLogger(__name__)


def parse_lines(lines: Sequence[str], profile: TeamProfile) -> ParsedMatch:
    info = extract_match_info(lines, profile)

    team_stats = extract_team_totals(lines, info.home_is_target, profile)
    players = extract_player_rows(lines, profile)

    target = TeamSide(name=profile.name, score=info.target_score or 0, players=players)
    opponent = TeamSide(name=info.opponent, score=info.opponent_score or 0)
    metadata = MatchMetadata(
        date=info.date,
        venue=info.venue,
        game_number=info.game_number,
        attendance=info.attendance,
        duration=info.duration,
        home_is_target=info.home_is_target,
    )
    parsed = ParsedMatch(
        metadata=metadata,
        home_team=target if info.home_is_target else opponent,
        away_team=opponent if info.home_is_target else target,
        team_stats=team_stats,
    )
    logger.debug(
        "Parsed %s vs %s on %s with %d players",
        profile.name,
        info.opponent,
        info.date.isoformat(),
        len(players),
    )
    return parsed


def parse_match_document(data: bytes, profile: TeamProfile) -> ParsedMatch:
    """Parse raw PDF bytes; unreadable documents fail like incomplete ones."""
    lines = line_texts(build_lines(extract_tokens(data)))
    return parse_lines(lines, profile)
