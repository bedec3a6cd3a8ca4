"""Input adapters that turn box-score PDFs into canonical models."""

from .layout import Line, PositionedToken, build_lines, extract_tokens, line_texts
from .metadata import MatchInfo, MatchParseError, extract_match_info
from .parser import parse_lines, parse_match_document
from .players import extract_player_rows
from .totals import extract_team_totals

__all__ = [
    "Line",
    "MatchInfo",
    "MatchParseError",
    "PositionedToken",
    "build_lines",
    "extract_match_info",
    "extract_player_rows",
    "extract_team_totals",
    "extract_tokens",
    "line_texts",
    "parse_lines",
    "parse_match_document",
]
