"""Canonical box-score models."""

from .document import (
    STAT_FIELDS,
    MatchMetadata,
    ParsedMatch,
    PlayerRow,
    TeamSide,
    TeamTotals,
)

__all__ = [
    "STAT_FIELDS",
    "MatchMetadata",
    "ParsedMatch",
    "PlayerRow",
    "TeamSide",
    "TeamTotals",
]
