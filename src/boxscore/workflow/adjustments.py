"""Manual corrections applied to a previewed document before commit."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field

from boxscore.models import STAT_FIELDS, MatchMetadata, ParsedMatch, TeamTotals


PLAYER_ADJUSTABLE_FIELDS = frozenset(STAT_FIELDS) | {"number", "did_not_play"}
TEAM_ADJUSTABLE_FIELDS = frozenset(TeamTotals.model_fields)
METADATA_ADJUSTABLE_FIELDS = frozenset(MatchMetadata.model_fields) - {"home_is_target"}
SIDE_ADJUSTABLE_FIELDS = frozenset({"opponent", "target_score", "opponent_score"})


class UploadAdjustments(BaseModel):
    players: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    team_stats: Dict[str, int] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.players or self.team_stats or self.metadata)


def _reject_unknown(fields: Dict[str, Any], allowed: frozenset[str], scope: str) -> None:
    unknown = sorted(set(fields) - allowed)
    if unknown:
        raise ValueError(f"Unknown {scope} adjustment field(s): {', '.join(unknown)}")


def apply_adjustments(document: ParsedMatch, adjustments: UploadAdjustments) -> ParsedMatch:
    """Return a re-validated copy of ``document`` with the adjustments applied.

    Raises ``ValueError`` for unknown fields or players and for values that
    fail validation.
    """
    if adjustments.is_empty:
        return document

    data = document.model_dump()
    target_key = "home_team" if document.metadata.home_is_target else "away_team"
    opponent_key = "away_team" if document.metadata.home_is_target else "home_team"

    metadata_updates = dict(adjustments.metadata)
    _reject_unknown(metadata_updates, METADATA_ADJUSTABLE_FIELDS | SIDE_ADJUSTABLE_FIELDS, "metadata")
    if "opponent" in metadata_updates:
        data[opponent_key]["name"] = metadata_updates.pop("opponent")
    if "target_score" in metadata_updates:
        data[target_key]["score"] = metadata_updates.pop("target_score")
    if "opponent_score" in metadata_updates:
        data[opponent_key]["score"] = metadata_updates.pop("opponent_score")
    data["metadata"].update(metadata_updates)

    _reject_unknown(adjustments.team_stats, TEAM_ADJUSTABLE_FIELDS, "team stat")
    data["team_stats"].update(adjustments.team_stats)

    players_by_name = {player["name"].strip(): player for player in data[target_key]["players"]}
    for name, updates in adjustments.players.items():
        player = players_by_name.get(name.strip())
        if player is None:
            raise ValueError(f"Player '{name}' is not part of the previewed roster")
        _reject_unknown(updates, PLAYER_ADJUSTABLE_FIELDS, f"player '{name}'")
        if updates.get("number") is not None:
            updates = {**updates, "number": str(updates["number"])}
        player.update(updates)

    return ParsedMatch.model_validate(data)
