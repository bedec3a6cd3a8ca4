"""Parsed box-score models shared across ingestion and workflow layers."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class MatchMetadata(BaseModel):
    """Header information of a box score."""

    date: datetime
    venue: Optional[str] = None
    game_number: Optional[str] = None
    attendance: Optional[int] = Field(default=None, ge=0)
    duration: Optional[str] = None
    home_is_target: bool


class TeamTotals(BaseModel):
    """Aggregate row of one team."""

    field_goals_made: int = 0
    field_goals_attempted: int = 0
    two_points_made: int = 0
    two_points_attempted: int = 0
    three_points_made: int = 0
    three_points_attempted: int = 0
    free_throws_made: int = 0
    free_throws_attempted: int = 0
    offensive_rebounds: int = 0
    defensive_rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0
    total_points: int = 0


class PlayerRow(BaseModel):
    """One roster line of the target team.

    Rows flagged ``did_not_play`` keep every statistic as ``None``.
    """

    number: str
    name: str = Field(..., min_length=1)
    did_not_play: bool = False
    minutes: Optional[str] = None
    field_goals_made: Optional[int] = None
    field_goals_attempted: Optional[int] = None
    two_points_made: Optional[int] = None
    two_points_attempted: Optional[int] = None
    three_points_made: Optional[int] = None
    three_points_attempted: Optional[int] = None
    free_throws_made: Optional[int] = None
    free_throws_attempted: Optional[int] = None
    offensive_rebounds: Optional[int] = None
    defensive_rebounds: Optional[int] = None
    total_rebounds: Optional[int] = None
    assists: Optional[int] = None
    turnovers: Optional[int] = None
    steals: Optional[int] = None
    blocks: Optional[int] = None
    fouls: Optional[int] = None
    fouls_drawn: Optional[int] = None
    plus_minus: Optional[int] = None
    efficiency: Optional[int] = None
    points: Optional[int] = None

    @property
    def label(self) -> str:
        return f"{self.name} (#{self.number})"


STAT_FIELDS = tuple(
    name for name in PlayerRow.model_fields if name not in {"number", "name", "did_not_play"}
)


class TeamSide(BaseModel):
    name: str = Field(..., min_length=1)
    score: int = Field(..., ge=0)
    players: List[PlayerRow] = Field(default_factory=list)


class ParsedMatch(BaseModel):
    """Complete state of one parsed document.

    Only the target team's side carries players and only its totals are kept.
    """

    metadata: MatchMetadata
    home_team: TeamSide
    away_team: TeamSide
    team_stats: TeamTotals = Field(default_factory=TeamTotals)

    model_config = ConfigDict(validate_assignment=True)

    @property
    def target_team(self) -> TeamSide:
        return self.home_team if self.metadata.home_is_target else self.away_team

    @property
    def opponent_team(self) -> TeamSide:
        return self.away_team if self.metadata.home_is_target else self.home_team

    @property
    def played_players(self) -> List[PlayerRow]:
        return [player for player in self.target_team.players if not player.did_not_play]
