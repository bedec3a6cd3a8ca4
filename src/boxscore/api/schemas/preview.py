from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class TeamScoreResponse(BaseModel):
    name: str
    score: int


class MatchDetailsResponse(BaseModel):
    date: datetime
    venue: str | None
    game_number: str | None
    attendance: int | None
    duration: str | None
    home_is_target: bool
    teams: Dict[str, TeamScoreResponse]


class NumberMismatchResponse(BaseModel):
    name: str
    stored_number: str
    parsed_number: str


class PotentialIssuesResponse(BaseModel):
    new_players: List[str] = Field(default_factory=list)
    number_mismatches: List[NumberMismatchResponse] = Field(default_factory=list)
    statistical_anomalies: List[str] = Field(default_factory=list)
    score_mismatch: str | None = None
    totals_mismatch: str | None = None


class PreviewResponse(BaseModel):
    match_details: MatchDetailsResponse
    team_statistics: Dict[str, int]
    player_statistics: List[Dict[str, Any]]
    potential_issues: PotentialIssuesResponse
    upload_token: str
