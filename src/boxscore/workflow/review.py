"""Human-readable findings shown before a previewed box score is committed."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from boxscore.config import TeamProfile
from boxscore.models import ParsedMatch, PlayerRow
from boxscore.persistence import BoxScoreStore


@dataclass
class PotentialIssues:
    new_players: List[str] = field(default_factory=list)
    number_mismatches: List[Dict[str, str]] = field(default_factory=list)
    statistical_anomalies: List[str] = field(default_factory=list)
    score_mismatch: Optional[str] = None
    totals_mismatch: Optional[str] = None

    @property
    def has_issues(self) -> bool:
        return bool(
            self.new_players
            or self.number_mismatches
            or self.statistical_anomalies
            or self.score_mismatch
            or self.totals_mismatch
        )


@dataclass
class PlayerReview:
    row: PlayerRow
    validation_status: str
    notes: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        payload = self.row.model_dump()
        payload["validation_status"] = self.validation_status
        payload["notes"] = list(self.notes)
        return payload


def _review_player(
    store: BoxScoreStore,
    row: PlayerRow,
    profile: TeamProfile,
    issues: PotentialIssues,
) -> PlayerReview:
    if row.did_not_play:
        return PlayerReview(row=row, validation_status="did_not_play")

    statuses: List[str] = []
    notes: List[str] = []
    stored = store.get_player_by_name(row.name.strip())
    if stored is None:
        statuses.append("new_player")
        notes.append("Player will be created")
        issues.new_players.append(row.label)
    elif stored.number != row.number:
        statuses.append("number_mismatch")
        notes.append(f"Stored number is #{stored.number}")
        issues.number_mismatches.append(
            {"name": row.name, "stored_number": stored.number, "parsed_number": row.number}
        )

    points = row.points or 0
    if points > profile.max_player_points:
        statuses.append("check_points")
        message = f"{row.name} scored {points} points (more than {profile.max_player_points})"
        notes.append(message)
        issues.statistical_anomalies.append(message)

    return PlayerReview(row=row, validation_status=statuses[0] if statuses else "ok", notes=notes)


def review_document(
    store: BoxScoreStore,
    document: ParsedMatch,
    profile: TeamProfile,
) -> tuple[List[PlayerReview], PotentialIssues]:
    issues = PotentialIssues()
    reviews = [_review_player(store, row, profile, issues) for row in document.target_team.players]

    target_score = document.target_team.score
    player_points = sum(row.points or 0 for row in document.played_players)
    if player_points != target_score:
        issues.score_mismatch = (
            f"Sum of player points ({player_points}) does not match team score ({target_score})"
        )
    totals_points = document.team_stats.total_points
    if totals_points and totals_points != target_score:
        issues.totals_mismatch = (
            f"Totals row points ({totals_points}) do not match team score ({target_score})"
        )
    return reviews, issues
