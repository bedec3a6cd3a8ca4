"""Box-score ingestion: direct upload, preview and confirmation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from boxscore.config_loader import Settings
from boxscore.ingest import parse_match_document
from boxscore.models import ParsedMatch
from boxscore.persistence import (
    PLAYER_STAT_COLUMNS,
    BoxScoreStore,
    DuplicateUploadError,
    MatchRecord,
    UploadRecord,
)
from boxscore.workflow.adjustments import UploadAdjustments, apply_adjustments
from boxscore.workflow.players import ReconcileResult, reconcile_players
from boxscore.workflow.review import PlayerReview, PotentialIssues, review_document
from boxscore.workflow.token import decode_upload_token, encode_upload_token


logger = logging.getLogger(__name__)


class UploadProcessingError(Exception):
    """Committing a parsed match failed; the upload record is marked failed."""

    def __init__(self, upload_id: str, message: str):
        super().__init__(message)
        self.upload_id = upload_id
        self.message = message


@dataclass
class IngestResult:
    upload_id: str
    match_id: str
    match_updated: bool
    player_management: ReconcileResult

    @property
    def message(self) -> str:
        return "Match updated successfully" if self.match_updated else "PDF processed successfully"


@dataclass
class PreviewResult:
    document: ParsedMatch
    players: List[PlayerReview]
    issues: PotentialIssues
    upload_token: str

    @property
    def match_details(self) -> Dict[str, Any]:
        metadata = self.document.metadata
        return {
            "date": metadata.date,
            "venue": metadata.venue,
            "game_number": metadata.game_number,
            "attendance": metadata.attendance,
            "duration": metadata.duration,
            "home_is_target": metadata.home_is_target,
            "teams": {
                "home": {"name": self.document.home_team.name, "score": self.document.home_team.score},
                "away": {"name": self.document.away_team.name, "score": self.document.away_team.score},
            },
        }


def _claim_upload(
    store: BoxScoreStore,
    document: ParsedMatch,
    *,
    file_name: str,
    uploaded_by: str,
) -> UploadRecord:
    try:
        return store.create_upload(
            file_name=file_name,
            uploaded_by=uploaded_by,
            match_date=document.metadata.date,
            opponent=document.opponent_team.name,
            status="processing",
        )
    except DuplicateUploadError as exc:
        if exc.status != "failed":
            raise
        logger.info("Retrying previously failed upload %s", exc.existing_upload_id)
        return store.reopen_upload(exc.existing_upload_id, file_name=file_name, uploaded_by=uploaded_by)


def _upsert_match(store: BoxScoreStore, document: ParsedMatch) -> Tuple[MatchRecord, bool]:
    metadata = document.metadata
    target = document.target_team
    opponent = document.opponent_team
    fields = dict(
        status="finished",
        result="Win" if target.score > opponent.score else "Loss",
        venue=metadata.venue,
        home_away="Home" if metadata.home_is_target else "Away",
        game_number=metadata.game_number,
        attendance=metadata.attendance,
        duration=metadata.duration,
        our_score=target.score,
        opponent_score=opponent.score,
        team_stats=document.team_stats.model_dump(),
    )
    existing = store.find_match(date=metadata.date, opponent=opponent.name)
    if existing is not None:
        logger.info("Updating existing %s match %s", existing.status, existing.match_id)
        return store.update_match(existing.match_id, **fields), True
    return store.create_match(date=metadata.date, opponent=opponent.name, **fields), False


def _record_player_stats(store: BoxScoreStore, document: ParsedMatch, match: MatchRecord) -> None:
    for row in document.played_players:
        player = store.get_player_by_name(row.name.strip())
        if player is None:
            logger.warning("No stored player named %s; skipping stats", row.name)
            continue
        stat = store.find_player_stat(match_id=match.match_id, player_id=player.player_id)
        if stat is None:
            stat = store.create_player_stat(
                match_id=match.match_id,
                player_id=player.player_id,
                stats=row.model_dump(include=set(PLAYER_STAT_COLUMNS)),
            )
        store.append_match_player_stat(match.match_id, stat.stat_id)
        store.append_player_stat(player.player_id, stat.stat_id)


def commit_parsed_match(
    store: BoxScoreStore,
    document: ParsedMatch,
    *,
    file_name: str,
    uploaded_by: str,
    player_management: ReconcileResult,
) -> IngestResult:
    """Persist a parsed match once per (date, opponent).

    Raises :class:`DuplicateUploadError` when another upload owns the pair and
    :class:`UploadProcessingError` when persistence fails after the upload
    was claimed; the upload record keeps the failure.
    """
    upload = _claim_upload(store, document, file_name=file_name, uploaded_by=uploaded_by)
    try:
        match, updated = _upsert_match(store, document)
        _record_player_stats(store, document, match)
        store.update_upload_status(upload.upload_id, status="completed", match_id=match.match_id)
    except Exception as exc:
        logger.exception("Processing upload %s failed", upload.upload_id)
        store.update_upload_status(upload.upload_id, status="failed", error_message=str(exc))
        raise UploadProcessingError(upload.upload_id, str(exc)) from exc

    logger.info(
        "Upload %s completed: match %s vs %s (%s)",
        upload.upload_id,
        match.match_id,
        match.opponent,
        "updated" if updated else "created",
    )
    return IngestResult(
        upload_id=upload.upload_id,
        match_id=match.match_id,
        match_updated=updated,
        player_management=player_management,
    )


def ingest_document(
    store: BoxScoreStore,
    data: bytes,
    *,
    file_name: str,
    uploaded_by: str,
    settings: Settings,
) -> IngestResult:
    document = parse_match_document(data, settings.team)
    player_management = reconcile_players(store, document.target_team.players, settings.team)
    return commit_parsed_match(
        store,
        document,
        file_name=file_name,
        uploaded_by=uploaded_by,
        player_management=player_management,
    )


def ensure_not_duplicate(store: BoxScoreStore, document: ParsedMatch) -> None:
    existing = store.find_upload(match_date=document.metadata.date, opponent=document.opponent_team.name)
    if existing is not None and existing.status != "failed":
        raise DuplicateUploadError(existing.upload_id, existing.status)


def preview_document(
    store: BoxScoreStore,
    data: bytes,
    *,
    file_name: str,
    settings: Settings,
) -> PreviewResult:
    document = parse_match_document(data, settings.team)
    ensure_not_duplicate(store, document)
    players, issues = review_document(store, document, settings.team)
    token = encode_upload_token(document, file_name=file_name, secret=settings.token_secret)
    return PreviewResult(document=document, players=players, issues=issues, upload_token=token)


def confirm_document(
    store: BoxScoreStore,
    token: str,
    adjustments: Optional[UploadAdjustments],
    *,
    uploaded_by: str,
    settings: Settings,
) -> IngestResult:
    payload = decode_upload_token(token, secret=settings.token_secret)
    document = apply_adjustments(payload.document, adjustments or UploadAdjustments())
    player_management = reconcile_players(store, document.target_team.players, settings.team)
    return commit_parsed_match(
        store,
        document,
        file_name=payload.file_name,
        uploaded_by=uploaded_by,
        player_management=player_management,
    )


def upload_status(store: BoxScoreStore, upload_id: str) -> UploadRecord:
    upload = store.get_upload(upload_id)
    if upload is None:
        raise KeyError(f"Upload {upload_id} not found")
    return upload
