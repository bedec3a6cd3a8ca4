"""Ingestion workflow: reconciliation, preview tokens and commits."""

from .adjustments import UploadAdjustments, apply_adjustments
from .players import ReconcileResult, reconcile_players
from .review import PlayerReview, PotentialIssues, review_document
from .service import (
    IngestResult,
    PreviewResult,
    UploadProcessingError,
    commit_parsed_match,
    confirm_document,
    ensure_not_duplicate,
    ingest_document,
    preview_document,
    upload_status,
)
from .token import InvalidUploadToken, UploadTokenPayload, decode_upload_token, encode_upload_token

__all__ = [
    "IngestResult",
    "InvalidUploadToken",
    "PlayerReview",
    "PotentialIssues",
    "PreviewResult",
    "ReconcileResult",
    "UploadAdjustments",
    "UploadProcessingError",
    "UploadTokenPayload",
    "apply_adjustments",
    "commit_parsed_match",
    "confirm_document",
    "decode_upload_token",
    "encode_upload_token",
    "ensure_not_duplicate",
    "ingest_document",
    "preview_document",
    "reconcile_players",
    "review_document",
    "upload_status",
]
