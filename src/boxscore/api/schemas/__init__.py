"""Pydantic models for API I/O."""

from .preview import (
    MatchDetailsResponse,
    NumberMismatchResponse,
    PotentialIssuesResponse,
    PreviewResponse,
    TeamScoreResponse,
)
from .upload import (
    ConfirmRequest,
    DuplicateUploadResponse,
    IngestResponse,
    PlayerErrorResponse,
    PlayerManagementResponse,
    UploadStatusResponse,
    error_detail,
)

__all__ = [
    "ConfirmRequest",
    "DuplicateUploadResponse",
    "IngestResponse",
    "MatchDetailsResponse",
    "NumberMismatchResponse",
    "PlayerErrorResponse",
    "PlayerManagementResponse",
    "PotentialIssuesResponse",
    "PreviewResponse",
    "TeamScoreResponse",
    "UploadStatusResponse",
    "error_detail",
]
