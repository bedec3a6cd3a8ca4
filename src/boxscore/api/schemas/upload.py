from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from boxscore.workflow import UploadAdjustments


class PlayerErrorResponse(BaseModel):
    name: str
    error: str


class PlayerManagementResponse(BaseModel):
    created: List[str] = Field(default_factory=list)
    existing: List[str] = Field(default_factory=list)
    errors: List[PlayerErrorResponse] = Field(default_factory=list)


class IngestResponse(BaseModel):
    message: str
    upload_id: str
    match_id: str
    player_management: PlayerManagementResponse


class ConfirmRequest(BaseModel):
    upload_token: str = ""
    adjustments: UploadAdjustments | None = None


class UploadStatusResponse(BaseModel):
    status: str
    error_message: str | None
    match_id: str | None
    match_date: datetime
    opponent: str


class DuplicateUploadResponse(BaseModel):
    message: str
    existing_upload_id: str


def error_detail(message: str, **extra: Any) -> Dict[str, Any]:
    return {"message": message, **extra}
