"""REST API for box-score uploads."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, File, Header, HTTPException, UploadFile

from boxscore.api.schemas import (
    ConfirmRequest,
    DuplicateUploadResponse,
    IngestResponse,
    MatchDetailsResponse,
    PlayerManagementResponse,
    PotentialIssuesResponse,
    PreviewResponse,
    UploadStatusResponse,
    error_detail,
)
from boxscore.config_loader import Settings
from boxscore.persistence import BoxScoreStore, DuplicateUploadError
from boxscore.workflow import (
    IngestResult,
    PreviewResult,
    UploadProcessingError,
    confirm_document,
    ingest_document,
    preview_document,
    upload_status,
)


logger = logging.getLogger(__name__)


def _current_user(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail=error_detail("Not authorized, no user identity"))
    return x_user_id.strip()


async def _read_pdf(upload: UploadFile | None, settings: Settings) -> tuple[bytes, str]:
    if upload is None:
        raise HTTPException(status_code=400, detail=error_detail("No PDF file uploaded"))
    if upload.content_type not in settings.allowed_content_types:
        raise HTTPException(status_code=400, detail=error_detail("Only PDF files are allowed"))
    contents = await upload.read()
    if not contents:
        raise HTTPException(status_code=400, detail=error_detail("No PDF file uploaded"))
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=error_detail(f"PDF exceeds the {settings.max_upload_bytes} byte limit"),
        )
    return contents, upload.filename or "upload.pdf"


def _duplicate_exception(exc: DuplicateUploadError) -> HTTPException:
    payload = DuplicateUploadResponse(message=str(exc), existing_upload_id=exc.existing_upload_id)
    return HTTPException(status_code=409, detail=payload.model_dump())


def _processing_exception(exc: UploadProcessingError) -> HTTPException:
    return HTTPException(
        status_code=500,
        detail=error_detail(f"Failed to process PDF upload: {exc.message}", upload_id=exc.upload_id),
    )


def ingest_result_to_response(result: IngestResult) -> IngestResponse:
    return IngestResponse(
        message=result.message,
        upload_id=result.upload_id,
        match_id=result.match_id,
        player_management=PlayerManagementResponse.model_validate(result.player_management.as_dict()),
    )


def preview_result_to_response(result: PreviewResult) -> PreviewResponse:
    issues = result.issues
    return PreviewResponse(
        match_details=MatchDetailsResponse.model_validate(result.match_details),
        team_statistics=result.document.team_stats.model_dump(),
        player_statistics=[review.as_dict() for review in result.players],
        potential_issues=PotentialIssuesResponse(
            new_players=issues.new_players,
            number_mismatches=issues.number_mismatches,
            statistical_anomalies=issues.statistical_anomalies,
            score_mismatch=issues.score_mismatch,
            totals_mismatch=issues.totals_mismatch,
        ),
        upload_token=result.upload_token,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="boxscore ingestion")
    store = BoxScoreStore(settings.db_path)
    app.state.store = store
    app.state.settings = settings

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/pdf/upload", response_model=IngestResponse, status_code=201)
    async def upload_pdf(
        pdf: UploadFile | None = File(None),
        user: str = Depends(_current_user),
    ) -> IngestResponse:
        contents, file_name = await _read_pdf(pdf, settings)
        try:
            result = ingest_document(
                store,
                contents,
                file_name=file_name,
                uploaded_by=user,
                settings=settings,
            )
        except DuplicateUploadError as exc:
            raise _duplicate_exception(exc) from exc
        except UploadProcessingError as exc:
            raise _processing_exception(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=error_detail(str(exc))) from exc
        return ingest_result_to_response(result)

    @app.post("/pdf/preview", response_model=PreviewResponse)
    async def preview_pdf(
        pdf: UploadFile | None = File(None),
        user: str = Depends(_current_user),
    ) -> PreviewResponse:
        contents, file_name = await _read_pdf(pdf, settings)
        try:
            result = preview_document(store, contents, file_name=file_name, settings=settings)
        except DuplicateUploadError as exc:
            raise _duplicate_exception(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=error_detail(str(exc))) from exc
        logger.debug("Preview for %s requested by %s", file_name, user)
        return preview_result_to_response(result)

    @app.post("/pdf/confirm", response_model=IngestResponse, status_code=201)
    async def confirm_pdf(
        request: ConfirmRequest,
        user: str = Depends(_current_user),
    ) -> IngestResponse:
        if not request.upload_token:
            raise HTTPException(status_code=400, detail=error_detail("Upload token is required"))
        try:
            result = confirm_document(
                store,
                request.upload_token,
                request.adjustments,
                uploaded_by=user,
                settings=settings,
            )
        except DuplicateUploadError as exc:
            raise _duplicate_exception(exc) from exc
        except UploadProcessingError as exc:
            raise _processing_exception(exc) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=error_detail(str(exc))) from exc
        return ingest_result_to_response(result)

    @app.get("/pdf/status/{upload_id}", response_model=UploadStatusResponse)
    async def get_upload_status(upload_id: str, user: str = Depends(_current_user)) -> UploadStatusResponse:
        try:
            upload = upload_status(store, upload_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=error_detail("Upload not found")) from None
        return UploadStatusResponse(
            status=upload.status,
            error_message=upload.error_message,
            match_id=upload.match_id,
            match_date=upload.match_date,
            opponent=upload.opponent,
        )

    return app
