"""
Lawyer Router - Lawyer Performance Scoring
app/routers/lawyers.py

Endpoints:
  POST   /api/v1/lawyers/upload    - Process a CSV upload and persist the scored lawyers
  POST   /api/v1/lawyers/preview   - Process a CSV upload without persisting
  GET    /api/v1/lawyers           - List lawyers, newest first, with filters
  GET    /api/v1/lawyers/summary   - Dashboard totals
  DELETE /api/v1/lawyers           - Remove every stored lawyer
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.core.dependencies import get_ingestion_service
from app.core.exceptions import InputError, ProcessingFailedError, RepositoryException
from app.models.enumerations import ProcessingMethod
from app.models.lawyer import ErrorResponse, LawyerListResponse, LawyerRecord
from app.services.ingestion_service import IngestionService, LawyerFilters, ProcessingOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Lawyers"])


#  Validation Error Messages


DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "bool_parsing": "Field '{field}' must be true or false",
    "float_parsing": "Field '{field}' must be a valid number",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
}


def get_validation_message(field: str, error_type: str) -> str:
    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])
    field = ".".join(str(l) for l in loc if l not in ("body", "query"))
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "VALIDATION_ERROR",
            "message": get_validation_message(field, error_type),
            "details": {"field": field, "type": error_type} if field else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


#  Schemas


class RowErrorResponse(BaseModel):
    row_number: int
    reason: str


class UploadResponse(BaseModel):
    """Result of processing one CSV upload."""
    method: ProcessingMethod
    persisted: bool
    lawyers_count: int
    rows_total: int
    rows_processed: int
    rows_failed: int
    row_errors: List[RowErrorResponse] = Field(default_factory=list)
    remote_error: Optional[str] = None
    synthesized: bool = False
    records: List[LawyerRecord]


class SummaryResponse(BaseModel):
    total_lawyers: int
    average_lawyer_score: float
    low_performers: int
    allocated: int
    branch_average_scores: Dict[str, float]


class ClearResponse(BaseModel):
    deleted: int
    message: str


#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str, details: Optional[dict] = None):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json"),
    )


def raise_input_error(e: InputError):
    raise_error(status.HTTP_400_BAD_REQUEST, e.error_code, e.message)


def raise_processing_failed(e: ProcessingFailedError):
    raise_error(
        status.HTTP_502_BAD_GATEWAY,
        e.error_code,
        "CSV processing failed",
        details={"remote_error": e.remote_error, "local_error": e.local_error},
    )


def raise_storage_unavailable(e: RepositoryException):
    logger.error(f"Lawyer storage error: {e}")
    raise_error(status.HTTP_503_SERVICE_UNAVAILABLE, "STORAGE_UNAVAILABLE", "Lawyer storage is unavailable")


#  Helper Functions


def outcome_to_response(outcome: ProcessingOutcome, persisted: bool) -> UploadResponse:
    return UploadResponse(
        method=outcome.method,
        persisted=persisted,
        lawyers_count=len(outcome.records),
        rows_total=outcome.rows_total,
        rows_processed=outcome.rows_processed,
        rows_failed=outcome.rows_failed,
        row_errors=[
            RowErrorResponse(row_number=err.row_number, reason=err.reason)
            for err in outcome.row_errors
        ],
        remote_error=outcome.remote_error,
        synthesized=outcome.synthesized,
        records=outcome.records,
    )


async def read_upload(file: UploadFile) -> bytes:
    data = await file.read()
    logger.info(f"Received upload {file.filename} ({len(data)} bytes)")
    return data


#  Routes


@router.post(
    "/lawyers/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a lawyer CSV",
    description="Parses, scores and stores one record per lawyer. Header-only files produce sample rows.",
)
async def upload_lawyers(
    file: UploadFile = File(..., description="CSV file (comma or semicolon separated)"),
    service: IngestionService = Depends(get_ingestion_service),
) -> UploadResponse:
    data = await read_upload(file)
    try:
        outcome = await service.ingest(data, file.filename or "upload.csv", synthesize_samples=True)
    except InputError as e:
        raise_input_error(e)
    except ProcessingFailedError as e:
        raise_processing_failed(e)
    except RepositoryException as e:
        raise_storage_unavailable(e)
    return outcome_to_response(outcome, persisted=True)


@router.post(
    "/lawyers/preview",
    response_model=UploadResponse,
    summary="Preview a lawyer CSV",
    description="Same processing as upload, nothing is stored.",
)
async def preview_lawyers(
    file: UploadFile = File(...),
    synthesize_samples: bool = Query(False, description="Generate sample rows for header-only files"),
    service: IngestionService = Depends(get_ingestion_service),
) -> UploadResponse:
    data = await read_upload(file)
    try:
        outcome = await service.process(data, file.filename or "upload.csv", synthesize_samples)
    except InputError as e:
        raise_input_error(e)
    except ProcessingFailedError as e:
        raise_processing_failed(e)
    return outcome_to_response(outcome, persisted=False)


@router.get(
    "/lawyers",
    response_model=LawyerListResponse,
    summary="List lawyers",
    description="Newest first. Cached in Redis; filters apply after the cache.",
)
async def list_lawyers(
    branch_name: Optional[str] = Query(None, description="Exact branch name"),
    low_performance: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Substring of id, name, branch or domain"),
    min_score: Optional[float] = Query(None, ge=0.0, le=1.0),
    service: IngestionService = Depends(get_ingestion_service),
) -> LawyerListResponse:
    filters = LawyerFilters(
        branch_name=branch_name,
        low_performance=low_performance,
        search=search,
        min_score=min_score,
    )
    try:
        lawyers = service.list_lawyers(filters)
    except RepositoryException as e:
        raise_storage_unavailable(e)
    return LawyerListResponse(items=lawyers, total=len(lawyers))


@router.get(
    "/lawyers/summary",
    response_model=SummaryResponse,
    summary="Lawyer summary",
)
async def lawyer_summary(
    service: IngestionService = Depends(get_ingestion_service),
) -> SummaryResponse:
    try:
        return SummaryResponse(**service.summary())
    except RepositoryException as e:
        raise_storage_unavailable(e)


@router.delete(
    "/lawyers",
    response_model=ClearResponse,
    summary="Delete all lawyers",
)
async def clear_lawyers(
    service: IngestionService = Depends(get_ingestion_service),
) -> ClearResponse:
    try:
        deleted = service.clear()
    except RepositoryException as e:
        raise_storage_unavailable(e)
    return ClearResponse(deleted=deleted, message=f"Deleted {deleted} lawyer records")
