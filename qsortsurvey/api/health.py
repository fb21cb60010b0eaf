"""
Health check endpoints.

Provides liveness and readiness probes. Readiness checks that the workbook
is present and that the submission store accepts writes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from qsortsurvey.api.dependencies import get_query_service, get_submission_repository
from qsortsurvey.services.query import QueryService
from qsortsurvey.services.recorder import SubmissionRepository

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    workbook: str | None = None
    submissions: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    queries: Annotated[QueryService, Depends(get_query_service)],
    repository: Annotated[SubmissionRepository, Depends(get_submission_repository)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns 503 if the workbook is missing or the submission store is unavailable.
    """
    workbook_ok = queries.source.exists()
    store_ok = await repository.is_available()

    if not (workbook_ok and store_ok):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="ready" if workbook_ok and store_ok else "not ready",
        workbook="found" if workbook_ok else "missing",
        submissions="available" if store_ok else "unavailable",
    )
