"""
Jobs routes - REST endpoints for submitting and inspecting ingestion jobs.

Endpoints
---------
POST /api/jobs           - Submit an ingestion job to the pdf_transform queue
GET  /api/jobs/{job_id}  - Status, attempts and log lines of a job
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from api.dependencies import get_queue, get_scheduler
from domain.errors import InvalidJobError, QueueError
from jobs.queue import BaseJobQueue
from jobs.scheduler import JobScheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


# ---------------------------------------------------------------------------
# Request / response schemas
# ---------------------------------------------------------------------------

class SubmitJobRequest(BaseModel):
    pdf_path: str = Field(..., description="Directory holding the PDFs to ingest")
    pdf_path_dest: str = Field(..., description="Directory the processed PDFs are moved to")
    delay: Optional[int] = Field(default=None, ge=0, description="Delay in milliseconds")
    attempts: Optional[int] = Field(default=None, ge=1, description="Maximum delivery attempts")


class SubmitJobResponse(BaseModel):
    job_id: str
    queue: str
    status: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    payload: Dict[str, Any]
    attempts_made: int
    max_attempts: int
    logs: List[str]
    error: Optional[str] = None
    result: Optional[Dict[str, Any]] = None
    enqueued_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=SubmitJobResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit an ingestion job",
)
def submit_job(
    request: SubmitJobRequest,
    scheduler: JobScheduler = Depends(get_scheduler),
) -> SubmitJobResponse:
    """Queue the ingestion of every PDF in *pdf_path*; processed files are
    archived into *pdf_path_dest*."""
    try:
        handle = scheduler.submit(
            request.pdf_path,
            request.pdf_path_dest,
            delay_ms=request.delay,
            attempts=request.attempts,
        )
    except InvalidJobError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except QueueError as exc:
        logger.error(f"Job submission failed: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    return SubmitJobResponse(job_id=handle.job_id, queue=handle.queue_name, status=handle.status.value)


@router.get(
    "/{job_id}",
    response_model=JobStatusResponse,
    summary="Get the status of an ingestion job",
)
def get_job(
    job_id: str,
    queue: BaseJobQueue = Depends(get_queue),
) -> JobStatusResponse:
    try:
        info = queue.get_status(job_id)
    except QueueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    if info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Job {job_id} not found")

    return JobStatusResponse(
        job_id=info.job_id,
        status=info.status.value,
        payload=info.payload,
        attempts_made=info.attempts_made,
        max_attempts=info.max_attempts,
        logs=info.logs,
        error=info.error,
        result=info.result,
        enqueued_at=info.enqueued_at,
    )
