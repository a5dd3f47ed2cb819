"""
Job schema and queue-facing types.

The wire payload keeps the source service's field names (``pdf_path``,
``pdf_path_dest``); the model exposes descriptive attribute names.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from domain.errors import InvalidJobError


class JobOptions(BaseModel):
    """Scheduling options for a submission"""
    delay: int = Field(default=0, ge=0, description="Delay before first attempt, in milliseconds")
    attempts: int = Field(default=1, ge=1, description="Maximum delivery attempts")


class IngestionJob(BaseModel):
    """One unit of queued work: ingest a source directory into the index."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    source_directory: str = Field(alias="pdf_path", min_length=1)
    destination_directory: str = Field(alias="pdf_path_dest", min_length=1)
    enqueue_delay: int = Field(default=0, ge=0)
    max_attempts: int = Field(default=1, ge=1)

    @classmethod
    def from_payload(cls, payload: Any, job_id: Optional[str] = None) -> "IngestionJob":
        """
        Validate a dequeued payload.

        Raises:
            InvalidJobError: If the payload is not a mapping or misses fields
        """
        if not isinstance(payload, Mapping):
            raise InvalidJobError(
                f"Job payload must be an object, got {type(payload).__name__}", step="dequeue"
            )
        data: Dict[str, Any] = dict(payload)
        if job_id is not None:
            data["id"] = job_id
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidJobError(f"Invalid job payload: {problems}", step="dequeue") from e

    def to_payload(self) -> Dict[str, str]:
        """Wire payload placed on the queue."""
        return {"pdf_path": self.source_directory, "pdf_path_dest": self.destination_directory}

    @property
    def options(self) -> JobOptions:
        return JobOptions(delay=self.enqueue_delay, attempts=self.max_attempts)


class JobStatus(str, Enum):
    """Estados de un job en la cola"""
    DELAYED = "delayed"
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class JobHandle:
    """Returned by enqueue"""
    job_id: str
    queue_name: str
    status: JobStatus = JobStatus.WAITING


@dataclass
class JobInfo:
    """Snapshot of a job as the queue sees it"""
    job_id: str
    status: JobStatus
    payload: Dict[str, Any] = field(default_factory=dict)
    attempts_made: int = 0
    max_attempts: int = 1
    logs: List[str] = field(default_factory=list)
    error: Optional[str] = None
    result: Optional[Dict[str, Any]] = None
    enqueued_at: Optional[datetime] = None


@dataclass
class JobDelivery:
    """One delivery of a job to a worker"""
    job_id: str
    payload: Dict[str, Any]
    attempt: int
    max_attempts: int
    log: Callable[[str], None]

    @property
    def attempts_remaining(self) -> int:
        return max(0, self.max_attempts - self.attempt)
