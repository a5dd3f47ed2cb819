"""
Jobs module.

  jobs.models      - job schema and queue-facing types
  jobs.queue       - queue abstraction and in-memory queue
  jobs.rq_queue    - Redis/rq queue
  jobs.worker      - queue consumer
  jobs.scheduler   - job submission

Only the models and the in-memory queue are imported here; the worker
depends on the ingestion package, which depends on jobs.models.
"""
from jobs.models import (
    IngestionJob,
    JobDelivery,
    JobHandle,
    JobInfo,
    JobOptions,
    JobStatus,
)
from jobs.queue import BaseJobQueue, InMemoryJobQueue

__all__ = [
    "IngestionJob",
    "JobDelivery",
    "JobHandle",
    "JobInfo",
    "JobOptions",
    "JobStatus",
    "BaseJobQueue",
    "InMemoryJobQueue",
]
