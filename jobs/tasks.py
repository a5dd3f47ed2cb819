"""
rq task entry point for the ``pdf_transform`` queue.

rq imports this module in the worker process and calls
``process_ingestion_job(payload)`` for every delivery.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from rq import get_current_job
from rq.job import Job

from jobs.models import JobDelivery
from jobs.queue import DeliveryHandler

logger = logging.getLogger(__name__)

_HANDLERS: Dict[str, DeliveryHandler] = {}


def register_handler(queue_name: str, handler: DeliveryHandler) -> None:
    """Bind the handler that serves deliveries from queue_name."""
    _HANDLERS[queue_name] = handler


def _meta_logger(job: Job) -> Callable[[str], None]:
    def append(line: str) -> None:
        job.meta.setdefault("logs", []).append(line)
        job.save_meta()
    return append


def _resolve_handler(queue_name: str) -> DeliveryHandler:
    handler: Optional[DeliveryHandler] = _HANDLERS.get(queue_name)
    if handler is None:
        # Worker started with the plain `rq worker` command
        from core.container import get_components

        handler = get_components().worker.handle_delivery
        _HANDLERS[queue_name] = handler
    return handler


def process_ingestion_job(payload: Dict[str, object]) -> object:
    job = get_current_job()
    if job is None:
        raise RuntimeError("process_ingestion_job must run inside an rq worker")

    attempt = int(job.meta.get("attempts_made", 0)) + 1
    job.meta["attempts_made"] = attempt
    job.save_meta()

    delivery = JobDelivery(
        job_id=job.id,
        payload=payload,
        attempt=attempt,
        max_attempts=int(job.meta.get("max_attempts", 1)),
        log=_meta_logger(job),
    )
    return _resolve_handler(job.origin)(delivery)
