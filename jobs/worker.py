"""
Consumer of the ``pdf_transform`` queue.

Each delivery is validated, run through the IngestionOrchestrator and
reported back to the broker: returning means completed, raising means
failed (the broker decides whether to retry).
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Optional

from domain.errors import InvalidJobError
from domain.models import JobReport
from ingestion.pipeline import IngestionOrchestrator
from jobs.models import IngestionJob, JobDelivery
from jobs.queue import BaseJobQueue

logger = logging.getLogger(__name__)

COMPLETED = "completed"
FAILED = "failed"
EVENTS = (COMPLETED, FAILED)


def _log_completed(job_id: str, report: JobReport) -> None:
    logger.info(f"Job completed with ID: {job_id}")


def _log_failed(job_id: str, error: BaseException, attempts_remaining: int) -> None:
    logger.error(f"Job failed with ID: {job_id}: {error}")


class IngestionWorker:
    """
    Worker de ingesta.

    Listeners:
        completed(job_id, report)
        failed(job_id, error, attempts_remaining)
    """

    def __init__(self, orchestrator: IngestionOrchestrator, queue: Optional[BaseJobQueue] = None):
        self.orchestrator = orchestrator
        self.queue = queue
        self._listeners: Dict[str, List[Callable[..., None]]] = {
            COMPLETED: [_log_completed],
            FAILED: [_log_failed],
        }

    def on(self, event: str, callback: Callable[..., None]) -> None:
        """Register a callback for ``completed`` or ``failed``."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event '{event}'. Available: {list(EVENTS)}")
        self._listeners[event].append(callback)

    def handle(self, delivery: JobDelivery) -> JobReport:
        """
        Process one delivery.

        Raises:
            InvalidJobError: If the payload does not validate
            IngestionError: Whatever made the job fail
        """
        def job_log(message: str) -> None:
            logger.info(message)
            delivery.log(message)

        try:
            job = IngestionJob.from_payload(delivery.payload, job_id=delivery.job_id)
            job_log(f"Processing job {job.id} (attempt {delivery.attempt}/{delivery.max_attempts})")
            job_log(f"read pdf file from: {job.source_directory}")
            report = self.orchestrator.run(job, log=job_log)
        except Exception as e:
            delivery.log(f"Job failed: {e}")
            remaining = 0 if isinstance(e, InvalidJobError) else delivery.attempts_remaining
            self._emit(FAILED, delivery.job_id, e, remaining)
            raise

        self._emit(COMPLETED, delivery.job_id, report)
        return report

    def handle_delivery(self, delivery: JobDelivery) -> Dict[str, object]:
        """Queue-facing handler; the summary is stored as the job result."""
        return self.handle(delivery).summary()

    def run(self, stop_event: Optional[threading.Event] = None) -> None:
        """Consume the queue until stop_event is set (or the broker stops the worker)."""
        if self.queue is None:
            raise RuntimeError("IngestionWorker has no queue to consume")
        logger.info(f"Worker listening on queue '{self.queue.name}'")
        self.queue.consume(self.handle_delivery, stop_event)

    def _emit(self, event: str, *args: object) -> None:
        for callback in self._listeners[event]:
            try:
                callback(*args)
            except Exception as e:
                logger.warning(f"Listener for '{event}' raised: {e}")
