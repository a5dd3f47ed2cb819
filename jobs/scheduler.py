"""
Job submission.

Everything that puts work on the queue goes through JobScheduler so the
payload is validated before it reaches the broker.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from jobs.models import IngestionJob, JobHandle
from jobs.queue import BaseJobQueue

logger = logging.getLogger(__name__)


class JobScheduler:
    """Envía jobs de ingesta a la cola"""

    def __init__(
        self,
        queue: BaseJobQueue,
        default_source: str = "./pdf",
        default_destination: str = "./archive_pdf",
        default_delay_ms: int = 60000,
        default_attempts: int = 1,
    ):
        self.queue = queue
        self.default_source = default_source
        self.default_destination = default_destination
        self.default_delay_ms = default_delay_ms
        self.default_attempts = default_attempts

    def submit(
        self,
        source_directory: str,
        destination_directory: str,
        delay_ms: Optional[int] = None,
        attempts: Optional[int] = None,
        job_id: Optional[str] = None,
    ) -> JobHandle:
        """
        Validate and enqueue one ingestion job.

        Raises:
            InvalidJobError: If the paths or options are invalid
            QueueError: If the broker rejects the job
        """
        job = IngestionJob.from_payload(
            {
                "pdf_path": source_directory,
                "pdf_path_dest": destination_directory,
                "enqueue_delay": self.default_delay_ms if delay_ms is None else delay_ms,
                "max_attempts": self.default_attempts if attempts is None else attempts,
            },
        )
        handle = self.queue.enqueue(job.to_payload(), job.options, job_id=job_id)
        logger.info(f"Submitted job {handle.job_id}: {job.source_directory} -> {job.destination_directory}")
        return handle

    def submit_default(self) -> JobHandle:
        """Submit the configured job (SOURCE_DIR -> ARCHIVE_DIR)."""
        return self.submit(self.default_source, self.default_destination)

    def run_every(
        self,
        interval_seconds: float,
        stop_event: Optional[threading.Event] = None,
        source_directory: Optional[str] = None,
        destination_directory: Optional[str] = None,
    ) -> None:
        """Submit a job every interval_seconds until stop_event is set (default paths if omitted)."""
        if interval_seconds <= 0:
            raise ValueError("interval_seconds debe ser mayor a 0")
        stop_event = stop_event or threading.Event()
        while not stop_event.is_set():
            self.submit(
                source_directory or self.default_source,
                destination_directory or self.default_destination,
            )
            stop_event.wait(interval_seconds)
