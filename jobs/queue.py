"""
Job queue abstraction.

The durable broker owns delivery, delay and redelivery. Workers only
consume deliveries and report success or failure truthfully.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from domain.errors import InvalidJobError, QueueError
from jobs.models import JobDelivery, JobHandle, JobInfo, JobOptions, JobStatus

logger = logging.getLogger(__name__)

DeliveryHandler = Callable[[JobDelivery], object]


class BaseJobQueue(ABC):
    """
    Clase base abstracta para colas de jobs.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def enqueue(self, payload: Dict[str, object], options: JobOptions, job_id: Optional[str] = None) -> JobHandle:
        """
        Submit a job.

        Args:
            payload: Wire payload (``pdf_path``, ``pdf_path_dest``)
            options: Delay in milliseconds and maximum attempts
            job_id: Explicit id; generated by the broker if None

        Raises:
            QueueError: If the broker rejects the submission
        """
        pass

    @abstractmethod
    def get_status(self, job_id: str) -> Optional[JobInfo]:
        """Snapshot of a job, None if unknown."""
        pass

    @abstractmethod
    def consume(self, handler: DeliveryHandler, stop_event: Optional[threading.Event] = None) -> None:
        """
        Deliver jobs to handler until stop_event is set.

        The handler returns normally on success and raises on failure.
        """
        pass


class _QueuedJob:
    def __init__(self, job_id: str, payload: Dict[str, object], options: JobOptions, available_at: float):
        self.job_id = job_id
        self.payload = payload
        self.max_attempts = options.attempts
        self.available_at = available_at
        self.attempts_made = 0
        self.status = JobStatus.DELAYED if options.delay > 0 else JobStatus.WAITING
        self.logs: List[str] = []
        self.error: Optional[str] = None
        self.result: Optional[Dict[str, object]] = None
        self.enqueued_at = datetime.now()

    def info(self) -> JobInfo:
        return JobInfo(
            job_id=self.job_id,
            status=self.status,
            payload=dict(self.payload),
            attempts_made=self.attempts_made,
            max_attempts=self.max_attempts,
            logs=list(self.logs),
            error=self.error,
            result=self.result,
            enqueued_at=self.enqueued_at,
        )


class InMemoryJobQueue(BaseJobQueue):
    """
    Cola en memoria con delay, reintentos y dead-letter.
    Útil para desarrollo y testing; los jobs se pierden al terminar el proceso.
    """

    def __init__(
        self,
        name: str = "pdf_transform",
        clock: Callable[[], float] = time.monotonic,
        retry_backoff_s: float = 0.0,
    ):
        super().__init__(name)
        self._clock = clock
        self._retry_backoff_s = retry_backoff_s
        self._jobs: Dict[str, _QueuedJob] = {}
        self._ready: List[Tuple[float, int, str]] = []
        self._seq = itertools.count()
        self._id_seq = itertools.count(1)
        self._cond = threading.Condition()

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def enqueue(self, payload: Dict[str, object], options: JobOptions, job_id: Optional[str] = None) -> JobHandle:
        with self._cond:
            job_id = job_id or str(next(self._id_seq))
            if job_id in self._jobs:
                raise QueueError(f"Job {job_id} already exists in queue {self.name}")
            available_at = self._clock() + options.delay / 1000.0
            job = _QueuedJob(job_id, dict(payload), options, available_at)
            self._jobs[job_id] = job
            heapq.heappush(self._ready, (available_at, next(self._seq), job_id))
            self._cond.notify_all()

        logger.info(
            f"Enqueued job {job_id} on {self.name} "
            f"(delay={options.delay}ms, attempts={options.attempts})"
        )
        return JobHandle(job_id=job_id, queue_name=self.name, status=job.status)

    def get_status(self, job_id: str) -> Optional[JobInfo]:
        with self._cond:
            job = self._jobs.get(job_id)
            return job.info() if job else None

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def dequeue(self, timeout: Optional[float] = None) -> Optional[JobDelivery]:
        """
        Take the next job whose delay has elapsed.

        Returns None if nothing became available within timeout seconds.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while True:
                now = self._clock()
                if self._ready and self._ready[0][0] <= now:
                    _, _, job_id = heapq.heappop(self._ready)
                    job = self._jobs[job_id]
                    job.attempts_made += 1
                    job.status = JobStatus.ACTIVE
                    return JobDelivery(
                        job_id=job_id,
                        payload=dict(job.payload),
                        attempt=job.attempts_made,
                        max_attempts=job.max_attempts,
                        log=self._log_appender(job_id),
                    )

                if deadline is not None and time.monotonic() >= deadline:
                    return None

                wait = None
                if self._ready:
                    wait = max(0.0, self._ready[0][0] - now)
                if deadline is not None:
                    remaining = max(0.0, deadline - time.monotonic())
                    wait = remaining if wait is None else min(wait, remaining)
                # Fake clocks never advance while we sleep; poll instead of blocking forever
                self._cond.wait(timeout=min(wait, 0.05) if wait is not None else 0.05)

    def ack(self, job_id: str, result: Optional[Dict[str, object]] = None) -> None:
        """Mark a delivered job as completed."""
        with self._cond:
            job = self._jobs[job_id]
            job.status = JobStatus.COMPLETED
            job.result = result
            job.error = None

    def nack(self, job_id: str, error: BaseException) -> JobStatus:
        """
        Report a failed delivery. The job is requeued while attempts remain,
        otherwise it is dead-lettered as FAILED. Invalid jobs are never retried.

        Returns:
            The job's new status
        """
        with self._cond:
            job = self._jobs[job_id]
            job.error = str(error)
            retryable = not isinstance(error, InvalidJobError)
            if retryable and job.attempts_made < job.max_attempts:
                job.status = JobStatus.WAITING
                available_at = self._clock() + self._retry_backoff_s
                heapq.heappush(self._ready, (available_at, next(self._seq), job_id))
                self._cond.notify_all()
            else:
                job.status = JobStatus.FAILED
            status = job.status

        if status == JobStatus.FAILED:
            logger.warning(f"Job {job_id} moved to dead-letter after {job.attempts_made} attempt(s)")
        return status

    def consume(self, handler: DeliveryHandler, stop_event: Optional[threading.Event] = None) -> None:
        stop_event = stop_event or threading.Event()
        while not stop_event.is_set():
            delivery = self.dequeue(timeout=0.5)
            if delivery is None:
                continue
            self.process_delivery(delivery, handler)

    def process_delivery(self, delivery: JobDelivery, handler: DeliveryHandler) -> bool:
        """Run handler on one delivery and ack/nack it. Returns True on success."""
        try:
            result = handler(delivery)
        except Exception as e:
            self.nack(delivery.job_id, e)
            return False
        self.ack(delivery.job_id, result if isinstance(result, dict) else None)
        return True

    def pending_count(self) -> int:
        with self._cond:
            return len(self._ready)

    def _log_appender(self, job_id: str) -> Callable[[str], None]:
        def append(line: str) -> None:
            with self._cond:
                self._jobs[job_id].logs.append(line)
        return append
