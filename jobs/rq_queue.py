"""
Redis-backed job queue using rq.

Delay maps to ``enqueue_in`` (needs a worker running with the scheduler),
attempts map to ``Retry(max=attempts - 1)`` and exhausted jobs land in rq's
failed job registry, which acts as the dead-letter.
"""
from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Dict, List, Optional

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Retry, Worker
from rq.exceptions import NoSuchJobError
from rq.job import Job

from domain.errors import QueueError
from jobs.models import JobHandle, JobInfo, JobOptions, JobStatus
from jobs.queue import BaseJobQueue, DeliveryHandler

logger = logging.getLogger(__name__)

TASK_PATH = "jobs.tasks.process_ingestion_job"

_RQ_STATUS = {
    "queued": JobStatus.WAITING,
    "scheduled": JobStatus.DELAYED,
    "deferred": JobStatus.DELAYED,
    "started": JobStatus.ACTIVE,
    "finished": JobStatus.COMPLETED,
    "failed": JobStatus.FAILED,
    "stopped": JobStatus.FAILED,
    "canceled": JobStatus.FAILED,
}


def build_retry_policy(max_attempts: int, base_backoff_s: int) -> Optional[Retry]:
    """rq retry policy for a total of max_attempts deliveries, exponential backoff."""
    max_retries = max(0, int(max_attempts) - 1)
    if max_retries == 0:
        return None
    base = max(1, int(base_backoff_s))
    intervals = [base * (2 ** idx) for idx in range(max_retries)]
    return Retry(max=max_retries, interval=intervals)


class RQJobQueue(BaseJobQueue):
    """
    Cola durable sobre Redis + rq.
    """

    def __init__(
        self,
        name: str = "pdf_transform",
        connection: Optional[Redis] = None,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        retry_backoff_s: int = 30,
        job_timeout_s: int = 3600,
    ):
        super().__init__(name)
        self.redis = connection or Redis(host=host, port=port, db=db)
        self.retry_backoff_s = retry_backoff_s
        self.job_timeout_s = job_timeout_s
        self.queue = Queue(name, connection=self.redis)

    def enqueue(self, payload: Dict[str, object], options: JobOptions, job_id: Optional[str] = None) -> JobHandle:
        kwargs = {
            "job_id": job_id,
            "retry": build_retry_policy(options.attempts, self.retry_backoff_s),
            "meta": {"logs": [], "attempts_made": 0, "max_attempts": options.attempts},
            "job_timeout": self.job_timeout_s,
            "description": f"pdf_transform_job {payload.get('pdf_path')}",
        }
        try:
            if options.delay > 0:
                rq_job = self.queue.enqueue_in(
                    timedelta(milliseconds=options.delay), TASK_PATH, payload, **kwargs
                )
                status = JobStatus.DELAYED
            else:
                rq_job = self.queue.enqueue(TASK_PATH, payload, **kwargs)
                status = JobStatus.WAITING
        except RedisError as e:
            raise QueueError(f"Cannot enqueue job on {self.name}: {e}", step="enqueue") from e

        logger.info(
            f"Enqueued job {rq_job.id} on {self.name} "
            f"(delay={options.delay}ms, attempts={options.attempts})"
        )
        return JobHandle(job_id=rq_job.id, queue_name=self.name, status=status)

    def get_status(self, job_id: str) -> Optional[JobInfo]:
        try:
            rq_job = Job.fetch(job_id, connection=self.redis)
        except NoSuchJobError:
            return None
        except RedisError as e:
            raise QueueError(f"Cannot read job {job_id}: {e}", step="status") from e

        rq_status = rq_job.get_status()
        status_key = getattr(rq_status, "value", rq_status)
        status = _RQ_STATUS.get(status_key, JobStatus.UNKNOWN)
        meta = rq_job.meta or {}

        error = None
        latest = rq_job.latest_result()
        if latest is not None and latest.type == latest.Type.FAILED:
            error = latest.exc_string

        result = rq_job.return_value() if status == JobStatus.COMPLETED else None
        payload = rq_job.args[0] if rq_job.args else {}
        logs: List[str] = list(meta.get("logs", []))

        return JobInfo(
            job_id=rq_job.id,
            status=status,
            payload=dict(payload),
            attempts_made=int(meta.get("attempts_made", 0)),
            max_attempts=int(meta.get("max_attempts", 1)),
            logs=logs,
            error=error,
            result=result if isinstance(result, dict) else None,
            enqueued_at=rq_job.enqueued_at,
        )

    def consume(self, handler: DeliveryHandler, stop_event: Optional[threading.Event] = None) -> None:
        """
        Run an rq worker (with scheduler) on this queue.

        Without stop_event the worker blocks until rq receives SIGINT/SIGTERM.
        With stop_event the worker drains the queue in burst mode and polls.
        """
        from jobs import tasks

        tasks.register_handler(self.name, handler)
        if stop_event is None:
            Worker([self.queue], connection=self.redis).work(with_scheduler=True)
            return

        while not stop_event.is_set():
            Worker([self.queue], connection=self.redis).work(burst=True, with_scheduler=True)
            stop_event.wait(1.0)
