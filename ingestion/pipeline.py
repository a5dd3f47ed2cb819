"""
Ingestion orchestrator for one job run.
Lists the job's source directory, runs every PDF through the
DocumentProcessor and decides whether the job succeeds.
"""
from typing import List, Optional, Sequence
from pathlib import Path
from datetime import datetime
import logging

from domain.errors import (
    ExtractionError,
    IngestionError,
    PartialIngestionError,
    RelocationError,
    SourceDirectoryError,
)
from domain.models import (
    DocumentRecord,
    FailurePolicy,
    FileOutcome,
    FileState,
    JobReport,
)
from ingestion.processor import DocumentProcessor, JobLog, log_to_logger
from jobs.models import IngestionJob

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "All PDF files have been processed and moved successfully."


class IngestionOrchestrator:
    """
    Drives one job's document loop.

    Files are processed sequentially in directory-listing order. Extraction
    failures only fail their own file. Embedding and indexing failures fail
    the job immediately (``fail_fast``) or after the remaining files have
    been processed (``isolate``).
    """

    def __init__(
        self,
        processor: DocumentProcessor,
        failure_policy: FailurePolicy = FailurePolicy.FAIL_FAST,
        supported_extensions: Optional[Sequence[str]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            processor: DocumentProcessor for handling individual files
            failure_policy: What to do when a file fails embedding/indexing
            supported_extensions: Lower-case extensions treated as documents (default: ['.pdf'])
        """
        self.processor = processor
        self.failure_policy = failure_policy
        self.supported_extensions = [e.lower() for e in (supported_extensions or [".pdf"])]

        logger.info(
            f"IngestionOrchestrator initialized with "
            f"failure_policy={failure_policy.value}, "
            f"supported_extensions={self.supported_extensions}"
        )

    def run(self, job: IngestionJob, log: JobLog = log_to_logger) -> JobReport:
        """
        Ingest every document of the job's source directory.

        Returns:
            JobReport with one FileOutcome per directory entry

        Raises:
            SourceDirectoryError: If the source directory cannot be listed
            IngestionError: The first embedding/indexing failure (fail_fast)
            PartialIngestionError: Aggregate of file failures (isolate)
        """
        source = Path(job.source_directory)
        destination = Path(job.destination_directory)
        report = JobReport(
            job_id=job.id,
            source_directory=str(source),
            destination_directory=str(destination),
        )

        try:
            entries = self.discover(source)
        except SourceDirectoryError as e:
            log(f"Error processing files: {e}")
            raise

        log(f"found {len(entries)} entries in {source}")
        self.prepare_destination(destination, log)
        job_errors: List[IngestionError] = []

        for entry in entries:
            if not self.is_document(entry):
                log(f"Skipped: {entry.name} (Not a PDF)")
                report.outcomes.append(FileOutcome(file_name=entry.name, state=FileState.SKIPPED))
                continue

            log(f"starting to embed pdf file: {entry.name}")
            record = DocumentRecord.from_entry(entry, destination)
            outcome = self.processor.process(record, log)
            report.outcomes.append(outcome)

            if outcome.state != FileState.FAILED or outcome.error is None:
                continue

            error = outcome.error
            if isinstance(error, ExtractionError):
                log(f"Skipping {entry.name}: extraction failed, file left in place")
                continue

            log(f"Error processing files: {error}")
            if self.failure_policy == FailurePolicy.FAIL_FAST:
                report.completed_at = datetime.now()
                raise error
            job_errors.append(error)

        report.completed_at = datetime.now()

        if job_errors:
            names = ", ".join(f"{e.file_name} ({e.step})" for e in job_errors)
            message = f"{len(job_errors)} file(s) failed: {names}"
            log(f"Error processing files: {message}")
            raise PartialIngestionError(message, errors=job_errors, report=report)

        if report.failed:
            log(
                f"Processed {len(report.processed)} PDF files; "
                f"{len(report.failed)} could not be read and were left in place."
            )
        else:
            log(SUCCESS_MESSAGE)
        return report

    def discover(self, source_directory: Path) -> List[Path]:
        """
        List the entries of the source directory, non-recursively, in
        directory-listing order.

        Raises:
            SourceDirectoryError: If the directory is missing or unreadable
        """
        if not source_directory.exists():
            raise SourceDirectoryError(
                f"Directory does not exist: {source_directory}", step="discovering"
            )
        if not source_directory.is_dir():
            raise SourceDirectoryError(
                f"Path is not a directory: {source_directory}", step="discovering"
            )
        try:
            return list(source_directory.iterdir())
        except OSError as e:
            raise SourceDirectoryError(
                f"Cannot list {source_directory}: {e}", step="discovering"
            ) from e

    def prepare_destination(self, destination_directory: Path, log: JobLog = log_to_logger) -> bool:
        """
        Create the destination directory if absent. A failure is logged and
        the job goes on; each file then fails archiving on its own.
        """
        try:
            destination_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = RelocationError(
                f"Cannot create destination directory {destination_directory}: {e}",
                step="archiving",
            )
            logger.warning(str(error))
            log(f"Warning: {error}")
            return False
        return True

    def is_document(self, entry: Path) -> bool:
        """Regular file with a supported extension (case-insensitive)."""
        return entry.is_file() and entry.suffix.lower() in self.supported_extensions
