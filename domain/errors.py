"""
Error taxonomy for the ingestion service.

Every error raised by a pipeline stage carries the file and the step where
it happened so the job log and the failure event can report it.
"""
from typing import Any, List, Optional


class IngestionError(Exception):
    """Base class for every ingestion failure"""

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        step: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.file_name = file_name
        self.step = step

    def with_context(self, file_name: str, step: str) -> "IngestionError":
        """Fill in file/step if the raiser did not know them."""
        if self.file_name is None:
            self.file_name = file_name
        if self.step is None:
            self.step = step
        return self


class ExtractionError(IngestionError):
    """The bytes are not a parseable document of the expected format"""
    pass


class ChunkingError(IngestionError):
    """Text could not be split into chunks"""
    pass


class EmbeddingServiceError(IngestionError):
    """Remote embedding call failed (timeout, quota, malformed response)"""
    pass


class IndexWriteError(IngestionError):
    """Vector store upsert failed"""
    pass


class RelocationError(IngestionError):
    """Processed file could not be moved to the archive location"""
    pass


class SourceDirectoryError(IngestionError):
    """Source directory is missing or cannot be listed"""
    pass


class InvalidJobError(IngestionError):
    """Job payload failed schema validation"""
    pass


class QueueError(IngestionError):
    """Job broker call failed"""
    pass


class PartialIngestionError(IngestionError):
    """
    Raised at the end of a job run under the ``isolate`` failure policy when
    one or more files failed while the others were processed.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[IngestionError]] = None,
        report: Any = None,
    ):
        super().__init__(message, step="job")
        self.errors = errors or []
        self.report = report
