"""
Domain entities and error taxonomy.
"""
from domain.errors import (
    IngestionError,
    ExtractionError,
    ChunkingError,
    EmbeddingServiceError,
    IndexWriteError,
    RelocationError,
    SourceDirectoryError,
    InvalidJobError,
    QueueError,
    PartialIngestionError,
)
from domain.models import (
    FileState,
    FailurePolicy,
    DocumentRecord,
    TextChunk,
    EmbeddingVector,
    IndexedVectorRecord,
    StageResult,
    FileOutcome,
    JobReport,
)

__all__ = [
    "IngestionError",
    "ExtractionError",
    "ChunkingError",
    "EmbeddingServiceError",
    "IndexWriteError",
    "RelocationError",
    "SourceDirectoryError",
    "InvalidJobError",
    "QueueError",
    "PartialIngestionError",
    "FileState",
    "FailurePolicy",
    "DocumentRecord",
    "TextChunk",
    "EmbeddingVector",
    "IndexedVectorRecord",
    "StageResult",
    "FileOutcome",
    "JobReport",
]
