"""
Domain models for the PDF ingestion service.
Defines the core entities flowing through extract → chunk → embed → index → archive.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, TypeVar

from domain.errors import IngestionError, RelocationError

T = TypeVar("T")


class FileState(Enum):
    """Estados del procesamiento de un archivo dentro de un job"""
    DISCOVERED = "discovered"
    EXTRACTING = "extracting"
    CHUNKING = "chunking"
    EMBEDDING = "embedding"
    INDEXING = "indexing"
    ARCHIVING = "archiving"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailurePolicy(Enum):
    """What a job does when one file fails embedding or indexing"""
    FAIL_FAST = "fail_fast"
    ISOLATE = "isolate"


@dataclass
class DocumentRecord:
    """Un archivo descubierto en el directorio de origen"""
    file_name: str
    source_path: Path
    destination_path: Path

    @classmethod
    def from_entry(cls, entry: Path, destination_directory: Path) -> "DocumentRecord":
        # symlinks are not followed; the link itself is archived
        return cls(
            file_name=entry.name,
            source_path=entry.absolute(),
            destination_path=destination_directory.resolve() / entry.name,
        )


@dataclass(frozen=True)
class TextChunk:
    """Fragmento contiguo del texto de un documento"""
    source_file: str
    sequence_index: int
    content: str

    def __len__(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class EmbeddingVector:
    """Embedding de un chunk, alineado por chunk_index"""
    chunk_index: int
    values: List[float]

    @property
    def dimension(self) -> int:
        return len(self.values)


@dataclass
class IndexedVectorRecord:
    """Unidad persistida en el vector store"""
    id: str
    values: List[float]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def make_id(file_name: str, chunk_index: int) -> str:
        return f"{file_name}-{chunk_index}"

    @classmethod
    def from_embedding(cls, file_name: str, vector: EmbeddingVector) -> "IndexedVectorRecord":
        return cls(
            id=cls.make_id(file_name, vector.chunk_index),
            values=list(vector.values),
            metadata={"file": file_name, "page": vector.chunk_index},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "values": self.values, "metadata": dict(self.metadata)}


@dataclass
class StageResult(Generic[T]):
    """
    Outcome of one pipeline stage: either a value or the error that stopped
    the file. Stages return these instead of raising so the processor can
    stop at the first failure explicitly.
    """
    value: Optional[T] = None
    error: Optional[IngestionError] = None

    @classmethod
    def ok(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: IngestionError) -> "StageResult[T]":
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class FileOutcome:
    """Resultado del procesamiento de un archivo"""
    file_name: str
    state: FileState
    chunks_count: int = 0
    vectors_written: int = 0
    error: Optional[IngestionError] = None
    failed_step: Optional[str] = None
    archived: bool = False
    processing_time: float = 0.0

    @property
    def degraded(self) -> bool:
        """Indexed but the archive move did not complete"""
        return self.state == FileState.DONE and isinstance(self.error, RelocationError)


@dataclass
class JobReport:
    """Resultado de un job completo sobre un directorio"""
    job_id: str
    source_directory: str
    destination_directory: str
    outcomes: List[FileOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    def _with_state(self, state: FileState) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.state == state]

    @property
    def processed(self) -> List[FileOutcome]:
        return self._with_state(FileState.DONE)

    @property
    def skipped(self) -> List[FileOutcome]:
        return self._with_state(FileState.SKIPPED)

    @property
    def failed(self) -> List[FileOutcome]:
        return self._with_state(FileState.FAILED)

    @property
    def degraded(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.degraded]

    @property
    def total_vectors(self) -> int:
        return sum(o.vectors_written for o in self.outcomes)

    def summary(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "processed": len(self.processed),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
            "degraded": len(self.degraded),
            "vectors": self.total_vectors,
        }
