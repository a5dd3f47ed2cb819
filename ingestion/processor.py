"""
Document processor module.
Runs one file through the full ingestion pipeline:
  extract → chunk → embed → index → archive

Each stage returns a StageResult; the processor stops the file at the first
failed result and reports it in the FileOutcome.
"""
from typing import Callable, List, Optional
import logging
import time

from domain.errors import (
    ChunkingError,
    EmbeddingServiceError,
    ExtractionError,
    IndexWriteError,
    IngestionError,
    RelocationError,
)
from domain.models import (
    DocumentRecord,
    EmbeddingVector,
    FileOutcome,
    FileState,
    IndexedVectorRecord,
    StageResult,
    TextChunk,
)
from embeddings.base import BaseEmbedding
from ingestion.chunking import TextChunker
from ingestion.extractor import PDFTextExtractor
from ingestion.relocator import FileRelocator
from vectorstore.base import BaseVectorStore

logger = logging.getLogger(__name__)

JobLog = Callable[[str], None]


def log_to_logger(message: str) -> None:
    logger.info(message)


class DocumentProcessor:
    """
    Orchestrates the per-file pipeline.

    Uses dependency injection so each component is replaceable.
    """

    def __init__(
        self,
        extractor: PDFTextExtractor,
        chunker: TextChunker,
        embedder: BaseEmbedding,
        vector_store: BaseVectorStore,
        relocator: Optional[FileRelocator] = None,
        namespace: str = "ns1",
    ):
        self.extractor = extractor
        self.chunker = chunker
        self.embedder = embedder
        self.vector_store = vector_store
        self.relocator = relocator or FileRelocator()
        self.namespace = namespace

        logger.info(
            f"DocumentProcessor initialized - "
            f"extractor={extractor.backend}, "
            f"embedder={embedder.__class__.__name__}, "
            f"vector_store={vector_store.__class__.__name__}, "
            f"namespace={namespace}"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, record: DocumentRecord, log: JobLog = log_to_logger) -> FileOutcome:
        """
        Process one PDF through every stage.

        Never raises for stage failures: a failed stage yields a FileOutcome
        in FAILED state carrying the error. A failed archive move yields a
        DONE outcome with archived=False and the RelocationError attached.
        """
        start = time.perf_counter()
        name = record.file_name
        outcome = FileOutcome(file_name=name, state=FileState.DISCOVERED)

        outcome.state = FileState.EXTRACTING
        log(f"starting to extract text from pdf file: {name}")
        extracted = self._extract(record)
        if not extracted.succeeded:
            return self._fail(outcome, extracted.error, log, start)
        text = extracted.value or ""
        log(f"extracted {len(text)} characters from pdf file: {name}")

        outcome.state = FileState.CHUNKING
        chunked = self._chunk(record, text)
        if not chunked.succeeded:
            return self._fail(outcome, chunked.error, log, start)
        chunks = chunked.value or []
        outcome.chunks_count = len(chunks)
        log(f"split {name} into {len(chunks)} chunks")

        if chunks:
            outcome.state = FileState.EMBEDDING
            log(f"embedding text of {name}")
            embedded = self._embed(record, chunks)
            if not embedded.succeeded:
                return self._fail(outcome, embedded.error, log, start)
            log(f"text embedded: {len(embedded.value or [])} vectors")

            outcome.state = FileState.INDEXING
            log(f"start indexing {name} into namespace '{self.namespace}'")
            indexed = self._index(record, embedded.value or [])
            if not indexed.succeeded:
                return self._fail(outcome, indexed.error, log, start)
            outcome.vectors_written = indexed.value or 0
            log(f"indexed {outcome.vectors_written} vectors for {name}")
        else:
            log(f"no text in {name}; nothing to embed or index")

        outcome.state = FileState.ARCHIVING
        moved = self._archive(record)
        if moved.succeeded:
            outcome.archived = True
            log(f"Moved: {name} -> {record.destination_path.parent}")
        else:
            outcome.error = moved.error
            outcome.failed_step = "archiving"
            log(
                f"Warning: {name} was indexed but could not be archived: {moved.error}. "
                f"Vectors are stored; the file stays in the source directory."
            )

        outcome.state = FileState.DONE
        outcome.processing_time = time.perf_counter() - start
        logger.info(
            f"Processed {name}: {outcome.vectors_written} vectors in "
            f"{outcome.processing_time:.2f}s"
        )
        return outcome

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _extract(self, record: DocumentRecord) -> StageResult[str]:
        try:
            raw_bytes = record.source_path.read_bytes()
        except OSError as e:
            return StageResult.fail(
                ExtractionError(
                    f"Cannot read {record.file_name}: {e}",
                    file_name=record.file_name,
                    step="extracting",
                )
            )
        try:
            return StageResult.ok(self.extractor.extract(raw_bytes))
        except ExtractionError as e:
            return StageResult.fail(e.with_context(record.file_name, "extracting"))

    def _chunk(self, record: DocumentRecord, text: str) -> StageResult[List[TextChunk]]:
        try:
            return StageResult.ok(self.chunker.split(text, source_file=record.file_name))
        except ValueError as e:
            return StageResult.fail(
                ChunkingError(str(e), file_name=record.file_name, step="chunking")
            )

    def _embed(
        self, record: DocumentRecord, chunks: List[TextChunk]
    ) -> StageResult[List[EmbeddingVector]]:
        try:
            vectors = self.embedder.embed_batch(chunks)
        except EmbeddingServiceError as e:
            return StageResult.fail(e.with_context(record.file_name, "embedding"))

        expected = [c.sequence_index for c in chunks]
        if [v.chunk_index for v in vectors] != expected:
            return StageResult.fail(
                EmbeddingServiceError(
                    f"Embedding output does not align with chunks: expected "
                    f"{len(expected)} vectors, got {len(vectors)}",
                    file_name=record.file_name,
                    step="embedding",
                )
            )
        return StageResult.ok(vectors)

    def _index(
        self,
        record: DocumentRecord,
        vectors: List[EmbeddingVector],
    ) -> StageResult[int]:
        records = [IndexedVectorRecord.from_embedding(record.file_name, v) for v in vectors]
        try:
            return StageResult.ok(self.vector_store.upsert(self.namespace, records))
        except IndexWriteError as e:
            return StageResult.fail(e.with_context(record.file_name, "indexing"))
        except ValueError as e:
            return StageResult.fail(
                IndexWriteError(
                    f"Error indexing embeddings: {e}",
                    file_name=record.file_name,
                    step="indexing",
                )
            )

    def _archive(self, record: DocumentRecord) -> StageResult[None]:
        try:
            self.relocator.relocate(record.source_path, record.destination_path)
            return StageResult.ok(None)
        except RelocationError as e:
            return StageResult.fail(e.with_context(record.file_name, "archiving"))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fail(
        self,
        outcome: FileOutcome,
        error: Optional[IngestionError],
        log: JobLog,
        start: float,
    ) -> FileOutcome:
        step = outcome.state.value
        outcome.failed_step = step
        outcome.error = error
        outcome.state = FileState.FAILED
        outcome.processing_time = time.perf_counter() - start
        log(f"Failed: {outcome.file_name} at {step}: {error}")
        logger.error(f"Failed to process {outcome.file_name} at {step}: {error}")
        return outcome
