"""
Unit tests for DocumentProcessor.
"""
from pathlib import Path
from unittest.mock import Mock

import pytest

from domain.errors import (
    EmbeddingServiceError,
    ExtractionError,
    IndexWriteError,
    RelocationError,
)
from domain.models import DocumentRecord, FileState
from tests.conftest import DIMENSION, RecordingEmbedding


def _record(source: Path, destination_dir: Path) -> DocumentRecord:
    return DocumentRecord.from_entry(source, destination_dir)


class TestDocumentProcessorSuccess:
    """Tests para el camino exitoso"""

    def test_single_chunk(self, dirs, write_pdf, embedder, store, make_processor):
        """Prueba un PDF corto: un vector, archivo movido"""
        source, destination = dirs
        pdf = write_pdf(source / "a.pdf", "Short document")
        lines = []

        outcome = make_processor(embedder, store).process(_record(pdf, destination), lines.append)

        assert outcome.state == FileState.DONE
        assert outcome.archived is True
        assert outcome.chunks_count == 1
        assert outcome.vectors_written == 1
        assert store.list_ids("ns1") == ["a.pdf-0"]
        assert store.fetch("ns1", ["a.pdf-0"])["a.pdf-0"].metadata == {"file": "a.pdf", "page": 0}
        assert not pdf.exists()
        assert (destination / "a.pdf").exists()
        assert "starting to extract text from pdf file: a.pdf" in lines
        assert any(line.startswith("Moved: a.pdf") for line in lines)

    def test_multiple_chunks(self, dirs, write_pdf, embedder, store, make_processor):
        """Prueba que cada chunk genera un vector con id por índice"""
        source, destination = dirs
        pdf = write_pdf(source / "long.pdf", "abcdefghij" * 3)

        outcome = make_processor(embedder, store, max_chunk_size=10).process(_record(pdf, destination))

        assert outcome.chunks_count == len(embedder.calls)
        assert outcome.chunks_count >= 3
        assert sorted(store.list_ids("ns1")) == sorted(
            f"long.pdf-{i}" for i in range(outcome.chunks_count)
        )
        assert "abcdefghij" in "".join(embedder.calls)

    def test_empty_text_no_embed_no_index(self, dirs, write_pdf, store, make_processor):
        """Prueba texto vacío: sin llamadas de embedding ni escrituras"""
        source, destination = dirs
        pdf = write_pdf(source / "blank.pdf", "")
        embedder = RecordingEmbedding()
        vector_store = Mock(wraps=store)

        outcome = make_processor(embedder, vector_store).process(_record(pdf, destination))

        assert outcome.state == FileState.DONE
        assert outcome.chunks_count == 0
        assert embedder.calls == []
        vector_store.upsert.assert_not_called()
        assert (destination / "blank.pdf").exists()


class TestDocumentProcessorFailures:
    """Tests para fallos por etapa"""

    def test_extraction_failure(self, dirs, embedder, store, make_processor):
        """Prueba PDF corrupto: falla en extracting y no se mueve"""
        source, destination = dirs
        broken = source / "broken.pdf"
        broken.write_bytes(b"not a pdf at all")

        outcome = make_processor(embedder, store).process(_record(broken, destination))

        assert outcome.state == FileState.FAILED
        assert outcome.failed_step == "extracting"
        assert isinstance(outcome.error, ExtractionError)
        assert outcome.error.file_name == "broken.pdf"
        assert embedder.calls == []
        assert broken.exists()

    def test_embedding_failure_on_chunk_2_of_5(self, dirs, write_pdf, store, make_processor):
        """Prueba fallo en el chunk 2 de 5: nada escrito, nada movido"""
        source, destination = dirs
        pdf = write_pdf(source / "five.pdf", "x" * 50)
        embedder = RecordingEmbedding(fail_on=[2])
        extractor = Mock(backend="stub")
        extractor.extract.return_value = "x" * 50
        processor = make_processor(embedder, store, max_chunk_size=10, extractor=extractor)

        outcome = processor.process(_record(pdf, destination))

        assert outcome.chunks_count == 5
        assert outcome.state == FileState.FAILED
        assert outcome.failed_step == "embedding"
        assert isinstance(outcome.error, EmbeddingServiceError)
        assert outcome.error.file_name == "five.pdf"
        assert len(embedder.calls) == 2
        assert store.count("ns1") == 0
        assert pdf.exists()
        assert not (destination / "five.pdf").exists()

    def test_index_failure(self, dirs, write_pdf, embedder, make_processor):
        """Prueba fallo de escritura en el índice: no se mueve"""
        source, destination = dirs
        pdf = write_pdf(source / "a.pdf", "text")
        vector_store = Mock()
        vector_store.upsert.side_effect = IndexWriteError("index down", step="indexing")

        outcome = make_processor(embedder, vector_store).process(_record(pdf, destination))

        assert outcome.state == FileState.FAILED
        assert outcome.failed_step == "indexing"
        assert outcome.error.file_name == "a.pdf"
        assert pdf.exists()

    def test_misaligned_embeddings(self, dirs, write_pdf, store, make_processor):
        """Prueba salida del embedder desalineada con los chunks"""
        source, destination = dirs
        pdf = write_pdf(source / "a.pdf", "text")
        embedder = Mock()
        embedder.embed_batch.return_value = []

        outcome = make_processor(embedder, store).process(_record(pdf, destination))

        assert outcome.failed_step == "embedding"
        assert "does not align" in str(outcome.error)
        assert store.count("ns1") == 0

    def test_relocation_failure_is_degraded(self, dirs, write_pdf, embedder, store, make_processor):
        """Prueba que un fallo al mover deja el archivo indexado pero degradado"""
        source, destination = dirs
        pdf = write_pdf(source / "a.pdf", "text")
        relocator = Mock()
        relocator.relocate.side_effect = RelocationError("disk full", step="archiving")
        lines = []

        outcome = make_processor(embedder, store, relocator=relocator).process(
            _record(pdf, destination), lines.append
        )

        assert outcome.state == FileState.DONE
        assert outcome.archived is False
        assert outcome.degraded is True
        assert outcome.error.file_name == "a.pdf"
        assert store.count("ns1") == 1
        assert any(line.startswith("Warning: a.pdf was indexed") for line in lines)


class TestDocumentRecord:
    """Tests para DocumentRecord"""

    def test_from_entry(self, tmp_path):
        """Prueba rutas absolutas de origen y destino"""
        record = DocumentRecord.from_entry(tmp_path / "pdf" / "a.pdf", tmp_path / "archive")
        assert record.file_name == "a.pdf"
        assert record.source_path.is_absolute()
        assert record.destination_path == (tmp_path / "archive").resolve() / "a.pdf"

    def test_vector_dimension_matches(self):
        """Prueba dimensión del embedder de pruebas"""
        assert RecordingEmbedding().get_dimension() == DIMENSION
