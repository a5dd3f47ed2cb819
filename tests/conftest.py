"""
Shared fixtures: minimal real PDFs and controllable embedding clients.
"""
import logging
from pathlib import Path
from typing import List, Optional

import pytest

from domain.errors import EmbeddingServiceError
from embeddings.base import BaseEmbedding, EmbeddingConfig
from ingestion.chunking import TextChunker
from ingestion.extractor import PDFTextExtractor
from ingestion.processor import DocumentProcessor
from ingestion.relocator import FileRelocator
from vectorstore.base import InMemoryVectorStore

logger = logging.getLogger(__name__)

DIMENSION = 8


def make_pdf(text: str) -> bytes:
    """Build a one-page PDF whose only content is ``text`` in Helvetica."""
    escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


class RecordingEmbedding(BaseEmbedding):
    """
    Embedding client that records every text it receives and fails on the
    calls listed in ``fail_on`` (1-based), or on every call.
    """

    def __init__(
        self,
        dimension: int = DIMENSION,
        fail_on: Optional[List[int]] = None,
        always_fail: bool = False,
        max_input_chars: int = 8000,
    ):
        self.calls: List[str] = []
        self.fail_on = set(fail_on or [])
        self.always_fail = always_fail
        super().__init__(
            EmbeddingConfig(
                model_name="test-model",
                dimension=dimension,
                max_input_chars=max_input_chars,
            )
        )

    def _validate_provider(self):
        logger.debug("RecordingEmbedding provider validated")

    def _request_embedding(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.always_fail or len(self.calls) in self.fail_on:
            raise EmbeddingServiceError("quota exceeded", step="embedding")
        return [float(len(self.calls))] * self.config.dimension


@pytest.fixture
def write_pdf():
    def _write(path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(make_pdf(text))
        return path
    return _write


@pytest.fixture
def dirs(tmp_path):
    source = tmp_path / "pdf"
    destination = tmp_path / "archive_pdf"
    source.mkdir()
    return source, destination


@pytest.fixture
def embedder():
    return RecordingEmbedding()


@pytest.fixture
def store():
    return InMemoryVectorStore(dimension=DIMENSION)


@pytest.fixture
def make_processor():
    def _make(embedder, store, max_chunk_size: int = 8000, relocator=None, extractor=None) -> DocumentProcessor:
        return DocumentProcessor(
            extractor=extractor or PDFTextExtractor(),
            chunker=TextChunker(max_chunk_size=max_chunk_size),
            embedder=embedder,
            vector_store=store,
            relocator=relocator or FileRelocator(),
            namespace="ns1",
        )
    return _make
