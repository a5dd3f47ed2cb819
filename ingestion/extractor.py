"""
PDF text extraction.
Turns the raw bytes of one PDF into plain text, all pages concatenated.
Only responsible for reading PDFs, not for file management.
"""
from io import BytesIO
from pathlib import Path
from typing import List
import logging

import pdfplumber
import PyPDF2

from domain.errors import ExtractionError

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("pypdf2", "pdfplumber")
PAGE_SEPARATOR = "\n\n"


class PDFTextExtractor:
    """
    Extrae texto de documentos PDF.
    Responsabilidad única: bytes → texto.
    """

    def __init__(self, backend: str = "pypdf2"):
        """
        Inicializa el extractor.

        Args:
            backend: Backend a usar ('pypdf2' o 'pdfplumber')
        """
        self.backend = backend.lower()
        if self.backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Backend '{self.backend}' no soportado. Usa 'pypdf2' o 'pdfplumber'"
            )

    def extract(self, raw_bytes: bytes) -> str:
        """
        Extract the full text of a PDF given its bytes.

        Args:
            raw_bytes: Binary contents of one document

        Returns:
            Text of every page joined by a blank line

        Raises:
            ExtractionError: If the bytes are not a parseable PDF
        """
        if not raw_bytes:
            raise ExtractionError("Document is empty", step="extracting")

        try:
            if self.backend == "pypdf2":
                pages = self._extract_with_pypdf2(raw_bytes)
            else:
                pages = self._extract_with_pdfplumber(raw_bytes)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(
                f"Error extracting text from PDF: {e}", step="extracting"
            ) from e

        text = PAGE_SEPARATOR.join(pages)
        logger.debug(f"Extracted {len(text)} chars from {len(pages)} pages ({self.backend})")
        return text

    def extract_file(self, file_path: Path | str) -> str:
        """Read a PDF from disk and extract its text."""
        path = Path(file_path)
        try:
            raw_bytes = path.read_bytes()
        except OSError as e:
            raise ExtractionError(
                f"Cannot read {path.name}: {e}", file_name=path.name, step="extracting"
            ) from e

        try:
            return self.extract(raw_bytes)
        except ExtractionError as e:
            raise e.with_context(path.name, "extracting")

    def _extract_with_pypdf2(self, raw_bytes: bytes) -> List[str]:
        """Extrae texto usando PyPDF2"""
        reader = PyPDF2.PdfReader(BytesIO(raw_bytes))
        parts: List[str] = []
        for page_num, page in enumerate(reader.pages):
            page_text = page.extract_text()
            if page_text:
                parts.append(page_text)
            else:
                logger.debug(f"Page {page_num + 1} has no extractable text")
        return parts

    def _extract_with_pdfplumber(self, raw_bytes: bytes) -> List[str]:
        """Extrae texto usando pdfplumber"""
        parts: List[str] = []
        with pdfplumber.open(BytesIO(raw_bytes)) as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    parts.append(page_text)
        return parts
