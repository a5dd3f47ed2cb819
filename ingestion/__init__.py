"""
Ingestion module.

Per-file pipeline and the job-level loop over a source directory:

  ingestion.extractor   - PDF text extraction
  ingestion.chunking    - contiguous character chunks
  ingestion.relocator   - atomic move to the archive directory
  ingestion.processor   - extract → chunk → embed → index → archive for one file
  ingestion.pipeline    - directory loop and job failure policy
"""
from ingestion.extractor import PDFTextExtractor
from ingestion.chunking import TextChunker, split_text
from ingestion.relocator import FileRelocator
from ingestion.processor import DocumentProcessor
from ingestion.pipeline import IngestionOrchestrator, SUCCESS_MESSAGE

__all__ = [
    "PDFTextExtractor",
    "TextChunker",
    "split_text",
    "FileRelocator",
    "DocumentProcessor",
    "IngestionOrchestrator",
    "SUCCESS_MESSAGE",
]
