"""
Text chunking module.
Splits extracted text into contiguous, non-overlapping segments bounded by
what the embedding service accepts per call.
"""
from typing import List, Optional
import logging

from domain.models import TextChunk

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 8000


def _validate_size(max_chunk_size: int) -> None:
    if max_chunk_size <= 0:
        raise ValueError("max_chunk_size debe ser mayor a 0")


def split_text(text: str, max_chunk_size: int, source_file: str = "") -> List[TextChunk]:
    """
    Split text into chunks of at most max_chunk_size characters.

    Concatenating the returned contents in order gives back ``text``.
    Empty text gives an empty list.
    """
    _validate_size(max_chunk_size)

    chunks: List[TextChunk] = []
    start = 0
    while start < len(text):
        end = min(start + max_chunk_size, len(text))
        chunks.append(
            TextChunk(
                source_file=source_file,
                sequence_index=len(chunks),
                content=text[start:end],
            )
        )
        start = end
    return chunks


class TextChunker:
    """
    Character-bounded chunker bound to a default size.
    """

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE):
        _validate_size(max_chunk_size)
        self.max_chunk_size = max_chunk_size
        logger.info(f"TextChunker initialized - max_chunk_size={max_chunk_size}")

    def split(
        self,
        text: str,
        max_chunk_size: Optional[int] = None,
        source_file: str = "",
    ) -> List[TextChunk]:
        """
        Split text into ordered chunks.

        Args:
            text: Full document text
            max_chunk_size: Override of the configured bound
            source_file: File name stamped on every chunk

        Returns:
            Chunks with contiguous zero-based sequence indices
        """
        size = self.max_chunk_size if max_chunk_size is None else max_chunk_size
        chunks = split_text(text, size, source_file=source_file)
        if chunks:
            logger.debug(f"Created {len(chunks)} chunks for {source_file or '<text>'}")
        else:
            logger.warning(f"Empty text for {source_file or '<text>'}")
        return chunks

    def estimate_count(self, text: str) -> int:
        """Number of chunks split() would produce."""
        if not text:
            return 0
        return (len(text) + self.max_chunk_size - 1) // self.max_chunk_size
