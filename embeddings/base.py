"""
Base module for embeddings generation.
Defines the abstract interface for embedding service clients.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from dataclasses import dataclass
import hashlib
import logging
import random

from domain.errors import EmbeddingServiceError
from domain.models import EmbeddingVector, TextChunk

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingConfig:
    """Configuration for embedding generation"""
    model_name: str = "text-embedding-004"
    dimension: int = 768  # Dimensión del vector de embedding
    timeout: int = 30  # Timeout en segundos por llamada
    max_input_chars: int = 8000  # Límite de entrada del servicio
    normalize: bool = False  # Normalizar vectores (L2)

    def validate(self):
        """Valida la configuración"""
        if self.dimension <= 0:
            raise ValueError("dimension debe ser mayor a 0")
        if self.timeout <= 0:
            raise ValueError("timeout debe ser mayor a 0")
        if self.max_input_chars <= 0:
            raise ValueError("max_input_chars debe ser mayor a 0")


class BaseEmbedding(ABC):
    """
    Clase base abstracta para clientes del servicio de embeddings.
    Una llamada remota por texto; el orden de salida sigue al de entrada.
    """

    def __init__(self, config: Optional[EmbeddingConfig] = None):
        """
        Inicializa el cliente de embeddings.

        Args:
            config: Configuración del embedding. Si es None, usa valores por defecto.
        """
        self.config = config or EmbeddingConfig()
        self.config.validate()
        self._validate_provider()
        logger.info(
            f"{self.__class__.__name__} initialized with model={self.config.model_name}, "
            f"dimension={self.config.dimension}"
        )

    @abstractmethod
    def _validate_provider(self):
        """
        Valida que el proveedor esté correctamente configurado
        (API keys, URLs).

        Raises:
            EmbeddingServiceError: Si la validación falla
        """
        pass

    @abstractmethod
    def _request_embedding(self, text: str) -> List[float]:
        """
        Perform the remote call for a single text.

        Raises:
            EmbeddingServiceError: On any remote failure
        """
        pass

    def embed_text(self, text: str) -> List[float]:
        """
        Genera el embedding para un texto.

        Args:
            text: Texto a convertir en embedding

        Returns:
            Vector de embedding como lista de floats

        Raises:
            EmbeddingServiceError: Si el texto excede el límite o la llamada falla
        """
        if len(text) > self.config.max_input_chars:
            raise EmbeddingServiceError(
                f"Input of {len(text)} chars exceeds limit of "
                f"{self.config.max_input_chars}",
                step="embedding",
            )

        embedding = self._request_embedding(text)
        self._check_embedding(embedding)

        if self.config.normalize:
            magnitude = sum(x ** 2 for x in embedding) ** 0.5
            if magnitude > 0:
                embedding = [x / magnitude for x in embedding]
        return embedding

    def embed_batch(self, chunks: Sequence[TextChunk]) -> List[EmbeddingVector]:
        """
        Embed every chunk, one call per chunk, preserving order.

        The first failure aborts the batch; nothing computed so far is returned.

        Raises:
            EmbeddingServiceError: If any call fails
        """
        vectors: List[EmbeddingVector] = []
        for chunk in chunks:
            try:
                values = self.embed_text(chunk.content)
            except EmbeddingServiceError as e:
                raise EmbeddingServiceError(
                    f"Error generating embeddings for chunk {chunk.sequence_index}: "
                    f"{e.message}",
                    file_name=chunk.source_file or None,
                    step="embedding",
                ) from e
            vectors.append(EmbeddingVector(chunk_index=chunk.sequence_index, values=values))

            logger.debug(
                f"Embedded chunk {chunk.sequence_index} of {chunk.source_file or '<text>'}"
            )
        return vectors

    def _check_embedding(self, embedding: List[float]) -> None:
        if not embedding:
            raise EmbeddingServiceError("Malformed response: empty embedding", step="embedding")
        if len(embedding) != self.config.dimension:
            raise EmbeddingServiceError(
                f"Malformed response: expected dimension {self.config.dimension}, "
                f"got {len(embedding)}",
                step="embedding",
            )
        if not all(isinstance(x, (int, float)) for x in embedding):
            raise EmbeddingServiceError(
                "Malformed response: embedding contains non-numeric values",
                step="embedding",
            )

    def get_dimension(self) -> int:
        return self.config.dimension

    def get_model_name(self) -> str:
        return self.config.model_name

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"model={self.config.model_name}, "
            f"dimension={self.config.dimension})"
        )


class DummyEmbedding(BaseEmbedding):
    """
    Implementación dummy para desarrollo y testing.
    Vectores pseudo-aleatorios derivados del hash del texto: mismo texto,
    mismo vector, en cualquier proceso.
    """

    def __init__(
        self,
        config: Optional[EmbeddingConfig] = None,
        use_zeros: bool = False
    ):
        self.use_zeros = use_zeros
        super().__init__(config)

    def _validate_provider(self):
        logger.debug("DummyEmbedding provider validated")

    def _request_embedding(self, text: str) -> List[float]:
        if self.use_zeros:
            return [0.0] * self.config.dimension

        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
        rng = random.Random(seed)
        return [rng.random() for _ in range(self.config.dimension)]
