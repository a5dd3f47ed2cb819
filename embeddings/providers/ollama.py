"""Ollama embedding provider.

Ollama runs models locally via HTTP API.
Default endpoint: http://localhost:11434
"""
import logging
from typing import List, Optional

from domain.errors import EmbeddingServiceError
from embeddings.base import BaseEmbedding, EmbeddingConfig
from embeddings.factory import register_provider
from embeddings.providers.http import post_json

logger = logging.getLogger(__name__)


@register_provider("ollama")
class OllamaEmbedding(BaseEmbedding):
    """
    Embedding client for Ollama's ``/api/embeddings`` endpoint.

    Example usage:
        config = EmbeddingConfig(model_name="nomic-embed-text", dimension=768)
        embedder = OllamaEmbedding(config, base_url="http://localhost:11434")
        vector = embedder.embed_text("Hello world")

    Provider name: "ollama"
    """

    def __init__(
        self,
        config: Optional[EmbeddingConfig] = None,
        base_url: str = "http://localhost:11434",
    ):
        self.base_url = base_url.rstrip("/")
        self.embeddings_endpoint = f"{self.base_url}/api/embeddings"
        super().__init__(config)

    def _validate_provider(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise EmbeddingServiceError(f"Invalid Ollama base URL: {self.base_url}")

    def _request_embedding(self, text: str) -> List[float]:
        result = post_json(
            self.embeddings_endpoint,
            {"model": self.config.model_name, "prompt": text},
            timeout=self.config.timeout,
            service=f"Ollama at {self.base_url}",
        )

        if "embedding" not in result:
            raise EmbeddingServiceError(
                f"Unexpected response format: {result}", step="embedding"
            )
        return result["embedding"]
