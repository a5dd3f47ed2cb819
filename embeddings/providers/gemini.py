"""Google Gemini embedding provider (Generative Language REST API)."""
import logging
from typing import List, Optional

from domain.errors import EmbeddingServiceError
from embeddings.base import BaseEmbedding, EmbeddingConfig
from embeddings.factory import register_provider
from embeddings.providers.http import post_json

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@register_provider("gemini")
class GeminiEmbedding(BaseEmbedding):
    """
    Embedding client for Gemini ``embedContent``.

    One request per text; ``text-embedding-004`` returns 768 dimensions.

    Provider name: "gemini"
    """

    def __init__(
        self,
        config: Optional[EmbeddingConfig] = None,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        super().__init__(config)
        model = self.config.model_name
        if not model.startswith("models/"):
            model = f"models/{model}"
        self.model_path = model
        self.endpoint = f"{self.base_url}/{self.model_path}:embedContent"

    def _validate_provider(self) -> None:
        if not self.api_key:
            raise EmbeddingServiceError(
                "Gemini API key is missing. Set GEMINI_API_KEY."
            )

    def _request_embedding(self, text: str) -> List[float]:
        payload = {
            "model": self.model_path,
            "content": {"parts": [{"text": text}]},
        }
        result = post_json(
            self.endpoint,
            payload,
            timeout=self.config.timeout,
            service="Gemini embedding API",
            headers={"x-goog-api-key": self.api_key or ""},
        )

        try:
            return result["embedding"]["values"]
        except (KeyError, TypeError) as e:
            raise EmbeddingServiceError(
                f"Unexpected response format: {result}", step="embedding"
            ) from e
