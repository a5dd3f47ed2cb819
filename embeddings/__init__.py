"""
Embeddings module: clients for the remote embedding service.
"""
from embeddings.base import (
    BaseEmbedding,
    DummyEmbedding,
    EmbeddingConfig,
)
from embeddings.factory import (
    create_embedder,
    list_providers,
    register_provider
)

# Import providers to auto-register them
import embeddings.providers  # noqa: F401

__all__ = [
    "BaseEmbedding",
    "DummyEmbedding",
    "EmbeddingConfig",
    "create_embedder",
    "list_providers",
    "register_provider",
]
