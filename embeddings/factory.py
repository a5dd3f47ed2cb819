"""
Registro de clientes de embedding.
Cada proveedor se registra con ``@register_provider`` y el contenedor lo
instancia por el nombre configurado en EMBEDDING_PROVIDER.
"""
import logging
from typing import Any, Dict, List, Type

from embeddings.base import BaseEmbedding, DummyEmbedding, EmbeddingConfig

logger = logging.getLogger(__name__)

_EMBEDDING_PROVIDERS: Dict[str, Type[BaseEmbedding]] = {"dummy": DummyEmbedding}


def register_provider(name: str):
    """Decorator: ``@register_provider("gemini")`` on a BaseEmbedding subclass."""
    def decorator(cls: Type[BaseEmbedding]) -> Type[BaseEmbedding]:
        _EMBEDDING_PROVIDERS[name] = cls
        return cls
    return decorator


def create_embedder(provider: str, config: EmbeddingConfig, **kwargs: Any) -> BaseEmbedding:
    """
    Instancia el cliente registrado como *provider*.

    ``kwargs`` se pasan al constructor del proveedor (api_key, base_url,
    timeout). El nombre no distingue mayúsculas.

    Raises:
        ValueError: Si el proveedor no está registrado
    """
    name = provider.strip().lower()
    if name not in _EMBEDDING_PROVIDERS:
        raise ValueError(
            f"Unknown embedding provider: '{provider}'. "
            f"Available providers: {', '.join(list_providers())}"
        )
    embedder = _EMBEDDING_PROVIDERS[name](config=config, **kwargs)
    logger.debug(f"Embedding provider '{name}' ready ({config.model_name}, dim={config.dimension})")
    return embedder


def list_providers() -> List[str]:
    return sorted(_EMBEDDING_PROVIDERS)
