"""
Registry of vector index backends.
Backends register under the name used by VECTOR_STORE_PROVIDER
("memory", "chroma", "pinecone") and are built once by the container.
"""
from typing import Dict, List, Type
import logging

from vectorstore.base import BaseVectorStore

logger = logging.getLogger(__name__)

_VECTOR_STORE_REGISTRY: Dict[str, Type[BaseVectorStore]] = {}


def register_vector_store(name: str):
    """Decorator registering a BaseVectorStore subclass under *name*."""
    def decorator(cls: Type[BaseVectorStore]) -> Type[BaseVectorStore]:
        if name in _VECTOR_STORE_REGISTRY and _VECTOR_STORE_REGISTRY[name] is not cls:
            logger.warning(f"Vector store '{name}' re-registered with {cls.__name__}")
        _VECTOR_STORE_REGISTRY[name] = cls
        return cls

    return decorator


def create_vector_store(provider: str, dimension: int, **kwargs) -> BaseVectorStore:
    """
    Build the index backend registered as *provider*.

    ``dimension`` is the embedding size every upserted vector must have;
    ``kwargs`` carry the backend connection options (index, api_key,
    persist_directory, ...).

    Raises:
        ValueError: If provider is not registered
    """
    name = provider.strip().lower()
    if name not in _VECTOR_STORE_REGISTRY:
        raise ValueError(
            f"Vector store provider '{provider}' not found. "
            f"Available providers: {list_vector_stores()}"
        )

    provider_class = _VECTOR_STORE_REGISTRY[name]
    try:
        store = provider_class(dimension=dimension, **kwargs)
    except Exception as e:
        logger.error(f"Could not open vector store '{name}': {e}")
        raise
    logger.info(f"Vector store '{name}' ready ({provider_class.__name__}, dim={dimension})")
    return store


def list_vector_stores() -> List[str]:
    return sorted(_VECTOR_STORE_REGISTRY)


def is_provider_available(provider: str) -> bool:
    return provider.strip().lower() in _VECTOR_STORE_REGISTRY
