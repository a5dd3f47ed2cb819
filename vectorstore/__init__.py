"""
Vector store module for namespaced embedding upserts.
"""
# Import factory first
from vectorstore.factory import (
    create_vector_store,
    list_vector_stores,
    register_vector_store,
    is_provider_available
)

from vectorstore.base import (
    BaseVectorStore,
    InMemoryVectorStore,
)

# Register InMemoryVectorStore (now factory is available)
register_vector_store("memory")(InMemoryVectorStore)

# Import implementations to trigger registration
from vectorstore.implementations.chroma import ChromaVectorStore  # noqa: E402
from vectorstore.implementations.pinecone import PineconeVectorStore  # noqa: E402

__all__ = [
    # Factory
    "create_vector_store",
    "list_vector_stores",
    "register_vector_store",
    "is_provider_available",
    # Stores
    "BaseVectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "PineconeVectorStore",
]
