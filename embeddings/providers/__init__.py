"""
Embedding providers.
Importing this package registers every provider with the factory.
"""
from embeddings.providers.gemini import GeminiEmbedding
from embeddings.providers.ollama import OllamaEmbedding

__all__ = [
    "GeminiEmbedding",
    "OllamaEmbedding",
]
