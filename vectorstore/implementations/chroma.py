"""
ChromaDB implementation of vector store.
Provides local persistent storage for embeddings using ChromaDB; each
namespace maps to its own collection.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

import chromadb

from domain.models import IndexedVectorRecord
from vectorstore.base import BaseVectorStore
from vectorstore.factory import register_vector_store

logger = logging.getLogger(__name__)


@register_vector_store("chroma")
class ChromaVectorStore(BaseVectorStore):
    """
    Vector store implementation using ChromaDB.
    Collection name is ``<collection_name>-<namespace>``.
    """

    def __init__(
        self,
        dimension: int,
        collection_name: str = "pdf_vectors",
        persist_directory: Optional[str] = None,
        client: Any = None,
        **kwargs
    ):
        """
        Initialize ChromaDB vector store.

        Args:
            dimension: Dimension of vectors to store
            collection_name: Prefix for per-namespace collections
            persist_directory: Directory for persistence (in-memory client if None)
            client: Pre-built chromadb client, used as-is
        """
        super().__init__(dimension, **kwargs)
        self.collection_name = collection_name
        self.persist_directory = persist_directory

        if client is not None:
            self.client = client
        elif persist_directory:
            self.client = chromadb.PersistentClient(path=persist_directory)
        else:
            self.client = chromadb.EphemeralClient()

        logger.info(
            f"ChromaVectorStore initialized: collection='{self.collection_name}', "
            f"persist_dir='{self.persist_directory}'"
        )

    def _collection(self, namespace: str):
        return self.client.get_or_create_collection(
            name=f"{self.collection_name}-{namespace}",
            metadata={"dimension": self.dimension, "namespace": namespace},
        )

    def _upsert(self, namespace: str, records: List[IndexedVectorRecord]) -> int:
        self._collection(namespace).upsert(
            ids=[r.id for r in records],
            embeddings=[r.values for r in records],
            metadatas=[r.metadata for r in records],
        )
        return len(records)

    def fetch(self, namespace: str, ids: Iterable[str]) -> Dict[str, IndexedVectorRecord]:
        id_list = list(ids)
        if not id_list:
            return {}
        results = self._collection(namespace).get(
            ids=id_list, include=["embeddings", "metadatas"]
        )
        embeddings = results.get("embeddings")
        if embeddings is None:
            embeddings = []
        metadatas = results.get("metadatas") or []
        records: Dict[str, IndexedVectorRecord] = {}
        for pos, vector_id in enumerate(results.get("ids") or []):
            records[vector_id] = IndexedVectorRecord(
                id=vector_id,
                values=[float(x) for x in embeddings[pos]],
                metadata=dict(metadatas[pos] or {}) if pos < len(metadatas) else {},
            )
        return records

    def count(self, namespace: str) -> int:
        return self._collection(namespace).count()

    def list_ids(self, namespace: str) -> List[str]:
        return list(self._collection(namespace).get(include=[]).get("ids") or [])
