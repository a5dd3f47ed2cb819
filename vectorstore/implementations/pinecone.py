"""
Pinecone implementation of vector store.
Upserts vectors into a namespace of a serverless Pinecone index.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from pinecone import Pinecone

from domain.models import IndexedVectorRecord
from vectorstore.base import BaseVectorStore
from vectorstore.factory import register_vector_store

logger = logging.getLogger(__name__)

# Pinecone recommends at most 100 vectors (or 2MB) per upsert request
UPSERT_BATCH_SIZE = 100


@register_vector_store("pinecone")
class PineconeVectorStore(BaseVectorStore):
    """
    Vector store backed by a Pinecone index.
    Records keep their ``{file, page}`` metadata; ids are deterministic so
    re-ingesting a file overwrites its previous vectors.
    """

    def __init__(
        self,
        dimension: int,
        api_key: Optional[str] = None,
        index_name: str = "pdpindex",
        index: Any = None,
        batch_size: int = UPSERT_BATCH_SIZE,
        **kwargs
    ):
        """
        Initialize the Pinecone vector store.

        Args:
            dimension: Dimension of vectors to store
            api_key: Pinecone API key (ignored when ``index`` is given)
            index_name: Name of the Pinecone index
            index: Pre-built index handle, used as-is
            batch_size: Max vectors per upsert request

        Raises:
            ValueError: If neither api_key nor index is provided
        """
        super().__init__(dimension, **kwargs)
        self.index_name = index_name
        self.batch_size = batch_size

        if index is not None:
            self.index = index
        else:
            if not api_key:
                raise ValueError("Pinecone API key is missing. Set PINECONE_API_KEY.")
            self.index = Pinecone(api_key=api_key).Index(index_name)

        logger.info(f"PineconeVectorStore ready: index='{index_name}'")

    def _upsert(self, namespace: str, records: List[IndexedVectorRecord]) -> int:
        written = 0
        for start in range(0, len(records), self.batch_size):
            batch = records[start:start + self.batch_size]
            response = self.index.upsert(
                vectors=[record.to_dict() for record in batch],
                namespace=namespace,
            )
            upserted = getattr(response, "upserted_count", None)
            written += upserted if isinstance(upserted, int) else len(batch)
        return written

    def fetch(self, namespace: str, ids: Iterable[str]) -> Dict[str, IndexedVectorRecord]:
        id_list = list(ids)
        if not id_list:
            return {}
        response = self.index.fetch(ids=id_list, namespace=namespace)
        return {
            vector_id: IndexedVectorRecord(
                id=vector_id,
                values=list(vector.values),
                metadata=dict(vector.metadata or {}),
            )
            for vector_id, vector in response.vectors.items()
        }

    def count(self, namespace: str) -> int:
        stats = self.index.describe_index_stats()
        summary = stats.namespaces.get(namespace)
        return summary.vector_count if summary else 0

    def list_ids(self, namespace: str) -> List[str]:
        ids: List[str] = []
        for page in self.index.list(namespace=namespace):
            ids.extend(page)
        return ids
