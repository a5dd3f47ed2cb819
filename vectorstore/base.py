"""
Base module for vector store implementations.
Defines the abstract interface for upserting embeddings into a namespaced index.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence
import logging
import threading

from domain.errors import IndexWriteError
from domain.models import IndexedVectorRecord

logger = logging.getLogger(__name__)


class BaseVectorStore(ABC):
    """
    Clase base abstracta para almacenes de vectores.
    Las escrituras son upserts por id: el último valor gana.
    """

    def __init__(self, dimension: int, **kwargs):
        """
        Inicializa el vector store.

        Args:
            dimension: Dimensión de los vectores a almacenar

        Raises:
            ValueError: Si dimension es inválida
        """
        if dimension <= 0:
            raise ValueError("dimension debe ser mayor a 0")

        self.dimension = dimension
        logger.info(f"{self.__class__.__name__} initialized with dimension={dimension}")

    def upsert(self, namespace: str, records: Sequence[IndexedVectorRecord]) -> int:
        """
        Insert or overwrite records in a namespace.

        Args:
            namespace: Logical partition of the index
            records: Non-empty ordered records sharing the namespace

        Returns:
            Number of records written

        Raises:
            ValueError: If records is empty or a vector has the wrong dimension
            IndexWriteError: If the backend write fails
        """
        if not namespace:
            raise ValueError("namespace no puede estar vacío")
        if not records:
            raise ValueError("records no puede estar vacío")
        for record in records:
            self.validate_embedding(record.values)

        try:
            written = self._upsert(namespace, list(records))
        except IndexWriteError:
            raise
        except Exception as e:
            error_msg = f"Error indexing embeddings in {self.__class__.__name__}: {e}"
            logger.error(error_msg)
            raise IndexWriteError(error_msg, step="indexing") from e

        logger.info(f"Upserted {written} vectors into namespace '{namespace}'")
        return written

    @abstractmethod
    def _upsert(self, namespace: str, records: List[IndexedVectorRecord]) -> int:
        """Backend write. May raise any exception; upsert() wraps it."""
        pass

    @abstractmethod
    def fetch(self, namespace: str, ids: Iterable[str]) -> Dict[str, IndexedVectorRecord]:
        """
        Obtiene registros por id. Los ids inexistentes se omiten.
        """
        pass

    @abstractmethod
    def count(self, namespace: str) -> int:
        """Número de registros en el namespace."""
        pass

    @abstractmethod
    def list_ids(self, namespace: str) -> List[str]:
        """Ids presentes en el namespace."""
        pass

    def validate_embedding(self, embedding: List[float]) -> None:
        """
        Valida que un embedding tenga la dimensión correcta.

        Raises:
            ValueError: Si el embedding es inválido
        """
        if not embedding:
            raise ValueError("Embedding cannot be empty")

        if len(embedding) != self.dimension:
            raise ValueError(
                f"Embedding dimension mismatch: expected {self.dimension}, "
                f"got {len(embedding)}"
            )


class InMemoryVectorStore(BaseVectorStore):
    """
    Implementación en memoria del vector store.
    Útil para desarrollo, testing y prototipos.
    No persistente: los datos se pierden al terminar el proceso.
    """

    def __init__(self, dimension: int, **kwargs):
        super().__init__(dimension, **kwargs)
        self._namespaces: Dict[str, Dict[str, IndexedVectorRecord]] = {}
        self._lock = threading.Lock()

    def _upsert(self, namespace: str, records: List[IndexedVectorRecord]) -> int:
        with self._lock:
            space = self._namespaces.setdefault(namespace, {})
            for record in records:
                space[record.id] = IndexedVectorRecord(
                    id=record.id,
                    values=list(record.values),
                    metadata=dict(record.metadata),
                )
        return len(records)

    def fetch(self, namespace: str, ids: Iterable[str]) -> Dict[str, IndexedVectorRecord]:
        with self._lock:
            space = self._namespaces.get(namespace, {})
            return {i: space[i] for i in ids if i in space}

    def count(self, namespace: str) -> int:
        with self._lock:
            return len(self._namespaces.get(namespace, {}))

    def list_ids(self, namespace: str) -> List[str]:
        with self._lock:
            return list(self._namespaces.get(namespace, {}).keys())

    def namespaces(self) -> List[str]:
        with self._lock:
            return sorted(self._namespaces.keys())

    def clear(self, namespace: Optional[str] = None) -> None:
        """Elimina un namespace, o todos si es None."""
        with self._lock:
            if namespace is None:
                self._namespaces.clear()
            else:
                self._namespaces.pop(namespace, None)
