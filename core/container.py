"""
Component wiring.

Builds every long-lived component (embedder, vector store, queue, processor,
orchestrator, worker, scheduler) once from Settings and hands them to the
entry points (CLI, rq task, API server).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from config.settings import Settings, settings as default_settings
from domain.models import FailurePolicy
from embeddings.base import BaseEmbedding, EmbeddingConfig
from embeddings.factory import create_embedder
from ingestion.chunking import TextChunker
from ingestion.extractor import PDFTextExtractor
from ingestion.pipeline import IngestionOrchestrator
from ingestion.processor import DocumentProcessor
from ingestion.relocator import FileRelocator
from jobs.queue import BaseJobQueue, InMemoryJobQueue
from jobs.scheduler import JobScheduler
from jobs.worker import IngestionWorker
from vectorstore import BaseVectorStore, create_vector_store

logger = logging.getLogger(__name__)


@dataclass
class Components:
    """Singletons compartidos por los entry points"""
    settings: Settings
    embedder: BaseEmbedding
    vector_store: BaseVectorStore
    queue: BaseJobQueue
    processor: DocumentProcessor
    orchestrator: IngestionOrchestrator
    worker: IngestionWorker
    scheduler: JobScheduler


def _embedder_kwargs(cfg: Settings) -> Dict[str, Any]:
    provider = cfg.EMBEDDING_PROVIDER.lower()
    if provider == "gemini":
        return {"api_key": cfg.GEMINI_API_KEY, "base_url": cfg.GEMINI_BASE_URL}
    if provider == "ollama":
        return {"base_url": cfg.OLLAMA_BASE_URL}
    return {}


def _vector_store_kwargs(cfg: Settings) -> Dict[str, Any]:
    provider = cfg.VECTOR_STORE_TYPE.lower()
    if provider == "pinecone":
        return {"api_key": cfg.PINECONE_API_KEY, "index_name": cfg.PINECONE_INDEX_NAME}
    if provider == "chroma":
        return {
            "collection_name": cfg.CHROMA_COLLECTION_NAME,
            "persist_directory": cfg.CHROMA_PERSIST_DIRECTORY,
        }
    return {}


def build_queue(cfg: Settings) -> BaseJobQueue:
    """Queue backend selected by QUEUE_BACKEND ("rq" or "memory")."""
    backend = cfg.QUEUE_BACKEND.lower()
    if backend == "memory":
        return InMemoryJobQueue(name=cfg.QUEUE_NAME, retry_backoff_s=0.0)
    if backend == "rq":
        from jobs.rq_queue import RQJobQueue

        return RQJobQueue(
            name=cfg.QUEUE_NAME,
            host=cfg.REDIS_HOST,
            port=cfg.REDIS_PORT,
            db=cfg.REDIS_DB,
            retry_backoff_s=cfg.JOB_RETRY_BACKOFF_S,
            job_timeout_s=cfg.JOB_TIMEOUT_S,
        )
    raise ValueError(f"Unknown queue backend '{cfg.QUEUE_BACKEND}'. Available: ['rq', 'memory']")


def build_components(
    cfg: Optional[Settings] = None,
    embedder: Optional[BaseEmbedding] = None,
    vector_store: Optional[BaseVectorStore] = None,
    queue: Optional[BaseJobQueue] = None,
) -> Components:
    """
    Build the full component graph.

    Any of embedder, vector_store or queue can be injected (tests, the API
    server); the rest come from the settings.
    """
    cfg = cfg or default_settings
    logger.info("Initializing ingestion components...")

    if embedder is None:
        emb_cfg = EmbeddingConfig(
            model_name=cfg.EMBEDDING_MODEL,
            dimension=cfg.EMBEDDING_DIMENSION,
            timeout=cfg.EMBEDDING_TIMEOUT,
            max_input_chars=cfg.MAX_CHUNK_SIZE,
        )
        embedder = create_embedder(
            provider=cfg.EMBEDDING_PROVIDER, config=emb_cfg, **_embedder_kwargs(cfg)
        )
    logger.info(f"Embedder ready: {embedder!r}")

    if vector_store is None:
        vector_store = create_vector_store(
            provider=cfg.VECTOR_STORE_TYPE,
            dimension=cfg.EMBEDDING_DIMENSION,
            **_vector_store_kwargs(cfg),
        )
    logger.info(f"Vector store ready: {vector_store.__class__.__name__}")

    if queue is None:
        queue = build_queue(cfg)
    logger.info(f"Queue ready: {queue.__class__.__name__} ({queue.name})")

    processor = DocumentProcessor(
        extractor=PDFTextExtractor(backend=cfg.PDF_BACKEND),
        chunker=TextChunker(max_chunk_size=cfg.MAX_CHUNK_SIZE),
        embedder=embedder,
        vector_store=vector_store,
        relocator=FileRelocator(),
        namespace=cfg.VECTOR_NAMESPACE,
    )
    orchestrator = IngestionOrchestrator(
        processor=processor,
        failure_policy=FailurePolicy(cfg.FAILURE_POLICY.lower()),
    )
    worker = IngestionWorker(orchestrator=orchestrator, queue=queue)
    scheduler = JobScheduler(
        queue=queue,
        default_source=cfg.SOURCE_DIR,
        default_destination=cfg.ARCHIVE_DIR,
        default_delay_ms=cfg.JOB_DELAY_MS,
        default_attempts=cfg.JOB_ATTEMPTS,
    )

    logger.info("All components initialized successfully")
    return Components(
        settings=cfg,
        embedder=embedder,
        vector_store=vector_store,
        queue=queue,
        processor=processor,
        orchestrator=orchestrator,
        worker=worker,
        scheduler=scheduler,
    )


_components: Optional[Components] = None


def get_components() -> Components:
    """Lazily built process-wide components."""
    global _components
    if _components is None:
        _components = build_components()
    return _components


def set_components(components: Optional[Components]) -> None:
    """Replace (or reset with None) the process-wide components."""
    global _components
    _components = components
