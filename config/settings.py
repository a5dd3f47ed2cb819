"""
Settings and configuration management using Pydantic BaseSettings.
All configuration values can be overridden via environment variables.
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden by creating a .env file in the project root
    or by setting environment variables with the same names.
    """

    # ========================================================================
    # REDIS / QUEUE CONFIGURATION
    # ========================================================================
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    QUEUE_BACKEND: str = "rq"  # Available: "rq", "memory"
    QUEUE_NAME: str = "pdf_transform"
    JOB_DELAY_MS: int = 60000
    JOB_ATTEMPTS: int = 1
    JOB_RETRY_BACKOFF_S: int = 30
    JOB_TIMEOUT_S: int = 3600

    # ========================================================================
    # INGESTION CONFIGURATION
    # ========================================================================
    SOURCE_DIR: str = "./pdf"
    ARCHIVE_DIR: str = "./archive_pdf"
    MAX_CHUNK_SIZE: int = 8000  # Characters per embedding call
    PDF_BACKEND: str = "pypdf2"  # Available: "pypdf2", "pdfplumber"
    FAILURE_POLICY: str = "fail_fast"  # Available: "fail_fast", "isolate"
    WATCH_DEBOUNCE_SECONDS: float = 2.0

    # ========================================================================
    # EMBEDDING CONFIGURATION
    # ========================================================================
    EMBEDDING_PROVIDER: str = "gemini"  # Available: "gemini", "ollama", "dummy"
    EMBEDDING_MODEL: str = "text-embedding-004"
    EMBEDDING_DIMENSION: int = 768
    EMBEDDING_TIMEOUT: int = 30
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    OLLAMA_BASE_URL: str = "http://localhost:11434"

    # ========================================================================
    # VECTOR STORE CONFIGURATION
    # ========================================================================
    VECTOR_STORE_TYPE: str = "pinecone"  # Available: "pinecone", "chroma", "memory"
    VECTOR_NAMESPACE: str = "ns1"
    PINECONE_API_KEY: Optional[str] = None
    PINECONE_INDEX_NAME: str = "pdpindex"
    CHROMA_PERSIST_DIRECTORY: str = "data/chroma"
    CHROMA_COLLECTION_NAME: str = "pdf_vectors"

    # ========================================================================
    # API / LOGGING
    # ========================================================================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 9000
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Singleton instance
settings = Settings()
