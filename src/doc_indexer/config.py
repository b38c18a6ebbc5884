"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Document source
    document_path: str = Field(default="data/documents", description="Root directory scanned for documents")
    document_patterns: list[str] = Field(
        default_factory=lambda: ["**/*.md"],
        description="Glob patterns, relative to document_path, selecting the files to index",
    )

    # Fingerprint store
    fingerprint_backend: Literal["redis", "memory"] = "redis"
    fingerprint_key_prefix: str = "docmeta"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "documents"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Chunking
    chunk_size: int = Field(default=1000, description="Maximum characters per chunk")
    chunk_overlap: int = Field(default=100, description="Characters shared by consecutive chunks")
    min_chunk_chars: int = Field(default=5, description="Chunks shorter than this (stripped) are dropped")
    max_chunk_count: int = Field(default=10000, description="Maximum chunks kept per document")

    # Batch commit
    batch_size: int = 20
    batch_pacing_seconds: float = Field(
        default=0.05,
        description="Pause between successive batch commits to limit load on the vector store",
    )

    # Job execution
    indexing_workers: int = 2

    # Content normalization
    normalize_enabled: bool = False
    normalize_remove_html_tags: bool = True
    normalize_remove_code_blocks: bool = False
    normalize_whitespace: bool = True
    normalize_newlines: bool = True

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton; import `settings` wherever needed.
settings = Settings()
