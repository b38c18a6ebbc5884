"""Build a ready-to-use job controller from :class:`~doc_indexer.config.Settings`."""

from __future__ import annotations

import logging

from doc_indexer.config import Settings, settings
from doc_indexer.indexing.committer import BatchCommitter
from doc_indexer.indexing.controller import IndexingJobController
from doc_indexer.indexing.pipeline import IndexingPipeline
from doc_indexer.ingestion.chunker import DocumentSplitter
from doc_indexer.ingestion.fingerprint import ChangeDetector
from doc_indexer.ingestion.loader import SourceEnumerator
from doc_indexer.ingestion.normalize import ContentNormalizer
from doc_indexer.stores.base import FingerprintStore, VectorStoreBase
from doc_indexer.stores.memory import InMemoryFingerprintStore

logger = logging.getLogger(__name__)


def build_fingerprint_store(cfg: Settings = settings) -> FingerprintStore:
    """Return the fingerprint backend selected by ``cfg.fingerprint_backend``."""
    if cfg.fingerprint_backend == "memory":
        logger.info("Using in-memory fingerprint store; every document is new after a restart")
        return InMemoryFingerprintStore(prefix=cfg.fingerprint_key_prefix)

    from doc_indexer.stores.redis_store import RedisFingerprintStore

    return RedisFingerprintStore(
        prefix=cfg.fingerprint_key_prefix,
        host=cfg.redis_host,
        port=cfg.redis_port,
        db=cfg.redis_db,
        password=cfg.redis_password,
    )


def build_vector_store(cfg: Settings = settings) -> VectorStoreBase:
    from doc_indexer.stores.chroma_store import ChromaVectorStore

    return ChromaVectorStore(
        cfg.chroma_collection,
        host=cfg.chroma_host,
        port=cfg.chroma_port,
        embedding_model=cfg.embedding_model,
    )


def build_pipeline(
    cfg: Settings = settings,
    *,
    vector_store: VectorStoreBase | None = None,
    fingerprint_store: FingerprintStore | None = None,
) -> IndexingPipeline:
    """Wire every stage from *cfg*; stores may be supplied pre-built."""
    return IndexingPipeline(
        enumerator=SourceEnumerator(cfg.document_path, cfg.document_patterns),
        change_detector=ChangeDetector(fingerprint_store or build_fingerprint_store(cfg)),
        splitter=DocumentSplitter(
            cfg.chunk_size,
            cfg.chunk_overlap,
            min_chunk_chars=cfg.min_chunk_chars,
            max_chunk_count=cfg.max_chunk_count,
        ),
        committer=BatchCommitter(
            vector_store or build_vector_store(cfg),
            batch_size=cfg.batch_size,
            pacing_seconds=cfg.batch_pacing_seconds,
        ),
        normalizer=ContentNormalizer(
            enabled=cfg.normalize_enabled,
            remove_html_tags=cfg.normalize_remove_html_tags,
            remove_code_blocks=cfg.normalize_remove_code_blocks,
            normalize_whitespace=cfg.normalize_whitespace,
            normalize_newlines=cfg.normalize_newlines,
        ),
    )


def build_controller(
    cfg: Settings = settings,
    *,
    vector_store: VectorStoreBase | None = None,
    fingerprint_store: FingerprintStore | None = None,
) -> IndexingJobController:
    pipeline = build_pipeline(cfg, vector_store=vector_store, fingerprint_store=fingerprint_store)
    return IndexingJobController(pipeline, max_workers=cfg.indexing_workers)
