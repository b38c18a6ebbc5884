"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any

import chromadb
from langchain_huggingface import HuggingFaceEmbeddings

from doc_indexer.config import settings
from doc_indexer.exceptions import BatchCommitError
from doc_indexer.models import Chunk
from doc_indexer.stores.base import VectorStoreBase

logger = logging.getLogger(__name__)


def _flatten_metadata(chunk: Chunk) -> dict[str, str | int | float | bool]:
    """Keep only the metadata values Chroma accepts (flat scalars)."""
    meta: dict[str, str | int | float | bool] = {}
    for key, value in chunk.metadata.items():
        if isinstance(value, (str, int, float, bool)):
            meta[key] = value
    meta["parent_document_id"] = chunk.parent_document_id
    return meta


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Embeddings are computed by the configured HuggingFace model and
    written together with the chunk text through ``collection.upsert``,
    so re-committing a chunk id overwrites the previous entry.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    embedding_model:
        HuggingFace model id used for text → embedding conversion.
    client / embedder:
        Pre-built collaborators; created from the other parameters when
        omitted.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        embedding_model: str = settings.embedding_model,
        distance_metric: str = "cosine",
        client: Any | None = None,
        embedder: Any | None = None,
    ) -> None:
        super().__init__(collection_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._collection = self._client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": distance_metric},
        )
        self._embedder = embedder if embedder is not None else HuggingFaceEmbeddings(model_name=embedding_model)

    # -- VectorStoreBase overrides --------------------------------------------

    def add(self, chunks: list[Chunk]) -> None:
        if not chunks:
            return

        missing = [c for c in chunks if not c.id]
        if missing:
            raise BatchCommitError(f"{len(missing)} chunk(s) have no id; assign identities before committing")

        texts = [c.text for c in chunks]
        try:
            embeddings = self._embedder.embed_documents(texts)
            self._collection.upsert(
                ids=[c.id for c in chunks],
                embeddings=embeddings,
                documents=texts,
                metadatas=[_flatten_metadata(c) for c in chunks],
            )
        except Exception as exc:
            raise BatchCommitError(
                f"upsert of {len(chunks)} chunks into {self.collection_name!r} failed: {exc}"
            ) from exc
        logger.debug("Upserted %d chunks into %s", len(chunks), self.collection_name)

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str]) -> None:
        self._collection.delete(ids=ids)
