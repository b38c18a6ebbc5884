"""Abstract base classes for the storage backends the pipeline writes to.

Adding a new vector index (Pinecone, Qdrant, …) only requires
subclassing :class:`VectorStoreBase`; a new fingerprint backend only
requires subclassing :class:`FingerprintStore`.  The pipeline itself is
backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from doc_indexer.models import Chunk


class VectorStoreBase(ABC):
    """Backend-agnostic vector-index interface.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def add(self, chunks: list[Chunk]) -> None:
        """Write *chunks* to the index with upsert-by-id semantics.

        A chunk whose ``id`` already exists replaces the stored entry
        instead of creating a duplicate.  Implementations raise
        :class:`~doc_indexer.exceptions.BatchCommitError` when the write
        fails.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    def delete(self, ids: list[str]) -> None:
        """Delete entries by their IDs.  Optional — raises by default."""
        raise NotImplementedError(f"{type(self).__name__} does not support delete")


class FingerprintStore(ABC):
    """Persistent key-value store holding one content hash per document.

    Parameters
    ----------
    prefix:
        Namespace prepended to every document id, giving keys of the
        form ``<prefix>:<document id>``.
    """

    def __init__(self, prefix: str = "docmeta") -> None:
        self.prefix = prefix

    def key_for(self, document_id: str) -> str:
        return f"{self.prefix}:{document_id}"

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored hash for *key*, or ``None`` when absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous hash."""
        ...

    def health_check(self) -> bool:
        return True
