"""
Stores — the persistent collaborators the pipeline writes to.

Public surface
--------------
- :class:`VectorStoreBase` — abstract vector index (upsert-by-id ``add``).
- :class:`ChromaVectorStore` — default Chroma backend.
- :class:`FingerprintStore` — abstract per-document content-hash store.
- :class:`RedisFingerprintStore` — Redis backend.
- :class:`InMemoryFingerprintStore` — process-local backend.
"""

from doc_indexer.stores.base import FingerprintStore, VectorStoreBase
from doc_indexer.stores.memory import InMemoryFingerprintStore

__all__ = [
    "ChromaVectorStore",
    "FingerprintStore",
    "InMemoryFingerprintStore",
    "RedisFingerprintStore",
    "VectorStoreBase",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import the network-backed stores to avoid pulling in their clients at import time."""
    if name == "ChromaVectorStore":
        from doc_indexer.stores.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    if name == "RedisFingerprintStore":
        from doc_indexer.stores.redis_store import RedisFingerprintStore

        return RedisFingerprintStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
