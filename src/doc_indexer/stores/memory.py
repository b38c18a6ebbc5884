"""Process-local fingerprint store.

Fingerprints live only as long as the process, so every document is
re-indexed after a restart.  Useful for one-shot CLI runs against a
fresh collection and for tests.
"""

from __future__ import annotations

import threading

from doc_indexer.stores.base import FingerprintStore


class InMemoryFingerprintStore(FingerprintStore):
    """Dictionary-backed :class:`FingerprintStore`."""

    def __init__(self, prefix: str = "docmeta", initial: dict[str, str] | None = None) -> None:
        super().__init__(prefix)
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def snapshot(self) -> dict[str, str]:
        """Return a copy of every stored fingerprint."""
        with self._lock:
            return dict(self._data)
