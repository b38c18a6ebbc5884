"""Change detection through per-document content fingerprints."""

from __future__ import annotations

import hashlib
import logging

from doc_indexer.exceptions import ChangeDetectionError
from doc_indexer.models import SourceDocument
from doc_indexer.stores.base import FingerprintStore

logger = logging.getLogger(__name__)


def content_hash(content: str) -> str:
    """MD5 hex digest of the UTF-8 encoded *content*."""
    return hashlib.md5(content.encode("utf-8")).hexdigest()


class ChangeDetector:
    """Compare documents against the fingerprints recorded by earlier runs.

    A document counts as changed when no fingerprint exists for it or the
    stored fingerprint differs.  The new fingerprint is recorded as soon
    as the change is detected, before the document is chunked or
    committed.

    If the fingerprint store is unavailable the document is treated as
    changed, accepting a redundant re-index over a missed update.

    Not safe for overlapping runs; the job controller guarantees there is
    only one.
    """

    def __init__(self, store: FingerprintStore) -> None:
        self._store = store

    def is_changed(self, document: SourceDocument) -> bool:
        if not document.content.strip():
            return False

        new_hash = content_hash(document.content)
        key = self._store.key_for(document.id)

        try:
            old_hash = self._store.get(key)
        except ChangeDetectionError:
            logger.warning("Fingerprint lookup failed for %s; treating as changed", document.id, exc_info=True)
            old_hash = None

        if old_hash is not None and old_hash == new_hash:
            logger.debug("Document %r unchanged (hash %s)", document.id, new_hash)
            return False

        try:
            self._store.set(key, new_hash)
        except ChangeDetectionError:
            logger.warning("Could not record fingerprint for %s", document.id, exc_info=True)
        logger.debug("Document %r changed (old %s, new %s)", document.id, old_hash, new_hash)
        return True

    def filter_changed(self, documents: list[SourceDocument]) -> list[SourceDocument]:
        """Return the changed subset of *documents*, preserving order."""
        return [document for document in documents if self.is_changed(document)]
