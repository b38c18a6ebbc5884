"""The indexing run as an explicit sequence of stages.

Stages (in order)::

    enumerate → filter → normalize → split → assign → commit

Each stage is a plain method taking the previous stage's output, so it
can be called and tested on its own.  :meth:`IndexingPipeline.run`
composes them synchronously; the job controller decides *where* a run
executes and owns the published progress.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, TypeVar

from doc_indexer.exceptions import PipelineStageError
from doc_indexer.indexing.committer import BatchCommitter
from doc_indexer.ingestion.chunker import DocumentSplitter, assign_chunk_ids
from doc_indexer.ingestion.fingerprint import ChangeDetector
from doc_indexer.ingestion.loader import SourceEnumerator
from doc_indexer.ingestion.normalize import ContentNormalizer
from doc_indexer.models import Chunk, SourceDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProgressListener(Protocol):
    """Receives progress events while a run executes."""

    def documents_found(self, total: int) -> None: ...

    def documents_changed(self, changed: int) -> None: ...

    def chunks_committed(self, count: int) -> None: ...


class _NullListener:
    def documents_found(self, total: int) -> None:
        pass

    def documents_changed(self, changed: int) -> None:
        pass

    def chunks_committed(self, count: int) -> None:
        pass


class IndexingPipeline:
    """Compose the ingestion stages into one incremental indexing run.

    Parameters
    ----------
    enumerator:
        Source of documents.
    change_detector:
        Fingerprint comparison used to drop unchanged documents.
    splitter:
        Chunking strategy.
    committer:
        Batch writer into the vector store.
    normalizer:
        Optional text clean-up applied to changed documents before
        splitting.
    """

    def __init__(
        self,
        enumerator: SourceEnumerator,
        change_detector: ChangeDetector,
        splitter: DocumentSplitter,
        committer: BatchCommitter,
        *,
        normalizer: ContentNormalizer | None = None,
    ) -> None:
        self.enumerator = enumerator
        self.change_detector = change_detector
        self.splitter = splitter
        self.committer = committer
        self.normalizer = normalizer

    # -- stages ---------------------------------------------------------------

    def enumerate(self) -> list[SourceDocument]:
        return self.enumerator.enumerate()

    def filter_changed(self, documents: list[SourceDocument]) -> list[SourceDocument]:
        return self.change_detector.filter_changed(documents)

    def normalize(self, documents: list[SourceDocument]) -> list[SourceDocument]:
        if self.normalizer is None:
            return documents
        return self.normalizer.apply(documents)

    def split(self, documents: list[SourceDocument]) -> list[Chunk]:
        return self.splitter.split(documents)

    def assign_ids(self, chunks: list[Chunk]) -> list[Chunk]:
        return assign_chunk_ids(chunks)

    def commit(self, chunks: list[Chunk], on_batch_committed: Callable[[int], None] | None = None) -> int:
        return self.committer.commit(chunks, on_batch_committed)

    # -- driver ---------------------------------------------------------------

    def run(self, listener: ProgressListener | None = None) -> int:
        """Execute one run and return the number of committed chunks.

        Raises
        ------
        PipelineStageError
            When any stage other than an individual batch commit fails.
        """
        listener = listener or _NullListener()

        documents = self._stage("enumerate", self.enumerate)
        listener.documents_found(len(documents))
        logger.info("Loaded %d documents", len(documents))

        changed = self._stage("filter", self.filter_changed, documents)
        listener.documents_changed(len(changed))
        logger.info("%d of %d documents changed", len(changed), len(documents))

        if not changed:
            logger.info("No changed documents; skipping split and commit")
            return 0

        normalized = self._stage("normalize", self.normalize, changed)
        chunks = self._stage("split", self.split, normalized)
        identified = self._stage("assign", self.assign_ids, chunks)
        return self._stage("commit", self.commit, identified, listener.chunks_committed)

    @staticmethod
    def _stage(name: str, fn: Callable[..., T], *args: object) -> T:
        try:
            return fn(*args)
        except Exception as exc:
            logger.error("Stage %r failed", name, exc_info=True)
            raise PipelineStageError(name, exc) from exc
