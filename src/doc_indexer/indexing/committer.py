"""Paced, isolated batch commits into the vector store."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Iterator
from itertools import islice

from doc_indexer.config import settings
from doc_indexer.models import Chunk
from doc_indexer.stores.base import VectorStoreBase

logger = logging.getLogger(__name__)


def _batched(chunks: Iterable[Chunk], size: int) -> Iterator[list[Chunk]]:
    iterator = iter(chunks)
    while True:
        batch = list(islice(iterator, size))
        if not batch:
            return
        yield batch


class BatchCommitter:
    """Write chunks to a :class:`VectorStoreBase` in small batches.

    Batches are independent: a failed batch is logged and skipped, never
    retried, and the following batches are still attempted.  Nothing ties
    the batches of one run together, so a failure can leave part of a
    document indexed.

    Parameters
    ----------
    store:
        Target vector store.
    batch_size:
        Maximum chunks per ``store.add`` call.
    pacing_seconds:
        Pause between successive batch commits.
    sleep:
        Sleep function, replaceable in tests.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        *,
        batch_size: int = settings.batch_size,
        pacing_seconds: float = settings.batch_pacing_seconds,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size ({batch_size}) must be > 0")
        self._store = store
        self.batch_size = batch_size
        self.pacing_seconds = pacing_seconds
        self._sleep = sleep

    def commit(
        self,
        chunks: Iterable[Chunk],
        on_batch_committed: Callable[[int], None] | None = None,
    ) -> int:
        """Commit *chunks* and return how many were written successfully.

        Parameters
        ----------
        chunks:
            Identified chunks, in commit order.
        on_batch_committed:
            Called with the batch size after every successful commit.
        """
        processed = 0
        failed_batches = 0
        batches = 0

        for batch in _batched(chunks, self.batch_size):
            if batches and self.pacing_seconds > 0:
                self._sleep(self.pacing_seconds)
            batches += 1
            try:
                self._store.add(batch)
            except Exception:
                failed_batches += 1
                logger.exception("Batch %d (%d chunks) failed; skipping", batches, len(batch))
                continue

            processed += len(batch)
            if on_batch_committed is not None:
                on_batch_committed(len(batch))
            logger.debug("Committed batch %d: %d chunks (%d so far)", batches, len(batch), processed)

        logger.info("Committed %d chunks in %d batches (%d failed)", processed, batches, failed_batches)
        return processed
