"""Job controller — single-flight, asynchronous execution of indexing runs.

Usage::

    from doc_indexer.indexing.factory import build_controller

    controller = build_controller()
    result = controller.trigger()
    print(result.accepted, result.message)
    print(controller.status())
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from doc_indexer.config import settings
from doc_indexer.indexing.pipeline import IndexingPipeline
from doc_indexer.indexing.state import JobStatus, TriggerResult

logger = logging.getLogger(__name__)

ACCEPTED_MESSAGE = "Document reindexing started."
REJECTED_MESSAGE = "Document indexing is already in progress."


class IndexingJobController:
    """Run :class:`IndexingPipeline` in the background, at most once at a time.

    The controller owns a single :class:`JobStatus` snapshot.  It is
    replaced (never mutated) under a lock, so :meth:`status` can hand it
    out without copying and readers never observe a half-updated view.

    Parameters
    ----------
    pipeline:
        The stages to run.
    max_workers:
        Size of the worker pool runs execute on.
    executor:
        Pre-built executor; when given, the controller does not shut it
        down.
    """

    def __init__(
        self,
        pipeline: IndexingPipeline,
        *,
        max_workers: int = settings.indexing_workers,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="doc-processor",
        )
        self._lock = threading.Lock()
        self._state = JobStatus()
        self._current: Future[int] | None = None

    # -- public API -----------------------------------------------------------

    def start_indexing(self) -> Future[int]:
        """Start a run unless one is already in flight.

        Returns
        -------
        Future[int]
            Resolves to the number of committed chunks.  When a run is
            already active the future is already resolved to ``0`` and
            the active run is left untouched.  A fatal stage failure
            surfaces as :class:`~doc_indexer.exceptions.PipelineStageError`.
        """
        future = self._try_start()
        if future is None:
            rejected: Future[int] = Future()
            rejected.set_result(0)
            return rejected
        return future

    def trigger(self) -> TriggerResult:
        """Fire-and-forget start reporting whether the run was accepted."""
        future = self._try_start()
        if future is None:
            rejected: Future[int] = Future()
            rejected.set_result(0)
            return TriggerResult(accepted=False, message=REJECTED_MESSAGE, future=rejected)

        future.add_done_callback(_log_outcome)
        return TriggerResult(accepted=True, message=ACCEPTED_MESSAGE, future=future)

    def status(self) -> JobStatus:
        """Return the latest progress snapshot."""
        return self._state

    def wait(self, timeout: float | None = None) -> JobStatus:
        """Block until the current run (if any) finishes, then return the status.

        A failed run does not raise here; inspect the future returned by
        :meth:`start_indexing` for the error.
        """
        future = self._current
        if future is not None:
            try:
                future.result(timeout=timeout)
            except Exception:
                logger.debug("Indexing run finished with an error", exc_info=True)
        return self.status()

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> IndexingJobController:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # -- ProgressListener -----------------------------------------------------

    def documents_found(self, total: int) -> None:
        self._update(total_count=total)

    def documents_changed(self, changed: int) -> None:
        self._update(changed_count=changed)

    def chunks_committed(self, count: int) -> None:
        with self._lock:
            self._state = self._state.model_copy(
                update={"processed_count": self._state.processed_count + count}
            )

    # -- internals ------------------------------------------------------------

    def _try_start(self) -> Future[int] | None:
        # Check-and-set of ``running`` must happen under one lock acquisition.
        with self._lock:
            if self._state.running:
                logger.warning("Document indexing is already in progress")
                return None
            self._state = JobStatus(running=True)

        logger.info("Starting document indexing run")
        try:
            future = self._executor.submit(self._run)
        except Exception:
            self._update(running=False)
            raise
        self._current = future
        return future

    def _run(self) -> int:
        try:
            processed = self._pipeline.run(self)
            self._update(processed_count=processed)
            status = self.status()
            logger.info(
                "Indexing finished: %d documents, %d changed, %d chunks committed",
                status.total_count,
                status.changed_count,
                processed,
            )
            return processed
        finally:
            self._update(running=False)

    def _update(self, **changes: object) -> None:
        with self._lock:
            self._state = self._state.model_copy(update=changes)


def _log_outcome(future: Future[int]) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Reindexing failed: %s", exc)
    else:
        logger.info("Reindexing complete: %d chunks processed", future.result())
