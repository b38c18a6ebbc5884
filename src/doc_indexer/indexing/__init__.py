"""
Indexing — batch commits, the run driver, and the job controller.

Public API
----------
- :class:`IndexingJobController` — single-flight background runs and status.
- :class:`IndexingPipeline` — the stages of one run, composed by ``run()``.
- :class:`BatchCommitter` — paced, isolated batch writes.
- :class:`JobStatus` / :class:`TriggerResult` — what callers get back.
- :func:`build_controller` — wire everything from settings.
"""

from doc_indexer.indexing.committer import BatchCommitter
from doc_indexer.indexing.controller import IndexingJobController
from doc_indexer.indexing.factory import build_controller, build_pipeline
from doc_indexer.indexing.pipeline import IndexingPipeline, ProgressListener
from doc_indexer.indexing.state import JobStatus, TriggerResult

__all__ = [
    "BatchCommitter",
    "IndexingJobController",
    "IndexingPipeline",
    "JobStatus",
    "ProgressListener",
    "TriggerResult",
    "build_controller",
    "build_pipeline",
]
