"""Error taxonomy for the indexing pipeline.

Only :class:`EnumerationError` and :class:`PipelineStageError` abort a
run.  The others are raised by a single unit of work (one fingerprint
lookup, one chunk, one batch) and are handled where that unit is
processed so that sibling work carries on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doc_indexer.models import SourceDocument


class IndexingError(Exception):
    """Base class for every error raised by ``doc_indexer``."""


class EnumerationError(IndexingError):
    """The document directory could not be scanned.

    Attributes
    ----------
    partial:
        Documents that were read before the scan failed.  They are kept
        for inspection only; a run never indexes a partial scan.
    """

    def __init__(self, message: str, partial: list[SourceDocument] | None = None) -> None:
        super().__init__(message)
        self.partial: list[SourceDocument] = partial or []


class ChangeDetectionError(IndexingError):
    """The fingerprint store could not be read or written."""


class ChunkProcessingError(IndexingError):
    """A single chunk could not be given an identity."""


class BatchCommitError(IndexingError):
    """The vector store rejected a batch."""


class PipelineStageError(IndexingError):
    """A pipeline stage failed and the run was aborted."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"indexing stage {stage!r} failed: {cause}")
        self.stage = stage
