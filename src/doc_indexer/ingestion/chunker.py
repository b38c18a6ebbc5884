"""Text chunking and stable chunk identities."""

from __future__ import annotations

import hashlib
import json
import logging
import re
from collections.abc import Iterable

from langchain_text_splitters import RecursiveCharacterTextSplitter

from doc_indexer.config import settings
from doc_indexer.exceptions import ChunkProcessingError
from doc_indexer.models import Chunk, SourceDocument

logger = logging.getLogger(__name__)

DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]

_EXTENSION = re.compile(r"\.[^./\\]+$")
# Latin letters, digits and Hangul syllables survive; everything else becomes "_".
_NON_ID_CHARS = re.compile(r"[^A-Za-z0-9가-힣]")

UNKNOWN_STEM = "unknown_document"


class DocumentSplitter:
    """Split documents into ordered, bounded-size chunks.

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
    min_chunk_chars:
        Pieces shorter than this after stripping are dropped.
    max_chunk_count:
        Maximum number of chunks kept per document; the tail is dropped.
    separators:
        Split boundaries, in priority order.
    """

    def __init__(
        self,
        chunk_size: int = settings.chunk_size,
        chunk_overlap: int = settings.chunk_overlap,
        *,
        min_chunk_chars: int = settings.min_chunk_chars,
        max_chunk_count: int = settings.max_chunk_count,
        separators: list[str] | None = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size ({chunk_size}) must be > 0")
        if chunk_overlap < 0:
            raise ValueError(f"chunk_overlap ({chunk_overlap}) must be >= 0")
        if chunk_overlap >= chunk_size:
            raise ValueError(f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})")
        if max_chunk_count <= 0:
            raise ValueError(f"max_chunk_count ({max_chunk_count}) must be > 0")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_chars = max(0, min_chunk_chars)
        self.max_chunk_count = max_chunk_count
        self.separators = list(separators) if separators else list(DEFAULT_SEPARATORS)
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            separators=self.separators,
        )

    @property
    def config_token(self) -> str:
        """Short hash identifying this splitter configuration."""
        raw = json.dumps(
            [self.chunk_size, self.chunk_overlap, self.min_chunk_chars, self.max_chunk_count, self.separators]
        )
        return hashlib.md5(raw.encode("utf-8")).hexdigest()[:8]

    def split_text(self, text: str) -> list[str]:
        pieces = [p for p in self._splitter.split_text(text) if len(p.strip()) >= self.min_chunk_chars]
        if len(pieces) > self.max_chunk_count:
            logger.warning("Truncating %d chunks to max_chunk_count=%d", len(pieces), self.max_chunk_count)
            pieces = pieces[: self.max_chunk_count]
        return pieces

    def split(self, documents: list[SourceDocument]) -> list[Chunk]:
        """Split *documents* into chunks without identities.

        Document order and within-document order are preserved.
        """
        chunks: list[Chunk] = []
        for document in documents:
            for text in self.split_text(document.content):
                chunks.append(
                    Chunk(
                        parent_document_id=document.id,
                        text=text,
                        metadata={**document.metadata, "splitter_config": self.config_token},
                    )
                )
        logger.info("Split %d documents into %d chunks", len(documents), len(chunks))
        return chunks


def stable_stem(source: str) -> str:
    """Return the id stem for a source file name.

    >>> stable_stem("Getting Started.md")
    'Getting_Started'
    """
    if not source:
        return UNKNOWN_STEM
    return _NON_ID_CHARS.sub("_", _EXTENSION.sub("", source))


class ChunkIdentityAssigner:
    """Assign ``<stem>_chunk_<n>`` ids, counting ``n`` from 1 per source.

    One assigner must see every chunk of a run, in order, so that the
    counters reproduce the same ids for the same input.
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def assign(self, chunk: Chunk) -> Chunk:
        if not chunk.text.strip():
            raise ChunkProcessingError(f"empty chunk text for document {chunk.parent_document_id!r}")

        stem = stable_stem(chunk.source)
        index = self._counters.get(stem, 0) + 1
        self._counters[stem] = index

        metadata = {
            **chunk.metadata,
            "original_document_id": stem,
            "parent_document_id": chunk.parent_document_id,
            "chunk_index": index,
        }
        return chunk.model_copy(
            update={"id": f"{stem}_chunk_{index}", "sequence_index": index, "metadata": metadata}
        )


def assign_chunk_ids(chunks: Iterable[Chunk]) -> list[Chunk]:
    """Give every chunk its stable id, skipping chunks that cannot be processed."""
    assigner = ChunkIdentityAssigner()
    assigned: list[Chunk] = []
    for chunk in chunks:
        try:
            assigned.append(assigner.assign(chunk))
        except ChunkProcessingError as exc:
            logger.error("Skipping chunk of %s: %s", chunk.parent_document_id, exc)
    return assigned
