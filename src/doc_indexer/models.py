"""Domain models flowing through the indexing pipeline."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

SourceKind = Literal["markdown", "text", "pdf"]
"""Closed set of document shapes the enumerator knows how to read."""


class SourceDocument(BaseModel):
    """A raw document read from the document source.

    Attributes
    ----------
    id:
        Key-safe identifier derived from the file name (``doc-<name>``).
        Used as the fingerprint-store key.
    content:
        Full text of the document.
    kind:
        Which reader produced the content.
    metadata:
        At least ``source`` (file name) and ``type`` (the kind), plus
        descriptive fields added by the enumerator.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    kind: SourceKind = "markdown"
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def source(self) -> str:
        return str(self.metadata.get("source", ""))


class Chunk(BaseModel):
    """A bounded-size fragment of a :class:`SourceDocument`.

    ``id`` and ``sequence_index`` stay ``None`` until the identity
    assigner has processed the chunk.
    """

    model_config = ConfigDict(frozen=True)

    parent_document_id: str
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    id: str | None = None
    sequence_index: int | None = None

    @property
    def source(self) -> str:
        return str(self.metadata.get("source", ""))
