"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from doc_indexer.exceptions import BatchCommitError
from doc_indexer.models import Chunk, SourceDocument
from doc_indexer.stores.base import VectorStoreBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fake vector stores ──────────────────────────────────────────────────


class RecordingVectorStore(VectorStoreBase):
    """In-memory store keyed by chunk id, recording every ``add`` call.

    ``fail_on`` lists 1-based call numbers that raise instead of writing.
    """

    def __init__(self, fail_on: set[int] | None = None) -> None:
        super().__init__("test-collection")
        self.calls: list[list[Chunk]] = []
        self.entries: dict[str, Chunk] = {}
        self.fail_on = fail_on or set()

    def add(self, chunks: list[Chunk]) -> None:
        self.calls.append(list(chunks))
        if len(self.calls) in self.fail_on:
            raise BatchCommitError(f"rejected batch {len(self.calls)}")
        for chunk in chunks:
            self.entries[chunk.id] = chunk

    def health_check(self) -> bool:
        return True

    @property
    def committed_ids(self) -> list[str]:
        return [c.id for call in self.calls for c in call]


class BlockingVectorStore(RecordingVectorStore):
    """Blocks inside ``add`` until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()

    def add(self, chunks: list[Chunk]) -> None:
        self.entered.set()
        self.release.wait(timeout=5)
        super().add(chunks)


# ── Helpers ─────────────────────────────────────────────────────────────


def make_document(name: str, content: str, **metadata: object) -> SourceDocument:
    meta = {"source": name, "type": "markdown", **metadata}
    return SourceDocument(id=f"doc-{name}", content=content, metadata=meta)


def write_docs(root: Path, files: dict[str, str]) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def recording_store() -> RecordingVectorStore:
    return RecordingVectorStore()
