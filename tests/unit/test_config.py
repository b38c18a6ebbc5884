"""Unit tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from doc_indexer.config import Settings


def test_defaults() -> None:
    cfg = Settings(_env_file=None)
    assert cfg.fingerprint_key_prefix == "docmeta"
    assert cfg.batch_size == 20
    assert cfg.batch_pacing_seconds == pytest.approx(0.05)
    assert cfg.indexing_workers == 2
    assert cfg.document_patterns == ["**/*.md"]
    assert cfg.normalize_enabled is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHUNK_SIZE", "512")
    monkeypatch.setenv("FINGERPRINT_BACKEND", "memory")
    monkeypatch.setenv("DOCUMENT_PATTERNS", '["*.md", "*.txt"]')
    cfg = Settings(_env_file=None)
    assert cfg.chunk_size == 512
    assert cfg.fingerprint_backend == "memory"
    assert cfg.document_patterns == ["*.md", "*.txt"]


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, fingerprint_backend="sqlite")
