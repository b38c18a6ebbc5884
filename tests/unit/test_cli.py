"""Unit tests for the ``doc-indexer`` command line."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from conftest import RecordingVectorStore, write_docs
from doc_indexer.cli import main
from doc_indexer.config import Settings
from doc_indexer.indexing.factory import build_controller


def _run_cli(argv: list[str], store: RecordingVectorStore) -> Settings:
    captured: dict[str, Settings] = {}

    def fake_build(cfg: Settings):
        captured["cfg"] = cfg
        return build_controller(cfg, vector_store=store)

    with patch("doc_indexer.cli.build_controller", side_effect=fake_build):
        main(argv)
    return captured["cfg"]


class TestRunCommand:
    def test_prints_final_status(
        self, tmp_path: Path, recording_store: RecordingVectorStore, capsys: pytest.CaptureFixture[str]
    ) -> None:
        write_docs(tmp_path, {"a.md": "alpha document", "b.md": "beta document"})
        _run_cli(["run", "--path", str(tmp_path), "--pattern", "*.md", "--memory-fingerprints"], recording_store)

        status = json.loads(capsys.readouterr().out)
        assert status == {"running": False, "processed_count": 2, "total_count": 2, "changed_count": 2}

    def test_overrides_reach_settings(self, tmp_path: Path, recording_store: RecordingVectorStore) -> None:
        cfg = _run_cli(
            ["run", "--path", str(tmp_path), "--pattern", "*.md", "--pattern", "*.txt", "--memory-fingerprints"],
            recording_store,
        )
        assert cfg.document_path == str(tmp_path)
        assert cfg.document_patterns == ["*.md", "*.txt"]
        assert cfg.fingerprint_backend == "memory"

    def test_missing_directory_exits_non_zero(self, tmp_path: Path, recording_store: RecordingVectorStore) -> None:
        with pytest.raises(SystemExit) as excinfo:
            _run_cli(["run", "--path", str(tmp_path / "missing"), "--memory-fingerprints"], recording_store)
        assert excinfo.value.code == 1


class TestHealthCommand:
    def _stores(self, vector_ok: bool, fingerprint_ok: bool) -> tuple[MagicMock, MagicMock]:
        vector, fingerprint = MagicMock(), MagicMock()
        vector.health_check.return_value = vector_ok
        fingerprint.health_check.return_value = fingerprint_ok
        return vector, fingerprint

    def test_healthy(self, capsys: pytest.CaptureFixture[str]) -> None:
        vector, fingerprint = self._stores(True, True)
        with (
            patch("doc_indexer.cli.build_vector_store", return_value=vector),
            patch("doc_indexer.cli.build_fingerprint_store", return_value=fingerprint),
        ):
            main(["health"])
        assert json.loads(capsys.readouterr().out) == {"vector_store": True, "fingerprint_store": True}

    def test_unhealthy_exits_non_zero(self) -> None:
        vector, fingerprint = self._stores(True, False)
        with (
            patch("doc_indexer.cli.build_vector_store", return_value=vector),
            patch("doc_indexer.cli.build_fingerprint_store", return_value=fingerprint),
            pytest.raises(SystemExit) as excinfo,
        ):
            main(["health"])
        assert excinfo.value.code == 1

    def test_unreachable_vector_store_reports_false(self, capsys: pytest.CaptureFixture[str]) -> None:
        _, fingerprint = self._stores(True, True)
        with (
            patch("doc_indexer.cli.build_vector_store", side_effect=ConnectionError("connection refused")),
            patch("doc_indexer.cli.build_fingerprint_store", return_value=fingerprint),
            pytest.raises(SystemExit) as excinfo,
        ):
            main(["health"])
        assert excinfo.value.code == 1
        assert json.loads(capsys.readouterr().out) == {"vector_store": False, "fingerprint_store": True}


def test_run_exits_non_zero_when_stores_cannot_be_built(tmp_path: Path) -> None:
    with (
        patch("doc_indexer.cli.build_controller", side_effect=ConnectionError("connection refused")),
        pytest.raises(SystemExit) as excinfo,
    ):
        main(["run", "--path", str(tmp_path)])
    assert excinfo.value.code == 1


def test_cli_logger_uses_module_name() -> None:
    from doc_indexer import cli

    assert cli.logger.name == "doc_indexer.cli"
