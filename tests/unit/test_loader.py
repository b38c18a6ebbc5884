"""Unit tests for the source enumerator."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import write_docs
from doc_indexer.exceptions import EnumerationError
from doc_indexer.ingestion.loader import SourceEnumerator, document_id_for, kind_for


class TestDocumentId:
    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("guide.md", "doc-guide.md"),
            ("my notes.md", "doc-my-notes.md"),
            ("a  b\tc.md", "doc-a-b-c.md"),
            ('what?<is>:"this"|*.md', "doc-whatisthis.md"),
        ],
    )
    def test_id_is_key_safe(self, filename: str, expected: str) -> None:
        assert document_id_for(filename) == expected


class TestKindFor:
    @pytest.mark.parametrize(
        ("name", "kind"),
        [("a.md", "markdown"), ("b.MARKDOWN", "markdown"), ("c.pdf", "pdf"), ("d.txt", "text"), ("e", "text")],
    )
    def test_kind(self, name: str, kind: str) -> None:
        assert kind_for(Path(name)) == kind


class TestSourceEnumerator:
    def test_reads_matching_files(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"a.md": "# Alpha\n\nBody", "b.md": "Beta", "skip.txt": "not markdown"})
        docs = SourceEnumerator(tmp_path, ["*.md"]).enumerate()
        assert [d.id for d in docs] == ["doc-a.md", "doc-b.md"]
        assert docs[0].content == "# Alpha\n\nBody"

    def test_metadata(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"sub/guide.md": "# Title\n\nSee [docs](http://x).\n```py\nx\n```"})
        (doc,) = SourceEnumerator(tmp_path, ["**/*.md"]).enumerate()
        assert doc.kind == "markdown"
        assert doc.metadata["source"] == "guide.md"
        assert doc.metadata["type"] == "markdown"
        assert doc.metadata["path"] == "sub/guide.md"
        assert doc.metadata["has_headers"] is True
        assert doc.metadata["has_links"] is True
        assert doc.metadata["has_code_blocks"] is True
        assert doc.metadata["content_length"] == len(doc.content)
        assert doc.metadata["line_count"] == 6

    def test_empty_directory_returns_empty_list(self, tmp_path: Path) -> None:
        assert SourceEnumerator(tmp_path, ["**/*.md"]).enumerate() == []

    def test_blank_files_are_skipped(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"empty.md": "", "blank.md": "  \n\t\n", "real.md": "content"})
        docs = SourceEnumerator(tmp_path, ["*.md"]).enumerate()
        assert [d.source for d in docs] == ["real.md"]

    def test_unreadable_file_is_skipped(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"good.md": "fine"})
        (tmp_path / "bad.md").write_bytes(b"\xff\xfe\xfa invalid utf-8")
        docs = SourceEnumerator(tmp_path, ["*.md"]).enumerate()
        assert [d.source for d in docs] == ["good.md"]

    def test_overlapping_patterns_read_each_file_once(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"a.md": "alpha", "notes.txt": "plain text"})
        docs = SourceEnumerator(tmp_path, ["*.md", "*", "*.txt"]).enumerate()
        assert sorted(d.source for d in docs) == ["a.md", "notes.txt"]
        assert {d.source: d.kind for d in docs} == {"a.md": "markdown", "notes.txt": "text"}

    def test_enumeration_is_deterministic(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {f"doc{i}.md": f"content {i}" for i in range(5)})
        enumerator = SourceEnumerator(tmp_path, ["*.md"])
        assert [d.id for d in enumerator.enumerate()] == [d.id for d in enumerator.enumerate()]

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(EnumerationError):
            SourceEnumerator(tmp_path / "nope", ["*.md"]).enumerate()

    def test_scan_failure_carries_partial_results(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"a.md": "alpha"})
        enumerator = SourceEnumerator(tmp_path, ["*.md", "*.txt"])
        real_glob = Path.glob

        def flaky_glob(self: Path, pattern: str):
            if pattern == "*.txt":
                raise PermissionError("denied")
            return real_glob(self, pattern)

        with patch.object(Path, "glob", flaky_glob):
            with pytest.raises(EnumerationError) as excinfo:
                enumerator.enumerate()

        assert [d.source for d in excinfo.value.partial] == ["a.md"]

    def test_same_name_in_subdirectories_is_read_once(self, tmp_path: Path) -> None:
        write_docs(tmp_path, {"guide/readme.md": "guide readme", "api/readme.md": "api readme"})
        docs = SourceEnumerator(tmp_path, ["**/*.md"]).enumerate()
        assert [(d.id, d.metadata["path"]) for d in docs] == [("doc-readme.md", "api/readme.md")]

    def test_pdf_uses_pdf_reader(self, tmp_path: Path) -> None:
        (tmp_path / "paper.pdf").write_bytes(b"%PDF-1.4 placeholder")
        with patch("doc_indexer.ingestion.loader._READERS", {"pdf": lambda p: "page one\npage two"}):
            (doc,) = SourceEnumerator(tmp_path, ["*.pdf"]).enumerate()
        assert doc.kind == "pdf"
        assert doc.content == "page one\npage two"
