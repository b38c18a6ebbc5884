"""Source enumerator — lists and reads raw documents from the document directory."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from pathlib import Path

from doc_indexer.config import settings
from doc_indexer.exceptions import EnumerationError
from doc_indexer.models import SourceDocument, SourceKind

logger = logging.getLogger(__name__)

# Characters that cannot appear in a fingerprint-store / vector-store key.
_ILLEGAL_KEY_CHARS = re.compile(r'[\\/:*?"<>|]')
_WHITESPACE = re.compile(r"\s+")

_HEADER_LINE = re.compile(r"^#{1,6}\s", re.MULTILINE)
_MARKDOWN_LINK = re.compile(r"\[[^\]]*\]\([^)]*\)")

_KIND_BY_SUFFIX: dict[str, SourceKind] = {
    ".md": "markdown",
    ".markdown": "markdown",
    ".mdx": "markdown",
    ".pdf": "pdf",
}


def document_id_for(filename: str) -> str:
    """Return the key-safe document id for *filename*.

    Illegal key characters are removed and whitespace runs become ``-``,
    e.g. ``"my notes.md"`` → ``"doc-my-notes.md"``.
    """
    cleaned = _ILLEGAL_KEY_CHARS.sub("", filename)
    return "doc-" + _WHITESPACE.sub("-", cleaned)


def kind_for(path: Path) -> SourceKind:
    return _KIND_BY_SUFFIX.get(path.suffix.lower(), "text")


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _read_pdf(path: Path) -> str:
    from langchain_community.document_loaders import PyPDFLoader

    pages = PyPDFLoader(str(path)).load()
    return "\n".join(page.page_content for page in pages)


_READERS: dict[SourceKind, Callable[[Path], str]] = {
    "markdown": _read_text,
    "text": _read_text,
    "pdf": _read_pdf,
}


def _describe(content: str) -> dict[str, int | bool]:
    return {
        "content_length": len(content),
        "line_count": len(content.split("\n")),
        "has_headers": bool(_HEADER_LINE.search(content)),
        "has_code_blocks": "```" in content,
        "has_links": bool(_MARKDOWN_LINK.search(content)),
    }


class SourceEnumerator:
    """Enumerate every document under *root* matching *patterns*.

    Parameters
    ----------
    root:
        Directory containing the source documents.
    patterns:
        Glob patterns relative to *root* (``Path.glob`` syntax, so
        ``**`` recurses).  A file matched by several patterns is read
        once.
    """

    def __init__(
        self,
        root: str | Path = settings.document_path,
        patterns: Sequence[str] | None = None,
    ) -> None:
        self.root = Path(root)
        self.patterns = list(patterns) if patterns else list(settings.document_patterns)

    def enumerate(self) -> list[SourceDocument]:
        """Read every matching, non-empty file.

        Returns
        -------
        list[SourceDocument]
            Documents in pattern order, sorted by path within a pattern.
            A later file whose name maps to an id already emitted (same
            name in another subdirectory) is skipped with a warning.

        Raises
        ------
        EnumerationError
            When the root cannot be scanned.  ``partial`` carries whatever
            was read before the failure.
        """
        if not self.root.is_dir():
            raise EnumerationError(f"Document directory not found: {self.root}")

        documents: list[SourceDocument] = []
        seen: set[Path] = set()
        ids: dict[str, Path] = {}
        try:
            for pattern in self.patterns:
                matches = sorted(self.root.glob(pattern))
                logger.info("Found %d files matching %r under %s", len(matches), pattern, self.root)
                for path in matches:
                    if path in seen or not path.is_file():
                        continue
                    seen.add(path)
                    # Ids come from the file name only; the first path claiming one wins.
                    doc_id = document_id_for(path.name)
                    if doc_id in ids:
                        logger.warning(
                            "Skipping %s: id %r already used by %s", path, doc_id, ids[doc_id]
                        )
                        continue
                    document = self._load(path)
                    if document is not None:
                        ids[doc_id] = path
                        documents.append(document)
        except OSError as exc:
            logger.error("Scanning %s failed after %d documents", self.root, len(documents), exc_info=True)
            raise EnumerationError(f"Failed to scan {self.root}: {exc}", partial=documents) from exc

        return documents

    def _load(self, path: Path) -> SourceDocument | None:
        kind = kind_for(path)
        try:
            content = _READERS[kind](path)
        except Exception as exc:
            logger.warning("Skipping %s: %s", path, exc)
            return None

        if not content.strip():
            logger.warning("Skipping empty file: %s", path.name)
            return None

        metadata = {
            "source": path.name,
            "type": kind,
            "path": path.relative_to(self.root).as_posix(),
            **_describe(content),
        }
        logger.info("Loaded %s (%d chars)", path.name, len(content))
        return SourceDocument(id=document_id_for(path.name), content=content, kind=kind, metadata=metadata)
