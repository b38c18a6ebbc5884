"""Optional content normalization applied to changed documents before splitting."""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from doc_indexer.config import settings
from doc_indexer.models import SourceDocument

logger = logging.getLogger(__name__)

_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_SPACES = re.compile(r"[^\S\n]+")
_BLANK_LINES = re.compile(r"\n\s*\n\s*\n+")


class ContentNormalizer:
    """Rewrite document text into a consistent shape.

    Fingerprints are computed on the raw text, so changing these flags
    does not by itself mark documents as changed.

    Parameters
    ----------
    enabled:
        Master switch; when off :meth:`apply` returns its input.
    remove_html_tags / remove_code_blocks / normalize_whitespace / normalize_newlines:
        Individual rewrite steps, applied in that order.  Leading and
        trailing whitespace is always trimmed.
    """

    def __init__(
        self,
        *,
        enabled: bool = settings.normalize_enabled,
        remove_html_tags: bool = settings.normalize_remove_html_tags,
        remove_code_blocks: bool = settings.normalize_remove_code_blocks,
        normalize_whitespace: bool = settings.normalize_whitespace,
        normalize_newlines: bool = settings.normalize_newlines,
    ) -> None:
        self.enabled = enabled
        self.remove_html_tags = remove_html_tags
        self.remove_code_blocks = remove_code_blocks
        self.normalize_whitespace = normalize_whitespace
        self.normalize_newlines = normalize_newlines

    def normalize(self, text: str) -> str:
        if self.remove_html_tags:
            text = BeautifulSoup(text, "html.parser").get_text()
        if self.remove_code_blocks:
            text = _CODE_BLOCK.sub("", text)
        if self.normalize_whitespace:
            text = _SPACES.sub(" ", text)
        if self.normalize_newlines:
            text = _BLANK_LINES.sub("\n\n", text)
        return text.strip()

    def apply(self, documents: list[SourceDocument]) -> list[SourceDocument]:
        if not self.enabled:
            return documents

        normalized: list[SourceDocument] = []
        for document in documents:
            text = self.normalize(document.content)
            metadata = {
                **document.metadata,
                "original_length": len(document.content),
                "normalized_length": len(text),
            }
            normalized.append(document.model_copy(update={"content": text, "metadata": metadata}))
        logger.info("Normalized %d documents", len(normalized))
        return normalized
