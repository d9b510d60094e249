"""
HTML document loader.

Reads HTML produced by an external document converter (or exported from
a word processor) and hands it to the markup builder.
"""

from __future__ import annotations

from typing import ClassVar

from docket.core.document import MarkupNode
from docket.loaders.base import (
    BaseLoader,
    DocumentSource,
    LoaderRegistry,
    read_source_bytes,
)
from docket.markup.html import parse_html


@LoaderRegistry.register
class HtmlLoader(BaseLoader):
    """Load HTML documents and fragments."""

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = [".html", ".htm"]
    LOADER_NAME: ClassVar[str] = "html"

    def load_markup(self, source: DocumentSource) -> MarkupNode:
        raw = read_source_bytes(source)
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            self._add_warning("HTML is not valid UTF-8; decoding as Latin-1")
            text = raw.decode("latin-1")
        return parse_html(text)
