"""
HTML exporter.

Produces a minimal standalone HTML document, one ``<p>`` per paragraph.
Word processors open it directly, and it is the form other HTML-to-document
converters expect.
"""

from __future__ import annotations

import html
from collections.abc import Sequence
from typing import ClassVar

from docket.exporters.base import DEFAULT_TITLE, BaseExporter, ExporterRegistry

_PARAGRAPH_STYLE = "margin:0 0 1em 0; line-height:1.5;"


def build_html_from_paragraphs(
    paragraphs: Sequence[str],
    title: str = DEFAULT_TITLE,
) -> str:
    """
    Render paragraphs as an HTML document.

    Args:
        paragraphs: Paragraphs in document order. Text is escaped.
        title: Content of the ``<title>`` element.

    Returns:
        Complete HTML document as a string.
    """
    body = "\n".join(
        f'<p style="{_PARAGRAPH_STYLE}">{html.escape(p, quote=True)}</p>'
        for p in paragraphs
    )
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{html.escape(title)}</title>
  <style>
    body {{ font-family: Arial, sans-serif; }}
  </style>
</head>
<body>
<article>
{body}
</article>
</body>
</html>"""


@ExporterRegistry.register
class HtmlExporter(BaseExporter):
    """Export paragraphs to a standalone HTML document."""

    EXPORTER_NAME: ClassVar[str] = "html"
    FILE_EXTENSION: ClassVar[str] = ".html"
    MEDIA_TYPE: ClassVar[str] = "text/html; charset=utf-8"

    def export(self, paragraphs: Sequence[str], title: str = DEFAULT_TITLE) -> bytes:
        return build_html_from_paragraphs(paragraphs, title=title).encode("utf-8")
