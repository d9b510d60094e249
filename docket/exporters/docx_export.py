"""
DOCX exporter.

Writes each paragraph as a separate Word paragraph in the default style.
"""

from __future__ import annotations

import io
from collections.abc import Sequence
from typing import ClassVar

from docx import Document

from docket.exporters.base import DEFAULT_TITLE, BaseExporter, ExporterRegistry


@ExporterRegistry.register
class DocxExporter(BaseExporter):
    """Export paragraphs to a Word document."""

    EXPORTER_NAME: ClassVar[str] = "docx"
    FILE_EXTENSION: ClassVar[str] = ".docx"
    MEDIA_TYPE: ClassVar[str] = (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )

    def export(self, paragraphs: Sequence[str], title: str = DEFAULT_TITLE) -> bytes:
        doc = Document()
        doc.core_properties.title = title
        for paragraph in paragraphs:
            doc.add_paragraph(paragraph)

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()
