"""Exporters for normalized paragraph sequences."""

from docket.exporters.base import DEFAULT_TITLE, BaseExporter, ExporterRegistry
from docket.exporters.docx_export import DocxExporter
from docket.exporters.html_export import HtmlExporter, build_html_from_paragraphs

__all__ = [
    "DEFAULT_TITLE",
    "BaseExporter",
    "ExporterRegistry",
    "DocxExporter",
    "HtmlExporter",
    "build_html_from_paragraphs",
]
