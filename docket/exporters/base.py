"""
Exporter base class and registry.

Exporters turn a paragraph sequence back into a document: one paragraph
block per paragraph, in order, with no other structure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar

DEFAULT_TITLE = "Normalized Document"


class BaseExporter(ABC):
    """Writes a paragraph sequence out as a document, one block per paragraph."""

    EXPORTER_NAME: ClassVar[str] = "base"
    FILE_EXTENSION: ClassVar[str] = ""
    MEDIA_TYPE: ClassVar[str] = "application/octet-stream"

    @abstractmethod
    def export(self, paragraphs: Sequence[str], title: str = DEFAULT_TITLE) -> bytes:
        """
        Serialize a paragraph sequence.

        Args:
            paragraphs: Paragraphs in document order
            title: Document title written to the output metadata

        Returns:
            The serialized document
        """

    def export_to_path(
        self,
        paragraphs: Sequence[str],
        path: Path,
        title: str = DEFAULT_TITLE,
    ) -> Path:
        """Write the exported document to disk and return its path."""
        path = self._ensure_extension(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.export(paragraphs, title=title))
        return path

    def output_filename(self, source_name: str | None) -> str:
        """Download name for an exported document ("report.docx" -> "report-normalized.docx")."""
        stem = Path(source_name).stem if source_name else ""
        return f"{stem or 'document'}-normalized{self.FILE_EXTENSION}"

    def _ensure_extension(self, path: Path) -> Path:
        """Swap in this exporter's suffix when ``path`` has another one."""
        if path.suffix.lower() != self.FILE_EXTENSION.lower():
            return path.with_suffix(self.FILE_EXTENSION)
        return path


class ExporterRegistry:
    """Export formats known to Docket."""

    _exporters: ClassVar[dict[str, type[BaseExporter]]] = {}

    @classmethod
    def register(cls, exporter_class: type[BaseExporter]) -> type[BaseExporter]:
        """Add an exporter class under its ``EXPORTER_NAME``."""
        cls._exporters[exporter_class.EXPORTER_NAME] = exporter_class
        return exporter_class

    @classmethod
    def get_exporter(cls, name: str) -> BaseExporter | None:
        """Instantiate the exporter for ``name``, or None."""
        exporter_class = cls._exporters.get(name)
        if exporter_class:
            return exporter_class()
        return None

    @classmethod
    def available_exporters(cls) -> list[str]:
        """Names of the registered formats, in registration order."""
        return list(cls._exporters.keys())

    @classmethod
    def export(
        cls,
        paragraphs: Sequence[str],
        format: str,
        title: str = DEFAULT_TITLE,
    ) -> bytes:
        """Serialize paragraphs in ``format``; unknown formats raise ValueError."""
        exporter = cls.get_exporter(format)
        if exporter is None:
            available = ", ".join(cls.available_exporters())
            raise ValueError(f"Unknown export format: {format}. Available: {available}")
        return exporter.export(paragraphs, title=title)
