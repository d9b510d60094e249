"""
Loader base class and registry.

Every loader converts one source format into a MarkupNode tree. The
shared ``load_document`` then flattens that tree into a normalized
paragraph sequence, so format-specific code never deals with numbering.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, BinaryIO, ClassVar, Union

from docket.cleaning.normalizer import normalize_paragraphs
from docket.core.document import MarkupNode, ParsedDocument
from docket.markup.walker import extract_paragraphs

logger = logging.getLogger(__name__)

# A path on disk, raw bytes of an upload, or an open binary stream
DocumentSource = Union[Path, str, bytes, BinaryIO]


class LoaderError(Exception):
    """A document could not be turned into paragraphs."""

    def __init__(
        self,
        message: str,
        source_name: str | None = None,
        details: str | None = None,
    ):
        self.source_name = source_name
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": str(self),
            "source_name": self.source_name,
            "details": self.details,
        }


def open_source(source: DocumentSource) -> BinaryIO | str:
    """Turn a DocumentSource into something a parser can open."""
    if isinstance(source, bytes):
        return io.BytesIO(source)
    if isinstance(source, Path):
        return str(source)
    return source


def read_source_bytes(source: DocumentSource) -> bytes:
    """Read the full content of a DocumentSource."""
    if isinstance(source, bytes):
        return source
    if isinstance(source, (str, Path)):
        return Path(source).read_bytes()
    return source.read()


class BaseLoader(ABC):
    """
    A source format that can be read into a markup tree.

    Subclasses name the suffixes they accept and implement ``load_markup``;
    flattening and normalization are shared.
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = []
    LOADER_NAME: ClassVar[str] = "base"

    def __init__(self) -> None:
        self._warnings: list[str] = []

    @classmethod
    def can_load(cls, filename: str | Path) -> bool:
        """Check if this loader can handle the given file name."""
        return Path(filename).suffix.lower() in cls.SUPPORTED_EXTENSIONS

    @abstractmethod
    def load_markup(self, source: DocumentSource) -> MarkupNode:
        """
        Convert a document into a markup tree.

        Args:
            source: Path, raw bytes or binary stream of the document

        Returns:
            Root node of the converted document

        Raises:
            LoaderError: If the document cannot be read
        """

    def load_document(
        self,
        source: DocumentSource,
        source_name: str | None = None,
    ) -> ParsedDocument:
        """
        Load a document into its normalized paragraph sequence.

        Args:
            source: Path, raw bytes or binary stream of the document.
            source_name: Display name; defaults to the file name for paths.

        Raises:
            LoaderError: If the file is missing, unsupported or unreadable.
        """
        self._reset_messages()

        if isinstance(source, (str, Path)):
            path = Path(source)
            source_name = source_name or path.name
            if not path.exists():
                raise LoaderError(f"File not found: {path}", source_name=source_name)
            if not self.can_load(path):
                raise LoaderError(
                    f"Unsupported file type: {path.suffix}",
                    source_name=source_name,
                    details=f"Supported types: {', '.join(self.SUPPORTED_EXTENSIONS)}",
                )

        name = source_name or "document"
        markup = self.load_markup(source)
        paragraphs = normalize_paragraphs(extract_paragraphs(markup))
        logger.info(
            "Loaded %s with %s loader: %d paragraphs",
            name,
            self.LOADER_NAME,
            len(paragraphs),
        )

        return ParsedDocument(
            source_name=name,
            paragraphs=paragraphs,
            markup=markup,
            loader_used=self.LOADER_NAME,
        )

    @property
    def warnings(self) -> list[str]:
        """Problems tolerated during the last load."""
        return self._warnings

    def _add_warning(self, warning: str) -> None:
        """Log a tolerated problem and keep it for the caller."""
        logger.warning(warning)
        self._warnings.append(warning)

    def _reset_messages(self) -> None:
        """Forget warnings from a previous load."""
        self._warnings = []


class LoaderRegistry:
    """Loaders known to Docket, picked by file suffix."""

    _loaders: ClassVar[list[type[BaseLoader]]] = []

    @classmethod
    def register(cls, loader_class: type[BaseLoader]) -> type[BaseLoader]:
        """Add a loader class; used as a class decorator."""
        if loader_class not in cls._loaders:
            cls._loaders.append(loader_class)
        return loader_class

    @classmethod
    def get_loader(cls, filename: str | Path) -> BaseLoader | None:
        """Instantiate the first loader accepting ``filename``, if any."""
        for loader_class in cls._loaders:
            if loader_class.can_load(filename):
                return loader_class()
        return None

    @classmethod
    def get_loader_by_name(cls, name: str) -> type[BaseLoader] | None:
        """Look a loader class up by ``LOADER_NAME``."""
        for loader_class in cls._loaders:
            if loader_class.LOADER_NAME == name:
                return loader_class
        return None

    @classmethod
    def supported_extensions(cls) -> list[str]:
        """Sorted suffixes accepted by any registered loader."""
        extensions = []
        for loader_class in cls._loaders:
            extensions.extend(loader_class.SUPPORTED_EXTENSIONS)
        return sorted(set(extensions))

    @classmethod
    def load_document(
        cls,
        source: DocumentSource,
        filename: str | None = None,
    ) -> ParsedDocument:
        """
        Load a document using the loader matching its file name.

        Args:
            source: Path, raw bytes or binary stream of the document.
            filename: Name used to pick the loader; required unless
                ``source`` is a path.

        Raises:
            LoaderError: No loader accepts the name, or the load failed.
        """
        if filename is None and isinstance(source, (str, Path)):
            filename = Path(source).name
        name = filename or ""

        loader = cls.get_loader(name)
        if loader is None:
            supported = ", ".join(cls.supported_extensions())
            raise LoaderError(
                f"No loader available for file type: {Path(name).suffix or name!r}",
                source_name=filename,
                details=f"Supported types: {supported}",
            )
        return loader.load_document(source, source_name=filename)
