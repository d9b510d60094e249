"""Document loaders for Docket."""

from docket.loaders.base import BaseLoader, DocumentSource, LoaderError, LoaderRegistry
from docket.loaders.docx import DocxLoader
from docket.loaders.html import HtmlLoader

__all__ = [
    "BaseLoader",
    "DocumentSource",
    "LoaderError",
    "LoaderRegistry",
    "DocxLoader",
    "HtmlLoader",
]
