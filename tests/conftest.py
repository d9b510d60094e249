"""
Pytest configuration and fixtures for Docket tests.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from docx import Document

from docket.core.document import MarkupNode


@pytest.fixture
def outline_markup() -> MarkupNode:
    """A document with a heading, a nested ordered list and a bullet list."""
    return MarkupNode.container(
        MarkupNode.paragraph("General Conditions"),
        MarkupNode.ordered(
            MarkupNode.item(
                "Scope",
                MarkupNode.ordered(
                    MarkupNode.item("Purpose"),
                    MarkupNode.item(
                        "Applicability",
                        MarkupNode.ordered(MarkupNode.item("Exceptions")),
                    ),
                ),
            ),
            MarkupNode.item("Definitions"),
        ),
        MarkupNode.unordered(
            MarkupNode.item("Annex A"),
            MarkupNode.item("Annex B"),
        ),
    )


@pytest.fixture
def outline_paragraphs() -> list[str]:
    """Paragraphs extracted from ``outline_markup``."""
    return [
        "General Conditions",
        "1 Scope",
        "1.1 Purpose",
        "1.2 Applicability",
        "1.2.1 Exceptions",
        "2 Definitions",
        "Annex A",
        "Annex B",
    ]


@pytest.fixture
def sample_html() -> str:
    """Converter-style HTML with nested lists."""
    return (
        "<h1>Contract</h1>\n"
        "<p>Preamble   text.</p>\n"
        "<ol>\n"
        "  <li>Object\n"
        "    <ol>\n"
        "      <li>Services</li>\n"
        "      <li>Goods</li>\n"
        "    </ol>\n"
        "  </li>\n"
        "  <li>Price</li>\n"
        "</ol>\n"
        "<ul><li>Signed in duplicate</li></ul>\n"
    )


@pytest.fixture
def make_docx(tmp_path: Path) -> Callable[..., Path]:
    """Build a DOCX file from (text, style) pairs and return its path."""

    def _make(blocks: list[tuple[str, str | None]], name: str = "sample.docx") -> Path:
        doc = Document()
        for text, style in blocks:
            if style is None:
                doc.add_paragraph(text)
            else:
                doc.add_paragraph(text, style=style)
        path = tmp_path / name
        doc.save(path)
        return path

    return _make
