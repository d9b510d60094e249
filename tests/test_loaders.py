"""
Tests for the document loaders.

DOCX fixtures are generated with python-docx using the built-in
"List Number" / "List Bullet" styles of its default template.
"""

from __future__ import annotations

import io
from types import SimpleNamespace

import pytest
from docx import Document
from docx.oxml import parse_xml
from docx.oxml.ns import nsdecls

from docket.core.document import MarkupNode
from docket.loaders import DocxLoader, HtmlLoader, LoaderError, LoaderRegistry
from docket.loaders.docx import (
    LevelFormat,
    ListAssembler,
    ListInfo,
    read_numbering_definitions,
)
from docket.markup import extract_paragraphs

# ===================================================================
# Registry
# ===================================================================


class TestLoaderRegistry:
    """Tests for loader selection."""

    def test_supported_extensions(self):
        assert LoaderRegistry.supported_extensions() == [".docx", ".htm", ".html"]

    def test_get_loader(self):
        assert isinstance(LoaderRegistry.get_loader("report.DOCX"), DocxLoader)
        assert isinstance(LoaderRegistry.get_loader("page.htm"), HtmlLoader)
        assert LoaderRegistry.get_loader("scan.pdf") is None

    def test_get_loader_by_name(self):
        assert LoaderRegistry.get_loader_by_name("docx") is DocxLoader
        assert LoaderRegistry.get_loader_by_name("missing") is None

    def test_unsupported_type_raises(self):
        with pytest.raises(LoaderError, match="No loader available"):
            LoaderRegistry.load_document(b"%PDF-1.7", "scan.pdf")

    def test_dispatch_from_path(self, tmp_path):
        path = tmp_path / "page.html"
        path.write_text("<p>hello</p>", encoding="utf-8")
        document = LoaderRegistry.load_document(path)
        assert document.source_name == "page.html"
        assert document.loader_used == "html"
        assert document.paragraphs == ["hello"]


# ===================================================================
# HTML loader
# ===================================================================


class TestHtmlLoader:
    """Tests for HtmlLoader."""

    def test_load_bytes(self, sample_html):
        document = HtmlLoader().load_document(sample_html.encode("utf-8"), "contract.html")
        assert document.paragraphs[:3] == ["Contract", "Preamble text.", "1 Object"]
        assert document.markup is not None

    def test_utf8_bom(self):
        raw = "<p>café</p>".encode("utf-8-sig")
        assert HtmlLoader().load_document(raw, "a.html").paragraphs == ["café"]

    def test_latin1_fallback_warns(self):
        loader = HtmlLoader()
        document = loader.load_document(b"<p>caf\xe9</p>", "a.html")
        assert document.paragraphs == ["café"]
        assert len(loader.warnings) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoaderError, match="File not found"):
            HtmlLoader().load_document(tmp_path / "missing.html")

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("<p>x</p>")
        with pytest.raises(LoaderError, match="Unsupported file type"):
            HtmlLoader().load_document(path)

    def test_default_source_name(self):
        assert HtmlLoader().load_document(b"<p>x</p>").source_name == "document"


# ===================================================================
# DOCX loader
# ===================================================================


class TestDocxLoader:
    """Tests for DocxLoader on generated documents."""

    def test_plain_paragraphs(self, make_docx):
        path = make_docx([("First paragraph", None), ("Second  paragraph", None)])
        document = DocxLoader().load_document(path)
        assert document.paragraphs == ["First paragraph", "Second paragraph"]
        assert document.loader_used == "docx"

    def test_numbered_and_bulleted_lists(self, make_docx):
        path = make_docx(
            [
                ("Intro", None),
                ("First", "List Number"),
                ("Second", "List Number"),
                ("Point", "List Bullet"),
            ]
        )
        assert DocxLoader().load_document(path).paragraphs == [
            "Intro",
            "1 First",
            "2 Second",
            "Point",
        ]

    def test_headings_are_paragraphs(self, tmp_path):
        doc = Document()
        doc.add_heading("Title", level=1)
        doc.add_paragraph("Body")
        path = tmp_path / "headed.docx"
        doc.save(path)
        assert DocxLoader().load_document(path).paragraphs == ["Title", "Body"]

    def test_empty_paragraph_does_not_break_list(self, make_docx):
        path = make_docx([("One", "List Number"), ("", None), ("Two", "List Number")])
        assert DocxLoader().load_document(path).paragraphs == ["1 One", "2 Two"]

    def test_numbering_continues_after_interruption(self, make_docx):
        path = make_docx(
            [("First", "List Number"), ("A note", None), ("Second", "List Number")]
        )
        assert DocxLoader().load_document(path).paragraphs == [
            "1 First",
            "A note",
            "2 Second",
        ]

    def test_table_cells_in_reading_order(self, tmp_path):
        doc = Document()
        doc.add_paragraph("Before")
        table = doc.add_table(rows=2, cols=2)
        table.cell(0, 0).text = "A"
        table.cell(0, 1).text = "B"
        table.cell(1, 0).text = "C"
        doc.add_paragraph("After")
        path = tmp_path / "table.docx"
        doc.save(path)
        assert DocxLoader().load_document(path).paragraphs == [
            "Before",
            "A",
            "B",
            "C",
            "After",
        ]

    def test_load_from_bytes(self, make_docx):
        raw = make_docx([("Hello", None)]).read_bytes()
        document = LoaderRegistry.load_document(raw, "upload.docx")
        assert document.paragraphs == ["Hello"]
        assert document.source_name == "upload.docx"

    def test_load_from_stream(self, make_docx):
        raw = make_docx([("Streamed", None)]).read_bytes()
        assert DocxLoader().load_document(io.BytesIO(raw)).paragraphs == ["Streamed"]

    def test_invalid_content(self):
        with pytest.raises(LoaderError, match="Failed to load DOCX"):
            DocxLoader().load_document(b"this is not a zip archive", "broken.docx")


# ===================================================================
# List reassembly
# ===================================================================


def _assemble(*entries: tuple[str, ListInfo | None]) -> list[str]:
    root = MarkupNode.container()
    assembler = ListAssembler(root)
    for text, info in entries:
        if info is None:
            assembler.add_block(MarkupNode.paragraph(text))
        else:
            assembler.add_item(text, info)
    return extract_paragraphs(root)


class TestListAssembler:
    """Tests for rebuilding nested lists from flat list paragraphs."""

    def test_nested_levels_and_continuation(self):
        top = ListInfo(key="n1", level=0, ordered=True)
        sub = ListInfo(key="n1", level=1, ordered=True)
        assert _assemble(
            ("A", top),
            ("A1", sub),
            ("A2", sub),
            ("B", top),
            ("note", None),
            ("C", top),
            ("C1", sub),
        ) == ["1 A", "1.1 A1", "1.2 A2", "2 B", "note", "3 C", "3.1 C1"]

    def test_definition_start_value(self):
        info = ListInfo(key="n2", level=0, ordered=True, start=5)
        assert _assemble(("X", info), ("Y", info)) == ["5 X", "6 Y"]

    def test_bullets_under_numbered_item(self):
        number = ListInfo(key="n1", level=0, ordered=True)
        bullet = ListInfo(key="b1", level=1, ordered=False)
        assert _assemble(("A", number), ("dot", bullet), ("B", number)) == [
            "1 A",
            "dot",
            "2 B",
        ]

    def test_level_skipped_at_start(self):
        assert _assemble(
            ("deep", ListInfo(key="n3", level=2, ordered=True)),
            ("top", ListInfo(key="n3", level=0, ordered=True)),
        ) == ["1 deep", "1 top"]

    def test_separate_lists_number_independently(self):
        first = ListInfo(key="n1", level=0, ordered=True)
        second = ListInfo(key="n2", level=0, ordered=True)
        assert _assemble(("a", first), ("b", first), ("c", second)) == [
            "1 a",
            "2 b",
            "1 c",
        ]

    def test_nested_item_resumes_after_interruption(self):
        top = ListInfo(key="n1", level=0, ordered=True)
        sub = ListInfo(key="n1", level=1, ordered=True)
        assert _assemble(
            ("A", top),
            ("A1", sub),
            ("note", None),
            ("A2", sub),
            ("B", top),
        ) == ["1 A", "1.1 A1", "note", "1.2 A2", "2 B"]

    def test_deep_item_resumes_full_path(self):
        levels = [ListInfo(key="n1", level=i, ordered=True) for i in range(3)]
        assert _assemble(
            ("A", levels[0]),
            ("B", levels[0]),
            ("B1", levels[1]),
            ("B1a", levels[2]),
            ("note", None),
            ("B1b", levels[2]),
        ) == ["1 A", "2 B", "2.1 B1", "2.1.1 B1a", "note", "2.1.2 B1b"]

    def test_resume_does_not_cross_numbering_instances(self):
        first = ListInfo(key="n1", level=0, ordered=True)
        other_sub = ListInfo(key="n2", level=1, ordered=True)
        assert _assemble(("A", first), ("note", None), ("x", other_sub)) == [
            "1 A",
            "note",
            "1 x",
        ]


# ===================================================================
# Numbering definitions
# ===================================================================


def _numbering_doc(body: str) -> SimpleNamespace:
    element = parse_xml(f"<w:numbering {nsdecls('w')}>{body}</w:numbering>")
    return SimpleNamespace(part=SimpleNamespace(numbering_part=SimpleNamespace(element=element)))


class TestReadNumberingDefinitions:
    """Tests for reading the numbering part."""

    def test_formats_and_start_override(self):
        doc = _numbering_doc(
            '<w:abstractNum w:abstractNumId="0">'
            '<w:lvl w:ilvl="0"><w:start w:val="1"/><w:numFmt w:val="decimal"/></w:lvl>'
            '<w:lvl w:ilvl="1"><w:numFmt w:val="bullet"/></w:lvl>'
            "</w:abstractNum>"
            '<w:num w:numId="4"><w:abstractNumId w:val="0"/>'
            '<w:lvlOverride w:ilvl="0"><w:startOverride w:val="3"/></w:lvlOverride>'
            "</w:num>"
        )
        assert read_numbering_definitions(doc) == {
            "4": {0: LevelFormat(ordered=True, start=3), 1: LevelFormat(ordered=False)}
        }

    def test_malformed_level_attributes_fall_back(self):
        doc = _numbering_doc(
            '<w:abstractNum w:abstractNumId="0">'
            '<w:lvl w:ilvl="x"><w:start w:val="?"/><w:numFmt w:val="decimal"/></w:lvl>'
            "</w:abstractNum>"
            '<w:num w:numId="1"><w:abstractNumId w:val="0"/>'
            '<w:lvlOverride w:ilvl=""><w:startOverride w:val="2"/></w:lvlOverride>'
            "</w:num>"
        )
        assert read_numbering_definitions(doc) == {"1": {0: LevelFormat(ordered=True, start=2)}}
