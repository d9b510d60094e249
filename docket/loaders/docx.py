"""
DOCX document loader using python-docx.

Converts a Word document into a markup tree. Word stores lists as flat
paragraphs carrying numbering properties (``w:numPr``); this loader
reassembles them into nested ordered/unordered lists by level so the
walker can synthesize their numbering.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar

from docx import Document
from docx.document import Document as DocxDocument
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from docket.core.document import MarkupNode
from docket.loaders.base import (
    BaseLoader,
    DocumentSource,
    LoaderError,
    LoaderRegistry,
    open_source,
)

logger = logging.getLogger(__name__)

# Word numbering formats rendered without a number
_BULLET_FORMATS = {"bullet", "none"}

# Built-in list styles: "List Number", "List Bullet 2", ...
_LIST_STYLE_RE = re.compile(r"^List\s*(?P<kind>Bullet|Number)\s*(?P<level>[1-9])?$", re.I)


@dataclass(frozen=True)
class LevelFormat:
    """Numbering format of one level of a Word list definition."""

    ordered: bool
    start: int = 1


@dataclass(frozen=True)
class ListInfo:
    """List membership of a single paragraph."""

    key: str
    level: int
    ordered: bool
    start: int = 1


def _int_attr(element: Any, name: str, default: int) -> int:
    """Read an integer attribute, falling back to ``default`` when unusable."""
    if element is None:
        return default
    try:
        return int(element.get(qn(name)))
    except (TypeError, ValueError):
        return default


def _int_val(element: Any, default: int) -> int:
    return _int_attr(element, "w:val", default)


def read_numbering_definitions(doc: DocxDocument) -> dict[str, dict[int, LevelFormat]]:
    """
    Read list definitions from the numbering part.

    Returns:
        Mapping of numId -> {level -> LevelFormat}, with ``w:startOverride``
        values of the concrete numbering instance applied.
    """
    try:
        numbering = doc.part.numbering_part.element
    except (KeyError, NotImplementedError):
        # No numbering part: the document has no Word lists
        return {}

    abstract: dict[str, dict[int, LevelFormat]] = {}
    for abstract_num in numbering.findall(qn("w:abstractNum")):
        levels: dict[int, LevelFormat] = {}
        for lvl in abstract_num.findall(qn("w:lvl")):
            ilvl = _int_attr(lvl, "w:ilvl", 0)
            fmt = lvl.find(qn("w:numFmt"))
            fmt_val = fmt.get(qn("w:val")) if fmt is not None else "decimal"
            levels[ilvl] = LevelFormat(
                ordered=fmt_val not in _BULLET_FORMATS,
                start=_int_val(lvl.find(qn("w:start")), 1),
            )
        abstract[abstract_num.get(qn("w:abstractNumId"))] = levels

    definitions: dict[str, dict[int, LevelFormat]] = {}
    for num in numbering.findall(qn("w:num")):
        abstract_ref = num.find(qn("w:abstractNumId"))
        if abstract_ref is None:
            continue
        levels = dict(abstract.get(abstract_ref.get(qn("w:val")), {}))
        for override in num.findall(qn("w:lvlOverride")):
            ilvl = _int_attr(override, "w:ilvl", 0)
            start_override = override.find(qn("w:startOverride"))
            if start_override is not None and ilvl in levels:
                levels[ilvl] = LevelFormat(
                    ordered=levels[ilvl].ordered,
                    start=_int_val(start_override, levels[ilvl].start),
                )
        definitions[num.get(qn("w:numId"))] = levels
    return definitions


@dataclass
class _OpenList:
    node: MarkupNode
    level: int
    key: str
    ordered: bool


class ListAssembler:
    """
    Builds nested list elements from a stream of list paragraphs.

    Lists are closed by any non-list block. Numbering continues across
    such interruptions for the same numbering instance, and the counters
    of deeper levels restart whenever a shallower item appears, matching
    how Word renders list numbers. A nested item that resumes a list after
    an interruption gets its enclosing levels reopened, so it keeps its
    parent's number path.
    """

    def __init__(self, root: MarkupNode) -> None:
        self._root = root
        self._stack: list[_OpenList] = []
        self._counters: dict[tuple[str, int], int] = {}

    def add_block(self, node: MarkupNode) -> None:
        self._stack.clear()
        self._root.children.append(node)

    def add_item(self, text: str, info: ListInfo) -> None:
        while self._stack and self._stack[-1].level > info.level:
            self._stack.pop()

        top = self._stack[-1] if self._stack else None
        if top is not None and top.level == info.level and (
            top.key != info.key or top.ordered != info.ordered
        ):
            self._stack.pop()
            top = self._stack[-1] if self._stack else None

        if top is None and info.level > 0:
            top = self._resume_ancestors(info)
        if top is None or top.level < info.level:
            top = self._open_list(info, parent=top)

        for key, level in list(self._counters):
            if key == info.key and level > info.level:
                del self._counters[(key, level)]
        if info.ordered:
            counter_key = (info.key, info.level)
            self._counters[counter_key] = self._counters.get(counter_key, info.start - 1) + 1

        top.node.children.append(MarkupNode.item(text))

    def _resume_ancestors(self, info: ListInfo) -> _OpenList | None:
        """
        Reopen the numbered levels above ``info.level`` for its numbering instance.

        Each reopened level is an ordered list starting at the level's current
        count with one empty item, which carries the number but emits no text.
        Stops at the first level with no count yet.
        """
        parent: _OpenList | None = None
        for level in range(info.level):
            count = self._counters.get((info.key, level))
            if count is None:
                break
            node = MarkupNode.ordered(MarkupNode.item(), start=count if count != 1 else None)
            self._attach(node, parent)
            parent = _OpenList(node=node, level=level, key=info.key, ordered=True)
            self._stack.append(parent)
        return parent

    def _open_list(self, info: ListInfo, parent: _OpenList | None) -> _OpenList:
        if info.ordered:
            start = self._counters.get((info.key, info.level), info.start - 1) + 1
            node = MarkupNode.ordered(start=start if start != 1 else None)
        else:
            node = MarkupNode.unordered()

        self._attach(node, parent)
        opened = _OpenList(node=node, level=info.level, key=info.key, ordered=info.ordered)
        self._stack.append(opened)
        return opened

    def _attach(self, node: MarkupNode, parent: _OpenList | None) -> None:
        """Hang a list on the root, or on the last item of an open list."""
        if parent is None:
            self._root.children.append(node)
            return
        # Lists on the stack always hold at least one item
        *_, last_item = parent.node.list_items()
        last_item.children.append(node)


@LoaderRegistry.register
class DocxLoader(BaseLoader):
    """
    Load DOCX documents using python-docx.

    Produces:
    - Paragraph blocks for body text and headings
    - Nested ordered/unordered lists from Word numbering
    - Transparent containers for tables (cell paragraphs in reading order)
    """

    SUPPORTED_EXTENSIONS: ClassVar[list[str]] = [".docx"]
    LOADER_NAME: ClassVar[str] = "docx"

    def load_markup(self, source: DocumentSource) -> MarkupNode:
        """Load a DOCX and convert its body into a markup tree."""
        try:
            doc = Document(open_source(source))
        except OSError:
            # Transient I/O errors are left to the caller to retry
            raise
        except Exception as e:
            raise LoaderError(
                f"Failed to load DOCX: {e}",
                details=str(e),
            ) from e

        numbering = read_numbering_definitions(doc)
        root = MarkupNode.container()
        self._convert_blocks(self._iter_block_items(doc.element.body, doc), root, numbering)
        logger.debug(
            "Converted DOCX body into %d top-level elements", len(root.children)
        )
        return root

    def _iter_block_items(self, parent: Any, doc: DocxDocument) -> Iterator[Paragraph | Table]:
        """Yield paragraphs and tables in body order, unwrapping content controls."""
        for element in parent.iterchildren():
            tag = element.tag.split("}")[-1]  # Get tag without namespace
            if tag == "p":
                yield Paragraph(element, doc)
            elif tag == "tbl":
                yield Table(element, doc)
            elif tag == "sdt":
                content = element.find(qn("w:sdtContent"))
                if content is not None:
                    yield from self._iter_block_items(content, doc)

    def _convert_blocks(
        self,
        blocks: Iterator[Paragraph | Table],
        root: MarkupNode,
        numbering: dict[str, dict[int, LevelFormat]],
    ) -> None:
        assembler = ListAssembler(root)
        for block in blocks:
            if isinstance(block, Table):
                assembler.add_block(self._convert_table(block, numbering))
                continue

            text = block.text
            if not text.strip():
                # Empty paragraphs neither emit nor interrupt a list
                continue

            info = self._list_info(block, numbering)
            if info is None:
                assembler.add_block(MarkupNode.paragraph(text))
            else:
                assembler.add_item(text, info)

    def _convert_table(
        self,
        table: Table,
        numbering: dict[str, dict[int, LevelFormat]],
    ) -> MarkupNode:
        """Convert a table into nested containers of cell content."""
        table_node = MarkupNode.container()
        for row in table.rows:
            row_node = MarkupNode.container()
            seen: set[int] = set()
            for cell in row.cells:
                # Merged cells are repeated by python-docx
                if id(cell._tc) in seen:
                    continue
                seen.add(id(cell._tc))
                cell_node = MarkupNode.container()
                self._convert_blocks(iter(cell.paragraphs), cell_node, numbering)
                row_node.children.append(cell_node)
            table_node.children.append(row_node)
        return table_node

    def _list_info(
        self,
        para: Paragraph,
        numbering: dict[str, dict[int, LevelFormat]],
    ) -> ListInfo | None:
        """Work out whether a paragraph is a list item, and of which list."""
        style_name = para.style.name if para.style is not None else ""
        style_match = _LIST_STYLE_RE.match(style_name or "")

        num_pr, from_style = self._find_num_pr(para)
        if num_pr is not None:
            num_id_el = num_pr.find(qn("w:numId"))
            ilvl_el = num_pr.find(qn("w:ilvl"))
            num_id = num_id_el.get(qn("w:val")) if num_id_el is not None else None
            if num_id == "0":
                # numId 0 explicitly removes inherited numbering
                return None

            if ilvl_el is not None:
                level = _int_val(ilvl_el, 0)
            elif from_style and style_match and style_match.group("level"):
                level = int(style_match.group("level")) - 1
            else:
                level = 0

            levels = numbering.get(num_id or "", {})
            fmt = levels.get(level) or levels.get(0)
            if fmt is not None:
                return ListInfo(key=f"num:{num_id}", level=level, ordered=fmt.ordered, start=fmt.start)
            if style_match is None:
                self._add_warning(
                    f"Numbering definition {num_id!r} not found; treating paragraph as a bullet"
                )
                return ListInfo(key=f"num:{num_id}", level=level, ordered=False)

        if style_match is not None:
            ordered = style_match.group("kind").lower() == "number"
            level = int(style_match.group("level") or 1) - 1
            return ListInfo(key=f"style:{style_match.group('kind').lower()}", level=level, ordered=ordered)

        return None

    @staticmethod
    def _find_num_pr(para: Paragraph) -> tuple[Any, bool]:
        """
        Locate the numbering properties of a paragraph.

        Returns:
            The ``w:numPr`` element (or None) and whether it came from the
            paragraph style chain rather than the paragraph itself.
        """
        p_pr = para._p.find(qn("w:pPr"))
        if p_pr is not None:
            num_pr = p_pr.find(qn("w:numPr"))
            if num_pr is not None:
                return num_pr, False

        style = para.style
        while style is not None:
            s_pr = style.element.find(qn("w:pPr"))
            if s_pr is not None:
                num_pr = s_pr.find(qn("w:numPr"))
                if num_pr is not None:
                    return num_pr, True
            style = style.base_style
        return None, False
