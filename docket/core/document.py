"""
Document model for Docket.

This module defines the markup tree handed over by document converters,
the value types returned by the numbering and comparison operations, and
the editable workspace held by the service layer.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# A parsed hierarchical marker: "6.1.2" -> [6, 1, 2]
NumberPath = list[int]


def parse_number_path(marker: str) -> NumberPath:
    """Parse a dotted decimal marker ("6.1.2") into a NumberPath."""
    return [int(part) for part in marker.split(".")]


def format_number_path(path: NumberPath) -> str:
    """Render a NumberPath as dotted decimals ([6, 1, 2] -> "6.1.2")."""
    return ".".join(str(n) for n in path)


class MarkupKind(Enum):
    """Element kinds a markup tree is built from."""

    PARAGRAPH = "paragraph"
    ORDERED_LIST = "ordered_list"
    UNORDERED_LIST = "unordered_list"
    LIST_ITEM = "list_item"
    CONTAINER = "container"
    TEXT = "text"


_LIST_KINDS = (MarkupKind.ORDERED_LIST, MarkupKind.UNORDERED_LIST)


@dataclass
class MarkupNode:
    """
    One element of a converted document.

    Parents own their children; traversal is strictly top-down so no
    back-references are kept. ``start`` is only read on ordered lists and
    ``value`` only on list items.
    """

    kind: MarkupKind
    text: str = ""
    children: list[MarkupNode] = field(default_factory=list)
    start: int | None = None
    value: int | None = None

    @property
    def is_list(self) -> bool:
        return self.kind in _LIST_KINDS

    def list_items(self) -> Iterator[MarkupNode]:
        """Yield the direct list-item children of this node."""
        for child in self.children:
            if child.kind is MarkupKind.LIST_ITEM:
                yield child

    def text_content(self, exclude_lists: bool = False) -> str:
        """
        Concatenate the text of every TEXT descendant in document order.

        Args:
            exclude_lists: Skip nested ordered/unordered list subtrees. The
                node itself is never skipped, even when it is a list.

        Returns:
            Raw (un-normalized) text.
        """
        if self.kind is MarkupKind.TEXT:
            return self.text

        parts: list[str] = []
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            if node.kind is MarkupKind.TEXT:
                parts.append(node.text)
                continue
            if exclude_lists and node.is_list:
                continue
            stack.extend(reversed(node.children))
        return "".join(parts)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    @classmethod
    def text_node(cls, text: str) -> MarkupNode:
        return cls(kind=MarkupKind.TEXT, text=text)

    @classmethod
    def paragraph(cls, text: str) -> MarkupNode:
        return cls(kind=MarkupKind.PARAGRAPH, children=[cls.text_node(text)])

    @classmethod
    def container(cls, *children: MarkupNode) -> MarkupNode:
        return cls(kind=MarkupKind.CONTAINER, children=list(children))

    @classmethod
    def ordered(cls, *items: MarkupNode, start: int | None = None) -> MarkupNode:
        return cls(kind=MarkupKind.ORDERED_LIST, children=list(items), start=start)

    @classmethod
    def unordered(cls, *items: MarkupNode) -> MarkupNode:
        return cls(kind=MarkupKind.UNORDERED_LIST, children=list(items))

    @classmethod
    def item(
        cls,
        text: str = "",
        *sublists: MarkupNode,
        value: int | None = None,
    ) -> MarkupNode:
        """Build a list item holding ``text`` followed by nested lists."""
        children = [cls.text_node(text)] if text else []
        children.extend(sublists)
        return cls(kind=MarkupKind.LIST_ITEM, children=children, value=value)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.kind is MarkupKind.TEXT:
            data["text"] = self.text
        else:
            data["children"] = [child.to_dict() for child in self.children]
        if self.start is not None:
            data["start"] = self.start
        if self.value is not None:
            data["value"] = self.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MarkupNode:
        return cls(
            kind=MarkupKind(data["kind"]),
            text=data.get("text", ""),
            children=[cls.from_dict(c) for c in data.get("children", [])],
            start=data.get("start"),
            value=data.get("value"),
        )


@dataclass
class NumberingIssue:
    """A paragraph whose flat number diverges from the running sequence."""

    index: int
    found: int
    expected: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "found": self.found,
            "expected": self.expected,
            "text": self.text,
        }


@dataclass
class CompareResult:
    """
    Set difference between a reference and a target paragraph sequence.

    Attributes:
        missing_in_target: Reference paragraphs absent from the target,
            in reference order.
        extra_in_target: Target paragraphs absent from the reference,
            in target order.
    """

    missing_in_target: list[str] = field(default_factory=list)
    extra_in_target: list[str] = field(default_factory=list)

    @property
    def is_identical(self) -> bool:
        return not self.missing_in_target and not self.extra_in_target

    def to_dict(self) -> dict[str, Any]:
        return {
            "missing_in_target": self.missing_in_target,
            "extra_in_target": self.extra_in_target,
            "missing_count": len(self.missing_in_target),
            "extra_count": len(self.extra_in_target),
            "identical": self.is_identical,
        }


@dataclass
class ParagraphSearchResult:
    """Location of a paragraph found by its item number."""

    index: int = -1
    paragraph: str = ""

    @property
    def found(self) -> bool:
        return self.index >= 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "paragraph": self.paragraph,
            "found": self.found,
        }


@dataclass
class ParsedDocument:
    """Paragraphs read from one source document."""

    source_name: str
    paragraphs: list[str]
    markup: MarkupNode | None = None
    loader_used: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_name": self.source_name,
            "paragraph_count": len(self.paragraphs),
            "paragraphs": self.paragraphs,
            "loader_used": self.loader_used,
        }


@dataclass
class Workspace:
    """
    The primary document being edited plus an optional reference.

    ``paragraphs`` holds the sequence as loaded. ``normalized`` is the
    working copy and stays empty until a normalization, edit or renumbering
    has been applied; until then the loaded paragraphs are displayed.
    """

    name: str = ""
    paragraphs: list[str] = field(default_factory=list)
    normalized: list[str] = field(default_factory=list)
    reference: list[str] = field(default_factory=list)
    reference_name: str = ""

    @property
    def has_document(self) -> bool:
        return bool(self.paragraphs or self.normalized)

    @property
    def display_paragraphs(self) -> list[str]:
        return self.normalized if self.normalized else self.paragraphs

    def load_primary(self, document: ParsedDocument) -> None:
        self.name = document.source_name
        self.paragraphs = list(document.paragraphs)
        self.normalized = []

    def load_reference(self, document: ParsedDocument) -> None:
        self.reference_name = document.source_name
        self.reference = list(document.paragraphs)

    def replace_paragraph(self, index: int, text: str) -> list[str]:
        """
        Replace the paragraph at a 0-based index in the working copy.

        The index is not bounds-checked here; callers validate it against
        ``display_paragraphs`` first.

        Returns:
            The new working copy.
        """
        updated = list(self.display_paragraphs)
        updated[index] = text.strip()
        self.normalized = updated
        return updated

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "paragraph_count": len(self.display_paragraphs),
            "paragraphs": self.display_paragraphs,
            "is_modified": bool(self.normalized),
            "reference_name": self.reference_name,
            "reference_count": len(self.reference),
        }
