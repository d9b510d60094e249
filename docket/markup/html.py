"""
HTML to markup tree conversion.

Document converters hand over their output as HTML. This module reads that
HTML with BeautifulSoup and keeps only what paragraph extraction needs:
paragraph blocks, ordered and unordered lists with their numbering
attributes, list items, text, and transparent wrappers.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from docket.core.document import MarkupKind, MarkupNode

# Headings are read as plain paragraph blocks
_PARAGRAPH_TAGS = {"p", "h1", "h2", "h3", "h4", "h5", "h6"}

# Elements whose content never reaches the paragraph sequence
_NOISE_TAGS = {"script", "style", "noscript", "head", "template"}


def _int_attr(tag: Tag, name: str) -> int | None:
    """Read an integer attribute, or None when absent or not a number."""
    raw = tag.get(name)
    if raw is None or isinstance(raw, list):
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def _convert_children(tag: Tag) -> list[MarkupNode]:
    children: list[MarkupNode] = []
    for child in tag.children:
        if isinstance(child, NavigableString):
            # Comments, doctypes and CDATA are not document text
            if isinstance(child, PreformattedString):
                continue
            children.append(MarkupNode.text_node(str(child)))
        elif isinstance(child, Tag):
            node = _convert(child)
            if node is not None:
                children.append(node)
    return children


def _convert(tag: Tag) -> MarkupNode | None:
    name = (tag.name or "").lower()
    if name in _NOISE_TAGS:
        return None
    if name == "br":
        return MarkupNode.text_node(" ")

    if name in _PARAGRAPH_TAGS:
        kind = MarkupKind.PARAGRAPH
    elif name == "ol":
        kind = MarkupKind.ORDERED_LIST
    elif name == "ul":
        kind = MarkupKind.UNORDERED_LIST
    elif name == "li":
        kind = MarkupKind.LIST_ITEM
    else:
        kind = MarkupKind.CONTAINER

    return MarkupNode(
        kind=kind,
        children=_convert_children(tag),
        start=_int_attr(tag, "start") if kind is MarkupKind.ORDERED_LIST else None,
        value=_int_attr(tag, "value") if kind is MarkupKind.LIST_ITEM else None,
    )


def parse_html(html: str | None) -> MarkupNode:
    """
    Build a markup tree from an HTML document or fragment.

    Args:
        html: HTML source. ``None`` or an empty string yields an empty
            container.

    Returns:
        A CONTAINER node holding the converted top-level elements.
    """
    if not html:
        return MarkupNode.container()
    soup = BeautifulSoup(html, "html.parser")
    return MarkupNode(kind=MarkupKind.CONTAINER, children=_convert_children(soup))
