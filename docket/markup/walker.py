"""
Markup walker.

Flattens a converted markup tree into the ordered sequence of logical
paragraphs a reader sees. Ordered lists are rendered with literal dotted
numbering ("6.1.2.1 Text") synthesized from their nesting, so that the
numbering survives once the list structure is gone.
"""

from __future__ import annotations

import logging

from docket.cleaning.normalizer import normalize_text
from docket.core.document import (
    MarkupKind,
    MarkupNode,
    NumberPath,
    format_number_path,
)

logger = logging.getLogger(__name__)


def _valid_number(value: int | None) -> int | None:
    """Return ``value`` if usable as a list number, else None."""
    if value is None or value < 1:
        return None
    return value


class ParagraphWalker:
    """
    Walk a markup tree and emit paragraphs in document order.

    Paragraph blocks are emitted as-is, unordered list items as plain
    paragraphs, and ordered list items prefixed with their synthesized
    number path. Any other element is treated as a transparent wrapper.

    The walker holds no state between calls; one instance can be reused.
    """

    def walk(self, root: MarkupNode | None) -> list[str]:
        """
        Extract the paragraph sequence of a markup tree.

        Args:
            root: Root element of the converted document. ``None`` yields
                an empty sequence.

        Returns:
            Normalized, non-empty paragraphs in document order.
        """
        paragraphs: list[str] = []
        if root is not None:
            self._walk_children(root, paragraphs)
        logger.debug("Extracted %d paragraphs from markup", len(paragraphs))
        return paragraphs

    def _walk_children(self, node: MarkupNode, out: list[str]) -> None:
        for child in node.children:
            kind = child.kind
            if kind is MarkupKind.PARAGRAPH:
                self._emit(child.text_content(), out)
            elif kind is MarkupKind.ORDERED_LIST:
                self._number_list(child, [], out)
            elif kind is MarkupKind.UNORDERED_LIST:
                self._bullet_list(child, out)
            elif kind is not MarkupKind.TEXT:
                self._walk_children(child, out)

    def _bullet_list(self, node: MarkupNode, out: list[str]) -> None:
        """Emit unordered items as plain paragraphs, then their sublists."""
        for item in node.list_items():
            self._emit(item.text_content(exclude_lists=True), out)
            for sub in item.children:
                if sub.kind is MarkupKind.ORDERED_LIST:
                    self._number_list(sub, [], out)
            for sub in item.children:
                if sub.kind is MarkupKind.UNORDERED_LIST:
                    self._bullet_list(sub, out)

    def _number_list(
        self,
        node: MarkupNode,
        prefix: NumberPath,
        out: list[str],
    ) -> None:
        """
        Emit an ordered list with synthesized numbering.

        Args:
            node: The ordered-list element.
            prefix: Number path of the enclosing item (empty at top level).
            out: Paragraph accumulator.
        """
        start = _valid_number(node.start) or 1
        counter = start - 1

        for item in node.list_items():
            number = _valid_number(item.value) or counter + 1
            counter = number
            path = [*prefix, number]

            text = normalize_text(item.text_content(exclude_lists=True))
            if text:
                out.append(f"{format_number_path(path)} {text}")

            for sub in item.children:
                if sub.kind is MarkupKind.ORDERED_LIST:
                    self._number_list(sub, path, out)

            # Bullets directly under a numbered item stay unnumbered, one level only
            for sub in item.children:
                if sub.kind is MarkupKind.UNORDERED_LIST:
                    for bullet in sub.list_items():
                        self._emit(bullet.text_content(), out)

    @staticmethod
    def _emit(raw: str, out: list[str]) -> None:
        text = normalize_text(raw)
        if text:
            out.append(text)


def extract_paragraphs(root: MarkupNode | None) -> list[str]:
    """Flatten a markup tree into its paragraph sequence."""
    return ParagraphWalker().walk(root)
