"""Lookup of paragraphs by their printed item number."""

from __future__ import annotations

from collections.abc import Sequence

from docket.core.document import ParagraphSearchResult

# Characters that may follow an item number at the start of a paragraph
_NUMBER_TERMINATORS = (" ", ".", ")")


def find_paragraph_by_item_number(
    paragraphs: Sequence[str],
    item_number: str,
) -> ParagraphSearchResult:
    """Find the first paragraph that starts with ``item_number``.

    A paragraph matches when it equals the number or starts with it
    followed by a space, "." or ")". Note that "6.1" therefore also
    matches "6.1.2 Text" when no "6.1" paragraph comes earlier.

    Args:
        paragraphs: Paragraph sequence to scan.
        item_number: Printed number such as "6.1.2"; surrounding
            whitespace is ignored.

    Returns:
        The 0-based index and text of the match, or index -1 and an empty
        paragraph when nothing matches.
    """
    target = item_number.strip()
    if not target:
        return ParagraphSearchResult()

    prefixes = tuple(target + t for t in _NUMBER_TERMINATORS)
    for index, paragraph in enumerate(paragraphs):
        if paragraph == target or paragraph.startswith(prefixes):
            return ParagraphSearchResult(index=index, paragraph=paragraph)
    return ParagraphSearchResult()
