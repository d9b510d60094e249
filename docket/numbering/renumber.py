"""
Hierarchical renumbering.

Rewrites dotted numbering prefixes ("6.1.2 Text") so that consecutive
numbered paragraphs form a consistent outline. The depth of each marker is
taken from the text as printed: a paragraph printed at depth 3 stays at
depth 3, only the numbers change.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from docket.cleaning.normalizer import normalize_text
from docket.core.document import NumberPath, format_number_path, parse_number_path

logger = logging.getLogger(__name__)

# marker, optional trailing delimiter, whitespace, remaining text.
# Numbers are ASCII digits, at most nine per level; longer runs pass through
_HIERARCHICAL_RE = re.compile(
    r"^\s*([0-9]{1,9}(?:\.[0-9]{1,9})*)([.)])?\s+(.*)$", re.DOTALL
)


def next_number_path(current: NumberPath, found: NumberPath) -> NumberPath:
    """
    Compute the number the next marker should carry.

    Args:
        current: Path assigned to the previous numbered paragraph, or an
            empty list before the first one.
        found: Path parsed from the paragraph being renumbered.

    Returns:
        The corrected path. It always has the same depth as ``found``.
    """
    if not current:
        # First marker fixes the starting point, whatever it is
        return list(found)

    depth_found = len(found)
    depth_current = len(current)

    if depth_found == depth_current:
        return [*current[:-1], current[-1] + 1]
    if depth_found == depth_current + 1:
        return [*current, 1]
    if depth_found < depth_current:
        return [*current[: depth_found - 1], current[depth_found - 1] + 1]
    # Two or more levels deeper: fill the skipped levels with 1
    return [*current, *([1] * (depth_found - depth_current))]


def renumber_hierarchical(paragraphs: Sequence[str]) -> list[str]:
    """Rewrite dotted numbering prefixes into a consistent outline.

    Paragraphs without a numeric prefix are returned unchanged and do not
    affect the numbering of the others. The trailing delimiter of each
    marker ("." or ")") is kept.

    Args:
        paragraphs: Paragraph sequence in document order.

    Returns:
        A new sequence of the same length and order.
    """
    result: list[str] = []
    current: NumberPath = []

    for index, paragraph in enumerate(paragraphs):
        match = _HIERARCHICAL_RE.match(paragraph)
        if match is None:
            result.append(paragraph)
            continue

        marker, delim, rest = match.group(1), match.group(2) or "", match.group(3)
        expected = next_number_path(current, parse_number_path(marker))
        new_marker = format_number_path(expected)
        if new_marker != marker:
            logger.debug(
                "Paragraph %d renumbered %s -> %s", index, marker, new_marker
            )

        result.append(f"{new_marker}{delim} {normalize_text(rest)}")
        current = expected

    return result
