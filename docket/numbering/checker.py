"""
Flat numbering check.

Scans a paragraph sequence for single-integer markers ("3. Text",
"3) Text") and reports every place where the number breaks the running
1, 2, 3, ... sequence.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from docket.core.document import NumberingIssue

# "12. Text" or "12) Text"; dotted markers like "1.2 Text" do not match.
# Numbers are ASCII digits, at most nine per level; longer runs pass through
_FLAT_NUMBER_RE = re.compile(r"^\s*([0-9]{1,9})[.)]\s+")


def check_numbering(paragraphs: Sequence[str]) -> list[NumberingIssue]:
    """Report deviations from a monotonically increasing flat numbering.

    After each reported issue the expected counter resynchronizes to the
    number actually found, so a single gap yields one issue rather than a
    cascade. Paragraphs without a flat marker are ignored.

    Args:
        paragraphs: Paragraph sequence in document order.

    Returns:
        Issues in document order (empty when the numbering is consistent).
    """
    issues: list[NumberingIssue] = []
    expected = 1

    for index, paragraph in enumerate(paragraphs):
        match = _FLAT_NUMBER_RE.match(paragraph)
        if match is None:
            continue
        found = int(match.group(1))
        if found == expected:
            expected += 1
            continue
        issues.append(
            NumberingIssue(index=index, found=found, expected=expected, text=paragraph)
        )
        expected = found + 1

    return issues
