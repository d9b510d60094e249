"""Paragraph normalizer for extracted text.

Collapses whitespace runs, trims, and drops paragraphs that end up empty.
Optionally maps typographic characters (smart quotes, dashes) to ASCII
before collapsing. Order is always preserved.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

# Any run of whitespace, including newlines, tabs and non-breaking spaces
_WHITESPACE_RE = re.compile(r"\s+")

_SMART_QUOTES = {
    "\u2018": "'",  # left single
    "\u2019": "'",  # right single
    "\u201c": '"',  # left double
    "\u201d": '"',  # right double
    "\u2013": "-",  # en dash
    "\u2014": "--",  # em dash
    "\u2026": "...",  # ellipsis
}


def normalize_text(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_paragraphs(paragraphs: Iterable[str]) -> list[str]:
    """Normalize each paragraph and discard the ones that become empty.

    Args:
        paragraphs: Raw paragraph strings in document order.

    Returns:
        Normalized, non-empty paragraphs in the same order.
    """
    result = []
    for paragraph in paragraphs:
        text = normalize_text(paragraph)
        if text:
            result.append(text)
    return result


@dataclass
class CleaningResult:
    """Result of running the normalizer over a paragraph sequence.

    Attributes:
        paragraphs: The normalized sequence.
        total_input: Number of paragraphs received.
        dropped_empty: Paragraphs discarded because they were blank.
        changed_count: Kept paragraphs whose text was modified.
        operations_applied: Count of each operation that changed text.
    """

    paragraphs: list[str]
    total_input: int
    dropped_empty: int
    changed_count: int
    operations_applied: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "paragraphs": self.paragraphs,
            "total_input": self.total_input,
            "dropped_empty": self.dropped_empty,
            "changed_count": self.changed_count,
            "operations_applied": self.operations_applied,
        }


class ParagraphNormalizer:
    """Normalizes paragraph sequences and reports what changed.

    Args:
        replace_special_chars: Map smart quotes, dashes and ellipses to
            their ASCII forms before collapsing whitespace.

    Example::

        normalizer = ParagraphNormalizer()
        result = normalizer.normalize(["  1.  Scope ", "", "2. Terms"])
        result.paragraphs  # ["1. Scope", "2. Terms"]
    """

    def __init__(self, replace_special_chars: bool = False) -> None:
        self._replace_special_chars = replace_special_chars

    def normalize(self, paragraphs: Iterable[str]) -> CleaningResult:
        """Run the cleaning operations over a paragraph sequence.

        Args:
            paragraphs: Raw paragraphs in document order.

        Returns:
            CleaningResult holding the new sequence and counts.
        """
        cleaned: list[str] = []
        total = 0
        dropped = 0
        changed = 0
        ops_counts: dict[str, int] = {}

        for paragraph in paragraphs:
            total += 1
            applied: list[str] = []
            text = paragraph
            if self._replace_special_chars:
                text = self._normalize_chars(text, applied)
            text = self._normalize_whitespace(text, applied)

            if not text:
                dropped += 1
                continue

            cleaned.append(text)
            if text != paragraph:
                changed += 1
                for op in applied:
                    ops_counts[op] = ops_counts.get(op, 0) + 1

        return CleaningResult(
            paragraphs=cleaned,
            total_input=total,
            dropped_empty=dropped,
            changed_count=changed,
            operations_applied=ops_counts,
        )

    @staticmethod
    def _normalize_chars(text: str, applied: list[str]) -> str:
        """Replace smart quotes and other typographic characters.

        Args:
            text: Input text.
            applied: List to append operation name if changed.

        Returns:
            Cleaned text.
        """
        original = text
        for char, replacement in _SMART_QUOTES.items():
            text = text.replace(char, replacement)
        if text != original:
            applied.append("normalize_chars")
        return text

    @staticmethod
    def _normalize_whitespace(text: str, applied: list[str]) -> str:
        """Collapse whitespace runs and strip outer whitespace.

        Args:
            text: Input text.
            applied: List to append operation name if changed.

        Returns:
            Cleaned text.
        """
        result = normalize_text(text)
        if result != text:
            applied.append("normalize_whitespace")
        return result
