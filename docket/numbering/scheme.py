"""
Numbering scheme detection.

Classifies the numbering style a paragraph sequence uses so callers can
tell whether the flat check, the hierarchical renumbering, or both apply.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

# Single integer marker: "1. Text", "1) Text"
_FLAT_RE = re.compile(r"^\s*[0-9]{1,9}[.)]\s+")
# Dotted marker with at least two levels: "1.1 Text", "6.1.2. Text"
_DOTTED_RE = re.compile(r"^\s*([0-9]{1,9}(?:\.[0-9]{1,9})+)[.)]?\s+")


def _number_depth(number_str: str) -> int:
    """Count the depth of a numbering string.

    Args:
        number_str: A numbering string like "1.2.3".

    Returns:
        Number of components (e.g., "1.2.3" -> 3).
    """
    return len(number_str.split("."))


@dataclass
class NumberingScheme:
    """Detected numbering scheme for a paragraph sequence.

    Attributes:
        scheme_type: One of "flat", "hierarchical", "mixed", "unnumbered".
        max_depth: Maximum nesting depth found in numbering.
        total_numbered: Count of paragraphs with a detected marker.
        flat_count: Paragraphs with a single-integer marker.
        hierarchical_count: Paragraphs with a dotted marker.
    """

    scheme_type: str
    max_depth: int = 0
    total_numbered: int = 0
    flat_count: int = 0
    hierarchical_count: int = 0

    @classmethod
    def detect(cls, paragraphs: Sequence[str]) -> NumberingScheme:
        """Detect the numbering scheme from a paragraph sequence.

        Args:
            paragraphs: Paragraph texts in document order.

        Returns:
            NumberingScheme describing the detected pattern.
        """
        if not paragraphs:
            return cls(scheme_type="unnumbered")

        flat_count = 0
        dotted_count = 0
        max_depth = 0

        for p in paragraphs:
            dotted = _DOTTED_RE.match(p)
            if dotted:
                dotted_count += 1
                max_depth = max(max_depth, _number_depth(dotted.group(1)))
            elif _FLAT_RE.match(p):
                flat_count += 1
                max_depth = max(max_depth, 1)

        total_numbered = flat_count + dotted_count

        if total_numbered == 0:
            return cls(scheme_type="unnumbered")

        ratio = total_numbered / len(paragraphs)
        if flat_count and dotted_count and ratio < 0.5:
            scheme_type = "mixed"
        elif dotted_count:
            scheme_type = "hierarchical"
        else:
            scheme_type = "flat"

        return cls(
            scheme_type=scheme_type,
            max_depth=max_depth,
            total_numbered=total_numbered,
            flat_count=flat_count,
            hierarchical_count=dotted_count,
        )

    def to_dict(self) -> dict[str, object]:
        """Serialize to dictionary.

        Returns:
            Dictionary with scheme details.
        """
        return {
            "scheme_type": self.scheme_type,
            "max_depth": self.max_depth,
            "total_numbered": self.total_numbered,
            "flat_count": self.flat_count,
            "hierarchical_count": self.hierarchical_count,
        }
