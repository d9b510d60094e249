"""Paragraph cleaning and normalization.

Whitespace normalization for paragraph sequences: every whitespace run
becomes a single space, outer whitespace is trimmed and blank paragraphs
are dropped without reordering the rest.
"""

from docket.cleaning.normalizer import (
    CleaningResult,
    ParagraphNormalizer,
    normalize_paragraphs,
    normalize_text,
)

__all__ = [
    "CleaningResult",
    "ParagraphNormalizer",
    "normalize_paragraphs",
    "normalize_text",
]
