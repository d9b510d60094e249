"""
Paragraph set comparison.

Compares two documents by which paragraphs they contain, not by where.
Two paragraphs are the same when they match after whitespace collapsing,
trimming and case folding; duplicates and reordering are not differences.
"""

from __future__ import annotations

from collections.abc import Sequence

from docket.cleaning.normalizer import normalize_text
from docket.core.document import CompareResult


def comparison_key(paragraph: str) -> str:
    """Reduce a paragraph to its comparison form."""
    return normalize_text(paragraph).casefold()


def compare_paragraph_sets(
    reference: Sequence[str],
    target: Sequence[str],
) -> CompareResult:
    """
    Compute the set difference between two paragraph sequences.

    Args:
        reference: Paragraphs of the reference document.
        target: Paragraphs of the document checked against it.

    Returns:
        CompareResult listing reference paragraphs absent from the target
        and target paragraphs absent from the reference, each in its own
        source order and original casing.
    """
    reference_keys = [comparison_key(p) for p in reference]
    target_keys = [comparison_key(p) for p in target]
    in_reference = set(reference_keys)
    in_target = set(target_keys)

    return CompareResult(
        missing_in_target=[
            p for p, key in zip(reference, reference_keys) if key not in in_target
        ],
        extra_in_target=[
            p for p, key in zip(target, target_keys) if key not in in_reference
        ],
    )
