"""
Comparison module - set-based diffing of two documents.

Reports which paragraphs of a reference document are missing from a target
and which target paragraphs the reference does not have.
"""

from docket.comparison.comparer import comparison_key, compare_paragraph_sets

__all__ = [
    "comparison_key",
    "compare_paragraph_sets",
]
