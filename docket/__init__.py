"""
Docket - paragraph extraction, numbering repair and comparison.

Reads word-processor documents into flat paragraph sequences, checks and
repairs their numbering, and diffs two documents by paragraph content.
"""

from docket.cleaning import normalize_paragraphs
from docket.comparison import compare_paragraph_sets
from docket.core.document import (
    CompareResult,
    MarkupKind,
    MarkupNode,
    NumberingIssue,
    ParagraphSearchResult,
)
from docket.markup import extract_paragraphs
from docket.numbering import (
    check_numbering,
    find_paragraph_by_item_number,
    renumber_hierarchical,
)

__version__ = "0.1.0"

__all__ = [
    "CompareResult",
    "MarkupKind",
    "MarkupNode",
    "NumberingIssue",
    "ParagraphSearchResult",
    "check_numbering",
    "compare_paragraph_sets",
    "extract_paragraphs",
    "find_paragraph_by_item_number",
    "normalize_paragraphs",
    "renumber_hierarchical",
]
