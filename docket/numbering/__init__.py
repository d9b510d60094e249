"""
Numbering module - verifies and repairs paragraph numbering.

The flat checker reports breaks in "1.", "2.", "3." sequences; the
hierarchical renumberer rewrites dotted outlines ("6.1.2") into a
consistent sequence. The two recognize different marker styles on purpose.
"""

from docket.numbering.checker import check_numbering
from docket.numbering.renumber import next_number_path, renumber_hierarchical
from docket.numbering.scheme import NumberingScheme
from docket.numbering.search import find_paragraph_by_item_number

__all__ = [
    "NumberingScheme",
    "check_numbering",
    "find_paragraph_by_item_number",
    "next_number_path",
    "renumber_hierarchical",
]
