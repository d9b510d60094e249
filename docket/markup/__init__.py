"""
Markup module - turns converted documents into paragraph sequences.

The HTML builder reads converter output into a MarkupNode tree; the walker
flattens that tree into paragraphs, synthesizing literal numbering for
ordered lists.
"""

from docket.markup.html import parse_html
from docket.markup.walker import ParagraphWalker, extract_paragraphs

__all__ = [
    "ParagraphWalker",
    "extract_paragraphs",
    "parse_html",
]
