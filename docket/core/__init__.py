"""Core data models for Docket."""

from docket.core.document import (
    CompareResult,
    MarkupKind,
    MarkupNode,
    NumberingIssue,
    NumberPath,
    ParagraphSearchResult,
    ParsedDocument,
    Workspace,
    format_number_path,
    parse_number_path,
)

__all__ = [
    "CompareResult",
    "MarkupKind",
    "MarkupNode",
    "NumberingIssue",
    "NumberPath",
    "ParagraphSearchResult",
    "ParsedDocument",
    "Workspace",
    "format_number_path",
    "parse_number_path",
]
