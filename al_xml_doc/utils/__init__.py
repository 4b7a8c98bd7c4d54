"""Utility modules."""

from .logger_setup import get_logger, LoggerManager
from .text_utils import Position, Range, line_range, range_of, resolve_placeholders, split_to_lines
from .xml_doc_parser import DocComment, DocParam, XmlDocumentationError, parse_doc_comment

__all__ = [
    # Logging utilities
    "get_logger",
    "LoggerManager",
    # Text utilities
    "Position",
    "Range",
    "line_range",
    "range_of",
    "resolve_placeholders",
    "split_to_lines",
    # XML documentation
    "DocComment",
    "DocParam",
    "XmlDocumentationError",
    "parse_doc_comment",
]
