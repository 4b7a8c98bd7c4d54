"""
Source text and line range utilities.

Line Number Convention:
    Lines and characters are 0-indexed everywhere in this package, matching
    the positions editors use for diagnostics. Convert with to_external()
    only when showing a line to a user.
"""

import re
from dataclasses import dataclass
from typing import List

LINE_SPLIT_PATTERN = re.compile(r'\r\n|\r|\n')

# Snippet tab stop with default text, e.g. ${1:Customer No.}
SNIPPET_PLACEHOLDER_PATTERN = re.compile(r'\$\{(?:\d+|__idx__):([^}]*)\}')


@dataclass(frozen=True)
class Position:
    """A 0-indexed line/character position in a source file."""
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """A span between two positions in a source file."""
    start: Position
    end: Position

    @classmethod
    def from_coordinates(cls, start_line: int, start_character: int,
                         end_line: int, end_character: int) -> 'Range':
        return cls(Position(start_line, start_character), Position(end_line, end_character))


def split_to_lines(text: str) -> List[str]:
    """
    Split AL source code into lines.

    Handles CRLF, LF and CR line endings.

    Args:
        text: Source code

    Returns:
        List of lines without line terminators
    """
    return LINE_SPLIT_PATTERN.split(text)


def line_range(line: str, line_index: int) -> Range:
    """Get the range of a line's content, from its first non-whitespace character to its end."""
    indent = len(line) - len(line.lstrip())
    return Range.from_coordinates(line_index, indent, line_index, len(line))


def range_of(text: str, line_index: int) -> Range:
    """
    Get the range covering the content of a given line.

    The range starts at the first non-whitespace character and ends at the
    end of the line.

    Args:
        text: Source code
        line_index: 0-indexed line

    Returns:
        Range of the line content

    Raises:
        IndexError: If line_index is outside the text
    """
    lines = split_to_lines(text)
    if not 0 <= line_index < len(lines):
        raise IndexError(f"Line {line_index} is outside of text with {len(lines)} lines")

    return line_range(lines[line_index], line_index)


def to_external(internal: int) -> int:
    """Convert a 0-indexed line number to the 1-indexed number shown to users."""
    return internal + 1


def resolve_placeholders(snippet: str) -> str:
    """
    Replace snippet tab stops by their default text.

    Example:
        >>> resolve_placeholders('/// <returns>${3:Return value of type Boolean.}</returns>')
        '/// <returns>Return value of type Boolean.</returns>'
    """
    return SNIPPET_PLACEHOLDER_PATTERN.sub(lambda match: match.group(1), snippet)
