"""
Utilities for reading XML documentation comments.

Turns the text of a '///' comment block (markers already stripped) into a
structured form. Documented parameters are always returned as a list, no
matter how many <param> elements the block declares.
"""

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import List, Optional

DOC_COMMENT_MARKER = '///'

PARAM_NAME_PATTERN = re.compile(r'<param\s+name\s*=\s*"([^"]*)"')
INHERITDOC_PATTERN = re.compile(r'<inheritdoc\b', re.IGNORECASE)
RETURNS_PATTERN = re.compile(r'<returns\b')

# Prose characters that are not markup: bare ampersands and a '<' that opens no tag
BARE_AMPERSAND_PATTERN = re.compile(r'&(?!#?\w+;)')
BARE_LESS_THAN_PATTERN = re.compile(r'<(?![A-Za-z_/!?])')


class XmlDocumentationError(ValueError):
    """Raised when a documentation comment block is not well-formed XML."""
    pass


@dataclass
class DocParam:
    """A <param> element of a documentation comment."""
    name: str
    description: str = ""


@dataclass
class DocComment:
    """Structured content of a documentation comment block."""
    summary: Optional[str] = None
    params: List[DocParam] = field(default_factory=list)
    returns: Optional[str] = None
    inheritdoc: bool = False


def is_doc_comment_line(line: str) -> bool:
    """Check whether a source line is part of a '///' documentation block."""
    return line.strip().startswith(DOC_COMMENT_MARKER)


def strip_doc_comment_marker(line: str) -> str:
    """Remove surrounding whitespace and the first '///' marker from a line."""
    return line.strip().replace(DOC_COMMENT_MARKER, '', 1)


def _element_text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None:
        return None
    return ''.join(element.itertext()).strip()


def _escape_prose(xml_documentation: str) -> str:
    """Escape '&' and '<' characters written as plain text in documentation prose."""
    escaped = BARE_AMPERSAND_PATTERN.sub('&amp;', xml_documentation)
    return BARE_LESS_THAN_PATTERN.sub('&lt;', escaped)


def parse_doc_comment(xml_documentation: str) -> DocComment:
    """
    Parse the XML of a documentation comment block.

    The block holds several top-level elements, so it is wrapped into a
    synthetic root before parsing. Ampersands and '<' characters that are
    plain prose (e.g. 'A & B', 'Qty < 10') are escaped first.

    Args:
        xml_documentation: Concatenated comment lines without '///' markers

    Returns:
        DocComment with zero or more documented parameters; <param> elements
        without a name are ignored

    Raises:
        XmlDocumentationError: If the block is not well-formed XML
    """
    try:
        root = ET.fromstring(f'<doc>{_escape_prose(xml_documentation)}</doc>')
    except ET.ParseError as e:
        raise XmlDocumentationError(f"Malformed XML documentation: {e}") from e

    params = [
        DocParam(name=param.get('name'), description=_element_text(param) or '')
        for param in root.iter('param')
        if param.get('name')
    ]

    return DocComment(
        summary=_element_text(root.find('summary')),
        params=params,
        returns=_element_text(root.find('returns')),
        inheritdoc=root.find('inheritdoc') is not None
    )


def documented_parameter_names(xml_documentation: str) -> List[str]:
    """
    Get the parameter names documented in a comment block without parsing XML.

    Used while extracting signatures, where a half-typed comment must not
    stop the extraction.
    """
    return PARAM_NAME_PATTERN.findall(xml_documentation)


def has_inheritdoc(xml_documentation: str) -> bool:
    """Check for an <inheritdoc/> element in a comment block."""
    return INHERITDOC_PATTERN.search(xml_documentation) is not None


def has_returns(xml_documentation: str) -> bool:
    """Check for a <returns> element in a comment block."""
    return RETURNS_PATTERN.search(xml_documentation) is not None
