"""
Signature extraction for AL source files.

Builds the object model used by the documentation check: the object
declaration, its procedures with their parameters and return values, and
the documentation state of each of them. Statements and variable sections
are never parsed.
"""

import re
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .documents import TextDocument
from .models import (
    DocumentationExistType,
    ObjectExtensionType,
    ObjectType,
    Parameter,
    Procedure,
    ProcedureReturn,
    SourceObject,
    XmlDocumentation,
)
from ..utils.logger_setup import get_logger
from ..utils.text_utils import line_range, split_to_lines
from ..utils.xml_doc_parser import (
    documented_parameter_names,
    has_inheritdoc,
    has_returns,
    is_doc_comment_line,
    strip_doc_comment_marker,
)

logger = get_logger(__name__)


class SignaturePatterns:
    """Patterns for AL declarations."""

    OBJECT_DECLARATION = re.compile(
        r'^\s*(?P<kind>' + '|'.join(object_type.value for object_type in ObjectType) + r')'
        r'\s+(?:(?P<id>\d+)\s+)?(?P<name>"[^"]+"|[\w.]+)'
        r'(?:\s+(?P<relation>extends|implements)\s+(?P<target>[^{]+?))?\s*(?:\{.*)?$',
        re.IGNORECASE
    )
    PROCEDURE_START = re.compile(
        r'^\s*(?:(?P<access>local|internal|protected)\s+)?procedure\s+',
        re.IGNORECASE
    )
    PROCEDURE_SIGNATURE = re.compile(
        r'procedure\s+(?P<name>"[^"]+"|\w+)\s*\((?P<parameters>.*)\)(?P<tail>.*)$',
        re.IGNORECASE | re.DOTALL
    )
    PARAMETER = re.compile(
        r'^\s*(?P<var>var\s+)?(?P<name>"[^"]+"|\w+)\s*:\s*(?P<type>.+?)\s*$',
        re.IGNORECASE | re.DOTALL
    )
    TYPE_AND_SUBTYPE = re.compile(r'^(?P<type>\w+(?:\[[^\]]*\])?)\s*(?P<subtype>.*)$', re.DOTALL)
    TEMPORARY_SUFFIX = re.compile(r'\s+temporary$', re.IGNORECASE)
    NAMED_RETURN = re.compile(r'^(?P<name>"[^"]+"|\w+)\s*:\s*(?P<type>.+)$', re.DOTALL)
    ATTRIBUTE = re.compile(r'^\s*\[.*\]\s*$')
    LINE_COMMENT = re.compile(r'\s*//.*$')


def _unquote(identifier: str) -> str:
    identifier = identifier.strip()
    if len(identifier) >= 2 and identifier.startswith('"') and identifier.endswith('"'):
        return identifier[1:-1]
    return identifier


class ObjectCache:
    """Thread-safe cache of extracted objects, keyed by type and name."""

    def __init__(self):
        self._objects: Dict[Tuple[ObjectType, str], SourceObject] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _key(object_type: ObjectType, name: str) -> Tuple[ObjectType, str]:
        # AL identifiers are case-insensitive
        return object_type, _unquote(name).lower()

    def add(self, source_object: SourceObject):
        with self._lock:
            self._objects[self._key(source_object.type, source_object.name)] = source_object

    def get(self, object_type: ObjectType, name: str) -> Optional[SourceObject]:
        with self._lock:
            return self._objects.get(self._key(object_type, name))

    def clear(self):
        with self._lock:
            self._objects.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)


class SourceExtractor:
    """Extracts AL objects from documents and remembers them for later lookups."""

    def __init__(self, cache: Optional[ObjectCache] = None):
        """
        Initialize SourceExtractor.

        Args:
            cache: Cache shared by every extraction. A new one is created if None.
        """
        self.cache = cache if cache is not None else ObjectCache()

    def extract_object(self, document: TextDocument) -> Optional[SourceObject]:
        """
        Extract the AL object declared in a document.

        Args:
            document: Document providing the source text and its path

        Returns:
            SourceObject, or None if the text declares no recognizable object
        """
        text = document.get_text()
        lines = split_to_lines(text)

        source_object = self._extract_declaration(lines)
        if source_object is None:
            logger.debug(f"No AL object declaration found in {document.path}")
            return None

        path = Path(document.path)
        source_object.path = str(path.parent)
        source_object.file_name = path.name
        source_object.procedures = self._extract_procedures(lines)

        self.cache.add(source_object)
        return source_object

    def extract_object_from_cache(self, object_type: ObjectType, name: str) -> Optional[SourceObject]:
        """Look up a previously extracted object."""
        return self.cache.get(object_type, name)

    def _extract_declaration(self, lines: List[str]) -> Optional[SourceObject]:
        for line in lines:
            match = SignaturePatterns.OBJECT_DECLARATION.match(SignaturePatterns.LINE_COMMENT.sub('', line))
            if not match:
                continue

            source_object = SourceObject(
                type=ObjectType.from_keyword(match.group('kind')),
                name=_unquote(match.group('name')),
                id=int(match.group('id')) if match.group('id') else None
            )

            relation = (match.group('relation') or '').lower()
            if relation:
                # Only the first implemented interface is used for inheritance
                target = match.group('target').split(',')[0]
                source_object.extension_type = (
                    ObjectExtensionType.EXTEND if relation == 'extends' else ObjectExtensionType.IMPLEMENT
                )
                source_object.extension_object = _unquote(target)

            return source_object

        return None

    def _extract_procedures(self, lines: List[str]) -> List[Procedure]:
        procedures = []

        for line_no, line in enumerate(lines):
            start = SignaturePatterns.PROCEDURE_START.match(line)
            if not start:
                continue

            declaration = self._read_declaration(lines, line_no)
            procedure = self._parse_procedure(declaration, line_no, start.group('access'))
            if procedure is None:
                logger.debug(f"Could not parse procedure declaration at line {line_no}: {line.strip()}")
                continue

            procedure.range = line_range(line, line_no)
            self._apply_documentation(procedure, self._documentation_above(lines, line_no))
            procedures.append(procedure)

        return procedures

    def _read_declaration(self, lines: List[str], line_no: int) -> str:
        """Join the lines of a declaration until its parameter list is closed."""
        parts = []
        depth = 0
        opened = False

        for line in lines[line_no:]:
            code = SignaturePatterns.LINE_COMMENT.sub('', line)
            parts.append(code.strip())
            depth += code.count('(') - code.count(')')
            opened = opened or '(' in code
            if opened and depth <= 0:
                break

        return ' '.join(parts)

    def _parse_procedure(self, declaration: str, line_no: int, access: Optional[str]) -> Optional[Procedure]:
        match = SignaturePatterns.PROCEDURE_SIGNATURE.search(declaration)
        if not match:
            return None

        parameters = []
        for raw_parameter in match.group('parameters').split(';'):
            if not raw_parameter.strip():
                continue
            parameter = self._parse_parameter(raw_parameter)
            if parameter is not None:
                parameters.append(parameter)

        return Procedure(
            name=_unquote(match.group('name')),
            line_no=line_no,
            range=None,
            parameters=parameters,
            return_value=self._parse_return(match.group('tail')),
            access_modifier=access.lower() if access else None
        )

    def _parse_parameter(self, raw_parameter: str) -> Optional[Parameter]:
        match = SignaturePatterns.PARAMETER.match(raw_parameter)
        if not match:
            return None

        type_text = match.group('type')
        temporary = SignaturePatterns.TEMPORARY_SUFFIX.search(type_text) is not None
        if temporary:
            type_text = SignaturePatterns.TEMPORARY_SUFFIX.sub('', type_text)

        type_match = SignaturePatterns.TYPE_AND_SUBTYPE.match(type_text.strip())
        if type_match:
            parameter_type = type_match.group('type')
            subtype = type_match.group('subtype').strip() or None
        else:
            parameter_type, subtype = type_text.strip(), None

        return Parameter(
            name=_unquote(match.group('name')),
            type=parameter_type,
            subtype=subtype,
            temporary=temporary,
            call_by_reference=match.group('var') is not None
        )

    def _parse_return(self, tail: str) -> Optional[ProcedureReturn]:
        tail = tail.strip().rstrip(';').strip()
        if not tail:
            return None

        if tail.startswith(':'):
            return_type = tail[1:].strip()
            return ProcedureReturn(type=return_type) if return_type else None

        match = SignaturePatterns.NAMED_RETURN.match(tail)
        if not match:
            return None
        return ProcedureReturn(type=match.group('type').strip(), name=_unquote(match.group('name')))

    def _documentation_above(self, lines: List[str], line_no: int) -> str:
        """Collect the '///' block above a declaration, skipping attributes."""
        doc_lines = []
        i = line_no - 1
        while i >= 0:
            line = lines[i]
            if is_doc_comment_line(line):
                doc_lines.append(strip_doc_comment_marker(line))
            elif not SignaturePatterns.ATTRIBUTE.match(line):
                break
            i -= 1

        return ''.join(reversed(doc_lines))

    def _apply_documentation(self, procedure: Procedure, documentation: str):
        if not documentation:
            return

        if has_inheritdoc(documentation):
            procedure.xml_documentation = XmlDocumentation(DocumentationExistType.INHERIT, documentation)
            for parameter in procedure.parameters:
                parameter.xml_documentation.exists = DocumentationExistType.INHERIT
            if procedure.return_value is not None:
                procedure.return_value.xml_documentation.exists = DocumentationExistType.INHERIT
            return

        procedure.xml_documentation = XmlDocumentation(DocumentationExistType.YES, documentation)

        documented = set(documented_parameter_names(documentation))
        for parameter in procedure.parameters:
            if parameter.name in documented:
                parameter.xml_documentation.exists = DocumentationExistType.YES
        if procedure.return_value is not None and has_returns(documentation):
            procedure.return_value.xml_documentation.exists = DocumentationExistType.YES
