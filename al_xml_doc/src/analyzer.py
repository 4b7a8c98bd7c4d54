"""
Procedure documentation compliance check.

Correlates '///' XML documentation blocks with procedure signatures and
reports missing documentation (summary, parameters, return value) and
documentation of parameters that do not exist. Procedures marked with
<inheritdoc/> are checked against the matching procedure of the interface
their object implements.

Every call works on its own AnalysisContext, so one analyzer instance can
check several files concurrently once the object cache is populated.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import DocumentationCheckConfiguration
from .constants import DIAGNOSTIC_SOURCE, MISSING_DOCUMENTATION_CODES, DiagnosticCode
from .documents import FileDocument, TextDocument
from .extractor import SourceExtractor
from .models import (
    Diagnostic,
    DocumentationExistType,
    ObjectType,
    Procedure,
    Severity,
    SourceObject,
)
from .publisher import DiagnosticPublisher
from ..utils.logger_setup import get_logger
from ..utils.text_utils import Range, line_range, split_to_lines
from ..utils.xml_doc_parser import is_doc_comment_line, parse_doc_comment, strip_doc_comment_marker

logger = get_logger(__name__)


@dataclass
class Finding:
    """A documentation element found missing or unnecessary."""
    code: DiagnosticCode
    element: str = ""


@dataclass
class DocumentationSubject:
    """
    Procedure whose documentation state is checked for another procedure.

    Attributes:
        procedure: Procedure the diagnostic speaks about
        documented: Procedure providing the documentation state, the
            interface procedure for <inheritdoc/> procedures
        range: Range the diagnostic is anchored to
    """
    procedure: Procedure
    documented: Procedure
    range: Range


@dataclass
class AnalysisContext:
    """State of a single documentation check."""
    document: TextDocument
    source_object: SourceObject
    uri: str
    text: str
    severity: Severity
    diagnostics: List[Diagnostic] = field(default_factory=list)


def is_missing_documentation(finding: Finding) -> bool:
    """Check whether a finding reports missing documentation."""
    return finding.code in MISSING_DOCUMENTATION_CODES


def collect_missing_findings(procedure: Procedure) -> List[Finding]:
    """
    Collect the missing documentation elements of a procedure.

    Parameters and return value are only inspected when the procedure has
    documentation of its own.
    """
    exists = procedure.xml_documentation.exists
    if exists == DocumentationExistType.NO:
        return [Finding(DiagnosticCode.SUMMARY_MISSING, 'summary')]
    if exists != DocumentationExistType.YES:
        return []

    findings = [
        Finding(DiagnosticCode.PARAMETER_MISSING, parameter.name)
        for parameter in procedure.parameters
        if parameter.xml_documentation.exists == DocumentationExistType.NO
    ]

    return_value = procedure.return_value
    if return_value is not None and return_value.xml_documentation.exists == DocumentationExistType.NO:
        findings.append(Finding(DiagnosticCode.RETURN_TYPE_MISSING, return_value.name))

    return findings


def _render_element(finding: Finding) -> str:
    if finding.code == DiagnosticCode.PARAMETER_MISSING:
        return f"parameter '{finding.element}'"
    if finding.code == DiagnosticCode.RETURN_TYPE_MISSING:
        return "return value" + (f" '{finding.element}'" if finding.element else "")
    return finding.element


def compose_missing_documentation_message(procedure_name: str, findings: List[Finding]) -> tuple:
    """
    Build the message and code of a missing documentation diagnostic.

    Args:
        procedure_name: Name of the procedure the diagnostic speaks about
        findings: Missing documentation findings, in declaration order

    Returns:
        Tuple of (message, code)
    """
    if findings[0].code == DiagnosticCode.XML_DOCUMENTATION_MISSING:
        return (
            f"The procedure {procedure_name} missing documentation.",
            DiagnosticCode.XML_DOCUMENTATION_MISSING.value
        )

    elements = ', '.join(_render_element(finding) for finding in findings)
    code = ', '.join(finding.code.value for finding in findings)
    return f"The procedure {procedure_name} is missing documentation for {elements}.", code


class DocumentationAnalyzer:
    """Checks procedure documentation of AL objects and publishes the diagnostics."""

    def __init__(self, configuration: DocumentationCheckConfiguration,
                 extractor: SourceExtractor,
                 publisher: Optional[DiagnosticPublisher] = None):
        """
        Initialize DocumentationAnalyzer.

        Args:
            configuration: Per-resource check settings
            extractor: Extractor whose cache resolves implemented interfaces
            publisher: Destination of the diagnostics. A new one is created if None.
        """
        self.configuration = configuration
        self.extractor = extractor
        self.publisher = publisher if publisher is not None else DiagnosticPublisher()

    def analyze_document(self, document: TextDocument) -> Optional[List[Diagnostic]]:
        """
        Check an open document.

        Returns:
            Published diagnostics, or None if the check is disabled
        """
        if not self.configuration.is_documentation_check_enabled(document.uri):
            return None

        source_object = self.extractor.extract_object(document)
        if source_object is None:
            self.publisher.publish(document.uri, [])
            return []

        return self.analyze(source_object, document, document.uri)

    def analyze_object(self, source_object: SourceObject) -> Optional[List[Diagnostic]]:
        """
        Check an extracted object against the file it was extracted from.

        Raises:
            FileNotFoundError: If the object has no readable backing file
        """
        document = FileDocument.for_object(source_object.path, source_object.file_name)
        if document is None:
            raise FileNotFoundError(f"No source file known for {source_object.type.value} {source_object.name}")

        return self.analyze(source_object, document, document.uri)

    def analyze(self, source_object: SourceObject, document: TextDocument,
                uri: Optional[str] = None) -> Optional[List[Diagnostic]]:
        """
        Check all procedures of an object and publish the diagnostics.

        Replaces the diagnostics previously published for the resource. When
        the check is disabled for the resource nothing is published and the
        previous diagnostics stay in place.

        Args:
            source_object: Object extracted from the document
            document: Document providing the source text
            uri: Resource the diagnostics belong to (defaults to the document URI)

        Returns:
            Published diagnostics, or None if the check is disabled
        """
        uri = uri or document.uri
        if not self.configuration.is_documentation_check_enabled(uri):
            return None

        context = AnalysisContext(
            document=document,
            source_object=source_object,
            uri=uri,
            text=document.get_text(),
            severity=self.configuration.severity_for(uri)
        )

        for procedure in source_object.procedures:
            self._analyze_procedure_documentation(context, procedure)

        self._analyze_unnecessary_documentation(context)

        self.publisher.publish(uri, context.diagnostics)
        return context.diagnostics

    def resolve_documentation_subject(self, source_object: SourceObject,
                                      procedure: Procedure) -> Optional[DocumentationSubject]:
        """
        Find the procedure whose documentation applies to a procedure.

        Procedures with their own documentation state describe themselves.
        <inheritdoc/> procedures resolve to the same-named procedure of the
        implemented interface, using that procedure's range.

        Returns:
            DocumentationSubject, or None if the interface or its procedure is unknown
        """
        owner = source_object
        documented = procedure
        visited = set()

        while documented.xml_documentation.exists == DocumentationExistType.INHERIT:
            if not owner.extension_object or owner.extension_object.lower() in visited:
                return None
            visited.add(owner.extension_object.lower())

            interface = self.extractor.extract_object_from_cache(ObjectType.INTERFACE, owner.extension_object)
            if interface is None:
                logger.debug(f"Interface {owner.extension_object} of {owner.name} not found for procedure {procedure.name}")
                return None

            inherited = interface.get_procedure(documented.name)
            if inherited is None:
                logger.debug(f"Procedure {procedure.name} not declared in interface {interface.name}")
                return None

            owner, documented = interface, inherited

        return DocumentationSubject(procedure=procedure, documented=documented, range=documented.range)

    def _analyze_procedure_documentation(self, context: AnalysisContext, procedure: Procedure):
        """Report missing documentation of a procedure as a single diagnostic."""
        subject = self.resolve_documentation_subject(context.source_object, procedure)
        if subject is None:
            return

        missing = [finding for finding in collect_missing_findings(subject.documented) if is_missing_documentation(finding)]
        if not missing:
            return

        message, code = compose_missing_documentation_message(subject.procedure.name, missing)
        context.diagnostics.append(Diagnostic(
            range=subject.range,
            message=message,
            severity=context.severity,
            source=DIAGNOSTIC_SOURCE,
            code=code
        ))

    def _analyze_unnecessary_documentation(self, context: AnalysisContext):
        """Report documented parameters missing from the procedure signature."""
        source_object = context.source_object
        try:
            code_lines = split_to_lines(context.text)
            xml_documentation = ''
            block_start = 0

            for i, line in enumerate(code_lines):
                if is_doc_comment_line(line):
                    if not xml_documentation:
                        block_start = i
                    xml_documentation += strip_doc_comment_marker(line)
                    continue

                if xml_documentation:
                    procedure = next((p for p in source_object.procedures if i <= p.line_no), None)
                    if procedure is None:
                        logger.debug(f"Could not find AL procedure for XML documentation found in {source_object.file_name} line {i}.")
                    else:
                        self._report_unnecessary_parameters(context, code_lines, block_start, i, xml_documentation, procedure)
                xml_documentation = ''
        except Exception as e:
            logger.warning(f"An error occurred in {source_object.file_name} during analyze unnecessary documentations: {e}")

    def _report_unnecessary_parameters(self, context: AnalysisContext, code_lines: List[str],
                                       block_start: int, block_end: int,
                                       xml_documentation: str, procedure: Procedure):
        doc_comment = parse_doc_comment(xml_documentation)
        if not doc_comment.params:
            return

        unnecessary = [param.name for param in doc_comment.params if procedure.get_parameter(param.name) is None]

        for name in unnecessary:
            param_range = procedure.range
            for i in range(block_end, block_start - 1, -1):
                if f'/// <param name="{name}">' in code_lines[i]:
                    param_range = line_range(code_lines[i], i)
                    break

            context.diagnostics.append(Diagnostic(
                range=param_range,
                message=(
                    f"The parameter {name} is described in XML documentation for procedure "
                    f"{procedure.name}, but do not exist in procedure signature."
                ),
                severity=context.severity,
                source=DIAGNOSTIC_SOURCE,
                code=DiagnosticCode.PARAMETER_UNNECESSARY.value
            ))
