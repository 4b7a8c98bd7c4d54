"""Core functionality modules."""

from .analyzer import DocumentationAnalyzer, DocumentationSubject, Finding
from .cli import cli, main
from .config import Config, ConfigManager, CheckConfig, ScanningConfig, DocumentationCheckConfiguration
from .documents import BufferDocument, FileDocument, TextDocument
from .extractor import ObjectCache, SourceExtractor
from .generator import (
    generate_full_procedure_doc,
    generate_object_doc,
    generate_parameter_doc,
    generate_procedure_doc,
    generate_procedure_summary_doc,
    generate_return_doc,
)
from .models import (
    Diagnostic,
    DocumentationExistType,
    ObjectExtensionType,
    ObjectType,
    Parameter,
    Procedure,
    ProcedureReturn,
    Severity,
    SourceObject,
    XmlDocumentation,
)
from .publisher import DiagnosticCollection, DiagnosticPublisher
from .scanner import Scanner, ScanResult

__all__ = [
    # Analyzer
    "DocumentationAnalyzer",
    "DocumentationSubject",
    "Finding",
    # CLI
    "cli",
    "main",
    # Config
    "Config",
    "ConfigManager",
    "CheckConfig",
    "ScanningConfig",
    "DocumentationCheckConfiguration",
    # Documents
    "BufferDocument",
    "FileDocument",
    "TextDocument",
    # Extractor
    "ObjectCache",
    "SourceExtractor",
    # Generator
    "generate_full_procedure_doc",
    "generate_object_doc",
    "generate_parameter_doc",
    "generate_procedure_doc",
    "generate_procedure_summary_doc",
    "generate_return_doc",
    # Models
    "Diagnostic",
    "DocumentationExistType",
    "ObjectExtensionType",
    "ObjectType",
    "Parameter",
    "Procedure",
    "ProcedureReturn",
    "Severity",
    "SourceObject",
    "XmlDocumentation",
    # Publisher
    "DiagnosticCollection",
    "DiagnosticPublisher",
    # Scanner
    "Scanner",
    "ScanResult",
]
