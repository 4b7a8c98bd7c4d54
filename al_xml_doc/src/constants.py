"""
Shared constants for al-xml-doc.

Centralizes diagnostic codes and markers used across multiple modules.
"""

import re
from enum import Enum

# Source reported with every diagnostic
DIAGNOSTIC_SOURCE = 'AL XML Documentation'


class DiagnosticCode(Enum):
    """Diagnostic codes reported by the documentation check."""
    XML_DOCUMENTATION_MISSING = 'DOC0001'
    SUMMARY_MISSING = 'DOC0010'
    PARAMETER_MISSING = 'DOC0020'
    PARAMETER_UNNECESSARY = 'DOC0021'
    RETURN_TYPE_MISSING = 'DOC0030'


# Codes that are promoted to diagnostics by the missing documentation check
MISSING_DOCUMENTATION_CODES = frozenset({
    DiagnosticCode.XML_DOCUMENTATION_MISSING,
    DiagnosticCode.SUMMARY_MISSING,
    DiagnosticCode.PARAMETER_MISSING,
    DiagnosticCode.RETURN_TYPE_MISSING,
})

# Placeholder left in generated snippets until a tab stop index is assigned
PLACEHOLDER_MARKER = '__idx__'

# Files without any procedure declaration are skipped by the scanner
PROCEDURE_DECLARATION_PATTERN = re.compile(r'(procedure)\s+(.*?)\(', re.IGNORECASE | re.MULTILINE)

AL_FILE_PATTERN = '*.al'

# Number of files extracted together before waiting for the batch
DEFAULT_BATCH_SIZE = 500
