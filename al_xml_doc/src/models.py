"""
AL object model.

Signature-level representation of AL objects, procedures, parameters and
return values, plus the diagnostics reported against them. Object graphs
are built fresh for every analysis pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.text_utils import Range


class ObjectType(Enum):
    """Kinds of AL objects."""
    TABLE = "Table"
    TABLE_EXTENSION = "TableExtension"
    PAGE = "Page"
    PAGE_EXTENSION = "PageExtension"
    PAGE_CUSTOMIZATION = "PageCustomization"
    CODEUNIT = "Codeunit"
    REPORT = "Report"
    REPORT_EXTENSION = "ReportExtension"
    XML_PORT = "XmlPort"
    QUERY = "Query"
    ENUM = "Enum"
    ENUM_EXTENSION = "EnumExtension"
    INTERFACE = "Interface"
    CONTROL_ADD_IN = "ControlAddIn"
    PERMISSION_SET = "PermissionSet"
    PERMISSION_SET_EXTENSION = "PermissionSetExtension"
    PROFILE = "Profile"
    ENTITLEMENT = "Entitlement"

    @classmethod
    def from_keyword(cls, keyword: str) -> 'ObjectType':
        """
        Get the object type for an AL declaration keyword.

        Args:
            keyword: Keyword as written in source, e.g. 'codeunit'

        Raises:
            ValueError: If the keyword is not an AL object kind
        """
        for object_type in cls:
            if object_type.value.lower() == keyword.lower():
                return object_type
        raise ValueError(f"Unknown AL object type: {keyword}")


class ObjectExtensionType(Enum):
    """How an object relates to the object named in its declaration."""
    EXTEND = "Extend"
    IMPLEMENT = "Implement"


class DocumentationExistType(Enum):
    """Documentation state of a procedure, parameter or return value."""
    NO = "No"
    YES = "Yes"
    INHERIT = "Inherit"


class Severity(Enum):
    """Diagnostic severity levels."""
    ERROR = "Error"
    WARNING = "Warning"
    INFORMATION = "Information"
    HINT = "Hint"

    @classmethod
    def from_string(cls, value: str) -> 'Severity':
        for severity in cls:
            if severity.value.lower() == str(value).lower():
                return severity
        raise ValueError(f"Invalid severity: {value}. Use: {[s.value for s in cls]}")


@dataclass
class XmlDocumentation:
    """
    Documentation attached to a procedure, parameter or return value.

    documentation holds the text found in source; generated holds the last
    snippet produced for the entity.
    """
    exists: DocumentationExistType = DocumentationExistType.NO
    documentation: str = ""
    generated: str = ""


@dataclass
class Parameter:
    """Parameter of an AL procedure."""
    name: str
    type: str
    subtype: Optional[str] = None
    temporary: bool = False
    call_by_reference: bool = False
    xml_documentation: XmlDocumentation = field(default_factory=XmlDocumentation)


@dataclass
class ProcedureReturn:
    """Return value of an AL procedure. An empty name means unnamed."""
    type: str
    name: str = ""
    xml_documentation: XmlDocumentation = field(default_factory=XmlDocumentation)


@dataclass
class Procedure:
    """Procedure declared in an AL object."""
    name: str
    line_no: int
    range: Range
    parameters: List[Parameter] = field(default_factory=list)
    return_value: Optional[ProcedureReturn] = None
    access_modifier: Optional[str] = None
    xml_documentation: XmlDocumentation = field(default_factory=XmlDocumentation)

    def get_parameter(self, name: str) -> Optional[Parameter]:
        """Find a parameter by its exact name."""
        return next((parameter for parameter in self.parameters if parameter.name == name), None)


@dataclass
class SourceObject:
    """AL object declaration with its procedures."""
    type: ObjectType
    name: str
    id: Optional[int] = None
    extension_type: Optional[ObjectExtensionType] = None
    extension_object: Optional[str] = None
    path: str = ""
    file_name: str = ""
    procedures: List[Procedure] = field(default_factory=list)
    xml_documentation: str = ""

    @property
    def file_path(self) -> str:
        return str(Path(self.path) / self.file_name)

    @property
    def uri(self) -> str:
        if not self.file_name:
            return ""
        return Path(self.file_path).resolve().as_uri()

    def get_procedure(self, name: str) -> Optional[Procedure]:
        """Find the first procedure with the given name."""
        return next((procedure for procedure in self.procedures if procedure.name == name), None)


@dataclass
class Diagnostic:
    """A documentation finding presented to the user."""
    range: Range
    message: str
    severity: Severity
    source: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert Diagnostic to a JSON-serializable dictionary."""
        return {
            'range': {
                'start': {'line': self.range.start.line, 'character': self.range.start.character},
                'end': {'line': self.range.end.line, 'character': self.range.end.character},
            },
            'message': self.message,
            'severity': self.severity.value,
            'source': self.source,
            'code': self.code,
        }
