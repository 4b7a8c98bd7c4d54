"""
XML documentation templates.

Builds '///' documentation comments for AL objects, procedures, parameters
and return values. The text contains snippet tab stops (${N:default}); when
no index is given the tab stop holds the __idx__ marker, which
generate_procedure_doc() later replaces by sequential indices.

Every function stores its result on the entity it documents.
"""

from .constants import PLACEHOLDER_MARKER
from .models import ObjectExtensionType, Parameter, Procedure, ProcedureReturn, SourceObject


def _placeholder(snippet_index: int) -> str:
    return PLACEHOLDER_MARKER if snippet_index < 0 else str(snippet_index)


def generate_object_doc(source_object: SourceObject, snippet_index: int = -1) -> str:
    """
    Generate the summary documentation of an AL object.

    Args:
        source_object: Object to document
        snippet_index: Snippet tab stop index, or -1 to leave the __idx__ marker

    Returns:
        str: Documentation comment, e.g. '/// ${1:Codeunit Foo (ID 50100).}' inside <summary>
    """
    description = f"{source_object.type.value} {source_object.name}"
    if source_object.id is not None:
        description += f" (ID {source_object.id})"
    if source_object.extension_type == ObjectExtensionType.EXTEND:
        description += f" extends Record {source_object.extension_object}"
    elif source_object.extension_type == ObjectExtensionType.IMPLEMENT:
        description += f" implements Interface {source_object.extension_object}"

    doc_string = "/// <summary> \n"
    doc_string += "/// ${" + _placeholder(snippet_index) + ":" + description + ".}\n"
    doc_string += "/// </summary>"

    source_object.xml_documentation = doc_string
    return doc_string


def generate_procedure_doc(procedure: Procedure) -> str:
    """
    Assemble the complete documentation of a procedure.

    Joins the summary, parameter and return documentation previously
    generated for the procedure and numbers their tab stops from 1.

    Args:
        procedure: Procedure whose parts were generated before

    Returns:
        str: Documentation comment, empty if the procedure has no name
    """
    if not procedure.name:
        return ""

    placeholder_idx = 1
    doc_string = procedure.xml_documentation.generated.replace(PLACEHOLDER_MARKER, str(placeholder_idx))

    for parameter in procedure.parameters:
        placeholder_idx += 1
        doc_string += "\n"
        doc_string += parameter.xml_documentation.generated.replace(PLACEHOLDER_MARKER, str(placeholder_idx))

    if procedure.return_value is not None:
        placeholder_idx += 1
        doc_string += "\n"
        doc_string += procedure.return_value.xml_documentation.generated.replace(
            PLACEHOLDER_MARKER, str(placeholder_idx)
        )

    return doc_string


def generate_procedure_summary_doc(procedure: Procedure, snippet_index: int = -1) -> str:
    """Generate the <summary> documentation naming a procedure."""
    doc_string = "/// <summary> \n"
    doc_string += "/// ${" + _placeholder(snippet_index) + ":" + procedure.name + ".}\n"
    doc_string += "/// </summary>"

    procedure.xml_documentation.generated = doc_string
    return doc_string


def generate_parameter_doc(parameter: Parameter, snippet_index: int = -1) -> str:
    """
    Generate the <param> documentation of a procedure parameter.

    The default text describes the parameter type, e.g.
    'Temporary VAR Record Customer.' for a temporary record passed by reference.
    """
    description = ""
    if parameter.temporary:
        description += "Temporary "
    if parameter.call_by_reference:
        description += "VAR "
    description += parameter.type
    if parameter.subtype:
        description += " " + parameter.subtype

    doc_string = f'/// <param name="{parameter.name}">'
    doc_string += "${" + _placeholder(snippet_index) + ":" + description + ".}"
    doc_string += "</param>"

    parameter.xml_documentation.generated = doc_string
    return doc_string


def generate_return_doc(return_value: ProcedureReturn, snippet_index: int = -1) -> str:
    """Generate the <returns> documentation of a procedure return value."""
    if return_value.name:
        description = f"Return variable {return_value.name}"
    else:
        description = "Return value"
    description += f" of type {return_value.type}"

    doc_string = "/// <returns>"
    doc_string += "${" + _placeholder(snippet_index) + ":" + description + ".}"
    doc_string += "</returns>"

    return_value.xml_documentation.generated = doc_string
    return doc_string


def generate_full_procedure_doc(procedure: Procedure) -> str:
    """
    Generate every documentation part of a procedure and assemble them.

    Convenience for callers documenting a procedure in one step.
    """
    generate_procedure_summary_doc(procedure)
    for parameter in procedure.parameters:
        generate_parameter_doc(parameter)
    if procedure.return_value is not None:
        generate_return_doc(procedure.return_value)

    return generate_procedure_doc(procedure)
