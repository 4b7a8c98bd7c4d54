"""Test the procedure documentation check."""

import pytest

from al_xml_doc.src.analyzer import (
    Finding,
    collect_missing_findings,
    compose_missing_documentation_message,
)
from al_xml_doc.src.config import CheckOverride
from al_xml_doc.src.constants import DIAGNOSTIC_SOURCE, DiagnosticCode
from al_xml_doc.src.documents import BufferDocument
from al_xml_doc.src.models import (
    DocumentationExistType,
    ObjectType,
    Procedure,
    Severity,
    SourceObject,
    XmlDocumentation,
)
from al_xml_doc.utils.text_utils import Range

DOCUMENTED_SUMMARY = '''codeunit 50100 Foo
{
    /// <summary>
    /// Does bar.
    /// </summary>
    procedure Bar(Qty: Integer)
    begin
    end;
}
'''

UNNECESSARY_PARAMETER = '''codeunit 50100 Foo
{
    /// <summary>
    /// Does bar.
    /// </summary>
    /// <param name="Qty">Quantity.</param>
    /// <param name="Unused">Not in the signature.</param>
    procedure Bar(Qty: Integer)
    begin
    end;
}
'''

SINGLE_UNNECESSARY_PARAMETER = '''codeunit 50100 Foo
{
    /// <summary>Does bar.</summary>
    /// <param name="Unused">Not in the signature.</param>
    procedure Bar(Qty: Integer)
    begin
    end;
}
'''

INTERFACE = '''interface IFoo
{
    procedure Bar(Qty: Integer): Boolean;
}
'''

INHERITING_CODEUNIT = '''codeunit 50101 "Foo Impl" implements IFoo
{
    /// <inheritdoc/>
    procedure Bar(Qty: Integer): Boolean
    begin
    end;
}
'''


def _check(analyzer, text, path='Foo.Codeunit.al'):
    document = BufferDocument(text, path)
    return analyzer.analyze_document(document), document.uri


def test_missing_parameter_documentation(analyzer):
    diagnostics, _ = _check(analyzer, DOCUMENTED_SUMMARY)

    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert diagnostic.message == "The procedure Bar is missing documentation for parameter 'Qty'."
    assert diagnostic.code == DiagnosticCode.PARAMETER_MISSING.value
    assert diagnostic.source == DIAGNOSTIC_SOURCE
    assert diagnostic.severity == Severity.WARNING
    assert diagnostic.range == Range.from_coordinates(5, 4, 5, len("    procedure Bar(Qty: Integer)"))


def test_missing_summary_only_reports_summary(analyzer):
    text = 'codeunit 50100 Foo\n{\n    procedure Bar(Qty: Integer): Decimal\n    begin\n    end;\n}\n'

    diagnostics, _ = _check(analyzer, text)

    assert len(diagnostics) == 1
    assert diagnostics[0].message == "The procedure Bar is missing documentation for summary."
    assert diagnostics[0].code == DiagnosticCode.SUMMARY_MISSING.value


def test_composed_message_lists_elements_in_declaration_order(analyzer):
    text = '''codeunit 50100 Foo
{
    /// <summary>Calculates.</summary>
    procedure Calc(Qty: Integer; Price: Decimal) Total: Decimal
    begin
    end;
}
'''
    diagnostics, _ = _check(analyzer, text)

    assert len(diagnostics) == 1
    assert diagnostics[0].message == (
        "The procedure Calc is missing documentation for "
        "parameter 'Qty', parameter 'Price', return value 'Total'."
    )
    assert diagnostics[0].code == "DOC0020, DOC0020, DOC0030"


def test_unnamed_return_value(analyzer):
    text = 'codeunit 50100 Foo\n{\n    /// <summary>Gets.</summary>\n    procedure Get(): Boolean\n    begin\n    end;\n}\n'

    diagnostics, _ = _check(analyzer, text)

    assert diagnostics[0].message == "The procedure Get is missing documentation for return value."
    assert diagnostics[0].code == DiagnosticCode.RETURN_TYPE_MISSING.value


def test_fully_documented_procedure_has_no_diagnostics(analyzer, collection):
    text = '''codeunit 50100 Foo
{
    /// <summary>Gets.</summary>
    /// <param name="Qty">Quantity.</param>
    /// <returns>True if found.</returns>
    procedure Get(Qty: Integer): Boolean
    begin
    end;
}
'''
    diagnostics, uri = _check(analyzer, text)

    assert diagnostics == []
    assert collection.get(uri) == []


def test_unnecessary_parameter_documentation(analyzer):
    diagnostics, _ = _check(analyzer, UNNECESSARY_PARAMETER)

    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert diagnostic.message == (
        "The parameter Unused is described in XML documentation for procedure Bar, "
        "but do not exist in procedure signature."
    )
    assert diagnostic.code == DiagnosticCode.PARAMETER_UNNECESSARY.value
    # Anchored at the <param> line of the unnecessary parameter
    assert diagnostic.range.start.line == 6
    assert diagnostic.range.start.character == 4


def test_single_unnecessary_parameter_alongside_missing_one(analyzer):
    diagnostics, _ = _check(analyzer, SINGLE_UNNECESSARY_PARAMETER)

    codes = [diagnostic.code for diagnostic in diagnostics]
    assert codes == [DiagnosticCode.PARAMETER_MISSING.value, DiagnosticCode.PARAMETER_UNNECESSARY.value]
    assert "Unused" in diagnostics[1].message


def test_unnecessary_parameter_falls_back_to_procedure_range(analyzer):
    text = '''codeunit 50100 Foo
{
    /// <summary>Does bar.</summary>
    ///<param name="Unused">Differently formatted.</param>
    procedure Bar()
    begin
    end;
}
'''
    diagnostics, _ = _check(analyzer, text)

    assert len(diagnostics) == 1
    assert diagnostics[0].range.start.line == 4


def test_malformed_documentation_keeps_missing_diagnostics(analyzer):
    text = '''codeunit 50100 Foo
{
    /// <summary>Does bar.
    /// <param name="Unused">Broken</param>
    procedure Bar(Qty: Integer)
    begin
    end;
}
'''
    diagnostics, _ = _check(analyzer, text)

    assert [diagnostic.code for diagnostic in diagnostics] == [DiagnosticCode.PARAMETER_MISSING.value]


def test_prose_ampersand_does_not_stop_unnecessary_check(analyzer):
    """Plain '&' and '<' in one block still let later blocks be checked."""
    text = '''codeunit 50100 Foo
{
    /// <summary>Checks A & B, true if Qty < 10.</summary>
    /// <param name="Qty">Quantity.</param>
    procedure First(Qty: Integer)
    begin
    end;

    /// <summary>Does second.</summary>
    /// <param name="Unused">Not in the signature.</param>
    procedure Second()
    begin
    end;
}
'''
    diagnostics, _ = _check(analyzer, text)

    assert len(diagnostics) == 1
    assert diagnostics[0].code == DiagnosticCode.PARAMETER_UNNECESSARY.value
    assert diagnostics[0].message == (
        "The parameter Unused is described in XML documentation for procedure Second, "
        "but do not exist in procedure signature."
    )
    assert diagnostics[0].range.start.line == 9


def test_param_without_name_is_not_reported(analyzer):
    text = '''codeunit 50100 Foo
{
    /// <summary>Does bar.</summary>
    /// <param>No name.</param>
    procedure Bar()
    begin
    end;
}
'''
    diagnostics, _ = _check(analyzer, text)

    assert diagnostics == []


def test_documentation_after_last_procedure_is_ignored(analyzer):
    text = DOCUMENTED_SUMMARY.replace('    end;\n}', '    end;\n\n    /// <param name="Orphan">x</param>\n}')

    diagnostics, _ = _check(analyzer, text)

    assert [diagnostic.code for diagnostic in diagnostics] == [DiagnosticCode.PARAMETER_MISSING.value]


def test_inherited_documentation_without_interface(analyzer):
    diagnostics, _ = _check(analyzer, INHERITING_CODEUNIT, 'FooImpl.Codeunit.al')

    assert diagnostics == []


def test_inherited_documentation_without_matching_procedure(analyzer):
    _check(analyzer, 'interface IFoo\n{\n    procedure Other();\n}\n', 'IFoo.Interface.al')

    diagnostics, _ = _check(analyzer, INHERITING_CODEUNIT, 'FooImpl.Codeunit.al')

    assert diagnostics == []


def test_inherited_documentation_reports_interface_procedure(analyzer, extractor):
    _check(analyzer, INTERFACE, 'IFoo.Interface.al')
    interface_procedure = extractor.extract_object_from_cache(ObjectType.INTERFACE, 'IFoo').procedures[0]

    diagnostics, _ = _check(analyzer, INHERITING_CODEUNIT, 'FooImpl.Codeunit.al')

    assert len(diagnostics) == 1
    assert diagnostics[0].message == "The procedure Bar is missing documentation for summary."
    # The interface procedure's range is kept
    assert diagnostics[0].range == interface_procedure.range


def test_inherited_documentation_satisfied_by_interface(analyzer):
    documented_interface = '''interface IFoo
{
    /// <summary>Does bar.</summary>
    /// <param name="Qty">Quantity.</param>
    /// <returns>Success.</returns>
    procedure Bar(Qty: Integer): Boolean;
}
'''
    _check(analyzer, documented_interface, 'IFoo.Interface.al')

    diagnostics, _ = _check(analyzer, INHERITING_CODEUNIT, 'FooImpl.Codeunit.al')

    assert diagnostics == []


def test_resolve_documentation_subject_keeps_identity_and_range(analyzer, extractor):
    _check(analyzer, INTERFACE, 'IFoo.Interface.al')
    _check(analyzer, INHERITING_CODEUNIT, 'FooImpl.Codeunit.al')
    implementation = extractor.extract_object_from_cache(ObjectType.CODEUNIT, 'Foo Impl')
    procedure = implementation.procedures[0]

    subject = analyzer.resolve_documentation_subject(implementation, procedure)

    assert subject.procedure is procedure
    assert subject.documented is not procedure
    assert subject.range == subject.documented.range


def test_disabled_check_keeps_previous_diagnostics(analyzer, config, collection):
    _, uri = _check(analyzer, DOCUMENTED_SUMMARY)
    config.check.overrides = [CheckOverride(pattern='*Foo.Codeunit.al', enabled=False)]

    result, _ = _check(analyzer, UNNECESSARY_PARAMETER)

    assert result is None
    assert [diagnostic.code for diagnostic in collection.get(uri)] == [DiagnosticCode.PARAMETER_MISSING.value]


def test_new_pass_replaces_previous_diagnostics(analyzer, collection):
    _, uri = _check(analyzer, DOCUMENTED_SUMMARY)
    fixed = DOCUMENTED_SUMMARY.replace('/// </summary>', '/// </summary>\n    /// <param name="Qty">Quantity.</param>')

    _check(analyzer, fixed)

    assert collection.get(uri) == []


def test_text_without_object_clears_diagnostics(analyzer, collection):
    _, uri = _check(analyzer, DOCUMENTED_SUMMARY)

    diagnostics, _ = _check(analyzer, '// emptied\n')

    assert diagnostics == []
    assert collection.get(uri) == []


def test_analyze_object_reads_backing_file(analyzer, tmp_path):
    source_file = tmp_path / 'Foo.Codeunit.al'
    source_file.write_text(DOCUMENTED_SUMMARY, encoding='utf-8')
    source_object = analyzer.extractor.extract_object(BufferDocument(DOCUMENTED_SUMMARY, source_file))

    diagnostics = analyzer.analyze_object(source_object)

    assert [diagnostic.code for diagnostic in diagnostics] == [DiagnosticCode.PARAMETER_MISSING.value]


def test_analyze_object_without_file_fails(analyzer, tmp_path):
    source_object = analyzer.extractor.extract_object(BufferDocument(DOCUMENTED_SUMMARY, tmp_path / 'Missing.al'))

    with pytest.raises(FileNotFoundError):
        analyzer.analyze_object(source_object)


def test_blanket_missing_documentation_message():
    message, code = compose_missing_documentation_message(
        "Bar", [Finding(DiagnosticCode.XML_DOCUMENTATION_MISSING)]
    )

    assert message == "The procedure Bar missing documentation."
    assert code == DiagnosticCode.XML_DOCUMENTATION_MISSING.value


def test_parameters_not_checked_without_own_documentation():
    procedure = Procedure(
        name="Bar", line_no=0, range=Range.from_coordinates(0, 0, 0, 10),
        xml_documentation=XmlDocumentation(DocumentationExistType.INHERIT)
    )

    assert collect_missing_findings(procedure) == []


def test_severity_from_override(analyzer, config):
    config.check.overrides = [CheckOverride(pattern='*.Codeunit.al', severity='Error')]

    diagnostics, _ = _check(analyzer, DOCUMENTED_SUMMARY)

    assert diagnostics[0].severity == Severity.ERROR


def test_source_object_model_directly(analyzer, collection):
    """Analyzer works on any object model, not only extracted ones."""
    source_object = SourceObject(
        type=ObjectType.CODEUNIT, name="Foo", id=50100,
        procedures=[Procedure(name="Bar", line_no=0, range=Range.from_coordinates(0, 0, 0, 3))]
    )
    document = BufferDocument("Bar\n", "Manual.al")

    diagnostics = analyzer.analyze(source_object, document, "memory://Manual.al")

    assert len(diagnostics) == 1
    assert collection.get("memory://Manual.al") == diagnostics
