"""Test XML documentation parsing and text utilities."""

import pytest

from al_xml_doc.utils.text_utils import Range, line_range, range_of, resolve_placeholders, split_to_lines
from al_xml_doc.utils.xml_doc_parser import (
    XmlDocumentationError,
    documented_parameter_names,
    parse_doc_comment,
    strip_doc_comment_marker,
)


def test_single_param_is_a_list():
    doc = parse_doc_comment(' <summary>Does bar.</summary> <param name="Qty">Quantity.</param>')

    assert doc.summary == "Does bar."
    assert [(param.name, param.description) for param in doc.params] == [("Qty", "Quantity.")]


def test_multiple_params_and_returns():
    doc = parse_doc_comment(
        '<summary>x</summary><param name="A">a</param><param name="B">b</param><returns>r</returns>'
    )

    assert [param.name for param in doc.params] == ["A", "B"]
    assert doc.returns == "r"
    assert doc.inheritdoc is False


def test_no_params():
    doc = parse_doc_comment('<inheritdoc/>')

    assert doc.params == []
    assert doc.inheritdoc is True


def test_malformed_xml_raises():
    with pytest.raises(XmlDocumentationError):
        parse_doc_comment('<summary>never closed')


def test_prose_ampersand_and_less_than_are_escaped():
    doc = parse_doc_comment('<summary>Checks A & B, true if Qty < 10 &amp; more.</summary><param name="Qty">x</param>')

    assert doc.summary == "Checks A & B, true if Qty < 10 & more."
    assert [param.name for param in doc.params] == ["Qty"]


def test_params_without_name_are_skipped():
    doc = parse_doc_comment('<param>anonymous</param><param name="">empty</param><param name="Qty">x</param>')

    assert [param.name for param in doc.params] == ["Qty"]


def test_documented_parameter_names_tolerates_broken_xml():
    assert documented_parameter_names('<summary>open <param name="Qty">x') == ["Qty"]


def test_strip_marker_only_once():
    assert strip_doc_comment_marker('    /// see /// here') == ' see /// here'


def test_split_to_lines_handles_line_endings():
    assert split_to_lines("a\r\nb\nc\rd") == ["a", "b", "c", "d"]


def test_range_of_line_content():
    assert range_of("first\n    procedure Bar();\n", 1) == Range.from_coordinates(1, 4, 1, 20)

    with pytest.raises(IndexError):
        range_of("only line", 3)


def test_resolve_placeholders():
    assert resolve_placeholders('/// <param name="X">${__idx__:Integer.}</param>') == '/// <param name="X">Integer.</param>'


def test_line_range_matches_range_of():
    text = "first\n\t  procedure Bar();\n"

    assert line_range(split_to_lines(text)[1], 1) == range_of(text, 1) == Range.from_coordinates(1, 3, 1, 19)
