"""
Validation Framework Tests

Uses a small stand-in XSD so the tests do not depend on a populated Crossref
schema cache.

Run with: pytest tests/test_validation.py -v
"""

import shutil

import pytest
from lxml import etree

from deposit_core.validation import (
    SchemaCache,
    ValidationResult,
    XmllintValidator,
    XSDValidator,
)

XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           targetNamespace="urn:test" xmlns="urn:test"
           elementFormDefault="qualified">
  <xs:element name="doc">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="title" type="xs:string"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

VALID = '<doc xmlns="urn:test"><title>x</title></doc>'
INVALID = '<doc xmlns="urn:test"><other/></doc>'


@pytest.fixture
def xsd_path(tmp_path):
    path = tmp_path / "test.xsd"
    path.write_text(XSD, encoding="utf-8")
    return path


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_errors_and_warnings(self):
        """Only errors invalidate the result."""
        result = ValidationResult(schema_version="5.3.1")
        result.add_issue("a.xml", "just a note", severity="Warning")
        assert result.is_valid
        result.add_issue("a.xml", "bad", line=3)
        assert not result.is_valid
        assert (len(result.errors), len(result.warnings)) == (1, 1)
        assert result.count_by_kind() == {"Schema Error": 2}
        assert "a.xml:3: bad" in result.summary()

    def test_passed_summary(self):
        """A clean result says so."""
        assert ValidationResult().summary().startswith("Validation PASSED")


class TestSchemaCache:
    """Tests for SchemaCache."""

    def test_path_for_version(self, tmp_path):
        """XSD files are named after the schema version."""
        cache = SchemaCache(tmp_path)
        assert cache.path_for("5.3.1") == tmp_path / "crossref5.3.1.xsd"
        assert cache.path_for("4.4.2") == tmp_path / "crossref4.4.2.xsd"

    def test_missing_schema(self, tmp_path):
        """An unpopulated cache raises FileNotFoundError."""
        cache = SchemaCache(tmp_path)
        assert not cache.has("5.3.1")
        with pytest.raises(FileNotFoundError):
            cache.get("5.3.1")

    def test_cached_schema(self, tmp_path):
        """A cached file is found."""
        (tmp_path / "crossref4.4.2.xsd").write_text(XSD, encoding="utf-8")
        assert SchemaCache(tmp_path).get("4.4.2").name == "crossref4.4.2.xsd"


class TestXSDValidator:
    """Tests for in-process XSD validation."""

    def test_valid_string(self, xsd_path):
        """A conforming document passes."""
        assert XSDValidator(xsd_path).validate_string(VALID).is_valid

    def test_invalid_string(self, xsd_path):
        """Schema violations are reported with a line number."""
        result = XSDValidator(xsd_path, schema_version="test").validate_string(INVALID)
        assert not result.is_valid
        assert result.errors[0].kind == "Schema Error"
        assert result.errors[0].line == 1
        assert result.schema_version == "test"

    def test_syntax_error(self, xsd_path):
        """Malformed XML is reported, not raised."""
        result = XSDValidator(xsd_path).validate_string("<doc")
        assert result.count_by_kind() == {"XML Syntax Error": 1}

    def test_validate_file(self, xsd_path, tmp_path):
        """Files are validated by path."""
        path = tmp_path / "doc.xml"
        path.write_text(INVALID, encoding="utf-8")
        result = XSDValidator(xsd_path).validate_file(path)
        assert result.errors[0].source == "doc.xml"

    def test_validate_element(self, xsd_path):
        """Elements are validated without serializing."""
        assert XSDValidator(xsd_path).validate_element(etree.fromstring(VALID)).is_valid

    def test_missing_xsd(self, tmp_path):
        """A missing XSD raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            XSDValidator(tmp_path / "missing.xsd")


class TestXmllintValidator:
    """Tests for validation through xmllint."""

    def test_parse_failure_output(self, xsd_path):
        """Located errors are parsed and the summary line ignored."""
        output = (
            "deposit.xml:3: element other: Schemas validity error : "
            "Element '{urn:test}other': This element is not expected.\n"
            "deposit.xml fails to validate\n"
        )
        result = XmllintValidator(xsd_path)._parse_output(output, "deposit.xml", 3)
        assert len(result.errors) == 1
        assert result.errors[0].line == 3
        assert "not expected" in result.errors[0].message

    def test_parse_success_output(self, xsd_path):
        """Import notices and the validates line are not errors."""
        output = (
            "warning: Skipping import of schema located at 'x.xsd' for the namespace 'urn:x'\n"
            "deposit.xml validates\n"
        )
        assert XmllintValidator(xsd_path)._parse_output(output, "deposit.xml", 0).is_valid

    def test_nonzero_exit_without_message(self, xsd_path):
        """A failing exit status alone still invalidates the result."""
        result = XmllintValidator(xsd_path)._parse_output("", "deposit.xml", 4)
        assert result.count_by_kind() == {"Validator Error": 1}

    def test_missing_binary(self, xsd_path, tmp_path):
        """Validating without xmllint raises FileNotFoundError."""
        validator = XmllintValidator(xsd_path, xmllint_path="no-such-xmllint")
        assert not validator.is_available()
        with pytest.raises(FileNotFoundError):
            validator.validate_file(tmp_path / "doc.xml")

    @pytest.mark.skipif(shutil.which("xmllint") is None, reason="xmllint not installed")
    def test_xmllint_run(self, xsd_path):
        """Real xmllint runs agree with the in-process validator."""
        validator = XmllintValidator(xsd_path)
        assert validator.validate_string(VALID).is_valid
        result = validator.validate_string(INVALID, source="inline")
        assert not result.is_valid
        assert result.errors[0].source == "inline"
